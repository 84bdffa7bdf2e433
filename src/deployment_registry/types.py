"""Data types and dataclasses for deployment-registry library."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ProxyKind(Enum):
    """
    Proxy pattern of a deployed contract.

    Value strings define de/serialization law: they are the `type` tag
    persisted in registry files.
    """

    TRANSPARENT = "transparent"
    UUPS = "uups"
    CUSTOM = "custom"


class Classification(Enum):
    """
    In-memory classification state of a deployment record.

    Only PROXY survives persistence (as a `proxy` object). UNCLASSIFIED and
    NON_PROXY share the same on-disk form, so records loaded from disk
    without proxy data always start as UNCLASSIFIED. NON_PROXY reports the
    last classifier verdict only; it does not stop later re-classification,
    since a failed chain read is indistinguishable from an empty slot.
    """

    UNCLASSIFIED = "unclassified"
    NON_PROXY = "non-proxy"
    PROXY = "proxy"


@dataclass(frozen=True)
class ProxyMetadata:
    """Proxy configuration of a contract (transparent, UUPS or custom)."""

    kind: ProxyKind
    implementation: str
    admin: Optional[str] = None
    owner: Optional[str] = None
    # Object as read from disk; re-emitted verbatim to keep files stable
    source: Optional[Dict[str, Any]] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.implementation:
            raise ValueError("Proxy metadata requires an implementation address")
        if self.admin and self.owner:
            raise ValueError("Proxy metadata cannot carry both an admin and an owner")

    @classmethod
    def transparent(cls, implementation: str, admin: str) -> "ProxyMetadata":
        return cls(ProxyKind.TRANSPARENT, implementation, admin=admin)

    @classmethod
    def uups(cls, implementation: str, owner: str) -> "ProxyMetadata":
        return cls(ProxyKind.UUPS, implementation, owner=owner)

    @classmethod
    def custom(cls, implementation: str) -> "ProxyMetadata":
        return cls(ProxyKind.CUSTOM, implementation)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProxyMetadata":
        """
        Build proxy metadata from its persisted form.

        Objects without a `type` tag are interpreted by field: admin means
        transparent, owner means UUPS, anything else is custom.

        Raises:
            ValueError: If the object is malformed or has an unknown type tag
        """
        if not isinstance(data, dict):
            raise ValueError(f"Proxy metadata must be an object, got {type(data).__name__}")

        admin = data.get("admin")
        owner = data.get("owner")

        if "type" in data:
            kind = ProxyKind(data["type"])
        elif admin:
            kind = ProxyKind.TRANSPARENT
        elif owner:
            kind = ProxyKind.UUPS
        else:
            kind = ProxyKind.CUSTOM

        return cls(
            kind=kind,
            implementation=data.get("implementation", ""),
            admin=admin,
            owner=owner,
            source=dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.source is not None:
            return dict(self.source)

        data: Dict[str, Any] = {"implementation": self.implementation}
        if self.admin is not None:
            data["admin"] = self.admin
        if self.owner is not None:
            data["owner"] = self.owner
        data["type"] = self.kind.value
        return data


@dataclass
class DeploymentRecord:
    """A deployed contract as recorded in a chain registry."""

    # Required fields
    name: Optional[str]  # Human label, e.g. "NTT Manager"
    address: str  # Checksummed address

    # Proxy state
    proxy: Optional[ProxyMetadata] = None
    classification: Classification = Classification.UNCLASSIFIED

    # Unknown keys (e.g. constructor "args") and original key order
    extra: Dict[str, Any] = field(default_factory=dict)
    key_order: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.proxy is not None:
            self.classification = Classification.PROXY

    @property
    def is_classified(self) -> bool:
        return self.classification is not Classification.UNCLASSIFIED

    def attach_proxy(self, proxy: ProxyMetadata) -> None:
        self.proxy = proxy
        self.classification = Classification.PROXY

    def mark_non_proxy(self) -> None:
        if self.proxy is None:
            self.classification = Classification.NON_PROXY

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeploymentRecord":
        """
        Build a record from its persisted form.

        Raises:
            KeyError: If the address field is missing
            ValueError: If the proxy object is malformed
        """
        raw_proxy = data.get("proxy")
        proxy = ProxyMetadata.from_dict(raw_proxy) if raw_proxy is not None else None

        managed = {"name", "address"} | ({"proxy"} if proxy is not None else set())
        extra = {key: value for key, value in data.items() if key not in managed}

        return cls(
            name=data.get("name"),
            address=data["address"],
            proxy=proxy,
            extra=extra,
            key_order=list(data.keys()),
        )

    def to_dict(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        if self.name is not None:
            values["name"] = self.name
        values["address"] = self.address
        if self.proxy is not None:
            values["proxy"] = self.proxy.to_dict()

        result: Dict[str, Any] = {}

        # Existing keys keep their position
        for key in self.key_order:
            if key in values:
                result[key] = values.pop(key)
            elif key in self.extra:
                result[key] = self.extra[key]

        # New keys are appended
        result.update(values)
        for key, value in self.extra.items():
            if key not in result:
                result[key] = value

        return result


@dataclass(frozen=True)
class ChainConfig:
    """Static configuration of one chain in the chain table."""

    chain_id: int
    name: str
    rpc_env: str  # Environment variable holding the RPC URL
    default_rpc_url: str
    authority_chain_name: Optional[str] = None  # Key in the bridge authority config


@dataclass(frozen=True)
class BridgeAuthority:
    """Canonical bridge contract addresses for one chain."""

    manager: str
    transceiver: str


@dataclass
class ReconcileResult:
    """Outcome of reconciling one chain registry."""

    changed: bool = False
    updated: List[str] = field(default_factory=list)
    error: Optional[str] = None  # Set when the registry could not be loaded


@dataclass
class RecordVerification:
    """Outcome of verifying one deployment record against the chain."""

    name: str
    address: str
    failures: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures


@dataclass
class ChainVerification:
    """Outcome of verifying every record of one chain."""

    chain_id: int
    chain_name: str
    records: List[RecordVerification] = field(default_factory=list)
    error: Optional[str] = None  # Set when the registry could not be loaded

    @property
    def passed(self) -> bool:
        return self.error is None and all(r.passed for r in self.records)

    @property
    def failed_records(self) -> List[RecordVerification]:
        return [r for r in self.records if not r.passed]


@dataclass
class VerificationReport:
    """Outcome of verifying all configured chains."""

    chains: List[ChainVerification] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.chains)
