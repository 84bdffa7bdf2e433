"""Shared pytest fixtures for deployment-registry tests."""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Set, Tuple

import pytest

from deployment_registry.constants import ADMIN_SLOT, IMPLEMENTATION_SLOT, ZERO_WORD
from deployment_registry.exceptions import ContractCallError, RPCError

# Digit-only addresses are their own EIP-55 checksum form
PROXY = "0x1111111111111111111111111111111111111111"
IMPL = "0x2222222222222222222222222222222222222222"
ADMIN = "0x3333333333333333333333333333333333333333"
OWNER = "0x4444444444444444444444444444444444444444"
PLAIN = "0x5555555555555555555555555555555555555555"
MANAGER = "0x6666666666666666666666666666666666666666"
TRANSCEIVER = "0x7777777777777777777777777777777777777777"
OTHER = "0x8888888888888888888888888888888888888888"
NEW_IMPL = "0x9999999999999999999999999999999999999999"


def address_word(address: str) -> bytes:
    """Encode an address as a left-padded 32-byte storage word."""
    return b"\x00" * 12 + bytes.fromhex(address[2:])


class FakeChainReader:
    """In-memory ChainReader with programmable storage, code and owner()."""

    def __init__(self) -> None:
        self.storage: Dict[Tuple[str, str], bytes] = {}
        self.code: Dict[str, bytes] = {}
        self.owners: Dict[str, str] = {}
        self.failing_slots: Set[Tuple[str, str]] = set()
        self.failing_code: Set[str] = set()
        self.failing_owner: Set[str] = set()
        self.storage_reads = 0
        self.owner_calls = 0

    def deploy(self, address: str, code: bytes = b"\x60\x80") -> "FakeChainReader":
        self.code[address.lower()] = code
        return self

    def set_slot(self, address: str, slot: str, value: Optional[str]) -> "FakeChainReader":
        key = (address.lower(), slot)
        if value is None:
            self.storage.pop(key, None)
        else:
            self.storage[key] = address_word(value)
        return self

    def make_transparent(self, address: str, implementation: str, admin: str) -> "FakeChainReader":
        self.deploy(address)
        self.set_slot(address, IMPLEMENTATION_SLOT, implementation)
        return self.set_slot(address, ADMIN_SLOT, admin)

    def make_uups(self, address: str, implementation: str, owner: str) -> "FakeChainReader":
        self.deploy(address)
        self.set_slot(address, IMPLEMENTATION_SLOT, implementation)
        self.owners[address.lower()] = owner
        return self

    def get_storage_at(self, address: str, slot: str) -> bytes:
        self.storage_reads += 1
        key = (address.lower(), slot)
        if key in self.failing_slots:
            raise RPCError(f"eth_getStorageAt failed for {address}")
        return self.storage.get(key, ZERO_WORD)

    def get_code(self, address: str) -> bytes:
        if address.lower() in self.failing_code:
            raise RPCError(f"eth_getCode failed for {address}")
        return self.code.get(address.lower(), b"")

    def call_address_getter(self, address: str, function_name: str) -> str:
        assert function_name == "owner"
        self.owner_calls += 1
        if address.lower() in self.failing_owner:
            raise RPCError(f"eth_call failed for {address}")
        if address.lower() not in self.owners:
            raise ContractCallError("execution reverted")
        return self.owners[address.lower()]


def write_json(path: Path, data: Any) -> Path:
    """Write JSON the way registry files are written (2-space indent, newline)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def reader() -> FakeChainReader:
    """Return an empty fake chain."""
    return FakeChainReader()


@pytest.fixture
def sample_registry_json() -> Dict[str, Any]:
    """Return a registry document with one proxy and one plain contract."""
    return {
        "chainId": 10,
        "L2WCT": {
            "name": "L2WCT Token",
            "address": PROXY,
            "args": ["0x0000000000000000000000000000000000000000", 18],
            "proxy": {
                "implementation": IMPL,
                "admin": ADMIN,
                "type": "transparent",
            },
        },
        "Pauser": {
            "name": "Pauser",
            "address": PLAIN,
        },
    }


@pytest.fixture
def sample_authority_json() -> Dict[str, Any]:
    """Return a bridge authority config with Ethereum and Optimism entries."""
    return {
        "network": "Mainnet",
        "chains": {
            "Ethereum": {
                "version": "1.1.0",
                "mode": "locking",
                "paused": False,
                "owner": OWNER,
                "manager": OTHER,
                "token": PLAIN,
                "transceivers": {"threshold": 1, "wormhole": {"address": NEW_IMPL}},
                "limits": {"outbound": "1000.000000000000000000", "inbound": {}},
            },
            "Optimism": {
                "version": "1.1.0",
                "mode": "burning",
                "paused": False,
                "owner": OWNER,
                "manager": MANAGER,
                "token": PROXY,
                "transceivers": {"threshold": 1, "wormhole": {"address": TRANSCEIVER}},
                "limits": {"outbound": "1000.000000000000000000", "inbound": {}},
            },
        },
    }


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Create an empty repository root with evm/deployments and ntt/."""
    (tmp_path / "evm" / "deployments").mkdir(parents=True)
    (tmp_path / "ntt").mkdir()
    return tmp_path


@pytest.fixture
def registry_file(repo_root: Path, sample_registry_json: Dict[str, Any]) -> Path:
    """Write the sample registry as chain 10's registry file."""
    return write_json(repo_root / "evm" / "deployments" / "10.json", sample_registry_json)


@pytest.fixture
def authority_file(repo_root: Path, sample_authority_json: Dict[str, Any]) -> Path:
    """Write the sample bridge authority config."""
    return write_json(repo_root / "ntt" / "mainnet_deployment.json", sample_authority_json)
