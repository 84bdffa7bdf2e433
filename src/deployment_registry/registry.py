"""Per-chain deployment registry files for deployment-registry library."""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .constants import CHAIN_ID_KEY
from .exceptions import RegistryNotFoundError, RegistryParseError
from .types import DeploymentRecord


class ChainRegistry:
    """
    Ordered set of deployment records for one chain.

    Record names are unique within a chain. The reserved `chainId` key is
    kept as a scalar and is never treated as a record.
    """

    def __init__(
        self,
        chain_id: Optional[int] = None,
        records: Optional[Dict[str, DeploymentRecord]] = None,
        chain_id_position: int = 0,
    ):
        """
        Initialize a registry.

        Args:
            chain_id: Numeric chain id (None if the file carries none)
            records: Records keyed by contract name, in file order
            chain_id_position: Position of the chainId key among all keys
        """
        self.chain_id = chain_id
        self._records: Dict[str, DeploymentRecord] = dict(records or {})
        self._chain_id_position = chain_id_position

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __getitem__(self, name: str) -> DeploymentRecord:
        return self._records[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, name: str) -> Optional[DeploymentRecord]:
        return self._records.get(name)

    def items(self) -> List[Tuple[str, DeploymentRecord]]:
        return list(self._records.items())

    def set(self, name: str, record: DeploymentRecord) -> None:
        """Replace a record in place, or append it if the name is new."""
        self._records[name] = record

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChainRegistry":
        """
        Build a registry from a parsed registry file.

        Raises:
            RegistryParseError: If an entry is not a valid deployment record
        """
        if not isinstance(data, dict):
            raise RegistryParseError(
                f"Registry must be a JSON object, got {type(data).__name__}"
            )

        chain_id = None
        chain_id_position = 0
        records: Dict[str, DeploymentRecord] = {}

        for position, (key, value) in enumerate(data.items()):
            if key == CHAIN_ID_KEY:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise RegistryParseError(f"'{CHAIN_ID_KEY}' must be an integer, got {value!r}")
                chain_id = value
                chain_id_position = position
                continue

            if not isinstance(value, dict):
                raise RegistryParseError(f"Entry '{key}' is not a deployment record")

            try:
                records[key] = DeploymentRecord.from_dict(value)
            except KeyError as e:
                raise RegistryParseError(f"Entry '{key}' is missing field {e}") from e
            except ValueError as e:
                raise RegistryParseError(f"Entry '{key}' has invalid proxy data: {e}") from e

        return cls(chain_id, records, chain_id_position)

    def to_dict(self) -> Dict[str, Any]:
        entries = [(name, record.to_dict()) for name, record in self._records.items()]

        if self.chain_id is not None:
            position = min(self._chain_id_position, len(entries))
            entries.insert(position, (CHAIN_ID_KEY, self.chain_id))

        return dict(entries)


def load_registry(path: Union[Path, str]) -> ChainRegistry:
    """
    Load a chain registry from disk.

    Args:
        path: Path to the registry JSON file

    Returns:
        Parsed ChainRegistry

    Raises:
        RegistryNotFoundError: If the file doesn't exist
        RegistryParseError: If the file is not valid JSON or not a registry
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise RegistryNotFoundError(f"Registry file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise RegistryParseError(f"Invalid JSON in {path}: {e}") from e

    return ChainRegistry.from_dict(data)


def serialize_registry(registry: ChainRegistry) -> str:
    """
    Render a registry as file content.

    Two-space indentation, non-ASCII kept as is, one trailing newline.
    """
    return json.dumps(registry.to_dict(), indent=2, ensure_ascii=False) + "\n"


def save_registry(registry: ChainRegistry, path: Union[Path, str]) -> None:
    """
    Write a registry to disk, replacing the whole file.

    Creates parent directories if they don't exist.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(serialize_registry(registry))
