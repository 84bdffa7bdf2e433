"""Path management utilities for deployment-registry library."""

from pathlib import Path
from typing import Optional, Union


def get_default_root() -> Path:
    """
    Get default repository root.

    Returns:
        Current working directory
    """
    return Path.cwd()


def _resolve_root(root: Optional[Union[Path, str]]) -> Path:
    if root is None:
        return get_default_root()
    return Path(root).absolute()


def get_registry_path(chain_id: int, root: Optional[Union[Path, str]] = None) -> Path:
    """
    Get the registry file path for a chain.

    Args:
        chain_id: Numeric chain id
        root: Repository root (defaults to the current directory)

    Returns:
        Path to evm/deployments/{chain_id}.json
    """
    return _resolve_root(root) / "evm" / "deployments" / f"{chain_id}.json"


def get_authority_config_path(root: Optional[Union[Path, str]] = None) -> Path:
    """
    Get the bridge authority config path.

    Args:
        root: Repository root (defaults to the current directory)

    Returns:
        Path to ntt/mainnet_deployment.json
    """
    return _resolve_root(root) / "ntt" / "mainnet_deployment.json"
