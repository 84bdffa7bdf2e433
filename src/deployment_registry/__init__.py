"""
deployment-registry: keep per-chain contract deployment registries in sync
with on-chain proxy state
"""

from importlib.metadata import PackageNotFoundError, version

from .classifier import classify_proxy
from .engine import DeploymentRegistryEngine, sync_deployments, verify_deployments
from .exceptions import (
    ChainNotConfiguredError,
    ContractCallError,
    RegistryError,
    RegistryNotFoundError,
    RegistryParseError,
    RPCError,
    RPCResponseError,
)
from .reconciler import reconcile_registry
from .registry import ChainRegistry, load_registry, save_registry, serialize_registry
from .rpc import ChainReader, JSONRPCClient
from .types import (
    BridgeAuthority,
    ChainConfig,
    ChainVerification,
    Classification,
    DeploymentRecord,
    ProxyKind,
    ProxyMetadata,
    ReconcileResult,
    RecordVerification,
    VerificationReport,
)
from .verifier import verify_registry

try:
    __version__ = version("deployment-registry")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "DeploymentRegistryEngine",
    "sync_deployments",
    "verify_deployments",
    "classify_proxy",
    "reconcile_registry",
    "verify_registry",
    "ChainRegistry",
    "load_registry",
    "save_registry",
    "serialize_registry",
    "ChainReader",
    "JSONRPCClient",
    "BridgeAuthority",
    "ChainConfig",
    "ChainVerification",
    "Classification",
    "DeploymentRecord",
    "ProxyKind",
    "ProxyMetadata",
    "ReconcileResult",
    "RecordVerification",
    "VerificationReport",
    "RegistryError",
    "RegistryNotFoundError",
    "RegistryParseError",
    "ChainNotConfiguredError",
    "RPCError",
    "RPCResponseError",
    "ContractCallError",
]
