"""Main API for deployment-registry library."""

import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from .authority import authority_for_chain, load_authority_config
from .constants import CHAIN_CONFIG
from .exceptions import ChainNotConfiguredError
from .paths import get_authority_config_path, get_default_root, get_registry_path
from .reconciler import reconcile_file
from .rpc import ChainReader, JSONRPCClient
from .types import ChainConfig, ChainVerification, ReconcileResult, VerificationReport
from .verifier import verify_file

logger = logging.getLogger(__name__)

ReaderFactory = Callable[[ChainConfig], ChainReader]


def load_chain_configs(
    chain_config: Mapping[int, Mapping[str, Any]] = CHAIN_CONFIG,
) -> Tuple[ChainConfig, ...]:
    """
    Build the immutable chain table.

    Args:
        chain_config: Mapping of chain id -> chain settings

    Returns:
        Tuple of ChainConfig, in mapping order
    """
    return tuple(
        ChainConfig(
            chain_id=chain_id,
            name=settings["name"],
            rpc_env=settings["rpc_env"],
            default_rpc_url=settings["default_rpc_url"],
            authority_chain_name=settings.get("authority_chain_name"),
        )
        for chain_id, settings in chain_config.items()
    )


def resolve_rpc_url(chain: ChainConfig, rpc_urls: Optional[Mapping[int, str]] = None) -> str:
    """
    Pick the RPC URL for a chain.

    Order: explicit override, then the chain's environment variable, then
    the public default.
    """
    if rpc_urls and chain.chain_id in rpc_urls:
        return rpc_urls[chain.chain_id]
    return os.environ.get(chain.rpc_env) or chain.default_rpc_url


class DeploymentRegistryEngine:
    """Reconciles and verifies deployment registries across a chain table."""

    def __init__(
        self,
        chains: Optional[Sequence[ChainConfig]] = None,
        root: Optional[Union[Path, str]] = None,
        reader_factory: Optional[ReaderFactory] = None,
        authority_config_path: Optional[Union[Path, str]] = None,
    ):
        """
        Initialize the engine.

        Args:
            chains: Chain table (defaults to CHAIN_CONFIG)
            root: Repository root holding evm/deployments and ntt/
                  (defaults to the current directory)
            reader_factory: Builds chain access for a chain
                            (defaults to a JSONRPCClient per chain)
            authority_config_path: Bridge authority config
                                   (defaults to ntt/mainnet_deployment.json under root)
        """
        self.chains: Tuple[ChainConfig, ...] = (
            tuple(chains) if chains is not None else load_chain_configs()
        )
        self.root = Path(root).absolute() if root is not None else get_default_root()
        self._reader_factory = reader_factory or (
            lambda chain: JSONRPCClient(resolve_rpc_url(chain))
        )
        self.authority_config_path = (
            Path(authority_config_path)
            if authority_config_path is not None
            else get_authority_config_path(self.root)
        )

    def chain(self, chain_id: int) -> ChainConfig:
        """
        Look up a chain in the chain table.

        Raises:
            ChainNotConfiguredError: If the chain is not configured
        """
        for chain in self.chains:
            if chain.chain_id == chain_id:
                return chain
        raise ChainNotConfiguredError(f"Chain {chain_id} is not configured")

    def registry_path(self, chain_id: int) -> Path:
        return get_registry_path(chain_id, self.root)

    def reconcile_chain(
        self, chain_id: int, authority_config: Optional[Dict[str, Any]] = None
    ) -> ReconcileResult:
        """
        Reconcile one chain's registry file.

        Args:
            chain_id: Chain to reconcile
            authority_config: Parsed bridge authority config (None skips the
                              authority pass)

        Returns:
            ReconcileResult for the chain
        """
        chain = self.chain(chain_id)
        logger.info("=== Enhancing %s Deployments ===", chain.name)

        authority = authority_for_chain(authority_config, chain.authority_chain_name)
        return reconcile_file(
            self.registry_path(chain_id),
            chain_id,
            self._reader_factory(chain),
            authority,
        )

    def reconcile_all(self) -> Dict[int, ReconcileResult]:
        """
        Reconcile every configured chain, one after the other.

        Returns:
            Mapping of chain id -> ReconcileResult
        """
        authority_config = load_authority_config(self.authority_config_path)

        results: Dict[int, ReconcileResult] = {}
        for chain in self.chains:
            results[chain.chain_id] = self.reconcile_chain(chain.chain_id, authority_config)
        return results

    def verify_chain(self, chain_id: int) -> ChainVerification:
        chain = self.chain(chain_id)
        return verify_file(
            self.registry_path(chain_id),
            self._reader_factory(chain),
            chain.chain_id,
            chain.name,
        )

    def verify_all(self) -> VerificationReport:
        """
        Verify every configured chain, one after the other.

        Returns:
            VerificationReport; `passed` is True only if every record of
            every chain passed
        """
        report = VerificationReport()
        for chain in self.chains:
            report.chains.append(self.verify_chain(chain.chain_id))

        logger.info("=== FINAL SUMMARY ===")
        for verification in report.chains:
            logger.info(
                "%s: %s", verification.chain_name, "PASSED" if verification.passed else "FAILED"
            )
        return report


def sync_deployments(
    root: Optional[Union[Path, str]] = None,
    rpc_urls: Optional[Mapping[int, str]] = None,
) -> Dict[int, ReconcileResult]:
    """
    Sync all registry files with the bridge authority config and chain state.

    Args:
        root: Repository root (defaults to the current directory)
        rpc_urls: Per-chain RPC URL overrides (defaults to environment
                  variables, then public endpoints)

    Returns:
        Mapping of chain id -> ReconcileResult
    """
    engine = DeploymentRegistryEngine(
        root=root,
        reader_factory=lambda chain: JSONRPCClient(resolve_rpc_url(chain, rpc_urls)),
    )
    return engine.reconcile_all()


def verify_deployments(
    root: Optional[Union[Path, str]] = None,
    rpc_urls: Optional[Mapping[int, str]] = None,
) -> VerificationReport:
    """
    Verify all registry files against chain state.

    Args:
        root: Repository root (defaults to the current directory)
        rpc_urls: Per-chain RPC URL overrides (defaults to environment
                  variables, then public endpoints)

    Returns:
        VerificationReport for all configured chains
    """
    engine = DeploymentRegistryEngine(
        root=root,
        reader_factory=lambda chain: JSONRPCClient(resolve_rpc_url(chain, rpc_urls)),
    )
    return engine.verify_all()
