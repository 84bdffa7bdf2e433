"""Registry reconciliation against chain state and the bridge authority."""

import logging
from pathlib import Path
from typing import Dict, Optional, Set, Union

from .classifier import classify_proxy
from .constants import CONTRACT_DISPLAY_NAMES, NTT_MANAGER, NTT_TRANSCEIVER
from .exceptions import RegistryNotFoundError, RegistryParseError
from .registry import ChainRegistry, load_registry, save_registry
from .rpc import ChainReader
from .slots import checksum_address
from .types import BridgeAuthority, Classification, DeploymentRecord, ReconcileResult

logger = logging.getLogger(__name__)


def _authority_targets(authority: BridgeAuthority) -> Dict[str, str]:
    return {
        NTT_MANAGER: authority.manager,
        NTT_TRANSCEIVER: authority.transceiver,
    }


def _address_matches(record: Optional[DeploymentRecord], expected: str) -> bool:
    if record is None:
        return False
    try:
        return checksum_address(record.address) == expected
    except ValueError:
        return False


def sync_authority_records(
    registry: ChainRegistry,
    reader: ChainReader,
    authority: Optional[BridgeAuthority],
    result: ReconcileResult,
) -> Set[str]:
    """
    Force the bridge records to the authority's canonical addresses.

    A record whose address differs from the canonical one (or that is
    missing) is replaced wholesale with a freshly classified record.

    Args:
        registry: Registry to update in place
        reader: Chain access
        authority: Canonical addresses for this chain (None skips the pass)
        result: Accumulates changed record names

    Returns:
        Names of records replaced by this pass
    """
    replaced: Set[str] = set()
    if authority is None:
        return replaced

    for name, canonical in _authority_targets(authority).items():
        expected = checksum_address(canonical)
        if _address_matches(registry.get(name), expected):
            continue

        display_name = CONTRACT_DISPLAY_NAMES.get(name, name)
        logger.info("Syncing %s: %s", display_name, expected)

        record = DeploymentRecord(name=display_name, address=expected)
        proxy = classify_proxy(reader, expected)
        if proxy is not None:
            record.attach_proxy(proxy)
        else:
            record.mark_non_proxy()

        registry.set(name, record)
        replaced.add(name)
        result.updated.append(name)
        result.changed = True

    return replaced


def discover_proxies(
    registry: ChainRegistry,
    reader: ChainReader,
    result: ReconcileResult,
    skip: Optional[Set[str]] = None,
) -> None:
    """
    Attach proxy metadata to records that were never classified as proxies.

    Records already carrying proxy metadata are never re-classified.

    Args:
        registry: Registry to update in place
        reader: Chain access
        result: Accumulates changed record names
        skip: Record names to leave untouched
    """
    skip = skip or set()

    for name, record in registry.items():
        if name in skip:
            continue

        if record.classification is Classification.PROXY:
            logger.info("%s already has proxy data, skipping", name)
            continue

        proxy = classify_proxy(reader, record.address)
        if proxy is None:
            record.mark_non_proxy()
            continue

        record.attach_proxy(proxy)
        result.updated.append(name)
        result.changed = True
        logger.info("Enhanced %s with proxy data", name)


def reconcile_registry(
    registry: ChainRegistry,
    reader: ChainReader,
    authority: Optional[BridgeAuthority] = None,
) -> ReconcileResult:
    """
    Reconcile a registry in place: authority pass, then discovery pass.

    Args:
        registry: Registry to update in place
        reader: Chain access
        authority: Canonical bridge addresses for this chain, if any

    Returns:
        ReconcileResult telling whether anything changed
    """
    result = ReconcileResult()
    replaced = sync_authority_records(registry, reader, authority, result)
    discover_proxies(registry, reader, result, skip=replaced)
    return result


def reconcile_file(
    path: Union[Path, str],
    chain_id: int,
    reader: ChainReader,
    authority: Optional[BridgeAuthority] = None,
) -> ReconcileResult:
    """
    Reconcile a registry file, writing it back only if something changed.

    A missing file starts from an empty registry holding just the chain id.
    An unparsable file is left untouched and reported in the result.

    Args:
        path: Registry file path
        chain_id: Chain id for a newly created registry
        reader: Chain access
        authority: Canonical bridge addresses for this chain, if any

    Returns:
        ReconcileResult for the chain
    """
    try:
        registry = load_registry(path)
    except RegistryNotFoundError:
        logger.info("Creating new registry for chain %s", chain_id)
        registry = ChainRegistry(chain_id=chain_id)
    except RegistryParseError as e:
        logger.error("Could not load deployment data for chain %s: %s", chain_id, e)
        return ReconcileResult(error=str(e))

    result = reconcile_registry(registry, reader, authority)

    if result.changed:
        save_registry(registry, path)
        logger.info("Updated %s", path)
    else:
        logger.info("No updates needed for chain %s", chain_id)

    return result
