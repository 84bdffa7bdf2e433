"""Drift verification of persisted registries against chain state."""

import logging
from pathlib import Path
from typing import Union

from .constants import CONTRACT_DISPLAY_NAMES
from .exceptions import RegistryError, RPCError
from .registry import ChainRegistry, load_registry
from .rpc import ChainReader
from .slots import is_valid_address, read_admin, read_implementation, same_address
from .types import ChainVerification, DeploymentRecord, ProxyMetadata, RecordVerification

logger = logging.getLogger(__name__)


def _fail(outcome: RecordVerification, message: str) -> RecordVerification:
    logger.error("   %s", message)
    outcome.failures.append(message)
    return outcome


def _verify_proxy(
    reader: ChainReader, address: str, proxy: ProxyMetadata, outcome: RecordVerification
) -> RecordVerification:
    # Slots asserted by the registry must be readable
    try:
        implementation = read_implementation(reader, address, strict=True)
    except RPCError as e:
        return _fail(outcome, f"Error reading implementation slot: {e}")

    if implementation is None:
        return _fail(outcome, "No implementation found in EIP-1967 slot")
    if not same_address(implementation, proxy.implementation):
        return _fail(
            outcome,
            f"Implementation mismatch: expected {proxy.implementation}, actual {implementation}",
        )
    logger.info("   Implementation: %s", implementation)

    if proxy.admin:
        try:
            admin = read_admin(reader, address, strict=True)
        except RPCError as e:
            return _fail(outcome, f"Error reading admin slot: {e}")

        if admin is None:
            return _fail(outcome, "No admin found in EIP-1967 slot")
        if not same_address(admin, proxy.admin):
            return _fail(outcome, f"ProxyAdmin mismatch: expected {proxy.admin}, actual {admin}")
        logger.info("   ProxyAdmin verified: %s", admin)

    if proxy.owner:
        try:
            owner = reader.call_address_getter(address, "owner")
        except RPCError as e:
            return _fail(outcome, f"Error reading owner(): {e}")

        if not same_address(owner, proxy.owner):
            return _fail(outcome, f"Owner mismatch: expected {proxy.owner}, actual {owner}")
        logger.info("   Owner verified: %s", owner)

    return outcome


def verify_record(reader: ChainReader, name: str, record: DeploymentRecord) -> RecordVerification:
    """
    Check one record against live chain state.

    Hard failures: invalid address, missing code, unreadable or drifted
    proxy slots, unreadable or drifted owner. A record without proxy data
    whose implementation slot is set only produces a warning.

    Args:
        reader: Chain access
        name: Record key in the registry
        record: Record to verify

    Returns:
        RecordVerification with failures and warnings
    """
    display_name = CONTRACT_DISPLAY_NAMES.get(name, name)
    logger.info("Verifying %s...", display_name)
    outcome = RecordVerification(name=name, address=record.address)

    if not is_valid_address(record.address):
        return _fail(outcome, f"Invalid address format: {record.address}")

    try:
        code = reader.get_code(record.address)
    except RPCError as e:
        return _fail(outcome, f"Error checking contract existence: {e}")
    if not code:
        return _fail(outcome, f"No contract code found at {record.address}")
    logger.info("   Contract exists at %s", record.address)

    if record.proxy is not None:
        return _verify_proxy(reader, record.address, record.proxy, outcome)

    # Undocumented proxies are reported but don't fail verification
    implementation = read_implementation(reader, record.address)
    if implementation is not None:
        message = (
            f"Contract appears to be a proxy but is marked as non-proxy "
            f"(implementation {implementation})"
        )
        logger.warning("   %s", message)
        outcome.warnings.append(message)
    else:
        logger.info("   Confirmed non-proxy contract")

    return outcome


def verify_registry(
    registry: ChainRegistry, reader: ChainReader, chain_id: int, chain_name: str
) -> ChainVerification:
    """
    Verify every record of a registry without modifying it.

    Args:
        registry: Registry to verify
        reader: Chain access
        chain_id: Chain id for reporting
        chain_name: Chain name for reporting

    Returns:
        ChainVerification aggregating all record outcomes
    """
    logger.info("=== Verifying %s (Chain ID: %s) ===", chain_name, chain_id)
    verification = ChainVerification(chain_id=chain_id, chain_name=chain_name)

    for name, record in registry.items():
        verification.records.append(verify_record(reader, name, record))

    passed = len(verification.records) - len(verification.failed_records)
    logger.info(
        "%s results: %d/%d contracts verified successfully",
        chain_name,
        passed,
        len(verification.records),
    )
    for failed in verification.failed_records:
        logger.error("   Failed: %s", CONTRACT_DISPLAY_NAMES.get(failed.name, failed.name))

    return verification


def verify_file(
    path: Union[Path, str], reader: ChainReader, chain_id: int, chain_name: str
) -> ChainVerification:
    """
    Load and verify a registry file.

    A missing or unparsable file fails verification for the whole chain,
    with no per-record results. This includes a file holding a proxy object
    without an implementation, or with both an admin and an owner.

    Args:
        path: Registry file path
        reader: Chain access
        chain_id: Chain id for reporting
        chain_name: Chain name for reporting

    Returns:
        ChainVerification for the chain
    """
    try:
        registry = load_registry(path)
    except RegistryError as e:
        logger.error("Could not load deployment data for %s: %s", chain_name, e)
        return ChainVerification(chain_id=chain_id, chain_name=chain_name, error=str(e))

    return verify_registry(registry, reader, chain_id, chain_name)
