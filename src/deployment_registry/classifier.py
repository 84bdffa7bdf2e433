"""Proxy pattern classification for deployment-registry library."""

import logging
from typing import Callable, Optional, Sequence

from .exceptions import RPCError
from .rpc import ChainReader
from .slots import checksum_address, read_admin, read_implementation
from .types import ProxyMetadata

logger = logging.getLogger(__name__)

# (reader, proxy address, implementation address) -> metadata, or None for no match
DetectionStrategy = Callable[[ChainReader, str, str], Optional[ProxyMetadata]]


def detect_admin_slot(
    reader: ChainReader, address: str, implementation: str
) -> Optional[ProxyMetadata]:
    """Transparent proxy: the EIP-1967 admin slot holds an address."""
    admin = read_admin(reader, address)
    if admin is None:
        return None

    logger.debug("   ProxyAdmin: %s", admin)
    return ProxyMetadata.transparent(implementation, admin)


def detect_owner_accessor(
    reader: ChainReader, address: str, implementation: str
) -> Optional[ProxyMetadata]:
    """UUPS proxy: owner() answers with an address."""
    try:
        owner = checksum_address(reader.call_address_getter(address, "owner"))
    except (RPCError, ValueError) as e:
        # Many contracts don't have an owner() function
        logger.debug("   No owner() on %s: %s", address, e)
        return None

    logger.debug("   Owner: %s", owner)
    return ProxyMetadata.uups(implementation, owner)


def detect_custom(
    reader: ChainReader, address: str, implementation: str
) -> Optional[ProxyMetadata]:
    """Fallback: an implementation is set but upgrade authority is unknown."""
    return ProxyMetadata.custom(implementation)


# Evaluated in order; the first match wins
DEFAULT_STRATEGIES: Sequence[DetectionStrategy] = (
    detect_admin_slot,
    detect_owner_accessor,
    detect_custom,
)


def classify_proxy(
    reader: ChainReader,
    address: str,
    strategies: Sequence[DetectionStrategy] = DEFAULT_STRATEGIES,
) -> Optional[ProxyMetadata]:
    """
    Classify the proxy pattern of a deployed contract.

    A contract is a proxy if and only if its EIP-1967 implementation slot is
    non-zero. Proxies are then matched against `strategies` in order.

    Args:
        reader: Chain access
        address: Contract address
        strategies: Ordered detection strategies

    Returns:
        ProxyMetadata for proxies, None for plain contracts
    """
    logger.info("Analyzing %s...", address)

    implementation = read_implementation(reader, address)
    if implementation is None:
        logger.info("   Non-proxy contract")
        return None

    logger.debug("   Implementation: %s", implementation)

    for strategy in strategies:
        proxy = strategy(reader, address, implementation)
        if proxy is not None:
            logger.info("   %s proxy, implementation %s", proxy.kind.value, implementation)
            return proxy

    return ProxyMetadata.custom(implementation)
