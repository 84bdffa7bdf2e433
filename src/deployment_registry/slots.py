"""EIP-1967 storage slot decoding for deployment-registry library."""

import logging
from typing import Optional

from web3 import Web3

from .constants import ADMIN_SLOT, IMPLEMENTATION_SLOT, ZERO_WORD
from .exceptions import RPCError
from .rpc import ChainReader

logger = logging.getLogger(__name__)


def eip1967_slot(label: str) -> str:
    """
    Derive an EIP-1967 slot identifier from its label.

    Args:
        label: Slot label, e.g. "eip1967.proxy.implementation"

    Returns:
        0x-prefixed 32-byte hex slot, keccak256(label) - 1
    """
    value = int.from_bytes(Web3.keccak(text=label), "big") - 1
    return "0x" + value.to_bytes(32, "big").hex()


def checksum_address(address: str) -> str:
    """Return the EIP-55 checksummed form of an address."""
    return Web3.to_checksum_address(address)


def is_valid_address(address: object) -> bool:
    """Check that a value is a 0x-prefixed 20-byte hex address."""
    return isinstance(address, str) and Web3.is_address(address)


def same_address(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two addresses case-insensitively."""
    if a is None or b is None:
        return a is b
    return a.lower() == b.lower()


def decode_address_word(word: bytes) -> Optional[str]:
    """
    Decode an address from the low 160 bits of a 32-byte storage word.

    Args:
        word: Raw storage word

    Returns:
        Checksummed address, or None if the word is all zeros
    """
    word = word.rjust(32, b"\x00")
    if word == ZERO_WORD:
        return None
    return checksum_address("0x" + word[-20:].hex())


def read_address_slot(
    reader: ChainReader, address: str, slot: str, strict: bool = False
) -> Optional[str]:
    """
    Read a storage slot and decode the address it holds.

    Read failures are treated as an empty slot unless `strict` is set.

    Args:
        reader: Chain access
        address: Contract address
        slot: Storage slot identifier
        strict: Re-raise read failures instead of reporting an empty slot

    Returns:
        Checksummed address, or None if the slot is empty (or unreadable)

    Raises:
        RPCError: If the read fails and `strict` is set
    """
    try:
        word = reader.get_storage_at(address, slot)
    except RPCError as e:
        if strict:
            raise
        logger.warning("Error reading storage slot %s for %s: %s", slot, address, e)
        return None

    return decode_address_word(word)


def read_implementation(reader: ChainReader, address: str, strict: bool = False) -> Optional[str]:
    return read_address_slot(reader, address, IMPLEMENTATION_SLOT, strict=strict)


def read_admin(reader: ChainReader, address: str, strict: bool = False) -> Optional[str]:
    return read_address_slot(reader, address, ADMIN_SLOT, strict=strict)
