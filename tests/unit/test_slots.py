"""Unit tests for EIP-1967 storage slot decoding."""

import logging

import pytest

from conftest import ADMIN, IMPL, PROXY, FakeChainReader, address_word
from deployment_registry.constants import ADMIN_SLOT, IMPLEMENTATION_SLOT, ZERO_WORD
from deployment_registry.exceptions import RPCError
from deployment_registry.slots import (
    decode_address_word,
    eip1967_slot,
    is_valid_address,
    read_address_slot,
    read_admin,
    read_implementation,
    same_address,
)


class TestSlotConstants:
    """Test that the well-known slots match their EIP-1967 derivation."""

    def test_implementation_slot(self):
        assert eip1967_slot("eip1967.proxy.implementation") == IMPLEMENTATION_SLOT

    def test_admin_slot(self):
        assert eip1967_slot("eip1967.proxy.admin") == ADMIN_SLOT


class TestDecodeAddressWord:
    """Test the decode_address_word function."""

    def test_zero_word_is_absent(self):
        """Test that 32 zero bytes decode to None."""
        assert decode_address_word(ZERO_WORD) is None

    def test_decodes_low_160_bits(self):
        """Test that the address is taken from the last 20 bytes."""
        assert decode_address_word(address_word(IMPL)) == IMPL

    def test_high_bits_are_ignored(self):
        """Test that data above the low 160 bits does not leak into the address."""
        word = b"\xff" * 12 + bytes.fromhex(IMPL[2:])
        assert decode_address_word(word) == IMPL

    def test_non_zero_high_bits_with_zero_address_is_present(self):
        """Test that only the all-zero word counts as absent."""
        word = b"\x01" + b"\x00" * 31
        assert decode_address_word(word) == "0x0000000000000000000000000000000000000000"

    def test_returns_checksummed_address(self):
        """Test EIP-55 checksumming of decoded addresses."""
        word = b"\x00" * 12 + bytes.fromhex("5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
        assert decode_address_word(word) == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"

    def test_short_word_is_left_padded(self):
        """Test that compact node responses are treated as padded words."""
        assert decode_address_word(b"") is None
        assert decode_address_word(bytes.fromhex(IMPL[2:])) == IMPL


class TestReadAddressSlot:
    """Test reading and decoding slots through a ChainReader."""

    def test_reads_implementation(self, reader: FakeChainReader):
        reader.set_slot(PROXY, IMPLEMENTATION_SLOT, IMPL)
        assert read_implementation(reader, PROXY) == IMPL

    def test_reads_admin(self, reader: FakeChainReader):
        reader.set_slot(PROXY, ADMIN_SLOT, ADMIN)
        assert read_admin(reader, PROXY) == ADMIN

    def test_unset_slot_is_absent(self, reader: FakeChainReader):
        assert read_address_slot(reader, PROXY, IMPLEMENTATION_SLOT) is None

    def test_read_failure_is_treated_as_absent(self, reader: FakeChainReader, caplog):
        """Test the fail-open policy for slot reads."""
        reader.set_slot(PROXY, IMPLEMENTATION_SLOT, IMPL)
        reader.failing_slots.add((PROXY.lower(), IMPLEMENTATION_SLOT))

        with caplog.at_level(logging.WARNING):
            assert read_implementation(reader, PROXY) is None
        assert "Error reading storage slot" in caplog.text

    def test_strict_read_failure_raises(self, reader: FakeChainReader):
        """Test that strict reads surface the failure."""
        reader.failing_slots.add((PROXY.lower(), ADMIN_SLOT))

        with pytest.raises(RPCError):
            read_admin(reader, PROXY, strict=True)


class TestAddressHelpers:
    """Test address validation and comparison helpers."""

    def test_valid_address(self):
        assert is_valid_address(PROXY)

    def test_invalid_addresses(self):
        assert not is_valid_address("0x1234")
        assert not is_valid_address("not an address")
        assert not is_valid_address(None)

    def test_same_address_ignores_case(self):
        assert same_address(
            "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed",
        )

    def test_different_addresses(self):
        assert not same_address(IMPL, ADMIN)

    def test_none_only_matches_none(self):
        assert same_address(None, None)
        assert not same_address(IMPL, None)
