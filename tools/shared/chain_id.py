"""
Chain identifier parsing.

A chain identifier is an opaque byte string.  On input it is given either as
``0x``-prefixed hex (taken byte for byte) or as a decimal integer (encoded
big-endian in the minimum number of bytes).
"""

from __future__ import annotations

import string
import struct

from shared.errors import MalformedIdentifierError

ERC7930_VERSION = 0x0001
EIP155_CHAIN_TYPE = 0x0000

_HEX_DIGITS = frozenset(string.hexdigits)


def int_to_min_bytes(value: int) -> bytes:
    """Big-endian bytes of *value* with no leading zero bytes.

    Zero encodes as a single ``0x00`` byte.

    Examples:
        10       -> 0x0a
        8453     -> 0x2105
        11155111 -> 0xaa36a7
    """
    if value < 0:
        raise MalformedIdentifierError(f"Chain ID must be non-negative, got {value}")
    length = max(1, (value.bit_length() + 7) // 8)
    return value.to_bytes(length, byteorder="big")


def parse_chain_id(raw: str) -> bytes:
    """Parse user input into chain identifier bytes.

    ``"10"`` and ``"0xa"`` both yield ``b"\\x0a"``.  Hex input with an odd
    number of digits is left-padded with a zero nibble; ``"0x"`` yields the
    empty identifier.

    Raises
    ------
    MalformedIdentifierError
        If *raw* is neither valid hex nor a valid decimal integer.
    """
    text = raw.strip()
    if text[:2].lower() == "0x":
        digits = text[2:]
        if not all(c in _HEX_DIGITS for c in digits):
            raise MalformedIdentifierError(f"Invalid hex chain ID: {raw!r}")
        if len(digits) % 2:
            digits = "0" + digits
        return bytes.fromhex(digits)

    if not text or not text.isascii() or not text.isdigit():
        raise MalformedIdentifierError(
            f"Chain ID must be 0x-prefixed hex or decimal, got {raw!r}"
        )
    return int_to_min_bytes(int(text, 10))


def erc7930_chain_identifier(chain_id: int) -> bytes:
    """Wrap an EIP-155 chain ID into a chain-only ERC-7930 interoperable identifier.

    Layout: Version (2B) | ChainType (2B) | ChainRefLen (1B) | ChainRef | AddrLen (1B)
    with no address bytes.
    """
    if chain_id <= 0:
        raise MalformedIdentifierError(
            f"EIP-155 chain ID must be a positive integer, got {chain_id}"
        )
    chain_ref = int_to_min_bytes(chain_id)
    header = struct.pack(">HH", ERC7930_VERSION, EIP155_CHAIN_TYPE)
    return header + struct.pack("B", len(chain_ref)) + chain_ref + b"\x00"
