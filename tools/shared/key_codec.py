"""
Reverse-resolution key construction and answer decoding.

A reverse lookup asks the resolver for the record stored under
``"chain-name:" + <chain identifier>`` through one of two selectors:

- ``text(bytes32,string) returns (string)``
- ``data(bytes32,string) returns (bytes)``

Two key conventions are deployed side by side and neither is canonical, so
callers choose one explicitly with :class:`KeyVariant`:

- ``RAW_BYTE``: the identifier's raw bytes, one latin-1 character per byte.
- ``HEX_SUFFIX``: the identifier as lowercase hex, two digits per byte.

Resolvers answer the ``data`` selector either with an ABI-encoded string or
with bare UTF-8 bytes; :func:`decode_name_payload` accepts both.

Everything here is pure and safe to call from any thread.
"""

from __future__ import annotations

import enum

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector

from ens.utils import dns_encode_name

from shared.constants import (
    CHAIN_NAME_KEY_PREFIX,
    DATA_SIGNATURE,
    DISPLAY_SUFFIX,
    TEXT_SIGNATURE,
    ZERO_NODE,
)
from shared.errors import AnswerDecodeError

TEXT_SELECTOR: bytes = function_signature_to_4byte_selector(TEXT_SIGNATURE)
DATA_SELECTOR: bytes = function_signature_to_4byte_selector(DATA_SIGNATURE)


class KeyVariant(str, enum.Enum):
    """How the chain identifier is appended to the key prefix."""

    RAW_BYTE = "raw"
    HEX_SUFFIX = "hex"


def build_key(chain_id: bytes, variant: KeyVariant) -> str:
    """Return the lookup key for *chain_id*.

    The result always starts with ``chain-name:``.  An empty identifier
    yields the bare prefix.
    """
    variant = KeyVariant(variant)
    if variant is KeyVariant.RAW_BYTE:
        # latin-1 maps every byte value to exactly one code point
        return CHAIN_NAME_KEY_PREFIX + bytes(chain_id).decode("latin-1")
    return CHAIN_NAME_KEY_PREFIX + bytes(chain_id).hex()


def _encode_call(selector: bytes, node: bytes, key: str) -> bytes:
    if len(node) != 32:
        raise ValueError(f"Node must be 32 bytes, got {len(node)}")
    return selector + encode(["bytes32", "string"], [bytes(node), key])


def encode_text_call(node: bytes, key: str) -> bytes:
    """Calldata for ``text(node, key)``."""
    return _encode_call(TEXT_SELECTOR, node, key)


def encode_data_call(node: bytes, key: str) -> bytes:
    """Calldata for ``data(node, key)``."""
    return _encode_call(DATA_SELECTOR, node, key)


def encode_reverse_call(
    chain_id: bytes,
    variant: KeyVariant,
    use_data: bool = False,
    node: bytes = ZERO_NODE,
) -> bytes:
    key = build_key(chain_id, variant)
    if use_data:
        return encode_data_call(node, key)
    return encode_text_call(node, key)


def decode_text_result(answer: bytes) -> str:
    """Decode the single ``string`` returned by ``text``.

    Raises
    ------
    AnswerDecodeError
        If *answer* is not an ABI-encoded string.
    """
    try:
        (value,) = decode(["string"], bytes(answer), strict=False)
    except (DecodingError, UnicodeDecodeError) as exc:
        raise AnswerDecodeError(f"text answer is not an ABI string: {exc}") from exc
    return value


def decode_name_payload(payload: bytes) -> str:
    """Decode the bytes stored under a ``chain-name:`` data record.

    1. Try the payload as an ABI-encoded string (non-zero padding is tolerated).
    2. Otherwise treat the whole payload as UTF-8 text.

    Never raises; undecodable UTF-8 sequences are replaced.
    """
    payload = bytes(payload)
    try:
        (value,) = decode(["string"], payload, strict=False)
        return value
    except (DecodingError, UnicodeDecodeError, OverflowError):
        return payload.decode("utf-8", errors="replace")


def decode_data_result(answer: bytes) -> str:
    """Unwrap the ``bytes`` returned by ``data`` and decode it as a name.

    Raises
    ------
    AnswerDecodeError
        If *answer* is not an ABI-encoded ``bytes`` value.
    """
    try:
        (payload,) = decode(["bytes"], bytes(answer), strict=False)
    except DecodingError as exc:
        raise AnswerDecodeError(f"data answer is not ABI bytes: {exc}") from exc
    return decode_name_payload(payload)


def compose_display_name(chain_name: str) -> str:
    """``optimism`` -> ``optimism.cid.eth``.  An empty name is not special-cased."""
    return chain_name + DISPLAY_SUFFIX


def dns_encode(name: str) -> bytes:
    """DNS wire-format encoding of *name*, as passed to ``resolve``."""
    return bytes(dns_encode_name(name))
