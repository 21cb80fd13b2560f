"""
ChainResolver shared utilities re-exported for convenience.
"""

from shared.chain_id import erc7930_chain_identifier, int_to_min_bytes, parse_chain_id
from shared.constants import (
    CHAIN_NAME_KEY_PREFIX,
    CHAIN_RESOLVER_ABI,
    CHAIN_RPC_URLS,
    DEFAULT_DNS_NAME,
    DISPLAY_SUFFIX,
    ZERO_NODE,
)
from shared.errors import (
    AnswerDecodeError,
    MalformedIdentifierError,
    ResolverNotFoundError,
    ResolverTransportError,
)
from shared.key_codec import (
    KeyVariant,
    build_key,
    compose_display_name,
    decode_data_result,
    decode_name_payload,
    decode_text_result,
    dns_encode,
    encode_data_call,
    encode_text_call,
)
from shared.resolver_client import ChainResolverClient, ReverseResult, locate_resolver_address

__all__ = [
    "ChainResolverClient",
    "KeyVariant",
    "ReverseResult",
    "build_key",
    "compose_display_name",
    "decode_data_result",
    "decode_name_payload",
    "decode_text_result",
    "dns_encode",
    "encode_data_call",
    "encode_text_call",
    "erc7930_chain_identifier",
    "int_to_min_bytes",
    "locate_resolver_address",
    "parse_chain_id",
    # errors
    "AnswerDecodeError",
    "MalformedIdentifierError",
    "ResolverNotFoundError",
    "ResolverTransportError",
    # constants
    "CHAIN_NAME_KEY_PREFIX",
    "CHAIN_RESOLVER_ABI",
    "CHAIN_RPC_URLS",
    "DEFAULT_DNS_NAME",
    "DISPLAY_SUFFIX",
    "ZERO_NODE",
]
