"""
Live-check configuration loaded from environment variables.
"""

from __future__ import annotations

from pydantic import Field

from reverse.config import ReverseConfig
from shared.constants import ETH_COIN_TYPE
from shared.key_codec import KeyVariant


class SmokeConfig(ReverseConfig):
    """Configuration for the end-to-end check against a deployed ChainResolver.

    The wallet must own the resolver: ``register`` is owner-only.
    """

    # ---- Wallet ----
    private_key: str = Field(
        ...,
        description="Hex-encoded private key of the resolver owner.",
    )

    # ---- Test data ----
    label: str = Field(
        default="optimism",
        description="Chain label registered under cid.eth.",
    )
    chain_identifier: str = Field(
        default="0x000000010001010a00",
        description="Chain identifier bytes (hex) registered for the label.",
    )
    coin_type: int = Field(
        default=ETH_COIN_TYPE,
        description="Coin type of the address record set for the label.",
    )

    # The deployed resolver stores reverse records under the raw-byte key.
    key_variant: KeyVariant = Field(
        default=KeyVariant.RAW_BYTE,
        description="'hex' appends the identifier as hex, 'raw' appends its raw bytes.",
    )
