"""
Reverse-resolve configuration loaded from environment variables.

Uses ``pydantic-settings`` for validated, typed configuration.  The settings
object is built once in :func:`reverse.main.main` and passed down explicitly.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from shared.constants import CHAIN_RPC_URLS, DEFAULT_DNS_NAME
from shared.key_codec import KeyVariant


class ReverseConfig(BaseSettings):
    """Configuration for reverse resolution against a ChainResolver.

    All values can be overridden via environment variables (case-insensitive).
    A ``.env`` file is also read when present.
    """

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # ---- Network ----
    chain_id: int = Field(
        default=11155111,
        description="EIP-155 chain ID of the network hosting the resolver.",
    )
    rpc_url: str = Field(
        default="",
        description="JSON-RPC endpoint.  Falls back to the built-in table for chain_id.",
    )

    # ---- Resolver ----
    chain_resolver_address: str = Field(
        default="",
        validation_alias=AliasChoices(
            "chain_resolver_address",
            "resolver_address",
        ),
        description="ChainResolver address used when no deployment record has code.",
    )
    deployments_dir: str = Field(
        default="deployments",
        description="Directory holding <chain_id>/<Contract>.json deployment records.",
    )

    # ---- Lookup ----
    key_variant: KeyVariant = Field(
        default=KeyVariant.HEX_SUFFIX,
        description="'hex' appends the identifier as hex, 'raw' appends its raw bytes.",
    )
    dns_name: str = Field(
        default=DEFAULT_DNS_NAME,
        description="Name passed to resolve(); reverse lookups accept any label.",
    )

    def effective_rpc_url(self) -> str:
        """Return ``rpc_url`` or the default endpoint for ``chain_id``."""
        if self.rpc_url:
            return self.rpc_url
        try:
            return CHAIN_RPC_URLS[self.chain_id]
        except KeyError:
            raise ValueError(
                f"No RPC URL configured for chain {self.chain_id}; set RPC_URL."
            ) from None
