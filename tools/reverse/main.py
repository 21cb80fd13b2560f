"""
Reverse-resolve a chain identifier to a chain name.

Locates the ChainResolver (deployment record first, then the configured
address), asks it for ``chain-name:<identifier>`` through both the ``text``
and ``data`` selectors, and compares with the direct ``chainName`` read.

Usage::

    python -m reverse.main 10
    python -m reverse.main 0x000000010001010a00 --variant raw
    python -m reverse.main 10 --erc7930
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

import structlog
from web3 import Web3

from reverse.config import ReverseConfig
from shared.chain_id import erc7930_chain_identifier, parse_chain_id
from shared.errors import MalformedIdentifierError, ResolverNotFoundError, ResolverTransportError
from shared.key_codec import KeyVariant
from shared.resolver_client import ChainResolverClient, ReverseResult, locate_resolver_address

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(0),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger("reverse.main")


def chain_identifier_from_input(raw: str, erc7930: bool = False) -> bytes:
    """Parse CLI input; with *erc7930* the numeric ID is wrapped as an interoperable identifier."""
    chain_id = parse_chain_id(raw)
    if erc7930:
        return erc7930_chain_identifier(int.from_bytes(chain_id, "big"))
    return chain_id


def run(
    config: ReverseConfig,
    chain_id: bytes,
    include_direct: bool = True,
    client: ChainResolverClient | None = None,
) -> ReverseResult:
    """Reverse-resolve *chain_id* with the resolver described by *config*."""
    if client is None:
        rpc_url = config.effective_rpc_url()
        w3 = Web3(Web3.HTTPProvider(rpc_url))
        address = locate_resolver_address(
            w3,
            config.chain_id,
            config.deployments_dir,
            configured=config.chain_resolver_address,
        )
        client = ChainResolverClient(rpc_url, address, w3=w3)

    logger.info(
        "reverse.lookup",
        resolver=client.address,
        chain_id=chain_id.hex(),
        variant=config.key_variant.value,
    )
    return client.reverse(
        chain_id,
        config.key_variant,
        name=config.dns_name,
        include_direct=include_direct,
    )


def format_result(result: ReverseResult, variant: KeyVariant) -> list[str]:
    if variant is KeyVariant.HEX_SUFFIX:
        key_display = result.key
    else:
        key_display = f"chain-name: + 0x{result.chain_id.hex()} (raw bytes)"
    lines = [
        f"Lookup key: {key_display}",
        f"Chain name (text): {result.text_name}",
        f"Chain name (data): {result.data_name}",
    ]
    if result.direct_name is not None:
        lines.append(f"Direct read (chainName): {result.direct_name}")
    lines.append(f"Display name: {result.display_name}")
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reverse-resolve a chain identifier through a ChainResolver."
    )
    parser.add_argument("chain_id", help="Chain ID (0x.. hex or decimal)")
    parser.add_argument(
        "--variant",
        choices=[v.value for v in KeyVariant],
        help="Key convention: 'hex' suffix or 'raw' bytes (default: KEY_VARIANT or hex)",
    )
    parser.add_argument(
        "--erc7930",
        action="store_true",
        help="Wrap the numeric chain ID as an ERC-7930 chain identifier",
    )
    parser.add_argument(
        "--no-direct",
        action="store_true",
        help="Skip the direct chainName(bytes) read",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments and config, run the lookup, print the names."""
    args = build_parser().parse_args(argv)

    try:
        chain_id = chain_identifier_from_input(args.chain_id, erc7930=args.erc7930)
    except MalformedIdentifierError as exc:
        logger.error("reverse.bad_chain_id", error=str(exc))
        return 2

    overrides = {}
    if args.variant:
        overrides["key_variant"] = KeyVariant(args.variant)

    try:
        config = ReverseConfig(**overrides)  # type: ignore[arg-type]
        result = run(config, chain_id, include_direct=not args.no_direct)
    except (ResolverNotFoundError, ResolverTransportError, ValueError) as exc:
        logger.error("reverse.failed", error=str(exc))
        print(str(exc), file=sys.stderr)
        return 1

    for line in format_result(result, config.key_variant):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
