"""
End-to-end check of a deployed ChainResolver.

Registers a label for a chain identifier, sets an address record, then
resolves forward (name -> identifier) and in reverse (identifier -> name)
through ``text``, ``data`` and the direct getters, failing on any mismatch.

Usage::

    python -m smoke.main
"""

from __future__ import annotations

import sys

import structlog
from web3 import Web3

from shared.chain_id import parse_chain_id
from shared.constants import CHAIN_ID_TEXT_KEY
from shared.errors import AnswerDecodeError
from shared.key_codec import compose_display_name
from shared.resolver_client import ChainResolverClient, locate_resolver_address
from smoke.config import SmokeConfig

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

logger = structlog.get_logger("smoke.main")


def _decoded_or_empty(fn, *args, **kwargs) -> str:
    try:
        return fn(*args, **kwargs)
    except AnswerDecodeError as exc:
        logger.warning("smoke.answer_undecodable", error=str(exc))
        return ""


def run(config: SmokeConfig, client: ChainResolverClient | None = None) -> None:
    """Run the live check.

    Raises
    ------
    RuntimeError
        On any mismatch between what was registered and what resolves.
    ResolverTransportError
        If the resolver cannot be reached or a transaction reverts.
    """
    if client is None:
        rpc_url = config.effective_rpc_url()
        w3 = Web3(Web3.HTTPProvider(rpc_url))
        address = locate_resolver_address(
            w3,
            config.chain_id,
            config.deployments_dir,
            configured=config.chain_resolver_address,
        )
        client = ChainResolverClient(rpc_url, address, private_key=config.private_key, w3=w3)

    label = config.label
    label_hash = bytes(Web3.keccak(text=label))
    chain_id = parse_chain_id(config.chain_identifier)
    owner = client.wallet_address
    ens_name = compose_display_name(label)

    logger.info(
        "smoke.inputs",
        label=label,
        label_hash="0x" + label_hash.hex(),
        chain_id="0x" + chain_id.hex(),
        resolver=client.address,
    )

    # -- Register name -> chain identifier (owner only) -------------------------
    client.register(label, owner, chain_id)
    client.set_addr(label_hash, config.coin_type, owner)

    # -- Forward resolve -------------------------------------------------------
    forward = client.forward_text(label_hash, CHAIN_ID_TEXT_KEY, ens_name)
    logger.info("smoke.forward_resolved", ens_name=ens_name, chain_id=forward)
    if forward != chain_id.hex():
        raise RuntimeError(f"Unexpected chain-id hex: {forward}")

    # -- Reverse resolve -------------------------------------------------------
    text_name = _decoded_or_empty(
        client.reverse_text, chain_id, config.key_variant, node=label_hash, name=ens_name
    )
    logger.info("smoke.reverse_text", name=text_name)

    data_name = _decoded_or_empty(
        client.reverse_data, chain_id, config.key_variant, name=ens_name
    )
    logger.info("smoke.reverse_data", name=data_name)

    direct = client.chain_name(chain_id)
    logger.info("smoke.reverse_direct", name=direct)

    picked = text_name or data_name or direct
    if picked != label:
        raise RuntimeError(f"Unexpected reverse name: {picked}")

    # -- Direct reads ----------------------------------------------------------
    cid = client.chain_id_of(label_hash)
    cname = client.chain_name(cid)
    logger.info("smoke.direct_reads", chain_id="0x" + cid.hex(), chain_name=cname)
    if cid != chain_id:
        raise RuntimeError("chainId() mismatch")
    if cname != label:
        raise RuntimeError("chainName() mismatch")


def main() -> int:
    try:
        config = SmokeConfig()  # type: ignore[call-arg]
        run(config)
    except (RuntimeError, ValueError) as exc:
        logger.error("smoke.failed", error=str(exc))
        print(f"Live check failed: {exc}", file=sys.stderr)
        return 1
    print("Live check passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
