"""
Web3 client for a deployed ChainResolver.

Reads go through ``resolve(bytes,bytes)`` with calldata built by
:mod:`shared.key_codec`, plus the direct ``chainName`` / ``chainId`` getters.
Owner writes (``register``, ``setAddr``) are signed with the configured key.

Every RPC or contract failure is raised as :class:`ResolverTransportError`.
Calls are not retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from web3 import Web3
from web3.contract import Contract
from web3.exceptions import Web3Exception

from shared.constants import CHAIN_RESOLVER_ABI, DEFAULT_DNS_NAME, ZERO_NODE
from shared.deployments import load_deployment_address
from shared.errors import AnswerDecodeError, ResolverNotFoundError, ResolverTransportError
from shared.key_codec import (
    KeyVariant,
    build_key,
    compose_display_name,
    decode_data_result,
    decode_text_result,
    dns_encode,
    encode_reverse_call,
    encode_text_call,
)

logger = structlog.get_logger(__name__)

_TRANSPORT_ERRORS = (Web3Exception, ConnectionError, TimeoutError, OSError, ValueError)


@dataclass(frozen=True)
class ReverseResult:
    """Names returned for one chain identifier by each read path."""

    chain_id: bytes
    key: str
    text_name: str
    data_name: str
    direct_name: str | None = None

    @property
    def name(self) -> str:
        """First non-empty of text, data, direct; empty if none answered."""
        return self.text_name or self.data_name or self.direct_name or ""

    @property
    def display_name(self) -> str:
        return compose_display_name(self.name)


def locate_resolver_address(
    w3: Web3,
    chain_id: int,
    deployments_dir: str,
    configured: str | None = None,
) -> str:
    """Find the ChainResolver address for *chain_id*.

    A deployment record wins when its address has code; otherwise the
    configured address is used.

    Raises
    ------
    ResolverNotFoundError
        If neither source yields an address.
    """
    recorded = load_deployment_address(deployments_dir, chain_id, "ChainResolver")
    if recorded:
        try:
            code = w3.eth.get_code(Web3.to_checksum_address(recorded))
        except _TRANSPORT_ERRORS as exc:
            logger.warning("resolver_client.get_code_failed", address=recorded, error=str(exc))
            code = b""
        if code:
            return Web3.to_checksum_address(recorded)
        logger.warning("resolver_client.deployment_has_no_code", address=recorded)

    if configured:
        return Web3.to_checksum_address(configured)

    raise ResolverNotFoundError("ChainResolver address is required.")


class ChainResolverClient:
    """Reads from (and optionally writes to) a ChainResolver contract.

    Parameters
    ----------
    rpc_url:
        Ethereum JSON-RPC endpoint.
    resolver_address:
        Deployed ChainResolver address.
    private_key:
        Hex-encoded key of the resolver owner.  Only needed for writes.
    w3:
        Pre-built :class:`Web3` instance; *rpc_url* is ignored when given.
    """

    def __init__(
        self,
        rpc_url: str,
        resolver_address: str,
        private_key: str | None = None,
        w3: Web3 | None = None,
    ) -> None:
        self.w3 = w3 or Web3(Web3.HTTPProvider(rpc_url))
        self._resolver_address = Web3.to_checksum_address(resolver_address)
        self._resolver: Contract = self.w3.eth.contract(
            address=self._resolver_address,
            abi=CHAIN_RESOLVER_ABI,
        )

        self._account = None
        if private_key:
            self._account = self.w3.eth.account.from_key(private_key)

        logger.info(
            "resolver_client.initialized",
            resolver=self._resolver_address,
            rpc=rpc_url,
            can_write=self._account is not None,
        )

    @property
    def address(self) -> str:
        return self._resolver_address

    @property
    def wallet_address(self) -> str | None:
        return self._account.address if self._account is not None else None

    # ------------------------------------------------------------------
    # Raw reads
    # ------------------------------------------------------------------

    def resolve(self, dns_name: bytes, call: bytes) -> bytes:
        """Call ``resolve(name, data)`` and return the raw answer bytes."""
        try:
            return bytes(self._resolver.functions.resolve(dns_name, call).call())
        except _TRANSPORT_ERRORS as exc:
            logger.error("resolver_client.resolve_failed", error=str(exc))
            raise ResolverTransportError(str(exc)) from exc

    def chain_name(self, chain_id: bytes) -> str:
        """Direct ``chainName(bytes)`` read."""
        try:
            return self._resolver.functions.chainName(chain_id).call()
        except _TRANSPORT_ERRORS as exc:
            logger.error("resolver_client.chain_name_failed", error=str(exc))
            raise ResolverTransportError(str(exc)) from exc

    def chain_id_of(self, label_hash: bytes) -> bytes:
        """Direct ``chainId(bytes32)`` read."""
        try:
            return bytes(self._resolver.functions.chainId(label_hash).call())
        except _TRANSPORT_ERRORS as exc:
            logger.error("resolver_client.chain_id_failed", error=str(exc))
            raise ResolverTransportError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def forward_text(self, label_hash: bytes, key: str, name: str) -> str:
        """``text(labelHash, key)`` through ``resolve`` for a registered name."""
        answer = self.resolve(dns_encode(name), encode_text_call(label_hash, key))
        return decode_text_result(answer)

    def reverse_text(
        self,
        chain_id: bytes,
        variant: KeyVariant,
        node: bytes = ZERO_NODE,
        name: str = DEFAULT_DNS_NAME,
    ) -> str:
        logger.info(
            "resolver_client.reverse_text",
            chain_id=chain_id.hex(),
            variant=KeyVariant(variant).value,
        )
        answer = self.resolve(dns_encode(name), encode_reverse_call(chain_id, variant, node=node))
        return decode_text_result(answer)

    def reverse_data(
        self,
        chain_id: bytes,
        variant: KeyVariant,
        node: bytes = ZERO_NODE,
        name: str = DEFAULT_DNS_NAME,
    ) -> str:
        logger.info(
            "resolver_client.reverse_data",
            chain_id=chain_id.hex(),
            variant=KeyVariant(variant).value,
        )
        answer = self.resolve(
            dns_encode(name), encode_reverse_call(chain_id, variant, use_data=True, node=node)
        )
        return decode_data_result(answer)

    def reverse(
        self,
        chain_id: bytes,
        variant: KeyVariant,
        name: str = DEFAULT_DNS_NAME,
        include_direct: bool = True,
    ) -> ReverseResult:
        """Reverse-resolve *chain_id* through text, data and the direct getter.

        Transport failures of the text and data paths propagate; an answer
        that does not decode counts as an empty name.  The direct read is
        only a comparison, so its failure is logged and recorded as ``None``.
        """
        try:
            text_name = self.reverse_text(chain_id, variant, name=name)
        except AnswerDecodeError as exc:
            logger.warning("resolver_client.text_answer_undecodable", error=str(exc))
            text_name = ""
        try:
            data_name = self.reverse_data(chain_id, variant, name=name)
        except AnswerDecodeError as exc:
            logger.warning("resolver_client.data_answer_undecodable", error=str(exc))
            data_name = ""

        direct_name: str | None = None
        if include_direct:
            try:
                direct_name = self.chain_name(chain_id)
            except ResolverTransportError:
                logger.warning("resolver_client.direct_read_unavailable", chain_id=chain_id.hex())

        result = ReverseResult(
            chain_id=chain_id,
            key=build_key(chain_id, variant),
            text_name=text_name,
            data_name=data_name,
            direct_name=direct_name,
        )
        if direct_name is not None and direct_name != result.name:
            logger.warning(
                "resolver_client.direct_read_mismatch",
                resolved=result.name,
                direct=direct_name,
            )
        return result

    # ------------------------------------------------------------------
    # Owner writes
    # ------------------------------------------------------------------

    def _build_tx(self, fn) -> dict[str, Any]:
        """Build a transaction dict from a contract function call."""
        return fn.build_transaction({
            "from": self._account.address,
            "nonce": self.w3.eth.get_transaction_count(self._account.address),
        })

    def _send_tx(self, fn) -> str:
        """Sign, send, and wait for a transaction.  Returns the tx hash hex."""
        if self._account is None:
            raise ResolverTransportError("A private key is required to send transactions.")
        try:
            signed = self._account.sign_transaction(self._build_tx(fn))
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
            receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=120)
        except _TRANSPORT_ERRORS as exc:
            logger.error("resolver_client.tx_failed", error=str(exc))
            raise ResolverTransportError(str(exc)) from exc
        if receipt["status"] != 1:
            raise ResolverTransportError(
                f"Transaction reverted: {tx_hash.hex()} "
                f"(gas used: {receipt['gasUsed']})"
            )
        return tx_hash.hex()

    def register(self, label: str, owner: str, chain_id: bytes) -> str:
        """Register *label* -> *chain_id* (owner only)."""
        logger.info("resolver_client.register", label=label, owner=owner, chain_id=chain_id.hex())
        tx_hash = self._send_tx(
            self._resolver.functions.register(label, Web3.to_checksum_address(owner), chain_id)
        )
        logger.info("resolver_client.registered", tx=tx_hash)
        return tx_hash

    def set_addr(self, label_hash: bytes, coin_type: int, address: str) -> str:
        """Set the *coin_type* address record of a registered label."""
        logger.info("resolver_client.set_addr", label_hash=label_hash.hex(), coin_type=coin_type)
        tx_hash = self._send_tx(
            self._resolver.functions.setAddr(
                label_hash, coin_type, Web3.to_checksum_address(address)
            )
        )
        logger.info("resolver_client.addr_set", tx=tx_hash)
        return tx_hash
