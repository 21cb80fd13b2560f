from __future__ import annotations

from types import SimpleNamespace

import pytest
from eth_abi import decode, encode
from eth_account import Account
from web3 import Web3
from web3.exceptions import ContractLogicError

from shared.constants import CHAIN_ID_TEXT_KEY
from shared.key_codec import DATA_SELECTOR, TEXT_SELECTOR, KeyVariant, build_key
from shared.resolver_client import ChainResolverClient

RESOLVER_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
OWNER_KEY = "0x" + "11" * 32


class FakeCall:
    def __init__(self, fn, apply=None):
        self._fn = fn
        self.apply = apply

    def call(self):
        return self._fn()

    def build_transaction(self, tx_params):
        return {
            "to": RESOLVER_ADDRESS,
            "data": "0x",
            "value": 0,
            "gas": 100_000,
            "gasPrice": 1_000_000_000,
            "chainId": 31337,
            **tx_params,
        }


class FakeChainResolver:
    """In-memory stand-in for a deployed ChainResolver contract."""

    def __init__(self, data_as_raw_utf8: bool = False) -> None:
        self.chain_ids: dict[bytes, bytes] = {}
        self.names: dict[bytes, str] = {}
        self.addrs: dict[tuple[bytes, int], str] = {}
        self.data_as_raw_utf8 = data_as_raw_utf8
        self.fail_with: Exception | None = None
        self.fail_direct = False
        self.text_answer_override: bytes | None = None
        self.resolve_calls: list[tuple[bytes, bytes]] = []
        self.functions = SimpleNamespace(
            resolve=self._resolve,
            chainName=self._chain_name,
            chainId=self._chain_id,
            register=self._register,
            setAddr=self._set_addr,
        )

    def seed(self, label: str, chain_id: bytes) -> None:
        label_hash = bytes(Web3.keccak(text=label))
        self.chain_ids[label_hash] = chain_id
        self.names[chain_id] = label

    def _reverse_lookup(self, key: str) -> str:
        for chain_id, label in self.names.items():
            if key in (
                build_key(chain_id, KeyVariant.RAW_BYTE),
                build_key(chain_id, KeyVariant.HEX_SUFFIX),
            ):
                return label
        return ""

    def _answer(self, name: bytes, data: bytes) -> bytes:
        self.resolve_calls.append((name, data))
        if self.fail_with is not None:
            raise self.fail_with
        selector, args = data[:4], data[4:]
        node, key = decode(["bytes32", "string"], args)
        if selector == TEXT_SELECTOR:
            if self.text_answer_override is not None:
                return self.text_answer_override
            if key == CHAIN_ID_TEXT_KEY:
                return encode(["string"], [self.chain_ids.get(node, b"").hex()])
            return encode(["string"], [self._reverse_lookup(key)])
        if selector == DATA_SELECTOR:
            label = self._reverse_lookup(key)
            if self.data_as_raw_utf8:
                payload = label.encode("utf-8")
            else:
                payload = encode(["string"], [label])
            return encode(["bytes"], [payload])
        raise ContractLogicError("execution reverted: unsupported selector")

    def _resolve(self, name, data):
        return FakeCall(lambda: self._answer(bytes(name), bytes(data)))

    def _chain_name(self, chain_id):
        def _call():
            if self.fail_direct:
                raise ContractLogicError("execution reverted")
            return self.names.get(bytes(chain_id), "")

        return FakeCall(_call)

    def _chain_id(self, label_hash):
        return FakeCall(lambda: self.chain_ids.get(bytes(label_hash), b""))

    def _register(self, label, owner, chain_id):
        return FakeCall(lambda: None, apply=lambda: self.seed(label, bytes(chain_id)))

    def _set_addr(self, label_hash, coin_type, address):
        def _apply():
            self.addrs[(bytes(label_hash), coin_type)] = address

        return FakeCall(lambda: None, apply=_apply)


class FakeEth:
    """The slice of ``w3.eth`` the client uses, with a scripted receipt."""

    account = Account

    def __init__(
        self,
        contract: FakeChainResolver,
        code: bytes = b"\x60\x80",
        receipt_status: int = 1,
        send_error: Exception | None = None,
    ) -> None:
        self._contract = contract
        self._code = code
        self.receipt_status = receipt_status
        self.send_error = send_error
        self.raw_sent: list[bytes] = []

    def contract(self, address, abi):
        return self._contract

    def get_code(self, address):
        return self._code

    def get_transaction_count(self, address):
        return len(self.raw_sent)

    def send_raw_transaction(self, raw):
        if self.send_error is not None:
            raise self.send_error
        self.raw_sent.append(bytes(raw))
        return b"\xab" * 32

    def wait_for_transaction_receipt(self, tx_hash, timeout=None):
        return {"status": self.receipt_status, "gasUsed": 21_000}


def make_fake_w3(contract: FakeChainResolver, **kwargs) -> SimpleNamespace:
    return SimpleNamespace(eth=FakeEth(contract, **kwargs))


class FakeWriteClient(ChainResolverClient):
    """Client whose transactions are applied straight to the fake contract."""

    def __init__(self, contract: FakeChainResolver) -> None:
        super().__init__("http://fake", RESOLVER_ADDRESS, w3=make_fake_w3(contract))
        self._account = SimpleNamespace(address="0x70997970C51812dc3A010C7d01b50e0d17dc79C8")
        self.sent: list[FakeCall] = []

    def _send_tx(self, fn) -> str:
        self.sent.append(fn)
        fn.apply()
        return "0x" + "ab" * 32


@pytest.fixture
def fake_resolver() -> FakeChainResolver:
    return FakeChainResolver()


@pytest.fixture
def client(fake_resolver: FakeChainResolver) -> ChainResolverClient:
    return ChainResolverClient("http://fake", RESOLVER_ADDRESS, w3=make_fake_w3(fake_resolver))
