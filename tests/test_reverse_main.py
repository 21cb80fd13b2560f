from __future__ import annotations

import pytest

from conftest import RESOLVER_ADDRESS, FakeChainResolver, make_fake_w3
from reverse import main as reverse_main
from reverse.config import ReverseConfig
from shared.errors import MalformedIdentifierError, ResolverTransportError
from shared.key_codec import KeyVariant
from shared.resolver_client import ChainResolverClient, ReverseResult


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("KEY_VARIANT", "CHAIN_RESOLVER_ADDRESS", "RESOLVER_ADDRESS"):
        monkeypatch.delenv(name, raising=False)


def _client(fake: FakeChainResolver) -> ChainResolverClient:
    return ChainResolverClient("http://fake", RESOLVER_ADDRESS, w3=make_fake_w3(fake))


def test_chain_identifier_from_input():
    assert reverse_main.chain_identifier_from_input("10") == b"\x0a"
    assert reverse_main.chain_identifier_from_input("0xa", erc7930=True).hex() == "00010000010a00"
    with pytest.raises(MalformedIdentifierError):
        reverse_main.chain_identifier_from_input("ten")


def test_run_uses_configured_variant():
    fake = FakeChainResolver()
    fake.seed("optimism", b"\x0a")
    config = ReverseConfig(_env_file=None, key_variant=KeyVariant.RAW_BYTE)

    result = reverse_main.run(config, b"\x0a", client=_client(fake))

    assert result.key == "chain-name:\n"
    assert result.display_name == "optimism.cid.eth"


def test_format_result_hex_variant():
    result = ReverseResult(b"\x0a", "chain-name:0a", "optimism", "optimism", "optimism")
    assert reverse_main.format_result(result, KeyVariant.HEX_SUFFIX) == [
        "Lookup key: chain-name:0a",
        "Chain name (text): optimism",
        "Chain name (data): optimism",
        "Direct read (chainName): optimism",
        "Display name: optimism.cid.eth",
    ]


def test_format_result_raw_variant_without_direct():
    result = ReverseResult(b"\x0a", "chain-name:\n", "", "", None)
    lines = reverse_main.format_result(result, KeyVariant.RAW_BYTE)
    assert lines[0] == "Lookup key: chain-name: + 0x0a (raw bytes)"
    assert lines[-1] == "Display name: .cid.eth"
    assert not any(line.startswith("Direct read") for line in lines)


def test_main_prints_names(monkeypatch, capsys):
    fake = FakeChainResolver()
    fake.seed("optimism", b"\x0a")
    seen = {}
    real_run = reverse_main.run

    def fake_run(config, chain_id, include_direct=True):
        seen["variant"] = config.key_variant
        seen["include_direct"] = include_direct
        return real_run(config, chain_id, include_direct, client=_client(fake))

    monkeypatch.setattr(reverse_main, "run", fake_run)

    assert reverse_main.main(["10", "--variant", "raw", "--no-direct"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert "Chain name (text): optimism" in out
    assert "Chain name (data): optimism" in out
    assert "Display name: optimism.cid.eth" in out
    assert seen == {"variant": KeyVariant.RAW_BYTE, "include_direct": False}


def test_main_rejects_malformed_chain_id():
    assert reverse_main.main(["not-a-number"]) == 2


def test_main_reports_transport_failure(monkeypatch, capsys):
    def fake_run(config, chain_id, include_direct=True):
        raise ResolverTransportError("connection refused")

    monkeypatch.setattr(reverse_main, "run", fake_run)

    assert reverse_main.main(["0xa"]) == 1
    assert "connection refused" in capsys.readouterr().err


def test_main_without_resolver_address(monkeypatch, capsys):
    monkeypatch.setenv("RPC_URL", "http://127.0.0.1:1")
    assert reverse_main.main(["10"]) == 1
    assert "ChainResolver address is required." in capsys.readouterr().err


def test_main_reports_invalid_configuration(monkeypatch, capsys):
    monkeypatch.setenv("KEY_VARIANT", "base64")

    assert reverse_main.main(["10"]) == 1
    assert "key_variant" in capsys.readouterr().err
