"""
Constants shared by the ChainResolver tools.

The key prefix and display suffix are part of the deployed resolver's
interface and must not change.
"""

from __future__ import annotations

from typing import Any

# Reverse lookups are keyed by text(..., "chain-name:<identifier>").
CHAIN_NAME_KEY_PREFIX: str = "chain-name:"

# Forward lookups return the chain identifier (hex, no 0x) under this key.
CHAIN_ID_TEXT_KEY: str = "chain-id"

DISPLAY_SUFFIX: str = ".cid.eth"

# Reverse lookups ignore the node; any label under cid.eth works as the name.
ZERO_NODE: bytes = b"\x00" * 32
DEFAULT_DNS_NAME: str = "x.cid.eth"

TEXT_SIGNATURE: str = "text(bytes32,string)"
DATA_SIGNATURE: str = "data(bytes32,string)"

ETH_COIN_TYPE: int = 60

# Default public RPC endpoints keyed by EIP-155 chain ID.
CHAIN_RPC_URLS: dict[int, str] = {
    1: "https://ethereum-rpc.publicnode.com",
    10: "https://mainnet.optimism.io",
    8453: "https://mainnet.base.org",
    42161: "https://arb1.arbitrum.io/rpc",
    11155111: "https://ethereum-sepolia-rpc.publicnode.com",
    11155420: "https://sepolia.optimism.io",
    84532: "https://sepolia.base.org",
    31337: "http://127.0.0.1:8545",
}

CHAIN_RESOLVER_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "resolve",
        "stateMutability": "view",
        "inputs": [
            {"name": "name", "type": "bytes"},
            {"name": "data", "type": "bytes"},
        ],
        "outputs": [{"name": "", "type": "bytes"}],
    },
    {
        "type": "function",
        "name": "chainName",
        "stateMutability": "view",
        "inputs": [{"name": "chainIdBytes", "type": "bytes"}],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "function",
        "name": "chainId",
        "stateMutability": "view",
        "inputs": [{"name": "labelHash", "type": "bytes32"}],
        "outputs": [{"name": "", "type": "bytes"}],
    },
    {
        "type": "function",
        "name": "register",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "chainName", "type": "string"},
            {"name": "owner", "type": "address"},
            {"name": "chainIdBytes", "type": "bytes"},
        ],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "setAddr",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "labelHash", "type": "bytes32"},
            {"name": "coinType", "type": "uint256"},
            {"name": "a", "type": "address"},
        ],
        "outputs": [],
    },
]
