"""Hex decoding for Ethereum JSON-RPC quantities, ABI words and log topics."""

import re

from web3 import Web3

from payments.rpc_client import RpcFormatError

# keccak256("Transfer(address,address,uint256)")
TRANSFER_EVENT_TOPIC = (
    "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
)

# First four bytes of keccak256("decimals()")
DECIMALS_SELECTOR = "0x313ce567"

_WORD_HEX_CHARS = 64
_HEX_QUANTITY = re.compile(r"0x[0-9a-f]+", re.IGNORECASE)


def hex_to_int(value, field: str = "quantity") -> int:
    """Decode a 0x-prefixed hex string into an unsigned integer."""
    if not isinstance(value, str) or not _HEX_QUANTITY.fullmatch(value):
        raise RpcFormatError(f"{field} is not a 0x-prefixed hex string: {value!r}")
    return Web3.to_int(hexstr=value)


def topic_to_address(topic) -> str:
    """Lowercase address held in the low 20 bytes of a 32-byte topic."""
    if not isinstance(topic, str) or len(topic) != 2 + _WORD_HEX_CHARS:
        raise RpcFormatError(f"topic is not a 32-byte word: {topic!r}")
    hex_to_int(topic, "topic")
    return "0x" + topic[-40:].lower()


def same_address(a, b) -> bool:
    """Case-insensitive comparison for hex-addressed chains."""
    if not isinstance(a, str) or not isinstance(b, str):
        return False
    return a.lower() == b.lower()
