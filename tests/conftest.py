"""Test configuration and fixtures."""

import os

import pytest

from core.settings import Settings

USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
RECEIVER = "0x52908400098527886e0f7030069857d2e4169ee7"
TX_HASH = "0x88df016429689c079f3b2f6ad39fa052532c56795b733da78a91ebe6a713944b"


class FakeRpcClient:
    """Scripted RpcClient: maps method name to a result, exception or callable."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def invoke(self, method, params=()):
        self.calls.append((method, list(params)))
        if method not in self.responses:
            raise AssertionError(f"unexpected RPC call: {method}")
        response = self.responses[method]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(*params)
        return response

    @property
    def methods(self):
        return [method for method, _ in self.calls]


def word(value: int) -> str:
    """ABI-encode an integer as a 0x-prefixed 32-byte word."""
    return "0x" + format(value, "064x")


def address_topic(address: str) -> str:
    return "0x" + address[2:].lower().rjust(64, "0")


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Setup test environment variables before each test."""
    original_env = dict(os.environ)

    os.environ.update(
        {
            "ENVIRONMENT": "test",
            "BTC_RPC_URL": "http://127.0.0.1:8332",
            "BTC_RPC_USER": "rpcuser",
            "BTC_RPC_PASSWORD": "rpcpass",
            "LTC_RPC_URL": "http://127.0.0.1:9332",
            "ETH_RPC_URL": "http://127.0.0.1:8545",
            "DISABLE_TRACING": "true",
        }
    )
    os.environ.pop("BCH_RPC_URL", None)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_settings():
    return Settings(
        ENVIRONMENT="test",
        BTC_RPC_URL="http://127.0.0.1:8332",
        BTC_RPC_USER="rpcuser",
        BTC_RPC_PASSWORD="rpcpass",
        BCH_RPC_URL=None,
        LTC_RPC_URL="http://127.0.0.1:9332",
        ETH_RPC_URL="http://127.0.0.1:8545",
        RPC_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def make_rpc():
    return FakeRpcClient
