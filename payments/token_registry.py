"""
Token Registry

Known ERC-20 contracts and the (name, symbol) a trader must quote for them.
The table is built once at import and exposed read-only, so it is shared
across threads without locking.
"""

from types import MappingProxyType
from typing import Mapping

import structlog

from core.logging import VerificationEvents
from payments.models import TokenMetadata

log = structlog.get_logger(__name__)

KNOWN_TOKENS: Mapping[str, TokenMetadata] = MappingProxyType(
    {
        # DAI Stablecoin
        "0x6b175474e89094c44da98b954eedeac495271d0f": TokenMetadata(
            "Dai Stablecoin", "DAI-ERC20"
        ),
        # USD Coin
        "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48": TokenMetadata(
            "USD Coin", "USDC"
        ),
        # Tether USD
        "0xdac17f958d2ee523a2206206994597c13d831ec7": TokenMetadata(
            "Tether USD", "USDT"
        ),
        # TrueUSD
        "0x0000000000085d4780b73119b644ae5ecd22b376": TokenMetadata(
            "TrueUSD", "TUSD"
        ),
    }
)


class TokenRegistry:
    def __init__(self, tokens: Mapping[str, TokenMetadata] | None = None):
        source = KNOWN_TOKENS if tokens is None else tokens
        self._tokens = MappingProxyType(
            {address.lower(): meta for address, meta in source.items()}
        )

    @property
    def tokens(self) -> Mapping[str, TokenMetadata]:
        return self._tokens

    def lookup(self, contract_address: str | None) -> TokenMetadata | None:
        if not contract_address:
            return None
        return self._tokens.get(contract_address.lower())

    def verify_contract_address(
        self,
        contract_address: str | None,
        token_name: str | None,
        token_symbol: str | None,
    ) -> bool:
        """True only for a known contract quoted with its exact name and symbol."""
        meta = self.lookup(contract_address)
        if meta is None:
            log.info(VerificationEvents.TOKEN_UNKNOWN, contract=contract_address)
            return False
        return meta.name == token_name and meta.symbol == token_symbol


token_registry = TokenRegistry()
