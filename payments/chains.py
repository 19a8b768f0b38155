"""
Chain selection

Chains are data, not types: every Bitcoin-family chain shares UtxoVerifier
and differs only in endpoint, credentials and unit name. The trade's payment
method picks a Chain; build_verifier turns it into one of the two verifier
variants.
"""

from dataclasses import dataclass
from enum import Enum

from core.settings import Settings
from payments.account_verifier import AccountVerifier
from payments.rpc_client import JsonRpcClient
from payments.utxo_verifier import UtxoVerifier


class ChainFamily(str, Enum):
    UTXO = "utxo"
    ACCOUNT = "account"


class Chain(str, Enum):
    BTC = "BTC"
    BCH = "BCH"
    LTC = "LTC"
    ETH = "ETH"


@dataclass(frozen=True)
class ChainParams:
    family: ChainFamily
    unit: str
    decimals: int


CHAIN_PARAMS = {
    Chain.BTC: ChainParams(ChainFamily.UTXO, "satoshi", 8),
    Chain.BCH: ChainParams(ChainFamily.UTXO, "satoshi", 8),
    Chain.LTC: ChainParams(ChainFamily.UTXO, "litoshi", 8),
    Chain.ETH: ChainParams(ChainFamily.ACCOUNT, "wei", 18),
}

Verifier = UtxoVerifier | AccountVerifier


def build_verifier(chain: Chain | str, settings: Settings) -> Verifier:
    chain = Chain(chain.upper() if isinstance(chain, str) else chain)
    params = CHAIN_PARAMS[chain]
    url, user, password = settings.rpc_endpoint(chain.value)

    if params.family is ChainFamily.UTXO:
        client = JsonRpcClient.bitcoin(
            url, user, password, timeout=settings.RPC_TIMEOUT_SECONDS
        )
        return UtxoVerifier(client, chain=chain.value, decimals=params.decimals)

    client = JsonRpcClient.ethereum(url, timeout=settings.RPC_TIMEOUT_SECONDS)
    return AccountVerifier(client, chain=chain.value)
