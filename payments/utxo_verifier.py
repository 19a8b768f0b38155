"""
UTXO Verifier

One verifier serves Bitcoin, Bitcoin Cash and Litecoin: the nodes expose the
same `gettransaction` RPC, so chain identity is just configuration.
"""

import structlog

from core.logging import VerificationEvents
from payments.models import UtxoTransaction, VerificationRequest
from payments.rpc_client import RpcClient
from payments.verifier import accept, payment_matches, reject

log = structlog.get_logger(__name__)


class UtxoVerifier:
    def __init__(self, client: RpcClient, chain: str = "BTC", decimals: int = 8):
        self.client = client
        self.chain = chain
        self.decimals = decimals

    def verify(self, request: VerificationRequest) -> bool:
        log.info(
            VerificationEvents.VERIFICATION_STARTED,
            chain=self.chain,
            tx_id=request.tx_id,
        )
        result = self.client.invoke("gettransaction", [request.tx_id])
        tx = UtxoTransaction.from_rpc(result)
        if tx is None:
            return reject(self.chain, request, "tx_not_found")

        if tx.confirmations < request.required_confirmations:
            return reject(
                self.chain,
                request,
                "insufficient_confirmations",
                confirmations=tx.confirmations,
                required=request.required_confirmations,
            )

        # Each output stands alone: a payment split across outputs never
        # adds up to a match.
        for output in tx.outputs:
            if output.address != request.receiver_address:
                continue
            if payment_matches(
                output.to_smallest_unit(self.decimals),
                request.amount,
                tx.confirmations,
                request.required_confirmations,
            ):
                return accept(
                    self.chain, request, confirmations=tx.confirmations
                )

        return reject(self.chain, request, "no_matching_output")
