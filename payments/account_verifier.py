"""
Account Verifier

Verifies native ether transfers and ERC-20 token transfers on an
Ethereum-style node. Native transfers are read from the transaction itself;
token transfers are read from the Transfer events in the receipt, after
checking that the contract exists and reports the decimals the caller
expects.
"""

from typing import Any

import structlog

from core.logging import VerificationEvents
from payments.evm_codec import (
    DECIMALS_SELECTOR,
    TRANSFER_EVENT_TOPIC,
    hex_to_int,
    same_address,
    topic_to_address,
)
from payments.models import (
    AccountTransaction,
    TokenVerificationRequest,
    TransferLog,
    VerificationRequest,
)
from payments.rpc_client import RpcClient
from payments.verifier import accept, confirmations_between, reject

log = structlog.get_logger(__name__)


class AccountVerifier:
    def __init__(self, client: RpcClient, chain: str = "ETH"):
        self.client = client
        self.chain = chain

    def verify(self, request: VerificationRequest) -> bool:
        """Verify a native transfer: recipient, exact value, then depth."""
        log.info(
            VerificationEvents.VERIFICATION_STARTED,
            chain=self.chain,
            tx_id=request.tx_id,
        )
        result = self.client.invoke("eth_getTransactionByHash", [request.tx_id])
        if result is None:
            return reject(self.chain, request, "tx_not_found")

        tx = AccountTransaction.from_rpc(result)
        if tx is None:
            return reject(self.chain, request, "missing_field")
        if not same_address(tx.to, request.receiver_address):
            return reject(self.chain, request, "receiver_mismatch", to=tx.to)
        if tx.value != request.amount:
            return reject(self.chain, request, "amount_mismatch", value=tx.value)

        receipt = self.client.invoke("eth_getTransactionReceipt", [request.tx_id])
        if self._reverted(receipt):
            return reject(self.chain, request, "tx_reverted")

        confirmations = self.confirmations(receipt)
        if confirmations < request.required_confirmations:
            return reject(
                self.chain,
                request,
                "insufficient_confirmations",
                confirmations=confirmations,
                required=request.required_confirmations,
            )
        return accept(self.chain, request, confirmations=confirmations)

    def verify_token(self, request: TokenVerificationRequest) -> bool:
        """Verify an ERC-20 transfer through the Transfer events it emitted.

        Each check short-circuits: contract deployed, decimals equal to the
        declared value, receipt deep enough, then a Transfer log from the
        expected contract paying the exact amount to the receiver.
        """
        log.info(
            VerificationEvents.VERIFICATION_STARTED,
            chain=self.chain,
            tx_id=request.tx_id,
            contract=request.contract_address,
        )
        contract = request.contract_address

        code = self.client.invoke("eth_getCode", [contract, "latest"])
        if not code or code.lower() == "0x":
            return reject(self.chain, request, "contract_not_deployed")

        raw_decimals = self.client.invoke(
            "eth_call", [{"to": contract, "data": DECIMALS_SELECTOR}, "latest"]
        )
        if not raw_decimals or raw_decimals.lower() == "0x":
            return reject(self.chain, request, "decimals_unavailable")
        decimals = hex_to_int(raw_decimals, "decimals")
        if decimals != request.expected_decimals:
            return reject(
                self.chain,
                request,
                "decimals_mismatch",
                decimals=decimals,
                expected=request.expected_decimals,
            )

        receipt = self.client.invoke("eth_getTransactionReceipt", [request.tx_id])
        if not isinstance(receipt, dict):
            return reject(self.chain, request, "receipt_not_found")

        confirmations = self.confirmations(receipt)
        if confirmations < request.required_confirmations:
            return reject(
                self.chain,
                request,
                "insufficient_confirmations",
                confirmations=confirmations,
                required=request.required_confirmations,
            )

        receiver = request.receiver_address.lower()
        for entry in receipt.get("logs") or ():
            transfer = TransferLog.from_rpc(entry)
            if transfer is None:
                continue
            if not same_address(transfer.emitting_address, contract):
                continue
            if len(transfer.topics) < 3:
                continue
            if str(transfer.topics[0]).lower() != TRANSFER_EVENT_TOPIC:
                continue
            if topic_to_address(transfer.topics[2]) != receiver:
                continue
            if transfer.data.lower() == "0x":
                continue
            if hex_to_int(transfer.data, "data") == request.amount:
                return accept(
                    self.chain,
                    request,
                    confirmations=confirmations,
                    contract=contract,
                )

        return reject(self.chain, request, "no_matching_transfer_log")

    def confirmations(self, receipt: Any) -> int:
        """Blocks on top of (and including) the receipt's block; 0 if pending."""
        if not isinstance(receipt, dict) or receipt.get("blockNumber") is None:
            return 0
        mined = hex_to_int(receipt["blockNumber"], "blockNumber")
        latest = hex_to_int(self.client.invoke("eth_blockNumber", []), "blockNumber")
        return confirmations_between(mined, latest)

    @staticmethod
    def _reverted(receipt: Any) -> bool:
        # receipts before Byzantium carry no status
        if not isinstance(receipt, dict) or receipt.get("status") is None:
            return False
        return hex_to_int(receipt["status"], "status") == 0
