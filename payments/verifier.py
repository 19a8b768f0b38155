"""
Verification Contract

verify(request) answers True only when the transaction exists, pays the
receiver, pays the exact amount and is buried deep enough. Every other
outcome, including "the node has not seen it yet", is False. RPC failures
raise and are left to the caller.
"""

from typing import Protocol, runtime_checkable

import structlog

from core.logging import VerificationEvents
from core.metrics import verification_outcomes
from payments.models import VerificationRequest

log = structlog.get_logger(__name__)


@runtime_checkable
class PaymentVerifier(Protocol):
    chain: str

    def verify(self, request: VerificationRequest) -> bool: ...


def accept(chain: str, request: VerificationRequest, **details) -> bool:
    log.info(
        VerificationEvents.VERIFICATION_ACCEPTED,
        chain=chain,
        tx_id=request.tx_id,
        receiver=request.receiver_address,
        amount=request.amount,
        **details,
    )
    verification_outcomes.labels(chain=chain, outcome="accepted").inc()
    return True


def reject(chain: str, request: VerificationRequest, reason: str, **details) -> bool:
    log.info(
        VerificationEvents.VERIFICATION_REJECTED,
        chain=chain,
        tx_id=request.tx_id,
        reason=reason,
        **details,
    )
    verification_outcomes.labels(chain=chain, outcome="rejected").inc()
    return False


def confirmations_between(mined_block: int, latest_block: int) -> int:
    """Depth of a mined block, counting the block itself."""
    # a lagging node can report a head behind the receipt's block
    return max(0, latest_block - mined_block + 1)


def payment_matches(
    paid: int | None, expected: int, confirmations: int, required: int
) -> bool:
    """Exact amount at sufficient depth; a missing amount never matches."""
    return paid is not None and paid == expected and confirmations >= required
