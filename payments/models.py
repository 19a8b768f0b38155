"""
Payment Verification Models

Requests are immutable pydantic models built per call. Transaction records
are parsed fresh from each RPC response and never cached; their from_rpc()
constructors return None when a field the verifier needs is absent or null,
which the verifiers treat as "not visible yet".
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from payments.evm_codec import hex_to_int
from payments.rpc_client import RpcFormatError

NonNegativeInt = Annotated[int, Field(strict=True, ge=0)]


class VerificationRequest(BaseModel):
    """Expected payment: amount is in the chain's smallest unit."""

    tx_id: str = Field(min_length=1)
    receiver_address: str = Field(min_length=1)
    amount: NonNegativeInt
    required_confirmations: NonNegativeInt = 1

    model_config = ConfigDict(frozen=True)


class TokenVerificationRequest(VerificationRequest):
    """Expected ERC-20 payment; amount is in the token's base units."""

    contract_address: str = Field(min_length=1)
    expected_decimals: NonNegativeInt


@dataclass(frozen=True)
class TokenMetadata:
    name: str
    symbol: str


@dataclass(frozen=True)
class UtxoOutput:
    address: str
    value: Decimal

    def to_smallest_unit(self, decimals: int) -> int:
        """Fixed-point shift, truncating toward zero."""
        return int(self.value.scaleb(decimals))


@dataclass(frozen=True)
class UtxoTransaction:
    confirmations: int
    outputs: tuple[UtxoOutput, ...]

    @classmethod
    def from_rpc(cls, result: Any) -> "UtxoTransaction | None":
        """Build from a `gettransaction` result."""
        if not isinstance(result, dict):
            return None
        confirmations = result.get("confirmations")
        details = result.get("details")
        if confirmations is None or details is None:
            return None
        if isinstance(confirmations, bool) or not isinstance(confirmations, int):
            raise RpcFormatError(
                f"confirmations is not an integer: {confirmations!r}", "gettransaction"
            )
        if not isinstance(details, list):
            raise RpcFormatError(
                f"details is not a list: {details!r}", "gettransaction"
            )

        outputs = []
        for detail in details:
            if not isinstance(detail, dict):
                continue
            address = detail.get("address")
            amount = detail.get("amount")
            # data carriers and watch-only entries have no address
            if address is None or amount is None:
                continue
            if isinstance(amount, bool) or not isinstance(amount, (Decimal, int, float)):
                raise RpcFormatError(
                    f"amount is not a number: {amount!r}", "gettransaction"
                )
            if not isinstance(amount, Decimal):
                amount = Decimal(str(amount))
            outputs.append(UtxoOutput(address=address, value=amount))
        return cls(confirmations=confirmations, outputs=tuple(outputs))


@dataclass(frozen=True)
class AccountTransaction:
    to: str
    value: int

    @classmethod
    def from_rpc(cls, result: Any) -> "AccountTransaction | None":
        """Build from an `eth_getTransactionByHash` result."""
        if not isinstance(result, dict):
            return None
        to = result.get("to")
        value = result.get("value")
        # contract creations have no recipient
        if to is None or value is None:
            return None
        return cls(to=to, value=hex_to_int(value, "value"))


@dataclass(frozen=True)
class TransferLog:
    emitting_address: str
    topics: tuple[str, ...]
    data: str

    @classmethod
    def from_rpc(cls, entry: Any) -> "TransferLog | None":
        if not isinstance(entry, dict):
            return None
        address = entry.get("address")
        if address is None:
            return None
        return cls(
            emitting_address=address,
            topics=tuple(entry.get("topics") or ()),
            data=entry.get("data") or "0x",
        )
