"""
Tests for ERC-20 transfer verification
"""

import pytest

from conftest import RECEIVER, TX_HASH, USDC, address_topic, word
from payments.account_verifier import AccountVerifier
from payments.evm_codec import TRANSFER_EVENT_TOPIC
from payments.models import TokenVerificationRequest
from payments.rpc_client import RpcFormatError

SENDER = "0x1111111111111111111111111111111111111111"
APPROVAL_TOPIC = "0x8c5be1e5ebec7d5bd14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925"
FIVE_USDC = 5_000_000


def request(amount=FIVE_USDC, confirmations=2, receiver=RECEIVER, decimals=6):
    return TokenVerificationRequest(
        tx_id=TX_HASH,
        receiver_address=receiver,
        amount=amount,
        required_confirmations=confirmations,
        contract_address=USDC,
        expected_decimals=decimals,
    )


def transfer_log(
    contract=USDC, to=RECEIVER, value=FIVE_USDC, topic0=TRANSFER_EVENT_TOPIC
):
    return {
        "address": contract,
        "topics": [topic0, address_topic(SENDER), address_topic(to)],
        "data": word(value),
    }


def node(*logs, decimals=6, code="0x6080604052", block="0x100", head="0x101"):
    return {
        "eth_getCode": code,
        "eth_call": word(decimals),
        "eth_getTransactionReceipt": {
            "blockNumber": block,
            "status": "0x1",
            "logs": list(logs),
        },
        "eth_blockNumber": head,
    }


def test_token_transfer_verified(make_rpc):
    rpc = make_rpc(node(transfer_log()))

    assert AccountVerifier(rpc).verify_token(request()) is True
    assert rpc.methods == [
        "eth_getCode",
        "eth_call",
        "eth_getTransactionReceipt",
        "eth_blockNumber",
    ]


def test_rpc_parameters(make_rpc):
    rpc = make_rpc(node(transfer_log()))

    AccountVerifier(rpc).verify_token(request())

    assert rpc.calls[0] == ("eth_getCode", [USDC, "latest"])
    assert rpc.calls[1] == ("eth_call", [{"to": USDC, "data": "0x313ce567"}, "latest"])
    assert rpc.calls[2] == ("eth_getTransactionReceipt", [TX_HASH])


def test_no_contract_code(make_rpc):
    rpc = make_rpc(node(transfer_log(), code="0x"))

    assert AccountVerifier(rpc).verify_token(request()) is False
    assert rpc.methods == ["eth_getCode"]


def test_decimals_mismatch_rejects_before_reading_logs(make_rpc):
    rpc = make_rpc(node(transfer_log(), decimals=18))

    assert AccountVerifier(rpc).verify_token(request(decimals=6)) is False
    assert "eth_getTransactionReceipt" not in rpc.methods


def test_empty_decimals_result(make_rpc):
    rpc = make_rpc(dict(node(transfer_log()), eth_call="0x"))

    assert AccountVerifier(rpc).verify_token(request()) is False


def test_malformed_decimals_is_a_format_error(make_rpc):
    rpc = make_rpc(dict(node(transfer_log()), eth_call="0xnothex"))

    with pytest.raises(RpcFormatError):
        AccountVerifier(rpc).verify_token(request())


def test_missing_receipt(make_rpc):
    rpc = make_rpc(dict(node(), eth_getTransactionReceipt=None))

    assert AccountVerifier(rpc).verify_token(request()) is False


def test_insufficient_confirmations(make_rpc):
    rpc = make_rpc(node(transfer_log(), block="0x100", head="0x100"))

    assert AccountVerifier(rpc).verify_token(request(confirmations=2)) is False


def test_log_from_other_contract_is_skipped(make_rpc):
    spoof = "0x2222222222222222222222222222222222222222"
    rpc = make_rpc(node(transfer_log(contract=spoof)))

    assert AccountVerifier(rpc).verify_token(request()) is False


def test_non_transfer_event_is_skipped(make_rpc):
    rpc = make_rpc(node(transfer_log(topic0=APPROVAL_TOPIC)))

    assert AccountVerifier(rpc).verify_token(request()) is False


def test_log_with_too_few_topics_is_skipped(make_rpc):
    short = transfer_log()
    short["topics"] = short["topics"][:2]
    rpc = make_rpc(node(short))

    assert AccountVerifier(rpc).verify_token(request()) is False


def test_transfer_to_someone_else(make_rpc):
    rpc = make_rpc(node(transfer_log(to=SENDER)))

    assert AccountVerifier(rpc).verify_token(request()) is False


def test_wrong_amount(make_rpc):
    rpc = make_rpc(node(transfer_log(value=FIVE_USDC - 1)))

    assert AccountVerifier(rpc).verify_token(request()) is False


def test_matching_log_found_after_non_matching_ones(make_rpc):
    rpc = make_rpc(
        node(
            transfer_log(value=1),
            transfer_log(contract="0x" + "33" * 20),
            transfer_log(),
        )
    )

    assert AccountVerifier(rpc).verify_token(request()) is True


def test_checksummed_addresses_match(make_rpc):
    checksummed_usdc = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
    log = transfer_log(contract=checksummed_usdc)
    log["topics"] = [t.upper().replace("0X", "0x") for t in log["topics"]]
    rpc = make_rpc(node(log))

    assert AccountVerifier(rpc).verify_token(request()) is True


def test_log_with_empty_data_is_skipped(make_rpc):
    nft_style = transfer_log()
    nft_style["data"] = "0x"
    rpc = make_rpc(node(nft_style))

    assert AccountVerifier(rpc).verify_token(request()) is False
