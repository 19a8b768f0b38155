#!/usr/bin/env python3
"""
Verify a single payment against a chain node.

Usage:
  python scripts/verify_tx.py BTC <txid> <address> <amount_sats> --confirmations 2
  python scripts/verify_tx.py ETH <hash> <address> <amount_units> \
      --contract 0xa0b8... --decimals 6

Node endpoints and credentials come from the environment or .env
(BTC_RPC_URL, ETH_RPC_URL, ...).
"""

import argparse
import os
import sys

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import structlog  # noqa: E402

from core.dependencies import init_settings  # noqa: E402
from core.tracing import init_tracer  # noqa: E402
from payments.account_verifier import AccountVerifier  # noqa: E402
from payments.chains import Chain, build_verifier  # noqa: E402
from payments.models import (  # noqa: E402
    TokenVerificationRequest,
    VerificationRequest,
)
from payments.rpc_client import RpcError  # noqa: E402
from payments.token_registry import token_registry  # noqa: E402

log = structlog.get_logger(__name__)

EXIT_ACCEPTED = 0
EXIT_REJECTED = 1
EXIT_RPC_FAILURE = 2


def non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {value}")
    return value


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.split("\n")[1])
    parser.add_argument("chain", choices=[c.value for c in Chain], type=str.upper)
    parser.add_argument("tx_id")
    parser.add_argument("receiver")
    parser.add_argument(
        "amount", type=non_negative_int, help="amount in the smallest unit"
    )
    parser.add_argument("--confirmations", type=non_negative_int, default=1)
    parser.add_argument("--contract", help="ERC-20 contract address (ETH only)")
    parser.add_argument(
        "--decimals", type=non_negative_int, help="declared token decimals"
    )
    args = parser.parse_args(argv)

    if not args.tx_id or not args.receiver:
        parser.error("tx_id and receiver must not be empty")
    if (args.contract is None) != (args.decimals is None):
        parser.error("--contract and --decimals go together")
    if args.contract and args.chain != Chain.ETH.value:
        parser.error("token transfers are only supported on ETH")
    return args


def run(argv=None) -> int:
    args = parse_args(argv)
    settings = init_settings()
    init_tracer(settings.OTEL_SERVICE_NAME)

    verifier = build_verifier(args.chain, settings)

    try:
        if args.contract:
            meta = token_registry.lookup(args.contract)
            label = f"{meta.name} ({meta.symbol})" if meta else "unlisted token"
            print(f"Token contract {args.contract}: {label}")
            assert isinstance(verifier, AccountVerifier)
            ok = verifier.verify_token(
                TokenVerificationRequest(
                    tx_id=args.tx_id,
                    receiver_address=args.receiver,
                    amount=args.amount,
                    required_confirmations=args.confirmations,
                    contract_address=args.contract,
                    expected_decimals=args.decimals,
                )
            )
        else:
            ok = verifier.verify(
                VerificationRequest(
                    tx_id=args.tx_id,
                    receiver_address=args.receiver,
                    amount=args.amount,
                    required_confirmations=args.confirmations,
                )
            )
    except RpcError as e:
        print(f"❌ RPC failure talking to {args.chain} node: {e}")
        return EXIT_RPC_FAILURE

    if ok:
        print(f"✅ {args.chain} payment {args.tx_id} verified")
        return EXIT_ACCEPTED
    print(f"❌ {args.chain} payment {args.tx_id} not verified (yet)")
    return EXIT_REJECTED


if __name__ == "__main__":
    sys.exit(run())
