"""
Prometheus metrics for payment auto-confirmation.

Counters are registered on the default registry at import time; a host
process exposes them however it already exposes Prometheus metrics.
"""

from prometheus_client import Counter, Histogram

verification_outcomes = Counter(
    "autoconfirm_verifications_total",
    "Total number of verification calls by chain and outcome",
    ["chain", "outcome"],  # outcome: accepted / rejected
)

tx_reuse_detected = Counter(
    "autoconfirm_tx_reuse_total",
    "Total number of transaction hashes presented more than once",
)

rpc_latency = Histogram(
    "autoconfirm_rpc_latency_seconds",
    "Round-trip time of JSON-RPC calls to chain nodes",
    ["method"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)
