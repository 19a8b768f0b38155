"""
Reuse Detector

Remembers every accepted transaction hash for the life of the process so
the same settled payment cannot be presented as proof for a second trade.
"""

import threading
from typing import Protocol

import structlog

from core.logging import VerificationEvents
from core.metrics import tx_reuse_detected

log = structlog.get_logger(__name__)


class AddressReuseNotifier(Protocol):
    def set_address_reuse_detected(self, detected: bool) -> None: ...


class ReuseDetector:
    def __init__(self, notifier: AddressReuseNotifier):
        self.notifier = notifier
        self._lock = threading.Lock()
        self._seen: set[str] = set()
        self._reported: set[str] = set()

    def check_and_record(self, tx_hash: str | None) -> bool:
        """Record tx_hash and return whether it had been recorded before.

        The check and the insert happen under one lock, so of several
        concurrent callers with the same hash exactly one sees False.
        """
        if not tx_hash:
            return False
        key = tx_hash.strip().lower()

        with self._lock:
            if key not in self._seen:
                self._seen.add(key)
                return False
            first_report = key not in self._reported
            self._reported.add(key)

        if first_report:
            log.warning(VerificationEvents.TX_REUSED, tx_hash=key)
            tx_reuse_detected.inc()
            self.notifier.set_address_reuse_detected(True)
        return True

    def __contains__(self, tx_hash: str) -> bool:
        with self._lock:
            return tx_hash.strip().lower() in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
