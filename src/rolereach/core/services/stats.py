from __future__ import annotations

"""
Traversal Statistics Service.

Thread-safe counters shared by every role worker. They make coverage gaps
visible: unclassified actions and policy gaps are silent leaves in the tree,
so the counters are the only place where they show up.
"""

import logging
import threading
from collections import Counter
from typing import Dict

logger = logging.getLogger(__name__)

FETCHES = "fetches"
ITEMS = "items"
DENIED = "denied"
SUPPRESSED = "suppressed"
UNHANDLED_PREFIX = "unhandled."


class TraversalStats:
    """Named counters guarded by a lock."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()
        self._lock = threading.Lock()

    def record(self, key: str, amount: int = 1) -> None:
        with self._lock:
            self._counts[key] += amount

    def record_unhandled(self, reason: str) -> None:
        self.record(UNHANDLED_PREFIX + reason)

    def get(self, key: str) -> int:
        with self._lock:
            return self._counts[key]

    def unhandled(self) -> Dict[str, int]:
        """Unhandled-action counters keyed by reason."""
        with self._lock:
            return {
                k[len(UNHANDLED_PREFIX):]: v
                for k, v in self._counts.items()
                if k.startswith(UNHANDLED_PREFIX)
            }

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(sorted(self._counts.items()))

    def log_summary(self) -> None:
        """Emit the coverage summary at INFO level."""
        snap = self.snapshot()
        logger.info(
            f"Traversal: {snap.get(ITEMS, 0)} nodes recorded, "
            f"{snap.get(FETCHES, 0)} fetches, {snap.get(DENIED, 0)} denied, "
            f"{snap.get(SUPPRESSED, 0)} suppressed."
        )
        gaps = self.unhandled()
        if gaps:
            details = ", ".join(f"{reason}={count}" for reason, count in sorted(gaps.items()))
            logger.info(f"Traversal: unhandled actions ({details}).")
