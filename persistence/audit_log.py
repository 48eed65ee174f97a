"""
NeuroGate Audit Log

Bounded, thread-safe, in-memory ring of SecurityEvents for the admin
dashboard. Process lifetime only; a restart starts with an empty log.

All mutation and every read go through a single lock, so readers never
observe a half-appended buffer. Reads return copies, newest first.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from datetime import datetime
from typing import Deque, List, Optional, Sequence

from neurogate.schemas.outputs import (
    DashboardStats,
    EventOutcome,
    SecurityEvent,
)

logger = logging.getLogger(__name__)


DEFAULT_CAPACITY = 50


class AuditLog:
    """
    Append-only ring buffer with FIFO eviction.

    Usage:
        log = AuditLog(capacity=50)
        log.record(event)
        latest = log.list()[0]
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._events: Deque[SecurityEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def record(self, event: SecurityEvent) -> None:
        """Append an event, evicting the oldest one when full."""
        with self._lock:
            self._events.append(event)
        logger.info(
            f"Event logged: User={event.user_id}, "
            f"TrustScore={event.trust_score:.2f}, Status={event.outcome.value}"
        )

    def list(self) -> List[SecurityEvent]:
        """Snapshot of the log, most recent first."""
        with self._lock:
            return list(reversed(self._events))

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


# =============================================================================
# Event Construction
# =============================================================================

def build_event(
    user_id: str,
    source_address: str,
    trust_score: float,
    outcome: EventOutcome,
    now: Optional[float] = None,
) -> SecurityEvent:
    """
    Create the SecurityEvent for a completed attempt.

    Args:
        user_id: Login identifier.
        source_address: Client IP as seen by the transport.
        trust_score: Score from the LOGIN evaluation.
        outcome: Terminal outcome of the attempt.
        now: Unix time in seconds (defaults to time.time()).
    """
    now = time.time() if now is None else now
    return SecurityEvent(
        id=f"{user_id}-{int(now * 1e9)}",
        occurred_at=int(now),
        user_id=user_id,
        source_address=source_address,
        trust_score=max(0.0, min(100.0, trust_score)),
        outcome=outcome,
        display_time=datetime.fromtimestamp(now).strftime("%Y-%m-%d %H:%M:%S"),
    )


# =============================================================================
# Dashboard Statistics
# =============================================================================

def summarize(events: Sequence[SecurityEvent]) -> DashboardStats:
    """
    Aggregate dashboard numbers over a list of events.

    threats_blocked counts both challenged and blocked attempts.
    """
    if not events:
        return DashboardStats()

    total = len(events)
    threats = sum(
        1 for e in events
        if e.outcome in (EventOutcome.BLOCKED, EventOutcome.CHALLENGED)
    )
    successes = sum(1 for e in events if e.outcome == EventOutcome.SUCCESS)
    average = sum(e.trust_score for e in events) / total

    return DashboardStats(
        total_logins=total,
        average_trust_score=round(average, 2),
        threats_blocked=threats,
        success_rate=round(successes / total * 100.0, 2),
    )
