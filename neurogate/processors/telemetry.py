"""
NeuroGate Telemetry Aggregator

Session-scoped accumulator for login-page behavioral telemetry.
Turns raw key and pointer events into the flight/dwell timings and
pointer path that the Risk Scorer consumes.

Each login attempt owns its own aggregator. Reads go through snapshot(),
which returns an immutable TelemetrySnapshot; the live buffers are never
handed out.
"""

import logging
import time
from typing import List, Optional

from neurogate.processors.pointer import estimate_entropy
from neurogate.schemas.inputs import (
    KeyboardEvent,
    KeyEventType,
    KeystrokeDynamics,
    MouseEvent,
    MouseEventType,
    PointerSample,
    TelemetrySnapshot,
)

logger = logging.getLogger(__name__)


def _now_ms() -> float:
    return time.time() * 1000.0


class TelemetryAggregator:
    """
    Accumulates keystroke dynamics and pointer samples for one session.

    Keystroke timing:
    - DOWN: flight time = now - last key release (skipped for the first key)
    - UP:   dwell time  = now - last key press

    Pointer:
    - MOVE appends a PointerSample; CLICK does not extend the path.
    """

    def __init__(self, started_at_ms: Optional[float] = None) -> None:
        self.reset(started_at_ms)

    def reset(self, started_at_ms: Optional[float] = None) -> None:
        """Start a new session, discarding everything recorded so far."""
        self._flight_times: List[float] = []
        self._dwell_times: List[float] = []
        self._keys: List[str] = []
        self._path: List[PointerSample] = []
        self._last_key_up: Optional[float] = None
        self._last_key_down: Optional[float] = None
        self._started_at = started_at_ms if started_at_ms is not None else _now_ms()

    # -------------------------------------------------------------------------
    # Event Handling
    # -------------------------------------------------------------------------

    def process_event(self, event) -> None:
        """Dispatch a KeyboardEvent or MouseEvent."""
        if isinstance(event, KeyboardEvent):
            self.process_key_event(event)
        elif isinstance(event, MouseEvent):
            self.process_mouse_event(event)
        else:
            raise TypeError(f"Unsupported telemetry event: {type(event).__name__}")

    def process_key_event(self, event: KeyboardEvent) -> None:
        if event.event_type == KeyEventType.DOWN:
            if self._last_key_up is not None:
                self._flight_times.append(event.timestamp - self._last_key_up)
            self._keys.append(event.key)
            self._last_key_down = event.timestamp
        else:
            if self._last_key_down is not None:
                self._dwell_times.append(event.timestamp - self._last_key_down)
            self._last_key_up = event.timestamp

    def process_mouse_event(self, event: MouseEvent) -> None:
        if event.event_type != MouseEventType.MOVE:
            return
        if self._path and event.timestamp < self._path[-1].timestamp_ms:
            logger.debug(
                f"Dropping out-of-order pointer sample at {event.timestamp:.0f}ms"
            )
            return
        self._path.append(PointerSample(
            x=event.x,
            y=event.y,
            timestamp_ms=event.timestamp,
            pressure=event.pressure,
        ))

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    def snapshot(self, now_ms: Optional[float] = None) -> TelemetrySnapshot:
        """Return an immutable copy of everything captured so far."""
        now = now_ms if now_ms is not None else _now_ms()
        path = tuple(self._path)
        return TelemetrySnapshot(
            keystroke_dynamics=KeystrokeDynamics(
                flight_times=tuple(self._flight_times),
                dwell_times=tuple(self._dwell_times),
                keys=tuple(self._keys),
            ),
            pointer_path=path,
            entropy_score=estimate_entropy(path),
            session_duration_ms=max(0.0, now - self._started_at),
            captured_at=now,
        )

    @property
    def keystroke_count(self) -> int:
        return len(self._keys)

    @property
    def pointer_sample_count(self) -> int:
        return len(self._path)
