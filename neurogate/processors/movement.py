"""
Slider Movement Recorder

Captures pointer samples while the user drags the physics-challenge
slider. Only the most recent MAX_TRACE_SAMPLES are kept.
"""

from collections import deque
from typing import Deque

from neurogate.schemas.inputs import MAX_TRACE_SAMPLES, MovementSample, MovementTrace


class MovementRecorder:
    """Bounded FIFO of slider samples for one challenge attempt."""

    def __init__(self, capacity: int = MAX_TRACE_SAMPLES) -> None:
        self._samples: Deque[MovementSample] = deque(maxlen=capacity)

    def record(self, x: float, y: float, timestamp: float) -> None:
        self._samples.append(MovementSample(timestamp=timestamp, x=x, y=y))

    def trace(self) -> MovementTrace:
        """Immutable trace of the retained samples, oldest first."""
        return MovementTrace(samples=tuple(self._samples))

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)
