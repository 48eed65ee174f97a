"""
NeuroGate Processors

Public exports for telemetry capture and pointer feature math.
"""

from neurogate.processors.movement import MovementRecorder
from neurogate.processors.pointer import (
    acceleration_variance,
    estimate_entropy,
    population_variance,
)
from neurogate.processors.telemetry import TelemetryAggregator

__all__ = [
    "TelemetryAggregator",
    "MovementRecorder",
    "estimate_entropy",
    "acceleration_variance",
    "population_variance",
]
