"""
Movement Recorder Unit Tests
"""

from neurogate.processors.movement import MovementRecorder
from neurogate.schemas.inputs import MAX_TRACE_SAMPLES


class TestMovementRecorder:
    """Slider samples are kept FIFO up to the trace cap."""

    def test_records_in_order(self):
        recorder = MovementRecorder()
        recorder.record(1, 2, 10)
        recorder.record(3, 4, 20)

        trace = recorder.trace()
        assert len(trace) == 2
        assert [s.timestamp for s in trace.samples] == [10, 20]

    def test_oldest_samples_evicted_past_cap(self):
        recorder = MovementRecorder()
        for i in range(MAX_TRACE_SAMPLES + 25):
            recorder.record(i, 0, i * 10)

        trace = recorder.trace()
        assert len(trace) == MAX_TRACE_SAMPLES
        assert trace.samples[0].x == 25
        assert trace.samples[-1].x == MAX_TRACE_SAMPLES + 24

    def test_trace_is_a_copy(self):
        recorder = MovementRecorder()
        recorder.record(0, 0, 0)
        trace = recorder.trace()
        recorder.record(1, 1, 10)

        assert len(trace) == 1

    def test_clear(self):
        recorder = MovementRecorder()
        recorder.record(0, 0, 0)
        recorder.clear()
        assert len(recorder) == 0
