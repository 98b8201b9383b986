import pytest

from videoocr.core.state import PipelineState
from videoocr.core.stats import StatsAggregator, StatsReport


def _run(agg, clock, fps, seconds):
    reports = []
    for i in range(1, fps * seconds + 1):
        clock.now = i / fps
        report = agg.on_frame()
        if report is not None:
            reports.append(report)
    return reports


def test_one_report_per_second(clock):
    state = PipelineState()
    agg = StatsAggregator(state, interval=1.0, clock=clock)
    reports = _run(agg, clock, fps=10, seconds=5)
    assert len(reports) == 5
    for report in reports:
        assert report.fps == pytest.approx(10)


def test_hidden_stats_are_not_reported_but_counter_resets(clock):
    state = PipelineState()
    state.stats_hidden.store(True)
    agg = StatsAggregator(state, interval=1.0, clock=clock)
    assert _run(agg, clock, fps=10, seconds=3) == []
    assert state.fps_frame_counter.load() == 0


def test_paused_suppresses_report(clock):
    state = PipelineState()
    state.paused.store(True)
    agg = StatsAggregator(state, interval=1.0, clock=clock)
    assert _run(agg, clock, fps=5, seconds=2) == []


def test_slow_iteration_does_not_compound(clock):
    state = PipelineState()
    agg = StatsAggregator(state, interval=1.0, clock=clock)
    clock.now = 2.5
    report = agg.on_frame()
    assert report.fps == pytest.approx(1 / 2.5)
    # el siguiente tick es 1 s después de la observación, no en t=2
    clock.now = 3.0
    assert agg.on_frame() is None
    clock.now = 3.5
    assert agg.on_frame() is not None


def test_report_includes_latencies(clock):
    state = PipelineState()
    state.last_capture_latency.store(0.012)
    state.last_recognition_latency.store(0.25)
    agg = StatsAggregator(state, interval=1.0, clock=clock)
    clock.now = 1.0
    report = agg.on_frame()
    assert report == StatsReport(fps=1.0, capture_latency=0.012, recognition_latency=0.25)
    assert report.format() == "# FPS: 1.0 (last capture ms: 12, read ms: 250)"


def test_no_recognition_yet_reports_minus_one():
    assert "read ms: -1" in StatsReport(30.0, 0.001, -1.0).format()
