import threading

import pytest

from videoocr.config import PipelineConfig
from videoocr.core import events
from videoocr.core.errors import EndOfStream, FrameReadError
from videoocr.core.events import EventBus
from videoocr.core.jobs import Frame, OcrText
from videoocr.core.pipeline import EXIT_FAILURE, EXIT_OK, PipelineCoordinator, PipelineStatus
from videoocr.core.regions import Region, RegionModel
from videoocr.gui.display import KEY, UiEvent


def _coordinator(fakes, source, display, engine=None, **cfg_kwargs):
    cfg_kwargs.setdefault("frame_delay_ms", 0)
    cfg_kwargs.setdefault("ocr_interval", 1)
    cfg_kwargs.setdefault("shutdown_timeout", 5.0)
    cfg = PipelineConfig(display="none", **cfg_kwargs)
    model = RegionModel([Region(0, 0, 32, 24)])
    bus = EventBus()
    texts = []
    bus.subscribe(events.OCR_TEXT, texts.append)
    coord = PipelineCoordinator(cfg, source, display, engine or fakes.Engine(), model,
                                event_bus=bus, clock=fakes.Clock(), sleep=lambda s: None)
    return coord, texts


def test_run_until_quit_releases_resources(fakes):
    source = fakes.Source([])
    display = fakes.Display(quit_after=5)
    coord, _ = _coordinator(fakes, source, display)
    assert coord.run() == EXIT_OK
    assert coord.status is PipelineStatus.SHUTTING_DOWN
    assert coord.state.is_closing
    assert not coord.worker.is_alive()
    assert source.released and display.closed
    assert display.shown == 5


def test_read_failures_and_empty_frames_are_skipped(fakes, frame_factory):
    source = fakes.Source([FrameReadError("Unable to read frame."), Frame(None),
                           frame_factory(), FrameReadError("again")])
    display = fakes.Display(quit_after=1)
    coord, _ = _coordinator(fakes, source, display)
    coord.run()
    assert source.reads == 3
    assert coord.frames == 1
    assert coord.state.fps_frame_counter.load() == 1


def test_end_of_stream_shuts_down(fakes, frame_factory):
    source = fakes.Source([frame_factory(), EndOfStream("done")])
    display = fakes.Display()
    coord, _ = _coordinator(fakes, source, display)
    assert coord.run() == EXIT_OK
    assert coord.frames == 1
    assert source.released


def test_quit_key_from_display(fakes):
    display = fakes.Display(events=[UiEvent(KEY, key=ord("p")), UiEvent(KEY, key=ord("q"))])
    coord, _ = _coordinator(fakes, fakes.Source([]), display)
    assert coord.run() == EXIT_OK
    assert coord.state.paused.load() is True
    assert display.shown == 2


def test_recognized_text_is_published(fakes):
    engine = fakes.Engine(texts=["HELLO"])
    coord, texts = _coordinator(fakes, fakes.Source([]), fakes.Display(), engine=engine)
    coord.worker.start()
    coord.step()
    # esperar a que el worker termine el único job
    for _ in range(500):
        if coord.state.ocr_in_flight.load() == 0:
            break
        threading.Event().wait(0.01)
    coord.shutdown()
    assert texts == [OcrText(0, "HELLO")]
    assert coord.admission.dispatched == 1


def test_shutdown_is_idempotent(fakes):
    source = fakes.Source([])
    display = fakes.Display()
    coord, _ = _coordinator(fakes, source, display)
    coord.worker.start()
    coord.shutdown()
    coord.shutdown()
    assert coord.handoff.empty()
    assert not coord.worker.is_alive()


def test_display_closed_even_if_release_fails(fakes):
    class _BadReleaseSource(fakes.Source):
        def release(self):
            raise RuntimeError("release failed")

    display = fakes.Display()
    coord, _ = _coordinator(fakes, _BadReleaseSource([]), display)
    coord.worker.start()
    with pytest.raises(RuntimeError):
        coord.shutdown()
    assert display.closed
    assert not coord.worker.is_alive()


def test_shutdown_with_job_in_flight_is_silent(fakes):
    engine = fakes.Engine()
    engine.gate = threading.Event()
    coord, texts = _coordinator(fakes, fakes.Source([]), fakes.Display(), engine=engine)
    coord.worker.start()
    coord.step()
    assert engine.entered.wait(5)
    releaser = threading.Timer(0.2, engine.gate.set)
    releaser.start()
    coord.shutdown()
    releaser.join()
    assert texts == []
    assert coord.state.ocr_in_flight.load() == 1


@pytest.mark.parametrize("policy, expected", [("continue", EXIT_OK), ("abort", EXIT_FAILURE)])
def test_job_failure_policy(fakes, policy, expected):
    engine = fakes.Engine(fail_on={0})
    display = fakes.Display(quit_after=200)
    coord, _ = _coordinator(fakes, fakes.Source([]), display, engine=engine, on_error=policy)
    coord.worker.start()
    coord.step()
    for _ in range(500):
        if coord.state.ocr_in_flight.load() == 0:
            break
        threading.Event().wait(0.01)
    while coord.status is PipelineStatus.RUNNING:
        coord.step()
    coord.shutdown()
    assert coord.exit_code == expected
    if policy == "abort":
        assert display.shown < 200
