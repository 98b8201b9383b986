from videoocr.core.admission import AdmissionController
from videoocr.core.processing import make_handoff
from videoocr.core.regions import Region
from videoocr.core.state import PipelineState

REGIONS = (Region(0, 0, 10, 10),)


def _controller(interval=3):
    state = PipelineState()
    handoff = make_handoff()
    return state, handoff, AdmissionController(state, handoff, interval)


def _finish_job(state, handoff):
    handoff.get_nowait()
    state.ocr_in_flight.store(0)


def test_dispatch_on_interval(frame):
    state, handoff, adm = _controller(interval=3)
    assert not adm.on_frame(frame, REGIONS)
    assert not adm.on_frame(frame, REGIONS)
    assert adm.on_frame(frame, REGIONS)
    assert state.ocr_in_flight.load() == 1
    assert state.ocr_frame_counter.load() == 0
    job = handoff.get_nowait()
    assert job.regions == REGIONS
    # copia independiente del frame
    assert job.frame.image is not frame.image
    assert (job.frame.image == frame.image).all()


def test_at_most_one_job_in_flight(frame):
    state, handoff, adm = _controller(interval=1)
    seen = set()
    dispatched = 0
    for i in range(50):
        if adm.on_frame(frame, REGIONS):
            dispatched += 1
        seen.add(state.ocr_in_flight.load())
        if i % 7 == 6 and state.ocr_in_flight.load() == 1:
            _finish_job(state, handoff)
    assert seen <= {0, 1}
    assert dispatched == adm.dispatched
    assert dispatched == 8  # frames 0, 7, 14, ... 49


def test_frames_dropped_while_busy_not_queued(frame):
    state, handoff, adm = _controller(interval=2)
    adm.on_frame(frame, REGIONS)
    assert adm.on_frame(frame, REGIONS)
    # worker ocupado: los siguientes frames solo se cuentan
    for expected in range(1, 6):
        assert not adm.on_frame(frame, REGIONS)
        assert state.ocr_frame_counter.load() == expected
    assert handoff.qsize() == 1
    _finish_job(state, handoff)
    # el primer frame tras liberar el worker ya supera el umbral
    assert adm.on_frame(frame, REGIONS)
    assert state.ocr_frame_counter.load() == 0


def test_pause_suppresses_dispatch(frame):
    state, handoff, adm = _controller(interval=1)
    state.paused.store(True)
    for _ in range(10):
        assert not adm.on_frame(frame, REGIONS)
    assert handoff.empty()
    assert state.ocr_frame_counter.load() == 10
    state.paused.store(False)
    assert adm.on_frame(frame, REGIONS)
