# video-ocr/src/videoocr/core/pipeline.py
# Coordinador del pipeline: bucle de captura/render/UI en el hilo principal y
# protocolo de cierre con el worker de OCR.
#
# Estados: RUNNING -> SHUTTING_DOWN (terminal).
# Cierre: closing=True, un único job centinela al handoff, join del worker y
# liberación de captura y ventana.
import enum
import queue
import threading
import time

from videoocr import config
from videoocr.config import PipelineConfig
from videoocr.core import events
from videoocr.core.admission import AdmissionController
from videoocr.core.errors import EndOfStream, FrameReadError
from videoocr.core.events import EventBus
from videoocr.core.jobs import SENTINEL_JOB
from videoocr.core.pacing import FixedDelayPacer
from videoocr.core.processing import RecognitionWorker, make_handoff
from videoocr.core.regions import RegionModel
from videoocr.core.state import PipelineState
from videoocr.core.stats import StatsAggregator
from videoocr.core.strategies import make_strategy
from videoocr.gui.controls import UiController
from videoocr.gui.display import draw_overlay
from videoocr.utils.logger import get_logger

EXIT_OK = 0
EXIT_FAILURE = 1


class PipelineStatus(enum.Enum):
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"


class PipelineCoordinator:
    """
    Parámetros:
        - cfg: PipelineConfig
        - source: FrameSource (o cualquier objeto con read() / release())
        - display: superficie con show() / poll_event() / close()
        - engine: motor OCR con recognize(bytes) -> str
        - region_model: RegionModel ya poblado (default_if_empty aplicado)
        - clock / sleep: inyectables para pruebas
    """
    def __init__(self, cfg: PipelineConfig, source, display, engine, region_model: RegionModel,
                 event_bus: EventBus = None, state: PipelineState = None,
                 clock=time.monotonic, sleep=time.sleep):
        self.cfg = cfg
        self.source = source
        self.display = display
        self.region_model = region_model
        self.event_bus = event_bus or EventBus()
        self.state = state or PipelineState()
        self.clock = clock
        self.logger = get_logger("videoocr.pipeline")

        self.state.stats_hidden.store(bool(cfg.stats_hidden))
        self.handoff = make_handoff()
        self.worker = RecognitionWorker(
            self.handoff, engine, self.state,
            strategy=make_strategy(cfg.preprocess, cfg.ocr_scale, logger=get_logger("videoocr.strategy")),
            event_bus=self.event_bus, clock=clock)
        self.admission = AdmissionController(self.state, self.handoff, cfg.ocr_interval)
        self.stats = StatsAggregator(self.state, interval=config.STATS_INTERVAL, clock=clock)
        self.pacer = FixedDelayPacer(cfg.frame_delay_ms, sleep=sleep)
        self.ui = UiController(self.state, region_model, self.event_bus)

        self.status = PipelineStatus.RUNNING
        self.exit_code = EXIT_OK
        self.frames = 0
        self._shutdown_lock = threading.Lock()
        self._shut_down = False

    # ---------------- bucle principal ----------------
    def run(self) -> int:
        self.worker.start()
        self.logger.debug("Started")
        try:
            while self.status is PipelineStatus.RUNNING:
                self.step()
        finally:
            self.shutdown()
        return self.exit_code

    def step(self):
        """Una iteración del estado RUNNING."""
        self.pacer.wait()

        capture_start = self.clock()
        try:
            frame = self.source.read()
        except FrameReadError as e:
            self.logger.warning(f"ERROR: {e}")
            return
        except EndOfStream as e:
            self.logger.info(str(e))
            self.request_stop()
            return
        self.state.last_capture_latency.store(self.clock() - capture_start)

        if frame is None or frame.empty:
            return
        self.frames += 1

        regions = self.region_model.regions()
        self.admission.on_frame(frame, regions)

        report = self.stats.on_frame()
        if report is not None:
            self.event_bus.publish(events.STATS, report)

        draw_overlay(frame.image, regions, paused=self.state.paused.load())
        self.display.show(frame.image)
        if self.ui.handle_event(self.display.poll_event()):
            self.request_stop()

        self._check_failures()

    def _check_failures(self):
        for failure in self.state.drain_failures():
            if self.cfg.on_error == config.ON_ERROR_ABORT:
                self.logger.error(f"Abortando por fallo de OCR: {failure}")
                self.exit_code = EXIT_FAILURE
                self.request_stop()

    def request_stop(self):
        self.status = PipelineStatus.SHUTTING_DOWN

    # ---------------- cierre ----------------
    def shutdown(self):
        """Idempotente: el centinela se envía una única vez."""
        with self._shutdown_lock:
            if self._shut_down:
                return
            self._shut_down = True
        self.status = PipelineStatus.SHUTTING_DOWN

        # closing antes del centinela: un job en vuelo ya no emitirá resultados
        self.state.closing.set()
        if self.worker.is_alive():
            try:
                self.handoff.put(SENTINEL_JOB, timeout=self.cfg.shutdown_timeout)
            except queue.Full:
                self.logger.warning("El worker no recogió el centinela a tiempo.")
            self.worker.join(self.cfg.shutdown_timeout)
            if self.worker.is_alive():
                self.logger.warning("El worker sigue ocupado en el motor OCR; se abandona (daemon).")

        try:
            self.source.release()
        finally:
            self.display.close()
        self.logger.debug("Pipeline detenido.")
