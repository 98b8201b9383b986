# video-ocr/src/videoocr/core/events.py
# Bus de eventos del pipeline: el worker y el coordinador publican, la salida
# (ResultPrinter) y los tests se suscriben. Cada evento lleva un único payload.
import threading
from typing import Callable

from videoocr.utils.logger import get_logger

OCR_TEXT = "ocr_text"                    # OcrText
STATS = "stats"                          # StatsReport
RECOGNITION_ERROR = "recognition_error"  # JobFailed
REGION_ADDED = "region_added"            # Region
PAUSE_TOGGLED = "pause_toggled"          # bool, True = pausado

EVENTS = frozenset({OCR_TEXT, STATS, RECOGNITION_ERROR, REGION_ADDED, PAUSE_TOGGLED})


class EventBus:
    """
    Pub/Sub thread-safe con un conjunto cerrado de eventos.
    Los handlers corren en el hilo que publica: OCR_TEXT y RECOGNITION_ERROR en
    el worker, el resto en el hilo principal. Un handler que falla se loguea y
    se cuenta en handler_errors; nunca llega al que publica.
    """
    def __init__(self, logger=None):
        self._handlers = {name: [] for name in EVENTS}
        self._lock = threading.Lock()
        self.handler_errors = 0
        self.logger = logger or get_logger("videoocr.events")

    @staticmethod
    def _check(event_name):
        if event_name not in EVENTS:
            raise ValueError(f"Unknown event: {event_name!r}")

    def subscribe(self, event_name, handler) -> Callable[[], None]:
        """Registra handler(payload). Devuelve una función que lo da de baja."""
        self._check(event_name)
        with self._lock:
            self._handlers[event_name].append(handler)
        return lambda: self.unsubscribe(event_name, handler)

    def unsubscribe(self, event_name, handler):
        self._check(event_name)
        with self._lock:
            if handler in self._handlers[event_name]:
                self._handlers[event_name].remove(handler)

    def publish(self, event_name, payload) -> int:
        """Entrega payload a cada handler; devuelve cuántos terminaron sin error."""
        self._check(event_name)
        with self._lock:
            handlers = tuple(self._handlers[event_name])
        delivered = 0
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                with self._lock:
                    self.handler_errors += 1
                name = getattr(handler, "__qualname__", repr(handler))
                self.logger.exception(f"Handler {name} falló en {event_name}")
            else:
                delivered += 1
        return delivered
