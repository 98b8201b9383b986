# video-ocr/src/videoocr/core/state.py
# Estado compartido entre el hilo principal (coordinador) y el worker de OCR.
# Cada campo tiene un único escritor en cada momento; AtomicValue solo garantiza
# que las operaciones read-modify-write sean indivisibles.
import queue
import threading
from dataclasses import dataclass, field


class AtomicValue:
    """Celda con load/store/add/compare_and_set indivisibles."""
    def __init__(self, value=0):
        self._value = value
        self._lock = threading.Lock()

    def load(self):
        with self._lock:
            return self._value

    def store(self, value):
        with self._lock:
            self._value = value

    def add(self, delta):
        with self._lock:
            self._value += delta
            return self._value

    def compare_and_set(self, expected, new) -> bool:
        with self._lock:
            if self._value != expected:
                return False
            self._value = new
            return True

    def toggle(self) -> bool:
        with self._lock:
            self._value = not self._value
            return self._value

    def __repr__(self):
        return f"AtomicValue({self.load()!r})"


@dataclass
class PipelineState:
    # 1 mientras el worker tiene un job sin terminar (nunca pasa de 1)
    ocr_in_flight: AtomicValue = field(default_factory=lambda: AtomicValue(0))
    paused: AtomicValue = field(default_factory=lambda: AtomicValue(False))
    stats_hidden: AtomicValue = field(default_factory=lambda: AtomicValue(False))
    # monótono: una vez activado no se desactiva
    closing: threading.Event = field(default_factory=threading.Event)
    # segundos; -1 mientras no haya medición
    last_capture_latency: AtomicValue = field(default_factory=lambda: AtomicValue(-1.0))
    last_recognition_latency: AtomicValue = field(default_factory=lambda: AtomicValue(-1.0))
    ocr_frame_counter: AtomicValue = field(default_factory=lambda: AtomicValue(0))
    fps_frame_counter: AtomicValue = field(default_factory=lambda: AtomicValue(0))
    # fallos de jobs reportados por el worker; los consume el coordinador
    failures: queue.SimpleQueue = field(default_factory=queue.SimpleQueue)

    @property
    def is_closing(self) -> bool:
        return self.closing.is_set()

    def drain_failures(self):
        items = []
        while True:
            try:
                items.append(self.failures.get_nowait())
            except queue.Empty:
                return items
