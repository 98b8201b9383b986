# video-ocr/src/videoocr/core/stats.py
# Estadísticas por segundo: fps de captura y últimas latencias.
import time
from dataclasses import dataclass

from videoocr import config
from videoocr.core.state import PipelineState


def _ms(seconds: float) -> int:
    return -1 if seconds < 0 else int(seconds * 1000)


@dataclass(frozen=True)
class StatsReport:
    fps: float
    capture_latency: float        # segundos (-1 si no hay medición)
    recognition_latency: float    # segundos (-1 si no hay medición)

    def format(self) -> str:
        return (f"# FPS: {self.fps:.1f} (last capture ms: {_ms(self.capture_latency)}, "
                f"read ms: {_ms(self.recognition_latency)})")


class StatsAggregator:
    """
    Cuenta frames y, una vez por intervalo de reloj, produce un StatsReport.
    El siguiente tick se calcula desde el instante observado (now + intervalo),
    así un bucle lento no acumula retraso.
    El contador se reinicia en cada tick aunque el reporte esté suprimido
    (stats ocultas o pausa), para que el siguiente fps no arrastre frames viejos.
    """
    def __init__(self, state: PipelineState, interval: float = config.STATS_INTERVAL,
                 clock=time.monotonic):
        self.state = state
        self.interval = interval
        self.clock = clock
        self._last_tick = clock()
        self._next_tick = self._last_tick + interval

    def on_frame(self, now: float = None):
        self.state.fps_frame_counter.add(1)
        return self.tick(now)

    def tick(self, now: float = None):
        now = self.clock() if now is None else now
        if now < self._next_tick:
            return None
        elapsed = now - self._last_tick
        frames = self.state.fps_frame_counter.load()
        self.state.fps_frame_counter.store(0)
        self._last_tick = now
        self._next_tick = now + self.interval
        if self.state.stats_hidden.load() or self.state.paused.load():
            return None
        return StatsReport(
            fps=frames / elapsed if elapsed > 0 else 0.0,
            capture_latency=self.state.last_capture_latency.load(),
            recognition_latency=self.state.last_recognition_latency.load(),
        )
