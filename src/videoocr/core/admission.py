# video-ocr/src/videoocr/core/admission.py
# Decide, frame a frame, si se entrega una copia al worker.
# Política de descarte: los frames que llegan con el worker ocupado o en pausa
# no se encolan, solo se cuentan.
import queue

from videoocr.core.jobs import Frame, Job
from videoocr.core.state import PipelineState
from videoocr.utils.logger import get_logger


class AdmissionController:
    def __init__(self, state: PipelineState, handoff: queue.Queue, interval_frames: int):
        self.state = state
        self.handoff = handoff
        self.interval_frames = max(1, int(interval_frames))
        self.logger = get_logger("videoocr.admission")
        self.dispatched = 0

    def on_frame(self, frame: Frame, regions) -> bool:
        """Llamar una vez por frame capturado (no vacío). Devuelve True si hubo envío."""
        count = self.state.ocr_frame_counter.add(1)
        if self.state.paused.load() or count < self.interval_frames:
            return False
        # 0 -> 1 de forma indivisible; si ya hay un job en vuelo no se envía nada
        if not self.state.ocr_in_flight.compare_and_set(0, 1):
            return False
        # nunca bloquea: el worker está libre y el hueco vacío
        self.handoff.put(Job(frame.clone(), tuple(regions)))
        self.state.ocr_frame_counter.store(0)
        self.dispatched += 1
        return True
