# video-ocr/src/videoocr/core/processing.py
# Worker de reconocimiento: toma jobs del handoff (cola de un solo hueco),
# preprocesa cada región, llama al motor OCR y publica los textos en el EventBus.

import queue
import threading
import time
from typing import List

from videoocr.core import events
from videoocr.core.errors import JobFailed
from videoocr.core.events import EventBus
from videoocr.core.jobs import Job, OcrText, to_output
from videoocr.core.state import PipelineState
from videoocr.core.strategies import PreprocessStrategy, ScaledStrategy
from videoocr.utils.logger import get_logger


def make_handoff() -> queue.Queue:
    """Canal de un solo hueco entre coordinador y worker."""
    return queue.Queue(maxsize=1)


class RecognitionWorker(threading.Thread):
    """
    Hilo único que vive lo mismo que el proceso.
    Parámetros:
        - handoff: Queue(maxsize=1) de donde se obtienen los Job.
        - engine: objeto con recognize(bytes) -> str (p. ej. TesseractEngine).
        - state: PipelineState compartido con el coordinador.
        - strategy: PreprocessStrategy (si None, ScaledStrategy sin escalar).
        - event_bus: EventBus donde se publican OCR_TEXT y RECOGNITION_ERROR.
    """
    def __init__(self, handoff: queue.Queue, engine, state: PipelineState,
                 strategy: PreprocessStrategy = None, event_bus: EventBus = None,
                 clock=time.monotonic, logger=None):
        super().__init__(name="RecognitionWorker", daemon=True)
        self.handoff = handoff
        self.engine = engine
        self.state = state
        self.event_bus = event_bus or EventBus()
        self.logger = logger or get_logger("videoocr.processing")
        self.strategy = strategy or ScaledStrategy(logger=self.logger)
        self.clock = clock

    def process_job(self, job: Job) -> List[str]:
        """
        Procesa todas las regiones del job, en orden. Devuelve un texto por región
        (posiblemente vacío). Cualquier fallo se convierte en JobFailed.
        """
        try:
            gray = self.strategy.to_gray(job.frame.image)
        except Exception as e:
            raise JobFailed(JobFailed.PREPROCESS, None, e) from e

        texts = []
        for i, region in enumerate(job.regions):
            try:
                data = self.strategy.prepare(gray, region)
            except Exception as e:
                raise JobFailed(JobFailed.PREPROCESS, i, e) from e
            if not data:
                self.logger.debug(f"Región {i} fuera del frame, se omite.")
                texts.append("")
                continue
            self.logger.debug("Scanning the image...")
            try:
                texts.append(self.engine.recognize(data))
            except Exception as e:
                raise JobFailed(JobFailed.RECOGNITION, i, e) from e
        return texts

    def run(self):
        self.logger.debug("Reader started")
        while True:
            job = self.handoff.get()
            if job.is_sentinel:
                break

            started = self.clock()
            try:
                texts = self.process_job(job)
            except JobFailed as e:
                if self.state.is_closing:
                    break
                # el fallo se aísla en este job: el pipeline sigue vivo
                self.logger.error(f"Job descartado: {e}")
                self.state.failures.put(e)
                self.state.ocr_in_flight.store(0)
                self.event_bus.publish(events.RECOGNITION_ERROR, e)
                continue

            if self.state.is_closing:
                # el coordinador ya está cerrando: no se emite nada ni se toca ocr_in_flight
                self.logger.debug("Cierre en curso, se descartan los resultados del job.")
                break

            self.state.last_recognition_latency.store(self.clock() - started)
            self.state.ocr_in_flight.store(0)
            for i, text in enumerate(texts):
                if text:
                    self.event_bus.publish(events.OCR_TEXT, OcrText(i, to_output(text)))

        self.logger.debug("RecognitionWorker detenido.")
