# video-ocr/src/videoocr/core/pacing.py
# Política de ritmo del bucle de captura: pausa fija entre frames.
# La admisión y las estadísticas no dependen de este valor.
import time


class FixedDelayPacer:
    def __init__(self, delay_ms: int, sleep=time.sleep):
        self.delay = max(0, delay_ms) / 1000.0
        self.sleep = sleep

    def wait(self):
        if self.delay > 0:
            self.sleep(self.delay)
