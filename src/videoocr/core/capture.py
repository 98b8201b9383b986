# video-ocr/src/videoocr/core/capture.py
# Fuente de frames sobre cv2.VideoCapture: abrir, configurar y leer.
# Las lecturas las hace el hilo coordinador; aquí no hay hilos.
import os
import time

import cv2

from videoocr.core.errors import CaptureError, EndOfStream, FrameReadError
from videoocr.core.jobs import Frame
from videoocr.utils.logger import get_logger

# Propiedades que se muestran al arrancar (modo verbose)
CAPTURE_PROPERTIES = (
    ("Frame Width", cv2.CAP_PROP_FRAME_WIDTH),
    ("Frame Height", cv2.CAP_PROP_FRAME_HEIGHT),
    ("FPS", cv2.CAP_PROP_FPS),
    ("Buffer Size", cv2.CAP_PROP_BUFFERSIZE),
    ("Brightness", cv2.CAP_PROP_BRIGHTNESS),
    ("Contrast", cv2.CAP_PROP_CONTRAST),
    ("Saturation", cv2.CAP_PROP_SATURATION),
    ("Hue", cv2.CAP_PROP_HUE),
    ("Gain", cv2.CAP_PROP_GAIN),
    ("Exposure", cv2.CAP_PROP_EXPOSURE),
    ("Auto Exposure", cv2.CAP_PROP_AUTO_EXPOSURE),
    ("Gamma", cv2.CAP_PROP_GAMMA),
    ("Sharpness", cv2.CAP_PROP_SHARPNESS),
    ("Backlight Compensation", cv2.CAP_PROP_BACKLIGHT),
    ("Focus", cv2.CAP_PROP_FOCUS),
    ("Zoom", cv2.CAP_PROP_ZOOM),
    ("ISO Speed", cv2.CAP_PROP_ISO_SPEED),
    ("Temperature", cv2.CAP_PROP_TEMPERATURE),
    ("HW Acceleration", cv2.CAP_PROP_HW_ACCELERATION),
    ("HW Device", cv2.CAP_PROP_HW_DEVICE),
)


class FrameSource:
    """
    Lector de cámara / archivo de video.
    Usar FrameSource.open(src) en lugar del constructor.
    """
    def __init__(self, cap, src, clock=time.monotonic):
        self.cap = cap
        self.src = src
        self.clock = clock
        self.logger = get_logger("videoocr.capture")
        # un archivo normal (no /dev/videoN) puede agotarse
        self._is_file = isinstance(src, str) and os.path.isfile(src)

    @classmethod
    def open(cls, src):
        if isinstance(src, int):
            # CAP_DSHOW solo existe en builds de Windows
            cap = cv2.VideoCapture(src, cv2.CAP_DSHOW if os.name == "nt" else cv2.CAP_ANY)
        else:
            cap = cv2.VideoCapture(src)
        if not cap.isOpened():
            cap.release()
            raise CaptureError(f"Error opening video capture device: {src}")
        return cls(cap, src)

    def configure(self, width: int, height: int, fps: int) -> int:
        """
        Pide tamaño y fps. Si la cámara no acepta los fps pedidos se va bajando
        de uno en uno hasta que el valor reportado coincida.
        Devuelve los fps aceptados, o 0 si no se encontró ninguno.
        """
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, float(width))
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, float(height))
        for f in range(int(fps), 0, -1):
            self.cap.set(cv2.CAP_PROP_FPS, float(f))
            if int(self.cap.get(cv2.CAP_PROP_FPS)) == f:
                self.logger.debug(f"FPS aceptados: {f}")
                return f
        self.logger.warning(f"La fuente no aceptó ningún fps <= {fps}")
        return 0

    def properties(self) -> dict:
        return {name: self.cap.get(prop) for name, prop in CAPTURE_PROPERTIES}

    def frame_size(self):
        """(ancho, alto) reportados por la fuente."""
        return (int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
                int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT)))

    def _exhausted(self) -> bool:
        if not self._is_file:
            return False
        total = self.cap.get(cv2.CAP_PROP_FRAME_COUNT)
        return total > 0 and self.cap.get(cv2.CAP_PROP_POS_FRAMES) >= total

    def read(self) -> Frame:
        ret, image = self.cap.read()
        if not ret:
            if self._exhausted():
                raise EndOfStream(f"No more frames in {self.src}")
            raise FrameReadError("Unable to read frame.")
        return Frame(image, self.clock())

    def release(self):
        try:
            if self.cap is not None and self.cap.isOpened():  # liberamos recursos
                self.cap.release()
        except cv2.error:
            self.logger.exception("Error liberando la captura")
