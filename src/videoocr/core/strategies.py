# video-ocr/src/videoocr/core/strategies.py
# Implementación del patrón Strategy para el preprocesado de cada región.
# Cada estrategia debe implementar prepare(gray, region) -> bytes (PNG sin pérdida)
from abc import ABC, abstractmethod

import cv2
import numpy as np

from videoocr import config
from videoocr.core.errors import ConfigError
from videoocr.core.regions import Region


class PreprocessStrategy(ABC):
    """
    Interfaz para estrategias de preprocesado.
    - scale: factor de escala ya normalizado a [0.1, 1.0].
    - logger es opcional para debug.
    """
    def __init__(self, scale: float = config.OCR_SCALE, logger=None):
        self.scale = config.normalize_scale(scale)
        self.logger = logger

    @staticmethod
    def to_gray(image: np.ndarray) -> np.ndarray:
        if image.ndim == 2:
            return image
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

    @staticmethod
    def crop(gray: np.ndarray, region: Region) -> np.ndarray:
        # el slicing de numpy recorta implícitamente lo que cae fuera del frame
        x0, y0, x1, y1 = region.rect
        return gray[y0:y1, x0:x1]

    def resize(self, img: np.ndarray) -> np.ndarray:
        if self.scale == 1.0:
            return img
        h, w = img.shape[:2]
        size = (max(1, int(round(w * self.scale))), max(1, int(round(h * self.scale))))
        return cv2.resize(img, size, interpolation=cv2.INTER_LINEAR)

    @staticmethod
    def encode(img: np.ndarray) -> bytes:
        ok, buf = cv2.imencode(".png", img)
        if not ok:
            raise ValueError("encoding image failed")
        return buf.tobytes()

    @abstractmethod
    def prepare(self, gray: np.ndarray, region: Region) -> bytes:
        """
        Recorta, escala y codifica la región. Devuelve b"" si el recorte queda vacío
        (región completamente fuera del frame).
        """
        raise NotImplementedError


class ScaledStrategy(PreprocessStrategy):
    """Recorte + escalado lineal + PNG."""
    def prepare(self, gray, region):
        rect = self.crop(gray, region)
        if rect.size == 0:
            return b""
        return self.encode(self.resize(rect))


class ThresholdStrategy(PreprocessStrategy):
    """
    Igual que ScaledStrategy pero binariza con Otsu antes de codificar.
    Útil para texto claro sobre fondo oscuro (marcadores, subtítulos).
    """
    def prepare(self, gray, region):
        rect = self.crop(gray, region)
        if rect.size == 0:
            return b""
        rect = self.resize(rect)
        _, binary = cv2.threshold(rect, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
        if self.logger:
            self.logger.debug(f"[Strategy:Threshold] region={region.describe()}")
        return self.encode(binary)


STRATEGIES = {
    "scaled": ScaledStrategy,
    "threshold": ThresholdStrategy,
}


def make_strategy(name: str, scale: float, logger=None) -> PreprocessStrategy:
    try:
        cls = STRATEGIES[name]
    except KeyError:
        raise ConfigError(f"Unknown preprocess strategy: {name}") from None
    return cls(scale=scale, logger=logger)
