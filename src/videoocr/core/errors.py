# video-ocr/src/videoocr/core/errors.py
# Jerarquía de excepciones del proyecto.
# Las fatales (ConfigError, CaptureError) cortan el arranque; las transitorias
# (FrameReadError) se registran y el bucle continúa.


class VideoOcrError(Exception):
    """Base de todos los errores propios de videoocr."""


class ConfigError(VideoOcrError):
    """Configuración inválida (región mal formada, escala, idiomas...)."""


class CaptureError(VideoOcrError):
    """No se pudo abrir o configurar la fuente de video."""


class FrameReadError(VideoOcrError):
    """Fallo puntual al leer un frame. Recuperable."""


class EndOfStream(VideoOcrError):
    """La fuente (archivo de video) no tiene más frames."""


class RecognitionError(VideoOcrError):
    """El motor OCR falló al reconocer una imagen."""


class JobFailed(VideoOcrError):
    """
    Fallo tipado de un job del worker.
    kind: "preprocess" | "recognition"
    region_index: índice de la región que falló (o None)
    cause: excepción original
    """
    PREPROCESS = "preprocess"
    RECOGNITION = "recognition"

    def __init__(self, kind, region_index=None, cause=None):
        self.kind = kind
        self.region_index = region_index
        self.cause = cause
        super().__init__(f"{kind} failed on region {region_index}: {cause}")
