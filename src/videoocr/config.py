# config.py
# Configuración global del proyecto (valores por defecto) y PipelineConfig,
# la configuración explícita que se construye una vez y se pasa a cada componente.
from dataclasses import dataclass, field
from typing import List, Optional, Union

from videoocr.core.errors import ConfigError

SOURCE = "/dev/video0"       # dispositivo, archivo de video o índice ("0")
FRAME_WIDTH = 1920           # ancho de la imagen capturada
FRAME_HEIGHT = 1080          # alto de la imagen capturada
TARGET_FPS = 30              # fps pedidos a la cámara (se baja si no los acepta)
OCR_INTERVAL_FRAMES = 8      # frames mínimos entre dos envíos al OCR
FRAME_DELAY_MS = 1           # pausa entre frames del bucle de captura
OCR_SCALE = 1.0              # escala de la imagen que recibe el OCR [0.1-1]
MIN_OCR_SCALE = 0.1
MAX_OCR_SCALE = 1.0
LANGUAGES = "eng"            # lista de idiomas separada por comas
WINDOW_TITLE = "Video with OCR"
SHUTDOWN_TIMEOUT = 10.0      # segundos de espera máxima al worker en el cierre
STATS_INTERVAL = 1.0         # segundos entre reportes de fps

# Teclas (códigos de cv2.waitKey)
KEY_PAUSE = ord("p")
KEY_STATS = ord("s")
KEYS_QUIT = (27, ord("q"))   # ESC, q

LOG_FOLDER = "logs"
LOG_FILE = "videoocr.log"

ON_ERROR_CONTINUE = "continue"
ON_ERROR_ABORT = "abort"


def normalize_scale(value: float) -> float:
    """Limita la escala del OCR al rango [0.1, 1.0]."""
    value = float(value)
    if value < MIN_OCR_SCALE:
        return MIN_OCR_SCALE
    if value > MAX_OCR_SCALE:
        return MAX_OCR_SCALE
    return value


def parse_languages(value: str) -> List[str]:
    langs = [part.strip() for part in value.split(",") if part.strip()]
    if not langs:
        raise ConfigError(f"Invalid language list: {value!r}")
    return langs


def parse_source(value) -> Union[int, str]:
    """'0' -> 0 (índice de cámara); cualquier otra cosa se trata como ruta."""
    if isinstance(value, int):
        return value
    value = str(value).strip()
    if value.isdigit():
        return int(value)
    if not value:
        raise ConfigError("Empty video source")
    return value


@dataclass
class PipelineConfig:
    source: Union[int, str] = SOURCE
    width: int = FRAME_WIDTH
    height: int = FRAME_HEIGHT
    fps: int = TARGET_FPS
    languages: List[str] = field(default_factory=lambda: parse_languages(LANGUAGES))
    ocr_interval: int = OCR_INTERVAL_FRAMES
    frame_delay_ms: int = FRAME_DELAY_MS
    ocr_scale: float = OCR_SCALE
    regions: list = field(default_factory=list)
    verbose: bool = False
    stats_hidden: bool = False
    display: str = "cv"
    preprocess: str = "scaled"
    on_error: str = ON_ERROR_CONTINUE
    image_path: Optional[str] = None
    log_folder: Optional[str] = LOG_FOLDER
    tesseract_cmd: Optional[str] = None
    window_title: str = WINDOW_TITLE
    shutdown_timeout: float = SHUTDOWN_TIMEOUT

    def __post_init__(self):
        self.ocr_scale = normalize_scale(self.ocr_scale)
        if self.ocr_interval < 1:
            raise ConfigError(f"OCR interval must be >= 1 (got {self.ocr_interval})")
        if self.frame_delay_ms < 0:
            raise ConfigError(f"Frame delay must be >= 0 (got {self.frame_delay_ms})")
        if self.on_error not in (ON_ERROR_CONTINUE, ON_ERROR_ABORT):
            raise ConfigError(f"Unknown error policy: {self.on_error}")
