# video-ocr/src/videoocr/core/regions.py
# Modelo de regiones: lista ordenada de rectángulos a escanear.
# Solo se añaden regiones (nunca se quitan), así que el worker puede tomar una
# instantánea (tupla) por job sin bloquear al hilo principal.
import threading
from typing import NamedTuple, Optional, Tuple

from videoocr.core.errors import ConfigError


class Region(NamedTuple):
    """Rectángulo (x, y, w, h) en píxeles del frame original."""
    x: int
    y: int
    w: int
    h: int

    @property
    def rect(self) -> Tuple[int, int, int, int]:
        """Forma (x0, y0, x1, y1)."""
        return (self.x, self.y, self.x + self.w, self.y + self.h)

    def describe(self) -> str:
        # mismo formato que acepta -r en la línea de comandos
        return f"{self.x},{self.y},{self.w},{self.h}"


def make_region(x, y, w, h) -> Region:
    if w <= 0 or h <= 0:
        raise ConfigError(f"Invalid region size: {w}x{h}")
    if x < 0 or y < 0:
        raise ConfigError(f"Invalid region origin: {x},{y}")
    return Region(int(x), int(y), int(w), int(h))


def parse_region(value: str) -> Region:
    """'10,20,300,150' -> Region(10, 20, 300, 150)."""
    parts = value.split(",")
    if len(parts) != 4:
        raise ConfigError(f"Invalid region format: {value}")
    try:
        x, y, w, h = (int(p.strip()) for p in parts)
    except ValueError:
        raise ConfigError(f"Invalid region format: {value}") from None
    return make_region(x, y, w, h)


def region_from_drag(x0, y0, x1, y1) -> Optional[Region]:
    """
    Convierte un arrastre del ratón (press en x0,y0 / release en x1,y1) en una región.
    Se normaliza si el arrastre va hacia arriba o a la izquierda.
    Las esquinas se recortan a 0 (la ventana reporta coordenadas negativas si se
    suelta fuera). Un click sin desplazamiento, o un arrastre que queda entero
    fuera de la imagen, no produce región.
    """
    left, right = max(0, min(x0, x1)), max(0, max(x0, x1))
    top, bottom = max(0, min(y0, y1)), max(0, max(y0, y1))
    w, h = right - left, bottom - top
    if w == 0 or h == 0:
        return None
    return Region(left, top, w, h)


class RegionModel:
    def __init__(self, regions=None):
        self._regions = []
        self._lock = threading.Lock()
        for r in regions or ():
            self.add_region(*r)

    def add_region(self, x, y, w, h) -> Region:
        region = make_region(x, y, w, h)
        with self._lock:
            self._regions.append(region)
        return region

    def default_if_empty(self, frame_w, frame_h):
        """Si no hay regiones configuradas, instala una que cubre el frame completo."""
        with self._lock:
            if not self._regions:
                self._regions.append(make_region(0, 0, frame_w, frame_h))

    def regions(self) -> Tuple[Region, ...]:
        with self._lock:
            return tuple(self._regions)

    def __len__(self):
        with self._lock:
            return len(self._regions)
