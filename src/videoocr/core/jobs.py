# video-ocr/src/videoocr/core/jobs.py
# Tipos que viajan entre el coordinador y el worker: Frame, Job y resultados.
import time
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from videoocr.core.regions import Region


@dataclass
class Frame:
    """Imagen BGR (numpy) con el instante de captura."""
    image: Optional[np.ndarray]
    captured_at: float = field(default_factory=time.monotonic)

    @property
    def empty(self) -> bool:
        return self.image is None or self.image.size == 0

    def clone(self) -> "Frame":
        # copia independiente: el worker pasa a ser dueño de ella
        return Frame(self.image.copy(), self.captured_at)


@dataclass
class Job:
    frame: Optional[Frame]
    regions: Tuple[Region, ...] = ()

    @property
    def is_sentinel(self) -> bool:
        return self.frame is None


# Job vacío que solo sirve para desbloquear el get() del worker en el cierre
SENTINEL_JOB = Job(frame=None)


@dataclass(frozen=True)
class OcrText:
    region_index: int
    text: str

    def format(self) -> str:
        return f"# Text {self.region_index}: {self.text}"


def to_output(text: str) -> str:
    return text.replace("\n", " ")
