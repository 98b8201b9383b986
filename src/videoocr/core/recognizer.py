"""Motor OCR: envoltorio fino sobre pytesseract.

Recibe bytes de una imagen codificada (PNG) y devuelve el texto reconocido.
"""
import io
from typing import List, Optional

import pytesseract
from PIL import Image, UnidentifiedImageError

from videoocr.core.errors import ConfigError, RecognitionError
from videoocr.utils.logger import get_logger


class TesseractEngine:
    """
    Engine de reconocimiento (Tesseract).
    languages: lista ordenada de códigos ("eng", "jpn"...); se pasa como "eng+jpn".
    """
    def __init__(self, languages: Optional[List[str]] = None, tesseract_cmd: str = None,
                 extra_config: str = ""):
        self.logger = get_logger("videoocr.recognizer")
        self.languages = []
        self.extra_config = extra_config
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.configure(languages or ["eng"])

    def configure(self, languages: List[str]):
        langs = [l for l in languages if l]
        if not langs:
            raise ConfigError("At least one OCR language is required")
        self.languages = list(langs)
        self.logger.info(f"Languages: {self.languages}")

    @property
    def lang(self) -> str:
        return "+".join(self.languages)

    def recognize(self, image_bytes: bytes) -> str:
        try:
            with Image.open(io.BytesIO(image_bytes)) as img:
                text = pytesseract.image_to_string(img, lang=self.lang, config=self.extra_config)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError,
                UnidentifiedImageError, OSError, RuntimeError) as e:
            raise RecognitionError(f"OCR failed: {e}") from e
        # tesseract termina la salida con salto de línea / form feed
        return text.strip()
