# video-ocr/src/videoocr/gui/display.py
# Superficies de visualización: ventana OpenCV y una versión sin ventana.
# Ambas exponen show(image), poll_event() -> UiEvent (no bloqueante) y close().
#
# Diseño:
# - Los eventos de ratón llegan por callback de cv2 durante waitKey(); se guardan
#   en una cola y poll_event() devuelve uno por llamada.
# - draw_overlay() pinta sobre el frame del coordinador (el worker tiene su copia).
from collections import deque
from typing import NamedTuple, Optional

import cv2

from videoocr.utils.logger import get_logger

NONE = "none"
KEY = "key"
MOUSE_DOWN = "mouse_down"
MOUSE_UP = "mouse_up"

REGION_COLOR = (0, 255, 0)   # BGR
REGION_THICKNESS = 3
PAUSED_COLOR = (0, 0, 255)


class UiEvent(NamedTuple):
    kind: str
    key: Optional[int] = None
    x: Optional[int] = None
    y: Optional[int] = None


NO_EVENT = UiEvent(NONE)


def draw_overlay(image, regions, paused=False):
    """Dibuja las regiones (y un aviso de pausa) sobre la imagen, in-place."""
    for region in regions:
        x0, y0, x1, y1 = region.rect
        cv2.rectangle(image, (x0, y0), (x1, y1), REGION_COLOR, REGION_THICKNESS)
    if paused:
        cv2.putText(image, "PAUSED", (20, 50), cv2.FONT_HERSHEY_SIMPLEX, 1.5,
                    PAUSED_COLOR, 3, cv2.LINE_AA)
    return image


class CvWindowDisplay:
    def __init__(self, title: str):
        self.title = title
        self._pending = deque()
        self.logger = get_logger("videoocr.display")
        cv2.namedWindow(self.title, cv2.WINDOW_NORMAL)
        cv2.setMouseCallback(self.title, self._on_mouse)

    def _on_mouse(self, event, x, y, flags, param):
        if event == cv2.EVENT_LBUTTONDOWN:
            self._pending.append(UiEvent(MOUSE_DOWN, x=x, y=y))
        elif event == cv2.EVENT_LBUTTONUP:
            self._pending.append(UiEvent(MOUSE_UP, x=x, y=y))

    def show(self, image):
        cv2.imshow(self.title, image)

    def poll_event(self) -> UiEvent:
        key = cv2.waitKey(1)  # Handle events.
        if key != -1:
            self._pending.append(UiEvent(KEY, key=key & 0xFF))
        if self._pending:
            return self._pending.popleft()
        return NO_EVENT

    def close(self):
        try:
            cv2.destroyWindow(self.title)
        except cv2.error:
            # la ventana pudo cerrarse ya desde el gestor de ventanas
            self.logger.debug("Ventana ya cerrada.")


class HeadlessDisplay:
    """Sin ventana: para servidores o pruebas. Nunca genera eventos."""
    def show(self, image):
        pass

    def poll_event(self) -> UiEvent:
        return NO_EVENT

    def close(self):
        pass


def make_display(kind: str, title: str):
    if kind == "none":
        return HeadlessDisplay()
    if kind == "ctk":
        # import perezoso: customtkinter requiere tkinter y un servidor gráfico
        from videoocr.gui.ctk_window import CtkDisplay
        return CtkDisplay(title)
    return CvWindowDisplay(title)
