# video-ocr/src/videoocr/gui/ctk_window.py
# Ventana de vista previa usando CustomTkinter.
#
# Requisitos: customtkinter, pillow, opencv-python
#
# Diseño:
# - No hay mainloop(): el coordinador llama a poll_event() en cada iteración y
#   aquí se bombean los eventos de Tk con root.update().
# - El frame se reduce para caber en PREVIEW_MAX; las coordenadas del ratón se
#   devuelven escaladas a píxeles del frame original.
from collections import deque

import customtkinter as ctk
import cv2
from PIL import Image

from videoocr.gui.display import KEY, MOUSE_DOWN, MOUSE_UP, NO_EVENT, UiEvent
from videoocr.utils.logger import get_logger

PREVIEW_MAX = (1280, 720)  # tamaño máximo del preview (ajusta si quieres)
ESC = 27


class CtkDisplay:
    def __init__(self, title: str):
        self.logger = get_logger("videoocr.display")
        self._pending = deque()
        self._scale = 1.0  # píxeles de frame por píxel de preview

        ctk.set_appearance_mode("System")
        ctk.set_default_color_theme("blue")
        self.root = ctk.CTk()
        self.root.title(title)
        # cerrar la ventana equivale a pulsar ESC
        self.root.protocol("WM_DELETE_WINDOW", lambda: self._pending.append(UiEvent(KEY, key=ESC)))

        self._preview = ctk.CTkLabel(self.root, text="(no camera)")
        self._preview.pack(fill="both", expand=True)

        self.root.bind("<Key>", self._on_key)
        self._preview.bind("<ButtonPress-1>", self._on_press)
        self._preview.bind("<ButtonRelease-1>", self._on_release)
        self._image = None

    # ---------------- Tk handlers ----------------
    def _on_key(self, event):
        if event.char:
            self._pending.append(UiEvent(KEY, key=ord(event.char) & 0xFF))

    def _frame_xy(self, event):
        return int(event.x * self._scale), int(event.y * self._scale)

    def _on_press(self, event):
        x, y = self._frame_xy(event)
        self._pending.append(UiEvent(MOUSE_DOWN, x=x, y=y))

    def _on_release(self, event):
        x, y = self._frame_xy(event)
        self._pending.append(UiEvent(MOUSE_UP, x=x, y=y))

    # ---------------- superficie ----------------
    def show(self, image):
        h, w = image.shape[:2]
        self._scale = max(1.0, w / PREVIEW_MAX[0], h / PREVIEW_MAX[1])
        size = (int(w / self._scale), int(h / self._scale))
        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        pil = Image.fromarray(rgb)
        # mantener referencia para que Tk no libere la imagen
        self._image = ctk.CTkImage(light_image=pil, dark_image=pil, size=size)
        self._preview.configure(image=self._image, text="")

    def poll_event(self) -> UiEvent:
        self.root.update()
        if self._pending:
            return self._pending.popleft()
        return NO_EVENT

    def close(self):
        try:
            self.root.destroy()
        except Exception:
            self.logger.debug("Ventana CTk ya destruida.")
