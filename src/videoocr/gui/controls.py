# video-ocr/src/videoocr/gui/controls.py
# Controles del operador: teclas (pausa, stats, salir) y arrastre del ratón
# para definir regiones nuevas.
#
# La región calculada por el arrastre se instala en el RegionModel en el acto
# (se escanea desde el siguiente job) y se registra en el log con el formato
# de -r para poder reutilizarla en la línea de comandos.
from videoocr import config
from videoocr.core import events
from videoocr.core.errors import ConfigError
from videoocr.core.regions import RegionModel, region_from_drag
from videoocr.core.state import PipelineState
from videoocr.gui.display import KEY, MOUSE_DOWN, MOUSE_UP, UiEvent
from videoocr.utils.logger import get_logger


class DragGesture:
    """Press fija el ancla; release devuelve la región (o None)."""
    def __init__(self):
        self.anchor = None

    def press(self, x, y):
        self.anchor = (x, y)

    def release(self, x, y):
        if self.anchor is None:
            return None
        x0, y0 = self.anchor
        self.anchor = None
        return region_from_drag(x0, y0, x, y)


class UiController:
    def __init__(self, state: PipelineState, region_model: RegionModel, event_bus=None,
                 key_pause=config.KEY_PAUSE, key_stats=config.KEY_STATS,
                 keys_quit=config.KEYS_QUIT):
        self.state = state
        self.region_model = region_model
        self.event_bus = event_bus
        self.key_pause = key_pause
        self.key_stats = key_stats
        self.keys_quit = tuple(keys_quit)
        self.gesture = DragGesture()
        self.logger = get_logger("videoocr.ui")

    def _publish(self, name, payload):
        if self.event_bus:
            self.event_bus.publish(name, payload)

    def handle_event(self, event: UiEvent) -> bool:
        """Procesa un evento. Devuelve True si el operador pidió terminar."""
        if event.kind == KEY:
            return self.handle_key(event.key)
        if event.kind == MOUSE_DOWN:
            self.gesture.press(event.x, event.y)
        elif event.kind == MOUSE_UP:
            self._on_drag_done(self.gesture.release(event.x, event.y))
        return False

    def handle_key(self, key) -> bool:
        if key in self.keys_quit:
            self.logger.info("Salida solicitada por el operador.")
            return True
        if key == self.key_pause:
            paused = self.state.paused.toggle()
            self.logger.info("OCR paused." if paused else "OCR resumed.")
            self._publish(events.PAUSE_TOGGLED, paused)
        elif key == self.key_stats:
            hidden = self.state.stats_hidden.toggle()
            self.logger.debug(f"stats_hidden={hidden}")
        return False

    def _on_drag_done(self, region):
        if region is None:
            return
        try:
            added = self.region_model.add_region(*region)
        except ConfigError as e:
            self.logger.warning(f"Región descartada: {e}")
            return
        self.logger.info(f"Region added: -r {added.describe()}")
        self._publish(events.REGION_ADDED, added)
