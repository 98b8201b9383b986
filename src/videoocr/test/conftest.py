# Colaboradores falsos (fuente, ventana, motor OCR, reloj) para las pruebas.
import threading
from collections import deque

import numpy as np
import pytest

from videoocr.core.errors import RecognitionError
from videoocr.core.jobs import Frame
from videoocr.gui.display import KEY, NO_EVENT, UiEvent


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeEngine:
    """Devuelve textos de una lista (o 'text N'); puede fallar o bloquearse."""
    def __init__(self, texts=None, fail_on=None):
        self.texts = deque(texts or [])
        self.fail_on = set(fail_on or ())
        self.calls = []
        self.gate = None  # threading.Event: si se asigna, recognize espera a que se active
        self.entered = threading.Event()

    def recognize(self, image_bytes):
        n = len(self.calls)
        self.calls.append(image_bytes)
        self.entered.set()
        if self.gate is not None:
            self.gate.wait(5)
        if n in self.fail_on:
            raise RecognitionError("boom")
        if self.texts:
            return self.texts.popleft()
        return f"text {n}"


class FakeSource:
    """Entrega frames de una lista; cada elemento puede ser Frame, None o una excepción."""
    def __init__(self, items):
        self.items = deque(items)
        self.released = False
        self.reads = 0

    def read(self):
        self.reads += 1
        item = self.items.popleft() if self.items else make_frame()
        if isinstance(item, Exception):
            raise item
        return item

    def release(self):
        self.released = True


class FakeDisplay:
    def __init__(self, events=None, quit_after=None):
        self.events = deque(events or [])
        self.quit_after = quit_after
        self.shown = 0
        self.closed = False

    def show(self, image):
        self.shown += 1

    def poll_event(self):
        if self.quit_after is not None and self.shown >= self.quit_after:
            return UiEvent(KEY, key=27)
        if self.events:
            return self.events.popleft()
        return NO_EVENT

    def close(self):
        self.closed = True


def make_frame(w=64, h=48, value=255):
    return Frame(np.full((h, w, 3), value, dtype=np.uint8))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def frame():
    return make_frame()


@pytest.fixture
def frame_factory():
    return make_frame


@pytest.fixture
def fakes():
    """Acceso a las clases falsas desde los tests."""
    class _Fakes:
        Source = FakeSource
        Display = FakeDisplay
        Engine = FakeEngine
        Clock = FakeClock
    return _Fakes
