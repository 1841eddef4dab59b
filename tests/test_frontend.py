import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from notch8 import frontend
from notch8.display import Display
from notch8.peripherals import KeyEvent, Signal
from notch8.registers import RegisterFile


@pytest.fixture
def keyboard():
    source = frontend.PygameInput()
    pygame.event.clear()
    yield source
    pygame.display.quit()


def press(key):
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=key))


def release(key):
    pygame.event.post(pygame.event.Event(pygame.KEYUP, key=key))


def test_key_map_follows_the_keypad_layout(keyboard):
    for key in (pygame.K_1, pygame.K_2, pygame.K_3, pygame.K_4,
                pygame.K_q, pygame.K_w, pygame.K_e, pygame.K_r,
                pygame.K_a, pygame.K_s, pygame.K_d, pygame.K_f,
                pygame.K_z, pygame.K_x, pygame.K_c, pygame.K_v):
        press(key)
    keys = [event.key for event in keyboard.poll()]
    assert keys == [0x1, 0x2, 0x3, 0xC,
                    0x4, 0x5, 0x6, 0xD,
                    0x7, 0x8, 0x9, 0xE,
                    0xA, 0x0, 0xB, 0xF]


def test_key_up_and_control_keys(keyboard):
    press(pygame.K_x)
    release(pygame.K_v)
    press(pygame.K_ESCAPE)
    press(pygame.K_SPACE)
    press(pygame.K_p)
    assert keyboard.poll() == [KeyEvent(0x0, True), KeyEvent(0xF, False),
                               Signal.QUIT, Signal.STEP, Signal.RESUME]


def test_other_keys_are_ignored(keyboard):
    release(pygame.K_ESCAPE)
    release(pygame.K_SPACE)
    press(pygame.K_m)
    release(pygame.K_m)
    assert keyboard.poll() == []


def test_window_close(keyboard):
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    assert keyboard.poll() == [Signal.QUIT]
    assert keyboard.poll() == []


class FakeSound:
    def __init__(self):
        self.calls = []

    def play(self, loops=0):
        self.calls.append(("play", loops))

    def stop(self):
        self.calls.append(("stop",))


def test_tone_only_changes_on_transitions():
    speaker = frontend.PygameSpeaker()
    speaker.sound = FakeSound()
    speaker.set_tone(False)
    speaker.set_tone(True)
    speaker.set_tone(True)
    speaker.set_tone(False)
    speaker.set_tone(False)
    assert speaker.sound.calls == [("play", -1), ("stop",)]
    speaker.close()


@pytest.fixture
def screen(monkeypatch):
    rects = []
    monkeypatch.setattr(pygame.draw, "rect", lambda surface, color, rect: rects.append((color, rect)))
    renderer = frontend.PygameRenderer(scale=2)
    yield renderer, rects
    renderer.close()


def test_render_draws_changed_pixels_only(screen):
    renderer, rects = screen
    display = Display()
    display.draw(3, 1, b"\xc0")
    renderer.render(display)
    assert rects == [(frontend.PIXEL_ON, (6, 2, 2, 2)), (frontend.PIXEL_ON, (8, 2, 2, 2))]

    rects.clear()
    renderer.render(display)
    assert rects == []

    display.draw(3, 1, b"\x80")
    renderer.render(display)
    assert rects == [(frontend.PIXEL_OFF, (6, 2, 2, 2))]


def test_render_with_register_panel(screen):
    renderer, rects = screen
    renderer.registers = RegisterFile()
    renderer.render(Display())
    assert rects == []
