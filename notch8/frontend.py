# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

"""pygame window, tone and keyboard for the interpreter.

These are the only parts of Notch8 that touch pygame. Everything in
here is a thin adapter over one of the interfaces in peripherals.
"""

import array
import logging
import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame

from notch8.constants import VIDEO_X, VIDEO_Y, VIDEO_RES
from notch8.peripherals import Renderer, Speaker, InputSource, KeyEvent, Signal

# Pixel colors for display
PIXEL_ON = (255,255,255)
PIXEL_OFF = (64,64,64)

# Resolution of fonts used for register display
REG_FONT_RES = 18
REG_FONT_PAD = 10
REG_LINES = 5

# Tone played while the sound timer runs
SOUND_FREQUENCY = 44100
TONE_HZ = 440
TONE_VOLUME = 0.25

# The key map is a little jumbled since the
# Chip-8 has a slightly skewed layout, where
# internal key values are identical to their
# face value in hex.
# I've mapped their equivalents to a grid beginning at key 1 and
# proceeding 4 keys across each row and all the way down

# +-----+-----+-----+-----+
# | 1/1 | 2/2 | 3/3 | C/4 |
# +-----+-----+-----+-----+
# | 4/Q | 5/W | 6/E | D/R |
# +-----+-----+-----+-----+
# | 7/A | 8/S | 9/D | E/F |
# +-----+-----+-----+-----+
# | A/Z | 0/X | B/C | F/V |
# +-----+-----+-----+-----+

KEY_MAP = [
    pygame.K_x, pygame.K_1, pygame.K_2, pygame.K_3,
    pygame.K_q, pygame.K_w, pygame.K_e, pygame.K_a,
    pygame.K_s, pygame.K_d, pygame.K_z, pygame.K_c,
    pygame.K_4, pygame.K_r, pygame.K_f, pygame.K_v
]
KEY_LOOKUP = {code: key for key, code in enumerate(KEY_MAP)}


class PygameRenderer(Renderer):
    """Scaled up frame buffer with a register panel underneath"""

    def __init__(self, scale=VIDEO_RES, registers=None, caption="NOTCH8 DISPLAY"):
        self.scale = scale
        self.registers = registers
        pygame.display.init()
        pygame.font.init()
        self.font = pygame.font.SysFont('Consolas', REG_FONT_RES)
        self.line_off = self.font.size("V")[1]

        self.video_w = VIDEO_X * scale
        self.video_h = VIDEO_Y * scale
        panel_h = REG_LINES * self.line_off + REG_FONT_PAD
        logging.debug(f"Video memory display {VIDEO_X} by {VIDEO_Y}, {self.video_w} x {self.video_h} pixels")
        logging.debug(f"Register display {self.video_w} x {panel_h} pixels")

        pygame.display.set_caption(caption)
        logging.info(f"Display mode {self.video_w} x {self.video_h + panel_h}")
        self.screen = pygame.display.set_mode([self.video_w, self.video_h + panel_h])
        self.screen.fill(PIXEL_OFF, (0, 0, self.video_w, self.video_h))
        # What is currently on screen, so only changed pixels get redrawn
        self.shown = bytearray(VIDEO_X * VIDEO_Y)

    def render(self, display):
        res = self.scale
        for index, px in enumerate(display.pixels):
            if px == self.shown[index]:
                continue
            y_off, x_off = divmod(index, display.width)
            color = PIXEL_ON if px else PIXEL_OFF
            pygame.draw.rect(self.screen, color, (x_off*res, y_off*res, res, res))
        self.shown[:] = display.pixels
        if self.registers is not None:
            self.display_regs()
        pygame.display.flip()

    def display_regs(self):
        # This just blanks the register display.
        self.screen.fill((255,255,255), (0, self.video_h, self.video_w, self.screen.get_height() - self.video_h))
        for row, line in enumerate(self.registers.format()):
            ts = self.font.render(line, False, (0,0,0))
            self.screen.blit(ts, (0, self.video_h + self.line_off * row))

    def close(self):
        pygame.display.quit()


class PygameSpeaker(Speaker):
    """Square wave tone through pygame.mixer, looped while active.

    Machines without an audio device still run, just silently.
    """

    def __init__(self, frequency=TONE_HZ, volume=TONE_VOLUME):
        self.sound = None
        self.active = False
        try:
            pygame.mixer.init(SOUND_FREQUENCY, -16, 1, 512)
        except pygame.error as e:
            logging.warning(f"Audio unavailable, running without sound: {e}")
            return
        period = SOUND_FREQUENCY // frequency
        amplitude = int(32767 * volume)
        one_cycle = [amplitude if s < period // 2 else -amplitude for s in range(period)]
        samples = array.array('h', one_cycle * frequency)
        self.sound = pygame.mixer.Sound(buffer=samples.tobytes())

    def set_tone(self, active):
        if active == self.active:
            return
        self.active = active
        if self.sound is None:
            return
        if active:
            self.sound.play(loops=-1)
        else:
            self.sound.stop()

    def close(self):
        if self.sound is not None:
            self.sound.stop()
            pygame.mixer.quit()


class PygameInput(InputSource):
    """Keyboard events mapped onto the hex keypad.

    Escape or closing the window asks the machine to stop, Space single
    steps while paused at a breakpoint and P resumes.
    """

    def __init__(self):
        pygame.display.init()

    def poll(self):
        events = []
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                events.append(Signal.QUIT)
            elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                pressed = event.type == pygame.KEYDOWN
                if event.key in KEY_LOOKUP:
                    events.append(KeyEvent(KEY_LOOKUP[event.key], pressed))
                elif not pressed:
                    continue
                elif event.key == pygame.K_ESCAPE:
                    events.append(Signal.QUIT)
                elif event.key == pygame.K_SPACE:
                    events.append(Signal.STEP)
                elif event.key == pygame.K_p:
                    events.append(Signal.RESUME)
        return events
