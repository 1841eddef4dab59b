# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

"""The seams between the machine and the outside world.

The interpreter core never talks to a window, a sound card or a keyboard
directly. It is handed three collaborators when it is built:

  Renderer     shows the frame buffer, called after every CLS and DRW
  Speaker      turns the tone on while the sound timer is running
  InputSource  hands over key transitions and control signals

The Null versions do nothing and let the machine run headless.
"""

import enum
from collections import namedtuple

KeyEvent = namedtuple("KeyEvent", "key pressed")


class Signal(enum.Enum):
    QUIT = "quit"       # window closed or Escape, stop between instructions
    STEP = "step"       # run one instruction while paused
    RESUME = "resume"   # leave the paused state


class Renderer:
    def render(self, display):
        raise NotImplementedError

    def close(self):
        pass


class Speaker:
    def set_tone(self, active):
        raise NotImplementedError

    def close(self):
        pass


class InputSource:
    def poll(self):
        """Return an iterable of KeyEvent and Signal values seen since the last poll"""
        raise NotImplementedError

    def close(self):
        pass


class NullRenderer(Renderer):
    def render(self, display):
        pass


class NullSpeaker(Speaker):
    def set_tone(self, active):
        pass


class NullInput(InputSource):
    def poll(self):
        return ()
