# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

from notch8.constants import KEY_COUNT


class Keypad:
    """Latched state of the sixteen key hex keypad.

    +---+---+---+---+
    | 1 | 2 | 3 | C |
    +---+---+---+---+
    | 4 | 5 | 6 | D |
    +---+---+---+---+
    | 7 | 8 | 9 | E |
    +---+---+---+---+
    | A | 0 | B | F |
    +---+---+---+---+

    Besides the up/down state of each key we remember the key that changed
    most recently and whether that change has been consumed yet. The wait
    for key instruction uses the pair to block until something happens.
    """

    def __init__(self):
        self.keys = [False] * KEY_COUNT
        self.last_key = 0
        self.dirty = False

    def _check(self, key):
        if key < 0 or key >= KEY_COUNT:
            raise ValueError(f"No such key {key:#x}")

    def set_key(self, key, pressed):
        self._check(key)
        self.keys[key] = pressed
        self.last_key = key
        self.dirty = True

    def is_pressed(self, key):
        self._check(key)
        return self.keys[key]

    def begin_wait(self):
        """Forget any transition seen so far, only new ones count"""
        self.dirty = False

    def take_transition(self):
        """Return the key behind the latest unconsumed transition, or None"""
        if not self.dirty:
            return None
        self.dirty = False
        return self.last_key
