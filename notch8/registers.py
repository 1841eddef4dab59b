# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

import logging

from notch8.constants import REG_COUNT, STACK_DEPTH, LOAD_POS
from notch8.errors import InvalidRegister, StackOverflow, StackUnderflow


class RegisterFile:
    """Machine state variables.

    V0-VF live in a 16 byte array so bulk loads and stores are a simple
    loop. VF doubles as the carry/borrow/collision flag. The two timers
    are stored here too, the Timers class only counts them down.
    """

    def __init__(self, stack_depth=STACK_DEPTH):
        self.v = bytearray(REG_COUNT)
        self.i = 0
        self.pc = LOAD_POS
        self.stack = [0] * stack_depth
        self.sp = 0
        # programmable timers used by Chip-8
        self.delay_timer = 0
        self.sound_timer = 0
        logging.debug(f"Registers V0:VF, I initialized")
        logging.debug(f"Register PC initialised to 0x{self.pc:04x}")

    def __getitem__(self, index):
        if index < 0 or index >= REG_COUNT:
            raise InvalidRegister(index)
        return self.v[index]

    def __setitem__(self, index, value):
        if index < 0 or index >= REG_COUNT:
            raise InvalidRegister(index)
        self.v[index] = value & 0xFF

    def push(self, addr):
        if self.sp >= len(self.stack):
            logging.error("Stack overflow")
            raise StackOverflow(self.sp)
        self.stack[self.sp] = addr
        self.sp += 1

    def pop(self):
        if self.sp == 0:
            logging.error("Stack underflow.")
            raise StackUnderflow()
        self.sp -= 1
        return self.stack[self.sp]

    def format(self):
        """Render the registers four to a line, as shown in the register panel"""
        lines = []
        for x in range(0, REG_COUNT, 4):
            lines.append(" ".join(f"V{x+r:1X}: 0x{self.v[x+r]:02x}" for r in range(4)))
        lines.append(f"PC: 0x{self.pc:04x} I: 0x{self.i:04x} SP: {self.sp:d} "
                     f"DT: 0x{self.delay_timer:02x} ST: 0x{self.sound_timer:02x}")
        return lines
