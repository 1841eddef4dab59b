# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

import time

from notch8.constants import TIMER_HZ


class Timers:
    """Counts the delay and sound timers of a RegisterFile down at TIMER_HZ.

    The rate is taken from a monotonic clock rather than from the number
    of instructions executed, so the timers keep real time whatever speed
    the interpreter runs at. Time left over from one update is carried
    into the next.
    """

    def __init__(self, registers, rate=TIMER_HZ, clock=time.monotonic):
        self.registers = registers
        self.interval = 1.0 / rate
        self.clock = clock
        self.last = None

    def tick(self):
        """Remove one count from each running timer. Neither goes below 0"""
        regs = self.registers
        if regs.delay_timer > 0:
            regs.delay_timer -= 1
        if regs.sound_timer > 0:
            regs.sound_timer -= 1

    def update(self, now=None):
        """Apply every tick that has fallen due since the last update"""
        if now is None:
            now = self.clock()
        if self.last is None:
            self.last = now
            return 0
        due = int((now - self.last) / self.interval)
        if due <= 0:
            return 0
        self.last += due * self.interval
        # Both timers are 8 bit, anything past 255 ticks is the same as 255
        for _ in range(min(due, 0xFF)):
            self.tick()
        return due

    @property
    def tone_active(self):
        return self.registers.sound_timer > 0
