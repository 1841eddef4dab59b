# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

import logging
import random
import time

from notch8.constants import CYCLE_HZ, TIMER_HZ, FLAG, ADDR_MASK, LOAD_POS
from notch8.decode import decode, disassemble
from notch8.display import Display
from notch8.errors import InvalidOpcode
from notch8.keypad import Keypad
from notch8.memory import Memory
from notch8.peripherals import KeyEvent, Signal, NullRenderer, NullSpeaker, NullInput
from notch8.registers import RegisterFile
from notch8.timers import Timers

# How long to nap between polls when nothing can run and the
# interpreter is unthrottled (paused, or blocked on a key wait)
IDLE_DELAY = 0.002

# Never try to catch up on more than this much lost time in one go
MAX_LAG = 0.1


class Chip8:
    """The fetch-decode-execute engine.

    Owns the memory, registers, frame buffer, key latch and timers, and
    talks to the outside world only through the renderer, speaker and
    input source it is given. With the default Null collaborators the
    machine runs headless, which is how the tests drive it.

    The loop is flat. CALL and RET move return addresses on the
    RegisterFile stack and never recurse, and the wait for key
    instruction does not block either: it parks the engine in a waiting
    state which step() resolves once the key latch reports a transition.
    """

    def __init__(self, program=b"", renderer=None, speaker=None, input_source=None,
                 speed=CYCLE_HZ, shift_uses_vy=False, seed=None, breakpoints=(),
                 trace=False, clock=time.monotonic, sleep=time.sleep, name="<program>"):
        self.memory = Memory()
        self.regs = RegisterFile()
        self.display = Display()
        self.keypad = Keypad()
        self.timers = Timers(self.regs, TIMER_HZ, clock)

        self.renderer = renderer if renderer is not None else NullRenderer()
        self.speaker = speaker if speaker is not None else NullSpeaker()
        self.input_source = input_source if input_source is not None else NullInput()

        # speed is in instructions per second, 0 runs as fast as we can
        self.cycle_interval = 1.0 / speed if speed > 0 else 0.0
        # Quirk: 8xy6/8xyE shift Vy into Vx instead of shifting Vx in place
        self.shift_uses_vy = shift_uses_vy
        self.random = random.Random(seed)
        self.breakpoints = set(breakpoints)
        self.trace = trace
        self.clock = clock
        self.sleep = sleep

        self.halted = False
        self.paused = False
        # Index of the register waiting on Fx0A, None when not waiting
        self.waiting = None
        self.cycles = 0
        self._step_pending = False
        self._resumed_at = None

        logging.info(f"Loading program {name} at 0x{LOAD_POS:04x}")
        self.memory.load(program, LOAD_POS, name)

    ## Control ##

    def halt(self):
        self.halted = True

    def poll_input(self):
        """Drain the input source into the key latch and act on signals"""
        for event in self.input_source.poll():
            if isinstance(event, KeyEvent):
                self.keypad.set_key(event.key, event.pressed)
            elif event is Signal.QUIT:
                logging.info("Close requested")
                self.halt()
            elif event is Signal.STEP:
                if self.paused:
                    self._step_pending = True
            elif event is Signal.RESUME:
                if self.paused:
                    logging.info(f"Resuming at 0x{self.regs.pc:04x}")
                    self.paused = False
                    self._resumed_at = self.regs.pc

    def ready(self):
        """Check breakpoints and the paused state before a cycle"""
        pc = self.regs.pc
        if (not self.paused and self.waiting is None and pc in self.breakpoints
                and pc != self._resumed_at):
            logging.info(f"Breakpoint at 0x{pc:04x}")
            logging.info("\n".join(self.dump_state()))
            self.paused = True
        if not self.paused:
            return True
        if self._step_pending:
            self._step_pending = False
            self._resumed_at = pc
            return True
        return False

    def run(self, max_cycles=None):
        """Main emulation loop.

        Each pass polls the input source, lets the timers catch up with
        the clock, updates the tone and then, if the next instruction is
        due, runs one cycle. Instructions are paced to the configured
        speed, the timers are paced by the clock alone.
        """
        logging.info("Emulation starting")
        self.renderer.render(self.display)
        next_cycle = self.clock()
        try:
            while not self.halted:
                if max_cycles is not None and self.cycles >= max_cycles:
                    break
                self.poll_input()
                if self.halted:
                    break
                now = self.clock()
                self.timers.update(now)
                self.speaker.set_tone(self.timers.tone_active)

                if now < next_cycle:
                    self.sleep(next_cycle - now)
                    continue
                next_cycle = max(next_cycle + self.cycle_interval, now - MAX_LAG)

                if not self.ready() or not self.step():
                    if not self.cycle_interval:
                        self.sleep(IDLE_DELAY)
                    continue
                if self.regs.pc != self._resumed_at:
                    self._resumed_at = None
        finally:
            self.speaker.set_tone(False)
        logging.info(f"Emulation halted after {self.cycles} instructions")

    ## Fetch, decode, execute ##

    def step(self):
        """Run one instruction.

        While a key wait is pending this only checks the key latch. It
        returns False if nothing could be done.
        """
        if self.waiting is not None:
            key = self.keypad.take_transition()
            if key is None:
                return False
            logging.debug(f"Store key {key:1x} to V{self.waiting:1X}")
            self.regs[self.waiting] = key
            self.waiting = None
            self.regs.pc += 2
            return True

        pc = self.regs.pc
        instruction = self.memory.read_instruction_word(pc)
        if self.trace:
            logging.debug(f"{pc:04x} | OP 0x{instruction:04x} - {disassemble(instruction)}")
        self.execute(instruction)
        self.cycles += 1
        return True

    def execute(self, instruction):
        """Decode and execute one instruction word.

        Handlers that set PC themselves return True, for everything else
        PC moves on to the next instruction. Skips add their extra 2 on
        top of that.
        """
        ins = decode(instruction)
        op = ins.op
        jumped = None
        if instruction == 0x00E0: # CLS - clear the screen
            self.ins_cls()
        elif instruction == 0x00EE: # RET - return from subroutine
            jumped = self.ins_ret()
        elif op == 0x0: # 0x0nnn SYS calls machine code, which we don't have
            self.invalid(instruction)
        elif op == 0x1: # 0x1nnn JP nnn - Jump to instruction nnn
            jumped = self.ins_jmp(ins.nnn)
        elif op == 0x2: # 0x2nnn CALL - Call subroutine at nnn
            jumped = self.ins_call(ins.nnn)
        elif op == 0x3: # 0x3xkk SE Vx, byte - Skip if Vx == kk
            self.ins_skipim(ins.x, ins.nn)
        elif op == 0x4: # 0x4xkk - SNE Vx, kk
            self.ins_skipim(ins.x, ins.nn, eq=False)
        elif op == 0x5: # 0x5xy0 - SE Vx, Vy
            if ins.n:
                self.invalid(instruction)
            self.ins_skipreg(ins.x, ins.y)
        elif op == 0x6: # 0x6xnn LD Vx, nn
            self.ins_load(ins.x, ins.nn)
        elif op == 0x7: # 0x7xkk - ADD Vx, kk
            self.ins_add(ins.x, ins.nn)
        elif op == 0x8: # 0x8000 instructions handle ALU ops
            self.ins_alu(ins)
        elif op == 0x9: # 0x9xy0 - SNE Vx, Vy
            if ins.n:
                self.invalid(instruction)
            self.ins_skipreg(ins.x, ins.y, eq=False)
        elif op == 0xA: # 0xAnnn LD I, nnn
            self.ins_loadi(ins.nnn)
        elif op == 0xB: # 0xBnnn JP V0, nnn
            jumped = self.ins_jmp_offset(ins.nnn)
        elif op == 0xC: # 0xCxkk - RND Vx, kk
            self.ins_rnd(ins.x, ins.nn)
        elif op == 0xD: # 0xDxyn DRW Vx, Vy, n
            self.ins_draw(ins.x, ins.y, ins.n)
        elif op == 0xE: # Key ops
            self.ins_skipkey(ins)
        else: # 0xF - Other IO
            jumped = self.ins_io(ins)

        if not jumped:
            self.regs.pc += 2

    def invalid(self, instruction):
        logging.error(f"Undefined opcode {instruction:04x} at address {self.regs.pc:04x}")
        raise InvalidOpcode(instruction, self.regs.pc)

    ## Instructions ##

    def ins_cls(self):
        """Handle instruction 0x00e0 CLS - Clear the screen"""
        self.display.clear()
        self.renderer.render(self.display)

    def ins_ret(self):
        self.regs.pc = self.regs.pop()
        return True

    def ins_jmp(self, nnn):
        self.regs.pc = nnn
        return True

    def ins_call(self, nnn):
        """Push the address after the CALL and jump to nnn"""
        self.regs.push(self.regs.pc + 2)
        self.regs.pc = nnn
        return True

    def ins_skipim(self, x, kk, eq=True):
        if (self.regs[x] == kk) == eq:
            self.regs.pc += 2

    def ins_skipreg(self, x, y, eq=True):
        if (self.regs[x] == self.regs[y]) == eq:
            self.regs.pc += 2

    def ins_load(self, x, nn):
        self.regs[x] = nn

    def ins_add(self, x, kk):
        """ADD Vx, kk wraps at 8 bits and leaves VF alone"""
        self.regs[x] = self.regs[x] + kk

    def ins_alu(self, ins):
        regs = self.regs
        x, y, op = ins.x, ins.y, ins.n
        vx, vy = regs[x], regs[y]
        if op == 0x0:
            # LD Vx, Vy
            regs[x] = vy
        elif op == 0x1:
            # OR Vx, Vy
            regs[x] = vx | vy
        elif op == 0x2:
            # AND Vx, Vy
            regs[x] = vx & vy
        elif op == 0x3:
            # XOR Vx, Vy
            regs[x] = vx ^ vy
        elif op == 0x4:
            # ADD Vx, Vy, set carry flag if > 255. Truncate to 8 bits.
            result = vx + vy
            regs[x] = result
            regs[FLAG] = 1 if result > 0xFF else 0
        elif op == 0x5:
            # SUB Vx, Vy. Flag is set when there is no borrow.
            regs[x] = vx - vy
            regs[FLAG] = 1 if vx >= vy else 0
        elif op == 0x6:
            # SHR Vx. VF gets the bit shifted out.
            src = vy if self.shift_uses_vy else vx
            regs[x] = src >> 1
            regs[FLAG] = src & 0x1
        elif op == 0x7:
            # SUBN Vx, Vy
            regs[x] = vy - vx
            regs[FLAG] = 1 if vy >= vx else 0
        elif op == 0xE:
            # SHL Vx. VF gets the old top bit.
            src = vy if self.shift_uses_vy else vx
            regs[x] = src << 1
            regs[FLAG] = src >> 7 & 0x1
        else:
            self.invalid(ins.raw)

    def ins_loadi(self, n):
        self.regs.i = n

    def ins_jmp_offset(self, nnn):
        self.regs.pc = (nnn + self.regs[0]) & ADDR_MASK
        return True

    def ins_rnd(self, x, kk):
        self.regs[x] = self.random.randint(0, 255) & kk

    def ins_draw(self, x, y, n):
        """Draw n-row sprite at location (Vx, Vy) using I as pointer"""
        regs = self.regs
        sprite = self.memory.read_block(regs.i, n)
        logging.debug(f"Memory loc {regs.i:04x}, {n} bytes: {sprite.hex()}")
        collision = self.display.draw(regs[x], regs[y], sprite)
        regs[FLAG] = 1 if collision else 0
        self.renderer.render(self.display)

    def ins_skipkey(self, ins):
        key = self.regs[ins.x] & 0x0F
        if ins.nn == 0x9E:
            if self.keypad.is_pressed(key):
                self.regs.pc += 2
        elif ins.nn == 0xA1:
            if not self.keypad.is_pressed(key):
                self.regs.pc += 2
        else:
            self.invalid(ins.raw)

    def ins_io(self, ins):
        regs = self.regs
        memory = self.memory
        code = ins.nn
        x = ins.x
        if code == 0x07:
            regs[x] = regs.delay_timer
        elif code == 0x0A:
            # Halt execution and wait for a keypress. Store the key in Vx
            logging.debug(f"Waiting for a key for V{x:1X}")
            self.keypad.begin_wait()
            self.waiting = x
            return True
        elif code == 0x15:
            regs.delay_timer = regs[x]
        elif code == 0x18:
            regs.sound_timer = regs[x]
        elif code == 0x1E:
            regs.i = (regs.i + regs[x]) & ADDR_MASK
        elif code == 0x29:
            regs.i = memory.glyph_address(regs[x] & 0x0F)
        elif code == 0x33:
            value = regs[x]
            digits = (value // 100, value // 10 % 10, value % 10)
            for offset, digit in enumerate(digits):
                memory.write((regs.i + offset) & ADDR_MASK, digit)
        elif code == 0x55:
            for n in range(x + 1):
                memory.write((regs.i + n) & ADDR_MASK, regs[n])
        elif code == 0x65:
            for n in range(x + 1):
                regs[n] = memory.read((regs.i + n) & ADDR_MASK)
        else:
            self.invalid(ins.raw)

    ## Diagnostics ##

    def dump_state(self):
        """CPU state as a list of lines, enough to replay a fault from the ROM"""
        regs = self.regs
        lines = regs.format()
        stack = " ".join(f"{addr:04x}" for addr in regs.stack[:regs.sp])
        lines.append(f"Stack: [{stack}]")
        lines.append("I -> " + self.memory.dump(regs.i, 8))
        pc = regs.pc
        if 0 <= pc < self.memory.size - 1:
            word = self.memory.read_instruction_word(pc)
            lines.append(f"{pc:04x} | OP 0x{word:04x} - {disassemble(word)}")
        else:
            lines.append(f"{pc:04x} | outside memory")
        if self.waiting is not None:
            lines.append(f"Waiting for a key for V{self.waiting:1X}")
        return lines
