# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

import logging

from notch8.constants import TOTAL_RAM, ADDR_MASK, LOAD_POS, FONT_LOAD, FONT_MAP, GLYPH_SIZE
from notch8.errors import MemoryOutOfBounds, RomLoadError


class Memory:
    """4K of flat, byte addressable Chip-8 RAM.

    The low 512 bytes are reserved for the interpreter. All we keep there
    is the hex digit font at FONT_LOAD. Programs are copied in verbatim
    starting at LOAD_POS and may use everything up to 0xFFF.

    Addresses are never silently truncated here. Callers that compute
    an address (I plus an offset) mask it to 12 bits with ADDR_MASK
    first; anything still outside the array is a MemoryOutOfBounds.
    """

    def __init__(self, size=TOTAL_RAM):
        self.size = size
        self.ram = bytearray(size)
        self.ram[FONT_LOAD:FONT_LOAD + len(FONT_MAP)] = bytes(FONT_MAP)
        logging.debug(f"Main memory {size:d} bytes initalised")
        logging.debug(f"Fonts loaded to {FONT_LOAD:04x}")

    def _check(self, addr):
        if addr < 0 or addr >= self.size:
            raise MemoryOutOfBounds(addr)

    def read(self, addr):
        self._check(addr)
        return self.ram[addr]

    def write(self, addr, value):
        self._check(addr)
        self.ram[addr] = value & 0xFF

    def read_instruction_word(self, addr):
        """Fetch the big-endian 16 bit word at addr"""
        self._check(addr)
        self._check(addr + 1)
        return self.ram[addr] << 8 | self.ram[addr + 1]

    def read_block(self, addr, length):
        """Read length bytes from addr, wrapping past 0xFFF back to 0"""
        return bytes(self.read((addr + offset) & ADDR_MASK) for offset in range(length))

    def glyph_address(self, digit):
        """Address of the 5 byte font sprite for hex digit 0-F"""
        if digit < 0 or digit > 0xF:
            raise ValueError(f"No glyph for digit {digit}")
        return FONT_LOAD + GLYPH_SIZE * digit

    def load(self, program, at=LOAD_POS, name="<program>"):
        """Copy a program image into RAM"""
        program = bytes(program)
        if len(program) > self.size - at:
            raise RomLoadError(name, f"program is {len(program)} bytes, "
                                     f"only {self.size - at} available")
        self.ram[at:at + len(program)] = program
        logging.info(f"Program length {len(program)} bytes loaded at 0x{at:04x}")

    def dump(self, start, length=16):
        """Hex listing of length bytes from start, 16 to a row"""
        lines = []
        end = min(start + length, self.size)
        for row in range(start, end, 16):
            cells = " ".join(f"{b:02x}" for b in self.ram[row:min(row + 16, end)])
            lines.append(f"{row:04x}: {cells}")
        return "\n".join(lines)
