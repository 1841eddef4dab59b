# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

"""Instruction decoding and a small disassembler.

Every Chip-8 instruction is one 16 bit big-endian word. The top nibble
selects the instruction family, the rest is split into fields:

    op   x    y    n       nn = low byte, nnn = low 12 bits
    ---- ---- ---- ----
"""

from collections import namedtuple

from notch8.constants import LOAD_POS

Instruction = namedtuple("Instruction", "raw op x y n nn nnn")

# 0x8xyN register to register ops
ALU_NAMES = {
    0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR",
    0x4: "ADD", 0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL",
}

# 0xFxNN misc ops, keyed on the low byte
MISC_FORMATS = {
    0x07: "LD V{x:1X}, DT",
    0x0A: "LD V{x:1X}, K",
    0x15: "LD DT, V{x:1X}",
    0x18: "LD ST, V{x:1X}",
    0x1E: "ADD I, V{x:1X}",
    0x29: "LD F, V{x:1X}",
    0x33: "LD B, V{x:1X}",
    0x55: "LD [I], V{x:1X}",
    0x65: "LD V{x:1X}, [I]",
}

KEY_FORMATS = {
    0x9E: "SKP V{x:1X}",
    0xA1: "SKNP V{x:1X}",
}


def decode(word):
    return Instruction(
        raw=word,
        op=word >> 12,
        x=word >> 8 & 0x0F,
        y=word >> 4 & 0x0F,
        n=word & 0x000F,
        nn=word & 0x00FF,
        nnn=word & 0x0FFF,
    )


def disassemble(word):
    """Return the mnemonic for an instruction word.

    Words that do not encode a Chip-8 instruction come back as "???"
    followed by the raw value, so a listing of a ROM with data mixed
    into it can still be printed.
    """
    ins = decode(word)
    op, x, y, n, nn, nnn = ins.op, ins.x, ins.y, ins.n, ins.nn, ins.nnn
    if word == 0x00E0:
        return "CLS"
    if word == 0x00EE:
        return "RET"
    if op == 0x1:
        return f"JP {nnn:03x}"
    if op == 0x2:
        return f"CALL {nnn:03x}"
    if op == 0x3:
        return f"SE V{x:1X}, {nn:02x}"
    if op == 0x4:
        return f"SNE V{x:1X}, {nn:02x}"
    if op == 0x5 and n == 0:
        return f"SE V{x:1X}, V{y:1X}"
    if op == 0x6:
        return f"LD V{x:1X}, {nn:02x}"
    if op == 0x7:
        return f"ADD V{x:1X}, {nn:02x}"
    if op == 0x8 and n in ALU_NAMES:
        return f"{ALU_NAMES[n]} V{x:1X}, V{y:1X}"
    if op == 0x9 and n == 0:
        return f"SNE V{x:1X}, V{y:1X}"
    if op == 0xA:
        return f"LD I, {nnn:03x}"
    if op == 0xB:
        return f"JP V0, {nnn:03x}"
    if op == 0xC:
        return f"RND V{x:1X}, {nn:02x}"
    if op == 0xD:
        return f"DRW V{x:1X}, V{y:1X}, {n:1x}"
    if op == 0xE and nn in KEY_FORMATS:
        return KEY_FORMATS[nn].format(x=x)
    if op == 0xF and nn in MISC_FORMATS:
        return MISC_FORMATS[nn].format(x=x)
    return f"??? 0x{word:04x}"


def listing(program, origin=LOAD_POS):
    """Yield (address, word, mnemonic) for each word of a program image.

    A trailing odd byte is padded with zero.
    """
    program = bytes(program)
    if len(program) % 2:
        program += b"\x00"
    for offset in range(0, len(program), 2):
        word = program[offset] << 8 | program[offset + 1]
        yield origin + offset, word, disassemble(word)
