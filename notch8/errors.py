# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

"""Things that can go wrong inside the machine.

Every one of these is fatal for the current run. The interpreter has no
way to recover from a bad opcode or a blown stack, so they are raised all
the way up to the command line which reports them and exits.
"""


class Chip8Error(Exception):
    """Base class for every fault raised by the virtual machine"""


class InvalidOpcode(Chip8Error):
    def __init__(self, instruction, pc):
        self.instruction = instruction
        self.pc = pc
        super().__init__(f"Invalid instruction 0x{instruction:04x} at 0x{pc:04x}")


class InvalidRegister(Chip8Error):
    def __init__(self, index):
        self.index = index
        super().__init__(f"No such register V{index}")


class StackOverflow(Chip8Error):
    def __init__(self, depth):
        self.depth = depth
        super().__init__(f"Stack overflow, {depth} return addresses already stored")


class StackUnderflow(Chip8Error):
    def __init__(self):
        super().__init__("Stack underflow, return with an empty stack")


class MemoryOutOfBounds(Chip8Error):
    def __init__(self, address):
        self.address = address
        super().__init__(f"Memory access error at 0x{address:04x}")


class RomLoadError(Chip8Error):
    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load {path}: {reason}")
