# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

import logging

from notch8.errors import RomLoadError


def load_rom(path):
    """Read a raw Chip-8 program image.

    ROMs have no header, they are just the instruction words that get
    copied to 0x200. Anything that stops us reading the file is turned
    into a RomLoadError.
    """
    try:
        with open(path, 'rb') as p:
            program = p.read()
    except OSError as e:
        raise RomLoadError(path, e.strerror or str(e)) from e
    if not program:
        raise RomLoadError(path, "file is empty")
    logging.info(f"Program length {len(program)} bytes.")
    return program
