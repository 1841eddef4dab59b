# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

import argparse
import logging
import sys

from notch8 import __version__
from notch8.constants import CYCLE_HZ, VIDEO_RES
from notch8.cpu import Chip8
from notch8.decode import listing
from notch8.errors import Chip8Error, RomLoadError
from notch8.rom import load_rom

# Exit codes
EXIT_OK = 0
EXIT_USAGE = 1
EXIT_ROM = 2
EXIT_FAULT = 3

aparser = argparse.ArgumentParser(prog="notch8", description="A Chip-8 virtual machine")
aparser.add_argument('program',
    help="A compiled Chip-8 program to load",
    nargs="?")
aparser.add_argument('-v', '--version',
    action="version",
    version=f"%(prog)s {__version__}")
aparser.add_argument('--breakpoint',
    help="A hexadecimal program address at which to pause execution",
    metavar="X",
    nargs="+",
    default=[],
    type=lambda x: int(x, 0))
aparser.add_argument('--debug',
    help="Enable verbose debug logging and an instruction trace",
    action="store_true")
aparser.add_argument('--speed',
    help=f"Instructions per second, 0 for as fast as possible (default {CYCLE_HZ})",
    metavar="HZ",
    type=int,
    default=CYCLE_HZ)
aparser.add_argument('--scale',
    help=f"Size of a Chip-8 pixel on screen (default {VIDEO_RES})",
    metavar="N",
    type=int,
    default=VIDEO_RES)
aparser.add_argument('--shift-vy',
    help="8xy6/8xyE shift Vy into Vx instead of shifting Vx in place",
    action="store_true")
aparser.add_argument('--seed',
    help="Seed for the random number generator",
    type=int)
aparser.add_argument('--headless',
    help="Run without a window, sound or keyboard",
    action="store_true")
aparser.add_argument('--cycles',
    help="Stop after N instructions and print the machine state",
    metavar="N",
    type=int)
aparser.add_argument('--disassemble',
    help="Print a listing of the program and exit",
    action="store_true")


def main(argv=None):
    logging.basicConfig(level=logging.INFO)
    args = aparser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.program is None:
        aparser.print_usage(sys.stderr)
        print(f"{aparser.prog}: error: the following arguments are required: program", file=sys.stderr)
        return EXIT_USAGE

    logging.info("Notch8 - a Chip-8 virtual machine")
    try:
        program = load_rom(args.program)
    except RomLoadError as e:
        logging.error(str(e))
        return EXIT_ROM

    if args.disassemble:
        for addr, word, text in listing(program):
            print(f"{addr:04x} | {word:04x} - {text}")
        return EXIT_OK

    renderer = speaker = input_source = None
    if not args.headless:
        logging.info("Initialise display engine")
        from notch8 import frontend
        renderer = frontend.PygameRenderer(scale=args.scale)
        speaker = frontend.PygameSpeaker()
        input_source = frontend.PygameInput()

    try:
        machine = Chip8(program,
                        renderer=renderer,
                        speaker=speaker,
                        input_source=input_source,
                        speed=args.speed,
                        shift_uses_vy=args.shift_vy,
                        seed=args.seed,
                        breakpoints=args.breakpoint,
                        trace=args.debug,
                        name=args.program)
        if renderer is not None:
            renderer.registers = machine.regs
        machine.run(max_cycles=args.cycles)
    except RomLoadError as e:
        logging.error(str(e))
        return EXIT_ROM
    except Chip8Error as e:
        logging.error(str(e))
        logging.error("Machine state:\n" + "\n".join(machine.dump_state()))
        return EXIT_FAULT
    except KeyboardInterrupt:
        logging.info("Interrupted")
    finally:
        for collaborator in (input_source, speaker, renderer):
            if collaborator is not None:
                collaborator.close()

    if args.cycles is not None:
        print("\n".join(machine.dump_state()))
        print(machine.display)
    return EXIT_OK


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
