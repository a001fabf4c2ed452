"""
Run LC3 object images in the terminal:

    lc3vm program.obj [more.obj ...]

Images are loaded in order into a zeroed memory, and execution starts at
x3000. The exit status is 0 after HALT and 1 after any machine error.
"""

import argparse
import sys

from ._version import __version__
from .console import TerminalConsole
from .errors import LC3Error
from .image import load_image_file
from .isa import lc_hex
from .machine import LC3


def make_parser():
    parser = argparse.ArgumentParser(
        prog="lc3vm", description="Run LC3 object images.")
    parser.add_argument("images", nargs="+", metavar="IMAGE",
                        help="object file(s); later images overwrite earlier ones")
    parser.add_argument("--trace", action="store_true",
                        help="print every instruction and register change")
    parser.add_argument("--poll-timeout", type=float, default=1.0,
                        metavar="SECONDS",
                        help="how long a keyboard status read waits for a key")
    parser.add_argument("--regs", action="store_true",
                        help="show the registers when the machine stops")
    parser.add_argument("--version", action="version",
                        version="%(prog)s " + __version__)
    return parser

def main(argv=None, console=None):
    args = make_parser().parse_args(argv)
    if console is None:
        console = TerminalConsole()
    lc3 = LC3(console=console, debug=args.trace, poll_timeout=args.poll_timeout)
    try:
        for filename in args.images:
            origin, count = load_image_file(filename, lc3.memory)
            if args.trace:
                lc3.Print("Loaded %s: %d word(s) at %s" % (filename, count, lc_hex(origin)))
    except LC3Error as exc:
        lc3.Error("lc3vm: %s\n" % exc)
        return 1
    status = 0
    try:
        with console:
            lc3.run()
    except LC3Error as exc:
        lc3.Error("\nlc3vm: runtime error at %s: %s\n" % (lc_hex(lc3.get_pc() - 1), exc))
        status = 1
    except KeyboardInterrupt:
        lc3.Error("\nlc3vm: interrupted at %s\n" % lc_hex(lc3.get_pc()))
        status = 130
    if args.regs or status:
        lc3.dump_registers()
    return status

if __name__ == '__main__':
    sys.exit(main())
