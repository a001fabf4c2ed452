"""
Interactive control of one LC3: the directives behind the Jupyter
kernel's %magics, and loading of hex-word cells.
"""

from .console import KernelConsole
from .errors import LC3Error
from .image import load_image_file, load_words, parse_hex_words
from .isa import PC_START, lc_hex
from .machine import LC3

DIRECTIVES = ["%bp", "%cont", "%d", "%dis", "%dump", "%exe", "%load", "%mem",
              "%pc", "%reg", "%regs", "%reset", "%step", "%warn"]


def parse_hex(word):
    """ Parse xNNNN, 0xNNNN, or bare NNNN as hex. """
    word = word.lower()
    if word.startswith("0x"):
        word = word[2:]
    elif word.startswith("x"):
        word = word[1:]
    return int(word, 16) & 0xFFFF


class Session(object):
    """
    Wraps an LC3 for a kernel. text is either a %directive or a hex
    word listing, which is loaded as an image.
    """
    def __init__(self, kernel=None, console=None, poll_timeout=0):
        self.kernel = kernel
        if console is None and kernel is not None:
            console = KernelConsole(kernel)
        self.console = console
        self.lc3 = LC3(kernel, console=self.console, poll_timeout=poll_timeout)
        self.orig = PC_START

    def Print(self, *args, **kwargs):
        self.lc3.Print(*args, **kwargs)

    def Error(self, string):
        self.lc3.Error(string)

    def load_listing(self, text):
        origin, count = load_words(parse_hex_words(text), self.lc3.memory)
        self.orig = origin
        self.lc3.set_pc(origin)
        self.Print("Loaded %d word(s) at %s. Use %%dis or %%dump to examine; use %%exe to run." %
                   (count, lc_hex(origin)))

    def report(self):
        self.Print("=" * 60)
        if self.lc3.suspended:
            self.Print("Computation SUSPENDED")
        else:
            self.Print("Computation completed")
        self.Print("=" * 60)
        self.Print("Instructions:", self.lc3.instruction_count)
        self.lc3.dump_registers()

    def runtime_error(self, exc):
        self.Error("\nRuntime error:\n    memory %s\n%s\n" %
                   (lc_hex(self.lc3.get_pc() - 1), exc))

    def execute(self, text):
        """
        Carry out one cell. Returns True on success.
        """
        words = [word.strip() for word in text.split()]
        if not words:
            return True
        if not words[0].startswith("%"):
            try:
                self.load_listing(text)
            except LC3Error as exc:
                self.Error("\nLoad error\n%s\n" % exc)
                return False
            return True
        command, args = words[0], words[1:]
        if command == "%load":
            try:
                for filename in args:
                    origin, count = load_image_file(filename, self.lc3.memory)
                    self.orig = origin
                    self.Print("Loaded %s: %d word(s) at %s" % (filename, count, lc_hex(origin)))
            except LC3Error as exc:
                self.Error("\nLoad error\n%s\n" % exc)
                return False
            self.lc3.set_pc(self.orig)
            return True
        elif command == "%dump" or command == "%dis":
            try:
                bounds = [parse_hex(word) for word in args[:2]] or [self.orig]
            except ValueError:
                self.Error("Error; addresses are hex, like x3000")
                return False
            self.lc3.dump(*bounds, raw=(command == "%dump"))
            return True
        elif command == "%regs":
            self.lc3.dump_registers()
            return True
        elif command == "%d":
            self.lc3.debug = not self.lc3.debug
            self.Print("Debug is now %s" % ["off", "on"][int(self.lc3.debug)])
            return True
        elif command == "%warn":
            self.lc3.warn = bool(int(args[0])) if args else not self.lc3.warn
            self.Print("Warnings are now %s" % ["off", "on"][int(self.lc3.warn)])
            return True
        elif command == "%pc":
            self.lc3.instruction_count = 0
            self.lc3.set_pc(parse_hex(args[0]))
            self.lc3.dump_registers()
            return True
        elif command == "%mem":
            location = parse_hex(args[0])
            self.lc3.set_memory(location, parse_hex(args[1]))
            self.lc3.dump(location, location)
            return True
        elif command == "%reg":
            self.lc3.set_register(int(args[0].upper().lstrip("R")) & 0b111, parse_hex(args[1]))
            self.lc3.dump_registers()
            return True
        elif command == "%reset":
            self.lc3.memory.clear()
            self.lc3.reset()
            self.lc3.breakpoints = {}
            self.orig = PC_START
            if self.console is not None:
                self.console.reset()
            self.lc3.dump_registers()
            return True
        elif command == "%step":
            orig_debug = self.lc3.debug
            self.lc3.debug = True
            try:
                if self.lc3.running:
                    self.lc3.step()
                else:
                    self.Print("The machine has halted; use %exe to run again")
            except LC3Error as exc:
                self.runtime_error(exc)
                return False
            finally:
                self.lc3.debug = orig_debug
                if self.console is not None:
                    self.console.flush()
            self.lc3.dump_registers()
            return True
        elif command == "%bp":
            if args:
                if args[0] == "clear":
                    self.lc3.breakpoints = {}
                    self.Print("All breakpoints cleared")
                    return True
                self.lc3.breakpoints[parse_hex(args[0])] = True
            if self.lc3.breakpoints:
                self.Print("=" * 60)
                self.Print("Breakpoints")
                self.Print("=" * 60)
                for count, memory in enumerate(sorted(self.lc3.breakpoints), 1):
                    self.Print("    %d) " % count, end="")
                    self.lc3.dump(memory, memory, header=False)
            else:
                self.Print("    No breakpoints set")
            return True
        elif command == "%exe" or command == "%cont":
            try:
                if command == "%exe":
                    if self.console is not None:
                        self.console.reset()
                    self.lc3.reset()
                    self.lc3.set_pc(self.orig)
                self.lc3.run()
            except LC3Error as exc:
                self.runtime_error(exc)
                return False
            finally:
                if self.console is not None:
                    self.console.flush()
            self.report()
            return True
        else:
            self.Error("Invalid Interactive Magic Directive\nHint: %help")
            return False
