"""
Keyboard and display devices for the LC3.

The machine only talks to a Console: the memory-mapped keyboard status
register polls it, and the trap routines read from and write to it.
"""

import codecs
import os
import sys
import time

from .errors import ConsoleError


class Console(object):
    """
    The capability the machine needs from its surroundings.
    """
    def poll(self, timeout):
        """
        Wait up to timeout seconds for a key. Return its code, or None
        if nothing was typed.
        """
        raise NotImplementedError

    def getc(self):
        """
        Block until a character is typed and return it as a
        one-character str. Unlike poll, which hands back the key's
        integer code, callers take ord() of the result themselves.
        """
        raise NotImplementedError

    def write(self, text):
        raise NotImplementedError

    def flush(self):
        pass

    def reset(self):
        """ Forget any typed-ahead input. """
        pass

    def __enter__(self):
        return self

    def __exit__(self, type, value, trace):
        pass


class ScriptedConsole(Console):
    """
    A console fed from a fixed string; everything written is kept in
    output. Reading past the end of the script is an error, just as a
    closed stdin would be.
    """
    def __init__(self, keys=""):
        self.keys = list(keys)
        self.output = ""
        self.flushed = ""
        self.polls = 0

    def feed(self, keys):
        self.keys.extend(keys)

    def poll(self, timeout):
        self.polls += 1
        if self.keys:
            return ord(self.keys.pop(0))
        return None

    def getc(self):
        if not self.keys:
            raise ConsoleError("no more keyboard input")
        return self.keys.pop(0)

    def write(self, text):
        self.output += text

    def flush(self):
        self.flushed = self.output


class TerminalConsole(Console):
    """
    The process's own terminal. Use as a context manager so that
    cbreak mode is undone when the machine stops.
    """
    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.tattr = None

    def isatty(self):
        try:
            return self.stdin.isatty()
        except (AttributeError, ValueError):
            return False

    def __enter__(self):
        if os.name != 'nt' and self.isatty():
            import termios
            import tty
            self.tattr = termios.tcgetattr(self.stdin)
            tty.setcbreak(self.stdin.fileno(), termios.TCSANOW)
        return self

    def __exit__(self, type, value, trace):
        if self.tattr is not None:
            import termios
            termios.tcsetattr(self.stdin, termios.TCSANOW, self.tattr)
            self.tattr = None

    if os.name == 'nt':
        def _key_ready(self, timeout):
            import msvcrt
            deadline = time.time() + timeout
            while not msvcrt.kbhit():
                if time.time() >= deadline:
                    return False
                time.sleep(0.01)
            return True

        def _read_char(self):
            import msvcrt
            return msvcrt.getwch()
    else:
        def _key_ready(self, timeout):
            import select
            ready, _, _ = select.select([self.stdin], [], [], timeout)
            return len(ready) > 0

        def _read_char(self):
            # read the descriptor select watched, never the stream's buffer
            fd = self.stdin.fileno()
            decoder = codecs.getincrementaldecoder('utf-8')('replace')
            while True:
                data = os.read(fd, 1)
                char = decoder.decode(data, final=not data)
                if char or not data:
                    return char

    def poll(self, timeout):
        try:
            if not self._key_ready(timeout):
                return None
            char = self._read_char()
        except (OSError, ValueError) as exc:
            raise ConsoleError("keyboard poll failed: %s" % exc) from exc
        if char == "":
            # end of input is always "ready"; wait as if nothing was typed
            time.sleep(timeout)
            return None
        return ord(char) & 0xFFFF

    def getc(self):
        try:
            char = self._read_char()
        except (OSError, ValueError) as exc:
            raise ConsoleError("keyboard read failed: %s" % exc) from exc
        if char == "":
            raise ConsoleError("keyboard read failed: end of input")
        return char

    def write(self, text):
        try:
            self.stdout.write(text)
        except (OSError, ValueError) as exc:
            raise ConsoleError("display write failed: %s" % exc) from exc

    def flush(self):
        try:
            self.stdout.flush()
        except (OSError, ValueError) as exc:
            raise ConsoleError("display flush failed: %s" % exc) from exc


class KernelConsole(Console):
    """
    A Jupyter front end, through a metakernel kernel. A typed line is
    handed to the machine one character at a time; an empty line reads
    as a NUL character.
    """
    def __init__(self, kernel):
        self.kernel = kernel
        self.char_buffer = []
        self.pending = []

    def reset(self):
        self.char_buffer = []
        self.pending = []

    def _fill(self):
        ### No prompt for input:
        data = self.kernel.raw_input()
        if data is None:
            raise ConsoleError("keyboard read failed: no input from front end")
        data = data.replace("\\n", "\n")
        if len(data) == 0:
            self.char_buffer = ["\0"] # end of string
        else:
            self.char_buffer = list(data)

    def poll(self, timeout):
        # a notebook cannot be polled; only already typed characters count
        if self.char_buffer:
            return ord(self.char_buffer.pop(0))
        return None

    def getc(self):
        if len(self.char_buffer) == 0:
            self.flush()
            self._fill()
        return self.char_buffer.pop(0)

    def write(self, text):
        self.pending.append(text)

    def flush(self):
        if self.pending:
            text = "".join(self.pending)
            self.pending = []
            self.kernel.Print(text, end="")
