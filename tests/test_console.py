"""
Console implementations other than the scripted one used everywhere else.
"""

import io
import os
import time

import pytest

from lc3vm.console import KernelConsole, TerminalConsole
from lc3vm.errors import ConsoleError


class BrokenStream(io.StringIO):
    def write(self, text):
        raise OSError("display gone")

    def flush(self):
        raise OSError("display gone")


class TestKernelConsole:

    def test_line_becomes_characters(self, kernel):
        kernel.lines = ["ab"]
        console = KernelConsole(kernel)
        assert console.getc() == "a"
        assert console.poll(1.0) == ord("b")
        assert console.poll(1.0) is None

    def test_empty_line_is_nul(self, kernel):
        kernel.lines = [""]
        assert KernelConsole(kernel).getc() == "\0"

    def test_escaped_newline(self, kernel):
        kernel.lines = ["\\n"]
        assert KernelConsole(kernel).getc() == "\n"

    def test_output_is_buffered_until_flush(self, kernel):
        console = KernelConsole(kernel)
        console.write("Hel")
        console.write("lo")
        assert kernel.printed == []
        console.flush()
        assert kernel.printed == ["Hello"]

    def test_reading_flushes_prompt(self, kernel):
        kernel.lines = ["x"]
        console = KernelConsole(kernel)
        console.write("? ")
        console.getc()
        assert kernel.printed == ["? "]

    def test_no_input(self, kernel):
        kernel.lines = [None]
        with pytest.raises(ConsoleError):
            KernelConsole(kernel).getc()


@pytest.fixture
def pipe():
    """ A stdin stream over a pipe, and the raw end that types into it. """
    read_fd, write_fd = os.pipe()
    stdin = open(read_fd, "r")
    keyboard = open(write_fd, "wb", buffering=0)
    yield stdin, keyboard
    stdin.close()
    if not keyboard.closed:
        keyboard.close()


@pytest.mark.skipif(os.name == 'nt', reason="reads stdin directly on POSIX only")
class TestTerminalConsole:

    def test_getc_reads_stream(self, pipe):
        stdin, keyboard = pipe
        keyboard.write(b"hi")
        console = TerminalConsole(stdin=stdin, stdout=io.StringIO())
        assert console.getc() == "h"
        assert console.getc() == "i"

    def test_getc_multibyte_character(self, pipe):
        stdin, keyboard = pipe
        keyboard.write("é".encode("utf-8"))
        console = TerminalConsole(stdin=stdin, stdout=io.StringIO())
        assert console.getc() == "é"

    def test_end_of_input(self, pipe):
        stdin, keyboard = pipe
        keyboard.close()
        console = TerminalConsole(stdin=stdin, stdout=io.StringIO())
        with pytest.raises(ConsoleError):
            console.getc()

    def test_no_descriptor(self):
        console = TerminalConsole(stdin=io.StringIO("x"), stdout=io.StringIO())
        with pytest.raises(ConsoleError):
            console.getc()

    def test_poll_sees_every_typed_ahead_key(self, pipe):
        stdin, keyboard = pipe
        keyboard.write(b"ab")
        console = TerminalConsole(stdin=stdin, stdout=io.StringIO())
        assert console.poll(0.1) == ord("a")
        assert console.poll(0.1) == ord("b")
        assert console.poll(0.1) is None

    def test_poll_waits_at_end_of_input(self, pipe):
        stdin, keyboard = pipe
        keyboard.close()
        console = TerminalConsole(stdin=stdin, stdout=io.StringIO())
        start = time.time()
        assert console.poll(0.2) is None
        assert time.time() - start >= 0.15

    def test_write(self):
        out = io.StringIO()
        console = TerminalConsole(stdin=io.StringIO(), stdout=out)
        console.write("ok")
        console.flush()
        assert out.getvalue() == "ok"

    def test_write_failure(self):
        console = TerminalConsole(stdin=io.StringIO(), stdout=BrokenStream())
        with pytest.raises(ConsoleError):
            console.write("x")
        with pytest.raises(ConsoleError):
            console.flush()

    def test_not_a_tty_keeps_terminal_alone(self):
        console = TerminalConsole(stdin=io.StringIO(), stdout=io.StringIO())
        with console as entered:
            assert entered is console
            assert console.tattr is None
