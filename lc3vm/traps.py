"""
Trap service routines. The TRAP instruction hands its vector to
dispatch(); each routine does its I/O through the machine's console.
"""

from .errors import ConsoleError
from .isa import TrapVector, lc_hex

PROMPT = "Enter a character: "


def _console(lc3):
    if lc3.console is None:
        raise ConsoleError("no console attached to the machine")
    return lc3.console

def _write_string(lc3, packed):
    console = _console(lc3)
    location = lc3.get_register(0)
    memory = lc3.get_memory(location)
    while memory != 0:
        if packed:
            console.write(chr(memory & 0b0000000011111111))
            if memory & 0b1111111100000000:
                console.write(chr((memory & 0b1111111100000000) >> 8))
        else:
            console.write(chr(memory & 0b0000000011111111))
        location = (location + 1) & 0xFFFF
        memory = lc3.get_memory(location)
    console.flush()

def trap_getc(lc3):
    char = _console(lc3).getc()
    lc3.set_register(0, ord(char) & 0xFF)

def trap_out(lc3):
    console = _console(lc3)
    console.write(chr(lc3.get_register(0) & 0xFF))
    console.flush()

def trap_puts(lc3):
    _write_string(lc3, packed=False)

def trap_in(lc3):
    console = _console(lc3)
    console.write(PROMPT)
    console.flush()
    char = console.getc()
    console.write(char)
    console.flush()
    lc3.set_register(0, ord(char) & 0xFFFF)

def trap_putsp(lc3):
    _write_string(lc3, packed=True)

def trap_halt(lc3):
    if lc3.console is not None:
        lc3.console.flush()
    lc3.running = False

TRAP_ROUTINES = {
    TrapVector.GETC: trap_getc,
    TrapVector.OUT: trap_out,
    TrapVector.PUTS: trap_puts,
    TrapVector.IN: trap_in,
    TrapVector.PUTSP: trap_putsp,
    TrapVector.HALT: trap_halt,
}

def dispatch(lc3, vector):
    """
    Run the service routine for vector. Unknown vectors do nothing
    beyond a warning.
    """
    routine = TRAP_ROUTINES.get(vector)
    if routine is None:
        if lc3.warn:
            lc3.Error("Warning: ignoring invalid TRAP vector %s at %s\n" %
                      (lc_hex(vector), lc_hex(lc3.get_pc() - 1)))
        return
    routine(lc3)
