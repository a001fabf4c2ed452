"""
The LC3 instruction set: opcodes, trap vectors, condition flags, and
the single decode step that turns a machine word into an instruction.

Every field narrower than 16 bits is sign-extended here, so the handlers
in machine.py only ever see 16-bit values.
"""

from collections import namedtuple
from enum import IntEnum, IntFlag

PC_START = 0x3000
MR_KBSR = 0xFE00 # keyboard status
MR_KBDR = 0xFE02 # keyboard data


class Opcode(IntEnum):
    BR = 0b0000
    ADD = 0b0001
    LD = 0b0010
    ST = 0b0011
    JSR = 0b0100
    AND = 0b0101
    LDR = 0b0110
    STR = 0b0111
    RTI = 0b1000 # unused
    NOT = 0b1001
    LDI = 0b1010
    STI = 0b1011
    JMP = 0b1100 # and RET
    RESERVED = 0b1101 # unused
    LEA = 0b1110
    TRAP = 0b1111


class TrapVector(IntEnum):
    GETC = 0x20  # read a character, no echo
    OUT = 0x21   # write a character
    PUTS = 0x22  # write a word string
    IN = 0x23    # prompt, read a character, echo
    PUTSP = 0x24 # write a byte string
    HALT = 0x25


class Condition(IntFlag):
    POS = 1 << 0
    ZERO = 1 << 1
    NEG = 1 << 2


def lc_bin(v):
    """ Truncate any extra bytes """
    return v & 0xFFFF

def lc_hex(h):
    """ Format the value in the form xFFFF """
    return 'x%04X' % lc_bin(h)

def lc_int(v):
    """ Read a 16-bit word as a signed value """
    if v & (1 << 15): # negative
        return -((~(v & 0xFFFF) + 1) & 0xFFFF)
    else:
        return v

def sext(binary, bits):
    """
    Sign-extend the binary number to 16 bits, check the most
    significant bit
    """
    binary &= (1 << bits) - 1
    if binary & (1 << (bits - 1)):
        return (0xFFFF << bits | binary) & 0xFFFF
    else:
        return binary

def condition_of(value):
    """
    The one flag that describes a 16-bit register value.
    """
    if value == 0:
        return Condition.ZERO
    elif value & (1 << 15):
        return Condition.NEG
    else:
        return Condition.POS


# One variant per opcode, holding only the fields that opcode uses.
# Offsets and immediates are already sign-extended to 16 bits.
Add = namedtuple('Add', 'dr sr1 immediate operand')
And = namedtuple('And', 'dr sr1 immediate operand')
Not = namedtuple('Not', 'dr sr')
Br = namedtuple('Br', 'nzp offset')
Jmp = namedtuple('Jmp', 'base')
Jsr = namedtuple('Jsr', 'long offset base')
Ld = namedtuple('Ld', 'dr offset')
Ldi = namedtuple('Ldi', 'dr offset')
Ldr = namedtuple('Ldr', 'dr base offset')
Lea = namedtuple('Lea', 'dr offset')
St = namedtuple('St', 'sr offset')
Sti = namedtuple('Sti', 'sr offset')
Str = namedtuple('Str', 'sr base offset')
Trap = namedtuple('Trap', 'vector')
Rti = namedtuple('Rti', 'word')
Reserved = namedtuple('Reserved', 'word')


def _dr(instruction):
    return (instruction & 0b0000111000000000) >> 9

def _base(instruction):
    return (instruction & 0b0000000111000000) >> 6

def _pc_offset9(instruction):
    return sext(instruction & 0b0000000111111111, 9)

def _arith(variant):
    def decode_arith(instruction):
        if instruction & 0b0000000000100000:
            operand = sext(instruction & 0b0000000000011111, 5)
            return variant(_dr(instruction), _base(instruction), True, operand)
        else:
            operand = instruction & 0b0000000000000111
            return variant(_dr(instruction), _base(instruction), False, operand)
    return decode_arith

def _decode_jsr(instruction):
    if instruction & 0b0000100000000000: # JSR
        return Jsr(True, sext(instruction & 0b0000011111111111, 11), None)
    else:                                # JSRR
        return Jsr(False, None, _base(instruction))

DECODERS = {
    Opcode.BR: lambda i: Br((i & 0b0000111000000000) >> 9, _pc_offset9(i)),
    Opcode.ADD: _arith(Add),
    Opcode.LD: lambda i: Ld(_dr(i), _pc_offset9(i)),
    Opcode.ST: lambda i: St(_dr(i), _pc_offset9(i)),
    Opcode.JSR: _decode_jsr,
    Opcode.AND: _arith(And),
    Opcode.LDR: lambda i: Ldr(_dr(i), _base(i), sext(i & 0b111111, 6)),
    Opcode.STR: lambda i: Str(_dr(i), _base(i), sext(i & 0b111111, 6)),
    Opcode.RTI: Rti,
    Opcode.NOT: lambda i: Not(_dr(i), _base(i)),
    Opcode.LDI: lambda i: Ldi(_dr(i), _pc_offset9(i)),
    Opcode.STI: lambda i: Sti(_dr(i), _pc_offset9(i)),
    Opcode.JMP: lambda i: Jmp(_base(i)),
    Opcode.RESERVED: Reserved,
    Opcode.LEA: lambda i: Lea(_dr(i), _pc_offset9(i)),
    Opcode.TRAP: lambda i: Trap(i & 0b0000000011111111),
}

def opcode_of(instruction):
    return Opcode((instruction >> 12) & 0xF)

def decode(instruction):
    """
    Decode a 16-bit word into its instruction variant. Every 4-bit
    opcode has a variant, so this never fails.
    """
    return DECODERS[opcode_of(instruction)](lc_bin(instruction))


def _target(location, offset):
    # relative to the instruction after the one at location
    return lc_hex(location + 1 + offset)

def format_instruction(instr, location):
    """
    Render a decoded instruction as assembly text. PC-relative operands
    are shown as absolute addresses, computed from location.
    """
    kind = type(instr)
    if kind in (Add, And):
        name = kind.__name__.upper()
        if instr.immediate:
            return "%s R%d, R%d, #%s" % (name, instr.dr, instr.sr1, lc_int(instr.operand))
        return "%s R%d, R%d, R%d" % (name, instr.dr, instr.sr1, instr.operand)
    elif kind is Not:
        return "NOT R%d, R%d" % (instr.dr, instr.sr)
    elif kind is Br:
        if not instr.nzp:
            return "NOP"
        flags = "".join(f for f, bit in zip("nzp", (4, 2, 1)) if instr.nzp & bit)
        return "BR%s %s" % (flags, _target(location, instr.offset))
    elif kind is Jmp:
        if instr.base == 7:
            return "RET"
        return "JMP R%d" % instr.base
    elif kind is Jsr:
        if instr.long:
            return "JSR %s" % _target(location, instr.offset)
        return "JSRR R%d" % instr.base
    elif kind in (Ld, Ldi, Lea):
        return "%s R%d, %s" % (kind.__name__.upper(), instr.dr, _target(location, instr.offset))
    elif kind in (St, Sti):
        return "%s R%d, %s" % (kind.__name__.upper(), instr.sr, _target(location, instr.offset))
    elif kind is Ldr:
        return "LDR R%d, R%d, #%s" % (instr.dr, instr.base, lc_int(instr.offset))
    elif kind is Str:
        return "STR R%d, R%d, #%s" % (instr.sr, instr.base, lc_int(instr.offset))
    elif kind is Trap:
        try:
            return TrapVector(instr.vector).name
        except ValueError:
            return "TRAP %s" % lc_hex(instr.vector)
    elif kind is Rti:
        return "RTI"
    else:
        return ";; RESERVED %s" % lc_hex(instr.word & 0b0000111111111111)
