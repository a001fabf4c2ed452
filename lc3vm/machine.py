"""
The LC3 computer: register file, fetch/decode/execute loop, and the
instruction handlers. Programs arrive as object images; see image.py.
"""

import sys

from . import traps
from .errors import InternalError
from .isa import (PC_START, Condition, condition_of, decode, format_instruction,
                  lc_hex, lc_bin, Add, And, Not, Br, Jmp, Jsr, Ld, Ldi, Ldr,
                  Lea, St, Sti, Str, Trap, Rti, Reserved)
from .memory import Memory


class RegisterFile(object):
    """
    R0-R7, the program counter and the condition register.
    """
    def __init__(self):
        self.reset()

    def reset(self):
        self.general = [0] * 8
        self.pc = PC_START
        self.cond = Condition(0)

    def as_dict(self):
        values = dict(('R%d' % r, v) for r, v in enumerate(self.general))
        values['PC'] = self.pc
        values['COND'] = self.cond
        return values


class LC3(object):
    """
    The LC3 Computer. This object executes LC3 programs that have been
    loaded into its memory.
    """
    def __init__(self, kernel=None, console=None, memory=None, debug=False,
                 poll_timeout=1.0):
        self.kernel = kernel
        self.console = console
        if memory is None:
            memory = Memory(console, poll_timeout)
        self.memory = memory
        self.registers = RegisterFile()
        self.breakpoints = {}
        self.debug = debug
        self.warn = True
        # Functions for interpreting instructions:
        self.apply = {
            Br: self.BR,
            Add: self.ADD,
            Ld: self.LD,
            St: self.ST,
            Jsr: self.JSR,
            And: self.AND,
            Ldr: self.LDR,
            Str: self.STR,
            Rti: self.RTI,
            Not: self.NOT,
            Ldi: self.LDI,
            Sti: self.STI,
            Jmp: self.JMP, # and RET
            Reserved: self.RESERVED,
            Lea: self.LEA,
            Trap: self.TRAP,
        }
        self.reset()

    def reset(self):
        self.registers.reset()
        self.running = True
        self.suspended = False
        self.instruction_count = 0

    #### Every register and memory access goes through these, so that
    #### tracing sees all of them.
    def get_pc(self):
        return self.registers.pc

    def set_pc(self, value):
        self.registers.pc = lc_bin(value)
        if self.debug:
            self.Print("    PC <= %s" % lc_hex(value))

    def get_nzp(self):
        return self.registers.cond

    def set_nzp(self, value):
        self.registers.cond = condition_of(value)
        if self.debug:
            self.Print("    NZP <= %s" % self.registers.cond.name)

    def get_register(self, position):
        return self.registers.general[position]

    def set_register(self, position, value):
        self.registers.general[position] = lc_bin(value)
        if self.debug:
            self.Print("    R%d <= %s" % (position, lc_hex(value)))

    def get_memory(self, location):
        return self.memory.read(location)

    def set_memory(self, location, value):
        self.memory.write(location, value)
        if self.debug:
            self.Print("    memory[%s] <= %s" % (lc_hex(location), lc_hex(value)))

    #### Output channels
    def Print(self, *args, end="\n"):
        if self.kernel:
            self.kernel.Print(*args, end=end)
        else:
            print(*args, end=end)

    def Error(self, string):
        if self.kernel:
            self.kernel.Error(string)
        else:
            sys.stderr.write(string)

    #### Fetch, decode, execute
    def fetch(self):
        pc = self.get_pc()
        instruction = self.get_memory(pc)
        self.registers.pc = lc_bin(pc + 1)
        return instruction

    def execute(self, instruction):
        instr = decode(instruction)
        handler = self.apply.get(type(instr))
        if handler is None:
            raise InternalError("no handler for instruction %s (%s)" %
                                (lc_hex(instruction), type(instr).__name__))
        handler(instr)
        return instr

    def step(self):
        pc = self.get_pc()
        instruction = self.fetch()
        self.instruction_count += 1
        if self.debug:
            self.Print("(%s) %s (PC*: %s) %s" % (
                self.instruction_count,
                format_instruction(decode(instruction), pc),
                lc_hex(self.get_pc()),
                lc_hex(instruction)))
        instr = self.execute(instruction)
        if self.running and self.get_pc() in self.breakpoints:
            self.suspended = True
            self.Print("...breakpoint hit at", lc_hex(self.get_pc()))
        return instr

    def run(self, max_steps=None):
        """
        Step until HALT, a breakpoint, or max_steps instructions. Returns
        the number of instructions executed.
        """
        self.suspended = False
        count = 0
        while self.running and not self.suspended:
            if max_steps is not None and count >= max_steps:
                self.suspended = True
                break
            self.step()
            count += 1
        return count

    #### Inspection
    def snapshot(self):
        values = self.registers.as_dict()
        values['running'] = self.running
        values['instructions'] = self.instruction_count
        return values

    def dump_registers(self):
        self.Print()
        self.Print("=" * 60)
        self.Print("Registers:")
        self.Print("=" * 60)
        self.Print("PC:", lc_hex(self.get_pc()))
        nzp = self.get_nzp()
        for r, flag in zip("NZP", (Condition.NEG, Condition.ZERO, Condition.POS)):
            self.Print("%s: %s" % (r, int(bool(nzp & flag))), end=" ")
        self.Print()
        for key in range(8):
            self.Print("R%d: %s" % (key, lc_hex(self.get_register(key))), end=" ")
            if key % 4 == 3:
                self.Print()

    def dump(self, start, stop=None, raw=False, header=True):
        if stop is None:
            stop = start + 10
        else:
            stop = stop + 1
        if stop <= start:
            stop = start + 10
        if stop - start > 100:
            stop = start + 100
        if header:
            self.Print("=" * 60)
            self.Print("Memory dump:" if raw else "Memory disassembled:")
            self.Print("=" * 60)
        for location, instruction in zip(range(start, stop),
                                          self.memory.dump(start, stop)):
            if raw:
                self.Print("%-10s %s: %s" % ("", lc_hex(location), lc_hex(instruction)))
            else:
                self.Print("%-10s %s: %s  %s" % (
                    "", lc_hex(location), lc_hex(instruction),
                    format_instruction(decode(instruction), location)))

    #### Instructions
    def ADD(self, instr):
        if instr.immediate:
            value = self.get_register(instr.sr1) + instr.operand
        else:
            value = self.get_register(instr.sr1) + self.get_register(instr.operand)
        self.set_register(instr.dr, value)
        self.set_nzp(self.get_register(instr.dr))

    def AND(self, instr):
        if instr.immediate:
            value = self.get_register(instr.sr1) & instr.operand
        else:
            value = self.get_register(instr.sr1) & self.get_register(instr.operand)
        self.set_register(instr.dr, value)
        self.set_nzp(self.get_register(instr.dr))

    def NOT(self, instr):
        self.set_register(instr.dr, ~self.get_register(instr.sr))
        self.set_nzp(self.get_register(instr.dr))

    def BR(self, instr):
        if instr.nzp & self.get_nzp():
            self.set_pc(self.get_pc() + instr.offset)
            if self.debug:
                self.Print("    True - branching to", lc_hex(self.get_pc()))
        elif self.debug:
            self.Print("    False - continuing...")

    def JMP(self, instr):
        self.set_pc(self.get_register(instr.base))

    def JSR(self, instr):
        temp = self.get_pc()
        if instr.long: # JSR
            self.set_pc(temp + instr.offset)
        else:          # JSRR
            self.set_pc(self.get_register(instr.base))
        self.set_register(7, temp)

    def LD(self, instr):
        location = self.get_pc() + instr.offset
        self.set_register(instr.dr, self.get_memory(location))
        self.set_nzp(self.get_register(instr.dr))

    def LDI(self, instr):
        location = self.get_pc() + instr.offset
        memory1 = self.get_memory(location)
        memory2 = self.get_memory(memory1)
        if self.debug:
            self.Print("  Reading memory[%s] (%s) =>" % (lc_hex(location), lc_hex(memory1)))
            self.Print("  Reading memory[%s] (%s) =>" % (lc_hex(memory1), lc_hex(memory2)))
        self.set_register(instr.dr, memory2)
        self.set_nzp(self.get_register(instr.dr))

    def LDR(self, instr):
        location = self.get_register(instr.base) + instr.offset
        self.set_register(instr.dr, self.get_memory(location))
        self.set_nzp(self.get_register(instr.dr))

    def LEA(self, instr):
        self.set_register(instr.dr, self.get_pc() + instr.offset)
        self.set_nzp(self.get_register(instr.dr))

    def ST(self, instr):
        self.set_memory(self.get_pc() + instr.offset, self.get_register(instr.sr))

    def STI(self, instr):
        location = self.get_memory(self.get_pc() + instr.offset)
        self.set_memory(location, self.get_register(instr.sr))

    def STR(self, instr):
        self.set_memory(self.get_register(instr.base) + instr.offset,
                        self.get_register(instr.sr))

    def TRAP(self, instr):
        traps.dispatch(self, instr.vector)

    def RTI(self, instr):
        # recognized but not implemented: there is no supervisor mode
        pass

    def RESERVED(self, instr):
        pass
