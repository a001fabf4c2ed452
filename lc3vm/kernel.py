from metakernel import MetaKernel

from ._version import __version__
from .isa import Opcode, TrapVector
from .session import DIRECTIVES, Session

class CalystoLC3VM(MetaKernel):
    implementation = 'LC3VM'
    implementation_version = __version__
    language = 'LC3 object code'
    language_version = '0.1'
    banner = "LC3 virtual machine - run LC3 object images"
    language_info = {
        'name': 'lc3vm',
        'mimetype': 'text/plain',
        'file_extension': '.hex',
    }

    def __init__(self, *args, **kwargs):
        super(CalystoLC3VM, self).__init__(*args, **kwargs)
        self.session = Session(self)

    def get_usage(self):
        return """This is the LC3 virtual machine Jupyter kernel.

A cell of hex words is loaded as an object image: the first word is
the origin, the rest are placed in memory from there. For example:

    x3000 x5020 x1025 xF025

LC3 Interactive Magic Directives:

 %load FILE [FILE ...]              - load object image files
 %bp [clear | SUSPENDHEX]           - show, clear, or set breakpoints
 %cont                              - continue running
 %d                                 - toggle instruction tracing
 %dis [STARTHEX [STOPHEX]]          - dump memory as program
 %dump [STARTHEX [STOPHEX]]         - list memory in hex
 %exe                               - execute the program
 %mem HEXLOCATION HEXVALUE          - set memory
 %pc HEXVALUE                       - set PC
 %reg REG HEXVALUE                  - set register REG to HEXVALUE
 %regs                              - show registers
 %reset                             - reset LC3 to start state
 %step                              - execute the next instruction, increment PC
 %warn 0|1                          - turn warnings off or on

HEX values begin with an 'x' and are composed of 4 0-F digits or letters.

To get additional help on these items, use '%help %item'.
"""

    def get_completions(self, info):
        token = info["help_obj"]
        matches = []
        for item in ([op.name for op in Opcode] +
                     [trap.name for trap in TrapVector] +
                     DIRECTIVES):
            if item.startswith(token) and item not in matches:
                matches.append(item)
        return matches

    def get_kernel_help_on(self, info, level=0, none_on_fail=False):
        expr = info["code"]
        if expr == "%bp":
            return """%bp - See, clear, or set a breakpoint.
See all of the breakpoints:
    %bp

Clear all of the breakpoints:
    %bp clear

Create a breakpoint at location x3005:
    %bp x3005
"""
        elif expr == "%load":
            return """%load - Load object images; later files overwrite earlier ones
    %load hello.obj
"""
        elif expr == "%cont":
            return """%cont - Continue executing the program
"""
        elif expr == "%d":
            return """%d - Toggle tracing of every instruction
"""
        elif expr == "%dis":
            return """%dis - Disassemble memory
"""
        elif expr == "%dump":
            return """%dump - Dump memory
"""
        elif expr == "%exe":
            return """%exe - Execute the program
"""
        elif expr == "%mem":
            return """%mem - Set a memory location
"""
        elif expr == "%pc":
            return """%pc - Set the Program Counter
"""
        elif expr == "%reg":
            return """%reg - Set a register
"""
        elif expr == "%regs":
            return """%regs - See the registers
"""
        elif expr == "%reset":
            return """%reset - Reset the LC3
"""
        elif expr == "%step":
            return """%step - Execute the next instruction
"""
        elif none_on_fail:
            return None
        else:
            return "No available help on '%s'" % expr

    def do_execute_file(self, filename):
        self.session.execute("%%load %s" % filename)

    def do_execute_direct(self, code):
        try:
            self.session.execute(code.rstrip())
        except Exception as exc:
            self.log.debug("LC3 directive failed", exc_info=True)
            self.Error(str(exc))
        except KeyboardInterrupt:
            self.Error("Keyboard Interrupt!")

    def do_is_complete(self, code):
        if code:
            if code.split()[-1].strip() != "":
                return {'status' : 'incomplete',
                        'indent': '    '}
            else:
                return {'status' : 'complete'}
        else:
            return {'status' : 'incomplete'}

    def repr(self, data):
        return repr(data)
