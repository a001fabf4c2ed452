"""
Memory and the memory-mapped keyboard.
"""

from lc3vm.console import ScriptedConsole
from lc3vm.isa import MR_KBDR, MR_KBSR
from lc3vm.memory import MEMORY_SIZE, Memory


class TestStorage:

    def test_zeroed_and_full_size(self):
        mem = Memory()
        assert len(mem) == MEMORY_SIZE == 65536
        assert mem.read(0) == 0 and mem.read(0xFFFF) == 0

    def test_write_then_read(self):
        mem = Memory()
        mem.write(0x3000, 0xABCD)
        assert mem.read(0x3000) == 0xABCD
        assert mem[0x3000] == 0xABCD

    def test_addresses_and_words_wrap(self):
        mem = Memory()
        mem.write(0x10005, 0x1FFFF)
        assert mem.read(0x0005) == 0xFFFF

    def test_load_wraps_around_top(self):
        mem = Memory()
        assert mem.load(0xFFFF, [1, 2, 3]) == 3
        assert mem.dump(0xFFFF, 0x10002) == [1, 2, 3]
        assert mem.read(0x0001) == 3

    def test_clear(self):
        mem = Memory()
        mem.write(0x4000, 7)
        mem.clear()
        assert mem.read(0x4000) == 0


class TestKeyboard:

    def test_status_set_when_key_waiting(self):
        mem = Memory(ScriptedConsole("a"))
        assert mem.read(MR_KBSR) == 0x8000
        assert mem.read(MR_KBDR) == ord("a")

    def test_status_cleared_without_key(self):
        console = ScriptedConsole("")
        mem = Memory(console)
        mem.words[MR_KBSR] = 0x8000
        assert mem.read(MR_KBSR) == 0
        assert console.polls == 1

    def test_data_read_does_not_poll(self):
        console = ScriptedConsole("a")
        mem = Memory(console)
        mem.read(MR_KBDR)
        assert console.polls == 0

    def test_no_console_means_no_key(self):
        mem = Memory()
        assert mem.read(MR_KBSR) == 0

    def test_poll_timeout_passed_through(self):
        seen = []

        class Recorder(ScriptedConsole):
            def poll(self, timeout):
                seen.append(timeout)
                return None

        Memory(Recorder(), poll_timeout=0.25).read(MR_KBSR)
        assert seen == [0.25]

    def test_spin_on_keyboard(self, make_lc3):
        """
        x3000 LDI R0, KBSR_PTR
        x3001 BRzp x3000
        x3002 LDI R0, KBDR_PTR
        x3003 HALT
        x3004 .FILL xFE00
        x3005 .FILL xFE02
        """
        lc3 = make_lc3([0xA003, 0x07FE, 0xA002, 0xF025, 0xFE00, 0xFE02])
        lc3.run(max_steps=20)
        assert lc3.suspended and lc3.running
        lc3.console.feed("q")
        lc3.run()
        assert not lc3.running
        assert lc3.get_register(0) == ord("q")
