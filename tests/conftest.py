import pytest

from lc3vm.console import ScriptedConsole
from lc3vm.machine import LC3


def make_lc3(words, origin=0x3000, keys=""):
    """An LC3 with words loaded at origin and PC pointing there."""
    console = ScriptedConsole(keys)
    lc3 = LC3(console=console, poll_timeout=0)
    lc3.memory.load(origin, words)
    lc3.set_pc(origin)
    return lc3


class FakeKernel(object):
    """Stands in for a metakernel kernel: records Print and Error."""

    def __init__(self, lines=()):
        self.lines = list(lines)
        self.printed = []
        self.errors = []

    def raw_input(self, prompt=''):
        return self.lines.pop(0)

    def Print(self, *objects, **kwargs):
        self.printed.append(" ".join(str(o) for o in objects) + kwargs.get("end", "\n"))

    def Error(self, *objects, **kwargs):
        self.errors.append(" ".join(str(o) for o in objects))


@pytest.fixture(name="make_lc3")
def make_lc3_fixture():
    return make_lc3


@pytest.fixture
def lc3():
    return make_lc3([])


@pytest.fixture
def kernel():
    return FakeKernel()
