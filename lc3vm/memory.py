"""
The LC3 address space: 65536 words, with the keyboard mapped at
KBSR/KBDR.
"""

from array import array

from .isa import MR_KBSR, MR_KBDR

MEMORY_SIZE = 1 << 16


class Memory(object):
    """
    Flat word store. Reading the keyboard status register polls the
    console, so programs that spin on KBSR see keys as they are typed.
    """
    def __init__(self, console=None, poll_timeout=1.0):
        self.console = console
        self.poll_timeout = poll_timeout
        self.words = array('H', [0] * MEMORY_SIZE)

    def __len__(self):
        return MEMORY_SIZE

    def __getitem__(self, location):
        return self.read(location)

    def __setitem__(self, location, value):
        self.write(location, value)

    def clear(self):
        self.words = array('H', [0] * MEMORY_SIZE)

    def poll_keyboard(self):
        key = None
        if self.console is not None:
            key = self.console.poll(self.poll_timeout)
        if key is None:
            self.words[MR_KBSR] = 0
        else:
            self.words[MR_KBSR] = 1 << 15
            self.words[MR_KBDR] = key & 0xFFFF

    def read(self, location):
        location &= 0xFFFF
        if location == MR_KBSR:
            self.poll_keyboard()
        return self.words[location]

    def write(self, location, value):
        self.words[location & 0xFFFF] = value & 0xFFFF

    def load(self, origin, words):
        """
        Write words at consecutive addresses from origin, wrapping
        around the top of memory. Returns the number of words written.
        """
        count = 0
        for count, word in enumerate(words, 1):
            self.write(origin + count - 1, word)
        return count

    def dump(self, start, stop):
        """ Raw words in [start, stop), without device side effects. """
        return [self.words[location & 0xFFFF] for location in range(start, stop)]
