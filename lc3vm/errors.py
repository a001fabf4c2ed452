"""
Exceptions raised by the LC3 virtual machine.

Nothing in the machine exits the process; the host (command line driver
or Jupyter kernel) decides what a failure means.
"""

class LC3Error(ValueError):
    """Base class of every machine failure."""


class ImageError(LC3Error):
    """An image file could not be read or has no origin word."""


class ConsoleError(LC3Error):
    """The console capability failed while polling, reading or writing."""


class InternalError(LC3Error):
    """A decoded instruction has no handler."""
