"""
An LC3 virtual machine: load object images and run them from the
terminal or from a Jupyter notebook.
"""

from ._version import __version__
from .console import Console, KernelConsole, ScriptedConsole, TerminalConsole
from .errors import ConsoleError, ImageError, InternalError, LC3Error
from .image import load_image, load_image_file, load_words
from .machine import LC3, RegisterFile
from .memory import Memory
