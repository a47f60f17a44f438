"""
CHIP-8 / S-CHIP interpreter:
- Direct access up to 4KB (4,096 bytes) of memory
- 64x32 monochrome display, 128x64 in S-CHIP high res mode
- Program counter (PC), index register (I) and a 16 level stack
- 8-bit delay and sound timers, decremented at 60Hz by the host
- 16 8-bit data registers (V0-VF), VF doubles as a flag
"""

from .cpu import Chip8, Snapshot, StepOutcome, load
from .errors import Chip8Error, Chip8Fault, LoadError, StackOverflow, StackUnderflow, UnknownOpcode
from .quirks import QuirkSet

__version__ = "0.1.0"

__all__ = [
    "Chip8",
    "Chip8Error",
    "Chip8Fault",
    "LoadError",
    "QuirkSet",
    "Snapshot",
    "StackOverflow",
    "StackUnderflow",
    "StepOutcome",
    "UnknownOpcode",
    "load",
]
