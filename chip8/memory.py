"""
CHIP-8 memory and register file:
- 4KB (4,096 bytes) of RAM, 0x000-0x1FF reserved for the interpreter (fonts)
- Program counter (PC), starts at 0x200 where programs are loaded
- Index register (I), 16 bits wide, masked to 12 bits whenever it addresses RAM
- Stack of return addresses, 16 levels deep
- 16 8-bit data registers (V0-VF), VF doubles as the flag register
"""

import logging

from .errors import LoadError

log = logging.getLogger(__name__)

MEMORY_SIZE = 4096
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START
ADDRESS_MASK = 0x0FFF
STACK_SIZE = 16
FLAG = 0xF

SMALL_FONT_ADDR = 0x000
LARGE_FONT_ADDR = 0x050

FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0, # 0
    0x20, 0x60, 0x20, 0x20, 0x70, # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0, # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0, # 3
    0x90, 0x90, 0xF0, 0x10, 0x10, # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0, # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0, # 6
    0xF0, 0x10, 0x20, 0x40, 0x40, # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0, # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0, # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90, # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0, # B
    0xF0, 0x80, 0x80, 0x80, 0xF0, # C
    0xE0, 0x90, 0x90, 0x90, 0xE0, # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0, # E
    0xF0, 0x80, 0xF0, 0x80, 0x80  # F
])

# S-CHIP 8x10 digits, 0-9 only
LARGE_FONTSET = bytes([
    0x3C, 0x7E, 0xE7, 0xC3, 0xC3, 0xC3, 0xC3, 0xE7, 0x7E, 0x3C, # 0
    0x18, 0x38, 0x68, 0x18, 0x18, 0x18, 0x18, 0x18, 0x18, 0x3C, # 1
    0x3E, 0x7F, 0xC3, 0x06, 0x0C, 0x18, 0x30, 0x60, 0xFF, 0xFF, # 2
    0x3C, 0x7E, 0xC3, 0x03, 0x0E, 0x0E, 0x03, 0xC3, 0x7E, 0x3C, # 3
    0x06, 0x0E, 0x1E, 0x36, 0x66, 0xC6, 0xFF, 0xFF, 0x06, 0x06, # 4
    0xFF, 0xFF, 0xC0, 0xC0, 0xFC, 0xFE, 0x03, 0xC3, 0x7E, 0x3C, # 5
    0x3E, 0x7C, 0xC0, 0xC0, 0xFC, 0xFE, 0xC3, 0xC3, 0x7E, 0x3C, # 6
    0xFF, 0xFF, 0x03, 0x06, 0x0C, 0x18, 0x30, 0x60, 0x60, 0x60, # 7
    0x3C, 0x7E, 0xC3, 0xC3, 0x7E, 0x7E, 0xC3, 0xC3, 0x7E, 0x3C, # 8
    0x3C, 0x7E, 0xC3, 0xC3, 0x7F, 0x3F, 0x03, 0x03, 0x3E, 0x7C  # 9
])

SMALL_GLYPH_SIZE = 5
LARGE_GLYPH_SIZE = 10


class Memory:
    def __init__(self):
        self.ram = bytearray(MEMORY_SIZE)
        self.v = bytearray(16)
        self.i = 0
        self.pc = PROGRAM_START
        self.stack = []
        self.reset()

    def reset(self):
        """Clear RAM and registers, then reinstall the font sprites."""
        self.ram[:] = bytes(MEMORY_SIZE)
        self.v[:] = bytes(16)
        self.i = 0
        self.pc = PROGRAM_START
        self.stack.clear()

        self.ram[SMALL_FONT_ADDR:SMALL_FONT_ADDR + len(FONTSET)] = FONTSET
        self.ram[LARGE_FONT_ADDR:LARGE_FONT_ADDR + len(LARGE_FONTSET)] = LARGE_FONTSET

    def load_program(self, data):
        if len(data) > MAX_PROGRAM_SIZE:
            raise LoadError(f"Program is {len(data)} bytes, at most {MAX_PROGRAM_SIZE} fit in memory")

        self.ram[PROGRAM_START:PROGRAM_START + len(data)] = data
        log.debug("Loaded %d byte program at 0x%03X", len(data), PROGRAM_START)

    def read_byte(self, addr):
        return self.ram[addr & ADDRESS_MASK]

    def write_byte(self, addr, value):
        self.ram[addr & ADDRESS_MASK] = value & 0xFF

    def read_word(self, addr):
        # Opcodes are stored big-endian, most significant byte first
        return self.read_byte(addr) << 8 | self.read_byte(addr + 1)

    def get_register(self, index):
        return self.v[index]

    def set_register(self, index, value):
        self.v[index] = value & 0xFF

    @property
    def flag(self):
        return self.v[FLAG]

    @flag.setter
    def flag(self, value):
        self.v[FLAG] = value & 0xFF

    @property
    def sp(self):
        return len(self.stack)
