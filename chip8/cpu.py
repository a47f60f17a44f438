"""
CHIP-8 / S-CHIP interpreter core.

One call to Chip8.step() fetches a single opcode at PC, advances PC past it
and executes it. The host drives everything else: it latches the keypad
before each step, calls tick() at 60Hz and reads the framebuffer and the
sound flag whenever it wants to render.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum

from .display import Display
from .errors import Chip8Fault, StackOverflow, StackUnderflow, UnknownOpcode
from .keypad import Keypad
from .memory import (ADDRESS_MASK, LARGE_FONT_ADDR, LARGE_GLYPH_SIZE, PROGRAM_START, SMALL_FONT_ADDR,
                     SMALL_GLYPH_SIZE, STACK_SIZE, Memory)
from .opcodes import INSTRUCTIONS, opcode_key
from .quirks import QuirkSet
from .timers import Timers

log = logging.getLogger(__name__)


class StepOutcome(Enum):
    CONTINUED = "continued"
    BLOCKED = "blocked"  # FX0A is waiting for a key press
    FAULT = "fault"
    EXITED = "exited"  # 00FD


@dataclass(frozen=True)
class Snapshot:
    """Everything needed to resume a VM exactly where it was."""
    ram: bytes
    v: bytes
    i: int
    pc: int
    stack: tuple
    delay_timer: int
    sound_timer: int
    hires: bool
    display: tuple
    quirks: QuirkSet
    rpl: bytes
    keys: tuple
    key_wait: frozenset
    exited: bool
    fault: Chip8Fault
    random_state: tuple
    rom: bytes


class Chip8:
    def __init__(self, quirks=None, seed=None):
        self.quirks = quirks if quirks is not None else QuirkSet()
        self.memory = Memory()
        self.timers = Timers()
        self.display = Display(self.quirks)
        self.keypad = Keypad()
        self.rpl = bytearray(16) # S-CHIP user flags, they survive a reset
        self.random = random.Random(seed)
        self.rom = b""

        self.opcode = 0
        self.opcode_pc = PROGRAM_START
        self.key_wait = None # keys held at the last sample while FX0A waits
        self.exited = False
        self.fault = None

        self.handlers = {key: getattr(self, instruction.handler) for key, instruction in INSTRUCTIONS.items()}

    # Registers live in Memory, these keep the opcode handlers readable
    @property
    def v(self):
        return self.memory.v

    @property
    def pc(self):
        return self.memory.pc

    @pc.setter
    def pc(self, value):
        self.memory.pc = value & ADDRESS_MASK

    @property
    def i(self):
        return self.memory.i

    @i.setter
    def i(self, value):
        self.memory.i = value & 0xFFFF

    @property
    def running(self):
        return self.fault is None and not self.exited

    # Operand fields of the current opcode
    @property
    def x(self):
        return (self.opcode & 0x0F00) >> 8

    @property
    def y(self):
        return (self.opcode & 0x00F0) >> 4

    @property
    def n(self):
        return self.opcode & 0x000F

    @property
    def nn(self):
        return self.opcode & 0x00FF

    @property
    def nnn(self):
        return self.opcode & 0x0FFF

    def load_program(self, data):
        self.memory.load_program(data)
        self.rom = bytes(data)

    def reset(self):
        self.memory.reset()
        self.memory.load_program(self.rom)
        self.timers = Timers()
        self.display = Display(self.quirks)
        self.keypad = Keypad()
        self.opcode = 0
        self.opcode_pc = PROGRAM_START
        self.key_wait = None
        self.exited = False
        self.fault = None
        log.info("Reset")

    def set_input(self, key_states):
        self.keypad.set_input(key_states)

    def tick(self):
        self.timers.tick()

    def is_sound_active(self):
        return self.timers.is_sound_active()

    def framebuffer(self):
        return self.display.width, self.display.height, self.display.rows()

    def step(self):
        if self.fault is not None:
            return StepOutcome.FAULT
        if self.exited:
            return StepOutcome.EXITED

        # Fetch, then move past the opcode before it runs
        self.opcode_pc = self.pc
        self.opcode = self.memory.read_word(self.pc)
        self.pc += 2

        try:
            return self.execute() or StepOutcome.CONTINUED
        except Chip8Fault as fault:
            log.error("Emulation halted: %s", fault)
            self.fault = fault
            return StepOutcome.FAULT

    def execute(self):
        handler = self.handlers.get(opcode_key(self.opcode))
        if handler is None:
            raise UnknownOpcode(self.opcode, self.opcode_pc)
        return handler()

    def skip(self):
        self.pc += 2

    def set_result(self, x, value, flag):
        # VF gets the flag first and the result second, so VX == VF ends up holding the result
        self.memory.flag = flag
        self.memory.set_register(x, value)

    def snapshot(self):
        return Snapshot(
            ram=bytes(self.memory.ram),
            v=bytes(self.memory.v),
            i=self.i,
            pc=self.pc,
            stack=tuple(self.memory.stack),
            delay_timer=self.timers.delay_timer,
            sound_timer=self.timers.sound_timer,
            hires=self.display.hires,
            display=tuple(self.display.display),
            quirks=self.quirks,
            rpl=bytes(self.rpl),
            keys=tuple(self.keypad.keys),
            key_wait=self.key_wait,
            exited=self.exited,
            fault=self.fault,
            random_state=self.random.getstate(),
            rom=self.rom,
        )

    def restore(self, snapshot):
        self.quirks = snapshot.quirks
        self.memory.ram[:] = snapshot.ram
        self.memory.v[:] = snapshot.v
        self.memory.i = snapshot.i
        self.memory.pc = snapshot.pc
        self.memory.stack = list(snapshot.stack)
        self.timers.delay_timer = snapshot.delay_timer
        self.timers.sound_timer = snapshot.sound_timer
        self.display = Display(self.quirks)
        self.display.hires = snapshot.hires
        self.display.display = list(snapshot.display)
        self.rpl[:] = snapshot.rpl
        self.keypad.set_input(snapshot.keys)
        self.key_wait = snapshot.key_wait
        self.exited = snapshot.exited
        self.fault = snapshot.fault
        self.random.setstate(snapshot.random_state)
        self.rom = snapshot.rom

    # Opcode handlers, looked up through the opcode table

    def _00Cn(self): # Scroll display down n lines (00CN)
        self.display.scroll_down(self.n)

    def _00E0(self): # Clear the display (00E0)
        self.display.clear()

    def _00EE(self): # Return from a subroutine (00EE)
        if not self.memory.stack:
            raise StackUnderflow(self.opcode, self.opcode_pc)
        self.pc = self.memory.stack.pop()

    def _00FB(self): # Scroll display right 4 pixels (00FB)
        self.display.scroll_right()

    def _00FC(self): # Scroll display left 4 pixels (00FC)
        self.display.scroll_left()

    def _00FD(self): # Exit the interpreter (00FD)
        self.pc = self.opcode_pc
        self.exited = True
        log.info("Program exited at 0x%03X", self.opcode_pc)
        return StepOutcome.EXITED

    def _00FE(self): # Low resolution mode (00FE)
        self.display.set_hires(False)

    def _00FF(self): # High resolution mode (00FF)
        self.display.set_hires(True)

    def _1nnn(self): # Jump to address NNN (1NNN)
        self.pc = self.nnn

    def _2nnn(self): # Call subroutine at NNN (2NNN)
        if len(self.memory.stack) >= STACK_SIZE:
            raise StackOverflow(self.opcode, self.opcode_pc)
        self.memory.stack.append(self.pc)
        self.pc = self.nnn

    def _3xnn(self): # Skip next instruction if Vx == NN (3XNN)
        if self.v[self.x] == self.nn:
            self.skip()

    def _4xnn(self): # Skip next instruction if Vx != NN (4XNN)
        if self.v[self.x] != self.nn:
            self.skip()

    def _5xy0(self): # Skip next instruction if Vx == Vy (5XY0)
        if self.v[self.x] == self.v[self.y]:
            self.skip()

    def _6xnn(self): # Set Vx = NN (6XNN)
        self.v[self.x] = self.nn

    def _7xnn(self): # Set Vx = Vx + NN, VF untouched (7XNN)
        self.memory.set_register(self.x, self.v[self.x] + self.nn)

    def _8xy0(self): # Set Vx = Vy (8XY0)
        self.v[self.x] = self.v[self.y]

    def _8xy1(self): # Set Vx = Vx OR Vy (8XY1)
        self.v[self.x] |= self.v[self.y]

    def _8xy2(self): # Set Vx = Vx AND Vy (8XY2)
        self.v[self.x] &= self.v[self.y]

    def _8xy3(self): # Set Vx = Vx XOR Vy (8XY3)
        self.v[self.x] ^= self.v[self.y]

    def _8xy4(self): # Set Vx = Vx + Vy, set VF = carry (8XY4)
        total = self.v[self.x] + self.v[self.y]
        self.set_result(self.x, total, 1 if total > 0xFF else 0)

    def _8xy5(self): # Set Vx = Vx - Vy, set VF = NOT borrow (8XY5)
        vx, vy = self.v[self.x], self.v[self.y]
        self.set_result(self.x, vx - vy, 1 if vx >= vy else 0)

    def _8xy6(self): # Set Vx = Vy SHR 1, or Vx SHR 1 with the shift quirk (8XY6)
        value = self.v[self.x if self.quirks.shift else self.y]
        self.set_result(self.x, value >> 1, value & 0x1)

    def _8xy7(self): # Set Vx = Vy - Vx, set VF = NOT borrow (8XY7)
        vx, vy = self.v[self.x], self.v[self.y]
        self.set_result(self.x, vy - vx, 1 if vy >= vx else 0)

    def _8xyE(self): # Set Vx = Vy SHL 1, or Vx SHL 1 with the shift quirk (8XYE)
        value = self.v[self.x if self.quirks.shift else self.y]
        self.set_result(self.x, value << 1, value >> 7)

    def _9xy0(self): # Skip next instruction if Vx != Vy (9XY0)
        if self.v[self.x] != self.v[self.y]:
            self.skip()

    def _Annn(self): # Set I = NNN (ANNN)
        self.i = self.nnn

    def _Bnnn(self): # Jump to location NNN + V0 (BNNN)
        self.pc = self.nnn + self.v[0]

    def _Cxnn(self): # Set Vx = random byte AND NN (CXNN)
        self.v[self.x] = self.random.randrange(256) & self.nn

    def _Dxyn(self): # Display sprite at memory location I at (Vx, Vy), set VF = collision (DXYN)
        read_byte = self.memory.read_byte
        height = self.n
        width = 8

        if height == 0:
            # S-CHIP 16 line sprite, 16x16 in high res, 8x16 in low res unless the lores16 quirk is set
            height = 16
            if self.display.hires or self.quirks.lores16:
                width = 16

        if width == 16:
            rows = [read_byte(self.i + line * 2) << 8 | read_byte(self.i + line * 2 + 1) for line in range(height)]
        else:
            rows = [read_byte(self.i + line) for line in range(height)]

        self.memory.flag = self.display.draw(self.v[self.x], self.v[self.y], rows, width)

    def _Ex9E(self): # Skip next instruction if key with the value of Vx is pressed (EX9E)
        if self.keypad.is_pressed(self.v[self.x]):
            self.skip()

    def _ExA1(self): # Skip next instruction if key with the value of Vx is not pressed (EXA1)
        if not self.keypad.is_pressed(self.v[self.x]):
            self.skip()

    def _Fx07(self): # Set Vx = delay timer value (FX07)
        self.v[self.x] = self.timers.get_delay()

    def _Fx0A(self): # Wait for a key press, store the value of the key in Vx (FX0A)
        pressed = self.keypad.pressed()

        if self.key_wait is not None:
            new_keys = sorted(pressed - self.key_wait)
            if new_keys:
                self.v[self.x] = new_keys[0]
                self.key_wait = None
                return None

        # Keys already held when the wait started do not count until released and pressed again
        self.key_wait = pressed
        self.pc = self.opcode_pc
        return StepOutcome.BLOCKED

    def _Fx15(self): # Set delay timer = Vx (FX15)
        self.timers.set_delay(self.v[self.x])

    def _Fx18(self): # Set sound timer = Vx (FX18)
        self.timers.set_sound(self.v[self.x])

    def _Fx1E(self): # Set I = I + Vx (FX1E)
        self.i += self.v[self.x]

    def _Fx29(self): # Set I = location of sprite for digit Vx (FX29)
        self.i = SMALL_FONT_ADDR + (self.v[self.x] & 0xF) * SMALL_GLYPH_SIZE

    def _Fx30(self): # Set I = location of large sprite for digit Vx (FX30)
        self.i = LARGE_FONT_ADDR + (self.v[self.x] & 0xF) * LARGE_GLYPH_SIZE

    def _Fx33(self): # Store BCD representation of Vx in memory locations I, I+1, and I+2 (FX33)
        value = self.v[self.x]
        self.memory.write_byte(self.i, value // 100)
        self.memory.write_byte(self.i + 1, (value // 10) % 10)
        self.memory.write_byte(self.i + 2, value % 10)

    def _Fx55(self): # Store registers V0 through Vx in memory starting at location I (FX55)
        for register in range(self.x + 1):
            self.memory.write_byte(self.i + register, self.v[register])
        if not self.quirks.memory:
            self.i += self.x + 1

    def _Fx65(self): # Read registers V0 through Vx from memory starting at location I (FX65)
        for register in range(self.x + 1):
            self.v[register] = self.memory.read_byte(self.i + register)
        if not self.quirks.memory:
            self.i += self.x + 1

    def _Fx75(self): # Store registers V0 through Vx in the RPL user flags (FX75)
        self.rpl[:self.x + 1] = self.v[:self.x + 1]

    def _Fx85(self): # Read registers V0 through Vx from the RPL user flags (FX85)
        self.v[:self.x + 1] = self.rpl[:self.x + 1]


def load(rom, quirk_flags=(), strict=False, seed=None):
    """Create a VM with the fonts installed and the program at 0x200.

    quirk_flags is a QuirkSet or an iterable of names like "quirk-shift".
    Raises LoadError if the program does not fit.
    """
    if isinstance(quirk_flags, QuirkSet):
        quirks = quirk_flags
    else:
        quirks = QuirkSet.from_flags(quirk_flags, strict=strict)

    vm = Chip8(quirks, seed=seed)
    vm.load_program(rom)
    log.info("Loaded %d byte program, quirks: %s", len(rom), ", ".join(quirks.flags()) or "none")
    return vm
