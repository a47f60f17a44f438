"""Exceptions raised by the CHIP-8 interpreter."""


class Chip8Error(Exception):
    pass


class LoadError(Chip8Error):
    """The program image does not fit in memory."""


class Chip8Fault(Chip8Error):
    """A fatal runtime fault. Stepping halts once one is raised."""

    message = "Fault"

    def __init__(self, opcode, pc):
        super().__init__(f"{self.message} (opcode 0x{opcode:04X} at 0x{pc:03X})")
        self.opcode = opcode
        self.pc = pc

    def __reduce__(self):
        return type(self), (self.opcode, self.pc)


class UnknownOpcode(Chip8Fault):
    message = "Unknown opcode"


class StackOverflow(Chip8Fault):
    message = "Stack overflow"


class StackUnderflow(Chip8Fault):
    message = "Return with empty stack"
