"""Turn a program image back into readable CHIP-8 / S-CHIP assembly."""

from .memory import PROGRAM_START
from .opcodes import decode, format_instruction


def disassemble(data, origin=PROGRAM_START):
    """Yield (address, opcode, text) for every 16-bit word in data.

    Words that do not decode (usually sprite data) come out as DW.
    A trailing odd byte is padded with zero.
    """
    for offset in range(0, len(data), 2):
        opcode = data[offset] << 8 | (data[offset + 1] if offset + 1 < len(data) else 0)
        instruction = decode(opcode)
        text = format_instruction(instruction, opcode) if instruction else f"DW 0x{opcode:04X}"
        yield origin + offset, opcode, text


def format_listing(data, origin=PROGRAM_START):
    return "\n".join(
        f"0x{address:03X} | 0x{opcode:04X} | {text}" for address, opcode, text in disassemble(data, origin)
    )
