"""
Opcode table shared by the CPU and the disassembler.

Operands are always in the same place in an opcode:
- nnn = address (lowest 12 bits)
- nn  = byte (lowest 8 bits)
- n   = nibble (lowest 4 bits)
- x/y = register index (second/third nibble)

Each entry is keyed by the opcode with its operand bits masked out. The mask
depends only on the first nibble, so decoding is a single dict lookup.
"""

from collections import namedtuple

Instruction = namedtuple("Instruction", ["mnemonic", "operands", "handler"])

FAMILY_MASKS = {
    0x0: 0xFFFF,
    0x5: 0xF00F,
    0x8: 0xF00F,
    0x9: 0xF00F,
    0xE: 0xF0FF,
    0xF: 0xF0FF,
}

INSTRUCTIONS = {
    0x00E0: Instruction("CLS", "", "_00E0"),
    0x00EE: Instruction("RET", "", "_00EE"),
    0x00FB: Instruction("SCR", "", "_00FB"),
    0x00FC: Instruction("SCL", "", "_00FC"),
    0x00FD: Instruction("EXIT", "", "_00FD"),
    0x00FE: Instruction("LOW", "", "_00FE"),
    0x00FF: Instruction("HIGH", "", "_00FF"),
    0x1000: Instruction("JP", "0x{nnn:03X}", "_1nnn"),
    0x2000: Instruction("CALL", "0x{nnn:03X}", "_2nnn"),
    0x3000: Instruction("SE", "V{x:X}, 0x{nn:02X}", "_3xnn"),
    0x4000: Instruction("SNE", "V{x:X}, 0x{nn:02X}", "_4xnn"),
    0x5000: Instruction("SE", "V{x:X}, V{y:X}", "_5xy0"),
    0x6000: Instruction("LD", "V{x:X}, 0x{nn:02X}", "_6xnn"),
    0x7000: Instruction("ADD", "V{x:X}, 0x{nn:02X}", "_7xnn"),
    0x8000: Instruction("LD", "V{x:X}, V{y:X}", "_8xy0"),
    0x8001: Instruction("OR", "V{x:X}, V{y:X}", "_8xy1"),
    0x8002: Instruction("AND", "V{x:X}, V{y:X}", "_8xy2"),
    0x8003: Instruction("XOR", "V{x:X}, V{y:X}", "_8xy3"),
    0x8004: Instruction("ADD", "V{x:X}, V{y:X}", "_8xy4"),
    0x8005: Instruction("SUB", "V{x:X}, V{y:X}", "_8xy5"),
    0x8006: Instruction("SHR", "V{x:X}, V{y:X}", "_8xy6"),
    0x8007: Instruction("SUBN", "V{x:X}, V{y:X}", "_8xy7"),
    0x800E: Instruction("SHL", "V{x:X}, V{y:X}", "_8xyE"),
    0x9000: Instruction("SNE", "V{x:X}, V{y:X}", "_9xy0"),
    0xA000: Instruction("LD", "I, 0x{nnn:03X}", "_Annn"),
    0xB000: Instruction("JP", "V0, 0x{nnn:03X}", "_Bnnn"),
    0xC000: Instruction("RND", "V{x:X}, 0x{nn:02X}", "_Cxnn"),
    0xD000: Instruction("DRW", "V{x:X}, V{y:X}, {n}", "_Dxyn"),
    0xE09E: Instruction("SKP", "V{x:X}", "_Ex9E"),
    0xE0A1: Instruction("SKNP", "V{x:X}", "_ExA1"),
    0xF007: Instruction("LD", "V{x:X}, DT", "_Fx07"),
    0xF00A: Instruction("LD", "V{x:X}, K", "_Fx0A"),
    0xF015: Instruction("LD", "DT, V{x:X}", "_Fx15"),
    0xF018: Instruction("LD", "ST, V{x:X}", "_Fx18"),
    0xF01E: Instruction("ADD", "I, V{x:X}", "_Fx1E"),
    0xF029: Instruction("LD", "F, V{x:X}", "_Fx29"),
    0xF030: Instruction("LD", "HF, V{x:X}", "_Fx30"),
    0xF033: Instruction("LD", "B, V{x:X}", "_Fx33"),
    0xF055: Instruction("LD", "[I], V{x:X}", "_Fx55"),
    0xF065: Instruction("LD", "V{x:X}, [I]", "_Fx65"),
    0xF075: Instruction("LD", "R, V{x:X}", "_Fx75"),
    0xF085: Instruction("LD", "V{x:X}, R", "_Fx85"),
}

# Scroll down by n lines is the only 0x0 family opcode with an operand
for n in range(0x10):
    INSTRUCTIONS[0x00C0 | n] = Instruction("SCD", "{n}", "_00Cn")


def opcode_key(opcode):
    return opcode & FAMILY_MASKS.get(opcode >> 12, 0xF000)


def decode(opcode):
    """Return the Instruction for an opcode, or None if it is not in the table."""
    return INSTRUCTIONS.get(opcode_key(opcode))


def format_instruction(instruction, opcode):
    operands = instruction.operands.format(
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        n=opcode & 0x000F,
        nn=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )
    return f"{instruction.mnemonic} {operands}" if operands else instruction.mnemonic
