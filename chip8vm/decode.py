"""CHIP-8 instruction decoding."""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Instruction word split into its operand fields.

    Fields hold Python ints when decoding a concrete word and traced
    arrays when decoding inside a jitted cycle.
    """
    raw: int
    opcode: int  # family, top nibble
    x: int       # register index, second nibble
    y: int       # register index, third nibble
    n: int       # low nibble
    kk: int      # low byte
    nnn: int     # low 12 bits, an address


def decode(instruction: int) -> DecodedInstruction:
    """Split a 16-bit instruction word into its fields."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        kk=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
    )
