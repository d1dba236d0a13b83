"""CHIP-8 machine constants."""

MEMORY_SIZE = 4096
PROGRAM_START = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START

NUM_REGISTERS = 16
FLAG_REGISTER = 0xF
STACK_SIZE = 16
INSTRUCTION_SIZE = 2
INDEX_LIMIT = 0x10000

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

NUM_KEYS = 16
NO_KEY = -1

FONT_START = 0x050
FONT_GLYPH_SIZE = 5
FONT_DATA = (
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
)

# Status codes written by the instruction engine. Codes at or above
# STATUS_MEMORY_FAULT halt the machine.
STATUS_OK = 0
STATUS_UNKNOWN_OPCODE = 1
STATUS_MEMORY_FAULT = 2
STATUS_STACK_OVERFLOW = 3
STATUS_STACK_UNDERFLOW = 4
