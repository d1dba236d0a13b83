"""CHIP-8 virtual machine package."""

from chip8vm.state import VMState, StackState, create_state, set_key
from chip8vm.emulator import execute, fetch, cycle, step, run, raise_for_status
from chip8vm.address_space import read_byte, write_byte, read_word, load_program, load_rom
from chip8vm.decode import DecodedInstruction, decode
from chip8vm.constants import *
from chip8vm.errors import (
    Chip8Error, RomTooLarge, ExecutionFault, MemoryFault, StackOverflow, StackUnderflow,
)
from chip8vm.machine import Machine
from chip8vm.random_source import RandomSource, KeyRandomSource, SequenceRandomSource
from chip8vm.rendering import display_to_rgb, create_color_scheme

__all__ = [
    "VMState",
    "StackState",
    "create_state",
    "set_key",
    "fetch",
    "execute",
    "cycle",
    "step",
    "run",
    "raise_for_status",
    "read_byte",
    "write_byte",
    "read_word",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "PROGRAM_START",
    "FONT_START",
    "FONT_DATA",
    "MEMORY_SIZE",
    "MAX_ROM_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "STACK_SIZE",
    "FLAG_REGISTER",
    "Chip8Error",
    "RomTooLarge",
    "ExecutionFault",
    "MemoryFault",
    "StackOverflow",
    "StackUnderflow",
    "Machine",
    "RandomSource",
    "KeyRandomSource",
    "SequenceRandomSource",
    "display_to_rgb",
    "create_color_scheme",
]
