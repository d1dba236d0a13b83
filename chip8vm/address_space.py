"""CHIP-8 address space access and program loading.

These helpers work on concrete states outside of jit and raise on
out-of-range addresses instead of letting JAX clamp the index.
"""

import jax.numpy as jnp
from chip8vm.constants import MAX_ROM_SIZE, MEMORY_SIZE, PROGRAM_START
from chip8vm.errors import MemoryFault, RomTooLarge
from chip8vm.state import VMState


def _check_address(address: int, width: int = 1):
    if address < 0 or address + width > MEMORY_SIZE:
        raise MemoryFault(address=address + width - 1 if address >= 0 else address)


def read_byte(state: VMState, address: int) -> int:
    """Read one byte of memory."""
    _check_address(address)
    return int(state.memory[address])


def write_byte(state: VMState, address: int, value: int) -> VMState:
    """Write one byte of memory, keeping the low 8 bits of value."""
    _check_address(address)
    return state.replace(memory=state.memory.at[address].set(value & 0xFF))


def read_word(state: VMState, address: int) -> int:
    """Read the big-endian 16-bit word at address."""
    _check_address(address, width=2)
    return int(state.memory[address]) << 8 | int(state.memory[address + 1])


def load_program(state: VMState, rom: bytes) -> VMState:
    """Copy a program image into memory starting at 0x200."""
    if len(rom) > MAX_ROM_SIZE:
        raise RomTooLarge(len(rom))
    if not rom:
        return state
    rom_array = jnp.array(list(rom), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: VMState, filename: str) -> VMState:
    """Load ROM file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
