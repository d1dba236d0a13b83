"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.constants import (
    FONT_GLYPH_SIZE, INDEX_LIMIT, MEMORY_SIZE, NO_KEY, NUM_REGISTERS, STATUS_MEMORY_FAULT,
)
from chip8vm.state import VMState, set_status
from chip8vm.decode import DecodedInstruction
from chip8vm.instructions.system import unknown_opcode


def execute_get_delay_timer(state: VMState, instruction: DecodedInstruction) -> VMState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_read_key(state: VMState, instruction: DecodedInstruction) -> VMState:
    """FX0A - Set VX to the current key without waiting; no key reads as 0."""
    key = jnp.where(state.key == NO_KEY, 0, state.key)
    return state.replace(V=state.V.at[instruction.x].set(jnp.astype(key, jnp.uint8)))


def execute_set_delay_timer(state: VMState, instruction: DecodedInstruction) -> VMState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: VMState, instruction: DecodedInstruction) -> VMState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def _offset_index(state: VMState, offset) -> VMState:
    """Add offset to I; carrying out of 16 bits is a memory fault, never a wrap."""
    total = jnp.astype(state.I, jnp.int32) + jnp.astype(offset, jnp.int32)
    state = state.replace(I=jnp.astype(total & 0xFFFF, jnp.uint16))
    return set_status(state, total >= INDEX_LIMIT, STATUS_MEMORY_FAULT)


def execute_add_to_index(state: VMState, instruction: DecodedInstruction) -> VMState:
    """FX1E - Add VX to I register, VF untouched."""
    return _offset_index(state, state.V[instruction.x])


def execute_font_character(state: VMState, instruction: DecodedInstruction) -> VMState:
    """FX29 - Set I to the glyph offset of digit VX within the font table."""
    offset = jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(offset, jnp.uint16))


def execute_bcd_conversion(state: VMState, instruction: DecodedInstruction) -> VMState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = jnp.arange(3) + jnp.astype(state.I, jnp.int32)
    state = state.replace(memory=state.memory.at[indices].set(digits, mode="drop"))
    return set_status(state, indices[-1] >= MEMORY_SIZE, STATUS_MEMORY_FAULT)


def _register_block(state: VMState, instruction: DecodedInstruction):
    """Mask of V0..VX, their addresses from I, and whether VX's address is mapped."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    addresses = jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)
    out_of_range = jnp.astype(state.I, jnp.int32) + instruction.x >= MEMORY_SIZE
    return register_mask, addresses, out_of_range


def execute_store_registers(state: VMState, instruction: DecodedInstruction) -> VMState:
    """FX55 - Store V0 through VX in memory starting at I, then I += X + 1."""
    register_mask, addresses, out_of_range = _register_block(state, instruction)
    current_values = state.memory[jnp.minimum(addresses, MEMORY_SIZE - 1)]
    new_values = jnp.where(register_mask, state.V, current_values)
    new_memory = state.memory.at[addresses].set(new_values, mode="drop")

    state = _offset_index(state.replace(memory=new_memory), instruction.x + 1)
    return set_status(state, out_of_range, STATUS_MEMORY_FAULT)


def execute_load_registers(state: VMState, instruction: DecodedInstruction) -> VMState:
    """FX65 - Load V0 through VX from memory starting at I, then I += X + 1."""
    register_mask, addresses, out_of_range = _register_block(state, instruction)
    memory_values = state.memory[jnp.minimum(addresses, MEMORY_SIZE - 1)]
    new_V = jnp.where(register_mask, memory_values, state.V)

    state = _offset_index(state.replace(V=new_V), instruction.x + 1)
    return set_status(state, out_of_range, STATUS_MEMORY_FAULT)


def execute_misc_instruction(state: VMState, instruction: DecodedInstruction) -> VMState:
    """Dispatch misc instructions using arithmetic switch."""
    is_0x07 = instruction.kk == 0x07
    is_0x0A = instruction.kk == 0x0A
    is_0x15 = instruction.kk == 0x15
    is_0x18 = instruction.kk == 0x18
    is_0x1E = instruction.kk == 0x1E
    is_0x29 = instruction.kk == 0x29
    is_0x33 = instruction.kk == 0x33
    is_0x55 = instruction.kk == 0x55
    is_0x65 = instruction.kk == 0x65

    switch_index = (
        is_0x07 * 0 +
        is_0x0A * 1 +
        is_0x15 * 2 +
        is_0x18 * 3 +
        is_0x1E * 4 +
        is_0x29 * 5 +
        is_0x33 * 6 +
        is_0x55 * 7 +
        is_0x65 * 8 +
        (~(is_0x07 | is_0x0A | is_0x15 | is_0x18 | is_0x1E | is_0x29 | is_0x33 | is_0x55 | is_0x65)) * 9
    )

    return jax.lax.switch(
        switch_index,
        [
            execute_get_delay_timer,
            execute_read_key,
            execute_set_delay_timer,
            execute_set_sound_timer,
            execute_add_to_index,
            execute_font_character,
            execute_bcd_conversion,
            execute_store_registers,
            execute_load_registers,
            unknown_opcode,
        ],
        state, instruction
    )
