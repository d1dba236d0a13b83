"""CHIP-8 register load and random instructions."""

import jax.numpy as jnp
from chip8vm.state import VMState
from chip8vm.decode import DecodedInstruction


def execute_set(state: VMState, instruction: DecodedInstruction) -> VMState:
    """6XKK - Set VX = KK."""
    return state.replace(V=state.V.at[instruction.x].set(jnp.astype(instruction.kk, jnp.uint8)))


def execute_add(state: VMState, instruction: DecodedInstruction) -> VMState:
    """7XKK - Add KK to VX, wrapping, VF untouched."""
    total = (jnp.astype(state.V[instruction.x], jnp.int32) + instruction.kk) & 0xFF
    return state.replace(V=state.V.at[instruction.x].set(jnp.astype(total, jnp.uint8)))


def execute_set_index(state: VMState, instruction: DecodedInstruction) -> VMState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.astype(instruction.nnn, jnp.uint16))


def execute_random(state: VMState, instruction: DecodedInstruction, random_byte=0) -> VMState:
    """CXKK - Set VX = random byte & KK."""
    value = jnp.astype(random_byte, jnp.int32) & instruction.kk
    return state.replace(V=state.V.at[instruction.x].set(jnp.astype(value, jnp.uint8)))
