"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.constants import STATUS_UNKNOWN_OPCODE, STATUS_STACK_UNDERFLOW
from chip8vm.state import VMState, set_status
from chip8vm.decode import DecodedInstruction
from chip8vm.stack import pop


def unknown_opcode(state: VMState, instruction: DecodedInstruction) -> VMState:
    """Unmapped instruction: no effect besides the warning status."""
    return set_status(state, True, STATUS_UNKNOWN_OPCODE)


def execute_clear_screen(state: VMState, instruction: DecodedInstruction) -> VMState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: VMState, instruction: DecodedInstruction) -> VMState:
    """00EE - Return from subroutine."""
    stack, address, ok = pop(state.stack)
    state = state.replace(stack=stack, pc=jnp.where(ok, address, state.pc))
    return set_status(state, ~ok, STATUS_STACK_UNDERFLOW)


def execute_system_instruction(state: VMState, instruction: DecodedInstruction) -> VMState:
    """Dispatch system instructions."""
    return jax.lax.cond(
        0x00E0 == instruction.raw,
        execute_clear_screen,
        lambda state, instruction: jax.lax.cond(
            0x00EE == instruction.raw,
            execute_return,
            unknown_opcode,
            state, instruction
        ),
        state, instruction
    )
