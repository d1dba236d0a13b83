"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.constants import STATUS_STACK_OVERFLOW
from chip8vm.state import VMState, set_status
from chip8vm.decode import DecodedInstruction
from chip8vm.stack import push
from chip8vm.instructions.system import unknown_opcode


def execute_jump(state: VMState, instruction: DecodedInstruction) -> VMState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: VMState, instruction: DecodedInstruction) -> VMState:
    """2NNN - Call subroutine at NNN, saving the address of this call."""
    stack, ok = push(state.stack, state.pc)
    target = jnp.where(ok, jnp.astype(instruction.nnn, jnp.uint16), state.pc)
    state = state.replace(stack=stack, pc=target.astype(jnp.uint16))
    return set_status(state, ~ok, STATUS_STACK_OVERFLOW)


def execute_jump_with_offset(state: VMState, instruction: DecodedInstruction) -> VMState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = jnp.astype(instruction.nnn, jnp.uint16) + jnp.astype(state.V[0], jnp.uint16)
    return state.replace(pc=jump_address)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: VMState, instruction: DecodedInstruction) -> VMState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=(s.pc + 2).astype(jnp.uint16)),
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.kk
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.kk
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)

# No key pressed never equals a register value, so EXA1 skips.
execute_skip_if_key = make_skip_instruction(
    lambda state, inst: state.key == state.V[inst.x]
)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: state.key != state.V[inst.x]
)


def execute_key_instruction(state: VMState, instruction: DecodedInstruction) -> VMState:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""
    index = jnp.where(instruction.kk == 0x9E, 0, jnp.where(instruction.kk == 0xA1, 1, 2))
    return jax.lax.switch(
        index,
        [execute_skip_if_key, execute_skip_if_not_key, unknown_opcode],
        state, instruction
    )
