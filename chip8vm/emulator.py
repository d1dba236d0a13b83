"""Main CHIP-8 instruction engine.

`fetch`, `execute` and `cycle` are pure functions of the machine state
and never raise: faults are recorded in `state.status`. `step` is the
eager entry point that turns those statuses into exceptions and logs
unknown opcodes.
"""

from functools import partial
from typing import Optional

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import VMState, set_status, is_fatal
from chip8vm.decode import decode
from chip8vm.constants import (
    INSTRUCTION_SIZE, MEMORY_SIZE, STATUS_OK, STATUS_MEMORY_FAULT, STATUS_UNKNOWN_OPCODE,
)
from chip8vm.errors import error_for_status
from chip8vm.logging import ConsoleLogger, scan_with_progress
from chip8vm.timers import decrement_timers
from chip8vm.instructions.system import execute_system_instruction
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_key_instruction
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import execute_misc_instruction

# Families that load the program counter themselves: 1NNN, 2NNN, BNNN
SETS_PC = jnp.array([0, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0], dtype=bool)

logger = ConsoleLogger("chip8vm", log_level="WARNING")


def execute(state: VMState, instruction: int, random_byte=0) -> VMState:
    """Execute single CHIP-8 instruction located at `state.pc`."""
    decoded_instruction = decode(instruction)

    state = jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            partial(execute_random, random_byte=random_byte),
            execute_display,
            execute_key_instruction,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )
    next_pc = jnp.where(SETS_PC[decoded_instruction.opcode], state.pc, state.pc + INSTRUCTION_SIZE)
    return state.replace(pc=jnp.astype(next_pc, jnp.uint16))


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: VMState) -> tuple[VMState, jnp.uint16]:
    """Fetch the big-endian instruction word at the program counter."""
    address = jnp.astype(state.pc, jnp.int32)
    in_range = address + 1 < MEMORY_SIZE
    high = state.memory[jnp.minimum(address, MEMORY_SIZE - 1)]
    low = state.memory[jnp.minimum(address + 1, MEMORY_SIZE - 1)]
    instruction = jnp.where(in_range, _pack_u16(high, low), 0).astype(jnp.uint16)
    return set_status(state, ~in_range, STATUS_MEMORY_FAULT), instruction


def _cycle(state: VMState, random_byte) -> tuple[VMState, jnp.uint16]:
    """Decrement timers, fetch and execute; a fatal status keeps the prior state."""
    ticked = decrement_timers(state.replace(status=jnp.asarray(STATUS_OK, dtype=jnp.uint8)))
    fetched, instruction = fetch(ticked)
    executed = jax.lax.cond(
        fetched.status == STATUS_OK,
        lambda s: execute(s, instruction, random_byte),
        lambda s: s,
        fetched
    )
    halted = is_fatal(executed.status)
    frozen = state.replace(status=executed.status)
    return jax.tree.map(partial(jnp.where, halted), frozen, executed), instruction


@jax.jit
def cycle(state: VMState, random_byte) -> tuple[VMState, jnp.uint16]:
    """Run one instruction cycle. A state that already faulted is returned unchanged."""
    return jax.lax.cond(
        is_fatal(state.status),
        lambda s: (s, jnp.zeros((), dtype=jnp.uint16)),
        lambda s: _cycle(s, random_byte),
        state
    )


def raise_for_status(state: VMState, instruction: Optional[int] = None, pc: Optional[int] = None):
    """Raise the exception matching a fatal status, if any."""
    status = int(state.status)
    if status >= STATUS_MEMORY_FAULT:
        raise error_for_status(status, pc=int(state.pc) if pc is None else pc, instruction=instruction)


def step(state: VMState, random_byte: int = 0, log: Optional[ConsoleLogger] = None) -> VMState:
    """Advance the machine by exactly one instruction.

    Args:
        state: Current machine state
        random_byte: Byte used by CXKK if this instruction is one
        log: Logger receiving unknown opcode warnings (module logger by default)

    Returns:
        The next machine state

    Raises:
        MemoryFault, StackOverflow, StackUnderflow: the instruction faulted;
            the machine cannot continue from this state.
    """
    log = log or logger
    new_state, instruction = cycle(state, jnp.asarray(random_byte, dtype=jnp.uint8))
    status = int(new_state.status)
    if status == STATUS_UNKNOWN_OPCODE:
        log.warning(f"Unknown opcode 0x{int(instruction):04X} at 0x{int(state.pc):03X}")
    elif status != STATUS_OK:
        pc = int(state.pc)
        fetched = pc + 1 < MEMORY_SIZE
        raise_for_status(new_state, instruction=int(instruction) if fetched else None, pc=pc)
    return new_state


@partial(jax.jit, static_argnums=(1, 3))
def run(state: VMState, num_steps: int, rng: jax.Array, progress: bool = False) -> VMState:
    """Run `num_steps` cycles under jit, drawing random bytes from `rng`.

    Unknown opcodes are not reported here. A fatal fault freezes the state
    with its status set, see `raise_for_status`.
    """
    def run_instruction(state, x):
        _, key = x
        random_byte = jax.random.randint(key, shape=(), minval=0, maxval=256).astype(jnp.uint8)
        state, _ = cycle(state, random_byte)
        return state, None

    if progress:
        run_instruction = scan_with_progress(num_steps, desc=f"Running ({num_steps:,} steps)")(run_instruction)

    xs = (jnp.arange(num_steps), jax.random.split(rng, num_steps))
    state, _ = jax.lax.scan(run_instruction, state, xs)
    return state
