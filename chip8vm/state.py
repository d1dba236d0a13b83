"""CHIP-8 virtual machine state structures."""

from typing import Optional

import jax.numpy as jnp
from flax.struct import dataclass, field, PyTreeNode

from chip8vm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS,
    NO_KEY, SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE, STATUS_OK, STATUS_MEMORY_FAULT,
)


def _zeros(shape, dtype):
    return field(default_factory=lambda: jnp.zeros(shape, dtype=dtype))


def _scalar(value, dtype):
    return field(default_factory=lambda: jnp.asarray(value, dtype=dtype))


@dataclass(frozen=True)
class StackState:
    """Call stack of return addresses."""
    data: jnp.ndarray = _zeros(STACK_SIZE, jnp.uint16)
    pointer: jnp.ndarray = _zeros((), jnp.int32)


class VMState(PyTreeNode):
    """Main CHIP-8 virtual machine state."""
    memory: jnp.ndarray = _zeros(MEMORY_SIZE, jnp.uint8)
    pc: jnp.ndarray = _scalar(PROGRAM_START, jnp.uint16)
    display: jnp.ndarray = _zeros((SCREEN_WIDTH, SCREEN_HEIGHT), jnp.bool_)
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = _zeros((), jnp.uint8)
    sound_timer: jnp.ndarray = _zeros((), jnp.uint8)
    key: jnp.ndarray = _scalar(NO_KEY, jnp.int8)
    V: jnp.ndarray = _zeros(NUM_REGISTERS, jnp.uint8)
    I: jnp.ndarray = _zeros((), jnp.uint16)
    status: jnp.ndarray = _scalar(STATUS_OK, jnp.uint8)


def create_state() -> VMState:
    """Create initial machine state with font data loaded."""
    state = VMState()
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def set_key(state: VMState, key: Optional[int]) -> VMState:
    """Record the currently pressed key (0-15), or None once released."""
    if key is None:
        key = NO_KEY
    elif not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key must be in 0..{NUM_KEYS - 1} or None, got {key}")
    return state.replace(key=jnp.asarray(key, dtype=jnp.int8))


def set_status(state: VMState, condition, status: int) -> VMState:
    """Record a status code on the state where condition holds."""
    new_status = jnp.where(condition, jnp.uint8(status), state.status)
    return state.replace(status=new_status.astype(jnp.uint8))


def is_fatal(status) -> jnp.ndarray:
    """Whether a status code halts execution."""
    return status >= STATUS_MEMORY_FAULT
