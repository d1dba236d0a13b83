"""CHIP-8 call stack operations.

Push and pop never go out of bounds: each returns a success flag alongside
the new stack, and leaves the stack unchanged when it fails.
"""

import jax.numpy as jnp
from chip8vm.constants import STACK_SIZE
from chip8vm.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack."""
    ok = stack.pointer < STACK_SIZE
    slot = jnp.minimum(stack.pointer, STACK_SIZE - 1)
    new_data = jnp.where(ok, stack.data.at[slot].set(jnp.astype(address, jnp.uint16)), stack.data)
    new_pointer = jnp.where(ok, stack.pointer + 1, stack.pointer)
    return stack.replace(data=new_data, pointer=new_pointer.astype(jnp.int32)), ok


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray, jnp.ndarray]:
    """Pop address from stack."""
    ok = stack.pointer > 0
    slot = jnp.maximum(stack.pointer - 1, 0)
    popped_address = jnp.where(ok, stack.data[slot], 0).astype(jnp.uint16)
    new_data = jnp.where(ok, stack.data.at[slot].set(0), stack.data)
    new_pointer = jnp.where(ok, stack.pointer - 1, stack.pointer)
    return stack.replace(data=new_data, pointer=new_pointer.astype(jnp.int32)), popped_address, ok


def depth(stack: StackState) -> int:
    """Number of saved return addresses."""
    return int(stack.pointer)
