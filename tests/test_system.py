"""Tests for system instructions (0xxx) and the call stack."""

import jax.numpy as jnp
from chip8vm import execute
from chip8vm.constants import (
    STACK_SIZE, STATUS_OK, STATUS_STACK_OVERFLOW, STATUS_STACK_UNDERFLOW, STATUS_UNKNOWN_OPCODE,
)


def test_execute_clear_screen(fresh_state):
    """00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))
    state = state.replace(display=state.display.at[63, 31].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0
    assert state.pc == 0x202


def test_execute_call_and_return(fresh_state):
    """2NNN saves the address of the call; 00EE resumes after it."""
    state = execute(fresh_state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.pointer == 1
    assert state.stack.data[0] == 0x200

    state = execute(state, 0x00EE)  # Return
    assert state.pc == 0x202
    assert state.stack.pointer == 0


def test_nested_calls_return_in_lifo_order(fresh_state):
    state = execute(fresh_state, 0x2300)
    state = execute(state, 0x2400)
    state = execute(state, 0x2500)
    assert list(state.stack.data[:3]) == [0x200, 0x300, 0x400]

    state = execute(state, 0x00EE)
    assert state.pc == 0x402
    state = execute(state, 0x00EE)
    assert state.pc == 0x302
    state = execute(state, 0x00EE)
    assert state.pc == 0x202


def test_sixteen_calls_fit(fresh_state):
    state = fresh_state
    for _ in range(STACK_SIZE):
        state = execute(state, 0x2300)
    assert state.status == STATUS_OK
    assert state.stack.pointer == STACK_SIZE


def test_seventeenth_call_overflows(fresh_state):
    state = fresh_state
    for _ in range(STACK_SIZE):
        state = execute(state, 0x2300)

    overflowed = execute(state, 0x2400)

    assert overflowed.status == STATUS_STACK_OVERFLOW
    assert overflowed.stack.pointer == STACK_SIZE
    assert jnp.array_equal(overflowed.stack.data, state.stack.data)


def test_return_with_empty_stack(fresh_state):
    state = execute(fresh_state, 0x00EE)
    assert state.status == STATUS_STACK_UNDERFLOW
    assert state.stack.pointer == 0


def test_machine_code_routine_is_unknown(fresh_state):
    """0NNN other than 00E0/00EE is not supported."""
    state = execute(fresh_state, 0x0123)
    assert state.status == STATUS_UNKNOWN_OPCODE
    assert state.pc == 0x202
