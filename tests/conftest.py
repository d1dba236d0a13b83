"""Test configuration and fixtures for CHIP-8 machine tests."""

import pytest
import jax.numpy as jnp
from chip8vm import create_state, load_program


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state()


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def rom(*instructions):
    """Assemble instruction words into a big-endian program image."""
    return b"".join(word.to_bytes(2, "big") for word in instructions)


def state_with_program(*instructions):
    """Fresh state with the given instruction words loaded at 0x200."""
    return load_program(create_state(), rom(*instructions))
