"""CHIP-8 delay and sound timers.

Timers count down once per executed instruction rather than at 60Hz, so
their decay rate follows how often the host steps the machine.
"""

import jax.numpy as jnp
from chip8vm.state import VMState


def _decrement(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


def decrement_timers(state: VMState) -> VMState:
    """Decrement both timers by one, stopping at zero."""
    return state.replace(
        delay_timer=_decrement(state.delay_timer),
        sound_timer=_decrement(state.sound_timer),
    )
