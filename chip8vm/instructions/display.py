"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.constants import FLAG_REGISTER, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT, STATUS_MEMORY_FAULT
from chip8vm.state import VMState, set_status
from chip8vm.decode import DecodedInstruction

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def execute_display(state: VMState, instruction: DecodedInstruction) -> VMState:
    """DXYN - Draw sprite at (VX, VY) with height N, wrapping on both axes."""
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT
    index = jnp.astype(state.I, jnp.int32)

    # Offset of every screen pixel from the sprite origin, wrapped
    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < 8) & (row_offset < instruction.n)

    sprite_bytes = jnp.astype(state.memory[jnp.minimum(index + row_offset, MEMORY_SIZE - 1)], jnp.int32)
    shift = jnp.clip(7 - col_offset, 0, 7)
    sprite = (((sprite_bytes >> shift) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    state = state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
    out_of_range = (instruction.n > 0) & (index + instruction.n > MEMORY_SIZE)
    return set_status(state, out_of_range, STATUS_MEMORY_FAULT)
