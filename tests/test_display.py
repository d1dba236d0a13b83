"""Tests for display operations (DXYN)."""

import jax.numpy as jnp
import pytest
from chip8vm import execute
from chip8vm.constants import FONT_START, STATUS_OK, STATUS_MEMORY_FAULT
from conftest import setup_sprite_in_memory


class TestBasicSprites:
    """Test basic sprite drawing."""

    def test_basic_sprite_draw(self, fresh_state):
        """Test basic sprite drawing without collision."""
        state = fresh_state

        # Simple 2x2 box sprite
        sprite = [0xC0, 0xC0]  # 11000000, 11000000
        state = setup_sprite_in_memory(state, 0x300, sprite)

        state = execute(state, 0x600A)  # V0 = 10
        state = execute(state, 0x6105)  # V1 = 5
        state = execute(state, 0xA300)  # I = 0x300

        state = execute(state, 0xD012)

        assert state.display[10, 5]
        assert state.display[11, 5]
        assert state.display[10, 6]
        assert state.display[11, 6]
        assert not state.display[12, 5]
        assert jnp.sum(state.display) == 4

        assert state.V[15] == 0

    def test_collision_detection(self, fresh_state):
        """Test collision flag when sprite overlaps existing pixels."""
        state = fresh_state

        sprite = [0x80]  # 10000000
        state = setup_sprite_in_memory(state, 0x400, sprite)

        state = execute(state, 0x6014)  # V0 = 20
        state = execute(state, 0x610A)  # V1 = 10
        state = execute(state, 0xA400)  # I = 0x400

        state = execute(state, 0xD011)
        assert state.display[20, 10]
        assert state.V[15] == 0

        state = execute(state, 0xD011)
        assert not state.display[20, 10]  # Pixel erased by XOR
        assert state.V[15] == 1

    def test_font_glyph_drawn_twice_is_erased(self, fresh_state):
        """Digit 0 glyph XORed onto itself clears exactly its pixels."""
        state = execute(fresh_state, 0xA000 | FONT_START)
        state = state.replace(display=state.display.at[40, 20].set(True))

        state = execute(state, 0xD015)  # V0 = V1 = 0
        assert state.V[15] == 0
        assert jnp.sum(state.display) == 14 + 1  # F0 90 90 90 F0
        assert all(state.display[x, 0] for x in range(4))
        assert state.display[0, 2] and state.display[3, 2]
        assert not state.display[1, 2]

        state = execute(state, 0xD015)
        assert state.V[15] == 1
        assert jnp.sum(state.display) == 1
        assert state.display[40, 20]

    def test_partial_overlap_sets_collision(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xFF])
        state = state.replace(display=state.display.at[7, 0].set(True))
        state = execute(state, 0xA300)

        state = execute(state, 0xD011)

        assert state.V[15] == 1
        assert not state.display[7, 0]
        assert jnp.sum(state.display) == 7


class TestScreenWrapping:
    """Sprites wrap around both edges instead of being clipped."""

    def test_wrap_right_edge(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x600, [0xFF])

        state = execute(state, 0x603C)  # V0 = 60
        state = execute(state, 0x6100)  # V1 = 0
        state = execute(state, 0xA600)
        state = execute(state, 0xD011)

        for x in [60, 61, 62, 63, 0, 1, 2, 3]:
            assert state.display[x, 0], f"pixel {x} not drawn"
        assert jnp.sum(state.display) == 8

    def test_wrap_bottom_edge(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x700, [0x80, 0x80, 0x80])

        state = execute(state, 0x6000)  # V0 = 0
        state = execute(state, 0x611E)  # V1 = 30
        state = execute(state, 0xA700)
        state = execute(state, 0xD013)

        assert state.display[0, 30]
        assert state.display[0, 31]
        assert state.display[0, 0]

    def test_wrap_corner(self, fresh_state):
        """Drawing at (63, 31) wraps to column 0 and row 0."""
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xC0, 0xC0])

        state = execute(state, 0x603F)  # V0 = 63
        state = execute(state, 0x611F)  # V1 = 31
        state = execute(state, 0xA300)
        state = execute(state, 0xD012)

        assert state.display[63, 31]
        assert state.display[0, 31]
        assert state.display[63, 0]
        assert state.display[0, 0]
        assert jnp.sum(state.display) == 4

    def test_coordinate_wrapping(self, fresh_state):
        """Origins beyond the screen are taken modulo its size."""
        state = setup_sprite_in_memory(fresh_state, 0x800, [0x80])

        state = execute(state, 0x6046)  # V0 = 70 (70 % 64 = 6)
        state = execute(state, 0x6125)  # V1 = 37 (37 % 32 = 5)
        state = execute(state, 0xA800)
        state = execute(state, 0xD011)

        assert state.display[6, 5]


class TestSpriteVariations:
    """Test different sprite configurations."""

    def test_different_sprite_heights(self, fresh_state):
        sprite = [0x80, 0x40, 0x20, 0x10, 0x08]  # Diagonal line
        state = setup_sprite_in_memory(fresh_state, 0x900, sprite)

        state = execute(state, 0x600A)  # V0 = 10
        state = execute(state, 0x6108)  # V1 = 8
        state = execute(state, 0xA900)

        state = execute(state, 0xD013)  # Only the first 3 rows

        assert state.display[10, 8]
        assert state.display[11, 9]
        assert state.display[12, 10]
        assert not state.display[13, 11]

    def test_zero_height_draws_nothing(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xFF])
        state = state.replace(V=state.V.at[15].set(1))
        state = execute(state, 0xA300)

        state = execute(state, 0xD010)

        assert jnp.sum(state.display) == 0
        assert state.V[15] == 0

    def test_vf_cleared_without_collision(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0xB00, [0x80])

        state = execute(state, 0x6F01)  # VF = 1
        state = execute(state, 0x6005)
        state = execute(state, 0x6105)
        state = execute(state, 0xAB00)
        state = execute(state, 0xD011)

        assert state.V[15] == 0


class TestSpriteMemoryBounds:

    def test_sprite_ending_at_last_byte(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0xFFD, [0x80, 0x80, 0x80])
        state = execute(state, 0xAFFD)

        state = execute(state, 0xD013)

        assert state.status == STATUS_OK
        assert jnp.sum(state.display) == 3

    @pytest.mark.parametrize("index", [0xFFE, 0xFFF])
    def test_sprite_past_memory_faults(self, fresh_state, index):
        state = execute(fresh_state, 0xA000 | index)
        state = execute(state, 0xD013)
        assert state.status == STATUS_MEMORY_FAULT
