"""Turn the CHIP-8 framebuffer into RGB images for a host window."""

from typing import Tuple

import numpy as np

from chip8vm.constants import SCREEN_HEIGHT, SCREEN_WIDTH

Color = Tuple[int, int, int]

# Scheme name -> (lit pixel, dark pixel)
COLOR_SCHEMES = {
    "classic": ((255, 255, 255), (0, 0, 0)),
    "green": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
}


def display_to_rgb(
    display,
    scale: int = 8,
    on_color: Color = COLOR_SCHEMES["classic"][0],
    off_color: Color = COLOR_SCHEMES["classic"][1],
) -> np.ndarray:
    """Paint the framebuffer as an image.

    Args:
        display: Pixels indexed [x, y], shape (64, 32), e.g. `Machine.framebuffer`
        scale: Each CHIP-8 pixel becomes a `scale` x `scale` block
        on_color: Colour of lit pixels
        off_color: Colour of dark pixels

    Returns:
        uint8 array of shape (32 * scale, 64 * scale, 3), rows first
    """
    if scale < 1:
        raise ValueError(f"Scale must be at least 1, got {scale}")

    lit = np.asarray(display, dtype=np.bool_).T
    if lit.shape != (SCREEN_HEIGHT, SCREEN_WIDTH):
        raise ValueError(f"Expected a (64, 32) display, got {lit.T.shape}")
    image = np.where(
        lit[..., None],
        np.array(on_color, dtype=np.uint8),
        np.array(off_color, dtype=np.uint8),
    )
    return image.repeat(scale, axis=0).repeat(scale, axis=1)


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Look up the (on_color, off_color) pair of a named scheme."""
    if scheme not in COLOR_SCHEMES:
        raise ValueError(f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES)}")
    return COLOR_SCHEMES[scheme]
