"""64x32 monochrome framebuffer with XOR sprite composition."""

import numpy as np

from .constants import DISPLAY_W, DISPLAY_H, SPRITE_WIDTH, PIXEL_ON, PIXEL_OFF


class Display:
    """CHIP-8 display buffer.

    Cells are stored row-major in a (height, width) ``uint8`` array, so the
    flat index of a cell is ``y * width + x`` and a renderer can map it back
    with ``(index % width, index // width)``.
    """

    def __init__(self, width: int = DISPLAY_W, height: int = DISPLAY_H):
        self.width = width
        self.height = height
        self._buffer = np.full((height, width), PIXEL_OFF, dtype=np.uint8)

    def clear(self):
        self._buffer.fill(PIXEL_OFF)

    def is_lit(self, x: int, y: int) -> bool:
        return bool(self._buffer[y % self.height, x % self.width] != PIXEL_OFF)

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (height, width) view"""
        view = self._buffer.view()
        view.flags.writeable = False
        return view

    @property
    def cells(self) -> np.ndarray:
        """Read-only flat view of all width*height cells"""
        view = self._buffer.reshape(-1).view()
        view.flags.writeable = False
        return view

    def draw_sprite(self, x: int, y: int, rows: bytes) -> bool:
        """XOR a sprite onto the display at (x, y).

        Each byte of ``rows`` is one 8-pixel row, most significant bit on the
        left. Both axes wrap around the screen edges.

        Returns:
            True if any lit cell was turned off (collision)
        """
        if not rows:
            return False

        sprite = np.unpackbits(np.frombuffer(bytes(rows), dtype=np.uint8))
        sprite = sprite.reshape(len(rows), SPRITE_WIDTH).astype(bool)

        ys = (y + np.arange(len(rows))) % self.height
        xs = (x + np.arange(SPRITE_WIDTH)) % self.width
        region = np.ix_(ys, xs)

        lit = self._buffer[region] != PIXEL_OFF
        collision = bool(np.any(lit & sprite))
        self._buffer[region] = np.where(lit ^ sprite, PIXEL_ON, PIXEL_OFF)
        return collision
