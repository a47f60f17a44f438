"""
Monochrome framebuffer with the two S-CHIP resolutions:
- 64x32 low res (the original CHIP-8 screen)
- 128x64 high res

Pixels are stored row-major in a flat list and can be 0 or 1 (off or on).
"""

import logging

log = logging.getLogger(__name__)

LORES = (64, 32)
HIRES = (128, 64)
SCROLL_STEP = 4


class Display:
    def __init__(self, quirks):
        self.quirks = quirks
        self.hires = False
        self.display = [0] * self.width * self.height

    @property
    def width(self):
        return HIRES[0] if self.hires else LORES[0]

    @property
    def height(self):
        return HIRES[1] if self.hires else LORES[1]

    def clear(self):
        self.display = [0] * self.width * self.height

    def set_hires(self, enabled):
        if enabled == self.hires:
            return

        old, old_width, old_height = self.display, self.width, self.height
        self.hires = enabled
        self.clear()
        log.debug("Switched to %dx%d", self.width, self.height)

        if self.quirks.resolution:
            return

        # Keep whatever is visible in both resolutions
        for y in range(min(old_height, self.height)):
            for x in range(min(old_width, self.width)):
                self.display[x + y * self.width] = old[x + y * old_width]

    def get_pixel(self, x, y):
        return self.display[x + y * self.width] == 1

    def draw(self, x, y, rows, sprite_width=8):
        """XOR a sprite onto the screen and return the value for VF.

        Each entry of rows is one sprite row, most significant bit leftmost.
        The origin always wraps. Rows past the bottom edge wrap too, unless
        the collision quirk is on, in which case they are clipped and counted.
        """
        width, height = self.width, self.height
        x %= width
        y %= height
        rows_hit = 0

        for yline, bits in enumerate(rows):
            screen_y = y + yline
            if screen_y >= height:
                if self.quirks.collision:
                    rows_hit += 1
                    continue
                screen_y %= height

            collided = False
            offset = screen_y * width
            for xline in range(sprite_width):
                if bits & (1 << (sprite_width - 1 - xline)):
                    index = offset + (x + xline) % width
                    if self.display[index] == 1:
                        collided = True
                    self.display[index] ^= 1

            if collided:
                rows_hit += 1

        if self.quirks.collision:
            return rows_hit
        return 1 if rows_hit else 0

    def scroll_down(self, lines):
        width = self.width
        lines = min(lines, self.height)
        self.display = [0] * width * lines + self.display[:len(self.display) - width * lines]

    def scroll_right(self):
        width = self.width
        for y in range(self.height):
            row = self.display[y * width:(y + 1) * width]
            self.display[y * width:(y + 1) * width] = [0] * SCROLL_STEP + row[:-SCROLL_STEP]

    def scroll_left(self):
        width = self.width
        for y in range(self.height):
            row = self.display[y * width:(y + 1) * width]
            self.display[y * width:(y + 1) * width] = row[SCROLL_STEP:] + [0] * SCROLL_STEP

    def rows(self):
        width = self.width
        return tuple(
            tuple(pixel == 1 for pixel in self.display[y * width:(y + 1) * width])
            for y in range(self.height)
        )
