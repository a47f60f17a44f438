"""Framebuffer tests: wrapping, clipping, collisions, resolution and scrolling."""
import random

from chip8.display import Display
from chip8.quirks import QuirkSet


def lit(display):
    width = display.width
    return {(n % width, n // width) for n, pixel in enumerate(display.display) if pixel}


class TestSprite:

    def test_wraps_horizontally(self):
        d = Display(QuirkSet())
        assert d.draw(62, 0, [0xF0]) == 0
        assert lit(d) == {(62, 0), (63, 0), (0, 0), (1, 0)}

    def test_wraps_vertically(self):
        d = Display(QuirkSet())
        d.draw(0, 31, [0x80, 0x80])
        assert lit(d) == {(0, 31), (0, 0)}

    def test_origin_wraps(self):
        d = Display(QuirkSet())
        d.draw(65, 34, [0x80])
        assert lit(d) == {(1, 2)}

    def test_collision_flag(self):
        d = Display(QuirkSet())
        d.draw(0, 0, [0xC0])
        assert d.draw(1, 0, [0x80]) == 1
        assert lit(d) == {(0, 0)}

    def test_xor_is_self_inverse(self):
        d = Display(QuirkSet())
        rng = random.Random(7)
        d.display = [rng.randrange(2) for _ in d.display]
        before = list(d.display)
        sprite = [rng.randrange(256) for _ in range(15)]

        d.draw(60, 25, sprite)
        d.draw(60, 25, sprite)
        assert d.display == before

    def test_collision_quirk_clips_bottom(self):
        d = Display(QuirkSet(collision=True))
        assert d.draw(0, 31, [0x80, 0x80, 0x80]) == 2
        assert lit(d) == {(0, 31)}

    def test_collision_quirk_counts_rows(self):
        d = Display(QuirkSet(collision=True))
        d.draw(0, 0, [0x80, 0x00, 0x80])
        assert d.draw(0, 0, [0x80, 0x80, 0x80]) == 2

    def test_collision_quirk_wraps_horizontally(self):
        d = Display(QuirkSet(collision=True))
        d.draw(63, 0, [0xC0])
        assert lit(d) == {(63, 0), (0, 0)}

    def test_wide_sprite(self):
        d = Display(QuirkSet())
        d.set_hires(True)
        d.draw(0, 0, [0x8001], sprite_width=16)
        assert lit(d) == {(0, 0), (15, 0)}


class TestResolution:

    def test_starts_low_res(self):
        d = Display(QuirkSet())
        assert (d.width, d.height) == (64, 32)
        assert len(d.display) == 64 * 32

    def test_switch_keeps_overlap(self):
        d = Display(QuirkSet())
        d.set_hires(True)
        d.draw(1, 1, [0x80])
        d.draw(100, 10, [0x80])
        d.set_hires(False)
        assert lit(d) == {(1, 1)}

    def test_switch_with_quirk_clears(self):
        d = Display(QuirkSet(resolution=True))
        d.draw(1, 1, [0x80])
        d.set_hires(True)
        assert lit(d) == set()

    def test_same_mode_is_noop(self):
        d = Display(QuirkSet(resolution=True))
        d.draw(1, 1, [0x80])
        d.set_hires(False)
        assert lit(d) == {(1, 1)}

    def test_clear_keeps_mode(self):
        d = Display(QuirkSet())
        d.set_hires(True)
        d.draw(0, 0, [0xFF])
        d.clear()
        assert d.hires
        assert lit(d) == set()


class TestScroll:

    def test_down(self):
        d = Display(QuirkSet())
        d.draw(3, 0, [0x80])
        d.draw(3, 31, [0x80])
        d.scroll_down(2)
        assert lit(d) == {(3, 2)}

    def test_right_and_left(self):
        d = Display(QuirkSet())
        d.draw(2, 5, [0x80])
        d.draw(62, 6, [0x80])
        d.scroll_right()
        assert lit(d) == {(6, 5)}
        d.scroll_left()
        assert lit(d) == {(2, 5)}
        d.scroll_left()
        assert lit(d) == set()

    def test_rows(self):
        d = Display(QuirkSet())
        d.draw(0, 1, [0x40])
        rows = d.rows()
        assert len(rows) == 32
        assert len(rows[0]) == 64
        assert rows[1][1] is True
        assert rows[0][0] is False
