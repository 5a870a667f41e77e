import unittest

from pychip8.display import Framebuffer

class FramebufferTests(unittest.TestCase):
    def setUp(self):
        self.fb = Framebuffer()

    def test_resolution(self):
        self.assertEqual(self.fb.get_resolution(), (64, 32))
        self.assertEqual(len(self.fb.pixels), 64 * 32)

    def test_initially_blank(self):
        self.assertTrue(self.fb.is_blank())
        self.assertEqual(list(self.fb.lit_pixels()), [])

    def test_draw_single_pixel(self):
        self.assertFalse(self.fb.draw_sprite(3, 4, [0x80]))
        self.assertTrue(self.fb.get_pixel(3, 4))
        self.assertEqual(list(self.fb.lit_pixels()), [(3, 4)])

    def test_draw_sets_needs_draw(self):
        self.fb.needs_draw = False
        self.fb.draw_sprite(0, 0, [0x00])
        self.assertTrue(self.fb.needs_draw)

    def test_row_order_and_bit_order(self):
        self.fb.draw_sprite(0, 0, [0xC0, 0x01])
        self.assertTrue(self.fb.get_pixel(0, 0))
        self.assertTrue(self.fb.get_pixel(1, 0))
        self.assertFalse(self.fb.get_pixel(2, 0))
        self.assertTrue(self.fb.get_pixel(7, 1))
        self.assertFalse(self.fb.get_pixel(0, 1))

    def test_collision(self):
        self.assertFalse(self.fb.draw_sprite(10, 10, [0xF0]))
        self.assertTrue(self.fb.draw_sprite(13, 10, [0x80]))
        self.assertFalse(self.fb.get_pixel(13, 10))
        self.assertTrue(self.fb.get_pixel(12, 10))

    def test_no_collision_on_adjacent(self):
        self.fb.draw_sprite(0, 0, [0xF0])
        self.assertFalse(self.fb.draw_sprite(4, 0, [0xF0]))

    def test_xor_is_self_inverse(self):
        sprite = [0x3C, 0x42, 0x81, 0x42, 0x3C]
        self.assertFalse(self.fb.draw_sprite(20, 12, sprite))
        self.assertFalse(self.fb.is_blank())
        self.assertTrue(self.fb.draw_sprite(20, 12, sprite))
        self.assertTrue(self.fb.is_blank())

    def test_origin_wraps(self):
        self.fb.draw_sprite(64 + 5, 32 + 2, [0x80])
        self.assertTrue(self.fb.get_pixel(5, 2))

    def test_pixels_wrap_horizontally(self):
        self.fb.draw_sprite(62, 0, [0xFF])
        self.assertEqual(sorted(self.fb.lit_pixels()), [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0), (5, 0), (62, 0), (63, 0)])

    def test_pixels_wrap_vertically(self):
        self.fb.draw_sprite(0, 31, [0x80, 0x80, 0x80])
        self.assertEqual(sorted(self.fb.lit_pixels()), [(0, 0), (0, 1), (0, 31)])

    def test_clear(self):
        self.fb.draw_sprite(0, 0, [0xFF, 0xFF])
        self.fb.needs_draw = False
        self.fb.clear()
        self.assertTrue(self.fb.is_blank())
        self.assertTrue(self.fb.needs_draw)

    def test_clear_then_draw_never_collides(self):
        self.fb.draw_sprite(0, 0, [0xFF] * 15)
        self.fb.clear()
        self.assertFalse(self.fb.draw_sprite(0, 0, [0xFF] * 15))

    def test_snapshot(self):
        self.fb.draw_sprite(1, 1, [0x80])
        snapshot = self.fb.snapshot()
        self.assertEqual(len(snapshot), 32)
        self.assertEqual(len(snapshot[0]), 64)
        self.assertTrue(snapshot[1][1])
        self.assertFalse(snapshot[0][0])

    def test_snapshot_is_a_copy(self):
        snapshot = self.fb.snapshot()
        self.fb.draw_sprite(0, 0, [0x80])
        self.assertFalse(snapshot[0][0])
