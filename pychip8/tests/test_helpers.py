import unittest

from pychip8.helpers import *

class WordConversionTests(unittest.TestCase):
    def test_bytes_to_word_is_big_endian(self):
        self.assertEqual(bytes_to_word((0x12, 0x34)), 0x1234)
        self.assertEqual(bytes_to_word((0xFF, 0x00)), 0xFF00)

    def test_bytes_to_word_masks(self):
        self.assertEqual(bytes_to_word((0x1FF, 0x1FF)), 0xFFFF)

    def test_bytes_to_word_bad_length(self):
        with self.assertRaises(ValueError):
            bytes_to_word((0x12, ))
        with self.assertRaises(ValueError):
            bytes_to_word((0x12, 0x34, 0x56))

    def test_word_to_bytes(self):
        self.assertEqual(word_to_bytes(0xABCD), (0xAB, 0xCD))
        self.assertEqual(word_to_bytes(0x0000), (0x00, 0x00))

    def test_word_to_bytes_out_of_range(self):
        with self.assertRaises(ValueError):
            word_to_bytes(-1)
        with self.assertRaises(ValueError):
            word_to_bytes(0x10000)

class OpcodeFieldTests(unittest.TestCase):
    def test_fields(self):
        opcode = 0xD12F
        self.assertEqual(opcode_x(opcode), 0x1)
        self.assertEqual(opcode_y(opcode), 0x2)
        self.assertEqual(opcode_n(opcode), 0xF)
        self.assertEqual(opcode_nn(opcode), 0x2F)
        self.assertEqual(opcode_nnn(opcode), 0x12F)

    def test_fields_high_values(self):
        opcode = 0x8FE7
        self.assertEqual(opcode_x(opcode), 0xF)
        self.assertEqual(opcode_y(opcode), 0xE)
        self.assertEqual(opcode_n(opcode), 0x7)

class DecimalDigitsTests(unittest.TestCase):
    def test_digits(self):
        self.assertEqual(decimal_digits(0), (0, 0, 0))
        self.assertEqual(decimal_digits(7), (0, 0, 7))
        self.assertEqual(decimal_digits(42), (0, 4, 2))
        self.assertEqual(decimal_digits(123), (1, 2, 3))
        self.assertEqual(decimal_digits(255), (2, 5, 5))

    def test_out_of_range(self):
        with self.assertRaises(ValueError):
            decimal_digits(256)

class SpriteRowBitsTests(unittest.TestCase):
    def test_msb_is_leftmost(self):
        self.assertEqual(sprite_row_bits(0x80), [0])
        self.assertEqual(sprite_row_bits(0x01), [7])

    def test_patterns(self):
        self.assertEqual(sprite_row_bits(0x00), [])
        self.assertEqual(sprite_row_bits(0xFF), [0, 1, 2, 3, 4, 5, 6, 7])
        self.assertEqual(sprite_row_bits(0x90), [0, 3])
