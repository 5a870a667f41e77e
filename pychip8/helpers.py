"""
pychip8.helpers - A collection of helper functions used throughout PyChip8.
"""

# Functions
def bytes_to_word(data):
    """ Convert a sequence of 2 bytes into a big-endian word. """
    if len(data) != 2:
        raise ValueError("data must be a sequence of 2 bytes!")
    return ((data[0] & 0xFF) << 8) | (data[1] & 0xFF)

def word_to_bytes(value):
    """ Convert a word into a tuple of 2 bytes, high byte first. """
    if value < 0 or value > 0xFFFF:
        raise ValueError("value must be in the range [0, 0xFFFF]!")
    return ((value & 0xFF00) >> 8), (value & 0x00FF)

def opcode_x(opcode):
    """ Register selector from bits 11-8. """
    return (opcode & 0x0F00) >> 8

def opcode_y(opcode):
    """ Register selector from bits 7-4. """
    return (opcode & 0x00F0) >> 4

def opcode_n(opcode):
    return opcode & 0x000F

def opcode_nn(opcode):
    return opcode & 0x00FF

def opcode_nnn(opcode):
    return opcode & 0x0FFF

def decimal_digits(value):
    """ Split a byte into its hundreds, tens, and units digits. """
    if value < 0 or value > 0xFF:
        raise ValueError("value must be in the range [0, 0xFF]!")
    return value // 100, (value // 10) % 10, value % 10

def sprite_row_bits(value):
    """
    Return the columns set in a sprite row byte.

    The most significant bit is the leftmost pixel.
    """
    return [column for column in range(8) if value & (0x80 >> column)]
