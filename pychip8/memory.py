"""
pychip8.memory - Main memory for PyChip8.
"""

# Standard library imports
import array

# PyChip8 imports
from pychip8.constants import MEMORY_SIZE, PROGRAM_START, MAX_PROGRAM_SIZE, FONT_START, FONT_GLYPHS
from pychip8.exceptions import ImageTooLarge, InvalidMemoryAccess
from pychip8.helpers import bytes_to_word

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Classes
class RAM(object):
    """ The flat byte-addressable memory of the machine, with the font table installed. """
    def __init__(self, size = MEMORY_SIZE):
        self.contents = array.array("B", (0,) * size)
        self.install_font()

    def __repr__(self):
        return "<%s(size=0x%x)>" % (self.__class__.__name__, len(self.contents))

    def __len__(self):
        return len(self.contents)

    def get_memory_size(self):
        """ Return the number of addressable bytes. """
        return len(self.contents)

    def install_font(self):
        """ Copy the hex digit glyphs into the reserved area. """
        for index, value in enumerate(FONT_GLYPHS, start = FONT_START):
            self.contents[index] = value

    def check_address(self, address):
        """ Raise InvalidMemoryAccess if address is not in memory. """
        if address < 0 or address >= len(self.contents):
            raise InvalidMemoryAccess(address)

    def mem_read_byte(self, address):
        self.check_address(address)
        return self.contents[address]

    def mem_write_byte(self, address, value):
        self.check_address(address)
        self.contents[address] = value & 0xFF

    def mem_read_word(self, address):
        """ Read a big-endian word from address and address + 1. """
        self.check_address(address)
        self.check_address(address + 1)
        return bytes_to_word((self.contents[address], self.contents[address + 1]))

    def mem_read_block(self, address, length):
        """ Return a list of length bytes starting at address. """
        if length <= 0:
            return []
        self.check_address(address)
        self.check_address(address + length - 1)
        return self.contents[address:address + length].tolist()

    def load_image(self, data, offset = PROGRAM_START):
        """
        Copy a program image into memory starting at offset.

        The image is checked against the free space before anything is written
        so a rejected image leaves memory untouched.
        """
        limit = len(self.contents) - offset
        if offset == PROGRAM_START:
            limit = min(limit, MAX_PROGRAM_SIZE)
        if len(data) > limit:
            raise ImageTooLarge(len(data), limit)

        for index, value in enumerate(bytearray(data), start = offset):
            self.contents[index] = value

    def load_from_file(self, filename, offset = PROGRAM_START):
        """ Load memory with the contents of a file. """
        with open(filename, "rb") as fileptr:
            data = fileptr.read()

        self.load_image(data, offset)
        return len(data)
