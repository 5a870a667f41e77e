"""
pychip8.display - Monochrome framebuffer for PyChip8.

Sprites that run off the right or bottom edge wrap around to the opposite
edge one pixel at a time.
"""

# Standard library imports
import array

# PyChip8 imports
from pychip8.constants import DISPLAY_WIDTH, DISPLAY_HEIGHT
from pychip8.helpers import sprite_row_bits

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
PIXEL_OFF = 0
PIXEL_ON = 1

# Classes
class Framebuffer(object):
    """ A width x height grid of on/off pixels drawn by XOR. """
    def __init__(self, width = DISPLAY_WIDTH, height = DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self.pixels = array.array("B", (PIXEL_OFF,) * (width * height))

        # Flag to indicate the front end needs to redraw the screen.
        self.needs_draw = True

    def __repr__(self):
        return "<%s(%dx%d)>" % (self.__class__.__name__, self.width, self.height)

    def get_resolution(self):
        """ Returns a tuple (width, height) of the display size. """
        return self.width, self.height

    def clear(self):
        """ Turn every pixel off. """
        for index in range(len(self.pixels)):
            self.pixels[index] = PIXEL_OFF
        self.needs_draw = True

    def get_pixel(self, x, y):
        """ Return True if the pixel at (x, y) is on. """
        return self.pixels[(y * self.width) + x] == PIXEL_ON

    def toggle_pixel(self, x, y):
        """ XOR a pixel with on and return True if it was already on. """
        offset = (y % self.height) * self.width + (x % self.width)
        was_on = self.pixels[offset] == PIXEL_ON
        self.pixels[offset] ^= PIXEL_ON
        return was_on

    def draw_sprite(self, x, y, rows):
        """
        XOR a sprite onto the screen and return the collision flag.

        x and y are wrapped to the screen first, then each set bit of each row
        byte toggles the pixel at (x + column, y + row), wrapping at the edges.
        The result is True if any pixel was turned off by the draw.
        """
        x = x % self.width
        y = y % self.height

        collision = False
        for row, value in enumerate(rows):
            for column in sprite_row_bits(value):
                if self.toggle_pixel(x + column, y + row):
                    collision = True

        self.needs_draw = True
        return collision

    def is_blank(self):
        """ Return True if every pixel is off. """
        return not any(self.pixels)

    def snapshot(self):
        """ Return a tuple of rows, each a tuple of booleans, for rendering. """
        width = self.width
        return tuple(
            tuple(value == PIXEL_ON for value in self.pixels[row * width:(row + 1) * width])
            for row in range(self.height)
        )

    def lit_pixels(self):
        """ Yield the (x, y) location of every pixel that is on. """
        for offset, value in enumerate(self.pixels):
            if value == PIXEL_ON:
                yield offset % self.width, offset // self.width
