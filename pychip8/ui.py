#!/usr/bin/env python

"""
pychip8.ui - Pygame and Pyglet front ends for PyChip8.
"""

# Standard library imports
import sys
from collections import namedtuple

# PyGame Imports
import pygame
from pygame.locals import *

# Pyglet Imports
import pyglet
from pyglet.window import key

# PyChip8 imports
from pychip8.constants import FONT_START, FONT_GLYPH_SIZE
from pychip8.cpu import VirtualMachine

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
UPDATE_DISPLAY = USEREVENT + 0
DEFAULT_SCALE = 10

MonoPalette = namedtuple("MonoPalette", ["off", "on"])
PALETTE_GREEN = MonoPalette((0x00, 0x00, 0x00), (0x00, 0xAA, 0x00))
PALETTE_AMBER = MonoPalette((0x28, 0x28, 0x28), (0xFF, 0xB0, 0x00))
PALETTE_WHITE = MonoPalette((0x0C, 0x0C, 0x0C), (0xC0, 0xC0, 0xC0))
MONO_PALETTES = {
    "green" : PALETTE_GREEN,
    "amber" : PALETTE_AMBER,
    "white" : PALETTE_WHITE,
}

# The hex keypad is laid out on the left side of a QWERTY keyboard:
#
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <=   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
PYGAME_KEY_TO_KEYPAD = {
    # Pylint cannot infer the constants from Pygame.
    # pylint: disable=undefined-variable
    K_1 : 0x1, K_2 : 0x2, K_3 : 0x3, K_4 : 0xC,
    K_q : 0x4, K_w : 0x5, K_e : 0x6, K_r : 0xD,
    K_a : 0x7, K_s : 0x8, K_d : 0x9, K_f : 0xE,
    K_z : 0xA, K_x : 0x0, K_c : 0xB, K_v : 0xF,
    # pylint: enable=undefined-variable
}

assert len(PYGAME_KEY_TO_KEYPAD) == 16

PYGLET_KEY_TO_KEYPAD = {
    key._1 : 0x1, key._2 : 0x2, key._3 : 0x3, key._4 : 0xC,
    key.Q : 0x4, key.W : 0x5, key.E : 0x6, key.R : 0xD,
    key.A : 0x7, key.S : 0x8, key.D : 0x9, key.F : 0xE,
    key.Z : 0xA, key.X : 0x0, key.C : 0xB, key.V : 0xF,
}

assert len(PYGLET_KEY_TO_KEYPAD) == 16

# Classes
class PygameScreen(object):
    """ Renders a framebuffer into a Pygame window. """
    def __init__(self, framebuffer, scale = DEFAULT_SCALE, palette = PALETTE_GREEN):
        self.framebuffer = framebuffer
        self.scale = scale
        self.palette = palette

        # Handle to the Pygame display object.
        self.screen = None

    def reset(self):
        pygame.init()
        width, height = self.framebuffer.get_resolution()
        self.screen = pygame.display.set_mode((width * self.scale, height * self.scale))
        pygame.display.set_caption("PyChip8")

        # Now that we have a display draw whatever is currently in the framebuffer.
        self.framebuffer.needs_draw = True
        self.draw()

    def draw(self):
        """ Update the "physical" display if necessary. """
        if not self.framebuffer.needs_draw:
            return

        scale = self.scale
        self.screen.fill(self.palette.off)
        for x, y in self.framebuffer.lit_pixels():
            pygame.draw.rect(self.screen, self.palette.on, [x * scale, y * scale, scale, scale])

        pygame.display.flip()
        self.framebuffer.needs_draw = False

class PygameManager(object):
    """ Manages interactions with the Pygame UI for PyChip8. """
    def __init__(self, keypad, display):
        self.keypad = keypad
        self.display = display
        self.display.reset()
        pygame.time.set_timer(UPDATE_DISPLAY, 20)

    def poll(self):
        """ Run one iteration of the Pygame machine. """
        for event in pygame.event.get():
            if event.type == QUIT or (event.type == KEYDOWN and event.key == K_ESCAPE):
                log.critical("Pygame QUIT detected, powering down...")
                sys.exit()

            elif event.type == KEYDOWN:
                keypad_key = PYGAME_KEY_TO_KEYPAD.get(event.key, None)
                if keypad_key is not None:
                    self.keypad.key_pressed(keypad_key)

            elif event.type == KEYUP:
                keypad_key = PYGAME_KEY_TO_KEYPAD.get(event.key, None)
                if keypad_key is not None:
                    self.keypad.key_released(keypad_key)

            elif event.type == UPDATE_DISPLAY:
                self.display.draw()

class PygletManager(object):
    """ Manages interactions with a Pyglet window for PyChip8. """
    def __init__(self, keypad, framebuffer, scale = DEFAULT_SCALE, palette = PALETTE_GREEN):
        self.keypad = keypad
        self.framebuffer = framebuffer
        self.scale = scale
        self.palette = palette

        width, height = framebuffer.get_resolution()
        self.screen = pyglet.window.Window(width * scale, height * scale, caption = "PyChip8")
        self.screen.push_handlers(on_key_press = self.on_key_press)
        self.screen.push_handlers(on_key_release = self.on_key_release)
        self.screen.push_handlers(on_close = self.on_close)
        self.screen.push_handlers(on_draw = self.on_draw)

        # One rectangle per pixel, only the lit ones are visible.
        self.batch = pyglet.graphics.Batch()
        self.pixels = []
        for y in range(height):
            for x in range(width):
                rect = pyglet.shapes.Rectangle(
                    x * scale, (height - 1 - y) * scale, scale, scale,
                    color = palette.on, batch = self.batch,
                )
                rect.visible = False
                self.pixels.append(rect)

    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.on_close()
        keypad_key = PYGLET_KEY_TO_KEYPAD.get(symbol, None)
        if keypad_key is not None:
            self.keypad.key_pressed(keypad_key)

    def on_key_release(self, symbol, modifiers):
        keypad_key = PYGLET_KEY_TO_KEYPAD.get(symbol, None)
        if keypad_key is not None:
            self.keypad.key_released(keypad_key)

    def on_close(self):
        log.critical("Pyglet on_close detected, powering down...")
        sys.exit()

    def on_draw(self):
        if self.framebuffer.needs_draw:
            for pixel, value in zip(self.pixels, self.framebuffer.pixels):
                pixel.visible = bool(value)
            self.framebuffer.needs_draw = False

        red, green, blue = self.palette.off
        pyglet.gl.glClearColor(red / 255.0, green / 255.0, blue / 255.0, 1.0)
        self.screen.clear()
        self.batch.draw()

    def poll(self):
        """ Run one iteration of the Pyglet machine. """
        pyglet.clock.tick()

        for window in pyglet.app.windows:
            window.switch_to()
            window.dispatch_events()
            window.dispatch_event("on_draw")
            window.flip()

# Main application
def main():
    """ Test application for this module, draws the font glyphs. """
    logging.basicConfig(level = logging.DEBUG)
    log.info("PyChip8 UI test application.")

    vm = VirtualMachine()
    for digit in range(16):
        rows = vm.memory.mem_read_block(FONT_START + (digit * FONT_GLYPH_SIZE), FONT_GLYPH_SIZE)
        vm.display.draw_sprite((digit % 8) * 8, (digit // 8) * 8, rows)

    manager = PygameManager(vm.keypad, PygameScreen(vm.display))
    clock = pygame.time.Clock()
    while True:
        manager.poll()
        clock.tick(60)

if __name__ == "__main__":
    main()
