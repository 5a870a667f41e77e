"""
pychip8.keypad - The 16 key hexadecimal keypad for PyChip8.

The host writes key state, the CPU only reads it.
"""

# PyChip8 imports
from pychip8.constants import KEY_COUNT

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Classes
class Keypad(object):
    """ Pressed/released state for keys 0x0 - 0xF. """
    def __init__(self, count = KEY_COUNT):
        self.keys = [False] * count

    def __len__(self):
        return len(self.keys)

    def __repr__(self):
        return "<%s(pressed=%r)>" % (self.__class__.__name__, self.pressed_keys())

    def check_key(self, key):
        if key < 0 or key >= len(self.keys):
            raise ValueError("key must be in the range [0, 0x%x]!" % (len(self.keys) - 1))

    def key_pressed(self, key):
        """ Function called by the front end when a key goes down. """
        self.check_key(key)
        if not self.keys[key]:
            log.debug("Key 0x%x pressed.", key)
        self.keys[key] = True

    def key_released(self, key):
        """ Function called by the front end when a key comes up. """
        self.check_key(key)
        if self.keys[key]:
            log.debug("Key 0x%x released.", key)
        self.keys[key] = False

    def set_state(self, state):
        """ Overwrite every key from a sequence of booleans. """
        if len(state) != len(self.keys):
            raise ValueError("state must contain exactly %d keys!" % len(self.keys))
        self.keys = [bool(value) for value in state]

    def release_all(self):
        self.keys = [False] * len(self.keys)

    def is_pressed(self, key):
        """ Return True if the key is currently down. """
        return self.keys[key]

    def pressed_keys(self):
        """ Return the set of keys currently down. """
        return frozenset(key for key, down in enumerate(self.keys) if down)
