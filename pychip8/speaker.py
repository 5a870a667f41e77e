"""
pychip8.speaker - The buzzer, played with Pygame while the sound timer is running.
"""

# Standard library imports
import array

# Pygame imports
import pygame

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
SAMPLE_RATE = 44100
SIZE = -16
CHANNELS = 1
MIN_SHORT = -32768
MAX_SHORT = 32767
DEFAULT_TONE = 440
VOLUME = 0.25

# Module-level init for Pygame mixer, must be called before anything else.
pygame.mixer.pre_init(SAMPLE_RATE, SIZE, CHANNELS)

# Classes
class Buzzer(object):
    """ Square wave tone that plays while the sound timer output is high. """
    def __init__(self, frequency = DEFAULT_TONE, muted = False):
        self.data = array.array("h", (0,) * SAMPLE_RATE)
        self.frequency = 0
        self.muted = muted
        self.sound = None
        self.set_tone(frequency)

    def set_tone(self, frequency):
        """ Generate one second of square wave for a given frequency. """
        if frequency <= 0 or frequency == self.frequency:
            return

        period = int(float(SAMPLE_RATE) / (frequency * 2))
        if period == 0:
            return
        for index in range(SAMPLE_RATE):
            self.data[index] = MIN_SHORT if (index // period) & 0x1 else MAX_SHORT

        self.frequency = frequency

    def sound_timer_changed(self, output):
        """ Output callback for the sound timer. """
        if output:
            self.play()
        else:
            self.stop()

    def play(self):
        """ Plays the tone until stopped. """
        if self.muted or self.sound is not None:
            return

        if pygame.mixer.get_init() is None:
            log.warning("Pygame mixer isn't initialized, no sound.")
            self.muted = True
            return

        self.sound = pygame.mixer.Sound(buffer = self.data)
        self.sound.set_volume(VOLUME)
        self.sound.play(loops = -1)

    def stop(self):
        """ Stop a playing tone. """
        if self.sound is not None:
            self.sound.stop()
            self.sound = None
