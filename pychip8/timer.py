"""
pychip8.timer - The 60 Hz delay and sound timers for PyChip8.
"""

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Classes
class CountdownTimer(object):
    """
    An 8-bit counter that counts down to zero, one per clock.

    The output is high while the counter is non-zero.  When the output changes
    output_changed_callback is called with the new state, this is how the sound
    timer gates the buzzer.
    """
    def __init__(self, name, output_changed_callback = None):
        self.name = name
        self.output_changed_callback = output_changed_callback
        self.__value = 0
        self.__output = False

    def __repr__(self):
        return "<%s(%s=%d)>" % (self.__class__.__name__, self.name, self.__value)

    @property
    def value(self):
        """ Returns the current count. """
        return self.__value

    @value.setter
    def value(self, value):
        """ Loads the counter. """
        if value < 0 or value > 0xFF:
            raise ValueError("value must be in the range [0, 0xFF]!")
        self.__value = value
        self.output = value != 0

    @property
    def output(self):
        """ Returns the current output state. """
        return self.__output

    @output.setter
    def output(self, value):
        """ Sets the output value and calls the callback. """
        if self.__output != value:
            self.__output = value
            log.debug("%s timer output is now %s.", self.name, value)
            if callable(self.output_changed_callback):
                self.output_changed_callback(self.__output)

    def clock(self):
        """ Handle one timer tick. """
        if self.__value:
            self.__value -= 1
            if self.__value == 0:
                self.output = False
