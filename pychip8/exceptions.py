"""
pychip8.exceptions - PyChip8-specific exceptions.
"""

# Classes
class PyChip8Exception(Exception):
    """ Base class for all PyChip8 exceptions. """

class ImageTooLarge(PyChip8Exception):
    """ Exception raised when a program image doesn't fit in program memory. """
    def __init__(self, size, limit):
        super(ImageTooLarge, self).__init__()
        self.size = size
        self.limit = limit

    def __str__(self):
        return "Program image too large: %d bytes (limit %d)" % (self.size, self.limit)

class InvalidFetch(PyChip8Exception):
    """ Exception raised when the PC points outside of memory. """
    def __init__(self, pc):
        super(InvalidFetch, self).__init__()
        self.pc = pc

    def __str__(self):
        return "Invalid instruction fetch at PC 0x%04x" % self.pc

class UnknownOpcode(PyChip8Exception):
    """ Exception raised when an opcode matches no instruction. """
    def __init__(self, opcode, address):
        super(UnknownOpcode, self).__init__()
        self.opcode = opcode
        self.address = address

    def __str__(self):
        return "Unknown opcode: 0x%04x at 0x%04x" % (self.opcode, self.address)

class StackOverflow(PyChip8Exception):
    """ Exception raised when CALL is executed with a full stack. """
    def __init__(self, address):
        super(StackOverflow, self).__init__()
        self.address = address

    def __str__(self):
        return "Stack overflow at 0x%04x" % self.address

class StackUnderflow(PyChip8Exception):
    """ Exception raised when RET is executed with an empty stack. """
    def __init__(self, address):
        super(StackUnderflow, self).__init__()
        self.address = address

    def __str__(self):
        return "Stack underflow at 0x%04x" % self.address

class InvalidDigit(PyChip8Exception):
    """ Exception raised when a font glyph is requested for a value above 0xF. """
    def __init__(self, value, address):
        super(InvalidDigit, self).__init__()
        self.value = value
        self.address = address

    def __str__(self):
        return "Invalid hex digit 0x%02x at 0x%04x" % (self.value, self.address)

class InvalidMemoryAccess(PyChip8Exception):
    """ Exception raised when an instruction reads or writes outside of memory. """
    def __init__(self, address):
        super(InvalidMemoryAccess, self).__init__()
        self.address = address

    def __str__(self):
        return "Invalid memory access at 0x%04x" % self.address

class MachineHalted(PyChip8Exception):
    """ Exception raised when stepping a machine that already hit a fatal error. """
    def __init__(self, reason):
        super(MachineHalted, self).__init__()
        self.reason = reason

    def __str__(self):
        return "Machine halted: %s" % self.reason
