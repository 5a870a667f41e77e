"""
pychip8.disassembler - Convert opcodes into assembly mnemonics.
"""

# PyChip8 imports
from pychip8.helpers import opcode_x, opcode_y, opcode_n, opcode_nn, opcode_nnn

# Constants
GROUP_8_MNEMONICS = {
    0x0 : "LD",
    0x1 : "OR",
    0x2 : "AND",
    0x3 : "XOR",
    0x4 : "ADD",
    0x5 : "SUB",
    0x6 : "SHR",
    0x7 : "SUBN",
    0xE : "SHL",
}

GROUP_F_FORMATS = {
    0x07 : "LD V%X, DT",
    0x0A : "LD V%X, K",
    0x15 : "LD DT, V%X",
    0x18 : "LD ST, V%X",
    0x1E : "ADD I, V%X",
    0x29 : "LD F, V%X",
    0x33 : "LD B, V%X",
    0x55 : "LD [I], V%X",
    0x65 : "LD V%X, [I]",
}

# Functions
def disassemble(opcode):
    """ Return the mnemonic for opcode, or ??? if it isn't a valid instruction. """
    top = (opcode & 0xF000) >> 12
    x = opcode_x(opcode)
    y = opcode_y(opcode)
    n = opcode_n(opcode)
    nn = opcode_nn(opcode)
    nnn = opcode_nnn(opcode)

    text = None
    if opcode == 0x00E0:
        text = "CLS"
    elif opcode == 0x00EE:
        text = "RET"
    elif top == 0x1:
        text = "JP 0x%03x" % nnn
    elif top == 0x2:
        text = "CALL 0x%03x" % nnn
    elif top == 0x3:
        text = "SE V%X, 0x%02x" % (x, nn)
    elif top == 0x4:
        text = "SNE V%X, 0x%02x" % (x, nn)
    elif top == 0x5 and n == 0x0:
        text = "SE V%X, V%X" % (x, y)
    elif top == 0x6:
        text = "LD V%X, 0x%02x" % (x, nn)
    elif top == 0x7:
        text = "ADD V%X, 0x%02x" % (x, nn)
    elif top == 0x8 and n in GROUP_8_MNEMONICS:
        if n in (0x6, 0xE):
            text = "%s V%X" % (GROUP_8_MNEMONICS[n], x)
        else:
            text = "%s V%X, V%X" % (GROUP_8_MNEMONICS[n], x, y)
    elif top == 0x9 and n == 0x0:
        text = "SNE V%X, V%X" % (x, y)
    elif top == 0xA:
        text = "LD I, 0x%03x" % nnn
    elif top == 0xB:
        text = "JP V0, 0x%03x" % nnn
    elif top == 0xC:
        text = "RND V%X, 0x%02x" % (x, nn)
    elif top == 0xD:
        text = "DRW V%X, V%X, %d" % (x, y, n)
    elif top == 0xE and nn == 0x9E:
        text = "SKP V%X" % x
    elif top == 0xE and nn == 0xA1:
        text = "SKNP V%X" % x
    elif top == 0xF and nn in GROUP_F_FORMATS:
        text = GROUP_F_FORMATS[nn] % x

    if text is None:
        return "??? 0x%04x" % opcode
    return text

def disassemble_block(data, base):
    """ Return a list of (address, opcode, mnemonic) tuples for a sequence of bytes. """
    listing = []
    for offset in range(0, len(data) - 1, 2):
        opcode = (data[offset] << 8) | data[offset + 1]
        listing.append((base + offset, opcode, disassemble(opcode)))
    return listing
