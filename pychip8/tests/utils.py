"""
pychip8.tests.utils - Helpers for writing unit tests.
"""

from pychip8.cpu import VirtualMachine

TEST_SEED = 0x5EED

def assemble(*opcodes):
    """ Turn a list of opcode words into a big-endian program image. """
    data = bytearray()
    for opcode in opcodes:
        data.append((opcode >> 8) & 0xFF)
        data.append(opcode & 0xFF)
    return bytes(data)

def machine_with_program(*opcodes):
    """ Return a VirtualMachine with a fixed seed and the given opcodes loaded at 0x200. """
    vm = VirtualMachine(seed = TEST_SEED)
    vm.load_program(assemble(*opcodes))
    return vm

def run_steps(vm, count):
    """ Step the machine count times. """
    for _ in range(count):
        vm.step()
