"""
pychip8.debugger - Debugger module for PyChip8.
"""

# Standard library imports
import sys
from collections import Counter

# PyChip8 imports
from pychip8.constants import REGISTER_COUNT
from pychip8.cpu import STATE_NAMES
from pychip8.disassembler import disassemble, disassemble_block
from pychip8.exceptions import PyChip8Exception

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
RETURN_OPCODE = 0x00EE

# Classes
class Debugger(object):
    """ Interactive debugger for PyChip8. """
    def __init__(self, vm):
        self.vm = vm

        self.breakpoints = []
        self.single_step = False
        self.debugger_shortcut = []
        self.dump_enabled = False
        self.step_out = False

        self.location_counter = Counter()
        self.instruction_counter = Counter()

    # ********** Debugger functions. **********
    def step(self):
        """ Wraps the VM step() to print info and/or pause execution. """
        if self.vm.awaiting_key:
            return self.vm.step()

        if self.dump_enabled:
            self.dump_all()

        next_instruction = self.peek_instruction()
        if self.dump_enabled and next_instruction is not None:
            log.debug("next_instruction = 0x%04x  %s", next_instruction, disassemble(next_instruction))

        # Check if we are trying to step out of a CALL-ed subroutine.
        if self.step_out and next_instruction == RETURN_OPCODE:
            log.debug("Return detected!")
            # At this point we want to drop to the debugger and not step out any longer.
            self.step_out = False
            self.single_step = True

        if self.should_break():
            self.enter_debugger()

        self.location_counter.update({self.vm.pc : 1})
        if next_instruction is not None:
            self.instruction_counter.update({next_instruction & 0xF000 : 1})
        return self.vm.step()

    def dump_all(self, level = logging.DEBUG):
        """ Dump all registers, timers, and the machine state. """
        log.log(level, "PC = 0x%04x  I = 0x%04x  SP = %d  DT = %d  ST = %d  (%s)",
                self.vm.pc, self.vm.index, self.vm.sp,
                self.vm.delay_timer.value, self.vm.sound_timer.value,
                STATE_NAMES[self.vm.state],
                )
        self.dump_regs(level, 0, 8)
        self.dump_regs(level, 8, REGISTER_COUNT)

    def dump_regs(self, level, start, end):
        """ Dump a range of V registers to the log. """
        log.log(level, "  ".join(["V%X = 0x%02x" % (reg, self.vm.regs[reg]) for reg in range(start, end)]))

    def dump_stack(self, level = logging.DEBUG):
        """ Dump the call stack, innermost first. """
        for depth in range(self.vm.sp - 1, -1, -1):
            log.log(level, "stack[%d] = 0x%04x", depth, self.vm.stack[depth])

    def should_break(self):
        """ Return True if we should break now. """
        return self.single_step or self.vm.pc in self.breakpoints

    def peek_instruction(self):
        """ Return the opcode at PC without advancing, or None if PC is out of memory. """
        pc = self.vm.pc
        if pc < 0 or pc + 1 >= self.vm.memory.get_memory_size():
            return None
        return self.vm.memory.mem_read_word(pc)

    def enter_debugger(self):
        """ Interactive debugger menu. """
        while True:
            next_instruction = self.peek_instruction()
            if next_instruction is None:
                print("\nNext instruction: <out of memory>")
            else:
                print("\nNext instruction: 0x%04x  %s" % (next_instruction, disassemble(next_instruction)))
            if len(self.debugger_shortcut) != 0:
                print("[%s] >" % " ".join(self.debugger_shortcut), end=" ")
            else:
                print(">", end=" ")

            try:
                cmd = input().lower().split()
            except KeyboardInterrupt:
                print("^C")
                continue

            try:
                resume = self.process_command(cmd)
                if resume:
                    break
            except (ValueError, IndexError, PyChip8Exception):
                log.exception("Unhandled exception processing: %r", cmd)

    def process_command(self, cmd):
        """ Actually process the command from the user, returns True to resume execution. """
        if len(cmd) == 0 and len(self.debugger_shortcut) != 0:
            cmd = self.debugger_shortcut
            print("Using: %s" % " ".join(cmd))
        else:
            self.debugger_shortcut = cmd

        if len(cmd) == 0:
            return False

        if len(cmd) == 1 and cmd[0] in ("continue", "c"):
            self.single_step = False
            return True

        elif len(cmd) == 1 and cmd[0] in ("step", "s"):
            self.single_step = True
            return True

        elif len(cmd) == 1 and cmd[0] in ("step-out", "out"):
            # Set the step out flag and disable single stepping so we run to the next return.
            self.step_out = True
            self.single_step = False
            return True

        elif len(cmd) == 1 and cmd[0] in ("quit", "q"):
            sys.exit(0)

        elif len(cmd) == 1 and cmd[0] in ("dump", "d"):
            self.dump_all(logging.INFO)

        elif len(cmd) == 1 and cmd[0] in ("stack", "st"):
            self.dump_stack(logging.INFO)

        elif len(cmd) == 2 and cmd[0] in ("key", "k"):
            key = int(cmd[1], 16)
            if self.vm.keypad.is_pressed(key):
                self.vm.keypad.key_released(key)
            else:
                self.vm.keypad.key_pressed(key)
            print("Key 0x%x is %s." % (key, "down" if self.vm.keypad.is_pressed(key) else "up"))

        elif len(cmd) == 2 and cmd[0] in ("ic", "instruction-counter"):
            if cmd[1] == "clear":
                self.instruction_counter.clear()
            else:
                for instruction, count in self.instruction_counter.most_common(int(cmd[1])):
                    print("instruction group = 0x%x, count = %d" % (instruction >> 12, count))

        elif len(cmd) == 2 and cmd[0] in ("lc", "location-counter"):
            if cmd[1] == "clear":
                self.location_counter.clear()
            else:
                for location, count in self.location_counter.most_common(int(cmd[1])):
                    print("location = 0x%04x, count = %d" % (location, count))

        elif len(cmd) >= 1 and cmd[0] == "info":
            self.debugger_shortcut = []
            if len(cmd) == 2 and cmd[1] in ("breakpoints", "break"):
                print("Breakpoints:")
                for breakpoint in self.breakpoints:
                    print("  0x%04x" % breakpoint)

        elif len(cmd) == 2 and cmd[0] in ("break", "b"):
            self.debugger_shortcut = []
            self.breakpoints.append(int(cmd[1], 16))

        elif len(cmd) == 2 and cmd[0] == "clear":
            self.debugger_shortcut = []
            if cmd[1] == "all":
                self.breakpoints = []
            elif cmd[1] == "dump":
                self.dump_enabled = False
            else:
                self.breakpoints.remove(int(cmd[1], 16))

        elif len(cmd) == 2 and cmd[0] == "set" and cmd[1] == "dump":
            self.debugger_shortcut = []
            self.dump_enabled = True
            self.dump_all()

        elif len(cmd) in (2, 3) and cmd[0] == "x":
            address = int(cmd[1], 16)
            count = int(cmd[2], 0) if len(cmd) == 3 else 16
            data = self.vm.memory.mem_read_block(address, count)
            print("0x%03x:" % address, " ".join(["%02x" % value for value in data]))

            # Pressing enter again continues from where this dump ended.
            self.debugger_shortcut = ["x", "%x" % (address + count), str(count)]

        elif len(cmd) in (1, 2, 3) and cmd[0] in ("dis", "l"):
            address = int(cmd[1], 16) if len(cmd) >= 2 else self.vm.pc
            count = int(cmd[2], 0) if len(cmd) == 3 else 8
            data = self.vm.memory.mem_read_block(address, count * 2)
            for location, opcode, text in disassemble_block(data, address):
                print("%s0x%03x: %04x  %s" % ("=>" if location == self.vm.pc else "  ", location, opcode, text))
            self.debugger_shortcut = ["dis", "%x" % (address + (count * 2)), str(count)]

        else:
            print("i don't know what %r is." % " ".join(cmd))

        return False
