"""
pychip8.cpu - The CHIP-8 virtual machine for PyChip8.
"""

# Standard library imports
import time
import array
import random

# PyChip8 imports
from pychip8.constants import *
from pychip8.exceptions import *
from pychip8.helpers import opcode_x, opcode_y, opcode_n, opcode_nn, opcode_nnn, decimal_digits
from pychip8.memory import RAM
from pychip8.display import Framebuffer
from pychip8.keypad import Keypad
from pychip8.timer import CountdownTimer
from pychip8.disassembler import disassemble

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
STATE_RUNNING, STATE_AWAITING_KEY, STATE_HALTED = range(3)

STATE_NAMES = {
    STATE_RUNNING : "running",
    STATE_AWAITING_KEY : "awaiting key",
    STATE_HALTED : "halted",
}

# Classes
class VirtualMachine(object):
    """
    A CHIP-8 machine: memory, registers, stack, timers, display, and keypad.

    The host drives it by calling step() once per instruction and
    tick_timers() at 60 Hz.  VF doubles as the flag register and is written
    as a side effect by:

        8XY4 ADD Vx, Vy     carry
        8XY5 SUB Vx, Vy     not borrow (Vx >= Vy)
        8XY6 SHR Vx         bit 0 shifted out
        8XY7 SUBN Vx, Vy    not borrow (Vy >= Vx)
        8XYE SHL Vx         bit 7 shifted out
        DXYN DRW Vx, Vy, N  collision

    The flag is written before the result, so with X == F the result wins.
    """
    def __init__(self, seed = None):
        self.memory = RAM()
        self.display = Framebuffer()
        self.keypad = Keypad()
        self.delay_timer = CountdownTimer("delay")
        self.sound_timer = CountdownTimer("sound")

        # V0 - VF, I, PC, and the call stack.
        self.regs = array.array("B", (0,) * REGISTER_COUNT)
        self.index = 0x0000
        self.pc = PROGRAM_START
        self.stack = [0x0000] * STACK_SIZE
        self.sp = 0

        # Last fetched opcode and the address it came from.
        self.opcode = 0x0000
        self.instruction_address = PROGRAM_START

        # Run state, LD Vx, K parks the machine in STATE_AWAITING_KEY.
        self.state = STATE_RUNNING
        self.key_register = None
        self.held_keys = frozenset()
        self.halt_reason = None

        # Set to log every instruction executed.
        self.trace = False

        if seed is None:
            seed = time.time_ns()
        self.rng = random.Random(seed)

        # Fast instruction decoding, indexed by the top nibble.
        self.opcode_vector = [
            self.opcode_group_0,
            self.opcode_jp,
            self.opcode_call,
            self.opcode_se_vx_nn,
            self.opcode_sne_vx_nn,
            self.opcode_se_vx_vy,
            self.opcode_ld_vx_nn,
            self.opcode_add_vx_nn,
            self.opcode_group_8,
            self.opcode_sne_vx_vy,
            self.opcode_ld_i_nnn,
            self.opcode_jp_v0_nnn,
            self.opcode_rnd,
            self.opcode_drw,
            self.opcode_group_e,
            self.opcode_group_f,
        ]

        # Keyed on the whole opcode.
        self.group_0_vector = {
            0x00E0 : self.opcode_cls,
            0x00EE : self.opcode_ret,
        }

        # Keyed on the low nibble.
        self.group_8_vector = {
            0x0 : self.opcode_ld_vx_vy,
            0x1 : self.opcode_or,
            0x2 : self.opcode_and,
            0x3 : self.opcode_xor,
            0x4 : self.opcode_add_vx_vy,
            0x5 : self.opcode_sub,
            0x6 : self.opcode_shr,
            0x7 : self.opcode_subn,
            0xE : self.opcode_shl,
        }

        # Keyed on the low byte.
        self.group_e_vector = {
            0x9E : self.opcode_skp,
            0xA1 : self.opcode_sknp,
        }

        self.group_f_vector = {
            0x07 : self.opcode_ld_vx_dt,
            0x0A : self.opcode_ld_vx_k,
            0x15 : self.opcode_ld_dt_vx,
            0x18 : self.opcode_ld_st_vx,
            0x1E : self.opcode_add_i_vx,
            0x29 : self.opcode_ld_f_vx,
            0x33 : self.opcode_ld_b_vx,
            0x55 : self.opcode_ld_mem_vx,
            0x65 : self.opcode_ld_vx_mem,
        }

    def __repr__(self):
        return "<%s(pc=0x%04x, state=%s)>" % (self.__class__.__name__, self.pc, STATE_NAMES[self.state])

    # ********** Host interface. **********
    def load_program(self, data):
        """ Copy a program image into memory at 0x200. """
        if len(data) == 0:
            return

        self.memory.load_image(data, PROGRAM_START)
        log.info("Loaded %d byte program at 0x%03x.", len(data), PROGRAM_START)

    def load_program_file(self, filename):
        """ Load a program image from a file. """
        with open(filename, "rb") as fileptr:
            data = fileptr.read()

        log.info("Loading %s", filename)
        self.load_program(data)

    def step(self):
        """
        Run one fetch-decode-execute cycle.

        Returns the opcode executed, or None if the machine is waiting on a key.
        """
        if self.state == STATE_HALTED:
            raise MachineHalted(self.halt_reason)

        if self.state == STATE_AWAITING_KEY:
            self.poll_key_wait()
            return None

        try:
            opcode = self.fetch()
            if self.trace:
                log.debug("%04x: %04x  %s", self.instruction_address, opcode, disassemble(opcode))
            self.opcode_vector[(opcode & 0xF000) >> 12](opcode)
        except PyChip8Exception as err:
            self.halt(err)
            raise

        return opcode

    def tick_timers(self):
        """ Handle one 60 Hz tick of the delay and sound timers. """
        self.delay_timer.clock()
        self.sound_timer.clock()

    @property
    def awaiting_key(self):
        """ True while LD Vx, K is waiting for a key press. """
        return self.state == STATE_AWAITING_KEY

    @property
    def halted(self):
        return self.state == STATE_HALTED

    # ********** Internals. **********
    def fetch(self):
        """ Read the opcode at PC and advance PC to the next instruction. """
        address = self.pc
        if address < 0 or address + 1 >= self.memory.get_memory_size():
            raise InvalidFetch(address)

        self.opcode = self.memory.mem_read_word(address)
        self.instruction_address = address
        self.pc = address + 2
        return self.opcode

    def halt(self, reason):
        """ Stop the machine for good after a fatal error. """
        log.critical("Machine halted at 0x%04x: %s", self.instruction_address, reason)
        self.state = STATE_HALTED
        self.halt_reason = reason

    def poll_key_wait(self):
        """ Complete LD Vx, K if a key has gone down since the wait started. """
        pressed = self.keypad.pressed_keys()
        new_keys = pressed - self.held_keys
        if new_keys:
            key = min(new_keys)
            self.regs[self.key_register] = key
            log.debug("Key wait complete, V%X = 0x%x", self.key_register, key)
            self.key_register = None
            self.held_keys = frozenset()
            self.state = STATE_RUNNING
            return key

        # Anything released while waiting can count again when it is re-pressed.
        self.held_keys = pressed
        return None

    def skip(self):
        """ Skip the next instruction. """
        self.pc += 2

    def signal_unknown_opcode(self, opcode):
        """ Unknown opcode handler. """
        log.error("Unknown opcode: 0x%04x at 0x%04x", opcode, self.instruction_address)
        raise UnknownOpcode(opcode, self.instruction_address)

    # ********** Group decoders. **********
    def opcode_group_0(self, opcode):
        handler = self.group_0_vector.get(opcode)
        if handler is None:
            self.signal_unknown_opcode(opcode)
        handler(opcode)

    def opcode_group_8(self, opcode):
        handler = self.group_8_vector.get(opcode_n(opcode))
        if handler is None:
            self.signal_unknown_opcode(opcode)
        handler(opcode)

    def opcode_group_e(self, opcode):
        handler = self.group_e_vector.get(opcode_nn(opcode))
        if handler is None:
            self.signal_unknown_opcode(opcode)
        handler(opcode)

    def opcode_group_f(self, opcode):
        handler = self.group_f_vector.get(opcode_nn(opcode))
        if handler is None:
            self.signal_unknown_opcode(opcode)
        handler(opcode)

    # ********** Flow control. **********
    def opcode_cls(self, _opcode):
        """ 00E0 - CLS """
        self.display.clear()

    def opcode_ret(self, _opcode):
        """ 00EE - RET, pops PC. """
        if self.sp == 0:
            raise StackUnderflow(self.instruction_address)
        self.sp -= 1
        self.pc = self.stack[self.sp]

    def opcode_jp(self, opcode):
        """ 1NNN - JP NNN """
        self.pc = opcode_nnn(opcode)

    def opcode_call(self, opcode):
        """ 2NNN - CALL NNN, pushes the address of the next instruction. """
        if self.sp >= STACK_SIZE:
            raise StackOverflow(self.instruction_address)
        self.stack[self.sp] = self.pc
        self.sp += 1
        self.pc = opcode_nnn(opcode)

    def opcode_se_vx_nn(self, opcode):
        """ 3XNN - SE Vx, NN """
        if self.regs[opcode_x(opcode)] == opcode_nn(opcode):
            self.skip()

    def opcode_sne_vx_nn(self, opcode):
        """ 4XNN - SNE Vx, NN """
        if self.regs[opcode_x(opcode)] != opcode_nn(opcode):
            self.skip()

    def opcode_se_vx_vy(self, opcode):
        """ 5XY0 - SE Vx, Vy """
        if opcode_n(opcode) != 0x0:
            self.signal_unknown_opcode(opcode)
        if self.regs[opcode_x(opcode)] == self.regs[opcode_y(opcode)]:
            self.skip()

    def opcode_sne_vx_vy(self, opcode):
        """ 9XY0 - SNE Vx, Vy """
        if opcode_n(opcode) != 0x0:
            self.signal_unknown_opcode(opcode)
        if self.regs[opcode_x(opcode)] != self.regs[opcode_y(opcode)]:
            self.skip()

    def opcode_jp_v0_nnn(self, opcode):
        """ BNNN - JP V0, NNN """
        self.pc = opcode_nnn(opcode) + self.regs[0x0]

    # ********** Loads and ALU. **********
    def opcode_ld_vx_nn(self, opcode):
        self.regs[opcode_x(opcode)] = opcode_nn(opcode)

    def opcode_add_vx_nn(self, opcode):
        """ 7XNN - ADD Vx, NN, no carry flag. """
        x = opcode_x(opcode)
        self.regs[x] = (self.regs[x] + opcode_nn(opcode)) & 0xFF

    def opcode_ld_vx_vy(self, opcode):
        self.regs[opcode_x(opcode)] = self.regs[opcode_y(opcode)]

    def opcode_or(self, opcode):
        self.regs[opcode_x(opcode)] |= self.regs[opcode_y(opcode)]

    def opcode_and(self, opcode):
        self.regs[opcode_x(opcode)] &= self.regs[opcode_y(opcode)]

    def opcode_xor(self, opcode):
        self.regs[opcode_x(opcode)] ^= self.regs[opcode_y(opcode)]

    def opcode_add_vx_vy(self, opcode):
        """ 8XY4 - ADD Vx, Vy, VF = carry. """
        x = opcode_x(opcode)
        result = self.regs[x] + self.regs[opcode_y(opcode)]
        self.regs[FLAG_REGISTER] = 1 if result > 0xFF else 0
        self.regs[x] = result & 0xFF

    def opcode_sub(self, opcode):
        """ 8XY5 - SUB Vx, Vy, VF = not borrow. """
        x = opcode_x(opcode)
        operand_a = self.regs[x]
        operand_b = self.regs[opcode_y(opcode)]
        self.regs[FLAG_REGISTER] = 1 if operand_a >= operand_b else 0
        self.regs[x] = (operand_a - operand_b) & 0xFF

    def opcode_subn(self, opcode):
        """ 8XY7 - SUBN Vx, Vy, VF = not borrow. """
        x = opcode_x(opcode)
        operand_a = self.regs[x]
        operand_b = self.regs[opcode_y(opcode)]
        self.regs[FLAG_REGISTER] = 1 if operand_b >= operand_a else 0
        self.regs[x] = (operand_b - operand_a) & 0xFF

    def opcode_shr(self, opcode):
        """ 8XY6 - SHR Vx, VF = bit shifted out. Vy is ignored. """
        x = opcode_x(opcode)
        value = self.regs[x]
        self.regs[FLAG_REGISTER] = value & 0x01
        self.regs[x] = value >> 1

    def opcode_shl(self, opcode):
        """ 8XYE - SHL Vx, VF = bit shifted out. Vy is ignored. """
        x = opcode_x(opcode)
        value = self.regs[x]
        self.regs[FLAG_REGISTER] = (value & 0x80) >> 7
        self.regs[x] = (value << 1) & 0xFF

    def opcode_ld_i_nnn(self, opcode):
        self.index = opcode_nnn(opcode)

    def opcode_rnd(self, opcode):
        """ CXNN - RND Vx, NN """
        self.regs[opcode_x(opcode)] = self.rng.randint(0, 0xFF) & opcode_nn(opcode)

    # ********** Display. **********
    def opcode_drw(self, opcode):
        """ DXYN - DRW Vx, Vy, N, VF = collision. """
        self.regs[FLAG_REGISTER] = 0
        rows = self.memory.mem_read_block(self.index, opcode_n(opcode))
        collision = self.display.draw_sprite(
            self.regs[opcode_x(opcode)],
            self.regs[opcode_y(opcode)],
            rows,
        )
        self.regs[FLAG_REGISTER] = 1 if collision else 0

    # ********** Keypad. **********
    def opcode_skp(self, opcode):
        """ EX9E - SKP Vx """
        if self.keypad.is_pressed(self.regs[opcode_x(opcode)] & 0x0F):
            self.skip()

    def opcode_sknp(self, opcode):
        """ EXA1 - SKNP Vx """
        if not self.keypad.is_pressed(self.regs[opcode_x(opcode)] & 0x0F):
            self.skip()

    def opcode_ld_vx_k(self, opcode):
        """ FX0A - LD Vx, K, park until a key goes down. """
        self.state = STATE_AWAITING_KEY
        self.key_register = opcode_x(opcode)
        self.held_keys = self.keypad.pressed_keys()
        log.debug("Waiting for key into V%X.", self.key_register)

    # ********** Timers. **********
    def opcode_ld_vx_dt(self, opcode):
        self.regs[opcode_x(opcode)] = self.delay_timer.value

    def opcode_ld_dt_vx(self, opcode):
        self.delay_timer.value = self.regs[opcode_x(opcode)]

    def opcode_ld_st_vx(self, opcode):
        self.sound_timer.value = self.regs[opcode_x(opcode)]

    # ********** Index register and memory. **********
    def opcode_add_i_vx(self, opcode):
        """ FX1E - ADD I, Vx, 16-bit wraparound, VF untouched. """
        self.index = (self.index + self.regs[opcode_x(opcode)]) & 0xFFFF

    def opcode_ld_f_vx(self, opcode):
        """ FX29 - LD F, Vx, point I at the glyph for digit Vx. """
        digit = self.regs[opcode_x(opcode)]
        if digit > 0xF:
            raise InvalidDigit(digit, self.instruction_address)
        self.index = FONT_START + (digit * FONT_GLYPH_SIZE)

    def opcode_ld_b_vx(self, opcode):
        """ FX33 - LD B, Vx, store BCD of Vx at I, I + 1, I + 2. """
        self.memory.check_address(self.index)
        self.memory.check_address(self.index + 2)
        for offset, digit in enumerate(decimal_digits(self.regs[opcode_x(opcode)])):
            self.memory.mem_write_byte(self.index + offset, digit)

    def opcode_ld_mem_vx(self, opcode):
        """ FX55 - LD [I], Vx, store V0 - Vx at I.  I is not changed. """
        x = opcode_x(opcode)
        self.memory.check_address(self.index)
        self.memory.check_address(self.index + x)
        for offset in range(x + 1):
            self.memory.mem_write_byte(self.index + offset, self.regs[offset])

    def opcode_ld_vx_mem(self, opcode):
        """ FX65 - LD Vx, [I], load V0 - Vx from I.  I is not changed. """
        for offset, value in enumerate(self.memory.mem_read_block(self.index, opcode_x(opcode) + 1)):
            self.regs[offset] = value
