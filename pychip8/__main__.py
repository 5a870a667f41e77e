#!/usr/bin/env python

"""
pychip8 - Main application for running a CHIP-8 program.
"""

# Standard library imports
import os
import sys
import time
import signal
from optparse import OptionParser

# PyChip8 imports
from pychip8.constants import TIMER_FREQUENCY
from pychip8.cpu import VirtualMachine
from pychip8.debugger import Debugger
from pychip8.exceptions import PyChip8Exception
from pychip8.speaker import Buzzer
from pychip8.ui import PygameManager, PygameScreen, PygletManager, MONO_PALETTES, DEFAULT_SCALE

# Logging setup
import logging
log = logging.getLogger("pychip8")

# Constants
DEFAULT_CYCLES_PER_FRAME = 10
FRAME_PERIOD = 1.0 / TIMER_FREQUENCY

# Functions
def parse_cmdline():
    """ Parse the command line arguments. """
    parser = OptionParser(usage = "%prog [options] ROM [breakpoint ...]")
    parser.add_option("--debug", action = "store_true", dest = "debug",
                      help = "Enable DEBUG log level and the interactive debugger.")
    parser.add_option("--trace", action = "store_true", dest = "trace",
                      help = "Log every instruction executed at DEBUG level.")
    parser.add_option("--ui", action = "store", dest = "ui", default = "pygame",
                      help = "Front end to use (pygame or pyglet), default: pygame.")
    parser.add_option("--scale", action = "store", type = "int", dest = "scale", default = DEFAULT_SCALE,
                      help = "Screen pixels per CHIP-8 pixel, default: %d." % DEFAULT_SCALE)
    parser.add_option("--palette", action = "store", dest = "palette", default = "green",
                      help = "Display palette (%s), default: green." % ", ".join(sorted(MONO_PALETTES)))
    parser.add_option("--cycles-per-frame", action = "store", type = "int", dest = "cycles_per_frame",
                      default = DEFAULT_CYCLES_PER_FRAME,
                      help = "Instructions executed per 60 Hz timer tick, default: %d." % DEFAULT_CYCLES_PER_FRAME)
    parser.add_option("--seed", action = "store", type = "int", dest = "seed",
                      help = "Fixed seed for the random number generator.")
    parser.add_option("--mute", action = "store_true", dest = "mute",
                      help = "Disable the buzzer.")
    parser.add_option("--log-file", action = "store", dest = "log_file",
                      help = "File to output debugging log.")
    parser.add_option("--log-filter", action = "store", dest = "log_filter",
                      help = "Log filter to apply to stderr handler.")
    return parser

def setup_logging(options):
    """ Configure the root logger from the command line options. """
    log_level = logging.DEBUG if options.debug or options.trace else logging.INFO
    log_formatter = logging.Formatter("%(asctime)s.%(msecs)03d %(name)s(%(levelname)s): %(message)s", "%m/%d %H:%M:%S")
    stderr_handler = logging.StreamHandler()
    stderr_handler.setFormatter(log_formatter)
    if options.log_filter:
        stderr_handler.addFilter(logging.Filter(options.log_filter))
    root_logger = logging.root
    root_logger.setLevel(log_level)
    root_logger.addHandler(stderr_handler)

    if options.log_file:
        file_handler = logging.FileHandler(options.log_file)
        file_handler.setFormatter(log_formatter)
        root_logger.addHandler(file_handler)

def main():
    """ Main application that runs the PyChip8 machine. """
    parser = parse_cmdline()
    options, args = parser.parse_args()
    if len(args) < 1:
        parser.error("a ROM image is required")

    if options.palette not in MONO_PALETTES:
        parser.error("unknown palette: %r" % options.palette)

    setup_logging(options)
    log.info("PyChip8 oh hai")

    vm = VirtualMachine(seed = options.seed)
    vm.trace = bool(options.trace)
    try:
        vm.load_program_file(args[0])
    except (IOError, PyChip8Exception):
        log.exception("Unable to load %s", args[0])
        sys.exit(1)

    buzzer = Buzzer(muted = options.mute)
    vm.sound_timer.output_changed_callback = buzzer.sound_timer_changed

    debugger = Debugger(vm)
    for breakpoint in args[1:]:
        debugger.breakpoints.append(int(breakpoint, 16))

    if options.debug:
        signal.signal(signal.SIGINT, lambda _signum, _frame: setattr(debugger, "single_step", True))

    vm_or_debugger = debugger if options.debug else vm

    palette = MONO_PALETTES[options.palette]
    if options.ui == "pyglet":
        manager = PygletManager(vm.keypad, vm.display, options.scale, palette)
    elif options.ui == "pygame":
        manager = PygameManager(vm.keypad, PygameScreen(vm.display, options.scale, palette))
    else:
        parser.error("unsupported ui type: %r" % options.ui)

    try:
        next_frame = time.perf_counter()
        while True:
            manager.poll()

            # Run a frame's worth of instructions between timer ticks.
            for _ in range(options.cycles_per_frame):
                vm_or_debugger.step()
            vm.tick_timers()

            next_frame += FRAME_PERIOD
            delay = next_frame - time.perf_counter()
            if delay > 0:
                time.sleep(delay)
            else:
                next_frame = time.perf_counter()

    except PyChip8Exception:
        debugger.dump_all(logging.ERROR)
        debugger.dump_stack(logging.ERROR)
        log.exception("Unhandled exception at PC 0x%04x", vm.instruction_address)

        # Stop in the debugger one last time so we can inspect the state of the system.
        if options.debug:
            debugger.enter_debugger()

        sys.exit(1)

    finally:
        buzzer.stop()

if __name__ == "__main__":
    if os.environ.get("PYCHIP8_PROFILING"):
        import cProfile
        cProfile.run("main()", sort = "time")
    else:
        main()
