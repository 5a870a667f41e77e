import io
import unittest
from unittest import mock

from pychip8.debugger import Debugger
from pychip8.tests.utils import machine_with_program

class DebuggerStepTests(unittest.TestCase):
    def setUp(self):
        self.vm = machine_with_program(0x600A, 0x2208, 0x6102, 0x0000, 0x6203, 0x00EE)
        self.debugger = Debugger(self.vm)

    def test_step_runs_vm(self):
        self.assertEqual(self.debugger.step(), 0x600A)
        self.assertEqual(self.vm.regs[0], 0x0A)
        self.assertEqual(self.debugger.location_counter[0x200], 1)
        self.assertEqual(self.debugger.instruction_counter[0x6000], 1)

    def test_breakpoint_enters_debugger(self):
        self.debugger.breakpoints.append(0x202)
        with mock.patch.object(self.debugger, "enter_debugger") as enter_debugger:
            self.debugger.step()
            self.assertFalse(enter_debugger.called)
            self.debugger.step()
            self.assertTrue(enter_debugger.called)

    def test_single_step_enters_debugger(self):
        self.debugger.single_step = True
        with mock.patch.object(self.debugger, "enter_debugger") as enter_debugger:
            self.debugger.step()
            self.assertEqual(enter_debugger.call_count, 1)

    def test_step_out_breaks_on_return(self):
        self.debugger.step_out = True
        with mock.patch.object(self.debugger, "enter_debugger") as enter_debugger:
            # LD, CALL, LD V2: no return yet.
            for _ in range(3):
                self.debugger.step()
            self.assertFalse(enter_debugger.called)

            # About to execute RET.
            self.debugger.step()
            self.assertTrue(enter_debugger.called)
        self.assertFalse(self.debugger.step_out)
        self.assertTrue(self.debugger.single_step)
        self.assertEqual(self.vm.pc, 0x204)

    def test_key_wait_passes_through(self):
        vm = machine_with_program(0xF00A)
        debugger = Debugger(vm)
        debugger.step()
        debugger.single_step = True
        with mock.patch.object(debugger, "enter_debugger") as enter_debugger:
            self.assertIsNone(debugger.step())
            self.assertFalse(enter_debugger.called)

    def test_peek_instruction(self):
        self.assertEqual(self.debugger.peek_instruction(), 0x600A)
        self.vm.pc = 0xFFF
        self.assertIsNone(self.debugger.peek_instruction())

class DebuggerCommandTests(unittest.TestCase):
    def setUp(self):
        self.vm = machine_with_program(0x00E0, 0x600A, 0x1200)
        self.debugger = Debugger(self.vm)

    def run_command(self, text):
        with mock.patch("sys.stdout", new_callable = io.StringIO) as stdout:
            resume = self.debugger.process_command(text.split())
        return resume, stdout.getvalue()

    def test_continue(self):
        self.debugger.single_step = True
        resume, _output = self.run_command("c")
        self.assertTrue(resume)
        self.assertFalse(self.debugger.single_step)

    def test_step(self):
        resume, _output = self.run_command("s")
        self.assertTrue(resume)
        self.assertTrue(self.debugger.single_step)

    def test_step_out(self):
        resume, _output = self.run_command("out")
        self.assertTrue(resume)
        self.assertTrue(self.debugger.step_out)
        self.assertFalse(self.debugger.single_step)

    def test_quit(self):
        with self.assertRaises(SystemExit):
            self.run_command("q")

    def test_breakpoints(self):
        self.run_command("b 204")
        self.run_command("break 20a")
        self.assertEqual(self.debugger.breakpoints, [0x204, 0x20A])

        _resume, output = self.run_command("info break")
        self.assertIn("0x0204", output)
        self.assertIn("0x020a", output)

        self.run_command("clear 204")
        self.assertEqual(self.debugger.breakpoints, [0x20A])
        self.run_command("clear all")
        self.assertEqual(self.debugger.breakpoints, [])

    def test_dump_toggle(self):
        with self.assertLogs("pychip8.debugger", level = "DEBUG"):
            self.run_command("set dump")
        self.assertTrue(self.debugger.dump_enabled)
        self.run_command("clear dump")
        self.assertFalse(self.debugger.dump_enabled)

    def test_dump(self):
        self.vm.regs[0xA] = 0x5A
        with self.assertLogs("pychip8.debugger", level = "INFO") as context:
            self.run_command("d")
        self.assertIn("PC = 0x0200", context.output[0])
        self.assertIn("running", context.output[0])
        self.assertIn("VA = 0x5a", context.output[2])

    def test_stack(self):
        self.vm.stack[0] = 0x202
        self.vm.stack[1] = 0x30A
        self.vm.sp = 2
        with self.assertLogs("pychip8.debugger", level = "INFO") as context:
            self.run_command("st")
        self.assertIn("stack[1] = 0x030a", context.output[0])
        self.assertIn("stack[0] = 0x0202", context.output[1])

    def test_key_toggle(self):
        _resume, output = self.run_command("k a")
        self.assertTrue(self.vm.keypad.is_pressed(0xA))
        self.assertIn("down", output)

        _resume, output = self.run_command("k a")
        self.assertFalse(self.vm.keypad.is_pressed(0xA))
        self.assertIn("up", output)

    def test_examine_memory(self):
        _resume, output = self.run_command("x 200 4")
        self.assertEqual(output.strip(), "0x200: 00 e0 60 0a")
        self.assertEqual(self.debugger.debugger_shortcut, ["x", "204", "4"])

    def test_empty_command_repeats_shortcut(self):
        self.run_command("x 200 2")
        _resume, output = self.run_command("")
        self.assertIn("0x202: 60 0a", output)

    def test_disassemble(self):
        _resume, output = self.run_command("dis")
        lines = output.splitlines()
        self.assertEqual(lines[0], "=>0x200: 00e0  CLS")
        self.assertEqual(lines[1], "  0x202: 600a  LD V0, 0x0a")
        self.assertEqual(lines[2], "  0x204: 1200  JP 0x200")
        self.assertEqual(len(lines), 8)

    def test_counters(self):
        self.debugger.step()
        self.debugger.step()
        _resume, output = self.run_command("lc 5")
        self.assertIn("location = 0x0200, count = 1", output)
        _resume, output = self.run_command("ic 5")
        self.assertIn("instruction group = 0x6, count = 1", output)

        self.run_command("lc clear")
        self.run_command("ic clear")
        self.assertEqual(len(self.debugger.location_counter), 0)
        self.assertEqual(len(self.debugger.instruction_counter), 0)

    def test_unknown_command(self):
        resume, output = self.run_command("frobnicate")
        self.assertFalse(resume)
        self.assertIn("i don't know what 'frobnicate' is.", output)

class EnterDebuggerTests(unittest.TestCase):
    def setUp(self):
        self.vm = machine_with_program(0x00E0)
        self.debugger = Debugger(self.vm)

    def test_runs_until_resume(self):
        with mock.patch("builtins.input", side_effect = ["b 300", "k 1", "c"]) as fake_input, \
             mock.patch("sys.stdout", new_callable = io.StringIO) as stdout:
            self.debugger.enter_debugger()
        self.assertEqual(fake_input.call_count, 3)
        self.assertEqual(self.debugger.breakpoints, [0x300])
        self.assertTrue(self.vm.keypad.is_pressed(0x1))
        self.assertIn("Next instruction: 0x00e0  CLS", stdout.getvalue())

    def test_bad_command_is_logged(self):
        with mock.patch("builtins.input", side_effect = ["x fff 2", "b zz", "c"]), \
             mock.patch("sys.stdout", new_callable = io.StringIO):
            with self.assertLogs("pychip8.debugger", level = "ERROR") as context:
                self.debugger.enter_debugger()
        self.assertEqual(len(context.output), 2)
        self.assertFalse(self.vm.halted)
