import io
import unittest
from contextlib import redirect_stdout

from pounce.interpreter import interpreter
from pounce.lang.error import ErrorHandler, TypeMismatch
from pounce.lang.words import CORE_WORDS
from pounce.pure.lexical import parse
from pounce.pure.reducer import Purr, Snapshot
from pounce.pure.values import Symbol

class PurrTestCase(unittest.TestCase):

    def test_run(self):
        self.assertEqual(Snapshot([5], [], False), Purr(parse("2 3 +"), CORE_WORDS).run())
        self.assertEqual(Snapshot([], [], False), Purr([], CORE_WORDS).run())

    def test_pushes(self):
        should_pass = {
            "'dup'": ["dup"],
            "foo": ["foo"],
            "[dup] {a:1}": [["dup"], {"a": 1}],
            "1 2 3 4 5 6": [1, 2, 3, 4, 5, 6],
        }
        for case, result in should_pass.items():
            self.assertEqual(result, Purr(parse(case), CORE_WORDS).resume(1).stack, case)

        self.assertIsInstance(interpreter("foo").run().stack[0], Symbol)

    def test_resume(self):
        purr = Purr(parse("1 2 3 + +"), CORE_WORDS)
        self.assertEqual(Snapshot([1, 5], ["+"], True), purr.resume(1))
        self.assertEqual(Snapshot([6], [], False), purr.resume(1))
        self.assertEqual(Snapshot([6], [], False), purr.resume(1))
        self.assertEqual(2, purr.cycles)

    def test_suspends_only_with_work_left(self):
        snapshot = Purr(parse("1 2 +"), CORE_WORDS).resume(1)
        self.assertFalse(snapshot.active)
        self.assertEqual([3], snapshot.stack)

    def test_cycle_budget(self):
        purr = interpreter("[loop] [loop] compose loop", max_cycles=10)
        snapshot = purr.resume()
        self.assertTrue(snapshot.active)
        self.assertEqual(["loop"], snapshot.program)
        self.assertEqual(10, purr.cycles)

        purr.resume(5)
        self.assertEqual(15, purr.cycles)

    def test_iteration(self):
        snapshots = list(interpreter("1 2 + 3 + 4 +", max_cycles=1))
        self.assertEqual([[3], [6], [10]], [snapshot.stack for snapshot in snapshots])
        self.assertEqual([True, True, False], [snapshot.active for snapshot in snapshots])

    def test_stack(self):
        self.assertEqual([3], Purr(parse("+"), CORE_WORDS, stack=[1, 2]).run().stack)

    def test_type_mismatch(self):
        purr = interpreter("4 1 + 'a' +")
        with self.assertRaises(TypeMismatch) as context:
            purr.run()

        self.assertEqual("+", context.exception.word)
        self.assertEqual([5, "a"], context.exception.stack)
        self.assertFalse(purr.active)
        self.assertEqual(Snapshot([5, "a"], [], False), purr.resume())

    def test_arity(self):
        should_raise = ["dup", "swap", "1 swap", "drop", "+", "1 -", "uncons", "concat", "if-else", "dip", "leap",
                        "pop", "size", "outAt", "inAt", "1 2 dip2", "cons", "push", "=", "==", "<", "round",
                        "seedrandom", "linrec", "binrec", "constrec", "type-of", "is-a-type", "word",
                        "pounce", "crouch", "bind"]
        for case in should_raise:
            self.assertRaises(TypeMismatch, interpreter(case).run)

    def test_failing_native_keeps_stack(self):
        should_raise = ["1 2 [a b c] [a] pounce", "1 [[a b]] [a] pounce", "1 2 [a] crouch", "1 'x' [A] bind",
                        "[A] bind", "true seedrandom", "1 [] uncons", "1 [] pop", "1 0 /", "[1] 5 outAt", "1 'a' +"]
        for case in should_raise:
            program, word = case.rsplit(" ", 1)
            purr = interpreter(case)
            with self.assertRaises(TypeMismatch) as context:
                purr.run()

            self.assertEqual(word, context.exception.word, case)
            self.assertEqual(parse(program), context.exception.stack, case)
            self.assertEqual(parse(program), purr.stack, case)

    def test_program_and_lists_are_copied(self):
        pl = parse("[1 2] dup")
        stack = Purr(pl, CORE_WORDS).run().stack

        self.assertEqual(parse("[1 2] dup"), pl)
        self.assertEqual([[1, 2], [1, 2]], stack)
        self.assertIsNot(stack[0], stack[1])
        self.assertIsNot(pl[0], stack[0])

    def test_trace(self):
        output = io.StringIO()
        with redirect_stdout(output):
            interpreter("2 3 +", log_level=1).run()
        self.assertIn("[5]", output.getvalue())

        output = io.StringIO()
        with redirect_stdout(output):
            interpreter("2 3 +", error_handler=ErrorHandler(log_level=0)).run()
        self.assertEqual("", output.getvalue())


if __name__ == '__main__':
    unittest.main()
