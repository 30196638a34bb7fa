import math
import unittest

from pounce.interpreter import interpreter
from pounce.lang.error import TypeMismatch
from pounce.lang.numerical import SeededRandom
from pounce.lang.words import CORE_WORDS, build_core_words
from pounce.pure.dictionary import Composed, Native

def run(program, wd=None):
    return interpreter(program, wd=wd).run().stack


class CatalogTestCase(unittest.TestCase):

    def test_catalog(self):
        natives = ("words word dup swap drop round + - * / % & | ^ ~ && || ! E LN10 LN2 LOG10E LOG2E PI SQRT1_2 SQRT2 "
                   "abs acos acosh asin asinh atan atan2 atanh cbrt ceil cos cosh exp expm1 floor hypot log log10 "
                   "log1p log2 max min pow seedrandom random sign sin sinh sqrt tan tanh trunc leap crouch pounce bind "
                   "dip dip2 if-else = == != > < >= <= concat cons uncons push pop constrec linrec linrec5 binrec size "
                   "outAt inAt depth stack-copy type-of is-a-type")
        for name in natives.split():
            self.assertIsInstance(CORE_WORDS[name], Native, name)

        composed = "dup2 rotate rollup rolldown ifte run times map map2 filter reduce split spliti"
        for name in composed.split():
            self.assertIsInstance(CORE_WORDS[name], Composed, name)


class StackTestCase(unittest.TestCase):

    def test_shuffling(self):
        should_pass = {
            "1 dup": [1, 1],
            "1 2 swap": [2, 1],
            "1 2 drop": [1],
            "1 2 dup2": [1, 2, 1, 2],
            "1 2 3 rotate": [3, 2, 1],
            "1 2 3 rollup": [3, 1, 2],
            "1 2 3 rolldown": [2, 3, 1],
            "1 2 depth": [1, 2, 2],
            "depth": [0],
            "1 2 stack-copy": [1, 2, [1, 2]],
        }
        for case, result in should_pass.items():
            self.assertEqual(result, run(case), case)

    def test_dup_copies(self):
        stack = run("[1 [2]] dup")
        self.assertIsNot(stack[0][1], stack[1][1])


class ArithmeticTestCase(unittest.TestCase):

    def test_arithmetic(self):
        should_pass = {
            "2 3 +": [5],
            "0.1 0.2 +": [0.3],
            "7 2 -": [5],
            "3 4 *": [12],
            "7 2 /": [3.5],
            "6 3 /": [2],
            "7 3 %": [1],
            "-7 3 %": [-1],
            "2.5 0 round": [3],
            "-2.5 0 round": [-3],
            "3.14159 2 round": [3.14],
        }
        for case, result in should_pass.items():
            self.assertEqual(result, run(case), case)

        self.assertAlmostEqual(1 / 3, run("1 3 /")[0])

    def test_bitwise_and_logic(self):
        should_pass = {
            "6 3 &": [2],
            "6 3 |": [7],
            "6 3 ^": [5],
            "0 ~": [-1],
            "4294967297 1 &": [1],
            "true false &&": [False],
            "true false ||": [True],
            "true !": [False],
        }
        for case, result in should_pass.items():
            self.assertEqual(result, run(case), case)

    def test_type_mismatch(self):
        should_raise = ["1 0 /", "1 0 %", "1 true +", "'a' 1 +", "[1] 2 *", "1 2 &&", "1 !", "1 'a' round"]
        for case in should_raise:
            self.assertRaises(TypeMismatch, run, case)


class MathTestCase(unittest.TestCase):

    def test_math(self):
        should_pass = {
            "PI": [math.pi],
            "E": [math.e],
            "SQRT2": [math.sqrt(2)],
            "2 3 pow": [8],
            "2 -1 pow": [0.5],
            "3 4 max": [4],
            "3 4 min": [3],
            "-3.7 floor": [-4],
            "-3.2 ceil": [-3],
            "-3.7 trunc": [-3],
            "-5 sign": [-1],
            "0 sign": [0],
            "-5 abs": [5],
            "-5 hypot": [5],
            "1 1 atan2": [math.pi / 4],
            "0 cos": [1.0],
            "16 sqrt": [4.0],
            "100 log10": [2.0],
            "8 log2": [3.0],
            "1000 exp": [math.inf],
            "0 log": [-math.inf],
            "1 atanh": [math.inf],
            "-1 atanh": [-math.inf],
        }
        for case, result in should_pass.items():
            self.assertEqual(result, run(case), case)

    def test_domain_errors(self):
        should_nan = ["-1 sqrt", "2 asin", "-1 log", "-8 0.5 pow"]
        for case in should_nan:
            self.assertTrue(math.isnan(run(case)[0]), case)


class ComparisonTestCase(unittest.TestCase):

    def test_comparison(self):
        should_pass = {
            "3 3 =": [3, True],
            "3 4 =": [3, False],
            "3 4 ==": [False],
            "3 3.0 ==": [True],
            "3 4 !=": [True],
            "[1 2] [1 2] ==": [True],
            "[1 2] [1 [2]] ==": [False],
            "{a:1} {a:1} ==": [True],
            "1 '1' ==": [False],
            "true true ==": [True],
            "'a' 'b' <": [True],
            "'b' 'a' <=": [False],
            "3 2 >": [True],
            "2 2 >=": [True],
            "2 3 <=": [True],
        }
        for case, result in should_pass.items():
            self.assertEqual(result, run(case), case)

    def test_type_mismatch(self):
        should_raise = ["[1] 2 <", "1 'a' >", "true false >", "1 =", "1 =="]
        for case in should_raise:
            self.assertRaises(TypeMismatch, run, case)


class ListTestCase(unittest.TestCase):

    def test_lists(self):
        should_pass = {
            "[1 2] [3] concat": [[1, 2, 3]],
            "1 [2 3] cons": [[1, 2, 3]],
            "[1 2 3] uncons": [1, [2, 3]],
            "[1] uncons": [1, []],
            "[1 2] 3 push": [[1, 2, 3]],
            "[1 2 3] pop": [[1, 2], 3],
            "[1 2 3] size": [[1, 2, 3], 3],
            "[] size": [[], 0],
            "[4 5 6] 1 outAt": [[4, 5, 6], 5],
            "'abc' 2 outAt": ["abc", "c"],
            "[4 5 6] 9 1 inAt": [[4, 9, 6]],
        }
        for case, result in should_pass.items():
            self.assertEqual(result, run(case), case)

    def test_type_mismatch(self):
        should_raise = ["[] uncons", "[] pop", "1 2 concat", "1 2 cons", "5 size", "[1 2] 5 outAt", "[1 2] -1 outAt",
                        "[1 2] 0.5 outAt", "[1 2] 3 2 inAt", "'ab' 'c' 0 inAt"]
        for case in should_raise:
            self.assertRaises(TypeMismatch, run, case)


class IntrospectionTestCase(unittest.TestCase):

    def test_type_of(self):
        should_pass = {
            "5 type-of": ["Nat"],
            "0 type-of": ["Nat"],
            "-5 type-of": ["Neg"],
            "'x' type-of": ["Str"],
            "'Nat' type-of": ["Type"],
            "'Zero' type-of": ["Type"],
            "'Type' type-of": ["MetaType"],
            "true type-of": ["Bool"],
            "{} type-of": ["Map"],
            "[1 -1 'a'] type-of": [["Nat", "Neg", "Str"]],
            "'Str' is-a-type": [True],
            "5 is-a-type": [False],
            "['Nat' 3] is-a-type": [[True, False]],
        }
        for case, result in should_pass.items():
            self.assertEqual(result, run(case), case)

    def test_words(self):
        names = run("words")[0]
        self.assertIn("dup", names)
        self.assertEqual(sorted(names), names)
        self.assertIn("square", run("[square] [dup *] compose words")[0])

    def test_word(self):
        should_pass = {
            "[dup] word": [{"native": "A -> A A"}],
            "[rollup] word": [{"compose": ["swap", ["swap"], "dip"]}],
            "[sq] [dup *] compose [sq] word": [{"compose": ["dup", "*"]}],
        }
        for case, result in should_pass.items():
            self.assertEqual(result, run(case), case)

        self.assertRaises(TypeMismatch, run, "[nope] word")


class RandomTestCase(unittest.TestCase):

    def test_random(self):
        self.assertEqual([True], run("42 seedrandom random 42 seedrandom random =="))
        self.assertEqual([True], run("'seed' seedrandom random 'seed' seedrandom random =="))

        value = run("random")[0]
        self.assertTrue(0 <= value < 1)

    def test_own_generator(self):
        first = run("random random", wd=build_core_words(SeededRandom(1)))
        second = run("random random", wd=build_core_words(SeededRandom(1)))
        self.assertEqual(first, second)
        self.assertNotEqual(first[0], first[1])


if __name__ == '__main__':
    unittest.main()
