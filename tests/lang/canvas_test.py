import unittest

from pounce.lang import canvas
from pounce.lang.words import CORE_WORDS
from pounce.pure.lexical import parse

class SampleTestCase(unittest.TestCase):

    def test_sample(self):
        self.assertEqual([[0, 1, 2], [1, 2, 3]], canvas.sample("x y +", 2, 3))
        self.assertEqual([[None, 0]], canvas.sample("y x /", 1, 2))
        self.assertEqual([[None, None]], canvas.sample("'not a number'", 1, 2))

    def test_parsed_program(self):
        self.assertEqual([[0, 0], [0, 1]], canvas.sample(parse("x y *"), 2, 2))

    def test_definitions(self):
        self.assertEqual([[0, 1], [1, 2]], canvas.sample("[sum] [+] compose x y sum", 2, 2))

    def test_layers(self):
        self.assertEqual([[1]], canvas.sample("l", 1, 1, layers=2))
        self.assertEqual([[0]], canvas.sample("l 0 == [0] ['no'] if-else", 1, 1, layers=2))

    def test_unfinished_cells(self):
        self.assertEqual([[None]], canvas.sample("[loop] [loop] compose loop", 1, 1, max_cycles=20))

    def test_sample_cell(self):
        self.assertEqual(7, canvas.sample_cell(parse("l x y + +"), CORE_WORDS, 1, 2, 4))
        self.assertIsNone(canvas.sample_cell(parse("+ +"), CORE_WORDS, 0, 0, 0))


class RenderTestCase(unittest.TestCase):

    def test_shade(self):
        should_pass = [(None, " ", None), (float("nan"), " ", None), (0, " ", "green"), (1, "@", "green"),
                       (5, "@", "green"), (-1, "@", "red")]
        for value, char, color in should_pass:
            self.assertEqual((char, color), canvas.shade(value), value)

    def test_render(self):
        text = canvas.render([[None, 1], [0, None]])
        self.assertEqual(2, len(text.split("\n")))
        self.assertIn("@", text)


if __name__ == '__main__':
    unittest.main()
