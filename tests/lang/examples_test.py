import unittest

from lcstep.lang.examples import EXAMPLES
from lcstep.pure.lexical import parse
from lcstep.pure.reduction import get_redex_count, number_redexes


class ExamplesTestCase(unittest.TestCase):

    def test_examples_parse(self):
        for example in EXAMPLES:
            self.assertGreater(get_redex_count(number_redexes(parse(example.expr))), 0, example.name)

    def test_names_are_unique(self):
        names = [example.name for example in EXAMPLES]
        self.assertEqual(len(names), len(set(names)))


if __name__ == '__main__':
    unittest.main()
