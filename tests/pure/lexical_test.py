import random
import string
import unittest

from lcstep.lang.error import LambdaSyntaxError
from lcstep.pure.lexical import (Abstraction, Application, Variable, alpha_equals, parse, structurally_equals,
                                 to_plain_string)


LAMBDA_MARKERS = ["λ", "\\"]


def random_name(rng):
    return rng.choice(string.ascii_lowercase) + "".join(rng.choice("ab1'_") for __ in range(rng.randint(0, 3)))


def random_term(rng, depth):
    """Random LambdaTerm with at most depth levels of nesting."""
    kind = rng.randrange(3) if depth > 0 else 0
    if kind == 0:
        return Variable(random_name(rng))
    elif kind == 1:
        return Abstraction(random_name(rng), random_term(rng, depth - 1))
    return Application(random_term(rng, depth - 1), random_term(rng, depth - 1))


def random_text(rng, depth):
    """Random valid λ-term text, not necessarily in canonical form."""
    kind = rng.randrange(3) if depth > 0 else 0
    if kind == 0:
        return random_name(rng)
    elif kind == 1:
        return f"{rng.choice(LAMBDA_MARKERS)}{random_name(rng)}.{random_text(rng, depth - 1)}"
    return f"({random_text(rng, depth - 1)} {random_text(rng, depth - 1)})"


class ParserTestCase(unittest.TestCase):

    def test_parse(self):
        x, y = Variable("x"), Variable("y")
        cases = {
            "x": x,
            "λx.x": Abstraction("x", x),
            "\\x.x": Abstraction("x", x),
            "(λx.x) y": Application(Abstraction("x", x), y),
            "x y z": Application(Application(x, y), Variable("z")),
            "x (y z)": Application(x, Application(y, Variable("z"))),
            "λx.λy.x y": Abstraction("x", Abstraction("y", Application(x, y))),
            "(  x   y  )": Application(x, y),
            "λ x . x": Abstraction("x", x),
            "foo_1 x'": Application(Variable("foo_1"), Variable("x'")),
            "((x))": x,
            "x λy.y x": Application(x, Abstraction("y", Application(y, x))),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, parse(case), case)

    def test_parse_errors(self):
        should_raise = ["(", ")", "λx", "λ.x", "", "   ", "(a b", "a b)", "x.y", "λx.", "1x", "a {", "λλx.x", "()"]
        for case in should_raise:
            self.assertRaises(LambdaSyntaxError, parse, case)

    def test_error_positions(self):
        cases = {
            "": (0, "λ-term"),
            "   ": (3, "λ-term"),
            "(": (1, "variable, '(' or 'λ'"),
            ")": (0, "variable, '(' or 'λ'"),
            "λx": (2, "'.'"),
            "λ.x": (1, "parameter name"),
            "(a b": (4, "')'"),
            "a b)": (3, "end of input"),
        }
        for case, (position, expected) in cases.items():
            with self.assertRaises(LambdaSyntaxError, msg=case) as context:
                parse(case)
            self.assertEqual(position, context.exception.position, case)
            self.assertEqual(expected, context.exception.expected, case)
            self.assertEqual(case, context.exception.text, case)

    def test_error_message_quotes_braces(self):
        with self.assertRaises(LambdaSyntaxError) as context:
            parse("a {b}")
        self.assertIn("'{'", context.exception.message)

    def test_deep_nesting(self):
        with self.assertRaises(LambdaSyntaxError) as context:
            parse("(" * 600)
        self.assertEqual((600, "variable, '(' or 'λ'"), (context.exception.position, context.exception.expected))

        self.assertEqual(Variable("x"), parse("(" * 600 + "x" + ")" * 600))

        term = parse("λx." * 600 + "x")
        for __ in range(600):
            self.assertEqual("x", term.param)
            term = term.body
        self.assertEqual(Variable("x"), term)

    def test_long_application_chain(self):
        term = parse(" ".join(["a"] * 2000))
        depth = 0
        while isinstance(term, Application):
            self.assertEqual(Variable("a"), term.arg)
            term, depth = term.func, depth + 1
        self.assertEqual((Variable("a"), 1999), (term, depth))

    def test_notation_equivalence(self):
        cases = {"λx.x": "\\x.x", "λx.λy.x": "\\x.\\y.x", "(λx.x) y": "(\\x.x) y", "λf.(\\x.f x)": "\\f.(λx.f x)"}
        for lam, backslash in cases.items():
            self.assertEqual(parse(lam), parse(backslash), lam)


class PlainStringTestCase(unittest.TestCase):

    def test_to_plain_string(self):
        cases = {
            "(λx.x)y": "((λx.x) y)",
            "(λx . x)  y": "((λx.x) y)",
            "  (λx.x) y  ": "((λx.x) y)",
            "λx.λy.x y": "λx.λy.(x y)",
            "(  a   b  )": "(a b)",
            "f (λx.x)": "(f (λx.x))",
            "a b c": "((a b) c)",
            "(λf.f) (λx.x)": "((λf.f) (λx.x))",
            "x": "x",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, to_plain_string(parse(case)), case)

    def test_str(self):
        self.assertEqual("((λx.(x x)) y)", str(parse("(\\x.x x) y")))
        self.assertEqual("((\\x.(x x)) y)", to_plain_string(parse("(λx.x x) y"), lam="\\"))

    def test_known_round_trips(self):
        cases = ["(λx.x) y", "f (λx.x)", "λx.λy.x", "a b c", "(λx.x x) (λy.y)", "(λf.f) (λx.x)"]
        for case in cases:
            term = parse(case)
            text = to_plain_string(term)
            self.assertTrue(structurally_equals(term, parse(text)), case)
            self.assertEqual(text, to_plain_string(parse(text)), case)

    def test_round_trip(self):
        rng = random.Random(1)
        for __ in range(500):
            term = random_term(rng, 5)
            self.assertTrue(structurally_equals(term, parse(to_plain_string(term))), to_plain_string(term))

    def test_long_chain_round_trip(self):
        term = parse("(λx.x) " + " ".join(["a"] * 2000))
        text = to_plain_string(term)

        self.assertTrue(text.startswith("(" * 2000 + "(λx.x) a) a)"))
        self.assertTrue(structurally_equals(term, parse(text)))
        self.assertTrue(alpha_equals(parse("(λy.y) " + " ".join(["a"] * 2000)), term))
        self.assertFalse(structurally_equals(term, parse("(λx.x) " + " ".join(["a"] * 1999))))

    def test_canonical_stability(self):
        rng = random.Random(2)
        for __ in range(500):
            text = random_text(rng, 5)
            canonical = to_plain_string(parse(text))
            self.assertEqual(canonical, to_plain_string(parse(canonical)), text)


class EqualityTestCase(unittest.TestCase):

    def test_structurally_equals(self):
        marked = Application(Variable("x", True, 1), Variable("y"), redex_id=3)
        self.assertTrue(structurally_equals(marked, parse("x y")))
        self.assertNotEqual(marked, parse("x y"))

        should_fail = [("x", "y"), ("λx.x", "λy.y"), ("x y", "λx.y"), ("(x y) z", "x (y z)")]
        for term, other in should_fail:
            self.assertFalse(structurally_equals(parse(term), parse(other)), term)

    def test_alpha_equals(self):
        should_pass = [("x", "x"), ("λx.x", "λy.y"), ("λx.λy.x", "λa.λb.a"), ("λx.x z", "λy.y z"),
                       ("λx.λx.x", "λa.λb.b"), ("(λx.x) (λy.y)", "(λa.a) (λb.b)")]
        for term, other in should_pass:
            self.assertTrue(alpha_equals(parse(term), parse(other)), term)

        should_fail = [("x", "y"), ("λx.λy.x", "λa.λb.b"), ("λx.y", "λx.z"), ("λx.x y", "λy.y y"),
                       ("λx.x", "x"), ("λx.λx.x", "λa.λb.a")]
        for term, other in should_fail:
            self.assertFalse(alpha_equals(parse(term), parse(other)), term)


if __name__ == '__main__':
    unittest.main()
