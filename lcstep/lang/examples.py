"""Sample λ-terms offered by the shell's examples command."""

from typing import NamedTuple


class Example(NamedTuple):
    name: str
    description: str
    expr: str


EXAMPLES = [
    Example("Identity", "the simplest function, returns its argument", "(\\x.x) hello"),
    Example("K Combinator", "takes two arguments and returns the first (TRUE in Church encoding)",
            "(\\x.\\y.x) first second"),
    Example("S Combinator", "the substitution combinator", "(\\x.\\y.\\z.x z (y z)) a b c"),
    Example("Church Numeral 2", "2 applied to successor and zero", "(\\f.\\x.f (f x)) (\\n.succ n) zero"),
    Example("Boolean AND", "TRUE AND FALSE = FALSE", "(\\p.\\q.p q p) (\\x.\\y.x) (\\x.\\y.y)"),
    Example("Boolean OR", "FALSE OR TRUE = TRUE", "(\\p.\\q.p p q) (\\x.\\y.y) (\\x.\\y.x)"),
    Example("Church Addition", "2 + 2 in Church numerals",
            "(\\m.\\n.\\f.\\x.m f (n f x)) (\\f.\\x.f (f x)) (\\f.\\x.f (f x)) s z"),
    Example("Omega", "self-application, reduces to itself forever", "(\\x.x x) (\\x.x x)"),
]
