"""Pure lambda calculus abstract syntax tree and parser.

The `pure` directory contains the reduction engine: it knows nothing about shells, colors or sessions.

Formally, pure lambda calculus is parsed with the grammar

```
<expr>     ::= <atom> { <atom> }                    ; "application"
                                                    ; - associating by left: a b c d = (((a b) c) d)
<atom>     ::= <variable> | "(" <expr> ")" | <lambda>
<lambda>   ::= ("λ" | "\\") <variable> "." <expr>   ; "abstraction"
                                                    ; - abstraction bodies are greedy: λx.x y = λx.(x y)
<variable> ::= <letter> { <letter> | <digit> | "_" | "'" }
```

Whitespace is allowed between any two tokens. Multi-character variables are supported, so applications must be
separated by spaces or parentheses.

Terms are immutable: every operation on a tree builds a new root and shares the subtrees it did not touch. Besides
structure, each node carries provenance metadata (from_substitution, source_id) written by substitution, and
Applications carry the redex_id assigned by numbering.

Sources: https://plato.stanford.edu/entries/lambda-calculus/#Com,
         https://opendsa-server.cs.vt.edu/ODSA/Books/PL/html/Syntax.html
"""

import string
from abc import ABC
from dataclasses import dataclass
from typing import NamedTuple, Optional

from lcstep.lang.error import LambdaSyntaxError


LAMBDAS = ("λ", "\\")
IDENT_START = frozenset(string.ascii_letters)
IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_'")


class LambdaTerm(ABC):
    """Superclass of the three λ-term node types. The set of subclasses is closed: traversals dispatch on Variable,
    Abstraction and Application and raise TypeError on anything else.
    """
    from_substitution: bool
    source_id: Optional[int]

    def __str__(self):
        return to_plain_string(self)


@dataclass(frozen=True)
class Variable(LambdaTerm):
    """Variable in lambda calculus: a name referring to the nearest enclosing Abstraction binding it, or free."""
    name: str
    from_substitution: bool = False
    source_id: Optional[int] = None


@dataclass(frozen=True)
class Abstraction(LambdaTerm):
    """Abstraction: λparam.body."""
    param: str
    body: LambdaTerm
    from_substitution: bool = False
    source_id: Optional[int] = None


@dataclass(frozen=True)
class Application(LambdaTerm):
    """Application of func to arg. redex_id is only meaningful right after number_redexes."""
    func: LambdaTerm
    arg: LambdaTerm
    redex_id: Optional[int] = None
    from_substitution: bool = False
    source_id: Optional[int] = None


class Frame(NamedTuple):
    """An open "(" or λ whose closing has not been reached yet. outer is the application to its left, if any."""
    kind: str
    param: Optional[str]
    outer: Optional[LambdaTerm]


def attach(outer, term):
    return term if outer is None else Application(outer, term)


class Parser:
    """Parser over the characters of a single λ-term. Positions in errors are offsets into text.

    Open parentheses and abstractions are kept on an explicit stack of Frames rather than on the call stack, so nesting
    depth is only bounded by memory.
    """

    def __init__(self, text):
        self.text = text
        self.pos = 0

    def current(self):
        return self.text[self.pos] if self.pos < len(self.text) else None

    def describe_current(self):
        char = self.current()
        return "end of input" if char is None else f"'{char}'"

    def skip_whitespace(self):
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def error(self, expected):
        msg = f"expected {expected} at position {self.pos}, found {self.describe_current()}"
        return LambdaSyntaxError(msg, self.text, self.pos, expected)

    def eat(self, expected):
        self.skip_whitespace()
        if self.current() != expected:
            raise self.error(f"'{expected}'")
        self.pos += 1

    def parse(self):
        self.skip_whitespace()
        if self.current() is None:
            raise LambdaSyntaxError("λ-term cannot be empty", self.text, self.pos, "λ-term")

        term = self.parse_expr()

        self.skip_whitespace()
        if self.current() is not None:
            raise self.error("end of input")
        return term

    def parse_expr(self):
        """Parses the longest expr starting at pos. Stops, without consuming it, at the first character that cannot
        continue the expr: end of input or a ")" that no "(" opened.
        """
        stack = []
        term = None  # application built so far in the innermost frame

        while True:
            self.skip_whitespace()
            char = self.current()

            if char == "(":
                stack.append(Frame("(", None, term))
                term = None
                self.pos += 1

            elif char in LAMBDAS:
                self.pos += 1
                self.skip_whitespace()
                if self.current() not in IDENT_START:
                    raise self.error("parameter name")
                param = self.parse_name()
                self.eat(".")
                stack.append(Frame("λ", param, term))
                term = None

            elif char is not None and char in IDENT_START:
                term = attach(term, Variable(self.parse_name()))

            else:
                if term is None:
                    raise self.error("variable, '(' or 'λ'")

                # abstraction bodies extend as far as possible, so they all end here
                while stack and stack[-1].kind == "λ":
                    frame = stack.pop()
                    term = attach(frame.outer, Abstraction(frame.param, term))

                if not stack:
                    return term
                if char != ")":
                    raise self.error("')'")

                frame = stack.pop()
                term = attach(frame.outer, term)
                self.pos += 1

    def parse_name(self):
        start = self.pos
        self.pos += 1
        while self.current() is not None and self.current() in IDENT_CHARS:
            self.pos += 1
        return self.text[start:self.pos]


def parse(text):
    """Parses text into a LambdaTerm. Raises LambdaSyntaxError if text is not a valid λ-term."""
    return Parser(text).parse()


def unwind(term):
    """Splits a left-nested chain of Applications (((head a1) a2) ... an) into head and the list of Applications,
    innermost first. Traversals walk this spine in a loop, as a long application chain nests one level per argument.
    """
    apps = []
    while isinstance(term, Application):
        apps.append(term)
        term = term.func
    apps.reverse()
    return term, apps


def rebuild(app, func, arg, redex_id):
    """app itself if func, arg and redex_id are unchanged, else a copy of app with them. Provenance is kept."""
    if func is app.func and arg is app.arg and redex_id == app.redex_id:
        return app
    return Application(func, arg, redex_id, app.from_substitution, app.source_id)


def to_plain_string(term, lam="λ"):
    """Canonical serialization of term. Applications are always parenthesized, and Abstractions are parenthesized
    again when they are the func or arg of an Application, so parse(to_plain_string(term)) rebuilds term.
    """
    if isinstance(term, Variable):
        return term.name
    elif isinstance(term, Abstraction):
        return f"{lam}{term.param}.{to_plain_string(term.body, lam)}"
    elif isinstance(term, Application):
        head, apps = unwind(term)
        parts = ["(" * len(apps), _operand_string(head, lam)]
        for app in apps:
            parts.append(f" {_operand_string(app.arg, lam)})")
        return "".join(parts)
    raise TypeError(f"not a λ-term: {term!r}")


def _operand_string(term, lam):
    text = to_plain_string(term, lam)
    return f"({text})" if isinstance(term, Abstraction) else text


def structurally_equals(term, other):
    """Whether or not term and other have the same shape and names, ignoring redex ids and provenance."""
    if isinstance(term, Variable):
        return isinstance(other, Variable) and term.name == other.name
    elif isinstance(term, Abstraction):
        return (isinstance(other, Abstraction) and term.param == other.param
                and structurally_equals(term.body, other.body))
    elif isinstance(term, Application):
        if not isinstance(other, Application):
            return False
        head, apps = unwind(term)
        other_head, other_apps = unwind(other)
        return (len(apps) == len(other_apps) and structurally_equals(head, other_head)
                and all(structurally_equals(app.arg, other_app.arg) for app, other_app in zip(apps, other_apps)))
    raise TypeError(f"not a λ-term: {term!r}")


def alpha_equals(term, other, mapping=None, other_mapping=None):
    """Whether or not two LambdaTerms are alpha-equivalent. mapping maps each bound name of term to the stack of names
    bound at the same position in other; other_mapping is the same from the perspective of other. Free variables must
    match by name.
    """
    if mapping is None:
        mapping = {}
    if other_mapping is None:
        other_mapping = {}

    if isinstance(term, Variable):
        if not isinstance(other, Variable):
            return False
        bound = mapping.get(term.name)
        other_bound = other_mapping.get(other.name)
        if bound or other_bound:
            return bool(bound) and bool(other_bound) and bound[-1] == other.name and other_bound[-1] == term.name
        return term.name == other.name

    elif isinstance(term, Abstraction):
        if not isinstance(other, Abstraction):
            return False
        mapping.setdefault(term.param, []).append(other.param)
        other_mapping.setdefault(other.param, []).append(term.param)
        try:
            return alpha_equals(term.body, other.body, mapping, other_mapping)
        finally:
            mapping[term.param].pop()
            other_mapping[other.param].pop()

    elif isinstance(term, Application):
        if not isinstance(other, Application):
            return False
        head, apps = unwind(term)
        other_head, other_apps = unwind(other)
        return (len(apps) == len(other_apps) and alpha_equals(head, other_head, mapping, other_mapping)
                and all(alpha_equals(app.arg, other_app.arg, mapping, other_mapping)
                        for app, other_app in zip(apps, other_apps)))

    raise TypeError(f"not a λ-term: {term!r}")
