"""Terminal rendering of λ-terms. Substituted subtrees are highlighted, application parentheses are colored by depth,
and a second line places each redex id under the opening parenthesis of its redex:

    (((λx.(x x)) ((λy.y) z)) w)
     [1]         [2]

Rendering never affects reduction; RenderOptions is built once from the command line and passed in explicitly.
"""

from dataclasses import dataclass

from termcolor import colored

from lcstep.pure.lexical import Abstraction, Application, Variable, to_plain_string, unwind


DEPTH_COLORS = ["green", "cyan", "blue", "light_green", "light_cyan", "light_blue"]
SUBSTITUTION_HIGHLIGHT = "on_red"


@dataclass(frozen=True)
class RenderOptions:
    color: bool = True
    show_ids: bool = True
    lam: str = "λ"


class Renderer:
    """Renders a term as (display, plain, ids): display may contain ANSI escapes, plain never does, and ids is a list
    of (redex id, position in plain, color) for the id line.
    """

    def __init__(self, options=None):
        self.options = options if options is not None else RenderOptions()

    def paint(self, text, color=None, on_color=None):
        if not self.options.color or (color is None and on_color is None):
            return text
        return colored(text, color, on_color)

    def highlight(self, text, term):
        return self.paint(text, on_color=SUBSTITUTION_HIGHLIGHT) if term.from_substitution else text

    def depth_color(self, depth):
        return DEPTH_COLORS[depth % len(DEPTH_COLORS)]

    def render(self, term, depth=0):
        if isinstance(term, Variable):
            return self.highlight(term.name, term), term.name, []

        elif isinstance(term, Abstraction):
            head = f"{self.options.lam}{term.param}."
            display, plain, ids = self.render(term.body, depth)
            offset = len(head)
            return self.highlight(head, term) + display, head + plain, [(i, pos + offset, c) for i, pos, c in ids]

        elif isinstance(term, Application):
            # the spine is rendered inside out: the innermost Application is the deepest one
            head, apps = unwind(term)
            app_depth = depth + len(apps) - 1
            display, plain, ids = self.wrapped(head, app_depth + 1)

            for app in apps:
                color = self.depth_color(app_depth)
                arg_display, arg_plain, arg_ids = self.wrapped(app.arg, app_depth + 1)

                arg_offset = 1 + len(plain) + 1
                ids = [(i, pos + 1, c) for i, pos, c in ids] + [(i, pos + arg_offset, c) for i, pos, c in arg_ids]
                if app.redex_id is not None:
                    ids.insert(0, (app.redex_id, 0, color))

                display = self.paint("(", color) + display + " " + arg_display + self.paint(")", color)
                plain = f"({plain} {arg_plain})"
                app_depth -= 1
            return display, plain, ids

        raise TypeError(f"not a λ-term: {term!r}")

    def wrapped(self, term, depth):
        """Renders term, parenthesized if it is an Abstraction (see to_plain_string)."""
        display, plain, ids = self.render(term, depth)
        if isinstance(term, Abstraction):
            return f"({display})", f"({plain})", [(i, pos + 1, c) for i, pos, c in ids]
        return display, plain, ids

    def id_line(self, ids):
        """Places "[id]" labels at their positions, each painted in its redex's parenthesis color. A label that would
        overlap the previous one is pushed right.
        """
        line, length = "", 0
        for redex_id, pos, color in sorted(ids, key=lambda entry: entry[1]):
            label = f"[{redex_id}]"
            if pos > length:
                line += " " * (pos - length)
                length = pos
            elif length:
                line += " "
                length += 1
            line += self.paint(label, color)
            length += len(label)
        return line


def render(term, options=None):
    """Display string for term: the colored term, then the redex id line if there are redexes and ids are shown."""
    renderer = Renderer(options)
    display, __, ids = renderer.render(term)
    if renderer.options.show_ids and ids:
        return display + "\n" + renderer.id_line(ids)
    return display


def render_plain(term, lam="λ"):
    return to_plain_string(term, lam)
