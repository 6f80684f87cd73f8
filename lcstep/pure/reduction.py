"""Redex enumeration and single-step beta reduction.

No reduction strategy is imposed: number_redexes gives every redex of a term an id, and the caller picks which one
reduce_at rewrites. Ids are positional, so any reduction invalidates them and the result has to be numbered again.
"""

import logging
from typing import NamedTuple

from lcstep.pure.lexical import Abstraction, Application, LambdaTerm, Variable, rebuild, unwind
from lcstep.pure.substitution import substitute

logger = logging.getLogger(__name__)


class Redex(NamedTuple):
    id: int
    node: LambdaTerm


def is_redex(term):
    """Whether or not term is an Application whose func is an Abstraction."""
    return isinstance(term, Application) and isinstance(term.func, Abstraction)


def _number(term, next_id):
    """Pre-order numbering (func before arg). Returns (numbered term, next unused id)."""
    if isinstance(term, Variable):
        return term, next_id

    elif isinstance(term, Abstraction):
        body, next_id = _number(term.body, next_id)
        if body is term.body:
            return term, next_id
        return Abstraction(term.param, body, term.from_substitution, term.source_id), next_id

    elif isinstance(term, Application):
        # only the innermost Application of a spine can have an Abstraction as func
        head, apps = unwind(term)
        redex_id = None
        if is_redex(apps[0]):
            redex_id, next_id = next_id, next_id + 1

        func, next_id = _number(head, next_id)
        for app in apps:
            arg, next_id = _number(app.arg, next_id)
            func = rebuild(app, func, arg, redex_id if app is apps[0] else None)
        return func, next_id

    raise TypeError(f"not a λ-term: {term!r}")


def number_redexes(term):
    """Returns term with redex ids 1, 2, ... assigned to its redexes in pre-order. Other Applications get None."""
    numbered, __ = _number(term, 1)
    return numbered


def _reduce(term, target_id):
    """Returns (term with the first redex numbered target_id reduced, whether it was found)."""
    if isinstance(term, Variable):
        return term, False

    elif isinstance(term, Abstraction):
        body, found = _reduce(term.body, target_id)
        if not found:
            return term, False
        return Abstraction(term.param, body, term.from_substitution, term.source_id), True

    elif isinstance(term, Application):
        head, apps = unwind(term)
        innermost = apps[0]
        if innermost.redex_id == target_id and is_redex(innermost):
            logger.debug("β-reducing redex [%s]: %s", target_id, innermost)
            func, found = substitute(head.body, head.param, innermost.arg, True, target_id), True
            apps = apps[1:]
        else:
            func, found = _reduce(head, target_id)

        for app in apps:
            arg = app.arg
            if not found:
                arg, found = _reduce(arg, target_id)
            func = rebuild(app, func, arg, app.redex_id)
        return func, found

    raise TypeError(f"not a λ-term: {term!r}")


def reduce_at(term, target_id):
    """Beta-reduces the redex numbered target_id. If there is no such redex, term itself is returned: a redex that
    vanished because of an earlier rewrite is not an error.
    """
    reduced, found = _reduce(term, target_id)
    if not found:
        logger.debug("no redex [%s] in %s, nothing to reduce", target_id, term)
    return reduced


def clear_substitution_marks(term):
    """Returns term with every from_substitution/source_id reset. Redex ids are kept."""
    if isinstance(term, Variable):
        return Variable(term.name)
    elif isinstance(term, Abstraction):
        return Abstraction(term.param, clear_substitution_marks(term.body))
    elif isinstance(term, Application):
        head, apps = unwind(term)
        cleared = clear_substitution_marks(head)
        for app in apps:
            cleared = Application(cleared, clear_substitution_marks(app.arg), app.redex_id)
        return cleared
    raise TypeError(f"not a λ-term: {term!r}")


def reduce_step(term, redex_id):
    """One interactive step: starts a new provenance epoch, reduces redex_id and numbers the result. redex_id refers
    to the numbering of term, which must be current.
    """
    numbered = number_redexes(clear_substitution_marks(term))
    return number_redexes(reduce_at(numbered, redex_id))


def get_redexes(term):
    """List of Redex(id, node) for every redex in term, in pre-order."""
    redexes = []

    def traverse(node):
        if isinstance(node, Abstraction):
            traverse(node.body)
        elif isinstance(node, Application):
            head, apps = unwind(node)
            if is_redex(apps[0]):
                redexes.append(Redex(apps[0].redex_id, apps[0]))
            traverse(head)
            for app in apps:
                traverse(app.arg)

    traverse(term)
    return redexes


def get_redex_count(term):
    """Number of redexes in term."""
    return len(get_redexes(term))


def is_normal_form(term):
    """Whether or not term has no redexes left."""
    return get_redex_count(term) == 0
