"""Capture-avoiding substitution of λ-terms, with provenance tagging.

Given a redex (λvar.M) N, substitute(M, var, N) replaces every free occurence of var in M with a copy of N. Copies are
tagged with from_substitution/source_id so later steps can tell where they came from. Bound variables of M that would
capture a free variable of N are renamed first (alpha conversion), so the result is always alpha-equivalent to the
textbook definition.
"""

import logging

from lcstep.pure.lexical import Abstraction, Application, Variable, rebuild, unwind

logger = logging.getLogger(__name__)


def free_variables(term):
    """Set of variable names with an unbound occurence in term."""
    if isinstance(term, Variable):
        return {term.name}
    elif isinstance(term, Abstraction):
        return free_variables(term.body) - {term.param}
    elif isinstance(term, Application):
        head, apps = unwind(term)
        names = free_variables(head)
        for app in apps:
            names |= free_variables(app.arg)
        return names
    raise TypeError(f"not a λ-term: {term!r}")


def fresh_name(base, avoid):
    """Returns base with as many trailing primes as needed for it not to be in avoid."""
    name = base
    while name in avoid:
        name += "'"
    return name


def _stamp(term, mark, source_id):
    """(from_substitution, source_id) of a copy of term. An existing mark from an earlier substitution is kept."""
    if term.from_substitution and term.source_id is not None:
        return True, term.source_id
    return mark or term.from_substitution, source_id if source_id is not None else term.source_id


def clone(term, mark=False, source_id=None):
    """Copies term, marking every node as substituted if mark and stamping source_id where no earlier substitution
    already applies. Redex ids are copied as they are.
    """
    if isinstance(term, Variable):
        return Variable(term.name, *_stamp(term, mark, source_id))
    elif isinstance(term, Abstraction):
        return Abstraction(term.param, clone(term.body, mark, source_id), *_stamp(term, mark, source_id))
    elif isinstance(term, Application):
        head, apps = unwind(term)
        copy = clone(head, mark, source_id)
        for app in apps:
            copy = Application(copy, clone(app.arg, mark, source_id), app.redex_id, *_stamp(app, mark, source_id))
        return copy
    raise TypeError(f"not a λ-term: {term!r}")


def substitute(term, var, replacement, mark_as_substituted=True, source_id=None):
    """Returns term with every free occurence of var replaced by a clone of replacement. Subtrees without a free var
    are shared with term rather than copied.
    """
    if isinstance(term, Variable):
        if term.name == var:
            return clone(replacement, mark_as_substituted, source_id)
        return term

    elif isinstance(term, Abstraction):
        if term.param == var:
            return term  # var is shadowed: nothing below is free

        param, body = term.param, term.body
        replacement_free = free_variables(replacement)
        if param in replacement_free:
            # param would capture a free variable of replacement, so rename it first
            new_param = fresh_name(param, replacement_free | free_variables(body) | {var})
            logger.debug("renaming bound variable %s to %s to avoid capture", param, new_param)
            body = substitute(body, param, Variable(new_param), False, None)
            param = new_param

        new_body = substitute(body, var, replacement, mark_as_substituted, source_id)
        if param == term.param and new_body is term.body:
            return term
        return Abstraction(param, new_body, term.from_substitution, term.source_id)

    elif isinstance(term, Application):
        head, apps = unwind(term)
        func = substitute(head, var, replacement, mark_as_substituted, source_id)
        for app in apps:
            arg = substitute(app.arg, var, replacement, mark_as_substituted, source_id)
            func = rebuild(app, func, arg, app.redex_id)
        return func

    raise TypeError(f"not a λ-term: {term!r}")
