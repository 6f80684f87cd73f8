"""Linking: tracing substitutions across reduction steps.

Reducing (λp.M) N leaves zero or more copies of N behind, one for each free occurence of p in M. The copies are tagged
with the id of the redex that produced them (see substitution.clone), so given the term before the step and the term
after it, the functions below answer "where did N end up?":

    source argument N  ->  occurences of p in M  ->  substituted copies of N

Lookups never raise: an id that is not found simply has nothing linked to it.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, NamedTuple, Optional

from lcstep.pure.lexical import Abstraction, Application, LambdaTerm, Variable, unwind
from lcstep.pure.reduction import is_redex


class Step(NamedTuple):
    expr: LambdaTerm
    reduced_id: Optional[int] = None


@dataclass(frozen=True)
class LinkingInfo:
    source_arg: Optional[LambdaTerm]
    substituted_nodes: List[LambdaTerm]
    source_id: int
    has_substitutions: bool
    was_used: bool


@dataclass(frozen=True)
class FullLinkingInfo(LinkingInfo):
    redex: Optional[Application] = None
    parameter_uses: List[Variable] = field(default_factory=list)


@dataclass(frozen=True)
class LinkedStep:
    expr: LambdaTerm
    reduced_id: Optional[int]
    linking_info: Optional[LinkingInfo]


def variable_appears_in(term, var):
    """Whether or not var occurs free in term. An Abstraction binding var hides its body."""
    if isinstance(term, Variable):
        return term.name == var
    elif isinstance(term, Abstraction):
        return term.param != var and variable_appears_in(term.body, var)
    elif isinstance(term, Application):
        head, apps = unwind(term)
        return variable_appears_in(head, var) or any(variable_appears_in(app.arg, var) for app in apps)
    raise TypeError(f"not a λ-term: {term!r}")


def is_argument_used(redex):
    """Whether or not reducing redex keeps at least one copy of its argument. False if redex is not a redex."""
    if not is_redex(redex):
        return False
    return variable_appears_in(redex.func.body, redex.func.param)


def find_variable_uses(term, var):
    """All free occurences of var in term, as Variable nodes, in pre-order."""
    uses = []

    def traverse(node):
        if isinstance(node, Variable):
            if node.name == var:
                uses.append(node)
        elif isinstance(node, Abstraction):
            if node.param != var:
                traverse(node.body)
        elif isinstance(node, Application):
            head, apps = unwind(node)
            traverse(head)
            for app in apps:
                traverse(app.arg)

    traverse(term)
    return uses


def get_parameter_uses(redex):
    """The Variables in redex's abstraction body that reducing redex will replace."""
    if not is_redex(redex):
        return []
    return find_variable_uses(redex.func.body, redex.func.param)


def get_substitutions(term) -> Dict[Optional[int], List[LambdaTerm]]:
    """Outermost substituted subtrees of term grouped by source_id. Marked nodes inside an already reported subtree are
    not reported again.
    """
    substitutions = {}

    def report(node, in_substitution):
        if node.from_substitution and not in_substitution:
            substitutions.setdefault(node.source_id, []).append(node)
            return True
        return in_substitution

    def traverse(node, in_substitution=False):
        if isinstance(node, Application):
            head, apps = unwind(node)
            # pre-order visits the spine from the outermost Application inwards
            covered = []
            for app in reversed(apps):
                in_substitution = report(app, in_substitution)
                covered.append(in_substitution)
            covered.reverse()

            traverse(head, in_substitution)
            for app, app_covered in zip(apps, covered):
                traverse(app.arg, app_covered)
            return

        in_substitution = report(node, in_substitution)
        if isinstance(node, Abstraction):
            traverse(node.body, in_substitution)

    traverse(term)
    return substitutions


def get_redex(term, redex_id):
    """The redex numbered redex_id in term, or None."""

    def find(node):
        if isinstance(node, Abstraction):
            return find(node.body)
        elif isinstance(node, Application):
            head, apps = unwind(node)
            if apps[0].redex_id == redex_id and is_redex(apps[0]):
                return apps[0]
            for child in [head] + [app.arg for app in apps]:
                found = find(child)
                if found is not None:
                    return found
        return None

    return find(term)


def get_redex_arg(term, redex_id):
    """The argument of the redex numbered redex_id in term, or None."""
    redex = get_redex(term, redex_id)
    return redex.arg if redex is not None else None


def get_linking_info(before, after, reduced_id):
    """Links the argument of redex reduced_id in before (the numbered term that was reduced) to its copies in after."""
    redex = get_redex(before, reduced_id)
    substituted_nodes = get_substitutions(after).get(reduced_id, [])

    return LinkingInfo(
        source_arg=redex.arg if redex is not None else None,
        substituted_nodes=substituted_nodes,
        source_id=reduced_id,
        has_substitutions=len(substituted_nodes) > 0,
        was_used=is_argument_used(redex) if redex is not None else False,
    )


def get_full_linking_info(before, after, reduced_id):
    """Like get_linking_info, plus the redex itself and the parameter occurences its argument replaced."""
    info = get_linking_info(before, after, reduced_id)
    redex = get_redex(before, reduced_id)

    return FullLinkingInfo(
        source_arg=info.source_arg,
        substituted_nodes=info.substituted_nodes,
        source_id=info.source_id,
        has_substitutions=info.has_substitutions,
        was_used=info.was_used,
        redex=redex,
        parameter_uses=get_parameter_uses(redex) if redex is not None else [],
    )


def as_step(step):
    """Step from a Step, an (expr, reduced_id) sequence or a mapping with "expr" and optionally "reduced_id" keys."""
    if isinstance(step, Mapping):
        step = Step(step["expr"], step.get("reduced_id"))
    else:
        step = Step(*step)
    if not isinstance(step.expr, LambdaTerm):
        raise TypeError(f"step expr is not a λ-term: {step.expr!r}")
    return step


def build_linking_chain(steps):
    """Adds linking info to a sequence of steps (see as_step). Each step is linked against the one before it; the
    first step, and any step without a reduced_id, has nothing to link.
    """
    steps = [as_step(step) for step in steps]
    chain = []

    for idx, step in enumerate(steps):
        linking_info = None
        if idx > 0 and step.reduced_id is not None:
            linking_info = get_linking_info(steps[idx - 1].expr, step.expr, step.reduced_id)
        chain.append(LinkedStep(step.expr, step.reduced_id, linking_info))

    return chain
