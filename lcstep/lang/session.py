"""Session control for lcstep. A session holds the term being reduced and every step taken so far, which is what the
engine needs to link a step's substitutions back to the argument they came from.
"""

import logging

from lcstep.lang.error import ErrorHandler, GenericException
from lcstep.pure.lexical import parse
from lcstep.pure.linking import Step, build_linking_chain, get_full_linking_info
from lcstep.pure.reduction import get_redex_count, number_redexes, reduce_step

logger = logging.getLogger(__name__)


class Session:
    """Governs a single interactive reduction: the current term and its history of steps."""

    def __init__(self, error_handler=None):
        self.error_handler = error_handler if error_handler is not None else ErrorHandler(fatal=False)
        self.source = None  # text the current history started from
        self.history = []   # list of Steps, oldest first

    @property
    def loaded(self):
        return bool(self.history)

    @property
    def current(self):
        """Current (numbered) term, or None if nothing is loaded."""
        return self.history[-1].expr if self.history else None

    @property
    def redex_count(self):
        return get_redex_count(self.current) if self.loaded else 0

    @property
    def is_normal_form(self):
        return self.loaded and self.redex_count == 0

    def load(self, text):
        """Parses text and starts a new history with it. Raises LambdaSyntaxError, leaving the session unchanged, if
        text is not a valid λ-term.
        """
        term = number_redexes(parse(text))

        self.source = text.strip()
        self.history = [Step(term)]
        logger.info("loaded %s (%d redexes)", term, self.redex_count)
        return term

    def reduce(self, redex_id):
        """Reduces the redex numbered redex_id in the current term and records the step."""
        if not self.loaded:
            raise GenericException("no λ-term loaded", diagnosis=False)

        count = self.redex_count
        if count == 0:
            raise GenericException("'{}' is in normal form", str(self.current), diagnosis=False)
        if not 1 <= redex_id <= count:
            raise GenericException(f"redex must be between 1 and {count}, got {redex_id}", diagnosis=False)

        term = reduce_step(self.current, redex_id)
        self.history.append(Step(term, redex_id))
        logger.info("step %d: reduced [%d] -> %s", len(self.history) - 1, redex_id, term)
        return term

    def undo(self):
        """Drops the last step. Returns the new current term, or None if there was nothing to undo."""
        if len(self.history) <= 1:
            return None
        self.history.pop()
        logger.debug("undo: back to %s", self.current)
        return self.current

    def reset(self):
        """Forgets the current term and its history."""
        self.source = None
        self.history = []
        logger.debug("session reset")

    def last_linking(self):
        """FullLinkingInfo of the last step, or None if no step has been taken."""
        if len(self.history) < 2:
            return None
        before, after = self.history[-2], self.history[-1]
        return get_full_linking_info(before.expr, after.expr, after.reduced_id)

    def linking_chain(self):
        return build_linking_chain(self.history)
