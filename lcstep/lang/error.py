"""Error handling for lcstep. Only GenericExceptions should be encountered while stepping through a term: if another
type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import logging
import sys

from termcolor import colored

logger = logging.getLogger(__name__)


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a lcstep error/warning. "{}" placeholders in
    msg are filled with the snippets in exprs, bolded.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]
        super().__init__(msg.format(*exprs))

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

    @property
    def message(self):
        """Uncolored message."""
        return str(self)


class LambdaSyntaxError(GenericException):
    """Raised by the parser when text is not a valid λ-term. position is the 0-based character offset into text where
    parsing failed, and expected describes what the parser was looking for there.
    """

    def __init__(self, msg, text, position, expected=None):
        # msg may quote characters from text, so it is not a template
        super().__init__(msg.replace("{", "{{").replace("}", "}}"), text, start=position, end=position + 1)
        self.text = text
        self.position = position
        self.expected = expected


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report custom lcstep errors/warnings. With
    color=False nothing it prints contains ANSI escapes.
    """
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, stream=None, color=True):
        self.fatal = fatal
        self.stream = stream if stream is not None else sys.stdout
        self.color = color
        self.errors = 0

    @staticmethod
    def paint(text, color, enabled=True):
        return colored(text, color, attrs=["bold"]) if enabled else text

    @staticmethod
    def diagnose(error, warning=False, color=True):
        """Returns offending part of error.expr highlighted and bolded, with a caret line underneath."""
        highlight = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += ErrorHandler.paint(error.expr[error.start:end], highlight, color)
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += ErrorHandler.paint("^" + "~" * (end - error.start - 1), highlight, color)

        return diagnosis

    def _print(self, msg):
        print(msg, file=self.stream)

    def _message(self, error):
        return error.msg if self.color else error.message

    def warn(self, *args, **kwargs):
        """Generates and prints warning message based on args."""
        error = GenericException(*args, **kwargs)
        logger.debug("warning: %s", error)

        self._print(self.paint("warning: ", ErrorHandler.WARNING, self.color) + self._message(error))

        if not error.internal and error.expr and error.diagnosis:
            self._print(ErrorHandler.diagnose(error, warning=True, color=self.color))

    def throw(self, error):
        """Prints error, a GenericException, along with a diagnosis of the offending expr. Exits if self.fatal."""
        self.errors += 1
        logger.debug("error: %s", error)

        error_msg = ""
        if error.internal:
            error_msg += self.paint("[internal] ", ErrorHandler.ERROR, self.color)

        error_msg += self.paint("error: ", ErrorHandler.ERROR, self.color) + self._message(error)
        self._print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            self._print(ErrorHandler.diagnose(error, color=self.color))

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is None:
            return False
        elif getattr(exc_val, "lcstep_reported", False):
            # already reported by an inner handler on its way out
            if self.fatal:
                sys.exit(1)
            do_exit = True
        elif issubclass(exc_type, KeyboardInterrupt):
            self.throw(GenericException("keyboard interrupt", diagnosis=False))
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.throw(GenericException("λ-term is too deeply nested: maximum recursion depth exceeded"))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            exc_val.lcstep_reported = True
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
