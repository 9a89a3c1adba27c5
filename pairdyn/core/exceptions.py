# pairdyn/core/exceptions.py
"""Exception hierarchy for pairdyn.

Every error raised on purpose by the library derives from `PairdynError`. The
concrete classes also inherit from the matching built-in exception so that
callers catching `ValueError` or `FloatingPointError` keep working.
"""


class PairdynError(Exception):
    """Base class for all errors raised by pairdyn."""


class ShapeMismatchError(PairdynError, ValueError):
    """Positions and velocities (or forces) do not share the same shape."""


class InvalidParameterError(PairdynError, ValueError):
    """A simulation parameter is outside of its valid range."""


class SingularConfigurationError(PairdynError, FloatingPointError):
    """A force or state evaluation produced NaN or Inf.

    This typically happens when two particles coincide under a potential that
    is singular at zero distance (e.g. Lennard-Jones).

    Attributes:
        step (int | None): The index of the step at which the non-finite value
            was detected, or None if it was detected outside of a run.
    """

    def __init__(self, message: str, step: "int | None" = None):
        super().__init__(message)
        self.step = step
