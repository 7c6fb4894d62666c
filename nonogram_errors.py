"""Exceptions raised by the nonogram core.

Everything derives from NonogramError so front-ends can report any core
failure with a single except clause.
"""


class NonogramError(Exception):
    pass


# ----------------------------
# Construction
# ----------------------------

class InvalidConstructionError(NonogramError, ValueError):
    """A value object was built with arguments breaking its invariants."""


class InvalidClueError(InvalidConstructionError):
    pass


class ClueLengthMismatchError(InvalidConstructionError):
    pass


class CrossPuzzleReferenceError(InvalidConstructionError):
    pass


class TooShortError(InvalidConstructionError):
    pass


# ----------------------------
# Runtime input
# ----------------------------

class OutOfBoundsError(NonogramError, IndexError):
    pass


class LengthMismatchError(NonogramError, ValueError):
    pass


class InvalidCharError(NonogramError, ValueError):
    pass


class InvalidStateError(InvalidCharError):
    pass


class MalformedSpecError(NonogramError, ValueError):
    pass


class MalformedMoveLogError(MalformedSpecError):
    pass


class InconsistentStateError(NonogramError, RuntimeError):
    """Internal invariant broken; should never be seen by callers."""
