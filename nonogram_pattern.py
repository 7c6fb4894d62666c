"""
Cell alphabet and clue matching for nonogram lines.

A clue such as [2, 1] describes the blocks of FULL cells that a row or
column must contain, in order, separated by at least one EMPTY cell. Cell
sequences are written with the digits 0 (EMPTY), 1 (FULL) and 2 (UNKNOWN).

Two questions can be asked of a sequence:

- valid:  could the UNKNOWN cells still be resolved into an arrangement that
          satisfies the clue?  UNKNOWN stands in for both FULL and EMPTY.
- solved: are all the blocks already drawn with FULL cells?  Gaps and slack
          may still be UNKNOWN, they are read as EMPTY.

Both are answered by the same dynamic programme over (cell position, block
index); the only difference is which symbols may form part of a block.
"""

from enum import IntEnum
from typing import Callable, Iterable, List, Sequence, Tuple, Union

from nonogram_errors import (
    InvalidCharError,
    InvalidClueError,
    InvalidStateError,
    LengthMismatchError,
)


MIN_SIZE = 5


class TriState(IntEnum):
    EMPTY = 0
    FULL = 1
    UNKNOWN = 2

    def __str__(self) -> str:
        return str(int(self))

    @classmethod
    def is_valid(cls, value: object) -> bool:
        try:
            cls.coerce(value)
        except InvalidStateError:
            return False
        return True

    @classmethod
    def coerce(cls, value: object) -> "TriState":
        """Accept a member, its integer value or its digit character."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidStateError(f"invalid state ({value!r})")
        if isinstance(value, str):
            if len(value) != 1 or not value.isdigit():
                raise InvalidStateError(f"invalid state ({value!r})")
            value = int(value)
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                pass
        raise InvalidStateError(f"invalid state ({value!r})")


StateSeq = Union[str, Iterable[Union[int, TriState]]]


def as_states(sequence: StateSeq) -> Tuple[TriState, ...]:
    out: List[TriState] = []
    for i, symbol in enumerate(sequence):
        try:
            out.append(TriState.coerce(symbol))
        except InvalidStateError:
            raise InvalidCharError(f"invalid symbol ({symbol!r}) at position {i}") from None
    return tuple(out)


def states_to_str(states: Iterable[TriState]) -> str:
    return "".join(str(int(s)) for s in states)


# ----------------------------
# Clue helpers
# ----------------------------

def check_runs(runs: Sequence[int]) -> bool:
    """True if runs could be a clue: non-empty, every entry a positive int."""
    if runs is None or len(runs) == 0:
        return False
    for r in runs:
        if isinstance(r, bool) or not isinstance(r, int) or r <= 0:
            return False
    return True


def calc_min_length(runs: Sequence[int]) -> int:
    if not check_runs(runs):
        raise InvalidClueError(f"runs invalid ({list(runs) if runs is not None else None})")
    # one gap cell before every block except the first
    return runs[0] + sum(r + 1 for r in runs[1:])


def _can_fill_any(s: TriState) -> bool:
    return s != TriState.EMPTY


def _can_fill_literal(s: TriState) -> bool:
    return s == TriState.FULL


def _place_runs(states: Sequence[TriState], runs: Sequence[int],
                can_fill: Callable[[TriState], bool]) -> bool:
    """Is there a placement of every run consistent with every cell?

    fits[i] for run k holds when runs k.. can be laid out in states[i:].
    Built from the last run backwards so each table only needs the next one.
    """
    n = len(states)
    can_gap = [s != TriState.FULL for s in states]

    # blocked[i]: cells in states[:i] that cannot be part of a block
    blocked = [0] * (n + 1)
    for i, s in enumerate(states):
        blocked[i + 1] = blocked[i] + (0 if can_fill(s) else 1)

    # after the last run only slack is left
    fits = [False] * (n + 1)
    fits[n] = True
    for i in range(n - 1, -1, -1):
        fits[i] = can_gap[i] and fits[i + 1]

    for k in range(len(runs) - 1, -1, -1):
        length = runs[k]
        last = k == len(runs) - 1
        cur = [False] * (n + 1)
        for i in range(n - 1, -1, -1):
            if can_gap[i] and cur[i + 1]:
                cur[i] = True
                continue
            end = i + length
            if end > n or blocked[end] != blocked[i]:
                continue
            if last:
                cur[i] = fits[end]
            elif end < n and can_gap[end]:
                cur[i] = fits[end + 1]
        fits = cur
    return fits[0]


# ----------------------------
# ClueSet
# ----------------------------

class ClueSet:
    """The clue of one line together with the number of cells in that line.

    Immutable once built, so a single instance can be shared by readers.
    """

    __slots__ = ("_runs", "_capacity", "_min_length")

    def __init__(self, runs: Sequence[int], capacity: int) -> None:
        if not check_runs(runs):
            raise InvalidClueError(f"runs invalid ({runs!r})")
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < MIN_SIZE:
            raise InvalidClueError(f"capacity cannot be shorter than {MIN_SIZE} ({capacity!r})")
        min_length = calc_min_length(runs)
        if min_length > capacity:
            raise InvalidClueError(
                f"minimum length of runs ({min_length}) exceeds capacity ({capacity})"
            )
        object.__setattr__(self, "_runs", tuple(runs))
        object.__setattr__(self, "_capacity", capacity)
        object.__setattr__(self, "_min_length", min_length)

    def __setattr__(self, name, value):
        raise AttributeError("ClueSet is immutable")

    @property
    def runs(self) -> List[int]:
        return list(self._runs)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def min_length(self) -> int:
        return self._min_length

    def _checked(self, sequence: StateSeq) -> Tuple[TriState, ...]:
        if sequence is None:
            raise LengthMismatchError("sequence cannot be None")
        states = as_states(sequence)
        if len(states) != self._capacity:
            raise LengthMismatchError(
                f"sequence is incorrect length for clue ({len(states)}!={self._capacity})"
            )
        return states

    def is_valid(self, sequence: StateSeq) -> bool:
        return _place_runs(self._checked(sequence), self._runs, _can_fill_any)

    is_valid_prefix_match = is_valid

    def is_solved(self, sequence: StateSeq) -> bool:
        return _place_runs(self._checked(sequence), self._runs, _can_fill_literal)

    def format_for_exchange(self) -> str:
        return ",".join(str(r) for r in self._runs)

    def __str__(self) -> str:
        return f"[{self.format_for_exchange()}]"

    def __repr__(self) -> str:
        return f"ClueSet({self}, min_length={self._min_length}, capacity={self._capacity})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, ClueSet):
            return NotImplemented
        return self._runs == other._runs and self._capacity == other._capacity

    def __hash__(self) -> int:
        return hash((self._runs, self._capacity))
