import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from nonogram_errors import (
    ClueLengthMismatchError,
    CrossPuzzleReferenceError,
    InconsistentStateError,
    InvalidClueError,
    InvalidConstructionError,
    InvalidStateError,
    LengthMismatchError,
    MalformedMoveLogError,
    MalformedSpecError,
    OutOfBoundsError,
    TooShortError,
)
from nonogram_pattern import MIN_SIZE, ClueSet, StateSeq, TriState, as_states, states_to_str


# (row, col, new_state)
Observer = Callable[[int, int, TriState], None]


# ----------------------------
# Move
# ----------------------------

@dataclass(frozen=True)
class Move:
    """Request to set one cell to one state.

    Not tied to any puzzle; the same move can be replayed on any grid large
    enough to hold it.
    """
    row: int
    col: int
    state: TriState

    def __post_init__(self) -> None:
        for name in ("row", "col"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int) or v < 0:
                raise InvalidConstructionError(f"invalid {name} ({v!r})")
        object.__setattr__(self, "state", TriState.coerce(self.state))

    def to_log_line(self) -> str:
        return f"{self.row} {self.col} {int(self.state)}"

    @classmethod
    def from_log_line(cls, text: str) -> "Move":
        fields = text.split()
        if len(fields) != 3:
            raise MalformedMoveLogError(f"expected 'row col state', got {text!r}")
        try:
            row, col, state = (int(f) for f in fields)
        except ValueError:
            raise MalformedMoveLogError(f"non-integer field in {text!r}") from None
        try:
            return cls(row, col, state)
        except (InvalidConstructionError, InvalidStateError) as e:
            raise MalformedMoveLogError(f"{e} in {text!r}") from e

    def __str__(self) -> str:
        return f"Move({self.row},{self.col},{int(self.state)})"


# ----------------------------
# Cell
# ----------------------------

class Cell:
    """One grid position.

    The state itself lives in the owning puzzle's row-major list, so the
    grid, the row line and the column line all read the same storage.
    """

    __slots__ = ("_puzzle", "_row", "_col", "_index")

    def __init__(self, puzzle: "Puzzle", row: int, col: int,
                 state: Optional[TriState] = None) -> None:
        if puzzle is None:
            raise InvalidConstructionError("puzzle cannot be None")
        if not (0 <= row < puzzle.num_rows):
            raise InvalidConstructionError(f"row invalid, must be 0 <= row < {puzzle.num_rows}")
        if not (0 <= col < puzzle.num_cols):
            raise InvalidConstructionError(f"col invalid, must be 0 <= col < {puzzle.num_cols}")
        self._puzzle = puzzle
        self._row = row
        self._col = col
        self._index = row * puzzle.num_cols + col
        if state is not None:
            self.set_state(state)

    @property
    def puzzle(self) -> "Puzzle":
        return self._puzzle

    @property
    def row(self) -> int:
        return self._row

    @property
    def col(self) -> int:
        return self._col

    @property
    def state(self) -> TriState:
        return self._puzzle._states[self._index]

    def is_full(self) -> bool:
        return self.state == TriState.FULL

    def is_empty(self) -> bool:
        return self.state == TriState.EMPTY

    def is_unknown(self) -> bool:
        return self.state == TriState.UNKNOWN

    def set_state(self, state) -> None:
        self._puzzle._states[self._index] = TriState.coerce(state)

    def set_full(self) -> None:
        self.set_state(TriState.FULL)

    def set_empty(self) -> None:
        self.set_state(TriState.EMPTY)

    def set_unknown(self) -> None:
        self.set_state(TriState.UNKNOWN)

    def __str__(self) -> str:
        return str(self.state)

    def __repr__(self) -> str:
        return f"Cell({self._row},{self._col},{int(self.state)})"


def same_puzzle(cells: Sequence[Cell]) -> bool:
    if not cells:
        return True
    first = cells[0].puzzle
    return all(c.puzzle is first for c in cells)


# ----------------------------
# Line
# ----------------------------

class Line:
    """A row or column: a clue bound to the cells it describes."""

    def __init__(self, clue_set: ClueSet, cells: Sequence[Cell]) -> None:
        if clue_set is None:
            raise InvalidConstructionError("clue_set cannot be None")
        if cells is None:
            raise InvalidConstructionError("cells cannot be None")
        if len(cells) < MIN_SIZE:
            raise TooShortError(f"cells cannot be shorter than {MIN_SIZE}")
        if not same_puzzle(cells):
            raise CrossPuzzleReferenceError("cells must all be from the same puzzle")
        if clue_set.capacity != len(cells):
            raise ClueLengthMismatchError(
                f"clue capacity ({clue_set.capacity}) must match number of cells ({len(cells)})"
            )
        self._clue_set = clue_set
        self._cells = tuple(cells)

    @property
    def clue_set(self) -> ClueSet:
        return self._clue_set

    @property
    def cells(self) -> List[Cell]:
        return list(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def read_sequence(self) -> str:
        seq = "".join(str(c.state) for c in self._cells)
        if len(seq) != self._clue_set.capacity:
            raise InconsistentStateError(
                f"cells sequence length ({len(seq)}) must match clue capacity ({self._clue_set.capacity})"
            )
        return seq

    def write_sequence(self, sequence: StateSeq) -> None:
        """Assign every cell from sequence, left to right.

        The whole sequence is checked before the first cell is touched.
        """
        if sequence is None:
            raise LengthMismatchError("sequence cannot be None")
        states = as_states(sequence)
        if len(states) != len(self._cells):
            raise LengthMismatchError(
                f"sequence length ({len(states)}) must match number of cells ({len(self._cells)})"
            )
        for cell, state in zip(self._cells, states):
            cell.set_state(state)

    def is_valid(self) -> bool:
        return self._clue_set.is_valid(self.read_sequence())

    def is_solved(self) -> bool:
        return self._clue_set.is_solved(self.read_sequence())

    def clue_as_numbers(self) -> List[int]:
        return self._clue_set.runs

    def clue_for_exchange(self) -> str:
        return self._clue_set.format_for_exchange()

    def __str__(self) -> str:
        return self.read_sequence()

    def __repr__(self) -> str:
        return f'Line({self._clue_set},"{self.read_sequence()}")'


# ----------------------------
# Puzzle
# ----------------------------

class Puzzle:
    """A nonogram grid with one Line per row and per column.

    apply() is the single mutation entry point. Observers registered with
    subscribe() are called synchronously after every successful apply().
    An observer that raises does not undo the move or stop the others: every
    observer is still called and the first exception is re-raised afterwards.
    Not thread safe: serialise writers externally, one lock per puzzle.
    """

    def __init__(self, row_clues: Sequence[ClueSet], col_clues: Sequence[ClueSet],
                 logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.num_rows = len(row_clues)
        self.num_cols = len(col_clues)
        if self.num_rows < MIN_SIZE or self.num_cols < MIN_SIZE:
            raise InvalidConstructionError(
                f"grid cannot be smaller than {MIN_SIZE}x{MIN_SIZE} ({self.num_rows}x{self.num_cols})"
            )

        self._states: List[TriState] = [TriState.UNKNOWN] * (self.num_rows * self.num_cols)
        self._observers: List[Observer] = []

        self.cells: List[List[Cell]] = [
            [Cell(self, r, c) for c in range(self.num_cols)] for r in range(self.num_rows)
        ]
        self.rows: List[Line] = [Line(row_clues[r], self.cells[r]) for r in range(self.num_rows)]
        self.cols: List[Line] = [
            Line(col_clues[c], [self.cells[r][c] for r in range(self.num_rows)])
            for c in range(self.num_cols)
        ]

    @classmethod
    def from_spec(cls, width: int, height: int, row_runs: Sequence[Sequence[int]],
                  col_runs: Sequence[Sequence[int]],
                  logger: Optional[logging.Logger] = None) -> "Puzzle":
        for name, v in (("width", width), ("height", height)):
            if isinstance(v, bool) or not isinstance(v, int):
                raise MalformedSpecError(f"non-integer {name} ({v!r})")
            if v < MIN_SIZE:
                raise MalformedSpecError(f"{name} cannot be shorter than {MIN_SIZE}")
        if len(row_runs) != height:
            raise MalformedSpecError(f"incorrect number of rows ({len(row_runs)}), expected {height}")
        if len(col_runs) != width:
            raise MalformedSpecError(f"incorrect number of columns ({len(col_runs)}), expected {width}")

        row_clues = []
        for r, runs in enumerate(row_runs):
            try:
                row_clues.append(ClueSet(runs, width))
            except InvalidClueError as e:
                raise MalformedSpecError(f"row {r}: {e}") from e
        col_clues = []
        for c, runs in enumerate(col_runs):
            try:
                col_clues.append(ClueSet(runs, height))
            except InvalidClueError as e:
                raise MalformedSpecError(f"column {c}: {e}") from e
        return cls(row_clues, col_clues, logger=logger)

    load_from_spec = from_spec

    # ---- bounds ----

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.num_rows and 0 <= c < self.num_cols

    def _check_row(self, row: int) -> None:
        if not (0 <= row < self.num_rows):
            raise OutOfBoundsError(f"row invalid, must be 0 <= row < {self.num_rows} ({row})")

    def _check_col(self, col: int) -> None:
        if not (0 <= col < self.num_cols):
            raise OutOfBoundsError(f"col invalid, must be 0 <= col < {self.num_cols} ({col})")

    # ---- observers ----

    def subscribe(self, callback: Observer) -> None:
        self._observers.append(callback)

    def unsubscribe(self, callback: Observer) -> None:
        self._observers.remove(callback)

    def _notify(self, row: int, col: int, state: TriState) -> None:
        self.logger.debug("notify observers: row=%d col=%d state=%d", row, col, state)
        first_error: Optional[BaseException] = None
        # snapshot: an observer may subscribe/unsubscribe while being notified
        for callback in list(self._observers):
            try:
                callback(row, col, state)
            except Exception as e:
                self.logger.warning("observer %r failed: %s", callback, e)
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    # ---- cell access / mutation ----

    def cell(self, row: int, col: int) -> Cell:
        self._check_row(row)
        self._check_col(col)
        return self.cells[row][col]

    def get_state(self, row: int, col: int) -> TriState:
        return self.cell(row, col).state

    def apply(self, move: Move) -> None:
        if move is None:
            raise InvalidConstructionError("cannot apply a None move")
        self._check_row(move.row)
        self._check_col(move.col)
        if not TriState.is_valid(move.state):
            raise InvalidStateError(f"invalid state ({move.state!r})")
        self.cells[move.row][move.col].set_state(move.state)
        self._notify(move.row, move.col, self.cells[move.row][move.col].state)

    def set_state(self, row: int, col: int, state) -> None:
        # report negative coordinates as out of bounds rather than as a bad Move
        if row < 0 or col < 0:
            self._check_row(row)
            self._check_col(col)
        self.apply(Move(row, col, TriState.coerce(state)))

    def clear_all(self) -> None:
        """Set every cell to UNKNOWN; one notification per cell, row-major."""
        for r in range(self.num_rows):
            for c in range(self.num_cols):
                self.apply(Move(r, c, TriState.UNKNOWN))

    def import_states(self, text: StateSeq) -> None:
        """Overwrite the whole grid from a row-major state string.

        Either every cell is written or none is. No observer is notified.
        """
        if text is None:
            raise LengthMismatchError("state string cannot be None")
        states = as_states(text)
        expected = self.num_rows * self.num_cols
        if len(states) != expected:
            raise LengthMismatchError(f"state string must be {expected} chars long ({len(states)})")
        self._states[:] = states
        self.logger.debug("imported %d cell states", expected)

    import_full_assignment = import_states

    def export_states(self) -> str:
        return states_to_str(self._states)

    # ---- clues and sequences ----

    def row_clue(self, row: int) -> List[int]:
        self._check_row(row)
        return self.rows[row].clue_as_numbers()

    def col_clue(self, col: int) -> List[int]:
        self._check_col(col)
        return self.cols[col].clue_as_numbers()

    def row_sequence(self, row: int) -> str:
        self._check_row(row)
        return self.rows[row].read_sequence()

    def col_sequence(self, col: int) -> str:
        self._check_col(col)
        return self.cols[col].read_sequence()

    # ---- checks ----

    def is_row_valid(self, row: int) -> bool:
        self._check_row(row)
        return self.rows[row].is_valid()

    def is_col_valid(self, col: int) -> bool:
        self._check_col(col)
        return self.cols[col].is_valid()

    def is_row_solved(self, row: int) -> bool:
        self._check_row(row)
        return self.rows[row].is_solved()

    def is_col_solved(self, col: int) -> bool:
        self._check_col(col)
        return self.cols[col].is_solved()

    def is_solved(self) -> bool:
        # per-line only; a self-contradicting clue set simply never solves
        return all(line.is_solved() for line in self.rows) and \
            all(line.is_solved() for line in self.cols)

    def export_as_exchange_format(self) -> str:
        lines = [f"width {self.num_cols}", f"height {self.num_rows}", "", "rows"]
        lines.extend(line.clue_for_exchange() for line in self.rows)
        lines.extend(["", "columns"])
        lines.extend(line.clue_for_exchange() for line in self.cols)
        return "\n".join(lines) + "\n\n"

    def __str__(self) -> str:
        return "\n".join(line.read_sequence() for line in self.rows)
