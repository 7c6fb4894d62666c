"""
Play session shared by the console and pygame front-ends.

Keeps the list of moves made so far on top of a Puzzle so that moves can be
undone, redone, saved to a move log and replayed from one. Undo rebuilds the
grid by clearing it and replaying the remaining history.

File problems are returned as (ok, message) pairs for the front-end to show;
they never raise.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from nonogram_errors import InvalidConstructionError, NonogramError, OutOfBoundsError
from nonogram_format import PuzzleSpec, load_puzzle_file, read_move_log, write_move_log
from nonogram_model import Move, Puzzle
from nonogram_pattern import TriState

logger = logging.getLogger(__name__)

# click order offered to the user; the core itself allows any transition
STATE_CYCLE = [TriState.UNKNOWN, TriState.FULL, TriState.EMPTY]


def next_state(state: TriState, forward: bool = True) -> TriState:
    cycle = STATE_CYCLE if forward else list(reversed(STATE_CYCLE))
    idx = cycle.index(TriState.coerce(state))
    return cycle[(idx + 1) % len(cycle)]


class GameSession:
    def __init__(self, spec: PuzzleSpec, logger: Optional[logging.Logger] = None) -> None:
        self.spec = spec
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.puzzle: Puzzle = spec.build(logger=self.logger)
        self.history: List[Move] = []
        self.redo_stack: List[Move] = []

    @property
    def title(self) -> str:
        return self.spec.title or f"{self.spec.width}x{self.spec.height}"

    def _check_moves(self, moves: List[Move]) -> None:
        for m in moves:
            if m is None:
                raise InvalidConstructionError("cannot apply a None move")
            if not self.puzzle.in_bounds(m.row, m.col):
                raise OutOfBoundsError(
                    f"{m} outside {self.puzzle.num_rows}x{self.puzzle.num_cols} grid"
                )

    def apply(self, move: Move) -> None:
        self._check_moves([move])
        # past the checks the cell is set even if an observer raises
        try:
            self.puzzle.apply(move)
        finally:
            self.history.append(move)
            self.redo_stack.clear()

    def apply_many(self, moves: Iterable[Move]) -> None:
        """Apply a batch; nothing is applied if any move is off the grid."""
        moves = list(moves)
        self._check_moves(moves)
        for m in moves:
            self.apply(m)

    def cycle(self, row: int, col: int, forward: bool = True) -> Move:
        move = Move(row, col, next_state(self.puzzle.get_state(row, col), forward))
        self.apply(move)
        return move

    def _replay(self) -> None:
        self.puzzle.clear_all()
        for m in self.history:
            self.puzzle.apply(m)

    def undo(self) -> bool:
        if not self.history:
            return False
        self.redo_stack.append(self.history.pop())
        self._replay()
        self.logger.debug("undo: %d moves left", len(self.history))
        return True

    def redo(self) -> bool:
        if not self.redo_stack:
            return False
        move = self.redo_stack.pop()
        try:
            self.puzzle.apply(move)
        finally:
            self.history.append(move)
        return True

    def clear(self) -> None:
        self.puzzle.clear_all()
        self.history.clear()
        self.redo_stack.clear()

    def save(self, path: Union[str, Path]) -> Tuple[bool, str]:
        try:
            write_move_log(path, self.history)
        except OSError as e:
            self.logger.warning("Save failed: %s", e)
            return False, f"Save failed: {e}"
        self.logger.info("Saved %d moves to %s", len(self.history), path)
        return True, f"Game saved to {path}"

    def load(self, path: Union[str, Path]) -> Tuple[bool, str]:
        """Replace the game with the moves in a saved log, replayed in order."""
        try:
            moves = read_move_log(path)
            self._check_moves(moves)
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning("Load failed: %s", e)
            return False, f"Load failed: {e}"
        except NonogramError as e:
            self.logger.warning("Load failed: %s", e)
            return False, f"Load failed: {e}"

        self.history = moves
        self.redo_stack.clear()
        self._replay()
        self.logger.info("Replayed %d moves from %s", len(moves), path)
        return True, f"Game loaded from {path}"


def open_session(path: Union[str, Path],
                 logger: Optional[logging.Logger] = None) -> Tuple[Optional[GameSession], str]:
    try:
        spec = load_puzzle_file(path)
        session = GameSession(spec, logger=logger)
    except (OSError, UnicodeDecodeError) as e:
        return None, f"Cannot read puzzle {path}: {e}"
    except NonogramError as e:
        return None, f"Bad puzzle file {path}: {e}"
    return session, f"Loaded {session.title} from {path}"
