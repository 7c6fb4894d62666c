"""
Text formats around the nonogram core.

Puzzle files follow the line-oriented .non layout:

    title "Tiny"
    width 5
    height 5

    rows
    2,1
    ...

    columns
    5
    ...

Only width, height, title, rows and columns are interpreted; any other
directive line (catalogue, by, license, goal, ...) is skipped.

Move logs hold one move per line as "row col state".
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from nonogram_errors import MalformedMoveLogError, MalformedSpecError
from nonogram_model import Move, Puzzle
from nonogram_pattern import MIN_SIZE, StateSeq, TriState, as_states, check_runs

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


# ----------------------------
# Puzzle description
# ----------------------------

@dataclass
class PuzzleSpec:
    width: int
    height: int
    row_runs: List[List[int]] = field(default_factory=list)
    col_runs: List[List[int]] = field(default_factory=list)
    title: Optional[str] = None

    def build(self, logger: Optional[logging.Logger] = None) -> Puzzle:
        return Puzzle.from_spec(self.width, self.height, self.row_runs, self.col_runs, logger=logger)

    def to_text(self) -> str:
        lines = [f"width {self.width}", f"height {self.height}", "", "rows"]
        lines.extend(",".join(str(n) for n in runs) for runs in self.row_runs)
        lines.extend(["", "columns"])
        lines.extend(",".join(str(n) for n in runs) for runs in self.col_runs)
        return "\n".join(lines) + "\n\n"

    @classmethod
    def from_puzzle(cls, puzzle: Puzzle, title: Optional[str] = None) -> "PuzzleSpec":
        return cls(
            width=puzzle.num_cols,
            height=puzzle.num_rows,
            row_runs=[puzzle.row_clue(r) for r in range(puzzle.num_rows)],
            col_runs=[puzzle.col_clue(c) for c in range(puzzle.num_cols)],
            title=title,
        )


def _parse_dimension(name: str, line: str, lineno: int) -> int:
    fields = line.split()
    if len(fields) != 2:
        raise MalformedSpecError(f"line {lineno}: expected '{name} <int>', got {line!r}")
    try:
        return int(fields[1])
    except ValueError:
        raise MalformedSpecError(f"line {lineno}: non-integer {name} ({fields[1]})") from None


def _parse_runs(line: str, lineno: int) -> List[int]:
    runs: List[int] = []
    for token in line.split(","):
        token = token.strip()
        try:
            runs.append(int(token))
        except ValueError:
            raise MalformedSpecError(f"line {lineno}: non-integer num ({token!r})") from None
    if not check_runs(runs):
        raise MalformedSpecError(f"line {lineno}: nums invalid ({line!r})")
    return runs


def parse_puzzle_text(text: str) -> PuzzleSpec:
    width: Optional[int] = None
    height: Optional[int] = None
    title: Optional[str] = None
    rows: List[List[int]] = []
    cols: List[List[int]] = []
    section: Optional[List[List[int]]] = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue

        if line[0].isalpha():
            word = line.split()[0].lower()
            if word == "width":
                if width is not None:
                    raise MalformedSpecError(f"line {lineno}: duplicate width")
                width = _parse_dimension("width", line, lineno)
                section = None
            elif word == "height":
                if height is not None:
                    raise MalformedSpecError(f"line {lineno}: duplicate height")
                height = _parse_dimension("height", line, lineno)
                section = None
            elif word == "rows":
                section = rows
            elif word == "columns":
                section = cols
            elif word == "title":
                title = line[len("title"):].strip().strip('"')
                section = None
            else:
                logger.debug("line %d: skipping directive %r", lineno, word)
                section = None
            continue

        if not line[0].isdigit():
            raise MalformedSpecError(f"line {lineno}: unrecognised line ({line!r})")
        if section is None:
            raise MalformedSpecError(f"line {lineno}: clue outside rows/columns section")
        section.append(_parse_runs(line, lineno))

    if width is None:
        raise MalformedSpecError("missing width")
    if height is None:
        raise MalformedSpecError("missing height")
    if width < MIN_SIZE:
        raise MalformedSpecError(f"width cannot be shorter than {MIN_SIZE}")
    if height < MIN_SIZE:
        raise MalformedSpecError(f"height cannot be shorter than {MIN_SIZE}")
    if len(rows) != height:
        raise MalformedSpecError(f"incorrect number of rows ({len(rows)}), expected {height}")
    if len(cols) != width:
        raise MalformedSpecError(f"incorrect number of columns ({len(cols)}), expected {width}")

    return PuzzleSpec(width=width, height=height, row_runs=rows, col_runs=cols, title=title)


def load_puzzle_file(path: PathLike) -> PuzzleSpec:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    spec = parse_puzzle_text(text)
    logger.info("Loaded %dx%d puzzle from %s", spec.width, spec.height, path)
    return spec


def export_spec_text(puzzle: Puzzle) -> str:
    return puzzle.export_as_exchange_format()


# ----------------------------
# Move log
# ----------------------------

def format_move_log(moves: Iterable[Move]) -> str:
    return "".join(m.to_log_line() + "\n" for m in moves)


def parse_move_log(text: str) -> List[Move]:
    moves: List[Move] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        if not raw.strip():
            continue
        try:
            moves.append(Move.from_log_line(raw))
        except MalformedMoveLogError as e:
            raise MalformedMoveLogError(f"line {lineno}: {e}") from e
    return moves


def write_move_log(path: PathLike, moves: Iterable[Move]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(format_move_log(moves))


def read_move_log(path: PathLike) -> List[Move]:
    with open(path, "r", encoding="utf-8") as f:
        return parse_move_log(f.read())


# ----------------------------
# Display characters
# ----------------------------

FULL_CHAR = "@"
EMPTY_CHAR = "X"
UNKNOWN_CHAR = "."
INVALID_CHAR = "?"
SOLVED_CHAR = "*"

_STATE_CHARS = {
    TriState.FULL: FULL_CHAR,
    TriState.EMPTY: EMPTY_CHAR,
    TriState.UNKNOWN: UNKNOWN_CHAR,
}
_CHAR_STATES = {ch: st for st, ch in _STATE_CHARS.items()}

_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def state_as_char(state) -> str:
    return _STATE_CHARS[TriState.coerce(state)]


def state_from_char(ch: str) -> TriState:
    if ch not in _CHAR_STATES:
        raise ValueError(f"invalid state char ({ch!r})")
    return _CHAR_STATES[ch]


def seq_as_chars(seq: StateSeq, show_full_only: bool = False) -> str:
    """Display form of a state sequence; show_full_only blanks all but FULL."""
    out = []
    for s in as_states(seq):
        if show_full_only:
            out.append(FULL_CHAR if s == TriState.FULL else " ")
        else:
            out.append(_STATE_CHARS[s])
    return "".join(out)


def num_as_char(i: int) -> str:
    """Single character for 0..61; '?' beyond that."""
    if i < 0:
        raise ValueError(f"i must be >= 0 ({i})")
    if i < len(_DIGITS):
        return _DIGITS[i]
    return "?"


def num_from_char(ch: str) -> int:
    if len(ch) != 1 or ch not in _DIGITS:
        raise ValueError(f"c must be [0-9A-Za-z] ({ch!r})")
    return _DIGITS.index(ch)
