import os
import sys

import pytest

# Add project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from nonogram_errors import MalformedMoveLogError, MalformedSpecError
from nonogram_format import (
    PuzzleSpec,
    export_spec_text,
    format_move_log,
    load_puzzle_file,
    num_as_char,
    num_from_char,
    parse_move_log,
    parse_puzzle_text,
    read_move_log,
    seq_as_chars,
    state_as_char,
    state_from_char,
    write_move_log,
)
from nonogram_model import Move
from nonogram_pattern import TriState
from tests.sample_puzzles import (
    HEART_FILE,
    HEART_SOLUTION,
    TINY_FILE,
    TINY_COLS,
    TINY_ROWS,
    TINY_SOLUTION,
    TINY_TEXT,
    tiny_puzzle,
)


# ----------------------------
# Puzzle text
# ----------------------------

def test_parse_tiny_text():
    spec = parse_puzzle_text(TINY_TEXT)
    assert (spec.width, spec.height) == (5, 5)
    assert spec.row_runs == TINY_ROWS
    assert spec.col_runs == TINY_COLS
    assert spec.title is None


def test_sections_may_come_before_dimensions():
    text = "rows\n5\n5\n5\n5\n5\ncolumns\n5\n5\n5\n5\n5\nwidth 5\nheight 5\n"
    spec = parse_puzzle_text(text)
    assert spec.build().is_solved() is False


def test_exported_text_parses_back():
    puzzle = tiny_puzzle()
    text = export_spec_text(puzzle)
    spec = parse_puzzle_text(text)
    assert spec.to_text() == text
    assert PuzzleSpec.from_puzzle(puzzle) == spec


@pytest.mark.parametrize("text,match", [
    ("height 5\nrows\n1\n1\n1\n1\n1\ncolumns\n1\n1\n1\n1\n1\n", "missing width"),
    ("width 5\nrows\n1\n1\n1\n1\n1\ncolumns\n1\n1\n1\n1\n1\n", "missing height"),
    ("width 4\nheight 5\n", "width cannot be shorter"),
    ("width five\n", "line 1: non-integer width"),
    ("width 5 6\n", "line 1"),
    (TINY_TEXT.replace("2,2\n5\n", "2,2\n"), "incorrect number of rows"),
    (TINY_TEXT + "1\n", "incorrect number of columns"),
    ("width 5\n1,1\n", "line 2: clue outside"),
    ("width 5\nrows\n0\n", "line 3: nums invalid"),
    ("width 5\nrows\n1,x\n", "line 3: non-integer num"),
    ("width 5\n# comment\n", "line 2: unrecognised"),
    ("width 5\nheight 5\nwidth 6\n", "line 3: duplicate width"),
    ("height 5\nwidth 5\n\nheight 5\n", "line 4: duplicate height"),
])
def test_parse_errors(text, match):
    with pytest.raises(MalformedSpecError, match=match):
        parse_puzzle_text(text)


def test_clue_too_long_for_width_fails_on_build():
    spec = parse_puzzle_text(TINY_TEXT.replace("rows\n3\n", "rows\n3,3\n"))
    with pytest.raises(MalformedSpecError, match="row 0"):
        spec.build()


def test_load_tiny_file():
    spec = load_puzzle_file(TINY_FILE)
    assert spec.title == "Tiny"
    puzzle = spec.build()
    puzzle.import_states(TINY_SOLUTION)
    assert puzzle.is_solved()


def test_load_heart_file_skips_other_directives():
    spec = load_puzzle_file(HEART_FILE)
    assert (spec.width, spec.height, spec.title) == (9, 8, "Heart")
    puzzle = spec.build()
    puzzle.import_states(HEART_SOLUTION)
    assert puzzle.is_solved()


# ----------------------------
# Move log
# ----------------------------

def test_move_log_text():
    moves = [Move(0, 1, TriState.FULL), Move(4, 4, TriState.EMPTY)]
    assert format_move_log(moves) == "0 1 1\n4 4 0\n"
    assert parse_move_log("0 1 1\n\n  4 4 0\n") == moves
    assert parse_move_log("") == []


def test_move_log_error_names_line():
    with pytest.raises(MalformedMoveLogError, match="line 3"):
        parse_move_log("0 0 1\n0 1 1\n0 2\n")


def test_move_log_file(tmp_path):
    path = tmp_path / "moves.txt"
    moves = [Move(r, r, TriState.FULL) for r in range(5)]
    write_move_log(path, moves)
    assert read_move_log(path) == moves


# ----------------------------
# Display characters
# ----------------------------

def test_state_chars():
    assert state_as_char(TriState.FULL) == "@"
    assert state_as_char(0) == "X"
    assert state_from_char(".") is TriState.UNKNOWN
    with pytest.raises(ValueError):
        state_from_char("1")


def test_seq_as_chars():
    assert seq_as_chars("01221") == "X@..@"
    assert seq_as_chars("01221", show_full_only=True) == " @  @"


@pytest.mark.parametrize("i,ch", [(0, "0"), (9, "9"), (10, "A"), (35, "Z"), (36, "a"), (61, "z"), (62, "?")])
def test_num_as_char(i, ch):
    assert num_as_char(i) == ch


def test_num_chars_invert():
    assert all(num_from_char(num_as_char(i)) == i for i in range(62))
    with pytest.raises(ValueError):
        num_from_char("?")
    with pytest.raises(ValueError):
        num_from_char("10")
    with pytest.raises(ValueError):
        num_as_char(-1)
