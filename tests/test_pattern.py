import itertools
import json
import os
import re
import sys

import pytest

# Add project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from nonogram_errors import InvalidCharError, InvalidClueError, InvalidStateError, LengthMismatchError
from nonogram_pattern import MIN_SIZE, ClueSet, TriState, as_states, calc_min_length, check_runs

DATA_FILE = os.path.join(os.path.dirname(__file__), 'data', 'line_cases.json')

with open(DATA_FILE, 'r') as f:
    LINE_CASES = json.load(f)


def case_id(case):
    return f"{case['runs']}-{case['sequence']}"


@pytest.mark.parametrize("case", LINE_CASES, ids=case_id)
def test_line_cases(case):
    clue = ClueSet(case['runs'], case['capacity'])
    assert clue.is_valid(case['sequence']) == case['valid']
    assert clue.is_solved(case['sequence']) == case['solved']


def regex_for(runs, block):
    body = "[02]+".join(f"{block}{{{n}}}" for n in runs)
    return re.compile(f"^[02]*{body}[02]*$")


ORACLE_CLUES = [[1], [2], [5], [1, 1], [2, 1], [1, 2], [1, 1, 1], [3, 1]]


@pytest.mark.parametrize("runs", ORACLE_CLUES, ids=str)
def test_matcher_agrees_with_regex(runs):
    clue = ClueSet(runs, 5)
    valid_re = regex_for(runs, "[12]")
    solved_re = regex_for(runs, "1")
    for symbols in itertools.product("012", repeat=5):
        seq = "".join(symbols)
        assert clue.is_valid(seq) == bool(valid_re.match(seq)), seq
        assert clue.is_solved(seq) == bool(solved_re.match(seq)), seq


@pytest.mark.parametrize("runs", ORACLE_CLUES, ids=str)
def test_solved_implies_valid(runs):
    clue = ClueSet(runs, 5)
    for symbols in itertools.product("012", repeat=5):
        seq = "".join(symbols)
        if clue.is_solved(seq):
            assert clue.is_valid(seq), seq


def test_long_line_is_fast_enough():
    clue = ClueSet([1] * 50, 200)
    assert clue.is_valid("2" * 200)
    assert not clue.is_solved("2" * 200)
    assert clue.is_solved("10" * 50 + "0" * 100)


# ----------------------------
# TriState
# ----------------------------

@pytest.mark.parametrize("value,expected", [
    (TriState.FULL, TriState.FULL),
    (0, TriState.EMPTY),
    (2, TriState.UNKNOWN),
    ("1", TriState.FULL),
])
def test_tristate_coerce(value, expected):
    assert TriState.coerce(value) is expected


@pytest.mark.parametrize("value", [3, -1, "3", "x", "11", True, None, 1.0])
def test_tristate_coerce_rejects(value):
    assert not TriState.is_valid(value)
    with pytest.raises(InvalidStateError):
        TriState.coerce(value)


def test_tristate_str_is_digit():
    assert str(TriState.EMPTY) == "0"
    assert str(TriState.UNKNOWN) == "2"


def test_as_states_reports_position():
    with pytest.raises(InvalidCharError, match="position 3"):
        as_states("012x0")


# ----------------------------
# ClueSet construction
# ----------------------------

def test_calc_min_length():
    assert calc_min_length([2, 1]) == 4
    assert calc_min_length([5]) == 5
    assert calc_min_length([1, 1, 1]) == 5


@pytest.mark.parametrize("runs", [[], None, [0], [2, -1], [1.5], [True]])
def test_check_runs_rejects(runs):
    assert not check_runs(runs)


@pytest.mark.parametrize("runs,capacity", [
    ([], 5),
    ([0], 5),
    ([1], MIN_SIZE - 1),
    ([3, 2], 5),
    ([1], "5"),
])
def test_clue_set_rejects(runs, capacity):
    with pytest.raises(InvalidClueError):
        ClueSet(runs, capacity)


def test_clue_set_accessors():
    clue = ClueSet([2, 1], 5)
    assert clue.runs == [2, 1]
    assert clue.capacity == 5
    assert clue.min_length == 4
    assert clue.format_for_exchange() == "2,1"
    assert str(clue) == "[2,1]"
    assert repr(clue) == "ClueSet([2,1], min_length=4, capacity=5)"


def test_clue_set_is_immutable():
    runs = [2, 1]
    clue = ClueSet(runs, 5)
    runs.append(7)
    clue.runs.append(9)
    assert clue.runs == [2, 1]
    with pytest.raises(AttributeError):
        clue.capacity = 6


def test_clue_set_equality():
    assert ClueSet([2, 1], 5) == ClueSet((2, 1), 5)
    assert ClueSet([2, 1], 5) != ClueSet([2, 1], 6)
    assert len({ClueSet([2, 1], 5), ClueSet([2, 1], 5)}) == 1


def test_sequence_length_must_match():
    clue = ClueSet([2, 1], 5)
    with pytest.raises(LengthMismatchError):
        clue.is_valid("2222")
    with pytest.raises(LengthMismatchError):
        clue.is_solved(None)


def test_foreign_symbol_raises():
    with pytest.raises(InvalidCharError):
        ClueSet([2, 1], 5).is_valid("22a22")


def test_accepts_tristate_lists():
    clue = ClueSet([2, 1], 5)
    seq = [TriState.FULL, TriState.FULL, TriState.EMPTY, TriState.FULL, TriState.UNKNOWN]
    assert clue.is_solved(seq)
    assert clue.is_valid_prefix_match(seq)
