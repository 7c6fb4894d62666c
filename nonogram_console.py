"""
Nonogram Console

Plays a puzzle in the terminal. Rows and columns are numbered with single
characters 0-9, A-Z, a-z. Cells are shown as '@' (full), 'X' (empty) and
'.' (unknown); a '*' beside a row or column means it is solved, '?' means
it can no longer be solved.

Usage:
    python nonogram_console.py
    python nonogram_console.py --puzzle puzzles/heart.non --trace
"""

import argparse
import logging
import sys
from typing import Callable, List, Optional

from nonogram_errors import NonogramError
from nonogram_format import (
    INVALID_CHAR,
    SOLVED_CHAR,
    num_as_char,
    num_from_char,
    seq_as_chars,
    state_from_char,
)
from nonogram_model import Move, Puzzle
from nonogram_pattern import TriState
from nonogram_session import GameSession, open_session
from nonogram_settings import config_parser, configure_logging, load_settings, save_settings, settings_from_args

logger = logging.getLogger(__name__)

MENU = "m)ove r)ow c)olumn u)ndo d)redo x)clear s)ave l)oad h)elp q)uit"

HELP = """\
  m  set one cell: row, column, state
  r  set a run of cells in one row: row, first column, last column, state
  c  set a run of cells in one column: column, first row, last row, state
  u  undo the last move
  d  redo the last undone move
  x  clear the grid and the move history
  s  save the moves made so far
  l  load saved moves (replaces the current game)
  q  quit
  states: '@' full, 'X' empty, '.' unknown"""


def alert_char(puzzle: Puzzle, is_row: bool, idx: int) -> str:
    if is_row:
        solved, valid = puzzle.is_row_solved(idx), puzzle.is_row_valid(idx)
    else:
        solved, valid = puzzle.is_col_solved(idx), puzzle.is_col_valid(idx)
    if solved:
        return SOLVED_CHAR
    if not valid:
        return INVALID_CHAR
    return " "


def render(puzzle: Puzzle, show_full_only: bool = False) -> str:
    """Text picture of the puzzle with its clues; show_full_only hides marks."""
    row_nums = [puzzle.row_clue(r) for r in range(puzzle.num_rows)]
    col_nums = [puzzle.col_clue(c) for c in range(puzzle.num_cols)]
    max_row_len = max(len(n) for n in row_nums)
    max_col_len = max(len(n) for n in col_nums)
    indent = " " * (2 * max_row_len + 4)
    rule = indent + "-" * puzzle.num_cols

    out: List[str] = [rule]
    for i in range(max_col_len):
        out.append(indent + "".join(
            num_as_char(nums[i]) if i < len(nums) else " " for nums in col_nums
        ))
    out.append(rule)
    out.append(indent + "".join(alert_char(puzzle, False, c) for c in range(puzzle.num_cols)))
    out.append(indent + "".join(num_as_char(c) for c in range(puzzle.num_cols)))
    out.append("")

    for r, nums in enumerate(row_nums):
        clue = "[" + " ".join(num_as_char(n) for n in nums) + "]"
        pad = " " * (2 * (max_row_len - len(nums)))
        seq = seq_as_chars(puzzle.row_sequence(r), show_full_only)
        out.append(f"{clue}{pad}{alert_char(puzzle, True, r)}{num_as_char(r)} {seq}")
    out.append("")
    return "\n".join(out) + "\n"


class ConsoleApp:
    def __init__(self, session: GameSession, save_path: str,
                 input_fn: Callable[[str], str] = input,
                 output_fn: Callable[[str], None] = print) -> None:
        self.session = session
        self.save_path = save_path
        self.input_fn = input_fn
        self.output_fn = output_fn

    @property
    def puzzle(self) -> Puzzle:
        return self.session.puzzle

    # ---- input helpers ----

    def _ask(self, prompt: str) -> str:
        text = self.input_fn(prompt).strip()
        if not text:
            raise ValueError("no input")
        return text[0]

    def _ask_num(self, prompt: str) -> int:
        return num_from_char(self._ask(prompt))

    def _ask_state(self) -> TriState:
        return state_from_char(self._ask("State (@ X .): "))

    # ---- commands ----

    def _move(self) -> None:
        row = self._ask_num("Row: ")
        col = self._ask_num("Column: ")
        self.session.apply(Move(row, col, self._ask_state()))

    def _row_run(self) -> None:
        row = self._ask_num("Row: ")
        start = self._ask_num("First column: ")
        end = self._ask_num("Last column: ")
        if start > end:
            raise ValueError(f"empty range, first column {start} is after last column {end}")
        state = self._ask_state()
        self.session.apply_many(Move(row, col, state) for col in range(start, end + 1))

    def _col_run(self) -> None:
        col = self._ask_num("Column: ")
        start = self._ask_num("First row: ")
        end = self._ask_num("Last row: ")
        if start > end:
            raise ValueError(f"empty range, first row {start} is after last row {end}")
        state = self._ask_state()
        self.session.apply_many(Move(row, col, state) for row in range(start, end + 1))

    def execute(self, command: str) -> bool:
        """Run one command; False once the user asks to quit."""
        cmd = command.strip()[:1].lower()
        try:
            if cmd == "q":
                return False
            elif cmd == "m":
                self._move()
            elif cmd == "r":
                self._row_run()
            elif cmd == "c":
                self._col_run()
            elif cmd == "u":
                if not self.session.undo():
                    self.output_fn("Nothing to undo.")
            elif cmd == "d":
                if not self.session.redo():
                    self.output_fn("Nothing to redo.")
            elif cmd == "x":
                self.session.clear()
            elif cmd == "s":
                _, msg = self.session.save(self.save_path)
                self.output_fn(msg)
            elif cmd == "l":
                _, msg = self.session.load(self.save_path)
                self.output_fn(msg)
            elif cmd == "h":
                self.output_fn(HELP)
            else:
                self.output_fn(f"Unknown command {command!r}, h for help.")
        except (NonogramError, ValueError) as e:
            self.output_fn(f"Sorry: {e}")
        return True

    def run(self) -> None:
        self.output_fn(render(self.puzzle, self.puzzle.is_solved()))
        while not self.puzzle.is_solved():
            self.output_fn(MENU)
            try:
                keep_going = self.execute(self.input_fn("> "))
            except EOFError:
                break
            if not keep_going:
                break
            self.output_fn(render(self.puzzle, self.puzzle.is_solved()))
        if self.puzzle.is_solved():
            self.output_fn("Solved!")


def main(argv: Optional[List[str]] = None) -> int:
    config = config_parser()
    known, _ = config.parse_known_args(argv)
    settings = load_settings(known.config)
    parser = argparse.ArgumentParser(description="Play a nonogram in the terminal", parents=[config])
    parser.add_argument("--puzzle", default=settings["puzzle_file"], help="puzzle file (.non)")
    parser.add_argument("--save", default=settings["save_file"], help="move log for save/load")
    parser.add_argument("--trace", action="store_true", default=settings["trace"],
                        help="log every cell change")
    args = parser.parse_args(argv)

    configure_logging(args.trace)
    if args.save_config:
        return 0 if save_settings(settings_from_args(settings, args), args.config) else 1

    session, msg = open_session(args.puzzle)
    if session is None:
        logger.error(msg)
        return 1
    logger.info(msg)
    ConsoleApp(session, args.save).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
