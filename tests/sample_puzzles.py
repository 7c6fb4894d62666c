import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from nonogram_model import Puzzle

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

TINY_FILE = os.path.join(PROJECT_ROOT, 'puzzles', 'tiny.non')
HEART_FILE = os.path.join(PROJECT_ROOT, 'puzzles', 'heart.non')

TINY_ROWS = [[3], [2, 2], [5], [1, 1], [2, 2]]
TINY_COLS = [[2, 1], [5], [1, 1], [5], [2, 1]]
TINY_SOLUTION = "01110" "11011" "11111" "01010" "11011"

HEART_SOLUTION = (
    "011000110"
    "111101111"
    "111111111"
    "111111111"
    "011111110"
    "001111100"
    "000111000"
    "000010000"
)

TINY_TEXT = """width 5
height 5

rows
3
2,2
5
1,1
2,2

columns
2,1
5
1,1
5
2,1

"""


def tiny_puzzle(logger=None) -> Puzzle:
    return Puzzle.from_spec(5, 5, TINY_ROWS, TINY_COLS, logger=logger)


def all_five_puzzle() -> Puzzle:
    return Puzzle.from_spec(5, 5, [[5]] * 5, [[5]] * 5)
