# Nonogram Grid Style Definitions

# Cell States
COLOR_FULL = (20, 20, 20)
COLOR_EMPTY = (235, 235, 235)
COLOR_EMPTY_MARK = (150, 60, 60)    # cross drawn in empty cells
COLOR_UNKNOWN = (180, 180, 180)

# Lines and Outlines
COLOR_GRID_LINES = (70, 70, 70)
COLOR_GRID_MAJOR = (10, 10, 10)      # every fifth line
COLOR_HOVER_HIGHLIGHT = (20, 120, 220)

# Clue text
COLOR_TEXT_CLUE = (230, 230, 230)
COLOR_TEXT_SOLVED = (90, 200, 90)
COLOR_TEXT_INVALID = (230, 80, 80)

# Application
COLOR_BG = (30, 30, 30)
