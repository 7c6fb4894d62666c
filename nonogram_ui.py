"""
Nonogram Assistant (Pygame)

Features:
- Play a puzzle loaded from a .non file, clues drawn around the grid.
- Clues turn green when their line is solved and red once it cannot be.
- Undo / Redo / Clear, Save and Load of the move log.

Controls:
- Left click: cycle Unknown -> Full -> Empty -> Unknown
- Right click: mark the cell Empty
- Shift + left click: fill the box from the last clicked cell with its state
- Drag with LMB or MMB: pan; mouse wheel: zoom
- Ctrl+Z / Ctrl+Y: undo / redo
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Tuple, Optional, List

import pygame
import pygame_gui

from nonogram_drawing import Camera, draw_puzzle, pick_cell_from_mouse, clue_margins, cells_in_rect
from nonogram_errors import NonogramError
from nonogram_model import Move
from nonogram_pattern import TriState
from nonogram_session import GameSession, open_session
from nonogram_settings import config_parser, configure_logging, load_settings, save_settings, settings_from_args
import grid_style

logger = logging.getLogger(__name__)

DRAG_THRESHOLD_PX = 6
MAX_LOG_LINES = 100


# ----------------------------
# App state
# ----------------------------

@dataclass
class MainState:
    session: GameSession
    save_path: str
    anchor: Optional[Tuple[int, int]] = None
    hover: Optional[Tuple[int, int]] = None
    check_solved: bool = True
    announced_solved: bool = False

    def on_cell_changed(self, row: int, col: int, state: TriState) -> None:
        # puzzle observer; the solved check runs once per frame
        self.check_solved = True


def html_escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
         .replace("<", "&lt;")
         .replace(">", "&gt;")
         .replace('"', "&quot;")
         .replace("'", "&#39;")
    )


def parse_args(argv: Optional[List[str]] = None) -> Tuple[argparse.Namespace, dict]:
    config = config_parser()
    known, _ = config.parse_known_args(argv)
    settings = load_settings(known.config)
    parser = argparse.ArgumentParser(description="Nonogram assistant (pygame)", parents=[config])
    parser.add_argument("--puzzle", default=settings["puzzle_file"], help="puzzle file (.non)")
    parser.add_argument("--save", default=settings["save_file"], help="move log for save/load")
    parser.add_argument("--cell-size", type=int, default=settings["cell_size"])
    parser.add_argument("--trace", action="store_true", default=settings["trace"],
                        help="log every cell change")
    return parser.parse_args(argv), settings


# ----------------------------
# Main
# ----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    args, settings = parse_args(argv)
    configure_logging(args.trace)
    if args.save_config:
        return 0 if save_settings(settings_from_args(settings, args), args.config) else 1

    session, msg = open_session(args.puzzle)
    if session is None:
        logger.error(msg)
        return 1

    state = MainState(session=session, save_path=args.save)
    session.puzzle.subscribe(state.on_cell_changed)

    pygame.init()
    pygame.display.set_caption(f"Nonogram - {session.title}")

    screen = pygame.display.set_mode((1200, 800), pygame.RESIZABLE)
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("arial", 18)

    ui_manager = pygame_gui.UIManager(screen.get_size())

    controls_win = pygame_gui.elements.UIWindow(
        pygame.Rect(20, 20, 200, 330),
        ui_manager,
        window_display_title="Controls",
        resizable=True
    )
    controls_win.close_window_button.hide()
    log_win = pygame_gui.elements.UIWindow(
        pygame.Rect(20, 370, 420, 300),
        ui_manager,
        window_display_title="Log",
        resizable=True
    )
    log_win.close_window_button.hide()

    btn_undo = pygame_gui.elements.UIButton(pygame.Rect(10, 10, 170, 34), "Undo", ui_manager, container=controls_win)
    btn_redo = pygame_gui.elements.UIButton(pygame.Rect(10, 50, 170, 34), "Redo", ui_manager, container=controls_win)
    btn_clear = pygame_gui.elements.UIButton(pygame.Rect(10, 90, 170, 34), "Clear", ui_manager, container=controls_win)
    btn_save = pygame_gui.elements.UIButton(pygame.Rect(10, 130, 170, 34), "Save Moves", ui_manager, container=controls_win)
    btn_load = pygame_gui.elements.UIButton(pygame.Rect(10, 170, 170, 34), "Load Moves", ui_manager, container=controls_win)
    pygame_gui.elements.UILabel(
        pygame.Rect(10, 214, 170, 60),
        "LMB: cycle, RMB: empty",
        ui_manager,
        container=controls_win
    )

    log_box = pygame_gui.elements.UITextBox(
        html_text="",
        relative_rect=pygame.Rect(10, 10, 400, 200),
        manager=ui_manager,
        container=log_win,
        anchors={"left": "left", "right": "right", "top": "top", "bottom": "bottom"}
    )
    btn_clear_log = pygame_gui.elements.UIButton(
        pygame.Rect(10, -40, 120, 30),
        "Clear",
        ui_manager,
        container=log_win,
        anchors={"left": "left", "bottom": "bottom"}
    )

    log_lines: List[str] = []

    def log_append(msg: str) -> None:
        if not msg:
            return
        logger.info(msg)
        log_lines.extend(ln.strip() for ln in msg.splitlines() if ln.strip())
        if len(log_lines) > MAX_LOG_LINES:
            del log_lines[0:len(log_lines) - MAX_LOG_LINES]
        log_box.set_text("<br>".join(html_escape(ln) for ln in log_lines))
        if log_box.scroll_bar is not None:
            log_box.scroll_bar.set_scroll_from_start_percentage(1.0)

    camera = Camera()
    base_cell_size = args.cell_size

    def center_camera() -> None:
        puzzle = state.session.puzzle
        left, top = clue_margins(puzzle)
        sw, sh = screen.get_size()
        grid_w = puzzle.num_cols * base_cell_size
        grid_h = puzzle.num_rows * base_cell_size
        camera.zoom = 1.0
        # leave room for the clues on the left and above
        camera.offset_x = (sw - grid_w) * 0.5 + left * base_cell_size * 0.35
        camera.offset_y = (sh - grid_h) * 0.5 + top * base_cell_size * 0.25

    def is_over_ui(pos: Tuple[int, int]) -> bool:
        for w in (controls_win, log_win):
            if w.visible and w.get_abs_rect().collidepoint(pos):
                return True
        return False

    def guarded(action, *a) -> None:
        try:
            action(*a)
        except NonogramError as e:
            log_append(f"Rejected: {e}")

    def click_cell(cell: Tuple[int, int], shift: bool) -> None:
        puzzle = state.session.puzzle
        if shift and state.anchor is not None:
            fill = puzzle.get_state(*state.anchor)
            moves = [Move(r, c, fill) for r, c in cells_in_rect(puzzle, state.anchor, cell)]
            guarded(state.session.apply_many, moves)
            return
        guarded(state.session.cycle, cell[0], cell[1])
        state.anchor = cell

    center_camera()
    log_append(f"Loaded {session.title} ({session.puzzle.num_cols}x{session.puzzle.num_rows}).")

    panning = False
    pan_last: Optional[Tuple[int, int]] = None
    lmb_down_pos: Optional[Tuple[int, int]] = None
    lmb_dragging = False
    lmb_down_over_ui = False

    running = True
    while running:
        time_delta = clock.tick(60) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                break

            if event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode(event.size, pygame.RESIZABLE)
                ui_manager.set_window_resolution(event.size)

            ui_manager.process_events(event)

            if event.type == pygame_gui.UI_BUTTON_PRESSED:
                if event.ui_element == btn_clear_log:
                    log_lines.clear()
                    log_box.set_text("")
                elif event.ui_element == btn_undo:
                    if not state.session.undo():
                        log_append("Nothing to undo.")
                elif event.ui_element == btn_redo:
                    if not state.session.redo():
                        log_append("Nothing to redo.")
                elif event.ui_element == btn_clear:
                    state.session.clear()
                    state.anchor = None
                    state.announced_solved = False
                    log_append("Grid cleared.")
                elif event.ui_element == btn_save:
                    _, msg = state.session.save(state.save_path)
                    log_append(msg)
                elif event.ui_element == btn_load:
                    _, msg = state.session.load(state.save_path)
                    log_append(msg)

            if event.type == pygame.KEYDOWN and event.mod & pygame.KMOD_CTRL:
                if event.key == pygame.K_z:
                    state.session.undo()
                elif event.key == pygame.K_y:
                    state.session.redo()

            if event.type == pygame.MOUSEWHEEL:
                if not is_over_ui(pygame.mouse.get_pos()):
                    if event.y > 0:
                        camera.zoom_at(pygame.mouse.get_pos(), 1.1, 0.2, 6.0)
                    elif event.y < 0:
                        camera.zoom_at(pygame.mouse.get_pos(), 1.0 / 1.1, 0.2, 6.0)

            if event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 2 and not is_over_ui(event.pos):
                    panning = True
                    pan_last = event.pos

                if event.button == 1:
                    lmb_down_pos = event.pos
                    lmb_dragging = False
                    lmb_down_over_ui = is_over_ui(event.pos)
                    if not lmb_down_over_ui:
                        pan_last = event.pos
                        panning = False

                if event.button == 3 and not is_over_ui(event.pos):
                    cell = pick_cell_from_mouse(state.session.puzzle, camera, base_cell_size, event.pos)
                    if cell is not None:
                        guarded(state.session.apply, Move(cell[0], cell[1], TriState.EMPTY))
                        state.anchor = cell

            if event.type == pygame.MOUSEMOTION:
                state.hover = pick_cell_from_mouse(state.session.puzzle, camera, base_cell_size, event.pos)
                if panning and pan_last is not None:
                    camera.offset_x += event.pos[0] - pan_last[0]
                    camera.offset_y += event.pos[1] - pan_last[1]
                    pan_last = event.pos

                if lmb_down_pos is not None and not lmb_down_over_ui and not lmb_dragging:
                    sx, sy = lmb_down_pos
                    if abs(event.pos[0] - sx) >= DRAG_THRESHOLD_PX or abs(event.pos[1] - sy) >= DRAG_THRESHOLD_PX:
                        lmb_dragging = True
                        panning = True
                        pan_last = event.pos

            if event.type == pygame.MOUSEBUTTONUP:
                if event.button == 2:
                    panning = False
                    pan_last = None

                if event.button == 1:
                    if lmb_down_pos is not None and not lmb_down_over_ui and not lmb_dragging:
                        cell = pick_cell_from_mouse(state.session.puzzle, camera, base_cell_size, event.pos)
                        if cell is not None:
                            shift = bool(pygame.key.get_mods() & pygame.KMOD_SHIFT)
                            click_cell(cell, shift=shift)

                    lmb_down_pos = None
                    lmb_dragging = False
                    lmb_down_over_ui = False
                    panning = False
                    pan_last = None

        if state.check_solved:
            state.check_solved = False
            solved = state.session.puzzle.is_solved()
            if solved and not state.announced_solved:
                log_append(f"Solved in {len(state.session.history)} moves!")
            state.announced_solved = solved

        ui_manager.update(time_delta)

        screen.fill(grid_style.COLOR_BG)
        draw_puzzle(screen, state.session.puzzle, camera, base_cell_size, font, highlight=state.hover)
        ui_manager.draw_ui(screen)
        pygame.display.flip()

    session.puzzle.unsubscribe(state.on_cell_changed)
    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
