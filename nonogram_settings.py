"""
Settings for the nonogram front-ends.

Stored as JSON in config.json in the working directory. Missing keys fall
back to DEFAULT_SETTINGS; a missing or unreadable file means all defaults.
Both front-ends accept --config to pick another file and --save-config to
write the settings they would run with back to it.
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)

SETTINGS_FILE = Path("config.json")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "puzzle_file": "puzzles/tiny.non",
    "save_file": "puzzles/save.txt",
    "trace": False,
    "cell_size": 36,
}

# settings key -> command line option dest
OPTION_NAMES = {
    "puzzle_file": "puzzle",
    "save_file": "save",
    "trace": "trace",
    "cell_size": "cell_size",
}


def load_settings(path: Union[str, Path] = SETTINGS_FILE) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        logger.debug("Settings file %s not found, using defaults", path)
        return DEFAULT_SETTINGS.copy()

    try:
        with open(path, "r", encoding="utf-8") as f:
            settings = json.load(f)
        if not isinstance(settings, dict):
            raise ValueError("settings must be a JSON object")
    except (ValueError, OSError) as e:
        logger.warning("Failed to load settings: %s, using defaults", e)
        return DEFAULT_SETTINGS.copy()

    result = DEFAULT_SETTINGS.copy()
    result.update(settings)
    logger.debug("Settings loaded: %s", result)
    return result


def save_settings(settings: Dict[str, Any], path: Union[str, Path] = SETTINGS_FILE) -> bool:
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(settings, f, indent=2)
    except OSError as e:
        logger.error("Failed to save settings: %s", e)
        return False
    logger.info("Settings saved to %s", path)
    return True


def config_parser() -> argparse.ArgumentParser:
    """Parent parser with the options that pick and rewrite the settings file."""
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--config", default=str(SETTINGS_FILE), help="settings file (JSON)")
    parser.add_argument("--save-config", action="store_true",
                        help="write the effective settings to the settings file and exit")
    return parser


def settings_from_args(settings: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Settings overlaid with the options given on the command line."""
    result = dict(settings)
    for key, dest in OPTION_NAMES.items():
        if hasattr(args, dest):
            result[key] = getattr(args, dest)
    return result


def configure_logging(trace: bool) -> None:
    """Console logging for the front-ends; trace turns on per-move debug output."""
    logging.basicConfig(
        level=logging.DEBUG if trace else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
