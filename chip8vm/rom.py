import logging

import easygui

from pathlib import Path
from typing import Optional, Union

from chip8vm.emulator import EmulatorError, MAX_ROM_SIZE

logger = logging.getLogger(__name__)

ROM_EXTENSIONS = (".ch8", ".chip8")
GAMES_PATTERN = "*.ch8"


class RomLoadError(EmulatorError):
    pass


def read_rom(path: Union[str, Path]) -> bytes:
    """
    Read a game from disk, checking that it looks like a CHIP-8 game and fits in memory.
    :param path: The path of the game.
    :return: The contents of the game.
    """
    path = Path(path)

    if not path.exists():
        raise RomLoadError(f"Game could not be loaded as the path does not exist!  Path: {path}.")

    if not path.is_file():
        raise RomLoadError(f"Game could not be loaded as the path is not a file!  Path: {path}.")

    if path.suffix.lower() not in ROM_EXTENSIONS:
        raise RomLoadError(f"Game does not appear to be a CHIP-8 game as none of the {', '.join(ROM_EXTENSIONS)} file types were found in the file name.  Path: {path}.")

    size = path.stat().st_size
    if size > MAX_ROM_SIZE:
        raise RomLoadError(f"Game is too large to fit in memory ({size} bytes, at most {MAX_ROM_SIZE} allowed).  Path: {path}.")

    logger.debug(f"Loading game at path {path}.")
    with path.open("rb") as file:
        return file.read()


def default_games_path() -> str:
    """
    :return: The picker pattern for a games folder in the current working directory.
    """
    return str(Path.cwd().joinpath("games", GAMES_PATTERN))


def choose_rom(default_path: Optional[str] = None) -> Optional[Path]:
    """
    Ask the user to pick a game.
    :param default_path: Where the file picker opens, the games folder of the current working directory if not provided.
    :return: The selected path, None if the picker was cancelled.
    """
    if default_path is None:
        default_path = default_games_path()
    file_name = easygui.fileopenbox(title="Select a Game", default=default_path, filetypes=[["*.ch8", "*.chip8", "CHIP-8"]])
    if not file_name:
        return None

    return Path(file_name)
