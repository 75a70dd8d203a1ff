import argparse
import logging
import sys

import easygui
import pygame

from pathlib import Path
from typing import List, Optional, Union

from chip8vm.config import DEFAULT_INSTRUCTIONS_PER_SECOND, EmulatorConfig
from chip8vm.display import ConsoleDisplay, DEFAULT_SCALE, Display
from chip8vm.emulator import Emulator, EmulatorError
from chip8vm.keypad import Keypad
from chip8vm.rom import choose_rom, read_rom
from chip8vm.sound import Buzzer, pre_init_mixer

logger = logging.getLogger(__name__)

FRAME_RATE = 60
RELOAD_KEY = pygame.K_l


class Application:
    """
    The outer loop: feeds input to the emulator, runs it at the configured speed and presents its output.
    """
    def __init__(self, emulator: Emulator, display: Union[Display, ConsoleDisplay], keypad: Optional[Keypad] = None, buzzer: Optional[Buzzer] = None, interactive: bool = False):
        """
        Constructor.
        :param interactive: True if problems should also be shown to the user in message boxes.
        """
        self.emulator = emulator
        self.interactive = interactive
        self.display = display
        self.keypad = keypad
        self.buzzer = buzzer
        self.clock = pygame.time.Clock()
        self.running = False
        self.game_loaded = False
        self.instructions_per_frame = emulator.config.instructions_per_frame(FRAME_RATE)

    def load_game(self, path: Optional[Path] = None) -> bool:
        """
        Stop any currently running game and load a new one, asking the user for it if no path is given.
        :param path: The game to load.
        :return: True if a game was loaded.
        """
        if path is None:
            path = choose_rom()
            if path is None:
                easygui.msgbox("Pick a game to play!  Press the L key to re-open the game picker.", "No Game Selected")
                return False

        try:
            rom = read_rom(path)
        except EmulatorError as error:
            logger.error(str(error))
            if self.interactive:
                easygui.msgbox(str(error), "Game Not Loaded")
            return False

        if self.game_loaded:
            self.emulator.reset()
        self.emulator.load_rom(rom)
        self.display.set_title(path.stem)
        self.game_loaded = True
        logger.info(f"Loaded {path.name}.")
        return True

    def handle_events(self) -> None:
        """
        Process all waiting window and keyboard events.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == RELOAD_KEY:
                self.load_game()
            else:
                self.keypad.process_event(event)

        self.emulator.set_key(self.keypad.key)

    def run_frame(self) -> None:
        """
        Run one frame's worth of instructions and present the result.
        """
        if self.keypad is not None:
            self.handle_events()

        if self.game_loaded:
            for _ in range(self.instructions_per_frame):
                self.emulator.step()

        if self.emulator.consume_screen_update():
            self.display.render(self.emulator.pixels)

        if self.buzzer is not None:
            self.buzzer.update(self.emulator.is_bell_active)

    def run(self) -> int:
        """
        Loop until the window is closed or the emulator hits a fatal error.
        :return: The process exit status.
        """
        self.running = True
        try:
            while self.running:
                self.run_frame()
                self.clock.tick(FRAME_RATE)
        except EmulatorError as error:
            logger.error(f"Emulation stopped at {hex(self.emulator.program_counter)}: {error}")
            return 1
        except KeyboardInterrupt:
            logger.info("Interrupted.")
        finally:
            if self.buzzer is not None:
                self.buzzer.update(False)
        return 0


def start_pygame() -> None:
    """
    Initialise pygame with the mixer settings the buzzer needs.
    """
    pre_init_mixer()
    pygame.init()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8vm", description="CHIP-8 emulator.  Load a game and play it in a pygame window.")
    parser.add_argument("rom", nargs="?", type=Path, help="Game to load.  A file picker opens when omitted.")
    parser.add_argument("--ips", type=int, default=DEFAULT_INSTRUCTIONS_PER_SECOND, help="Instructions executed per second (default: %(default)s).")
    parser.add_argument("--shift-quirk", action="store_true", help="Shift opcodes copy register Y into register X first (COSMAC VIP behaviour).")
    parser.add_argument("--jump-quirk", action="store_true", help="Offset jump adds register X instead of register 0 (CHIP-48 / SUPER-CHIP behaviour).")
    parser.add_argument("--scale", type=int, default=DEFAULT_SCALE, help="Window pixels per CHIP-8 pixel (default: %(default)s).")
    parser.add_argument("--console", action="store_true", help="Print frames to the terminal instead of opening a window.")
    parser.add_argument("--debug", action="store_true", help="Log every executed opcode.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO, format="[%(levelname)s]:  %(message)s", stream=sys.stdout)

    try:
        config = EmulatorConfig(args.ips, args.shift_quirk, args.jump_quirk)
    except ValueError as error:
        logger.error(str(error))
        return 2

    emulator = Emulator(config)

    if args.console:
        if args.rom is None:
            logger.error("A game path is required in console mode.")
            return 2
        application = Application(emulator, ConsoleDisplay())
    else:
        start_pygame()
        application = Application(emulator, Display(args.scale), Keypad(), Buzzer(), interactive=True)

    try:
        if not application.load_game(args.rom) and args.console:
            return 1
        return application.run()
    finally:
        pygame.quit()
