import sys

import numpy as np
import pygame

from typing import Optional, TextIO

from chip8vm.emulator import SCREEN_HEIGHT, SCREEN_WIDTH

DEFAULT_SCALE = 12
CAPTION = "chip8vm"
COLOUR_PALETTE = [(0, 0, 0), (0, 255, 0)]
PIXEL_ON = "▓▓"
PIXEL_OFF = "  "


class Display:
    """
    Draws the emulator's framebuffer to a pygame window.
    """
    def __init__(self, scale: int = DEFAULT_SCALE):
        """
        Constructor.
        :param scale: How many window pixels each CHIP-8 pixel takes on each side.
        """
        self.scaled_size = (SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale)
        self.inter_screen = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), 0, 8)
        self.inter_screen.set_palette(COLOUR_PALETTE)

        pygame.display.set_caption(CAPTION)
        self.screen = pygame.display.set_mode(self.scaled_size, 0, 8)
        self.screen.set_palette(COLOUR_PALETTE)

    def set_title(self, title: str) -> None:
        pygame.display.set_caption(title)

    def render(self, pixels: np.ndarray) -> None:
        """
        Update the display.
        :param pixels: The framebuffer, one row per screen line.
        """
        # surfarray indexes by (x, y)
        pygame.surfarray.blit_array(self.inter_screen, pixels.T)
        pygame.transform.scale(self.inter_screen, self.scaled_size, self.screen)
        pygame.display.flip()


def format_frame(pixels: np.ndarray) -> str:
    """
    Turn the framebuffer into text, two characters per pixel and one line per row.
    :param pixels: The framebuffer, one row per screen line.
    :return: The frame as text.
    """
    return "\n".join("".join(PIXEL_ON if pixel else PIXEL_OFF for pixel in row) for row in pixels)


class ConsoleDisplay:
    """
    Prints every frame to a text stream.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def set_title(self, title: str) -> None:
        print(f"== {title} ==", file=self.stream)

    def render(self, pixels: np.ndarray) -> None:
        print(file=self.stream)
        print(format_frame(pixels), file=self.stream)
