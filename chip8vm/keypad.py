import logging

import pygame

from typing import Optional

logger = logging.getLogger(__name__)

# COSMAC VIP hex keypad laid over the left of a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
KEY_LOOKUP = {
    pygame.K_1: 1,
    pygame.K_q: 4,
    pygame.K_a: 7,
    pygame.K_z: 10,
    pygame.K_2: 2,
    pygame.K_w: 5,
    pygame.K_s: 8,
    pygame.K_x: 0,
    pygame.K_3: 3,
    pygame.K_e: 6,
    pygame.K_d: 9,
    pygame.K_c: 11,
    pygame.K_4: 12,
    pygame.K_r: 13,
    pygame.K_f: 14,
    pygame.K_v: 15,
}


class Keypad:
    """
    Tracks the single CHIP-8 key currently held from pygame keyboard events.
    """
    def __init__(self):
        self.key: Optional[int] = None

    def process_event(self, event: pygame.event.Event) -> bool:
        """
        Update the held key from a keyboard event.
        :param event: The pygame event.
        :return: True if the event was a CHIP-8 key, False otherwise.
        """
        if event.type not in (pygame.KEYDOWN, pygame.KEYUP):
            return False

        key = KEY_LOOKUP.get(event.key, None)
        if key is None:
            return False

        if event.type == pygame.KEYDOWN:
            self.key = key
        elif self.key == key:
            self.key = None
        logger.debug(f"Key State Changed.  Key: {key}, Pressed: {event.type == pygame.KEYDOWN}.")
        return True
