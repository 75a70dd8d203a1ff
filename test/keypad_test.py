import pygame

from chip8vm.keypad import KEY_LOOKUP, Keypad


def key_event(event_type: int, key: int) -> pygame.event.Event:
    return pygame.event.Event(event_type, key=key)


class TestKeypad:
    def setup_method(self):
        self.keypad = Keypad()

    def test_layout(self):
        assert sorted(KEY_LOOKUP.values()) == list(range(16)), "Every CHIP-8 key should be mapped exactly once."
        assert KEY_LOOKUP[pygame.K_x] == 0, "X should map to key 0."
        assert KEY_LOOKUP[pygame.K_v] == 15, "V should map to key F."

    def test_press_and_release(self):
        assert self.keypad.key is None, "Key latched at start."

        assert self.keypad.process_event(key_event(pygame.KEYDOWN, pygame.K_w)), "Mapped key press not consumed."
        assert self.keypad.key == 5, "Pressed key not latched."

        assert self.keypad.process_event(key_event(pygame.KEYUP, pygame.K_w)), "Mapped key release not consumed."
        assert self.keypad.key is None, "Released key still latched."

    def test_latest_press_wins(self):
        self.keypad.process_event(key_event(pygame.KEYDOWN, pygame.K_w))
        self.keypad.process_event(key_event(pygame.KEYDOWN, pygame.K_f))
        assert self.keypad.key == 14, "Latest pressed key not latched."

        self.keypad.process_event(key_event(pygame.KEYUP, pygame.K_w))
        assert self.keypad.key == 14, "Releasing an older key cleared the latched key."

    def test_ignored_events(self):
        assert not self.keypad.process_event(key_event(pygame.KEYDOWN, pygame.K_p)), "Unmapped key consumed."
        assert not self.keypad.process_event(pygame.event.Event(pygame.QUIT)), "Non keyboard event consumed."
        assert self.keypad.key is None, "Ignored events latched a key."
