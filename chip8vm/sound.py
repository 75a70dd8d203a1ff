import logging

import numpy as np
import pygame

logger = logging.getLogger(__name__)

SOUND_FREQUENCY = 44100
SOUND_BUFFER = 4096
MIXER_CHANNELS = 1
TONE_HZ = 550


def pre_init_mixer() -> None:
    """
    Request a mono mixer.  Must run before pygame.init(), which otherwise opens the mixer with its own settings.
    """
    pygame.mixer.pre_init(SOUND_FREQUENCY, -16, MIXER_CHANNELS, SOUND_BUFFER)


def build_tone(tone_hz: int = TONE_HZ, volume: int = SOUND_BUFFER, sample_rate: int = SOUND_FREQUENCY, channels: int = MIXER_CHANNELS) -> np.ndarray:
    """
    Build one second of a sine wave which loops without a click.
    :param tone_hz: The pitch of the tone.
    :param volume: The amplitude of the wave.
    :param sample_rate: Samples per second.
    :param channels: Output channels of the mixer, a mono mixer takes a 1-D array and others one column per channel.
    :return: The samples as signed 16-bit integers.
    """
    length = sample_rate / tone_hz
    omega = np.pi * 2 / length
    x_values = np.arange(int(length)) * omega
    one_cycle = volume * np.sin(x_values)
    sound_wave = np.resize(one_cycle, (sample_rate,)).astype(np.int16)
    if channels == 1:
        return sound_wave
    return np.repeat(sound_wave[:, np.newaxis], channels, axis=1)


class Buzzer:
    """
    Plays a constant tone while the bell is active.
    """
    def __init__(self, tone_hz: int = TONE_HZ, volume: int = SOUND_BUFFER):
        if not pygame.mixer.get_init():
            pygame.mixer.init(SOUND_FREQUENCY, -16, MIXER_CHANNELS, SOUND_BUFFER)
        sample_rate, _, channels = pygame.mixer.get_init()
        logger.debug(f"Mixer running at {sample_rate} Hz with {channels} channel(s).")
        self.sound_player = pygame.sndarray.make_sound(build_tone(tone_hz, volume, sample_rate, channels))
        self.playing = False

    def update(self, active: bool) -> None:
        """
        Start or stop the tone.
        :param active: True if the bell should be sounding.
        """
        if active == self.playing:
            return

        if active:
            self.sound_player.play(-1)
            logger.debug("Starting sound.")
        else:
            self.sound_player.stop()
            logger.debug("Stopping sound.")
        self.playing = active
