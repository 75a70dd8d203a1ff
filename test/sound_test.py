import pygame

from unittest import mock

from chip8vm.app import start_pygame
from chip8vm.sound import Buzzer, SOUND_FREQUENCY, build_tone, pre_init_mixer


class TestBuildTone:
    def test_mono(self):
        tone = build_tone()
        assert tone.shape == (SOUND_FREQUENCY,), "Mono tone should be one second of single samples."
        assert tone.dtype == "int16", "Tone should be signed 16-bit samples."
        assert tone.max() > 0 > tone.min(), "Tone is not a wave."

    def test_stereo(self):
        tone = build_tone(channels=2)
        assert tone.shape == (SOUND_FREQUENCY, 2), "Stereo tone should have one column per channel."
        assert (tone[:, 0] == tone[:, 1]).all(), "Both channels should carry the same tone."


class TestBuzzer:
    def setup_method(self):
        self.environment = mock.patch.dict("os.environ", {"SDL_AUDIODRIVER": "dummy", "SDL_VIDEODRIVER": "dummy"})
        self.environment.start()
        pygame.quit()

    def teardown_method(self):
        pygame.quit()
        pre_init_mixer()
        self.environment.stop()

    def test_buzzer_after_application_start(self):
        start_pygame()
        buzzer = Buzzer()
        assert pygame.mixer.get_init()[2] == 1, "Mixer not opened in mono before pygame.init()."
        assert pygame.sndarray.array(buzzer.sound_player).ndim == 1, "Tone not built for a mono mixer."

    def test_buzzer_with_stereo_mixer(self):
        pygame.mixer.pre_init(SOUND_FREQUENCY, -16, 2, 4096)
        pygame.init()
        buzzer = Buzzer()
        assert pygame.sndarray.array(buzzer.sound_player).shape[1] == pygame.mixer.get_init()[2], "Tone not built for the mixer's channels."

    def test_update(self):
        start_pygame()
        buzzer = Buzzer()
        buzzer.sound_player = mock.Mock()

        buzzer.update(True)
        buzzer.update(True)
        buzzer.sound_player.play.assert_called_once_with(-1)

        buzzer.update(False)
        buzzer.update(False)
        buzzer.sound_player.stop.assert_called_once()
        assert not buzzer.playing, "Buzzer still flagged as playing."
