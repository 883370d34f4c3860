import unittest

import numpy as np
import pytest

from canarinho.audio.pitch_detector import PitchDetector
from canarinho.note_types import AudioFrame
from canarinho.note_utils import map_to_note

SAMPLE_RATE = 44100
FRAME_LENGTH = 2048


def sine_frame(freq, amplitude=0.5, length=FRAME_LENGTH, sample_rate=SAMPLE_RATE, phase=0.0):
    t = np.arange(length) / sample_rate
    return AudioFrame(amplitude * np.sin(2 * np.pi * freq * t + phase), sample_rate)


@pytest.mark.parametrize(
    "freq",
    [80.0, 82.41, 98.0, 110.0, 146.83, 196.0, 261.63, 329.63, 440.0, 659.25,
     880.0, 1318.51, 2000.0],
)
@pytest.mark.parametrize("amplitude", [0.5, 0.9])
def test_pure_tone_within_one_percent(freq, amplitude):
    detected = PitchDetector().detect(sine_frame(freq, amplitude=amplitude))
    assert detected is not None
    assert abs(detected - freq) / freq < 0.01


@pytest.mark.parametrize("freq", [82.41, 98.0, 110.0, 146.83])
def test_low_strings_map_to_their_note(freq):
    detected = PitchDetector().detect(sine_frame(freq))
    assert map_to_note(detected).name == map_to_note(freq).name


@pytest.mark.parametrize("length", [0, 1, 3, 512, 2048])
def test_silent_frame_has_no_signal(length):
    frame = AudioFrame(np.zeros(length), SAMPLE_RATE)
    assert PitchDetector().detect(frame) is None


class TestPitchDetector(unittest.TestCase):
    def setUp(self):
        self.detector = PitchDetector()

    def test_quiet_noise_is_gated(self):
        rng = np.random.default_rng(0)
        frame = AudioFrame(rng.normal(0, 0.002, FRAME_LENGTH), SAMPLE_RATE)
        self.assertIsNone(self.detector.detect(frame))

    def test_silence_threshold_is_configurable(self):
        frame = sine_frame(440.0, amplitude=0.02)  # rms ~0.014
        self.assertIsNotNone(self.detector.detect(frame))
        strict = PitchDetector(silence_rms=0.05)
        self.assertIsNone(strict.detect(frame))

    def test_tone_with_harmonics(self):
        t = np.arange(FRAME_LENGTH) / SAMPLE_RATE
        samples = (
            0.4 * np.sin(2 * np.pi * 330.0 * t)
            + 0.2 * np.sin(2 * np.pi * 660.0 * t)
            + 0.1 * np.sin(2 * np.pi * 990.0 * t)
        )
        detected = self.detector.detect(AudioFrame(samples, SAMPLE_RATE))
        self.assertAlmostEqual(detected, 330.0, delta=3.3)

    def test_detect_samples_matches_detect(self):
        frame = sine_frame(523.25)
        self.assertEqual(
            self.detector.detect(frame),
            self.detector.detect_samples(frame.samples, SAMPLE_RATE),
        )

    def test_sample_rate_scales_result(self):
        # Same samples declared at twice the rate read as twice the frequency
        samples = sine_frame(440.0).samples
        at_44k = self.detector.detect_samples(samples, SAMPLE_RATE)
        at_88k = self.detector.detect_samples(samples, 2 * SAMPLE_RATE)
        self.assertAlmostEqual(at_88k, 2 * at_44k, places=6)


class TestTrimBounds(unittest.TestCase):
    def setUp(self):
        self.detector = PitchDetector(trim_amplitude=0.2)

    def test_trims_to_first_and_last_quiet_sample(self):
        buffer = np.array([0.9, 0.8, 0.1, 0.5, 0.5, 0.5, 0.1, 0.9])
        self.assertEqual(self.detector.trim_bounds(buffer), (2, 6))

    def test_falls_back_to_full_bounds(self):
        buffer = np.full(10, 0.9)
        self.assertEqual(self.detector.trim_bounds(buffer), (0, 10))

    def test_only_scans_half_of_the_frame(self):
        # The quiet sample in the middle is out of reach of both scans
        buffer = np.array([0.9, 0.9, 0.9, 0.9, 0.9, 0.1, 0.9, 0.9, 0.9, 0.9])
        self.assertEqual(self.detector.trim_bounds(buffer), (0, 10))


class TestFindPeriod(unittest.TestCase):
    def test_autocorrelation_lags(self):
        c = PitchDetector.autocorrelate(np.array([1.0, 2.0, 3.0]))
        np.testing.assert_allclose(c, [14.0, 8.0, 3.0])

    def test_skips_zero_lag_lobe(self):
        # Lag 0 is the global maximum but the period is the peak after the dip
        correlation = np.array([10.0, 6.0, 2.0, 4.0, 9.0, 4.0, 1.0])
        self.assertEqual(PitchDetector.find_period(correlation), 4.0)

    def test_parabolic_interpolation_shifts_towards_larger_neighbour(self):
        correlation = np.array([10.0, 2.0, 1.0, 6.0, 8.0, 7.0, 0.0])
        period = PitchDetector.find_period(correlation)
        self.assertGreater(period, 4.0)
        self.assertLess(period, 4.5)

    def test_peak_at_last_lag_is_not_interpolated(self):
        correlation = np.array([5.0, 1.0, 2.0, 3.0])
        self.assertEqual(PitchDetector.find_period(correlation), 3.0)


if __name__ == "__main__":
    unittest.main()
