import math
import unittest

import pytest

from canarinho.note_utils import NOTES, get_note_name, map_to_note, note_frequency


class TestMapToNote(unittest.TestCase):
    def test_concert_a(self):
        result = map_to_note(440.0)
        self.assertEqual(result.note, "A")
        self.assertEqual(result.octave, 4)
        self.assertAlmostEqual(result.cents, 0.0, delta=1e-6)
        self.assertEqual(result.reference_frequency, 440.0)
        self.assertEqual(result.frequency, 440.0)

    def test_a_sharp_4(self):
        result = map_to_note(466.1637615180899)
        self.assertEqual(result.note, "A#")
        self.assertEqual(result.octave, 4)
        self.assertAlmostEqual(result.cents, 0.0, delta=1e-6)

    def test_middle_c(self):
        result = map_to_note(261.63)
        self.assertEqual(result.name, "C4")
        self.assertAlmostEqual(result.reference_frequency, 261.6256, places=3)

    def test_octave_transition(self):
        # B3 -> C4
        self.assertEqual(map_to_note(246.94).name, "B3")
        self.assertEqual(map_to_note(261.63).name, "C4")

    def test_sharp_and_flat(self):
        sharp = map_to_note(440.0 * 2 ** (10 / 1200))
        self.assertEqual(sharp.name, "A4")
        self.assertAlmostEqual(sharp.cents, 10.0, places=6)

        flat = map_to_note(440.0 * 2 ** (-30 / 1200))
        self.assertEqual(flat.name, "A4")
        self.assertAlmostEqual(flat.cents, -30.0, places=6)

    def test_nearest_note_switches_at_half_semitone(self):
        below = map_to_note(440.0 * 2 ** (49.99 / 1200))
        self.assertEqual(below.name, "A4")
        self.assertAlmostEqual(below.cents, 49.99, places=6)

        above = map_to_note(440.0 * 2 ** (50.01 / 1200))
        self.assertEqual(above.name, "A#4")
        self.assertAlmostEqual(above.cents, -49.99, places=6)

    def test_low_strings(self):
        self.assertEqual(map_to_note(82.41).name, "E2")
        self.assertEqual(map_to_note(41.2).name, "E1")
        self.assertEqual(map_to_note(16.35).name, "C0")

    def test_custom_concert_pitch(self):
        result = map_to_note(432.0, concert_pitch=432.0)
        self.assertEqual(result.name, "A4")
        self.assertAlmostEqual(result.cents, 0.0, delta=1e-9)
        # The same frequency is a flat A against 440
        self.assertLess(map_to_note(432.0).cents, -30)

    def test_invalid_frequency(self):
        for freq in (0.0, -440.0, float("nan"), float("inf")):
            with self.assertRaises(ValueError):
                map_to_note(freq)

    def test_display_name_with_flats(self):
        self.assertEqual(map_to_note(466.16).display_name(use_flats=True), "Bb4")
        self.assertEqual(map_to_note(466.16).display_name(), "A#4")
        self.assertEqual(map_to_note(440.0).display_name(use_flats=True), "A4")


@pytest.mark.parametrize("k", range(-45, 40, 4))
def test_semitone_offsets_round_trip(k):
    result = map_to_note(440.0 * 2 ** (k / 12))
    index = 69 + k
    assert result.note == NOTES[index % 12]
    assert result.octave == index // 12 - 1
    assert abs(result.cents) < 1e-6


@pytest.mark.parametrize("freq", [27.5, 55.3, 98.0, 150.0, 311.5, 445.0, 1000.0, 3999.0])
def test_cents_sign_matches_frequency_offset(freq):
    result = map_to_note(freq)
    diff = freq - result.reference_frequency
    if abs(diff) < 1e-9:
        assert abs(result.cents) < 1e-6
    else:
        assert math.copysign(1, result.cents) == math.copysign(1, diff)
    assert -50.0 <= result.cents <= 50.0


class TestHelpers(unittest.TestCase):
    def test_get_note_name(self):
        self.assertEqual(get_note_name(440.0), "A4")
        self.assertEqual(get_note_name(277.18), "C#4")
        self.assertEqual(get_note_name(277.18, use_flats=True), "Db4")
        self.assertEqual(get_note_name(311.13, use_flats=True), "Eb4")
        self.assertEqual(get_note_name(0), "---")

    def test_note_frequency(self):
        self.assertAlmostEqual(note_frequency("A", 4), 440.0)
        self.assertAlmostEqual(note_frequency("E", 2), 82.4069, places=3)
        self.assertAlmostEqual(note_frequency("C", 4), 261.6256, places=3)
        with self.assertRaises(ValueError):
            note_frequency("H", 4)

    def test_note_frequency_maps_back(self):
        for octave in range(1, 7):
            for note in NOTES:
                result = map_to_note(note_frequency(note, octave))
                self.assertEqual((result.note, result.octave), (note, octave))


if __name__ == "__main__":
    unittest.main()
