import json
import tempfile
import unittest

import pytest

from canarinho.core.config import ConfigManager, TunerConfig


class TestTunerConfig(unittest.TestCase):
    def test_defaults(self):
        config = TunerConfig()
        self.assertEqual(config.in_tune_cents, 5.0)
        self.assertEqual(config.silence_rms, 0.01)
        self.assertEqual(config.trim_amplitude, 0.2)
        self.assertEqual(config.frame_length, 2048)
        self.assertEqual(config.concert_pitch, 440.0)
        self.assertEqual((config.min_frequency, config.max_frequency), (20.0, 5000.0))
        self.assertEqual(config.tick_hz, 60.0)

    def test_from_dict_ignores_unknown_keys(self):
        config = TunerConfig.from_dict({"in_tune_cents": 3.0, "colour": "green"})
        self.assertEqual(config.in_tune_cents, 3.0)
        self.assertEqual(config.frame_length, 2048)

    def test_to_dict_round_trips(self):
        config = TunerConfig(concert_pitch=442.0, use_flats=True)
        self.assertEqual(TunerConfig.from_dict(config.to_dict()), config)

    def test_with_overrides_skips_none(self):
        config = TunerConfig(silence_rms=0.02)
        updated = config.with_overrides(silence_rms=None, frame_length=4096, bell=False)
        self.assertEqual(updated.silence_rms, 0.02)
        self.assertEqual(updated.frame_length, 4096)
        self.assertFalse(updated.bell)
        # The receiver keeps its values
        self.assertEqual(config.frame_length, 2048)


@pytest.mark.parametrize(
    "values",
    [
        {"frame_length": 2},
        {"sample_rate": 0},
        {"concert_pitch": -440.0},
        {"in_tune_cents": -1.0},
        {"silence_rms": -0.1},
        {"trim_amplitude": -0.2},
        {"min_frequency": 5000.0, "max_frequency": 20.0},
        {"tick_hz": 0},
    ],
)
def test_invalid_values_are_rejected(values):
    with pytest.raises(ValueError):
        TunerConfig(**values)


class TestConfigManager(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_dir = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def test_defaults_without_a_file(self):
        manager = ConfigManager(self.config_dir)
        self.assertEqual(manager.get_tuner_config(), TunerConfig())
        self.assertEqual(manager.get_config("missing"), {})

    def test_update_persists(self):
        manager = ConfigManager(self.config_dir)
        self.assertTrue(manager.update_config("tuner", {"concert_pitch": 432.0}))

        reloaded = ConfigManager(self.config_dir)
        self.assertEqual(reloaded.get_tuner_config().concert_pitch, 432.0)

    def test_missing_keys_are_filled_in(self):
        with open(f"{self.config_dir}/tuner.json", "w") as f:
            json.dump({"in_tune_cents": 2.5}, f)

        config = ConfigManager(self.config_dir).get_tuner_config()
        self.assertEqual(config.in_tune_cents, 2.5)
        self.assertEqual(config.silence_rms, 0.01)

    def test_corrupt_file_falls_back_to_defaults(self):
        with open(f"{self.config_dir}/tuner.json", "w") as f:
            f.write("{not json")

        self.assertEqual(ConfigManager(self.config_dir).get_tuner_config(), TunerConfig())

    def test_reset(self):
        manager = ConfigManager(self.config_dir)
        manager.update_config("tuner", {"frame_length": 1024})
        self.assertTrue(manager.reset_config("tuner"))
        self.assertEqual(ConfigManager(self.config_dir).get_tuner_config().frame_length, 2048)

    def test_unknown_configuration(self):
        manager = ConfigManager(self.config_dir)
        self.assertFalse(manager.update_config("display", {"x": 1}))
        self.assertFalse(manager.reset_config("display"))

    def test_get_config_returns_a_copy(self):
        manager = ConfigManager(self.config_dir)
        manager.get_config("tuner")["frame_length"] = 16
        self.assertEqual(manager.get_tuner_config().frame_length, 2048)


if __name__ == "__main__":
    unittest.main()
