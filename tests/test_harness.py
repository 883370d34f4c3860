import json

import numpy as np
import pytest
import soundfile as sf

from canarinho.scripts.run_harness import RecordingHarness, main

SAMPLE_RATE = 44100


def write_case(directory, name, frequency, expected_note, seconds=0.5):
    t = np.arange(int(SAMPLE_RATE * seconds)) / SAMPLE_RATE
    sf.write(str(directory / f"{name}.wav"), 0.5 * np.sin(2 * np.pi * frequency * t), SAMPLE_RATE)
    (directory / f"{name}.json").write_text(json.dumps({"expected_note": expected_note}))


@pytest.fixture
def recordings(tmp_path):
    write_case(tmp_path, "e4", 329.63, "E4")
    write_case(tmp_path, "g3", 196.0, "G3")
    # A wav without a label is not a test case
    sf.write(str(tmp_path / "unlabelled.wav"), np.zeros(4096), SAMPLE_RATE)
    return tmp_path


def test_finds_labelled_pairs(recordings):
    harness = RecordingHarness(str(recordings))
    names = [wav.rsplit("/", 1)[-1] for wav, _ in harness.test_files]
    assert names == ["e4.wav", "g3.wav"]


def test_single_case(recordings):
    harness = RecordingHarness(str(recordings))
    wav, label = harness.test_files[0]
    result = harness.run_single_test(wav, label)
    assert result["passed"]
    assert result["most_common"] == "E4"
    assert result["frames"] == 10
    assert result["voiced"] == 10


def test_run_reports_failures(recordings, capsys):
    write_case(recordings, "wrong", 440.0, "B4")
    assert RecordingHarness(str(recordings)).run() is False
    out = capsys.readouterr().out
    assert "2 / 3 tests passed." in out
    assert "FAIL" in out


def test_main_exit_code(recordings):
    assert main([str(recordings)]) == 0


def test_silent_recording_fails(tmp_path):
    sf.write(str(tmp_path / "quiet.wav"), np.zeros(8192), SAMPLE_RATE)
    (tmp_path / "quiet.json").write_text(json.dumps({"expected_note": "A4"}))
    harness = RecordingHarness(str(tmp_path))
    result = harness.run_single_test(*harness.test_files[0])
    assert result["most_common"] is None
    assert result["voiced"] == 0
    assert not result["passed"]
