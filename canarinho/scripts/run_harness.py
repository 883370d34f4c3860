"""Check the tuner thresholds against a folder of labelled recordings.

Every ``name.wav`` with a sibling ``name.json`` holding
``{"expected_note": "E2"}`` is run through the tuner pipeline frame by frame,
and the most common detected note is compared with the label.
"""

import os
import json
import sys
import argparse
from collections import Counter
from typing import List, Dict, Any, Optional, Tuple

from canarinho.audio.file_input import WavFileFrameSource
from canarinho.core.config import TunerConfig
from canarinho.services.tuner_service import TunerPipeline


class RecordingHarness:
    """Validates the tuner pipeline against pre-recorded samples."""

    def __init__(self, recordings_path: str, config: Optional[TunerConfig] = None):
        self.recordings_path = recordings_path
        self.config = config or TunerConfig()
        self.test_files = self._find_test_files()
        if not self.test_files:
            print(
                f"Warning: No test files (.wav/.json pairs) found in {recordings_path}"
            )

    def _find_test_files(self) -> List[Tuple[str, str]]:
        """Find all corresponding .wav and .json files in the recordings path."""
        pairs = []
        for filename in sorted(os.listdir(self.recordings_path)):
            if filename.endswith(".wav"):
                wav_path = os.path.join(self.recordings_path, filename)
                json_path = os.path.splitext(wav_path)[0] + ".json"
                if os.path.exists(json_path):
                    pairs.append((wav_path, json_path))
        return pairs

    def run(self) -> bool:
        """Run all tests and print a summary report."""
        print(f"Found {len(self.test_files)} test cases.")
        passed_count = 0

        for wav_path, json_path in self.test_files:
            result = self.run_single_test(wav_path, json_path)
            if result["passed"]:
                passed_count += 1
                status = "PASS"
            else:
                status = "FAIL"

            print(
                f"- Test: {os.path.basename(wav_path):<15} | Status: {status:<4} | "
                f"Expected: {result['expected']:<4} | Got: {result['most_common'] or 'None'} | "
                f"Voiced: {result['voiced']}/{result['frames']}"
            )

        print("\n--- Test Summary ---")
        print(f"{passed_count} / {len(self.test_files)} tests passed.")
        return passed_count == len(self.test_files)

    def run_single_test(self, wav_path: str, json_path: str) -> Dict[str, Any]:
        """Run a single test case against one WAV file."""
        with open(json_path, "r") as f:
            ground_truth = json.load(f)
        expected_note = ground_truth["expected_note"]

        pipeline = TunerPipeline(self.config)
        names: List[str] = []
        frames = 0

        source = WavFileFrameSource(wav_path, frame_length=self.config.frame_length)
        with source:
            while True:
                frame = source.read()
                if frame is None:
                    break
                frames += 1
                result = pipeline.process(frame)
                if result is not None:
                    names.append(result.assignment.name)

        most_common = Counter(names).most_common(1)[0][0] if names else None
        return {
            "file": wav_path,
            "expected": expected_note,
            "most_common": most_common,
            "passed": most_common == expected_note,
            "frames": frames,
            "voiced": len(names),
        }


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run the tuner over labelled recordings")
    parser.add_argument("recordings", help="Directory with .wav/.json pairs")
    parser.add_argument("--silence-rms", type=float, default=0.01)
    parser.add_argument("--trim-amplitude", type=float, default=0.2)
    parser.add_argument("--frame-length", type=int, default=2048)
    args = parser.parse_args(argv)

    config = TunerConfig(
        silence_rms=args.silence_rms,
        trim_amplitude=args.trim_amplitude,
        frame_length=args.frame_length,
    )
    harness = RecordingHarness(args.recordings, config)
    return 0 if harness.run() else 1


if __name__ == "__main__":
    sys.exit(main())
