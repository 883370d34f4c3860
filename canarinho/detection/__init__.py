"""Tuning state tracking."""

from .tuning_state import TuningStateTracker, classify, is_in_tune

__all__ = ["TuningStateTracker", "classify", "is_in_tune"]
