"""Settings for SweepQA."""

from sweepqa.config.settings import ExerciserSettings, load_settings

__all__ = ["ExerciserSettings", "load_settings"]
