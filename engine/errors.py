"""
errors.py — Error Taxonomy
===========================
    SortVizError
      ├── ConfigurationError   bad size / task count / values / mode,
      │                        rejected at construction or reset
      └── InvariantViolation   a corrupted ActionLog observed during replay;
                               always an upstream defect, never recovered
"""


class SortVizError(Exception):
    """Base class for every error raised by the visualizer core."""


class ConfigurationError(SortVizError, ValueError):
    pass


class InvariantViolation(SortVizError, RuntimeError):
    pass
