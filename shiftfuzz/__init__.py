"""Move argument values, parsing and mutation strategies for fuzzing Move functions."""

__version__ = "0.1.0"

__all__ = ["errors", "values", "whitelist", "strategies"]