"""Pieces of a make utility: macros, pattern rules, options and start-up decisions."""

__version__ = "0.1.0"

__all__ = ["envvars", "macros", "options", "patterns", "startup"]