"""ProcVisual personal-finance tracker backend."""

__version__ = "1.0.0"
