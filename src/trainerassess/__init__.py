"""Trainer assessment scoring and multi-period analytics engine."""

__version__ = "0.1.0"
