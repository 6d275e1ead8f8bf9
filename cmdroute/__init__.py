"""Prefix-command routing for chat messages."""

__version__ = "0.1.0"
