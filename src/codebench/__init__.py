"""Codebench: a single-session code workbench with live preview and a cosmetic terminal."""

__version__ = "0.1.0"
