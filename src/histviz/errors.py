"""
histviz.errors
==============

Exceptions raised by histviz.

All of them are raised synchronously, before any artist is added to an Axes.
"""

from __future__ import annotations


class HistvizError(ValueError):
    """Base class for histviz validation errors."""


class EdgeMismatchError(HistvizError):
    """Raised when histograms that must share bin edges do not."""


class ColorShortageError(HistvizError):
    """Raised when fewer colors than series are supplied."""


class AnchorError(HistvizError):
    """Raised for an unsupported named anchor in collabtext()."""


class ConversionNotRegistered(KeyError):
    """Raised when no conversion exists for a (plot kind, source type) pair."""


class InvalidColorError(HistvizError):
    """Raised when a color sequence holds a non-color, or a single color is given instead."""
