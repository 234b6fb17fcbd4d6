"""
histviz.viz.convert
===================

Histogram -> primitive-argument conversions.

Two explicit tables replace type inspection at draw time:

  PLOTTYPES     source type        -> default plot kind
  _CONVERSIONS  (plot kind, type)  -> fn(h) -> tuple of arrays

Usage
-----
    from histviz.viz.convert import convert_arguments, plottype
    x, y = convert_arguments("stairs", h)
    kind = plottype(h)          # "hist" for Hist1D, "heatmap" for Hist2D

To add a conversion:
  • implement fn(h) -> tuple
  • register it via @register_conversion("kind", SourceType)
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Tuple

import numpy as np

from histviz.errors import ConversionNotRegistered
from histviz.hist import Hist1D, Hist2D


ConversionFn = Callable[[Any], Tuple[np.ndarray, ...]]

PLOTTYPES: Dict[type, str] = {
    Hist1D: "hist",
    Hist2D: "heatmap",
}


# -----------------------------------------------------------------------------
# Registry storage
# -----------------------------------------------------------------------------

_CONVERSIONS: Dict[Tuple[str, type], ConversionFn] = {}


def register_conversion(kind: str, source: type) -> Callable[[ConversionFn], ConversionFn]:
    """Decorator registering fn as the conversion for (kind, source)."""
    key = (str(kind).strip(), source)

    def _decorator(fn: ConversionFn) -> ConversionFn:
        if key in _CONVERSIONS:
            raise KeyError(f"Conversion for {key[0]!r} from {source.__name__} already registered.")
        _CONVERSIONS[key] = fn
        return fn

    return _decorator


def has_conversion(kind: str, obj: Any) -> bool:
    return (kind, type(obj)) in _CONVERSIONS


def convert_arguments(kind: str, obj: Any) -> Tuple[np.ndarray, ...]:
    """Convert obj to the positional arrays expected by primitive `kind`."""
    try:
        fn = _CONVERSIONS[(kind, type(obj))]
    except KeyError:
        raise ConversionNotRegistered(
            f"No conversion registered for plot kind {kind!r} from {type(obj).__name__}."
        ) from None
    return fn(obj)


def plottype(obj: Any) -> str:
    """Default plot kind for a histogram object."""
    try:
        return PLOTTYPES[type(obj)]
    except KeyError:
        raise ConversionNotRegistered(f"No default plot kind for {type(obj).__name__}.") from None


# -----------------------------------------------------------------------------
# Hist1D
# -----------------------------------------------------------------------------

@register_conversion("stairs", Hist1D)
def _stairs_1d(h: Hist1D) -> Tuple[np.ndarray, np.ndarray]:
    # repeated last edge brings the step back to baseline
    edges = h.bin_edges
    x = np.concatenate([edges, edges[-1:]])
    y = np.concatenate([[0.0], h.bin_counts, [0.0]])
    return x, y


@register_conversion("scatter", Hist1D)
def _scatter_1d(h: Hist1D) -> Tuple[np.ndarray, np.ndarray]:
    return h.bin_centers, np.array(h.bin_counts)


@register_conversion("barplot", Hist1D)
def _barplot_1d(h: Hist1D) -> Tuple[np.ndarray, np.ndarray]:
    return h.bin_centers, np.array(h.bin_counts)


@register_conversion("errorbars", Hist1D)
def _errorbars_1d(h: Hist1D) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    return h.bin_centers, np.array(h.bin_counts), h.bin_errors / 2.0


@register_conversion("crossbar", Hist1D)
def _crossbar_1d(h: Hist1D) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    cs = np.array(h.bin_counts)
    half = h.bin_errors / 2.0
    return h.bin_centers, cs, cs - half, cs + half


# -----------------------------------------------------------------------------
# Hist2D
# -----------------------------------------------------------------------------

@register_conversion("heatmap", Hist2D)
def _heatmap_2d(h: Hist2D) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    # empty cells render blank, not as a colored zero
    xc, yc = h.bin_centers
    z = np.array(h.bin_counts, dtype=float)
    z[z == 0] = np.nan
    return xc, yc, z
