"""
histviz.viz.recipes
===================

Plot recipes: a histogram (or collection) plus configuration, with an explicit
render(ax) that appends primitives to a caller-owned Axes and returns the recipe.

Recipes
-------
StackedHist   stacked bars of several Hist1D + combined uncertainty (bars or shaded band)
RatioHist     points + optional error bars + dash-dot reference line at y = 1
HistPlot      a bare Hist1D as filled bars

Entry points
------------
stackedhist(hs, ax=None, **attrs)        -> FigureAxisPlot
ratiohist(h, h2=None, ax=None, **attrs)  -> FigureAxisPlot
hist(h, ax=None, **attrs)                -> FigureAxisPlot
plot(obj, kind=None, ax=None, **kwargs)  -> FigureAxisPlot   (default kind from PLOTTYPES)

Ordering rule: every validation runs before the first primitive is drawn.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Union

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import is_color_like
from matplotlib.figure import Figure
from matplotlib.patches import Patch

from histviz.errors import ColorShortageError, EdgeMismatchError, InvalidColorError
from histviz.hist import Hist1D, Hist2D
from histviz.viz import primitives
from histviz.viz.convert import convert_arguments, plottype
from histviz.viz.style import DEFAULT_HIST_COLOR, RATIO_LINE_COLOR, default_fig_ax, wong_colors


logger = logging.getLogger(__name__)

ErrorMode = Union[bool, str, None]


class FigureAxisPlot(NamedTuple):
    figure: Figure
    axis: plt.Axes
    plot: Any


def _resolve_ax(ax: Optional[plt.Axes]):
    if ax is None:
        return default_fig_ax()
    return ax.figure, ax


# ============================================================
# StackedHist
# ============================================================

@dataclass
class StackedHist:
    """
    Stacked bar chart of 1D histograms sharing identical bin edges.

    errors:
      True / "bar"   error bars of half-length sigma/2 around the stacked total
      "shade"        filled band over [total - sigma/2, total + sigma/2], no midline
      False / None   no uncertainty overlay
    sigma is the per-bin quadrature sum of the input bin errors.
    """
    hists: Sequence[Hist1D]
    color: Sequence[Any] = field(default_factory=wong_colors)
    errors: ErrorMode = "shade"
    error_color: Any = (0.0, 0.0, 0.0, 0.5)
    whiskerwidth: float = 10
    gap: float = 0.0
    labels: Optional[Sequence[str]] = None
    artists: List[Any] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self.hists = list(self.hists)

    def validate(self) -> None:
        if not self.hists:
            raise ValueError("stackedhist needs at least one histogram")
        e0 = self.hists[0].bin_edges
        if not all(np.array_equal(e0, h.bin_edges) for h in self.hists[1:]):
            raise EdgeMismatchError("binedges must match in stacked histogram")
        n = len(self.hists)
        if is_color_like(self.color):
            raise InvalidColorError(
                f"color must be a sequence of colors, one per histogram, got the single color {self.color!r}"
            )
        if len(self.color) < n:
            raise ColorShortageError(
                f"provided {len(self.color)} colors, not enough for {n} histograms"
            )
        bad = [c for c in self.color[:n] if not is_color_like(c)]
        if bad:
            raise InvalidColorError(f"not valid colors: {bad!r}")
        if self.errors not in (True, False, None, "bar", "shade"):
            raise ValueError(f"errors must be True, False, 'bar' or 'shade', got {self.errors!r}")
        if self.errors and not is_color_like(self.error_color):
            raise InvalidColorError(f"error_color is not a valid color: {self.error_color!r}")
        if self.labels is not None:
            if isinstance(self.labels, str):
                raise ValueError("labels must be a sequence of strings, one per histogram, not a single string")
            if len(self.labels) != n:
                raise ValueError(f"provided {len(self.labels)} labels for {n} histograms")

    @property
    def edges(self) -> np.ndarray:
        return self.hists[0].bin_edges

    def flattened(self):
        """
        (xs, ys, grp): every histogram's (center, count) pairs end to end,
        grp holding the histogram index once per bin.
        """
        centers = self.hists[0].bin_centers
        nbin = centers.size
        xs = np.tile(centers, len(self.hists))
        ys = np.concatenate([np.asarray(h.bin_counts, float) for h in self.hists])
        grp = np.repeat(np.arange(len(self.hists)), nbin)
        return xs, ys, grp

    def totals(self) -> np.ndarray:
        return np.sum([h.bin_counts for h in self.hists], axis=0)

    def uncertainties(self) -> np.ndarray:
        return np.sqrt(np.sum([h.bin_errors ** 2 for h in self.hists], axis=0))

    def render(self, ax: plt.Axes) -> "StackedHist":
        self.validate()

        xs, ys, grp = self.flattened()
        widths = np.tile(np.diff(self.edges), len(self.hists))
        centers = self.hists[0].bin_centers
        totals = self.totals()
        errs = self.uncertainties()
        logger.debug("stackedhist: %d histograms x %d bins, errors=%r", len(self.hists), centers.size, self.errors)

        self.artists.extend(primitives.barplot(
            ax, xs, ys,
            stack=grp,
            color=list(self.color[: len(self.hists)]),
            width=widths,
            gap=self.gap,
            label=self.labels,
        ))

        if self.errors in (True, "bar"):
            self.artists.append(primitives.errorbars(
                ax, centers, totals, errs / 2.0,
                whiskerwidth=self.whiskerwidth,
                color=self.error_color,
            ))
        elif self.errors == "shade":
            self.artists.extend(primitives.crossbar(
                ax, centers, totals, totals - errs / 2.0, totals + errs / 2.0,
                width=np.diff(self.edges),
                color=self.error_color,
                show_midline=False,
            ))
        return self

    def legend_handles(self) -> List[Patch]:
        """Color patches, one per stacked histogram, for a manual legend."""
        return [Patch(facecolor=c) for c in self.color[: len(self.hists)]]


# ============================================================
# RatioHist
# ============================================================

@dataclass
class RatioHist:
    """
    A histogram that represents a ratio (h = h1 / h2) drawn as points.

    Error bars use the full per-bin error of the ratio histogram.
    """
    hist: Hist1D
    errors: bool = True
    whiskerwidth: float = 10
    color: Any = "black"
    artists: List[Any] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def from_pair(cls, numerator: Hist1D, denominator: Hist1D, **attrs: Any) -> "RatioHist":
        return cls(numerator / denominator, **attrs)

    def render(self, ax: plt.Axes) -> "RatioHist":
        xs, ys = convert_arguments("scatter", self.hist)
        logger.debug("ratiohist: %d bins, errors=%s", xs.size, self.errors)

        self.artists.append(primitives.scatter(ax, xs, ys, color=self.color))
        if self.errors:
            self.artists.append(primitives.errorbars(
                ax, xs, ys, self.hist.bin_errors,
                whiskerwidth=self.whiskerwidth,
                color=self.color,
            ))
        self.artists.extend(primitives.hlines(ax, 1.0, color=RATIO_LINE_COLOR, linestyle="-."))
        return self


# ============================================================
# HistPlot
# ============================================================

@dataclass
class HistPlot:
    """
    Bare Hist1D as touching filled bars.

    color=None means "not set" and falls back to DEFAULT_HIST_COLOR.
    """
    hist: Hist1D
    color: Any = None
    gap: float = 0.0
    label: Optional[str] = None
    artists: List[Any] = field(default_factory=list, init=False, repr=False)

    def render(self, ax: plt.Axes) -> "HistPlot":
        xs, ys = convert_arguments("barplot", self.hist)
        color = DEFAULT_HIST_COLOR if self.color is None else self.color
        self.artists.extend(primitives.barplot(
            ax, xs, ys,
            width=np.diff(self.hist.bin_edges),
            gap=self.gap,
            color=color,
            label=self.label,
        ))
        return self


# ============================================================
# Registry
# ============================================================

RECIPES: Dict[str, type] = {
    "stackedhist": StackedHist,
    "ratiohist": RatioHist,
    "hist": HistPlot,
}


def recipe_defaults(name: str) -> Dict[str, Any]:
    """Default attribute set of a registered recipe."""
    cls = RECIPES[name]
    out: Dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        if f.default is not dataclasses.MISSING:
            out[f.name] = f.default
        elif f.default_factory is not dataclasses.MISSING:
            out[f.name] = f.default_factory()
    return out


# ============================================================
# Entry points
# ============================================================

def stackedhist(hs: Sequence[Hist1D], ax: Optional[plt.Axes] = None, **attrs: Any) -> FigureAxisPlot:
    """
    Plot a sequence of Hist1D stacked.

    Example
    -------
    h1 = Hist1D.from_data(rng.normal(size=1000), np.linspace(-3, 3, 21))
    h2 = Hist1D.from_data(rng.normal(size=10000), np.linspace(-3, 3, 21))
    fig, ax, p = stackedhist([h1, h2, h2], labels=["ZZ", "Z+jets", "ttbarZ"])
    ax.legend(p.legend_handles(), p.labels, title="Processes")
    """
    recipe = StackedHist(hs, **attrs)
    # validate before creating a figure so a failure leaves nothing behind
    recipe.validate()
    fig, ax = _resolve_ax(ax)
    return FigureAxisPlot(fig, ax, recipe.render(ax))


def ratiohist(
    h: Hist1D,
    h2: Optional[Hist1D] = None,
    ax: Optional[plt.Axes] = None,
    **attrs: Any,
) -> FigureAxisPlot:
    """
    Plot a ratio histogram. Given two histograms, plot h / h2 (divided by Hist1D itself).
    """
    recipe = RatioHist(h, **attrs) if h2 is None else RatioHist.from_pair(h, h2, **attrs)
    fig, ax = _resolve_ax(ax)
    return FigureAxisPlot(fig, ax, recipe.render(ax))


def hist(h: Hist1D, ax: Optional[plt.Axes] = None, **attrs: Any) -> FigureAxisPlot:
    recipe = HistPlot(h, **attrs)
    fig, ax = _resolve_ax(ax)
    return FigureAxisPlot(fig, ax, recipe.render(ax))


_PRIMITIVES: Dict[str, Callable[..., Any]] = {
    "stairs": primitives.stairs,
    "scatter": primitives.scatter,
    "barplot": primitives.barplot,
    "errorbars": primitives.errorbars,
    "crossbar": primitives.crossbar,
    "heatmap": primitives.heatmap,
}


def plot(obj: Any, kind: Optional[str] = None, ax: Optional[plt.Axes] = None, **kwargs: Any) -> FigureAxisPlot:
    """
    Draw a histogram with a primitive or recipe.

    kind defaults to plottype(obj): "hist" for Hist1D, "heatmap" for Hist2D.
    """
    kind = plottype(obj) if kind is None else kind
    if kind in RECIPES:
        recipe = RECIPES[kind](obj, **kwargs)
        fig, ax = _resolve_ax(ax)
        return FigureAxisPlot(fig, ax, recipe.render(ax))

    if kind not in _PRIMITIVES:
        raise KeyError(f"Unknown plot kind {kind!r}. Known: {sorted(set(_PRIMITIVES) | set(RECIPES))}")

    args = convert_arguments(kind, obj)
    if kind in ("barplot", "crossbar") and isinstance(obj, Hist1D):
        kwargs.setdefault("width", np.diff(obj.bin_edges))
    if kind == "heatmap" and isinstance(obj, Hist2D):
        xedges, yedges = obj.bin_edges
        kwargs.setdefault("xedges", xedges)
        kwargs.setdefault("yedges", yedges)
    fig, ax = _resolve_ax(ax)
    return FigureAxisPlot(fig, ax, _PRIMITIVES[kind](ax, *args, **kwargs))
