"""
primitives.py
=============

Draw primitives on a matplotlib Axes.

Every function takes the target Axes first and plain arrays after it, and
returns the artist(s) it created. Histogram objects are never handled here;
see convert.py for the histogram -> array conversions.

Conventions
-----------
• whiskerwidth is the full whisker length in points (matplotlib capsize is half of it)
• widths may be a scalar or one value per bar
"""

from __future__ import annotations

from typing import Any, List, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import is_color_like


def _default_width(x: np.ndarray) -> float:
    ux = np.unique(x)
    if ux.size < 2:
        return 1.0
    return float(np.min(np.diff(ux)))


def barplot(
    ax: plt.Axes,
    x,
    y,
    *,
    stack=None,
    color=None,
    width=None,
    gap: float = 0.0,
    label=None,
    **kwargs: Any,
) -> List[Any]:
    """
    Bar chart with optional stacking.

    stack : (N,) group tags or None
        Bars sharing an x value are stacked in order of first appearance of
        their group tag. One BarContainer is created per group.
    color : a single color, or (stacked only) one color per group
    label : str, or (stacked only) one label per group
    """
    x = np.asarray(x, float).ravel()
    y = np.asarray(y, float).ravel()
    if x.shape != y.shape:
        raise ValueError(f"x and y must have the same length, got {x.size} and {y.size}")

    if width is None:
        width = _default_width(x)
    w = np.broadcast_to(np.asarray(width, float), x.shape) * (1.0 - float(gap))

    if stack is None:
        bars = ax.bar(x, y, width=w, color=color, label=label, align="center", **kwargs)
        return [bars]

    stack = np.asarray(stack).ravel()
    if stack.shape != x.shape:
        raise ValueError(f"stack must have one tag per bar, got {stack.size} for {x.size} bars")

    groups = list(dict.fromkeys(stack.tolist()))
    group_colors = color is not None and not is_color_like(color)
    if group_colors and len(color) < len(groups):
        raise ValueError(f"need one color per stack group, got {len(color)} for {len(groups)}")

    ux, inverse = np.unique(x, return_inverse=True)
    inverse = np.ravel(inverse)
    bottom = np.zeros(ux.size)
    containers = []
    for gi, g in enumerate(groups):
        m = stack == g
        idx = inverse[m]
        c = color[gi] if group_colors else color
        lab = None
        if label is not None:
            lab = label if isinstance(label, str) else label[gi]
        bars = ax.bar(
            x[m], y[m],
            width=w[m],
            bottom=bottom[idx],
            color=c,
            label=lab,
            align="center",
            **kwargs,
        )
        np.add.at(bottom, idx, y[m])
        containers.append(bars)
    return containers


def scatter(ax: plt.Axes, x, y, *, color=None, **kwargs: Any):
    x = np.asarray(x, float).ravel()
    y = np.asarray(y, float).ravel()
    return ax.scatter(x, y, color=color, **kwargs)


def errorbars(
    ax: plt.Axes,
    x,
    y,
    err,
    *,
    whiskerwidth: float = 10,
    color=None,
    **kwargs: Any,
):
    """Symmetric vertical error bars of half-length err (no markers)."""
    x = np.asarray(x, float).ravel()
    y = np.asarray(y, float).ravel()
    err = np.asarray(err, float).ravel()
    return ax.errorbar(
        x, y,
        yerr=err,
        fmt="none",
        ecolor=color if color is not None else "black",
        capsize=float(whiskerwidth) / 2.0,
        **kwargs,
    )


def crossbar(
    ax: plt.Axes,
    x,
    y,
    low,
    high,
    *,
    width=None,
    gap: float = 0.0,
    color=None,
    show_midline: bool = True,
    midline_color="black",
    **kwargs: Any,
) -> List[Any]:
    """
    Filled boxes spanning [low, high] vertically and width horizontally,
    optionally with a line at y.
    """
    x = np.asarray(x, float).ravel()
    y = np.asarray(y, float).ravel()
    low = np.asarray(low, float).ravel()
    high = np.asarray(high, float).ravel()

    lo = np.minimum(low, high)
    hi = np.maximum(low, high)
    if width is None:
        width = _default_width(x)
    w = np.broadcast_to(np.asarray(width, float), x.shape) * (1.0 - float(gap))

    artists = [ax.bar(x, hi - lo, bottom=lo, width=w, color=color, linewidth=0, align="center", **kwargs)]
    if show_midline:
        artists.append(ax.hlines(y, x - w / 2.0, x + w / 2.0, colors=midline_color))
    return artists


def stairs(ax: plt.Axes, x, y, *, color=None, label=None, **kwargs: Any):
    """Step line, y[i] held on (x[i-1], x[i]]."""
    x = np.asarray(x, float).ravel()
    y = np.asarray(y, float).ravel()
    (line,) = ax.step(x, y, where="pre", color=color, label=label, **kwargs)
    return line


def heatmap(
    ax: plt.Axes,
    x,
    y,
    z,
    *,
    xedges=None,
    yedges=None,
    cmap=None,
    colorbar: bool = False,
    **kwargs: Any,
):
    """
    Heatmap over cell centers x, y. z is indexed [ix, iy]; NaN cells are left blank.

    With xedges and yedges the cells span the given boundaries exactly;
    otherwise boundaries are inferred halfway between centers.
    """
    x = np.asarray(x, float).ravel()
    y = np.asarray(y, float).ravel()
    z = np.asarray(z, float)
    if z.shape != (x.size, y.size):
        raise ValueError(f"z must have shape ({x.size}, {y.size}), got {z.shape}")

    if (xedges is None) != (yedges is None):
        raise ValueError("xedges and yedges must be given together")
    if xedges is not None:
        xedges = np.asarray(xedges, float).ravel()
        yedges = np.asarray(yedges, float).ravel()
        if xedges.size != x.size + 1 or yedges.size != y.size + 1:
            raise ValueError(
                f"edges must have {x.size + 1} and {y.size + 1} values, got {xedges.size} and {yedges.size}"
            )
        mesh = ax.pcolormesh(xedges, yedges, z.T, shading="flat", cmap=cmap, **kwargs)
    else:
        mesh = ax.pcolormesh(x, y, z.T, shading="nearest", cmap=cmap, **kwargs)
    if colorbar:
        ax.figure.colorbar(mesh, ax=ax, fraction=0.046, pad=0.04)
    return mesh


def hlines(ax: plt.Axes, y, *, color=None, linestyle: str = "-", **kwargs: Any) -> List[Any]:
    """Horizontal lines spanning the full axis width."""
    ys: Sequence[float] = np.atleast_1d(np.asarray(y, float)).tolist()
    return [ax.axhline(v, color=color, linestyle=linestyle, **kwargs) for v in ys]
