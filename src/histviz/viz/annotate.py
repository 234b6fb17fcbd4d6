"""
annotate.py
===========

Annotators that mutate an existing figure/axis.

• statbox(fig, h, position=(1, 2))     ROOT-style statistics box in a figure grid cell
• collabtext(ax, "ATLAS", "Preliminary", position="lt")
                                       collaboration label at an axes-relative position
"""

from __future__ import annotations

import math
from typing import Dict, List, Tuple, Union

import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.gridspec import GridSpec, GridSpecFromSubplotSpec
from matplotlib.patches import Patch

from histviz.errors import AnchorError
from histviz.hist import Hist1D, Hist2D
from histviz.viz.recipes import FigureAxisPlot


ANCHORS = {
    "lt": (0.04, 0.94),
    "rt": (0.70, 0.94),
}


def round_sigdigits(x: float, sigdigits: int = 2) -> float:
    """Round to a number of significant digits (non-finite and zero pass through)."""
    x = float(x)
    if x == 0.0 or not math.isfinite(x):
        return x
    return round(x, sigdigits - 1 - int(math.floor(math.log10(abs(x)))))


def statbox_labels(h: Union[Hist1D, Hist2D]) -> List[str]:
    if isinstance(h, Hist2D):
        xm, ym = (round_sigdigits(v) for v in h.mean())
        xs, ys = (round_sigdigits(v) for v in h.std())
        return [
            f"Entries = {h.nentries}",
            f"Mean x = {xm}",
            f"Mean y = {ym}",
            f"Std Dev x = {xs}",
            f"Std Dev y = {ys}",
            f"Overflow = {_format_count(h.overflow)}",
        ]
    if isinstance(h, Hist1D):
        return [
            f"Entries = {h.nentries}",
            f"Mean = {round_sigdigits(h.mean())}",
            f"Std Dev = {round_sigdigits(h.std())}",
            f"Overflow = {_format_count(h.overflow)}",
        ]
    raise TypeError(f"statbox expects Hist1D or Hist2D, got {type(h).__name__}")


def _format_count(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.12g}"


def _rebase(ss, new_top, fig: Figure, cache: Dict[int, GridSpecFromSubplotSpec]):
    """
    SubplotSpec equivalent to ss, with its topmost spec replaced by new_top.
    Nested grids (e.g. the main/colorbar split made by fig.colorbar(ax=...))
    are rebuilt with the same geometry, ratios and spacing.
    """
    gs = ss.get_gridspec()
    if not isinstance(gs, GridSpecFromSubplotSpec):
        return new_top
    key = id(gs)
    if key not in cache:
        # matplotlib has no public accessor for a nested grid's parent spec
        parent = _rebase(gs._subplot_spec, new_top, fig, cache)
        params = gs.get_subplot_params(fig)
        nrows, ncols = gs.get_geometry()
        cache[key] = GridSpecFromSubplotSpec(
            nrows, ncols,
            subplot_spec=parent,
            wspace=params.wspace,
            hspace=params.hspace,
            height_ratios=gs.get_height_ratios(),
            width_ratios=gs.get_width_ratios(),
        )
    return cache[key][ss.rowspan.start:ss.rowspan.stop, ss.colspan.start:ss.colspan.stop]


def _grid_cell(fig: Figure, row: int, col: int) -> plt.Axes:
    """
    Blank axes occupying cell (row, col), 1-based, of the figure's top-level grid.
    The grid grows (existing axes are re-placed on the larger grid, nested
    layouts included) when the cell lies outside it.
    """
    if row < 1 or col < 1:
        raise ValueError(f"position must be 1-based (row, col), got ({row}, {col})")

    placed = [ax for ax in fig.axes if ax.get_subplotspec() is not None]
    nrows, ncols = 0, 0
    gs = None
    if placed:
        gs = placed[0].get_subplotspec().get_topmost_subplotspec().get_gridspec()
        nrows, ncols = gs.get_geometry()

    if gs is None or row > nrows or col > ncols:
        new = GridSpec(max(nrows, row), max(ncols, col), figure=fig)
        cache: Dict[int, GridSpecFromSubplotSpec] = {}
        for ax in placed:
            ss = ax.get_subplotspec()
            top = ss.get_topmost_subplotspec()
            new_top = new[top.rowspan.start:top.rowspan.stop, top.colspan.start:top.colspan.stop]
            spec = _rebase(ss, new_top, fig, cache)
            ax.set_subplotspec(spec)
            ax.set_position(spec.get_position(fig))
        gs = new

    cell = fig.add_subplot(gs[row - 1, col - 1])
    cell.axis("off")
    return cell


def statbox(
    fig: Union[Figure, FigureAxisPlot],
    h: Union[Hist1D, Hist2D],
    *,
    position: Tuple[int, int] = (1, 2),
):
    """
    Add a ROOT-style statbox to an existing figure.

    Example
    -------
    h1 = Hist1D.from_data(rng.normal(size=10_000), 40)
    fap = hist(h1, label="a")
    statbox(fap, h1)
    """
    figure = fig.figure if isinstance(fig, FigureAxisPlot) else fig
    labels = statbox_labels(h)
    cell = _grid_cell(figure, *position)
    handles = [Patch(facecolor="none", edgecolor="none") for _ in labels]
    cell.legend(handles, labels, loc="center", handlelength=0, handletextpad=0, frameon=True)
    return fig


def collabtext(
    axis: plt.Axes,
    colabname: str = "ATLAS",
    stage: str = "Preliminary",
    *,
    position: Union[str, Tuple[float, float]] = "lt",
    fontsize: float = 14,
):
    """
    Inject collaboration text such as "ATLAS Preliminary". Tuple positions are
    relative axes coordinates; named anchors are "lt" and "rt".

    Returns
    -------
    (name_text, stage_text)
    """
    if isinstance(position, str):
        if len(position) != 2 or position not in ANCHORS:
            raise AnchorError(f"position must be one of {sorted(ANCHORS)}, got {position!r}")
        pos = ANCHORS[position]
    else:
        if len(position) != 2:
            raise AnchorError(f"position must be an (x, y) pair of relative coordinates, got {position!r}")
        pos = (float(position[0]), float(position[1]))

    name = axis.text(
        pos[0], pos[1], colabname,
        transform=axis.transAxes,
        fontsize=fontsize,
        fontweight="bold",
        fontstyle="italic",
        ha="left",
        va="bottom",
    )
    # chained to the right edge of the name
    status = axis.annotate(
        f" {stage}",
        xy=(1, 0),
        xycoords=name,
        fontsize=fontsize,
        fontweight="normal",
        fontstyle="normal",
        ha="left",
        va="bottom",
    )
    return name, status
