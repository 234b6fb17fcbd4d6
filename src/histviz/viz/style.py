"""
style.py
========

Central plotting style helpers.

Provides:
• rcParams defaults (optionally driven by a PlotConfig)
• the default categorical palette used by stacked plots
• an ATLAS-like theme usable with plt.rc_context
• figure/axis creation with consistent sizing
• multi-format figure saving
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
import matplotlib.pyplot as plt


# Okabe-Ito / "Wong" colorblind-safe palette
WONG_COLORS: Tuple[Tuple[float, float, float], ...] = (
    (0 / 255, 114 / 255, 178 / 255),
    (230 / 255, 159 / 255, 0 / 255),
    (0 / 255, 158 / 255, 115 / 255),
    (204 / 255, 121 / 255, 167 / 255),
    (86 / 255, 180 / 255, 233 / 255),
    (213 / 255, 94 / 255, 0 / 255),
    (240 / 255, 228 / 255, 66 / 255),
)

# Used by the plain "hist" recipe when no color is given.
DEFAULT_HIST_COLOR: Tuple[float, float, float] = WONG_COLORS[0]

RATIO_LINE_COLOR: Tuple[float, float, float] = (0.2, 0.2, 0.2)

ATLAS_THEME: Dict[str, Any] = {
    "font.family": "sans-serif",
    "font.sans-serif": ["TeX Gyre Heros", "Helvetica", "Arial", "DejaVu Sans"],
    "xtick.direction": "in",
    "ytick.direction": "in",
    "xtick.top": True,
    "ytick.right": True,
    "xtick.minor.visible": True,
    "ytick.minor.visible": True,
    "xtick.major.size": 8,
    "ytick.major.size": 8,
    "xtick.minor.size": 4,
    "ytick.minor.size": 4,
    "axes.grid": False,
    "legend.frameon": False,
}


def wong_colors() -> List[Tuple[float, float, float]]:
    """Fresh list copy of the default palette."""
    return list(WONG_COLORS)


def apply_mpl_defaults(overrides: Optional[Mapping[str, Any]] = None) -> None:
    """
    Apply lightweight defaults, then any rcParams overrides (e.g. PlotConfig.style).
    Call once per plotting session.
    """
    plt.rcParams["figure.dpi"] = 120
    plt.rcParams["savefig.dpi"] = 160
    plt.rcParams["axes.grid"] = True
    plt.rcParams["grid.alpha"] = 0.25
    plt.rcParams["axes.titlesize"] = 11
    plt.rcParams["axes.labelsize"] = 11
    plt.rcParams["legend.fontsize"] = 9
    if overrides:
        plt.rcParams.update(dict(overrides))


def atlas_theme():
    """rc_context for ATLAS-style figures: `with atlas_theme(): ...`"""
    return plt.rc_context(ATLAS_THEME)


def default_fig_ax(figsize: Tuple[float, float] = (7, 5)):
    """Create a figure+axis with consistent defaults."""
    fig, ax = plt.subplots(figsize=figsize)
    return fig, ax


def save_figure(fig: plt.Figure, out_base: Path, formats: Sequence[str], dpi: int = 160) -> List[Path]:
    """Save fig as out_base.<fmt> for each format; returns the written paths."""
    out_base = Path(out_base)
    out_base.parent.mkdir(parents=True, exist_ok=True)
    written = []
    for fmt in formats:
        fmt = fmt.lower().lstrip(".")
        path = out_base.with_suffix(f".{fmt}")
        fig.savefig(path, dpi=dpi, bbox_inches="tight")
        written.append(path)
    return written


def ratio_fig_axes(figsize: Tuple[float, float] = (7, 6), height_ratios: Tuple[float, float] = (3, 1)):
    """
    Main panel + ratio panel sharing x.

    Returns
    -------
    fig, (ax_main, ax_ratio)
    """
    fig, (ax_main, ax_ratio) = plt.subplots(
        2, 1,
        figsize=figsize,
        sharex=True,
        gridspec_kw={"height_ratios": list(height_ratios), "hspace": 0.05},
    )
    return fig, (ax_main, ax_ratio)
