#!/usr/bin/env python3
"""
make_showcase.py
================

Render every histviz recipe from random data and save the figures.

What it does
------------
• Loads a plot style YAML into a PlotConfig (plot_style.yaml discovered in
  <config-dir>/configs unless --config names a file)
• Fills a few Hist1D / Hist2D from a seeded numpy Generator
• Draws:
    stacked.*     stackedhist + ratiohist panel + collabtext
    heatmap.*     Hist2D heatmap + statbox
    stairs.*      stairs outline + error bars + statbox + collabtext
• Saves each figure in every requested format under --out-dir

Usage
-----
python scripts/make_showcase.py --out-dir figures --formats png pdf
"""

from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from histviz import Hist1D, Hist2D, collabtext, plot, ratiohist, stackedhist, statbox
from histviz.io.config import load_plot_config, resolve_style_config
from histviz.io.logging_utils import setup_logger
from histviz.viz.style import apply_mpl_defaults, default_fig_ax, ratio_fig_axes, save_figure


REPO_ROOT = Path(__file__).resolve().parent.parent


def main() -> None:
    parser = argparse.ArgumentParser(description="Render the histviz recipe showcase.")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    parser.add_argument("--config-dir", type=str, default=str(REPO_ROOT), help="Base directory holding configs/ (or config/)")
    parser.add_argument("--config", type=str, default=None, help="Explicit plot style YAML (overrides --config-dir)")
    parser.add_argument("--out-dir", required=True, help="Directory for the figures and showcase.log")
    parser.add_argument("--formats", nargs="+", default=["png"], help="e.g. png pdf")
    parser.add_argument("--seed", type=int, default=1234, help="Random seed for the toy data")
    args = parser.parse_args()

    out_dir = Path(args.out_dir).expanduser().resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    logger = setup_logger(out_dir / "showcase.log", level=args.log_level)

    config_path = Path(args.config) if args.config else resolve_style_config(Path(args.config_dir))
    cfg = load_plot_config(config_path)
    apply_mpl_defaults(cfg.rc_overrides())
    logger.info("========== histviz showcase ==========")
    logger.info("config: %s", cfg.source)
    logger.info("out_dir: %s", out_dir)

    rng = np.random.default_rng(args.seed)
    edges = np.linspace(-3.0, 3.0, 31)
    hs = [
        Hist1D.from_data(rng.normal(0.0, 1.0, 2000), edges),
        Hist1D.from_data(rng.normal(0.5, 1.2, 5000), edges),
        Hist1D.from_data(rng.normal(-0.5, 0.8, 3000), edges),
    ]
    labels = ["ZZ", "Z+jets", "ttbarZ"]
    data = Hist1D.from_data(
        np.concatenate([rng.normal(0.0, 1.0, 2000), rng.normal(0.5, 1.2, 5000), rng.normal(-0.5, 0.8, 3000)]),
        edges,
    )

    # -----------------------------
    # Stacked + ratio
    # -----------------------------
    fig, (ax_main, ax_ratio) = ratio_fig_axes(figsize=(cfg.figsize[0], cfg.figsize[1] * 1.2))
    _, _, p = stackedhist(hs, ax=ax_main, labels=labels, **cfg.stackedhist_attrs())
    plot(data, "scatter", ax=ax_main, color="black", s=10, label="data")
    ax_main.legend(p.legend_handles(), labels, title="Processes", loc="upper right")
    collabtext(
        ax_main,
        cfg.collab.get("name", "ATLAS"),
        cfg.collab.get("stage", "Preliminary"),
        position=cfg.collab.get("position", "lt"),
    )
    ax_main.set_ylabel("Events")

    mc_total = Hist1D(p.totals(), edges, sumw2=p.uncertainties() ** 2)
    ratiohist(data, mc_total, ax=ax_ratio, **cfg.ratiohist)
    ax_ratio.set_ylim(0.5, 1.5)
    ax_ratio.set_ylabel("Data / MC")
    ax_ratio.set_xlabel("x")
    save_figure(fig, out_dir / "stacked", args.formats, dpi=cfg.savefig_dpi)
    plt.close(fig)
    logger.info("plotted stacked and saved as: %s ", out_dir / "stacked")

    # -----------------------------
    # Heatmap + statbox
    # -----------------------------
    x = rng.normal(0.0, 1.0, 20000)
    y = 0.6 * x + rng.normal(0.0, 0.8, x.size)
    h2 = Hist2D.from_data(x, y, bins=(np.linspace(-3, 3, 41), np.linspace(-3, 3, 41)))
    fap = plot(h2, colorbar=True)
    fap.figure.set_size_inches(cfg.figsize[0] * 1.4, cfg.figsize[1])
    statbox(fap, h2, position=cfg.statbox_position)
    save_figure(fap.figure, out_dir / "heatmap", args.formats, dpi=cfg.savefig_dpi)
    plt.close(fap.figure)
    logger.info("plotted heatmap and saved as: %s ", out_dir / "heatmap")

    # -----------------------------
    # Stairs + error bars
    # -----------------------------
    fig, ax = default_fig_ax(figsize=cfg.figsize)
    plot(data, "stairs", ax=ax, color="black")
    plot(data, "errorbars", ax=ax, color="black")
    collabtext(ax, cfg.collab.get("name", "ATLAS"), "Internal", position="rt")
    statbox(fig, data, position=cfg.statbox_position)
    save_figure(fig, out_dir / "stairs", args.formats, dpi=cfg.savefig_dpi)
    plt.close(fig)
    logger.info("plotted stairs and saved as: %s ", out_dir / "stairs")

    print("\nShowcase plots saved to:")
    print(f"  {out_dir}\n")


if __name__ == "__main__":
    main()
