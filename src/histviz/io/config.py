# src/histviz/io/config.py
"""
histviz.io.config
=================

Config discovery + YAML loading for plot styling.

What belongs here
-----------------
- Locate a config directory inside a base directory
- Discover YAML files and pick the style file by name
- Load YAML safely and normalize structures
- Merge a user style YAML over built-in defaults -> PlotConfig

What does NOT belong here
-------------------------
- Applying rcParams (that's histviz.viz.style)
- Drawing anything
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from histviz.viz.style import wong_colors


# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULTS: Dict[str, Any] = {
    "meta": {"name": "histviz", "schema_version": "0.1"},
    "figure": {"figsize": [7.0, 5.0], "dpi": 120, "savefig_dpi": 160},
    "style": {},
    "palette": None,
    "stackedhist": {"errors": "shade", "error_color": [0.0, 0.0, 0.0, 0.5], "whiskerwidth": 10, "gap": 0.0},
    "ratiohist": {"errors": True, "whiskerwidth": 10, "color": "black"},
    "collab": {"name": "ATLAS", "stage": "Preliminary", "position": "lt"},
    "statbox": {"position": [1, 2]},
}


@dataclass
class PlotConfig:
    """Resolved plot configuration."""
    name: str = "histviz"
    schema_version: str = "0.1"
    figsize: Tuple[float, float] = (7.0, 5.0)
    dpi: int = 120
    savefig_dpi: int = 160
    style: Dict[str, Any] = field(default_factory=dict)
    palette: List[Any] = field(default_factory=wong_colors)
    stackedhist: Dict[str, Any] = field(default_factory=dict)
    ratiohist: Dict[str, Any] = field(default_factory=dict)
    collab: Dict[str, Any] = field(default_factory=dict)
    statbox_position: Tuple[int, int] = (1, 2)
    source: Optional[Path] = None

    def rc_overrides(self) -> Dict[str, Any]:
        out = {"figure.dpi": self.dpi, "savefig.dpi": self.savefig_dpi}
        out.update(self.style)
        return out

    def stackedhist_attrs(self) -> Dict[str, Any]:
        """Keyword attributes for stackedhist(), palette included."""
        attrs = dict(self.stackedhist)
        attrs.setdefault("color", list(self.palette))
        if isinstance(attrs.get("error_color"), list):
            attrs["error_color"] = tuple(attrs["error_color"])
        return attrs


# -----------------------------------------------------------------------------
# Config directory discovery
# -----------------------------------------------------------------------------

def find_config_dir(base_dir: Path, preferred: Optional[str] = None) -> Path:
    """
    Find a config directory inside base_dir.

    Search order:
      - if preferred is provided: base_dir/<preferred>
      - otherwise: base_dir/configs, then base_dir/config

    Raises:
      FileNotFoundError if none exist.
    """
    base_dir = Path(base_dir).expanduser().resolve()

    candidates: List[Path] = []
    if preferred:
        candidates.append(base_dir / preferred)
    else:
        candidates.extend([base_dir / "configs", base_dir / "config"])

    for c in candidates:
        if c.exists() and c.is_dir():
            return c

    tried = ", ".join(str(c) for c in candidates)
    raise FileNotFoundError(
        f"Could not find a config directory inside base_dir={base_dir}. Tried: {tried}"
    )


def discover_yaml_files(config_dir: Path, recursive: bool = False) -> List[Path]:
    """Return a sorted list of .yaml/.yml files in config_dir."""
    config_dir = Path(config_dir).expanduser().resolve()
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory does not exist: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    if recursive:
        paths = list(config_dir.rglob("*.yaml")) + list(config_dir.rglob("*.yml"))
    else:
        paths = list(config_dir.glob("*.yaml")) + list(config_dir.glob("*.yml"))

    return sorted([p.resolve() for p in paths], key=lambda p: p.name.lower())


def resolve_style_config(base_dir: Path, name: str = "plot_style", preferred: Optional[str] = None) -> Path:
    """
    Locate the style YAML called <name>.yaml / <name>.yml in the config
    directory of base_dir (see find_config_dir).

    Raises:
      FileNotFoundError if the directory or the named file is missing.
    """
    config_dir = find_config_dir(base_dir, preferred=preferred)
    found = discover_yaml_files(config_dir)
    for p in found:
        if p.stem == name:
            return p

    have = ", ".join(p.name for p in found) or "none"
    raise FileNotFoundError(f"No {name}.yaml in {config_dir}. Found: {have}")


# -----------------------------------------------------------------------------
# YAML loading + normalization
# -----------------------------------------------------------------------------

def load_yaml(path: Path) -> Dict[str, Any]:
    """
    Load YAML from path using safe loader.

    Normalization:
      - empty YAML -> {}
      - top-level must be a dict (mapping); otherwise error
    """
    path = Path(path).expanduser().resolve()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise TypeError(f"Top-level YAML must be a mapping/dict: {path}")

    return data


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base (mappings merge, everything else replaces)."""
    out = copy.deepcopy(dict(base))
    for k, v in override.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), Mapping):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


def load_plot_config(path: Optional[Path] = None) -> PlotConfig:
    """
    Build a PlotConfig from built-in defaults, optionally overridden by a YAML file.
    """
    raw = copy.deepcopy(DEFAULTS)
    source = None
    if path is not None:
        source = Path(path).expanduser().resolve()
        raw = deep_merge(raw, load_yaml(source))

    meta = raw.get("meta") or {}
    fig = raw.get("figure") or {}
    figsize = fig.get("figsize", DEFAULTS["figure"]["figsize"])
    if len(figsize) != 2:
        raise ValueError(f"figure.figsize must have 2 values, got {figsize!r}")

    palette = raw.get("palette")
    if palette is None:
        palette = wong_colors()
    elif not isinstance(palette, list) or not palette:
        raise TypeError(f"palette must be a non-empty list of colors, got {palette!r}")

    pos = raw.get("statbox", {}).get("position", [1, 2])
    if len(pos) != 2:
        raise ValueError(f"statbox.position must be [row, col], got {pos!r}")

    return PlotConfig(
        name=str(meta.get("name", "histviz")),
        schema_version=str(meta.get("schema_version", "0.1")),
        figsize=(float(figsize[0]), float(figsize[1])),
        dpi=int(fig.get("dpi", 120)),
        savefig_dpi=int(fig.get("savefig_dpi", 160)),
        style=dict(raw.get("style") or {}),
        palette=list(palette),
        stackedhist=dict(raw.get("stackedhist") or {}),
        ratiohist=dict(raw.get("ratiohist") or {}),
        collab=dict(raw.get("collab") or {}),
        statbox_position=(int(pos[0]), int(pos[1])),
        source=source,
    )
