"""
histviz.hist
============

Minimal numpy-backed histogram containers.

The plotting layer only *reads* histograms. These containers provide exactly
the views it needs and nothing more:

  bin_edges, bin_centers, bin_counts, bin_errors
  nentries, overflow, mean(), std()
  h1 / h2   (division with uncorrelated error propagation)

Conventions
-----------
• 1D: edges (N+1,), counts (N,), sumw2 (N,)
• 2D: edges = (xedges (NX+1,), yedges (NY+1,)), counts (NX, NY) indexed [ix, iy]
• errors = sqrt(sumw2); sumw2 defaults to counts (Poisson)
• overflow = summed weight of entries that fell outside the binning
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple, Union

import numpy as np

from histviz.errors import EdgeMismatchError


ArrayLike = Union[Sequence[float], np.ndarray]


def _check_edges(edges: ArrayLike, name: str = "edges") -> np.ndarray:
    edges = np.asarray(edges, float).ravel()
    if edges.size < 2:
        raise ValueError(f"{name} must contain at least 2 values, got {edges.size}")
    if not np.all(np.diff(edges) > 0):
        raise ValueError(f"{name} must be strictly increasing")
    return edges


def _readonly(arr: np.ndarray) -> np.ndarray:
    out = np.array(arr, copy=True)
    out.setflags(write=False)
    return out


def _centers(edges: np.ndarray) -> np.ndarray:
    return 0.5 * (edges[:-1] + edges[1:])


def _weighted_mean_std(x: np.ndarray, w: np.ndarray) -> Tuple[float, float]:
    total = float(np.sum(w))
    if total == 0.0:
        return float("nan"), float("nan")
    mean = float(np.sum(w * x) / total)
    var = float(np.sum(w * (x - mean) ** 2) / total)
    return mean, float(np.sqrt(max(var, 0.0)))


# ============================================================
# Hist1D
# ============================================================

class Hist1D:
    """
    One-dimensional histogram.

    Parameters
    ----------
    counts : (N,)
        Per-bin (weighted) counts.
    edges : (N+1,)
        Strictly increasing bin edges.
    sumw2 : (N,) or None
        Per-bin sum of squared weights. Defaults to counts.
    nentries : int or None
        Number of fills. Defaults to round(sum(counts)).
    overflow : float
        Summed weight of entries outside [edges[0], edges[-1]].
    """

    def __init__(
        self,
        counts: ArrayLike,
        edges: ArrayLike,
        *,
        sumw2: Optional[ArrayLike] = None,
        nentries: Optional[int] = None,
        overflow: float = 0.0,
    ) -> None:
        edges = _check_edges(edges)
        counts = np.asarray(counts, float).ravel()
        if counts.size != edges.size - 1:
            raise ValueError(
                f"counts must have len(edges)-1 = {edges.size - 1} values, got {counts.size}"
            )
        if sumw2 is None:
            sumw2 = np.abs(counts)
        sumw2 = np.asarray(sumw2, float).ravel()
        if sumw2.shape != counts.shape:
            raise ValueError(f"sumw2 shape {sumw2.shape} does not match counts shape {counts.shape}")

        self._edges = _readonly(edges)
        self._counts = _readonly(counts)
        self._sumw2 = _readonly(sumw2)
        self._nentries = int(round(float(np.sum(counts)))) if nentries is None else int(nentries)
        self._overflow = float(overflow)

    @classmethod
    def from_data(
        cls,
        values: ArrayLike,
        bins: Union[int, ArrayLike] = 10,
        *,
        weights: Optional[ArrayLike] = None,
        range: Optional[Tuple[float, float]] = None,
    ) -> "Hist1D":
        """Fill a histogram from raw values (numpy.histogram binning rules)."""
        values = np.asarray(values, float).ravel()
        w = None if weights is None else np.asarray(weights, float).ravel()

        counts, edges = np.histogram(values, bins=bins, range=range, weights=w)
        ww = np.ones_like(values) if w is None else w
        sumw2, _ = np.histogram(values, bins=edges, weights=ww ** 2)

        outside = (values < edges[0]) | (values > edges[-1])
        return cls(
            counts,
            edges,
            sumw2=sumw2,
            nentries=int(values.size),
            overflow=float(np.sum(ww[outside])),
        )

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def bin_edges(self) -> np.ndarray:
        return self._edges

    @property
    def bin_centers(self) -> np.ndarray:
        return _centers(self._edges)

    @property
    def bin_counts(self) -> np.ndarray:
        return self._counts

    @property
    def sumw2(self) -> np.ndarray:
        return self._sumw2

    @property
    def bin_errors(self) -> np.ndarray:
        return np.sqrt(self._sumw2)

    @property
    def nbins(self) -> int:
        return int(self._counts.size)

    @property
    def nentries(self) -> int:
        return self._nentries

    @property
    def overflow(self) -> float:
        return self._overflow

    def mean(self) -> float:
        """Count-weighted mean of the bin centers."""
        return _weighted_mean_std(self.bin_centers, self._counts)[0]

    def std(self) -> float:
        """Count-weighted standard deviation of the bin centers."""
        return _weighted_mean_std(self.bin_centers, self._counts)[1]

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __truediv__(self, other: "Hist1D") -> "Hist1D":
        """
        Bin-wise ratio with uncorrelated error propagation:

            sigma = sqrt((e1/c2)^2 + (c1*e2/c2^2)^2)
        """
        if not isinstance(other, Hist1D):
            return NotImplemented
        if not np.array_equal(self._edges, other._edges):
            raise EdgeMismatchError("binedges must match to divide histograms")

        c1, c2 = self._counts, other._counts
        e1, e2 = self.bin_errors, other.bin_errors
        with np.errstate(divide="ignore", invalid="ignore"):
            ratio = c1 / c2
            err = np.sqrt((e1 / c2) ** 2 + (c1 * e2 / c2 ** 2) ** 2)

        return Hist1D(ratio, self._edges, sumw2=err ** 2, nentries=self._nentries)

    def __repr__(self) -> str:
        return (
            f"Hist1D(nbins={self.nbins}, range=({self._edges[0]:g}, {self._edges[-1]:g}), "
            f"nentries={self._nentries})"
        )


# ============================================================
# Hist2D
# ============================================================

class Hist2D:
    """
    Two-dimensional histogram, counts indexed [ix, iy].
    """

    def __init__(
        self,
        counts: ArrayLike,
        edges: Tuple[ArrayLike, ArrayLike],
        *,
        sumw2: Optional[ArrayLike] = None,
        nentries: Optional[int] = None,
        overflow: float = 0.0,
    ) -> None:
        if len(edges) != 2:
            raise ValueError("Hist2D edges must be a pair (xedges, yedges)")
        xedges = _check_edges(edges[0], "xedges")
        yedges = _check_edges(edges[1], "yedges")

        counts = np.asarray(counts, float)
        shape = (xedges.size - 1, yedges.size - 1)
        if counts.shape != shape:
            raise ValueError(f"counts must have shape {shape}, got {counts.shape}")
        if sumw2 is None:
            sumw2 = np.abs(counts)
        sumw2 = np.asarray(sumw2, float)
        if sumw2.shape != shape:
            raise ValueError(f"sumw2 must have shape {shape}, got {sumw2.shape}")

        self._edges = (_readonly(xedges), _readonly(yedges))
        self._counts = _readonly(counts)
        self._sumw2 = _readonly(sumw2)
        self._nentries = int(round(float(np.sum(counts)))) if nentries is None else int(nentries)
        self._overflow = float(overflow)

    @classmethod
    def from_data(
        cls,
        x: ArrayLike,
        y: ArrayLike,
        bins=10,
        *,
        weights: Optional[ArrayLike] = None,
        range=None,
    ) -> "Hist2D":
        """Fill from paired samples (numpy.histogram2d binning rules)."""
        x = np.asarray(x, float).ravel()
        y = np.asarray(y, float).ravel()
        if x.shape != y.shape:
            raise ValueError(f"x and y must have the same length, got {x.size} and {y.size}")
        w = None if weights is None else np.asarray(weights, float).ravel()

        counts, xedges, yedges = np.histogram2d(x, y, bins=bins, range=range, weights=w)
        ww = np.ones_like(x) if w is None else w
        sumw2, _, _ = np.histogram2d(x, y, bins=(xedges, yedges), weights=ww ** 2)

        outside = (
            (x < xedges[0]) | (x > xedges[-1]) | (y < yedges[0]) | (y > yedges[-1])
        )
        return cls(
            counts,
            (xedges, yedges),
            sumw2=sumw2,
            nentries=int(x.size),
            overflow=float(np.sum(ww[outside])),
        )

    @property
    def bin_edges(self) -> Tuple[np.ndarray, np.ndarray]:
        return self._edges

    @property
    def bin_centers(self) -> Tuple[np.ndarray, np.ndarray]:
        return _centers(self._edges[0]), _centers(self._edges[1])

    @property
    def bin_counts(self) -> np.ndarray:
        return self._counts

    @property
    def sumw2(self) -> np.ndarray:
        return self._sumw2

    @property
    def bin_errors(self) -> np.ndarray:
        return np.sqrt(self._sumw2)

    @property
    def nentries(self) -> int:
        return self._nentries

    @property
    def overflow(self) -> float:
        return self._overflow

    def project(self, axis: str) -> Hist1D:
        """Marginal 1D histogram along 'x' or 'y'."""
        if axis not in ("x", "y"):
            raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")
        i = 0 if axis == "x" else 1
        other = 1 - i
        return Hist1D(
            self._counts.sum(axis=other),
            self._edges[i],
            sumw2=self._sumw2.sum(axis=other),
            nentries=self._nentries,
        )

    def mean(self) -> Tuple[float, float]:
        return self.project("x").mean(), self.project("y").mean()

    def std(self) -> Tuple[float, float]:
        return self.project("x").std(), self.project("y").std()

    def __repr__(self) -> str:
        nx, ny = self._counts.shape
        return f"Hist2D(nbins=({nx}, {ny}), nentries={self._nentries})"
