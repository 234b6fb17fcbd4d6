"""Test configuration and shared fixtures."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from histviz.hist import Hist1D, Hist2D


@pytest.fixture(autouse=True)
def close_figures():
    """Close every figure a test opened."""
    yield
    plt.close("all")


@pytest.fixture
def edges():
    return np.array([0.0, 1.0, 2.0, 3.0])


@pytest.fixture
def simple_hist(edges):
    """Hist1D with counts [5, 7, 2] on edges [0, 1, 2, 3]."""
    return Hist1D([5.0, 7.0, 2.0], edges)


@pytest.fixture
def stack_hists(edges):
    """Three histograms sharing edges."""
    return [
        Hist1D([5.0, 7.0, 2.0], edges),
        Hist1D([1.0, 4.0, 9.0], edges),
        Hist1D([3.0, 0.0, 16.0], edges),
    ]


@pytest.fixture
def hist2d():
    counts = np.array([[0.0, 2.0], [3.0, 0.0], [1.0, 4.0]])
    return Hist2D(counts, ([0.0, 1.0, 2.0, 3.0], [0.0, 0.5, 1.0]))
