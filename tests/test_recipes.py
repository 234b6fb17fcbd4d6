"""Tests for the stacked / ratio / bare-histogram recipes and generic plot()."""

import matplotlib.pyplot as plt
import numpy as np
import pytest
from matplotlib.collections import PathCollection, QuadMesh
from matplotlib.colors import to_rgba
from matplotlib.container import BarContainer, ErrorbarContainer

from histviz.errors import ColorShortageError, EdgeMismatchError, InvalidColorError
from histviz.hist import Hist1D, Hist2D
from histviz.viz.recipes import (
    HistPlot,
    RatioHist,
    StackedHist,
    hist,
    plot,
    ratiohist,
    recipe_defaults,
    stackedhist,
)
from histviz.viz.style import DEFAULT_HIST_COLOR, wong_colors


def _bar_containers(ax):
    return [c for c in ax.containers if isinstance(c, BarContainer)]


def _errorbar_segments(container):
    return np.asarray(container.lines[2][0].get_segments())


class TestStackedHist:

    def test_stack_tops_equal_summed_counts(self, stack_hists):
        fig, ax, p = stackedhist(stack_hists, errors=False)
        bars = _bar_containers(ax)
        assert len(bars) == 3

        tops = np.array([r.get_y() + r.get_height() for r in bars[-1].patches])
        expected = np.sum([h.bin_counts for h in stack_hists], axis=0)
        np.testing.assert_allclose(tops, expected)
        np.testing.assert_allclose(p.totals(), expected)

    def test_series_colors_follow_palette(self, stack_hists):
        colors = ["red", "green", "blue", "black"]
        _, ax, _ = stackedhist(stack_hists, color=colors, errors=False)
        for container, c in zip(_bar_containers(ax), colors):
            assert container.patches[0].get_facecolor() == to_rgba(c)

    def test_flattened_group_tags(self, stack_hists):
        xs, ys, grp = StackedHist(stack_hists).flattened()
        np.testing.assert_allclose(xs, np.tile([0.5, 1.5, 2.5], 3))
        np.testing.assert_allclose(ys, [5, 7, 2, 1, 4, 9, 3, 0, 16])
        np.testing.assert_array_equal(grp, [0, 0, 0, 1, 1, 1, 2, 2, 2])

    def test_uncertainty_in_quadrature(self, stack_hists):
        p = StackedHist(stack_hists)
        expected = np.sqrt([5 + 1 + 3, 7 + 4 + 0, 2 + 9 + 16])
        np.testing.assert_allclose(p.uncertainties(), expected)

    def test_bar_errors_span_half_uncertainty(self, stack_hists):
        _, ax, p = stackedhist(stack_hists, errors="bar", whiskerwidth=6)
        eb = [c for c in ax.containers if isinstance(c, ErrorbarContainer)]
        assert len(eb) == 1
        seg = _errorbar_segments(eb[0])
        half = p.uncertainties() / 2.0
        np.testing.assert_allclose(seg[:, 0, 1], p.totals() - half)
        np.testing.assert_allclose(seg[:, 1, 1], p.totals() + half)

    def test_shaded_band(self, stack_hists):
        _, ax, p = stackedhist(stack_hists, errors="shade")
        bars = _bar_containers(ax)
        # three stacked series + one band
        assert len(bars) == 4
        band = bars[-1]
        half = p.uncertainties() / 2.0
        np.testing.assert_allclose([r.get_y() for r in band.patches], p.totals() - half)
        np.testing.assert_allclose([r.get_height() for r in band.patches], 2 * half)
        np.testing.assert_allclose([r.get_width() for r in band.patches], [1.0, 1.0, 1.0])
        assert band.patches[0].get_facecolor() == (0.0, 0.0, 0.0, 0.5)
        assert not [c for c in ax.containers if isinstance(c, ErrorbarContainer)]

    def test_gap_narrows_bars(self, stack_hists):
        _, ax, _ = stackedhist(stack_hists, errors=False, gap=0.2)
        widths = [r.get_width() for r in _bar_containers(ax)[0].patches]
        np.testing.assert_allclose(widths, [0.8, 0.8, 0.8])

    def test_labels_reach_legend(self, stack_hists):
        _, ax, p = stackedhist(stack_hists, labels=["a", "b", "c"], errors=False)
        handles, labels = ax.get_legend_handles_labels()
        assert labels == ["a", "b", "c"]
        assert len(p.legend_handles()) == 3

    def test_single_histogram(self, simple_hist):
        _, ax, p = stackedhist([simple_hist])
        np.testing.assert_allclose(p.totals(), simple_hist.bin_counts)


class TestStackedHistValidation:

    def test_edge_mismatch_draws_nothing(self, simple_hist):
        other = Hist1D([1.0, 2.0, 3.0], [0.0, 1.0, 2.0, 4.0])
        fig, ax = plt.subplots()
        with pytest.raises(EdgeMismatchError):
            stackedhist([simple_hist, other], ax=ax)
        assert len(ax.patches) == 0
        assert len(ax.containers) == 0

    def test_edge_mismatch_creates_no_figure(self, simple_hist):
        other = Hist1D([1.0, 2.0], [0.0, 1.0, 2.0])
        with pytest.raises(EdgeMismatchError):
            stackedhist([simple_hist, other])
        assert plt.get_fignums() == []

    def test_color_shortage(self, stack_hists):
        fig, ax = plt.subplots()
        with pytest.raises(ColorShortageError):
            stackedhist(stack_hists, ax=ax, color=["red", "blue"])
        assert len(ax.containers) == 0

    def test_render_validates_before_drawing(self, stack_hists):
        fig, ax = plt.subplots()
        with pytest.raises(ColorShortageError):
            StackedHist(stack_hists, color=["red"]).render(ax)
        assert len(ax.patches) == 0

    def test_empty_input(self):
        with pytest.raises(ValueError):
            stackedhist([])

    def test_unknown_error_mode(self, stack_hists):
        with pytest.raises(ValueError):
            stackedhist(stack_hists, errors="band")

    def test_label_count(self, stack_hists):
        with pytest.raises(ValueError):
            stackedhist(stack_hists, labels=["only one"])

    def test_single_string_labels_rejected(self, stack_hists):
        fig, ax = plt.subplots()
        with pytest.raises(ValueError):
            stackedhist(stack_hists, ax=ax, labels="abc")
        assert len(ax.containers) == 0

    def test_invalid_color_entry_draws_nothing(self, simple_hist):
        fig, ax = plt.subplots()
        with pytest.raises(InvalidColorError):
            stackedhist([simple_hist, simple_hist], ax=ax, color=["red", "notacolor"])
        assert len(ax.containers) == 0
        assert len(ax.patches) == 0

    def test_single_color_rejected(self, simple_hist):
        fig, ax = plt.subplots()
        with pytest.raises(InvalidColorError):
            stackedhist([simple_hist], ax=ax, color="red")
        assert len(ax.containers) == 0

    def test_invalid_error_color(self, stack_hists):
        fig, ax = plt.subplots()
        with pytest.raises(InvalidColorError):
            stackedhist(stack_hists, ax=ax, error_color="notacolor")
        assert len(ax.containers) == 0

    def test_error_color_unchecked_without_overlay(self, stack_hists):
        _, ax, _ = stackedhist(stack_hists, errors=False, error_color="notacolor")
        assert len(_bar_containers(ax)) == 3


class TestRatioHist:

    def test_pair_matches_quotient(self, edges):
        h1 = Hist1D([4.0, 9.0, 6.0], edges)
        h2 = Hist1D([2.0, 3.0, 6.0], edges)

        _, ax_pair, _ = ratiohist(h1, h2)
        _, ax_single, _ = ratiohist(h1 / h2)

        off_pair = [c for c in ax_pair.collections if isinstance(c, PathCollection)][0].get_offsets()
        off_single = [c for c in ax_single.collections if isinstance(c, PathCollection)][0].get_offsets()
        np.testing.assert_allclose(off_pair, off_single)

        eb_pair = [c for c in ax_pair.containers if isinstance(c, ErrorbarContainer)][0]
        eb_single = [c for c in ax_single.containers if isinstance(c, ErrorbarContainer)][0]
        np.testing.assert_allclose(_errorbar_segments(eb_pair), _errorbar_segments(eb_single))

    def test_points_and_full_errors(self, edges):
        h = Hist1D([1.0, 1.2, 0.8], edges, sumw2=[0.01, 0.04, 0.09])
        _, ax, p = ratiohist(h)
        off = ax.collections[0].get_offsets()
        np.testing.assert_allclose(off[:, 1], [1.0, 1.2, 0.8])
        seg = _errorbar_segments([c for c in ax.containers if isinstance(c, ErrorbarContainer)][0])
        np.testing.assert_allclose(seg[:, 1, 1] - seg[:, 0, 1], 2 * np.array([0.1, 0.2, 0.3]))

    def test_reference_line_at_one(self, simple_hist):
        _, ax, _ = ratiohist(simple_hist, errors=False)
        ref = [ln for ln in ax.lines if ln.get_linestyle() == "-."]
        assert len(ref) == 1
        np.testing.assert_allclose(ref[0].get_ydata(), [1.0, 1.0])

    def test_errors_disabled(self, simple_hist):
        _, ax, _ = ratiohist(simple_hist, errors=False)
        assert not [c for c in ax.containers if isinstance(c, ErrorbarContainer)]

    def test_fixed_color(self, simple_hist):
        _, ax, _ = ratiohist(simple_hist, color="red")
        assert tuple(ax.collections[0].get_facecolor()[0]) == to_rgba("red")

    def test_from_pair_edge_mismatch(self, simple_hist):
        with pytest.raises(EdgeMismatchError):
            RatioHist.from_pair(simple_hist, Hist1D([1.0], [0.0, 1.0]))


class TestHistPlot:

    def test_unset_color_falls_back(self, simple_hist):
        _, ax, _ = hist(simple_hist)
        rect = _bar_containers(ax)[0].patches[0]
        assert rect.get_facecolor() == to_rgba(DEFAULT_HIST_COLOR)

    def test_explicit_color_kept(self, simple_hist):
        _, ax, _ = hist(simple_hist, color="red", label="h")
        rect = _bar_containers(ax)[0].patches[0]
        assert rect.get_facecolor() == to_rgba("red")
        assert ax.get_legend_handles_labels()[1] == ["h"]

    def test_bars_touch(self):
        h = Hist1D([1.0, 2.0], [0.0, 1.0, 3.0])
        _, ax, _ = hist(h)
        widths = [r.get_width() for r in _bar_containers(ax)[0].patches]
        np.testing.assert_allclose(widths, [1.0, 2.0])


class TestGenericPlot:

    def test_default_kinds(self, simple_hist, hist2d):
        _, _, p1 = plot(simple_hist)
        assert isinstance(p1, HistPlot)
        _, ax2, p2 = plot(hist2d)
        assert isinstance(p2, QuadMesh)

    def test_heatmap_blank_cells(self, hist2d):
        _, _, mesh = plot(hist2d)
        arr = np.ma.masked_invalid(np.asarray(mesh.get_array(), float))
        assert arr.mask.sum() == int((hist2d.bin_counts == 0).sum())

    def test_heatmap_cells_span_true_edges(self):
        h = Hist2D([[1.0], [2.0]], ([0.0, 1.0, 3.0], [0.0, 1.0]))
        _, _, mesh = plot(h)
        coords = np.asarray(mesh.get_coordinates())
        np.testing.assert_allclose(np.unique(coords[..., 0]), [0.0, 1.0, 3.0])
        np.testing.assert_allclose(np.unique(coords[..., 1]), [0.0, 1.0])

    def test_heatmap_single_bin_axis_has_extent(self):
        h = Hist2D([[4.0]], ([2.0, 5.0], [-1.0, 1.0]))
        _, _, mesh = plot(h)
        coords = np.asarray(mesh.get_coordinates())
        assert np.ptp(coords[..., 0]) == pytest.approx(3.0)
        assert np.ptp(coords[..., 1]) == pytest.approx(2.0)

    def test_stairs_kind(self, simple_hist):
        _, ax, line = plot(simple_hist, "stairs")
        np.testing.assert_allclose(line.get_xdata(), [0.0, 1.0, 2.0, 3.0, 3.0])
        np.testing.assert_allclose(line.get_ydata(), [0.0, 5.0, 7.0, 2.0, 0.0])

    def test_crossbar_kind_uses_bin_widths(self):
        h = Hist1D([4.0, 9.0], [0.0, 1.0, 3.0])
        _, ax, artists = plot(h, "crossbar", show_midline=False)
        widths = [r.get_width() for r in artists[0].patches]
        np.testing.assert_allclose(widths, [1.0, 2.0])

    def test_existing_axis_reused(self, simple_hist):
        fig, ax = plt.subplots()
        fap = plot(simple_hist, "scatter", ax=ax)
        assert fap.figure is fig
        assert fap.axis is ax

    def test_unknown_kind(self, simple_hist):
        with pytest.raises(KeyError):
            plot(simple_hist, "violin")

    def test_recipe_defaults(self):
        d = recipe_defaults("stackedhist")
        assert d["whiskerwidth"] == 10
        assert d["gap"] == 0.0
        assert d["errors"] == "shade"
        assert d["color"] == wong_colors()
        assert recipe_defaults("hist")["color"] is None
        assert recipe_defaults("ratiohist")["errors"] is True
