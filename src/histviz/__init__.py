"""
histviz
=======

Plot recipes for numpy-backed histograms, rendered with matplotlib.
"""

from histviz.errors import (
    AnchorError,
    ColorShortageError,
    ConversionNotRegistered,
    InvalidColorError,
    EdgeMismatchError,
    HistvizError,
)
from histviz.hist import Hist1D, Hist2D
from histviz.viz.annotate import collabtext, statbox
from histviz.viz.convert import convert_arguments, plottype
from histviz.viz.recipes import (
    FigureAxisPlot,
    HistPlot,
    RatioHist,
    StackedHist,
    hist,
    plot,
    ratiohist,
    stackedhist,
)

__version__ = "0.1.0"

__all__ = [
    "AnchorError",
    "ColorShortageError",
    "ConversionNotRegistered",
    "InvalidColorError",
    "EdgeMismatchError",
    "HistvizError",
    "Hist1D",
    "Hist2D",
    "collabtext",
    "statbox",
    "convert_arguments",
    "plottype",
    "FigureAxisPlot",
    "HistPlot",
    "RatioHist",
    "StackedHist",
    "hist",
    "plot",
    "ratiohist",
    "stackedhist",
]
