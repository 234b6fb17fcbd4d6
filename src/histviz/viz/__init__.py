"""
histviz.viz
===========

Plotting layer for histviz.

Design
------
• Primitives take an Axes + plain arrays and return artists.
• convert.py maps (plot kind, histogram type) to primitive arguments.
• Recipes hold histograms + configuration and render onto a caller-owned Axes.
• Annotators (statbox, collabtext) mutate an existing figure/axis.
"""
