"""Strokegraph - Skeleton graphs and curve measurements for stroke images.

Strokegraph turns a binary raster stroke image into a topological skeleton
(nodes, maximal segments and elementary enclosed loops) and measures the
geometry of that skeleton with exact polynomial algebra and least-squares
curve fitting.

Example:
    $ strokegraph digit.png

This prints the segments, loops and longest-segment measurements of the
strokes found in digit.png.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
