"""Image I/O layer for strokegraph.

This module handles reading and writing image files using Pillow. It
sits outside the core: the core only sees BinaryGrid values and exposes
segments for rendering.

Key responsibilities:
- Load binarized stroke images as foreground grids
- Render traced segments back to images

Key classes:
- ImageReader: Load images and extract foreground grids
- ImageWriter: Save segment renderings
"""

from strokegraph.io.reader import ImageReader, grid_from_image, load_grid
from strokegraph.io.writer import ImageWriter, render_segments

__all__ = [
    "ImageReader",
    "ImageWriter",
    "grid_from_image",
    "load_grid",
    "render_segments",
]
