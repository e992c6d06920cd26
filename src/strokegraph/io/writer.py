"""Image writer for rendering traced segments.

Every segment is painted in its own color over a white background, with
segment ends and branch points in black so the topology stays visible.
Merged nodes sitting between pixels are painted on every pixel they
straddle.
"""

import math
from collections.abc import Sequence
from pathlib import Path

from PIL import Image

from strokegraph.core.segment import OpenSegment
from strokegraph.exceptions import ImageSaveError

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)

# Distinct colors cycled over segments in canonical order
PALETTE: tuple[tuple[int, int, int], ...] = (
    (230, 25, 75),
    (60, 180, 75),
    (0, 130, 200),
    (245, 130, 48),
    (145, 30, 180),
    (70, 240, 240),
    (240, 50, 230),
    (210, 245, 60),
    (0, 128, 128),
    (170, 110, 40),
)


def _pixels_of(value: float) -> list[int]:
    fraction = value % 1
    if 0.25 <= fraction < 0.75:
        return [math.floor(value), math.ceil(value)]
    return [math.floor(value + 0.5)]


def render_segments(segments: Sequence[OpenSegment], width: int, height: int) -> Image.Image:
    """Paint segments into a new RGB image.

    Args:
        segments: Segments to draw
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        The rendered image
    """
    image = Image.new("RGB", (width, height), WHITE)
    for i, segment in enumerate(segments):
        color = PALETTE[i % len(PALETTE)]
        for node in segment.nodes():
            fill = color if segment.graph.degree(node.index) == 2 else BLACK
            for y in _pixels_of(node.y):
                for x in _pixels_of(node.x):
                    if 0 <= x < width and 0 <= y < height:
                        image.putpixel((x, y), fill)
    return image


class ImageWriter:
    """Writes segment renderings to image files.

    Example:
        writer = ImageWriter(Path("segments.png"))
        writer.save(analysis.segments, width, height)
    """

    def __init__(self, output_path: Path) -> None:
        """Initialize the image writer.

        Args:
            output_path: Path where the image will be saved; the format
                follows the file extension
        """
        self._output_path = output_path

    @property
    def output_path(self) -> Path:
        return self._output_path

    def save(self, segments: Sequence[OpenSegment], width: int, height: int) -> None:
        """Render segments and save them.

        Raises:
            ImageSaveError: If the image cannot be written
        """
        image = render_segments(segments, width, height)
        try:
            image.save(self._output_path)
        except (OSError, ValueError) as e:
            raise ImageSaveError(str(self._output_path), str(e)) from e
