"""Image reader for loading stroke images.

This module provides the ImageReader class for loading already binarized
stroke images and converting them into foreground grids. Any pixel that
is not pure white counts as ink.
"""

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from strokegraph.domain import BinaryGrid
from strokegraph.exceptions import ImageLoadError

WHITE = (255, 255, 255)


def grid_from_image(image: Image.Image) -> BinaryGrid:
    """Convert a Pillow image into a foreground grid."""
    rgb = image.convert("RGB")
    width, height = rgb.size
    pixels = rgb.load()
    cells = tuple(
        tuple(pixels[x, y] != WHITE for x in range(width)) for y in range(height)
    )
    return BinaryGrid(width=width, height=height, cells=cells)


class ImageReader:
    """Loads stroke images and extracts their foreground grid.

    Example:
        reader = ImageReader(Path("digit.png"))
        reader.load()
        grid = reader.read_grid()
    """

    def __init__(self, image_path: Path) -> None:
        """Initialize the image reader.

        Args:
            image_path: Path to a PNG, BMP, GIF or any Pillow-readable image
        """
        self._image_path = image_path
        self._image: Image.Image | None = None

    def load(self) -> None:
        """Load the image file.

        Raises:
            ImageLoadError: If the file is missing or not a readable image
        """
        if not self._image_path.exists():
            raise ImageLoadError(str(self._image_path), "file not found")
        try:
            with Image.open(self._image_path) as image:
                image.load()
                self._image = image.copy()
        except (OSError, UnidentifiedImageError) as e:
            raise ImageLoadError(str(self._image_path), str(e)) from e

    def _loaded(self) -> Image.Image:
        if self._image is None:
            raise RuntimeError("Image not loaded. Call load() first.")
        return self._image

    @property
    def width(self) -> int:
        return self._loaded().width

    @property
    def height(self) -> int:
        return self._loaded().height

    @property
    def mode(self) -> str:
        """Pillow mode of the loaded image (e.g. '1', 'L', 'RGB')."""
        return self._loaded().mode

    def read_grid(self) -> BinaryGrid:
        """Foreground grid of the loaded image."""
        return grid_from_image(self._loaded())


def load_grid(path: Path) -> BinaryGrid:
    """Load an image file straight into a foreground grid."""
    reader = ImageReader(path)
    reader.load()
    return reader.read_grid()
