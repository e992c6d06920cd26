"""Exception hierarchy for Strokegraph."""


class StrokeGraphError(Exception):
    """Base exception for all Strokegraph errors."""

    pass


class InvalidInputError(StrokeGraphError, ValueError):
    """An operation was called with arguments outside its contract."""

    pass


class NonFiniteCoefficientError(InvalidInputError):
    """Polynomial constructed with a NaN or infinite coefficient."""

    def __init__(self, coefficients: tuple[float, ...]) -> None:
        self.coefficients = coefficients
        super().__init__(f"Coefficients must be finite: {list(coefficients)}")


class ZeroDivisorError(InvalidInputError):
    """Polynomial division by the zero polynomial."""

    def __init__(self) -> None:
        super().__init__("Zero polynomial used as divisor")


class IntervalError(InvalidInputError):
    """Interval bounds are not strictly increasing."""

    def __init__(self, x1: float, x2: float) -> None:
        self.x1 = x1
        self.x2 = x2
        super().__init__(f"Interval ({x1}, {x2}] must be strictly increasing with x2 > x1")


class MatrixDimensionError(InvalidInputError):
    """Matrix shapes are malformed or incompatible for an operation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class SingularMatrixError(InvalidInputError):
    """Matrix has no inverse."""

    def __init__(self, size: int, column: int) -> None:
        self.size = size
        self.column = column
        super().__init__(f"Matrix [{size}x{size}] is singular (no pivot in column {column})")


class RegressionError(InvalidInputError):
    """Regression requested on malformed data."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Cannot fit regression: {reason}")


class EmptyDomainError(InvalidInputError):
    """Arc-length window contains no samples."""

    def __init__(self, distance_min: float, distance_max: float) -> None:
        self.distance_min = distance_min
        self.distance_max = distance_max
        super().__init__(f"No nodes in arc-length window [{distance_min}, {distance_max}]")


class ArcLengthError(InvalidInputError):
    """Chord and arc lengths do not describe a circular arc."""

    def __init__(self, arc_length: float, chord_length: float, reason: str) -> None:
        self.arc_length = arc_length
        self.chord_length = chord_length
        self.reason = reason
        super().__init__(f"Invalid arc (arc={arc_length}, chord={chord_length}): {reason}")


class ImageError(StrokeGraphError):
    """Errors related to image loading or saving."""

    pass


class ImageLoadError(ImageError):
    """Error loading an image file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load image '{path}': {reason}")


class ImageSaveError(ImageError):
    """Error saving an image file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save image '{path}': {reason}")
