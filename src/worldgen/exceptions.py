"""Custom exceptions for world generation."""


class WorldgenError(Exception):
    """Base exception for world generation errors."""

    pass


class ConfigurationError(WorldgenError):
    """Raised when generation inputs are invalid (dimensions, noise, seed)."""

    pass


class CalibrationFailure(ConfigurationError):
    """Raised when the sea level calibrator receives a non-finite elevation."""

    pass


class CalibrationInvariantError(WorldgenError):
    """Raised when the sea level search bounds cross.

    This indicates a bug in the narrowing rule or a tolerance window that the
    grid cannot reach, never a recoverable runtime condition.
    """

    def __init__(self, low: float, high: float, mid: float, fraction: float):
        self.low = low
        self.high = high
        self.mid = mid
        self.fraction = fraction
        super().__init__(
            f"Sea level search bounds crossed: min={low!r} > max={high!r} "
            f"(last midpoint {mid!r} had underwater fraction {fraction:.4f})"
        )


class OutOfBoundsError(WorldgenError, IndexError):
    """Raised when a cell index or coordinate falls outside the grid."""

    pass
