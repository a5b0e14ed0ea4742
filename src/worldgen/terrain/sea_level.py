"""Sea level calibration: find the threshold that floods a target fraction."""

import logging
import math

import numpy as np
from numpy.typing import NDArray

from ..exceptions import CalibrationFailure, CalibrationInvariantError

logger = logging.getLogger(__name__)


def underwater_fraction(elevation: NDArray[np.float64], sea_level: float) -> float:
    """Fraction of cells at or below ``sea_level``."""
    return float(np.count_nonzero(elevation <= sea_level)) / elevation.size


def decide_sea_level(
    elevation: NDArray[np.float64],
    target_fraction: float,
) -> float:
    """Binary search a sea level whose underwater fraction hits the target.

    The result ``s`` satisfies
    ``|underwater_fraction(elevation, s) - target_fraction| <= 1 / N`` where
    ``N`` is the cell count, the finest granularity a finite grid allows.
    Each step moves the violated bound strictly past the midpoint, so the
    interval shrinks every iteration and the search cannot stall.

    Args:
        elevation: Elevation field (any shape).
        target_fraction: Desired underwater fraction. Values at or below 0
            clamp to the global minimum, at or above 1 to the global maximum.

    Returns:
        Sea level threshold.

    Raises:
        CalibrationFailure: If the elevation field contains NaN or infinity.
        CalibrationInvariantError: If the search bounds cross.
    """
    if elevation.size == 0:
        raise CalibrationFailure("Cannot calibrate sea level on an empty grid")
    if not np.all(np.isfinite(elevation)):
        bad = int(np.count_nonzero(~np.isfinite(elevation)))
        raise CalibrationFailure(
            f"Elevation field contains {bad} non-finite values"
        )

    low = float(np.min(elevation))
    high = float(np.max(elevation))

    if target_fraction <= 0.0:
        return low
    if target_fraction >= 1.0:
        return high

    tolerance = 1.0 / elevation.size
    lowest_fraction = target_fraction - tolerance
    highest_fraction = target_fraction + tolerance

    iterations = 0
    while True:
        iterations += 1
        mid = (low + high) * 0.5
        fraction = underwater_fraction(elevation, mid)

        if fraction > highest_fraction:
            logger.debug(
                f"Decreasing underwater fraction {fraction:.4f}: "
                f"mid {mid}, range [{low}, {high}]"
            )
            high = math.nextafter(mid, -math.inf)
        elif fraction < lowest_fraction:
            logger.debug(
                f"Increasing underwater fraction {fraction:.4f}: "
                f"mid {mid}, range [{low}, {high}]"
            )
            low = math.nextafter(mid, math.inf)
        else:
            logger.debug(
                f"Sea level {mid} floods {fraction:.2%} after {iterations} iterations"
            )
            return mid

        if low > high:
            raise CalibrationInvariantError(low, high, mid, fraction)
