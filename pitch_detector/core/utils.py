"""Sub-bin peak location shared by the detectors."""

import math
from typing import NamedTuple, Optional, Sequence


class FftPoint(NamedTuple):
    """A peak located with sub-bin resolution."""
    x: float
    y: float


def interpolated_peak_at(spectrum: Sequence[float], index: int) -> Optional[FftPoint]:
    """
    Estimate the true peak around ``spectrum[index]`` with a 3-point parabola.

    Fits a quadratic through the sample and its two neighbours and returns the
    vertex. The offset of the vertex from ``index`` lies in [-0.5, 0.5] when
    ``spectrum[index]`` is a local maximum.

    Args:
        spectrum: Discrete amplitude sequence
        index: Bin of the candidate peak

    Returns:
        FftPoint(x, y) with fractional bin and interpolated amplitude, or None
        when the index has no neighbour on one side or the fit is degenerate.
    """
    if index <= 0 or index >= len(spectrum) - 1:
        return None

    alpha = float(spectrum[index - 1])
    beta = float(spectrum[index])
    gamma = float(spectrum[index + 1])

    denominator = alpha - 2.0 * beta + gamma
    if denominator == 0.0 or not math.isfinite(denominator):
        return None

    p = 0.5 * (alpha - gamma) / denominator
    return FftPoint(x=index + p, y=beta - 0.25 * (alpha - gamma) * p)
