"""
Peak extraction shared by the detectors.
"""

from .constants import MIN_FREQ, MAX_FREQ
from .utils import FftPoint, interpolated_peak_at
from .peak_iter import FftPeaks, fft_peaks

__all__ = [
    'MIN_FREQ',
    'MAX_FREQ',
    'FftPoint',
    'interpolated_peak_at',
    'FftPeaks',
    'fft_peaks',
]
