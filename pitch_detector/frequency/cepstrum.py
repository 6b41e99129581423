"""
Power cepstrum pitch detector.

The inverse FFT of the log power spectrum turns a harmonic series into a peak
at the quefrency of the fundamental period. A pure sine has no harmonic
series, so this detector is not reliable on synthetic sine input.
"""

from typing import Optional, Tuple

import numpy as np

from pitch_detector.core.constants import (
    CEPSTRUM_MIN_PEAK_DISTANCE,
    CEPSTRUM_MIN_PEAK_PROMINENCE,
    POWER_CEPSTRUM_ALGORITHM,
)
from pitch_detector.core.peak_iter import fft_peaks
from pitch_detector.core.utils import FftPoint, interpolated_peak_at
from pitch_detector.dsp_core.fft_space import FftSpace
from pitch_detector.utils.logging import get_logger

from .base import FrequencyDetector, SpectrumInspector, check_sample_rate

logger = get_logger(__name__)


def _log_power(f: np.ndarray) -> np.ndarray:
    # ln(|X|^2) with zero imaginary part; empty bins become -inf
    with np.errstate(divide='ignore'):
        return np.log(f.real ** 2 + f.imag ** 2).astype(np.complex128)


class PowerCepstrumDetector(FrequencyDetector, SpectrumInspector):
    """
    Period detection from the dominant peak of the power cepstrum.

    Pipeline:
        signal -> FFT -> ln|X|^2 -> IFFT -> |c[lower:upper]|
        -> prominent, separated peaks -> strongest -> interpolation
        -> sample_rate / quefrency

    Quefrency bins keep their absolute index in the cepstrum, so the lower
    limit of the search range is never added back.

    Args:
        min_freq: Lowest frequency reported, in Hz
        max_freq: Highest frequency reported, in Hz
        min_peak_distance: Peak separation in quefrency bins
        min_peak_prominence: Peak prominence in unnormalized cepstrum units
    """

    name = POWER_CEPSTRUM_ALGORITHM

    def __init__(
        self,
        min_peak_distance: int = CEPSTRUM_MIN_PEAK_DISTANCE,
        min_peak_prominence: float = CEPSTRUM_MIN_PEAK_PROMINENCE,
        **kwargs
    ):
        super().__init__(**kwargs)
        self.min_peak_distance = min_peak_distance
        self.min_peak_prominence = min_peak_prominence

    def relevant_fft_range(self, fft_space_len: int, sample_rate: float) -> Tuple[int, int]:
        # Frequency = sample_rate / quefrency
        lower_limit = int(round(sample_rate / self.max_freq))
        upper_limit = int(round(sample_rate / self.min_freq))
        return lower_limit, upper_limit

    @staticmethod
    def process_fft(signal, fft_space: FftSpace) -> None:
        """Leave the (unnormalized) power cepstrum of ``signal`` in ``fft_space``."""
        fft_space.init_fft_space(signal)
        fft_space.forward()
        fft_space.map(_log_power)
        fft_space.inverse()

    def unscaled_spectrum(self, signal, fft_range: Tuple[int, int]) -> np.ndarray:
        signal = np.asarray(signal, dtype=np.float64)
        fft_space = FftSpace(len(signal))
        self.process_fft(signal, fft_space)
        lower_limit, upper_limit = fft_range
        return fft_space.amplitudes()[lower_limit:upper_limit]

    def detect_unscaled_freq_with_space(
        self,
        signal,
        fft_range: Tuple[int, int],
        fft_space: FftSpace
    ) -> Optional[FftPoint]:
        self.process_fft(signal, fft_space)
        cepstrum = fft_space.amplitudes()
        lower_limit, upper_limit = fft_range

        best = None
        peaks = fft_peaks(
            cepstrum[lower_limit:upper_limit],
            self.min_peak_distance,
            self.min_peak_prominence,
            start=lower_limit,
        )
        for quefrency in peaks:
            if best is None or quefrency[1] > best[1]:
                best = quefrency

        if best is None:
            logger.debug("No cepstral peak in quefrency range %s", fft_range)
            return None

        return interpolated_peak_at(cepstrum, best[0])

    def detect_frequency_with_workspace(
        self,
        signal,
        sample_rate: float,
        fft_space: FftSpace
    ) -> Optional[float]:
        sample_rate = check_sample_rate(sample_rate)
        fft_range = self.relevant_fft_range(len(fft_space), sample_rate)
        point = self.detect_unscaled_freq_with_space(signal, fft_range, fft_space)
        if point is None:
            return None
        return sample_rate / point.x
