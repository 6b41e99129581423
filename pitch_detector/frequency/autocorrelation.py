"""
Autocorrelation pitch detector.

The autocorrelation is computed through the Wiener-Khinchin theorem: the
inverse FFT of the power spectrum. Its strongest lag inside the tuner's range
is the period of the signal.
"""

from typing import Optional, Tuple

import numpy as np

from pitch_detector.core.constants import AUTOCORRELATION_ALGORITHM
from pitch_detector.core.utils import FftPoint, interpolated_peak_at
from pitch_detector.dsp_core.fft_space import FftSpace
from pitch_detector.utils.logging import get_logger

from .base import FrequencyDetector, SpectrumInspector, check_sample_rate

logger = get_logger(__name__)


class AutocorrelationDetector(FrequencyDetector, SpectrumInspector):
    """
    Period detection from the peak of the normalized autocorrelation.

    Pipeline:
        signal -> FFT -> X * conj(X) -> IFFT -> r[lower:upper] / r[0]
        -> strongest lag -> parabolic interpolation -> sample_rate / lag
    """

    name = AUTOCORRELATION_ALGORITHM

    def relevant_fft_range(self, fft_space_len: int, sample_rate: float) -> Tuple[int, int]:
        # Frequency = sample_rate / lag, so only lags between the period of
        # max_freq and the period of min_freq matter
        lower_limit = int(round(sample_rate / self.max_freq))
        upper_limit = int(round(sample_rate / self.min_freq))
        return lower_limit, upper_limit

    @staticmethod
    def process_fft(signal, fft_space: FftSpace) -> None:
        """Leave the (unnormalized) autocorrelation of ``signal`` in ``fft_space``."""
        fft_space.init_fft_space(signal)
        fft_space.forward()
        fft_space.map(lambda f: f * np.conj(f))
        fft_space.inverse()

    @staticmethod
    def _unscaled_spectrum(fft_space: FftSpace, fft_range: Tuple[int, int]) -> np.ndarray:
        lower_limit, upper_limit = fft_range
        space = fft_space.space()
        # Silent input has r[0] == 0, the NaNs that follow yield no peak
        with np.errstate(divide='ignore', invalid='ignore'):
            return space[lower_limit:upper_limit].real / space[0].real

    def unscaled_spectrum(self, signal, fft_range: Tuple[int, int]) -> np.ndarray:
        signal = np.asarray(signal, dtype=np.float64)
        fft_space = FftSpace(len(signal))
        self.process_fft(signal, fft_space)
        return self._unscaled_spectrum(fft_space, fft_range)

    def detect_unscaled_freq_with_space(
        self,
        signal,
        fft_range: Tuple[int, int],
        fft_space: FftSpace
    ) -> Optional[FftPoint]:
        self.process_fft(signal, fft_space)
        unscaled_spectrum = self._unscaled_spectrum(fft_space, fft_range)
        if len(unscaled_spectrum) == 0:
            logger.debug("Empty lag window %s", fft_range)
            return None

        # Strict comparison: the earliest of equal maxima wins
        max_bin = 0
        for i in range(1, len(unscaled_spectrum)):
            if unscaled_spectrum[i] > unscaled_spectrum[max_bin]:
                max_bin = i

        point = interpolated_peak_at(unscaled_spectrum, max_bin)
        if point is None:
            logger.debug("No interpolable peak, maximum at window bin %d of %d",
                         max_bin, len(unscaled_spectrum))
        return point

    def detect_frequency_with_workspace(
        self,
        signal,
        sample_rate: float,
        fft_space: FftSpace
    ) -> Optional[float]:
        sample_rate = check_sample_rate(sample_rate)
        lower_limit, upper_limit = self.relevant_fft_range(len(fft_space), sample_rate)
        point = self.detect_unscaled_freq_with_space(signal, (lower_limit, upper_limit), fft_space)
        if point is None:
            return None
        return sample_rate / (lower_limit + point.x)
