"""
Windowed FFT pitch detector: the strongest spectral bin is the pitch.

Works well on pure tones. On instruments whose fundamental is weaker than an
overtone it reports the overtone.
"""

from functools import lru_cache
from typing import Optional, Tuple, Union

import numpy as np

from pitch_detector.core.constants import HANNED_FFT_ALGORITHM
from pitch_detector.core.utils import FftPoint, interpolated_peak_at
from pitch_detector.dsp_core.fft_space import FftSpace
from pitch_detector.dsp_core.window import get_window
from pitch_detector.utils.logging import get_logger

from .base import FrequencyDetector, SpectrumInspector, check_sample_rate

logger = get_logger(__name__)


@lru_cache(maxsize=16)
def _named_window(window: str, length: int) -> np.ndarray:
    coefficients = get_window(window, length)
    coefficients.flags.writeable = False
    return coefficients


class HannedFftDetector(FrequencyDetector, SpectrumInspector):
    """
    Peak of the windowed magnitude spectrum.

    Args:
        window: Window name understood by get_window ('hann' by default) or
            an array of coefficients matching the signal length
        min_freq: Lowest frequency reported, in Hz
        max_freq: Highest frequency reported, in Hz
    """

    name = HANNED_FFT_ALGORITHM

    def __init__(self, window: Union[str, np.ndarray] = 'hann', **kwargs):
        super().__init__(**kwargs)
        self.window = window

    def _get_window(self, length: int) -> np.ndarray:
        # Named windows are built once per length and shared read-only
        if isinstance(self.window, str):
            return _named_window(self.window, length)
        return get_window(self.window, length)

    def relevant_fft_range(self, fft_space_len: int, sample_rate: float) -> Tuple[int, int]:
        lower_limit = int(round(self.min_freq * fft_space_len / sample_rate))
        upper_limit = int(round(self.max_freq * fft_space_len / sample_rate))
        # Stop at the Nyquist bin
        return lower_limit, min(upper_limit, fft_space_len // 2 + 1)

    def process_fft(self, signal, fft_space: FftSpace) -> None:
        """Leave the spectrum of the windowed ``signal`` in ``fft_space``."""
        signal = np.asarray(signal, dtype=np.float64)
        fft_space.init_fft_space(signal)
        window = self._get_window(len(fft_space))
        fft_space.map(lambda f: f * window)
        fft_space.forward()

    def unscaled_spectrum(self, signal, fft_range: Tuple[int, int]) -> np.ndarray:
        signal = np.asarray(signal, dtype=np.float64)
        fft_space = FftSpace(len(signal))
        self.process_fft(signal, fft_space)
        lower_limit, upper_limit = fft_range
        return fft_space.amplitudes(normalize=True)[lower_limit:upper_limit]

    def detect_unscaled_freq_with_space(
        self,
        signal,
        fft_range: Tuple[int, int],
        fft_space: FftSpace
    ) -> Optional[FftPoint]:
        self.process_fft(signal, fft_space)
        lower_limit, upper_limit = fft_range
        spectrum = fft_space.amplitudes(normalize=True)[lower_limit:upper_limit]
        if len(spectrum) == 0:
            logger.debug("Empty frequency window %s", fft_range)
            return None

        max_bin = 0
        for i in range(1, len(spectrum)):
            if spectrum[i] > spectrum[max_bin]:
                max_bin = i

        point = interpolated_peak_at(spectrum, max_bin)
        if point is None:
            logger.debug("No interpolable peak, maximum at window bin %d of %d",
                         max_bin, len(spectrum))
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
        return (lower_limit + point.x) * sample_rate / len(fft_space)
