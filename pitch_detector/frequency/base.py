"""
Base classes for frequency detectors.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

import numpy as np

from pitch_detector.core.constants import MAX_FREQ, MIN_FREQ
from pitch_detector.core.utils import FftPoint
from pitch_detector.dsp_core.fft_space import FftSpace


class FrequencyDetector(ABC):
    """
    Base class for pitch detection algorithms.

    All detectors must implement:
    - detect_frequency_with_workspace(): detect using a caller-owned FftSpace

    detect_frequency() is provided by the base class and allocates a fresh
    workspace per call. Real-time callers should build one FftSpace of the
    window length and reuse it.
    """

    def __init__(self, min_freq: float = MIN_FREQ, max_freq: float = MAX_FREQ):
        """
        Initialize detector.

        Args:
            min_freq: Lowest frequency the detector reports, in Hz
            max_freq: Highest frequency the detector reports, in Hz
        """
        if not 0 < min_freq < max_freq:
            raise ValueError(
                f"Frequency bounds must satisfy 0 < min_freq < max_freq, got {min_freq}, {max_freq}"
            )
        self.min_freq = float(min_freq)
        self.max_freq = float(max_freq)

    def detect_frequency(self, signal, sample_rate: float) -> Optional[float]:
        """
        Detect the fundamental frequency of a signal window.

        Args:
            signal: 1-D real signal
            sample_rate: Sample rate in Hz

        Returns:
            Frequency in Hz, or None when no periodic component is found
        """
        signal = np.asarray(signal, dtype=np.float64)
        return self.detect_frequency_with_workspace(signal, sample_rate, FftSpace(len(signal)))

    @abstractmethod
    def detect_frequency_with_workspace(
        self,
        signal,
        sample_rate: float,
        fft_space: FftSpace
    ) -> Optional[float]:
        """
        Detect the fundamental frequency using a caller-owned workspace.

        Args:
            signal: 1-D real signal of exactly len(fft_space) samples
            sample_rate: Sample rate in Hz
            fft_space: Workspace, overwritten by the call

        Returns:
            Frequency in Hz, or None when no periodic component is found
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(min_freq={self.min_freq}, max_freq={self.max_freq})"


class SpectrumInspector(ABC):
    """
    Introspection of a detector's intermediate spectrum.

    Used by tests and plotting scripts only; production code never needs it.
    """

    name: str = "SpectrumInspector"

    @abstractmethod
    def relevant_fft_range(self, fft_space_len: int, sample_rate: float) -> Tuple[int, int]:
        """Bins ``(lower, upper)`` of the spectrum searched for a peak."""
        pass

    @abstractmethod
    def unscaled_spectrum(self, signal, fft_range: Tuple[int, int]) -> np.ndarray:
        """The spectrum values inside ``fft_range``, before bin to Hz conversion."""
        pass

    @abstractmethod
    def detect_unscaled_freq_with_space(
        self,
        signal,
        fft_range: Tuple[int, int],
        fft_space: FftSpace
    ) -> Optional[FftPoint]:
        """The interpolated peak, in the detector's own bin units."""
        pass

    def spectrum(self, signal, sample_rate: float) -> List[Tuple[int, float]]:
        """
        ``(bin, amplitude)`` pairs of the searched part of the spectrum.

        Args:
            signal: 1-D real signal
            sample_rate: Sample rate in Hz
        """
        signal = np.asarray(signal, dtype=np.float64)
        fft_range = self.relevant_fft_range(len(signal), sample_rate)
        values = self.unscaled_spectrum(signal, fft_range)
        return [(fft_range[0] + i, float(v)) for i, v in enumerate(values)]


def check_sample_rate(sample_rate: float) -> float:
    if not sample_rate > 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}")
    return float(sample_rate)
