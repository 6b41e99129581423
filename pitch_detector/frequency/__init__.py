"""
Frequency detection algorithms.

This module implements the pitch detectors:
- Autocorrelation: peak of the autocorrelation (IFFT of the power spectrum)
- PowerCepstrum: dominant peak of the power cepstrum (IFFT of the log power spectrum)
- HannedFFT: peak of the Hann-windowed magnitude spectrum
"""

from pitch_detector.core.constants import (
    AUTOCORRELATION_ALGORITHM,
    HANNED_FFT_ALGORITHM,
    POWER_CEPSTRUM_ALGORITHM,
)

from .base import FrequencyDetector, SpectrumInspector
from .autocorrelation import AutocorrelationDetector
from .cepstrum import PowerCepstrumDetector
from .hanned_fft import HannedFftDetector

_DETECTORS = {
    AUTOCORRELATION_ALGORITHM: AutocorrelationDetector,
    POWER_CEPSTRUM_ALGORITHM: PowerCepstrumDetector,
    HANNED_FFT_ALGORITHM: HannedFftDetector,
}

ALGORITHMS = list(_DETECTORS)


def create_detector(name: str, **kwargs) -> FrequencyDetector:
    """
    Create a detector by algorithm name.

    Args:
        name: One of ALGORITHMS
        **kwargs: Passed to the detector (min_freq, max_freq, ...)
    """
    try:
        detector_cls = _DETECTORS[name]
    except KeyError:
        raise ValueError(f"Unknown algorithm: {name}. Known: {', '.join(ALGORITHMS)}") from None
    return detector_cls(**kwargs)


__all__ = [
    'FrequencyDetector',
    'SpectrumInspector',
    'AutocorrelationDetector',
    'PowerCepstrumDetector',
    'HannedFftDetector',
    'ALGORITHMS',
    # Factory functions
    'create_detector',
]
