"""
pitch_detector - spectral pitch detection for a real-time tuner

Modules:
    - dsp_core: FFT kernels, the reusable FftSpace workspace, window functions
    - core: Parabolic peak interpolation, lazy peak finding, constants
    - frequency: Autocorrelation, power cepstrum and windowed FFT detectors
    - config: YAML configuration
    - utils: Logging, synthetic signals and fixture loading
"""

from .dsp_core import FftSpace
from .core import FftPoint, MAX_FREQ, MIN_FREQ
from .frequency import (
    ALGORITHMS,
    AutocorrelationDetector,
    FrequencyDetector,
    HannedFftDetector,
    PowerCepstrumDetector,
    SpectrumInspector,
    create_detector,
)

__all__ = [
    'FftSpace',
    'FftPoint',
    'MIN_FREQ',
    'MAX_FREQ',
    'ALGORITHMS',
    'FrequencyDetector',
    'SpectrumInspector',
    'AutocorrelationDetector',
    'PowerCepstrumDetector',
    'HannedFftDetector',
    'create_detector',
]

__version__ = '0.1.0'
