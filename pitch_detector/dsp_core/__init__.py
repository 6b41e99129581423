"""
DSP Core Module - FFT kernels, reusable FFT workspace and window functions

Modules:
    - fft: In-place Cooley-Tukey FFT (Numba JIT)
    - fft_space: FftSpace, the fixed-size workspace detectors transform in
    - window: Window functions for spectral analysis
"""

from .fft import fft, ifft, fft_inplace, ifft_inplace
from .fft_space import FftSpace
from .window import get_window

__all__ = [
    # FFT functions
    'fft',
    'ifft',
    'fft_inplace',
    'ifft_inplace',
    # Workspace
    'FftSpace',
    # Windows
    'get_window',
]
