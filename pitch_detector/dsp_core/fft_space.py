"""
Reusable FFT workspace.

An FftSpace owns one complex buffer and one scratch buffer, both sized to the
signal window it was built for. Detectors fill it with a signal, run the
in-place transforms and read the result back, so nothing is allocated per
audio frame beyond what numpy needs for elementwise maps.

A workspace has a single owner. Use one per thread.
"""

from typing import Callable, Iterator, Tuple

import numpy as np

from .fft import fft_inplace, ifft_inplace


class FftSpace:
    """
    Fixed-size complex buffer plus transform scratch.

    Args:
        length: Number of real samples of every signal this workspace will hold
    """

    def __init__(self, length: int):
        length = int(length)
        if length <= 0:
            raise ValueError(f"FftSpace length must be positive, got {length}")

        self._space = np.zeros(length, dtype=np.complex128)
        self._scratch = np.zeros(length, dtype=np.complex128)

    def __len__(self) -> int:
        return len(self._space)

    def __repr__(self) -> str:
        return f"FftSpace(length={len(self)})"

    def init_fft_space(self, signal) -> None:
        """
        Load a real signal into the buffer, overwriting previous contents.

        Args:
            signal: 1-D sequence of exactly ``len(self)`` real samples

        Raises:
            ValueError: If the signal shape does not match the workspace
        """
        signal = np.asarray(signal, dtype=np.float64)
        if signal.ndim != 1:
            raise ValueError(f"Signal must be 1D, got shape {signal.shape}")
        if len(signal) != len(self._space):
            raise ValueError(
                f"Signal length {len(signal)} does not match FftSpace length {len(self._space)}"
            )

        self._space.real[:] = signal
        self._space.imag[:] = 0.0

    def workspace(self) -> Tuple[np.ndarray, np.ndarray]:
        """Buffer and scratch for the transform kernels to work on in place."""
        return self._space, self._scratch

    def space(self) -> np.ndarray:
        """Read-only view of the buffer."""
        view = self._space.view()
        view.flags.writeable = False
        return view

    def map(self, function: Callable[[np.ndarray], np.ndarray]) -> None:
        """
        Apply an elementwise complex function to the whole buffer, in place.

        ``function`` receives the buffer array and must return an array (or
        scalar) broadcastable to it, e.g. ``lambda f: f * np.conj(f)``.
        """
        np.copyto(self._space, function(self._space))

    def forward(self) -> None:
        """Forward FFT of the buffer, in place."""
        fft_inplace(self._space, self._scratch)

    def inverse(self) -> None:
        """Unnormalized inverse FFT of the buffer, in place."""
        ifft_inplace(self._space, self._scratch)

    def freq_domain(self, normalize: bool) -> Iterator[Tuple[float, float]]:
        """
        Lazily yield ``(amplitude, phase)`` for every bin of the buffer.

        Args:
            normalize: Divide amplitudes by the buffer length

        The buffer is read on the first ``next()``; consume the generator
        before the next ``init_fft_space``.
        """
        scale = float(len(self._space)) if normalize else 1.0
        amplitudes = np.abs(self._space) / scale
        phases = np.angle(self._space)
        for amplitude, phase in zip(amplitudes, phases):
            yield float(amplitude), float(phase)

    def amplitudes(self, normalize: bool = False) -> np.ndarray:
        """Array form of the amplitudes produced by ``freq_domain``."""
        amplitudes = np.abs(self._space)
        if normalize:
            amplitudes /= len(self._space)
        return amplitudes
