"""
In-place FFT kernels using Numba JIT

This module implements the Cooley-Tukey FFT algorithm with Numba JIT acceleration,
working in place on a caller-owned buffer so the real-time detection path does not
allocate.

Layout:
1. Iterative radix-2 DIT FFT for power-of-2 lengths
2. Direct DFT for every other length
3. Inverse via the conjugate trick, left unnormalized (no 1/N factor)

Both kernels need a scratch buffer of the same length as the data buffer.
"""

import math

import numpy as np
from numba import jit
from typing import Optional


@jit(nopython=True, cache=True)
def _bit_reverse(x: int, n_bits: int) -> int:
    """Reverse the bits of x with n_bits."""
    result = 0
    for _ in range(n_bits):
        result = (result << 1) | (x & 1)
        x >>= 1
    return result


@jit(nopython=True, cache=True)
def _fft_radix2_inplace(space: np.ndarray, scratch: np.ndarray) -> None:
    """
    Iterative Cooley-Tukey radix-2 DIT FFT (Numba JIT).

    The bit-reversed permutation is written to scratch, the butterflies run
    on scratch and the result is copied back into space.
    """
    N = len(space)
    n_bits = int(math.log2(N))

    # Bit-reversal permutation
    for i in range(N):
        scratch[_bit_reverse(i, n_bits)] = space[i]

    # Process stages: size 2, 4, 8, ..., N
    stage_size = 2
    while stage_size <= N:
        half_size = stage_size // 2
        w_step = -2j * np.pi / stage_size
        w_mult = np.exp(w_step)

        for k in range(0, N, stage_size):
            w = 1.0 + 0j

            for j in range(half_size):
                even_idx = k + j
                odd_idx = k + j + half_size

                even = scratch[even_idx]
                odd = scratch[odd_idx] * w

                scratch[even_idx] = even + odd
                scratch[odd_idx] = even - odd

                w = w * w_mult

        stage_size *= 2

    for i in range(N):
        space[i] = scratch[i]


@jit(nopython=True, cache=True)
def _dft_naive_inplace(space: np.ndarray, scratch: np.ndarray) -> None:
    """Direct DFT for non-power-of-2 lengths (JIT compiled)."""
    N = len(space)

    for k in range(N):
        s = 0j
        for n in range(N):
            s += space[n] * np.exp(-2j * np.pi * ((k * n) % N) / N)
        scratch[k] = s

    for i in range(N):
        space[i] = scratch[i]


@jit(nopython=True, cache=True)
def _fft_core_inplace(space: np.ndarray, scratch: np.ndarray) -> None:
    """Core FFT: handles both power-of-2 and arbitrary lengths."""
    N = len(space)

    if N > 0 and N & (N - 1) == 0:
        _fft_radix2_inplace(space, scratch)
    else:
        _dft_naive_inplace(space, scratch)


@jit(nopython=True, cache=True)
def _ifft_core_inplace(space: np.ndarray, scratch: np.ndarray) -> None:
    """Unnormalized inverse FFT: conj(FFT(conj(x)))."""
    N = len(space)
    for i in range(N):
        space[i] = np.conj(space[i])
    _fft_core_inplace(space, scratch)
    for i in range(N):
        space[i] = np.conj(space[i])


def _check_workspace(space: np.ndarray, scratch: np.ndarray) -> None:
    if space.dtype != np.complex128 or scratch.dtype != np.complex128:
        raise ValueError("FFT buffers must be complex128")
    if space.ndim != 1 or scratch.shape != space.shape:
        raise ValueError(
            f"Scratch shape {scratch.shape} does not match buffer shape {space.shape}"
        )


def fft_inplace(space: np.ndarray, scratch: np.ndarray) -> None:
    """
    Forward FFT of ``space``, written back into ``space``.

    Parameters
    ----------
    space : np.ndarray
        complex128 buffer, overwritten with its transform
    scratch : np.ndarray
        complex128 buffer of the same length, contents are clobbered
    """
    _check_workspace(space, scratch)
    _fft_core_inplace(space, scratch)


def ifft_inplace(space: np.ndarray, scratch: np.ndarray) -> None:
    """
    Unnormalized inverse FFT of ``space``, written back into ``space``.

    ``ifft_inplace(fft_inplace(x))`` yields ``N * x``.
    """
    _check_workspace(space, scratch)
    _ifft_core_inplace(space, scratch)


def fft(x: np.ndarray, n: Optional[int] = None) -> np.ndarray:
    """
    Compute the 1-D discrete Fourier Transform of a new copy of ``x``.

    Parameters
    ----------
    x : np.ndarray
        Input array (1-D)
    n : int, optional
        Length of the transform. ``x`` is zero-padded or truncated to ``n``.

    Returns
    -------
    np.ndarray
        The transformed array, matches ``scipy.fft.fft(x, n)``

    Examples
    --------
    >>> import numpy as np
    >>> x = np.array([1.0, 2.0, 1.0, -1.0, 1.5, 1.0, 0.5, -0.5])
    >>> X = fft(x)
    """
    space = _prepare(x, n)
    _fft_core_inplace(space, np.empty_like(space))
    return space


def ifft(x: np.ndarray, n: Optional[int] = None) -> np.ndarray:
    """
    Compute the normalized 1-D inverse discrete Fourier Transform.

    IFFT(x) = conj(FFT(conj(x))) / N, matches ``scipy.fft.ifft(x, n)``.
    """
    space = _prepare(x, n)
    _ifft_core_inplace(space, np.empty_like(space))
    return space / len(space)


def _prepare(x: np.ndarray, n: Optional[int]) -> np.ndarray:
    x = np.asarray(x)
    if x.ndim != 1:
        raise ValueError(f"Input must be 1D, got shape {x.shape}")

    if n is None:
        n = x.shape[0]
    if n <= 0:
        raise ValueError(f"Transform length must be positive, got {n}")

    space = np.zeros(n, dtype=np.complex128)
    m = min(n, x.shape[0])
    space[:m] = x[:m]
    return space
