"""
Lazy local-maxima search over a 1-D amplitude sequence.

Peaks are filtered by prominence and by a minimum bin separation. The result
is an iterable that can be walked any number of times; each walk recomputes
lazily from the stored amplitudes.
"""

from typing import Iterable, Iterator, Optional, Tuple

import numpy as np


class FftPeaks:
    """
    Local maxima of ``spectrum`` as ``(index, amplitude)`` pairs.

    Args:
        spectrum: Finite amplitude sequence
        min_distance: Peaks closer than this many bins compete, the larger wins
        min_prominence: Minimum height above the higher of the two adjacent valleys
        start: Index reported for ``spectrum[0]``

    A local maximum rises strictly from its left neighbour and falls strictly
    after any run of equal samples; a plateau is reported at its first sample.
    The first and last samples are never maxima.

    The valley on each side of a maximum is the lowest sample between it and
    the neighbouring local maximum (or the sequence end). Prominence is the
    height of the maximum above the higher of its two valleys.
    """

    def __init__(
        self,
        spectrum: Iterable[float],
        min_distance: int,
        min_prominence: float,
        start: int = 0
    ):
        if min_distance < 1:
            raise ValueError(f"min_distance must be >= 1, got {min_distance}")

        if not hasattr(spectrum, '__len__'):
            spectrum = list(spectrum)
        self.spectrum = np.asarray(spectrum, dtype=np.float64)
        if self.spectrum.ndim != 1:
            raise ValueError(f"Spectrum must be 1D, got shape {self.spectrum.shape}")

        self.min_distance = int(min_distance)
        self.min_prominence = float(min_prominence)
        self.start = int(start)

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        pending = None
        for previous, index, following in self._maxima_with_neighbours():
            amplitude = float(self.spectrum[index])
            if self._prominence_between(previous, index, following) < self.min_prominence:
                continue

            if pending is None:
                pending = (index, amplitude)
            elif index - pending[0] < self.min_distance:
                # Equal heights keep the earlier peak
                if amplitude > pending[1]:
                    pending = (index, amplitude)
            else:
                yield self.start + pending[0], pending[1]
                pending = (index, amplitude)

        if pending is not None:
            yield self.start + pending[0], pending[1]

    def _local_maxima(self) -> Iterator[int]:
        y = self.spectrum
        n = len(y)
        i = 1
        while i < n - 1:
            if y[i - 1] < y[i]:
                j = i + 1
                while j < n and y[j] == y[i]:
                    j += 1
                if j < n and y[j] < y[i]:
                    yield i
                i = j
            else:
                i += 1

    def _maxima_with_neighbours(self) -> Iterator[Tuple[Optional[int], int, Optional[int]]]:
        # (previous maximum, maximum, next maximum); None past either end
        previous = current = None
        for index in self._local_maxima():
            if current is not None:
                yield previous, current, index
            previous, current = current, index
        if current is not None:
            yield previous, current, None

    def _prominence_between(
        self,
        previous: Optional[int],
        index: int,
        following: Optional[int]
    ) -> float:
        y = self.spectrum
        left_from = 0 if previous is None else previous + 1
        right_to = len(y) if following is None else following
        left_valley = y[left_from:index].min()
        right_valley = y[index + 1:right_to].min()
        return float(y[index] - max(left_valley, right_valley))

    def prominence(self, index: int) -> float:
        """
        Prominence of the local maximum at ``index`` (relative to the input).

        Raises:
            ValueError: If ``index`` is not a local maximum
        """
        for previous, peak, following in self._maxima_with_neighbours():
            if peak == index:
                return self._prominence_between(previous, peak, following)
        raise ValueError(f"Index {index} is not a local maximum")


def fft_peaks(
    spectrum: Iterable[float],
    min_distance: int,
    min_prominence: float,
    start: int = 0
) -> FftPeaks:
    """
    Build the lazy peak sequence of ``spectrum``.

    Examples
    --------
    >>> list(fft_peaks([0, 20, 0, 0, 0, 30, 0], min_distance=2, min_prominence=10))
    [(1, 20.0), (5, 30.0)]
    """
    return FftPeaks(spectrum, min_distance, min_prominence, start=start)
