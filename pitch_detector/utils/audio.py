"""
Signal helpers for tests, experiments and plotting.

Nothing here runs on the detection path.
"""

import json
from pathlib import Path
from typing import Union

import numpy as np


class AudioProcessor:
    """
    Synthetic signals and raw audio buffer conversion using numpy only.
    """

    @staticmethod
    def sine_wave(num_samples: int, freq: float, sample_rate: float) -> np.ndarray:
        """
        Generate a unit-amplitude sine wave.

        Args:
            num_samples: Length of the signal
            freq: Frequency in Hz
            sample_rate: Sample rate in Hz

        Returns:
            sin(2π * freq * n / sample_rate) for n in [0, num_samples)
        """
        n = np.arange(num_samples)
        return np.sin(2 * np.pi * freq * n / sample_rate)

    @staticmethod
    def harmonic_wave(
        num_samples: int,
        freq: float,
        sample_rate: float,
        n_harmonics: int = 8,
        decay: float = 0.7
    ) -> np.ndarray:
        """
        Sum of harmonics k * freq with amplitude decay ** (k - 1).

        A crude stand-in for a bowed or plucked string.
        """
        n = np.arange(num_samples)
        signal = np.zeros(num_samples)
        for k in range(1, n_harmonics + 1):
            if k * freq >= sample_rate / 2:
                break
            signal += decay ** (k - 1) * np.sin(2 * np.pi * k * freq * n / sample_rate)
        return signal

    @staticmethod
    def audio_buffer_to_signal(buffer: Union[bytes, bytearray, list]) -> np.ndarray:
        """
        Convert a raw byte buffer of 16-bit little-endian PCM to a float signal.

        Args:
            buffer: Bytes, or a list of byte values (0-255)

        Returns:
            Samples scaled by 1 / 32767; a trailing odd byte is dropped
        """
        raw = bytes(bytearray(buffer))
        raw = raw[:len(raw) - len(raw) % 2]
        samples = np.frombuffer(raw, dtype='<i2')
        return samples.astype(np.float64) / np.iinfo(np.int16).max


def load_test_signal(path: Union[str, Path]) -> np.ndarray:
    """
    Load a recorded fixture.

    The file is JSON with a ``data`` field holding the raw PCM bytes as a list
    of integers.

    Raises:
        ValueError: If the file has no ``data`` field
    """
    with open(path, 'r') as f:
        sample_data = json.load(f)

    data = sample_data.get('data')
    if data is None:
        raise ValueError(f"Fixture {path} has no 'data' field")
    return AudioProcessor.audio_buffer_to_signal(data)
