import numpy as np
from typing import Union


def get_window(window: Union[str, np.ndarray], win_length: int) -> np.ndarray:
    """
    Generate a window function for spectral analysis.

    Parameters
    ----------
    window : str or np.ndarray
        Window specification:
        - 'hann': Hann window (default)
        - 'hamming': Hamming window
        - 'blackman': Blackman window
        - np.ndarray: custom window (must have length win_length)
    win_length : int
        Length of the window

    Returns
    -------
    np.ndarray
        Window function of length win_length

    Notes
    -----
    Window functions reduce spectral leakage by smoothly tapering the signal
    at the window edges.
    """
    if isinstance(window, np.ndarray):
        if len(window) != win_length:
            raise ValueError(f"Custom window length {len(window)} != win_length {win_length}")
        return window

    # Periodic ("DFT-even") versions: normalized by N, not N-1
    n = np.arange(win_length)
    if window == 'hann':
        # w[n] = 0.5 * (1 - cos(2πn / N))
        return 0.5 - 0.5 * np.cos(2 * np.pi * n / win_length)

    elif window == 'hamming':
        # w[n] = 0.54 - 0.46 * cos(2πn / N)
        return 0.54 - 0.46 * np.cos(2 * np.pi * n / win_length)

    elif window == 'blackman':
        # w[n] = 0.42 - 0.5*cos(2πn/N) + 0.08*cos(4πn/N)
        return (0.42
                - 0.5 * np.cos(2 * np.pi * n / win_length)
                + 0.08 * np.cos(4 * np.pi * n / win_length))
    else:
        raise ValueError(f"Unknown window type: {window}")
