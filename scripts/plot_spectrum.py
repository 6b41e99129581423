#!/usr/bin/env python3
"""
Plot the searched spectrum of a detector for a fixture or a synthetic tone.

Usage:
    python scripts/plot_spectrum.py --fixture tuner_c5.json --expected 523
    python scripts/plot_spectrum.py --algorithm PowerCepstrum --sine 440
"""

import argparse
import sys
from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pitch_detector.frequency import ALGORITHMS, SpectrumInspector, create_detector
from pitch_detector.utils.audio import AudioProcessor, load_test_signal


def plot_spectrum(detector: SpectrumInspector, signal, sample_rate: float, plot_name: str,
                  expected_freq: float, save_dir: Path) -> Path:
    """Draw ``detector.spectrum()`` and save it as a PNG."""
    points = detector.spectrum(signal, sample_rate)
    if not points:
        raise ValueError(f"{detector.name} has an empty search range at {sample_rate} Hz")
    x_vals, y_vals = zip(*points)

    plt.figure(figsize=(10.24, 7.68))
    plt.plot(x_vals, y_vals, color='red')
    plt.title(f'{detector.name} - {plot_name} - {expected_freq} Hz')
    plt.xlabel('Bin')
    plt.ylabel('Amplitude')
    plt.xlim(x_vals[0], x_vals[-1])
    plt.grid(True)

    save_dir.mkdir(parents=True, exist_ok=True)
    save_path = save_dir / f'{detector.name} - {plot_name}.png'
    plt.savefig(save_path, dpi=100)
    plt.close()
    return save_path


def main():
    parser = argparse.ArgumentParser(description="Plot a detector spectrum")
    parser.add_argument('--algorithm', type=str, default=ALGORITHMS[0], choices=ALGORITHMS)
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--fixture', type=str, help='Fixture file name under test_data/')
    source.add_argument('--sine', type=float, help='Frequency of a synthetic sine wave')
    parser.add_argument('--expected', type=float, default=None, help='Expected frequency for the title')
    parser.add_argument('--sample-rate', type=float, default=None)
    parser.add_argument('--length', type=int, default=8192, help='Synthetic signal length')
    parser.add_argument('--output', type=str, default=str(PROJECT_ROOT / 'test_data' / 'results'))
    args = parser.parse_args()

    detector = create_detector(args.algorithm)

    if args.fixture:
        sample_rate = args.sample_rate or 44000.0
        signal = load_test_signal(PROJECT_ROOT / 'test_data' / args.fixture)
        plot_name = Path(args.fixture).stem
        expected = args.expected
    else:
        sample_rate = args.sample_rate or 44100.0
        signal = AudioProcessor.sine_wave(args.length, args.sine, sample_rate)
        plot_name = f'sine_{args.sine:g}Hz'
        expected = args.expected if args.expected is not None else args.sine

    save_path = plot_spectrum(detector, signal, sample_rate, plot_name, expected, Path(args.output))
    print(f"Spectrum saved to {save_path}")


if __name__ == '__main__':
    main()
