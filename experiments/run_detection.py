#!/usr/bin/env python3
"""
Pitch Detection Experiment Script

Runs every detection algorithm over the recorded fixtures and a set of
synthetic signals and reports the detected frequencies.

Usage:
    python run_detection.py [--config CONFIG_PATH] [--output OUTPUT_DIR]
"""

import sys
import json
import argparse
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Optional

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from pitch_detector.config import DetectorConfig, load_config
from pitch_detector.dsp_core import FftSpace
from pitch_detector.frequency import ALGORITHMS, FrequencyDetector
from pitch_detector.utils.audio import AudioProcessor, load_test_signal
from pitch_detector.utils.logging import ExperimentLogger

console = Console()


class WorkspacePool:
    """One FftSpace per signal length, reused across detectors."""

    def __init__(self):
        self._spaces: Dict[int, FftSpace] = {}

    def get(self, length: int) -> FftSpace:
        if length not in self._spaces:
            self._spaces[length] = FftSpace(length)
        return self._spaces[length]


def create_detectors(config: Dict) -> Dict[str, FrequencyDetector]:
    """One detector per algorithm, sharing the configured frequency bounds."""
    base = config.get('detector', {})
    detectors = {}
    for name in ALGORITHMS:
        section = {**base, 'algorithm': name}
        # Extra options belong to the configured algorithm only
        if name != base.get('algorithm'):
            section.pop('detector_options', None)
        detector_config = DetectorConfig.from_dict(section)
        detectors[name] = detector_config.create_detector()
    return detectors


def load_signals(config: Dict, logger: Optional[ExperimentLogger] = None) -> List[Dict]:
    """Fixtures found on disk followed by the synthetic signals."""
    signals = []
    detector_cfg = config.get('detector', {})

    fixtures_dir = PROJECT_ROOT / config.get('fixtures_dir', 'test_data')
    for filename, expected in config.get('fixtures', {}).items():
        path = fixtures_dir / filename
        if not path.exists():
            if logger is not None:
                logger.warning(f"Missing fixture {path}, skipped")
            else:
                console.print(f"  [yellow]![/yellow] Missing fixture {path}, skipped")
            continue
        signals.append({
            'name': Path(filename).stem,
            'signal': load_test_signal(path),
            'sample_rate': float(detector_cfg.get('sample_rate', 44000)),
            'expected': expected,
        })

    synthetic_cfg = config.get('synthetic', {})
    sr = float(synthetic_cfg.get('sample_rate', 44100))
    length = int(synthetic_cfg.get('window_length', 8192))
    for freq in synthetic_cfg.get('frequencies', []):
        signals.append({
            'name': f'sine_{freq:g}Hz',
            'signal': AudioProcessor.sine_wave(length, freq, sr),
            'sample_rate': sr,
            'expected': {name: freq for name in ALGORITHMS},
        })
        signals.append({
            'name': f'harmonic_{freq:g}Hz',
            'signal': AudioProcessor.harmonic_wave(length, freq, sr),
            'sample_rate': sr,
            'expected': {name: freq for name in ALGORITHMS},
        })

    return signals


def run_experiment(config: Dict, output_dir: Path, logger: ExperimentLogger) -> Dict:
    console.print(Panel.fit(
        "[bold blue]Pitch Detection Experiment[/bold blue]\n"
        f"Algorithms: {', '.join(ALGORITHMS)}",
        border_style="blue"
    ))
    logger.log_config(config.get('detector', {}))

    console.print("\n[bold]Loading signals...[/bold]")
    signals = load_signals(config, logger)
    console.print(f"[green]✓[/green] Loaded {len(signals)} signals")

    detectors = create_detectors(config)
    pool = WorkspacePool()

    results = {
        'timestamp': datetime.now().isoformat(),
        'signals': {}
    }

    for item in signals:
        row = {}
        fft_space = pool.get(len(item['signal']))
        for name, detector in detectors.items():
            freq = detector.detect_frequency_with_workspace(
                item['signal'], item['sample_rate'], fft_space
            )
            expected = item['expected'].get(name)
            logger.log_detection(name, item['name'], freq, expected)
            row[name] = {'frequency': freq, 'expected': expected}
        results['signals'][item['name']] = row

    console.print("\n")
    display_results_table(results, console)
    save_results(results, output_dir, logger)
    return results


def _format_cell(frequency: Optional[float], expected: Optional[float]) -> str:
    if frequency is None:
        return "[red]n/a[/red]"
    if expected is None:
        return f"{frequency:.3f}"
    color = "green" if abs(frequency - expected) <= 0.1 * expected else "yellow"
    return f"[{color}]{frequency:.3f}[/{color}]"


def display_results_table(results: Dict, console: Console):
    """Display detected frequencies (Hz) per signal and algorithm."""
    table = Table(
        title="[bold]Detected frequency (Hz)[/bold]",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan"
    )

    table.add_column("Signal", style="bold")
    for name in ALGORITHMS:
        table.add_column(name, justify="center")

    for signal_name, row in results['signals'].items():
        table.add_row(
            signal_name,
            *(_format_cell(row[name]['frequency'], row[name]['expected']) for name in ALGORITHMS)
        )

    console.print(table)


def save_results(results: Dict, output_dir: Path, logger: ExperimentLogger):
    json_path = output_dir / 'results.json'
    with open(json_path, 'w') as f:
        json.dump(results, f, indent=2)
    console.print(f"\n[green]✓[/green] Results saved to {json_path}")
    logger.info(f"Results saved to {json_path}")


def main():
    parser = argparse.ArgumentParser(description="Pitch Detection Experiment")
    parser.add_argument(
        '--config',
        type=str,
        default=str(PROJECT_ROOT / 'configs' / 'detector.yaml'),
        help='Path to configuration file'
    )
    parser.add_argument(
        '--output',
        type=str,
        default=None,
        help='Output directory for results'
    )
    args = parser.parse_args()

    config = load_config(args.config)

    if args.output:
        output_dir = Path(args.output)
    else:
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        output_dir = PROJECT_ROOT / 'experiments' / 'results' / timestamp
    output_dir.mkdir(parents=True, exist_ok=True)

    logger = ExperimentLogger(
        'pitch_detection',
        log_dir=str(PROJECT_ROOT / config.get('log_dir', 'logs'))
    )

    try:
        run_experiment(config, output_dir, logger)

        console.print(Panel.fit(
            "[bold green]Experiment completed successfully![/bold green]\n"
            f"Results saved to: {output_dir}",
            border_style="green"
        ))

    except Exception as e:
        logger.logger.exception("Experiment failed")
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise

    finally:
        logger.close()


if __name__ == '__main__':
    main()
