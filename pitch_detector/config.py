"""
Detector configuration loaded from YAML.
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, Union

import yaml

from pitch_detector.core.constants import AUTOCORRELATION_ALGORITHM, MAX_FREQ, MIN_FREQ
from pitch_detector.dsp_core.fft_space import FftSpace
from pitch_detector.frequency import ALGORITHMS, FrequencyDetector, create_detector

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG = PROJECT_ROOT / 'configs' / 'detector.yaml'


def load_config(config_path: Union[str, Path] = DEFAULT_CONFIG) -> Dict:
    """Load configuration from YAML file."""
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


@dataclass
class DetectorConfig:
    """Settings of one tuner session."""
    algorithm: str = AUTOCORRELATION_ALGORITHM
    sample_rate: float = 44000.0
    window_length: int = 8192
    min_freq: float = MIN_FREQ
    max_freq: float = MAX_FREQ
    detector_options: Dict = field(default_factory=dict)

    def __post_init__(self):
        if self.algorithm not in ALGORITHMS:
            raise ValueError(f"Unknown algorithm: {self.algorithm}. Known: {', '.join(ALGORITHMS)}")
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.window_length <= 0:
            raise ValueError(f"window_length must be positive, got {self.window_length}")
        if not 0 < self.min_freq < self.max_freq:
            raise ValueError(
                f"Frequency bounds must satisfy 0 < min_freq < max_freq, got {self.min_freq}, {self.max_freq}"
            )

    @classmethod
    def from_dict(cls, config: Dict) -> 'DetectorConfig':
        """Build from the ``detector`` section of a config dict (or the dict itself)."""
        section = config.get('detector', config)
        known = {k: v for k, v in section.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path] = DEFAULT_CONFIG) -> 'DetectorConfig':
        return cls.from_dict(load_config(config_path))

    def create_detector(self) -> FrequencyDetector:
        return create_detector(
            self.algorithm,
            min_freq=self.min_freq,
            max_freq=self.max_freq,
            **self.detector_options
        )

    def to_dict(self) -> Dict:
        return asdict(self)

    def create_fft_space(self) -> FftSpace:
        """A workspace sized for this session's signal windows."""
        return FftSpace(self.window_length)
