"""
Utility modules.
"""

from .audio import AudioProcessor, load_test_signal
from .logging import setup_logging, get_logger

__all__ = ['AudioProcessor', 'load_test_signal', 'setup_logging', 'get_logger']
