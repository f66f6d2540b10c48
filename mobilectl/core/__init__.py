"""Core configuration and detection components"""

from .project_detector import ProjectDetector
from .validation_engine import ConfigValidator, validate_config
from .config_loader import ConfigLoader

__all__ = [
    'ProjectDetector',
    'ConfigValidator',
    'validate_config',
    'ConfigLoader',
]
