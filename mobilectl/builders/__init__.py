# mobilectl/builders/__init__.py

"""Platform builders"""

from .base import PlatformBuilder
from .artifacts import (
    ArtifactRequirement,
    ArtifactInfo,
    ArtifactValidation,
    ArtifactStrategy,
    ArtifactValidator,
)
from .android import AndroidBuilder, gradle_command, find_artifact
from .ios import IosBuilder
from .manager import BuildManager, default_builders

__all__ = [
    'PlatformBuilder',
    'ArtifactRequirement',
    'ArtifactInfo',
    'ArtifactValidation',
    'ArtifactStrategy',
    'ArtifactValidator',
    'AndroidBuilder',
    'IosBuilder',
    'BuildManager',
    'default_builders',
    'gradle_command',
    'find_artifact',
]
