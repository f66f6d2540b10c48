"""mobilectl - Release automation for Android and iOS apps.

One declarative configuration drives building, signing and distributing
mobile artifacts, bumping versions with backups, and generating
changelogs from commit history.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Constants
from .constants import Platform, DestinationType, ArtifactType

# Configuration
from .core import ConfigLoader, ConfigValidator, ProjectDetector, validate_config

# Orchestrators
from .services import (
    BuildOrchestrator,
    DeployOrchestrator,
    ReleasePipeline,
    VersionOrchestrator,
    ChangelogGenerator,
)

# Data models
from .models import (
    Config,
    BuildOutput,
    BuildResult,
    DeployResult,
    DeploymentResults,
    PipelineResult,
    SemanticVersion,
    VersionBumpResult,
    ChangelogResult,
    ValidationResult,
)

# Exceptions
from .api.exceptions import (
    MobileCtlError,
    ConfigError,
    ConfigParseError,
    ValidationError,
    BuildError,
    SigningError,
    DeployError,
    DestinationError,
    VersionError,
    ChangelogError,
    GitError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Constants
    "Platform",
    "DestinationType",
    "ArtifactType",

    # Configuration
    "ConfigLoader",
    "ConfigValidator",
    "ProjectDetector",
    "validate_config",

    # Orchestrators
    "BuildOrchestrator",
    "DeployOrchestrator",
    "ReleasePipeline",
    "VersionOrchestrator",
    "ChangelogGenerator",

    # Data models
    "Config",
    "BuildOutput",
    "BuildResult",
    "DeployResult",
    "DeploymentResults",
    "PipelineResult",
    "SemanticVersion",
    "VersionBumpResult",
    "ChangelogResult",
    "ValidationResult",

    # Exceptions
    "MobileCtlError",
    "ConfigError",
    "ConfigParseError",
    "ValidationError",
    "BuildError",
    "SigningError",
    "DeployError",
    "DestinationError",
    "VersionError",
    "ChangelogError",
    "GitError",
]
