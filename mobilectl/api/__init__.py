# mobilectl/api/__init__.py

"""Public exception API for mobilectl"""

from .exceptions import (
    MobileCtlError,
    ConfigError,
    ConfigParseError,
    ValidationError,
    DetectionError,
    BuildError,
    SigningError,
    DeployError,
    DestinationError,
    VersionError,
    BackupError,
    ChangelogError,
    GitError,
    ProcessError,
    UserCancelledError,
)

__all__ = [
    "MobileCtlError",
    "ConfigError",
    "ConfigParseError",
    "ValidationError",
    "DetectionError",
    "BuildError",
    "SigningError",
    "DeployError",
    "DestinationError",
    "VersionError",
    "BackupError",
    "ChangelogError",
    "GitError",
    "ProcessError",
    "UserCancelledError",
]
