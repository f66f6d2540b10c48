"""Exception definitions for mobilectl"""

from typing import List, Optional

from ..constants import ErrorCode


class MobileCtlError(Exception):
    """Base exception for mobilectl"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigError(MobileCtlError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class ConfigParseError(ConfigError):
    """Configuration file could not be parsed"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.error_code = ErrorCode.CONFIG_PARSE_ERROR
        self.path = path


class ValidationError(MobileCtlError):
    """Configuration validation failed"""

    def __init__(self, message: str, issues: Optional[List] = None):
        super().__init__(message, ErrorCode.VALIDATION_FAILED)
        self.issues = issues or []


class DetectionError(MobileCtlError):
    """No buildable platform was detected"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.NO_PLATFORM_DETECTED)


class BuildError(MobileCtlError):
    """Build operation error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.BUILD_FAILED)


class SigningError(MobileCtlError):
    """Artifact signing error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.SIGNING_FAILED)


class DeployError(MobileCtlError):
    """Deployment operation error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.DEPLOY_FAILED)


class DestinationError(DeployError):
    """Unknown or misconfigured destination"""

    def __init__(self, destination: str, message: str):
        super().__init__(f"{destination}: {message}")
        self.error_code = ErrorCode.DESTINATION_ERROR
        self.destination = destination


class VersionError(MobileCtlError):
    """Version management error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.VERSION_ERROR)


class BackupError(VersionError):
    """Backup could not be created or restored"""

    def __init__(self, message: str):
        super().__init__(message)
        self.error_code = ErrorCode.BACKUP_FAILED


class ChangelogError(MobileCtlError):
    """Changelog generation error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CHANGELOG_ERROR)


class GitError(MobileCtlError):
    """Git command failed"""

    def __init__(self, message: str, command: Optional[List[str]] = None):
        super().__init__(message, ErrorCode.GIT_ERROR)
        self.command = command or []


class ProcessError(MobileCtlError):
    """External process could not be started"""

    def __init__(self, command: str, message: str):
        super().__init__(f"{command}: {message}", ErrorCode.PROCESS_FAILED)
        self.command = command


class UserCancelledError(MobileCtlError):
    """User cancelled the operation"""

    def __init__(self):
        super().__init__("Operation cancelled by user")
