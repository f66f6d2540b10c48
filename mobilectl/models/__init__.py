# mobilectl/models/__init__.py

"""Data models for mobilectl"""

from .config import (
    Config,
    AppConfig,
    AndroidBuildConfig,
    IosBuildConfig,
    OutputConfig,
    BuildConfig,
    VersionConfig,
    CommitType,
    ReleaseNotes,
    ChangelogConfig,
    FirebaseDestinationConfig,
    PlayConsoleDestinationConfig,
    LocalDestinationConfig,
    AppStoreConnectDestinationConfig,
    AndroidDeployConfig,
    IosDeployConfig,
    FlavorGroup,
    DeployConfig,
    NotifyConfig,
    ReportConfig,
    default_commit_types,
)
from .result import Severity, ValidationIssue, ValidationResult
from .build import BuildOutput, BuildResult
from .signing import SigningConfig, SigningValidation, SigningResult
from .deploy import UploadResult, DeployResult, DeploymentResults, PipelineResult
from .version import SemanticVersion, BackupResult, VersionBumpResult
from .changelog import GitCommit, ChangelogState, ChangelogResult, BackupInfo

__all__ = [
    # Config
    'Config',
    'AppConfig',
    'AndroidBuildConfig',
    'IosBuildConfig',
    'OutputConfig',
    'BuildConfig',
    'VersionConfig',
    'CommitType',
    'ReleaseNotes',
    'ChangelogConfig',
    'FirebaseDestinationConfig',
    'PlayConsoleDestinationConfig',
    'LocalDestinationConfig',
    'AppStoreConnectDestinationConfig',
    'AndroidDeployConfig',
    'IosDeployConfig',
    'FlavorGroup',
    'DeployConfig',
    'NotifyConfig',
    'ReportConfig',
    'default_commit_types',

    # Validation
    'Severity',
    'ValidationIssue',
    'ValidationResult',

    # Build and signing
    'BuildOutput',
    'BuildResult',
    'SigningConfig',
    'SigningValidation',
    'SigningResult',

    # Deploy
    'UploadResult',
    'DeployResult',
    'DeploymentResults',
    'PipelineResult',

    # Version
    'SemanticVersion',
    'BackupResult',
    'VersionBumpResult',

    # Changelog
    'GitCommit',
    'ChangelogState',
    'ChangelogResult',
    'BackupInfo',
]
