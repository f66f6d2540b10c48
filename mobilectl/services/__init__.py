# mobilectl/services/__init__.py

"""Orchestration services for mobilectl"""

from .build_orchestrator import BuildOrchestrator, with_variant
from .deploy_orchestrator import DeployOrchestrator
from .release_pipeline import ReleasePipeline, resolve_flavors
from .file_updater import FileUpdater
from .version_backup import VersionBackup
from .version_orchestrator import VersionOrchestrator
from .commit_reader import CommitReader, parse_commit_message, parse_git_log
from .changelog_state import ChangelogStateManager
from .changelog_writer import ChangelogBackupManager, SafeChangelogWriter
from .changelog_generator import ChangelogGenerator

__all__ = [
    "BuildOrchestrator",
    "with_variant",
    "DeployOrchestrator",
    "ReleasePipeline",
    "resolve_flavors",
    "FileUpdater",
    "VersionBackup",
    "VersionOrchestrator",
    "CommitReader",
    "parse_commit_message",
    "parse_git_log",
    "ChangelogStateManager",
    "ChangelogBackupManager",
    "SafeChangelogWriter",
    "ChangelogGenerator",
]
