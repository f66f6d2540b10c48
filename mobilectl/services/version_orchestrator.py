# mobilectl/services/version_orchestrator.py

"""Version bump orchestration"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..api.exceptions import VersionError
from ..constants import BUMP_LEVELS, MSG_BACKUP_FAILED, MSG_CONFIG_UPDATE_FAILED
from ..models.version import SemanticVersion, VersionBumpResult
from ..utils.version_utils import is_valid_version
from .file_updater import FileUpdater
from .version_backup import VersionBackup

logger = logging.getLogger(__name__)


class VersionOrchestrator:
    """Validate, back up, rewrite files, then update the config

    The stages run strictly in that order. A failed backup stops the bump
    before any file is touched; a failed config update is reported with
    the files already rewritten so they can be reconciled or restored.
    Nothing is rolled back automatically.
    """

    def __init__(self, file_updater: Optional[FileUpdater] = None,
                 backup: Optional[VersionBackup] = None):
        self.file_updater = file_updater or FileUpdater()
        self.backup = backup or VersionBackup()

    @staticmethod
    def next_version(current: str, level: str) -> str:
        """
        Version after a bump

        Args:
            current: Current version
            level: major, minor, patch, or an explicit semantic version

        Returns:
            New version string

        Raises:
            VersionError: Level is neither a bump level nor a version
        """
        if level in BUMP_LEVELS:
            return str(SemanticVersion.parse(current).bump(level))
        explicit = level.lstrip('vV') if level else ""
        if is_valid_version(explicit):
            return explicit
        raise VersionError(
            f"Invalid bump level or version: '{level}' (use major, minor, patch or X.Y.Z)"
        )

    def bump(self,
             current_version: str,
             level: str,
             dry_run: bool = False,
             skip_backup: bool = False,
             config_path: Optional[Union[str, Path]] = None,
             files_to_update: Iterable[str] = (),
             increment_version_code: bool = False) -> VersionBumpResult:
        """
        Bump the version

        Args:
            current_version: Version in the config
            level: major, minor, patch, or an explicit version
            dry_run: Only compute the new version
            skip_backup: Rewrite files without a backup first
            config_path: Config file receiving ``version.current``
            files_to_update: Files or patterns holding the version
            increment_version_code: Also bump build numbers

        Returns:
            VersionBumpResult; unexpected errors report the previous
            version as the new one
        """
        previous = current_version
        files_to_update = list(files_to_update)

        try:
            new_version = self.next_version(current_version, level)
        except VersionError as e:
            return VersionBumpResult(previous, previous, success=False, error=str(e))

        if dry_run:
            logger.info(f"Dry run: {previous} -> {new_version}")
            return VersionBumpResult(previous, new_version, success=True, dry_run=True)

        try:
            backup = None
            if not skip_backup:
                backup_files = list(files_to_update)
                if config_path is not None:
                    backup_files.append(str(config_path))
                backup = self.backup.create_backup(previous, extra_files=backup_files)
                if not backup.success:
                    return VersionBumpResult(
                        previous, new_version,
                        success=False,
                        backup=backup,
                        error=MSG_BACKUP_FAILED.format(error=backup.error),
                    )

            files_updated: List[str] = self.file_updater.update_version_in_files(
                previous, new_version, files_to_update, increment_version_code
            )

            if config_path is not None and not self.file_updater.update_config(config_path, new_version):
                return VersionBumpResult(
                    previous, new_version,
                    success=False,
                    files_updated=files_updated,
                    backup=backup,
                    error=MSG_CONFIG_UPDATE_FAILED,
                )

            logger.info(f"Version bumped {previous} -> {new_version}")
            return VersionBumpResult(
                previous, new_version,
                success=True,
                files_updated=files_updated,
                backup=backup,
            )
        except Exception as e:
            logger.error(f"Version bump failed: {e}")
            return VersionBumpResult(previous, previous, success=False, error=str(e))

    def restore(self, backup: Union[str, Path]) -> bool:
        """Restore files from a backup"""
        return self.backup.restore_backup(backup)

    def list_backups(self) -> List[str]:
        """Available backups, newest first"""
        return self.backup.list_backups()
