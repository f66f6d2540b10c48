"""Snapshots of version-bearing files taken before a bump"""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from ..constants import BACKUP_TIMESTAMP_FORMAT, VERSION_BACKUP_DIR, VERSION_BACKUP_FILES
from ..models.version import BackupResult
from ..utils.git_utils import create_tag

logger = logging.getLogger(__name__)

_TIMESTAMP_LENGTH = len(datetime(2000, 1, 1).strftime(BACKUP_TIMESTAMP_FORMAT))


class VersionBackup:
    """Copy files into ``.mobilectl/backups`` and restore them on demand"""

    def __init__(self,
                 base_dir: Union[str, Path, None] = None,
                 files: Optional[Iterable[str]] = None,
                 create_git_tag: bool = True,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            base_dir: Project root
            files: Files to snapshot, relative to the root
            create_git_tag: Tag the pre-bump state as ``v<version>``
            clock: Time source for backup names
        """
        self.base_dir = Path(base_dir or Path.cwd())
        self.files = list(files) if files is not None else list(VERSION_BACKUP_FILES)
        self.create_git_tag = create_git_tag
        self.clock = clock
        self.backup_root = self.base_dir / VERSION_BACKUP_DIR

    def _relative(self, entry: Union[str, Path]) -> Optional[Path]:
        path = Path(entry)
        if path.is_absolute():
            try:
                return path.relative_to(self.base_dir)
            except ValueError:
                logger.warning(f"Not backing up {path}: outside {self.base_dir}")
                return None
        return path

    def create_backup(self, from_version: str, extra_files: Iterable[str] = ()) -> BackupResult:
        """
        Snapshot files before they are rewritten

        Args:
            from_version: Version being replaced
            extra_files: More files to include, e.g. the bump targets

        Returns:
            BackupResult
        """
        name = f"{from_version}-{self.clock().strftime(BACKUP_TIMESTAMP_FORMAT)}"
        backup_dir = self.backup_root / name

        try:
            backup_dir.mkdir(parents=True, exist_ok=True)
            copied: List[str] = []
            for entry in list(self.files) + list(extra_files):
                relative = self._relative(entry)
                if relative is None or relative.as_posix() in copied:
                    continue
                source = self.base_dir / relative
                if not source.is_file():
                    continue
                target = backup_dir / relative
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, target)
                copied.append(relative.as_posix())
        except OSError as e:
            logger.error(f"Backup failed: {e}")
            return BackupResult(success=False, error=str(e))

        tagged = False
        if self.create_git_tag and (self.base_dir / ".git").exists():
            tagged = create_tag(self.base_dir, f"v{from_version}", f"Version {from_version}")

        logger.info(f"Backed up {len(copied)} file(s) to {backup_dir}")
        return BackupResult(
            success=True,
            backup_path=str(backup_dir),
            files_backed_up=copied,
            git_tag_created=tagged,
        )

    def _locate(self, backup: Union[str, Path]) -> Path:
        path = Path(backup)
        if path.is_absolute() or path.exists():
            return path
        return self.backup_root / path

    def restore_backup(self, backup: Union[str, Path]) -> bool:
        """
        Copy a backup's files back into the project

        Args:
            backup: Backup directory path or name

        Returns:
            True if the backup existed and was restored
        """
        backup_dir = self._locate(backup)
        if not backup_dir.is_dir():
            logger.error(f"Backup not found: {backup}")
            return False

        try:
            for source in sorted(backup_dir.rglob("*")):
                if not source.is_file():
                    continue
                target = self.base_dir / source.relative_to(backup_dir)
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, target)
                logger.debug(f"Restored {target}")
        except OSError as e:
            logger.error(f"Restore failed: {e}")
            return False

        logger.info(f"Restored backup {backup_dir.name}")
        return True

    def list_backups(self) -> List[str]:
        """Backup names, newest first"""
        if not self.backup_root.is_dir():
            return []
        names = [entry.name for entry in self.backup_root.iterdir() if entry.is_dir()]
        return sorted(names, key=lambda name: (name[-_TIMESTAMP_LENGTH:], name), reverse=True)
