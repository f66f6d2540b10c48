"""Changelog file writes with automatic backups"""

import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..api.exceptions import ChangelogError
from ..constants import CHANGELOG_BACKUP_KEEP, CHANGELOG_BACKUP_TIMESTAMP_FORMAT
from ..models.changelog import BackupInfo

logger = logging.getLogger(__name__)

NO_BACKUP = "none"


class ChangelogBackupManager:
    """Keep timestamped copies of the changelog file

    Backups are named ``<stem>@<timestamp><suffix>``; the part before the
    suffix is the backup id.
    """

    def __init__(self, backup_dir: Union[str, Path], keep: int = CHANGELOG_BACKUP_KEEP,
                 clock: Callable[[], datetime] = datetime.now):
        self.backup_dir = Path(backup_dir)
        self.keep = keep
        self.clock = clock

    def create_backup(self, path: Union[str, Path]) -> str:
        """
        Copy a file into the backup directory

        Returns:
            Backup id, or ``"none"`` when the file does not exist
        """
        path = Path(path)
        if not path.is_file():
            return NO_BACKUP

        self.backup_dir.mkdir(parents=True, exist_ok=True)
        backup_id = f"{path.stem}@{self.clock().strftime(CHANGELOG_BACKUP_TIMESTAMP_FORMAT)}"
        shutil.copy2(path, self.backup_dir / f"{backup_id}{path.suffix}")
        logger.debug(f"Backed up {path.name} as {backup_id}")
        return backup_id

    def _find(self, backup_id: str) -> Optional[Path]:
        if not self.backup_dir.is_dir():
            return None
        for entry in self.backup_dir.iterdir():
            if entry.is_file() and (entry.name == backup_id or entry.stem == backup_id):
                return entry
        return None

    def list_backups(self, stem: Optional[str] = None) -> List[BackupInfo]:
        """Backups, newest first"""
        if not self.backup_dir.is_dir():
            return []
        backups = []
        for entry in self.backup_dir.iterdir():
            if not entry.is_file() or '@' not in entry.stem:
                continue
            if stem is not None and entry.stem.split('@', 1)[0] != stem:
                continue
            try:
                created = datetime.strptime(entry.stem.split('@', 1)[1],
                                            CHANGELOG_BACKUP_TIMESTAMP_FORMAT)
            except ValueError:
                created = datetime.fromtimestamp(entry.stat().st_mtime)
            backups.append(BackupInfo(
                id=entry.stem,
                path=str(entry),
                created=created,
                size=entry.stat().st_size,
            ))
        return sorted(backups, key=lambda info: info.created, reverse=True)

    def restore_backup(self, backup_id: str, target: Union[str, Path]) -> bool:
        """Copy a backup over the target file"""
        source = self._find(backup_id)
        if source is None:
            logger.error(f"Changelog backup not found: {backup_id}")
            return False
        target = Path(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)
        logger.info(f"Restored {target.name} from {backup_id}")
        return True

    def delete_backup(self, backup_id: str) -> bool:
        source = self._find(backup_id)
        if source is None:
            return False
        source.unlink()
        return True

    def delete_old_backups(self, keep: Optional[int] = None) -> int:
        """
        Prune backups beyond the newest ``keep``

        Returns:
            Number of backups deleted
        """
        keep = self.keep if keep is None else keep
        stale = self.list_backups()[keep:]
        for info in stale:
            Path(info.path).unlink()
        if stale:
            logger.debug(f"Deleted {len(stale)} old changelog backup(s)")
        return len(stale)


class SafeChangelogWriter:
    """Write the changelog atomically after backing up the previous version"""

    def __init__(self, backup_manager: ChangelogBackupManager):
        self.backup_manager = backup_manager

    @staticmethod
    def read(path: Union[str, Path]) -> Optional[str]:
        path = Path(path)
        if not path.is_file():
            return None
        return path.read_text(encoding='utf-8')

    def write(self, content: str, path: Union[str, Path]) -> Optional[str]:
        """
        Replace the file content

        Args:
            content: New content
            path: Changelog file

        Returns:
            Id of the backup taken, or None when there was no previous file

        Raises:
            ChangelogError: The file could not be written
        """
        path = Path(path)
        try:
            backup_id = self.backup_manager.create_backup(path)
            path.parent.mkdir(parents=True, exist_ok=True)

            fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(content)
                os.replace(temp_name, path)
            except BaseException:
                if os.path.exists(temp_name):
                    os.unlink(temp_name)
                raise

            self.backup_manager.delete_old_backups()
        except OSError as e:
            raise ChangelogError(f"Could not write {path}: {e}")

        return None if backup_id == NO_BACKUP else backup_id
