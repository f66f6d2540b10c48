"""Changelog models"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class GitCommit:
    """One commit as read from history"""

    hash: str
    short_hash: str
    type: str
    message: str
    scope: Optional[str] = None
    body: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None
    breaking: bool = False


@dataclass
class ChangelogState:
    """Where the previous generation stopped"""

    last_generated_commit: Optional[str] = None
    last_generated_date: Optional[str] = None
    last_generated_version: Optional[str] = None
    last_generated_range: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChangelogState':
        """Create from dictionary"""
        return cls(
            last_generated_commit=data.get('last_generated_commit'),
            last_generated_date=data.get('last_generated_date'),
            last_generated_version=data.get('last_generated_version'),
            last_generated_range=data.get('last_generated_range'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'last_generated_commit': self.last_generated_commit,
            'last_generated_date': self.last_generated_date,
            'last_generated_version': self.last_generated_version,
            'last_generated_range': self.last_generated_range,
        }


@dataclass
class ChangelogResult:
    """Outcome of a changelog generation"""

    success: bool
    content: str = ""
    output_file: Optional[str] = None
    commit_count: int = 0
    version: Optional[str] = None
    backup_id: Optional[str] = None
    error: Optional[str] = None
    dry_run: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "output_file": self.output_file,
            "commit_count": self.commit_count,
            "version": self.version,
            "backup_id": self.backup_id,
            "error": self.error,
            "dry_run": self.dry_run,
        }


@dataclass(frozen=True)
class BackupInfo:
    """A saved copy of the changelog file"""

    id: str
    path: str
    created: datetime
    size: int
