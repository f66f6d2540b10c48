# mobilectl/models/version.py

"""Version models"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

_LEADING_DIGITS = re.compile(r"^\d+")


def _lenient_int(text: str) -> int:
    match = _LEADING_DIGITS.match(text.strip())
    return int(match.group(0)) if match else 0


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """MAJOR.MINOR.PATCH triple ordered like a tuple"""

    major: int = 0
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, text: Optional[str]) -> 'SemanticVersion':
        """Parse a version string without ever raising

        Missing or non-numeric components become 0 and a leading ``v`` is
        accepted, so ``"1.2"`` parses to 1.2.0 and ``"garbage"`` to 0.0.0.

        Args:
            text: Version string

        Returns:
            SemanticVersion
        """
        text = (text or "").strip()
        if text[:1] in ("v", "V"):
            text = text[1:]
        # Pre-release and build metadata are not part of the triple
        core = re.split(r"[-+]", text, maxsplit=1)[0]
        parts = core.split(".")
        numbers = [_lenient_int(part) for part in parts[:3]]
        numbers += [0] * (3 - len(numbers))
        return cls(*numbers)

    def bump(self, level: str) -> 'SemanticVersion':
        """Next version for a bump level; unknown levels return self"""
        if level == "major":
            return SemanticVersion(self.major + 1, 0, 0)
        if level == "minor":
            return SemanticVersion(self.major, self.minor + 1, 0)
        if level == "patch":
            return SemanticVersion(self.major, self.minor, self.patch + 1)
        return self

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class BackupResult:
    """Outcome of snapshotting files before a version bump"""

    success: bool
    backup_path: Optional[str] = None
    files_backed_up: List[str] = field(default_factory=list)
    git_tag_created: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "backup_path": self.backup_path,
            "files_backed_up": list(self.files_backed_up),
            "git_tag_created": self.git_tag_created,
            "error": self.error,
        }


@dataclass(frozen=True)
class VersionBumpResult:
    """Outcome of one bump invocation"""

    previous_version: str
    new_version: str
    success: bool
    files_updated: List[str] = field(default_factory=list)
    backup: Optional[BackupResult] = None
    error: Optional[str] = None
    dry_run: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "previous_version": self.previous_version,
            "new_version": self.new_version,
            "success": self.success,
            "files_updated": list(self.files_updated),
            "backup": self.backup.to_dict() if self.backup else None,
            "error": self.error,
            "dry_run": self.dry_run,
        }
