"""Version management utilities"""

import json
import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional

from packaging.version import InvalidVersion, Version

from ..constants import BUMP_LEVELS, VERSION_PATTERN

logger = logging.getLogger(__name__)

_GRADLE_FILES = ["app/build.gradle.kts", "app/build.gradle", "build.gradle.kts", "build.gradle"]
_GRADLE_VERSION_NAME = re.compile(r'versionName\s*=?\s*["\']([^"\']+)["\']')
_PLIST_SHORT_VERSION = re.compile(
    r'<key>CFBundleShortVersionString</key>\s*<string>([^<]+)</string>'
)


def is_valid_version(version: str) -> bool:
    """Check for MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]"""
    return bool(version and VERSION_PATTERN.match(version))


def is_bump_level(value: str) -> bool:
    return value in BUMP_LEVELS


def compare_versions(version1: str, version2: str) -> int:
    """
    Compare two version strings

    Args:
        version1: First version
        version2: Second version

    Returns:
        -1 if version1 < version2, 0 if equal, 1 if version1 > version2

    Raises:
        ValueError: If either version cannot be parsed
    """
    try:
        v1 = Version(version1.lstrip('vV'))
        v2 = Version(version2.lstrip('vV'))
    except InvalidVersion as e:
        raise ValueError(str(e))

    if v1 < v2:
        return -1
    if v1 > v2:
        return 1
    return 0


def sort_versions(versions: List[str], reverse: bool = False) -> List[str]:
    """Sort version strings, skipping ones that do not parse"""
    valid = []
    for version in versions:
        try:
            valid.append((Version(version.lstrip('vV')), version))
        except InvalidVersion:
            logger.debug(f"Ignoring unparsable version: {version}")
    valid.sort(key=lambda item: item[0], reverse=reverse)
    return [version for _, version in valid]


def suggest_bump_level(commits: Iterable) -> str:
    """
    Pick a bump level from commit history

    Any breaking change means major, any feature means minor,
    everything else is a patch.

    Args:
        commits: GitCommit items

    Returns:
        "major", "minor" or "patch"
    """
    level = "patch"
    for commit in commits:
        if commit.breaking:
            return "major"
        if commit.type == "feat":
            level = "minor"
    return level


def detect_app_version(base_dir: Path) -> Optional[str]:
    """
    Read the app version from project files

    Looks at Gradle ``versionName``, then ``package.json``, then the first
    ``Info.plist`` under ``ios/``.

    Args:
        base_dir: Project root

    Returns:
        Version string or None
    """
    base_dir = Path(base_dir)

    for name in _GRADLE_FILES:
        path = base_dir / name
        if path.is_file():
            match = _GRADLE_VERSION_NAME.search(path.read_text(encoding='utf-8'))
            if match:
                return match.group(1)

    package_json = base_dir / "package.json"
    if package_json.is_file():
        try:
            version = json.loads(package_json.read_text(encoding='utf-8')).get("version")
        except (ValueError, AttributeError) as e:
            logger.debug(f"Unreadable package.json: {e}")
        else:
            if version:
                return str(version)

    ios_dir = base_dir / "ios"
    if ios_dir.is_dir():
        for plist in sorted(ios_dir.rglob("Info.plist")):
            match = _PLIST_SHORT_VERSION.search(plist.read_text(encoding='utf-8', errors='replace'))
            if match and not match.group(1).startswith("$("):
                return match.group(1).strip()

    return None
