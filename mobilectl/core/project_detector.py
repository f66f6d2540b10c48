# mobilectl/core/project_detector.py

"""Detect which mobile platforms a directory contains"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Set

from ..constants import Platform

logger = logging.getLogger(__name__)

_ANDROID_SETTINGS = ("settings.gradle", "settings.gradle.kts")
_ANDROID_BUILD_FILES = ("build.gradle", "build.gradle.kts")
_IOS_BUNDLES = (".xcodeproj", ".xcworkspace")
_IOS_POD_FILES = ("Podfile", "Podfile.lock")


def _walk(base_dir: Path, max_depth: int) -> Iterator[Path]:
    """Yield entries up to ``max_depth`` levels below base_dir, skipping hidden dirs"""
    stack = [(base_dir, 0)]
    while stack:
        directory, depth = stack.pop()
        try:
            entries = sorted(directory.iterdir())
        except OSError:
            continue
        for entry in entries:
            if entry.name.startswith('.'):
                continue
            yield entry
            if entry.is_dir() and depth + 1 < max_depth and entry.suffix not in _IOS_BUNDLES:
                stack.append((entry, depth + 1))


def _find(base_dir: Path, names, max_depth: int) -> bool:
    return any(entry.name in names for entry in _walk(base_dir, max_depth))


class ProjectDetector:
    """Inspect a working directory for Android and iOS projects"""

    def is_android_project(self, base_dir: Path) -> bool:
        """Gradle settings at the root, or a Gradle build file next to a manifest"""
        base_dir = Path(base_dir)
        if any((base_dir / name).is_file() for name in _ANDROID_SETTINGS):
            return True
        return (_find(base_dir, _ANDROID_BUILD_FILES, 2)
                and _find(base_dir, ("AndroidManifest.xml",), 3))

    def is_ios_project(self, base_dir: Path) -> bool:
        """Xcode project or workspace, an Info.plist, or CocoaPods files"""
        base_dir = Path(base_dir)
        if any((base_dir / name).is_file() for name in _IOS_POD_FILES):
            return True
        for entry in _walk(base_dir, 2):
            if entry.is_dir() and entry.suffix in _IOS_BUNDLES:
                return True
        return _find(base_dir, ("Info.plist",), 3)

    def detect_platforms(self, base_dir: Path,
                         android_enabled: bool = True,
                         ios_enabled: bool = True) -> Set[Platform]:
        """
        Buildable platforms in a directory

        Args:
            base_dir: Project root
            android_enabled: Whether Android may be targeted
            ios_enabled: Whether iOS may be targeted

        Returns:
            Platforms that are both enabled and present
        """
        platforms = set()
        if android_enabled and self.is_android_project(base_dir):
            platforms.add(Platform.ANDROID)
        if ios_enabled and self.is_ios_project(base_dir):
            platforms.add(Platform.IOS)
        logger.debug(f"Detected platforms in {base_dir}: {sorted(p.value for p in platforms)}")
        return platforms

    def describe(self, base_dir: Path) -> Dict[str, Any]:
        """Summary for display"""
        base_dir = Path(base_dir)
        android = self.is_android_project(base_dir)
        ios = self.is_ios_project(base_dir)
        xcode = [
            str(entry.relative_to(base_dir))
            for entry in _walk(base_dir, 2)
            if entry.is_dir() and entry.suffix in _IOS_BUNDLES
        ]
        return {
            'base_dir': str(base_dir),
            'android': android,
            'ios': ios,
            'gradle_wrapper': (base_dir / "gradlew").is_file(),
            'xcode_projects': xcode,
        }
