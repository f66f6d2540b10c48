"""Rewrite version references in project files"""

import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

_GLOB_CHARS = set("*?[")

_GRADLE_VERSION_CODE = re.compile(r'(versionCode\s*=?\s*)(\d+)')
_JSON_BUILD_NUMBER = re.compile(r'("buildNumber"\s*:\s*"?)(\d+)')
_JSON_VERSION_CODE = re.compile(r'("versionCode"\s*:\s*)(\d+)')
_PLIST_BUNDLE_VERSION = re.compile(r'(<key>CFBundleVersion</key>\s*<string>)(\d+)(</string>)')
_CONFIG_CURRENT = re.compile(r'^(\s*)current\s*:.*$')
_CONFIG_VERSION_BLOCK = re.compile(r'^version\s*:\s*$')


def _increment(pattern: re.Pattern, content: str) -> str:
    """Add one to the first number captured by group 2"""
    def bump(match: re.Match) -> str:
        return match.group(1) + str(int(match.group(2)) + 1) + "".join(match.groups()[2:])
    return pattern.sub(bump, content, count=1)


class FileUpdater:
    """Update version strings in Gradle, JSON, plist and plain files"""

    def __init__(self, base_dir: Union[str, Path, None] = None):
        self.base_dir = Path(base_dir or Path.cwd())

    def _resolve(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.base_dir / path

    def expand(self, files: Iterable[str]) -> List[Path]:
        """Resolve paths and glob patterns, dropping duplicates and missing files"""
        resolved: List[Path] = []
        for entry in files:
            if any(char in entry for char in _GLOB_CHARS):
                matches = sorted(self.base_dir.glob(entry))
            else:
                matches = [self._resolve(entry)]
            for path in matches:
                if not path.is_file():
                    logger.debug(f"Skipping missing file: {entry}")
                    continue
                if path not in resolved:
                    resolved.append(path)
        return resolved

    def _display(self, path: Path) -> str:
        try:
            return path.relative_to(self.base_dir).as_posix()
        except ValueError:
            return str(path)

    def update_content(self, path: Path, content: str, old: str, new: str,
                       increment_version_code: bool = False) -> str:
        """
        New content of one file

        Args:
            path: File path, used to pick the rewrite rules
            content: Current content
            old: Version being replaced
            new: Replacement version
            increment_version_code: Also bump the build number

        Returns:
            Updated content; identical when nothing matched
        """
        escaped = re.escape(old)
        name = path.name

        if name.endswith(('.gradle', '.gradle.kts', '.kts')):
            content = re.sub(rf'(versionName\s*=?\s*["\']){escaped}(["\'])', rf'\g<1>{new}\g<2>', content)
            content = re.sub(rf'(\bversion\s*=\s*["\']){escaped}(["\'])', rf'\g<1>{new}\g<2>', content)
            if increment_version_code:
                content = _increment(_GRADLE_VERSION_CODE, content)
            return content

        if name.endswith('.json'):
            content = re.sub(rf'("version"\s*:\s*"){escaped}(")', rf'\g<1>{new}\g<2>', content)
            if increment_version_code:
                content = _increment(_JSON_BUILD_NUMBER, content)
                content = _increment(_JSON_VERSION_CODE, content)
            return content

        if name.endswith('.plist'):
            content = re.sub(
                rf'(<key>CFBundleShortVersionString</key>\s*<string>){escaped}(</string>)',
                rf'\g<1>{new}\g<2>',
                content,
            )
            if increment_version_code:
                content = _increment(_PLIST_BUNDLE_VERSION, content)
            return content

        pattern = re.compile(rf"(?<![\d.]){re.escape(old)}(?!\.?\d)")
        return pattern.sub(lambda _: new, content)

    def update_version_in_files(self, old: str, new: str, files: Iterable[str],
                                increment_version_code: bool = False) -> List[str]:
        """
        Replace a version across files

        Args:
            old: Current version
            new: New version
            files: Paths or glob patterns relative to the project root
            increment_version_code: Also bump versionCode / build numbers

        Returns:
            Files whose content changed
        """
        changed = []
        for path in self.expand(files):
            content = path.read_text(encoding='utf-8')
            updated = self.update_content(path, content, old, new, increment_version_code)
            if updated == content:
                logger.debug(f"No version reference found in {self._display(path)}")
                continue
            path.write_text(updated, encoding='utf-8')
            logger.info(f"Updated {self._display(path)}")
            changed.append(self._display(path))
        return changed

    def update_config(self, config_path: Union[str, Path], new_version: str) -> bool:
        """
        Store the new version under ``version.current`` in the config file

        The ``current:`` line is rewritten in place, keeping its
        indentation; a ``version:`` block is added when there is none and
        a minimal file is created when the config does not exist.

        Returns:
            True if the file was written
        """
        path = self._resolve(config_path)
        entry = f'current: "{new_version}"'
        try:
            if not path.exists():
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(f"version:\n  {entry}\n", encoding='utf-8')
                return True

            lines = path.read_text(encoding='utf-8').splitlines()
            for index, line in enumerate(lines):
                match = _CONFIG_CURRENT.match(line)
                if match:
                    lines[index] = f"{match.group(1)}{entry}"
                    break
            else:
                for index, line in enumerate(lines):
                    if _CONFIG_VERSION_BLOCK.match(line):
                        lines.insert(index + 1, f"  {entry}")
                        break
                else:
                    lines += ["", "version:", f"  {entry}"]

            path.write_text("\n".join(lines) + "\n", encoding='utf-8')
            return True
        except OSError as e:
            logger.error(f"Could not update {path}: {e}")
            return False

    def extract_version_code(self, path: Union[str, Path]) -> Optional[int]:
        """Current versionCode / CFBundleVersion / buildNumber of a file"""
        path = self._resolve(path)
        if not path.is_file():
            return None
        content = path.read_text(encoding='utf-8')
        for pattern in (_GRADLE_VERSION_CODE, _PLIST_BUNDLE_VERSION, _JSON_BUILD_NUMBER,
                        _JSON_VERSION_CODE):
            match = pattern.search(content)
            if match:
                return int(match.group(2))
        return None
