"""Changelog generation from classified commit history"""

import html
import json
import logging
import re
from collections import Counter
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ..api.exceptions import ChangelogError, GitError
from ..constants import MAX_LISTED_CONTRIBUTORS, OTHER_COMMIT_TYPE
from ..models.changelog import BackupInfo, ChangelogResult, ChangelogState, GitCommit
from ..models.config import ChangelogConfig, CommitType, ReleaseNotes
from .changelog_state import ChangelogStateManager
from .changelog_writer import SafeChangelogWriter

logger = logging.getLogger(__name__)

CHANGELOG_TITLE = "# Changelog"
OTHER_SECTION = CommitType(OTHER_COMMIT_TYPE, "Other", "📝")

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>Changelog</title>
</head>
<body>
<pre style="font-family: monospace; white-space: pre-wrap;">
{body}
</pre>
</body>
</html>
"""
_PRE_BLOCK = re.compile(r"<pre[^>]*>\n?(?P<body>.*?)\n?</pre>", re.DOTALL)
_VERSION_HEADING = re.compile(r"^## \[(?P<version>[^\]]+)\]")


class ChangelogGenerator:
    """
    Render release notes from commits and keep the changelog file current

    Commits are read oldest first. Known types are grouped in taxonomy
    order; anything else lands in an "Other" section. Breaking commits are
    listed once, in the breaking changes section.
    """

    def __init__(self, reader, writer: SafeChangelogWriter,
                 state_manager: ChangelogStateManager, config: ChangelogConfig,
                 base_dir: Union[str, Path, None] = None,
                 today: Callable[[], date] = date.today):
        self.reader = reader
        self.writer = writer
        self.state_manager = state_manager
        self.config = config
        self.base_dir = Path(base_dir or Path.cwd())
        self.today = today

    @property
    def output_path(self) -> Path:
        return self.base_dir / self.config.output_file

    def generate(self, from_tag: Optional[str] = None, to_tag: Optional[str] = None,
                 dry_run: bool = False, append: Optional[bool] = None,
                 use_last_state: Optional[bool] = None,
                 version: Optional[str] = None) -> ChangelogResult:
        """
        Generate a changelog section and write it to the output file

        Args:
            from_tag: Exclusive start of the range; overrides the saved state
            to_tag: Inclusive end of the range, defaults to HEAD
            dry_run: Render only, write nothing
            append: Keep earlier versions in the file, defaults to the config
            use_last_state: Start where the last generation stopped
            version: Label for the new section, defaults to ``to_tag``; a
                range ending at HEAD without a version is "Unreleased"

        Returns:
            ChangelogResult
        """
        append = self.config.append if append is None else append
        use_last_state = self.config.use_last_state if use_last_state is None else use_last_state

        try:
            to_ref = to_tag
            from_ref = from_tag or self.config.from_tag
            first_run = False
            if use_last_state and from_tag is None:
                state = self.state_manager.get_state()
                if state.last_generated_commit:
                    from_ref = state.last_generated_commit
                elif from_ref is None:
                    first_run = True

            commits = self.reader.read_commits(from_ref, to_ref)
            if not commits:
                return ChangelogResult(success=False, error="No commits found", dry_run=dry_run)

            label = version or to_ref
            content = self.render(commits, label, to_ref, explicit_version=version is not None)

            if dry_run:
                return ChangelogResult(
                    success=True,
                    content=content,
                    commit_count=len(commits),
                    version=_display_version(label),
                    dry_run=True,
                )

            existing = self.writer.read(self.output_path) if append else None
            final = self.merge(content, existing) if existing else content
            backup_id = self.writer.write(final, self.output_path)

            end = to_ref or "HEAD"
            self.state_manager.save_state(ChangelogState(
                last_generated_commit=commits[-1].hash,
                last_generated_date=datetime.now().isoformat(timespec='seconds'),
                last_generated_version=label or "HEAD",
                last_generated_range=(
                    f"all commits..{end}" if first_run or not from_ref
                    else f"{from_ref[:7]}..{end}"
                ),
            ))
            logger.info(f"Wrote {len(commits)} commit(s) to {self.output_path}")

            return ChangelogResult(
                success=True,
                content=content,
                output_file=str(self.output_path),
                commit_count=len(commits),
                version=_display_version(label),
                backup_id=backup_id,
            )
        except (GitError, ChangelogError) as e:
            logger.error(f"Changelog generation failed: {e}")
            return ChangelogResult(success=False, error=str(e), dry_run=dry_run)
        except Exception as e:
            logger.error(f"Changelog generation failed: {e}")
            return ChangelogResult(success=False, error=f"Changelog generation failed: {e}",
                                   dry_run=dry_run)

    def show(self) -> Optional[str]:
        """Current changelog file content"""
        return self.writer.read(self.output_path)

    def restore(self, backup_id: Optional[str] = None) -> bool:
        """Restore a backup, the newest when no id is given"""
        manager = self.writer.backup_manager
        if backup_id is None:
            backups = self.list_backups()
            if not backups:
                logger.error("No changelog backups available")
                return False
            backup_id = backups[0].id
        return manager.restore_backup(backup_id, self.output_path)

    def list_backups(self) -> List[BackupInfo]:
        return self.writer.backup_manager.list_backups(self.output_path.stem)

    # Rendering

    def group_commits(self, commits: List[GitCommit]) -> List[Tuple[CommitType, List[GitCommit]]]:
        """Non-breaking commits by type, taxonomy order first and Other last"""
        known = {commit_type.type for commit_type in self.config.commit_types}
        groups = []
        for commit_type in self.config.commit_types:
            matched = [c for c in commits if c.type == commit_type.type and not c.breaking]
            if matched:
                groups.append((commit_type, matched))
        other = [c for c in commits if c.type not in known and not c.breaking]
        if other:
            groups.append((OTHER_SECTION, other))
        return groups

    def render(self, commits: List[GitCommit], label: Optional[str],
               to_ref: Optional[str] = None, explicit_version: bool = False) -> str:
        fmt = self.config.format
        if fmt == "json":
            return json.dumps(self._json_entry(commits, label, to_ref, explicit_version),
                              indent=2, ensure_ascii=False) + "\n"
        markdown = self.render_markdown(commits, label, to_ref, explicit_version)
        if fmt == "html":
            return HTML_TEMPLATE.format(body=html.escape(markdown.rstrip("\n")))
        return markdown

    def render_markdown(self, commits: List[GitCommit], label: Optional[str],
                        to_ref: Optional[str] = None, explicit_version: bool = False) -> str:
        version = _display_version(label)
        release_date = self._release_date(to_ref, explicit_version)
        notes = self.config.notes_for(version) or ReleaseNotes()
        breaking = [c for c in commits if c.breaking]
        contributors = _count_authors(commits)

        lines = [CHANGELOG_TITLE, ""]
        heading = f"## [{version}]"
        if release_date:
            heading += f" - {release_date}"
        lines.extend([heading, ""])

        if notes.highlights:
            lines.extend(["### 📢 Highlights", "", notes.highlights.strip(), ""])

        if self.config.include_breaking_changes and (breaking or notes.breaking_changes):
            lines.extend(["### 🚨 BREAKING CHANGES", ""])
            lines.extend(f"- {entry}" for entry in notes.breaking_changes)
            lines.extend(self._commit_line(commit) for commit in breaking)
            lines.append("")

        for commit_type, grouped in self.group_commits(commits):
            lines.extend([f"### {commit_type.heading}", ""])
            lines.extend(self._commit_line(commit) for commit in grouped)
            lines.append("")

        compare = self._compare_link(to_ref)
        if compare:
            lines.extend([f"[View all changes]({compare})", ""])

        if self.config.include_contributors and (contributors or notes.contributors):
            lines.extend(["### 👥 Contributors", ""])
            for author, count in contributors[:MAX_LISTED_CONTRIBUTORS]:
                lines.append(f"- {author} ({count} commit{'s' if count != 1 else ''})")
            listed = {author for author, _ in contributors}
            lines.extend(f"- {name}" for name in notes.contributors if name not in listed)
            lines.append("")

        if self.config.include_stats:
            lines.extend([
                "### 📊 Stats",
                "",
                f"- Total commits: {len(commits)}",
                f"- Contributors: {len(contributors)}",
            ])
            if breaking:
                lines.append(f"- Breaking changes: {len(breaking)}")
            lines.append("")

        return "\n".join(lines)

    def _json_entry(self, commits: List[GitCommit], label: Optional[str],
                    to_ref: Optional[str], explicit_version: bool) -> Dict[str, Any]:
        version = _display_version(label)
        notes = self.config.notes_for(version) or ReleaseNotes()
        contributors = _count_authors(commits)
        breaking = [c for c in commits if c.breaking]

        sections: Dict[str, Any] = {}
        if self.config.include_breaking_changes:
            sections["breaking"] = (
                [{"message": entry} for entry in notes.breaking_changes]
                + [_commit_json(c) for c in breaking]
            )
        for commit_type, grouped in self.group_commits(commits):
            sections[commit_type.type] = [_commit_json(c) for c in grouped]

        entry: Dict[str, Any] = {
            "version": version,
            "date": self._release_date(to_ref, explicit_version) or "",
        }
        if notes.highlights:
            entry["highlights"] = notes.highlights
        entry["sections"] = sections
        if self.config.include_contributors:
            entry["contributors"] = dict(contributors[:MAX_LISTED_CONTRIBUTORS])
            for name in notes.contributors:
                entry["contributors"].setdefault(name, 0)
        if self.config.include_stats:
            entry["stats"] = {
                "totalCommits": len(commits),
                "contributors": len(contributors),
                "breakingChanges": len(breaking),
            }
        return entry

    def _commit_line(self, commit: GitCommit) -> str:
        scope = f"(**{commit.scope}**) " if commit.scope else ""
        url = self.reader.commit_url(commit.hash)
        ref = f"[{commit.short_hash}]({url})" if url else commit.short_hash
        return f"- {scope}{commit.message} ({ref})"

    def _release_date(self, to_ref: Optional[str], explicit_version: bool) -> Optional[str]:
        if explicit_version:
            return self.today().isoformat()
        if not to_ref:
            return None
        try:
            return self.reader.tag_date(to_ref)
        except GitError:
            return None

    def _compare_link(self, to_ref: Optional[str]) -> Optional[str]:
        if not self.config.include_compare_links:
            return None
        try:
            if to_ref and to_ref != "HEAD":
                previous = self.reader.previous_tag(to_ref)
            else:
                previous, to_ref = self.reader.latest_tag(), "HEAD"
        except GitError:
            return None
        if not previous:
            return None
        return self.reader.compare_url(previous, to_ref)

    # Appending

    def merge(self, content: str, existing: str) -> str:
        """Combine a new section with the existing file in the configured format"""
        fmt = self.config.format
        if fmt == "json":
            return _merge_json(content, existing)
        if fmt == "html":
            new_md = _unwrap_html(content)
            old_md = _unwrap_html(existing)
            merged = _merge_markdown(new_md, old_md)
            return HTML_TEMPLATE.format(body=html.escape(merged.rstrip("\n")))
        return _merge_markdown(content, existing)


def _display_version(label: Optional[str]) -> str:
    if not label:
        return "Unreleased"
    return label[1:] if label.startswith('v') and label[1:2].isdigit() else label


def _count_authors(commits: List[GitCommit]) -> List[Tuple[str, int]]:
    counts = Counter(commit.author or "Unknown" for commit in commits)
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def _commit_json(commit: GitCommit) -> Dict[str, Any]:
    data = {"message": commit.message, "hash": commit.short_hash}
    if commit.scope:
        data["scope"] = commit.scope
    if commit.author:
        data["author"] = commit.author
    return data


def _split_sections(markdown: str) -> List[List[str]]:
    """Version sections (each starting with a ``## `` heading) of a markdown changelog"""
    sections: List[List[str]] = []
    for line in markdown.splitlines():
        if line.startswith("## "):
            sections.append([line])
        elif sections:
            sections[-1].append(line)
    return sections


def _section_version(section: List[str]) -> Optional[str]:
    match = _VERSION_HEADING.match(section[0])
    return match.group('version') if match else None


def _merge_markdown(content: str, existing: str) -> str:
    """New sections above existing ones; an existing section for the same version is replaced"""
    new_sections = _split_sections(content)
    new_versions = {_section_version(section) for section in new_sections}
    kept = [
        section for section in _split_sections(existing)
        if _section_version(section) is None or _section_version(section) not in new_versions
    ]

    blocks = [CHANGELOG_TITLE]
    for section in new_sections + kept:
        blocks.append("\n".join(section).strip("\n"))
    return "\n\n".join(blocks) + "\n"


def _unwrap_html(document: str) -> str:
    match = _PRE_BLOCK.search(document)
    return html.unescape(match.group('body')) if match else document


def _merge_json(content: str, existing: str) -> str:
    entry = json.loads(content)
    try:
        previous = json.loads(existing)
    except ValueError:
        logger.warning("Existing JSON changelog is unreadable; replacing it")
        previous = []
    if isinstance(previous, dict):
        previous = [previous]
    elif not isinstance(previous, list):
        previous = []
    merged = [entry] + [
        item for item in previous
        if not (isinstance(item, dict) and item.get("version") == entry.get("version"))
    ]
    return json.dumps(merged, indent=2, ensure_ascii=False) + "\n"
