"""Read structured commit history from git"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..constants import BREAKING_FOOTER_PATTERN, CONVENTIONAL_COMMIT_PATTERN, OTHER_COMMIT_TYPE
from ..models.changelog import GitCommit
from ..utils.git_utils import (
    get_latest_tag,
    get_remote_url,
    get_tag_date,
    list_tags,
    remote_to_web_url,
    run_git,
)

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"
LOG_FORMAT = FIELD_SEPARATOR.join(["%h", "%H", "%s", "%an", "%aI", "%b"]) + RECORD_SEPARATOR


def parse_commit_message(subject: str, body: Optional[str] = None
                         ) -> Tuple[str, Optional[str], str, bool]:
    """
    Classify a commit subject

    ``type(scope)!: description`` follows the conventional commit format.
    A commit is breaking when ``!`` precedes the colon or when a body line
    starts with ``BREAKING CHANGE:`` or ``BREAKING-CHANGE:``. Subjects that
    do not follow the format get the type ``other``.

    Args:
        subject: First line of the message
        body: Remaining lines

    Returns:
        (type, scope, description, breaking)
    """
    subject = subject.strip()
    breaking_footer = bool(body and BREAKING_FOOTER_PATTERN.search(body))

    match = CONVENTIONAL_COMMIT_PATTERN.match(subject)
    if not match:
        return OTHER_COMMIT_TYPE, None, subject, breaking_footer

    return (
        match.group('type').lower(),
        match.group('scope'),
        match.group('description').strip(),
        bool(match.group('breaking')) or breaking_footer,
    )


def parse_git_log(output: str) -> List[GitCommit]:
    """Turn ``git log --format=LOG_FORMAT`` output into commits"""
    commits = []
    for record in output.split(RECORD_SEPARATOR):
        record = record.strip("\n")
        if not record.strip():
            continue
        fields = record.split(FIELD_SEPARATOR)
        if len(fields) < 5:
            logger.debug(f"Skipping malformed log record: {record[:60]!r}")
            continue
        short_hash, full_hash, subject, author, date = (field.strip() for field in fields[:5])
        body = fields[5].strip() if len(fields) > 5 else ""
        if not subject:
            continue

        commit_type, scope, message, breaking = parse_commit_message(subject, body)
        commits.append(GitCommit(
            hash=full_hash,
            short_hash=short_hash,
            type=commit_type,
            scope=scope,
            message=message,
            body=body or None,
            author=author or None,
            date=date[:10] or None,
            breaking=breaking,
        ))
    return commits


class CommitReader:
    """History reader backed by the ``git`` executable"""

    def __init__(self, cwd: Union[str, Path, None] = None):
        self.cwd = Path(cwd or Path.cwd())

    def read_commits(self, from_ref: Optional[str] = None,
                     to_ref: Optional[str] = None) -> List[GitCommit]:
        """
        Commits after ``from_ref`` up to ``to_ref``, oldest first

        Merge commits are left out.

        Raises:
            GitError: git failed, e.g. unknown ref or empty repository
        """
        end = to_ref or "HEAD"
        revision = f"{from_ref}..{end}" if from_ref else end
        output = run_git(
            ["log", "--reverse", "--no-merges", f"--format={LOG_FORMAT}", revision],
            self.cwd,
        )
        commits = parse_git_log(output)
        logger.debug(f"Read {len(commits)} commit(s) in {revision}")
        return commits

    def latest_tag(self) -> Optional[str]:
        return get_latest_tag(self.cwd)

    def tag_date(self, tag: str) -> Optional[str]:
        return get_tag_date(self.cwd, tag)

    def previous_tag(self, tag: str) -> Optional[str]:
        """Tag released before ``tag``, by version order"""
        tags = list_tags(self.cwd)
        if tag not in tags:
            return None
        index = tags.index(tag)
        return tags[index + 1] if index + 1 < len(tags) else None

    def repository_url(self) -> Optional[str]:
        return remote_to_web_url(get_remote_url(self.cwd))

    def commit_url(self, commit_hash: str) -> Optional[str]:
        url = self.repository_url()
        return f"{url}/commit/{commit_hash}" if url else None

    def compare_url(self, from_ref: str, to_ref: str) -> Optional[str]:
        url = self.repository_url()
        return f"{url}/compare/{from_ref}...{to_ref}" if url else None
