# mobilectl/utils/git_utils.py

"""Git operation utilities"""

import logging
import re
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

from packaging.version import InvalidVersion, Version

from ..api.exceptions import GitError

logger = logging.getLogger(__name__)


def run_git(args: List[str], cwd: Path) -> str:
    """
    Run a git command and return its stdout

    Args:
        args: Arguments after ``git``
        cwd: Repository path

    Returns:
        Command stdout

    Raises:
        GitError: If git is missing or the command fails
    """
    command = ['git'] + list(args)
    logger.debug(f"Running: {' '.join(command)}")
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True
        )
    except FileNotFoundError:
        raise GitError("git executable not found", command)
    except subprocess.CalledProcessError as e:
        message = (e.stderr or "").strip() or f"exit code {e.returncode}"
        raise GitError(f"git {args[0]} failed: {message}", command)
    return result.stdout


def is_git_repository(path: Path) -> bool:
    """
    Check if directory is a Git repository

    Args:
        path: Directory path

    Returns:
        True if it's a Git repository
    """
    try:
        run_git(['rev-parse', '--is-inside-work-tree'], path)
        return True
    except GitError:
        return False


def get_current_branch(path: Path) -> Optional[str]:
    """Current branch name, or None"""
    try:
        return run_git(['rev-parse', '--abbrev-ref', 'HEAD'], path).strip() or None
    except GitError:
        return None


def get_remote_url(path: Path, remote: str = 'origin') -> Optional[str]:
    """
    Get Git remote URL

    Args:
        path: Repository path
        remote: Remote name

    Returns:
        Remote URL or None
    """
    try:
        return run_git(['remote', 'get-url', remote], path).strip() or None
    except GitError:
        return None


def get_latest_tag(path: Path) -> Optional[str]:
    """Most recent tag reachable from HEAD, or None"""
    try:
        return run_git(['describe', '--tags', '--abbrev=0'], path).strip() or None
    except GitError:
        return None


def get_tag_date(path: Path, tag: str) -> Optional[str]:
    """Committer date of a tag as ``YYYY-MM-DD``"""
    try:
        output = run_git(['log', '-1', '--format=%cs', tag], path).strip()
    except GitError:
        return None
    return output or None


def sort_tags(tags: List[str]) -> List[str]:
    """
    Order tags newest first

    Version-like tags (``v1.2.0``, ``1.10.0``) are ordered by version;
    anything else follows in reverse name order.
    """
    versioned = []
    others = []
    for tag in tags:
        try:
            versioned.append((Version(tag.lstrip('vV')), tag))
        except InvalidVersion:
            others.append(tag)
    versioned.sort(key=lambda item: item[0], reverse=True)
    return [tag for _, tag in versioned] + sorted(others, reverse=True)


def list_tags(path: Path) -> List[str]:
    """All tags, newest version first"""
    try:
        output = run_git(['tag', '--list'], path)
    except GitError:
        return []
    return sort_tags([line.strip() for line in output.splitlines() if line.strip()])


def create_tag(path: Path, tag: str, message: str) -> bool:
    """
    Create an annotated tag

    Returns:
        True if the tag was created
    """
    try:
        run_git(['tag', '-a', tag, '-m', message], path)
        return True
    except GitError as e:
        logger.warning(f"Could not create tag {tag}: {e}")
        return False


def remote_to_web_url(remote_url: Optional[str]) -> Optional[str]:
    """
    Convert a remote URL into a browsable https URL

    ``git@github.com:org/app.git`` becomes ``https://github.com/org/app``.
    """
    if not remote_url:
        return None
    url = remote_url.strip()
    match = re.match(r'^[\w.-]+@([^:]+):(.+)$', url)
    if match:
        url = f"https://{match.group(1)}/{match.group(2)}"
    elif url.startswith('ssh://'):
        url = 'https://' + url[len('ssh://'):].split('@', 1)[-1]
    if url.endswith('.git'):
        url = url[:-4]
    return url.rstrip('/')


def get_git_info(path: Path) -> Dict[str, Any]:
    """
    Get Git repository information for display

    Args:
        path: Repository path

    Returns:
        Dictionary with Git information
    """
    info = {
        'is_git_repo': is_git_repository(path),
        'branch': None,
        'commit': None,
        'remote_url': None,
        'latest_tag': None,
    }

    if info['is_git_repo']:
        info['branch'] = get_current_branch(path)
        info['remote_url'] = get_remote_url(path)
        info['latest_tag'] = get_latest_tag(path)
        try:
            info['commit'] = run_git(['rev-parse', '--short', 'HEAD'], path).strip()
        except GitError:
            pass

    return info
