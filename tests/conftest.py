"""Test configuration for mobilectl."""

import asyncio
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from mobilectl.builders.base import PlatformBuilder
from mobilectl.constants import DestinationType, Platform
from mobilectl.destinations.base import DestinationClient
from mobilectl.models import BuildOutput, Config, GitCommit, UploadResult
from mobilectl.utils.process_utils import ProcessResult


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def android_project(temp_dir):
    """Create a minimal Gradle project layout.

    Returns:
        Path: Project root containing settings.gradle and an app module.
    """
    (temp_dir / "settings.gradle").write_text("include ':app'\n")
    app = temp_dir / "app"
    (app / "src" / "main").mkdir(parents=True)
    (app / "src" / "main" / "AndroidManifest.xml").write_text("<manifest/>\n")
    (app / "build.gradle").write_text(
        "android {\n"
        "    defaultConfig {\n"
        "        versionCode 7\n"
        "        versionName \"1.2.3\"\n"
        "    }\n"
        "}\n"
    )
    return temp_dir


@pytest.fixture
def ios_project(temp_dir):
    """Create a minimal Xcode project layout.

    Returns:
        Path: Project root containing an .xcodeproj bundle.
    """
    (temp_dir / "MyApp.xcodeproj").mkdir()
    return temp_dir


@pytest.fixture
def android_only_config():
    """Android enabled with Firebase on and Play Console off; iOS disabled."""
    return Config.from_dict({
        'app': {'name': 'Demo', 'identifier': 'com.example.demo'},
        'build': {
            'android': {'enabled': True},
            'ios': {'enabled': False},
        },
        'deploy': {
            'android': {
                'firebase': {'enabled': True, 'service_account': 'sa.json', 'app_id': '1:123:android:abc'},
                'playConsole': {'enabled': False},
            },
        },
    })


@pytest.fixture
def two_destination_config():
    """Android with Firebase and the local directory destination enabled."""
    return Config.from_dict({
        'app': {'identifier': 'com.example.demo'},
        'build': {'android': {'enabled': True}},
        'deploy': {
            'android': {
                'firebase': {'enabled': True, 'service_account': 'sa.json', 'app_id': '1:123:android:abc'},
                'local': {'enabled': True, 'output_dir': 'dist'},
            },
        },
    })


class FakeRunner:
    """Command runner that records commands and replays canned results."""

    def __init__(self, handler: Optional[Callable[[List[str], Dict], ProcessResult]] = None):
        self.calls: List[List[str]] = []
        self.kwargs: List[Dict] = []
        self.handler = handler

    async def __call__(self, command, **kwargs) -> ProcessResult:
        self.calls.append(list(command))
        self.kwargs.append(kwargs)
        if self.handler is not None:
            return self.handler(list(command), kwargs)
        return ProcessResult(command=list(command), returncode=0)


@pytest.fixture
def fake_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner


class FakeBuilder(PlatformBuilder):
    """Builder returning a preset output, or raising a preset error."""

    def __init__(self, output: Optional[BuildOutput] = None, error: Optional[Exception] = None):
        super().__init__()
        self.output = output
        self.error = error
        self.calls = 0

    async def build(self, base_dir, config):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def fake_builder():
    """Factory for FakeBuilder instances."""
    return FakeBuilder


class FakeClient(DestinationClient):
    """Destination client with scripted behavior."""

    platform = Platform.ANDROID

    def __init__(self, config=None, result: Optional[UploadResult] = None,
                 error: Optional[Exception] = None, delay: float = 0.0,
                 destination: DestinationType = DestinationType.FIREBASE,
                 problems: Optional[List[str]] = None):
        super().__init__(config)
        self.destination = destination
        self.result = result or UploadResult(success=True, message="uploaded", build_id="42")
        self.error = error
        self.delay = delay
        self.problems = problems or []
        self.uploads = []

    def validate_config(self):
        return list(self.problems)

    async def upload(self, artifact_file, release_notes=None, test_groups=None):
        self.uploads.append((str(artifact_file), release_notes, test_groups))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_client():
    """Factory for FakeClient instances."""
    return FakeClient


class FakeCommitReader:
    """In-memory commit history."""

    def __init__(self, commits=None, tags=None, tag_dates=None, repo_url=None):
        self.commits = list(commits or [])
        self.tags = list(tags or [])
        self.tag_dates = dict(tag_dates or {})
        self.repo_url = repo_url
        self.requests = []

    def read_commits(self, from_ref=None, to_ref=None):
        self.requests.append((from_ref, to_ref))
        return list(self.commits)

    def latest_tag(self):
        return self.tags[0] if self.tags else None

    def tag_date(self, tag):
        return self.tag_dates.get(tag)

    def previous_tag(self, tag):
        if tag not in self.tags:
            return None
        index = self.tags.index(tag)
        return self.tags[index + 1] if index + 1 < len(self.tags) else None

    def repository_url(self):
        return self.repo_url

    def commit_url(self, commit_hash):
        return f"{self.repo_url}/commit/{commit_hash}" if self.repo_url else None

    def compare_url(self, from_ref, to_ref):
        return f"{self.repo_url}/compare/{from_ref}...{to_ref}" if self.repo_url else None


@pytest.fixture
def fake_reader():
    """Factory for FakeCommitReader instances."""
    return FakeCommitReader


def _commit(message_type, message, index=1, scope=None, breaking=False, author="Alice"):
    return GitCommit(
        hash=f"{index:040x}",
        short_hash=f"{index:07x}",
        type=message_type,
        message=message,
        scope=scope,
        author=author,
        date="2024-05-01",
        breaking=breaking,
    )


@pytest.fixture
def make_commit():
    """Factory building GitCommit values with predictable hashes."""
    return _commit


@pytest.fixture
def sample_commits():
    """A small mixed history, oldest first."""
    return [
        _commit("feat", "add login screen", 1, scope="auth"),
        _commit("fix", "crash on rotation", 2, author="Bob"),
        _commit("feat", "drop legacy API", 3, breaking=True),
        _commit("other", "Update README", 4, author="Bob"),
        _commit("fix", "typo in settings", 5),
    ]
