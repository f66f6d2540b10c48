"""Tests for changelog writing, backups and generation."""

import itertools
import json
from datetime import date, datetime, timedelta

import pytest

from mobilectl.api.exceptions import GitError
from mobilectl.models import ChangelogConfig, ChangelogState
from mobilectl.services.changelog_generator import ChangelogGenerator
from mobilectl.services.changelog_state import ChangelogStateManager
from mobilectl.services.changelog_writer import (
    NO_BACKUP,
    ChangelogBackupManager,
    SafeChangelogWriter,
)

REPO = "https://github.com/acme/app"


def ticking_clock():
    start = datetime(2024, 1, 1, 9, 0, 0)
    ticks = itertools.count()
    return lambda: start + timedelta(seconds=next(ticks))


@pytest.fixture
def backup_manager(temp_dir):
    return ChangelogBackupManager(temp_dir / "backups", keep=3, clock=ticking_clock())


@pytest.fixture
def reader(fake_reader, sample_commits):
    return fake_reader(
        commits=sample_commits,
        tags=["v1.1.0", "v1.0.0"],
        tag_dates={"v1.1.0": "2024-05-02"},
        repo_url=REPO,
    )


@pytest.fixture
def make_generator(temp_dir):
    def build(reader, **config):
        manager = ChangelogBackupManager(temp_dir / ".mobilectl" / "changelog-backups",
                                         clock=ticking_clock())
        return ChangelogGenerator(
            reader,
            SafeChangelogWriter(manager),
            ChangelogStateManager(temp_dir / ".mobilectl" / "changelog-state.json"),
            ChangelogConfig.from_dict(config),
            base_dir=temp_dir,
            today=lambda: date(2024, 6, 1),
        )
    return build


class TestChangelogBackupManager:
    """Tests for ChangelogBackupManager."""

    def test_missing_file(self, temp_dir, backup_manager):
        """Nothing to back up returns the none marker."""
        assert backup_manager.create_backup(temp_dir / "CHANGELOG.md") == NO_BACKUP
        assert backup_manager.list_backups() == []

    def test_create_and_restore(self, temp_dir, backup_manager):
        """A backup can be restored over a changed file."""
        path = temp_dir / "CHANGELOG.md"
        path.write_text("old")
        backup_id = backup_manager.create_backup(path)
        assert backup_id == "CHANGELOG@2024-01-01_09-00-00-000000"
        path.write_text("new")
        assert backup_manager.restore_backup(backup_id, path)
        assert path.read_text() == "old"

    def test_list_newest_first_and_filter(self, temp_dir, backup_manager):
        """Listing is newest first and can be filtered by file stem."""
        changelog = temp_dir / "CHANGELOG.md"
        notes = temp_dir / "NOTES.md"
        changelog.write_text("a")
        notes.write_text("b")
        first = backup_manager.create_backup(changelog)
        backup_manager.create_backup(notes)
        second = backup_manager.create_backup(changelog)

        assert [info.id for info in backup_manager.list_backups("CHANGELOG")] == [second, first]
        assert len(backup_manager.list_backups()) == 3
        assert backup_manager.list_backups()[0].size == 1

    def test_delete(self, temp_dir, backup_manager):
        """Backups can be deleted individually or pruned."""
        path = temp_dir / "CHANGELOG.md"
        path.write_text("x")
        ids = [backup_manager.create_backup(path) for _ in range(5)]
        assert backup_manager.delete_backup(ids[0])
        assert not backup_manager.delete_backup(ids[0])
        assert backup_manager.delete_old_backups(keep=2) == 2
        assert [info.id for info in backup_manager.list_backups()] == [ids[4], ids[3]]

    def test_restore_unknown(self, temp_dir, backup_manager):
        """Unknown ids are not restored."""
        assert backup_manager.restore_backup("nope", temp_dir / "CHANGELOG.md") is False


class TestSafeChangelogWriter:
    """Tests for SafeChangelogWriter."""

    def test_first_write_has_no_backup(self, temp_dir, backup_manager):
        """Creating the file takes no backup."""
        writer = SafeChangelogWriter(backup_manager)
        path = temp_dir / "docs" / "CHANGELOG.md"
        assert writer.write("# Changelog\n", path) is None
        assert writer.read(path) == "# Changelog\n"
        assert writer.read(temp_dir / "missing.md") is None

    def test_overwrite_backs_up_and_prunes(self, temp_dir, backup_manager):
        """Each overwrite keeps the previous content, pruned to the limit."""
        writer = SafeChangelogWriter(backup_manager)
        path = temp_dir / "CHANGELOG.md"
        ids = [writer.write(f"v{index}", path) for index in range(6)]

        assert ids[0] is None
        assert all(ids[1:])
        assert path.read_text() == "v5"
        assert len(backup_manager.list_backups()) == 3
        assert (temp_dir / "backups" / f"{ids[-1]}.md").read_text() == "v4"
        assert [p.name for p in temp_dir.iterdir() if p.name.startswith(".CHANGELOG")] == []


class TestRendering:
    """Tests for markdown rendering."""

    def test_section_order(self, make_generator, reader, sample_commits):
        """Sections follow breaking, taxonomy, other, links, contributors, stats."""
        content = make_generator(reader).render(sample_commits, "v1.1.0", "v1.1.0")
        headings = [
            "# Changelog",
            "## [1.1.0] - 2024-05-02",
            "### 🚨 BREAKING CHANGES",
            "### ✨ Features",
            "### 🐛 Bug Fixes",
            "### 📝 Other",
            f"[View all changes]({REPO}/compare/v1.0.0...v1.1.0)",
            "### 👥 Contributors",
            "### 📊 Stats",
        ]
        positions = [content.index(heading) for heading in headings]
        assert positions == sorted(positions)

    def test_breaking_listed_once(self, make_generator, reader, sample_commits):
        """Breaking commits only appear in the breaking section."""
        content = make_generator(reader).render(sample_commits, "v1.1.0", "v1.1.0")
        assert content.count("drop legacy API") == 1
        breaking = content.index("### 🚨 BREAKING CHANGES")
        features = content.index("### ✨ Features")
        assert breaking < content.index("drop legacy API") < features

    def test_commit_lines(self, make_generator, reader, sample_commits):
        """Commit lines carry scope and a linked short hash."""
        content = make_generator(reader).render(sample_commits, "v1.1.0", "v1.1.0")
        link = f"[0000001]({REPO}/commit/{1:040x})"
        assert f"- (**auth**) add login screen ({link})" in content
        assert "- Alice (3 commits)" in content
        assert "- Bob (2 commits)" in content
        assert "- Total commits: 5" in content
        assert "- Breaking changes: 1" in content

    def test_plain_hash_without_remote(self, make_generator, fake_reader, make_commit):
        """Without a remote the short hash is shown unlinked."""
        reader = fake_reader(commits=[make_commit("fix", "solo fix", 9)])
        content = make_generator(reader).render(reader.commits, None, None)
        assert "## [Unreleased]\n" in content
        assert "- solo fix (0000009)" in content
        assert "- Alice (1 commit)" in content
        assert "View all changes" not in content
        assert "Breaking changes" not in content

    def test_release_notes(self, make_generator, reader, sample_commits):
        """Manual highlights, breaking notes and contributors are merged in."""
        generator = make_generator(reader, releases={'1.1.0': {
            'highlights': 'Faster startup',
            'breaking_changes': ['Minimum SDK is now 26'],
            'contributors': ['Carol', 'Alice'],
        }})
        content = generator.render(sample_commits, "v1.1.0", "v1.1.0")
        assert "### 📢 Highlights\n\nFaster startup\n" in content
        assert content.index("- Minimum SDK is now 26") < content.index("drop legacy API")
        assert "- Carol" in content
        assert content.count("- Alice") == 1

    def test_explicit_version_uses_today(self, make_generator, reader, sample_commits):
        """An explicit version is dated today."""
        content = make_generator(reader).render(sample_commits, "2.0.0", "v1.1.0", explicit_version=True)
        assert "## [2.0.0] - 2024-06-01" in content

    def test_optional_sections_disabled(self, make_generator, reader, sample_commits):
        """Contributors, stats and compare links can be turned off."""
        generator = make_generator(reader, include_contributors=False, include_stats=False,
                                   include_compare_links=False)
        content = generator.render(sample_commits, "v1.1.0", "v1.1.0")
        assert "Contributors" not in content
        assert "Stats" not in content
        assert "View all changes" not in content

    def test_custom_taxonomy_sends_rest_to_other(self, make_generator, reader, sample_commits):
        """Types outside a custom taxonomy go to Other."""
        generator = make_generator(reader, commit_types=[{'type': 'fix', 'title': 'Fixes', 'emoji': '🔨'}])
        groups = generator.group_commits(sample_commits)
        assert [(group.title, len(items)) for group, items in groups] == [("Fixes", 2), ("Other", 2)]


class TestGenerate:
    """Tests for ChangelogGenerator.generate."""

    def test_first_generation(self, temp_dir, make_generator, reader, sample_commits):
        """The file is written and the state records the newest commit."""
        generator = make_generator(reader)
        result = generator.generate(to_tag="v1.1.0")

        assert result.success
        assert result.commit_count == 5
        assert result.version == "1.1.0"
        assert result.backup_id is None
        assert reader.requests == [(None, "v1.1.0")]
        assert generator.show() == result.content

        state = generator.state_manager.get_state()
        assert state.last_generated_commit == sample_commits[-1].hash
        assert state.last_generated_version == "v1.1.0"
        assert state.last_generated_range == "all commits..v1.1.0"

    def test_default_range_ends_at_head(self, make_generator, reader):
        """Without an end tag the range runs to HEAD, past the latest tag."""
        generator = make_generator(reader)
        result = generator.generate(version="1.2.0")

        assert result.success
        assert reader.requests == [(None, None)]
        assert "## [1.2.0] - 2024-06-01" in result.content
        assert f"[View all changes]({REPO}/compare/v1.1.0...HEAD)" in result.content
        assert generator.state_manager.get_state().last_generated_range == "all commits..HEAD"

    def test_unlabelled_range_is_unreleased(self, make_generator, reader):
        """Commits after the latest tag are not labelled with that tag."""
        result = make_generator(reader).generate(dry_run=True)
        assert "## [Unreleased]" in result.content
        assert "## [1.1.0]" not in result.content
        assert result.version == "Unreleased"

    def test_saved_state_runs_to_head(self, make_generator, reader, sample_commits):
        """A saved commit newer than the latest tag still reaches HEAD."""
        generator = make_generator(reader)
        generator.state_manager.save_state(ChangelogState(last_generated_commit="feedface"))
        result = generator.generate(version="1.2.0")

        assert result.success
        assert reader.requests == [("feedface", None)]
        state = generator.state_manager.get_state()
        assert state.last_generated_commit == sample_commits[-1].hash
        assert state.last_generated_range == "feedfac..HEAD"

    def test_incremental_generation(self, make_generator, reader, sample_commits):
        """The next run starts at the saved commit and prepends its section."""
        generator = make_generator(reader)
        generator.generate(to_tag="v1.1.0")
        result = generator.generate(to_tag="HEAD", version="1.2.0")

        assert reader.requests[-1] == (sample_commits[-1].hash, "HEAD")
        assert result.backup_id is not None
        content = generator.show()
        assert content.count("# Changelog\n") == 1
        assert content.index("## [1.2.0]") < content.index("## [1.1.0]")
        state = generator.state_manager.get_state()
        assert state.last_generated_range == f"{sample_commits[-1].hash[:7]}..HEAD"

    def test_same_version_is_replaced(self, make_generator, reader):
        """Regenerating a version replaces its section."""
        generator = make_generator(reader)
        generator.generate(to_tag="v1.1.0")
        generator.generate(to_tag="v1.1.0", use_last_state=False)
        assert generator.show().count("## [1.1.0]") == 1

    def test_overwrite(self, make_generator, reader):
        """append=False drops earlier sections."""
        generator = make_generator(reader)
        generator.generate(version="1.0.5")
        generator.generate(to_tag="v1.1.0", append=False)
        content = generator.show()
        assert "## [1.0.5]" not in content
        assert "## [1.1.0]" in content

    def test_from_tag_overrides_state(self, make_generator, reader):
        """An explicit start ignores the saved state."""
        generator = make_generator(reader)
        generator.state_manager.save_state(ChangelogState(last_generated_commit="deadbeef"))
        generator.generate(from_tag="v1.0.0")
        assert reader.requests[-1] == ("v1.0.0", None)

    def test_dry_run_writes_nothing(self, temp_dir, make_generator, reader):
        """A dry run renders without touching files or state."""
        generator = make_generator(reader)
        result = generator.generate(to_tag="v1.1.0", dry_run=True)
        assert result.success and result.dry_run
        assert "## [1.1.0]" in result.content
        assert not generator.output_path.exists()
        assert not (temp_dir / ".mobilectl").exists()

    def test_no_commits(self, make_generator, fake_reader):
        """An empty range is a failure."""
        result = make_generator(fake_reader()).generate()
        assert not result.success
        assert result.error == "No commits found"

    def test_git_error(self, make_generator, fake_reader):
        """Git failures are reported, not raised."""

        class BrokenReader(fake_reader):
            def read_commits(self, from_ref=None, to_ref=None):
                raise GitError("git log failed: bad revision")

        result = make_generator(BrokenReader()).generate()
        assert not result.success
        assert result.error == "git log failed: bad revision"

    def test_restore_newest_backup(self, make_generator, reader):
        """restore without an id brings back the previous file."""
        generator = make_generator(reader)
        first = generator.generate(version="1.0.0")
        generator.generate(version="1.1.0", use_last_state=False)
        assert len(generator.list_backups()) == 1
        assert generator.restore()
        assert generator.show() == first.content

    def test_restore_without_backups(self, make_generator, reader):
        """Nothing to restore returns False."""
        assert make_generator(reader).restore() is False


class TestOtherFormats:
    """Tests for JSON and HTML output."""

    def test_json_entries(self, make_generator, reader):
        """JSON output is a list, newest first, one entry per version."""
        generator = make_generator(reader, format="json", output_file="CHANGELOG.json")
        generator.generate(version="1.0.0")
        generator.generate(version="1.1.0", use_last_state=False)
        generator.generate(version="1.1.0", use_last_state=False)

        entries = json.loads(generator.show())
        assert [entry["version"] for entry in entries] == ["1.1.0", "1.0.0"]
        entry = entries[0]
        assert entry["date"] == "2024-06-01"
        assert [c["message"] for c in entry["sections"]["breaking"]] == ["drop legacy API"]
        assert entry["sections"]["feat"] == [
            {"message": "add login screen", "hash": "0000001", "scope": "auth", "author": "Alice"}
        ]
        assert entry["contributors"] == {"Alice": 3, "Bob": 2}
        assert entry["stats"] == {"totalCommits": 5, "contributors": 2, "breakingChanges": 1}

    def test_html_merge(self, make_generator, fake_reader, make_commit):
        """HTML keeps earlier versions and escapes markup."""
        reader = fake_reader(commits=[make_commit("feat", "support <video> tags", 1)])
        generator = make_generator(reader, format="html", output_file="CHANGELOG.html")
        generator.generate(version="1.0.0")
        generator.generate(version="1.1.0", use_last_state=False)

        document = generator.show()
        assert document.startswith("<!DOCTYPE html>")
        assert document.count("<pre") == 1
        assert "support &lt;video&gt; tags" in document
        assert document.index("## [1.1.0]") < document.index("## [1.0.0]")
