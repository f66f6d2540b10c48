"""Tests for version backups."""

from datetime import datetime

from mobilectl.services.version_backup import VersionBackup


def fixed_clock(*values):
    times = iter(values)
    return lambda: next(times)


class TestVersionBackup:
    """Tests for VersionBackup."""

    def test_create_backup(self, android_project):
        """Existing files are copied under the backup directory."""
        backup = VersionBackup(android_project, clock=fixed_clock(datetime(2024, 5, 1, 12, 0, 0)))
        result = backup.create_backup("1.2.3", extra_files=["app/build.gradle", "notes.txt"])

        assert result.success
        assert result.files_backed_up == ["app/build.gradle"]
        assert result.git_tag_created is False
        assert result.backup_path.endswith("1.2.3-2024-05-01_12-00-00")
        copied = android_project / ".mobilectl/backups/1.2.3-2024-05-01_12-00-00/app/build.gradle"
        assert copied.read_text() == (android_project / "app/build.gradle").read_text()

    def test_restore_backup(self, android_project):
        """Restoring puts the original content back."""
        gradle = android_project / "app/build.gradle"
        original = gradle.read_text()
        backup = VersionBackup(android_project, clock=fixed_clock(datetime(2024, 5, 1)))
        result = backup.create_backup("1.2.3")
        gradle.write_text("changed")

        assert backup.restore_backup(result.backup_path)
        assert gradle.read_text() == original

    def test_restore_by_name(self, android_project):
        """Backups can be restored by name."""
        backup = VersionBackup(android_project, clock=fixed_clock(datetime(2024, 5, 1)))
        backup.create_backup("1.2.3")
        (android_project / "app/build.gradle").write_text("changed")
        assert backup.restore_backup("1.2.3-2024-05-01_00-00-00")
        assert "versionName" in (android_project / "app/build.gradle").read_text()

    def test_restore_missing(self, temp_dir):
        """Unknown backups are not restored."""
        assert VersionBackup(temp_dir).restore_backup("nothing") is False

    def test_list_backups_newest_first(self, android_project):
        """Backups are ordered by timestamp, not by version."""
        backup = VersionBackup(android_project, clock=fixed_clock(
            datetime(2024, 5, 1), datetime(2024, 6, 1),
        ))
        backup.create_backup("9.0.0")
        backup.create_backup("10.0.0")
        assert backup.list_backups() == [
            "10.0.0-2024-06-01_00-00-00", "9.0.0-2024-05-01_00-00-00",
        ]

    def test_list_without_backups(self, temp_dir):
        """No backup directory means no backups."""
        assert VersionBackup(temp_dir).list_backups() == []
