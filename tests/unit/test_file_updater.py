"""Tests for version rewriting in project files."""

from pathlib import Path

from mobilectl.services.file_updater import FileUpdater


class TestUpdateContent:
    """Tests for FileUpdater.update_content rules."""

    def test_gradle(self):
        """versionName is rewritten and versionCode bumped on request."""
        content = 'versionCode 7\nversionName "1.2.3"\n'
        updater = FileUpdater()
        updated = updater.update_content(Path("app/build.gradle"), content, "1.2.3", "1.3.0", True)
        assert updated == 'versionCode 8\nversionName "1.3.0"\n'
        unchanged_code = updater.update_content(Path("build.gradle"), content, "1.2.3", "1.3.0")
        assert "versionCode 7" in unchanged_code

    def test_gradle_kts(self):
        """Kotlin DSL assignments are handled."""
        content = 'versionCode = 41\nversionName = "2.0.0"\n'
        updated = FileUpdater().update_content(Path("build.gradle.kts"), content, "2.0.0", "2.0.1", True)
        assert updated == 'versionCode = 42\nversionName = "2.0.1"\n'

    def test_json(self):
        """The version key and build numbers are updated."""
        content = '{\n  "version": "1.0.0",\n  "buildNumber": "9",\n  "dependency": "1.0.0"\n}\n'
        updated = FileUpdater().update_content(Path("package.json"), content, "1.0.0", "1.1.0", True)
        assert '"version": "1.1.0"' in updated
        assert '"buildNumber": "10"' in updated
        assert '"dependency": "1.0.0"' in updated

    def test_plist(self):
        """Short version string and bundle version are updated."""
        content = (
            "<key>CFBundleShortVersionString</key>\n<string>1.0.0</string>\n"
            "<key>CFBundleVersion</key>\n<string>5</string>\n"
        )
        updated = FileUpdater().update_content(Path("Info.plist"), content, "1.0.0", "1.0.1", True)
        assert "<string>1.0.1</string>" in updated
        assert "<string>6</string>" in updated

    def test_plain_file(self):
        """Other files get a plain replacement."""
        updated = FileUpdater().update_content(Path("VERSION"), "1.0.0\n", "1.0.0", "2.0.0")
        assert updated == "2.0.0\n"

    def test_plain_file_whole_versions_only(self):
        """Longer versions containing the old one are left alone."""
        content = "app 1.2.3\nsdk 11.2.3\nlib 1.2.30\nReleased 1.2.3.\n"
        updated = FileUpdater().update_content(Path("README.md"), content, "1.2.3", "1.2.4")
        assert updated == "app 1.2.4\nsdk 11.2.3\nlib 1.2.30\nReleased 1.2.4.\n"


class TestUpdateFiles:
    """Tests for FileUpdater file operations."""

    def test_update_version_in_files(self, android_project):
        """Changed files are reported relative to the project root."""
        (android_project / "VERSION").write_text("0.0.1\n")
        updater = FileUpdater(android_project)
        changed = updater.update_version_in_files(
            "1.2.3", "1.2.4", ["app/build.gradle", "VERSION", "missing.txt"], True
        )
        assert changed == ["app/build.gradle"]
        assert 'versionName "1.2.4"' in (android_project / "app/build.gradle").read_text()
        assert updater.extract_version_code("app/build.gradle") == 8

    def test_glob_patterns(self, temp_dir):
        """Glob patterns expand to every matching file once."""
        for name in ("a.txt", "b.txt"):
            (temp_dir / name).write_text("v=1.0.0\n")
        updater = FileUpdater(temp_dir)
        assert [p.name for p in updater.expand(["*.txt", "a.txt"])] == ["a.txt", "b.txt"]
        assert updater.update_version_in_files("1.0.0", "1.0.1", ["*.txt"]) == ["a.txt", "b.txt"]

    def test_update_config_in_place(self, temp_dir):
        """The current line is rewritten, keeping the rest of the file."""
        path = temp_dir / "mobileops.yml"
        path.write_text("app:\n  name: Demo\nversion:\n  current: 1.0.0\n  bump_strategy: patch\n")
        assert FileUpdater(temp_dir).update_config("mobileops.yml", "1.1.0")
        assert path.read_text() == (
            'app:\n  name: Demo\nversion:\n  current: "1.1.0"\n  bump_strategy: patch\n'
        )

    def test_update_config_adds_entry(self, temp_dir):
        """A version block without current gets one."""
        path = temp_dir / "mobileops.yml"
        path.write_text("version:\n  bump_strategy: minor\n")
        FileUpdater(temp_dir).update_config(path, "3.0.0")
        assert path.read_text() == 'version:\n  current: "3.0.0"\n  bump_strategy: minor\n'

    def test_update_config_creates_file(self, temp_dir):
        """A missing config is created with just the version."""
        FileUpdater(temp_dir).update_config("mobileops.yml", "0.1.0")
        assert (temp_dir / "mobileops.yml").read_text() == 'version:\n  current: "0.1.0"\n'

    def test_extract_version_code_missing(self, temp_dir):
        """Missing files have no version code."""
        assert FileUpdater(temp_dir).extract_version_code("nope.gradle") is None
