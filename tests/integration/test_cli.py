"""Tests for the mobilectl command line interface."""

import pytest
import yaml
from click.testing import CliRunner

from mobilectl.__version__ import __version__
from mobilectl.cli.main import cli


@pytest.fixture(autouse=True)
def no_config_override(monkeypatch):
    monkeypatch.delenv("MOBILECTL_CONFIG", raising=False)


@pytest.fixture
def runner():
    return CliRunner()


def write_config(directory, data):
    path = directory / "mobileops.yml"
    path.write_text(yaml.safe_dump(data))
    return path


@pytest.fixture
def project(android_project):
    write_config(android_project, {
        'app': {'name': 'Demo', 'identifier': 'com.example.demo'},
        'build': {'android': {'enabled': True}, 'ios': {'enabled': False}},
        'version': {'current': '1.2.3', 'files_to_update': ['app/build.gradle']},
    })
    return android_project


class TestGlobalOptions:
    """Tests for the top-level group."""

    def test_version(self, runner):
        """--version prints the package version."""
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        """Every command is registered."""
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        for command in ('build', 'deploy', 'version', 'changelog', 'info'):
            assert command in result.output


class TestInfo:
    """Tests for the info command."""

    def test_info(self, runner, project):
        """Project and configuration details are shown."""
        result = runner.invoke(cli, ['-C', str(project), 'info'])
        assert result.exit_code == 0, result.output
        assert "com.example.demo" in result.output
        assert "1.2.3" in result.output

    def test_info_invalid_config(self, runner, temp_dir):
        """A broken config file is reported with exit code 1."""
        (temp_dir / "mobileops.yml").write_text("app: [unclosed\n")
        result = runner.invoke(cli, ['-C', str(temp_dir), 'info'])
        assert result.exit_code == 1
        assert "Failed to load configuration" in result.output


class TestVersionCommands:
    """Tests for the version group."""

    def test_bump_dry_run(self, runner, project):
        """A dry run previews the bump and leaves files alone."""
        gradle = (project / "app" / "build.gradle").read_text()
        config = (project / "mobileops.yml").read_text()

        result = runner.invoke(cli, ['-C', str(project), '--dry-run', 'version', 'bump', 'minor'])

        assert result.exit_code == 0, result.output
        assert "1.3.0" in result.output
        assert (project / "app" / "build.gradle").read_text() == gradle
        assert (project / "mobileops.yml").read_text() == config
        assert not (project / ".mobilectl").exists()

    def test_bump_updates_files(self, runner, project):
        """A real bump rewrites the config and the listed files."""
        result = runner.invoke(cli, ['-C', str(project), 'version', 'bump', 'patch'])

        assert result.exit_code == 0, result.output
        saved = yaml.safe_load((project / "mobileops.yml").read_text())
        assert saved['version']['current'] == "1.2.4"
        gradle = (project / "app" / "build.gradle").read_text()
        assert 'versionName "1.2.4"' in gradle
        assert "versionCode 8" in gradle

    def test_bump_invalid_level(self, runner, project):
        """An unknown level fails with exit code 1."""
        result = runner.invoke(cli, ['-C', str(project), 'version', 'bump', 'huge'])
        assert result.exit_code == 1

    def test_manual_strategy_needs_level(self, runner, temp_dir):
        """The manual strategy refuses to guess a level."""
        write_config(temp_dir, {'version': {'current': '1.0.0', 'bump_strategy': 'manual'}})
        result = runner.invoke(cli, ['-C', str(temp_dir), 'version', 'bump'])
        assert result.exit_code == 2
        assert "manual" in result.output

    def test_show(self, runner, project):
        """The configured and detected versions are shown."""
        result = runner.invoke(cli, ['-C', str(project), 'version', 'show'])
        assert result.exit_code == 0, result.output
        assert "1.2.3" in result.output

    def test_restore_without_backups(self, runner, project):
        """Restoring with no backups fails."""
        result = runner.invoke(cli, ['-C', str(project), 'version', 'restore'])
        assert result.exit_code == 1
        assert "No version backups found" in result.output


class TestBuildCommand:
    """Tests for the build command."""

    def test_no_platforms(self, runner, temp_dir):
        """Nothing enabled means nothing to build."""
        write_config(temp_dir, {'build': {'android': {'enabled': False}, 'ios': {'enabled': False}}})
        result = runner.invoke(cli, ['-C', str(temp_dir), 'build'])
        assert result.exit_code == 1

    def test_dry_run(self, runner, project):
        """A dry run reports the Android output without running Gradle."""
        result = runner.invoke(cli, ['-C', str(project), '--dry-run', 'build', 'android'])
        assert result.exit_code == 0, result.output
        assert "android" in result.output
        assert not (project / "build").exists()


class TestDeployCommand:
    """Tests for the deploy command."""

    @pytest.fixture
    def deploy_project(self, android_project):
        write_config(android_project, {
            'app': {'identifier': 'com.example.demo'},
            'build': {'android': {'enabled': True}, 'ios': {'enabled': False}},
            'deploy': {'android': {'local': {'enabled': True, 'output_dir': 'dist'}}},
        })
        return android_project

    def test_dry_run(self, runner, deploy_project):
        """A dry run reports the planned upload and copies nothing."""
        result = runner.invoke(cli, ['-C', str(deploy_project), '--dry-run', 'deploy', 'android'])
        assert result.exit_code == 0, result.output
        assert "local" in result.output
        assert not (deploy_project / "dist").exists()

    def test_unknown_destination(self, runner, deploy_project):
        """Unknown destination names fail before anything runs."""
        result = runner.invoke(cli, ['-C', str(deploy_project), 'deploy', 'android',
                                     'carrier-pigeon', '-y'])
        assert result.exit_code == 1
        assert "carrier-pigeon" in result.output

    def test_unknown_flavor_group(self, runner, deploy_project):
        """Unknown flavor groups fail with the available names."""
        result = runner.invoke(cli, ['-C', str(deploy_project), 'deploy', 'android',
                                     '--flavor-group', 'nightly', '-y'])
        assert result.exit_code == 1
        assert "Unknown flavor group" in result.output

    def test_cancelled(self, runner, deploy_project):
        """Declining the confirmation deploys nothing."""
        result = runner.invoke(cli, ['-C', str(deploy_project), 'deploy', 'android'], input="n\n")
        assert result.exit_code == 0
        assert "cancelled" in result.output
        assert not (deploy_project / "dist").exists()


class TestChangelogCommands:
    """Tests for the changelog group."""

    def test_show_missing(self, runner, project):
        """Showing a changelog that does not exist fails."""
        result = runner.invoke(cli, ['-C', str(project), 'changelog', 'show'])
        assert result.exit_code == 1
        assert "Changelog not found" in result.output

    def test_show_existing(self, runner, project):
        """An existing changelog is printed."""
        (project / "CHANGELOG.md").write_text("# Changelog\n\n## [1.2.3]\n")
        result = runner.invoke(cli, ['-C', str(project), 'changelog', 'show'])
        assert result.exit_code == 0, result.output
        assert "## [1.2.3]" in result.output

    def test_disabled(self, runner, temp_dir):
        """A disabled changelog only prints a warning."""
        write_config(temp_dir, {'changelog': {'enabled': False}})
        result = runner.invoke(cli, ['-C', str(temp_dir), 'changelog', 'show'])
        assert result.exit_code == 0
        assert "disabled" in result.output
