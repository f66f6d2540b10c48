"""Tests for the configuration model and loader."""

import pytest
import yaml

from mobilectl.api.exceptions import ConfigError, ConfigParseError, ValidationError
from mobilectl.constants import ArtifactType, Platform
from mobilectl.core.config_loader import ConfigLoader
from mobilectl.models import Config


@pytest.fixture(autouse=True)
def clear_config_env(monkeypatch):
    monkeypatch.delenv("MOBILECTL_CONFIG", raising=False)


class TestConfigModel:
    """Tests for Config.from_dict defaults and key spellings."""

    def test_defaults(self):
        """Empty data yields Android enabled and iOS disabled."""
        config = Config.from_dict(None)
        assert config.build.android.enabled is True
        assert config.build.ios.enabled is False
        assert config.build.enabled_platforms() == {Platform.ANDROID}
        assert config.deploy.android is None
        assert config.deploy.ios is None
        assert config.version.current == "1.0.0"
        assert config.changelog.output_file == "CHANGELOG.md"

    def test_camel_case_keys(self):
        """camelCase spellings are accepted alongside snake_case."""
        config = Config.from_dict({
            'build': {'android': {'defaultFlavor': 'free', 'outputType': 'AAB'}},
            'version': {'bumpStrategy': 'minor', 'filesToUpdate': ['a.gradle']},
        })
        assert config.build.android.default_flavor == "free"
        assert config.build.android.output_type == "aab"
        assert config.version.bump_strategy == "minor"
        assert config.version.files_to_update == ["a.gradle"]

    def test_firebase_block_defaults(self):
        """A declared Firebase block is enabled with default groups."""
        config = Config.from_dict({'deploy': {'android': {'firebase': {}}}})
        firebase = config.deploy.android.firebase
        assert firebase.enabled is True
        assert firebase.test_groups == ["qa-team"]
        assert firebase.service_account == "credentials/firebase-service-account.json"
        assert config.deploy.android.play_console.enabled is False
        assert config.deploy.android.local.enabled is False

    def test_ios_destination_defaults(self):
        """TestFlight defaults to enabled, App Store to disabled."""
        config = Config.from_dict({'deploy': {'ios': {'testflight': {}, 'appStore': {}}}})
        assert config.deploy.ios.testflight.enabled is True
        assert config.deploy.ios.app_store.enabled is False

    def test_flavor_groups(self):
        """Flavor groups keep their key as name and accept comma lists."""
        config = Config.from_dict({
            'deploy': {
                'default_group': 'paid',
                'flavor_groups': {'paid': {'flavors': 'pro, premium'}},
            }
        })
        group = config.deploy.flavor_groups['paid']
        assert group.name == "paid"
        assert group.flavors == ["pro", "premium"]
        assert config.deploy.default_group == "paid"

    def test_env_overlay(self, monkeypatch):
        """Config env entries shadow the process environment."""
        monkeypatch.setenv("SOME_VAR", "from-process")
        config = Config.from_dict({'env': {'SOME_VAR': 'from-config'}})
        assert config.getenv("SOME_VAR") == "from-config"
        assert config.getenv("OTHER_VAR", "fallback") == "fallback"

    def test_round_trip_keeps_enabled_destinations(self):
        """to_dict output parses back to an equivalent config."""
        original = Config.from_dict({
            'app': {'identifier': 'com.example'},
            'deploy': {'android': {'firebase': {'app_id': 'x'}, 'local': {'enabled': True}}},
        })
        restored = Config.from_dict(original.to_dict())
        assert restored.deploy.android.firebase.app_id == "x"
        assert restored.deploy.android.local.enabled is True
        assert restored.app.identifier == "com.example"


class TestGradleTask:
    """Tests for the computed Gradle task name."""

    def test_plain_release(self):
        """No flavor assembles the release type."""
        config = Config()
        assert config.build.android.gradle_task() == "assembleRelease"

    def test_flavor_and_bundle(self):
        """Flavor and AAB type are reflected in the task."""
        android = Config.from_dict({'build': {'android': {'default_flavor': 'free'}}}).build.android
        assert android.gradle_task() == "assembleFreeRelease"
        assert android.gradle_task(ArtifactType.AAB) == "bundleFreeRelease"
        assert android.gradle_task(flavor="pro", build_type="debug") == "assembleProDebug"

    def test_follows_later_changes(self):
        """The task tracks edits to the default flavor."""
        android = Config().build.android
        android.default_flavor = "paid"
        assert android.gradle_task() == "assemblePaidRelease"


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_missing_file_uses_defaults(self, temp_dir, caplog):
        """No config file yields defaults and a warning."""
        loader = ConfigLoader(base_dir=temp_dir)
        config = loader.load()
        assert isinstance(config, Config)
        assert "No configuration file found" in caplog.text

    def test_explicit_missing_file_raises(self, temp_dir):
        """An explicitly named file must exist."""
        loader = ConfigLoader(base_dir=temp_dir, config_path="custom.yml")
        with pytest.raises(ConfigError):
            loader.load()

    def test_discovers_candidate(self, temp_dir):
        """The state directory location is searched."""
        (temp_dir / ".mobilectl").mkdir()
        (temp_dir / ".mobilectl" / "mobileops.yaml").write_text(
            "app:\n  name: Found\n"
        )
        loader = ConfigLoader(base_dir=temp_dir)
        assert loader.load().app.name == "Found"

    def test_invalid_yaml(self, temp_dir):
        """Broken YAML is reported as a parse error."""
        (temp_dir / "mobileops.yml").write_text("app: [unclosed\n")
        with pytest.raises(ConfigParseError):
            ConfigLoader(base_dir=temp_dir).load()

    def test_non_mapping_root(self, temp_dir):
        """A list document is rejected."""
        (temp_dir / "mobileops.yml").write_text("- a\n- b\n")
        with pytest.raises(ConfigParseError):
            ConfigLoader(base_dir=temp_dir).load()

    def test_environment_expansion(self, temp_dir, monkeypatch):
        """Environment references in the file are expanded."""
        monkeypatch.setenv("APP_IDENTIFIER", "com.example.env")
        (temp_dir / "mobileops.yml").write_text("app:\n  identifier: ${APP_IDENTIFIER}\n")
        config = ConfigLoader(base_dir=temp_dir).load()
        assert config.app.identifier == "com.example.env"

    def test_load_and_validate_raises_on_errors(self, temp_dir):
        """Validation errors surface as ValidationError."""
        (temp_dir / "mobileops.yml").write_text(
            "changelog:\n  format: pdf\n"
        )
        with pytest.raises(ValidationError) as exc_info:
            ConfigLoader(base_dir=temp_dir).load_and_validate()
        assert exc_info.value.issues

    def test_save_keeps_backup(self, temp_dir):
        """Saving over an existing file keeps a .bak copy."""
        path = temp_dir / "mobileops.yml"
        path.write_text("app:\n  name: Old\n")
        loader = ConfigLoader(base_dir=temp_dir)
        config = loader.load()
        config.app.name = "New"
        loader.save(config)

        assert (temp_dir / "mobileops.yml.bak").read_text() == "app:\n  name: Old\n"
        saved = yaml.safe_load(path.read_text())
        assert saved['app']['name'] == "New"
