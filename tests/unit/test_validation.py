"""Tests for configuration validation."""

from mobilectl.core.project_detector import ProjectDetector
from mobilectl.core.validation_engine import ConfigValidator, validate_config
from mobilectl.models import Config, ValidationResult


def fields(issues):
    return [issue.field for issue in issues]


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_warnings_do_not_invalidate(self):
        """Only errors make a result invalid."""
        result = ValidationResult()
        result.add_warning("a", "heads up")
        assert result.is_valid
        result.add_error("b", "broken", "fix it")
        assert not result.is_valid
        assert str(result.errors[0]) == "b: broken (fix it)"

    def test_merge_keeps_all_issues(self):
        """Merging accumulates issues from both results."""
        first = ValidationResult()
        first.add_error("a", "x")
        second = ValidationResult()
        second.add_warning("b", "y")
        first.merge(second)
        assert fields(first.issues) == ["a", "b"]


class TestConfigValidator:
    """Tests for ConfigValidator."""

    def test_default_config_is_valid(self):
        """Defaults produce no errors."""
        assert ConfigValidator().validate(Config()).is_valid

    def test_deploy_without_build(self):
        """Enabled Android destinations need an enabled Android build."""
        config = Config.from_dict({
            'build': {'android': {'enabled': False}},
            'deploy': {'android': {'firebase': {'enabled': True}}},
        })
        result = ConfigValidator().validate(config)
        assert "deploy.android" in fields(result.errors)

    def test_ios_deploy_without_build(self):
        """Enabled iOS destinations need an enabled iOS build."""
        config = Config.from_dict({
            'deploy': {'ios': {'testflight': {'bundle_id': 'com.example'}}},
        })
        result = ConfigValidator().validate(config)
        assert "deploy.ios" in fields(result.errors)

    def test_ios_requires_scheme(self):
        """An enabled iOS build without a scheme is an error."""
        config = Config.from_dict({'build': {'ios': {'enabled': True}}})
        result = ConfigValidator().validate(config)
        assert "build.ios.scheme" in fields(result.errors)

    def test_reports_every_problem(self):
        """All problems are reported in one pass."""
        config = Config.from_dict({
            'build': {'android': {'output_type': 'zip'}},
            'version': {'bump_strategy': 'sideways', 'current': 'one'},
            'changelog': {'format': 'pdf'},
            'notify': {'slack': {'enabled': True}},
        })
        result = ConfigValidator().validate(config)
        errors = fields(result.errors)
        assert "build.android.output_type" in errors
        assert "version.bump_strategy" in errors
        assert "changelog.format" in errors
        assert "notify.slack.webhook_url" in errors
        assert "version.current" in fields(result.warnings)

    def test_default_flavor_warning(self):
        """An undeclared default flavor is only a warning."""
        config = Config.from_dict({
            'build': {'android': {'flavors': ['free'], 'default_flavor': 'paid'}},
        })
        result = ConfigValidator().validate(config)
        assert result.is_valid
        assert "build.android.default_flavor" in fields(result.warnings)

    def test_play_console_requirements(self):
        """Play Console needs a package name."""
        config = Config.from_dict({
            'deploy': {'android': {'play_console': {'enabled': True}}},
        })
        result = ConfigValidator().validate(config)
        assert "deploy.android.play_console.package_name" in fields(result.errors)

    def test_unknown_default_group(self):
        """The default flavor group must exist."""
        config = Config.from_dict({'deploy': {'default_group': 'missing'}})
        result = ConfigValidator().validate(config)
        assert "deploy.default_group" in fields(result.errors)

    def test_group_with_undeclared_flavor(self):
        """Groups naming undeclared flavors produce a warning."""
        config = Config.from_dict({
            'build': {'android': {'flavors': ['free']}},
            'deploy': {'flavor_groups': {'all': {'flavors': ['free', 'pro']}}},
        })
        result = ConfigValidator().validate(config)
        assert result.is_valid
        assert "deploy.flavor_groups.all" in fields(result.warnings)

    def test_markdown_extension_warning(self):
        """Markdown output with another extension is flagged."""
        config = Config.from_dict({'changelog': {'output_file': 'CHANGES.txt'}})
        result = ConfigValidator().validate(config)
        assert "changelog.output_file" in fields(result.warnings)

    def test_validation_is_repeatable(self):
        """Re-validating a mutated config reflects the change."""
        config = Config.from_dict({'build': {'ios': {'enabled': True}}})
        validator = ConfigValidator()
        assert not validator.validate(config).is_valid
        config.build.ios.scheme = "App"
        assert validator.validate(config).is_valid

    def test_detector_checks_enabled_platforms(self, temp_dir):
        """With a detector, an enabled platform must exist on disk."""
        result = validate_config(Config(), temp_dir, ProjectDetector())
        assert "build.android" in fields(result.errors)

    def test_detector_accepts_present_project(self, android_project):
        """A detected Android project passes the detection check."""
        result = validate_config(Config(), android_project, ProjectDetector())
        assert result.is_valid
