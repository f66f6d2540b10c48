# mobilectl/core/validation_engine.py

"""Configuration validation"""

import logging
from pathlib import Path
from typing import Optional

from ..constants import (
    BUMP_STRATEGIES,
    CHANGELOG_FORMATS,
    Platform,
)
from ..models.config import Config
from ..models.result import ValidationResult
from ..utils.version_utils import is_valid_version
from .project_detector import ProjectDetector

logger = logging.getLogger(__name__)


class ConfigValidator:
    """Check a Config for problems

    Validation is a pure function of its inputs and may be re-run on any
    mutated Config value. Every problem is reported, not only the first.
    """

    def __init__(self, detector: Optional[ProjectDetector] = None):
        self.detector = detector

    def validate(self, config: Config, base_dir: Optional[Path] = None) -> ValidationResult:
        """
        Validate a configuration

        Args:
            config: Configuration to check
            base_dir: Project root; enables detection checks when a
                detector was supplied

        Returns:
            ValidationResult with every error and warning found
        """
        result = ValidationResult()
        result.merge(self.validate_platforms(config, base_dir))
        result.merge(self.validate_build(config))
        result.merge(self.validate_version(config))
        result.merge(self.validate_changelog(config))
        result.merge(self.validate_deploy(config))
        result.merge(self.validate_notify(config))

        logger.debug(
            f"Validation finished: {len(result.errors)} error(s), "
            f"{len(result.warnings)} warning(s)"
        )
        return result

    def validate_platforms(self, config: Config,
                           base_dir: Optional[Path] = None) -> ValidationResult:
        """Deploy blocks must only reference buildable platforms"""
        result = ValidationResult()

        android = config.deploy.android
        if (android is not None and android.enabled and not config.build.android.enabled
                and (android.firebase.enabled or android.play_console.enabled
                     or android.local.enabled)):
            result.add_error(
                "deploy.android",
                "Android destinations are enabled but build.android.enabled is false",
                "Enable build.android or disable the Android destinations"
            )

        ios = config.deploy.ios
        if (ios is not None and ios.enabled and not config.build.ios.enabled
                and (ios.testflight.enabled or ios.app_store.enabled)):
            result.add_error(
                "deploy.ios",
                "iOS destinations are enabled but build.ios.enabled is false",
                "Enable build.ios or disable the iOS destinations"
            )

        if self.detector is not None and base_dir is not None:
            detected = self.detector.detect_platforms(
                base_dir,
                android_enabled=config.build.android.enabled,
                ios_enabled=config.build.ios.enabled,
            )
            for platform in sorted(config.build.enabled_platforms(), key=lambda p: p.value):
                if platform not in detected:
                    result.add_error(
                        f"build.{platform.value}",
                        f"{platform.value} is enabled but no {platform.value} project "
                        f"was found in {base_dir}"
                    )

        return result

    def validate_build(self, config: Config) -> ValidationResult:
        result = ValidationResult()
        android = config.build.android
        ios = config.build.ios

        if ios.enabled and not ios.scheme:
            result.add_error("build.ios.scheme", "Scheme is required when iOS is enabled")

        if (android.enabled and android.flavors and android.default_flavor
                and android.default_flavor not in android.flavors):
            result.add_warning(
                "build.android.default_flavor",
                f"Default flavor '{android.default_flavor}' is not in flavors",
                f"Declared flavors: {', '.join(android.flavors)}"
            )

        for name, value in (("output_type", android.output_type),
                            ("firebase_output_type", android.firebase_output_type)):
            if value not in ("apk", "aab"):
                result.add_error(f"build.android.{name}", f"Must be 'apk' or 'aab', got '{value}'")

        if android.enabled and not android.use_env_for_passwords and android.key_store \
                and not (android.key_password and android.store_password):
            result.add_warning(
                "build.android.key_password",
                "Keystore is set but passwords are missing and environment lookup is off"
            )

        return result

    def validate_version(self, config: Config) -> ValidationResult:
        result = ValidationResult()
        version = config.version

        if version.bump_strategy not in BUMP_STRATEGIES:
            result.add_error(
                "version.bump_strategy",
                f"Unknown bump strategy '{version.bump_strategy}'",
                f"Use one of: {', '.join(BUMP_STRATEGIES)}"
            )

        if not is_valid_version(version.current):
            result.add_warning(
                "version.current",
                f"'{version.current}' is not a semantic version (MAJOR.MINOR.PATCH)"
            )

        return result

    def validate_changelog(self, config: Config) -> ValidationResult:
        result = ValidationResult()
        changelog = config.changelog

        if changelog.format not in CHANGELOG_FORMATS:
            result.add_error(
                "changelog.format",
                f"Unknown format '{changelog.format}'",
                f"Use one of: {', '.join(CHANGELOG_FORMATS)}"
            )

        if not changelog.output_file:
            result.add_error("changelog.output_file", "Output file cannot be empty")
        elif changelog.format == "markdown" and not changelog.output_file.endswith(".md"):
            result.add_warning(
                "changelog.output_file",
                f"Markdown output '{changelog.output_file}' does not end in .md"
            )

        if not changelog.commit_types:
            result.add_error("changelog.commit_types", "At least one commit type is required")

        return result

    def validate_deploy(self, config: Config) -> ValidationResult:
        result = ValidationResult()
        deploy = config.deploy

        android = deploy.android
        if android is not None:
            if android.firebase.enabled and not android.firebase.service_account:
                result.add_error("deploy.android.firebase.service_account",
                                 "Service account is required for Firebase")
            if android.play_console.enabled:
                if not android.play_console.service_account:
                    result.add_error("deploy.android.play_console.service_account",
                                     "Service account is required for Play Console")
                if not android.play_console.package_name:
                    result.add_error("deploy.android.play_console.package_name",
                                     "Package name is required for Play Console")

        ios = deploy.ios
        if ios is not None:
            for name, destination in (("testflight", ios.testflight), ("app_store", ios.app_store)):
                if not destination.enabled:
                    continue
                if not destination.api_key_path:
                    result.add_error(f"deploy.ios.{name}.api_key_path",
                                     "App Store Connect API key path is required")
                if not destination.bundle_id:
                    result.add_error(f"deploy.ios.{name}.bundle_id", "Bundle id is required")

        if deploy.default_group and deploy.default_group not in deploy.flavor_groups:
            result.add_error(
                "deploy.default_group",
                f"Default group '{deploy.default_group}' is not defined in flavor_groups"
            )

        declared = set(config.build.android.flavors)
        for key, group in deploy.flavor_groups.items():
            unknown = [flavor for flavor in group.flavors if flavor not in declared]
            if unknown:
                result.add_warning(
                    f"deploy.flavor_groups.{key}",
                    f"Flavors not declared in build.android.flavors: {', '.join(unknown)}"
                )

        return result

    def validate_notify(self, config: Config) -> ValidationResult:
        result = ValidationResult()
        notify = config.notify

        if notify.slack.enabled and not notify.slack.webhook_url:
            result.add_error("notify.slack.webhook_url", "Webhook URL is required for Slack")
        if notify.webhook.enabled and not notify.webhook.url:
            result.add_error("notify.webhook.url", "URL is required for webhook notifications")
        if notify.email.enabled and not notify.email.recipients:
            result.add_error("notify.email.recipients", "At least one recipient is required")

        return result


def validate_config(config: Config, base_dir: Optional[Path] = None,
                    detector: Optional[ProjectDetector] = None) -> ValidationResult:
    """Validate a configuration with an optional detector"""
    return ConfigValidator(detector).validate(config, base_dir)
