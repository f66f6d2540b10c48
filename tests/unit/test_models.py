"""Tests for result and version models."""

import pytest

from mobilectl.constants import Platform
from mobilectl.models import (
    BuildOutput,
    BuildResult,
    DeployResult,
    DeploymentResults,
    PipelineResult,
    SemanticVersion,
)


class TestSemanticVersion:
    """Tests for SemanticVersion parsing and bumping."""

    @pytest.mark.parametrize("text,expected", [
        ("1.2.3", SemanticVersion(1, 2, 3)),
        ("v2.0.1", SemanticVersion(2, 0, 1)),
        ("1.2", SemanticVersion(1, 2, 0)),
        ("3.1.4-beta.1+build.7", SemanticVersion(3, 1, 4)),
        ("garbage", SemanticVersion(0, 0, 0)),
        ("", SemanticVersion(0, 0, 0)),
        (None, SemanticVersion(0, 0, 0)),
    ])
    def test_parse_is_lenient(self, text, expected):
        """Parsing never raises and fills missing parts with zero."""
        assert SemanticVersion.parse(text) == expected

    def test_bump_levels(self):
        """Each level resets the lower components."""
        version = SemanticVersion(1, 2, 3)
        assert str(version.bump("major")) == "2.0.0"
        assert str(version.bump("minor")) == "1.3.0"
        assert str(version.bump("patch")) == "1.2.4"

    def test_unknown_level_is_identity(self):
        """An unknown level leaves the version unchanged."""
        version = SemanticVersion(1, 2, 3)
        assert version.bump("sideways") == version

    def test_ordering(self):
        """Versions compare component-wise."""
        assert SemanticVersion(1, 10, 0) > SemanticVersion(1, 9, 9)
        assert sorted([SemanticVersion(2, 0, 0), SemanticVersion(0, 1, 0)])[0] == SemanticVersion(0, 1, 0)


def _output(success=True, platform=Platform.ANDROID):
    return BuildOutput(success=success, platform=platform, output_path="app.apk" if success else None)


class TestBuildResult:
    """Tests for BuildResult aggregation."""

    def test_empty_result_is_not_success(self):
        """No outputs is never a success."""
        assert BuildResult().success is False

    def test_all_outputs_must_succeed(self):
        """A single failure fails the whole result."""
        result = BuildResult(outputs=[_output(), BuildOutput.failed(Platform.IOS, "boom")])
        assert result.success is False
        assert [o.platform for o in result.failed_outputs] == [Platform.IOS]
        assert BuildResult(outputs=[_output(), _output(platform=Platform.IOS)]).success is True

    def test_output_for_and_duration(self):
        """Outputs are found by platform and durations summed."""
        result = BuildResult(outputs=[
            BuildOutput(success=True, platform=Platform.ANDROID, duration=1.5),
            BuildOutput(success=True, platform=Platform.IOS, duration=2.0),
        ])
        assert result.output_for(Platform.IOS).duration == 2.0
        assert result.total_duration == pytest.approx(3.5)
        assert BuildResult().output_for(Platform.ANDROID) is None


def _deploy(success, name="firebase"):
    return DeployResult(platform=Platform.ANDROID, destination=name, success=success)


class TestDeploymentResults:
    """Tests for DeploymentResults counters."""

    @pytest.mark.parametrize("flags", [[], [True], [False], [True, False, True], [False, False]])
    def test_counts_partition_results(self, flags):
        """Success and failure counts always add up to the total."""
        results = DeploymentResults(Platform.ANDROID, [_deploy(flag) for flag in flags])
        assert results.success_count + results.failure_count == len(flags)
        assert results.success == (results.failure_count == 0)

    def test_counts_follow_mutation(self):
        """Counts are recomputed when results are appended."""
        results = DeploymentResults(Platform.ANDROID)
        results.individual.append(_deploy(True))
        assert results.message == "1/1 successful"
        results.individual.append(_deploy(False, "local"))
        assert results.success is False
        assert results.message == "1/2 successful, 1 failed"


class TestPipelineResult:
    """Tests for PipelineResult."""

    def test_empty_pipeline_fails(self):
        """A run that did nothing is not a success."""
        assert PipelineResult().success is False

    def test_error_fails(self):
        """An error overrides otherwise successful parts."""
        build = BuildResult(outputs=[_output()])
        assert PipelineResult(builds=[build]).success is True
        assert PipelineResult(builds=[build], error="x").success is False

    def test_failed_deployment_fails(self):
        """Any failed destination fails the pipeline."""
        deployment = DeploymentResults(Platform.ANDROID, [_deploy(True), _deploy(False, "local")])
        assert PipelineResult(deployments=[deployment]).success is False
