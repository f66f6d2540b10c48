"""Build stage orchestration"""

import dataclasses
import logging
from pathlib import Path
from typing import Iterable, Optional

from ..builders.manager import BuildManager
from ..constants import DRY_RUN_OUTPUT_PATHS, MSG_NO_PLATFORMS, Platform
from ..core.project_detector import ProjectDetector
from ..models.build import BuildOutput, BuildResult
from ..models.config import Config

logger = logging.getLogger(__name__)


def with_variant(config: Config, flavor: Optional[str] = None,
                 build_type: Optional[str] = None) -> Config:
    """Copy of config with the Android flavor or build type overridden"""
    if flavor is None and build_type is None:
        return config
    android = config.build.android
    android = dataclasses.replace(
        android,
        default_flavor=android.default_flavor if flavor is None else flavor,
        default_type=build_type or android.default_type,
    )
    build = dataclasses.replace(config.build, android=android)
    return dataclasses.replace(config, build=build)


class BuildOrchestrator:
    """Resolve target platforms and run their builds"""

    def __init__(self,
                 build_manager: Optional[BuildManager] = None,
                 detector: Optional[ProjectDetector] = None,
                 base_dir: Optional[Path] = None):
        """
        Args:
            build_manager: Runs the platform builders
            detector: Finds buildable platforms when none are requested
            base_dir: Project root, defaults to the working directory
        """
        self.build_manager = build_manager or BuildManager()
        self.detector = detector or ProjectDetector()
        self.base_dir = Path(base_dir or Path.cwd())

    def resolve_platforms(self, config: Config,
                          platforms: Optional[Iterable[Platform]] = None) -> set:
        """
        Target platforms for a build

        Requested platforms are limited to the enabled ones; without a
        request the detector decides among the enabled ones.
        """
        enabled = config.build.enabled_platforms()
        if platforms is not None:
            requested = set(platforms)
            for platform in requested - enabled:
                logger.warning(f"{platform.value} is disabled in config, skipping")
            return requested & enabled

        return self.detector.detect_platforms(
            self.base_dir,
            android_enabled=config.build.android.enabled,
            ios_enabled=config.build.ios.enabled,
        )

    async def build(self,
                    config: Config,
                    platforms: Optional[Iterable[Platform]] = None,
                    verbose: bool = False,
                    dry_run: bool = False,
                    flavor: Optional[str] = None,
                    build_type: Optional[str] = None) -> BuildResult:
        """
        Build the target platforms

        Never raises; every failure is reported in the returned result.

        Args:
            config: Pipeline configuration, left untouched
            platforms: Explicit targets; detected when omitted
            verbose: Log each output as it completes
            dry_run: Report synthetic outputs without running anything
            flavor: Android flavor override
            build_type: Android build type override

        Returns:
            BuildResult
        """
        try:
            targets = self.resolve_platforms(config, platforms)
        except Exception as e:
            logger.error(f"Platform detection failed: {e}")
            return BuildResult(message="Platform detection failed", error=str(e))

        if not targets:
            logger.error(MSG_NO_PLATFORMS)
            return BuildResult(message=MSG_NO_PLATFORMS, error=MSG_NO_PLATFORMS)

        ordered = sorted(targets, key=lambda p: p.value)
        logger.info(f"Building {', '.join(p.value for p in ordered)}")

        if dry_run:
            outputs = [
                BuildOutput(success=True, platform=platform,
                            output_path=DRY_RUN_OUTPUT_PATHS[platform])
                for platform in ordered
            ]
            return BuildResult(outputs=outputs, message="Dry run: no build executed")

        try:
            result = await self.build_manager.build(
                ordered, with_variant(config, flavor, build_type), self.base_dir
            )
        except Exception as e:
            logger.error(f"Build failed: {e}")
            return BuildResult(message="Build failed", error=str(e))

        for output in result.outputs:
            if output.success:
                if verbose:
                    logger.info(f"{output.platform.value}: {output.output_path}")
            else:
                logger.error(f"{output.platform.value} build failed: {output.error}")

        succeeded = len(result.outputs) - len(result.failed_outputs)
        result.message = f"{succeeded}/{len(result.outputs)} platform(s) built"
        return result
