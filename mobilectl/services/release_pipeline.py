# mobilectl/services/release_pipeline.py

"""Build then deploy, per platform and flavor"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..api.exceptions import ConfigError, DestinationError
from ..constants import DEFAULT_ANDROID_ARTIFACT, DEFAULT_IOS_ARTIFACT, DestinationType, Platform
from ..destinations.factory import DestinationFactory
from ..models.config import Config
from ..models.deploy import PipelineResult
from .build_orchestrator import BuildOrchestrator, with_variant
from .deploy_orchestrator import DeployOrchestrator

logger = logging.getLogger(__name__)


def resolve_flavors(config: Config, flavor_group: Optional[str] = None,
                    all_flavors: bool = False) -> List[str]:
    """
    Android flavors a release covers

    ``all_flavors`` takes every declared flavor; otherwise the named group
    is used, or ``deploy.default_group`` when no group is named. An empty
    list means a single build with the default flavor.

    Raises:
        ConfigError: Unknown flavor group
    """
    if all_flavors:
        return list(config.build.android.flavors)

    group_name = flavor_group or config.deploy.default_group
    if not group_name:
        return []

    group = config.deploy.flavor_groups.get(group_name)
    if group is None:
        available = ", ".join(sorted(config.deploy.flavor_groups)) or "none"
        raise ConfigError(f"Unknown flavor group '{group_name}' (available: {available})")
    return list(group.flavors)


class ReleasePipeline:
    """Compose the build and deploy stages"""

    def __init__(self,
                 build_orchestrator: Optional[BuildOrchestrator] = None,
                 deploy_orchestrator: Optional[DeployOrchestrator] = None):
        self.build_orchestrator = build_orchestrator or BuildOrchestrator()
        self.deploy_orchestrator = deploy_orchestrator or DeployOrchestrator(
            base_dir=self.build_orchestrator.base_dir
        )

    @property
    def base_dir(self) -> Path:
        return self.build_orchestrator.base_dir

    def prebuilt_artifact(self, platform: Platform, config: Config) -> Path:
        """Artifact location used when the build is skipped"""
        block = config.deploy.for_platform(platform)
        default = DEFAULT_ANDROID_ARTIFACT if platform == Platform.ANDROID else DEFAULT_IOS_ARTIFACT
        path = Path(block.artifact_path if block is not None else default)
        return path if path.is_absolute() else self.base_dir / path

    @staticmethod
    def _destinations_for(platform: Platform,
                          destinations: Optional[List[DestinationType]]) -> Optional[List[DestinationType]]:
        if destinations is None:
            return None
        served = DestinationFactory.destinations_for(platform)
        return [destination for destination in destinations if destination in served]

    async def run(self,
                  config: Config,
                  platforms: Optional[Iterable[Platform]] = None,
                  destinations: Optional[Iterable[Union[str, DestinationType]]] = None,
                  flavors: Optional[List[str]] = None,
                  skip_build: bool = False,
                  dry_run: bool = False,
                  release_notes: Optional[str] = None,
                  test_groups: Optional[List[str]] = None) -> PipelineResult:
        """
        Build and deploy

        Only platforms whose build succeeded are deployed. With flavors,
        build and deploy repeat for each Android flavor when Android is
        targeted; iOS runs once.

        Args:
            config: Pipeline configuration
            platforms: Explicit platforms; detected when omitted
            destinations: Explicit destinations; enabled ones when omitted
            flavors: Android flavors to release
            skip_build: Deploy existing artifacts from ``deploy.<platform>.artifact_path``
            dry_run: No builds, uploads or file changes
            release_notes: Notes for testers
            test_groups: Tester groups

        Returns:
            PipelineResult
        """
        result = PipelineResult(flavors=list(flavors or []))
        try:
            parsed = None
            if destinations is not None:
                parsed = [DestinationFactory.parse(d) for d in destinations]
        except DestinationError as e:
            result.error = str(e)
            return result

        platforms = list(platforms) if platforms is not None else None
        runs = flavors or [None]

        for index, flavor in enumerate(runs):
            run_platforms = platforms
            if index > 0:
                if platforms is not None and Platform.ANDROID not in platforms:
                    break
                run_platforms = [Platform.ANDROID]
            if flavor:
                logger.info(f"Releasing flavor {flavor}")

            if skip_build:
                run_config = with_variant(config, flavor)
                targets = self.build_orchestrator.resolve_platforms(run_config, run_platforms)
                for platform in sorted(targets, key=lambda p: p.value):
                    artifact = self.prebuilt_artifact(platform, run_config)
                    result.deployments.append(await self.deploy_orchestrator.deploy(
                        platform, artifact, run_config,
                        destinations=self._destinations_for(platform, parsed),
                        release_notes=release_notes,
                        test_groups=test_groups,
                        dry_run=dry_run,
                    ))
                continue

            build = await self.build_orchestrator.build(
                config, run_platforms, dry_run=dry_run, flavor=flavor
            )
            result.builds.append(build)

            for output in build.outputs:
                if not output.success:
                    logger.warning(f"Not deploying {output.platform.value}: build failed")
                    continue
                result.deployments.append(await self.deploy_orchestrator.deploy(
                    output.platform, output.output_path, config,
                    destinations=self._destinations_for(output.platform, parsed),
                    release_notes=release_notes,
                    test_groups=test_groups,
                    dry_run=dry_run,
                    artifacts=output.artifacts,
                ))

        return result
