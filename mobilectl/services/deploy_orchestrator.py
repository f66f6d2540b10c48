# mobilectl/services/deploy_orchestrator.py

"""Deploy stage orchestration"""

import asyncio
import dataclasses
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from ..api.exceptions import DestinationError, MobileCtlError
from ..builders.artifacts import ArtifactStrategy
from ..constants import DestinationType, Platform, PLATFORM_DESTINATIONS
from ..destinations.base import DestinationClient
from ..destinations.factory import DestinationFactory
from ..models.config import Config
from ..models.deploy import DeployResult, DeploymentResults
from ..utils.async_utils import gather_isolated, with_timeout
from ..utils.process_utils import CommandRunner

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Dict[str, Any]], DestinationClient]


class DeployOrchestrator:
    """Fan an artifact out to every enabled destination of a platform

    Destinations run concurrently and independently: a destination that
    fails, raises or times out becomes one failed DeployResult and never
    stops its siblings. Nothing is retried or rolled back.
    """

    def __init__(self,
                 factories: Optional[Dict[DestinationType, ClientFactory]] = None,
                 timeout: Optional[float] = None,
                 base_dir: Optional[Path] = None,
                 runner: Optional[CommandRunner] = None):
        """
        Args:
            factories: Client constructor per destination; the registered
                clients are used for destinations not listed
            timeout: Upper bound in seconds for each destination
            base_dir: Project root for relative paths
            runner: Command runner handed to registered clients
        """
        self.factories = factories or {}
        self.timeout = timeout
        self.base_dir = Path(base_dir or Path.cwd())
        self.runner = runner
        self.artifact_strategy = ArtifactStrategy()

    def enabled_destinations(self, platform: Platform, config: Config) -> List[DestinationType]:
        """Destinations switched on under ``deploy.<platform>``"""
        if not config.deploy.enabled:
            return []
        block = config.deploy.for_platform(platform)
        if block is None or not block.enabled:
            return []

        if platform == Platform.ANDROID:
            flags = [
                (DestinationType.FIREBASE, block.firebase.enabled),
                (DestinationType.PLAY_CONSOLE, block.play_console.enabled),
                (DestinationType.LOCAL, block.local.enabled),
            ]
        else:
            flags = [
                (DestinationType.TESTFLIGHT, block.testflight.enabled),
                (DestinationType.APP_STORE, block.app_store.enabled),
            ]
        return [destination for destination, enabled in flags if enabled]

    def destination_config(self,
                           destination: DestinationType,
                           config: Config,
                           release_notes: Optional[str] = None,
                           test_groups: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Flatten a destination's settings into the client's config dict

        Raises:
            DestinationError: The platform has no deploy block
        """
        platform = Platform.IOS if destination in (
            DestinationType.TESTFLIGHT, DestinationType.APP_STORE) else Platform.ANDROID
        block = config.deploy.for_platform(platform)
        if block is None:
            raise DestinationError(destination.value, f"deploy.{platform.value} is not configured")

        section = {
            DestinationType.FIREBASE: lambda: block.firebase,
            DestinationType.PLAY_CONSOLE: lambda: block.play_console,
            DestinationType.LOCAL: lambda: block.local,
            DestinationType.TESTFLIGHT: lambda: block.testflight,
            DestinationType.APP_STORE: lambda: block.app_store,
        }[destination]()

        data = dataclasses.asdict(section)
        data['base_dir'] = str(self.base_dir)
        if not data.get('package_name'):
            data['package_name'] = config.app.identifier
        if self.timeout is not None:
            data['timeout'] = self.timeout
        if release_notes is not None:
            data['release_notes'] = release_notes
        if test_groups is not None:
            data['test_groups'] = list(test_groups)
        return data

    def create_client(self, destination: DestinationType,
                      client_config: Dict[str, Any]) -> DestinationClient:
        factory = self.factories.get(destination)
        if factory is not None:
            return factory(client_config)
        return DestinationFactory.create(destination, client_config, runner=self.runner)

    def artifact_for(self, destination: DestinationType, config: Config,
                     artifact_path: Union[str, Path],
                     artifacts: Optional[Dict[str, str]] = None) -> str:
        """Pick the artifact a destination accepts, falling back to the primary one"""
        if artifacts:
            requirement = self.artifact_strategy.requirement_for(destination, config)
            if requirement is not None and requirement.artifact_type.value in artifacts:
                return artifacts[requirement.artifact_type.value]
        return str(artifact_path)

    async def deploy(self,
                     platform: Platform,
                     artifact_path: Union[str, Path],
                     config: Config,
                     destinations: Optional[Iterable[Union[str, DestinationType]]] = None,
                     release_notes: Optional[str] = None,
                     test_groups: Optional[List[str]] = None,
                     dry_run: bool = False,
                     artifacts: Optional[Dict[str, str]] = None) -> DeploymentResults:
        """
        Deploy an artifact to a platform's destinations

        Args:
            platform: Platform the artifact belongs to
            artifact_path: Signed artifact
            config: Pipeline configuration, read only
            destinations: Explicit destinations; enabled ones when omitted
            release_notes: Notes overriding the configured ones
            test_groups: Tester groups overriding the configured ones
            dry_run: Report what would be uploaded without uploading
            artifacts: Extra artifacts by type, for destinations that need
                a different format than the primary artifact

        Returns:
            DeploymentResults with one entry per attempted destination
        """
        results = DeploymentResults(platform=platform)

        if destinations is None:
            targets = self.enabled_destinations(platform, config)
        else:
            targets = []
            for destination in destinations:
                try:
                    targets.append(DestinationFactory.parse(destination))
                except DestinationError as e:
                    results.individual.append(self._failed(
                        platform, str(destination), f"Configuration error: {e}"
                    ))

        if not targets and not results.individual:
            logger.warning(f"No destinations enabled for {platform.value}")
            return results

        if dry_run:
            for destination in targets:
                path = self.artifact_for(destination, config, artifact_path, artifacts)
                results.individual.append(DeployResult(
                    platform=platform,
                    destination=destination.value,
                    success=True,
                    message=f"Dry run: would upload {Path(path).name} to {destination.value}",
                ))
            return results

        logger.info(
            f"Deploying {platform.value} to {', '.join(d.value for d in targets)}"
        )
        outcomes = await gather_isolated(*(
            self._deploy_one(platform, destination, artifact_path, config,
                             release_notes, test_groups, artifacts)
            for destination in targets
        ))

        for destination, outcome in zip(targets, outcomes):
            if isinstance(outcome, BaseException):
                outcome = self._failed(platform, destination.value, f"Deployment failed: {outcome}")
            results.individual.append(outcome)

        logger.info(f"{platform.value} deployment: {results.message}")
        return results

    async def _deploy_one(self,
                          platform: Platform,
                          destination: DestinationType,
                          artifact_path: Union[str, Path],
                          config: Config,
                          release_notes: Optional[str],
                          test_groups: Optional[List[str]],
                          artifacts: Optional[Dict[str, str]]) -> DeployResult:
        start = time.monotonic()
        name = destination.value

        if destination not in PLATFORM_DESTINATIONS.get(platform, []):
            return self._failed(platform, name,
                                f"Configuration error: {name} does not serve {platform.value}")

        try:
            client_config = self.destination_config(destination, config, release_notes, test_groups)
            client = self.create_client(destination, client_config)
            problems = client.validate_config()
        except MobileCtlError as e:
            return self._failed(platform, name, f"Configuration error: {e}")

        if problems:
            return self._failed(platform, name, f"Configuration error: {'; '.join(problems)}")

        path = self.artifact_for(destination, config, artifact_path, artifacts)
        try:
            upload = await with_timeout(
                client.upload(path, release_notes=client_config.get('release_notes'),
                              test_groups=client_config.get('test_groups')),
                self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"{name}: timed out after {self.timeout}s")
            return self._failed(platform, name, f"Deployment timed out after {self.timeout}s",
                                time.monotonic() - start)
        except Exception as e:
            logger.error(f"{name}: {e}")
            return self._failed(platform, name, f"Deployment failed: {e}", time.monotonic() - start)

        duration = time.monotonic() - start
        if not upload.success:
            logger.error(f"{name}: {upload.error}")
            return DeployResult(
                platform=platform,
                destination=name,
                success=False,
                message=upload.message or f"Deployment failed: {upload.error}",
                error=upload.error or "Upload failed",
                build_id=upload.build_id,
                build_url=upload.build_url,
                duration=duration,
            )

        logger.info(f"{name}: {upload.message}")
        return DeployResult(
            platform=platform,
            destination=name,
            success=True,
            message=upload.message,
            build_id=upload.build_id,
            build_url=upload.build_url,
            duration=duration,
        )

    @staticmethod
    def _failed(platform: Platform, destination: str, message: str,
                duration: float = 0.0) -> DeployResult:
        return DeployResult(
            platform=platform,
            destination=destination,
            success=False,
            message=message,
            error=message,
            duration=duration,
        )
