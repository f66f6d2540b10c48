"""Artifact selection and deployability checks"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..constants import ArtifactType, DestinationType
from ..models.config import Config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactRequirement:
    """What a destination accepts"""

    destination: DestinationType
    artifact_type: ArtifactType
    requires_signing: bool = False


@dataclass(frozen=True)
class ArtifactInfo:
    """A produced artifact"""

    path: Path
    artifact_type: ArtifactType
    is_signed: bool = False


@dataclass
class ArtifactValidation:
    """Which destinations the produced artifacts can serve"""

    deployable: List[DestinationType] = field(default_factory=list)
    blocked: Dict[DestinationType, str] = field(default_factory=dict)

    @property
    def is_deployable(self) -> bool:
        return bool(self.deployable)

    def warnings(self) -> List[str]:
        return [f"{destination.value}: {reason}" for destination, reason in self.blocked.items()]


def _artifact_type(value: str) -> ArtifactType:
    return ArtifactType.AAB if str(value).lower() == "aab" else ArtifactType.APK


class ArtifactStrategy:
    """Derive Android artifact requirements from the enabled destinations"""

    def requirement_for(self, destination: DestinationType,
                        config: Config) -> Optional[ArtifactRequirement]:
        """Requirement of a single destination"""
        android = config.build.android
        if destination == DestinationType.FIREBASE:
            return ArtifactRequirement(destination, _artifact_type(android.firebase_output_type))
        if destination == DestinationType.PLAY_CONSOLE:
            return ArtifactRequirement(destination, ArtifactType.AAB, requires_signing=True)
        if destination == DestinationType.LOCAL:
            return ArtifactRequirement(destination, _artifact_type(android.output_type))
        if destination in (DestinationType.TESTFLIGHT, DestinationType.APP_STORE):
            return ArtifactRequirement(destination, ArtifactType.IPA, requires_signing=True)
        return None

    def requirements(self, config: Config) -> List[ArtifactRequirement]:
        """
        Requirements of every enabled Android destination

        With nothing enabled, a local build of ``output_type`` is assumed.

        Args:
            config: Pipeline configuration

        Returns:
            Requirements in destination order
        """
        deploy = config.deploy.android
        enabled = []
        if deploy is not None and deploy.enabled:
            if deploy.firebase.enabled:
                enabled.append(DestinationType.FIREBASE)
            if deploy.play_console.enabled:
                enabled.append(DestinationType.PLAY_CONSOLE)
            if deploy.local.enabled:
                enabled.append(DestinationType.LOCAL)

        if not enabled:
            enabled = [DestinationType.LOCAL]

        return [self.requirement_for(destination, config) for destination in enabled]

    @staticmethod
    def artifact_types(requirements: List[ArtifactRequirement]) -> List[ArtifactType]:
        """Distinct artifact types to build, in first-needed order"""
        types = []
        for requirement in requirements:
            if requirement.artifact_type not in types:
                types.append(requirement.artifact_type)
        return types


class ArtifactValidator:
    """Match produced artifacts against destination requirements"""

    def validate(self, artifacts: Dict[ArtifactType, ArtifactInfo],
                 requirements: List[ArtifactRequirement]) -> ArtifactValidation:
        validation = ArtifactValidation()

        for requirement in requirements:
            artifact = artifacts.get(requirement.artifact_type)
            if artifact is None:
                validation.blocked[requirement.destination] = (
                    f"no {requirement.artifact_type.value.upper()} was produced"
                )
            elif requirement.requires_signing and not artifact.is_signed:
                validation.blocked[requirement.destination] = (
                    f"requires a signed {requirement.artifact_type.value.upper()}"
                )
            else:
                validation.deployable.append(requirement.destination)

        for destination, reason in validation.blocked.items():
            logger.warning(f"{destination.value} cannot be deployed: {reason}")

        return validation
