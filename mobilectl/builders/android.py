"""Android builds through Gradle"""

import logging
import shutil
import time
from pathlib import Path
from typing import Dict, List, Optional

from ..constants import ArtifactType, Platform
from ..models.build import BuildOutput
from ..models.config import Config
from ..signing.orchestrator import SigningOrchestrator
from ..utils.process_utils import CommandRunner
from .artifacts import ArtifactInfo, ArtifactStrategy, ArtifactValidator
from .base import PlatformBuilder

logger = logging.getLogger(__name__)

_OUTPUT_DIRS = {
    ArtifactType.APK: "apk",
    ArtifactType.AAB: "bundle",
}


def gradle_command(project_dir: Path) -> str:
    """Prefer the project's wrapper over a system Gradle"""
    for name in ("gradlew", "gradlew.bat"):
        wrapper = project_dir / name
        if wrapper.is_file():
            return str(wrapper)
    return shutil.which("gradle") or "gradle"


def find_artifact(project_dir: Path, artifact_type: ArtifactType,
                  since: Optional[float] = None) -> Optional[Path]:
    """
    Newest artifact of a type under any ``build/outputs`` directory

    Args:
        project_dir: Gradle project root
        artifact_type: APK or AAB
        since: Ignore files modified before this timestamp

    Returns:
        Path or None
    """
    pattern = f"build/outputs/{_OUTPUT_DIRS[artifact_type]}/**/*.{artifact_type.value}"
    candidates = list(project_dir.glob(pattern)) + list(project_dir.glob(f"*/{pattern}"))
    candidates = [path for path in candidates if path.is_file()]
    if since is not None:
        candidates = [path for path in candidates if path.stat().st_mtime >= since]
    if not candidates:
        return None
    return max(candidates, key=lambda path: path.stat().st_mtime)


class AndroidBuilder(PlatformBuilder):
    """Build, sign and check Android artifacts"""

    platform = Platform.ANDROID

    def __init__(self,
                 runner: Optional[CommandRunner] = None,
                 signing_orchestrator: Optional[SigningOrchestrator] = None,
                 artifact_strategy: Optional[ArtifactStrategy] = None,
                 artifact_validator: Optional[ArtifactValidator] = None):
        super().__init__(runner)
        self.signing_orchestrator = signing_orchestrator or SigningOrchestrator()
        self.artifact_strategy = artifact_strategy or ArtifactStrategy()
        self.artifact_validator = artifact_validator or ArtifactValidator()

    async def build(self, base_dir: Path, config: Config) -> BuildOutput:
        start = time.monotonic()
        try:
            return await self._build(Path(base_dir), config, start)
        except Exception as e:
            logger.error(f"Android build failed: {e}")
            return BuildOutput.failed(self.platform, str(e), time.monotonic() - start)

    async def _build(self, base_dir: Path, config: Config, start: float) -> BuildOutput:
        android = config.build.android
        project_dir = base_dir / android.project_path
        requirements = self.artifact_strategy.requirements(config)
        gradle = gradle_command(project_dir)
        properties = [f"-P{key}={value}" for key, value in android.gradle_properties.items()]

        warnings: List[str] = []
        artifacts: Dict[ArtifactType, ArtifactInfo] = {}

        for artifact_type in self.artifact_strategy.artifact_types(requirements):
            # Computed now so flavor and type overrides are honored
            task = android.gradle_task(artifact_type)
            logger.info(f"Running Gradle task {task}")

            task_start = time.time()
            result = await self.runner([gradle, task] + properties, cwd=project_dir)
            if not result.success:
                return BuildOutput.failed(
                    self.platform,
                    f"Gradle task {task} failed: {result.error_summary()}",
                    time.monotonic() - start,
                )

            path = find_artifact(project_dir, artifact_type, since=task_start - 1)
            if path is None:
                return BuildOutput.failed(
                    self.platform,
                    f"No {artifact_type.value.upper()} produced by {task}",
                    time.monotonic() - start,
                )

            signing = await self.signing_orchestrator.sign_artifact(path, config, base_dir)
            warnings.extend(signing.warnings)
            if signing.success:
                artifacts[artifact_type] = ArtifactInfo(
                    path=Path(signing.output_path or path),
                    artifact_type=artifact_type,
                    is_signed=signing.is_signed,
                )
            else:
                warnings.append(f"{path.name} left unsigned: {signing.error}")
                artifacts[artifact_type] = ArtifactInfo(path, artifact_type, is_signed=False)

        validation = self.artifact_validator.validate(artifacts, requirements)
        warnings.extend(validation.warnings())
        if not validation.is_deployable:
            return BuildOutput(
                success=False,
                platform=self.platform,
                warnings=warnings,
                error="No deployable artifacts: " + "; ".join(validation.warnings()),
                duration=time.monotonic() - start,
            )

        primary_type = next(
            requirement.artifact_type for requirement in requirements
            if requirement.destination in validation.deployable
        )
        primary = artifacts[primary_type]

        return BuildOutput(
            success=True,
            platform=self.platform,
            output_path=str(primary.path),
            warnings=warnings,
            is_signed=primary.is_signed,
            duration=time.monotonic() - start,
            artifacts={
                artifact_type.value: str(info.path) for artifact_type, info in artifacts.items()
            },
        )
