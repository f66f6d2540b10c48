# mobilectl/models/deploy.py

"""Deployment result models"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import Platform
from .build import BuildResult


@dataclass(frozen=True)
class UploadResult:
    """What a destination client reports back after an upload"""

    success: bool
    message: str = ""
    build_id: Optional[str] = None
    build_url: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class DeployResult:
    """Outcome for one platform and destination pair"""

    platform: Platform
    destination: str
    success: bool
    message: str = ""
    error: Optional[str] = None
    build_id: Optional[str] = None
    build_url: Optional[str] = None
    duration: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "platform": self.platform.value,
            "destination": self.destination,
            "success": self.success,
            "message": self.message,
            "error": self.error,
            "build_id": self.build_id,
            "build_url": self.build_url,
            "duration": self.duration,
        }


@dataclass
class DeploymentResults:
    """All destination outcomes for one platform

    Counts and the overall flag are recomputed from ``individual`` on every
    access.
    """

    platform: Platform
    individual: List[DeployResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for result in self.individual if result.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for result in self.individual if not result.success)

    @property
    def success(self) -> bool:
        return self.failure_count == 0

    @property
    def message(self) -> str:
        text = f"{self.success_count}/{len(self.individual)} successful"
        if self.failure_count:
            text += f", {self.failure_count} failed"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "platform": self.platform.value,
            "success": self.success,
            "message": self.message,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "individual": [result.to_dict() for result in self.individual],
        }


@dataclass
class PipelineResult:
    """Build and deploy outcome of a release pipeline run"""

    builds: List[BuildResult] = field(default_factory=list)
    deployments: List[DeploymentResults] = field(default_factory=list)
    flavors: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        if self.error:
            return False
        if not self.builds and not self.deployments:
            return False
        return (all(build.success for build in self.builds)
                and all(deployment.success for deployment in self.deployments))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "error": self.error,
            "flavors": list(self.flavors),
            "builds": [build.to_dict() for build in self.builds],
            "deployments": [deployment.to_dict() for deployment in self.deployments],
        }
