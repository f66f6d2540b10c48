# mobilectl/models/build.py

"""Build result models"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import Platform


@dataclass(frozen=True)
class BuildOutput:
    """Outcome of building one platform"""

    success: bool
    platform: Platform
    output_path: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None
    is_signed: bool = False
    duration: float = 0.0
    artifacts: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def failed(cls, platform: Platform, error: str, duration: float = 0.0) -> 'BuildOutput':
        return cls(success=False, platform=platform, error=error, duration=duration)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "platform": self.platform.value,
            "output_path": self.output_path,
            "warnings": list(self.warnings),
            "error": self.error,
            "is_signed": self.is_signed,
            "duration": self.duration,
            "artifacts": dict(self.artifacts),
        }


@dataclass
class BuildResult:
    """Aggregate build result across platforms"""

    outputs: List[BuildOutput] = field(default_factory=list)
    message: str = ""
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """All outputs succeeded; an empty result is never a success"""
        return bool(self.outputs) and all(output.success for output in self.outputs)

    @property
    def total_duration(self) -> float:
        return sum(output.duration for output in self.outputs)

    @property
    def failed_outputs(self) -> List[BuildOutput]:
        return [output for output in self.outputs if not output.success]

    def output_for(self, platform: Platform) -> Optional[BuildOutput]:
        """Output produced for a platform, if any"""
        for output in self.outputs:
            if output.platform == platform:
                return output
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "message": self.message,
            "error": self.error,
            "total_duration": self.total_duration,
            "outputs": [output.to_dict() for output in self.outputs],
        }
