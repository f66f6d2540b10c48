# mobilectl/destinations/base.py

"""Destination client abstract base class"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..constants import DestinationType, Platform
from ..models.deploy import UploadResult
from ..utils.process_utils import CommandRunner, run_command


class DestinationClient(ABC):
    """Uploads a built artifact to one distribution service"""

    destination: DestinationType
    platform: Platform
    #: Accepted artifact extensions, without the dot
    accepted_types: Tuple[str, ...] = ()
    #: Config keys that must be non-empty
    required_keys: Tuple[str, ...] = ()

    def __init__(self, config: Dict[str, Any] = None, runner: Optional[CommandRunner] = None):
        """
        Initialize destination client

        Args:
            config: Destination-specific configuration
            runner: Coroutine used to run external commands
        """
        self.config = config or {}
        self.runner = runner or run_command

    @property
    def name(self) -> str:
        return self.destination.value

    @property
    def base_dir(self) -> Path:
        return Path(self.config.get('base_dir') or Path.cwd())

    def resolve_path(self, value: Optional[str]) -> Optional[Path]:
        """Resolve a configured path against the project root"""
        if not value:
            return None
        path = Path(value).expanduser()
        return path if path.is_absolute() else self.base_dir / path

    def validate_config(self) -> List[str]:
        """
        Check configuration before any upload

        Returns:
            Problems found; empty when the client is usable
        """
        return [f"{key} is required" for key in self.required_keys if not self.config.get(key)]

    def validate_file(self, artifact_file: Union[str, Path]) -> Optional[str]:
        """
        Check an artifact before uploading it

        Returns:
            Problem description, or None when the file is acceptable
        """
        path = Path(artifact_file)
        if not path.exists():
            return f"Artifact not found: {path}"
        if not path.is_file():
            return f"Artifact is not a file: {path}"
        if path.stat().st_size == 0:
            return f"Artifact is empty: {path}"
        extension = path.suffix.lower().lstrip('.')
        if self.accepted_types and extension not in self.accepted_types:
            accepted = ", ".join(f".{ext}" for ext in self.accepted_types)
            return f"{self.name} accepts {accepted} artifacts, got {path.name}"
        return None

    @abstractmethod
    async def upload(self,
                     artifact_file: Union[str, Path],
                     release_notes: Optional[str] = None,
                     test_groups: Optional[List[str]] = None) -> UploadResult:
        """
        Upload an artifact

        Args:
            artifact_file: Signed artifact
            release_notes: Notes shown to testers
            test_groups: Tester groups to notify

        Returns:
            UploadResult
        """
        pass
