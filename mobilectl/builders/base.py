# mobilectl/builders/base.py

"""Platform builder abstract base class"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..constants import Platform
from ..models.build import BuildOutput
from ..models.config import Config
from ..utils.process_utils import CommandRunner, run_command


class PlatformBuilder(ABC):
    """Produces one platform's artifact with an external toolchain"""

    platform: Platform

    def __init__(self, runner: Optional[CommandRunner] = None):
        """
        Initialize builder

        Args:
            runner: Coroutine used to run external commands
        """
        self.runner = runner or run_command

    @abstractmethod
    async def build(self, base_dir: Path, config: Config) -> BuildOutput:
        """
        Build the platform artifact

        Implementations report every failure through the returned
        BuildOutput instead of raising.

        Args:
            base_dir: Project root
            config: Pipeline configuration

        Returns:
            BuildOutput
        """
        pass
