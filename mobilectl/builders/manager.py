"""Concurrent per-platform builds"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..constants import Platform
from ..models.build import BuildOutput, BuildResult
from ..models.config import Config
from ..utils.async_utils import gather_isolated
from ..utils.process_utils import CommandRunner
from .android import AndroidBuilder
from .base import PlatformBuilder
from .ios import IosBuilder

logger = logging.getLogger(__name__)


def default_builders(runner: Optional[CommandRunner] = None) -> Dict[Platform, PlatformBuilder]:
    """Builder per platform"""
    return {
        Platform.ANDROID: AndroidBuilder(runner=runner),
        Platform.IOS: IosBuilder(runner=runner),
    }


class BuildManager:
    """Run platform builders side by side"""

    def __init__(self, builders: Optional[Dict[Platform, PlatformBuilder]] = None):
        self.builders = builders if builders is not None else default_builders()

    async def build(self, platforms: Iterable[Platform], config: Config,
                    base_dir: Path) -> BuildResult:
        """
        Build every platform concurrently

        A builder that raises is recorded as that platform's failed output;
        sibling builds keep running.

        Args:
            platforms: Target platforms
            config: Pipeline configuration
            base_dir: Project root

        Returns:
            BuildResult with one output per platform
        """
        platforms = sorted(set(platforms), key=lambda p: p.value)
        outputs = [None] * len(platforms)
        pending = []

        for index, platform in enumerate(platforms):
            builder = self.builders.get(platform)
            if builder is None:
                outputs[index] = BuildOutput.failed(
                    platform, f"No builder registered for {platform.value}"
                )
            else:
                pending.append((index, platform, builder.build(base_dir, config)))

        results = await gather_isolated(*(coro for _, _, coro in pending))
        for (index, platform, _), result in zip(pending, results):
            if isinstance(result, BaseException):
                logger.error(f"{platform.value} builder raised: {result}")
                result = BuildOutput.failed(platform, f"Build failed: {result}")
            outputs[index] = result

        return BuildResult(outputs=outputs)
