"""iOS builds through xcodebuild"""

import logging
import time
from pathlib import Path
from typing import List, Optional

from ..constants import Platform
from ..models.build import BuildOutput
from ..models.config import Config, IosBuildConfig
from .base import PlatformBuilder

logger = logging.getLogger(__name__)

IPA_OUTPUT_DIR = "build/outputs/ipa"


class IosBuilder(PlatformBuilder):
    """Archive and export an iOS app"""

    platform = Platform.IOS

    def archive_command(self, ios: IosBuildConfig, archive_path: Path) -> List[str]:
        command = ["xcodebuild", "archive"]
        if ios.workspace:
            command += ["-workspace", ios.workspace]
        elif ios.project:
            command += ["-project", ios.project]
        command += [
            "-scheme", ios.scheme,
            "-configuration", ios.configuration,
            "-destination", ios.destination,
            "-archivePath", str(archive_path),
        ]
        if ios.code_sign_identity:
            command.append(f"CODE_SIGN_IDENTITY={ios.code_sign_identity}")
        if ios.provisioning_profile:
            command.append(f"PROVISIONING_PROFILE_SPECIFIER={ios.provisioning_profile}")
        return command

    async def build(self, base_dir: Path, config: Config) -> BuildOutput:
        start = time.monotonic()
        try:
            return await self._build(Path(base_dir), config, start)
        except Exception as e:
            logger.error(f"iOS build failed: {e}")
            return BuildOutput.failed(self.platform, str(e), time.monotonic() - start)

    async def _build(self, base_dir: Path, config: Config, start: float) -> BuildOutput:
        ios = config.build.ios
        if not ios.scheme:
            return BuildOutput.failed(self.platform, "iOS scheme not configured")

        project_dir = base_dir / ios.project_path
        archive_path = project_dir / "build" / f"{ios.scheme}.xcarchive"

        logger.info(f"Archiving scheme {ios.scheme} ({ios.configuration})")
        result = await self.runner(self.archive_command(ios, archive_path), cwd=project_dir)
        if not result.success:
            return BuildOutput.failed(
                self.platform,
                f"xcodebuild archive failed: {result.error_summary()}",
                time.monotonic() - start,
            )

        if not ios.export_options_plist:
            return BuildOutput(
                success=True,
                platform=self.platform,
                output_path=str(archive_path),
                warnings=["export_options_plist not set; the archive was not exported to an IPA"],
                duration=time.monotonic() - start,
            )

        export_dir = project_dir / IPA_OUTPUT_DIR
        logger.info(f"Exporting archive to {export_dir}")
        result = await self.runner([
            "xcodebuild", "-exportArchive",
            "-archivePath", str(archive_path),
            "-exportPath", str(export_dir),
            "-exportOptionsPlist", ios.export_options_plist,
        ], cwd=project_dir)
        if not result.success:
            return BuildOutput.failed(
                self.platform,
                f"xcodebuild -exportArchive failed: {result.error_summary()}",
                time.monotonic() - start,
            )

        ipa = self._find_ipa(export_dir, ios.output.name)
        output_path = ipa or export_dir
        return BuildOutput(
            success=True,
            platform=self.platform,
            output_path=str(output_path),
            is_signed=True,
            duration=time.monotonic() - start,
            artifacts={"ipa": str(ipa)} if ipa else {},
        )

    @staticmethod
    def _find_ipa(export_dir: Path, preferred_name: str) -> Optional[Path]:
        preferred = export_dir / preferred_name
        if preferred.is_file():
            return preferred
        candidates = sorted(export_dir.glob("*.ipa"), key=lambda path: path.stat().st_mtime)
        return candidates[-1] if candidates else None
