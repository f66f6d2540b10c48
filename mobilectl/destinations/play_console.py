"""Google Play Console uploads through fastlane supply"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from ..constants import DestinationType, Platform
from ..models.deploy import UploadResult
from .base import DestinationClient

logger = logging.getLogger(__name__)

_VERSION_CODE = re.compile(r"version code[:\s]+(\d+)", re.IGNORECASE)


class PlayConsoleClient(DestinationClient):
    """Upload signed app bundles to a Play track"""

    destination = DestinationType.PLAY_CONSOLE
    platform = Platform.ANDROID
    accepted_types = ("aab",)
    required_keys = ("service_account", "package_name")

    def validate_config(self) -> List[str]:
        errors = super().validate_config()
        service_account = self.resolve_path(self.config.get('service_account'))
        if service_account is not None and not service_account.is_file():
            errors.append(f"Service account not found: {service_account}")
        return errors

    async def upload(self,
                     artifact_file: Union[str, Path],
                     release_notes: Optional[str] = None,
                     test_groups: Optional[List[str]] = None) -> UploadResult:
        problem = self.validate_file(artifact_file)
        if problem:
            return UploadResult(success=False, error=problem)

        track = self.config.get('track') or "internal"
        package_name = self.config['package_name']
        command = [
            self.config.get('fastlane', "fastlane"), "supply",
            "--aab", str(artifact_file),
            "--json_key", str(self.resolve_path(self.config['service_account'])),
            "--package_name", package_name,
            "--track", track,
            "--skip_upload_metadata", "true",
            "--skip_upload_images", "true",
            "--skip_upload_screenshots", "true",
        ]

        logger.info(f"Uploading {Path(artifact_file).name} to Play Console ({track})")
        result = await self.runner(command, cwd=self.base_dir, timeout=self.config.get('timeout'))

        if not result.success:
            return UploadResult(success=False, error=f"fastlane supply failed: {result.error_summary()}")

        code = _VERSION_CODE.search(result.output)
        return UploadResult(
            success=True,
            message=f"Uploaded {package_name} to the {track} track",
            build_id=code.group(1) if code else None,
        )
