"""TestFlight and App Store uploads through xcrun altool"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..constants import DestinationType, Platform
from ..models.deploy import UploadResult
from .base import DestinationClient

logger = logging.getLogger(__name__)

APP_STORE_CONNECT_URL = "https://appstoreconnect.apple.com/apps"


def read_api_key(path: Path) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """
    Read an App Store Connect API key description

    The JSON file holds ``key_id``, ``issuer_id`` and optionally
    ``key_filepath`` pointing at the ``.p8`` private key (camelCase keys are
    accepted too).

    Returns:
        (key_id, issuer_id, key_filepath)
    """
    data = json.loads(path.read_text(encoding='utf-8'))
    key_id = data.get('key_id') or data.get('keyId')
    issuer_id = data.get('issuer_id') or data.get('issuerId')
    key_file = data.get('key_filepath') or data.get('keyFilepath')
    return key_id, issuer_id, key_file


class AppStoreConnectClient(DestinationClient):
    """Shared altool upload for App Store Connect destinations"""

    platform = Platform.IOS
    accepted_types = ("ipa",)
    required_keys = ("api_key_path", "bundle_id")
    success_message = "Uploaded to App Store Connect"

    def validate_config(self) -> List[str]:
        errors = super().validate_config()
        key_path = self.resolve_path(self.config.get('api_key_path'))
        if key_path is None:
            return errors
        if not key_path.is_file():
            errors.append(f"API key not found: {key_path}")
            return errors
        try:
            key_id, issuer_id, _ = read_api_key(key_path)
        except ValueError as e:
            errors.append(f"API key file is not valid JSON: {e}")
            return errors
        if not key_id or not issuer_id:
            errors.append("API key file must define key_id and issuer_id")
        return errors

    async def upload(self,
                     artifact_file: Union[str, Path],
                     release_notes: Optional[str] = None,
                     test_groups: Optional[List[str]] = None) -> UploadResult:
        problem = self.validate_file(artifact_file)
        if problem:
            return UploadResult(success=False, error=problem)

        key_id, issuer_id, key_file = read_api_key(self.resolve_path(self.config['api_key_path']))
        env: Dict[str, str] = {}
        if key_file:
            env['API_PRIVATE_KEYS_DIR'] = str(self.resolve_path(key_file).parent)

        command = [
            "xcrun", "altool", "--upload-app",
            "-f", str(artifact_file),
            "-t", "ios",
            "--apiKey", key_id,
            "--apiIssuer", issuer_id,
        ]

        logger.info(f"Uploading {Path(artifact_file).name} to {self.name}")
        result = await self.runner(command, cwd=self.base_dir, env=env or None,
                                   timeout=self.config.get('timeout'))

        if not result.success or "ERROR ITMS" in result.output:
            return UploadResult(success=False, error=f"altool failed: {result.error_summary()}")

        return UploadResult(
            success=True,
            message=self.success_message,
            build_url=APP_STORE_CONNECT_URL,
        )


class TestFlightClient(AppStoreConnectClient):
    """Upload builds for TestFlight testing"""

    __test__ = False
    destination = DestinationType.TESTFLIGHT
    success_message = "Uploaded to TestFlight; the build appears after processing"


class AppStoreClient(AppStoreConnectClient):
    """Upload builds for App Store review"""

    destination = DestinationType.APP_STORE
    success_message = "Uploaded to App Store Connect; submit it for review there"
