# mobilectl/destinations/firebase.py

"""Firebase App Distribution through the firebase CLI"""

import json
import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from ..constants import DestinationType, ENV_GOOGLE_CREDENTIALS, Platform
from ..models.deploy import UploadResult
from .base import DestinationClient

logger = logging.getLogger(__name__)

_CONSOLE_URL = re.compile(r"https://console\.firebase\.google\.com/\S+")
_RELEASE_ID = re.compile(r"/releases/([\w-]+)")


def app_id_from_google_services(path: Path, package_name: Optional[str] = None) -> Optional[str]:
    """
    Read the Firebase app id from ``google-services.json``

    Args:
        path: google-services.json
        package_name: Android package to match; the first client otherwise

    Returns:
        ``mobilesdk_app_id`` or None
    """
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except ValueError as e:
        logger.warning(f"Unreadable {path}: {e}")
        return None

    for client in data.get('client', []):
        info = client.get('client_info', {})
        client_package = info.get('android_client_info', {}).get('package_name')
        if package_name is None or client_package == package_name:
            return info.get('mobilesdk_app_id')
    return None


class FirebaseClient(DestinationClient):
    """Distribute APKs and AABs to Firebase tester groups"""

    destination = DestinationType.FIREBASE
    platform = Platform.ANDROID
    accepted_types = ("apk", "aab")
    required_keys = ("service_account",)

    def app_id(self) -> Optional[str]:
        if self.config.get('app_id'):
            return self.config['app_id']
        google_services = self.resolve_path(self.config.get('google_services') or "app/google-services.json")
        return app_id_from_google_services(google_services, self.config.get('package_name'))

    def validate_config(self) -> List[str]:
        errors = super().validate_config()
        service_account = self.resolve_path(self.config.get('service_account'))
        if service_account is not None and not service_account.is_file():
            errors.append(f"Service account not found: {service_account}")
        if not self.app_id():
            errors.append("Firebase app id not set and not found in google-services.json")
        return errors

    async def upload(self,
                     artifact_file: Union[str, Path],
                     release_notes: Optional[str] = None,
                     test_groups: Optional[List[str]] = None) -> UploadResult:
        problem = self.validate_file(artifact_file)
        if problem:
            return UploadResult(success=False, error=problem)

        groups = test_groups if test_groups is not None else self.config.get('test_groups') or []
        notes = release_notes or self.config.get('release_notes')

        command = [
            self.config.get('firebase_cli', "firebase"),
            "appdistribution:distribute", str(artifact_file),
            "--app", self.app_id(),
        ]
        if groups:
            command += ["--groups", ",".join(groups)]
        if notes:
            command += ["--release-notes", notes]

        env = {ENV_GOOGLE_CREDENTIALS: str(self.resolve_path(self.config['service_account']))}
        logger.info(f"Uploading {Path(artifact_file).name} to Firebase App Distribution")
        result = await self.runner(command, cwd=self.base_dir, env=env,
                                   timeout=self.config.get('timeout'))

        if not result.success:
            return UploadResult(success=False, error=f"firebase CLI failed: {result.error_summary()}")

        url_match = _CONSOLE_URL.search(result.output)
        build_url = url_match.group(0) if url_match else None
        id_match = _RELEASE_ID.search(build_url or "")

        message = "Uploaded to Firebase App Distribution"
        if groups:
            message += f" for {', '.join(groups)}"
        return UploadResult(
            success=True,
            message=message,
            build_id=id_match.group(1) if id_match else None,
            build_url=build_url,
        )
