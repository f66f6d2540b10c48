"""APK signing with apksigner"""

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Optional

from packaging.version import InvalidVersion, Version

from ..constants import ENV_ANDROID_HOME, ENV_ANDROID_SDK_ROOT
from ..models.signing import SigningConfig, SigningResult
from ..utils.process_utils import CommandRunner
from .base import KEY_PASSWORD_ENV, KEYSTORE_PASSWORD_ENV, ArtifactSigner

logger = logging.getLogger(__name__)

UNSIGNED_SUFFIX = "-unsigned.apk"


def _build_tools_key(path: Path):
    try:
        return Version(path.name)
    except InvalidVersion:
        return Version("0")


def find_apksigner() -> Optional[str]:
    """
    Locate ``apksigner``

    Checks the newest build-tools of ``ANDROID_HOME`` / ``ANDROID_SDK_ROOT``
    first, then ``PATH``.

    Returns:
        Executable path or None
    """
    for variable in (ENV_ANDROID_HOME, ENV_ANDROID_SDK_ROOT):
        sdk = os.environ.get(variable)
        if not sdk:
            continue
        build_tools = Path(sdk) / "build-tools"
        if not build_tools.is_dir():
            continue
        versions = sorted(
            (entry for entry in build_tools.iterdir() if entry.is_dir()),
            key=_build_tools_key,
            reverse=True,
        )
        for version_dir in versions:
            for name in ("apksigner", "apksigner.bat"):
                candidate = version_dir / name
                if candidate.is_file():
                    return str(candidate)

    return shutil.which("apksigner")


def signed_output_path(artifact_path: Path) -> Path:
    """``app-release-unsigned.apk`` signs to ``app-release.apk``; others in place"""
    if artifact_path.name.endswith(UNSIGNED_SUFFIX):
        return artifact_path.with_name(artifact_path.name[:-len(UNSIGNED_SUFFIX)] + ".apk")
    return artifact_path


class ApkSigner(ArtifactSigner):
    """Sign APKs with the Android SDK ``apksigner``"""

    extension = "apk"

    def __init__(self, runner: Optional[CommandRunner] = None,
                 sdk_finder: Callable[[], Optional[str]] = find_apksigner):
        super().__init__(runner)
        self.sdk_finder = sdk_finder

    async def sign(self, artifact_path: Path, signing_config: SigningConfig,
                   base_dir: Path) -> SigningResult:
        apksigner = self.sdk_finder()
        if not apksigner:
            return SigningResult(
                success=False,
                error="apksigner not found; set ANDROID_HOME or add build-tools to PATH"
            )

        artifact_path = Path(artifact_path)
        output_path = signed_output_path(artifact_path)

        command = [
            apksigner, "sign",
            "--ks", signing_config.keystore_path,
            "--ks-key-alias", signing_config.key_alias,
            "--ks-pass", f"env:{KEYSTORE_PASSWORD_ENV}",
            "--key-pass", f"env:{KEY_PASSWORD_ENV}",
        ]
        if output_path != artifact_path:
            command += ["--out", str(output_path)]
        command.append(str(artifact_path))

        logger.info(f"Signing {artifact_path.name}")
        env = {
            KEYSTORE_PASSWORD_ENV: signing_config.store_password,
            KEY_PASSWORD_ENV: signing_config.key_password,
        }
        result = await self.runner(command, cwd=base_dir, env=env,
                                   secrets=self.secrets(signing_config))

        if not result.success:
            return SigningResult(
                success=False,
                error=f"apksigner failed: {result.error_summary()}"
            )

        return SigningResult(success=True, is_signed=True, output_path=str(output_path))
