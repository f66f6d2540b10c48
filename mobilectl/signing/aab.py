"""App bundle signing with jarsigner"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from ..models.signing import SigningConfig, SigningResult
from ..utils.process_utils import CommandRunner
from .base import KEY_PASSWORD_ENV, KEYSTORE_PASSWORD_ENV, ArtifactSigner

logger = logging.getLogger(__name__)


class AabSigner(ArtifactSigner):
    """Sign AABs in place with ``jarsigner`` and verify the result"""

    extension = "aab"

    def __init__(self, runner: Optional[CommandRunner] = None, jarsigner: Optional[str] = None):
        super().__init__(runner)
        self.jarsigner = jarsigner or shutil.which("jarsigner") or "jarsigner"

    async def sign(self, artifact_path: Path, signing_config: SigningConfig,
                   base_dir: Path) -> SigningResult:
        artifact_path = Path(artifact_path)
        secrets = self.secrets(signing_config)

        logger.info(f"Signing {artifact_path.name}")
        result = await self.runner([
            self.jarsigner,
            "-verbose",
            "-sigalg", "SHA256withRSA",
            "-digestalg", "SHA-256",
            "-keystore", signing_config.keystore_path,
            "-storepass:env", KEYSTORE_PASSWORD_ENV,
            "-keypass:env", KEY_PASSWORD_ENV,
            str(artifact_path),
            signing_config.key_alias,
        ], cwd=base_dir, env={
            KEYSTORE_PASSWORD_ENV: signing_config.store_password,
            KEY_PASSWORD_ENV: signing_config.key_password,
        }, secrets=secrets)

        if not result.success:
            return SigningResult(success=False, error=f"jarsigner failed: {result.error_summary()}")

        verify = await self.runner(
            [self.jarsigner, "-verify", "-verbose", "-certs", str(artifact_path)],
            cwd=base_dir,
        )
        if not verify.success or "jar verified" not in verify.output:
            return SigningResult(
                success=False,
                error=f"Signature verification failed: {verify.error_summary()}"
            )

        warnings = []
        if "Warning:" in verify.output:
            warnings.append("jarsigner reported warnings during verification")

        return SigningResult(
            success=True,
            is_signed=True,
            output_path=str(artifact_path),
            warnings=warnings,
        )
