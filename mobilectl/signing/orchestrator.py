"""Signing credential resolution and dispatch"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from ..constants import (
    ENV_KEY_ALIAS,
    ENV_KEY_PASSWORD,
    ENV_KEYSTORE,
    ENV_PLACEHOLDER_PATTERN,
    ENV_STORE_PASSWORD,
)
from ..models.config import Config
from ..models.signing import SigningConfig, SigningResult, SigningValidation
from .aab import AabSigner
from .apk import ApkSigner
from .base import ArtifactSigner

logger = logging.getLogger(__name__)

MSG_NOT_CONFIGURED = "Keystore not configured"
MSG_PASSWORDS_MISSING = "Keystore passwords not set (use environment variables)"
MSG_INLINE_PASSWORDS = "Keystore passwords are stored in the config file; prefer environment variables"


def _value(raw: Optional[str]) -> str:
    """Treat blanks and unexpanded ``${VAR}`` placeholders as unset"""
    raw = (raw or "").strip()
    if ENV_PLACEHOLDER_PATTERN.match(raw):
        return ""
    return raw


class SigningOrchestrator:
    """Validate signing credentials and hand artifacts to the right signer"""

    def __init__(self, signers: Optional[Dict[str, ArtifactSigner]] = None):
        """
        Args:
            signers: Signer per extension (``apk``, ``aab``)
        """
        if signers is None:
            signers = {"apk": ApkSigner(), "aab": AabSigner()}
        self.signers = signers

    def validate(self, config: Config, base_dir: Union[str, Path]) -> SigningValidation:
        """
        Resolve and check credentials without side effects

        Keystore and alias come from config, then ``MOBILECTL_KEYSTORE`` and
        ``MOBILECTL_KEY_ALIAS``. Passwords come from config, then, when
        ``use_env_for_passwords`` is set, from ``MOBILECTL_KEY_PASSWORD`` and
        ``MOBILECTL_STORE_PASSWORD``.

        Args:
            config: Pipeline configuration
            base_dir: Project root used for relative keystore paths

        Returns:
            SigningValidation
        """
        android = config.build.android
        keystore = _value(android.key_store) or _value(config.getenv(ENV_KEYSTORE))
        alias = _value(android.key_alias) or _value(config.getenv(ENV_KEY_ALIAS))

        if not keystore or not alias:
            return SigningValidation(is_valid=False, reason=MSG_NOT_CONFIGURED)

        keystore_path = Path(keystore).expanduser()
        if not keystore_path.is_absolute():
            keystore_path = Path(base_dir) / keystore_path
        if not keystore_path.is_file():
            return SigningValidation(
                is_valid=False,
                reason=f"Keystore file not found: {keystore_path}"
            )

        warnings = []
        key_password = _value(android.key_password)
        store_password = _value(android.store_password)
        if key_password or store_password:
            warnings.append(MSG_INLINE_PASSWORDS)

        if android.use_env_for_passwords:
            key_password = key_password or _value(config.getenv(ENV_KEY_PASSWORD))
            store_password = store_password or _value(config.getenv(ENV_STORE_PASSWORD))

        if not key_password or not store_password:
            return SigningValidation(is_valid=False, reason=MSG_PASSWORDS_MISSING, warnings=warnings)

        return SigningValidation(
            is_valid=True,
            config=SigningConfig(
                keystore_path=str(keystore_path),
                key_alias=alias,
                key_password=key_password,
                store_password=store_password,
            ),
            warnings=warnings,
        )

    def is_signing_available(self, config: Config, base_dir: Union[str, Path]) -> bool:
        """Whether credentials are complete; does not touch any artifact"""
        return self.validate(config, base_dir).is_valid

    def signer_for(self, artifact_path: Union[str, Path]) -> Optional[ArtifactSigner]:
        return self.signers.get(Path(artifact_path).suffix.lower().lstrip('.'))

    async def sign_artifact(self, artifact_path: Union[str, Path], config: Config,
                            base_dir: Union[str, Path]) -> SigningResult:
        """
        Sign an artifact with the signer for its extension

        An incomplete signing setup is not fatal: the artifact is reported
        unsigned with the reason as a warning.

        Args:
            artifact_path: APK or AAB
            config: Pipeline configuration
            base_dir: Project root

        Returns:
            SigningResult
        """
        artifact_path = Path(artifact_path)
        signer = self.signer_for(artifact_path)
        if signer is None:
            return SigningResult(success=False, error=f"Unknown artifact type: {artifact_path}")

        validation = self.validate(config, base_dir)
        if not validation.is_valid:
            logger.warning(f"Skipping signing of {artifact_path.name}: {validation.reason}")
            return SigningResult(
                success=True,
                is_signed=False,
                output_path=str(artifact_path),
                warnings=list(validation.warnings) + [validation.reason],
            )

        try:
            result = await signer.sign(artifact_path, validation.config, Path(base_dir))
        except Exception as e:
            logger.error(f"Signing {artifact_path.name} failed: {e}")
            return SigningResult(success=False, error=f"Signing failed: {e}")

        result.warnings = list(validation.warnings) + list(result.warnings)
        if result.success:
            logger.info(f"Signed {Path(result.output_path or artifact_path).name}")
        else:
            logger.error(f"Signing {artifact_path.name} failed: {result.error}")
        return result
