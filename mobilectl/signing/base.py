"""Artifact signer abstract base class"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..models.signing import SigningConfig, SigningResult
from ..utils.process_utils import CommandRunner, run_command

# Variables the signing tools read the passwords from
KEYSTORE_PASSWORD_ENV = "MOBILECTL_KS_PASS"
KEY_PASSWORD_ENV = "MOBILECTL_KEY_PASS"


class ArtifactSigner(ABC):
    """Signs one kind of artifact with an external tool"""

    #: File extension handled, without the dot
    extension: str = ""

    def __init__(self, runner: Optional[CommandRunner] = None):
        """
        Initialize signer

        Args:
            runner: Coroutine used to run external commands
        """
        self.runner = runner or run_command

    @abstractmethod
    async def sign(self,
                   artifact_path: Path,
                   signing_config: SigningConfig,
                   base_dir: Path) -> SigningResult:
        """
        Sign an artifact

        Args:
            artifact_path: Artifact to sign
            signing_config: Resolved keystore credentials
            base_dir: Project root

        Returns:
            SigningResult; never carries secrets
        """
        pass

    @staticmethod
    def secrets(signing_config: SigningConfig):
        """Values that must be masked in logs"""
        return (signing_config.key_password, signing_config.store_password)
