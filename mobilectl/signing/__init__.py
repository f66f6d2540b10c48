# mobilectl/signing/__init__.py

"""Artifact signing"""

from .base import ArtifactSigner
from .apk import ApkSigner, find_apksigner, signed_output_path
from .aab import AabSigner
from .orchestrator import SigningOrchestrator

__all__ = [
    'ArtifactSigner',
    'ApkSigner',
    'AabSigner',
    'SigningOrchestrator',
    'find_apksigner',
    'signed_output_path',
]
