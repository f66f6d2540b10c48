"""Signing models"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class SigningConfig:
    """Resolved keystore credentials

    Passwords are resolved at validation time and never written back to
    configuration files or results.
    """

    keystore_path: str
    key_alias: str
    key_password: str = field(repr=False)
    store_password: str = field(repr=False)


@dataclass(frozen=True)
class SigningValidation:
    """Outcome of checking whether signing can be attempted"""

    is_valid: bool
    reason: str = ""
    config: Optional[SigningConfig] = None
    warnings: List[str] = field(default_factory=list)


@dataclass
class SigningResult:
    """Outcome of signing one artifact"""

    success: bool
    is_signed: bool = False
    output_path: Optional[str] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "is_signed": self.is_signed,
            "output_path": self.output_path,
            "error": self.error,
            "warnings": list(self.warnings),
        }
