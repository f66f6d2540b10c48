"""Validation result models"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Severity(Enum):
    """Issue severity"""
    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationIssue:
    """Single validation finding"""

    field: str
    message: str
    severity: Severity = Severity.ERROR
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        text = f"{self.field}: {self.message}"
        if self.suggestion:
            text += f" ({self.suggestion})"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "field": self.field,
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.suggestion:
            data["suggestion"] = self.suggestion
        return data


@dataclass
class ValidationResult:
    """Validation result container

    Collects every issue instead of stopping at the first one, so a user
    can fix a configuration in one pass.
    """

    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == Severity.WARNING]

    @property
    def is_valid(self) -> bool:
        """True when there are no errors; warnings do not count"""
        return not self.errors

    def add_error(self, field_name: str, message: str,
                  suggestion: Optional[str] = None) -> None:
        """Add error issue"""
        self.issues.append(ValidationIssue(field_name, message, Severity.ERROR, suggestion))

    def add_warning(self, field_name: str, message: str,
                    suggestion: Optional[str] = None) -> None:
        """Add warning issue"""
        self.issues.append(ValidationIssue(field_name, message, Severity.WARNING, suggestion))

    def merge(self, other: 'ValidationResult') -> None:
        """Merge another result into this one"""
        self.issues.extend(other.issues)

    def __bool__(self) -> bool:
        return self.is_valid

    def __str__(self) -> str:
        lines = []

        if self.errors:
            lines.append("Errors:")
            for error in self.errors:
                lines.append(f"  ✗ {error}")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  ⚠ {warning}")

        if not self.issues:
            lines.append("✓ All validations passed")

        return '\n'.join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "is_valid": self.is_valid,
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
        }
