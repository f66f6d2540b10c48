"""CLI utility functions"""

from .output import (
    console,
    print_validation,
    format_build_result,
    format_deployment_results,
    format_pipeline_result,
    format_version_result,
    format_changelog_result,
    format_changelog_backups,
    format_key_values,
)

__all__ = [
    'console',
    'print_validation',
    'format_build_result',
    'format_deployment_results',
    'format_pipeline_result',
    'format_version_result',
    'format_changelog_result',
    'format_changelog_backups',
    'format_key_values',
]
