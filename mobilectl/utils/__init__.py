# mobilectl/utils/__init__.py

"""Utility functions for mobilectl"""

from .async_utils import run_async, gather_isolated, with_timeout
from .process_utils import ProcessResult, CommandRunner, run_command, mask_command
from .git_utils import (
    run_git,
    is_git_repository,
    get_current_branch,
    get_remote_url,
    get_latest_tag,
    get_tag_date,
    list_tags,
    sort_tags,
    create_tag,
    remote_to_web_url,
    get_git_info,
)
from .version_utils import (
    is_valid_version,
    is_bump_level,
    compare_versions,
    sort_versions,
    suggest_bump_level,
    detect_app_version,
)
from .formatting import format_size, format_duration, format_path

__all__ = [
    # Async
    'run_async',
    'gather_isolated',
    'with_timeout',

    # Processes
    'ProcessResult',
    'CommandRunner',
    'run_command',
    'mask_command',

    # Git
    'run_git',
    'is_git_repository',
    'get_current_branch',
    'get_remote_url',
    'get_latest_tag',
    'get_tag_date',
    'list_tags',
    'sort_tags',
    'create_tag',
    'remote_to_web_url',
    'get_git_info',

    # Versions
    'is_valid_version',
    'is_bump_level',
    'compare_versions',
    'sort_versions',
    'suggest_bump_level',
    'detect_app_version',

    # Formatting
    'format_size',
    'format_duration',
    'format_path',
]
