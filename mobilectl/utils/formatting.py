"""Formatting utilities for display"""

from pathlib import Path
from typing import Optional, Union


def format_size(size_bytes: Union[int, float]) -> str:
    """Format byte size to human readable format

    Examples:
        >>> format_size(1024)
        '1.0 KB'
        >>> format_size(52428800)
        '50.0 MB'
    """
    if size_bytes < 0:
        return "Invalid size"

    size = float(size_bytes)
    for unit in ('B', 'KB', 'MB', 'GB'):
        if size < 1024:
            return f"{int(size)} B" if unit == 'B' else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human readable format

    Examples:
        >>> format_duration(0.25)
        '250ms'
        >>> format_duration(95)
        '1m 35s'
    """
    if seconds < 0:
        return "Invalid duration"
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m"


def format_path(path: Optional[Union[str, Path]], base_dir: Optional[Path] = None) -> str:
    """Show a path relative to the project when possible"""
    if not path:
        return "-"
    path = Path(path)
    if base_dir is not None:
        try:
            return str(path.resolve().relative_to(Path(base_dir).resolve()))
        except ValueError:
            pass
    return str(path)
