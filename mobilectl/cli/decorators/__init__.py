# mobilectl/cli/decorators/__init__.py

"""CLI decorators"""

from .config import config_required

__all__ = [
    'config_required',
]
