# mobilectl/cli/decorators/config.py

"""Configuration decorator for CLI commands"""

from functools import wraps
from typing import Callable

import click

from ..utils.output import console, print_validation
from ...api.exceptions import MobileCtlError
from ...constants import EMOJI_ERROR


def config_required(validate: bool = False) -> Callable:
    """Decorator that loads ``mobileops.yml`` before the command runs

    The loaded configuration is available as ``ctx.obj.config``.

    Args:
        validate: Stop with exit code 1 when validation reports errors;
            otherwise errors and warnings are only printed

    Returns:
        Decorator
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            ctx = click.get_current_context()
            obj = ctx.obj

            try:
                obj.config
            except MobileCtlError as e:
                console.print(f"{EMOJI_ERROR} [red]Failed to load configuration: {e}[/red]")
                ctx.exit(1)

            result = obj.validate()
            if result.issues:
                print_validation(result)
            if validate and not result.is_valid:
                console.print(
                    f"{EMOJI_ERROR} [red]Configuration has {len(result.errors)} error(s); "
                    f"fix them and retry[/red]"
                )
                ctx.exit(1)

            return func(*args, **kwargs)

        return wrapper

    return decorator
