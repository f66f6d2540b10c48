# mobilectl/cli/main.py

"""Main CLI entry point for mobilectl"""

import sys
import logging
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, LOG_FORMAT
from ..core import ConfigLoader, ConfigValidator
from ..models import Config, ValidationResult

# Import all commands
from .commands import (
    build,
    deploy,
    version,
    changelog,
    info,
)

console = Console()

# Groups that show their help when called without a subcommand
COMMAND_GROUPS = ('version', 'changelog')


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ],
        force=True,
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiofiles").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy configuration loading

    The configuration is only read when a command asks for it, so
    commands such as ``--help`` work without a project.
    """

    def __init__(self, base_dir: Optional[Path] = None, config_path: Optional[str] = None):
        self.base_dir: Path = Path(base_dir or Path.cwd()).resolve()
        self.config_path = config_path
        self.verbose: bool = False
        self.debug: bool = False
        self.dry_run: bool = False
        self._loader: Optional[ConfigLoader] = None
        self._config: Optional[Config] = None

    @property
    def loader(self) -> ConfigLoader:
        if self._loader is None:
            self._loader = ConfigLoader(self.base_dir, self.config_path)
        return self._loader

    @property
    def config(self) -> Config:
        """Loaded configuration (lazy loading)

        Raises:
            ConfigError: Configuration file could not be read
        """
        if self._config is None:
            self._config = self.loader.load()
        return self._config

    def validate(self) -> ValidationResult:
        """Validate the loaded configuration against the project"""
        return ConfigValidator().validate(self.config, self.base_dir)

    @property
    def show_traceback(self) -> bool:
        return self.verbose or self.debug


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('--dry-run', is_flag=True, help='Show what would happen without changing anything')
@click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False),
              help='Configuration file (default: mobileops.yml)')
@click.option('-C', '--dir', 'base_dir', type=click.Path(exists=True, file_okay=False),
              help='Project directory (default: current directory)')
@click.version_option(__version__, prog_name=APP_NAME)
@click.pass_context
def cli(ctx, verbose, debug, dry_run, config_path, base_dir):
    """mobilectl - Build, sign and ship mobile apps

    Reads mobileops.yml from the project directory and drives Gradle,
    Xcode, the signing tools and the distribution services from one
    declarative pipeline.

    Version bumps and changelogs are generated from the same
    configuration and the git history.
    """
    setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context(base_dir=Path(base_dir) if base_dir else None, config_path=config_path)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug
    ctx.obj.dry_run = dry_run


# Register commands
cli.add_command(build.build)
cli.add_command(deploy.deploy)
cli.add_command(version.version)
cli.add_command(changelog.changelog)
cli.add_command(info.info)


def _needs_help(argv: Tuple[str, ...]) -> bool:
    """Whether the arguments stop at a command group"""
    return len(argv) == 1 and argv[0] in COMMAND_GROUPS


def main():
    """Main entry point for the CLI application

    This function handles:
    - Help for command groups called without a subcommand
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        if _needs_help(tuple(sys.argv[1:])):
            sys.argv.append('--help')

        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--verbose' in sys.argv or '-v' in sys.argv or '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
