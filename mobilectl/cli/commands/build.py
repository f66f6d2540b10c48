"""Build command implementation"""

import sys

import click
from rich.console import Console

from ..decorators import config_required
from ..utils.output import format_build_result
from ...constants import EMOJI_PACKAGE, Platform
from ...services import BuildOrchestrator
from ...utils.async_utils import run_async

console = Console()

PLATFORM_CHOICES = ['android', 'ios', 'all']


def parse_platforms(value):
    """Platforms named on the command line; None lets the project decide"""
    if value is None or value == 'all':
        return None
    return [Platform(value)]


@click.command()
@click.argument('platform', required=False, type=click.Choice(PLATFORM_CHOICES))
@click.argument('flavor', required=False)
@click.argument('build_type', metavar='[TYPE]', required=False)
@click.pass_context
@config_required(validate=True)
def build(ctx, platform, flavor, build_type):
    """Build Android and iOS artifacts

    Without a PLATFORM every enabled platform found in the project is
    built. FLAVOR and TYPE override the Android defaults from
    build.android.

    Examples:

        # Build everything that is enabled
        mobilectl build

        # Android only, paid flavor, debug type
        mobilectl build android paid debug

        # Show what would be built
        mobilectl --dry-run build
    """
    obj = ctx.obj
    try:
        orchestrator = BuildOrchestrator(base_dir=obj.base_dir)

        console.print(f"{EMOJI_PACKAGE} [cyan]Building...[/cyan]")
        result = run_async(orchestrator.build(
            obj.config,
            parse_platforms(platform),
            verbose=obj.verbose,
            dry_run=obj.dry_run,
            flavor=flavor,
            build_type=build_type,
        ))

        format_build_result(result, obj.base_dir)

        if not result.success:
            sys.exit(1)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if obj.show_traceback:
            console.print_exception()
        sys.exit(1)
