"""Deploy command implementation"""

import sys

import click
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from ..decorators import config_required
from ..utils.output import format_pipeline_result
from .build import PLATFORM_CHOICES, parse_platforms
from ...api.exceptions import MobileCtlError
from ...constants import EMOJI_ROCKET
from ...destinations import DestinationFactory
from ...services import BuildOrchestrator, DeployOrchestrator, ReleasePipeline, resolve_flavors
from ...utils.async_utils import run_async

console = Console()


def split_list(value):
    """Comma separated option value as a list"""
    if not value:
        return None
    return [item.strip() for item in value.split(',') if item.strip()]


@click.command()
@click.argument('platform', required=False, type=click.Choice(PLATFORM_CHOICES))
@click.argument('destination', required=False)
@click.option('--release-notes', '-n', help='Release notes shown to testers')
@click.option('--test-groups', '-g', help='Comma separated tester groups')
@click.option('--skip-build', is_flag=True, help='Deploy the existing artifact without building')
@click.option('--flavor-group', help='Release every flavor of a group from deploy.flavor_groups')
@click.option('--all-flavors', is_flag=True, help='Release every flavor in build.android.flavors')
@click.option('--timeout', type=float, help='Seconds allowed per destination')
@click.option('-y', '--yes', is_flag=True, help='Skip confirmation prompt')
@click.pass_context
@config_required(validate=True)
def deploy(ctx, platform, destination, release_notes, test_groups, skip_build,
           flavor_group, all_flavors, timeout, yes):
    """Build and ship artifacts to their destinations

    DESTINATION is one or more of firebase, play-console, local,
    testflight and app-store separated by commas. Without it every
    destination enabled under deploy.<platform> receives the artifact.

    Examples:

        # Build and deploy everything that is enabled
        mobilectl deploy

        # Android to Firebase only, for two tester groups
        mobilectl deploy android firebase -g qa-team,beta

        # Ship an existing build
        mobilectl deploy android play-console --skip-build

        # One build and upload per flavor of a group
        mobilectl deploy android --flavor-group production
    """
    obj = ctx.obj
    try:
        config = obj.config
        destinations = split_list(destination)
        if destinations:
            for name in destinations:
                DestinationFactory.parse(name)
        flavors = resolve_flavors(config, flavor_group, all_flavors)
        groups = split_list(test_groups)

        if not yes and not obj.dry_run:
            table = Table(title="Deployment", show_header=False)
            table.add_column("Property", style="cyan")
            table.add_column("Value")
            table.add_row("App", config.app.name or config.app.identifier or "-")
            table.add_row("Version", config.version.current)
            table.add_row("Platform", platform or "all enabled")
            table.add_row("Destinations", ", ".join(destinations) if destinations else "all enabled")
            if flavors:
                table.add_row("Flavors", ", ".join(flavors))
            table.add_row("Build", "skip" if skip_build else "yes")
            console.print(table)

            if not Confirm.ask("\n[cyan]Proceed with deployment?[/cyan]"):
                console.print("[yellow]Deployment cancelled[/yellow]")
                return

        build_orchestrator = BuildOrchestrator(base_dir=obj.base_dir)
        pipeline = ReleasePipeline(
            build_orchestrator=build_orchestrator,
            deploy_orchestrator=DeployOrchestrator(timeout=timeout, base_dir=obj.base_dir),
        )

        console.print(f"\n{EMOJI_ROCKET} [cyan]Deploying...[/cyan]")
        result = run_async(pipeline.run(
            config,
            platforms=parse_platforms(platform),
            destinations=destinations,
            flavors=flavors,
            skip_build=skip_build,
            dry_run=obj.dry_run,
            release_notes=release_notes,
            test_groups=groups,
        ))

        format_pipeline_result(result, obj.base_dir)

        if not result.success:
            sys.exit(1)

    except MobileCtlError as e:
        console.print(f"[red]Error: {e}[/red]")
        if obj.show_traceback:
            console.print_exception()
        sys.exit(1)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if obj.show_traceback:
            console.print_exception()
        sys.exit(1)
