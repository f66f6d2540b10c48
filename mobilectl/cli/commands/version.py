"""Version command implementation"""

import sys
from pathlib import Path

import click
from rich.console import Console

from ..decorators import config_required
from ..utils.output import format_key_values, format_version_result
from ...api.exceptions import GitError, MobileCtlError
from ...constants import EMOJI_ERROR, EMOJI_SUCCESS
from ...services import CommitReader, FileUpdater, VersionBackup, VersionOrchestrator
from ...utils.git_utils import is_git_repository
from ...utils.version_utils import detect_app_version, suggest_bump_level

console = Console()


def create_orchestrator(obj) -> VersionOrchestrator:
    """Version orchestrator rooted at the project directory"""
    return VersionOrchestrator(
        file_updater=FileUpdater(obj.base_dir),
        backup=VersionBackup(obj.base_dir),
    )


def resolve_level(obj, level):
    """Bump level from the argument or the configured strategy"""
    level = level or obj.config.version.bump_strategy
    if level == 'manual':
        raise click.UsageError("bump_strategy is manual; pass a LEVEL or an explicit version")
    if level != 'auto':
        return level

    if not is_git_repository(obj.base_dir):
        console.print("[yellow]Not a git repository; using patch[/yellow]")
        return 'patch'
    reader = CommitReader(obj.base_dir)
    try:
        commits = reader.read_commits(reader.latest_tag())
    except GitError as e:
        console.print(f"[yellow]Could not read commits ({e}); using patch[/yellow]")
        return 'patch'
    suggested = suggest_bump_level(commits)
    console.print(f"[dim]{len(commits)} commit(s) since last tag suggest a {suggested} bump[/dim]")
    return suggested


@click.group()
def version():
    """Show, bump and restore the app version"""
    pass


@version.command()
@click.pass_context
@config_required()
def show(ctx):
    """Show the current version"""
    obj = ctx.obj
    config = obj.config
    backups = create_orchestrator(obj).list_backups()

    format_key_values("Version", {
        "Configured": config.version.current,
        "Detected in project": detect_app_version(obj.base_dir),
        "Bump strategy": config.version.bump_strategy,
        "Files to update": config.version.files_to_update,
        "Backups": len(backups),
    })

    if obj.verbose and backups:
        console.print("\n[bold]Backups:[/bold]")
        for name in backups:
            console.print(f"  • {name}")


@version.command()
@click.argument('level', required=False)
@click.option('--skip-backup', is_flag=True, help='Do not back up files before rewriting them')
@click.pass_context
@config_required()
def bump(ctx, level, skip_backup):
    """Bump the version

    LEVEL is major, minor, patch or an explicit version such as 2.0.0.
    Without it version.bump_strategy decides; "auto" derives the level
    from the commits since the last tag.

    Examples:

        mobilectl version bump minor

        mobilectl --dry-run version bump

        mobilectl version bump 3.0.0 --skip-backup
    """
    obj = ctx.obj
    try:
        config = obj.config
        level = resolve_level(obj, level)

        result = create_orchestrator(obj).bump(
            config.version.current,
            level,
            dry_run=obj.dry_run,
            skip_backup=skip_backup,
            config_path=obj.loader.target_path,
            files_to_update=config.version.files_to_update,
            increment_version_code=config.version.increment_version_code,
        )

        format_version_result(result)

        if not result.success:
            sys.exit(1)

    except MobileCtlError as e:
        console.print(f"[red]Error: {e}[/red]")
        if obj.show_traceback:
            console.print_exception()
        sys.exit(1)


@version.command()
@click.argument('backup', required=False)
@click.pass_context
def restore(ctx, backup):
    """Restore files from a version backup

    BACKUP is a backup name from "version show -v"; the newest backup is
    used when it is omitted.
    """
    obj = ctx.obj
    try:
        orchestrator = create_orchestrator(obj)
        backups = orchestrator.list_backups()
        if not backups:
            console.print(f"{EMOJI_ERROR} [red]No version backups found[/red]")
            sys.exit(1)

        target = backup or backups[0]
        if obj.dry_run:
            console.print(f"Dry run: would restore {Path(target).name}")
            return

        if orchestrator.restore(target):
            console.print(f"[green]{EMOJI_SUCCESS}[/green] Restored backup {Path(target).name}")
        else:
            console.print(f"{EMOJI_ERROR} [red]Could not restore backup {target}[/red]")
            sys.exit(1)

    except MobileCtlError as e:
        console.print(f"[red]Error: {e}[/red]")
        if obj.show_traceback:
            console.print_exception()
        sys.exit(1)
