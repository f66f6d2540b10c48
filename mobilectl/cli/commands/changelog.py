"""Changelog command implementation"""

import sys

import click
from rich.console import Console

from ..decorators import config_required
from ..utils.output import format_changelog_backups, format_changelog_result, format_key_values
from ...api.exceptions import MobileCtlError
from ...constants import (
    CHANGELOG_BACKUP_DIR,
    CHANGELOG_STATE_FILE,
    EMOJI_ERROR,
    EMOJI_SUCCESS,
    EMOJI_WARNING,
)
from ...services import (
    ChangelogBackupManager,
    ChangelogGenerator,
    ChangelogStateManager,
    CommitReader,
    SafeChangelogWriter,
)
from ...utils.formatting import format_size

console = Console()


def create_generator(obj) -> ChangelogGenerator:
    """Changelog generator for the project directory"""
    base_dir = obj.base_dir
    return ChangelogGenerator(
        reader=CommitReader(base_dir),
        writer=SafeChangelogWriter(ChangelogBackupManager(base_dir / CHANGELOG_BACKUP_DIR)),
        state_manager=ChangelogStateManager(base_dir / CHANGELOG_STATE_FILE),
        config=obj.config.changelog,
        base_dir=base_dir,
    )


def _check_enabled(obj) -> bool:
    if not obj.config.changelog.enabled:
        console.print(f"[yellow]{EMOJI_WARNING} Changelog is disabled in config[/yellow]")
        return False
    return True


@click.group()
def changelog():
    """Generate and manage the changelog"""
    pass


@changelog.command()
@click.option('--from-tag', help='Start after this tag or commit')
@click.option('--to-tag', help='End at this tag or commit (default: HEAD)')
@click.option('--version', 'release_version', help='Version label for the new section')
@click.option('--overwrite', is_flag=True, help='Replace the file instead of adding a section')
@click.option('--fresh', is_flag=True, help='Ignore where the last generation stopped')
@click.pass_context
@config_required()
def generate(ctx, from_tag, to_tag, release_version, overwrite, fresh):
    """Generate changelog entries from commits

    Commits are grouped by conventional commit type. Breaking changes,
    contributors and statistics follow the changelog settings, and the
    manual notes under changelog.releases are merged in.

    Examples:

        mobilectl changelog generate

        mobilectl changelog generate --from-tag v1.0.0 --to-tag v1.1.0

        mobilectl --dry-run changelog generate --fresh
    """
    obj = ctx.obj
    try:
        if not _check_enabled(obj):
            return

        generator = create_generator(obj)
        if fresh and not obj.dry_run:
            generator.state_manager.reset()

        result = generator.generate(
            from_tag=from_tag,
            to_tag=to_tag,
            dry_run=obj.dry_run,
            append=False if overwrite else None,
            use_last_state=False if fresh else None,
            version=release_version,
        )

        format_changelog_result(result, show_content=obj.verbose)

        if not result.success:
            sys.exit(1)

    except MobileCtlError as e:
        console.print(f"[red]Error: {e}[/red]")
        if obj.show_traceback:
            console.print_exception()
        sys.exit(1)


@changelog.command()
@click.pass_context
@config_required()
def show(ctx):
    """Print the changelog file"""
    obj = ctx.obj
    if not _check_enabled(obj):
        return

    generator = create_generator(obj)
    content = generator.show()
    if content is None:
        console.print(f"Changelog not found at: {generator.output_path}")
        console.print("Generate one with: mobilectl changelog generate")
        sys.exit(1)

    console.print(f"[bold]Changelog:[/bold] {generator.output_path}\n")
    console.print(content, markup=False, highlight=False)

    if obj.verbose:
        state = generator.state_manager.get_state()
        format_key_values("Details", {
            "Format": obj.config.changelog.format,
            "File size": format_size(generator.output_path.stat().st_size),
            "Last range": state.last_generated_range,
            "Last generated": state.last_generated_date,
        })


@changelog.command()
@click.argument('backup_id', required=False)
@click.pass_context
@config_required()
def restore(ctx, backup_id):
    """Restore the changelog from a backup

    Without BACKUP_ID the available backups are listed.
    """
    obj = ctx.obj
    generator = create_generator(obj)
    backups = generator.list_backups()

    if not backups:
        console.print(f"{EMOJI_ERROR} [red]No backups found[/red]")
        sys.exit(1)

    if backup_id is None:
        format_changelog_backups(backups)
        console.print("\nRestore with: mobilectl changelog restore <backup-id>")
        return

    if obj.dry_run:
        console.print(f"Dry run: would restore {backup_id}")
        return

    if generator.restore(backup_id):
        console.print(f"[green]{EMOJI_SUCCESS}[/green] Restored backup: {backup_id}")
    else:
        console.print(f"{EMOJI_ERROR} [red]Backup not found: {backup_id}[/red]")
        sys.exit(1)


@changelog.command()
@click.pass_context
@config_required()
def update(ctx):
    """Add commits made since the last generation

    Requires an existing changelog; new entries are added above the
    current ones.
    """
    obj = ctx.obj
    try:
        if not _check_enabled(obj):
            return

        generator = create_generator(obj)
        if generator.show() is None:
            console.print(f"[yellow]{EMOJI_WARNING} No existing changelog found[/yellow]")
            console.print("Generate one with: mobilectl changelog generate")
            sys.exit(1)

        result = generator.generate(dry_run=obj.dry_run, append=True, use_last_state=True)
        format_changelog_result(result, show_content=obj.verbose)

        if not result.success:
            sys.exit(1)

    except MobileCtlError as e:
        console.print(f"[red]Error: {e}[/red]")
        if obj.show_traceback:
            console.print_exception()
        sys.exit(1)
