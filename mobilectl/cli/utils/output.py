# mobilectl/cli/utils/output.py

"""Output formatting utilities"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from ...constants import EMOJI_ERROR, EMOJI_SUCCESS, EMOJI_WARNING
from ...models import (
    BackupInfo,
    BuildResult,
    ChangelogResult,
    DeploymentResults,
    PipelineResult,
    ValidationResult,
    VersionBumpResult,
)
from ...utils.formatting import format_duration, format_path, format_size

console = Console()


def _status(success: bool) -> str:
    return f"[green]{EMOJI_SUCCESS}[/green]" if success else f"[red]{EMOJI_ERROR}[/red]"


def print_validation(result: ValidationResult) -> None:
    """Print every validation issue, errors first"""
    for issue in result.errors:
        console.print(f"[red]{EMOJI_ERROR} {issue}[/red]")
    for issue in result.warnings:
        console.print(f"[yellow]{EMOJI_WARNING} {issue}[/yellow]")
    if result.issues:
        console.print()


def format_build_result(result: BuildResult, base_dir: Optional[Path] = None) -> None:
    """Format and display build result"""
    if not result.outputs:
        panel = Panel(
            f"[red]{EMOJI_ERROR} Build failed:[/red] {result.error or result.message}",
            title="Build Error",
            border_style="red"
        )
        console.print(panel)
        return

    table = Table(title="Build Result", box=box.ROUNDED)
    table.add_column("Platform", style="cyan")
    table.add_column("Status")
    table.add_column("Output")
    table.add_column("Signed")
    table.add_column("Duration", justify="right")

    for output in result.outputs:
        table.add_row(
            output.platform.value,
            _status(output.success),
            format_path(output.output_path, base_dir) if output.success else f"[red]{output.error}[/red]",
            "yes" if output.is_signed else "no",
            format_duration(output.duration),
        )
    console.print(table)

    for output in result.outputs:
        for warning in output.warnings:
            console.print(f"[yellow]{EMOJI_WARNING} {output.platform.value}: {warning}[/yellow]")

    if result.message:
        console.print(f"\n{result.message}")


def format_deployment_results(results: DeploymentResults) -> None:
    """Format and display the destinations of one platform"""
    table = Table(title=f"Deploy {results.platform.value}", box=box.ROUNDED)
    table.add_column("Destination", style="cyan")
    table.add_column("Status")
    table.add_column("Details")

    for item in results.individual:
        details = item.build_url or item.message if item.success else f"[red]{item.error}[/red]"
        table.add_row(item.destination, _status(item.success), details or "")

    console.print(table)
    style = "green" if results.success else "red"
    console.print(f"[{style}]{results.message}[/{style}]\n")


def format_pipeline_result(result: PipelineResult, base_dir: Optional[Path] = None) -> None:
    """Format and display a build and deploy run"""
    if result.error:
        console.print(f"[red]{EMOJI_ERROR} {result.error}[/red]")

    for build in result.builds:
        format_build_result(build, base_dir)

    for deployment in result.deployments:
        if deployment.individual:
            format_deployment_results(deployment)
        else:
            console.print(f"[yellow]{EMOJI_WARNING} {deployment.platform.value}: "
                          f"no destinations enabled[/yellow]")

    if result.success:
        console.print(f"[green]{EMOJI_SUCCESS} Release completed[/green]")
    else:
        console.print(f"[red]{EMOJI_ERROR} Release failed[/red]")


def format_version_result(result: VersionBumpResult) -> None:
    """Format and display version bump result"""
    if result.success:
        lines = [
            f"[green]{EMOJI_SUCCESS}[/green] "
            + ("Version bump preview" if result.dry_run else "Version bumped successfully!"),
            "",
            f"[bold]Previous:[/bold] {result.previous_version}",
            f"[bold]New:[/bold] {result.new_version}",
        ]
        if result.backup and result.backup.backup_path:
            lines.append(f"[bold]Backup:[/bold] {result.backup.backup_path}")
        if result.backup and result.backup.git_tag_created:
            lines.append(f"[bold]Git tag:[/bold] v{result.previous_version}")
        if result.files_updated:
            lines.append("")
            lines.append("[bold]Updated:[/bold]")
            for path in result.files_updated:
                lines.append(f"  • {path}")

        console.print(Panel("\n".join(lines), title="Version", border_style="green"))
    else:
        lines = [f"[red]{EMOJI_ERROR} Version bump failed:[/red] {result.error}"]
        if result.files_updated:
            lines.append("")
            lines.append("[bold]Already updated:[/bold]")
            for path in result.files_updated:
                lines.append(f"  • {path}")
        if result.backup and result.backup.backup_path:
            lines.append("")
            lines.append(f"Restore with: mobilectl version restore {Path(result.backup.backup_path).name}")

        console.print(Panel("\n".join(lines), title="Version Error", border_style="red"))


def format_changelog_result(result: ChangelogResult, show_content: bool = False) -> None:
    """Format and display changelog generation result"""
    if not result.success:
        console.print(Panel(
            f"[red]{EMOJI_ERROR} Changelog generation failed:[/red] {result.error}",
            title="Changelog Error",
            border_style="red"
        ))
        return

    if result.dry_run:
        console.print(result.content, markup=False, highlight=False)
        console.print(f"\n[dim]Dry run: {result.commit_count} commit(s), nothing written[/dim]")
        return

    lines = [
        f"[green]{EMOJI_SUCCESS}[/green] Changelog updated",
        "",
        f"[bold]File:[/bold] {result.output_file}",
        f"[bold]Version:[/bold] {result.version}",
        f"[bold]Commits:[/bold] {result.commit_count}",
    ]
    if result.backup_id:
        lines.append(f"[bold]Backup:[/bold] {result.backup_id}")
    console.print(Panel("\n".join(lines), title="Changelog", border_style="green"))

    if show_content:
        console.print(result.content, markup=False, highlight=False)


def format_changelog_backups(backups: List[BackupInfo]) -> None:
    """Display changelog backups"""
    table = Table(title="Changelog Backups", box=box.SIMPLE)
    table.add_column("ID", style="cyan")
    table.add_column("Created")
    table.add_column("Size", justify="right")

    for backup in backups:
        table.add_row(backup.id, backup.created.strftime("%Y-%m-%d %H:%M:%S"), format_size(backup.size))
    console.print(table)


def format_key_values(title: str, values: Dict[str, Any]) -> None:
    """Display a two-column property table"""
    table = Table(title=title, box=box.SIMPLE, show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    for key, value in values.items():
        if isinstance(value, bool):
            value = f"[green]{EMOJI_SUCCESS}[/green]" if value else f"[dim]{EMOJI_ERROR}[/dim]"
        elif value is None or value == "" or value == []:
            value = "[dim]-[/dim]"
        elif isinstance(value, (list, tuple)):
            value = ", ".join(str(v) for v in value)
        table.add_row(key, str(value))
    console.print(table)
