# mobilectl/cli/commands/info.py

"""Info command implementation"""

import click
from rich.console import Console

from ..utils.output import format_key_values, print_validation
from ...__version__ import __version__
from ...api.exceptions import MobileCtlError
from ...constants import ArtifactType, EMOJI_ERROR, EMOJI_SUCCESS, Platform
from ...core import ProjectDetector
from ...services import DeployOrchestrator
from ...utils.git_utils import get_git_info
from ...utils.version_utils import detect_app_version

console = Console()


@click.command()
@click.pass_context
def info(ctx):
    """Show project, configuration and environment information"""
    obj = ctx.obj
    detected = ProjectDetector().describe(obj.base_dir)
    config_file = obj.loader.find()

    format_key_values(f"mobilectl {__version__}", {
        "Project directory": str(obj.base_dir),
        "Config file": str(config_file) if config_file else "not found (using defaults)",
        "Android project": detected['android'],
        "Gradle wrapper": detected['gradle_wrapper'],
        "iOS project": detected['ios'],
        "Xcode projects": detected['xcode_projects'],
    })

    try:
        config = obj.config
    except MobileCtlError as e:
        console.print(f"{EMOJI_ERROR} [red]Failed to load configuration: {e}[/red]")
        ctx.exit(1)

    android = config.build.android
    deploy = DeployOrchestrator(base_dir=obj.base_dir)
    format_key_values("Configuration", {
        "App": config.app.name,
        "Identifier": config.app.identifier,
        "Version": config.version.current,
        "Detected version": detect_app_version(obj.base_dir),
        "Android": android.enabled,
        "Gradle task": android.gradle_task(ArtifactType(android.output_type))
        if android.output_type in ('apk', 'aab') else None,
        "Android destinations": [d.value for d in deploy.enabled_destinations(Platform.ANDROID, config)],
        "iOS": config.build.ios.enabled,
        "iOS destinations": [d.value for d in deploy.enabled_destinations(Platform.IOS, config)],
        "Changelog": config.changelog.output_file if config.changelog.enabled else False,
    })

    git = get_git_info(obj.base_dir)
    if git['is_git_repo']:
        format_key_values("Git", {
            "Branch": git['branch'],
            "Commit": git['commit'],
            "Latest tag": git['latest_tag'],
            "Remote": git['remote_url'],
        })

    result = obj.validate()
    if result.issues:
        console.print()
        print_validation(result)
    else:
        console.print(f"\n[green]{EMOJI_SUCCESS} Configuration is valid[/green]")
