"""Main CLI entry point using Typer."""

import logging
import sys
from typing import List, Optional

import typer
from botocore.exceptions import BotoCoreError, ClientError
from rich.console import Console
from rich.table import Table

from ..deleter import (
    AuditStorage,
    AutoScalingGroupDeleter,
    DeleteErrorLog,
    InstanceProfileDeleter,
    LaunchConfigurationDeleter,
)
from ..deleter.base import ResourceDeleter, make_progress_console
from ..utils.logging import setup_logging
from .config import Config

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="asgdeleter",
    help="Delete AWS auto scaling groups, launch configurations and instance profiles",
    add_completion=False,
)

console = Console()

# Global config
config: Optional[Config] = None

# Progress notices from the deleters; silenced by --quiet
progress_console: Console = make_progress_console()


@app.callback()
def main(
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="AWS profile name"),
    region: Optional[str] = typer.Option(None, "--region", "-r", help="AWS region"),
    config_file: Optional[str] = typer.Option(
        None,
        "--config",
        help="Config file path (default: ~/.asgdeleter/config.yaml or $ASG_DELETER_CONFIG)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output except errors"),
):
    """Delete AWS auto scaling resources by name."""
    global config, progress_console

    try:
        config = Config.load(config_file)
    except (OSError, ValueError) as e:
        console.print(f"[red]✗ Could not load config: {e}[/red]")
        raise typer.Exit(code=1)

    if profile:
        config.aws_profile = profile
    if region:
        config.region = region

    log_level = "ERROR" if quiet else ("DEBUG" if verbose else config.log_level)
    setup_logging(level=log_level, verbose=verbose)
    progress_console = make_progress_console(quiet=quiet)


@app.command()
def version():
    """Show version information."""
    import boto3

    from .. import __version__

    console.print(f"asgdeleter version {__version__}")
    console.print(f"Python {sys.version.split()[0]}")
    console.print(f"boto3 {boto3.__version__}")


def _get_config() -> Config:
    return config if config is not None else Config.load()


def _build_deleters(cfg: Config) -> tuple[AutoScalingGroupDeleter, LaunchConfigurationDeleter, InstanceProfileDeleter]:
    kwargs = {"region": cfg.region, "profile": cfg.aws_profile, "console": progress_console}
    return (
        AutoScalingGroupDeleter(**kwargs),
        LaunchConfigurationDeleter(**kwargs),
        InstanceProfileDeleter(**kwargs),
    )


@app.command()
def describe(
    groups: Optional[List[str]] = typer.Option(None, "--group", "-g", help="Auto scaling group name (repeatable)"),
    launch_configs: Optional[List[str]] = typer.Option(
        None, "--launch-config", "-l", help="Launch configuration name (repeatable)"
    ),
):
    """Show the live resources matching the given names."""
    if not groups and not launch_configs:
        console.print("[red]✗ Specify at least one --group or --launch-config[/red]")
        raise typer.Exit(code=1)

    asg_deleter, lc_deleter, _ = _build_deleters(_get_config())
    asg_deleter.extend_resource_names(groups or [])
    lc_deleter.extend_resource_names(launch_configs or [])

    try:
        asgs = asg_deleter.request_resources()
        lcs = lc_deleter.request_resources()
        profiles = lc_deleter.request_instance_profiles(lcs)
    except (ClientError, BotoCoreError) as e:
        console.print(f"[red]✗ Error describing resources: {e}[/red]")
        raise typer.Exit(code=1)

    if groups:
        table = Table(title="Auto Scaling Groups", expand=True)
        table.add_column("Name", style="cyan")
        table.add_column("Launch Configuration")
        table.add_column("Desired", justify="right")
        table.add_column("Instances", justify="right")
        for asg in asgs:
            table.add_row(
                asg.get("AutoScalingGroupName", ""),
                asg.get("LaunchConfigurationName", "-"),
                str(asg.get("DesiredCapacity", 0)),
                str(len(asg.get("Instances", []))),
            )
        console.print(table)

    if launch_configs:
        table = Table(title="Launch Configurations", expand=True)
        table.add_column("Name", style="cyan")
        table.add_column("Image")
        table.add_column("Instance Type")
        table.add_column("Instance Profile")
        for lc in lcs:
            table.add_row(
                lc.get("LaunchConfigurationName", ""),
                lc.get("ImageId", ""),
                lc.get("InstanceType", ""),
                lc.get("IamInstanceProfile", "-"),
            )
        console.print(table)

        table = Table(title="Referenced Instance Profiles", expand=True)
        table.add_column("Name", style="cyan")
        table.add_column("ARN")
        table.add_column("Roles")
        for profile in profiles:
            table.add_row(
                profile.get("InstanceProfileName", ""),
                profile.get("Arn", ""),
                ", ".join(role["RoleName"] for role in profile.get("Roles", [])) or "-",
            )
        console.print(table)


@app.command()
def delete(
    groups: Optional[List[str]] = typer.Option(None, "--group", "-g", help="Auto scaling group name (repeatable)"),
    launch_configs: Optional[List[str]] = typer.Option(
        None, "--launch-config", "-l", help="Launch configuration name (repeatable)"
    ),
    instance_profiles: Optional[List[str]] = typer.Option(
        None, "--instance-profile", "-i", help="Instance profile name (repeatable)"
    ),
    include_instance_profiles: bool = typer.Option(
        False,
        "--include-instance-profiles",
        help="Also delete instance profiles referenced by the launch configurations",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be deleted without deleting"),
    ignore_errors: Optional[bool] = typer.Option(
        None, "--ignore-errors/--abort-on-error", help="Continue past failed deletions"
    ),
    backoff: Optional[float] = typer.Option(None, "--backoff", min=0.0, help="Seconds to wait before each delete call"),
    error_log: Optional[str] = typer.Option(None, "--error-log", help="Directory to write a YAML log of failures"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
):
    """Delete resources by name.

    Groups are deleted first, then launch configurations, then instance profiles.
    """
    if not groups and not launch_configs and not instance_profiles:
        console.print("[red]✗ Specify at least one --group, --launch-config or --instance-profile[/red]")
        raise typer.Exit(code=1)

    cfg = _get_config()
    asg_deleter, lc_deleter, ip_deleter = _build_deleters(cfg)
    asg_deleter.extend_resource_names(groups or [])
    lc_deleter.extend_resource_names(launch_configs or [])
    ip_deleter.extend_resource_names(instance_profiles or [])

    if include_instance_profiles:
        # Resolve before the launch configurations are gone
        try:
            resolved = lc_deleter.request_instance_profiles()
        except (ClientError, BotoCoreError) as e:
            console.print(f"[red]✗ Error resolving instance profiles: {e}[/red]")
            raise typer.Exit(code=1)

        for profile in resolved:
            name = profile["InstanceProfileName"]
            if name not in ip_deleter.resource_names:
                ip_deleter.add_resource_names(name)

    deleters: list[ResourceDeleter] = [asg_deleter, lc_deleter, ip_deleter]

    if not dry_run and not yes:
        table = Table(title="Resources to delete", expand=True)
        table.add_column("Type", style="cyan")
        table.add_column("Name")
        for deleter in deleters:
            for name in deleter.resource_names:
                table.add_row(deleter.resource_type.display_name, name)
        console.print(table)

        if not typer.confirm("Delete these resources?"):
            console.print("Aborted")
            raise typer.Exit(code=0)

    errors = DeleteErrorLog()
    delete_cfg = cfg.delete_config(
        dry_run=dry_run,
        ignore_errors=ignore_errors,
        backoff_time=backoff,
        error_reporter=errors,
    )

    aborted = False
    for deleter in deleters:
        logger.debug(f"Deleting {deleter}")
        try:
            deleter.delete_resources(delete_cfg)
        except (ClientError, BotoCoreError) as e:
            console.print(f"[red]✗ Aborted deleting {deleter.resource_type.display_name}: {e}[/red]")
            aborted = True
            break

    if errors.records:
        table = Table(title="Failed deletions", expand=True)
        table.add_column("Type", style="cyan")
        table.add_column("Name")
        table.add_column("Error", style="red")
        for record in errors.records:
            table.add_row(record.resource_type.display_name, record.resource_name, record.error_code or "")
        console.print(table)

        log_dir = error_log or cfg.error_log_dir
        if log_dir:
            audit_file = AuditStorage(storage_dir=log_dir).log_errors(errors.records, dry_run=dry_run)
            console.print(f"Error log written to {audit_file}")

    if aborted:
        raise typer.Exit(code=1)


def cli_main():
    """Entry point for console script."""
    app()


if __name__ == "__main__":
    cli_main()
