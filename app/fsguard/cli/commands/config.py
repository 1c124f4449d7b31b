"""Configuration commands.

Provides commands to create, inspect and locate the policy configuration.
"""

from typing import Annotated

import typer
from rich.markup import escape

from fsguard.core.config import ConfigError, create_default_config
from fsguard.core.paths import get_config_path
from fsguard.safety.defaults import default_allowed_paths
from fsguard.safety.policy import PolicyConfig, require_policy
from fsguard.utils.formatting import console, create_table, print_error, print_info, print_success

app = typer.Typer(
    help="Manage the fsguard policy configuration.",
    no_args_is_help=True,
)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a starter config with the default allowed paths."""
    try:
        path = create_default_config(default_allowed_paths(), force=force)
    except ConfigError as e:
        print_error(str(e))
        if not force:
            print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1) from e
    print_success(f"Config written to {path}")


@app.command()
def show() -> None:
    """Show the effective policy: allowed roots, protected paths and names."""
    config: PolicyConfig = require_policy().config

    allowed = create_table("Allowed Paths")
    allowed.add_column("Path", style="kept")
    for path in config.allowed_paths:
        allowed.add_row(escape(path))
    console.print(allowed)
    if not config.allowed_paths:
        print_info("No allowed paths: every deletion is rejected.")

    protected = create_table("Protected Paths")
    protected.add_column("Path", style="removed")
    for path in config.protected_paths:
        protected.add_row(escape(path))
    console.print(protected)

    patterns = create_table("Protected Names")
    patterns.add_column("Pattern", style="warning")
    for pattern in config.protected_patterns:
        patterns.add_row(escape(pattern.pattern))
    console.print(patterns)


@app.command()
def path() -> None:
    """Print the config file location."""
    typer.echo(str(get_config_path()))
