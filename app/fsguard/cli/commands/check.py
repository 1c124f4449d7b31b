"""Policy check command.

This module provides the `fsguard check` command, which reports whether
a path could be deleted without touching it.
"""

from typing import Annotated

import typer

from fsguard.cli.display import create_checks_table, print_json
from fsguard.safety.paths import expand_path
from fsguard.safety.policy import require_policy
from fsguard.utils.formatting import console, print_error, print_success

app = typer.Typer(
    name="check",
    help="Check whether a path may be deleted.",
    invoke_without_command=True,
    context_settings={"allow_interspersed_args": True},
)


@app.callback(invoke_without_command=True)
def check(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Path to check.")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Evaluate the path policy for PATH.

    Exits with code 1 when the path may not be deleted.
    """
    if ctx.invoked_subcommand is not None:
        return

    policy = require_policy()
    target = expand_path(path)
    verdict = policy.validate_deletion(target)
    checks = policy.checks(target)

    if json_output:
        print_json(
            {
                "path": target,
                "safe": verdict.safe,
                "reason": verdict.reason.value if verdict.reason else None,
                "detail": verdict.detail,
                "checks": checks.to_dict(),
            }
        )
    else:
        console.print(create_checks_table(checks))
        if verdict.safe:
            print_success("Allowed: path may be deleted.")
        else:
            print_error(f"Rejected ({verdict.reason_code}): {verdict.detail}")

    if not verdict.safe:
        raise typer.Exit(code=1)
