"""Custom Click group with automatic help display on errors.

This module provides a custom Click Group class that displays contextual
help when a command is mistyped or called with bad parameters.
"""

from typing import Any

import click


class DenylogGroup(click.Group):
    """Custom Click group that auto-displays help on usage errors."""

    def invoke(self, ctx: click.Context) -> Any:
        """Show the help of the failing command on usage errors."""
        try:
            return super().invoke(ctx)
        except (
            click.exceptions.UsageError,
            click.exceptions.BadParameter,
            click.exceptions.MissingParameter,
        ) as e:
            click.echo(f"Error: {e.format_message()}", err=True)

            # Prefer the subcommand context when the error carries one
            error_ctx = e.ctx if e.ctx else ctx

            click.echo("")
            click.echo(error_ctx.get_help())
            error_ctx.exit(e.exit_code)
            return None

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        """Show help when the command is not found."""
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            # Parameter errors are reported by invoke()
            if isinstance(e, click.exceptions.MissingParameter | click.exceptions.BadParameter):
                raise
            click.echo(f"Error: {e.format_message()}", err=True)
            click.echo("")
            click.echo(ctx.get_help())
            ctx.exit(1)
            return None, None, []


# Subgroups created with @main.group() also use DenylogGroup
DenylogGroup.group_class = DenylogGroup
