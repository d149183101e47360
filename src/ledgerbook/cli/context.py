"""Accessors for the objects the CLI group puts on the click context."""

import click

from ledgerbook.ai import create_suggester


def get_db(ctx: click.Context):
    return ctx.obj["db"]


def get_user(ctx: click.Context) -> str:
    return ctx.obj["user_id"]


def get_suggester(ctx: click.Context):
    """Return the AI suggester, building it on first use.

    A suggester placed in ``ctx.obj`` beforehand is used as is; None means
    the AI collaborator is switched off.
    """
    if "suggester" not in ctx.obj:
        ctx.obj["suggester"] = create_suggester(ctx.obj["settings"])
    return ctx.obj["suggester"]
