"""
Room and function commands.

Both are groupings of channels; a channel can appear in several rooms and
functions at once.
"""

import click

from commands.helpers import display_channel, get_client, handle_ccu_errors


def _display_groups(groups, kind: str, verbose: bool):
    if not groups:
        click.echo(f"No {kind} found.")
        return

    for group in groups:
        count = len(group.channels)
        click.echo(f"{click.style(group.name, bold=True)} ({group.ise_id})  "
                   f"{count} channel{'s' if count != 1 else ''}")
        if verbose:
            for channel in group.channels:
                display_channel(channel, indent='    ')


@click.command(name='rooms')
@click.option('--verbose', '-v', is_flag=True, help='List the channels of each room')
@click.pass_context
@handle_ccu_errors
def rooms_command(ctx, verbose: bool):
    """List rooms and their channels."""
    client = get_client(ctx)
    _display_groups(client.get_room_list(), 'rooms', verbose)


@click.command(name='functions')
@click.option('--verbose', '-v', is_flag=True, help='List the channels of each function')
@click.pass_context
@handle_ccu_errors
def functions_command(ctx, verbose: bool):
    """List functions and their channels."""
    client = get_client(ctx)
    _display_groups(client.get_function_list(), 'functions', verbose)
