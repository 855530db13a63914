"""
State commands for reading and changing data point values.
"""

import click

from commands.helpers import (
    display_device,
    display_result,
    get_client,
    handle_ccu_errors,
    parse_assignments,
)


@click.command(name='states')
@click.option('--id', '-i', 'device_id', help='Only show the device with this ise_id')
@click.option('--internal', is_flag=True, help='Include internal channels')
@click.option('--remote', is_flag=True, help='Include remote channels')
@click.pass_context
@handle_ccu_errors
def states_command(ctx, device_id: str | None, internal: bool, remote: bool):
    """List all devices with current values.

    \b
    Examples:
      ccu-control states
      ccu-control states -i 1234
    """
    client = get_client(ctx)
    devices = client.get_state_list(device_id, show_internal=internal, show_remote=remote)

    if not devices:
        if device_id:
            click.echo(f"No device with ise_id {device_id}.")
        else:
            click.echo("No devices found.")
        return

    for device in devices:
        display_device(device, show_values=True)


@click.command(name='state')
@click.option('--device', '-d', 'device_ids', multiple=True, help='Device ise_id (repeatable)')
@click.option('--channel', '-c', 'channel_ids', multiple=True, help='Channel ise_id (repeatable)')
@click.option('--datapoint', '-p', 'datapoint_ids', multiple=True, help='Data point ise_id (repeatable)')
@click.pass_context
@handle_ccu_errors
def state_command(ctx, device_ids: tuple[str, ...], channel_ids: tuple[str, ...],
                  datapoint_ids: tuple[str, ...]):
    """Show current values of specific devices, channels or data points."""
    if not (device_ids or channel_ids or datapoint_ids):
        raise click.UsageError("Specify at least one --device, --channel or --datapoint")

    client = get_client(ctx)
    devices = client.get_state(list(device_ids), list(channel_ids), list(datapoint_ids))

    if not devices:
        click.echo("Nothing found.")
        return

    for device in devices:
        display_device(device, show_values=True)


@click.command(name='set-state')
@click.argument('assignments', nargs=-1, required=True)
@click.pass_context
@handle_ccu_errors
def set_state_command(ctx, assignments: tuple[str, ...]):
    """Set data point values (ISE_ID=VALUE ...).

    \b
    Examples:
      ccu-control set-state 12345=0.20
      ccu-control set-state 12345=true 12346=false
    """
    ise_ids, values = parse_assignments(assignments)
    client = get_client(ctx)
    result = client.change_state(ise_ids, values)
    display_result(result, f"Changed {len(ise_ids)} value{'s' if len(ise_ids) != 1 else ''}")
