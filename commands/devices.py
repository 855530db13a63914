"""
Device commands: version, device listing, device types and master values.
"""

import click

from commands.helpers import (
    display_device,
    display_result,
    get_client,
    handle_ccu_errors,
    parse_assignments,
)
from models.utils import create_name_lookup, find_similar_strings


@click.command(name='version')
@click.pass_context
@handle_ccu_errors
def version_command(ctx):
    """Show the XML-API add-on version."""
    client = get_client(ctx)
    version = client.get_version()
    click.echo(f"XML-API version: {click.style(version, fg='green')}")


@click.command(name='devices')
@click.option('--id', '-i', 'device_ids', multiple=True, help='Only show this device (repeatable)')
@click.option('--internal', is_flag=True, help='Include internal channels')
@click.option('--remote', is_flag=True, help='Include remote channels')
@click.option('--channels/--no-channels', default=True, help='Show channels of each device')
@click.pass_context
@handle_ccu_errors
def devices_command(ctx, device_ids: tuple[str, ...], internal: bool, remote: bool, channels: bool):
    """List devices with their channels.

    \b
    Examples:
      ccu-control devices
      ccu-control devices -i 1234 -i 1300 --internal
    """
    client = get_client(ctx)
    devices = client.get_device_list(list(device_ids), show_internal=internal, show_remote=remote)

    if not devices:
        click.echo("No devices found.")
        return

    for device in devices:
        display_device(device, show_channels=channels)
    click.echo()
    click.echo(f"{len(devices)} device{'s' if len(devices) != 1 else ''}")


@click.command(name='device')
@click.argument('device')
@click.pass_context
@handle_ccu_errors
def device_command(ctx, device: str):
    """Show a single device by ise_id or name.

    \b
    Examples:
      ccu-control device 1234
      ccu-control device "Window Kitchen"
    """
    client = get_client(ctx)
    if device.isdigit():
        display_device(client.get_device(device))
        return

    devices = client.get_device_list()
    names = create_name_lookup(devices)
    ids_by_name = {name.lower(): ise_id for ise_id, name in names.items()}
    ise_id = ids_by_name.get(device.lower())
    if ise_id:
        display_device(next(d for d in devices if d.ise_id == ise_id))
        return

    click.secho(f"✗ No device named '{device}'", fg='red')
    similar_names = find_similar_strings(device, list(names.values()), limit=3)
    if similar_names:
        click.echo("Did you mean:")
        for name in similar_names:
            click.echo(f"  {click.style(name, fg='green')} ({ids_by_name[name.lower()]})")
    ctx.exit(1)


@click.command(name='device-types')
@click.pass_context
@handle_ccu_errors
def device_types_command(ctx):
    """List all device types known to the CCU."""
    client = get_client(ctx)
    device_types = client.get_device_types()

    if not device_types:
        click.echo("No device types found.")
        return

    width = max(len(t.id) for t in device_types)
    for device_type in sorted(device_types, key=lambda t: t.name.lower()):
        click.echo(f"  {device_type.id:>{width}}  {device_type.name}")


@click.command(name='master-values')
@click.option('--device', '-d', 'device_ids', multiple=True, help='Device ise_id (repeatable)')
@click.option('--name', '-n', 'names', multiple=True, help='Only these parameter names (repeatable)')
@click.pass_context
@handle_ccu_errors
def master_values_command(ctx, device_ids: tuple[str, ...], names: tuple[str, ...]):
    """Show MASTER paramset values of devices.

    \b
    Examples:
      ccu-control master-values -d 1234
      ccu-control master-values -d 1234 -n TEMPERATURE_OFFSET
    """
    client = get_client(ctx)
    devices = client.get_master_values(list(device_ids), list(names))

    if not devices:
        click.echo("No devices found.")
        return

    for device in devices:
        display_device(device, show_channels=False)


@click.command(name='set-master-value')
@click.argument('device_id')
@click.argument('assignments', nargs=-1, required=True)
@click.pass_context
@handle_ccu_errors
def set_master_value_command(ctx, device_id: str, assignments: tuple[str, ...]):
    """Set MASTER paramset values on a device (NAME=VALUE ...).

    \b
    Examples:
      ccu-control set-master-value 1234 TEMPERATURE_OFFSET=1.5
    """
    names, values = parse_assignments(assignments)
    client = get_client(ctx)
    result = client.change_master_value([device_id] * len(names), names, values)
    display_result(result, f"Updated {len(names)} master value{'s' if len(names) != 1 else ''} on {device_id}")
