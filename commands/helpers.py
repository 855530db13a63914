"""Shared helpers for CLI commands.

Client construction from the resolved settings, the error boundary that
turns client errors into a red message and exit status 1, and the display
functions used by more than one command.
"""

import functools

import click

from core.client import CCUClient
from core.config import resolve_settings
from core.exceptions import CCUError
from models.records import Channel, Device, ResultEnvelope
from models.utils import format_timestamp

# Channel direction labels
DIRECTION_LABELS = {
    'SENDER': 'sender',
    'RECEIVER': 'receiver',
    'UNKNOWN': '-',
}


def get_client(ctx: click.Context) -> CCUClient:
    """Build a client from --url/--token and the configured sources.

    Exits with status 1 when no address/token can be found. The client is
    closed when the command's context is torn down.
    """
    obj = ctx.obj or {}
    settings = resolve_settings(obj.get('url'), obj.get('token'))
    if not settings:
        click.secho("Error: No CCU address and token configured.", fg='red', err=True)
        click.echo("Run 'ccu-control configure' or set CCU_CONTROL_URL and CCU_CONTROL_TOKEN.", err=True)
        ctx.exit(1)
    client = CCUClient.from_config(settings)
    ctx.call_on_close(client.close)
    return client


def handle_ccu_errors(f):
    """Report client errors as a message and exit status 1 instead of a traceback."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except CCUError as e:
            click.secho(f"✗ {e}", fg='red', err=True)
            raise click.exceptions.Exit(1) from e
    return wrapper


def parse_assignments(assignments: tuple[str, ...]) -> tuple[list[str], list[str]]:
    """Split KEY=VALUE arguments into parallel key and value lists."""
    keys, values = [], []
    for assignment in assignments:
        key, sep, value = assignment.partition('=')
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got '{assignment}'")
        keys.append(key)
        values.append(value)
    return keys, values


def flag_marks(device: Device) -> str:
    marks = []
    if device.unreach:
        marks.append(click.style('UNREACH', fg='red'))
    if device.config_pending:
        marks.append(click.style('CONFIG PENDING', fg='yellow'))
    return ' '.join(marks)


def display_channel(channel: Channel, show_values: bool = False, indent: str = '  '):
    direction = DIRECTION_LABELS.get(channel.direction, channel.direction or '-')
    click.echo(f"{indent}{click.style(channel.ise_id, fg='green')}  {channel.name}  "
               f"[{channel.type or '-'}, {direction}]")
    if not show_values:
        return
    for datapoint in channel.datapoints:
        unit = f" {datapoint.value_unit}" if datapoint.value_unit else ''
        click.echo(f"{indent}    {datapoint.ise_id:>6}  {datapoint.type:<24} "
                   f"{click.style(datapoint.value + unit, fg='cyan')}  "
                   f"({format_timestamp(datapoint.timestamp)})")


def display_device(device: Device, show_values: bool = False, show_channels: bool = True):
    header = f"{click.style(device.name or 'Unnamed', bold=True)} ({device.ise_id})"
    details = ', '.join(part for part in (device.device_type, device.address, device.interface_id) if part)
    marks = flag_marks(device)
    click.echo(f"{header}  {details}" + (f"  {marks}" if marks else ''))
    if show_channels:
        for channel in device.channels:
            display_channel(channel, show_values=show_values)
    for master_value in device.master_values:
        click.echo(f"  {master_value.name} = {click.style(master_value.value, fg='cyan')}")


def display_result(result: ResultEnvelope, success: str):
    """Print the outcome of a mutating call."""
    if result.not_found:
        click.secho("✗ CCU reported: not found", fg='red')
        return
    click.secho(f"✓ {success}", fg='green')
    for entry in result.entries:
        attributes = ' '.join(f"{k}={v}" for k, v in entry.attributes.items())
        click.echo(f"  {entry.tag} {attributes}".rstrip())
    if result.text:
        click.echo(f"  {result.text}")
