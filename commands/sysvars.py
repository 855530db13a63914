"""
System variable commands.
"""

import click

from commands.helpers import get_client, handle_ccu_errors
from models.records import SystemVariable
from models.utils import format_timestamp


def display_system_variable(variable: SystemVariable, detailed: bool = False):
    value = variable.value_text or variable.value
    unit = f" {variable.unit}" if variable.unit else ''
    click.echo(f"  {click.style(f'{variable.ise_id:>6}', fg='green')}  {variable.name} = "
               f"{click.style(value + unit, fg='cyan')}")
    if not detailed:
        return
    click.echo(f"      Type:      {variable.type or '-'} ({variable.value_type})")
    if variable.has_bounds:
        click.echo(f"      Range:     {variable.min or '-'} .. {variable.max or '-'}")
    if variable.value_names:
        click.echo(f"      Values:    {', '.join(variable.value_names)}")
    click.echo(f"      Updated:   {format_timestamp(variable.timestamp)}")


@click.command(name='sysvars')
@click.option('--text', '-t', is_flag=True, help='Show value labels instead of raw values')
@click.pass_context
@handle_ccu_errors
def sysvars_command(ctx, text: bool):
    """List system variables."""
    client = get_client(ctx)
    variables = client.get_system_variable_list(show_text=text)

    if not variables:
        click.echo("No system variables found.")
        return

    for variable in variables:
        display_system_variable(variable)


@click.command(name='sysvar')
@click.argument('ise_id')
@click.option('--text', '-t', is_flag=True, help='Show the value label instead of the raw value')
@click.pass_context
@handle_ccu_errors
def sysvar_command(ctx, ise_id: str, text: bool):
    """Show a single system variable."""
    client = get_client(ctx)
    display_system_variable(client.get_system_variable(ise_id, show_text=text), detailed=True)
