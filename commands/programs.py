"""
Program commands: list, run and change programs.
"""

import click

from commands.helpers import display_result, get_client, handle_ccu_errors
from models.utils import format_timestamp


@click.command(name='programs')
@click.option('--all', '-a', 'show_all', is_flag=True, help='Include invisible programs')
@click.pass_context
@handle_ccu_errors
def programs_command(ctx, show_all: bool):
    """List programs with their active state and last run."""
    client = get_client(ctx)
    programs = client.get_program_list()
    if not show_all:
        programs = [p for p in programs if p.visible]

    if not programs:
        click.echo("No programs found.")
        return

    for program in programs:
        state = click.style('active', fg='green') if program.active else click.style('inactive', fg='yellow')
        click.echo(f"  {click.style(f'{program.id:>6}', fg='green')}  {program.name}  [{state}]  "
                   f"last run: {format_timestamp(program.timestamp)}")
        if program.description:
            click.echo(f"            {program.description}")


@click.command(name='run-program')
@click.argument('program_id')
@click.option('--check', is_flag=True, help='Evaluate the program conditions (cond_check)')
@click.pass_context
@handle_ccu_errors
def run_program_command(ctx, program_id: str, check: bool):
    """Start a program by id."""
    client = get_client(ctx)
    result = client.run_program(program_id, cond_check=check)
    display_result(result, f"Started program {program_id}")


@click.command(name='program-actions')
@click.argument('program_id')
@click.option('--active/--inactive', default=None, help='Enable or disable the program')
@click.option('--visible/--hidden', default=None, help='Show or hide the program')
@click.pass_context
@handle_ccu_errors
def program_actions_command(ctx, program_id: str, active: bool | None, visible: bool | None):
    """Change whether a program is active and/or visible.

    \b
    Examples:
      ccu-control program-actions 1234 --inactive
      ccu-control program-actions 1234 --active --hidden
    """
    if active is None and visible is None:
        raise click.UsageError("Specify --active/--inactive and/or --visible/--hidden")

    client = get_client(ctx)
    result = client.change_program_actions(program_id, active=active, visible=visible)
    display_result(result, f"Updated program {program_id}")
