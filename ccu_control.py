#!/usr/bin/env python3
"""
CCU Control CLI
Read and control HomeMatic devices, programs and system variables through
the CCU XML-API add-on.
"""

import logging

import click

from commands.setup import ColouredGroup, help_command, setup_command, configure_command
from commands.devices import (
    version_command,
    devices_command,
    device_command,
    device_types_command,
    master_values_command,
    set_master_value_command,
)
from commands.states import states_command, state_command, set_state_command
from commands.programs import programs_command, run_program_command, program_actions_command
from commands.locations import rooms_command, functions_command
from commands.sysvars import sysvars_command, sysvar_command
from commands.tokens import register_token_command, revoke_token_command


@click.group(
    cls=ColouredGroup,
    context_settings={
        'help_option_names': ['-h', '--help'],
        'max_content_width': 999  # Very wide to prevent wrapping on wide terminals
    }
)
@click.version_option(version='0.1.0', prog_name='CCU Control')
@click.option('--url', help='CCU address, e.g. https://192.168.1.100')
@click.option('--token', help='XML-API security token')
@click.option('--verbose', '-v', is_flag=True, help='Log HTTP requests to stderr')
@click.pass_context
def cli(ctx, url: str | None, token: str | None, verbose: bool):
    """CCU Control CLI - Manage HomeMatic devices through the CCU XML-API.

Configuration: --url/--token → Environment → 1Password → Local config (~/.ccu_control/config.json)
Run 'configure' for first-time setup or 'setup' to check configuration.

Use 'help' for a quick reference of all commands.
Use 'COMMAND -h' or 'COMMAND --help' for detailed help on a specific command."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')
    ctx.ensure_object(dict)
    ctx.obj['url'] = url
    ctx.obj['token'] = token


# Register setup and help commands
cli.add_command(help_command)
cli.add_command(setup_command)
cli.add_command(configure_command)

# Register device commands
cli.add_command(version_command)
cli.add_command(devices_command)
cli.add_command(device_command)
cli.add_command(device_types_command)
cli.add_command(master_values_command)
cli.add_command(set_master_value_command)

# Register state commands
cli.add_command(states_command)
cli.add_command(state_command)
cli.add_command(set_state_command)

# Register program commands
cli.add_command(programs_command)
cli.add_command(run_program_command)
cli.add_command(program_actions_command)

# Register room and function commands
cli.add_command(rooms_command)
cli.add_command(functions_command)

# Register system variable commands
cli.add_command(sysvars_command)
cli.add_command(sysvar_command)

# Register token commands
cli.add_command(register_token_command)
cli.add_command(revoke_token_command)


if __name__ == '__main__':
    cli()
