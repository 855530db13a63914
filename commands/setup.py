"""
Setup and help commands for CCU Control CLI.

Contains custom Click group class for coloured help output and typo suggestions.
"""

import os
from dataclasses import dataclass

import click

from core.client import CCUClient
from core.config import (
    USER_CONFIG_FILE,
    is_op_available,
    load_config,
    load_from_1password,
    load_from_environment,
    load_from_user_config,
    resolve_settings,
    save_config,
)
from core.exceptions import CCUError
from models.utils import similarity_score


@dataclass(frozen=True)
class CommandSection:
    """Represents a section in the help command."""
    name: str
    commands: list[tuple[str, str]]


class ColouredGroup(click.Group):
    """Custom Group class that adds colour to help output and suggests similar commands."""

    def resolve_command(self, ctx, args):
        """Resolve command with suggestions for typos."""
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            if 'No such command' in str(e):
                cmd_name = args[0] if args else ''
                suggestions = self._get_suggestions(ctx, cmd_name)

                if suggestions:
                    error_msg = f"No such command '{cmd_name}'.\n\n"
                    error_msg += click.style("Did you mean one of these?\n", fg='yellow')
                    for suggestion in suggestions:
                        error_msg += click.style(f"  • {suggestion}\n", fg='green')
                    raise click.UsageError(error_msg)
            raise

    def _get_suggestions(self, ctx, cmd_name, max_suggestions=3):
        """Get command suggestions based on similarity."""
        if not cmd_name:
            return []

        suggestions = []
        for command in self.list_commands(ctx):
            cmd_obj = self.get_command(ctx, command)
            if cmd_obj and not cmd_obj.hidden:
                score = similarity_score(cmd_name.lower(), command.lower())
                if score > 0:
                    suggestions.append((score, command))

        suggestions.sort(reverse=True, key=lambda x: x[0])
        return [cmd for score, cmd in suggestions[:max_suggestions]]

    def format_help(self, ctx, formatter):
        """Format help with colours."""
        self.format_usage(ctx, formatter)
        self.format_help_text(ctx, formatter)
        self.format_options(ctx, formatter)
        self.format_commands(ctx, formatter)

    def format_usage(self, ctx, formatter):
        """Format the usage line with colour."""
        formatter.write_paragraph()
        formatter.write_text(
            click.style('Usage: ', fg='cyan', bold=True) +
            click.style(f'{ctx.command_path} [OPTIONS] COMMAND [ARGS]...', fg='white')
        )

    def format_help_text(self, ctx, formatter):
        """Format the help text with colour."""
        if self.help:
            formatter.write_paragraph()
            for line in self.help.split('\n'):
                if line.strip():
                    formatter.write_text(click.style(line, fg='white'))
                else:
                    formatter.write_paragraph()

    def format_options(self, ctx, formatter):
        """Format options with colour."""
        opts = []
        for param in self.get_params(ctx):
            rv = param.get_help_record(ctx)
            if rv is not None:
                opts.append(rv)

        if opts:
            formatter.write_paragraph()
            formatter.write_text(click.style('Options:', fg='yellow', bold=True))
            with formatter.indentation():
                for opt_name, opt_help in opts:
                    formatter.write_text(
                        click.style(opt_name, fg='green') + '  ' +
                        click.style(opt_help, fg='white')
                    )

    def format_commands(self, ctx, formatter):
        """Format commands with colour."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd.get_short_help_str(limit=500)))

        if commands:
            formatter.write_paragraph()
            formatter.write_text(click.style('Commands:', fg='yellow', bold=True))

            # Pad to a reasonable column width
            max_len = max(max(len(cmd[0]) for cmd in commands), 20)

            with formatter.indentation():
                for subcommand, help_text in commands:
                    formatter.write_text(
                        click.style(subcommand.ljust(max_len), fg='green') + '  ' +
                        click.style(help_text, fg='white', dim=True)
                    )


COMMAND_SECTIONS = [
    CommandSection(
        name="SETUP",
        commands=[
            ("configure", "Store CCU address and token"),
            ("setup", "Show configuration sources and test connection"),
            ("version", "Show the XML-API add-on version"),
        ]
    ),
    CommandSection(
        name="DEVICES",
        commands=[
            ("devices", "List devices with channels"),
            ("devices -i <id> --internal", "Only some devices, include internal channels"),
            ("device <ise_id>", "Show one device"),
            ("device-types", "List device types"),
            ("master-values -d <id>", "Show MASTER paramset values"),
            ("set-master-value <id> NAME=VALUE", "Change MASTER paramset values"),
        ]
    ),
    CommandSection(
        name="STATES",
        commands=[
            ("states", "All devices with current values"),
            ("states -i <id>", "One device with current values"),
            ("state -p <datapoint>", "Current value of specific data points"),
            ("set-state <ise_id>=<value>", "Change data point values"),
        ]
    ),
    CommandSection(
        name="PROGRAMS & VARIABLES",
        commands=[
            ("programs", "List programs"),
            ("run-program <id>", "Start a program"),
            ("program-actions <id> --inactive", "Enable/disable or show/hide a program"),
            ("sysvars", "List system variables"),
            ("sysvar <ise_id>", "Show one system variable"),
        ]
    ),
    CommandSection(
        name="ROOMS & FUNCTIONS",
        commands=[
            ("rooms", "List rooms (-v for channels)"),
            ("functions", "List functions (-v for channels)"),
        ]
    ),
    CommandSection(
        name="TOKENS",
        commands=[
            ("register-token <description>", "Register a new security token"),
            ("revoke-token <token>", "Revoke a security token"),
        ]
    ),
]


@click.command(name='help')
def help_command():
    """Display help and common commands."""
    click.echo()
    click.secho("CCU Control - Quick Reference", fg='cyan', bold=True)
    click.echo()

    for section in COMMAND_SECTIONS:
        click.secho(section.name, fg='yellow', bold=True)
        for cmd, desc in section.commands:
            click.echo("  ", nl=False)
            click.secho(cmd, fg='green', nl=False)
            click.echo(" " * max(2, 36 - len(cmd)) + desc)
        click.echo()

    click.secho("GLOBAL OPTIONS", fg='yellow', bold=True)
    flags = [
        ("--url", "CCU address (env: CCU_CONTROL_URL)"),
        ("--token", "XML-API token (env: CCU_CONTROL_TOKEN)"),
        ("-v, --verbose", "Log requests to stderr"),
    ]
    for flag, desc in flags:
        click.echo("  ", nl=False)
        click.secho(flag, fg='cyan', nl=False)
        click.echo(" " * (36 - len(flag)) + desc)
    click.echo()

    click.secho("For detailed help on any command:", fg='cyan')
    click.echo(f"  ccu-control {click.style('<command> -h', fg='white', bold=True)}")
    click.echo()


@click.command(name='configure')
@click.option('--url', 'base_url', help='CCU address, e.g. https://192.168.1.100')
@click.option('--token', help='XML-API security token')
@click.option('--verify-tls/--no-verify-tls', default=False, help='Verify the CCU certificate')
@click.option('--timeout', type=click.FloatRange(min=1), default=30, show_default=True,
              help='Request timeout in seconds')
def configure_command(base_url: str | None, token: str | None, verify_tls: bool, timeout: float):
    """Store CCU address and token in the local config file.

    Missing values are prompted for. The token is created in the CCU web UI
    under the XML-API add-on settings, or with 'register-token'.
    """
    click.echo()
    click.secho("=== CCU Configuration ===", fg='cyan', bold=True)
    click.echo()

    existing = load_config()
    base_url = base_url or click.prompt("CCU address", default=existing.get('base_url') or 'https://')
    token = token or click.prompt("XML-API token", hide_input=True)

    config = dict(existing)
    config.update({
        'base_url': base_url.rstrip('/'),
        'token': token,
        'verify_tls': verify_tls,
        'timeout': timeout,
    })

    try:
        save_config(config)
    except OSError as e:
        click.secho(f"✗ Failed to save to {USER_CONFIG_FILE}: {e}", fg='red', err=True)
        raise click.exceptions.Exit(1) from e

    click.secho(f"✓ Configuration saved to {USER_CONFIG_FILE}", fg='green')
    click.echo()


@click.command(name='setup')
@click.pass_context
def setup_command(ctx):
    """Show configuration sources and test the connection.

    Configuration sources (priority order):
    1. --url / --token options
    2. Environment (CCU_CONTROL_URL, CCU_CONTROL_TOKEN)
    3. 1Password (env: CCU_1PASSWORD_VAULT, CCU_1PASSWORD_ITEM)
    4. Local config file (~/.ccu_control/config.json)
    """
    click.echo()
    click.secho("=== CCU Configuration ===", fg='cyan', bold=True)
    click.echo()

    click.echo(click.style("1. Environment", fg='cyan', bold=True))
    env_creds = load_from_environment()
    if env_creds:
        click.echo(f"   Status:      {click.style('✓ Configured', fg='green')}")
        click.echo(f"   URL:         {env_creds['base_url']}")
    else:
        click.echo(f"   Status:      {click.style('✗ Not set', fg='yellow')}")
    click.echo()

    click.echo(click.style("2. 1Password", fg='cyan', bold=True))
    vault = os.getenv('CCU_1PASSWORD_VAULT', 'Private')
    item = os.getenv('CCU_1PASSWORD_ITEM', 'CCU')
    if not is_op_available():
        click.echo(f"   Status:      {click.style('✗ CLI not installed', fg='yellow')}")
    else:
        op_creds = load_from_1password()
        if op_creds:
            click.echo(f"   Status:      {click.style('✓ Configured', fg='green')}")
            click.echo(f"   Vault:       {vault}")
            click.echo(f"   Item:        {item}")
            click.echo(f"   URL:         {op_creds['base_url']}")
        else:
            click.echo(f"   Status:      {click.style('⚠ CLI available, credentials not found', fg='yellow')}")
            click.echo(f"   Note:        Add 'url' and 'token' fields to item '{item}' in vault '{vault}'")
    click.echo()

    click.echo(click.style("3. Local Configuration", fg='cyan', bold=True))
    local_creds = load_from_user_config()
    if local_creds:
        click.echo(f"   Status:      {click.style('✓ Available', fg='green')}")
        click.echo(f"   Path:        {USER_CONFIG_FILE}")
        click.echo(f"   URL:         {local_creds['base_url']}")
    else:
        click.echo(f"   Status:      {click.style('✗ Not configured', fg='yellow')}")
        click.echo(f"   Path:        {USER_CONFIG_FILE}")
    click.echo()

    obj = ctx.obj or {}
    settings = resolve_settings(obj.get('url'), obj.get('token'))
    if not settings:
        click.secho("⚠ No CCU address and token configured", fg='yellow', bold=True)
        click.echo()
        click.echo("Run this command to set up access:")
        click.echo(click.style("  ccu-control configure", fg='green', bold=True))
        click.echo()
        return

    click.echo(click.style("Connection Test", fg='cyan', bold=True))
    click.echo(f"Testing connection to {settings['base_url']}...")

    try:
        with CCUClient.from_config(settings) as client:
            version = client.get_version()
    except CCUError as e:
        click.secho(f"✗ Connection failed: {e}", fg='red', bold=True)
        click.echo()
        raise click.exceptions.Exit(1) from e

    click.secho(f"✓ Connected, XML-API version {version}", fg='green', bold=True)
    click.echo()
