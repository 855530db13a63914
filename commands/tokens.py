"""
Security token commands.
"""

import click

from commands.helpers import display_result, get_client, handle_ccu_errors


@click.command(name='register-token')
@click.argument('description')
@click.pass_context
@handle_ccu_errors
def register_token_command(ctx, description: str):
    """Register a new XML-API security token."""
    client = get_client(ctx)
    result = client.register_token(description)
    display_result(result, f"Registered token '{description}'")


@click.command(name='revoke-token')
@click.argument('token_id')
@click.confirmation_option(prompt='Revoke this token?')
@click.pass_context
@handle_ccu_errors
def revoke_token_command(ctx, token_id: str):
    """Revoke an XML-API security token."""
    client = get_client(ctx)
    result = client.revoke_token(token_id)
    display_result(result, "Token revoked")
