"""Configuration management and 1Password integration.

This module handles:
- Loading/saving the user configuration file
- Environment variable overrides
- 1Password CLI integration for CCU address and token retrieval
- Resolving the final client settings from all of the above
"""

import json
import os
import subprocess
from pathlib import Path

import click

from core.transport import DEFAULT_TIMEOUT
from models.types import Credentials, Settings

# Configuration file path
USER_CONFIG_FILE = Path.home() / '.ccu_control' / 'config.json'

# Environment variables
ENV_URL = 'CCU_CONTROL_URL'
ENV_TOKEN = 'CCU_CONTROL_TOKEN'
ENV_TIMEOUT = 'CCU_CONTROL_TIMEOUT'
ENV_VERIFY_TLS = 'CCU_CONTROL_VERIFY_TLS'


def is_op_available() -> bool:
    """Check if 1Password CLI is available."""
    try:
        result = subprocess.run(['op', '--version'],
                              capture_output=True,
                              timeout=2)
        return result.returncode == 0
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return False


def load_config() -> dict:
    """Load the user configuration file.

    Returns:
        Dict of stored settings, empty if the file does not exist or is unreadable
    """
    if not USER_CONFIG_FILE.exists():
        return {}
    try:
        with open(USER_CONFIG_FILE, 'r') as f:
            return json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        click.echo(f"Warning: Failed to load config from {USER_CONFIG_FILE}: {e}", err=True)
        return {}


def save_config(config: dict):
    """Save configuration to file.

    Creates the config directory if needed and restricts the file to the
    current user (mode 600), since it holds the API token.

    Args:
        config: Configuration dict to save
    """
    USER_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)

    with open(USER_CONFIG_FILE, 'w') as f:
        json.dump(config, f, indent=2)

    os.chmod(USER_CONFIG_FILE, 0o600)


def load_from_environment() -> Credentials | None:
    """Load CCU address and token from CCU_CONTROL_URL / CCU_CONTROL_TOKEN."""
    base_url = os.getenv(ENV_URL)
    token = os.getenv(ENV_TOKEN)
    if base_url and token:
        return {'base_url': base_url, 'token': token}
    return None


def load_from_1password() -> Credentials | None:
    """Load CCU address and token from a 1Password vault.

    Reads vault and item names from environment variables:
    - CCU_1PASSWORD_VAULT (default: "Private")
    - CCU_1PASSWORD_ITEM (default: "CCU")

    Expects two fields in the 1Password item:
    - "url": CCU address including scheme
    - "token": XML-API security token

    Returns:
        Dict with 'base_url' and 'token', or None if not available
    """
    if not is_op_available():
        return None

    vault = os.getenv('CCU_1PASSWORD_VAULT', 'Private')
    item = os.getenv('CCU_1PASSWORD_ITEM', 'CCU')

    def read_field(field: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            ['op', 'item', 'get', item,
             '--vault', vault,
             '--fields', field,
             '--reveal'],
            capture_output=True,
            text=True,
            timeout=10
        )

    try:
        result_url = read_field('url')
        result_token = read_field('token')
    except subprocess.TimeoutExpired as e:
        click.echo(f"Warning: Failed to load from 1Password: {e}", err=True)
        return None

    if result_url.returncode == 0 and result_token.returncode == 0:
        base_url = result_url.stdout.strip()
        token = result_token.stdout.strip()
        if base_url and token:
            return {'base_url': base_url, 'token': token}

    return None


def load_from_user_config() -> Credentials | None:
    """Load CCU address and token from the user config file."""
    config = load_config()
    base_url = config.get('base_url')
    token = config.get('token')

    if base_url and token and isinstance(base_url, str) and isinstance(token, str):
        return {'base_url': base_url, 'token': token}
    return None


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def resolve_settings(base_url: str | None = None, token: str | None = None) -> Settings | None:
    """Resolve client settings using the priority system.

    Priority order for address and token (first complete source wins,
    explicit arguments always override):
    1. Explicit arguments (CLI options)
    2. Environment variables
    3. 1Password (if available and configured)
    4. User config file (~/.ccu_control/config.json)

    Timeout and TLS verification come from the environment, then the config
    file, then the defaults.

    Returns:
        Settings dict, or None if no source provides both address and token
    """
    credentials = {}
    if not (base_url and token):
        for loader in (load_from_environment, load_from_1password, load_from_user_config):
            loaded = loader()
            if loaded:
                credentials = dict(loaded)
                break

    # A single explicit option still overrides the loaded value
    if base_url:
        credentials['base_url'] = base_url
    if token:
        credentials['token'] = token

    if not credentials.get('base_url') or not credentials.get('token'):
        return None

    config = load_config()

    raw_timeout = os.getenv(ENV_TIMEOUT) or config.get('timeout') or DEFAULT_TIMEOUT
    verify_tls = os.getenv(ENV_VERIFY_TLS)
    if verify_tls is None:
        verify_tls = bool(config.get('verify_tls', False))
    else:
        verify_tls = _env_bool(verify_tls)

    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError):
        timeout = None
    if timeout is None or timeout <= 0:
        click.echo(f"Warning: Invalid timeout {raw_timeout!r}, using {DEFAULT_TIMEOUT}s", err=True)
        timeout = float(DEFAULT_TIMEOUT)

    return {
        'base_url': credentials['base_url'],
        'token': credentials['token'],
        'timeout': timeout,
        'verify_tls': verify_tls,
    }
