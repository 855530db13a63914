"""Type definitions for CCU Control.

This module provides TypedDict definitions for the settings passed between
the configuration layer, the client and the CLI.
"""

from typing import TypedDict


class Credentials(TypedDict):
    """Where the CCU is and how to authenticate against it."""
    base_url: str
    token: str


class Settings(TypedDict):
    """Complete client settings as resolved by core.config."""
    base_url: str
    token: str
    timeout: float
    verify_tls: bool
