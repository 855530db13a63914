"""CLI command modules.

This package contains:
- devices: Device commands (version, devices, device, device-types, master values)
- states: State commands (states, state, set-state)
- programs: Program commands (programs, run-program, program-actions)
- locations: Room and function commands (rooms, functions)
- sysvars: System variable commands (sysvars, sysvar)
- tokens: Token commands (register-token, revoke-token)
- setup: Setup, configure and help commands
- helpers: Client construction, error handling and display helpers
"""
