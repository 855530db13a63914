"""Core functionality for CCU control.

This package contains:
- client: CCUClient class with one method per XML-API endpoint
- transport: HTTP GET against /addons/xmlapi/*.cgi
- encoding: UTF-8 normalisation of response bodies
- decoder: XML-to-record decoding for each response schema
- exceptions: Validation, transport and decode errors
- config: Configuration file, environment and 1Password integration
"""
