"""Data models and utility functions.

This package contains:
- records: Immutable records decoded from XML-API responses
- types: TypedDict definitions for settings
- utils: Utility functions (join_ids, format_timestamp, similarity_score, etc.)
"""
