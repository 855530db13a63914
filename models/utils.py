"""Utility functions for CCU control.

This module contains helper functions used across the application:
- join_ids: Serialise list-valued query parameters
- flag_one / flag_bool: The two boolean conventions of the XML-API
- check_parallel: Validate that parallel argument lists line up
- format_timestamp: Render CCU epoch timestamps
- create_name_lookup: Build ise_id-to-name mappings for records
- similarity_score: Canonical fuzzy string matching algorithm
- find_similar_strings: Find similar strings using fuzzy matching
"""

from datetime import datetime

from core.exceptions import ValidationError


def join_ids(values) -> str:
    """Join a list of ids/values into the comma-separated form the CCU expects."""
    return ','.join(str(v) for v in values)


def flag_one(enabled: bool) -> str | None:
    """Value for flags sent as "1" when set and omitted otherwise."""
    return '1' if enabled else None


def flag_bool(value: bool) -> str:
    """Value for flags sent as "true"/"false"."""
    return 'true' if value else 'false'


def check_parallel(**lists) -> None:
    """Raise ValidationError unless all keyword lists have the same length.

    Example:
        check_parallel(ise_ids=['1', '2'], new_values=['0.5'])  # raises
    """
    lengths = {name: len(values) for name, values in lists.items()}
    if len(set(lengths.values())) > 1:
        names = ', '.join(lengths)
        detail = ', '.join(f"{name}={length}" for name, length in lengths.items())
        raise ValidationError(f"{names} must have the same length ({detail})")


def format_timestamp(timestamp: int) -> str:
    """Format a CCU epoch timestamp for display ('-' when never set)."""
    if not timestamp:
        return '-'
    return datetime.fromtimestamp(timestamp).strftime('%Y-%m-%d %H:%M:%S')


def create_name_lookup(records) -> dict[str, str]:
    """Create a lookup dict mapping record ise_ids to names.

    Args:
        records: Records with 'ise_id' and 'name' attributes

    Returns:
        Dict mapping ise_id to name
    """
    return {r.ise_id: r.name or 'Unknown' for r in records}


def similarity_score(s1: str, s2: str) -> int:
    """Calculate similarity score between two strings.

    This is the canonical implementation used throughout the application
    for fuzzy matching (command typo suggestions, device name lookup).

    Args:
        s1: First string to compare
        s2: Second string to compare

    Returns:
        Similarity score:
        - 100: Exact match (case-insensitive)
        - 80: Prefix match
        - 60: Substring match
        - 0-50: Character sequence match (proportional to matching characters)
        - 0: No match
    """
    s1_lower = s1.lower()
    s2_lower = s2.lower()

    # Exact match
    if s1_lower == s2_lower:
        return 100

    # Prefix match
    if s2_lower.startswith(s1_lower) or s1_lower.startswith(s2_lower):
        return 80

    # Contains match
    if s1_lower in s2_lower or s2_lower in s1_lower:
        return 60

    # Character sequence matching
    matches = 0
    j = 0
    for char in s1_lower:
        while j < len(s2_lower):
            if s2_lower[j] == char:
                matches += 1
                j += 1
                break
            j += 1

    if matches > 0:
        score = int((matches / max(len(s1_lower), len(s2_lower))) * 50)
        return score if score > 20 else 0

    return 0


def find_similar_strings(target: str, candidates: list[str], limit: int = 5) -> list[str]:
    """Find similar strings using simple similarity scoring.

    Args:
        target: The string to match against
        candidates: List of candidate strings to search
        limit: Maximum number of results to return

    Returns:
        List of similar strings, sorted by similarity score (most similar first)
    """
    scored = [(candidate, similarity_score(target, candidate)) for candidate in candidates]

    filtered = [(c, s) for c, s in scored if s > 0]
    sorted_matches = sorted(filtered, key=lambda x: x[1], reverse=True)

    return [c for c, s in sorted_matches[:limit]]
