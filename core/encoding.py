"""Character encoding handling for XML-API responses.

Older CCU firmware serves ISO-8859-1 while newer firmware serves UTF-8, and
the XML declaration is not always truthful. Everything is normalised to
UTF-8 before parsing:

- convert_to_utf8: best-effort conversion of Latin-1 bodies
- charset_reader: explicit decoding for charsets named in the declaration
"""

import logging
import re

from core.exceptions import DecodeError, UnsupportedCharsetError

logger = logging.getLogger(__name__)

# How far into the body to look for an encoding name
SNIFF_LENGTH = 200

# Only these labels trigger conversion in convert_to_utf8. Anything else
# (windows-1252 included) is passed through unchanged.
LATIN1_LABELS = ('iso-8859-1', 'latin1')

# Charsets the decoder accepts in an XML declaration, mapped to Python codecs
SUPPORTED_CHARSETS = {
    'iso-8859-1': 'iso-8859-1',
    'latin1': 'iso-8859-1',
    'windows-1252': 'cp1252',
    'cp1252': 'cp1252',
}

# Charsets that need no conversion before parsing
UTF8_COMPATIBLE = ('utf-8', 'utf8', 'us-ascii', 'ascii')

_DECLARATION_ENCODING = re.compile(
    rb'''(<\?xml[^>]*?\bencoding\s*=\s*)(["'])([^"']*)\2''',
    re.IGNORECASE,
)


def is_valid_utf8(data: bytes) -> bool:
    try:
        data.decode('utf-8')
    except UnicodeDecodeError:
        return False
    return True


def declared_encoding(data: bytes) -> str | None:
    """Return the encoding named in the XML declaration, if there is one."""
    match = _DECLARATION_ENCODING.search(data[:SNIFF_LENGTH])
    if not match:
        return None
    return match.group(3).decode('ascii', errors='replace')


def rewrite_declaration(data: bytes, encoding: str = 'UTF-8') -> bytes:
    """Replace the encoding label of the XML declaration."""
    return _DECLARATION_ENCODING.sub(
        lambda m: m.group(1) + m.group(2) + encoding.encode('ascii') + m.group(2),
        data,
        count=1,
    )


def convert_to_utf8(data: bytes) -> bytes:
    """Normalise a response body to UTF-8.

    Valid UTF-8 is returned unchanged. Otherwise, if the first 200 bytes
    mention a Latin-1 encoding name, the body is transcoded from ISO-8859-1
    and its declaration relabelled as UTF-8. Anything else is returned as
    is; this is best effort and other legacy encodings are not detected.

    Args:
        data: Raw response body

    Returns:
        The (possibly converted) body
    """
    if is_valid_utf8(data):
        return data

    head = data[:SNIFF_LENGTH].decode('iso-8859-1').lower()
    if not any(label in head for label in LATIN1_LABELS):
        logger.debug("Body is not UTF-8 and declares no Latin-1 encoding, passing through")
        return data

    logger.debug("Converting %d byte body from ISO-8859-1 to UTF-8", len(data))
    converted = data.decode('iso-8859-1').encode('utf-8')
    return rewrite_declaration(converted)


def charset_reader(charset: str, data: bytes) -> bytes:
    """Decode a body whose declaration names a non-UTF-8 charset.

    Args:
        charset: Charset label from the XML declaration
        data: Body encoded in that charset

    Returns:
        UTF-8 bytes with the declaration relabelled

    Raises:
        UnsupportedCharsetError: If the charset is not a Latin-1 family one
    """
    codec = SUPPORTED_CHARSETS.get(charset.lower())
    if codec is None:
        raise UnsupportedCharsetError(charset)
    try:
        text = data.decode(codec)
    except UnicodeDecodeError as e:
        raise DecodeError(f"body is not valid {charset}: {e}") from e
    return rewrite_declaration(text.encode('utf-8'))
