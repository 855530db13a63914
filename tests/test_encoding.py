"""Tests for response body normalisation in core/encoding.py"""

import pytest

from core.encoding import (
    charset_reader,
    convert_to_utf8,
    declared_encoding,
    rewrite_declaration,
)
from core.exceptions import DecodeError, UnsupportedCharsetError


class TestConvertToUtf8:
    """Tests for convert_to_utf8."""

    def test_valid_utf8_unchanged(self):
        """Bodies that are already UTF-8 must come back byte-for-byte identical."""
        body = '<?xml version="1.0" encoding="UTF-8"?><a name="Küche"/>'.encode('utf-8')
        assert convert_to_utf8(body) is body

    def test_valid_utf8_with_latin1_label_unchanged(self):
        """A Latin-1 label alone does not trigger conversion of valid UTF-8."""
        body = b'<?xml version="1.0" encoding="ISO-8859-1"?><a name="plain"/>'
        assert convert_to_utf8(body) == body

    def test_latin1_body_converted(self):
        """ISO-8859-1 bytes become UTF-8 and the declaration is relabelled."""
        body = '<?xml version="1.0" encoding="ISO-8859-1"?><a name="Küche"/>'.encode('iso-8859-1')

        result = convert_to_utf8(body)

        assert result.decode('utf-8') == '<?xml version="1.0" encoding="UTF-8"?><a name="Küche"/>'

    def test_lowercase_label_converted(self):
        body = "<?xml version='1.0' encoding='iso-8859-1'?><a>Gr\xfc\xdfe</a>".encode('iso-8859-1')

        result = convert_to_utf8(body)

        assert "encoding='UTF-8'" in result.decode('utf-8')
        assert 'Grüße' in result.decode('utf-8')

    def test_latin1_alias_converted(self):
        """The 'latin1' label is recognised and relabelled too."""
        body = '<?xml version="1.0" encoding="latin1"?><a>ä</a>'.encode('iso-8859-1')

        result = convert_to_utf8(body)

        assert result == '<?xml version="1.0" encoding="UTF-8"?><a>ä</a>'.encode('utf-8')

    def test_label_beyond_sniff_window_ignored(self):
        """Only the first 200 bytes are inspected for an encoding name."""
        body = b'<a>' + b' ' * 250 + b'iso-8859-1 \xe4</a>'
        assert convert_to_utf8(body) == body

    def test_other_legacy_encoding_passes_through(self):
        """windows-1252 is not detected here; the body is returned unchanged."""
        body = '<?xml version="1.0" encoding="windows-1252"?><a>€</a>'.encode('cp1252')
        assert convert_to_utf8(body) == body

    def test_undeclared_invalid_body_passes_through(self):
        body = b'<a>\xff\xfe</a>'
        assert convert_to_utf8(body) == body


class TestDeclaration:
    """Tests for declared_encoding and rewrite_declaration."""

    def test_declared_encoding(self):
        assert declared_encoding(b'<?xml version="1.0" encoding="ISO-8859-1" ?><a/>') == 'ISO-8859-1'
        assert declared_encoding(b"<?xml version='1.0' encoding='utf-8'?><a/>") == 'utf-8'

    def test_no_declaration(self):
        assert declared_encoding(b'<a/>') is None
        assert declared_encoding(b'<?xml version="1.0"?><a/>') is None

    def test_rewrite_only_touches_declaration(self):
        body = b'<?xml version="1.0" encoding="ISO-8859-1"?><a note="ISO-8859-1"/>'
        assert rewrite_declaration(body) == b'<?xml version="1.0" encoding="UTF-8"?><a note="ISO-8859-1"/>'


class TestCharsetReader:
    """Tests for the declared-charset sub-decoder."""

    @pytest.mark.parametrize('label', ['ISO-8859-1', 'latin1'])
    def test_latin1_family(self, label):
        body = f'<?xml version="1.0" encoding="{label}"?><a>é</a>'.encode('iso-8859-1')
        assert charset_reader(label, body) == '<?xml version="1.0" encoding="UTF-8"?><a>é</a>'.encode('utf-8')

    @pytest.mark.parametrize('label', ['windows-1252', 'CP1252'])
    def test_windows_1252(self, label):
        body = f'<?xml version="1.0" encoding="{label}"?><a>€</a>'.encode('cp1252')
        assert '€' in charset_reader(label, body).decode('utf-8')

    def test_unsupported_charset(self):
        """Unknown charsets fail explicitly instead of mis-decoding."""
        with pytest.raises(UnsupportedCharsetError) as excinfo:
            charset_reader('shift_jis', b'<a/>')
        assert excinfo.value.charset == 'shift_jis'
        assert isinstance(excinfo.value, DecodeError)

    def test_undefined_windows_1252_byte(self):
        """0x81 has no mapping in windows-1252."""
        with pytest.raises(DecodeError):
            charset_reader('windows-1252', b'<?xml version="1.0" encoding="windows-1252"?><a>\x81</a>')
