"""
Name: Upload Decoding / Normalization Tests
"""

import codecs

import pytest

from shortdrama.infrastructure.text import decode_text, normalize_text

pytestmark = pytest.mark.unit


class TestDecodeText:
    def test_utf8(self):
        assert decode_text("第一章".encode("utf-8")) == ("第一章", "utf-8")

    def test_utf8_with_bom(self):
        text, encoding = decode_text(codecs.BOM_UTF8 + "第一章".encode("utf-8"))
        assert text == "第一章"
        assert encoding == "utf-8-sig"

    def test_utf16_with_bom(self):
        text, encoding = decode_text("第一章".encode("utf-16"))
        assert text == "第一章"
        assert encoding == "utf-16"

    def test_gb18030_fallback(self):
        text, encoding = decode_text("你好".encode("gb18030"))
        assert text == "你好"
        assert encoding == "gb18030"


class TestNormalizeText:
    def test_removes_nul_and_normalizes_newlines(self):
        assert normalize_text("\x00  a\r\nb\rc \n") == "a\nb\nc"

    def test_empty(self):
        assert normalize_text("") == ""
