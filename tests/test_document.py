"""Tests for DocumentLoader."""

from __future__ import annotations

import hashlib

import pytest

from script_qa.core.document import DocumentLoader, encode


class TestDocumentLoader:
    loader = DocumentLoader()

    def test_loads_utf8(self, write_script):
        path = write_script("echo café\n")
        text, meta = self.loader.load(path)
        assert text == "echo café\n"
        assert meta.encoding == "utf-8"
        assert meta.decoded_cleanly is True
        assert meta.size == len("echo café\n".encode("utf-8"))

    def test_fingerprint_is_sha256_of_bytes(self, write_script):
        path = write_script("a\n")
        _, meta = self.loader.load(path)
        assert meta.fingerprint == hashlib.sha256(b"a\n").hexdigest()

    def test_invalid_bytes_do_not_raise(self, write_script):
        raw = b"ok \xff\xfe\n"
        path = write_script(raw)
        text, meta = self.loader.load(path)
        assert meta.decoded_cleanly is False
        assert encode(text, meta.encoding) == raw

    def test_bom_is_kept_in_text(self, write_script):
        path = write_script(b"\xef\xbb\xbfx\n")
        text, _ = self.loader.load(path)
        assert text == "\ufeffx\n"

    def test_encoding_names_are_canonical(self, write_script):
        path = write_script("x\n")
        _, meta = self.loader.load(path, encoding="UTF8")
        assert meta.encoding == "utf-8"

    def test_unknown_encoding_raises_lookup_error(self, write_script):
        path = write_script("x\n")
        with pytest.raises(LookupError):
            self.loader.load(path, encoding="no-such-codec")

    def test_auto_detects_utf8(self, write_script):
        content = "echo \u201cdéjà vu\u201d \u2013 ça marche\n" * 50
        path = write_script(content)
        text, meta = self.loader.load(path, encoding="auto")
        assert meta.encoding == "utf-8"
        assert text == content

    def test_auto_falls_back_to_utf8_for_ascii(self, write_script):
        path = write_script("echo ok\n")
        _, meta = self.loader.load(path, encoding="auto")
        assert meta.encoding == "utf-8"

    def test_utf8_sig_keeps_bom_visible(self, write_script):
        path = write_script(b"\xef\xbb\xbfecho hi\n")
        text, meta = self.loader.load(path, encoding="utf-8-sig")
        assert text == "\ufeffecho hi\n"
        assert meta.encoding == "utf-8"
        assert encode(text[1:], meta.encoding) == b"echo hi\n"

    @pytest.mark.parametrize(
        "codec, raw, expected",
        [
            ("utf-16", b"\xff\xfex\x00", "utf-16-le"),
            ("utf-16", b"\xfe\xff\x00x", "utf-16-be"),
            ("utf-32", b"\xff\xfe\x00\x00x\x00\x00\x00", "utf-32-le"),
            ("utf-32", b"\x00\x00\xfe\xff\x00\x00\x00x", "utf-32-be"),
        ],
    )
    def test_bom_codecs_resolve_to_explicit_byte_order(self, write_script, codec, raw, expected):
        path = write_script(raw)
        text, meta = self.loader.load(path, encoding=codec)
        assert meta.encoding == expected
        assert text == "\ufeffx"
