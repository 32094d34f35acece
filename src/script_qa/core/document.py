"""DocumentLoader: read a target script into a str without ever failing on bytes.

Handles:
- Encoding detection via chardet (first 32 KB) when ``encoding="auto"``
- Permissive decoding: undecodable bytes become surrogate escapes and are
  restored verbatim by ``encode()``
- sha256 fingerprint of the raw bytes, used to prove the source was not touched
"""

from __future__ import annotations

import codecs
import hashlib
import logging
from pathlib import Path

import chardet

from script_qa.core.models import DocumentMeta

_log = logging.getLogger(__name__)

AUTO = "auto"
_ERRORS = "surrogateescape"


def fingerprint(raw_bytes: bytes) -> str:
    return hashlib.sha256(raw_bytes).hexdigest()


def encode(text: str, encoding: str) -> bytes:
    """Inverse of the loader's decode step."""
    return text.encode(encoding, errors=_ERRORS)


class DocumentLoader:
    """Load a text file as a str plus its DocumentMeta."""

    def load(self, path: str | Path, encoding: str = "utf-8") -> tuple[str, DocumentMeta]:
        """Read ``path`` and decode it.

        Args:
            path: File to read. Opened for reading only.
            encoding: Codec name, or ``"auto"`` to let chardet decide.

        Returns:
            A tuple of (decoded text, DocumentMeta).
        """
        path = Path(path)
        raw_bytes = path.read_bytes()

        if encoding == AUTO:
            encoding = self._detect_encoding(raw_bytes)
        else:
            encoding = codecs.lookup(encoding).name
        encoding = self._without_bom(encoding, raw_bytes)

        decoded_cleanly = True
        try:
            text = raw_bytes.decode(encoding)
        except UnicodeDecodeError:
            decoded_cleanly = False
            guess = chardet.detect(raw_bytes[:32768]).get("encoding")
            _log.warning(
                "%s is not valid %s (chardet guesses %s); undecodable bytes are kept as-is",
                path, encoding, guess,
            )
            text = raw_bytes.decode(encoding, errors=_ERRORS)

        meta = DocumentMeta(
            file_path=str(path),
            encoding=encoding,
            size=len(raw_bytes),
            fingerprint=fingerprint(raw_bytes),
            decoded_cleanly=decoded_cleanly,
        )
        return text, meta

    @staticmethod
    def _detect_encoding(raw_bytes: bytes) -> str:
        sample = raw_bytes[:32768]
        result = chardet.detect(sample)
        encoding = result.get("encoding") or "utf-8"
        confidence = result.get("confidence") or 0.0
        # If confidence is low, prefer utf-8 as safe fallback
        if confidence < 0.7:
            encoding = "utf-8"
        normalized = encoding.lower().replace("-", "").replace("_", "")
        # BOM variants decode as plain utf-8 so the BOM stays visible to the rules.
        alias_map = {
            "utf8": "utf-8",
            "utf8sig": "utf-8",
            "utf8bom": "utf-8",
            "ascii": "utf-8",
            "latin1": "latin-1",
        }
        candidate = alias_map.get(normalized, encoding)
        try:
            candidate = codecs.lookup(candidate).name
        except LookupError:
            candidate = "utf-8"
        _log.debug("Detected encoding %s (confidence %.2f)", candidate, confidence)
        return candidate

    @staticmethod
    def _without_bom(encoding: str, raw_bytes: bytes) -> str:
        """Swap BOM-consuming codecs for their explicit-endian forms.

        The BOM then decodes to U+FEFF like any other character, so the rules
        see it and ``encode()`` never writes one back.
        """
        if encoding == "utf-8-sig":
            return "utf-8"
        if encoding == "utf-16":
            return "utf-16-be" if raw_bytes.startswith(codecs.BOM_UTF16_BE) else "utf-16-le"
        if encoding == "utf-32":
            return "utf-32-be" if raw_bytes.startswith(codecs.BOM_UTF32_BE) else "utf-32-le"
        return encoding
