"""Shared code-point tables and helpers.

Used by the character rules (core/rules/characters.py) and the layout rules
(core/rules/layout.py) so that detection and fixing always agree on which
characters belong to a category.
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Non-ASCII spaces -> ordinary space
# ---------------------------------------------------------------------------

NBSP = "\u00a0"

NON_ASCII_SPACES: dict[str, str] = {
    NBSP: " ",        # no-break space
    "\u2007": " ",    # figure space
    "\u202f": " ",    # narrow no-break space
}

# ---------------------------------------------------------------------------
# "Smart" punctuation -> ASCII replacements
# ---------------------------------------------------------------------------

SMART_PUNCTUATION: dict[str, str] = {
    "\u201c": '"',    # left double quotation mark
    "\u201d": '"',    # right double quotation mark
    "\u2018": "'",    # left single quotation mark
    "\u2019": "'",    # right single quotation mark
    "\u2013": "-",    # en dash
    "\u2014": "-",    # em dash
    "\u2026": "...",  # horizontal ellipsis
}

# ---------------------------------------------------------------------------
# Characters that silently break shell parsing
# ---------------------------------------------------------------------------

BASH_BREAKERS: dict[str, str] = {
    NBSP: " ",
    "\u200b": "",     # zero-width space
    "\u200c": "",     # zero-width non-joiner
    "\u200d": "",     # zero-width joiner
    "\ufeff": "",     # byte-order mark / zero-width no-break space
}

# C0 controls and DEL, except TAB (0x09), LF (0x0A) and CR (0x0D).
CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

# Characters that make a line look like a path or a variable assignment.
PATH_VAR_CHARS = frozenset("/=$")


def make_table(mapping: dict[str, str]) -> dict[int, str]:
    """Return a ``str.translate`` table for a char -> replacement mapping."""
    return {ord(ch): repl for ch, repl in mapping.items()}


def contains_any(text: str, chars) -> bool:
    return any(ch in text for ch in chars)


def is_ascii(text: str) -> bool:
    """True when every code point is below 0x80.

    Undecodable bytes are carried as surrogate escapes (U+DC80..U+DCFF), so
    they count as non-ASCII here as well.
    """
    return all(ord(ch) < 0x80 for ch in text)


def split_lines(text: str) -> list[str]:
    """Split on LF only, keeping every other separator inside its line.

    ``"\\n".join(split_lines(text)) == text`` for any input.
    """
    return text.split("\n")
