"""Structural layout rules.

Detects:
- Indentation made of spaces instead of tabs
- Block headers (``# ----`` by default) not separated from the previous line
"""

from __future__ import annotations

import re
from typing import Any

from script_qa.core.rule_base import Rule, registry
from script_qa.core.text_utils import split_lines

DEFAULT_TAB_WIDTH = 4
DEFAULT_HEADER_MARKER = "# ----"

_SPACE_INDENT_RE = re.compile(r" +[^ ]")
_LEADING_BLANKS_RE = re.compile(r"[ \t]+")


@registry.register
class NonTabIndentRule(Rule):
    """Convert the leading blank run of indented lines to tabs.

    Works like ``unexpand --first-only``: the run is measured in columns and
    re-emitted as one tab per full tab stop plus the remaining spaces. A line
    indented by fewer spaces than the tab width keeps its spaces. Lines made
    only of blanks are converted too.
    """

    rule_id = "script.non_tab_indent"
    name = "non-tab indentation"
    detected_message = "non-tab indentation detected (leading spaces)"
    order = 70

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__(config)
        self.tab_width = int(self.config.get("tab_width", DEFAULT_TAB_WIDTH))
        if self.tab_width < 1:
            raise ValueError(f"tab_width must be >= 1, got {self.tab_width}")

    def locate(self, text: str) -> list[int]:
        return [
            lineno
            for lineno, line in enumerate(split_lines(text), start=1)
            if _SPACE_INDENT_RE.match(line)
        ]

    def detect(self, text: str) -> bool:
        return any(_SPACE_INDENT_RE.match(line) for line in split_lines(text))

    def _columns(self, blanks: str) -> int:
        col = 0
        for ch in blanks:
            if ch == "\t":
                col = (col // self.tab_width + 1) * self.tab_width
            else:
                col += 1
        return col

    def _retab(self, line: str) -> str:
        m = _LEADING_BLANKS_RE.match(line)
        if m is None or " " not in m.group():
            return line
        col = self._columns(m.group())
        tabs, spaces = divmod(col, self.tab_width)
        return "\t" * tabs + " " * spaces + line[m.end():]

    def fix(self, text: str) -> str:
        return "\n".join(self._retab(line) for line in split_lines(text))


@registry.register
class MissingBlockSpacingRule(Rule):
    """Require a blank line before each block header.

    A header on the very first line never needs one. A line holding only
    whitespace counts as blank.
    """

    rule_id = "script.missing_block_spacing"
    name = "missing newline between blocks"
    detected_message = "missing blank line before major block header(s)"
    order = 80

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__(config)
        self.marker = self.config.get("header_marker", DEFAULT_HEADER_MARKER)
        if not self.marker:
            raise ValueError("header_marker must not be empty")

    def locate(self, text: str) -> list[int]:
        lines = split_lines(text)
        return [
            i + 1
            for i, line in enumerate(lines)
            if i > 0 and line.startswith(self.marker) and lines[i - 1].strip() != ""
        ]

    def detect(self, text: str) -> bool:
        return bool(self.locate(text))

    def fix(self, text: str) -> str:
        result: list[str] = []
        for line in split_lines(text):
            if line.startswith(self.marker) and result and result[-1].strip() != "":
                result.append("")
            result.append(line)
        return "\n".join(result)
