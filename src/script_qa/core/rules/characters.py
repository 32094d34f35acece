"""Character-level rules.

Detects and normalizes:
- Non-ASCII spaces (no-break, figure, narrow no-break)
- "Smart" punctuation (curly quotes, en/em dashes, ellipsis)
- Invisible C0 control characters and DEL
- Hidden shell-breaking characters (NBSP, zero-width characters, BOM)
"""

from __future__ import annotations

from typing import Any

from script_qa.core.rule_base import Rule, registry
from script_qa.core.text_utils import BASH_BREAKERS as _BASH_BREAKERS
from script_qa.core.text_utils import CONTROL_RE as _CONTROL_RE
from script_qa.core.text_utils import NON_ASCII_SPACES as _NON_ASCII_SPACES
from script_qa.core.text_utils import SMART_PUNCTUATION as _SMART_PUNCTUATION
from script_qa.core.text_utils import contains_any, make_table


class _TranslationRule(Rule):
    """Rule whose category is a fixed set of code points with fixed replacements."""

    mapping: dict[str, str] = {}

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__(config)
        self._table = make_table(self.mapping)

    def detect(self, text: str) -> bool:
        return contains_any(text, self.mapping)

    def fix(self, text: str) -> str:
        return text.translate(self._table)


@registry.register
class NonAsciiSpacesRule(_TranslationRule):
    rule_id = "script.non_ascii_spaces"
    name = "non-ASCII spaces"
    detected_message = "non-ASCII spaces detected"
    order = 10
    mapping = _NON_ASCII_SPACES


@registry.register
class NonAsciiPunctuationRule(_TranslationRule):
    """Replace curly quotes, dashes and the ellipsis with their ASCII forms."""

    rule_id = "script.non_ascii_punctuation"
    name = "non-ASCII punctuation"
    detected_message = "non-ASCII punctuation detected"
    order = 20
    mapping = _SMART_PUNCTUATION


@registry.register
class InvisibleControlsRule(Rule):
    """Delete C0 control characters and DEL.

    TAB and LF are part of the text; CR is left for the line-ending rule.
    """

    rule_id = "script.invisible_controls"
    name = "invisible control chars"
    detected_message = "invisible control characters detected"
    order = 30

    def detect(self, text: str) -> bool:
        return _CONTROL_RE.search(text) is not None

    def fix(self, text: str) -> str:
        return _CONTROL_RE.sub("", text)


@registry.register
class HiddenBashBreakersRule(_TranslationRule):
    """Zero-width characters and the BOM are deleted, NBSP becomes a space.

    Runs after NonAsciiSpacesRule, so the NBSP branch only matters when that
    rule is disabled.
    """

    rule_id = "script.hidden_bash_breakers"
    name = "hidden Bash-breakers"
    detected_message = "hidden Bash-breaking characters detected (NBSP / ZWSP / BOM)"
    order = 50
    mapping = _BASH_BREAKERS
