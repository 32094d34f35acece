"""Unicode in path / variable contexts.

Flags lines that carry a non-ASCII character together with ``/``, ``=`` or
``$`` (paths, assignments, expansions). Lines whose first word is a safe
prefix (``echo`` by default) are ignored since emoji and accents are fine in
messages.

This rule only reports. Rewriting such lines automatically could corrupt a
legitimate Unicode file path, so ``fix`` returns the text unchanged.
"""

from __future__ import annotations

import re
from typing import Any

from script_qa.core.rule_base import Rule, registry
from script_qa.core.text_utils import PATH_VAR_CHARS, contains_any, is_ascii, split_lines

DEFAULT_SAFE_PREFIXES = ("echo",)


@registry.register
class UnicodeInPathsRule(Rule):
    rule_id = "script.unicode_in_paths"
    name = "Unicode in paths/vars"
    detected_message = "Unicode in file paths / variables detected (excluding echo lines)"
    order = 60

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__(config)
        prefixes = self.config.get("safe_prefixes", DEFAULT_SAFE_PREFIXES)
        if prefixes:
            alternatives = "|".join(re.escape(p) for p in prefixes)
            self._safe_re: re.Pattern[str] | None = re.compile(
                rf"[ \t]*(?:{alternatives})\b"
            )
        else:
            self._safe_re = None

    def _is_safe(self, line: str) -> bool:
        return self._safe_re is not None and self._safe_re.match(line) is not None

    def locate(self, text: str) -> list[int]:
        """Return the 1-based numbers of the offending lines."""
        hits: list[int] = []
        for lineno, line in enumerate(split_lines(text), start=1):
            if is_ascii(line) or not contains_any(line, PATH_VAR_CHARS):
                continue
            if self._is_safe(line):
                continue
            hits.append(lineno)
        return hits

    def detect(self, text: str) -> bool:
        return bool(self.locate(text))

    def fix(self, text: str) -> str:
        return text
