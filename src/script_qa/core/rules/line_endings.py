"""Line-ending rule: normalize CRLF and bare CR to LF."""

from __future__ import annotations

from script_qa.core.rule_base import Rule, registry


@registry.register
class MixedLineEndingsRule(Rule):
    rule_id = "script.mixed_line_endings"
    name = "mixed line endings"
    detected_message = "mixed / Windows line endings detected"
    order = 40

    def detect(self, text: str) -> bool:
        return "\r" in text

    def fix(self, text: str) -> str:
        # CRLF first so that a Windows line break does not become two LFs.
        return text.replace("\r\n", "\n").replace("\r", "\n")
