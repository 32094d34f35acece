"""Human-readable progress reporting for the pipeline.

The pipeline calls a Reporter as it goes, so lines appear in rule order while
a file is being processed. ``NullReporter`` keeps library use and tests quiet.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from script_qa.core.models import Finding


class Reporter:
    """Pipeline event sink. The base class ignores every event."""

    def file_started(self, path: Path) -> None:
        pass

    def rule_detected(self, finding: Finding, lines: list[int]) -> None:
        pass

    def rule_fixing(self, finding: Finding) -> None:
        pass

    def file_written(self, path: Path, output_path: Path) -> None:
        pass

    def file_clean(self, path: Path) -> None:
        pass

    def file_skipped(self, path: Path) -> None:
        pass

    def file_failed(self, path: Path, error: str) -> None:
        pass


class NullReporter(Reporter):
    """No-op reporter for library callers that only want FileResults."""


class ConsoleReporter(Reporter):
    """Print the per-file report.

    Example::

        === Validating: setup/setup_script ===
          • non-ASCII spaces detected
            Auto-fixing: non-ASCII spaces
        ✅ Wrote sanitized file: setup/setup_script.fixed
    """

    #: Line numbers listed under a detection bullet, at most.
    max_lines = 10

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def _print(self, text: str = "") -> None:
        # Resolve sys.stdout lazily so redirected/captured output is honoured.
        print(text, file=self._stream or sys.stdout)

    def file_started(self, path: Path) -> None:
        self._print(f"=== Validating: {path} ===")

    def rule_detected(self, finding: Finding, lines: list[int]) -> None:
        self._print(f"  • {finding.message}")
        if lines:
            shown = ", ".join(str(n) for n in lines[: self.max_lines])
            more = f" (+{len(lines) - self.max_lines} more)" if len(lines) > self.max_lines else ""
            self._print(f"      line(s): {shown}{more}")

    def rule_fixing(self, finding: Finding) -> None:
        self._print(f"    Auto-fixing: {finding.name}")

    def file_written(self, path: Path, output_path: Path) -> None:
        self._print(f"✅ Wrote sanitized file: {output_path}")
        self._print()

    def file_clean(self, path: Path) -> None:
        self._print("✅ No issues found, no sanitized copy created.")
        self._print()

    def file_skipped(self, path: Path) -> None:
        self._print(f"❌ Skipping {path}: file does not exist.")

    def file_failed(self, path: Path, error: str) -> None:
        self._print(f"❌ Failed to sanitize {path}: {error}")
        self._print()
