"""Core data model dataclasses.

All other modules import from here. Keep this module free of side-effects so
it can be used in tests and CLI contexts alike.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class FileStatus(str, Enum):
    FIXED = "FIXED"        # at least one rule fired, artifact written
    CLEAN = "CLEAN"        # no rule fired, nothing written
    SKIPPED = "SKIPPED"    # target file does not exist
    FAILED = "FAILED"      # a rule or the artifact write raised


# ---------------------------------------------------------------------------
# Document metadata
# ---------------------------------------------------------------------------


@dataclass
class DocumentMeta:
    file_path: str
    encoding: str
    size: int  # bytes on disk
    fingerprint: str  # sha256 of the raw file bytes
    decoded_cleanly: bool  # False when undecodable bytes were carried as escapes


# ---------------------------------------------------------------------------
# Finding
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Finding:
    """One defect category detected in one file."""

    rule_id: str  # e.g. "script.non_tab_indent"
    name: str  # short name used in "Auto-fixing: <name>"
    message: str  # category sentence used in the detection bullet
    order: int  # position of the rule in the registry


# ---------------------------------------------------------------------------
# Per-file and per-run results
# ---------------------------------------------------------------------------


@dataclass
class FileResult:
    path: Path
    status: FileStatus
    findings: list[Finding] = field(default_factory=list)
    output_path: Path | None = None  # set only when status is FIXED
    error: str = ""  # set only when status is FAILED
    meta: DocumentMeta | None = None

    @property
    def changed(self) -> bool:
        """The change flag: True as soon as one rule detected its category."""
        return bool(self.findings)

    @property
    def rule_ids(self) -> list[str]:
        return [f.rule_id for f in self.findings]


@dataclass
class RunSummary:
    results: list[FileResult] = field(default_factory=list)

    def by_status(self, status: FileStatus) -> list[FileResult]:
        return [r for r in self.results if r.status == status]

    def counts(self) -> dict[FileStatus, int]:
        return {status: len(self.by_status(status)) for status in FileStatus}
