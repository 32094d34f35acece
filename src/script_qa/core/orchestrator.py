"""Orchestrator: run the FilePipeline over an explicit list of target paths.

Files are independent: a missing, failing or fixed file never stops the next
one. The orchestrator keeps no cross-file state beyond the collected results.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from script_qa.core.config import Settings
from script_qa.core.models import FileStatus, RunSummary
from script_qa.core.pipeline import FilePipeline
from script_qa.core.reporting import Reporter

_log = logging.getLogger(__name__)


def resolve_targets(targets: Iterable[str | Path], root: Path | None = None) -> list[Path]:
    """Anchor relative targets at ``root``; absolute ones are kept as given."""
    paths: list[Path] = []
    for target in targets:
        p = Path(target)
        if root is not None and not p.is_absolute():
            p = root / p
        paths.append(p)
    return paths


class Orchestrator:
    """Sanitize every target in order.

    Usage::

        orchestrator = Orchestrator(settings, reporter=ConsoleReporter())
        summary = orchestrator.run([Path("a.sh"), Path("b.sh")])

    A ready-made ``pipeline`` already carries its own reporter, so
    ``reporter`` is only accepted when the pipeline is built here.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        reporter: Reporter | None = None,
        pipeline: FilePipeline | None = None,
    ) -> None:
        if pipeline is not None and reporter is not None:
            raise ValueError("Pass the reporter to the FilePipeline, not to both")
        self.settings = settings or Settings()
        self._pipeline = pipeline or FilePipeline(self.settings, reporter=reporter)

    def run(self, paths: Iterable[str | Path]) -> RunSummary:
        summary = RunSummary()
        for path in paths:
            summary.results.append(self._pipeline.run(Path(path)))

        counts = summary.counts()
        _log.info(
            "Processed %d file(s): %d fixed, %d clean, %d skipped, %d failed",
            len(summary.results),
            counts[FileStatus.FIXED],
            counts[FileStatus.CLEAN],
            counts[FileStatus.SKIPPED],
            counts[FileStatus.FAILED],
        )
        return summary
