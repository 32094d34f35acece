"""FilePipeline: run the ordered rules over one file and emit the sanitized copy.

The rules are folded over the text: each rule's ``detect`` sees the output of
every earlier ``fix``. The source file is only ever read; the result goes to a
sibling ``<path><suffix>`` file and only when at least one rule fired.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Iterable

# Import rules module to trigger all @registry.register decorators
import script_qa.core.rules  # noqa: F401
from script_qa.core.config import Settings
from script_qa.core.document import DocumentLoader, encode
from script_qa.core.models import FileResult, FileStatus, Finding
from script_qa.core.reporting import NullReporter, Reporter
from script_qa.core.rule_base import Rule, RuleRegistry, registry

_log = logging.getLogger(__name__)

OnDetect = Callable[[Rule, Finding, str], None]


def finding_for(rule: Rule) -> Finding:
    return Finding(
        rule_id=rule.rule_id,
        name=rule.name,
        message=rule.detected_message,
        order=rule.order,
    )


def build_rules(
    settings: Settings | None = None, rule_registry: RuleRegistry | None = None
) -> list[Rule]:
    """Instantiate the enabled rules, in evaluation order."""
    settings = settings or Settings()
    reg = rule_registry or registry
    known = set(reg.all_ids())
    for rule_id in settings.rules:
        if rule_id not in known:
            _log.warning("Configuration mentions unknown rule %r", rule_id)
    return [
        rule_cls(settings.rule_config(rule_cls.rule_id))
        for rule_cls in reg.all_rules()
        if settings.is_enabled(rule_cls.rule_id)
    ]


def sanitize_text(
    text: str, rules: Iterable[Rule], on_detect: OnDetect | None = None
) -> tuple[str, list[Finding]]:
    """Fold ``rules`` over ``text``.

    Returns the final text and the findings in rule order. ``on_detect`` is
    called with (rule, finding, text-before-fix) as soon as a rule fires.
    """
    findings: list[Finding] = []
    for rule in rules:
        if not rule.detect(text):
            continue
        finding = finding_for(rule)
        findings.append(finding)
        if on_detect is not None:
            on_detect(rule, finding, text)
        text = rule.fix(text)
    return text, findings


def output_path_for(path: Path, suffix: str = ".fixed") -> Path:
    return path.with_name(path.name + suffix)


class FilePipeline:
    """Sanitize one file at a time.

    Usage::

        pipeline = FilePipeline(settings, reporter=ConsoleReporter())
        result = pipeline.run(Path("setup/setup_script"))
    """

    def __init__(
        self,
        settings: Settings | None = None,
        rule_registry: RuleRegistry | None = None,
        reporter: Reporter | None = None,
        loader: DocumentLoader | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.rules = build_rules(self.settings, rule_registry)
        self._reporter = reporter or NullReporter()
        self._loader = loader or DocumentLoader()

    def run(self, path: str | Path) -> FileResult:
        path = Path(path)
        if not path.is_file():
            _log.warning("Skipping %s: file does not exist", path)
            self._reporter.file_skipped(path)
            return FileResult(path=path, status=FileStatus.SKIPPED)

        self._reporter.file_started(path)
        # Rules that fired before a failure; the fold's own list replaces it on success.
        findings: list[Finding] = []
        meta = None

        def on_detect(rule: Rule, finding: Finding, text: str) -> None:
            findings.append(finding)
            _log.debug("%s: %s fired", path, rule.rule_id)
            self._reporter.rule_detected(finding, rule.locate(text))
            self._reporter.rule_fixing(finding)

        try:
            text, meta = self._loader.load(path, self.settings.encoding)
            fixed, findings = sanitize_text(text, self.rules, on_detect)
            if not findings:
                self._reporter.file_clean(path)
                return FileResult(path=path, status=FileStatus.CLEAN, meta=meta)

            output_path = output_path_for(path, self.settings.output_suffix)
            self._write_artifact(path, output_path, encode(fixed, meta.encoding))
        except Exception as exc:
            _log.exception("Sanitizing %s failed", path)
            self._reporter.file_failed(path, str(exc))
            return FileResult(
                path=path,
                status=FileStatus.FAILED,
                findings=findings,
                error=f"{type(exc).__name__}: {exc}",
                meta=meta,
            )

        _log.info("Wrote %s (%d categories fixed)", output_path, len(findings))
        self._reporter.file_written(path, output_path)
        return FileResult(
            path=path,
            status=FileStatus.FIXED,
            findings=findings,
            output_path=output_path,
            meta=meta,
        )

    @staticmethod
    def _write_artifact(source: Path, output_path: Path, data: bytes) -> None:
        """Write ``data`` to a scratch file beside ``output_path``, then rename.

        The scratch file is removed if anything fails before the rename.
        """
        fd, tmp_name = tempfile.mkstemp(
            dir=output_path.parent, prefix=f".{output_path.name}.", suffix=".tmp"
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            shutil.copymode(source, tmp_path)
            os.replace(tmp_path, output_path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
