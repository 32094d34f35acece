"""Run report exporters: CSV (always ;), TXT summary, XLSX."""

from __future__ import annotations

import csv
from collections import Counter
from datetime import datetime
from pathlib import Path

from script_qa.core.models import FileResult, FileStatus, RunSummary

COLUMNS = [
    "file",
    "status",
    "rule_id",
    "category",
    "output",
    "encoding",
    "sha256",
    "error",
]


def _rows(summary: RunSummary) -> list[list[str]]:
    """One row per (file, finding); files without findings get a single row."""
    rows: list[list[str]] = []
    for result in summary.results:
        common = [
            str(result.output_path) if result.output_path else "",
            result.meta.encoding if result.meta else "",
            result.meta.fingerprint if result.meta else "",
            result.error,
        ]
        if not result.findings:
            rows.append([str(result.path), result.status.value, "", "", *common])
            continue
        for finding in result.findings:
            rows.append(
                [str(result.path), result.status.value, finding.rule_id, finding.name, *common]
            )
    return rows


# ---------------------------------------------------------------------------
# CSV export (ALWAYS ; delimiter)
# ---------------------------------------------------------------------------


class CSVReportExporter:
    """Rules (non-negotiable):
    - Delimiter: ;
    - Quote char: "
    - Quoting: QUOTE_MINIMAL
    - Encoding: UTF-8
    """

    def export(self, summary: RunSummary, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f, delimiter=";", quotechar='"', quoting=csv.QUOTE_MINIMAL)
            writer.writerow(COLUMNS)
            writer.writerows(_rows(summary))


# ---------------------------------------------------------------------------
# XLSX export
# ---------------------------------------------------------------------------


class XLSXReportExporter:
    def export(self, summary: RunSummary, path: Path) -> None:
        import openpyxl
        from openpyxl.styles import Font

        path.parent.mkdir(parents=True, exist_ok=True)
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Findings"

        header_font = Font(bold=True)
        for col_idx, col_name in enumerate(COLUMNS, start=1):
            cell = ws.cell(row=1, column=col_idx, value=col_name)
            cell.font = header_font

        for row_idx, row in enumerate(_rows(summary), start=2):
            for col_idx, val in enumerate(row, start=1):
                ws.cell(row=row_idx, column=col_idx, value=val)

        wb.save(path)


# ---------------------------------------------------------------------------
# TXT report
# ---------------------------------------------------------------------------


class TXTReportExporter:
    """Generate a human-readable summary of one run."""

    def export(self, summary: RunSummary, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        lines: list[str] = []
        ts = datetime.now().strftime("%Y-%m-%d %H:%M")

        lines.append("=" * 72)
        lines.append("Script Sanitization Report")
        lines.append(f"Generated: {ts}")
        lines.append("=" * 72)
        lines.append("")

        counts = summary.counts()
        lines.append("SUMMARY")
        lines.append("-" * 40)
        for status in FileStatus:
            lines.append(f"  {status.value:<16} {counts[status]:>5}")
        lines.append(f"  {'TOTAL':<16} {len(summary.results):>5}")
        lines.append("")

        rule_counts = Counter(f.rule_id for r in summary.results for f in r.findings)
        if rule_counts:
            lines.append("TOP CATEGORIES")
            lines.append("-" * 40)
            for rule_id, cnt in rule_counts.most_common():
                lines.append(f"  {rule_id:<45} {cnt:>5}")
            lines.append("")

        lines.append("DETAILS")
        lines.append("=" * 72)
        for result in summary.results:
            lines.extend(self._file_block(result))

        path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    @staticmethod
    def _file_block(result: FileResult) -> list[str]:
        block = [f"\n[{result.status.value}] {result.path}"]
        for finding in result.findings:
            block.append(f"  - {finding.message}")
        if result.output_path:
            block.append(f"  Output: {result.output_path}")
        if result.error:
            block.append(f"  Error: {result.error}")
        return block


EXPORTERS = {
    ".csv": CSVReportExporter,
    ".txt": TXTReportExporter,
    ".xlsx": XLSXReportExporter,
}


def export_report(summary: RunSummary, path: Path) -> None:
    """Pick the exporter from the file suffix."""
    exporter_cls = EXPORTERS.get(path.suffix.lower())
    if exporter_cls is None:
        supported = ", ".join(sorted(EXPORTERS))
        raise ValueError(f"Unsupported report format {path.suffix!r} (use {supported})")
    exporter_cls().export(summary, path)
