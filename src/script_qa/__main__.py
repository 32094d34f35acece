"""Entry point: python -m script_qa [PATH ...]

Validates and sanitizes script files. For each file with at least one
detected defect a sanitized copy is written to ``<path>.fixed``; the original
is never modified.

Usage::

    python -m script_qa                        # configured targets
    python -m script_qa setup/setup_script     # explicit files
    python -m script_qa --config qa.yml --report run.csv -v
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from script_qa import __version__
from script_qa.core.config import ConfigError, load_settings
from script_qa.core.exporters import EXPORTERS, export_report
from script_qa.core.orchestrator import Orchestrator, resolve_targets
from script_qa.core.preconditions import (
    PreconditionError,
    default_capabilities,
    require_capabilities,
)
from script_qa.core.reporting import ConsoleReporter

_log = logging.getLogger("script_qa")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="script-qa",
        description="Detect hidden characters and layout defects in scripts and "
        "write sanitized copies next to them.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Files to validate (default: the 'targets' list of the configuration)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file merged over the built-in defaults",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Directory that relative targets resolve against (default: current directory)",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write a run summary (.csv, .txt or .xlsx)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log more details on stderr (-vv for debug output)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _configure_logging(verbosity: int) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.report is not None and args.report.suffix.lower() not in EXPORTERS:
        parser.error(f"--report must end with one of {', '.join(sorted(EXPORTERS))}")

    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return 1

    try:
        require_capabilities(default_capabilities(settings))
    except PreconditionError as exc:
        for missing in exc.missing:
            print(missing.diagnostic(), file=sys.stderr)
        return 1

    targets = args.paths or settings.targets
    if not targets:
        _log.warning("No target files given and none configured")
    paths = resolve_targets(targets, args.root)

    summary = Orchestrator(settings, reporter=ConsoleReporter()).run(paths)

    if args.report is not None:
        try:
            export_report(summary, args.report)
        except OSError as exc:
            _log.debug("Report export failed", exc_info=True)
            print(f"❌ Could not write report {args.report}: {exc}", file=sys.stderr)
            return 1
        print(f"Report written to {args.report}")

    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
