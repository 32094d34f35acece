"""Startup capability checks.

Every capability the rules depend on is probed once, before any file is
opened. All probes run, so a single run reports every missing capability.
"""

from __future__ import annotations

import codecs
import logging
import shutil
import sys
from dataclasses import dataclass
from typing import Callable

from script_qa.core.config import Settings
from script_qa.core.rules.layout import NonTabIndentRule

_log = logging.getLogger(__name__)

#: Minimum interpreter for the structural rules.
MIN_PYTHON = (3, 10)


@dataclass(frozen=True)
class Capability:
    name: str
    purpose: str
    probe: Callable[[], bool]


@dataclass(frozen=True)
class MissingCapability:
    name: str
    purpose: str

    def diagnostic(self) -> str:
        return f"❌ {self.name} is required for {self.purpose}."


class PreconditionError(RuntimeError):
    """One or more required capabilities are missing."""

    def __init__(self, missing: list[MissingCapability]) -> None:
        self.missing = list(missing)
        names = ", ".join(m.name for m in self.missing)
        super().__init__(f"Missing required capabilities: {names}")


def _unicode_database() -> bool:
    import unicodedata

    return bool(unicodedata.unidata_version)


def _codec_available(encoding: str) -> Callable[[], bool]:
    def probe() -> bool:
        if encoding == "auto":
            return True
        try:
            codecs.lookup(encoding)
        except LookupError:
            return False
        return True

    return probe


def _on_path(command: str) -> Callable[[], bool]:
    return lambda: shutil.which(command) is not None


def _positive_int(value: object) -> Callable[[], bool]:
    return lambda: isinstance(value, int) and not isinstance(value, bool) and value >= 1


def default_capabilities(settings: Settings) -> list[Capability]:
    """Capabilities needed by the built-in rules under ``settings``."""
    tab_width = settings.rule_config(NonTabIndentRule.rule_id).get("tab_width")
    caps = [
        Capability(
            name="Unicode character database",
            purpose="Unicode-safe transformations",
            probe=_unicode_database,
        ),
        Capability(
            name=f"text codec {settings.encoding!r}",
            purpose="Unicode-safe transformations",
            probe=_codec_available(settings.encoding),
        ),
        Capability(
            name="Python {}.{}+".format(*MIN_PYTHON),
            purpose="structural fixes",
            probe=lambda: sys.version_info >= MIN_PYTHON,
        ),
        Capability(
            name=f"a positive tab width (got {tab_width!r})",
            purpose="tab normalization",
            probe=_positive_int(tab_width),
        ),
    ]
    for command in settings.required_tools:
        caps.append(
            Capability(
                name=command,
                purpose="this deployment (required_tools)",
                probe=_on_path(command),
            )
        )
    return caps


def check_capabilities(capabilities: list[Capability]) -> list[MissingCapability]:
    """Run every probe and return the capabilities that are missing."""
    missing: list[MissingCapability] = []
    for cap in capabilities:
        try:
            ok = cap.probe()
        except Exception as exc:
            _log.debug("Probe for %s raised: %s", cap.name, exc)
            ok = False
        if not ok:
            missing.append(MissingCapability(cap.name, cap.purpose))
    return missing


def require_capabilities(capabilities: list[Capability]) -> None:
    """Raise PreconditionError listing every missing capability."""
    missing = check_capabilities(capabilities)
    if missing:
        raise PreconditionError(missing)
