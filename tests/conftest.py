"""Pytest fixtures shared across all tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from script_qa.core.config import Settings


@pytest.fixture
def write_script(tmp_path) -> Callable[..., Path]:
    """Factory writing a script under tmp_path; str content is UTF-8 encoded."""

    def _write(content: str | bytes, name: str = "setup_script") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        data = content.encode("utf-8") if isinstance(content, str) else content
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def dirty_script() -> str:
    """A script with one instance of every auto-fixable category."""
    return (
        "#!/usr/bin/env bash\r\n"
        "set -e\r\n"
        "# ---- install\r\n"
        "echo \u201cready\u201d\u00a0now\r\n"
        "    apt-get install -y curl\u200b\r\n"
        "VAR=1\x07\r\n"
    )


@pytest.fixture
def clean_script() -> str:
    return (
        "#!/usr/bin/env bash\n"
        "set -e\n"
        "\n"
        "# ---- install\n"
        "if true; then\n"
        "\techo \"ready\"\n"
        "fi\n"
    )
