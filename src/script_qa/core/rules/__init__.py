"""Auto-import all rule modules so their @registry.register decorators fire."""

from script_qa.core.rules import (  # noqa: F401
    characters,
    layout,
    line_endings,
    paths,
)
