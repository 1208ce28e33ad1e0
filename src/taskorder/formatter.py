# formatter.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .model import Task

SHEBANG = "#!/usr/bin/env bash"


def to_bash_script(tasks: Iterable[Task]) -> str:
    """
    Render ordered tasks as a bash script: shebang, then one command per line.

    Commands are written verbatim (no quoting or escaping).
    """
    lines = [SHEBANG]
    lines.extend(t.command for t in tasks)
    return "\n".join(lines) + "\n"


def to_json(tasks: Iterable[Task]) -> Dict[str, List[Dict[str, Any]]]:
    """JSON-ready document; each task keeps only name and command."""
    return {"tasks": [{"name": t.name, "command": t.command} for t in tasks]}
