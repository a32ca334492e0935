"""Loading KEY=VALUE lines from a file into the process environment."""

from __future__ import annotations

import os
from typing import Dict


def load_env_file(path: "str | os.PathLike[str]" = ".env") -> Dict[str, str]:
    """Set each KEY=VALUE line of *path* in os.environ, overwriting old values.

    Lines without '=' are ignored, as is a missing or unreadable file.
    Returns the assignments that were made, in file order.
    """
    assigned: Dict[str, str] = {}
    try:
        with open(path, encoding="utf-8", errors="surrogateescape", newline="") as handle:
            lines = handle.read().split("\n")
    except OSError:
        return assigned
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        key, separator, value = line.partition("=")
        if not separator or not key or "\0" in line:
            continue
        os.environ[key] = value
        assigned[key] = value
    return assigned