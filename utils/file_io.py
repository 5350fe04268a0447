from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def write_text_file(path: str | Path, text: str) -> None:
    """
    Write text content to a file with consistent UTF-8 encoding and LF newlines.

    Guarantees:
    - Converts ``path`` to ``Path``.
    - Ensures parent directories exist.
    - Writes with encoding="utf-8" and newline="\\n".
    - Overwrites existing file content.
    - No logging side effects.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    data = str(text).replace("\r\n", "\n").replace("\r", "\n")

    with target.open("w", encoding="utf-8", newline="\n") as f:
        f.write(data)


def write_json_file(path: str | Path, data: Any, indent: int = 2) -> None:
    """
    Write JSON content to a file through ``write_text_file``.

    Keys keep their insertion order and non-ASCII identifiers are written as-is.
    """
    write_text_file(path, json.dumps(data, indent=indent, ensure_ascii=False) + "\n")
