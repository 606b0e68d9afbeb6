from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


class MalformedDocumentError(ValueError):
    pass


def parse_theme_document(text: str, source: str = "<document>") -> dict[str, Any]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedDocumentError(f"{source} is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise MalformedDocumentError(f"{source} must contain a JSON object")
    return payload


def read_theme_document(path_like: str | Path) -> dict[str, Any] | None:
    """Load an existing theme document, or None when there is no file yet."""
    path = Path(path_like)
    if not path.exists():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedDocumentError(f"{path} is not valid UTF-8: {exc}") from exc
    return parse_theme_document(text, source=str(path))


def write_text_atomic(text: str, output_path: str | Path) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path
