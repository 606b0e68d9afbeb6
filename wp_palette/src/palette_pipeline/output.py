from __future__ import annotations

import copy
import json
from collections.abc import Iterable
from typing import Any, Literal

from .io import MalformedDocumentError
from .models import ColorRecord

OutputMode = Literal["flat", "nested"]

THEME_JSON_SCHEMA = "https://schemas.wp.org/trunk/theme.json"
THEME_JSON_VERSION = 2


def default_document() -> dict[str, Any]:
    return {
        "$schema": THEME_JSON_SCHEMA,
        "version": THEME_JSON_VERSION,
        "settings": {
            "color": {},
        },
    }


def build_theme_document(
    palette: Iterable[ColorRecord],
    existing_document: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Place the palette at ``settings.color.palette``, keeping everything else."""
    if existing_document is None:
        document = default_document()
    elif isinstance(existing_document, dict):
        document = copy.deepcopy(existing_document)
    else:
        raise MalformedDocumentError("theme document must be a JSON object")

    settings = document.setdefault("settings", {})
    if not isinstance(settings, dict):
        raise MalformedDocumentError("theme document 'settings' must be an object")
    color = settings.setdefault("color", {})
    if not isinstance(color, dict):
        raise MalformedDocumentError(
            "theme document 'settings.color' must be an object"
        )

    color["palette"] = [record.to_dict() for record in palette]
    return document


def format_palette(
    palette: Iterable[ColorRecord],
    mode: OutputMode = "nested",
    existing_document: dict[str, Any] | None = None,
    pretty: bool = False,
) -> str:
    if mode == "nested":
        # theme.json is always pretty printed.
        document = build_theme_document(palette, existing_document)
        return json.dumps(document, indent=2, ensure_ascii=False)

    if mode == "flat":
        payload = [record.to_dict() for record in palette]
        if pretty:
            return json.dumps(payload, indent=2, ensure_ascii=False)
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)

    raise ValueError(f"unsupported output mode '{mode}'. Use 'flat' or 'nested'")
