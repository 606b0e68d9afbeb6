from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from .config import SassOptions
from .models import ColorRecord, RawColorEntry, SassMapEntry, SassVariable
from .naming import build_record

logger = logging.getLogger(__name__)

_DECLARATION_PATTERN = re.compile(r"^\$([A-Za-z_][\w-]*)\s*:\s*(.*)$", re.DOTALL)
_FLAG_PATTERN = re.compile(r"(\s*!(?:default|global))+\s*$")
_REFERENCE_PATTERN = re.compile(r"\$([A-Za-z_][\w-]*)")
_INTERPOLATION_PATTERN = re.compile(r"#\{([^{}]*)\}")


class VariableExporter(Protocol):
    def export(self, files: Sequence[Path]) -> list[SassVariable]:
        """Return the variables declared across ``files``, in declaration order."""


def normalize_variable_name(name: str) -> str:
    name = name.strip()
    return name if name.startswith("$") else f"${name}"


def extract_colors(
    variables: Iterable[SassVariable], allowed_names: Iterable[str]
) -> list[RawColorEntry]:
    allowed = {
        _scope_key(normalize_variable_name(name)) for name in allowed_names if name
    }
    if not allowed:
        return []

    entries: list[RawColorEntry] = []
    for variable in variables:
        if _scope_key(variable.name) not in allowed or not variable.map_value:
            continue
        for item in variable.map_value:
            if not item.name:
                continue
            value = item.compiled_value if item.compiled_value is not None else item.value
            entries.append(RawColorEntry(name=item.name, value=value))
    return entries


def resolve_source_files(
    options: SassOptions | None, root: str | Path | None = None
) -> list[Path]:
    if options is None or not options.files:
        return []

    base = Path(root) if root is not None else Path(".")
    if options.path:
        base = base / options.path

    resolved: list[Path] = []
    for file_name in options.files:
        candidate = base / file_name
        if candidate.is_file():
            resolved.append(candidate)
        else:
            logger.warning("sass source not found, skipping: %s", candidate)
    return resolved


def load_sass_colors(
    options: SassOptions | None,
    exporter: VariableExporter | None = None,
    root: str | Path | None = None,
) -> list[ColorRecord]:
    """Fetch and build Sass theme colors if they are available."""
    if options is None or not options.variables:
        return []

    files = resolve_source_files(options, root=root)
    if not files:
        return []

    exporter = exporter or ScssVariableExporter()
    try:
        variables = exporter.export(files)
    except (OSError, ValueError) as exc:
        logger.warning("failed to export sass variables from %s: %s", files, exc)
        return []

    entries = extract_colors(variables, options.variables)
    logger.debug("extracted %d sass colors from %d file(s)", len(entries), len(files))
    return [build_record(entry.name, entry.value) for entry in entries]


@dataclass
class ScssVariableExporter:
    """Collects top-level ``$variable`` declarations from SCSS sources.

    Files share one scope, so a later file can reference variables declared
    in an earlier one. Values are "compiled" only by substituting known
    variable references; Sass functions are passed through untouched.
    ``.json`` inputs are read as a sass-export ``getArray()`` dump.
    """

    encoding: str = "utf-8"
    _scope: dict[str, SassVariable] = field(default_factory=dict, init=False, repr=False)

    def export(self, files: Sequence[Path]) -> list[SassVariable]:
        self._scope = {}
        variables: list[SassVariable] = []
        for path in files:
            path = Path(path)
            if path.suffix.lower() == ".json":
                exported = _load_export_json(path, self.encoding)
                for variable in exported:
                    self._scope[_scope_key(variable.name)] = variable
            else:
                exported = self._export_scss(path.read_text(encoding=self.encoding))
            variables.extend(exported)
        return variables

    def _export_scss(self, text: str) -> list[SassVariable]:
        variables: list[SassVariable] = []
        for statement in _top_level_statements(_strip_comments(text)):
            match = _DECLARATION_PATTERN.match(statement)
            if not match:
                continue
            name = f"${match.group(1)}"
            value = _FLAG_PATTERN.sub("", match.group(2)).strip()
            variable = self._declare(name, value)
            self._scope[_scope_key(name)] = variable
            variables.append(variable)
        return variables

    def _declare(self, name: str, value: str) -> SassVariable:
        compiled = self._compile(value)
        map_items = _parse_map(value)
        if map_items is not None:
            map_value = [
                SassMapEntry(name=key, value=item, compiled_value=self._compile(item))
                for key, item in map_items
            ]
        else:
            # "$brand: $colors;" aliases an existing map.
            referenced = None
            if value.startswith("$"):
                referenced = self._scope.get(_scope_key(value))
            map_value = referenced.map_value if referenced is not None else None
        return SassVariable(
            name=name, value=value, compiled_value=compiled, map_value=map_value
        )

    def _compile(self, value: str) -> str:
        def substitute(match: re.Match[str]) -> str:
            variable = self._scope.get(_scope_key(f"${match.group(1)}"))
            if variable is None or variable.map_value is not None:
                return match.group(0)
            return variable.compiled_value or variable.value

        compiled = _REFERENCE_PATTERN.sub(substitute, value)
        return _INTERPOLATION_PATTERN.sub(lambda match: match.group(1).strip(), compiled)


def _scope_key(name: str) -> str:
    # Sass treats hyphens and underscores in identifiers as the same character.
    return name.strip().replace("_", "-")


def _opens_url(text: str, index: int) -> bool:
    if text[index : index + 4].lower() != "url(":
        return False
    return index == 0 or not (text[index - 1].isalnum() or text[index - 1] in "-_")


def _strip_comments(text: str) -> str:
    out: list[str] = []
    quote: str | None = None
    i = 0
    while i < len(text):
        char = text[i]
        if quote:
            out.append(char)
            if char == "\\" and i + 1 < len(text):
                out.append(text[i + 1])
                i += 2
                continue
            if char == quote:
                quote = None
            i += 1
            continue
        if char in ("'", '"'):
            quote = char
            out.append(char)
            i += 1
        elif _opens_url(text, i):
            # Unquoted url() bodies may hold "//", as in url(https://...).
            end = text.find(")", i)
            end = len(text) if end == -1 else end + 1
            out.append(text[i:end])
            i = end
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = len(text) if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = len(text) if end == -1 else end + 2
        else:
            out.append(char)
            i += 1
    return "".join(out)


def _top_level_statements(text: str) -> list[str]:
    """Split source into ``;`` terminated statements outside of any block."""
    statements: list[str] = []
    buffer: list[str] = []
    braces = 0
    parens = 0
    interpolation = 0
    quote: str | None = None
    for index, char in enumerate(text):
        if quote:
            if braces == 0:
                buffer.append(char)
            if char == quote:
                quote = None
            continue
        if char in ("'", '"'):
            quote = char
        elif char == "(":
            parens += 1
        elif char == ")":
            parens = max(parens - 1, 0)
        elif char == "{" and index and text[index - 1] == "#":
            # "#{...}" interpolation, not a block.
            interpolation += 1
        elif char == "}" and interpolation:
            interpolation -= 1
        elif char == "{" and parens == 0:
            # Rule sets, mixins and control blocks are not top-level variables.
            if braces == 0:
                buffer = []
            braces += 1
            continue
        elif char == "}" and parens == 0:
            braces = max(braces - 1, 0)
            continue
        if braces:
            continue
        if char == ";" and parens == 0 and not interpolation:
            statement = "".join(buffer).strip()
            if statement:
                statements.append(statement)
            buffer = []
            continue
        buffer.append(char)
    return statements


def _split_top_level(text: str, separator: str, maxsplit: int = -1) -> list[str]:
    parts: list[str] = []
    buffer: list[str] = []
    depth = 0
    quote: str | None = None
    for char in text:
        if quote:
            buffer.append(char)
            if char == quote:
                quote = None
            continue
        if char in ("'", '"'):
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == separator and depth == 0 and maxsplit != 0:
            parts.append("".join(buffer))
            buffer = []
            maxsplit -= 1
            continue
        buffer.append(char)
    parts.append("".join(buffer))
    return parts


def _wraps_whole_value(value: str) -> bool:
    depth = 0
    quote: str | None = None
    for index, char in enumerate(value):
        if quote:
            if char == quote:
                quote = None
            continue
        if char in ("'", '"'):
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0 and index < len(value) - 1:
                return False
    return depth == 0


def _parse_map(value: str) -> list[tuple[str, str]] | None:
    """Parse a Sass map literal into ordered ``(key, value)`` pairs."""
    if not (value.startswith("(") and value.endswith(")")):
        return None
    if not _wraps_whole_value(value):
        # "(a) + (b)" style expressions are not a single literal.
        return None
    inner = value[1:-1]

    items: list[tuple[str, str]] = []
    for part in _split_top_level(inner, ","):
        if not part.strip():
            continue
        pair = _split_top_level(part, ":", maxsplit=1)
        if len(pair) != 2:
            return None
        key = pair[0].strip().strip("'\"")
        items.append((key, pair[1].strip()))
    return items if items else None


def _load_export_json(path: Path, encoding: str) -> list[SassVariable]:
    payload = json.loads(path.read_text(encoding=encoding))
    if isinstance(payload, dict) and isinstance(payload.get("variables"), list):
        payload = payload["variables"]
    if not isinstance(payload, list):
        raise ValueError(f"sass export at {path} must be a list of variables")

    variables: list[SassVariable] = []
    for record in payload:
        if not isinstance(record, dict) or not record.get("name"):
            continue
        variables.append(
            SassVariable(
                name=normalize_variable_name(str(record["name"])),
                value=_as_text(record.get("value")),
                compiled_value=_as_optional_text(record.get("compiledValue")),
                map_value=_parse_export_map(record.get("mapValue")),
            )
        )
    return variables


def _parse_export_map(raw: Any) -> list[SassMapEntry] | None:
    if not isinstance(raw, list):
        return None
    return [
        SassMapEntry(
            name=str(item.get("name", "")).strip(),
            value=_as_text(item.get("value")),
            compiled_value=_as_optional_text(item.get("compiledValue")),
        )
        for item in raw
        if isinstance(item, dict)
    ]


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _as_optional_text(value: Any) -> str | None:
    return None if value is None else str(value)
