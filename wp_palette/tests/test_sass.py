from __future__ import annotations

import json

from wp_palette.src.palette_pipeline.config import SassOptions
from wp_palette.src.palette_pipeline.models import SassMapEntry, SassVariable
from wp_palette.src.palette_pipeline.sass import (
    ScssVariableExporter,
    extract_colors,
    load_sass_colors,
    resolve_source_files,
)

VARIABLES_SCSS = """\
// Theme colors
$red: #e11d48 !default;
$gray_base: #6b7280;

$colors: (
  'primary': $red,
  "secondary": #2563eb, /* brand blue */
  gray-500: $gray-base,
  overlay: rgba(0, 0, 0, 0.5),
) !default;

$spacing: 4px;

.button {
  $local: red;
  color: $red;
}

$brand: $colors;
"""


def _write_scss(tmp_path, text=VARIABLES_SCSS, name="variables.scss"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_exporter_reads_top_level_variables(tmp_path):
    path = _write_scss(tmp_path)

    variables = ScssVariableExporter().export([path])

    assert [v.name for v in variables] == ["$red", "$gray_base", "$colors", "$spacing", "$brand"]
    colors = variables[2]
    assert colors.map_value == [
        SassMapEntry(name="primary", value="$red", compiled_value="#e11d48"),
        SassMapEntry(name="secondary", value="#2563eb", compiled_value="#2563eb"),
        SassMapEntry(name="gray-500", value="$gray-base", compiled_value="#6b7280"),
        SassMapEntry(
            name="overlay",
            value="rgba(0, 0, 0, 0.5)",
            compiled_value="rgba(0, 0, 0, 0.5)",
        ),
    ]
    assert variables[3].map_value is None
    assert variables[4].map_value == colors.map_value


def test_exporter_shares_scope_across_files(tmp_path):
    base = _write_scss(tmp_path, "$accent: #f59e0b;\n", name="base.scss")
    theme = _write_scss(tmp_path, "$colors: (accent: $accent);\n", name="theme.scss")

    variables = ScssVariableExporter().export([base, theme])

    assert variables[1].map_value[0].compiled_value == "#f59e0b"


def test_exporter_reads_sass_export_json(tmp_path):
    path = tmp_path / "export.json"
    path.write_text(
        json.dumps(
            [
                {
                    "name": "$colors",
                    "value": "(primary: $red)",
                    "mapValue": [
                        {"name": "primary", "value": "$red", "compiledValue": "#ff0000"}
                    ],
                },
                {"name": "$gutter", "value": "1rem", "compiledValue": "1rem"},
            ]
        ),
        encoding="utf-8",
    )

    variables = ScssVariableExporter().export([path])

    assert variables[0].map_value == [
        SassMapEntry(name="primary", value="$red", compiled_value="#ff0000")
    ]
    assert variables[1].map_value is None


def test_extract_colors_normalizes_allowed_names():
    variables = [
        SassVariable(
            name="$colors",
            value="(a: #000)",
            map_value=[SassMapEntry(name="a", value="$black", compiled_value="#000")],
        ),
        SassVariable(name="$other", value="(b: #fff)", map_value=[SassMapEntry("b", "#fff")]),
        SassVariable(name="$plain", value="#abc"),
    ]

    entries = extract_colors(variables, ["colors", "$plain"])

    assert [(e.name, e.value) for e in entries] == [("a", "#000")]


def test_extract_colors_with_empty_allow_list_is_empty():
    variables = [SassVariable(name="$colors", value="", map_value=[SassMapEntry("a", "#000")])]

    assert extract_colors(variables, []) == []


def test_missing_sources_return_empty(tmp_path, caplog):
    options = SassOptions(path=str(tmp_path), files=["missing.scss"], variables=["colors"])

    assert resolve_source_files(options) == []
    assert load_sass_colors(options) == []
    assert "sass source not found" in caplog.text
    assert load_sass_colors(None) == []


def test_load_sass_colors_builds_records(tmp_path):
    _write_scss(tmp_path)
    options = SassOptions(path=str(tmp_path), files=["variables.scss"], variables=["$colors"])

    records = load_sass_colors(options)

    assert [(r.name, r.slug, r.color) for r in records] == [
        ("Primary", "primary", "#e11d48"),
        ("Secondary", "secondary", "#2563eb"),
        ("Gray 500", "gray-500", "#6b7280"),
        ("Overlay", "overlay", "rgba(0, 0, 0, 0.5)"),
    ]


def test_exporter_failure_degrades_to_empty(tmp_path):
    _write_scss(tmp_path)
    options = SassOptions(path=str(tmp_path), files=["variables.scss"], variables=["colors"])

    class BrokenExporter:
        def export(self, files):
            raise ValueError("cannot compile")

    assert load_sass_colors(options, exporter=BrokenExporter()) == []


def test_unquoted_url_does_not_start_a_comment(tmp_path):
    _write_scss(
        tmp_path,
        "@import url(https://fonts.googleapis.com/css?family=Roboto);\n"
        "$colors: (primary: #f00, black: #000); // trailing note\n",
    )
    options = SassOptions(path=str(tmp_path), files=["variables.scss"], variables=["colors"])

    assert [r.slug for r in load_sass_colors(options)] == ["primary", "black"]


def test_interpolation_is_not_a_block(tmp_path):
    path = _write_scss(
        tmp_path,
        "$size: 4;\n"
        "$gap: #{$size}px;\n"
        ".gap-#{$size} { margin: $gap; }\n"
        "$colors: (primary: #f00);\n",
    )

    variables = ScssVariableExporter().export([path])

    assert [v.name for v in variables] == ["$size", "$gap", "$colors"]
    assert variables[1].compiled_value == "4px"


def test_extract_colors_treats_hyphen_and_underscore_alike():
    variables = [
        SassVariable(
            name="$brand_colors",
            value="(a: #000)",
            map_value=[SassMapEntry(name="a", value="#000")],
        )
    ]

    assert [e.name for e in extract_colors(variables, ["brand-colors"])] == ["a"]
