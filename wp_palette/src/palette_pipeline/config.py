from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _as_list(value: Any) -> Any:
    if isinstance(value, str):
        return [value]
    return value


class SassOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    path: str | None = Field(
        default="resources/assets/styles/config",
        description="Directory holding the Sass variable files",
    )
    files: list[str] = Field(
        default_factory=lambda: ["variables.scss"],
        validation_alias=AliasChoices("files", "file"),
        description="Sass files to read, relative to 'path'",
    )
    variables: list[str] = Field(
        default_factory=lambda: ["colors"],
        validation_alias=AliasChoices("variables", "variable"),
        description="Sass map variables to extract, with or without '$'",
    )

    @field_validator("files", "variables", mode="before")
    @classmethod
    def wrap_single_value(cls, value: Any) -> Any:
        return _as_list(value)


class PaletteConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    output: str = Field(default="theme.json", min_length=1)
    output_prepend: str = ""
    wp_theme_json: bool = Field(
        default=True,
        description="Write a nested theme.json document instead of a flat array",
    )
    blacklist: list[str] = Field(default_factory=lambda: ["transparent", "inherit"])
    blacklist_match: Literal["slug", "color", "both"] = "both"
    pretty: bool = Field(
        default=False, description="Pretty print flat output (nested always is)"
    )
    source_document: str | None = Field(
        default=None,
        description="Existing theme document to merge into; defaults to 'output'",
    )
    sass: SassOptions | None = Field(default_factory=SassOptions)

    @field_validator("blacklist", mode="before")
    @classmethod
    def wrap_single_value(cls, value: Any) -> Any:
        return _as_list(value)

    @property
    def mode(self) -> Literal["flat", "nested"]:
        return "nested" if self.wp_theme_json else "flat"

    @property
    def output_path(self) -> str:
        return self.output_prepend + self.output

    @property
    def document_path(self) -> str:
        return self.source_document or self.output


def load_config(
    path_like: str | Path | None = None,
    sass: dict[str, Any] | None = None,
    **overrides: Any,
) -> PaletteConfig:
    """Read a JSON config file and apply non-None overrides on top of it."""
    data: dict[str, Any] = {}
    if path_like is not None:
        path = Path(path_like)
        if path.exists():
            payload = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(payload, dict):
                raise ValueError(f"config at {path} must be a JSON object")
            data.update(payload)

    data.update({key: value for key, value in overrides.items() if value is not None})

    sass_overrides = {
        key: value for key, value in (sass or {}).items() if value is not None
    }
    if sass_overrides:
        sass_data = dict(data.get("sass") or {})
        sass_data.update(sass_overrides)
        data["sass"] = sass_data

    return PaletteConfig.model_validate(data)
