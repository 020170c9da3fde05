"""
xlsx-templates - Data Models

Pydantic models for columns, template sheets, instrument template settings
and resolved template definitions. Models are frozen: once a definition is
resolved it is shared read-only between generation calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import UnknownReferenceError


def has_text(value: Optional[str]) -> bool:
    """True when value is a non-blank string."""
    return value is not None and bool(str(value).strip())


def _text_list(values: Optional[Iterable[Any]]) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    return [str(v) for v in values if v is not None and has_text(str(v))]


# =============================================================================
# Enums
# =============================================================================

class ColumnType(str, Enum):
    """Column data type, drives cell format and data validation."""
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    DATE = "DATE"
    LIST = "LIST"
    BOOLEAN = "BOOLEAN"

    @property
    def label(self) -> str:
        return self.value

    @property
    def default_format(self) -> str:
        return _DEFAULT_FORMATS[self]


_DEFAULT_FORMATS = {
    ColumnType.TEXT: "@",
    ColumnType.NUMBER: "#,##0.00############",
    ColumnType.DATE: "dd/mm/yyyy",
    ColumnType.LIST: "@",
    ColumnType.BOOLEAN: "@",
}

BOOLEAN_VALUES = ("YES", "NO")


# =============================================================================
# Columns & Sheets
# =============================================================================

class Column(BaseModel):
    """Single column of a template sheet."""

    model_config = ConfigDict(frozen=True)

    header: str
    required: bool = False
    description: Optional[str] = None
    format: Optional[str] = None
    tooltip: Optional[str] = None
    type: Optional[ColumnType] = None
    allowed_values: list[str] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            return v or None
        return v

    @field_validator("allowed_values", mode="before")
    @classmethod
    def dedupe_allowed_values(cls, v):
        # ordered set: first occurrence wins
        return list(dict.fromkeys(_text_list(v)))

    def resolved_type(self) -> ColumnType:
        return self.type or ColumnType.TEXT

    def resolved_format(self) -> str:
        """Explicit format when non-blank, otherwise the type default."""
        if self.format is not None and self.format.strip():
            return self.format.strip()
        return self.resolved_type().default_format

    def resolved_allowed_values(self) -> list[str]:
        if not self.allowed_values and self.resolved_type() is ColumnType.BOOLEAN:
            return list(BOOLEAN_VALUES)
        return list(self.allowed_values)

    def resolved_tooltip(self) -> str:
        """Help text shown for the column: tooltip, then description, then empty."""
        if has_text(self.tooltip):
            return self.tooltip
        if has_text(self.description):
            return self.description
        return ""

    @property
    def type_label(self) -> str:
        return self.resolved_type().label


class TemplateSheet(BaseModel):
    """
    Template sheet definition.

    Raw sheets may list base sheets to inherit columns from. Resolved sheets
    (as produced by the resolver) carry the flattened column list and no bases.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    base_sheets: list[str] = Field(default_factory=list)
    columns: list[Column] = Field(default_factory=list)

    @field_validator("base_sheets", mode="before")
    @classmethod
    def drop_blank_bases(cls, v):
        return _text_list(v)

    @field_validator("columns", mode="before")
    @classmethod
    def default_columns(cls, v):
        return [] if v is None else v

    @property
    def headers(self) -> list[str]:
        return [column.header for column in self.columns]


class TemplateSettings(BaseModel):
    """Instrument template settings: sheet names and base templates."""

    model_config = ConfigDict(frozen=True)

    sheets: list[str] = Field(default_factory=list)
    base_templates: list[str] = Field(default_factory=list)

    @field_validator("sheets", "base_templates", mode="before")
    @classmethod
    def drop_blank_names(cls, v):
        return _text_list(v)


class TemplateDefinition(BaseModel):
    """Resolved instrument template: ordered list of resolved sheets."""

    model_config = ConfigDict(frozen=True)

    sheets: list[TemplateSheet] = Field(default_factory=list)

    @classmethod
    def from_settings(
        cls,
        settings: TemplateSettings,
        sheet_index: Mapping[str, TemplateSheet],
    ) -> "TemplateDefinition":
        """
        Materialize settings into a definition.

        Args:
            settings: Template settings with already merged sheet names
            sheet_index: Resolved sheets by name

        Raises:
            UnknownReferenceError: A sheet name is not in the index
        """
        sheets = []
        for sheet_name in settings.sheets:
            sheet = sheet_index.get(sheet_name)
            if sheet is None:
                raise UnknownReferenceError("sheet", sheet_name)
            sheets.append(sheet)
        return cls(sheets=sheets)

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]
