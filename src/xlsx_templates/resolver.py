"""
xlsx-templates - Template Resolver

Resolves sheet inheritance (base sheets contribute columns, later columns
override earlier ones by header) and instrument template inheritance (base
templates contribute sheet names, re-declared names keep their first
position). The resolver is a pure function of its inputs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

import structlog

from .exceptions import (
    BlankNameError,
    CircularReferenceError,
    ConfigurationError,
    UnknownReferenceError,
)
from .models import Column, TemplateDefinition, TemplateSettings, TemplateSheet, has_text

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ResolvedTemplates:
    """Result of a resolution run."""

    sheet_index: Mapping[str, TemplateSheet]
    instrument_templates: Mapping[str, TemplateDefinition]

    @property
    def instrument_types(self) -> list[str]:
        return list(self.instrument_templates)


def resolve(
    sheets: Optional[Iterable[TemplateSheet]],
    instrument_templates: Optional[Mapping[str, TemplateSettings]],
) -> ResolvedTemplates:
    """
    Resolve template sheets and instrument templates.

    Args:
        sheets: Raw template sheets, unique non-blank names
        instrument_templates: Raw template settings by instrument type

    Returns:
        Flattened sheet index and resolved definitions by instrument type

    Raises:
        ConfigurationError: No instrument templates, duplicate sheet names,
            blank names, unknown references or circular references
    """
    if not instrument_templates:
        raise ConfigurationError("instrument templates must not be empty")

    sheet_index = resolve_sheets(sheets or [])
    definitions = resolve_instrument_templates(sheet_index, instrument_templates)

    logger.debug(
        "Templates resolved",
        sheets=len(sheet_index),
        instrument_templates=len(definitions),
    )
    return ResolvedTemplates(
        sheet_index=MappingProxyType(sheet_index),
        instrument_templates=MappingProxyType(definitions),
    )


# =============================================================================
# Sheets
# =============================================================================

def resolve_sheets(sheets: Iterable[TemplateSheet]) -> dict[str, TemplateSheet]:
    """Resolve every declared sheet, in declaration order."""
    source: dict[str, TemplateSheet] = {}
    for sheet in sheets:
        if not has_text(sheet.name):
            raise BlankNameError("sheet")
        if sheet.name in source:
            raise ConfigurationError(f"Duplicate template sheet: {sheet.name}")
        source[sheet.name] = sheet

    resolved: dict[str, TemplateSheet] = {}
    in_progress: set[str] = set()
    for name in source:
        _resolve_sheet(name, source, resolved, in_progress)
    return {name: resolved[name] for name in source}


def _resolve_sheet(
    name: str,
    source: Mapping[str, TemplateSheet],
    resolved: dict[str, TemplateSheet],
    in_progress: set[str],
) -> TemplateSheet:
    cached = resolved.get(name)
    if cached is not None:
        return cached

    sheet = source.get(name)
    if sheet is None:
        raise UnknownReferenceError("sheet", name)
    if name in in_progress:
        raise CircularReferenceError("sheet", name)
    in_progress.add(name)

    # dict re-assignment keeps the first-seen slot
    columns: dict[str, Column] = {}
    for base_name in sheet.base_sheets:
        base = _resolve_sheet(base_name, source, resolved, in_progress)
        for column in base.columns:
            columns[column.header] = column
    for column in sheet.columns:
        columns[column.header] = column

    merged = TemplateSheet(name=sheet.name, columns=list(columns.values()))
    in_progress.discard(name)
    resolved[name] = merged
    return merged


# =============================================================================
# Instrument templates
# =============================================================================

def resolve_instrument_templates(
    sheet_index: Mapping[str, TemplateSheet],
    templates: Mapping[str, TemplateSettings],
) -> dict[str, TemplateDefinition]:
    """Resolve every declared instrument template against the sheet index."""
    merged: dict[str, TemplateSettings] = {}
    in_progress: list[str] = []
    for name in templates:
        _resolve_template(name, templates, merged, in_progress)

    return {
        name: TemplateDefinition.from_settings(merged[name], sheet_index)
        for name in templates
    }


def _resolve_template(
    name: str,
    source: Mapping[str, TemplateSettings],
    resolved: dict[str, TemplateSettings],
    in_progress: list[str],
) -> TemplateSettings:
    cached = resolved.get(name)
    if cached is not None:
        return cached

    template = source.get(name)
    if template is None:
        raise UnknownReferenceError("template", name)
    if name in in_progress:
        raise CircularReferenceError("template", name)
    in_progress.append(name)

    sheet_names: list[str] = []
    for base_name in template.base_templates:
        base = _resolve_template(base_name, source, resolved, in_progress)
        sheet_names.extend(base.sheets)
    sheet_names.extend(template.sheets)

    merged = TemplateSettings(sheets=list(dict.fromkeys(sheet_names)))
    in_progress.pop()
    resolved[name] = merged
    return merged
