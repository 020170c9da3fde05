"""
xlsx-templates - Template Registry

Owns the raw template sheets and instrument templates and caches their
resolution. Replacing any raw input invalidates the cached result.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import structlog
import yaml
from pydantic import ValidationError as PydanticValidationError

from .config import AppConfig
from .defaults import default_instrument_templates, default_template_sheets
from .exceptions import ConfigurationError
from .models import TemplateDefinition, TemplateSettings, TemplateSheet
from .resolver import ResolvedTemplates, resolve

logger = structlog.get_logger(__name__)


def _normalize_keys(data: Any) -> Any:
    """Accept kebab-case keys (template-sheets) next to snake_case ones."""
    if isinstance(data, Mapping):
        return {
            (k.replace("-", "_") if isinstance(k, str) else k): _normalize_keys(v)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_normalize_keys(item) for item in data]
    return data


class TemplateRegistry:
    """Registry of template sheets and instrument templates"""

    def __init__(
        self,
        template_sheets: Optional[Iterable[TemplateSheet]] = None,
        instrument_templates: Optional[Mapping[str, TemplateSettings]] = None,
    ):
        self._template_sheets: List[TemplateSheet] = list(template_sheets or [])
        self._instrument_templates: Dict[str, TemplateSettings] = dict(instrument_templates or {})
        self._resolved: Optional[ResolvedTemplates] = None

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def defaults(cls) -> "TemplateRegistry":
        """Registry with the built-in templates"""
        return cls(default_template_sheets(), default_instrument_templates())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TemplateRegistry":
        """
        Build a registry from plain data.

        Expected keys are ``template_sheets`` (list of sheets) and
        ``instrument_templates`` (mapping of instrument type to settings).
        An enclosing ``excel.template`` section is unwrapped.

        Raises:
            ConfigurationError: The data does not describe valid templates
        """
        data = _normalize_keys(data or {})
        if not isinstance(data, Mapping):
            raise ConfigurationError("template configuration must be a mapping")
        excel = data.get("excel")
        if isinstance(excel, Mapping) and isinstance(excel.get("template"), Mapping):
            data = excel["template"]

        raw_sheets = data.get("template_sheets") or []
        raw_templates = data.get("instrument_templates") or {}
        if not isinstance(raw_sheets, list) or not isinstance(raw_templates, Mapping):
            raise ConfigurationError(
                "template_sheets must be a list and instrument_templates a mapping"
            )

        try:
            sheets = [TemplateSheet.model_validate(sheet) for sheet in raw_sheets]
            templates = {
                str(name): TemplateSettings.model_validate(settings or {})
                for name, settings in raw_templates.items()
            }
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid template configuration: {e}") from e

        return cls(sheets, templates)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "TemplateRegistry":
        """Load a registry from a YAML document."""
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read template file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in template file {path}: {e}") from e

        logger.info("Loading templates", path=str(path))
        return cls.from_dict(data or {})

    @classmethod
    def from_config(cls, config: AppConfig) -> "TemplateRegistry":
        """Registry from the configured templates file, or the built-in templates."""
        if config.templates_file is not None:
            return cls.from_yaml(config.templates_file)
        return cls.defaults()

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set_template_sheets(self, sheets: Optional[Iterable[TemplateSheet]]) -> None:
        self._template_sheets = list(sheets or [])
        self._resolved = None

    def set_instrument_templates(self, templates: Optional[Mapping[str, TemplateSettings]]) -> None:
        self._instrument_templates = dict(templates or {})
        self._resolved = None

    def register_sheet(self, sheet: TemplateSheet) -> None:
        """Add or replace a template sheet"""
        self._template_sheets = [s for s in self._template_sheets if s.name != sheet.name]
        self._template_sheets.append(sheet)
        self._resolved = None

    def register_template(self, instrument_type: str, settings: TemplateSettings) -> None:
        """Add or replace an instrument template"""
        self._instrument_templates[instrument_type] = settings
        self._resolved = None

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    @property
    def template_sheets(self) -> List[TemplateSheet]:
        return list(self._template_sheets)

    @property
    def instrument_templates(self) -> Dict[str, TemplateSettings]:
        return dict(self._instrument_templates)

    def initialize(self) -> ResolvedTemplates:
        """Resolve eagerly so configuration errors surface at startup"""
        return self.resolved()

    def resolved(self) -> ResolvedTemplates:
        if self._resolved is None:
            self._resolved = resolve(self._template_sheets, self._instrument_templates)
            logger.info(
                "Template registry resolved",
                sheets=len(self._resolved.sheet_index),
                instrument_templates=len(self._resolved.instrument_templates),
            )
        return self._resolved

    def resolved_sheet_index(self) -> Mapping[str, TemplateSheet]:
        return self.resolved().sheet_index

    def resolved_instrument_templates(self) -> Mapping[str, TemplateDefinition]:
        return self.resolved().instrument_templates

    def get(self, instrument_type: str) -> Optional[TemplateDefinition]:
        """Get resolved definition by instrument type"""
        return self.resolved_instrument_templates().get(instrument_type)

    def list_templates(self) -> List[Dict[str, Any]]:
        """List resolved instrument templates with their sheets"""
        return [
            {
                "instrument_type": name,
                "sheets": [
                    {"name": sheet.name, "columns": sheet.headers}
                    for sheet in definition.sheets
                ],
            }
            for name, definition in self.resolved_instrument_templates().items()
        ]
