"""
xlsx-templates

Generates bulk upload workbooks from inheritable template definitions.

Features:
- Template sheets inherit columns from base sheets (override by header)
- Instrument templates inherit sheet lists from base templates
- Typed columns with number formats, data validation and header tooltips
- Required columns styled distinctly and highlighted when left empty
- YAML template configuration, FastAPI download endpoint and CLI

Usage:
    from xlsx_templates import ExcelGenerator, TemplateRegistry

    registry = TemplateRegistry.defaults()
    content = ExcelGenerator(registry).generate_template("MORTGAGE")
"""

from .config import (
    AppConfig,
    LogConfig,
    RenderingConfig,
    RequiredHighlight,
    load_config,
)

from .exceptions import (
    BlankNameError,
    CircularReferenceError,
    ConfigurationError,
    InvalidArgumentError,
    TemplateError,
    UnknownInstrumentTypeError,
    UnknownReferenceError,
    ValidationError,
)

from .models import (
    Column,
    ColumnType,
    TemplateDefinition,
    TemplateSettings,
    TemplateSheet,
)

from .resolver import ResolvedTemplates, resolve
from .registry import TemplateRegistry
from .generator import ExcelGenerator


__version__ = "0.1.0"
__all__ = [
    # Config
    "AppConfig",
    "LogConfig",
    "RenderingConfig",
    "RequiredHighlight",
    "load_config",

    # Errors
    "TemplateError",
    "ConfigurationError",
    "BlankNameError",
    "UnknownReferenceError",
    "CircularReferenceError",
    "InvalidArgumentError",
    "ValidationError",
    "UnknownInstrumentTypeError",

    # Models
    "Column",
    "ColumnType",
    "TemplateSheet",
    "TemplateSettings",
    "TemplateDefinition",

    # Resolution
    "ResolvedTemplates",
    "resolve",
    "TemplateRegistry",

    # Generation
    "ExcelGenerator",
]
