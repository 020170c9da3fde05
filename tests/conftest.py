"""
Pytest configuration and shared fixtures.
"""
from io import BytesIO
from pathlib import Path
from typing import List, Optional

import pytest
from openpyxl import load_workbook

from xlsx_templates.config import RenderingConfig
from xlsx_templates.generator import ExcelGenerator
from xlsx_templates.models import Column, ColumnType, TemplateSettings, TemplateSheet
from xlsx_templates.registry import TemplateRegistry

ROOT_DIR = Path(__file__).resolve().parent.parent
SAMPLE_TEMPLATES = ROOT_DIR / "config" / "templates.yaml"


@pytest.fixture(autouse=True)
def env_setup(monkeypatch):
    """Keep host environment out of the settings."""
    for name in (
        "XLSX_TEMPLATES_FILE",
        "XLSX_RENDER_DATA_ROWS",
        "XLSX_RENDER_INFO_ROW",
        "XLSX_RENDER_PROTECT_SHEETS",
        "XLSX_RENDER_SHEET_PASSWORD",
        "XLSX_RENDER_REQUIRED_HIGHLIGHT",
        "XLSX_LOG_LEVEL",
        "XLSX_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)


def column(
    header: str,
    column_type: Optional[ColumnType] = None,
    required: bool = False,
    description: Optional[str] = None,
    format: Optional[str] = None,
    tooltip: Optional[str] = None,
    allowed_values: Optional[List[str]] = None,
) -> Column:
    return Column(
        header=header,
        type=column_type,
        required=required,
        description=description,
        format=format,
        tooltip=tooltip,
        allowed_values=allowed_values or [],
    )


def sheet(name: str, columns: List[Column], base_sheets: Optional[List[str]] = None) -> TemplateSheet:
    return TemplateSheet(name=name, base_sheets=base_sheets or [], columns=columns)


def settings(sheets: List[str], base_templates: Optional[List[str]] = None) -> TemplateSettings:
    return TemplateSettings(sheets=sheets, base_templates=base_templates or [])


def open_workbook(content: bytes):
    """Load generated bytes back into openpyxl."""
    return load_workbook(BytesIO(content))


@pytest.fixture
def registry():
    return TemplateRegistry.defaults()


@pytest.fixture
def rendering_config():
    return RenderingConfig()


@pytest.fixture
def generator(registry, rendering_config):
    return ExcelGenerator(registry, rendering_config)
