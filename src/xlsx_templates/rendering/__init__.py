"""
Workbook rendering: styles, per-column formatting and sheet building.
"""
from .builder import SheetBuilder
from .formatter import SheetFormatter, build_info_text, build_validation
from .styles import StyleCache

__all__ = [
    "SheetBuilder",
    "SheetFormatter",
    "StyleCache",
    "build_info_text",
    "build_validation",
]
