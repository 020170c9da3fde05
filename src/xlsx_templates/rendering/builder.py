"""
Sheet Builder

Creates one worksheet per resolved template sheet and drives the formatter
column by column.
"""
from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from ..models import Column, TemplateSheet
from .formatter import SheetFormatter


class SheetBuilder:
    """Builds template worksheets into a workbook."""

    def __init__(self, workbook: Workbook, formatter: SheetFormatter):
        self.workbook = workbook
        self.formatter = formatter

    def build_sheet(self, sheet_definition: TemplateSheet) -> Worksheet:
        ws = self.workbook.create_sheet(title=sheet_definition.name)
        for column_index, column in enumerate(sheet_definition.columns, start=1):
            self._process_column(ws, column_index, column)

        self.formatter.finalize_sheet(ws, sheet_definition.columns)
        self.formatter.protect_sheet(ws)
        return ws

    def _process_column(self, ws: Worksheet, column_index: int, column: Column) -> None:
        self.formatter.apply_column_format(ws, column_index, column)
        self.formatter.apply_column_validation(ws, column_index, column)
        self.formatter.apply_header(ws, column_index, column)
        self.formatter.apply_column_tooltip(ws, column_index, column)
        self.formatter.apply_info_cell(ws, column_index, column)
        self.formatter.apply_required_highlight(ws, column_index, column)
