"""
Sheet Formatter

Per-column formatting for template worksheets: column number formats, data
validation, header tooltips, header styles, required-cell highlighting and
sheet finalization (auto-filter, freeze panes, column widths, protection).
"""
from typing import List, Optional

import structlog
from openpyxl import Workbook
from openpyxl.cell.cell import Cell
from openpyxl.comments import Comment
from openpyxl.formatting.rule import FormulaRule
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.datavalidation import DataValidation
from openpyxl.worksheet.worksheet import Worksheet

from ..config import RenderingConfig, RequiredHighlight
from ..models import Column, ColumnType, has_text
from .styles import StyleCache, highlight_border

logger = structlog.get_logger(__name__)

DATE_MIN_FORMULA = "DATE(1900,1,1)"
DATE_MAX_FORMULA = "DATE(9999,12,31)"
NUMBER_MIN_FORMULA = "-1E+307"
NUMBER_MAX_FORMULA = "1E+307"

# Excel rejects inline list formulas longer than this
MAX_LIST_FORMULA_LENGTH = 255


def build_validation(column: Column, cell_range: str) -> Optional[DataValidation]:
    """
    Create the data validation for a column, or None when its type has none.

    Args:
        column: Column definition
        cell_range: Bounded data band, e.g. "A2:A10001"
    """
    column_type = column.resolved_type()

    if column_type in (ColumnType.LIST, ColumnType.BOOLEAN):
        values = column.resolved_allowed_values()
        if not values:
            return None
        formula = '"' + ",".join(v.replace('"', '""') for v in values) + '"'
        if len(formula) > MAX_LIST_FORMULA_LENGTH:
            logger.warning(
                "List validation exceeds Excel formula limit",
                column=column.header,
                length=len(formula),
            )
        validation = DataValidation(type="list", formula1=formula, allow_blank=True)
    elif column_type is ColumnType.DATE:
        validation = DataValidation(
            type="date",
            operator="between",
            formula1=DATE_MIN_FORMULA,
            formula2=DATE_MAX_FORMULA,
            allow_blank=True,
        )
    elif column_type is ColumnType.NUMBER:
        validation = DataValidation(
            type="decimal",
            operator="between",
            formula1=NUMBER_MIN_FORMULA,
            formula2=NUMBER_MAX_FORMULA,
            allow_blank=True,
        )
    else:
        return None

    validation.errorStyle = "stop"
    validation.showErrorMessage = True
    validation.errorTitle = column.header
    validation.error = f"Invalid {column.type_label.lower()} value"
    validation.add(cell_range)
    return validation


def build_info_text(column: Column) -> str:
    """Inline summary of a column's constraints for the info row"""
    parts = [
        column.type_label,
        "REQUIRED" if column.required else "OPTIONAL",
    ]
    if has_text(column.description):
        parts.append(column.description.strip())
    values = column.resolved_allowed_values()
    if values:
        parts.append("Allowed: " + ", ".join(values))
    parts.append("Format: " + column.resolved_format())
    return "\n".join(parts)


class SheetFormatter:
    """Applies formatting rules to template worksheets of one workbook."""

    def __init__(self, workbook: Workbook, settings: RenderingConfig, styles: Optional[StyleCache] = None):
        self.workbook = workbook
        self.settings = settings
        self.styles = styles or StyleCache(workbook)

    @property
    def header_row(self) -> int:
        return 1

    @property
    def info_row(self) -> Optional[int]:
        return 2 if self.settings.info_row else None

    @property
    def first_data_row(self) -> int:
        return self.settings.header_rows + 1

    @property
    def last_data_row(self) -> int:
        return self.settings.header_rows + self.settings.data_rows

    def data_band(self, column_index: int) -> str:
        """Bounded data range of a column (1-based index)"""
        letter = get_column_letter(column_index)
        return f"{letter}{self.first_data_row}:{letter}{self.last_data_row}"

    # -------------------------------------------------------------------------
    # Columns
    # -------------------------------------------------------------------------

    def apply_column_format(self, ws: Worksheet, column_index: int, column: Column) -> None:
        """Default style for the whole column: number format, unlocked for entry"""
        style = self.styles.column_style(column.resolved_format())
        dimension = ws.column_dimensions[get_column_letter(column_index)]
        dimension.number_format = style.number_format
        dimension.protection = style.protection

    def apply_column_validation(self, ws: Worksheet, column_index: int, column: Column) -> Optional[DataValidation]:
        validation = build_validation(column, self.data_band(column_index))
        if validation is not None:
            ws.add_data_validation(validation)
        return validation

    def apply_column_tooltip(self, ws: Worksheet, column_index: int, column: Column) -> Optional[Comment]:
        """Attach the column help text as a comment on the header cell"""
        tooltip = column.resolved_tooltip()
        if not has_text(tooltip):
            return None
        comment = Comment(tooltip, self.settings.comment_author)
        ws.cell(row=self.header_row, column=column_index).comment = comment
        return comment

    def apply_header(self, ws: Worksheet, column_index: int, column: Column) -> Cell:
        cell = ws.cell(row=self.header_row, column=column_index, value=column.header)
        cell.style = self.styles.header_style(column.required)
        return cell

    def apply_info_cell(self, ws: Worksheet, column_index: int, column: Column) -> Optional[Cell]:
        if self.info_row is None:
            return None
        cell = ws.cell(row=self.info_row, column=column_index, value=build_info_text(column))
        cell.style = self.styles.info_style()
        return cell

    def apply_required_highlight(self, ws: Worksheet, column_index: int, column: Column) -> None:
        """Flag empty cells of required columns within the data band"""
        mode = self.settings.required_highlight
        if not column.required or mode == RequiredHighlight.NONE:
            return

        first_cell = f"${get_column_letter(column_index)}{self.first_data_row}"
        if mode == RequiredHighlight.BLANK:
            formula = f"ISBLANK({first_cell})"
        else:
            formula = f"LEN(TRIM({first_cell}))=0"

        rule = FormulaRule(formula=[formula], border=highlight_border())
        ws.conditional_formatting.add(self.data_band(column_index), rule)

    # -------------------------------------------------------------------------
    # Sheet
    # -------------------------------------------------------------------------

    def finalize_sheet(self, ws: Worksheet, columns: List[Column]) -> None:
        """Auto-filter, freeze panes and column widths"""
        column_count = len(columns)
        filter_row = self.settings.header_rows
        if column_count > 0:
            ws.auto_filter.ref = f"A{filter_row}:{get_column_letter(column_count)}{filter_row}"

        ws.freeze_panes = f"A{self.first_data_row}"
        self.autosize_columns(ws, columns)

    def autosize_columns(self, ws: Worksheet, columns: List[Column]) -> None:
        """Size columns to their content, padded for the filter button"""
        for column_index, column in enumerate(columns, start=1):
            content_width = max(
                [len(column.header)]
                + [len(v) for v in column.resolved_allowed_values()]
                + self._info_line_widths(column)
            )
            width = min(max(content_width + 2, self.settings.min_column_width), self.settings.max_column_width)
            ws.column_dimensions[get_column_letter(column_index)].width = round(
                width * self.settings.column_padding, 2
            )

    def _info_line_widths(self, column: Column) -> List[int]:
        if self.info_row is None:
            return []
        return [len(line) for line in build_info_text(column).splitlines()]

    def protect_sheet(self, ws: Worksheet) -> None:
        """Lock structural cells; data cells stay editable through the column styles"""
        if not self.settings.protect_sheets:
            return
        protection = ws.protection
        protection.sheet = True
        # False means the action stays available on a protected sheet
        protection.autoFilter = False
        protection.sort = False
        protection.formatColumns = False
        if self.settings.sheet_password:
            protection.password = self.settings.sheet_password
