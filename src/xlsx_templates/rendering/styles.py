"""
Cell styles for workbook rendering.

Header and info styles are registered as named styles on the workbook.
Column styles carry a number format and an unlocked protection and are
applied to column dimensions directly. All of them are reused through a
StyleCache owned by a single generation call.
"""
from typing import Dict, NamedTuple, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, NamedStyle, PatternFill, Protection, Side

HEADER_FILL_COLOR = "4472C4"
HEADER_FONT_COLOR = "FFFFFF"
REQUIRED_HEADER_FONT_COLOR = "FFFF00"
INFO_FILL_COLOR = "D9E1F2"
INFO_FONT_COLOR = "404040"
HIGHLIGHT_BORDER_COLOR = "FF0000"


class ColumnStyle(NamedTuple):
    """Column-wide number format and cell protection"""
    number_format: str
    protection: Protection


def highlight_border() -> Border:
    """Thin red border used to flag empty required cells"""
    side = Side(style="thin", color=HIGHLIGHT_BORDER_COLOR)
    return Border(left=side, right=side, top=side, bottom=side)


class StyleCache:
    """
    Styles for one workbook.

    Column styles are keyed by the normalized format string so that columns
    sharing a format share one style entry.
    """

    def __init__(self, workbook: Workbook):
        self.workbook = workbook
        self._formats: Dict[str, ColumnStyle] = {}
        self._headers: Dict[bool, NamedStyle] = {}
        self._info: Optional[NamedStyle] = None

    def column_style(self, number_format: str) -> ColumnStyle:
        """Unlocked style carrying the column number format"""
        key = number_format.strip()
        style = self._formats.get(key)
        if style is None:
            style = ColumnStyle(number_format=key, protection=Protection(locked=False))
            self._formats[key] = style
        return style

    def header_style(self, required: bool) -> NamedStyle:
        """Bold, filled, locked header; required columns get a distinct font color"""
        style = self._headers.get(required)
        if style is None:
            style = NamedStyle(
                name="Template Header Required" if required else "Template Header",
                font=Font(
                    bold=True,
                    color=REQUIRED_HEADER_FONT_COLOR if required else HEADER_FONT_COLOR,
                ),
                fill=PatternFill(start_color=HEADER_FILL_COLOR, end_color=HEADER_FILL_COLOR, fill_type="solid"),
                alignment=Alignment(horizontal="left", vertical="center"),
                protection=Protection(locked=True),
            )
            self.workbook.add_named_style(style)
            self._headers[required] = style
        return style

    def info_style(self) -> NamedStyle:
        if self._info is None:
            self._info = NamedStyle(
                name="Template Info",
                font=Font(italic=True, size=9, color=INFO_FONT_COLOR),
                fill=PatternFill(start_color=INFO_FILL_COLOR, end_color=INFO_FILL_COLOR, fill_type="solid"),
                alignment=Alignment(horizontal="left", vertical="top", wrap_text=True),
                protection=Protection(locked=True),
            )
            self.workbook.add_named_style(self._info)
        return self._info

    @property
    def format_count(self) -> int:
        return len(self._formats)
