"""
Excel Generator - Generate bulk upload workbooks from resolved templates.

Each call allocates its own workbook, style cache and formatter, so one
generator instance can serve concurrent requests.
"""

from io import BytesIO
from typing import Optional, Union

import structlog
from openpyxl import Workbook

from .config import RenderingConfig
from .exceptions import InvalidArgumentError, UnknownInstrumentTypeError, ValidationError
from .models import TemplateDefinition
from .registry import TemplateRegistry
from .rendering import SheetBuilder, SheetFormatter, StyleCache

logger = structlog.get_logger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class ExcelGenerator:
    """
    Bulk upload template generator.

    Renders resolved instrument templates into xlsx workbooks with typed
    column formats, data validation, header tooltips and required-field
    highlighting.
    """

    def __init__(self, registry: TemplateRegistry, settings: Optional[RenderingConfig] = None):
        self.registry = registry
        self.settings = settings or RenderingConfig()

    def generate_template(self, template: Union[str, TemplateDefinition, None]) -> bytes:
        """
        Generate a workbook.

        Args:
            template: Instrument type name, or an already resolved definition

        Returns:
            xlsx file as bytes

        Raises:
            InvalidArgumentError: Blank instrument type
            UnknownInstrumentTypeError: No template for the instrument type
            ValidationError: Missing or empty definition
        """
        if template is None:
            raise ValidationError("template definition must not be None")
        if isinstance(template, TemplateDefinition):
            return self.render(template)

        definition = self.lookup(template)
        content = self.render(definition)
        logger.info(
            "Template generated",
            instrument_type=template,
            sheets=len(definition.sheets),
            size=len(content),
        )
        return content

    def lookup(self, instrument_type: Optional[str]) -> TemplateDefinition:
        """Resolved definition for an instrument type"""
        if instrument_type is None or not str(instrument_type).strip():
            raise InvalidArgumentError("instrumentType must be provided")
        definition = self.registry.get(instrument_type)
        if definition is None:
            raise UnknownInstrumentTypeError(instrument_type)
        return definition

    def render(self, definition: TemplateDefinition) -> bytes:
        """Render a resolved definition to xlsx bytes"""
        if definition is None:
            raise ValidationError("template definition must not be None")
        if not definition.sheets:
            raise ValidationError("template definition must contain at least one sheet")

        workbook = Workbook()
        try:
            workbook.remove(workbook.active)
            formatter = SheetFormatter(workbook, self.settings, StyleCache(workbook))
            builder = SheetBuilder(workbook, formatter)
            for sheet_definition in definition.sheets:
                builder.build_sheet(sheet_definition)

            with BytesIO() as output:
                workbook.save(output)
                return output.getvalue()
        finally:
            workbook.close()
