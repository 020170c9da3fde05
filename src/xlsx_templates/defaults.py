"""
xlsx-templates - Built-in Templates

Default template sheets and the MORTGAGE instrument template, used when no
templates file is configured.
"""

from typing import Dict, List, Optional

from .models import Column, ColumnType, TemplateSettings, TemplateSheet


MORTGAGE_SHEETS = [
    "INSTRUMENT_DETAILS",
    "LINKED_DEALS",
    "LINKED_ASSETS",
    "PERSISTED_IDS",
    "LINKED_INSTRUMENTS",
    "LINKED_PARTIES",
]


def _column(
    header: str,
    column_type: ColumnType,
    required: bool,
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


def default_template_sheets() -> List[TemplateSheet]:
    """Built-in template sheets"""
    return [
        TemplateSheet(name="INSTRUMENT_DETAILS", columns=[
            _column("INSTRUMENT_ID", ColumnType.TEXT, True, "Unique instrument identifier"),
            _column("INSTRUMENT_NAME", ColumnType.TEXT, True, "Instrument name"),
            _column("CURRENCY", ColumnType.LIST, True, "ISO 4217 currency code",
                    allowed_values=["PLN", "EUR", "USD"]),
            _column("ISSUE_DATE", ColumnType.DATE, False, "Issue date", format="dd/mm/yyyy"),
        ]),
        TemplateSheet(name="LINKED_DEALS", columns=[
            _column("DEAL_ID", ColumnType.TEXT, True),
            _column("DEAL_TYPE", ColumnType.LIST, True, "Deal type (e.g. PRIMARY, SECONDARY)",
                    allowed_values=["PRIMARY", "SECONDARY", "TERTIARY"]),
            _column("DEAL_DATE", ColumnType.DATE, True, format="dd.mm.yyyy",
                    tooltip="Select the deal date in dd.mm.yyyy format"),
            _column("NOTIONAL", ColumnType.NUMBER, True, "Notional amount",
                    tooltip="Provide the notional amount in the deal currency"),
        ]),
        TemplateSheet(name="LINKED_ASSETS", columns=[
            _column("ASSET_ID", ColumnType.TEXT, True),
            _column("ASSET_CLASS", ColumnType.TEXT, True),
            _column("ASSET_VALUE", ColumnType.NUMBER, False),
        ]),
        TemplateSheet(name="PERSISTED_IDS", columns=[
            _column("ENTITY_TYPE", ColumnType.TEXT, True),
            _column("LEGACY_ID", ColumnType.TEXT, True),
            _column("SOURCE_SYSTEM", ColumnType.TEXT, False),
        ]),
        TemplateSheet(name="LINKED_INSTRUMENTS", columns=[
            _column("MASTER_INSTRUMENT_ID", ColumnType.TEXT, True),
            _column("RELATED_INSTRUMENT_ID", ColumnType.TEXT, True),
            _column("RELATIONSHIP_TYPE", ColumnType.TEXT, True),
        ]),
        TemplateSheet(name="LINKED_PARTIES", columns=[
            _column("PARTY_ID", ColumnType.TEXT, True),
            _column("PARTY_ROLE", ColumnType.TEXT, True, "Role (e.g. ISSUER, GUARANTOR)"),
            _column("PARTY_NAME", ColumnType.TEXT, True),
            _column("COUNTRY", ColumnType.TEXT, False),
        ]),
    ]


def default_instrument_templates() -> Dict[str, TemplateSettings]:
    """Built-in instrument templates"""
    return {
        "MORTGAGE": TemplateSettings(sheets=MORTGAGE_SHEETS),
    }
