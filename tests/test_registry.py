"""
Tests for the template registry and YAML template loading.
"""
import pytest

from xlsx_templates.config import AppConfig
from xlsx_templates.defaults import MORTGAGE_SHEETS
from xlsx_templates.exceptions import ConfigurationError
from xlsx_templates.models import ColumnType
from xlsx_templates.registry import TemplateRegistry

from conftest import SAMPLE_TEMPLATES, column, settings, sheet


class TestDefaultTemplates:
    """Built-in MORTGAGE template"""

    def test_mortgage_sheets(self, registry):
        definition = registry.get("MORTGAGE")
        assert definition.sheet_names == MORTGAGE_SHEETS

    def test_instrument_details_columns(self, registry):
        details = registry.resolved_sheet_index()["INSTRUMENT_DETAILS"]
        assert details.headers == ["INSTRUMENT_ID", "INSTRUMENT_NAME", "CURRENCY", "ISSUE_DATE"]
        currency = details.columns[2]
        assert currency.resolved_type() is ColumnType.LIST
        assert currency.resolved_allowed_values() == ["PLN", "EUR", "USD"]

    def test_unknown_type_is_none(self, registry):
        assert registry.get("UNKNOWN") is None

    def test_list_templates(self, registry):
        listing = registry.list_templates()
        assert listing[0]["instrument_type"] == "MORTGAGE"
        assert [s["name"] for s in listing[0]["sheets"]] == MORTGAGE_SHEETS
        assert listing[0]["sheets"][2]["columns"] == ["ASSET_ID", "ASSET_CLASS", "ASSET_VALUE"]


class TestResolutionCache:
    """Resolution is cached until raw inputs change"""

    def test_resolved_is_cached(self, registry):
        assert registry.resolved() is registry.resolved()

    def test_register_template_invalidates(self, registry):
        before = registry.resolved()
        registry.register_template("SHORT", settings(["LINKED_DEALS"]))

        after = registry.resolved()
        assert after is not before
        assert after.instrument_templates["SHORT"].sheet_names == ["LINKED_DEALS"]

    def test_register_sheet_replaces_by_name(self, registry):
        registry.register_sheet(sheet("LINKED_ASSETS", [column("ONLY")]))

        assert registry.resolved_sheet_index()["LINKED_ASSETS"].headers == ["ONLY"]
        assert len(registry.template_sheets) == 6

    def test_set_template_sheets_invalidates(self):
        registry = TemplateRegistry([sheet("A", [column("a")])], {"T": settings(["A"])})
        registry.initialize()

        registry.set_template_sheets([sheet("A", [column("b")])])

        assert registry.get("T").sheets[0].headers == ["b"]

    def test_empty_registry_fails_on_resolution(self):
        registry = TemplateRegistry()
        with pytest.raises(ConfigurationError):
            registry.initialize()

    def test_set_instrument_templates_none_clears(self, registry):
        registry.set_instrument_templates(None)
        with pytest.raises(ConfigurationError):
            registry.resolved()


class TestYamlLoading:
    """Loading templates from YAML"""

    def test_sample_configuration(self):
        registry = TemplateRegistry.from_yaml(SAMPLE_TEMPLATES)

        details = registry.resolved_sheet_index()["INSTRUMENT_DETAILS"]
        assert details.headers == [
            "INSTRUMENT_ID", "SOURCE_SYSTEM", "INSTRUMENT_NAME", "CURRENCY", "ISSUE_DATE", "SECURED",
        ]
        assert details.columns[-1].resolved_allowed_values() == ["YES", "NO"]
        assert registry.get("SECURED_LOAN").sheet_names == [
            "INSTRUMENT_DETAILS", "LINKED_PARTIES", "COLLATERAL",
        ]

    def test_kebab_case_and_enclosing_section(self, tmp_path):
        path = tmp_path / "templates.yaml"
        path.write_text(
            """
excel:
  template:
    template-sheets:
      - name: BASE
        columns:
          - {header: ID, required: true}
      - name: CHILD
        base-sheets: [BASE]
        columns:
          - {header: AMOUNT, type: number}
    instrument-templates:
      LOAN:
        sheets: [CHILD]
""",
            encoding="utf-8",
        )

        registry = TemplateRegistry.from_yaml(path)

        child = registry.get("LOAN").sheets[0]
        assert child.headers == ["ID", "AMOUNT"]
        assert child.columns[1].resolved_type() is ColumnType.NUMBER

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            TemplateRegistry.from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("template_sheets: [name: {", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            TemplateRegistry.from_yaml(path)

    def test_invalid_column_definition(self):
        with pytest.raises(ConfigurationError, match="Invalid template configuration"):
            TemplateRegistry.from_dict({
                "template_sheets": [{"name": "A", "columns": [{"required": True}]}],
                "instrument_templates": {"T": {"sheets": ["A"]}},
            })

    def test_wrong_shapes(self):
        with pytest.raises(ConfigurationError):
            TemplateRegistry.from_dict({"template_sheets": {"A": {}}})

    def test_from_config_uses_templates_file(self):
        registry = TemplateRegistry.from_config(AppConfig(templates_file=SAMPLE_TEMPLATES))
        assert registry.resolved().instrument_types == ["LOAN", "SECURED_LOAN"]

    def test_from_config_defaults(self):
        registry = TemplateRegistry.from_config(AppConfig())
        assert registry.resolved().instrument_types == ["MORTGAGE"]
