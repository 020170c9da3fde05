"""
Tests for sheet and instrument template resolution.
"""
import pytest

from xlsx_templates.exceptions import (
    BlankNameError,
    CircularReferenceError,
    ConfigurationError,
    UnknownReferenceError,
)
from xlsx_templates.resolver import resolve

from conftest import column, settings, sheet


def headers(resolved, name):
    return [c.header for c in resolved.sheet_index[name].columns]


class TestSheetResolution:
    """Column inheritance between sheets"""

    def test_merges_columns_from_multiple_bases_in_declaration_order(self):
        base_a = sheet("BASE_A", [column("A1"), column("A2")])
        base_b = sheet("BASE_B", [column("B1")])
        derived = sheet("DERIVED", [column("C1")], base_sheets=["BASE_A", "BASE_B"])

        resolved = resolve([base_a, base_b, derived], {"COMBINED": settings(["DERIVED"])})

        assert headers(resolved, "DERIVED") == ["A1", "A2", "B1", "C1"]

    def test_override_keeps_position_and_replaces_value(self):
        base = sheet("A", [column("h1", description="base"), column("h2")])
        derived = sheet("D", [column("h1", description="derived")], base_sheets=["A"])

        resolved = resolve([base, derived], {"T": settings(["D"])})

        columns = resolved.sheet_index["D"].columns
        assert [c.header for c in columns] == ["h1", "h2"]
        assert columns[0].description == "derived"

    def test_later_base_overrides_earlier_base(self):
        base_a = sheet("A", [column("X", description="from A"), column("Y")])
        base_b = sheet("B", [column("X", description="from B")])
        derived = sheet("D", [], base_sheets=["A", "B"])

        resolved = resolve([base_a, base_b, derived], {"T": settings(["D"])})

        columns = resolved.sheet_index["D"].columns
        assert [c.header for c in columns] == ["X", "Y"]
        assert columns[0].description == "from B"

    def test_transitive_inheritance(self):
        root = sheet("ROOT", [column("R")])
        middle = sheet("MIDDLE", [column("M")], base_sheets=["ROOT"])
        leaf = sheet("LEAF", [column("L")], base_sheets=["MIDDLE"])

        # leaf declared first so it resolves its bases on demand
        resolved = resolve([leaf, middle, root], {"T": settings(["LEAF"])})

        assert headers(resolved, "LEAF") == ["R", "M", "L"]
        assert list(resolved.sheet_index) == ["LEAF", "MIDDLE", "ROOT"]

    def test_resolved_sheets_have_no_bases(self):
        base = sheet("A", [column("a")])
        derived = sheet("D", [column("d")], base_sheets=["A"])

        resolved = resolve([base, derived], {"T": settings(["D"])})

        assert resolved.sheet_index["D"].base_sheets == []

    def test_self_reference_is_circular(self):
        looping = sheet("LOOP", [column("x")], base_sheets=["LOOP"])

        with pytest.raises(CircularReferenceError) as exc_info:
            resolve([looping], {"T": settings(["LOOP"])})
        assert exc_info.value.kind == "sheet"
        assert exc_info.value.name == "LOOP"

    def test_mutual_reference_is_circular(self):
        a = sheet("A", [], base_sheets=["B"])
        b = sheet("B", [], base_sheets=["A"])

        with pytest.raises(CircularReferenceError):
            resolve([a, b], {"T": settings(["A"])})

    def test_unknown_base_sheet(self):
        derived = sheet("D", [], base_sheets=["MISSING"])

        with pytest.raises(UnknownReferenceError) as exc_info:
            resolve([derived], {"T": settings(["D"])})
        assert exc_info.value.kind == "sheet"
        assert exc_info.value.name == "MISSING"

    def test_blank_sheet_name(self):
        with pytest.raises(BlankNameError) as exc_info:
            resolve([sheet("  ", [])], {"T": settings([])})
        assert isinstance(exc_info.value, ConfigurationError)

    def test_duplicate_sheet_name(self):
        with pytest.raises(ConfigurationError, match="Duplicate"):
            resolve([sheet("A", []), sheet("A", [])], {"T": settings(["A"])})


class TestTemplateResolution:
    """Sheet list inheritance between instrument templates"""

    @pytest.fixture
    def sheets(self):
        return [
            sheet("SHEET_A", [column("a")]),
            sheet("SHEET_B", [column("b")]),
            sheet("SHEET_C", [column("c")]),
        ]

    def test_inherited_sheets_deduplicated_in_first_seen_order(self, sheets):
        templates = {
            "ONE": settings(["SHEET_A"]),
            "TWO": settings(["SHEET_B"]),
            "COMBINED": settings(["SHEET_C", "SHEET_A"], base_templates=["ONE", "TWO"]),
        }

        resolved = resolve(sheets, templates)

        assert resolved.instrument_templates["COMBINED"].sheet_names == ["SHEET_A", "SHEET_B", "SHEET_C"]
        assert list(resolved.instrument_templates) == ["ONE", "TWO", "COMBINED"]

    def test_definition_holds_resolved_sheets(self, sheets):
        resolved = resolve(sheets, {"T": settings(["SHEET_B"])})

        assert resolved.instrument_templates["T"].sheets[0] is resolved.sheet_index["SHEET_B"]

    def test_template_cycle(self, sheets):
        templates = {
            "ONE": settings(["SHEET_A"], base_templates=["TWO"]),
            "TWO": settings(["SHEET_B"], base_templates=["ONE"]),
        }

        with pytest.raises(CircularReferenceError) as exc_info:
            resolve(sheets, templates)
        assert exc_info.value.kind == "template"

    def test_unknown_base_template(self, sheets):
        with pytest.raises(UnknownReferenceError) as exc_info:
            resolve(sheets, {"T": settings(["SHEET_A"], base_templates=["NOPE"])})
        assert exc_info.value.kind == "template"
        assert exc_info.value.name == "NOPE"

    def test_unknown_sheet_in_template(self, sheets):
        with pytest.raises(UnknownReferenceError) as exc_info:
            resolve(sheets, {"T": settings(["SHEET_Z"])})
        assert exc_info.value.kind == "sheet"
        assert exc_info.value.name == "SHEET_Z"

    @pytest.mark.parametrize("templates", [None, {}])
    def test_no_templates_configured(self, sheets, templates):
        with pytest.raises(ConfigurationError):
            resolve(sheets, templates)


class TestResolvedTemplates:
    """Output contract"""

    def test_resolution_is_idempotent(self):
        sheets = [
            sheet("BASE", [column("ID", required=True), column("NAME")]),
            sheet("DERIVED", [column("NAME", description="override"), column("EXTRA")], base_sheets=["BASE"]),
        ]
        templates = {"T": settings(["DERIVED", "BASE"])}

        first = resolve(sheets, templates)
        second = resolve(sheets, templates)

        assert list(first.sheet_index) == list(second.sheet_index)
        assert dict(first.sheet_index) == dict(second.sheet_index)
        assert dict(first.instrument_templates) == dict(second.instrument_templates)

    def test_result_is_read_only(self):
        resolved = resolve([sheet("A", [])], {"T": settings(["A"])})

        with pytest.raises(TypeError):
            resolved.sheet_index["B"] = sheet("B", [])
        with pytest.raises(TypeError):
            resolved.instrument_templates["X"] = None

    def test_instrument_types(self):
        resolved = resolve([sheet("A", [])], {"T1": settings(["A"]), "T2": settings([])})

        assert resolved.instrument_types == ["T1", "T2"]
        assert resolved.instrument_templates["T2"].sheets == []
