"""
Tests for case catalogs.

Tests:
- Built-in DTR catalog contents
- Validation errors
- Harmful lookup
- JSON loading
"""

import json

import pytest

from ..catalog import (
    Case,
    CaseCatalog,
    TOOLS,
    create_dtr_catalog,
    load_catalog,
    validate_catalog,
)
from ..errors import CatalogError


class TestBuiltinCatalog:
    """Tests for the DTR pathology catalog."""

    def test_six_cases_in_order(self, dtr_catalog):
        assert len(dtr_catalog) == 6
        assert [case.id for case in dtr_catalog] == [
            "A.png", "B.png", "C.png", "D.png", "E.png", "F.png",
        ]

    def test_tool_alphabet(self, dtr_catalog):
        assert dtr_catalog.labels == tuple(TOOLS)
        assert "Background" not in dtr_catalog.labels

    def test_expected_answers(self, dtr_catalog):
        expected = [case.expected_answer for case in dtr_catalog]
        assert expected == ["7-8", "11-12", "1-2", "9-10", "13-14", "17-18"]

    def test_every_case_has_one_harmful_entry(self, dtr_catalog):
        assert len(dtr_catalog.harmful_entries) == 6
        for case in dtr_catalog:
            assert case.has_harmful_entry
            assert case.harmful_answer != case.expected_answer

    def test_name(self, dtr_catalog):
        assert dtr_catalog.name == "dtr_pathology"


class TestHarmfulLookup:
    """Tests for harmful_lookup()."""

    def test_exact_pair_matches(self, dtr_catalog):
        entry = dtr_catalog.harmful_lookup("A.png", "17-18")
        assert entry is not None
        assert entry.reason == "Using drill on tartar can damage healthy enamel"

    def test_other_answer_misses(self, dtr_catalog):
        assert dtr_catalog.harmful_lookup("A.png", "1-2") is None

    def test_other_case_misses(self, dtr_catalog):
        assert dtr_catalog.harmful_lookup("B.png", "17-18") is None

    def test_get_case(self, dtr_catalog):
        assert dtr_catalog.get_case("D.png").expected_answer == "9-10"
        assert dtr_catalog.get_case("Z.png") is None


class TestValidation:
    """Tests for validate_catalog() and construction errors."""

    def test_valid_catalog_has_no_errors(self, small_catalog):
        assert validate_catalog(small_catalog.labels, small_catalog.cases) == []

    def test_empty_alphabet(self):
        errors = validate_catalog((), (Case(id="a", expected_answer="1-2"),))
        assert any("alphabet is empty" in e for e in errors)

    def test_no_cases(self):
        with pytest.raises(CatalogError) as exc_info:
            CaseCatalog(labels=TOOLS, cases=[])
        assert "Catalog has no cases" in exc_info.value.errors

    def test_unknown_expected_label(self):
        with pytest.raises(CatalogError) as exc_info:
            CaseCatalog(labels=TOOLS, cases=[Case(id="a", expected_answer="3-4")])
        assert "unknown label '3-4'" in str(exc_info.value)

    def test_duplicate_ids(self):
        cases = [Case(id="a", expected_answer="1-2"), Case(id="a", expected_answer="7-8")]
        errors = validate_catalog(tuple(TOOLS), tuple(cases))
        assert errors == ["Case 'a' is defined more than once"]

    def test_harmful_equal_to_expected(self):
        case = Case(id="a", expected_answer="1-2", harmful_answer="1-2", harmful_reason="x")
        errors = validate_catalog(tuple(TOOLS), (case,))
        assert errors == ["Case 'a' marks its expected answer as harmful"]

    def test_harmful_without_reason(self):
        case = Case(id="a", expected_answer="1-2", harmful_answer="7-8")
        errors = validate_catalog(tuple(TOOLS), (case,))
        assert errors == ["Case 'a' has a harmful answer without a reason"]

    def test_reason_without_harmful(self):
        case = Case(id="a", expected_answer="1-2", harmful_reason="orphan")
        assert len(validate_catalog(tuple(TOOLS), (case,))) == 1

    def test_all_errors_collected(self):
        cases = (
            Case(id="", expected_answer="1-2"),
            Case(id="b", expected_answer="nope", harmful_answer="also-nope", harmful_reason="r"),
        )
        errors = validate_catalog(("1-2", "1-2"), cases)
        assert len(errors) == 4


class TestSerialization:
    """Tests for to_dict/from_dict and load_catalog()."""

    def test_round_trip_preserves_builtin(self, dtr_catalog):
        rebuilt = CaseCatalog.from_dict(dtr_catalog.to_dict())
        assert rebuilt.cases == dtr_catalog.cases
        assert rebuilt.labels == dtr_catalog.labels
        assert rebuilt.name == dtr_catalog.name

    def test_from_dict_rejects_non_list_cases(self):
        with pytest.raises(CatalogError):
            CaseCatalog.from_dict({"labels": TOOLS, "cases": "A.png"})

    def test_from_dict_rejects_non_object_case(self):
        with pytest.raises(CatalogError) as exc_info:
            CaseCatalog.from_dict({"labels": TOOLS, "cases": [{"id": "a", "expected_answer": "1-2"}, 3]})
        assert exc_info.value.errors == ["Case #1 must be an object"]

    def test_non_string_labels(self):
        with pytest.raises(CatalogError) as exc_info:
            CaseCatalog.from_dict({
                "labels": [{"x": 1}, ["7-8"], ""],
                "cases": [{"id": "a", "expected_answer": "7-8"}],
            })
        assert "Labels must be non-empty strings" in exc_info.value.errors

    def test_non_string_expected_answer(self):
        with pytest.raises(CatalogError) as exc_info:
            CaseCatalog.from_dict({
                "labels": ["1-2"],
                "cases": [{"id": "a", "expected_answer": ["1-2"]}],
            })
        assert exc_info.value.errors == ["Case #0 field 'expected_answer' must be a string"]

    def test_non_string_harmful_fields(self):
        with pytest.raises(CatalogError) as exc_info:
            CaseCatalog.from_dict({
                "labels": ["1-2", "7-8"],
                "cases": [{"id": "a", "expected_answer": "1-2",
                           "harmful_answer": {"tool": "7-8"}, "harmful_reason": 3}],
            })
        assert exc_info.value.errors == [
            "Case #0 field 'harmful_answer' must be a string or null",
            "Case #0 field 'harmful_reason' must be a string or null",
        ]

    def test_non_string_id(self):
        errors = validate_catalog(("1-2",), (Case(id=7, expected_answer="1-2"),))
        assert errors == ["Case #0 field 'id' must be a string"]

    def test_string_labels_rejected(self):
        """A bare string is not split into one-character labels."""
        with pytest.raises(CatalogError) as exc_info:
            CaseCatalog.from_dict({
                "labels": "1-2",
                "cases": [{"id": "a", "expected_answer": "1-2"}],
            })
        assert exc_info.value.errors == ["'labels' must be a list"]

    def test_load_malformed_types_from_file(self, tmp_path):
        path = tmp_path / "bad_types.json"
        path.write_text(json.dumps({
            "labels": [["1-2"]],
            "cases": [{"id": "a", "expected_answer": {"tool": "1-2"}}],
        }))
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(path)
        assert len(exc_info.value.errors) == 2

    def test_load_catalog_from_file(self, tmp_path):
        path = tmp_path / "mini.json"
        path.write_text(json.dumps({
            "labels": ["1-2", "7-8"],
            "cases": [
                {"id": "x", "expected_answer": "7-8", "harmful_answer": "1-2",
                 "harmful_reason": "Mirror cannot scale"},
            ],
        }))
        catalog = load_catalog(path)
        assert catalog.name == "mini"
        assert len(catalog) == 1
        assert catalog.harmful_lookup("x", "1-2").reason == "Mirror cannot scale"

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(tmp_path / "missing.json")
        assert "not found" in exc_info.value.errors[0]

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(path)
        assert "Invalid JSON" in exc_info.value.errors[0]

    def test_builtin_factory_returns_fresh_catalog(self):
        assert create_dtr_catalog() is not create_dtr_catalog()
