"""Unit tests for the result pipeline and FindOptions."""

from __future__ import annotations

from typing import Any

import pytest

from doc_store.domain.entities import FindOptions
from doc_store.domain.errors import MalformedQueryError
from doc_store.domain.services import compile_query, result_pipeline
from doc_store.domain.value_objects import SortDirection


def everything(record: dict[str, Any]) -> bool:
    return True


@pytest.fixture
def records() -> list[dict[str, Any]]:
    return [
        {"name": "a", "age": 3, "team": "x"},
        {"name": "b", "age": 5, "team": "y"},
        {"name": "c", "age": 1, "team": "x"},
        {"name": "d", "age": 3, "team": "y"},
    ]


@pytest.mark.unit
class TestFindOptions:
    """Tests for building FindOptions from mappings."""

    def test_none(self) -> None:
        assert FindOptions.from_mapping(None) == FindOptions()

    def test_sort_keeps_key_order(self) -> None:
        options = FindOptions.from_mapping({"sort": {"team": 1, "age": -1}})

        assert options.sort == (
            ("team", SortDirection.ASCENDING),
            ("age", SortDirection.DESCENDING),
        )

    def test_sort_uses_sign_only(self) -> None:
        options = FindOptions.from_mapping({"sort": {"a": 10, "b": -0.5, "c": 0}})

        assert [d for _, d in options.sort] == [
            SortDirection.ASCENDING,
            SortDirection.DESCENDING,
            SortDirection.UNCHANGED,
        ]

    def test_projection_from_mapping_or_list(self) -> None:
        assert FindOptions.from_mapping({"projection": {"name": 1, "age": 1}}).projection == ("name", "age")
        assert FindOptions.from_mapping({"projection": ["age", "name", "age"]}).projection == ("age", "name")

    @pytest.mark.parametrize(
        "config",
        [
            {"sort": ["age"]},
            {"sort": {"age": "asc"}},
            {"sort": {"age": True}},
            {"projection": "name"},
            {"projection": [1]},
            {"limit": 3},
            "sort",
        ],
    )
    def test_malformed(self, config: Any) -> None:
        with pytest.raises(MalformedQueryError):
            FindOptions.from_mapping(config)


@pytest.mark.unit
class TestFilter:
    """Tests for the filter stage."""

    def test_filter_preserves_order(self, records: list[dict[str, Any]]) -> None:
        predicate = compile_query({"age": {"$gt": 2}})

        result = result_pipeline.run(records, predicate)

        assert [r["name"] for r in result] == ["a", "b", "d"]

    def test_results_are_copies(self, records: list[dict[str, Any]]) -> None:
        result = result_pipeline.run(records, everything)
        result[0]["name"] = "changed"

        assert records[0]["name"] == "a"


@pytest.mark.unit
class TestSort:
    """Tests for the sort stage."""

    def test_ascending(self, records: list[dict[str, Any]]) -> None:
        options = FindOptions.from_mapping({"sort": {"age": 1}})

        result = result_pipeline.run(records, everything, options)

        assert [r["name"] for r in result] == ["c", "a", "d", "b"]

    def test_descending_is_stable_on_ties(self, records: list[dict[str, Any]]) -> None:
        options = FindOptions.from_mapping({"sort": {"age": -1}})

        result = result_pipeline.run(records, everything, options)

        assert [r["name"] for r in result] == ["b", "a", "d", "c"]

    def test_last_key_dominates(self, records: list[dict[str, Any]]) -> None:
        """Passes run in key order, so 'team' decides and 'age' breaks ties."""
        options = FindOptions.from_mapping({"sort": {"age": 1, "team": 1}})

        result = result_pipeline.run(records, everything, options)

        assert [r["name"] for r in result] == ["c", "a", "d", "b"]

        options = FindOptions.from_mapping({"sort": {"team": 1, "age": -1}})
        result = result_pipeline.run(records, everything, options)

        assert [r["name"] for r in result] == ["b", "a", "d", "c"]

    def test_zero_direction_keeps_order(self, records: list[dict[str, Any]]) -> None:
        options = FindOptions.from_mapping({"sort": {"age": 0}})

        result = result_pipeline.run(records, everything, options)

        assert [r["name"] for r in result] == ["a", "b", "c", "d"]

    def test_missing_and_mixed_values_tie(self) -> None:
        rows = [{"n": 1, "v": 2}, {"n": 2}, {"n": 3, "v": "x"}, {"n": 4, "v": 1}]
        options = FindOptions.from_mapping({"sort": {"v": 1}})

        result = result_pipeline.run(rows, everything, options)

        assert sorted(r["n"] for r in result) == [1, 2, 3, 4]

    def test_compare_values(self) -> None:
        assert result_pipeline.compare_values(1, 2) == -1
        assert result_pipeline.compare_values("b", "a") == 1
        assert result_pipeline.compare_values(1, 1) == 0
        assert result_pipeline.compare_values(1, "a") == 0


@pytest.mark.unit
class TestProjection:
    """Tests for the projection stage."""

    def test_only_listed_fields_in_listed_order(self, records: list[dict[str, Any]]) -> None:
        options = FindOptions(projection=("age", "name"))

        result = result_pipeline.run(records[:1], everything, options)

        assert result == [{"age": 3, "name": "a"}]
        assert list(result[0]) == ["age", "name"]

    def test_absent_fields_are_omitted(self, records: list[dict[str, Any]]) -> None:
        options = FindOptions(projection=("name", "email"))

        result = result_pipeline.run(records[:2], everything, options)

        assert result == [{"name": "a"}, {"name": "b"}]

    def test_empty_projection(self, records: list[dict[str, Any]]) -> None:
        result = result_pipeline.run(records[:2], everything, FindOptions(projection=()))

        assert result == [{}, {}]

    def test_sort_runs_before_projection(self, records: list[dict[str, Any]]) -> None:
        """Sorting on a field that is projected away still applies."""
        options = FindOptions.from_mapping({"sort": {"age": 1}, "projection": ["name"]})

        result = result_pipeline.run(records, everything, options)

        assert result == [{"name": "c"}, {"name": "a"}, {"name": "d"}, {"name": "b"}]
