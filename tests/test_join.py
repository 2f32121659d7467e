"""Tests for table parsing and attribute joins."""

import json

import pytest
from pydantic import ValidationError

from topo_globe.core.join import index_records, join_attributes
from topo_globe.core.sources import coerce_cell, parse_table, parse_topology
from topo_globe.models import Feature, JoinRecord


def _features(*ids):
    return [Feature(geometry_kind="Polygon", id=i) for i in ids]


class TestCoerceCell:
    def test_integer(self):
        assert coerce_cell("42") == 42
        assert isinstance(coerce_cell("42"), int)

    def test_negative_integer(self):
        assert coerce_cell("-99") == -99

    def test_float(self):
        assert coerce_cell("1.5") == pytest.approx(1.5)

    def test_text_stays_text(self):
        assert coerce_cell("USA") == "USA"

    def test_partial_number_stays_text(self):
        assert coerce_cell("12abc") == "12abc"

    def test_empty_stays_text(self):
        assert coerce_cell("") == ""

    def test_non_finite_stays_text(self):
        assert coerce_cell("nan") == "nan"
        assert coerce_cell("inf") == "inf"

    def test_digit_group_underscores_stay_text(self):
        assert coerce_cell("1_000") == "1_000"
        assert coerce_cell("1_2.5") == "1_2.5"

    def test_non_ascii_digits_stay_text(self):
        assert coerce_cell("\u0661\u0662") == "\u0661\u0662"
        assert coerce_cell("\uff13") == "\uff13"

    def test_exponent(self):
        assert coerce_cell("2.5e3") == pytest.approx(2500.0)
        assert coerce_cell("1e400") == "1e400"


class TestParseTable:
    def test_header_and_rows(self):
        records = parse_table("id\tname\n1\tAlpha\n2\tBeta")
        assert len(records) == 2
        assert records[0].id == 1
        assert records[0].name == "Alpha"
        assert records[1].name == "Beta"

    def test_extra_columns(self):
        records = parse_table("id\tname\tpop\n4\tAfghanistan\t38.9")
        assert records[0].get("pop") == pytest.approx(38.9)

    def test_custom_delimiter(self):
        records = parse_table("id,name\n10,Ten\n", delimiter=",")
        assert records[0].id == 10

    def test_trailing_newlines_and_blank_lines(self):
        records = parse_table("id\tname\n1\tAlpha\n\n2\tBeta\n\n")
        assert [r.id for r in records] == [1, 2]

    def test_empty_text(self):
        assert parse_table("") == []

    def test_header_only(self):
        assert parse_table("id\tname\n") == []

    def test_windows_line_endings(self):
        records = parse_table("id\tname\r\n1\tAlpha\r\n")
        assert records[0].name == "Alpha"

    def test_underscored_key_does_not_join_numeric_id(self):
        records = parse_table("id\tname\n1_2\tTwelve")
        assert records[0].id == "1_2"
        assert next(join_attributes(_features(12), records)).name is None


class TestParseTopology:
    def test_from_text(self):
        text = json.dumps({"type": "Topology", "arcs": [[[0, 0]]], "objects": {}})
        assert len(parse_topology(text).arcs) == 1

    def test_from_dict(self):
        topo = parse_topology({"type": "Topology", "arcs": [], "objects": {}})
        assert topo.objects == {}

    def test_invalid_json(self):
        with pytest.raises(json.JSONDecodeError):
            parse_topology("{not json")

    def test_invalid_structure(self):
        with pytest.raises(ValidationError):
            parse_topology({"type": "Topology", "arcs": "nope", "objects": {}})


class TestJoinAttributes:
    def test_matches_and_misses(self):
        """Names join by id; unmatched features keep no name and are not dropped."""
        records = parse_table("id\tname\n1\tAlpha\n2\tBeta")
        joined = list(join_attributes(_features(1, 3), records))
        assert len(joined) == 2
        assert joined[0].name == "Alpha"
        assert joined[1].name is None
        assert "name" not in joined[1].attributes

    def test_miss_clears_name_from_properties(self):
        """A topology-supplied name does not survive an unmatched join."""
        records = parse_table("id\tname\n1\tAlpha")
        features = [Feature(geometry_kind="Polygon", id=3, attributes={"name": "Stale", "pop": 7})]
        joined = list(join_attributes(features, records))
        assert joined[0].name is None
        assert joined[0].attributes == {"pop": 7}
        assert features[0].attributes["name"] == "Stale"

    def test_match_replaces_name_from_properties(self):
        records = parse_table("id\tname\n3\tGamma")
        features = [Feature(geometry_kind="Polygon", id=3, attributes={"name": "Stale"})]
        assert next(join_attributes(features, records)).name == "Gamma"

    def test_first_match_wins(self):
        records = [
            JoinRecord(id=1, name="First"),
            JoinRecord(id=1, name="Second"),
        ]
        joined = list(join_attributes(_features(1), records))
        assert joined[0].name == "First"

    def test_exact_equality_no_string_coercion(self):
        records = [JoinRecord(id="1", name="Text id")]
        joined = list(join_attributes(_features(1), records))
        assert joined[0].name is None

    def test_features_without_id(self):
        records = [JoinRecord(id=1, name="Alpha")]
        joined = list(join_attributes([Feature(geometry_kind="Point")], records))
        assert joined[0].name is None

    def test_other_key_and_columns(self):
        records = [JoinRecord.model_validate({"iso": "FRA", "name": "France", "capital": "Paris"})]
        features = [Feature(geometry_kind="Polygon", attributes={"iso": "FRA"})]
        joined = list(join_attributes(features, records, key="iso", columns=("name", "capital")))
        assert joined[0].attributes == {"iso": "FRA", "name": "France", "capital": "Paris"}

    def test_inputs_not_mutated(self):
        records = [JoinRecord(id=1, name="Alpha")]
        features = _features(1)
        list(join_attributes(features, records))
        assert features[0].attributes == {}

    def test_no_records(self):
        joined = list(join_attributes(_features(1, 2), []))
        assert [f.id for f in joined] == [1, 2]


class TestIndexRecords:
    def test_records_without_key_skipped(self):
        index = index_records([JoinRecord(name="No id"), JoinRecord(id=5, name="Five")])
        assert list(index) == [5]
