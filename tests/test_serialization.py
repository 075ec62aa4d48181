"""Tests for serialization.py: tagged JSON and hashed value files."""

from __future__ import annotations

import json
from fractions import Fraction

import pytest

from errors import ErrorCode, NumericError
from parsing import parse_float
from serialization import dumps, load_values, loads, save_values, values_hash
from values import NAN, NEG_INFINITY, Float, Integer
import transcendental


def sample():
    return [
        Integer(-5),
        Integer(10 ** 60),
        Float.of(Fraction(1, 3)),
        parse_float("2.5"),
        transcendental.constant("sqrt2"),
        Float.complex(Float.of(3), Float.of(-4)),
        NEG_INFINITY,
    ]


class TestJson:

    def test_tags(self) -> None:
        assert dumps({"x": Integer(1)}) == '{"x": {"__integer__": "1"}}'
        assert dumps([Float.of(Fraction(1, 6))]) == '[{"__float__": "0.1(6)"}]'

    def test_round_trip(self) -> None:
        values = sample()
        back = loads(dumps(values))
        assert back == values
        assert [type(v) for v in back] == [type(v) for v in values]
        assert back[4].is_irrational
        assert back[2].is_recurring

    def test_nan(self) -> None:
        assert loads(dumps(NAN)).is_nan

    def test_untagged_objects_pass_through(self) -> None:
        assert loads('{"a": [1, 2]}') == {"a": [1, 2]}

    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError):
            dumps(object())

    def test_bad_tagged_text(self) -> None:
        with pytest.raises(NumericError):
            loads('{"__integer__": "1.5"}')


class TestFiles:

    def test_save_and_load(self, tmp_path) -> None:
        path = tmp_path / "values.json"
        values = sample()
        save_values(values, str(path))
        summary = json.loads(path.read_text())
        assert summary["count"] == len(values)
        assert summary["hash"] == values_hash(values)
        assert load_values(str(path)) == values

    def test_tampered_value(self, tmp_path) -> None:
        path = tmp_path / "values.json"
        save_values([Integer(1), Integer(2)], str(path))
        path.write_text(path.read_text().replace('"2"', '"3"'))
        with pytest.raises(NumericError) as exc:
            load_values(str(path))
        assert exc.value.code is ErrorCode.INVALID_FORMAT

    def test_wrong_count(self, tmp_path) -> None:
        path = tmp_path / "values.json"
        save_values([Integer(1)], str(path))
        summary = json.loads(path.read_text())
        summary["count"] = 2
        path.write_text(json.dumps(summary))
        with pytest.raises(NumericError):
            load_values(str(path))

    def test_hash_depends_on_order(self) -> None:
        assert values_hash([Integer(1), Integer(2)]) != values_hash([Integer(2), Integer(1)])
