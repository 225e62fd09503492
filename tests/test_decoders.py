"""
Tests for jsondecoder.decoders (primitives and structural combinators).
"""

import enum
from decimal import Decimal

import pytest

from jsondecoder import (
    BigDecimal,
    Boolean,
    Double,
    Err,
    Float,
    Integer,
    JArray,
    JNull,
    JObject,
    Long,
    Ok,
    String,
    Value,
    at,
    dict_of,
    enum_by_name,
    equal,
    fail,
    field,
    index,
    list_of,
    map2,
    mapping,
    matches,
    null_value,
    nullable,
    one_of,
    option,
    optional_field,
    succeed,
)


class Color(enum.Enum):
    RED = 1
    GREEN = 2


class TestPrimitives:
    def test_value(self):
        assert Value({"a": [1]}) == Ok({"a": [1]})
        assert Value(None) == Ok(None)

    def test_string(self):
        assert String("hello") == Ok("hello")
        assert String(1) == Err("expected string, got 1")

    def test_boolean(self):
        assert Boolean(True) == Ok(True)
        assert Boolean(0) == Err("expected boolean, got 0")

    def test_null(self):
        assert JNull(None) == Ok(None)
        assert JNull(1) == Err("expected null, got 1")

    def test_object_and_array(self):
        assert JObject({}) == Ok({})
        assert JObject([]) == Err("expected object, got []")
        assert JArray([1]) == Ok([1])
        assert JArray({"a": 1}) == Err('expected array, got {"a": 1}')

    def test_big_decimal(self):
        assert BigDecimal(1) == Ok(Decimal(1))
        assert BigDecimal(Decimal("1.25")) == Ok(Decimal("1.25"))
        assert BigDecimal(0.1) == Ok(Decimal("0.1"))
        assert BigDecimal("1") == Err('expected number, got "1"')

    def test_bool_is_not_a_number(self):
        assert BigDecimal(True) == Err("expected number, got true")
        assert isinstance(Integer(False), Err)

    def test_error_shows_nested_decimals_as_numbers(self):
        assert String({"a": Decimal("1.5")}) == Err('expected string, got {"a": 1.5}')
        assert String([Decimal("2"), "x"]) == Err('expected string, got [2, "x"]')

    def test_error_elides_deeply_nested_values(self):
        value = []
        for _ in range(40):
            value = [value]
        assert JObject(value) == Err(
            "expected object, got " + "[" * 32 + "[...]" + "]" * 32
        )


class TestNumbers:
    def test_integer_bounds(self):
        assert Integer(1) == Ok(1)
        assert Integer(2147483647) == Ok(2147483647)
        assert Integer(-2147483648) == Ok(-2147483648)
        assert Integer(2147483648) == Err(
            "integer overflow: 2147483648 does not fit in 32 bits"
        )

    def test_huge_exponent_overflows_without_expanding(self):
        assert Integer(Decimal("1e1000000")) == Err(
            "integer overflow: 1E+1000000 does not fit in 32 bits"
        )
        assert Long(Decimal("-1e999999999")) == Err(
            "integer overflow: -1E+999999999 does not fit in 64 bits"
        )

    def test_integer_rejects_fractions(self):
        assert Integer(Decimal("1.5")) == Err("not an integer: 1.5")
        assert Integer(Decimal("2.0")) == Ok(2)

    def test_integer_kind_mismatch(self):
        assert Integer("1") == Err('expected number, got "1"')

    def test_long(self):
        assert Long(2147483648) == Ok(2147483648)
        assert Long(2**63) == Err(
            "integer overflow: 9223372036854775808 does not fit in 64 bits"
        )

    def test_double(self):
        assert Double(1) == Ok(1.0)
        assert Double(Decimal("2.5")) == Ok(2.5)
        assert isinstance(Double(Decimal("1e400")), Err)

    def test_float(self):
        assert Float(Decimal("0.5")) == Ok(0.5)
        assert Float(Decimal("1e39")) == Err(
            "float overflow: 1E+39 does not fit in single precision"
        )


class TestField:
    def test_present(self):
        assert field("hey", Integer)({"hey": 1}) == Ok(1)

    def test_missing(self):
        assert field("hey", Integer)({}) == Err("field 'hey': missing")

    def test_wrong_type(self):
        assert field("hey", String)({"hey": 1}) == Err(
            "field 'hey': expected string, got 1"
        )

    def test_nested_path(self):
        d = field("a", field("b", String))
        assert d({"a": {"b": 1}}) == Err("field 'a': field 'b': expected string, got 1")

    def test_not_an_object(self):
        assert field("a", String)([1]) == Err("expected object, got [1]")

    def test_null_field_is_present(self):
        assert field("a", Value)({"a": None}) == Ok(None)


class TestOptionality:
    def test_option_swallows_inner_type_failure(self):
        assert option(field("a", String))({"a": 1}) == Ok(None)

    def test_option_swallows_missing_field(self):
        assert option(field("b", String))({"a": 1}) == Ok(None)

    def test_option_swallows_deep_failures(self):
        d = option(field("a", field("b", field("c", Integer))))
        assert d({"a": {"b": {"c": "x"}}}) == Ok(None)
        assert d({"a": "not an object"}) == Ok(None)

    def test_option_success(self):
        assert option(field("a", Integer))({"a": 1}) == Ok(1)

    def test_option_inside_field(self):
        assert field("a", option(String))({"a": 1}) == Ok(None)
        assert field("b", option(String))({"a": 1}) == Err("field 'b': missing")

    def test_option_default(self):
        d = option(Integer, 0)
        assert d(1) == Ok(1)
        assert d(None) == Ok(0)
        assert d({}) == Ok(0)

    def test_optional_field_rejects_wrong_type(self):
        assert optional_field("a", String)({"a": 1}) == Err(
            "field 'a': expected string, got 1"
        )

    def test_optional_field_absent(self):
        assert optional_field("b", String)({"a": 1}) == Ok(None)

    def test_optional_field_default(self):
        d = optional_field("a", String, "default")
        assert d({"a": "1"}) == Ok("1")
        assert d({}) == Ok("default")
        assert d({"a": 1}) == Err("field 'a': expected string, got 1")

    def test_nullable(self):
        d = nullable(Integer)
        assert d(None) == Ok(None)
        assert d(3) == Ok(3)
        assert nullable(Integer, 1)(None) == Ok(1)

    def test_nullable_checks_null_first(self, counter):
        inner = counter.wrap(Value)
        assert nullable(inner, "missing")(None) == Ok("missing")
        assert counter.calls == 0

    def test_nullable_failure_lists_both_attempts(self):
        assert nullable(Integer)("x") == Err(
            "Attempted multiple decoders, all failed:"
            '\n\t - expected null, got "x"'
            '\n\t - expected number, got "x"'
        )

    def test_null_value(self):
        assert null_value(1)(None) == Ok(1)
        assert null_value(1)(1) == Err("expected null, got 1")


class TestList:
    def test_list(self):
        assert list_of(Integer)([1, 2, 3]) == Ok([1, 2, 3])
        assert list_of(Integer)([]) == Ok([])

    def test_element_error(self):
        assert list_of(Integer)([1, "2", 3]) == Err(
            'array element #1: expected number, got "2"'
        )

    def test_not_an_array(self):
        assert list_of(Integer)({}) == Err("expected array, got {}")

    def test_short_circuit(self, counter):
        d = list_of(counter.wrap(Integer))
        assert d([1, 2, "x", 3]) == Err('array element #2: expected number, got "x"')
        assert counter.calls == 3

    def test_list_of_records(self):
        d = list_of(option(field("a", Integer)))
        assert d([{"a": 1}, {"b": 2}, {"a": 3}]) == Ok([1, None, 3])

    def test_nested_errors(self):
        d = field("rows", list_of(field("id", Integer)))
        assert d({"rows": [{"id": 1}, {}]}) == Err(
            "field 'rows': array element #1: field 'id': missing"
        )


class TestDict:
    def test_dict(self):
        assert dict_of(Integer)({"a": 1, "b": 2}) == Ok({"a": 1, "b": 2})

    def test_keeps_order(self):
        result = dict_of(Integer)({"z": 1, "a": 2})
        assert list(result.value) == ["z", "a"]

    def test_value_error(self):
        assert dict_of(Integer)({"a": 1, "b": "x"}) == Err(
            "dict key 'b': expected number, got \"x\""
        )

    def test_not_an_object(self):
        assert dict_of(Integer)([]) == Err("expected object, got []")

    def test_short_circuit(self, counter):
        d = dict_of(counter.wrap(Integer))
        assert isinstance(d({"a": "x", "b": 1}), Err)
        assert counter.calls == 1


class TestIndex:
    def test_index(self):
        assert index(1)([1, 2]) == Ok(2)
        assert index(0, String)(["a"]) == Ok("a")

    def test_missing(self):
        assert index(2)([1, 2]) == Err("at index 2: missing")
        assert index(-1)([1, 2]) == Err("at index -1: missing")

    def test_inner_failure(self):
        assert index(0, String)([1]) == Err("at index 0: expected string, got 1")

    def test_not_an_array(self):
        assert index(0)({}) == Err("at index 0: expected array, got {}")


class TestAt:
    def test_at(self):
        d = at(["a", "b", "c"], Integer)
        assert d({"a": {"b": {"c": 1}}}) == Ok(1)
        assert d({"a": {"b": {}}}) == Err("field 'a': field 'b': field 'c': missing")

    def test_empty_path_is_identity(self):
        assert at([], Integer)(5) == Ok(5)
        assert at([], Integer).schema == Integer.schema


class TestOneOf:
    def test_first_success(self):
        d = one_of(Integer.map(str), String)
        assert d(1) == Ok("1")
        assert d("a") == Ok("a")

    def test_accepts_a_list(self):
        assert one_of([Integer, String])("a") == Ok("a")

    def test_all_fail(self):
        d = one_of(Integer, String)
        assert d(None) == Err(
            "Attempted multiple decoders, all failed:"
            "\n\t - expected number, got null"
            "\n\t - expected string, got null"
        )

    def test_no_decoders(self):
        assert one_of()(1) == Err("no decoders given")

    def test_lazy(self, counter):
        d = one_of(Integer, counter.wrap(String))
        assert d(1) == Ok(1)
        assert counter.calls == 0


class TestConstants:
    def test_succeed(self):
        assert succeed(3)("anything") == Ok(3)

    def test_fail(self):
        assert fail("nope")({}) == Err("nope")


class TestEnumByName:
    def test_by_member_name(self):
        d = enum_by_name(Color)
        assert d("RED") == Ok(Color.RED)
        assert d("BLUE") == Err('cannot parse "BLUE" into a value of enum Color')

    def test_custom_projection(self):
        d = enum_by_name(Color, lambda c: c.name.lower())
        assert d("green") == Ok(Color.GREEN)
        assert isinstance(d("GREEN"), Err)

    def test_plain_values(self):
        d = enum_by_name(["a", "b"], str)
        assert d("b") == Ok("b")
        assert d("c") == Err('cannot parse "c" into a value of enum [a, b]')

    def test_requires_string(self):
        assert enum_by_name(Color)(1) == Err("expected string, got 1")

    def test_first_member_wins_on_shared_name(self):
        d = enum_by_name(["a", "A"], str.lower)
        assert d("a") == Ok("a")


class TestPredicates:
    def test_equal(self):
        d = equal(String, "v1")
        assert d("v1") == Ok("v1")
        assert d("v2") == Err("expected value: 'v1', got 'v2'")

    def test_matches(self):
        d = matches(Integer, lambda x: x % 2 == 0)
        assert d(2) == Ok(2)
        assert d(3) == Err("the value '3' doesn't match the predicate")


class TestMapping:
    def test_dict_mapping(self):
        d = mapping(String, {"yes": True, "no": False})
        assert d("no") == Ok(False)
        assert d("maybe") == Err("Cannot find mapping for maybe")

    def test_callable_mapping(self):
        d = mapping(Integer, lambda i: "one" if i == 1 else None)
        assert d(1) == Ok("one")
        assert d(2) == Err("Cannot find mapping for 2")

    def test_keeps_schema(self):
        assert mapping(String, {}).schema == String.schema


class TestRecord:
    def test_tagged_union(self):
        circle = map2(
            equal(field("type", String), "circle"),
            field("radius", Double),
            lambda _, r: ("circle", r),
        )
        square = map2(
            equal(field("type", String), "square"),
            field("side", Double),
            lambda _, s: ("square", s),
        )
        shape = one_of(circle, square)
        assert shape({"type": "square", "side": 2}) == Ok(("square", 2.0))

    @pytest.mark.parametrize("value", [{"name": "a"}, {"name": "a", "extra": 1}])
    def test_extra_fields_are_ignored(self, value):
        assert field("name", String)(value) == Ok("a")
