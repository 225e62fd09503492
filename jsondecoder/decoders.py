"""
Built-in decoders and combinators for jsondecoder.

Primitive decoders are module constants; combinators are factory functions
that return Decoder instances.
"""

from __future__ import annotations

import enum
import json
import logging
import math
import struct
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Callable, Iterable, Sequence

from .core import Decoder, from_result
from .schema import (
    Anything,
    Array,
    Enum,
    LitKind,
    Union,
    Unknown,
    lit,
    no_known_fields,
    single_field,
    unnamed_fields,
)
from .types import Err, Ok, Result, sequence

logger = logging.getLogger(__name__)

RECURSION_NOT_SET = (
    "This decoder was defined recursively, but the reference was never set"
)


SHOW_MAX_DEPTH = 32


def show(value: Any, depth: int = 0) -> str:
    """
    Render a JSON value for error messages.

    Output follows json.dumps, except that Decimal numbers are written
    unquoted and containers nested deeper than SHOW_MAX_DEPTH are elided.
    """
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        if depth >= SHOW_MAX_DEPTH:
            return "{...}"
        return "{" + ", ".join(
            f"{show(str(k))}: {show(v, depth + 1)}" for k, v in value.items()
        ) + "}"
    if isinstance(value, list):
        if depth >= SHOW_MAX_DEPTH:
            return "[...]"
        return "[" + ", ".join(show(v, depth + 1) for v in value) + "]"
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _kind(
    predicate: Callable[[Any], bool], expected: str, schema: Any
) -> Decoder:
    def run(value: Any) -> Result:
        if predicate(value):
            return Ok(value)
        return Err(f"expected {expected}, got {show(value)}")

    return Decoder(run, schema)


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, float):
        # repr gives the shortest string that round-trips, so 0.1 stays 0.1
        return Decimal(repr(value))
    return Decimal(value)


# =============================================================================
# Primitive decoders
# =============================================================================

# Returns the JSON value itself. Always succeeds.
Value = Decoder(Ok, Anything())

JObject = _kind(lambda v: isinstance(v, dict), "object", no_known_fields())

JArray = _kind(lambda v: isinstance(v, list), "array", Array(Anything()))

JNull = _kind(lambda v: v is None, "null", lit(LitKind.NULL))

String = _kind(lambda v: isinstance(v, str), "string", lit(LitKind.STRING))

Boolean = _kind(lambda v: isinstance(v, bool), "boolean", lit(LitKind.BOOL))

BigDecimal = _kind(_is_number, "number", lit(LitKind.FLOAT)).map(_as_decimal)


def _exact_int(bits: int) -> Callable[[Decimal], int]:
    low, high = Decimal(-(2 ** (bits - 1))), Decimal(2 ** (bits - 1) - 1)

    def narrow(d: Decimal) -> int:
        if not d.is_finite():
            raise ValueError(f"not an integer: {d}")
        # bounds first: int() on a huge exponent builds the whole integer
        if not low <= d <= high:
            raise OverflowError(f"integer overflow: {d} does not fit in {bits} bits")
        if d != d.to_integral_value():
            raise ValueError(f"not an integer: {d}")
        return int(d)

    return narrow


def _to_double(d: Decimal) -> float:
    f = float(d)
    if math.isinf(f) and d.is_finite():
        raise OverflowError(f"float overflow: {d} does not fit in double precision")
    return f


def _to_single(d: Decimal) -> float:
    f = _to_double(d)
    try:
        return struct.unpack("f", struct.pack("f", f))[0]
    except OverflowError:
        raise OverflowError(
            f"float overflow: {d} does not fit in single precision"
        ) from None


Integer = BigDecimal.map_try(_exact_int(32)).set_schema(lit(LitKind.INT))

Long = BigDecimal.map_try(_exact_int(64)).set_schema(lit(LitKind.INT))

Float = BigDecimal.map_try(_to_single)

Double = BigDecimal.map_try(_to_double)


# =============================================================================
# Constant decoders
# =============================================================================


def succeed(value: Any) -> Decoder:
    """Always succeed with a given value."""
    return from_result(Ok(value))


def fail(error: str) -> Decoder:
    """Always fail with a given error."""
    return from_result(Err(error)).set_schema(Unknown(f"always fails: {error}"))


# =============================================================================
# Structural combinators
# =============================================================================


def field(key: str, inner: Decoder) -> Decoder:
    """
    Pick a field from an object and apply a decoder to it.

    Fails if the input is not an object, if the field is missing, or if the
    inner decoder fails on the field's value.
    """
    run = inner.run

    def decode_field(value: Any) -> Result:
        if not isinstance(value, dict):
            return Err(f"expected object, got {show(value)}")
        if key not in value:
            return Err(f"field '{key}': missing")
        return run(value[key]).map_err(lambda err: f"field '{key}': {err}")

    return Decoder(decode_field, single_field(key, inner.schema, True))


def optional_field(key: str, inner: Decoder, otherwise: Any = None) -> Decoder:
    """
    Pick a field from an object if it exists.

    A missing field decodes to None (or ``otherwise``). A field that exists
    but fails the inner decoder still fails.
    """
    run = inner.run

    def decode_field(value: Any) -> Result:
        if not isinstance(value, dict):
            return Err(f"expected object, got {show(value)}")
        if key not in value:
            return Ok(otherwise)
        return run(value[key]).map_err(lambda err: f"field '{key}': {err}")

    return Decoder(decode_field, single_field(key, inner.schema, False))


def one_of(*decoders: Decoder | Sequence[Decoder]) -> Decoder:
    """
    Try decoders in order and return the first success.

    Decoders after the first success are not evaluated. When all fail, the
    error lists every attempted failure in order.

    Usage:
        one_of(Integer, String)
        one_of([Integer, String])
    """
    if len(decoders) == 1 and not isinstance(decoders[0], Decoder):
        decoders = tuple(decoders[0])
    members: tuple[Decoder, ...] = decoders  # type: ignore[assignment]
    runs = [d.run for d in members]

    def attempt(value: Any) -> Result:
        if not runs:
            return Err("no decoders given")
        errors = []
        for run in runs:
            result = run(value)
            if isinstance(result, Ok):
                return result
            errors.append(result.error)
        return Err("\n\t - ".join(["Attempted multiple decoders, all failed:", *errors]))

    return Decoder(attempt, Union(tuple(d.schema for d in members)))


def option(inner: Decoder, otherwise: Any = None) -> Decoder:
    """
    Attempt a decoder and fall back to None (or ``otherwise``) on any failure.

    Broader than ``optional_field``: a failure anywhere inside ``inner``,
    including a missing or mistyped field, is swallowed.
    """
    return one_of(inner, succeed(otherwise))


def null_value(default: Any) -> Decoder:
    """Return a given value if the JSON value is null."""
    return JNull.map(lambda _: default)


def nullable(inner: Decoder, if_null: Any = None) -> Decoder:
    """
    Allow a value to be null.

    A JSON null decodes to ``if_null`` without trying ``inner``.
    """
    return one_of(null_value(if_null), inner)


def list_of(inner: Decoder) -> Decoder:
    """
    Decode an array, applying a decoder to every element.

    Stops at the first failing element; later elements are not decoded.
    """
    run = inner.run

    def decode_list(value: Any) -> Result:
        if not isinstance(value, list):
            return Err(f"expected array, got {show(value)}")
        return sequence(
            run(item).map_err(lambda err, i=i: f"array element #{i}: {err}")
            for i, item in enumerate(value)
        )

    return Decoder(decode_list, Array(inner.schema))


def dict_of(inner: Decoder) -> Decoder:
    """
    Decode an object, applying a decoder to each of its values.

    Keys keep their order; stops at the first failing value.
    """
    run = inner.run

    def decode_entries(value: Any) -> Result:
        if not isinstance(value, dict):
            return Err(f"expected object, got {show(value)}")
        decoded = sequence(
            run(v).map(lambda d, k=k: (k, d)).map_err(
                lambda err, k=k: f"dict key '{k}': {err}"
            )
            for k, v in value.items()
        )
        return decoded.map(dict)

    return Decoder(decode_entries, unnamed_fields(inner.schema))


def index(i: int, inner: Decoder = Value) -> Decoder:
    """Decode an array and apply a decoder to the element at position i."""
    run = inner.run

    def pick(arr: list) -> Decoder:
        if 0 <= i < len(arr):
            return from_result(run(arr[i]))
        return fail("missing")

    return JArray.and_then(pick).map_error(lambda err: f"at index {i}: {err}")


def at(path: Iterable[str], inner: Decoder) -> Decoder:
    """
    Traverse nested objects and apply a decoder at the leaf.

    Usage:
        at(["data", "patient", "id"], String)
    """
    decoder = inner
    for key in reversed(list(path)):
        decoder = field(key, decoder)
    return decoder


def enum_by_name(
    values: type[enum.Enum] | Iterable[Any],
    name_of: Callable[[Any], str] | None = None,
) -> Decoder:
    """
    Decode a string into one of a fixed set of values by matching names.

    Usage:
        enum_by_name(Color)                           # by member name
        enum_by_name(Color, lambda c: c.name.lower())
        enum_by_name(["a", "b"], str)
    """
    project = name_of or (lambda v: v.name)
    if isinstance(values, type) and issubclass(values, enum.Enum):
        target = values.__name__
    else:
        target = None
    members = list(values)
    names = [project(v) for v in members]
    by_name: dict[str, Any] = {}
    for name, member in zip(names, members):
        by_name.setdefault(name, member)
    if target is None:
        target = "[" + ", ".join(names) + "]"

    def lookup(s: str) -> Result:
        if s in by_name:
            return Ok(by_name[s])
        return Err(f"cannot parse {show(s)} into a value of enum {target}")

    return Decoder(lambda v: String.run(v).flat_map(lookup), Enum(tuple(names)))


def equal(decoder: Decoder, value: Any) -> Decoder:
    """Succeed only if the decoded value equals ``value``."""
    return decoder.filter(
        lambda x: x == value, lambda v: f"expected value: '{value}', got '{v}'"
    )


def matches(decoder: Decoder, test: Callable[[Any], bool]) -> Decoder:
    """Succeed only if the decoded value satisfies ``test``."""
    return decoder.filter(test, lambda v: f"the value '{v}' doesn't match the predicate")


def mapping(
    decoder: Decoder, partial: Mapping[Any, Any] | Callable[[Any], Any]
) -> Decoder:
    """
    Decode a value and look it up in a partial mapping.

    ``partial`` is either a Mapping or a callable returning None when it has
    no value for its argument.
    """
    if isinstance(partial, Mapping):
        table = partial

        def lookup(t: Any) -> Decoder:
            if t in table:
                return succeed(table[t])
            return fail(f"Cannot find mapping for {t}")

    else:

        def lookup(t: Any) -> Decoder:
            mapped = partial(t)
            if mapped is None:
                return fail(f"Cannot find mapping for {t}")
            return succeed(mapped)

    return decoder.and_then(lookup)


# =============================================================================
# Recursive decoders
# =============================================================================


class _Knot:
    """One-shot cell holding the decode function of a recursive decoder."""

    __slots__ = ("run",)

    def __init__(self) -> None:
        self.run: Callable[[Any], Result] | None = None

    def __call__(self, value: Any) -> Result:
        if self.run is None:
            return Err("recursive decoder used before its definition was complete")
        try:
            return self.run(value)
        except RecursionError:
            return Err("maximum nesting depth exceeded")


def recursive(generate: Callable[[Decoder], Decoder]) -> Decoder:
    """
    Build a decoder that refers to itself.

    ``generate`` receives a placeholder standing for the decoder being built
    and is called once. The placeholder's schema is Unknown, so a schema that
    reaches the self-reference renders a visible marker unless the generator
    names the reference with ``self.ref(name)``.

    Usage:
        tree = recursive(lambda self: map2(
            field("value", Integer),
            field("children", list_of(self.ref("tree"))),
            Tree,
        ))

    Not safe to construct concurrently from several threads; decoding is.
    """
    knot = _Knot()
    placeholder = Decoder(knot, Unknown(RECURSION_NOT_SET))
    defined = generate(placeholder)
    knot.run = defined.run
    logger.debug("recursive decoder defined with schema %s", type(defined.schema).__name__)
    return Decoder(knot, defined.schema)
