"""
Core Decoder class for jsondecoder.

A Decoder pairs a decode function with a Schema describing what it accepts.
Every combinator returns a new Decoder and updates both facets together.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable

from .schema import Anything, Intersection, Ref, Schema
from .types import DecodeFn, Err, Result, error_message, try_result


@dataclass(frozen=True, slots=True)
class Decoder:
    """
    Immutable decoder node.

    ``run`` takes an already-parsed JSON value and returns Ok(value) or
    Err(message). ``schema`` describes the shape ``run`` accepts.
    """

    run: DecodeFn
    schema: Schema = Anything()

    def __call__(self, value: Any) -> Result:
        return self.run(value)

    def decode(self, value: Any) -> Result:
        """
        Decode a JSON value.

        Returns:
            Ok(decoded) if decoding succeeds
            Err(message) if decoding fails
        """
        return self.run(value)

    def set_schema(self, schema: Schema) -> Decoder:
        """Return a decoder with the same behavior and a replaced schema."""
        return replace(self, schema=schema)

    def with_schema(self, f: Callable[[Schema], Schema]) -> Decoder:
        """Return a decoder whose schema is ``f`` applied to the current one."""
        return self.set_schema(f(self.schema))

    def ref(self, name: str) -> Decoder:
        """
        Mark this decoder's schema as a named reference.

        Used inside ``recursive`` to cut the self-referential point of a schema:

            recursive(lambda self: field("children", list_of(self.ref("node"))))
        """
        return self.set_schema(Ref(name))

    def transform(self, f: Callable[[Decoder], Decoder]) -> Decoder:
        return f(self)

    def map(self, f: Callable[[Any], Any]) -> Decoder:
        """Apply f to the decoded value. An exception raised by f becomes an Err."""
        run = self.run

        def mapped(value: Any) -> Result:
            result = run(value)
            if isinstance(result, Err):
                return result
            return try_result(lambda: f(result.value))

        return Decoder(mapped, self.schema)

    def map_error(self, f: Callable[[str], str]) -> Decoder:
        """Apply f to the error message, if any."""
        run = self.run

        def mapped(value: Any) -> Result:
            return run(value).map_err(f)

        return Decoder(mapped, self.schema)

    def and_then(self, f: Callable[[Any], Decoder]) -> Decoder:
        """
        Create a decoder that depends on the result of this one.

        The decoder returned by f is applied to the original input, not to the
        decoded value. The schema stays the one of this decoder, since the
        continuation's schema is only known once a value has been decoded.
        """
        run = self.run

        def chained(value: Any) -> Result:
            result = run(value)
            if isinstance(result, Err):
                return result
            try:
                following = f(result.value)
            except Exception as e:
                return Err(error_message(e))
            return following.run(value)

        return Decoder(chained, self.schema)

    def filter(
        self,
        predicate: Callable[[Any], bool],
        error: str | Callable[[Any], str],
    ) -> Decoder:
        """Fail with ``error`` when the decoded value does not satisfy predicate."""
        run = self.run
        on_fail = error if callable(error) else (lambda _: error)

        def filtered(value: Any) -> Result:
            result = run(value)
            if isinstance(result, Err):
                return result
            try:
                if predicate(result.value):
                    return result
                return Err(on_fail(result.value))
            except Exception as e:
                return Err(error_message(e))

        return Decoder(filtered, self.schema)

    def map_try(
        self,
        f: Callable[[Any], Any],
        error: str | Callable[[Exception], str] | None = None,
    ) -> Decoder:
        """
        Attempt to transform the decoded value, failing if f raises.

        Args:
            f: The transformation
            error: None to use the exception message, a fixed message, or a
                   callable building the message from the exception
        """
        if error is None:
            on_error = error_message
        elif callable(error):
            on_error = error
        else:
            fixed = error

            def on_error(_: Exception) -> str:
                return fixed

        return self.and_then(
            lambda t: Decoder(_constant(try_result(lambda: f(t), on_error)))
        )


def _constant(result: Result) -> DecodeFn:
    def run(_: Any) -> Result:
        return result

    return run


def map_n(f: Callable[..., Any], *decoders: Decoder) -> Decoder:
    """
    Combine decoders applied to the same input with an n-ary function.

    Decoders run left to right and the first failure stops evaluation. The
    schema is the intersection of the member schemas, in argument order.
    """
    if not decoders:
        raise TypeError("map_n() requires at least one decoder")

    runs = [d.run for d in decoders]

    def combined(value: Any) -> Result:
        values = []
        for run in runs:
            result = run(value)
            if isinstance(result, Err):
                return result
            values.append(result.value)
        return try_result(lambda: f(*values))

    return Decoder(combined, Intersection(tuple(d.schema for d in decoders)))


def map2(d_a: Decoder, d_b: Decoder, f: Callable[[Any, Any], Any]) -> Decoder:
    return map_n(f, d_a, d_b)


def map3(d_a: Decoder, d_b: Decoder, d_c: Decoder, f: Callable[..., Any]) -> Decoder:
    return map_n(f, d_a, d_b, d_c)


def map4(
    d_a: Decoder, d_b: Decoder, d_c: Decoder, d_d: Decoder, f: Callable[..., Any]
) -> Decoder:
    return map_n(f, d_a, d_b, d_c, d_d)


def map5(
    d_a: Decoder,
    d_b: Decoder,
    d_c: Decoder,
    d_d: Decoder,
    d_e: Decoder,
    f: Callable[..., Any],
) -> Decoder:
    return map_n(f, d_a, d_b, d_c, d_d, d_e)


def map6(
    d_a: Decoder,
    d_b: Decoder,
    d_c: Decoder,
    d_d: Decoder,
    d_e: Decoder,
    d_f: Decoder,
    f: Callable[..., Any],
) -> Decoder:
    return map_n(f, d_a, d_b, d_c, d_d, d_e, d_f)


def map7(
    d_a: Decoder,
    d_b: Decoder,
    d_c: Decoder,
    d_d: Decoder,
    d_e: Decoder,
    d_f: Decoder,
    d_g: Decoder,
    f: Callable[..., Any],
) -> Decoder:
    return map_n(f, d_a, d_b, d_c, d_d, d_e, d_f, d_g)


def map8(
    d_a: Decoder,
    d_b: Decoder,
    d_c: Decoder,
    d_d: Decoder,
    d_e: Decoder,
    d_f: Decoder,
    d_g: Decoder,
    d_h: Decoder,
    f: Callable[..., Any],
) -> Decoder:
    return map_n(f, d_a, d_b, d_c, d_d, d_e, d_f, d_g, d_h)


def from_result(result: Result) -> Decoder:
    """Always return the given result, ignoring the input."""
    return Decoder(_constant(result))
