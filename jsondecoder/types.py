"""
Type definitions for jsondecoder.

Provides a minimal Result type (Ok/Err), the library exception and type aliases.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Generic, Iterable, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


class DecodeError(ValueError):
    """Raised when a decode result is forced into a value but holds an error."""


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def map_err(self, f: Callable[[Any], Any]) -> Ok[T]:
        return self

    def flat_map(self, f: Callable[[T], Result]) -> Result:
        return f(self.value)

    def fold(self, on_err: Callable[[Any], U], on_ok: Callable[[T], U]) -> U:
        return on_ok(self.value)

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error result containing an error value."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def map(self, f: Callable[[Any], Any]) -> Err[E]:
        return self

    def map_err(self, f: Callable[[E], U]) -> Err[U]:
        return Err(f(self.error))

    def flat_map(self, f: Callable[[Any], Result]) -> Err[E]:
        return self

    def fold(self, on_err: Callable[[E], U], on_ok: Callable[[Any], U]) -> U:
        return on_err(self.error)

    def unwrap(self) -> Any:
        raise DecodeError(self.error)

    def unwrap_or(self, default: T) -> T:
        return default


# Type aliases
Result = Ok[T] | Err[str]
JsonValue = None | bool | int | float | Decimal | str | list | dict
DecodeFn = Callable[[Any], "Ok[Any] | Err[str]"]


def sequence(results: Iterable[Ok[T] | Err[str]]) -> Ok[list[T]] | Err[str]:
    """
    Collect an iterable of results into a single result.

    Stops consuming the iterable at the first Err, so lazily produced
    results after a failure are never computed.
    """
    values: list[T] = []
    for result in results:
        if isinstance(result, Err):
            return result
        values.append(result.value)
    return Ok(values)


def error_message(exc: BaseException) -> str:
    """Message of an exception, falling back to its type name when empty."""
    return str(exc) or type(exc).__name__


def try_result(
    fn: Callable[[], T],
    on_error: Callable[[Exception], str] = error_message,
) -> Ok[T] | Err[str]:
    """Run fn and capture a raised exception as an Err."""
    try:
        return Ok(fn())
    except Exception as e:
        return Err(on_error(e))
