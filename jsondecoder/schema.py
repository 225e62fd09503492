"""
Schema model for jsondecoder.

A Schema describes the shape a decoder accepts, independently of the decoding
function. Schemas are plain immutable trees built by the combinators alongside
the decode functions and interpreted by ``jsondecoder.render``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable


class LitKind(enum.Enum):
    NULL = "null"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"


@dataclass(frozen=True, slots=True)
class Anything:
    """Accepts anything; no constraint known."""


@dataclass(frozen=True, slots=True)
class Lit:
    """Exactly one scalar JSON kind."""

    kind: LitKind


@dataclass(frozen=True, slots=True)
class Array:
    """A JSON array whose elements all satisfy ``item``."""

    item: Schema


@dataclass(frozen=True, slots=True)
class Field:
    """A named object member."""

    name: str
    value: Schema
    required: bool = True


@dataclass(frozen=True, slots=True)
class Object:
    """
    A JSON object.

    ``known`` lists the named fields; ``unnamed`` describes the shape of any
    other member. Several unnamed entries accumulate when object schemas are
    merged and are read as a union.
    """

    known: tuple[Field, ...] = ()
    unnamed: tuple[Schema, ...] = ()


@dataclass(frozen=True, slots=True)
class Union:
    """At least one option must hold, in the order attempted."""

    options: tuple[Schema, ...]


@dataclass(frozen=True, slots=True)
class Intersection:
    """All parts must hold."""

    parts: tuple[Schema, ...]


@dataclass(frozen=True, slots=True)
class Enum:
    """One of a fixed set of literal JSON values."""

    values: tuple[Any, ...]


@dataclass(frozen=True, slots=True)
class Ref:
    """Named placeholder for a recursively defined schema."""

    name: str


@dataclass(frozen=True, slots=True)
class Unknown:
    """A schema that was never derived. Only meaningful when rendering."""

    message: str = "schema unknown"


Schema = Anything | Lit | Array | Object | Union | Intersection | Enum | Ref | Unknown


def lit(kind: LitKind) -> Lit:
    return Lit(kind)


def single_field(name: str, schema: Schema, required: bool) -> Object:
    return Object(known=(Field(name, schema, required),))


def no_known_fields() -> Object:
    return Object()


def unnamed_fields(schema: Schema) -> Object:
    return Object(unnamed=(schema,))


def flatten(schema: Intersection) -> list[Schema]:
    """Flatten nested intersections into a single list of parts, in order."""
    parts: list[Schema] = []
    for part in schema.parts:
        if isinstance(part, Intersection):
            parts.extend(flatten(part))
        else:
            parts.append(part)
    return parts


def merge_objects(objects: Iterable[Object]) -> Object:
    """Concatenate the known and unnamed members of several object schemas."""
    known: list[Field] = []
    unnamed: list[Schema] = []
    for obj in objects:
        known.extend(obj.known)
        unnamed.extend(obj.unnamed)
    return Object(known=tuple(known), unnamed=tuple(unnamed))


def normalize(schema: Schema) -> Schema:
    """
    Collapse the top level of a schema into its simplest equivalent.

    Single-option unions and single-part intersections are unwrapped, and an
    intersection made only of objects becomes one merged object.
    """
    match schema:
        case Union(options=(only,)):
            return normalize(only)
        case Intersection():
            parts = flatten(schema)
            if len(parts) == 1:
                return normalize(parts[0])
            if parts and all(isinstance(p, Object) for p in parts):
                return merge_objects(parts)  # type: ignore[arg-type]
            return Intersection(tuple(parts))
    return schema
