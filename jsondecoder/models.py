"""
Pydantic interop for jsondecoder.

Compiles the object schema derived from a decoder into a Pydantic model.
"""

from __future__ import annotations

import functools
import operator
from typing import Any, Literal
from typing import Optional as TypingOptional

from pydantic import create_model

from .core import Decoder
from .schema import Array, Enum, Lit, LitKind, Object, Schema, Union, normalize

_LIT_TYPES: dict[LitKind, Any] = {
    LitKind.NULL: type(None),
    LitKind.INT: int,
    LitKind.FLOAT: float,
    LitKind.BOOL: bool,
    LitKind.STRING: str,
}


def to_pydantic(name: str, source: Decoder | Schema) -> type:
    """
    Compile an object-shaped schema to a Pydantic model.

    Args:
        name: Name of the generated model class
        source: A decoder (its schema is used) or a schema

    Returns:
        A Pydantic BaseModel subclass

    Usage:
        user = map2(field("name", String), optional_field("email", String), User)
        UserModel = to_pydantic("User", user)
        UserModel(name="Alice")
    """
    schema = source.schema if isinstance(source, Decoder) else source
    obj = normalize(schema)
    if not isinstance(obj, Object):
        raise TypeError("Schema must be an object")

    fields: dict[str, Any] = {}
    for f in obj.known:
        field_type = _python_type(f.value)
        if f.required:
            fields[f.name] = (field_type, ...)
        else:
            fields[f.name] = (TypingOptional[field_type], None)

    return create_model(name, **fields)


def _python_type(schema: Schema) -> Any:
    """Python type annotation approximating a schema."""
    match normalize(schema):
        case Lit(kind=kind):
            return _LIT_TYPES[kind]
        case Array(item=item):
            return list[_python_type(item)]  # type: ignore[misc]
        case Object():
            return dict[str, Any]
        case Enum(values=values) if values:
            return Literal[tuple(values)]
        case Union(options=options) if options:
            return functools.reduce(
                operator.or_, (_python_type(o) for o in options)
            )

    return Any
