"""
Schema interpreter for jsondecoder.

Turns a Schema tree into a JSON Schema document made of plain dicts, lists and
literals, ready for any JSON writer.
"""

from __future__ import annotations

from typing import Any

from .context import render_settings
from .core import Decoder
from .schema import (
    Anything,
    Array,
    Enum,
    Intersection,
    Lit,
    LitKind,
    Object,
    Ref,
    Schema,
    Union,
    Unknown,
    flatten,
    merge_objects,
)

_TYPE_NAMES = {
    LitKind.NULL: "null",
    LitKind.INT: "integer",
    LitKind.FLOAT: "number",
    LitKind.BOOL: "boolean",
    LitKind.STRING: "string",
}


def json_schema(schema: Schema | Decoder) -> dict[str, Any]:
    """
    Render a schema (or a decoder's schema) as a JSON Schema document.

    Usage:
        json_schema(map2(field("a", String), field("b", Integer), Pair))
        # {"type": "object",
        #  "properties": {"a": {"type": "string"}, "b": {"type": "integer"}},
        #  "required": ["a", "b"],
        #  "additionalProperties": True}
    """
    if isinstance(schema, Decoder):
        schema = schema.schema
    return _render(schema)


def _render(schema: Schema) -> dict[str, Any]:
    match schema:
        case Anything():
            return {}
        case Lit(kind=kind):
            return {"type": _TYPE_NAMES[kind]}
        case Array(item=item):
            doc: dict[str, Any] = {"type": "array"}
            if not isinstance(item, Anything):
                doc["items"] = _render(item)
            return doc
        case Object():
            return _render_object(schema)
        case Union(options=(only,)):
            return _render(only)
        case Union(options=options):
            return {"anyOf": [_render(o) for o in options]}
        case Intersection():
            return _render_intersection(schema)
        case Enum(values=values):
            return {"enum": list(values)}
        case Ref(name=name):
            return {"$ref": render_settings().ref_prefix + name}
        case Unknown(message=message):
            return {render_settings().unknown_key: message}

    raise TypeError(f"Cannot render {type(schema).__name__} as a schema")


def _render_intersection(schema: Intersection) -> dict[str, Any]:
    parts = flatten(schema)
    if not parts:
        return {}
    if len(parts) == 1:
        return _render(parts[0])
    if all(isinstance(p, Object) for p in parts):
        return _render_object(merge_objects(parts))  # type: ignore[arg-type]
    return {"allOf": [_render(p) for p in parts]}


def _render_object(obj: Object) -> dict[str, Any]:
    doc: dict[str, Any] = {"type": "object"}
    if obj.known:
        doc["properties"] = {f.name: _render(f.value) for f in obj.known}
    required = [f.name for f in obj.known if f.required]
    if required:
        doc["required"] = required
    if obj.unnamed:
        doc["additionalProperties"] = _render(Union(obj.unnamed))
    else:
        doc["additionalProperties"] = True
    return doc
