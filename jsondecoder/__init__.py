"""
jsondecoder - Composable JSON decoders that derive their own schema.

Usage:
    from jsondecoder import Integer, String, field, map2, json_schema

    person = map2(field("name", String), field("age", Integer), Person)

    result = person.decode({"name": "Alice", "age": 30})   # Ok(Person(...))
    schema = json_schema(person)                           # JSON Schema dict
"""

from .context import schema_context
from .core import (
    Decoder,
    from_result,
    map2,
    map3,
    map4,
    map5,
    map6,
    map7,
    map8,
    map_n,
)
from .decoders import (
    BigDecimal,
    Boolean,
    Double,
    Float,
    Integer,
    JArray,
    JNull,
    JObject,
    Long,
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
    mapping,
    matches,
    null_value,
    nullable,
    one_of,
    option,
    optional_field,
    recursive,
    succeed,
)
from .models import to_pydantic
from .parse import (
    decode_string,
    decode_value,
    parse_json,
    try_decode_string,
    try_decode_value,
)
from .render import json_schema
from .types import DecodeError, Err, Ok, Result

__all__ = [
    # Result types
    "Ok",
    "Err",
    "Result",
    "DecodeError",
    # Core
    "Decoder",
    "from_result",
    "map_n",
    "map2",
    "map3",
    "map4",
    "map5",
    "map6",
    "map7",
    "map8",
    # Primitive decoders
    "Value",
    "JObject",
    "JArray",
    "JNull",
    "String",
    "Boolean",
    "BigDecimal",
    "Integer",
    "Long",
    "Float",
    "Double",
    # Combinators
    "field",
    "optional_field",
    "option",
    "nullable",
    "null_value",
    "list_of",
    "dict_of",
    "index",
    "at",
    "one_of",
    "succeed",
    "fail",
    "enum_by_name",
    "equal",
    "matches",
    "mapping",
    "recursive",
    # Entry points
    "parse_json",
    "decode_string",
    "decode_value",
    "try_decode_string",
    "try_decode_value",
    # Schema
    "json_schema",
    "schema_context",
    "to_pydantic",
]
