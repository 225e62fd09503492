"""
Entry points that run a decoder on JSON text or on an already-parsed value.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any

from .core import Decoder
from .types import Err, JsonValue, Ok, Result

logger = logging.getLogger(__name__)


def parse_json(text: str | bytes) -> Result:
    """
    Parse JSON text into a value tree.

    Non-integral numbers are kept exact as Decimal. A syntax error is returned
    as Err(message) rather than raised.
    """
    try:
        return Ok(json.loads(text, parse_float=Decimal))
    except (ValueError, RecursionError) as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueError
        logger.debug("JSON parse error: %s", e)
        return Err(str(e))


def decode_string(text: str | bytes, decoder: Decoder) -> Result:
    """
    Parse JSON text and decode it.

    Usage:
        decode_string('{"hey": 1}', field("hey", Integer))  # Ok(1)
        decode_string('{"hey": ', field("hey", Integer))    # Err("Expecting value: ...")
    """
    return parse_json(text).flat_map(decoder.run)


def decode_value(value: JsonValue, decoder: Decoder) -> Result:
    """Decode an already-parsed JSON value."""
    return decoder.run(value)


def try_decode_string(text: str | bytes, decoder: Decoder) -> Any:
    """
    Parse JSON text and decode it, returning the value.

    Raises:
        DecodeError: if the text is not valid JSON or decoding fails
    """
    return decode_string(text, decoder).unwrap()


def try_decode_value(value: JsonValue, decoder: Decoder) -> Any:
    """
    Decode an already-parsed JSON value, returning the value.

    Raises:
        DecodeError: if decoding fails
    """
    return decoder.run(value).unwrap()
