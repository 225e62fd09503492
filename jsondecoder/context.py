"""
Context manager for schema rendering configuration.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

DEFAULT_UNKNOWN_KEY = "json-decoder error"


@dataclass(frozen=True, slots=True)
class RenderSettings:
    unknown_key: str = DEFAULT_UNKNOWN_KEY
    ref_prefix: str = ""


# Context variable for rendering settings
_render_settings: ContextVar[RenderSettings] = ContextVar(
    "render_settings", default=RenderSettings()
)


def render_settings() -> RenderSettings:
    """Return the rendering settings currently in effect."""
    return _render_settings.get()


@contextmanager
def schema_context(
    *, unknown_key: str = DEFAULT_UNKNOWN_KEY, ref_prefix: str = ""
):
    """
    Context manager for schema rendering configuration.

    Args:
        unknown_key: Key under which an Unknown schema's message is rendered.
        ref_prefix: Prepended to every ``$ref`` target, e.g. "#/definitions/".

    Example:
        from jsondecoder import json_schema, schema_context

        with schema_context(ref_prefix="#/definitions/"):
            doc = json_schema(tree_decoder.schema)
    """
    token = _render_settings.set(
        RenderSettings(unknown_key=unknown_key, ref_prefix=ref_prefix)
    )
    try:
        yield
    finally:
        _render_settings.reset(token)
