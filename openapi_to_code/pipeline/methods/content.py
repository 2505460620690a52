"""
Media-type helpers used when building client functions.
"""

from __future__ import annotations

import re
from typing import Any

from ..analyzer.reference_resolver import resolve
from ..context import GenerationContext
from ..errors import ParameterContentError

# Serialization kinds the runtime knows for request bodies
CONTENT_TYPES = {
    "*/*": "json",
    "application/json": "json",
    "application/x-www-form-urlencoded": "form",
    "multipart/form-data": "multipart",
}

HTTP_METHODS = ("GET", "PUT", "POST", "DELETE", "OPTIONS", "HEAD", "PATCH", "TRACE")

_MIME_PATTERN = re.compile(r"^[^/]+/[^/]+$")
_JSON_PATTERN = re.compile(r"\bjson\b", re.IGNORECASE)


def is_http_method(method: str) -> bool:
    return method in HTTP_METHODS


def is_mime_type(s: Any) -> bool:
    return isinstance(s, str) and bool(_MIME_PATTERN.match(s))


def is_json_mime_type(mime: str) -> bool:
    return CONTENT_TYPES.get(mime) == "json" or bool(_JSON_PATTERN.search(mime))


def get_schema_from_content(content: dict[str, Any]) -> Any:
    """
    Pick the schema describing a `content` map.

    The first media type carrying a schema wins. Without one, no content or
    a `text/*` type means a plain string, and anything else (octet streams,
    archives, ...) is binary.
    """
    content_type = next((k for k in content if is_mime_type(k)), None)
    if content_type is not None:
        schema = (content[content_type] or {}).get("schema")
        if schema:
            return schema

    if not content or any(k.startswith("text/") for k in content):
        return {"type": "string"}
    return {"type": "string", "format": "binary"}


def get_body_formatter(body: dict | None) -> str | None:
    """`json`, `form` or `multipart` for a request body, None when unknown."""
    for content_type in (body or {}).get("content") or {}:
        formatter = CONTENT_TYPES.get(content_type)
        if formatter:
            return formatter
        if is_json_mime_type(content_type):
            return "json"
    return None


def get_formatter(param: dict) -> str:
    """Name of the query formatter function for a parameter."""
    content = param.get("content")
    if content:
        medias = list(content)
        if len(medias) != 1:
            raise ParameterContentError(
                f"Parameter {param.get('name')!r}: parameters with content property"
                " must specify one media type"
            )
        if not is_json_mime_type(medias[0]):
            raise ParameterContentError(
                f"Parameter {param.get('name')!r}: parameters with content property"
                " must specify a JSON compatible media type"
            )
        return "json"

    style = param.get("style", "form")
    explode = param.get("explode", True)
    if explode and style == "deepObject":
        return "deep"
    if explode:
        return "explode"
    if style == "spaceDelimited":
        return "space"
    if style == "pipeDelimited":
        return "pipe"
    return "form"


def get_response_type(ctx: GenerationContext, responses: dict | None) -> str:
    """How the response is read: `json`, `text` or `blob`."""
    if not responses:
        return "text"

    resolved = [resolve(response, ctx) or {} for response in responses.values()]
    mime_types = [list(response.get("content") or {}) for response in resolved]

    if not any(mime_types):
        return "text"
    if any(is_json_mime_type(m) for mimes in mime_types for m in mimes):
        return "json"
    if any(m.startswith("text/") for mimes in mime_types for m in mimes):
        return "text"
    return "blob"


def support_deep_objects(params: list[dict]) -> list[dict]:
    """
    Merge `name[prop]` parameters into a single deepObject parameter.

    Documents converted from older formats spell nested query objects this
    way; the runtime's deep formatter handles the merged object.
    """
    result = []
    merged: dict[str, dict] = {}
    for param in params:
        match = re.match(r"^(.+?)\[(.*?)\]", param.get("name", ""))
        if not match:
            result.append(param)
            continue
        name, prop = match.groups()
        obj = merged.get(name)
        if obj is None:
            obj = merged[name] = {
                "name": name,
                "in": param.get("in"),
                "style": "deepObject",
                "schema": {"type": "object", "properties": {}},
            }
            result.append(obj)
        obj["schema"]["properties"][prop] = param.get("schema")
    return result
