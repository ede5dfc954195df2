"""URL templates declared in the Beacon map.

Endpoint URLs may carry ``{name}`` placeholders (``/individuals/{id}``)
that are filled from the fields of a sample entry.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import unquote

import httpx

_PLACEHOLDER = re.compile(r"\{([^{}]*)\}")


def has_placeholders(url: str) -> bool:
    """Whether *url* still contains an unresolved ``{...}`` placeholder."""
    return _PLACEHOLDER.search(url) is not None


def resolve(template: str, entry: dict[str, Any]) -> str:
    """Fill the ``{name}`` placeholders of *template* from *entry*.

    A placeholder takes the value of the field called ``name``, or of
    ``id`` when there is no such field.  Only string values are
    substituted; any other placeholder is left as it is.
    """
    resolved = template
    default = entry.get("id")
    # right to left, so earlier spans keep their offsets
    for match in reversed(list(_PLACEHOLDER.finditer(template))):
        value = entry.get(match.group(1), default)
        if isinstance(value, str):
            resolved = resolved[: match.start()] + value + resolved[match.end() :]
    return resolved


def resolve_base(base: str, url: str) -> str | None:
    """Resolve a possibly relative endpoint *url* against *base*.

    Braces are escaped while the URL is parsed and restored afterwards, so
    templates survive the resolution.  Returns ``None`` for malformed URLs.
    """
    escaped = url.replace("{", "%7B").replace("}", "%7D")
    try:
        target = httpx.URL(escaped)
        if not target.is_absolute_url:
            target = httpx.URL(base).join(target)
    except httpx.InvalidURL:
        return None
    return unquote(str(target))
