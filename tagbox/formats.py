"""
tagbox.formats — human-readable rendering of a box.

These helpers read a box's payload and tags and never modify them:

    • strip_hidden   drop top-level keys starting with "_"
    • select_paths   keep only an explicit list of dotted paths
    • render         the "--- Content ---" / "--- Tags ---" text block
"""

import json
from typing import Any, Iterable, Optional, Union

from .constants import FILTER_SEPARATOR, HIDDEN_PREFIX
from .paths import MISSING, get_path, set_path

CONTENT_HEADER = "--- Content ---"
TAGS_HEADER = "--- Tags ---"

FieldFilter = Union[str, Iterable[str], None]


# ═══════════════════════════════════════════════════════════════════
#  PAYLOAD SHAPING
# ═══════════════════════════════════════════════════════════════════

def parse_filter(field_filter: FieldFilter) -> Optional[list[str]]:
    """Turn "a.b;c" or ["a.b", "c"] into a list of paths.  Falsy → None."""
    if not field_filter:
        return None
    if isinstance(field_filter, str):
        return [p for p in field_filter.split(FILTER_SEPARATOR) if p]
    return [p for p in field_filter if p] or None


def strip_hidden(payload: Any) -> Any:
    """Shallow copy of `payload` without top-level keys starting with "_"."""
    if not isinstance(payload, dict):
        return payload
    return {
        k: v for k, v in payload.items()
        if not (isinstance(k, str) and k.startswith(HIDDEN_PREFIX))
    }


def select_paths(box, paths: Iterable[str]) -> dict:
    """
    Fresh dict holding only `paths` from `box`.

    Paths are resolved through the box, so its scope and glossary
    apply; they are placed under the path as written.  Absent and empty
    paths are left out; a stored None is kept.
    """
    selected: dict = {}
    for path in paths:
        if not path:
            continue
        value = get_path(box.payload, box.resolve_path(path), MISSING)
        if value is not MISSING:
            set_path(selected, path, value)
    return selected


# ═══════════════════════════════════════════════════════════════════
#  TEXT
# ═══════════════════════════════════════════════════════════════════

def to_json(value: Any, **kwargs) -> str:
    """JSON text for `value`; values json cannot encode fall back to str()."""
    kwargs.setdefault("indent", 2)
    kwargs.setdefault("default", str)
    kwargs.setdefault("ensure_ascii", False)
    return json.dumps(value, **kwargs)


def render(box, show_hidden: bool = False, show_tags: bool = False,
           field_filter: FieldFilter = None) -> str:
    """
    Text block describing `box`:

        --- Content ---
        { ...payload as JSON... }
        --- Tags ---          (only with show_tags)
        { ...tags as JSON... }
    """
    paths = parse_filter(field_filter)
    if paths:
        content = select_paths(box, paths)
    else:
        content = dict(box.payload) if isinstance(box.payload, dict) else list(box.payload)

    if not show_hidden:
        content = strip_hidden(content)

    lines = [CONTENT_HEADER, to_json(content)]
    if show_tags:
        lines.append(TAGS_HEADER)
        lines.append(to_json(box.tags or {}))
    return "\n".join(lines)
