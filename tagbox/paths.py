"""
tagbox.paths — dotted-path access into nested dicts and lists.

A path is either a string of segments joined by "." or a sequence of
segments:

    get_path({"a": {"b": [10, 20]}}, "a.b.1")        → 20
    get_path({"a": {"b": [10, 20]}}, ["a", "b", 1])  → 20

Segments that look like non-negative integers ("0", "12", but not "01")
index into lists.  When set_path has to create a missing container it
creates a list if the following segment is an index, a dict otherwise.
"""

from typing import Any, Iterable, Union

from .constants import PATH_SEPARATOR
from .errors import PathConflictError

Segment = Union[str, int]
PathLike = Union[str, Iterable[Segment], None]

# Sentinel for "no value at this path" (None is a legitimate value)
MISSING = object()


def split_path(path: PathLike) -> list[Segment]:
    """Normalise a path to a list of segments.  None and "" give []."""
    if path is None:
        return []
    if isinstance(path, str):
        return path.split(PATH_SEPARATOR) if path else []
    if isinstance(path, int):
        return [path]
    return list(path)


def join_path(segments: Iterable[Segment]) -> str:
    return PATH_SEPARATOR.join(str(s) for s in segments)


def _as_index(segment: Segment) -> Union[int, None]:
    """List index denoted by `segment`, or None if it is not one."""
    if isinstance(segment, bool):
        return None
    if isinstance(segment, int):
        return segment if segment >= 0 else None
    if isinstance(segment, str) and segment.isascii() and segment.isdigit():
        index = int(segment)
        return index if str(index) == segment else None
    return None


def _dict_key(node: dict, segment: Segment) -> Segment:
    # Integer segments from a sequence path still find string keys
    if segment not in node and isinstance(segment, int) and str(segment) in node:
        return str(segment)
    return segment


def _lookup(node: Any, segment: Segment) -> Any:
    """Child of `node` at `segment`, or MISSING."""
    if isinstance(node, dict):
        key = _dict_key(node, segment)
        return node[key] if key in node else MISSING
    if isinstance(node, list):
        index = _as_index(segment)
        if index is not None and index < len(node):
            return node[index]
    return MISSING


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


def get_path(obj: Any, path: PathLike, default: Any = None) -> Any:
    """Value at `path` inside `obj`, or `default` when absent."""
    node = obj
    for segment in split_path(path):
        node = _lookup(node, segment)
        if node is MISSING:
            return default
    return node


def has_path(obj: Any, path: PathLike) -> bool:
    """True if `path` exists inside `obj`, whatever the stored value."""
    return get_path(obj, path, MISSING) is not MISSING


def _check_slot(path: PathLike, node: Any, segment: Segment) -> None:
    if not _is_container(node):
        raise PathConflictError(path, segment, node)
    if isinstance(node, list) and _as_index(segment) is None:
        raise PathConflictError(path, segment, node)


def _put(node: Any, segment: Segment, value: Any) -> None:
    if isinstance(node, list):
        index = _as_index(segment)
        if index >= len(node):
            node.extend([None] * (index - len(node) + 1))
        node[index] = value
    else:
        node[_dict_key(node, segment)] = value


def set_path(obj: Any, path: PathLike, value: Any) -> Any:
    """
    Store `value` at `path` inside `obj`, creating missing containers.

    The existing part of the route is checked first, so a conflict
    (descending into a scalar, or a non-index segment on a list) raises
    PathConflictError before `obj` is touched.  An empty path is a no-op.
    Returns `obj`.
    """
    segments = split_path(path)
    if not segments:
        return obj

    # Walk the part of the route that already exists
    node = obj
    remaining = segments
    while len(remaining) > 1:
        segment = remaining[0]
        _check_slot(path, node, segment)
        child = _lookup(node, segment)
        if child is MISSING:
            break
        if not _is_container(child):
            raise PathConflictError(path, segment, child)
        node = child
        remaining = remaining[1:]
    else:
        _check_slot(path, node, remaining[0])

    # Build the rest
    for segment, next_segment in zip(remaining, remaining[1:]):
        child = [] if _as_index(next_segment) is not None else {}
        _put(node, segment, child)
        node = child
    _put(node, remaining[-1], value)
    return obj


def del_path(obj: Any, path: PathLike) -> Any:
    """Remove the entry at `path` if present.  Returns `obj`."""
    segments = split_path(path)
    if not segments:
        return obj

    parent = get_path(obj, segments[:-1], MISSING)
    last = segments[-1]
    if isinstance(parent, dict):
        key = _dict_key(parent, last)
        if key in parent:
            del parent[key]
    elif isinstance(parent, list):
        index = _as_index(last)
        if index is not None and index < len(parent):
            del parent[index]
    return obj
