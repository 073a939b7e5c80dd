"""
tagbox.differ — structural diff and change replay on plain Python trees.

A tree is any nesting of dicts, lists and scalars (the shapes that come
out of json.loads).  diff(lhs, rhs) walks both trees side by side and
returns an ordered list of Change records; apply_change() replays one
record against a target tree in place.

    diff({"a": 1, "b": 2}, {"a": 10, "c": 3})
      → [EDITED at a: 1 → 10, DELETED at b: 2, NEW at c: 3]

CHANGE KINDS
════════════

    NEW      "N"   a key/element exists only on the right
    DELETED  "D"   a key exists only on the left
    EDITED   "E"   a value differs (different scalar, or different type)
    ARRAY    "A"   an element was appended to / removed from a list;
                   the record wraps a nested NEW or DELETED in `item`
                   and names the position in `index`

Dicts are compared key by key: left keys in insertion order (recursing
into shared keys, DELETED for missing ones) followed by right-only keys
as NEW.  Lists are compared position by position; surplus left elements
become ARRAY/DELETED records, highest index first, so that replaying
the records in order never shifts a position that is still to be
removed; surplus right elements become ARRAY/NEW records in ascending
order.

Equality of scalars follows Python equality with one exception: bool
is never equal to a non-bool (True == 1 in Python, but a flag turning
into a counter is a real change).
"""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from .errors import DiffError


# ═══════════════════════════════════════════════════════════════════
#  CHANGE RECORDS
# ═══════════════════════════════════════════════════════════════════

class ChangeKind(Enum):
    """Classification of a change record."""
    NEW = "N"
    DELETED = "D"
    EDITED = "E"
    ARRAY = "A"


@dataclass
class Change:
    """A single difference between two trees."""
    kind: ChangeKind
    path: tuple[Union[int, str], ...]  # Path from root to the change point
    lhs: Any = None
    rhs: Any = None
    index: Optional[int] = None         # ARRAY only
    item: Optional["Change"] = None     # ARRAY only

    def __repr__(self) -> str:
        path_str = ".".join(str(p) for p in self.path) or "(root)"
        if self.kind == ChangeKind.NEW:
            return f"NEW at {path_str}: {self.rhs!r}"
        if self.kind == ChangeKind.DELETED:
            return f"DELETED at {path_str}: {self.lhs!r}"
        if self.kind == ChangeKind.EDITED:
            return f"EDITED at {path_str}: {self.lhs!r} → {self.rhs!r}"
        return f"ARRAY at {path_str}[{self.index}]: {self.item!r}"


# ═══════════════════════════════════════════════════════════════════
#  DIFF
# ═══════════════════════════════════════════════════════════════════

def _scalar_equal(a: Any, b: Any) -> bool:
    # bool must be checked first: in Python True == 1 and False == 0
    a_is_bool = type(a) is bool
    b_is_bool = type(b) is bool
    if a_is_bool != b_is_bool:
        return False
    if a is b:
        return True
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        # e.g. arrays with ambiguous truth values
        return False


def diff(lhs: Any, rhs: Any, path: tuple = ()) -> list[Change]:
    """
    Compute the changes that turn `lhs` into `rhs`.

    Returns an empty list when the trees are equal.
    """
    changes: list[Change] = []
    _diff_into(lhs, rhs, path, changes)
    return changes


def _diff_into(lhs: Any, rhs: Any, path: tuple, changes: list[Change]) -> None:
    if lhs is rhs:
        return

    if isinstance(lhs, dict) and isinstance(rhs, dict):
        _dict_diff(lhs, rhs, path, changes)
        return

    if isinstance(lhs, list) and isinstance(rhs, list):
        _list_diff(lhs, rhs, path, changes)
        return

    # Containers of different kinds, container vs scalar, or two scalars
    if isinstance(lhs, (dict, list)) or isinstance(rhs, (dict, list)):
        changes.append(Change(ChangeKind.EDITED, path, lhs=lhs, rhs=rhs))
    elif not _scalar_equal(lhs, rhs):
        changes.append(Change(ChangeKind.EDITED, path, lhs=lhs, rhs=rhs))


def _dict_diff(lhs: dict, rhs: dict, path: tuple, changes: list[Change]) -> None:
    """Diff two dicts: shared keys recurse, one-sided keys are D or N."""
    for key, value in lhs.items():
        child_path = path + (key,)
        if key in rhs:
            _diff_into(value, rhs[key], child_path, changes)
        else:
            changes.append(Change(ChangeKind.DELETED, child_path, lhs=value))

    for key, value in rhs.items():
        if key not in lhs:
            changes.append(Change(ChangeKind.NEW, path + (key,), rhs=value))


def _list_diff(lhs: list, rhs: list, path: tuple, changes: list[Change]) -> None:
    """Diff two lists position by position."""
    common = min(len(lhs), len(rhs))

    for i in range(common):
        _diff_into(lhs[i], rhs[i], path + (i,), changes)

    for i in range(len(lhs) - 1, common - 1, -1):
        changes.append(Change(ChangeKind.ARRAY, path, index=i,
                              item=Change(ChangeKind.DELETED, (), lhs=lhs[i])))

    for i in range(common, len(rhs)):
        changes.append(Change(ChangeKind.ARRAY, path, index=i,
                              item=Change(ChangeKind.NEW, (), rhs=rhs[i])))


# ═══════════════════════════════════════════════════════════════════
#  APPLY (replay change records)
# ═══════════════════════════════════════════════════════════════════

def _child(node: Any, key: Any, next_key: Any) -> Any:
    """Step into `node[key]`, creating a container when it is missing."""
    if isinstance(node, dict):
        if key not in node:
            node[key] = [] if isinstance(next_key, int) else {}
        return node[key]
    if isinstance(node, list) and isinstance(key, int):
        if key >= len(node):
            node.extend([None] * (key - len(node) + 1))
        if node[key] is None:
            node[key] = [] if isinstance(next_key, int) else {}
        return node[key]
    raise DiffError(f"Cannot descend into {type(node).__name__} at {key!r}")


def _assign(node: Any, key: Any, value: Any) -> None:
    if isinstance(node, dict):
        node[key] = value
    elif isinstance(node, list) and isinstance(key, int):
        if key >= len(node):
            node.extend([None] * (key - len(node) + 1))
        node[key] = value
    else:
        raise DiffError(f"Cannot assign {key!r} on {type(node).__name__}")


def _remove(node: Any, key: Any) -> None:
    if isinstance(node, dict):
        node.pop(key, None)
    elif isinstance(node, list) and isinstance(key, int):
        if key < len(node):
            del node[key]
    else:
        raise DiffError(f"Cannot remove {key!r} from {type(node).__name__}")


def _replace_root(target: Any, value: Any) -> None:
    """Make `target` equal to `value` without rebinding it."""
    if isinstance(target, dict) and isinstance(value, dict):
        target.clear()
        target.update(value)
    elif isinstance(target, list) and isinstance(value, list):
        target[:] = value
    else:
        raise DiffError(
            f"Cannot replace a {type(target).__name__} root with "
            f"{type(value).__name__} in place"
        )


def _apply_array(array: Any, change: Change) -> None:
    if not isinstance(array, list):
        raise DiffError(f"Array change on {type(array).__name__}")
    item = change.item
    if item.kind == ChangeKind.DELETED:
        _remove(array, change.index)
    elif item.kind in (ChangeKind.NEW, ChangeKind.EDITED):
        _assign(array, change.index, copy.deepcopy(item.rhs))
    else:
        raise DiffError(f"Unsupported array item kind {item.kind}")


def apply_change(target: Any, change: Change) -> Any:
    """
    Realise one change record on `target`, in place.

    Containers missing along the path are created (a list when the next
    path element is an integer, a dict otherwise).  Values written into
    `target` are deep copies, so `target` never aliases the tree the
    change was computed from.  Returns `target`.
    """
    path = change.path

    if change.kind == ChangeKind.ARRAY:
        node = target
        for key, next_key in zip(path, path[1:] + (change.index,)):
            node = _child(node, key, next_key)
        _apply_array(node, change)
        return target

    if not path:
        if change.kind == ChangeKind.DELETED:
            _replace_root(target, {} if isinstance(target, dict) else [])
        else:
            _replace_root(target, copy.deepcopy(change.rhs))
        return target

    node = target
    for key, next_key in zip(path[:-1], path[1:]):
        node = _child(node, key, next_key)

    if change.kind == ChangeKind.DELETED:
        _remove(node, path[-1])
    else:
        _assign(node, path[-1], copy.deepcopy(change.rhs))
    return target


def patch(target: Any, changes: list[Change]) -> Any:
    """
    Apply a whole change list to `target` in place.

    This is the inverse of diff:
        patch(a, diff(a, b)) == b
    """
    for change in changes:
        apply_change(target, change)
    return target
