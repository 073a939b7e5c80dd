"""
tagbox
======

A tagged, path-addressable data container.

    box = Box({"a": {"b": {"c": 100}}})
    box.get("a.b.c")                     → 100
    box.set_scope_tag("a.b").get("c")    → 100

    reply = box.derive({"ok": True})     # same sequence → correlated reply
    reply.get_id() == box.get_id()       → True

    Box({"a": 1, "b": 2}).merge({"a": 10, "c": 3}).payload
                                         → {"a": 10, "b": 2, "c": 3}

A Box carries:
  • a payload — nested dicts/lists; scalars are wrapped as {"_v": value}
  • tags — metadata outside the payload (scope, glossary, notify, id, …)
  • a sequence — an opaque id shared by boxes derived from one another

The structural differ (tagbox.differ) and the dotted-path accessor
(tagbox.paths) used by Box are usable on their own.
"""

from tagbox.box import Box, ContentKind, classify
from tagbox.constants import Tags, VALUE_KEY
from tagbox.differ import Change, ChangeKind, diff, apply_change, patch
from tagbox.errors import BoxError, InvalidPathError, PathConflictError, DiffError
from tagbox.formats import render, strip_hidden, select_paths
from tagbox.ident import ShortIdGenerator
from tagbox.paths import get_path, set_path, has_path, del_path

__version__ = "0.1.0"
__all__ = [
    "Box", "ContentKind", "classify",
    "Tags", "VALUE_KEY",
    "Change", "ChangeKind", "diff", "apply_change", "patch",
    "BoxError", "InvalidPathError", "PathConflictError", "DiffError",
    "render", "strip_hidden", "select_paths",
    "ShortIdGenerator",
    "get_path", "set_path", "has_path", "del_path",
]
