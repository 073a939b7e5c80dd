"""
tagbox.box — the Box container.

A Box wraps a tree-shaped payload and carries tags: out-of-band
metadata that travels with the payload without being part of it.
Payload access goes through dotted paths:

    box = Box({"a": {"b": {"c": 100}}})
    box.get("a.b.c")               → 100
    box.set("a.b.d", 10)

Two reserved tags change how paths are resolved:

    scope      a dotted prefix applied to every path
                   box.set_scope_tag("a.b"); box.get("c") → 100
    glossary   a key-renaming dict consulted per path prefix
                   Box({"a": 5}, {"glossary": {"x": "a"}}).get("x") → 5

The `notify` tag marks a box as a one-way notification rather than a
request.  Every box gets a `sequence` id at construction; derive()
builds a new box that keeps it, which is how a response stays
correlated with its request.
"""

import copy
import logging
import math
from enum import Enum
from typing import Any, Optional

from . import formats
from .constants import VALUE_KEY, Tags
from .differ import Change, ChangeKind, apply_change, diff
from .errors import InvalidPathError
from .ident import ShortIdGenerator
from .paths import PathLike, del_path, get_path, join_path, set_path, split_path

logger = logging.getLogger(__name__)

NAN = float("nan")


class ContentKind(Enum):
    """What was handed to the Box constructor."""
    BOX = "box"
    CONTAINER = "container"
    SCALAR = "scalar"


def classify(content: Any) -> ContentKind:
    if isinstance(content, Box):
        return ContentKind.BOX
    if isinstance(content, (dict, list, tuple)):
        return ContentKind.CONTAINER
    return ContentKind.SCALAR


def _as_payload(content: Any) -> Any:
    """Fresh payload for `content`: deep-copied container or wrapped scalar."""
    kind = classify(content)
    if kind == ContentKind.BOX:
        return copy.deepcopy(content.payload)
    if kind == ContentKind.CONTAINER:
        if isinstance(content, tuple):
            return copy.deepcopy(list(content))
        return copy.deepcopy(content)
    return {VALUE_KEY: content}


# ═══════════════════════════════════════════════════════════════════
#  PRESENCE CHECK
#  A value is present when it is truthy and does not loosely equal
#  false, with both tests following JavaScript coercion: containers are
#  always truthy, but a list compares through its ","-joined text and a
#  string through its numeric value.
# ═══════════════════════════════════════════════════════════════════

def _coerced_text(value: Any) -> str:
    """Text a list element turns into when the list is joined."""
    if value is None:
        return ""
    if type(value) is bool:
        return "true" if value else "false"
    if isinstance(value, list):
        return ",".join(_coerced_text(v) for v in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def _coerced_number(value: Any) -> float:
    """Numeric value used when `value` is compared with false."""
    if isinstance(value, list):
        value = _coerced_text(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if text.lower().startswith("0x"):
            try:
                return float(int(text[2:], 16))
            except ValueError:
                return NAN
        if "_" in text:
            return NAN
        try:
            return float(text)
        except ValueError:
            return NAN
    if isinstance(value, (int, float)):
        return float(value)
    return NAN


def _is_truthy(value: Any) -> bool:
    if isinstance(value, (dict, list)):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def is_present(value: Any) -> bool:
    """Boolean(value) && value != false"""
    if not _is_truthy(value):
        return False
    if value is None or isinstance(value, dict):
        return True
    return _coerced_number(value) != 0.0


class Box:
    """Tagged, path-addressable data container."""

    id_generator = ShortIdGenerator()

    def __init__(self, content: Any = None, tags: Optional[dict] = None):
        if classify(content) == ContentKind.BOX:
            # A copy: tags argument is not applied
            self._payload = copy.deepcopy(content._payload)
            self._tags = copy.deepcopy(content._tags)
            self._seq = content._seq
            self.last_error = copy.deepcopy(content.last_error)
            return

        self._seq = self.id_generator.next()
        self._payload = _as_payload(content)
        self._tags = copy.deepcopy(tags) if tags is not None else {}
        self.last_error = None

    # ───────────────────────────────────────────────────────────────
    #  Basic attributes
    # ───────────────────────────────────────────────────────────────

    @property
    def payload(self) -> Any:
        """The raw payload (not a copy)."""
        return self._payload

    @property
    def tags(self) -> dict:
        return self._tags

    @property
    def sequence(self) -> str:
        return self._seq

    def derive(self, content: Any = None, tags: Optional[dict] = None) -> "Box":
        """New Box built from `content`/`tags`, sharing this box's sequence."""
        box = Box(content, tags)
        box._seq = self._seq
        return box

    def __copy__(self) -> "Box":
        return Box(self)

    def __deepcopy__(self, memo) -> "Box":
        return Box(self)

    def __repr__(self) -> str:
        return f"Box(seq={self._seq!r}, payload={self._payload!r}, tags={self._tags!r})"

    def __str__(self) -> str:
        return self.to_string()

    # ───────────────────────────────────────────────────────────────
    #  Path resolution
    # ───────────────────────────────────────────────────────────────

    def _scoped(self, path: PathLike) -> list:
        segments = split_path(path)
        scope = self.get_scope_tag()
        if scope:
            segments = split_path(scope) + segments
        return segments

    def path_map(self, path: PathLike) -> str:
        """
        Translate `path` through the glossary tag.

        For every prefix of the path, the prefix joined with "." is looked
        up in the glossary; on a hit the last segment of that prefix is
        replaced with the glossary's value.  So {"x": "a"} renames a
        top-level "x", and {"a.y": "b"} renames "y" only below "a".
        """
        keys = split_path(path)
        glossary = self.get_glossary_tag()
        if not glossary:
            return join_path(keys)

        new_path = []
        for i, key in enumerate(keys):
            prefix = join_path(keys[:i + 1])
            if prefix in glossary:
                new_path.append(glossary[prefix])
            else:
                new_path.append(key)

        resolved = join_path(new_path)
        if self.get_tag(Tags.DEBUG_GLOSSARY):
            logger.debug("Path [%s] maps to [%s]", join_path(keys), resolved)
        return resolved

    def resolve_path(self, path: PathLike) -> str:
        """`path` with the scope prefixed and the glossary applied."""
        return self.path_map(self._scoped(path))

    # ───────────────────────────────────────────────────────────────
    #  Accessors
    # ───────────────────────────────────────────────────────────────

    def get(self, path: PathLike) -> Any:
        """Value at `path`, or None.  Raises InvalidPathError for no path."""
        if path is None or path == "":
            raise InvalidPathError("Could not access path [None | empty] in Box")
        return get_path(self._payload, self.resolve_path(path))

    def set(self, path: PathLike, value: Any) -> "Box":
        """Store `value` at `path`, creating intermediate containers."""
        set_path(self._payload, self.resolve_path(path), value)
        return self

    def has(self, path: PathLike) -> bool:
        """
        True if `path` holds a value that is neither falsy nor equal to
        false: 0, "", False, None, NaN, "0", " ", [], [0] and [""] all
        count as absent.  A dict counts as present even when empty.
        """
        return is_present(get_path(self._payload, self.resolve_path(path)))

    def delete(self, path: PathLike) -> "Box":
        """Remove the entry at `path`; no-op if it does not exist."""
        del_path(self._payload, self.resolve_path(path))
        return self

    # ───────────────────────────────────────────────────────────────
    #  Tags
    # ───────────────────────────────────────────────────────────────

    def add_tag(self, name: str, tag: Any) -> "Box":
        """
        Set tag `name`.

        A new glossary is layered on the current one: each of its values
        that is itself a key of the current glossary is first translated
        through it.  The caller's dict is left untouched.
        """
        if name == Tags.GLOSSARY:
            tag = self._layer_glossary(tag)
        self._tags[name] = tag
        return self

    def _layer_glossary(self, new: Any) -> Any:
        current = self.get_glossary_tag()
        if not current or not isinstance(new, dict):
            return new
        layered = {}
        for word, target in new.items():
            if isinstance(target, str) and target in current:
                target = current[target]
            layered[word] = target
        return layered

    def set_tag(self, name: str, tag: Any) -> "Box":
        return self.add_tag(name, tag)

    def has_tag(self, name: str) -> bool:
        return name in self._tags

    def get_tag(self, name: str) -> Any:
        return self._tags.get(name)

    def remove_tag(self, name: str) -> "Box":
        self._tags.pop(name, None)
        return self

    def get_id(self) -> str:
        """The `id` tag when set, otherwise the sequence."""
        return self.get_tag(Tags.ID) or self._seq

    def get_notify_tag(self) -> bool:
        """True for a notification, False for a request."""
        return bool(self.get_tag(Tags.NOTIFY))

    def set_notify_tag(self, notify: bool) -> "Box":
        if notify:
            return self.add_tag(Tags.NOTIFY, True)
        return self.remove_tag(Tags.NOTIFY)

    def get_scope_tag(self) -> Optional[str]:
        return self.get_tag(Tags.SCOPE)

    def set_scope_tag(self, scope: Optional[str]) -> "Box":
        return self.set_tag(Tags.SCOPE, scope)

    def get_glossary_tag(self) -> Optional[dict]:
        return self.get_tag(Tags.GLOSSARY)

    def set_glossary_tag(self, glossary: Optional[dict]) -> "Box":
        if not glossary:
            return self.remove_tag(Tags.GLOSSARY)
        return self.add_tag(Tags.GLOSSARY, glossary)

    # ───────────────────────────────────────────────────────────────
    #  Diff / merge
    # ───────────────────────────────────────────────────────────────

    def diff(self, other: Any) -> list[Change]:
        """Changes that turn this payload into `other` (a Box or a value)."""
        return diff(self._payload, _as_payload(other))

    def merge(self, other: Any) -> "Box":
        """
        Apply the diff against `other` to this payload, in place, leaving
        out deletions: keys missing from `other` survive.
        """
        changes = diff(self._payload, _as_payload(other))
        applied = 0
        for change in changes:
            if change.kind == ChangeKind.DELETED:
                continue
            apply_change(self._payload, change)
            applied += 1
        logger.debug("Merged into box %s: %d applied, %d deletions skipped",
                     self._seq, applied, len(changes) - applied)
        return self

    def union(self, other: Any) -> "Box":
        # TODO: decide whether union overwrites shared keys or keeps ours
        logger.warning("Box.union is not implemented; box %s left unchanged", self._seq)
        return self

    # ───────────────────────────────────────────────────────────────
    #  Printing
    # ───────────────────────────────────────────────────────────────

    def to_string(self, show_hidden: bool = False, show_tags: bool = False,
                  field_filter: formats.FieldFilter = None) -> str:
        return formats.render(self, show_hidden, show_tags, field_filter)

    def dump(self, show_hidden: bool = False, show_tags: bool = False, file=None) -> "Box":
        """
        Print the box.  The `debug:print:filter` tag, a ";"-separated list
        of top-level keys, restricts what is shown.
        """
        content = self._payload
        if not show_hidden:
            content = formats.strip_hidden(content)

        keys = formats.parse_filter(self.get_tag(Tags.DEBUG_PRINT_FILTER))
        if keys and isinstance(content, dict):
            content = {k: v for k, v in content.items() if k in keys}

        print(formats.CONTENT_HEADER, file=file)
        if keys:
            print("filter:", keys, file=file)
        print(formats.to_json(content), file=file)
        if show_tags:
            print(formats.TAGS_HEADER, file=file)
            print(formats.to_json(self._tags or {}), file=file)
        return self
