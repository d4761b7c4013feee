"""Template variable values — a closed Scalar / ListValue / AssocList union.

Callers hand the expander plain Python objects; ``coerce`` turns them
into one of the three tagged types. Scalars keep the caller's object
and are converted to their canonical string only when rendered.

``is_undefined`` and ``prune`` implement RFC 6570 section 2.3 and are
the single definition of "undefined" used by both expansion and
matching.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class Scalar:
    """A single value: a string, number, boolean, enum member, ..."""

    value: object

    def __str__(self) -> str:
        return to_text(self.value)


@dataclass(frozen=True, slots=True)
class ListValue:
    """An ordered list of values."""

    items: tuple["Value", ...] = ()


@dataclass(frozen=True, slots=True)
class AssocList:
    """An ordered list of (key, value) pairs — RFC 6570's associative array."""

    pairs: tuple[tuple[str, "Value"], ...] = ()

    def keys(self) -> list[str]:
        return [key for key, _ in self.pairs]


Value: TypeAlias = Scalar | ListValue | AssocList

# What to_python() hands back to callers
PlainValue: TypeAlias = str | list["PlainValue"] | dict[str, "PlainValue"] | None


def to_text(obj: object) -> str:
    """Canonical string form of a scalar.

    ``True``/``False`` render as ``true``/``false``, enum members as
    their value, bytes as UTF-8 text, ``None`` as the empty string.
    """
    if isinstance(obj, str):
        return obj
    if obj is None:
        return ""
    if isinstance(obj, bool):
        return "true" if obj else "false"
    if isinstance(obj, Enum):
        return to_text(obj.value)
    if isinstance(obj, bytes | bytearray):
        return bytes(obj).decode("utf-8", errors="replace")
    return str(obj)


def _is_pair(item: object) -> bool:
    return isinstance(item, tuple) and len(item) == 2


def coerce(obj: object, *, keyword_lists: bool = True) -> Value | None:
    """Convert a caller-supplied object into a tagged Value.

    ``None`` stays ``None`` (absent). Mappings become AssocLists,
    strings and bytes become Scalars, other iterables become
    ListValues. With *keyword_lists*, a non-empty sequence made only
    of 2-tuples becomes an AssocList. Anything else is a Scalar.
    """
    if obj is None:
        return None
    if isinstance(obj, Scalar | ListValue | AssocList):
        return obj
    if isinstance(obj, str | bytes | bytearray):
        return Scalar(obj)
    if isinstance(obj, Mapping):
        return AssocList(
            tuple(
                (to_text(key), _coerce_member(value, keyword_lists))
                for key, value in obj.items()
            )
        )
    if isinstance(obj, Iterable):
        items = list(obj)
        if keyword_lists and items and all(_is_pair(item) for item in items):
            return AssocList(
                tuple((to_text(key), _coerce_member(value, keyword_lists)) for key, value in items)
            )
        return ListValue(tuple(_coerce_member(item, keyword_lists) for item in items))
    return Scalar(obj)


def _coerce_member(obj: object, keyword_lists: bool) -> Value:
    # Members keep their slot even when None so pruning sees them
    value = coerce(obj, keyword_lists=keyword_lists)
    return Scalar(None) if value is None else value


def is_undefined(value: Value | None) -> bool:
    """RFC 6570 section 2.3: is *value* undefined?

    ``None``, a Scalar holding ``None``, a list whose every item is
    undefined (including the empty list), and an associative array
    whose every member value is undefined (including the empty one).
    The empty string is defined.
    """
    match value:
        case None:
            return True
        case Scalar(value=inner):
            return inner is None
        case ListValue(items=items):
            return all(is_undefined(item) for item in items)
        case AssocList(pairs=pairs):
            return all(is_undefined(member) for _, member in pairs)
    return True


def prune(value: Value | None) -> Value | None:
    """Drop undefined members from *value*; return ``None`` if it is undefined."""
    if is_undefined(value):
        return None
    match value:
        case ListValue(items=items):
            return ListValue(tuple(item for item in items if not is_undefined(item)))
        case AssocList(pairs=pairs):
            return AssocList(tuple(pair for pair in pairs if not is_undefined(pair[1])))
    return value


def to_python(value: Value | None) -> PlainValue:
    """Convert a Value back into plain ``str`` / ``list`` / ``dict`` / ``None``."""
    match value:
        case None:
            return None
        case Scalar():
            return str(value)
        case ListValue(items=items):
            return [to_python(item) for item in items]
        case AssocList(pairs=pairs):
            return {key: to_python(member) for key, member in pairs}
    return None
