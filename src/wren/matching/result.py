"""Immutable match results.

Implements ``Mapping[str, PlainValue]``.
"""

from collections.abc import Iterator, Mapping

from wren.values import AssocList, ListValue, PlainValue, Value, to_python


class MatchResult(Mapping[str, PlainValue]):
    """Variable values recovered from a URL.

    Attributes:
        _values: Variable name -> tagged Value, or None when unmatched.

    ``__getitem__`` returns a fresh plain Python object on every call
    (``str``, ``list``, ``dict`` or ``None``), so callers can mutate
    what they get without affecting the result.
    ``get_value`` returns the underlying tagged Value.
    """

    _values: dict[str, Value | None]

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Value | None] | None = None) -> None:
        object.__setattr__(self, "_values", dict(values or {}))

    def __setattr__(self, name: str, value: object) -> None:
        msg = "MatchResult is immutable."
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> PlainValue:
        return to_python(self._values[key])

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"MatchResult({{{items}}})"

    def get_value(self, key: str) -> Value | None:
        """Return the tagged Value for *key* (``None`` if unmatched or missing)."""
        return self._values.get(key)

    def matched(self) -> dict[str, PlainValue]:
        """Return only the variables that received a value."""
        return {k: to_python(v) for k, v in self._values.items() if v is not None}

    def get_list(self, key: str) -> list[PlainValue]:
        """Return the value for *key* as a list.

        A single value becomes a one-item list, an unmatched variable an
        empty list, an associative array its list of keys.
        """
        value = self._values.get(key)
        match value:
            case None:
                return []
            case ListValue():
                return to_python(value)  # type: ignore[return-value]
            case AssocList():
                return list(value.keys())
        return [to_python(value)]
