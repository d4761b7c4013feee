"""Query-string matching for ``{?...}`` and ``{&...}`` expressions.

Query parameters are matched by name, not position, in three phases:

1. Each non-exploded variable takes the first unclaimed pair with its
   name (``foo=1,2`` becomes a list).
2. Each exploded variable whose name occurs collects every unclaimed
   occurrence into a list (``foo=1&foo=2``).
3. The first exploded variable left without a value claims every
   remaining pair as an associative array.
"""

from dataclasses import dataclass

from wren.codec import decode
from wren.errors import ExtraValues, InvalidSyntax, OnlyKeyValuePairs
from wren.template.model import VarSpec
from wren.values import AssocList, ListValue, Scalar, Value, prune


@dataclass(slots=True)
class _Pair:
    """One ``name[=value]`` item of a query string. Mutable during matching only."""

    name: str
    raw_value: str | None
    position: int
    claimed: bool = False

    @property
    def text(self) -> str:
        return decode(self.raw_value or "")


def parse_pairs(chunk: str, offset: int = 0) -> list[_Pair]:
    """Split a query chunk (without its ``?``/``&`` lead) into pairs.

    Empty items are skipped, so a trailing ``&`` is harmless.
    Raises ``InvalidSyntax`` for ``a=b=c`` and ``OnlyKeyValuePairs``
    for a comma list where a name was expected (``?a,b``).
    """
    pairs: list[_Pair] = []
    position = offset
    for raw in chunk.split("&"):
        if raw:
            name, sep, value = raw.partition("=")
            if "=" in value:
                raise InvalidSyntax(raw, position)
            if not sep and "," in name:
                raise OnlyKeyValuePairs(raw, position)
            pairs.append(_Pair(decode(name), value if sep else None, position))
        position += len(raw) + 1
    return pairs


class _Bindings:
    """Values bound so far, with the expression that bound each name.

    Within one expression a later variable that found a value replaces
    an earlier one of the same name; across expressions the first value
    is kept.
    """

    __slots__ = ("owners", "values")

    def __init__(self) -> None:
        self.values: dict[str, Value | None] = {}
        self.owners: dict[str, int] = {}

    def bind(self, name: str, group: int, value: Value | None) -> None:
        if value is None:
            # A repeated name never loses its value to a later unmatched variable
            self.values.setdefault(name, None)
            return
        owner = self.owners.get(name)
        if owner is not None and owner != group:
            return
        self.values[name] = value
        self.owners[name] = group


def _single_value(pair: _Pair) -> Value | None:
    if not pair.raw_value:
        return None
    if "," in pair.raw_value:
        return ListValue(tuple(Scalar(decode(item)) for item in pair.raw_value.split(",")))
    return Scalar(pair.text)


def match_query(
    variables: tuple[VarSpec, ...],
    chunk: str,
    *,
    offset: int = 0,
    strict: bool = False,
    groups: tuple[int, ...] | None = None,
) -> dict[str, Value | None]:
    """Bind *variables* from a query *chunk* such as ``"a=1&b=2"``.

    Every variable appears in the returned dict. *groups* gives, per
    variable, the expression it was declared in when several query
    expressions are matched together (``{?a}{&a}``); the first
    expression to bind a name keeps it. Inside one expression a later
    variable that found a value replaces the earlier binding. With
    *strict*, pairs that no variable claimed raise ``ExtraValues``.
    """
    pairs = parse_pairs(chunk, offset)
    if groups is None:
        groups = (0,) * len(variables)
    bound = _Bindings()

    # Phase 1: non-exploded variables, first unclaimed occurrence wins
    for var, group in zip(variables, groups, strict=True):
        if var.explode:
            continue
        value = None
        for pair in pairs:
            if not pair.claimed and pair.name == var.name:
                pair.claimed = True
                value = _single_value(pair)
                break
        bound.bind(var.name, group, value)

    # Phase 2: exploded variables collect every occurrence of their name
    unmatched: list[tuple[VarSpec, int]] = []
    for var, group in zip(variables, groups, strict=True):
        if not var.explode:
            continue
        occurrences = [p for p in pairs if not p.claimed and p.name == var.name]
        if not occurrences:
            unmatched.append((var, group))
            continue
        for pair in occurrences:
            pair.claimed = True
        bound.bind(var.name, group, ListValue(tuple(Scalar(p.text) for p in occurrences)))

    # Phase 3: the first unmatched exploded variable takes the rest
    for index, (var, group) in enumerate(unmatched):
        rest = [p for p in pairs if not p.claimed] if index == 0 else []
        for pair in rest:
            pair.claimed = True
        rest_value = AssocList(tuple((p.name, Scalar(p.text)) for p in rest)) if rest else None
        bound.bind(var.name, group, rest_value)

    if strict:
        leftover = [p for p in pairs if not p.claimed]
        if leftover:
            raise ExtraValues(len(leftover), leftover[0].position)

    # Keep declaration order in the result
    return {var.name: prune(bound.values[var.name]) for var in variables}
