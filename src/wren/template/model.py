"""Template, Literal, Expression, VarSpec, and Operator — the compiled model.

Everything here is frozen. A Template is built once by ``parse`` and
can be rendered or matched any number of times, from any thread.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeAlias

from wren.config import DEFAULT_CONFIG, TemplateConfig

if TYPE_CHECKING:
    from wren.matching.result import MatchResult


class Operator(Enum):
    """Expression operator, keyed by its sigil (``""`` for simple expansion)."""

    NONE = ""
    RESERVED = "+"
    FRAGMENT = "#"
    LABEL = "."
    PATH_SEGMENT = "/"
    PATH_PARAM = ";"
    QUERY = "?"
    QUERY_CONTINUATION = "&"

    @property
    def sigil(self) -> str:
        return self.value

    @property
    def is_query(self) -> bool:
        return self in (Operator.QUERY, Operator.QUERY_CONTINUATION)


# Operators the matcher knows how to reverse
MATCHABLE_OPERATORS = frozenset(
    {Operator.NONE, Operator.PATH_SEGMENT, Operator.QUERY, Operator.QUERY_CONTINUATION}
)


@dataclass(frozen=True, slots=True)
class VarSpec:
    """A variable inside an expression.

    ``{id}``     -> VarSpec("id")
    ``{list*}``  -> VarSpec("list", explode=True)
    ``{var:3}``  -> VarSpec("var", prefix=3)
    """

    name: str
    explode: bool = False
    prefix: int | None = None

    def __str__(self) -> str:
        if self.explode:
            return f"{self.name}*"
        if self.prefix is not None:
            return f"{self.name}:{self.prefix}"
        return self.name


@dataclass(frozen=True, slots=True)
class Literal:
    """Template text outside any expression, kept verbatim."""

    text: str


@dataclass(frozen=True, slots=True)
class Expression:
    """A ``{...}`` block: one operator applied to one or more variables."""

    operator: Operator
    variables: tuple[VarSpec, ...]

    def __str__(self) -> str:
        return "{" + self.operator.sigil + ",".join(str(v) for v in self.variables) + "}"


Segment: TypeAlias = Literal | Expression


@dataclass(frozen=True, slots=True)
class Template:
    """A compiled URI template. Immutable after creation.

    Usage::

        template = parse("/users{/id}{?fields*}")
        template.render(id=42, fields=["name", "email"])
        # "/users/42?fields=name&fields=email"
        template.match("/users/42?fields=name")
        # MatchResult({'id': '42', 'fields': ['name']})
    """

    source: str
    segments: tuple[Segment, ...]
    config: TemplateConfig = field(default=DEFAULT_CONFIG, compare=False)

    def __str__(self) -> str:
        return self.source

    @property
    def expressions(self) -> tuple[Expression, ...]:
        return tuple(seg for seg in self.segments if isinstance(seg, Expression))

    @property
    def variable_names(self) -> tuple[str, ...]:
        """Variable names in order of first appearance, without duplicates."""
        names: dict[str, None] = {}
        for expression in self.expressions:
            for var in expression.variables:
                names.setdefault(var.name, None)
        return tuple(names)

    @property
    def is_matchable(self) -> bool:
        """True when every expression uses an operator the matcher supports."""
        return all(expr.operator in MATCHABLE_OPERATORS for expr in self.expressions)

    def render(self, values: Mapping[Any, Any] | None = None, /, **kwargs: Any) -> str:
        """Expand the template. See ``wren.expander.render``."""
        from wren.expander import render

        return render(self, values, **kwargs)

    def match(self, url: str) -> MatchResult:
        """Recover variable values from *url*. See ``wren.matching.matcher.match``."""
        from wren.matching.matcher import match

        return match(self, url)
