"""Wren exception hierarchy.

Shared across the compiler, matcher, and router so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when a template or router is used in a way it cannot support.

    These are programmer errors, not properties of the input being matched.
    """


class UnsupportedOperator(ConfigurationError):  # noqa: N818 — mirrors the RFC vocabulary
    """The template uses an operator the matcher cannot reverse.

    Only the default, path-segment (``/``) and query (``?``, ``&``)
    operators can be matched.
    """

    def __init__(self, operator: str, source: str) -> None:
        self.operator = operator
        self.source = source
        super().__init__(
            f"Operator {operator!r} in template {source!r} cannot be matched. "
            "Only {var}, {/var}, {?var} and {&var} expressions are supported."
        )


@dataclass(frozen=True, slots=True)
class ParseError(WrenError):
    """A template string could not be compiled.

    ``remaining`` holds the unparsed part of the template, starting
    where the problem was found.
    """

    remaining: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.detail}: {self.remaining!r}"
        return repr(self.remaining)


class InvalidValue(ParseError):  # noqa: N818 — mirrors the RFC vocabulary
    """Malformed expression, illegal literal character, or unknown operator."""

    def __init__(self, remaining: str, detail: str = "") -> None:
        super().__init__(remaining=remaining, detail=detail or "Invalid template")


@dataclass(frozen=True, slots=True)
class MatchError(WrenError):
    """A URL does not fit a template.

    Raised by the matcher and caught by callers probing several
    templates against the same URL. ``position`` is the offset in the
    URL where matching gave up, when known.
    """

    detail: str
    position: int | None = None

    def __str__(self) -> str:
        if self.position is None:
            return self.detail
        return f"{self.detail} (at offset {self.position})"


class UnexpectedDict(MatchError):  # noqa: N818 — mirrors the RFC vocabulary
    """A ``key=value`` item was found where a non-exploded variable expected a plain value."""

    def __init__(self, name: str, position: int | None = None) -> None:
        super().__init__(
            detail=f"unexpected dict value for non-exploded variable {name!r}",
            position=position,
        )


class ExtraValues(MatchError):  # noqa: N818 — mirrors the RFC vocabulary
    """Values were left over after every variable of an expression was bound."""

    def __init__(self, count: int, position: int | None = None) -> None:
        noun = "value" if count == 1 else "values"
        super().__init__(detail=f"extra values: {count} {noun} not bound", position=position)


class InvalidSyntax(MatchError):  # noqa: N818 — mirrors the RFC vocabulary
    """A parameter has more than one ``=`` separator (``a=b=c``)."""

    def __init__(self, raw: str, position: int | None = None) -> None:
        super().__init__(detail=f"invalid parameter syntax {raw!r}", position=position)


class OnlyKeyValuePairs(MatchError):  # noqa: N818 — mirrors the RFC vocabulary
    """A query string item is a comma list where a ``name=value`` pair was expected."""

    def __init__(self, raw: str, position: int | None = None) -> None:
        super().__init__(
            detail=f"only key/values are accepted in query strings, got {raw!r}",
            position=position,
        )


class LiteralMismatch(MatchError):  # noqa: N818 — mirrors the RFC vocabulary
    """Literal template text does not appear at the expected URL position."""

    def __init__(self, expected: str, found: str, position: int | None = None) -> None:
        if expected:
            detail = f"expected {expected!r}, found {found!r}"
        else:
            detail = f"unexpected trailing input {found!r}"
        super().__init__(detail=detail, position=position)


class NoMatch(MatchError):  # noqa: N818 — conventional name, like NotFound
    """No template registered in a router matches the URL.

    ``attempts`` pairs each tried template source with the error it raised.
    """

    def __init__(self, url: str, attempts: tuple[tuple[str, MatchError], ...] = ()) -> None:
        super().__init__(detail=f"no template matches {url!r}")
        object.__setattr__(self, "_attempts", attempts)

    @property
    def attempts(self) -> tuple[tuple[str, MatchError], ...]:
        return self._attempts
