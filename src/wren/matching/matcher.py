"""Reverse matching — Template x URL -> MatchResult.

Only the default (``{var}``), path-segment (``{/var}``) and query
(``{?var}``, ``{&var}``) operators can be reversed. Rendering is lossy,
so matching recovers *a* set of values that renders back to the URL,
not necessarily the values it was rendered from: a non-exploded map ``{"a": 1, "b": 2}``
renders as ``a,1,b,2`` and always comes back as a list.

Segments are matched left to right. Each expression first finds the
longest run of characters it could have produced. When a literal
follows, every position inside that run where the literal occurs is a
candidate end, tried from the right; the first one that lets the rest
of the template match wins::

    "{/path}/edit" against "/a/b/edit"
      run of {/path}:       "/a/b/edit"
      candidate ends:       before "/edit", before "/b/edit", ...
      first that matches:   {/path} = "/a/b" -> path = ["a", "b"]
"""

import logging
from dataclasses import dataclass

from wren.codec import UNRESERVED, decode
from wren.config import TemplateConfig
from wren.errors import (
    ExtraValues,
    InvalidSyntax,
    LiteralMismatch,
    MatchError,
    UnexpectedDict,
    UnsupportedOperator,
)
from wren.matching.query import match_query
from wren.matching.result import MatchResult
from wren.template.model import (
    MATCHABLE_OPERATORS,
    Expression,
    Literal,
    Operator,
    Segment,
    Template,
)
from wren.values import AssocList, ListValue, Scalar, Value, prune

logger = logging.getLogger("wren.matcher")

# Characters each operator can emit after its lead character
_VALUE_CHARS = UNRESERVED | {"%", ",", "="}
_RUN_CHARS: dict[Operator, frozenset[str]] = {
    Operator.NONE: _VALUE_CHARS,
    Operator.PATH_SEGMENT: _VALUE_CHARS | {"/"},
    Operator.QUERY: _VALUE_CHARS | {"&"},
    Operator.QUERY_CONTINUATION: _VALUE_CHARS | {"&"},
}

# Lead characters; an expression whose lead is missing rendered nothing
_LEADS: dict[Operator, str] = {
    Operator.PATH_SEGMENT: "/",
    Operator.QUERY: "?&",
    Operator.QUERY_CONTINUATION: "?&",
}


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ScalarToken:
    text: str
    position: int


@dataclass(frozen=True, slots=True)
class ListToken:
    """A comma list inside one path segment: ``/a,b,c``."""

    items: tuple[str, ...]
    position: int


@dataclass(frozen=True, slots=True)
class PairToken:
    key: str
    value: Value
    position: int


Token = ScalarToken | ListToken | PairToken


def _token(raw: str, position: int, *, lists: bool) -> Token:
    if "=" in raw:
        key, _, value = raw.partition("=")
        if "=" in value:
            raise InvalidSyntax(raw, position)
        member: Value
        if lists and "," in value:
            member = ListValue(tuple(Scalar(decode(item)) for item in value.split(",")))
        else:
            member = Scalar(decode(value))
        return PairToken(decode(key), member, position)
    if lists and "," in raw:
        return ListToken(tuple(decode(item) for item in raw.split(",")), position)
    return ScalarToken(decode(raw), position)


def tokenize(operator: Operator, chunk: str, offset: int = 0) -> list[Token]:
    """Split the run consumed by a default or path-segment expression.

    Default expressions are comma-delimited. Path-segment expressions
    are ``/``-delimited after the leading ``/``, and a segment holding
    commas becomes a ListToken. Any item with a raw ``=`` is a pair.
    """
    if not chunk:
        return []
    if operator is Operator.PATH_SEGMENT:
        separator, lists = "/", True
        chunk, offset = chunk[1:], offset + 1
    else:
        separator, lists = ",", False

    tokens: list[Token] = []
    position = offset
    for raw in chunk.split(separator):
        tokens.append(_token(raw, position, lists=lists))
        position += len(raw) + 1
    return tokens


# ---------------------------------------------------------------------------
# Positional allocation (default and path-segment operators)
# ---------------------------------------------------------------------------


def _take_run(tokens: list[Token], start: int, kind: type) -> int:
    end = start
    while end < len(tokens) and isinstance(tokens[end], kind):
        end += 1
    return end


def _absorb(name: str, tokens: list[Token]) -> ListValue:
    """Collect every remaining token into one list for the last variable."""
    items: list[Value] = []
    for token in tokens:
        match token:
            case ScalarToken(text=text):
                items.append(Scalar(text))
            case ListToken(items=texts):
                items.extend(Scalar(text) for text in texts)
            case PairToken(position=position):
                raise UnexpectedDict(name, position)
    return ListValue(tuple(items))


def allocate(
    expression: Expression, tokens: list[Token], *, strict_pairs: bool
) -> dict[str, Value | None]:
    """Bind the variables of *expression* to *tokens*, left to right.

    *strict_pairs* makes a non-exploded variable facing a pair raise
    ``UnexpectedDict`` (comma-delimited expressions) instead of
    binding ``None`` and leaving the pair (path segments). Either way a
    pair is left for a later exploded variable when there is one.
    """
    variables = expression.variables
    bound: dict[str, Value | None] = {}
    i = 0

    for index, var in enumerate(variables):
        value: Value | None = None
        if i < len(tokens):
            token = tokens[i]
            if var.explode:
                match token:
                    case PairToken():
                        end = _take_run(tokens, i, PairToken)
                        value = AssocList(tuple((t.key, t.value) for t in tokens[i:end]))  # type: ignore[union-attr]
                        i = end
                    case ListToken(items=texts):
                        value = ListValue(tuple(Scalar(text) for text in texts))
                        i += 1
                    case ScalarToken():
                        end = _take_run(tokens, i, ScalarToken)
                        value = ListValue(tuple(Scalar(t.text) for t in tokens[i:end]))  # type: ignore[union-attr]
                        i = end
            elif isinstance(token, PairToken):
                later_explode = any(v.explode for v in variables[index + 1 :])
                if strict_pairs and not later_explode:
                    raise UnexpectedDict(var.name, token.position)
            elif index == len(variables) - 1 and len(tokens) - i > 1:
                value = _absorb(var.name, tokens[i:])
                i = len(tokens)
            else:
                match token:
                    case ListToken(items=texts):
                        value = ListValue(tuple(Scalar(text) for text in texts))
                    case ScalarToken(text=text) if text:
                        value = Scalar(text)
                i += 1
        bound.setdefault(var.name, prune(value))

    if i < len(tokens):
        raise ExtraValues(len(tokens) - i, tokens[i].position)
    return bound


# ---------------------------------------------------------------------------
# Segment walk
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _QueryRun(Expression):
    """Adjacent query expressions matched as one.

    ``groups`` holds, per variable, the index of the expression that
    declared it.
    """

    groups: tuple[int, ...] = ()


def _merge_query_runs(segments: tuple[Segment, ...]) -> tuple[Segment, ...]:
    """Fold ``{&...}`` expressions into a directly preceding query expression.

    ``{?a}{&b}`` renders ``?a=1&b=2``; the pairs can only be told apart
    by name, so both expressions are matched as one.
    """
    merged: list[Segment] = []
    for segment in segments:
        previous = merged[-1] if merged else None
        if (
            isinstance(segment, Expression)
            and segment.operator is Operator.QUERY_CONTINUATION
            and isinstance(previous, Expression)
            and previous.operator.is_query
        ):
            if isinstance(previous, _QueryRun):
                groups = previous.groups
            else:
                groups = (0,) * len(previous.variables)
            group = groups[-1] + 1
            merged[-1] = _QueryRun(
                previous.operator,
                previous.variables + segment.variables,
                groups + (group,) * len(segment.variables),
            )
        else:
            merged.append(segment)
    return tuple(merged)


def _run_end(operator: Operator, url: str, pos: int) -> int:
    lead = _LEADS.get(operator)
    if lead is not None:
        if pos >= len(url) or url[pos] not in lead:
            return pos
        end = pos + 1
    else:
        end = pos
    allowed = _RUN_CHARS[operator]
    while end < len(url) and url[end] in allowed:
        end += 1
    return end


def _candidate_ends(
    segments: tuple[Segment, ...], index: int, url: str, pos: int, run_end: int
) -> list[int]:
    following = segments[index + 1] if index + 1 < len(segments) else None
    if isinstance(following, Literal):
        ends = [end for end in range(run_end, pos - 1, -1) if url.startswith(following.text, end)]
        if ends:
            return ends
    return [run_end]


def _bind_expression(
    expression: Expression, url: str, start: int, end: int, config: TemplateConfig
) -> dict[str, Value | None]:
    chunk = url[start:end]
    if expression.operator.is_query:
        if not chunk:
            return {var.name: None for var in expression.variables}
        groups = expression.groups if isinstance(expression, _QueryRun) else None
        return match_query(
            expression.variables,
            chunk[1:],
            offset=start + 1,
            strict=config.strict_query,
            groups=groups,
        )
    tokens = tokenize(expression.operator, chunk, start)
    return allocate(expression, tokens, strict_pairs=expression.operator is Operator.NONE)


_Memo = dict[tuple[int, int], dict[str, Value | None] | MatchError]


def _match_segments(
    segments: tuple[Segment, ...],
    index: int,
    url: str,
    pos: int,
    config: TemplateConfig,
    memo: _Memo,
) -> dict[str, Value | None]:
    """Match ``segments[index:]`` against ``url[pos:]``.

    The outcome depends only on ``(index, pos)``, so each pair is
    solved once per URL and replayed from *memo* on later visits.
    """
    key = (index, pos)
    if key not in memo:
        try:
            memo[key] = _solve_segment(segments, index, url, pos, config, memo)
        except MatchError as exc:
            memo[key] = exc
    outcome = memo[key]
    if isinstance(outcome, MatchError):
        raise outcome.with_traceback(None)
    return dict(outcome)


def _solve_segment(
    segments: tuple[Segment, ...],
    index: int,
    url: str,
    pos: int,
    config: TemplateConfig,
    memo: _Memo,
) -> dict[str, Value | None]:
    if index == len(segments):
        if pos < len(url):
            raise LiteralMismatch("", url[pos:], pos)
        return {}

    segment = segments[index]
    match segment:
        case Literal(text=text):
            if not url.startswith(text, pos):
                raise LiteralMismatch(text, url[pos : pos + len(text)], pos)
            return _match_segments(segments, index + 1, url, pos + len(text), config, memo)
        case Expression():
            run_end = _run_end(segment.operator, url, pos)
            first_error: MatchError | None = None
            for end in _candidate_ends(segments, index, url, pos, run_end):
                try:
                    bound = _bind_expression(segment, url, pos, end, config)
                    rest = _match_segments(segments, index + 1, url, end, config, memo)
                except MatchError as exc:
                    logger.debug("%s rejected %r: %s", segment, url[pos:end], exc)
                    if first_error is None:
                        first_error = exc
                    continue
                # First expression to bind a name keeps it
                for name, value in rest.items():
                    if bound.get(name) is None:
                        bound[name] = value
                return bound
            if first_error is None:
                raise LiteralMismatch("", url[pos:], pos)
            raise first_error
    return {}


def require_matchable(template: Template) -> None:
    """Raise ``UnsupportedOperator`` unless every operator of *template* can be matched."""
    if template.is_matchable:
        return
    for expression in template.expressions:
        if expression.operator not in MATCHABLE_OPERATORS:
            raise UnsupportedOperator(expression.operator.sigil, template.source)


def match(template: Template, url: str) -> MatchResult:
    """Recover variable values from *url*.

    Every variable of the template appears in the result; variables
    the URL gives no value for are ``None``.

    Raises ``UnsupportedOperator`` if the template uses an operator
    other than default, ``/``, ``?`` or ``&``.
    Raises a ``MatchError`` subclass if *url* does not fit the template:
    ``LiteralMismatch``, ``UnexpectedDict``, ``ExtraValues``,
    ``InvalidSyntax`` or ``OnlyKeyValuePairs``.
    """
    require_matchable(template)
    segments = _merge_query_runs(template.segments)
    return MatchResult(_match_segments(segments, 0, url, 0, template.config, {}))
