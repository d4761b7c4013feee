"""RFC 6570 grammar recognizer — template text to a typed parse tree.

``recognize`` scans as far as the text is a valid template and returns
the nodes it found plus whatever it could not parse. It never raises;
deciding what an unparsed suffix means is the compiler's job.

Tree shape::

    "/users{/id}{?q,page:3}"
      -> LiteralNode(ASCII, "/users")
         ExpressionNode("/", (VarSpecNode("id"),), offset=6)
         ExpressionNode("?", (VarSpecNode("q"), VarSpecNode("page", max_length=3)), offset=11)
"""

import re
from dataclasses import dataclass
from enum import Enum

from wren.errors import InvalidValue


class LiteralKind(Enum):
    """Which literal production a run of characters came from."""

    ASCII = "ascii"
    PCT_ENCODED = "pct-encoded"
    UCSCHAR = "ucschar"
    IPRIVATE = "iprivate"


@dataclass(frozen=True, slots=True)
class LiteralNode:
    kind: LiteralKind
    text: str


@dataclass(frozen=True, slots=True)
class VarSpecNode:
    name: str
    explode: bool = False
    max_length: int | None = None


@dataclass(frozen=True, slots=True)
class ExpressionNode:
    """A ``{...}`` block. ``sigil`` is ``None`` for simple expansion."""

    sigil: str | None
    variables: tuple[VarSpecNode, ...]
    offset: int


Node = LiteralNode | ExpressionNode

# Operators of levels 2-3 plus the ones RFC 6570 reserves for future use
OPERATOR_SIGILS = "+#./;?&"
RESERVED_SIGILS = "=,!@|"

# Codepoint ranges of RFC 6570's ucschar and iprivate productions
_UCSCHAR_RANGES = (
    (0xA0, 0xD7FF),
    (0xF900, 0xFDCF),
    (0xFDF0, 0xFFEF),
    *(((plane << 16), (plane << 16) | 0xFFFD) for plane in range(0x1, 0xE)),
    (0xE1000, 0xEFFFD),
)
_IPRIVATE_RANGES = ((0xE000, 0xF8FF), (0xF0000, 0xFFFFD), (0x100000, 0x10FFFD))


def _char_class(ranges: tuple[tuple[int, int], ...]) -> str:
    return "[" + "".join(f"{chr(low)}-{chr(high)}" for low, high in ranges) + "]+"


_LITERAL_RUNS: tuple[tuple[LiteralKind, re.Pattern[str]], ...] = (
    (LiteralKind.ASCII, re.compile(r"[\x21\x23\x24\x26\x28-\x3b\x3d\x3f-\x5b\x5d\x5f\x61-\x7a\x7e]+")),
    (LiteralKind.PCT_ENCODED, re.compile(r"(?:%[0-9A-Fa-f]{2})+")),
    (LiteralKind.UCSCHAR, re.compile(_char_class(_UCSCHAR_RANGES))),
    (LiteralKind.IPRIVATE, re.compile(_char_class(_IPRIVATE_RANGES))),
)

_VARCHAR = r"(?:[A-Za-z0-9_]|%[0-9A-Fa-f]{2})"
_VARNAME = rf"{_VARCHAR}(?:\.?{_VARCHAR})*"
_MODIFIER = r"(?:\*|:[1-9][0-9]{0,3})"

_EXPRESSION = re.compile(
    r"\{(?P<sigil>[" + re.escape(OPERATOR_SIGILS + RESERVED_SIGILS) + r"])?"
    rf"(?P<variables>{_VARNAME}{_MODIFIER}?(?:,{_VARNAME}{_MODIFIER}?)*)"
    r"\}"
)
_VARSPEC = re.compile(
    rf"(?P<name>{_VARNAME})(?:(?P<explode>\*)|:(?P<max_length>[1-9][0-9]{{0,3}}))?"
)


def _parse_varspec(text: str) -> VarSpecNode:
    m = _VARSPEC.fullmatch(text)
    if m is None:
        raise InvalidValue(text, "Invalid variable")
    max_length = m.group("max_length")
    return VarSpecNode(
        name=m.group("name"),
        explode=m.group("explode") is not None,
        max_length=int(max_length) if max_length else None,
    )


def recognize(text: str) -> tuple[list[Node], str]:
    """Split *text* into literal and expression nodes.

    Returns ``(nodes, remaining)``; *remaining* is empty when the whole
    text is a valid template, otherwise it starts at the first
    character that could not be parsed.
    """
    nodes: list[Node] = []
    pos = 0
    end = len(text)

    while pos < end:
        if text[pos] == "{":
            m = _EXPRESSION.match(text, pos)
            if m is None:
                break
            nodes.append(
                ExpressionNode(
                    sigil=m.group("sigil"),
                    variables=tuple(_parse_varspec(v) for v in m.group("variables").split(",")),
                    offset=pos,
                )
            )
            pos = m.end()
            continue

        for kind, pattern in _LITERAL_RUNS:
            m = pattern.match(text, pos)
            if m is not None:
                nodes.append(LiteralNode(kind=kind, text=m.group()))
                pos = m.end()
                break
        else:
            break

    return nodes, text[pos:]
