"""Template compiler — recognizer parse tree to a normalized Template.

Consecutive literal nodes are merged into one Literal and every
expression node becomes an Expression with a typed Operator. The
compiler trusts the tree shape produced by ``recognize`` and does no
lexing of its own.
"""

import logging

from wren.config import DEFAULT_CONFIG, TemplateConfig
from wren.errors import InvalidValue
from wren.template.grammar import ExpressionNode, LiteralNode, VarSpecNode, recognize
from wren.template.model import Expression, Literal, Operator, Segment, Template, VarSpec

logger = logging.getLogger("wren.template")

_OPERATORS_BY_SIGIL: dict[str, Operator] = {op.sigil: op for op in Operator}


def _operator(node: ExpressionNode, text: str) -> Operator:
    sigil = node.sigil or ""
    operator = _OPERATORS_BY_SIGIL.get(sigil)
    if operator is None:
        raise InvalidValue(
            text[node.offset :], detail=f"Operator {sigil!r} is reserved by RFC 6570"
        )
    return operator


def _varspec(node: VarSpecNode) -> VarSpec:
    return VarSpec(name=node.name, explode=node.explode, prefix=node.max_length)


def parse(text: str, config: TemplateConfig | None = None) -> Template:
    """Compile *text* into a Template.

    Raises ``InvalidValue`` when part of the text is not a valid
    template; its ``remaining`` attribute holds the text from the
    offending position onward::

        parse("/x/{not_closed")  -> InvalidValue(remaining="{not_closed")
        parse("{$var}")          -> InvalidValue(remaining="{$var}")
    """
    nodes, remaining = recognize(text)
    if remaining:
        raise InvalidValue(remaining)

    segments: list[Segment] = []
    pending: list[str] = []

    for node in nodes:
        match node:
            case LiteralNode(text=chunk):
                pending.append(chunk)
            case ExpressionNode(variables=variables):
                if pending:
                    segments.append(Literal("".join(pending)))
                    pending.clear()
                segments.append(
                    Expression(
                        operator=_operator(node, text),
                        variables=tuple(_varspec(v) for v in variables),
                    )
                )
    if pending:
        segments.append(Literal("".join(pending)))

    logger.debug("Compiled template %r into %d segment(s)", text, len(segments))
    return Template(source=text, segments=tuple(segments), config=config or DEFAULT_CONFIG)
