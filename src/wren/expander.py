"""Template expansion — Template x values -> URI string.

Rendering is total: undefined variables contribute nothing and any
object coerces to a string, so ``render`` never raises for bad values.

Pipeline per expression::

    "{?x,list*}" with x=1024, list=["a", "b"]

    1. Coerce and prune each variable (undefined -> skipped)
    2. Render each variable into zero or more units
         x     -> ["x=1024"]
         list* -> ["list=a", "list=b"]
    3. Join units with the operator separator ("&")
    4. Prepend the operator prefix ("?") if any unit was produced
       -> "?x=1024&list=a&list=b"
"""

from collections.abc import Mapping
from typing import Any

from wren.codec import encode
from wren.template.model import Expression, Literal, Template, VarSpec
from wren.template.operators import DictPolicy, OperatorBehavior, behavior_for
from wren.values import AssocList, ListValue, Scalar, Value, coerce, prune, to_text


def _environment(values: Mapping[Any, Any] | None, kwargs: dict[str, Any]) -> dict[str, Any]:
    """Merge *values* and *kwargs*, normalizing keys to strings."""
    env: dict[str, Any] = {}
    if values is not None:
        for key, value in values.items():
            env[to_text(key)] = value
    env.update(kwargs)
    return env


def _encode(value: Value, behavior: OperatorBehavior) -> str:
    """Encode one member; nested composites join their encoded leaves with raw commas."""
    match value:
        case ListValue(items=items):
            return ",".join(_encode(item, behavior) for item in items)
        case AssocList(pairs=pairs):
            return ",".join(
                f"{encode(key, behavior.escaping)},{_encode(member, behavior)}"
                for key, member in pairs
            )
    return encode(str(value), behavior.escaping)


def _named(name: str, encoded: str, behavior: OperatorBehavior) -> str:
    if behavior.dict_policy is DictPolicy.NONEMPTY and not encoded:
        return name
    return f"{name}={encoded}"


def _render_scalar(var: VarSpec, value: Scalar, behavior: OperatorBehavior) -> list[str]:
    text = str(value)
    if var.prefix is not None:
        text = text[: var.prefix]
    encoded = encode(text, behavior.escaping)
    if behavior.named:
        return [_named(var.name, encoded, behavior)]
    return [encoded]


def _render_list(var: VarSpec, value: ListValue, behavior: OperatorBehavior) -> list[str]:
    encoded = [_encode(item, behavior) for item in value.items]
    if var.explode:
        if behavior.named:
            return [_named(var.name, item, behavior) for item in encoded]
        return encoded
    joined = ",".join(encoded)
    if behavior.named:
        return [_named(var.name, joined, behavior)]
    return [joined]


def _render_assoc(var: VarSpec, value: AssocList, behavior: OperatorBehavior) -> list[str]:
    pairs = [
        (encode(key, behavior.escaping), _encode(member, behavior)) for key, member in value.pairs
    ]
    if var.explode:
        # Exploded maps always write key=value, even for DICTS operators
        return [_named(key, member, behavior) for key, member in pairs]
    joined = ",".join(f"{key},{member}" for key, member in pairs)
    if behavior.named:
        return [_named(var.name, joined, behavior)]
    return [joined]


def render_variable(var: VarSpec, value: Value, behavior: OperatorBehavior) -> list[str]:
    """Render one defined (pruned) value into its units."""
    match value:
        case Scalar():
            return _render_scalar(var, value, behavior)
        case ListValue():
            return _render_list(var, value, behavior)
        case AssocList():
            return _render_assoc(var, value, behavior)
    return []


def render_expression(
    expression: Expression, env: Mapping[str, Any], *, keyword_lists: bool = True
) -> str:
    """Render one expression; empty string when every variable is undefined."""
    behavior = behavior_for(expression.operator)
    units: list[str] = []
    for var in expression.variables:
        value = prune(coerce(env.get(var.name), keyword_lists=keyword_lists))
        if value is None:
            continue
        units.extend(render_variable(var, value, behavior))
    if not units:
        return ""
    return behavior.prefix + behavior.separator.join(units)


def render(template: Template, values: Mapping[Any, Any] | None = None, /, **kwargs: Any) -> str:
    """Expand *template* with *values* and keyword arguments.

    Keys may be of any type; they are normalized with ``to_text`` so
    enum members and other objects work as names. Keyword arguments
    win over entries in *values*.
    """
    env = _environment(values, kwargs)
    keyword_lists = template.config.keyword_lists
    parts: list[str] = []
    for segment in template.segments:
        match segment:
            case Literal(text=text):
                parts.append(text)
            case Expression():
                parts.append(render_expression(segment, env, keyword_lists=keyword_lists))
    return "".join(parts)
