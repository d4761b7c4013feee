"""Per-operator expansion behavior.

One static table keyed by Operator: escaping policy, separator between
rendered units, prefix emitted before a non-empty expression, and how
names and composite values are written.
"""

from dataclasses import dataclass
from enum import Enum

from wren.codec import Escaping
from wren.template.model import Operator


class DictPolicy(Enum):
    """How an operator writes variable names and associative arrays.

    DICTS:    values only — ``{x}`` -> ``1024``, ``{keys}`` -> ``a,1,b,2``
    ALWAYS:   ``name=value``, keeping ``=`` when empty — ``{?x}`` -> ``?x=``
    NONEMPTY: ``name=value``, bare ``name`` when empty — ``{;x}`` -> ``;x``
    """

    DICTS = "dicts"
    ALWAYS = "always"
    NONEMPTY = "nonempty"


@dataclass(frozen=True, slots=True)
class OperatorBehavior:
    escaping: Escaping
    separator: str
    prefix: str
    dict_policy: DictPolicy

    @property
    def named(self) -> bool:
        """True when units are written as ``name=value``."""
        return self.dict_policy is not DictPolicy.DICTS


BEHAVIORS: dict[Operator, OperatorBehavior] = {
    Operator.NONE: OperatorBehavior(Escaping.UNRESERVED, ",", "", DictPolicy.DICTS),
    Operator.RESERVED: OperatorBehavior(Escaping.RESERVED, ",", "", DictPolicy.DICTS),
    Operator.FRAGMENT: OperatorBehavior(Escaping.RESERVED, ",", "#", DictPolicy.DICTS),
    Operator.LABEL: OperatorBehavior(Escaping.UNRESERVED, ".", ".", DictPolicy.DICTS),
    Operator.PATH_SEGMENT: OperatorBehavior(Escaping.UNRESERVED, "/", "/", DictPolicy.DICTS),
    Operator.PATH_PARAM: OperatorBehavior(Escaping.UNRESERVED, ";", ";", DictPolicy.NONEMPTY),
    Operator.QUERY: OperatorBehavior(Escaping.UNRESERVED, "&", "?", DictPolicy.ALWAYS),
    Operator.QUERY_CONTINUATION: OperatorBehavior(Escaping.UNRESERVED, "&", "&", DictPolicy.ALWAYS),
}


def behavior_for(operator: Operator) -> OperatorBehavior:
    """Look up the behavior of *operator*.

    Raises ``KeyError`` if *operator* has no registered behavior.
    """
    return BEHAVIORS[operator]
