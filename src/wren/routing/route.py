"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass
from typing import Any

from wren.matching.result import MatchResult
from wren.template.model import Template


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``target`` is whatever the caller wants back on a match (a handler,
    a view name, ...). ``name`` makes the route available to
    ``Router.url_for``.
    """

    template: Template
    target: Any = None
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: MatchResult
