"""Ordered router over compiled URI templates.

Routes are registered during setup and frozen with ``compile()``.
Matching tries each template in registration order; the first one
that matches wins.
"""

import logging
from collections.abc import Mapping
from typing import Any

from wren.config import DEFAULT_CONFIG, TemplateConfig
from wren.errors import ConfigurationError, MatchError, NoMatch
from wren.matching.matcher import require_matchable
from wren.routing.route import Route, RouteMatch
from wren.template.compiler import parse

logger = logging.getLogger("wren.routing")


class Router:
    """Template router with named reverse rendering.

    Usage::

        router = Router()
        router.add_template("/users{/id}", target=show_user, name="user")
        router.add_template("/search{?q,page}", target=search)
        router.compile()
        match = router.match("/users/42")
        match.params["id"]                 # "42"
        router.url_for("user", id=7)       # "/users/7"
    """

    __slots__ = ("_compiled", "_config", "_names", "_routes")

    def __init__(self, config: TemplateConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG
        self._routes: list[Route] = []
        self._names: dict[str, Route] = {}
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        template = route.template
        require_matchable(template)

        if route.name is not None:
            if route.name in self._names:
                existing = self._names[route.name].template.source
                msg = (
                    f"Route name {route.name!r} is already used by {existing!r}; "
                    f"cannot register it again for {template.source!r}."
                )
                raise ConfigurationError(msg)
            self._names[route.name] = route

        self._routes.append(route)
        logger.debug("Registered route %r (name=%r)", template.source, route.name)

    def add_template(self, text: str, target: Any = None, name: str | None = None) -> Route:
        """Parse *text* with the router's config and register it."""
        route = Route(template=parse(text, self._config), target=target, name=name)
        self.add(route)
        return route

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes, in registration order."""
        return list(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, url: str) -> RouteMatch:
        """Match *url* against the routes in registration order.

        Returns a ``RouteMatch`` for the first route that matches.
        Raises ``NoMatch`` if none does; its ``attempts`` hold each
        route's template source with the error it raised.
        """
        attempts: list[tuple[str, MatchError]] = []
        for route in self._routes:
            try:
                params = route.template.match(url)
            except MatchError as exc:
                logger.debug("Route %r rejected %r: %s", route.template.source, url, exc)
                attempts.append((route.template.source, exc))
                continue
            return RouteMatch(route=route, params=params)
        raise NoMatch(url, tuple(attempts))

    def url_for(self, name: str, values: Mapping[Any, Any] | None = None, /, **kwargs: Any) -> str:
        """Render the template of the route registered as *name*.

        Raises ``KeyError`` for an unknown name.
        """
        try:
            route = self._names[name]
        except KeyError:
            msg = f"No route named {name!r}."
            raise KeyError(msg) from None
        return route.template.render(values, **kwargs)
