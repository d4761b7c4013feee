"""Wren — RFC 6570 URI Templates, both ways.

Expands templates into URIs (levels 1 to 4) and matches URIs back into
variable values for the default, path-segment and query operators.

Basic usage::

    from wren import parse

    template = parse("/users{/id}{?fields*}")
    template.render(id=42, fields=["name", "email"])
    # "/users/42?fields=name&fields=email"

    template.match("/users/42?fields=name")
    # MatchResult({'id': '42', 'fields': ['name']})

Routing::

    from wren import Router

    router = Router()
    router.add_template("/users{/id}", target="user", name="user")
    router.compile()
    router.match("/users/42").params["id"]   # "42"
    router.url_for("user", id=7)             # "/users/7"
"""

# Declare free-threading support (PEP 703)
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "AssocList",
    "ConfigurationError",
    "Expression",
    "ExtraValues",
    "InvalidSyntax",
    "InvalidValue",
    "ListValue",
    "Literal",
    "LiteralMismatch",
    "MatchError",
    "MatchResult",
    "NoMatch",
    "OnlyKeyValuePairs",
    "Operator",
    "ParseError",
    "Route",
    "RouteMatch",
    "Router",
    "Scalar",
    "Template",
    "TemplateConfig",
    "UnexpectedDict",
    "UnsupportedOperator",
    "VarSpec",
    "WrenError",
    "match",
    "parse",
    "render",
]

# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    # Compile / render / match
    "parse": "wren.template.compiler",
    "render": "wren.expander",
    "match": "wren.matching.matcher",
    # Model
    "Template": "wren.template.model",
    "Operator": "wren.template.model",
    "VarSpec": "wren.template.model",
    "Literal": "wren.template.model",
    "Expression": "wren.template.model",
    # Values and results
    "Scalar": "wren.values",
    "ListValue": "wren.values",
    "AssocList": "wren.values",
    "MatchResult": "wren.matching.result",
    # Configuration
    "TemplateConfig": "wren.config",
    # Routing
    "Router": "wren.routing.router",
    "Route": "wren.routing.route",
    "RouteMatch": "wren.routing.route",
    # Errors
    "WrenError": "wren.errors",
    "ConfigurationError": "wren.errors",
    "UnsupportedOperator": "wren.errors",
    "ParseError": "wren.errors",
    "InvalidValue": "wren.errors",
    "MatchError": "wren.errors",
    "UnexpectedDict": "wren.errors",
    "ExtraValues": "wren.errors",
    "InvalidSyntax": "wren.errors",
    "OnlyKeyValuePairs": "wren.errors",
    "LiteralMismatch": "wren.errors",
    "NoMatch": "wren.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module 'wren' has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
