"""Template configuration.

TemplateConfig is a frozen dataclass — immutable after creation, shared
freely between templates and threads, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TemplateConfig:
    """Behavior switches for rendering and matching. Immutable after creation.

    All fields have defaults matching RFC 6570 plus the conveniences
    most callers expect. Override what you need::

        config = TemplateConfig(strict_query=True)
        template = parse("/search{?q,page}", config)
    """

    # Rendering: a sequence of 2-tuples, e.g. [("a", 1), ("b", 2)], is
    # rendered as an associative array instead of a list of pairs
    keyword_lists: bool = True

    # Matching: query pairs claimed by no variable raise ExtraValues
    # instead of being ignored
    strict_query: bool = False


DEFAULT_CONFIG = TemplateConfig()
