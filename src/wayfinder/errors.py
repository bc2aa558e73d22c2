"""Wayfinder exception hierarchy.

Only configuration problems raise. Resolution never throws: unmatched
targets, missing params and bad redirects degrade to a Route with an
empty ``matched`` tuple and a logged diagnostic.
"""


class WayfinderError(Exception):
    """Base for all wayfinder-specific errors."""


class ConfigurationError(WayfinderError):
    """Raised when a route configuration or router option is invalid.

    Surfaced by ``build_route_map()`` while compiling the route tree,
    before any navigation is attempted.
    """


class ParamError(WayfinderError, ValueError):
    """Raised by a compiled path filler when a param is missing or invalid.

    ``fill_params()`` catches this and reports it as a diagnostic, so it
    only escapes to callers that use a ``PathFiller`` directly.
    """
