"""Synthetic request probes and route lookup against an injected routing engine."""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict


logger = logging.getLogger("routecheck.probe")


class RouteProbe(BaseModel):
    """Minimal request a routing engine needs to pick a route."""

    model_config = ConfigDict(frozen=True)

    url: str  # app-relative, e.g. ~/products/3
    http_method: str | None = None
    path_info: str = ""

    @property
    def path(self) -> str:
        return self.url


@dataclass
class RouteMatch:
    """Route data as returned by a routing engine.

    Engines may return their own objects instead; only ``values`` and
    ``handler`` are read.
    """
    values: Mapping[str, Any] | None = field(default_factory=dict)
    handler: Any = None


class StopRoutingHandler:
    """Handler marking a route the engine deliberately ignores."""


class RoutingEngine(Protocol):
    def match(self, probe: RouteProbe) -> Any: ...


# ---------------------------------------------------------------------------
# Probe construction
# ---------------------------------------------------------------------------

def _method_name(method: str | enum.Enum | None) -> str | None:
    if isinstance(method, enum.Enum):
        return method.name.upper()
    return method


def make_probe(url: str, method: str | enum.Enum | None = None) -> RouteProbe:
    """Build a probe for ``url``.

    No method means the probe does not constrain matching by HTTP method.
    Symbolic verbs (``http.HTTPMethod.POST`` or any enum) become their
    uppercase name.
    """
    return RouteProbe(url=url, http_method=_method_name(method))


# ---------------------------------------------------------------------------
# Route lookup
# ---------------------------------------------------------------------------

def resolve(engine: RoutingEngine, probe: RouteProbe) -> Any:
    """Ask the engine for the route matching ``probe``; None when nothing matches."""
    match = engine.match(probe)
    if match is None:
        logger.debug("No route matched %s %s", probe.http_method or "*", probe.url)
    else:
        logger.debug(
            "Matched %s %s to handler %r", probe.http_method or "*", probe.url, match.handler
        )
    return match


def route(engine: RoutingEngine, url: str, method: str | enum.Enum | None = None) -> Any:
    """Return the route data for ``url``, or None if no route was found."""
    return resolve(engine, make_probe(url, method))


def with_method(engine: RoutingEngine, url: str, method: str | enum.Enum) -> Any:
    """Like :func:`route`, for routes carrying an HTTP method constraint."""
    return route(engine, url, method)
