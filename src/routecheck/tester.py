"""Fluent route assertions bound to one routing engine."""

from __future__ import annotations

import enum
from typing import Any, Callable

from .expected import ExpectedCall
from .matcher import assert_ignored, assert_maps_to
from .probe import RoutingEngine, StopRoutingHandler, route, with_method


class RouteTester:
    """Binds a routing engine so tests only deal in URLs and expectations.

        routes = RouteTester(app_routes)
        routes.should_map_to("~/products/3", ProductsController, lambda c: c.show(3))
        routes.should_be_ignored("~/favicon.ico")
    """

    def __init__(self, engine: RoutingEngine, stop_handler: Any = StopRoutingHandler):
        self.engine = engine
        self.stop_handler = stop_handler

    def route(self, url: str, method: str | enum.Enum | None = None) -> Any:
        return route(self.engine, url, method)

    def with_method(self, url: str, method: str | enum.Enum) -> Any:
        return with_method(self.engine, url, method)

    def should_map_to(
        self,
        url: str,
        controller: type | str,
        action: Callable[[Any], Any] | ExpectedCall | None = None,
        method: str | enum.Enum | None = None,
    ) -> Any:
        return assert_maps_to(self.route(url, method), controller, action)

    def should_be_ignored(self, url: str) -> Any:
        return assert_ignored(self.engine, url, self.stop_handler)
