"""Controllers and a static route table used as the routing engine in tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from routecheck import RouteMatch, RouteProbe, StopRoutingHandler


class ProductsController:
    default_page = 1

    def show(self, id: int):
        return f"product {id}"

    def list(self, page: int | None = None, category: Optional[str] = None):
        return "products"

    def archive(self, day: datetime):
        return "archive"

    def released(self, on: date):
        return "released"

    def search(self, term: str, **filters):
        return "search"

    def tagged(self, *tags):
        return "tagged"

    def new(self):
        return "form"

    def create(self):
        return "created"

    @staticmethod
    def feed(fmt: str):
        return fmt

    @classmethod
    def sitemap(cls, section: str):
        return section


class MvcRouteHandler:
    pass


class HomeController:
    def index(self):
        return "home"


@dataclass
class StaticRoute:
    url: str
    values: dict
    handler: object = None
    method: str | None = None


@dataclass
class StaticRouteTable:
    """Maps exact URLs (and optional methods) to route data; records every probe."""
    routes: list[StaticRoute] = field(default_factory=list)
    probes: list[RouteProbe] = field(default_factory=list)

    def add(self, url: str, values: dict | None = None, handler: object = None, method: str | None = None):
        if handler is None:
            handler = MvcRouteHandler()
        self.routes.append(StaticRoute(url, values or {}, handler, method))
        return self

    def ignore(self, url: str):
        return self.add(url, handler=StopRoutingHandler())

    def match(self, probe: RouteProbe) -> RouteMatch | None:
        self.probes.append(probe)
        for r in self.routes:
            if r.url != probe.url:
                continue
            if r.method is not None and r.method != probe.http_method:
                continue
            return RouteMatch(values=dict(r.values), handler=r.handler)
        return None


def build_routes() -> StaticRouteTable:
    return (
        StaticRouteTable()
        .add("~/", {"controller": "Home", "action": "index"})
        .add("~/products/3", {"controller": "Products", "action": "show", "id": "3"})
        .add("~/Products/3", {"Controller": "Products", "Action": "show", "ID": "3"})
        .add("~/product/3", {"controller": "Product", "action": "show", "id": "3"})
        .add("~/products", {"controller": "Products", "action": "list", "page": "", "category": None})
        .add("~/products/page/5", {"controller": "Products", "action": "list", "page": "5"})
        .add("~/products/archive/2020-01-01", {"controller": "Products", "action": "archive", "day": "2020-01-01"})
        .add("~/products/archive/today", {"controller": "Products", "action": "archive", "day": "today"})
        .add("~/products/released/2021-06-30", {"controller": "Products", "action": "released", "on": "2021-06-30"})
        .add("~/products/search/lamp", {"controller": "Products", "action": "search", "term": "lamp", "color": "red"})
        .add("~/products/feed/rss", {"controller": "Products", "action": "feed", "fmt": "rss"})
        .add("~/products/sitemap/all", {"controller": "Products", "action": "sitemap", "section": "all"})
        .add("~/products/new", {"controller": "Products", "action": "create"}, method="POST")
        .add("~/products/new", {"controller": "Products", "action": "new"}, method="GET")
        .ignore("~/favicon.ico")
        .ignore("~/content/site.css")
    )


ROUTES = build_routes()
