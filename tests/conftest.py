"""Shared fixtures for routecheck tests."""

from __future__ import annotations

import pytest

from routecheck import RouteTester
from routecheck.cases import clear_cache

from sample_app import StaticRouteTable, build_routes


@pytest.fixture
def routes() -> StaticRouteTable:
    return build_routes()


@pytest.fixture
def tester(routes: StaticRouteTable) -> RouteTester:
    return RouteTester(routes)


@pytest.fixture(autouse=True)
def _fresh_case_cache():
    clear_cache()
    yield
    clear_cache()
