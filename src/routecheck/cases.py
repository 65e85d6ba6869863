"""Load and run declarative route cases from YAML or JSON files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, model_validator

from .config import ConfigError, import_object
from .expected import ExpectedCall
from .matcher import RouteAssertionError, assert_ignored, assert_maps_to, verify_call
from .probe import RoutingEngine, route


logger = logging.getLogger("routecheck.cases")


class RouteCase(BaseModel):
    url: str
    method: str | None = None
    controller: str | None = None  # "module:Class"
    action: str | None = None
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    ignored: bool = False

    @model_validator(mode="after")
    def _check_expectation(self) -> RouteCase:
        if not self.ignored and not self.controller:
            raise ValueError(f"case for '{self.url}' needs a controller or 'ignored: true'")
        if (self.args or self.kwargs) and not self.action:
            raise ValueError(f"case for '{self.url}' gives arguments without an action")
        return self

    @property
    def description(self) -> str:
        if self.ignored:
            return "ignored"
        target = self.controller.rpartition(":")[2]
        return f"{target}.{self.action}" if self.action else target


class RouteCaseFile(BaseModel):
    cases: list[RouteCase] = []


@dataclass
class CaseResult:
    case: RouteCase
    passed: bool
    code: str | None = None
    message: str | None = None


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

_cache: dict[str, RouteCaseFile] = {}


def _load_raw(path: Path) -> dict[str, Any]:
    text = path.read_text()
    if path.suffix in (".yaml", ".yml"):
        return yaml.safe_load(text) or {}
    return json.loads(text)


def load_cases(cases_ref: str) -> RouteCaseFile:
    """Load and validate a case file, with in-memory caching."""
    path = Path(cases_ref).expanduser().resolve()
    key = str(path)
    if key not in _cache:
        _cache[key] = RouteCaseFile.model_validate(_load_raw(path))
    return _cache[key]


def clear_cache() -> None:
    _cache.clear()


# ---------------------------------------------------------------------------
# Running
# ---------------------------------------------------------------------------

def check_case(engine: RoutingEngine, case: RouteCase) -> Any:
    """Run one case; raises RouteAssertionError on the first mismatch."""
    if case.ignored:
        return assert_ignored(engine, case.url)

    match = route(engine, case.url, case.method)
    controller = import_object(case.controller)
    if not case.action:
        return assert_maps_to(match, controller)
    expected = ExpectedCall.build(controller, case.action, *case.args, **case.kwargs)
    return verify_call(match, expected)


def run_cases(engine: RoutingEngine, cases: list[RouteCase]) -> list[CaseResult]:
    """Run every case, collecting one result per case."""
    results: list[CaseResult] = []
    for case in cases:
        try:
            check_case(engine, case)
        except (RouteAssertionError, ConfigError) as e:
            logger.debug("Case %s failed: %s", case.url, e.message)
            results.append(CaseResult(case, False, e.code, e.message))
        except (AttributeError, TypeError) as e:
            logger.debug("Case %s is invalid: %s", case.url, e)
            results.append(CaseResult(case, False, "CASE_ERROR", str(e)))
        else:
            results.append(CaseResult(case, True))
    return results
