"""Assertions comparing route data against an expected controller action."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Callable

from dateutil.parser import parse as dateutil_parser

from .expected import ExpectedCall, ParamDescriptor, resolve_argument
from .probe import RoutingEngine, StopRoutingHandler, route


logger = logging.getLogger("routecheck.matcher")


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class RouteAssertionError(AssertionError):
    code = "ROUTE_ASSERTION"

    def __init__(
        self,
        message: str,
        name: str | None = None,
        expected: Any = None,
        actual: Any = None,
    ):
        self.message = message
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class NoRouteMatched(RouteAssertionError):
    code = "NO_ROUTE"


class ControllerMismatch(RouteAssertionError):
    code = "CONTROLLER_MISMATCH"


class ActionMismatch(RouteAssertionError):
    code = "ACTION_MISMATCH"


class ParameterMismatch(RouteAssertionError):
    code = "PARAMETER_MISMATCH"


class NotIgnored(RouteAssertionError):
    code = "NOT_IGNORED"


def _display(value: Any) -> str:
    return "" if value is None else str(value)


def _quoted(value: Any) -> str:
    return "null" if value is None else f"'{value}'"


# ---------------------------------------------------------------------------
# Route value lookup
# ---------------------------------------------------------------------------

def get_value(values: Mapping[str, Any] | None, key: str) -> str | None:
    """Return the route value stored under ``key``, ignoring key case."""
    wanted = key.lower()
    for route_key in values or {}:
        if route_key.lower() == wanted:
            value = values[route_key]
            return None if value is None else str(value)
    return None


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

def controller_name(controller: type | str) -> str:
    """Route name of a controller: ``ProductsController`` -> ``Products``."""
    name = controller if isinstance(controller, str) else controller.__name__
    return name.removesuffix("Controller")


def _ensure_matched(match: Any) -> None:
    if match is None:
        raise NoRouteMatched("The URL did not match any route.")


def assert_controller(match: Any, controller: type | str) -> Any:
    """Verify the route data maps to ``controller``."""
    _ensure_matched(match)
    expected = controller_name(controller)
    actual = get_value(match.values, "controller")
    if actual != expected:
        raise ControllerMismatch(
            f"Expected controller '{expected}' but was '{_display(actual)}'.",
            name="controller", expected=expected, actual=actual,
        )
    return match


def _assert_action(match: Any, expected: str) -> None:
    actual = get_value(match.values, "action")
    if actual != expected:
        raise ActionMismatch(
            f"Expected action '{expected}' but was '{_display(actual)}'.",
            name="action", expected=expected, actual=actual,
        )


def _parameter_failure(name: str, expected: Any, actual: Any) -> ParameterMismatch:
    return ParameterMismatch(
        f"Value for parameter '{name}' did not match: "
        f"expected {_quoted(expected)} but was {_quoted(actual)}.",
        name=name, expected=expected, actual=actual,
    )


def _coerce_date(expected: date, actual: str | None) -> date | None:
    if not actual:
        return None
    try:
        parsed = dateutil_parser(actual)
    except (ValueError, OverflowError):
        return None
    return parsed if isinstance(expected, datetime) else parsed.date()


def _assert_parameter(match: Any, param: ParamDescriptor) -> None:
    expected = resolve_argument(param.expression)
    actual = get_value(match.values, param.name)
    logger.debug("Parameter %s: expected %r, route value %r", param.name, expected, actual)

    # A nullable parameter treats a missing value and an empty route value alike.
    if param.nullable and (expected, actual) in ((None, ""), ("", None)):
        return

    if isinstance(expected, date):
        if _coerce_date(expected, actual) != expected:
            raise _parameter_failure(param.name, expected, actual)
        return

    expected_str = None if expected is None else str(expected)
    if expected_str != actual:
        raise _parameter_failure(param.name, expected_str, actual)


def verify_call(match: Any, expected: ExpectedCall) -> Any:
    """Check controller, action and bound parameters, stopping at the first failure."""
    _ensure_matched(match)
    assert_controller(match, expected.controller)
    _assert_action(match, expected.action)
    for param in expected.parameters:
        _assert_parameter(match, param)
    return match


def assert_maps_to(
    match: Any,
    controller: type | str,
    action: Callable[[Any], Any] | ExpectedCall | None = None,
) -> Any:
    """Assert the route data maps to ``controller`` and, optionally, an action call.

    ``action`` is an expression such as ``lambda c: c.show(3)`` or a prebuilt
    :class:`ExpectedCall`. Returns ``match`` so further checks can be chained.
    """
    _ensure_matched(match)
    if action is None:
        return assert_controller(match, controller)
    if not isinstance(action, ExpectedCall):
        if isinstance(controller, str):
            raise TypeError("An action expression needs the controller class, not its name")
        action = ExpectedCall.from_expression(controller, action)
    elif not _same_controller(controller, action.controller):
        raise TypeError(
            f"Expected call is for {action.controller.__name__}, not {controller_name(controller)}"
        )
    return verify_call(match, action)


def _same_controller(controller: type | str, expected: type) -> bool:
    if isinstance(controller, str):
        return controller_name(controller) == controller_name(expected)
    return controller is expected


def is_stop_routing(handler: Any, sentinel: Any = StopRoutingHandler) -> bool:
    if handler is sentinel:
        return True
    return isinstance(sentinel, type) and isinstance(handler, sentinel)


def assert_ignored(engine: RoutingEngine, url: str, stop_handler: Any = StopRoutingHandler) -> Any:
    """Assert the engine deliberately ignores ``url``."""
    match = route(engine, url)
    if match is None:
        raise NotIgnored("Expected a stop-routing handler, but the URL did not match any route.")
    if not is_stop_routing(match.handler, stop_handler):
        raise NotIgnored(
            "Expected a stop-routing handler, but wasn't.",
            name="handler", expected=stop_handler, actual=match.handler,
        )
    return match
