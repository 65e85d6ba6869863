"""Assertions that URLs route to the expected controller actions."""

from .expected import (
    Constructed,
    Converted,
    ExpectedCall,
    FieldAccess,
    Literal,
    UnresolvableArgument,
)
from .matcher import (
    ActionMismatch,
    ControllerMismatch,
    NoRouteMatched,
    NotIgnored,
    ParameterMismatch,
    RouteAssertionError,
    assert_controller,
    assert_ignored,
    assert_maps_to,
    get_value,
)
from .probe import RouteMatch, RouteProbe, RoutingEngine, StopRoutingHandler, make_probe, route, with_method
from .tester import RouteTester

__version__ = "0.1.0"
