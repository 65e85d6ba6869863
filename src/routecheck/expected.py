"""Expected action calls: recorded from a lambda or built explicitly."""

from __future__ import annotations

import inspect
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Union


class UnresolvableArgument(TypeError):
    """An argument expression that cannot be turned into a concrete value."""


# ---------------------------------------------------------------------------
# Argument expressions
# ---------------------------------------------------------------------------

class ArgumentExpression:
    """Base class for deferred argument values."""


@dataclass(frozen=True)
class Literal(ArgumentExpression):
    value: Any


@dataclass(frozen=True)
class FieldAccess(ArgumentExpression):
    """Read ``path`` (dotted attributes) from ``target`` when resolved."""
    target: Any
    path: str

    def evaluate(self) -> Any:
        value = self.target
        for name in self.path.split("."):
            value = getattr(value, name)
        return value


@dataclass(frozen=True, init=False)
class Constructed(ArgumentExpression):
    """Instantiate ``type`` with the given arguments when resolved."""
    type: type
    args: tuple = ()
    kwargs: dict = field(default_factory=dict, hash=False)

    def __init__(self, type: type, /, *args: Any, **kwargs: Any):
        object.__setattr__(self, "type", type)
        object.__setattr__(self, "args", args)
        object.__setattr__(self, "kwargs", kwargs)

    def evaluate(self) -> Any:
        args = [resolve_argument(a) for a in self.args]
        kwargs = {k: resolve_argument(v) for k, v in self.kwargs.items()}
        return self.type(*args, **kwargs)


@dataclass(frozen=True)
class Converted(ArgumentExpression):
    """A conversion wrapper; the operand is what gets compared."""
    operand: Any
    type: Any = None


def resolve_argument(expression: Any) -> Any:
    """Turn an argument expression into the value it stands for."""
    while isinstance(expression, Converted):
        expression = expression.operand

    if isinstance(expression, Literal):
        return expression.value
    if isinstance(expression, (FieldAccess, Constructed)):
        return expression.evaluate()
    if isinstance(expression, _MemberReference):
        raise UnresolvableArgument(
            f"Argument refers to '{expression.name}' on the controller under test "
            "and cannot be evaluated; pass a value instead."
        )
    if isinstance(expression, ArgumentExpression):
        raise UnresolvableArgument(f"Unsupported argument expression: {expression!r}")
    return expression


# ---------------------------------------------------------------------------
# Recording proxy
# ---------------------------------------------------------------------------

@dataclass
class _RecordedCall:
    action: str
    args: tuple
    kwargs: dict


class _MemberReference:
    def __init__(self, name: str):
        self.name = name

    def __call__(self, *args: Any, **kwargs: Any) -> _RecordedCall:
        return _RecordedCall(self.name, args, kwargs)

    def __repr__(self) -> str:
        return f"<controller member {self.name!r}>"


class _ControllerRecorder:
    def __getattr__(self, name: str) -> _MemberReference:
        if name.startswith("__"):
            raise AttributeError(name)
        return _MemberReference(name)


# ---------------------------------------------------------------------------
# Expected call
# ---------------------------------------------------------------------------

@dataclass
class ParamDescriptor:
    name: str
    annotation: Any
    nullable: bool
    expression: Any


@dataclass
class ExpectedCall:
    controller: type
    action: str
    parameters: list[ParamDescriptor] = field(default_factory=list)

    @classmethod
    def build(cls, controller: type, action: str, *args: Any, **kwargs: Any) -> ExpectedCall:
        """Describe ``controller.action(*args, **kwargs)`` without calling it."""
        function = _action_function(controller, action)
        signature = inspect.signature(function)
        try:
            bound = signature.bind_partial(*args, **kwargs)
        except TypeError as e:
            raise TypeError(f"Arguments do not fit {controller.__name__}.{action}: {e}") from e
        hints = _type_hints(function)

        parameters: list[ParamDescriptor] = []
        for name, param in signature.parameters.items():
            if name not in bound.arguments:
                continue
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                continue
            if param.kind is inspect.Parameter.VAR_KEYWORD:
                for key, value in bound.arguments[name].items():
                    parameters.append(ParamDescriptor(key, Any, False, value))
                continue
            annotation = hints.get(name, param.annotation)
            parameters.append(
                ParamDescriptor(name, annotation, is_nullable(annotation), bound.arguments[name])
            )
        return cls(controller=controller, action=action, parameters=parameters)

    @classmethod
    def from_expression(cls, controller: type, expression: Callable[[Any], Any]) -> ExpectedCall:
        """Record ``expression`` (e.g. ``lambda c: c.show(3)``) as an expected call."""
        recorded = expression(_ControllerRecorder())
        if not isinstance(recorded, _RecordedCall):
            raise TypeError(
                "The action expression must return a call to a controller method, "
                "e.g. lambda c: c.show(3)"
            )
        return cls.build(controller, recorded.action, *recorded.args, **recorded.kwargs)


def _action_function(controller: type, action: str) -> Callable[..., Any]:
    """Return the action as a callable whose signature excludes ``self``."""
    raw = inspect.getattr_static(controller, action, None)
    member = getattr(controller, action, None)
    if raw is None or not callable(member):
        raise AttributeError(f"{controller.__name__} has no action '{action}'")
    if isinstance(raw, (staticmethod, classmethod)):
        return member
    # Plain function looked up on the class: bind to a placeholder to drop self.
    return types.MethodType(member, object())


def _type_hints(function: Callable[..., Any]) -> dict[str, Any]:
    try:
        return typing.get_type_hints(function)
    except (NameError, TypeError):
        pass
    # Some annotation names only exist for type checkers; resolve the rest one by one.
    globalns = getattr(function, "__globals__", {})
    hints: dict[str, Any] = {}
    for name, annotation in getattr(function, "__annotations__", {}).items():
        if isinstance(annotation, str):
            try:
                annotation = eval(annotation, globalns)
            except (NameError, AttributeError, SyntaxError, TypeError):
                pass
        hints[name] = annotation
    return hints


def _top_level_union(text: str) -> list[str]:
    parts, depth, current = [], 0, ""
    for char in text:
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        if char == "|" and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += char
    parts.append(current.strip())
    return parts


def is_nullable(annotation: Any) -> bool:
    """True for ``Optional[X]`` and ``X | None`` annotations."""
    if isinstance(annotation, str):
        text = annotation.strip()
        if text.startswith(("Optional[", "typing.Optional[")):
            return True
        return "None" in _top_level_union(text)
    if annotation is None or annotation is type(None):
        return True
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        return type(None) in typing.get_args(annotation)
    return False
