"""
Default message templates for validation rules.

A rule's default message is one of three shapes:

    Fixed("is not present")                            # literal text
    Parameterized(lambda max: f"is longer than {max}") # rendered from the rule arguments
    CatalogDirective(lambda klass: Directive(          # decides default text and key suffix
        default=..., suffix="multiple" if isinstance(klass, list) else "singular"))

Rule arguments are bound positionally to the callable's parameter names with
`bind_arguments`, which never fails on arity: parameters without a supplied
argument get their declared default, or None.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union


@dataclass(frozen=True)
class Fixed:
    text: str


@dataclass(frozen=True)
class Parameterized:
    render: Callable[..., str]


@dataclass(frozen=True)
class Directive:
    """Result of a `CatalogDirective`: the default message and an optional key suffix."""
    default: Any = None
    suffix: Optional[str] = None

    @classmethod
    def coerce(cls, value: Union['Directive', Mapping[str, Any], str, None]) -> 'Directive':
        if isinstance(value, Directive):
            return value
        if isinstance(value, Mapping):
            return cls(default=value.get("default"), suffix=value.get("suffix"))
        return cls(default=value)


@dataclass(frozen=True)
class CatalogDirective:
    directive: Callable[..., Union[Directive, Mapping[str, Any]]]


MessageTemplate = Union[Fixed, Parameterized, CatalogDirective]


def as_template(message: Union[MessageTemplate, str, Callable[..., Any]]) -> MessageTemplate:
    """Wrap plain strings and callables into a template."""
    if isinstance(message, (Fixed, Parameterized, CatalogDirective)):
        return message
    if isinstance(message, str):
        return Fixed(message)
    if callable(message):
        return Parameterized(message)
    raise TypeError(f"Unsupported message template: {message!r}")


def bind_arguments(fn: Callable[..., Any], args: tuple) -> tuple[tuple, dict[str, Any]]:
    """
    Bind positional rule arguments to the parameter names of `fn`.

    Returns the argument tuple to call `fn` with (padded or truncated to its
    positional parameters, extra arguments kept only for `*args`) and the
    name -> value mapping used for catalog interpolation.
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return tuple(args), {}

    names: list[str] = []
    padded: list[Any] = []
    accepts_varargs = False
    for parameter in signature.parameters.values():
        if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            index = len(names)
            names.append(parameter.name)
            if index < len(args):
                padded.append(args[index])
            elif parameter.default is not inspect.Parameter.empty:
                padded.append(parameter.default)
            else:
                padded.append(None)
        elif parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            accepts_varargs = True

    call_args = list(padded)
    if accepts_varargs:
        call_args.extend(args[len(names):])

    return tuple(call_args), dict(zip(names, padded))


def render_default(default: Any, args: tuple) -> str:
    """Render a default message (text, template or callable) against the rule arguments."""
    if default is None:
        return ""
    if isinstance(default, str):
        return default
    if isinstance(default, Fixed):
        return default.text
    if isinstance(default, CatalogDirective):
        raise TypeError("A directive cannot be used as a default message")

    render = default.render if isinstance(default, Parameterized) else default
    if callable(render):
        call_args, _ = bind_arguments(render, args)
        return _to_text(render(*call_args))
    return str(default)


def _to_text(value: Any) -> str:
    return "" if value is None else str(value)


__all__ = [
    "Fixed",
    "Parameterized",
    "Directive",
    "CatalogDirective",
    "MessageTemplate",
    "as_template",
    "bind_arguments",
    "render_default",
]
