"""
Configuration fragments.

A fragment is either a static configuration value or a function of the
special-argument context. Functions receive the context as keyword
arguments: one accepting `**kwargs` gets everything, otherwise it gets
exactly the parameters it names.

    def backend(groups, **_):
        return {"groups": [groups.backend]}
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Union

from avalanche.core.errors import MissingArgument


@dataclass(frozen=True)
class Static:
    """A fragment that does not depend on the context."""

    value: Any
    name: str | None = None

    @property
    def label(self) -> str:
        return self.name or "<static>"


@dataclass(frozen=True)
class Computed:
    """A fragment computed from the context, with extra arguments layered on top."""

    func: Callable[..., Any]
    extra_args: Mapping[str, Any] = field(default_factory=dict)
    name: str | None = None

    @property
    def label(self) -> str:
        return self.name or getattr(self.func, "__qualname__", repr(self.func))

    def evaluate(self, context: Mapping[str, Any]) -> Any:
        return call_with_context(self.func, {**context, **self.extra_args}, self.label)


Fragment = Union[Static, Computed]


def as_fragment(obj: Any, name: str | None = None) -> Fragment:
    """Coerce a mapping or callable into a fragment. Fragments pass through."""
    if isinstance(obj, (Static, Computed)):
        return obj
    if callable(obj):
        return Computed(obj, name=name)
    if isinstance(obj, Mapping):
        return Static(obj, name=name)
    raise TypeError(f"Fragment must be a mapping or a callable, not {type(obj).__name__}")


def inject_special(extra: Mapping[str, Any], fragment: Any) -> Fragment:
    """
    Merge `extra` into the context a computed fragment is called with.

    Keys of `extra` override the same keys of the context. Static fragments
    are returned unchanged. When injections are nested the innermost one
    wins.
    """
    fragment = as_fragment(fragment)
    if isinstance(fragment, Static):
        return fragment
    return Computed(fragment.func, {**extra, **fragment.extra_args}, fragment.name)


def evaluate_fragment(fragment: Fragment, context: Mapping[str, Any]) -> Any:
    """Return the value of a fragment under `context`."""
    if isinstance(fragment, Static):
        return fragment.value
    return fragment.evaluate(context)


def call_with_context(func: Callable[..., Any], context: Mapping[str, Any], label: str) -> Any:
    """Call `func` with the context entries it asks for."""
    try:
        params = list(inspect.signature(func).parameters.values())
    except (TypeError, ValueError):
        # No introspectable signature; assume it takes everything.
        return func(**context)

    takes_all = any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params)
    kwargs: dict[str, Any] = dict(context) if takes_all else {}
    for p in params:
        if p.kind in (inspect.Parameter.VAR_KEYWORD, inspect.Parameter.VAR_POSITIONAL):
            continue
        if p.kind is inspect.Parameter.POSITIONAL_ONLY:
            if p.default is p.empty:
                raise MissingArgument(p.name, label)
            continue
        if p.name in context:
            kwargs[p.name] = context[p.name]
        elif p.default is p.empty:
            raise MissingArgument(p.name, label)
    return func(**kwargs)
