"""
Deferred values with memoization.

A `Lazy` wraps a zero-argument callable. On first force the callable runs
and its result is cached; later forces return the cache. Forcing a value
that is still being computed means it depends on itself, which raises
`UnresolvableCycle` with the chain of values under evaluation instead of
overflowing the stack.

This is what lets the inventory hand every fragment the final set of hosts
before any host has been computed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

from avalanche.core.errors import UnresolvableCycle

T = TypeVar("T")

_MISSING: Any = object()

# Descriptions of the values currently being forced, outermost first.
_evaluating: list[str] = []


class Lazy(Generic[T]):
    """A memoized deferred computation."""

    __slots__ = ("_func", "_value", "_running", "description")

    def __init__(self, func: Callable[[], T], description: str | None = None) -> None:
        self._func: Callable[[], T] | None = func
        self._value: Any = _MISSING
        self._running = False
        self.description = description or getattr(func, "__qualname__", repr(func))

    @property
    def forced(self) -> bool:
        return self._value is not _MISSING

    def force(self) -> T:
        if self._value is not _MISSING:
            return self._value
        if self._running:
            raise UnresolvableCycle([*_evaluating, self.description])
        self._running = True
        _evaluating.append(self.description)
        try:
            assert self._func is not None
            value = self._func()
            # A thunk may return another thunk.
            while isinstance(value, Lazy):
                value = value.force()
        finally:
            _evaluating.pop()
            self._running = False
        self._value = value
        self._func = None
        return value

    def __repr__(self) -> str:
        state = repr(self._value) if self.forced else "<unevaluated>"
        return f"Lazy({self.description}: {state})"


def lazy(func: Callable[[], T], description: str | None = None) -> Lazy[T]:
    """
    Defer `func` until the value is read.

    Examples:
        {"upstreams": lazy(lambda: [ip(h) for h in groups_members["backend"].values()])}
    """
    return Lazy(func, description)


def force(value: Any) -> Any:
    """Force `value` if it is lazy, otherwise return it unchanged."""
    while isinstance(value, Lazy):
        value = value.force()
    return value


def force_deep(value: Any) -> Any:
    """Force `value` and every lazy value nested in plain containers."""
    value = force(value)
    if isinstance(value, dict):
        return {k: force_deep(v) for k, v in value.items()}
    if isinstance(value, list):
        return [force_deep(v) for v in value]
    if isinstance(value, tuple):
        return tuple(force_deep(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return type(value)(force_deep(v) for v in value)
    return value


class LazyMapping(Mapping[str, T]):
    """
    Mapping with a fixed key set whose values are computed on first access.

    Values are also reachable as attributes when the key is a valid
    identifier, mirroring `groups_members.backend`.
    """

    def __init__(
        self,
        keys: Iterable[str],
        factory: Callable[[str], T],
        description: str = "mapping",
    ) -> None:
        self._description = description
        self._entries: dict[str, Lazy[T]] = {
            key: Lazy(lambda key=key: factory(key), f"{description}.{key}") for key in keys
        }

    def __getitem__(self, key: str) -> T:
        return self._entries[key].force()

    def __getattr__(self, name: str) -> T:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError as e:
            raise AttributeError(str(e)) from e

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def is_forced(self, key: str) -> bool:
        """Whether the value for `key` has already been computed."""
        return self._entries[key].forced

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._description}: {', '.join(self._entries)}>"


class DeferredMapping(Mapping[str, T]):
    """A mapping produced by a lazy value, forced on first use."""

    def __init__(self, source: Lazy[Mapping[str, T]]) -> None:
        self._source = source

    def _resolve(self) -> Mapping[str, T]:
        return self._source.force()

    def __getitem__(self, key: str) -> T:
        return self._resolve()[key]

    def __getattr__(self, name: str) -> T:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._resolve()[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __iter__(self) -> Iterator[str]:
        return iter(self._resolve())

    def __len__(self) -> int:
        return len(self._resolve())

    def __repr__(self) -> str:
        if self._source.forced:
            return f"DeferredMapping({dict(self._resolve())!r})"
        return f"DeferredMapping(<{self._source.description}>)"
