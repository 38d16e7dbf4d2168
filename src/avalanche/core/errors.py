"""Exceptions raised while resolving an inventory."""

from __future__ import annotations

from typing import Any


class AvalancheError(Exception):
    """Base class for every error raised by avalanche."""

    pass


class EmptyFqdn(AvalancheError, ValueError):
    """Raised when a name contains no label at all (empty or only dots)."""

    def __init__(self, fqdn: str) -> None:
        super().__init__(f"Name has no label: {fqdn!r}")
        self.fqdn = fqdn


class UnknownGroup(AvalancheError, KeyError, AttributeError):
    """
    Raised when a group name is not declared in the inventory.

    Also an `AttributeError`, since `groups.<name>` is the usual way of
    naming a group.
    """

    def __init__(self, group: str, host: str | None = None) -> None:
        msg = f"Unknown group: {group}"
        if host is not None:
            msg = f"Host {host} references unknown group: {group}"
        super().__init__(msg)
        self.group = group
        self.host = host

    def __str__(self) -> str:
        return self.args[0]


class UnresolvableCycle(AvalancheError, RecursionError):
    """Raised when a lazy value depends on itself before it is computed."""

    def __init__(self, chain: list[str]) -> None:
        super().__init__("Infinite recursion while evaluating: " + " -> ".join(chain))
        self.chain = chain


class OptionConflict(AvalancheError):
    """Raised when definitions of an option cannot be merged."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"The option `{path}` has conflicting definitions: {reason}")
        self.path = path


class OptionTypeError(AvalancheError, TypeError):
    """Raised when a declared option's merged value does not match its type."""

    def __init__(self, path: str, value: Any, detail: str) -> None:
        super().__init__(f"The option `{path}` has an invalid value {value!r}: {detail}")
        self.path = path
        self.value = value


class UndefinedOption(AvalancheError, KeyError):
    """Raised when reading an option that is neither declared nor defined."""

    def __init__(self, path: str) -> None:
        super().__init__(f"The option `{path}` is used but not defined")
        self.path = path

    def __str__(self) -> str:
        return self.args[0]


class MissingArgument(AvalancheError, TypeError):
    """Raised when a fragment requires an argument the context does not provide."""

    def __init__(self, name: str, fragment: str) -> None:
        super().__init__(f"Fragment {fragment} requires argument `{name}` which is not available")
        self.name = name


class ModuleError(AvalancheError, TypeError):
    """Raised when a fragment does not evaluate to a well-formed module."""

    def __init__(self, fragment: str, reason: str) -> None:
        super().__init__(f"Module {fragment} is malformed: {reason}")
        self.fragment = fragment
