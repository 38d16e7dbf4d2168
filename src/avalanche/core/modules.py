"""
A small lazy module system.

A configuration is evaluated from an ordered list of fragments. Each
fragment evaluates to a module: a mapping with optional `imports`,
`options` and `config` keys, or, as a shorthand, a mapping that is entirely
config (apart from `imports`).

Nothing is computed when a `Configuration` is created. Reading a path of
`Configuration.config` collects the modules, gathers every definition of
that path and merges them:

- declared options (see `mk_option`) merge according to their strategy
  and are checked against their type,
- undeclared paths are freeform: lists concatenate, sets union, mappings
  merge recursively and plain values are last-write-wins in module order.

Definitions can be wrapped with `mk_default`, `mk_force`, `mk_override` and
`mk_if`; only the definitions with the best (lowest) priority are merged.
Any value may be `lazy(...)` and is forced only when its path is read,
which is what allows fragments to reference the configuration they are
part of.
"""

from __future__ import annotations

import copy
import logging
import typing
from collections.abc import Mapping, Set
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Iterator, Literal, Sequence

from pydantic import TypeAdapter, ValidationError

from avalanche.core.errors import ModuleError, OptionConflict, OptionTypeError, UndefinedOption
from avalanche.core.fragments import Fragment, as_fragment, evaluate_fragment
from avalanche.core.lazy import Lazy, force, force_deep

logger = logging.getLogger(__name__)

MK_FORCE_PRIORITY = 50
DEFAULT_PRIORITY = 100
MK_DEFAULT_PRIORITY = 1000

MergeStrategy = Literal["last", "concat", "union", "update", "unique"]

Path = tuple[str, ...]

_MISSING: Any = object()


@dataclass(frozen=True)
class Override:
    """A definition with an explicit priority."""

    priority: int
    content: Any


@dataclass(frozen=True)
class Conditional:
    """A definition that only applies when its condition holds."""

    condition: Any
    content: Any


def mk_override(priority: int, value: Any) -> Override:
    return Override(priority, value)


def mk_default(value: Any) -> Override:
    """Define a value that any plain definition overrides."""
    return Override(MK_DEFAULT_PRIORITY, value)


def mk_force(value: Any) -> Override:
    """Define a value that overrides plain definitions."""
    return Override(MK_FORCE_PRIORITY, value)


def mk_if(condition: Any, value: Any) -> Conditional:
    """Define `value` only if `condition` (possibly lazy) is true."""
    return Conditional(condition, value)


@dataclass(eq=False)
class Option:
    """
    Declaration of an option.

    The merge strategy defaults to one derived from `type`: lists
    concatenate, sets union, mappings update shallowly, everything else is
    last-write-wins. `unique` rejects differing definitions.
    """

    type: Any = Any
    default: Any = _MISSING
    description: str | None = None
    merge: MergeStrategy | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING

    @cached_property
    def strategy(self) -> MergeStrategy:
        if self.merge is not None:
            return self.merge
        origin = typing.get_origin(self.type) or self.type
        if not isinstance(origin, type):
            return "last"
        if issubclass(origin, (list, tuple)):
            return "concat"
        if issubclass(origin, Set):
            return "union"
        if issubclass(origin, Mapping):
            return "update"
        return "last"

    @cached_property
    def _adapter(self) -> TypeAdapter[Any] | None:
        if self.type is Any:
            return None
        return TypeAdapter(self.type)

    def check(self, path: str, value: Any) -> Any:
        """Validate a merged value against the declared type."""
        if self._adapter is None:
            return value
        try:
            return self._adapter.validate_python(value)
        except ValidationError as e:
            raise OptionTypeError(path, value, e.errors()[0]["msg"]) from e


def mk_option(
    type: Any = Any,
    default: Any = _MISSING,
    description: str | None = None,
    merge: MergeStrategy | None = None,
) -> Option:
    """
    Declare an option.

    Examples:
        {"options": {"groups": mk_option(list[str], default=[], description="Groups of the host.")}}
    """
    if merge is not None and merge not in typing.get_args(MergeStrategy):
        raise ValueError(f"Unknown merge strategy: {merge}")
    return Option(type=type, default=default, description=description, merge=merge)


@dataclass
class Module:
    """A fragment after evaluation."""

    source: str
    options: Mapping[str, Any] = field(default_factory=dict)
    config: Any = field(default_factory=dict)


@dataclass
class Definition:
    """One module's value for one path."""

    source: str
    value: Any
    priority: int = DEFAULT_PRIORITY


def _unwrap(value: Any, priority: int) -> tuple[Any, int, bool]:
    """Strip priority and condition wrappers. Returns (value, priority, present)."""
    while True:
        value = force(value)
        if isinstance(value, Override):
            priority = value.priority
            value = value.content
        elif isinstance(value, Conditional):
            if not force(value.condition):
                return None, priority, False
            value = value.content
        else:
            return value, priority, True


def _maybe_present(value: Any) -> bool:
    """Presence check that forces conditions but not the values themselves."""
    while isinstance(value, (Override, Conditional)):
        if isinstance(value, Conditional) and not force(value.condition):
            return False
        value = value.content
    return True


def _is_branch(value: Any) -> bool:
    return isinstance(value, Mapping)


def _dotted(path: Path) -> str:
    return ".".join(path) if path else "<root>"


def merge_values(path: str, strategy: MergeStrategy, definitions: list[Definition]) -> Any:
    """Merge the values of same-priority definitions, in module order."""
    values = [force_deep(d.value) for d in definitions]
    if strategy == "last":
        return values[-1]
    if strategy == "unique":
        first = definitions[0]
        for d, v in zip(definitions[1:], values[1:]):
            if v != values[0]:
                raise OptionConflict(
                    path, f"{values[0]!r} in {first.source} and {v!r} in {d.source}"
                )
        return values[0]
    if strategy == "concat":
        merged: list[Any] = []
        for d, v in zip(definitions, values):
            if not isinstance(v, (list, tuple)):
                raise OptionConflict(path, f"expected a list but {d.source} defines {v!r}")
            merged.extend(v)
        return merged
    if strategy == "union":
        result: set[Any] = set()
        for d, v in zip(definitions, values):
            if not isinstance(v, (Set, list, tuple)):
                raise OptionConflict(path, f"expected a set but {d.source} defines {v!r}")
            result.update(v)
        return result
    if strategy == "update":
        mapping: dict[Any, Any] = {}
        for d, v in zip(definitions, values):
            if not isinstance(v, Mapping):
                raise OptionConflict(path, f"expected a mapping but {d.source} defines {v!r}")
            mapping.update(v)
        return mapping
    raise ValueError(f"Unknown merge strategy: {strategy}")


def _freeform_strategy(path: str, definitions: list[Definition]) -> MergeStrategy:
    values = [force(d.value) for d in definitions]
    lists = [isinstance(v, (list, tuple)) for v in values]
    sets = [isinstance(v, Set) for v in values]
    if all(lists):
        return "concat"
    if all(sets):
        return "union"
    if any(lists) or any(sets):
        sources = ", ".join(d.source for d in definitions)
        raise OptionConflict(path, f"collections mixed with plain values (in {sources})")
    return "last"


def _best(definitions: list[Definition]) -> list[Definition]:
    if not definitions:
        return definitions
    priority = min(d.priority for d in definitions)
    return [d for d in definitions if d.priority == priority]


def _merge_declarations(
    target: dict[str, Any], incoming: Mapping[str, Any], path: Path, source: str
) -> None:
    for key, value in incoming.items():
        value = force(value)
        here = (*path, key)
        existing = target.get(key)
        if isinstance(value, Option):
            if existing is not None:
                raise OptionConflict(_dotted(here), "option is declared more than once")
            target[key] = value
        elif isinstance(value, Mapping):
            if isinstance(existing, Option):
                raise OptionConflict(_dotted(here), "declared both as an option and a set of options")
            branch = target.setdefault(key, {})
            _merge_declarations(branch, value, here, source)
        else:
            raise ModuleError(source, f"option `{_dotted(here)}` must be declared with mk_option")


class Configuration:
    """
    A lazily resolved configuration.

    Args:
        fragments: Fragments in application order
        special_args: Extra arguments available to computed fragments
        name: Label used in error messages and logs
    """

    def __init__(
        self,
        fragments: Sequence[Any],
        special_args: Mapping[str, Any] | None = None,
        name: str | None = None,
    ) -> None:
        self.fragments: list[Fragment] = [as_fragment(f) for f in fragments]
        self.special_args: dict[str, Any] = dict(special_args or {})
        self.name = name or "configuration"
        self._modules = Lazy(self._collect_modules, f"{self.name} (modules)")
        self._declarations = Lazy(self._collect_declarations, f"{self.name} (options)")
        self._values: dict[Path, Lazy[Any]] = {}
        self.config = ConfigView(self, ())

    @property
    def modules(self) -> list[Module]:
        return self._modules.force()

    @property
    def options(self) -> dict[str, Any]:
        """Nested mapping of every declared option."""
        return self._declarations.force()

    def extend(
        self,
        fragments: Sequence[Any],
        special_args: Mapping[str, Any] | None = None,
        name: str | None = None,
    ) -> Configuration:
        """
        Layer more fragments on top of this configuration.

        The result is a new configuration evaluated from this one's fragments
        followed by `fragments`, with `special_args` merged over the current
        ones. This configuration is left untouched.
        """
        return Configuration(
            [*self.fragments, *fragments],
            {**self.special_args, **(special_args or {})},
            name or self.name,
        )

    def _context(self) -> dict[str, Any]:
        return {**self.special_args, "config": self.config}

    def _collect_modules(self) -> list[Module]:
        context = self._context()
        modules: list[Module] = []
        for fragment in self.fragments:
            self._collect(fragment, context, modules)
        logger.debug("Collected %d modules for %s", len(modules), self.name)
        return modules

    def _collect(self, fragment: Fragment, context: Mapping[str, Any], out: list[Module]) -> None:
        value = force(evaluate_fragment(fragment, context))
        if not isinstance(value, Mapping):
            raise ModuleError(
                fragment.label, f"must evaluate to a mapping, not {type(value).__name__}"
            )
        # Imported modules apply before the module importing them.
        for imported in force(value.get("imports", [])):
            try:
                imported = as_fragment(imported)
            except TypeError as e:
                raise ModuleError(fragment.label, f"cannot import {imported!r}") from e
            self._collect(imported, context, out)

        if "options" in value or "config" in value:
            unknown = set(value) - {"imports", "options", "config"}
            if unknown:
                raise ModuleError(
                    fragment.label,
                    "unsupported keys next to options/config: " + ", ".join(sorted(unknown)),
                )
            options = force(value.get("options", {}))
            if not isinstance(options, Mapping):
                raise ModuleError(fragment.label, "options must be a mapping")
            out.append(Module(fragment.label, options, value.get("config", {})))
        else:
            config = {k: v for k, v in value.items() if k != "imports"}
            out.append(Module(fragment.label, {}, config))

    def _collect_declarations(self) -> dict[str, Any]:
        declarations: dict[str, Any] = {}
        for module in self.modules:
            _merge_declarations(declarations, module.options, (), module.source)
        return declarations

    def _declaration(self, path: Path) -> Any:
        node: Any = self.options
        for key in path:
            if not isinstance(node, Mapping) or key not in node:
                return None
            node = node[key]
        return node

    def definitions(self, path: Path) -> list[Definition]:
        """Every module's definition of `path`, in module order, unwrapped."""
        found: list[Definition] = []
        for module in self.modules:
            node, priority, present = _unwrap(module.config, DEFAULT_PRIORITY)
            for key in path:
                if not present or not isinstance(node, Mapping) or key not in node:
                    present = False
                    break
                node, priority, present = _unwrap(node[key], priority)
            if present:
                found.append(Definition(module.source, node, priority))
        return found

    def value(self, path: Path) -> Any:
        """The merged value of `path`, a `ConfigView` for sets of options."""
        entry = self._values.get(path)
        if entry is None:
            entry = Lazy(lambda: self._resolve(path), f"{self.name}: {_dotted(path)}")
            self._values[path] = entry
        return entry.force()

    def _resolve(self, path: Path) -> Any:
        dotted = _dotted(path)
        declaration = self._declaration(path)
        if isinstance(declaration, Option):
            return self._merge_option(dotted, declaration, self.definitions(path))

        definitions = self.definitions(path)
        if declaration is not None:
            if any(not _is_branch(d.value) for d in definitions):
                raise OptionConflict(dotted, "a set of options is defined as a plain value")
            return ConfigView(self, path)
        if not definitions:
            raise UndefinedOption(dotted)
        branches = [d for d in definitions if _is_branch(d.value)]
        if branches:
            if len(branches) != len(definitions):
                sources = ", ".join(d.source for d in definitions)
                raise OptionConflict(dotted, f"a set of options mixed with plain values (in {sources})")
            return ConfigView(self, path)

        best = _best(definitions)
        return merge_values(dotted, _freeform_strategy(dotted, best), best)

    def _merge_option(self, dotted: str, option: Option, definitions: list[Definition]) -> Any:
        best = _best(definitions)
        if best:
            value = merge_values(dotted, option.strategy, best)
        elif option.has_default:
            value = copy.deepcopy(force_deep(option.default))
        else:
            raise UndefinedOption(dotted)
        return option.check(dotted, value)

    def keys(self, path: Path) -> list[str]:
        """Names of the options directly below `path`."""
        names: dict[str, None] = {}
        declaration = self._declaration(path)
        if isinstance(declaration, Mapping):
            names.update(dict.fromkeys(declaration))
        for definition in self.definitions(path):
            if isinstance(definition.value, Mapping):
                for key, value in definition.value.items():
                    if _maybe_present(value):
                        names[key] = None
        return list(names)

    def has(self, path: Path) -> bool:
        """Whether `path` is declared or defined, without forcing its value."""
        if self._declaration(path) is not None:
            return True
        parent, key = path[:-1], path[-1]
        for definition in self.definitions(parent):
            value = definition.value
            if isinstance(value, Mapping) and key in value and _maybe_present(value[key]):
                return True
        return False

    def __repr__(self) -> str:
        return f"Configuration({self.name}, {len(self.fragments)} fragments)"


class ConfigView(Mapping[str, Any]):
    """
    Read access to a set of options of a configuration.

    Supports attribute access (`config.networking.hostName`) and item
    access for names that are not identifiers (`config.zones["example.com"]`)
    or that clash with mapping methods (`config["values"]`).
    """

    def __init__(self, configuration: Configuration, path: Path) -> None:
        self._configuration = configuration
        self._path = path

    def __getitem__(self, key: str) -> Any:
        return self._configuration.value((*self._path, key))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except UndefinedOption as e:
            raise AttributeError(str(e)) from e

    def __iter__(self) -> Iterator[str]:
        return iter(self._configuration.keys(self._path))

    def __len__(self) -> int:
        return len(self._configuration.keys(self._path))

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self._configuration.has((*self._path, key))

    def to_dict(self) -> dict[str, Any]:
        """Force every option below this view into plain containers."""
        result: dict[str, Any] = {}
        for key in self:
            value = self[key]
            result[key] = value.to_dict() if isinstance(value, ConfigView) else value
        return result

    def __repr__(self) -> str:
        return f"<ConfigView {_dotted(self._path)} of {self._configuration.name}>"


def evaluate(
    fragments: Sequence[Any],
    special_args: Mapping[str, Any] | None = None,
    name: str | None = None,
) -> Configuration:
    """Create a configuration from fragments. Evaluation happens on first read."""
    return Configuration(fragments, special_args, name)
