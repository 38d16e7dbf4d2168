"""Loading inventories from Python files."""

from __future__ import annotations

import importlib.machinery
import importlib.util
import logging
import uuid
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType

from pydantic import ValidationError

from avalanche.core.errors import AvalancheError
from avalanche.core.inventory import Inventory, mk_inventory

logger = logging.getLogger(__name__)

INVENTORY_ATTRIBUTE = "inventory"


class InventoryLoadError(AvalancheError):
    """Raised when an inventory file cannot be loaded."""

    pass


def load_py_module(path: Path) -> ModuleType:
    """
    Load a module from the given file under a unique module name.

    Loading the same file twice yields distinct module instances.
    """
    module_name = f"{path.stem}__inventory__{uuid.uuid4().hex}"
    loader = importlib.machinery.SourceFileLoader(module_name, str(path))
    spec = importlib.util.spec_from_loader(loader.name, loader)
    if spec is None:
        raise InventoryLoadError(f"Failed to load module from file: {path}")
    module = importlib.util.module_from_spec(spec)
    try:
        loader.exec_module(module)
    except AvalancheError:
        raise
    except Exception as e:
        raise InventoryLoadError(f"Failed to execute {path}: {type(e).__name__}: {e}") from e
    return module


def load_inventory(path: str | Path) -> Inventory:
    """
    Load an inventory from a Python file.

    The file must define `inventory`, either an `Inventory` (the result of
    `mk_inventory`) or a mapping of `mk_inventory` keyword arguments.
    """
    path = Path(path)
    if not path.is_file():
        raise InventoryLoadError(f"Inventory not found: {path}")

    module = load_py_module(path)
    if not hasattr(module, INVENTORY_ATTRIBUTE):
        raise InventoryLoadError(f"Inventory file must define `{INVENTORY_ATTRIBUTE}`: {path}")

    value = getattr(module, INVENTORY_ATTRIBUTE)
    if isinstance(value, Inventory):
        inventory = value
    elif isinstance(value, Mapping):
        try:
            inventory = mk_inventory(**value)
        except ValidationError as e:
            raise InventoryLoadError(f"Invalid inventory in {path}:\n{e}") from e
    else:
        raise InventoryLoadError(
            f"`{INVENTORY_ATTRIBUTE}` must be an Inventory or a mapping, not {type(value).__name__}"
        )
    logger.debug("Loaded inventory %s with %d hosts", path, len(inventory))
    return inventory
