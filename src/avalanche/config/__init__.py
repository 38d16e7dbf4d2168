"""Runtime configuration: logging setup and inventory loading."""

from avalanche.config.loader import InventoryLoadError, load_inventory
from avalanche.config.logging import configure_logging

__all__ = ["InventoryLoadError", "load_inventory", "configure_logging"]
