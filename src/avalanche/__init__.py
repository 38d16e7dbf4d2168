"""
Avalanche - per-host configurations from declarative hosts and groups.

This package provides tools for:
- Declaring hosts and the groups they belong to
- Writing group fragments that are layered onto every member's configuration
- Reading the final configuration of other hosts and group members lazily
- Generating numbered hostnames and manipulating FQDNs
"""

__version__ = "0.1.0"

from avalanche.core.errors import AvalancheError
from avalanche.core.inventory import Inventory, mk_inventory
from avalanche.core.lazy import lazy
from avalanche.core.modules import mk_default, mk_force, mk_if, mk_option, mk_override
from avalanche.naming.hostnames import gen_hosts

__all__ = [
    "__version__",
    "AvalancheError",
    "Inventory",
    "mk_inventory",
    "lazy",
    "mk_default",
    "mk_force",
    "mk_if",
    "mk_option",
    "mk_override",
    "gen_hosts",
]
