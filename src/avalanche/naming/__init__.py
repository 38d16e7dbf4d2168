"""Naming helpers: FQDN manipulation and numbered hostnames."""

from avalanche.naming.fqdn import FqdnInfo, append_domain, join, parse, set_domain, split
from avalanche.naming.hostnames import DEFAULT_WIDTH, gen_hostname, gen_hosts, gen_id, pad_left

__all__ = [
    "DEFAULT_WIDTH",
    "FqdnInfo",
    "append_domain",
    "join",
    "parse",
    "set_domain",
    "split",
    "gen_hostname",
    "gen_hosts",
    "gen_id",
    "pad_left",
]
