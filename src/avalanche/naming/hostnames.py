"""Sequential hostname generation."""

from __future__ import annotations

from typing import Any

from avalanche.core.fragments import Fragment, as_fragment, inject_special
from avalanche.naming.fqdn import set_domain

DEFAULT_WIDTH = 2


def pad_left(pad: str, width: int, s: str) -> str:
    """Prepend `pad` until `s` is at least `width` characters long. Never truncates."""
    if not pad:
        raise ValueError("Padding string must not be empty")
    while len(s) < width:
        s = pad + s
    return s


def gen_id(width: int, n: int) -> str:
    return pad_left("0", width, str(n))


def gen_hostname(width: int, prefix: str, index: int) -> str:
    """
    Build a numbered hostname.

    Examples:
        gen_hostname(2, "lb", 1)       # "lb01"
        gen_hostname(5, "node", 20)    # "node00020"
    """
    return prefix + gen_id(width, index)


def gen_hosts(
    width: int,
    fragment: Any,
    prefix: str,
    count: int,
    *,
    domain: str | None = None,
) -> dict[str, Fragment]:
    """
    Generate `count` hosts sharing one fragment.

    Names are numbered from 1 (`lb01`, `lb02`, ...) while the `id` special
    argument injected into each copy of the fragment starts at 0.

    Args:
        width: Minimum number of digits of the numeric suffix
        fragment: Fragment shared by every generated host
        prefix: Hostname prefix
        count: Number of hosts
        domain: Optional domain appended to every generated name
    """
    fragment = as_fragment(fragment)
    hosts: dict[str, Fragment] = {}
    for index in range(1, count + 1):
        name = gen_hostname(width, prefix, index)
        if domain:
            name = set_domain(name, domain)
        hosts[name] = inject_special({"id": index - 1}, fragment)
    return hosts
