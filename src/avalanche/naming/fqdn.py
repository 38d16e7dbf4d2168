"""Fully-qualified domain name helpers."""

from __future__ import annotations

from dataclasses import dataclass

from avalanche.core.errors import EmptyFqdn


@dataclass(frozen=True)
class FqdnInfo:
    """
    Labels of a parsed name.

    The hostname is the first label; the domain is everything after it,
    or None when the name has a single label.
    """

    labels: list[str]
    hostname: str
    domain: str | None = None


def split(name: str) -> list[str]:
    """Split a dotted name into its labels, dropping empty ones."""
    return [label for label in name.split(".") if label]


def join(labels: list[str]) -> str:
    """Join labels back into a dotted name."""
    return ".".join(labels)


def parse(fqdn: str) -> FqdnInfo:
    """
    Parse a dotted name into hostname and domain.

    Examples:
        parse("host1.example.com")
        # FqdnInfo(labels=["host1", "example", "com"], hostname="host1", domain="example.com")
    """
    labels = split(fqdn)
    if not labels:
        raise EmptyFqdn(fqdn)
    domain = join(labels[1:]) if len(labels) > 1 else None
    return FqdnInfo(labels=labels, hostname=labels[0], domain=domain)


def append_domain(name: str, domain: str) -> str:
    """Append the labels of `domain` to those of `name`."""
    return join(split(name) + split(domain))


def set_domain(fqdn: str, domain: str) -> str:
    """Replace everything after the first label of `fqdn` with `domain`."""
    return append_domain(parse(fqdn).hostname, domain)
