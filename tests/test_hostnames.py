"""Tests for hostnames module."""

import pytest

from avalanche.core.fragments import Computed, Static, evaluate_fragment
from avalanche.naming.hostnames import DEFAULT_WIDTH, gen_hostname, gen_hosts, gen_id, pad_left


class TestPadding:
    """Tests for zero padding."""

    def test_pad_left(self):
        """The pad is prepended until the width is reached."""
        assert pad_left("0", 3, "7") == "007"

    def test_pad_left_never_truncates(self):
        """Longer strings are returned unchanged."""
        assert pad_left("0", 3, "1234") == "1234"

    def test_pad_left_multichar_pad(self):
        """A multi-character pad may overshoot the width."""
        assert pad_left("ab", 4, "x") == "ababx"

    def test_pad_left_empty_pad(self):
        """An empty pad would never terminate."""
        with pytest.raises(ValueError):
            pad_left("", 3, "1")

    def test_gen_id(self):
        """Numbers are zero padded."""
        assert gen_id(3, 5) == "005"
        assert gen_id(1, 42) == "42"


class TestGenHostname:
    """Tests for numbered hostnames."""

    def test_default_width(self):
        """Two digits by default."""
        assert gen_hostname(DEFAULT_WIDTH, "lb", 1) == "lb01"

    def test_wide(self):
        """Wider suffixes are padded."""
        assert gen_hostname(2, "node", 20) == "node20"
        assert gen_hostname(5, "node", 20) == "node00020"

    def test_overflow(self):
        """Numbers longer than the width are kept whole."""
        assert gen_hostname(2, "node", 120) == "node120"


class TestGenHosts:
    """Tests for host generation."""

    def test_names_start_at_one(self):
        """Generated names are numbered from 1."""
        hosts = gen_hosts(2, {}, "lb", 2)
        assert list(hosts) == ["lb01", "lb02"]

    def test_id_starts_at_zero(self):
        """The injected id starts at 0."""
        hosts = gen_hosts(2, lambda id: {"node": {"id": id}}, "lb", 2)
        ids = [evaluate_fragment(f, {})["node"]["id"] for f in hosts.values()]
        assert ids == [0, 1]

    def test_id_overrides_context(self):
        """The injected id wins over an id from the context."""
        hosts = gen_hosts(2, lambda id: {"id": id}, "lb", 1)
        assert evaluate_fragment(hosts["lb01"], {"id": 99}) == {"id": 0}

    def test_static_fragment_shared(self):
        """Static fragments are used as is."""
        hosts = gen_hosts(2, {"role": "lb"}, "lb", 3)
        assert all(isinstance(f, Static) for f in hosts.values())
        assert evaluate_fragment(hosts["lb03"], {}) == {"role": "lb"}

    def test_computed_fragment(self):
        """Function fragments become computed fragments."""
        hosts = gen_hosts(2, lambda **_: {}, "lb", 1)
        assert isinstance(hosts["lb01"], Computed)

    def test_domain(self):
        """A domain is appended to every name."""
        hosts = gen_hosts(3, {}, "web", 2, domain="example.com")
        assert list(hosts) == ["web001.example.com", "web002.example.com"]

    def test_zero_count(self):
        """No hosts for a zero count."""
        assert gen_hosts(2, {}, "lb", 0) == {}
