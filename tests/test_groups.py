"""Tests for groups module."""

import pytest

from avalanche.core.errors import OptionConflict, UnknownGroup
from avalanche.core.groups import GROUP_MODULE, group_names, is_member, members_of
from avalanche.core.modules import evaluate


@pytest.fixture
def systems():
    """Configurations listing their groups."""
    return {
        "web01": evaluate([GROUP_MODULE, {"groups": ["web"]}], name="web01"),
        "web02": evaluate([GROUP_MODULE, {"groups": ["web", "monitoring"]}], name="web02"),
        "db01": evaluate([GROUP_MODULE], name="db01"),
    }


class TestGroupNames:
    """Tests for the group name table."""

    def test_identity(self):
        """Every name maps to itself."""
        names = group_names({"web": {}, "db": {}})
        assert dict(names) == {"web": "web", "db": "db"}

    def test_attribute_access(self):
        """Names are reachable as attributes."""
        names = group_names({"backend": {}})
        assert names.backend == "backend"

    def test_unknown_item(self):
        """Unknown names raise UnknownGroup."""
        names = group_names({"web": {}})
        with pytest.raises(UnknownGroup) as exc_info:
            names["db"]
        assert exc_info.value.group == "db"

    def test_unknown_attribute(self):
        """Unknown attributes raise UnknownGroup, which is an AttributeError."""
        names = group_names({"web": {}})
        with pytest.raises(UnknownGroup) as exc_info:
            names.db
        assert isinstance(exc_info.value, AttributeError)
        assert str(exc_info.value) == "Unknown group: db"

    def test_hasattr(self):
        """hasattr reports undeclared names as missing."""
        names = group_names({"web": {}})
        assert hasattr(names, "web")
        assert not hasattr(names, "db")


class TestGroupOption:
    """Tests for the groups option."""

    def test_default_empty(self):
        """Hosts are in no group by default."""
        assert evaluate([GROUP_MODULE]).config.groups == []

    def test_concatenates(self):
        """Group lists from several modules concatenate."""
        config = evaluate([GROUP_MODULE, {"groups": ["a"]}, {"groups": ["b"]}]).config
        assert config.groups == ["a", "b"]

    def test_must_be_list(self):
        """A single group name is not a list."""
        config = evaluate([GROUP_MODULE, {"groups": "web"}]).config
        with pytest.raises(OptionConflict):
            config.groups


class TestMembership:
    """Tests for membership queries."""

    def test_is_member(self, systems):
        """Membership follows the groups option."""
        assert is_member(systems["web02"], "monitoring")
        assert not is_member(systems["db01"], "web")

    def test_members_of(self, systems):
        """Members are returned in system order."""
        assert list(members_of(systems, "web")) == ["web01", "web02"]
        assert members_of(systems, "db") == {}
