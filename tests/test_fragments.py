"""Tests for fragments module."""

import pytest

from avalanche.core.errors import MissingArgument
from avalanche.core.fragments import (
    Computed,
    Static,
    as_fragment,
    call_with_context,
    evaluate_fragment,
    inject_special,
)


class TestAsFragment:
    """Tests for fragment coercion."""

    def test_mapping_is_static(self):
        """Mappings become static fragments."""
        fragment = as_fragment({"a": 1}, name="h")
        assert fragment == Static({"a": 1}, "h")

    def test_callable_is_computed(self):
        """Functions become computed fragments."""

        def web(groups):
            return {}

        fragment = as_fragment(web)
        assert isinstance(fragment, Computed)
        assert fragment.label.endswith("web")

    def test_fragments_pass_through(self):
        """Existing fragments are returned unchanged."""
        fragment = Static({})
        assert as_fragment(fragment) is fragment

    def test_invalid(self):
        """Other values are rejected."""
        with pytest.raises(TypeError):
            as_fragment(42)


class TestInjectSpecial:
    """Tests for special argument injection."""

    def test_static_unchanged(self):
        """Static fragments ignore injected arguments."""
        fragment = Static({"a": 1})
        assert inject_special({"id": 0}, fragment) is fragment

    def test_injected_overrides_context(self):
        """Injected arguments win over the context."""
        fragment = inject_special({"x": "injected"}, lambda x: {"x": x})
        assert evaluate_fragment(fragment, {"x": "context"}) == {"x": "injected"}

    def test_innermost_wins(self):
        """When nested, the innermost injection wins."""
        inner = inject_special({"x": "inner", "y": "inner"}, lambda x, y: {"x": x, "y": y})
        outer = inject_special({"x": "outer", "z": "outer"}, inner)
        assert evaluate_fragment(outer, {}) == {"x": "inner", "y": "inner"}
        assert outer.extra_args == {"x": "inner", "y": "inner", "z": "outer"}

    def test_keeps_name(self):
        """The fragment name survives injection."""
        fragment = inject_special({"id": 1}, Computed(lambda id: {}, name="lb01"))
        assert fragment.name == "lb01"


class TestCallWithContext:
    """Tests for the fragment calling convention."""

    def test_named_parameters_only(self):
        """Functions receive exactly the arguments they name."""
        assert call_with_context(lambda a: a, {"a": 1, "b": 2}, "f") == 1

    def test_var_keyword_receives_everything(self):
        """A `**kwargs` parameter receives the whole context."""
        assert call_with_context(lambda **kw: kw, {"a": 1, "b": 2}, "f") == {"a": 1, "b": 2}

    def test_named_and_var_keyword(self):
        """Named parameters and `**kwargs` can be combined."""
        result = call_with_context(lambda a, **rest: (a, rest), {"a": 1, "b": 2}, "f")
        assert result == (1, {"b": 2})

    def test_default_used_when_missing(self):
        """Parameters with defaults are optional."""
        assert call_with_context(lambda a, b=5: a + b, {"a": 1}, "f") == 6

    def test_missing_argument(self):
        """A required parameter missing from the context is an error."""
        with pytest.raises(MissingArgument) as exc_info:
            call_with_context(lambda missing: missing, {}, "web")
        assert exc_info.value.name == "missing"
        assert "web" in str(exc_info.value)

    def test_no_parameters(self):
        """Functions without parameters are called without arguments."""
        assert call_with_context(lambda: {"a": 1}, {"b": 2}, "f") == {"a": 1}
