"""
Handler registry tests

Tests registration options, validation and ordering.
"""

import pytest

from layoutsyntax.lib.registry import HandlerRegistry, DirectiveNameError
from layoutsyntax.models.directives import DirectiveKind


def echo(match):
    return match.raw


class TestAdd:
    """Test registration defaults and options"""

    def test_defaults(self):
        """Block form and priority 100 by default"""
        registry = HandlerRegistry()
        registration = registry.add("hero", {}, echo)

        assert registration.kind is DirectiveKind.BLOCK
        assert registration.priority == 100
        assert registration.handler is echo

    def test_handler_as_options(self):
        """Handler may be passed in place of options"""
        registry = HandlerRegistry()
        registration = registry.add("hero", echo)

        assert registration.handler is echo
        assert registration.kind is DirectiveKind.BLOCK

    def test_type_and_priority(self):
        """Explicit type and priority"""
        registry = HandlerRegistry()
        registration = registry.add("mark", {"type": "inline", "priority": 5}, echo)

        assert registration.kind is DirectiveKind.INLINE
        assert registration.priority == 5

    def test_type_enum_and_both(self):
        """DirectiveKind values and 'both' are accepted"""
        registry = HandlerRegistry()
        assert registry.add("a", {"type": DirectiveKind.INLINE}, echo).kind is DirectiveKind.INLINE
        both = registry.add("b", {"type": "BOTH"}, echo)
        assert both.kind.inline and both.kind.block

    def test_custom_default_priority(self):
        """Registry default priority applies when options omit one"""
        registry = HandlerRegistry(default_priority=42)
        assert registry.add("x", echo).priority == 42

    def test_overwrite_keeps_position(self):
        """Re-adding a name replaces it in place"""
        registry = HandlerRegistry()
        registry.add("first", echo)
        registry.add("second", echo)

        def other(match):
            return ""

        registry.add("first", {"priority": 1}, other)

        assert registry.names() == ["first", "second"]
        assert registry.get("first").handler is other
        assert len(registry) == 2


class TestValidation:
    """Test rejected registrations"""

    @pytest.mark.parametrize("name", ["", "9lives", "has space", "::hero", "a.b"])
    def test_bad_names(self, name):
        """Malformed names are rejected"""
        with pytest.raises(DirectiveNameError):
            HandlerRegistry().add(name, echo)

    def test_reserved_end(self):
        """::end cannot be registered"""
        with pytest.raises(DirectiveNameError, match="reserved"):
            HandlerRegistry().add("end", echo)

    def test_handler_required(self):
        """Missing or non-callable handler"""
        with pytest.raises(DirectiveNameError):
            HandlerRegistry().add("hero", {})
        with pytest.raises(DirectiveNameError):
            HandlerRegistry().add("hero", {}, "not callable")

    def test_unknown_type(self):
        """Type must be inline, block or both"""
        with pytest.raises(DirectiveNameError):
            HandlerRegistry().add("hero", {"type": "paragraph"}, echo)

    def test_priority_must_be_int(self):
        """Non-integer priorities are rejected"""
        with pytest.raises(DirectiveNameError):
            HandlerRegistry().add("hero", {"priority": "high"}, echo)
        with pytest.raises(DirectiveNameError):
            HandlerRegistry().add("hero", {"priority": True}, echo)

    def test_error_is_value_error(self):
        """DirectiveNameError can be caught as ValueError"""
        with pytest.raises(ValueError):
            HandlerRegistry().add("end", echo)


class TestOrdering:
    """Test priority ordering"""

    def test_sorted_by_priority(self):
        """Lower priority first"""
        registry = HandlerRegistry()
        registry.add("late", {"priority": 200}, echo)
        registry.add("early", {"priority": 10}, echo)
        registry.add("middle", echo)

        assert [r.name for r in registry.entries_sorted()] == ["early", "middle", "late"]

    def test_ties_keep_insertion_order(self):
        """Equal priorities keep registration order"""
        registry = HandlerRegistry()
        for name in ("cards", "card", "columns"):
            registry.add(name, echo)

        assert [r.name for r in registry.entries_sorted()] == ["cards", "card", "columns"]

    def test_container_protocol(self):
        """Membership and iteration"""
        registry = HandlerRegistry()
        registry.add("hero", echo)

        assert "hero" in registry
        assert "card" not in registry
        assert [r.name for r in registry] == ["hero"]
        assert registry.get("card") is None
