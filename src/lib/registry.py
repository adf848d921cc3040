"""
Handler registry for layout directives

Maps directive names to Registration records. Built-in directives and
site-specific ones are added through the same add() call.
"""

from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from ..models.directives import (
    DirectiveKind,
    Handler,
    Registration,
    name_isValid,
    reserved_is,
)


class DirectiveNameError(ValueError):
    """Raised when a registration is rejected (bad name, handler or options)"""
    pass


Options = Union[Mapping[str, Any], Callable[..., str], None]


class HandlerRegistry:
    """
    Ordered registry of directive handlers

    Registrations keep the position of their first insertion; adding a name
    a second time replaces the record in place (last write wins).
    """

    def __init__(self, default_priority: int = 100) -> None:
        """
        Args:
            default_priority: Priority used when options do not give one
        """
        self.registrations: Dict[str, Registration] = {}
        self.default_priority = default_priority

    def add(self, name: str, options: Options = None, handler: Optional[Handler] = None) -> Registration:
        """
        Register (or overwrite) a directive handler

        Args:
            name: Directive name as written after ``::``
            options: Mapping with optional ``type`` ("inline", "block" or
                     "both", default "block") and ``priority`` (default 100).
                     May be the handler itself when no options are needed.
            handler: Function (DirectiveMatch) -> str

        Returns:
            The stored Registration

        Raises:
            DirectiveNameError: If the name is malformed or reserved, the
                                handler is not callable, or options are invalid

        Example:
            registry.add("highlight", {"type": "inline"}, lambda m: f"<mark>{m.value}</mark>")
            registry.add("note", lambda m: f"<aside>{m.content}</aside>")
        """
        if callable(options) and handler is None:
            handler, options = options, None

        if not name_isValid(name):
            raise DirectiveNameError(
                f"Invalid directive name {name!r}: expected [A-Za-z_][\\w-]*"
            )
        if reserved_is(name):
            raise DirectiveNameError(f"Directive name '::{name}' is reserved")
        if not callable(handler):
            raise DirectiveNameError(f"Handler for '::{name}' must be callable")

        options = dict(options or {})
        kind_value = options.get("type", DirectiveKind.BLOCK)
        try:
            kind = kind_value if isinstance(kind_value, DirectiveKind) else DirectiveKind(str(kind_value).lower())
        except ValueError:
            raise DirectiveNameError(
                f"Unknown type {kind_value!r} for '::{name}' (use inline, block or both)"
            ) from None

        priority = options.get("priority", self.default_priority)
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise DirectiveNameError(f"Priority for '::{name}' must be an integer, got {priority!r}")

        registration = Registration(name=name, kind=kind, priority=priority, handler=handler)
        self.registrations[name] = registration
        return registration

    def get(self, name: str) -> Optional[Registration]:
        """Get the registration for a directive name, if any"""
        return self.registrations.get(name)

    def entries(self) -> List[Registration]:
        """All registrations in insertion order"""
        return list(self.registrations.values())

    def entries_sorted(self) -> List[Registration]:
        """
        All registrations by ascending priority

        Ties keep insertion order (sorted() is stable), which built-ins rely
        on: ``cards`` is registered before ``card`` at the same priority.
        """
        return sorted(self.registrations.values(), key=lambda registration: registration.priority)

    def names(self) -> List[str]:
        """Registered directive names in insertion order"""
        return list(self.registrations)

    def __contains__(self, name: object) -> bool:
        return name in self.registrations

    def __len__(self) -> int:
        return len(self.registrations)

    def __iter__(self) -> Iterator[Registration]:
        return iter(self.entries())
