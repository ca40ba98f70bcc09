"""Controller registry.

Maps the opaque controller ids used in the route table (``"api.mail"``)
to controller classes. Ids can be registered with a class or a lazy
``"module:Class"`` import string; an id that was never registered is
itself tried as an import string, so a config file can point straight
at ``"myapp.controllers:ReportController"``.
"""

import importlib
from collections.abc import Callable, Mapping
from typing import Any

from getmail.errors import ConfigurationError

type ControllerFactory = Callable[..., Any]


def import_string(target: str) -> Any:
    """Import ``"package.module:Attribute"`` and return the attribute.

    Raises ``ConfigurationError`` if the module or attribute is missing.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        msg = f"Cannot import {target!r}: expected 'module:attribute'."
        raise ConfigurationError(msg)
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Cannot import module {module_name!r} for {target!r}: {exc}"
        raise ConfigurationError(msg) from exc
    try:
        return getattr(module, attr)
    except AttributeError:
        msg = f"Module {module_name!r} has no attribute {attr!r}."
        raise ConfigurationError(msg) from None


class ControllerRegistry:
    """Resolves controller ids to controller factories.

    A factory is called as ``factory(config, dispatcher)`` and returns
    the controller instance for one dispatch.
    """

    __slots__ = ("_entries", "_resolved")

    def __init__(self, entries: Mapping[str, ControllerFactory | str] | None = None) -> None:
        self._entries: dict[str, ControllerFactory | str] = dict(entries or {})
        self._resolved: dict[str, ControllerFactory] = {}

    def register(self, controller_id: str, factory: ControllerFactory | str) -> None:
        """Register *factory* (a class, callable, or import string) under *controller_id*."""
        self._entries[controller_id] = factory
        self._resolved.pop(controller_id, None)

    def __contains__(self, controller_id: object) -> bool:
        return controller_id in self._entries

    def ids(self) -> list[str]:
        return sorted(self._entries)

    def resolve(self, controller_id: str) -> ControllerFactory:
        """Return the factory for *controller_id*.

        Registered ids win. Unregistered ids containing ``:`` are
        imported. Anything else raises ``ConfigurationError``.
        """
        cached = self._resolved.get(controller_id)
        if cached is not None:
            return cached

        entry = self._entries.get(controller_id)
        if entry is None:
            if ":" not in controller_id:
                msg = f"Unknown controller {controller_id!r}."
                raise ConfigurationError(msg)
            entry = controller_id
        factory = import_string(entry) if isinstance(entry, str) else entry
        if not callable(factory):
            msg = f"Controller {controller_id!r} does not resolve to a callable."
            raise ConfigurationError(msg)

        self._resolved[controller_id] = factory
        return factory
