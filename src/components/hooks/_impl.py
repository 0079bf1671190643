"""
HookRegistry - priority-ordered action and filter hooks.

Callbacks run in ascending priority, ties in registration order. A callback
that raises is logged with its traceback and the chain moves on; one-shot
callbacks are dropped after their first run.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10

Unsubscribe = Callable[[], None]


class _Bail:
    """Return from a filter to stop the chain and keep the current value."""

    _instance: _Bail | None = None

    def __new__(cls) -> _Bail:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "BAIL"


BAIL = _Bail()


@dataclass(frozen=True)
class _Handler:
    id: int
    callback: Callable[..., Any]
    priority: int
    once: bool


class _HookBag:
    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._hooks: dict[str, list[_Handler]] = {}
        self._ids = itertools.count(1)

    def add(
        self, name: str, callback: Callable[..., Any], priority: int, once: bool
    ) -> Unsubscribe:
        if not callable(callback):
            raise TypeError(f"{self.kind} '{name}': callback must be callable")
        handler = _Handler(next(self._ids), callback, int(priority), once)
        handlers = self._hooks.setdefault(name, [])
        handlers.append(handler)
        handlers.sort(key=lambda h: (h.priority, h.id))
        return lambda: self.remove_by_id(name, handler.id)

    def remove(self, name: str, callback: Callable[..., Any]) -> None:
        if name in self._hooks:
            self._hooks[name] = [h for h in self._hooks[name] if h.callback is not callback]

    def remove_by_id(self, name: str, handler_id: int) -> None:
        if name in self._hooks:
            self._hooks[name] = [h for h in self._hooks[name] if h.id != handler_id]

    def remove_all(self, name: str | None = None) -> None:
        if name is None:
            self._hooks.clear()
        else:
            self._hooks.pop(name, None)

    def listeners(self, name: str) -> list[_Handler]:
        # Snapshot so callbacks may (un)register during dispatch
        return list(self._hooks.get(name, ()))


class HookRegistry:
    """
    Explicit registry passed to the services that fire hooks.

    Actions are fire-and-forget notifications; filters thread a value through
    each callback. A filter returning ``None`` leaves the value unchanged and
    returning ``BAIL`` ends the chain.
    """

    def __init__(self) -> None:
        self._actions = _HookBag("action")
        self._filters = _HookBag("filter")

    # --- actions ---

    def add_action(
        self,
        name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
        once: bool = False,
    ) -> Unsubscribe:
        return self._actions.add(name, callback, priority, once)

    def remove_action(self, name: str, callback: Callable[..., Any]) -> None:
        self._actions.remove(name, callback)

    def do_action(self, name: str, *args: Any, **kwargs: Any) -> None:
        for handler in self._actions.listeners(name):
            try:
                handler.callback(*args, **kwargs)
            except Exception:
                logger.exception("Error in action '%s'", name)
            if handler.once:
                self._actions.remove_by_id(name, handler.id)

    # --- filters ---

    def add_filter(
        self,
        name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
        once: bool = False,
    ) -> Unsubscribe:
        return self._filters.add(name, callback, priority, once)

    def remove_filter(self, name: str, callback: Callable[..., Any]) -> None:
        self._filters.remove(name, callback)

    def apply_filters(self, name: str, value: Any, *args: Any, **kwargs: Any) -> Any:
        out = value
        for handler in self._filters.listeners(name):
            try:
                result = handler.callback(out, *args, **kwargs)
            except Exception:
                logger.exception("Error in filter '%s'", name)
                result = None
            if handler.once:
                self._filters.remove_by_id(name, handler.id)
            if result is BAIL:
                break
            if result is not None:
                out = result
        return out

    # --- housekeeping ---

    def remove_all(self, name: str | None = None) -> None:
        """Drop actions and filters for ``name``, or everything when omitted."""
        self._actions.remove_all(name)
        self._filters.remove_all(name)

    def has_action(self, name: str) -> bool:
        return bool(self._actions.listeners(name))

    def has_filter(self, name: str) -> bool:
        return bool(self._filters.listeners(name))
