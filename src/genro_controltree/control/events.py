# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Event channel for controls.

Every control is its own publish/subscribe hub. Listeners are plain
callables keyed by event name; they are invoked synchronously, in
registration order, as ``listener(data)`` or ``listener(data, meta)``
when metadata travels with the event.

Emission scopes:
    - ``local``: only this control (default)
    - ``bubble``: this control and every ancestor up to the root
    - ``top``: only the root control
    - ``local_top``: this control and the root control

Example:
    >>> room.on('doors', lambda value: print('doors:', value))
    >>> room.emit('ping', 'hello', scope='bubble')
"""

from __future__ import annotations

from typing import Any, Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from .core import Control

Listener = Callable[..., Any]

LOCAL = 'local'
BUBBLE = 'bubble'
TOP = 'top'
LOCAL_TOP = 'local_top'

SCOPES = (LOCAL, BUBBLE, TOP, LOCAL_TOP)

REMOVE_EVENT = 'remove'


class _Registration:
    """One listener registration, with its optional caller hook."""

    __slots__ = ('callback', 'once', 'caller', 'hook')

    def __init__(self, callback: Listener, once: bool) -> None:
        self.callback = callback
        self.once = once
        self.caller: Control | None = None
        self.hook: Listener | None = None

    def release(self) -> None:
        """Drop the ``remove`` hook installed on the caller, if any."""
        caller, hook = self.caller, self.hook
        self.caller = self.hook = None
        if caller is not None:
            caller.off(REMOVE_EVENT, hook)


class EventMixin:
    """Listener registry and scoped emission.

    The host class must provide ``_listeners`` (dict), ``_parent``,
    ``_root``, ``_properties`` and ``_read_property()``.
    """

    _listeners: dict[str, list[_Registration]]
    _parent: Control | None
    _root: Control | None

    def on(
        self,
        event: str,
        listener: Listener,
        *,
        immediate: bool = False,
        caller: Control | None = None,
    ) -> Listener:
        """Register a persistent listener.

        Args:
            event: Event name.
            listener: Callable invoked on each emission.
            immediate: If True and ``event`` names an observable property
                with a readable value, call the listener right away with
                the current value.
            caller: Control that owns the listener. When the caller fires
                ``remove``, the listener is unregistered automatically.

        Returns:
            The listener, so it can be kept for a later ``off()``.
        """
        self._register(event, listener, False, caller)

        if immediate and event in self._properties:
            value = self._read_property(event)
            if value is not None:
                listener(value)

        return listener

    def once(
        self,
        event: str,
        listener: Listener,
        *,
        caller: Control | None = None,
    ) -> Listener:
        """Register a listener that fires at most once."""
        self._register(event, listener, True, caller)
        return listener

    def off(self, event: str, listener: Listener) -> None:
        """Unregister the first registration of ``listener`` for ``event``.

        Unknown events or listeners are ignored.
        """
        for registration in self._listeners.get(event, ()):
            if registration.callback is listener:
                self._unregister(event, registration)
                break

    def remove_all_listeners(self, event: str | None = None) -> None:
        """Unregister every listener, or only those of one event."""
        if event is None:
            registrations = [r for regs in self._listeners.values() for r in regs]
            self._listeners.clear()
        else:
            registrations = self._listeners.pop(event, [])
        for registration in registrations:
            registration.release()

    def listeners(self, event: str) -> list[Listener]:
        """Return the listeners registered for an event."""
        return [r.callback for r in self._listeners.get(event, ())]

    def emit(
        self,
        event: str,
        data: Any = None,
        scope: str = LOCAL,
        meta: Any = None,
    ) -> None:
        """Emit an event with the given scope.

        Args:
            event: Event name.
            data: Payload passed as first listener argument.
            scope: One of 'local', 'bubble', 'top', 'local_top'.
            meta: Optional metadata passed as second listener argument.

        Raises:
            ValueError: If scope is unknown.
        """
        if scope not in SCOPES:
            raise ValueError(
                f"Invalid scope '{scope}'. Valid scopes: {', '.join(SCOPES)}"
            )

        if scope in (LOCAL, LOCAL_TOP, BUBBLE):
            self._dispatch(event, data, meta)

        if scope == BUBBLE and self._parent is not None:
            self._parent.emit(event, data, scope, meta)

        if scope in (TOP, LOCAL_TOP):
            root = self._root
            # local_top on the root itself dispatches once
            if root is not None and not (scope == LOCAL_TOP and root is self):
                root._dispatch(event, data, meta)

    def _dispatch(self, event: str, data: Any, meta: Any) -> bool:
        """Call the local listeners of an event. Return True if any ran."""
        registrations = self._listeners.get(event)
        if not registrations:
            return False

        for registration in list(registrations):
            if registration.once:
                if registration not in self._listeners.get(event, ()):
                    continue
                self._unregister(event, registration)
            if meta is None:
                registration.callback(data)
            else:
                registration.callback(data, meta)
        return True

    def _register(
        self, event: str, listener: Listener, once: bool, caller: Control | None
    ) -> None:
        registration = _Registration(listener, once)
        self._listeners.setdefault(event, []).append(registration)
        if caller is not None and callable(getattr(caller, 'on', None)):
            # unregister when the caller is removed
            registration.caller = caller
            registration.hook = caller.on(
                REMOVE_EVENT, lambda *_: self._unregister(event, registration)
            )

    def _unregister(self, event: str, registration: _Registration) -> None:
        """Remove one registration and release its caller hook."""
        registrations = self._listeners.get(event)
        if registrations is not None:
            for i, current in enumerate(registrations):
                if current is registration:
                    del registrations[i]
                    break
            if not registrations:
                del self._listeners[event]
        registration.release()
