# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Observable properties - schema collection and accessor descriptors.

A control class declares its observable properties as plain class
attributes holding a primitive default::

    class Room(Control):
        doors = 1
        windows = 0
        label = ''
        tags = []

When the class is created, ``collect_observables()`` replaces every such
attribute with an ``ObservableProperty`` descriptor. The descriptor keeps
the declared default and routes reads and writes through the owning
control's property registry, where access control and change
notification are applied.

Observable values are ``bool``, ``int``, ``float``, ``str`` and sequences
(``list``/``tuple``, stored as ``list``). Names starting with ``_`` are
internal and never observable.
"""

from __future__ import annotations

import copy
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .control import Control

OBSERVABLE_TYPES = (bool, int, float, str, list, tuple)

_TRUE_STRINGS = frozenset(('true',))
_FALSE_STRINGS = frozenset(('false',))


def is_observable(name: str, value: Any) -> bool:
    """True if a class attribute should become an observable property."""
    return not name.startswith('_') and isinstance(value, OBSERVABLE_TYPES)


class ObservableProperty:
    """Descriptor exposing one entry of a control's property registry.

    Attributes:
        name: Property name, set by ``__set_name__``.
        default: Declared default value (tuples are stored as lists).
        kind: Python type of the default, used by ``coerce()``.

    Example:
        >>> Room.doors
        ObservableProperty('doors', default=1)
        >>> room.doors = 2        # setter channel, notifies parent
    """

    __slots__ = ('name', 'default', 'kind')

    def __init__(self, default: Any, name: str = '') -> None:
        if isinstance(default, tuple):
            default = list(default)
        self.name = name
        self.default = default
        self.kind = type(default)

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"ObservableProperty({self.name!r}, default={self.default!r})"

    def __get__(self, instance: Control | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance._read_property(self.name)

    def __set__(self, instance: Control, value: Any) -> None:
        instance._write_property(self.name, value, notify=True)

    def initial_value(self) -> Any:
        """Return a fresh copy of the default for a new registry."""
        return copy.copy(self.default)

    def coerce(self, value: Any) -> Any:
        """Coerce an incoming declarative value towards the declared type.

        ``None`` becomes its string form so a property never collapses to
        an undefined state. Values that cannot be converted are returned
        unchanged.
        """
        if value is None:
            return str(value)

        kind = self.kind
        if kind is bool:
            if isinstance(value, str):
                lowered = value.strip().lower()
                if lowered in _TRUE_STRINGS:
                    return True
                if lowered in _FALSE_STRINGS:
                    return False
            return value
        if kind in (int, float) and isinstance(value, str):
            try:
                return kind(value)
            except ValueError:
                return value
        if kind is list and isinstance(value, tuple):
            return list(value)
        return value


def collect_observables(
    cls: type, reserved: frozenset[str] = frozenset()
) -> dict[str, ObservableProperty]:
    """Build the observable schema of a control class.

    Starts from the schema inherited from the nearest base class, then
    converts the primitive attributes declared directly on ``cls`` into
    descriptors. An inherited property redefined as a non-observable
    attribute (e.g. a method) is dropped from the schema.

    Args:
        cls: The class being created (called from ``__init_subclass__``).
        reserved: Names owned by the base machinery, never observable.

    Returns:
        Ordered dict mapping property name to its descriptor.
    """
    schema: dict[str, ObservableProperty] = {}
    for base in cls.__mro__[1:]:
        inherited = base.__dict__.get('_observables')
        if inherited is not None:
            schema.update(inherited)
            break

    for name, value in list(cls.__dict__.items()):
        if name in reserved:
            continue
        if isinstance(value, ObservableProperty):
            schema[name] = value
        elif is_observable(name, value):
            prop = ObservableProperty(value, name)
            setattr(cls, name, prop)
            schema[name] = prop
        elif name in schema:
            del schema[name]

    return schema
