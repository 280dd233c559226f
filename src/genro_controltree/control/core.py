# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Control - a node of the reactive control tree.

A control holds a fixed set of observable properties (declared on its
class, see ``properties``) and a mapping of named child controls. The
tree is built and updated from plain nested dicts::

    root.set_data({
        'house1': {
            'typeName': 'house',
            'streetNumber': 12,
            'room1': {'typeName': 'room', 'windows': 2},
        }
    })
    root.get_data()
    # {'house1': {'streetNumber': 12, 'room1': {'doors': 1, 'windows': 2}}}

Key Features:
    - **Declarative mutation**: ``set_data()`` updates properties, forwards
      sub-dicts to existing children and creates new typed children
    - **Change notification**: property changes bubble to the root as
      nested deltas, firing a ``data`` event at every level
    - **Access control**: per-property ``Set``/``Get``/``setter``/``getter``
      channels (see ``access``)
    - **Removal**: ``{'remove': True}`` detaches a control and tears down
      its subtree and listeners

Reserved declarative keys:
    - ``typeName``: type of the control to create
    - ``remove``: ``True`` removes the control from its parent
    - ``hidden``: hides the control from ``get_data()`` and notifications
    - keys starting with ``_`` are ignored
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Mapping, TYPE_CHECKING

from ..access import GET, GETTER, SET, SETTER, AccessPolicy, allows, make_policy
from ..properties import OBSERVABLE_TYPES, ObservableProperty, collect_observables
from .events import REMOVE_EVENT, TOP, EventMixin

if TYPE_CHECKING:
    from ..container import ControlContainer

logger = logging.getLogger(__name__)

ControlData = Mapping[str, Any]

TYPE_KEY = 'typeName'
REMOVE_KEY = 'remove'
HIDDEN_KEY = 'hidden'

DATA_EVENT = 'data'
LOG_EVENT = 'log'
NEW_CHILD_EVENT = 'newChildControl'


class Control(EventMixin):
    """A node of the control tree.

    Subclass it and declare observable properties as class attributes.
    Override ``init()`` to run logic once the control has received its
    initial data.

    Attributes:
        hidden: When True, this control and its subtree are left out of
            ``get_data()`` results and of upward ``data`` notifications.
        removal_requested: None until a declarative ``remove: True`` has
            been processed.

    Example:
        >>> class Room(Control):
        ...     doors = 1
        ...     windows = 0
        ...
        ...     def init(self):
        ...         self.log('ready')
    """

    hidden: bool = False
    removal_requested: bool | None = None

    _observables: dict[str, ObservableProperty] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Collect the observable schema of the new control class."""
        super().__init_subclass__(**kwargs)
        cls._observables = collect_observables(cls, reserved=_CONTROL_ATTRIBUTES)

    def __init__(self) -> None:
        """Initialize a detached control.

        Subclasses overriding ``__init__`` must call ``super().__init__()``
        before touching observable properties.
        """
        self._type_name = type(self).__name__
        self._name = ''
        self._parent: Control | None = None
        self._root: Control | None = None
        self._children: dict[str, Control] = {}
        self._properties: dict[str, Any] = {
            name: prop.initial_value() for name, prop in self._observables.items()
        }
        self._acl: dict[str, AccessPolicy] = {}
        self._meta: dict[str, Any] = {}
        self._listeners = {}

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, children={list(self._children)})"

    def __getattr__(self, name: str) -> Control:
        """Expose child controls as attributes (``root.house1.room1``)."""
        if not name.startswith('_'):
            children = self.__dict__.get('_children')
            if children is not None and name in children:
                return children[name]
        raise AttributeError(
            f"'{type(self).__name__}' object has no attribute '{name}'"
        )

    def __getitem__(self, path: str) -> Control:
        """Get a descendant by dotted path.

        Raises:
            KeyError: If a path segment is not a child.
        """
        current = self
        for part in path.split('.'):
            if part not in current._children:
                raise KeyError(f"Control '{part}' not found in '{path}'")
            current = current._children[part]
        return current

    def __contains__(self, name: str) -> bool:
        return name in self._children

    def __iter__(self) -> Iterator[str]:
        """Iterate over child names in insertion order."""
        return iter(list(self._children))

    def __len__(self) -> int:
        return len(self._children)

    def __bool__(self) -> bool:
        # a leaf control is still truthy
        return True

    # ==================== Identity and Links ====================

    @property
    def name(self) -> str:
        """Key under which the parent holds this control ('' for the root)."""
        return self._name

    @property
    def type_name(self) -> str:
        """Type name this control was created from."""
        return self._type_name

    @property
    def parent(self) -> Control | None:
        return self._parent

    @property
    def root(self) -> ControlContainer | None:
        """The top-level container, or None once detached."""
        return self._root

    @property
    def children(self) -> dict[str, Control]:
        """Child controls by name (a copy)."""
        return dict(self._children)

    @classmethod
    def observable_names(cls) -> list[str]:
        """Names of the observable properties declared by this class."""
        return list(cls._observables)

    def init(self) -> None:
        """Hook called once after creation and initial ``set_data()``.

        The ``<name>`` and ``newChildControl`` events are emitted on the
        parent only after this returns.
        """
        pass

    # ==================== Property Registry ====================

    def _read_property(self, name: str) -> Any:
        """Return a property value, or None if the getter channel denies it."""
        if not allows(self._acl.get(name), GETTER):
            return None
        return self._properties.get(name)

    def _write_property(self, name: str, value: Any, notify: bool = True) -> None:
        """Store a property value and publish the change.

        No-op when the value is unchanged or the setter channel denies it.

        Args:
            name: Observable property name.
            value: New value.
            notify: If True, route the change to the parent through
                ``notify_property()``. Writes driven by ``set_data()``
                pass False.
        """
        if name not in self._properties:
            return
        if isinstance(value, (list, tuple)):
            value = list(value)
        if self._properties[name] == value:
            return
        if not allows(self._acl.get(name), SETTER):
            return

        self._properties[name] = value

        if notify:
            self.notify_property(name)
        self.emit(name, value, meta=self._meta.get(name))

    def set_access(
        self, name: str, policy: Mapping[str, str] | None = None, **channels: str
    ) -> None:
        """Set the access policy of an observable property.

        Ignored if ``name`` is not an observable property. The new policy
        replaces the previous one; missing channels default to public.

        Args:
            name: Property name.
            policy: Mapping of channel ('Set', 'Get', 'setter', 'getter')
                to access value ('public', 'none', 'private').
            **channels: Channels as keyword arguments.

        Raises:
            ValueError: If a channel or access value is unknown.

        Example:
            >>> room.set_access('windows', {'Get': 'none'})
            >>> room.set_access('doors', setter='none')
        """
        acl = make_policy(policy, **channels)
        if name in self._properties:
            self._acl[name] = acl

    def get_access(self, name: str) -> AccessPolicy:
        """Return a copy of the access policy of a property."""
        return dict(self._acl.get(name, {}))

    def set_meta(self, name: str, meta: Any) -> None:
        """Attach metadata delivered with the property's events.

        The metadata is passed as second argument to listeners of the
        property event and, keyed by property name, of ``data`` events.
        Ignored if ``name`` is not an observable property.
        """
        if name in self._properties:
            self._meta[name] = meta

    def get_meta(self, name: str) -> Any:
        """Return the metadata attached to a property, or None."""
        return self._meta.get(name)

    # ==================== Notification ====================

    def notify_property(self, names: str | Iterable[str]) -> None:
        """Notify the parent chain of the current value of some properties.

        Properties denied by the ``Get`` channel or without a readable
        value are left out. Nothing is sent when no property remains.

        Args:
            names: A property name or an iterable of names.
        """
        if isinstance(names, str):
            names = [names]

        delta: dict[str, Any] = {}
        meta: dict[str, Any] = {}
        for name in names:
            if name not in self._properties:
                continue
            if not allows(self._acl.get(name), GET):
                continue
            value = self._read_property(name)
            if value is None:
                continue
            delta[name] = value
            if name in self._meta:
                meta[name] = self._meta[name]

        if delta:
            self._notify(delta, meta or None)

    def _notify(self, delta: dict[str, Any], meta: dict[str, Any] | None = None) -> None:
        """Forward a delta to the parent (unless hidden) and emit ``data``."""
        if self._parent is not None and not self.hidden:
            self._parent._notify(
                {self._name: delta},
                {self._name: meta} if meta is not None else None,
            )
        self.emit(DATA_EVENT, delta, meta=meta)

    def log(self, message: str) -> None:
        """Emit a formatted message as a ``log`` event on the root."""
        text = f"{type(self).__name__} | {self._name}: {message}"
        logger.info(text)
        self.emit(LOG_EVENT, text, scope=TOP)

    # ==================== Tree Mutation ====================

    def set_data(self, data: ControlData) -> None:
        """Apply a declarative dict to this control and its subtree.

        For each key, in order of precedence:
            - ``remove``: if exactly True, detach this control from its
              parent and stop (processed before every other key)
            - ``_``-prefixed keys and ``typeName``: ignored
            - ``hidden``: set the hidden flag
            - observable property: coerce and write (if ``Set`` allows);
              values that are not primitives or sequences are dropped
            - existing child: forward the sub-dict
            - dict with ``typeName``: create a new child control
            - anything else: ignored

        Args:
            data: Nested dict. Non-dict input is ignored.
        """
        if not isinstance(data, Mapping):
            return

        if data.get(REMOVE_KEY) is True:
            self.removal_requested = True
            if self._parent is not None:
                self._parent.remove_child(self._name)
                return

        for key, value in data.items():
            if not isinstance(key, str):
                continue
            if key in (REMOVE_KEY, TYPE_KEY) or key.startswith('_'):
                continue

            if key == HIDDEN_KEY:
                self.hidden = bool(value)
            elif key in self._properties:
                if allows(self._acl.get(key), SET):
                    value = self._observables[key].coerce(value)
                    if isinstance(value, OBSERVABLE_TYPES):
                        self._write_property(key, value, notify=False)
                    else:
                        logger.debug("%s: dropping non-primitive value for '%s'",
                                     self._describe(), key)
            elif key in self._children:
                self._children[key].set_data(value)
            elif isinstance(value, Mapping) and TYPE_KEY in value:
                self._create_control(value, key)
            else:
                logger.debug("%s: ignoring key '%s'", self._describe(), key)

    def get_data(self, sparse: bool = True) -> dict[str, Any]:
        """Return the data of this control and its visible subtree.

        Args:
            sparse: If True (default), leave out properties whose value
                is an empty string.

        Returns:
            Nested dict of property values (allowed by the ``Get`` channel)
            and of non-hidden children.
        """
        data: dict[str, Any] = {}

        for key, value in self._properties.items():
            if not allows(self._acl.get(key), GET):
                continue
            if sparse and value == '':
                continue
            data[key] = list(value) if isinstance(value, list) else value

        for key, child in self._children.items():
            if not child.hidden:
                data[key] = child.get_data(sparse=sparse)

        return data

    def remove_child(self, name: str) -> Control | None:
        """Remove a child control and tear down its subtree.

        The ``remove`` event is emitted on the child (and on each of its
        descendants) before it is detached, so listeners bound with
        ``caller=`` can unsubscribe.

        Args:
            name: Child name. Unknown names are ignored.

        Returns:
            The removed control, or None.
        """
        control = self._children.get(name)
        if control is None:
            return None

        control.emit(REMOVE_EVENT, control)
        del self._children[name]
        control._teardown()
        return control

    def walk(self, _prefix: str = '') -> Iterator[tuple[str, Control]]:
        """Yield (dotted_path, control) for every descendant, depth first.

        Example:
            >>> for path, control in root.walk():
            ...     print(path, control.type_name)
        """
        for name, child in list(self._children.items()):
            path = f"{_prefix}.{name}" if _prefix else name
            yield path, child
            yield from child.walk(path)

    def _create_control(self, data: ControlData, name: str) -> Control | None:
        """Create, attach and initialize a child control from data.

        Returns:
            The new control, or None if its type could not be resolved or
            it removed itself while applying its initial data.
        """
        type_name = data[TYPE_KEY]
        cls = self._resolve_type(type_name)
        if cls is None:
            return None

        control = cls()
        control._type_name = type_name
        control._name = name
        control._parent = self
        control._root = self._root
        self._children[name] = control

        control.set_data(data)
        if control._parent is not self:
            return None

        control.init()

        self.emit(name, control)
        self.emit(NEW_CHILD_EVENT, control)
        return control

    def _resolve_type(self, type_name: Any) -> type[Control] | None:
        """Resolve a type name through the root's resolver."""
        root = self._root
        resolver = getattr(root, 'resolver', None)
        if resolver is None:
            logger.debug("%s: no type resolver, cannot create '%s'",
                         self._describe(), type_name)
            return None
        if root.raise_on_error:
            return resolver.resolve(type_name)
        return resolver.try_resolve(type_name)

    def _teardown(self) -> None:
        """Detach this control, its subtree and all their listeners."""
        for child in list(self._children.values()):
            child.emit(REMOVE_EVENT, child)
            child._teardown()
        self._children.clear()
        self.remove_all_listeners()
        self._parent = None
        self._root = None

    def _describe(self) -> str:
        return f"{type(self).__name__}({self._name!r})"


_CONTROL_ATTRIBUTES = frozenset(dir(Control))
