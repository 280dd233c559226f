# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""ControlContainer - the root of a control tree."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from .control import Control
from .resolver import TypeResolver


class ControlContainer(Control):
    """Top-level container of a control tree.

    The container is the entry point for host code: it owns the tree's
    TypeResolver (and therefore its type cache), is its own root, and
    receives ``top`` scoped events such as ``log``.

    Example:
        >>> root = ControlContainer(path='myapp.controls')
        >>> root.on('log', print)
        >>> root.set_data({'house1': {'typeName': 'house', 'streetNumber': 12}})
        >>> root.get_data()
        {'house1': {'streetNumber': 12}}
    """

    def __init__(
        self,
        path: str | Path | None = None,
        types: Mapping[str, type[Control]] | None = None,
        raise_on_error: bool = False,
    ) -> None:
        """Initialize a ControlContainer.

        Args:
            path: Location of the control modules: a directory containing
                ``<typeName>.py`` files, or a dotted package name.
            types: Optional mapping of type name to Control subclass,
                registered before any lookup by path.
            raise_on_error: If False (default), children whose type cannot
                be resolved are skipped silently. If True, the
                TypeResolutionError propagates out of ``set_data()``.
        """
        super().__init__()
        self._root = self
        self._resolver = TypeResolver(path, types)
        self._raise_on_error = raise_on_error

    def __repr__(self) -> str:
        return f"ControlContainer(path={self._resolver.path!r}, children={list(self._children)})"

    @property
    def resolver(self) -> TypeResolver:
        """The type resolver of this tree."""
        return self._resolver

    @property
    def path(self) -> str | Path | None:
        """Location used to load control modules by type name."""
        return self._resolver.path

    @property
    def raise_on_error(self) -> bool:
        return self._raise_on_error

    def register(self, type_name: str, cls: type[Control]) -> None:
        """Register a control class for this tree under a type name."""
        self._resolver.register(type_name, cls)
