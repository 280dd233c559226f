# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TypeResolver - maps control type names to control classes.

Each ControlContainer owns one resolver, so every tree has its own type
cache whose lifetime is tied to the container.

A type name is resolved, in order, from:

1. The cache (explicitly registered classes and previously loaded ones).
2. The resolver ``path``:
   - a directory: ``<path>/<name>.py`` is loaded as a module
   - otherwise a dotted package name: ``<path>.<name>`` is imported

From a loaded module, the class is the attribute named like the type if
it is a Control subclass, else the first Control subclass defined in the
module itself.

Example:
    >>> resolver = TypeResolver(path='myapp.controls')
    >>> resolver.register('panel', Panel)
    >>> resolver.resolve('panel')
    <class 'Panel'>
    >>> resolver.try_resolve('garage') is None
    True
"""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
import re
from pathlib import Path
from types import ModuleType
from typing import Mapping, TYPE_CHECKING

from .exceptions import InvalidTypeNameError, TypeResolutionError

if TYPE_CHECKING:
    from .control import Control

logger = logging.getLogger(__name__)

_TYPE_NAME_PATTERN = re.compile(r'[a-zA-Z0-9_]+')


class TypeResolver:
    """Resolve and cache control classes by type name.

    Attributes:
        path: Base location of control modules (directory or dotted
            package name), or None to rely on registration only.
    """

    __slots__ = ('path', '_cache')

    def __init__(
        self,
        path: str | Path | None = None,
        types: Mapping[str, type[Control]] | None = None,
    ) -> None:
        """Initialize a TypeResolver.

        Args:
            path: Directory or dotted package holding control modules.
            types: Optional mapping of type name to class, registered
                up front.
        """
        self.path = path
        self._cache: dict[str, type[Control]] = {}
        if types:
            for name, cls in types.items():
                self.register(name, cls)

    def __repr__(self) -> str:
        return f"TypeResolver(path={self.path!r}, cached={sorted(self._cache)})"

    def __contains__(self, name: str) -> bool:
        return name in self._cache

    def register(self, name: str, cls: type[Control]) -> None:
        """Register a control class under a type name.

        Raises:
            TypeError: If cls is not a Control subclass.
        """
        from .control import Control

        if not (isinstance(cls, type) and issubclass(cls, Control)):
            raise TypeError(
                f"Control type '{name}' must be a Control subclass, not {cls!r}"
            )
        self._cache[name] = cls

    def resolve(self, name: str) -> type[Control]:
        """Return the control class for a type name, loading it if needed.

        Raises:
            InvalidTypeNameError: If the name is not a plain identifier.
            TypeResolutionError: If no class can be loaded for the name.
        """
        if not isinstance(name, str):
            raise InvalidTypeNameError(f"Invalid control type name: {name!r}")

        cls = self._cache.get(name)
        if cls is not None:
            return cls

        if not _TYPE_NAME_PATTERN.fullmatch(name):
            raise InvalidTypeNameError(f"Invalid control type name: {name!r}")

        if self.path is None:
            raise TypeResolutionError(
                f"Control type '{name}' is not registered and no path is set"
            )

        try:
            module = self._load_module(name)
        except Exception as e:
            raise TypeResolutionError(
                f"Cannot load control type '{name}' from {self.path!r}: {e}"
            ) from e

        cls = self._find_class(module, name)
        if cls is None:
            raise TypeResolutionError(
                f"Module '{module.__name__}' defines no Control subclass for '{name}'"
            )

        logger.debug("Loaded control type '%s' from %s", name, module.__name__)
        self._cache[name] = cls
        return cls

    def try_resolve(self, name: str) -> type[Control] | None:
        """Like resolve(), but return None instead of raising."""
        try:
            return self.resolve(name)
        except TypeResolutionError as e:
            logger.debug("%s", e)
            return None

    def clear(self) -> None:
        """Drop every cached class, registered ones included."""
        self._cache.clear()

    def _load_module(self, name: str) -> ModuleType:
        """Import the module that should define control type ``name``."""
        base = Path(self.path)
        if base.is_dir():
            file_path = base / f"{name}.py"
            if not file_path.is_file():
                raise FileNotFoundError(f"No such file: {file_path}")
            module_name = f"_controltree_{base.name}_{name}"
            spec = importlib.util.spec_from_file_location(module_name, file_path)
            if spec is None or spec.loader is None:
                raise ImportError(f"Cannot create module spec for {file_path}")
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
            return module

        return importlib.import_module(f"{self.path}.{name}")

    def _find_class(self, module: ModuleType, name: str) -> type[Control] | None:
        """Pick the control class from a loaded module."""
        from .control import Control

        candidate = getattr(module, name, None)
        if inspect.isclass(candidate) and issubclass(candidate, Control):
            return candidate

        for obj in vars(module).values():
            if (
                inspect.isclass(obj)
                and issubclass(obj, Control)
                and obj.__module__ == module.__name__
            ):
                return obj
        return None
