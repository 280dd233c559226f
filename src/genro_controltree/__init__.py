# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-ControlTree - Reactive control trees built from declarative data.

A lightweight, zero-dependency library providing a tree of typed controls
with observable properties, change notifications that bubble to the root,
per-property access control and scoped events, meant as the state layer
behind a UI rendering framework.
"""

__version__ = "0.1.0"

from .access import GET, GETTER, NONE, PRIVATE, PUBLIC, SET, SETTER
from .container import ControlContainer
from .control import Control, ControlData
from .exceptions import (
    ControlTreeError,
    InvalidTypeNameError,
    TypeResolutionError,
)
from .properties import ObservableProperty
from .resolver import TypeResolver

__all__ = [
    # Core classes
    "Control",
    "ControlContainer",
    "ControlData",
    "ObservableProperty",
    "TypeResolver",
    # Access control
    "PUBLIC",
    "PRIVATE",
    "NONE",
    "SET",
    "GET",
    "SETTER",
    "GETTER",
    # Exceptions
    "ControlTreeError",
    "TypeResolutionError",
    "InvalidTypeNameError",
]
