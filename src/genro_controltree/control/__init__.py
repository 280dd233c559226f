# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Control package - nodes of the reactive control tree.

The package is organized into:
- core: Control class with property registry, notification and tree mutation
- events: Event channel mixin with scoped emission

Example:
    >>> from genro_controltree import Control
    >>> class Room(Control):
    ...     doors = 1
    ...     windows = 0
"""

from .core import (
    DATA_EVENT,
    HIDDEN_KEY,
    LOG_EVENT,
    NEW_CHILD_EVENT,
    REMOVE_KEY,
    TYPE_KEY,
    Control,
    ControlData,
)
from .events import BUBBLE, LOCAL, LOCAL_TOP, REMOVE_EVENT, SCOPES, TOP, EventMixin

__all__ = [
    "Control",
    "ControlData",
    "EventMixin",
    "TYPE_KEY",
    "REMOVE_KEY",
    "HIDDEN_KEY",
    "DATA_EVENT",
    "LOG_EVENT",
    "NEW_CHILD_EVENT",
    "REMOVE_EVENT",
    "LOCAL",
    "BUBBLE",
    "TOP",
    "LOCAL_TOP",
    "SCOPES",
]
