# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""ControlTree exceptions."""

from __future__ import annotations


class ControlTreeError(Exception):
    """Base exception for ControlTree errors."""

    pass


class TypeResolutionError(ControlTreeError):
    """Raised when a control type name cannot be turned into a class."""

    pass


class InvalidTypeNameError(TypeResolutionError):
    """Raised when a type name contains characters other than [a-zA-Z0-9_]."""

    pass
