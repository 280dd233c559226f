# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Per-property access control.

Every observable property can carry a policy with four independent
channels, each consulted at a different call site:

- ``Set``: declarative writes through ``Control.set_data()``
- ``Get``: ``Control.get_data()`` and change notifications
- ``setter``: direct assignment (``control.prop = value``)
- ``getter``: direct read (``value = control.prop``)

Each channel is ``'public'`` (default), ``'none'`` or ``'private'``.
``'private'`` is reserved for self-only access and is currently denied
like ``'none'``. A denied operation is dropped silently.

Example:
    >>> policy = make_policy({'Get': NONE})
    >>> allows(policy, GET)
    False
    >>> allows(policy, SETTER)
    True
"""

from __future__ import annotations

from typing import Mapping

PUBLIC = 'public'
PRIVATE = 'private'
NONE = 'none'

ACCESS_VALUES = frozenset((PUBLIC, PRIVATE, NONE))

SET = 'Set'
GET = 'Get'
SETTER = 'setter'
GETTER = 'getter'

CHANNELS = (SET, GET, SETTER, GETTER)

AccessPolicy = dict[str, str]


def make_policy(
    policy: Mapping[str, str] | None = None, **channels: str
) -> AccessPolicy:
    """Build a validated policy dict from a mapping and/or keyword channels.

    Args:
        policy: Mapping of channel name to access value.
        **channels: Additional channels as keyword arguments.

    Returns:
        A new dict containing only the channels that were given.

    Raises:
        ValueError: If a channel name or access value is unknown.
    """
    result: AccessPolicy = {}
    if policy:
        result.update(policy)
    result.update(channels)

    for channel, value in result.items():
        if channel not in CHANNELS:
            raise ValueError(
                f"Unknown access channel '{channel}'. "
                f"Valid channels: {', '.join(CHANNELS)}"
            )
        if value not in ACCESS_VALUES:
            raise ValueError(
                f"Invalid access value '{value}' for channel '{channel}'. "
                f"Valid values: {', '.join(sorted(ACCESS_VALUES))}"
            )
    return result


def allows(policy: Mapping[str, str] | None, channel: str) -> bool:
    """True if the channel is public (or unset) in the policy."""
    if not policy:
        return True
    return policy.get(channel, PUBLIC) == PUBLIC
