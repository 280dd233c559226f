# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Room - a didactic leaf control."""

from genro_controltree import Control


class Room(Control):
    doors = 1
    windows = 0
    furniture = []
