# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""House - a didactic control holding rooms."""

from genro_controltree import Control


class House(Control):
    streetNumber = 0
    streetName = ''

    def init(self):
        self.on('newChildControl', self._on_room, caller=self)

    def _on_room(self, room):
        self.log(f"new room '{room.name}'")
