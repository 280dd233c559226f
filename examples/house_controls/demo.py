# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Build a control tree from declarative data and watch it change.

Run from this directory:

    python demo.py
"""

from __future__ import annotations

import logging
from pathlib import Path

from genro_controltree import ControlContainer


def main() -> None:
    logging.basicConfig(level=logging.INFO, format='%(name)s: %(message)s')

    root = ControlContainer(path=Path(__file__).parent / 'controls')
    root.on('data', lambda delta: print('changed:', delta))

    root.set_data({
        'house1': {
            'typeName': 'house',
            'streetNumber': 12,
            'streetName': 'Via Roma',
        }
    })
    root.set_data({
        'house1': {
            'kitchen': {'typeName': 'room', 'windows': 2},
            'bedroom': {'typeName': 'room'},
        }
    })

    kitchen = root['house1.kitchen']
    kitchen.set_access('furniture', Get='none')
    kitchen.windows = 3
    kitchen.furniture = ['table', 'chairs']

    print(root.get_data())

    root.set_data({'house1': {'bedroom': {'remove': True}}})
    print(root.get_data(sparse=False))


if __name__ == '__main__':
    main()
