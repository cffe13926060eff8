# Copyright (C) 2026 Linuxfabrik <info@linuxfabrik.ch>
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# On Debian systems, the complete text of the GNU General Public License
# version 2 can be found in /usr/share/common-licenses/GPL-2.
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""Serialize operations into the libnftables JSON command document."""

import json

from ._operation import Operation

JSON_SEPARATORS = (',', ':')


def to_wire(source) -> dict:
    """Return ``{"nftables": [...]}`` for a transaction, an operation or a sequence of operations.

    Commands appear in append order. Each call builds fresh copies, so the
    result can be modified without affecting the source.
    """
    if isinstance(source, Operation):
        operations = [source]
    else:
        operations = getattr(source, 'operations', source)
    return {'nftables': [operation.to_wire() for operation in operations]}


def to_json(source) -> str:
    """Compact JSON text of ``to_wire(source)``; key order is preserved, not sorted."""
    return json.dumps(to_wire(source), separators=JSON_SEPARATORS)
