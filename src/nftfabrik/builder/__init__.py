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

from ._operation import ObjectKind, Operation, Verb
from ._query import (
    list_chain,
    list_chains,
    list_ruleset,
    list_set,
    list_sets,
    list_table,
    list_tables,
)
from ._serializer import to_json, to_wire
from ._specs import (
    ChainSpec,
    Context,
    CounterSpec,
    ElementSpec,
    FlowtableSpec,
    LimitSpec,
    MapSpec,
    QuotaSpec,
    RuleSpec,
    RulesetSpec,
    SetSpec,
    TableSpec,
)
from ._transaction import Transaction

__all__ = [
    'ChainSpec',
    'Context',
    'CounterSpec',
    'ElementSpec',
    'FlowtableSpec',
    'LimitSpec',
    'MapSpec',
    'ObjectKind',
    'Operation',
    'QuotaSpec',
    'RuleSpec',
    'RulesetSpec',
    'SetSpec',
    'TableSpec',
    'Transaction',
    'Verb',
    'list_chain',
    'list_chains',
    'list_ruleset',
    'list_set',
    'list_sets',
    'list_table',
    'list_tables',
    'to_json',
    'to_wire',
]
