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

"""List-query constructors.

Each function returns a single-operation ``Transaction`` that can be
submitted as is or appended to another transaction with
``Transaction.list()``.
"""

from nftfabrik.core import Family, resolve_enum

from ._operation import ObjectKind, Operation, Verb
from ._transaction import Transaction


def _scope(family) -> dict:
    if family is None:
        return {}
    return {'family': str(resolve_enum(Family, family, 'family'))}


def _query(kind: ObjectKind, attrs: dict) -> Transaction:
    return Transaction(operations=(Operation(Verb.LIST, kind, attrs),))


def list_tables(family=None) -> Transaction:
    return _query(ObjectKind.TABLES, _scope(family))


def list_ruleset(family=None) -> Transaction:
    """Everything: tables, chains, rules, sets and elements."""
    return _query(ObjectKind.RULESET, _scope(family))


def list_chains(family=None) -> Transaction:
    # chains are returned as part of the ruleset listing
    return list_ruleset(family)


def list_sets(family=None) -> Transaction:
    return list_ruleset(family)


def list_table(table: str, family=Family.INET) -> Transaction:
    return _query(ObjectKind.TABLE, {**_scope(family), 'name': table})


def list_chain(table: str, chain: str, family=Family.INET) -> Transaction:
    """The chain *chain* of *table* with all its rules."""
    return _query(ObjectKind.CHAIN, {**_scope(family), 'table': table, 'name': chain})


def list_set(table: str, name: str, family=Family.INET) -> Transaction:
    """The set *name* with its elements."""
    return _query(ObjectKind.SET, {**_scope(family), 'table': table, 'name': name})
