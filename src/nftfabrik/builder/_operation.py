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

"""Operation: one top-level command of a transaction.

An ``Operation`` is the unit the serializer emits as
``{verb: {kind: attrs}}``. Its attributes are resolved (ambient context
merged in, symbolic values turned into wire strings) when the operation is
appended to a transaction and never change afterwards.
"""

import copy
import dataclasses
from enum import StrEnum

from nftfabrik._errors import InvalidArgument


class Verb(StrEnum):
    ADD = 'add'
    DELETE = 'delete'
    FLUSH = 'flush'
    INSERT = 'insert'
    REPLACE = 'replace'
    RENAME = 'rename'
    LIST = 'list'


class ObjectKind(StrEnum):
    """Object keys as they appear on the wire."""

    RULESET = 'ruleset'
    TABLE = 'table'
    CHAIN = 'chain'
    RULE = 'rule'
    SET = 'set'
    MAP = 'map'
    ELEMENT = 'element'
    COUNTER = 'counter'
    QUOTA = 'quota'
    LIMIT = 'limit'
    FLOWTABLE = 'flowtable'
    # list-only
    TABLES = 'tables'


# Verbs accepted per object kind for mutating operations.
VALID_VERBS = {
    ObjectKind.RULESET: frozenset({Verb.FLUSH}),
    ObjectKind.TABLE: frozenset({Verb.ADD, Verb.DELETE, Verb.FLUSH}),
    ObjectKind.CHAIN: frozenset({Verb.ADD, Verb.DELETE, Verb.FLUSH, Verb.RENAME}),
    ObjectKind.RULE: frozenset({Verb.ADD, Verb.DELETE, Verb.INSERT, Verb.REPLACE}),
    ObjectKind.SET: frozenset({Verb.ADD, Verb.DELETE, Verb.FLUSH}),
    ObjectKind.MAP: frozenset({Verb.ADD, Verb.DELETE, Verb.FLUSH}),
    ObjectKind.ELEMENT: frozenset({Verb.ADD, Verb.DELETE}),
    ObjectKind.COUNTER: frozenset({Verb.ADD, Verb.DELETE}),
    ObjectKind.QUOTA: frozenset({Verb.ADD, Verb.DELETE}),
    ObjectKind.LIMIT: frozenset({Verb.ADD, Verb.DELETE}),
    ObjectKind.FLOWTABLE: frozenset({Verb.ADD, Verb.DELETE}),
}


def check_verb(verb: Verb, kind: ObjectKind) -> None:
    """Raise ``InvalidArgument`` if *verb* cannot be applied to *kind*."""
    valid = VALID_VERBS.get(kind, frozenset())
    if verb not in valid:
        choices = ', '.join(sorted(str(v) for v in valid)) or 'none'
        msg = f'{verb} is not valid for {kind} (valid: {choices})'
        raise InvalidArgument(msg)


@dataclasses.dataclass(frozen=True)
class Operation:
    """A resolved top-level command.

    ``attrs`` is ``None`` only for requests without any scope, such as
    flushing the complete ruleset of every family.
    """

    verb: Verb
    kind: ObjectKind
    attrs: dict | None = None

    def to_wire(self) -> dict:
        """Return ``{verb: {kind: attrs}}`` with a private copy of the attributes."""
        return {str(self.verb): {str(self.kind): copy.deepcopy(self.attrs)}}
