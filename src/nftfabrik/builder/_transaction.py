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

"""Transaction: an ordered, immutable batch of operations.

Every call returns a new ``Transaction``. Ambient context (family, table,
chain, collection) is read when an operation is appended and captured into
that operation; changing the context later never rewrites operations that
are already in the batch::

    from nftfabrik.builder import ChainSpec, RuleSpec, TableSpec, Transaction
    from nftfabrik.core import Expr

    txn = (
        Transaction()
        .add(TableSpec('filter'))
        .add(ChainSpec('input', type='filter', hook='input', priority=0))
        .add(RuleSpec(Expr.begin().tcp().dport(22).accept()))
    )
    outcome = txn.submit(client)

Submitting does not consume the transaction. Resubmitting sends the same
operations again, which fails for ``add`` of objects that already exist.
"""

from __future__ import annotations

import dataclasses
import logging

from nftfabrik._errors import InvalidArgument, TransportNotConfigured
from nftfabrik.core import Family, resolve_enum
from nftfabrik.transport import DEFAULT_ERROR_MARKERS, Outcome, classify

from ._operation import Operation, Verb, check_verb
from ._serializer import to_json
from ._specs import Context, RulesetSpec

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclasses.dataclass(frozen=True)
class Transaction:
    family: Family = Family.INET
    table: str | None = None
    chain: str | None = None
    collection: str | None = None
    transport: object | None = dataclasses.field(default=None, compare=False, repr=False)
    operations: tuple[Operation, ...] = ()

    @property
    def context(self) -> Context:
        return Context(self.family, self.table, self.chain, self.collection)

    def __len__(self) -> int:
        return len(self.operations)

    def with_context(self, family=_UNSET, table=_UNSET, chain=_UNSET, collection=_UNSET) -> Transaction:
        """Switch ambient context for operations appended from now on."""
        changes = {}
        if family is not _UNSET:
            changes['family'] = resolve_enum(Family, family, 'family')
        if table is not _UNSET:
            changes['table'] = table
        if chain is not _UNSET:
            changes['chain'] = chain
        if collection is not _UNSET:
            changes['collection'] = collection
        return dataclasses.replace(self, **changes)

    def with_transport(self, requestor) -> Transaction:
        return dataclasses.replace(self, transport=requestor)

    def _apply(self, verb: Verb, spec) -> Transaction:
        check_verb(verb, spec.kind)
        items = spec.expand()
        if len(items) > 1 and verb not in (Verb.ADD, Verb.INSERT):
            msg = f'A batch of rules can only be used with add or insert, not {verb}'
            raise InvalidArgument(msg)

        ctx = self.context
        operations = []
        for item in items:
            # every rule of a batch sees the same context snapshot
            operations.append(Operation(verb, spec.kind, item.resolve(verb, ctx)))
        ctx = spec.advance(ctx, verb)

        return dataclasses.replace(
            self,
            family=ctx.family,
            table=ctx.table,
            chain=ctx.chain,
            collection=ctx.collection,
            operations=(*self.operations, *operations),
        )

    def add(self, spec) -> Transaction:
        return self._apply(Verb.ADD, spec)

    def delete(self, spec) -> Transaction:
        return self._apply(Verb.DELETE, spec)

    def flush(self, spec) -> Transaction:
        """Flush a table, chain, set, map or (family-scoped) ruleset."""
        return self._apply(Verb.FLUSH, spec)

    def insert(self, spec) -> Transaction:
        return self._apply(Verb.INSERT, spec)

    def replace(self, spec) -> Transaction:
        return self._apply(Verb.REPLACE, spec)

    def rename(self, spec) -> Transaction:
        return self._apply(Verb.RENAME, spec)

    def flush_all(self) -> Transaction:
        """Flush every table of every family."""
        return self._apply(Verb.FLUSH, RulesetSpec())

    def list(self, query) -> Transaction:
        """Append the list operation(s) of *query* (see ``nftfabrik.builder.list_*``)."""
        operations = query.operations if isinstance(query, Transaction) else (query,)
        for operation in operations:
            if not isinstance(operation, Operation) or operation.verb != Verb.LIST:
                msg = f'Not a list query: {operation!r}'
                raise InvalidArgument(msg)
        return dataclasses.replace(self, operations=(*self.operations, *operations))

    def submit(self, requestor=None, timeout: float | None = None, markers=DEFAULT_ERROR_MARKERS) -> Outcome:
        """Send the batch through *requestor* (or the attached transport).

        Returns the classified ``Outcome``. ``SubmitTimeout`` and
        ``TransportDown`` propagate from the requestor unchanged.
        """
        requestor = requestor if requestor is not None else self.transport
        if requestor is None:
            msg = 'No transport configured: pass a requestor or use with_transport()'
            raise TransportNotConfigured(msg)
        logger.debug('Submitting %d operation(s)', len(self.operations))
        raw = requestor.submit(to_json(self).encode('utf-8'), timeout)
        return classify(raw, markers)
