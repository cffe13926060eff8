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

"""Operation specs: one typed description per object kind.

A spec names the object to act on plus the attributes a verb may need.
Identity fields (``family``, ``table``, ``chain``, set name) default to
``None`` and are then taken from the transaction's ambient ``Context``.
``resolve()`` turns a spec into the wire attributes for one verb and
``advance()`` returns the ambient context in effect afterwards.

Example::

    from nftfabrik.builder import ChainSpec, RuleSpec, TableSpec

    TableSpec('filter')
    ChainSpec('input', type='filter', hook='input', priority=0, policy='drop')
    RuleSpec(Expr.begin().tcp().dport(22).accept(), comment='ssh')
"""

from __future__ import annotations

import dataclasses
from typing import ClassVar

from nftfabrik._errors import InvalidArgument, InvalidContext
from nftfabrik.core import (
    ChainPolicy,
    ChainType,
    Expr,
    Family,
    Hook,
    RateUnit,
    SetFlag,
    resolve_enum,
)

from ._operation import ObjectKind, Verb


@dataclasses.dataclass(frozen=True)
class Context:
    """Ambient identity shared by consecutive operations."""

    family: Family = Family.INET
    table: str | None = None
    chain: str | None = None
    collection: str | None = None


def _check_name(value, what: str) -> str:
    if not isinstance(value, str) or not value:
        msg = f'{what} must be a non-empty string, got {value!r}'
        raise InvalidArgument(msg)
    return value


def _check_count(value, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        msg = f'{what} must be a non-negative integer, got {value!r}'
        raise InvalidArgument(msg)
    return value


def _require(value, what: str, verb: Verb):
    if value is None:
        msg = f'{what} must be given for {verb}'
        raise InvalidArgument(msg)
    return value


def _type_value(value):
    """Set key type: a name or a concatenation of names."""
    if isinstance(value, (list, tuple)):
        if not value:
            msg = 'Concatenated set type must not be empty'
            raise InvalidArgument(msg)
        return [_check_name(v, 'Set type') for v in value]
    return _check_name(value, 'Set type')


def _rule_body(value) -> list:
    if isinstance(value, Expr):
        return value.to_list()
    if isinstance(value, (list, tuple)) and all(isinstance(item, dict) for item in value):
        return list(value)
    msg = f'Rule expression must be an Expr or a list of statements, got {value!r}'
    raise InvalidArgument(msg)


class _Spec:
    kind: ClassVar[ObjectKind]

    def _family(self, ctx: Context) -> str:
        family = getattr(self, 'family', None)
        return str(resolve_enum(Family, family if family is not None else ctx.family, 'family'))

    def _table(self, ctx: Context) -> str:
        table = getattr(self, 'table', None) or ctx.table
        if table is None:
            msg = f'No table for {self.kind}: pass table= or set an ambient table first'
            raise InvalidContext(msg)
        return _check_name(table, 'Table name')

    def _scope(self, ctx: Context) -> dict:
        return {'family': self._family(ctx), 'table': self._table(ctx)}

    def resolve(self, verb: Verb, ctx: Context) -> dict | None:
        raise NotImplementedError

    def advance(self, ctx: Context, verb: Verb) -> Context:
        """Context after this spec was applied; explicit identity becomes ambient."""
        changes = {}
        if getattr(self, 'table', None) is not None:
            changes['table'] = self.table
        if getattr(self, 'family', None) is not None:
            changes['family'] = resolve_enum(Family, self.family, 'family')
        return dataclasses.replace(ctx, **changes)

    def expand(self) -> list:
        return [self]


@dataclasses.dataclass(frozen=True)
class RulesetSpec(_Spec):
    """The whole ruleset, or one family of it when *family* is given."""

    family: Family | str | None = None
    kind: ClassVar[ObjectKind] = ObjectKind.RULESET

    def resolve(self, verb, ctx):
        if self.family is None:
            return None
        return {'family': str(resolve_enum(Family, self.family, 'family'))}

    def advance(self, ctx, verb):
        return ctx


@dataclasses.dataclass(frozen=True)
class TableSpec(_Spec):
    name: str | None = None
    family: Family | str | None = None
    kind: ClassVar[ObjectKind] = ObjectKind.TABLE

    def _name(self, ctx: Context) -> str:
        name = self.name or ctx.table
        if name is None:
            msg = 'No table name given and no ambient table set'
            raise InvalidContext(msg)
        return _check_name(name, 'Table name')

    def resolve(self, verb, ctx):
        return {'family': self._family(ctx), 'name': self._name(ctx)}

    def advance(self, ctx, verb):
        name = self._name(ctx)
        ctx = super().advance(ctx, verb)
        if name == ctx.table:
            return ctx
        # chain and collection belonged to the previous table
        return dataclasses.replace(ctx, table=name, chain=None, collection=None)


@dataclasses.dataclass(frozen=True)
class ChainSpec(_Spec):
    """A chain; giving *type*, *hook* or *priority* makes it a base chain."""

    name: str | None = None
    table: str | None = None
    family: Family | str | None = None
    type: ChainType | str | None = None
    hook: Hook | str | None = None
    priority: int | None = None
    policy: ChainPolicy | str | None = None
    devices: list[str] | str | None = None
    new_name: str | None = None
    kind: ClassVar[ObjectKind] = ObjectKind.CHAIN

    def _name(self, ctx: Context) -> str:
        name = self.name or ctx.chain
        if name is None:
            msg = 'No chain name given and no ambient chain set'
            raise InvalidContext(msg)
        return _check_name(name, 'Chain name')

    def resolve(self, verb, ctx):
        attrs = self._scope(ctx)
        attrs['name'] = self._name(ctx)
        if verb == Verb.RENAME:
            attrs['newname'] = _check_name(_require(self.new_name, 'new_name', verb), 'New chain name')
        elif verb == Verb.ADD and any(v is not None for v in (self.type, self.hook, self.priority)):
            attrs['type'] = str(resolve_enum(ChainType, self.type or ChainType.FILTER, 'chain type'))
            attrs['hook'] = str(resolve_enum(Hook, _require(self.hook, 'hook', verb), 'hook'))
            priority = self.priority if self.priority is not None else 0
            if isinstance(priority, bool) or not isinstance(priority, int):
                msg = f'Chain priority must be an integer, got {priority!r}'
                raise InvalidArgument(msg)
            attrs['prio'] = priority
            if self.policy is not None:
                attrs['policy'] = str(resolve_enum(ChainPolicy, self.policy, 'chain policy'))
            if self.devices is not None:
                attrs['dev'] = self.devices if isinstance(self.devices, str) else list(self.devices)
        return attrs

    def advance(self, ctx, verb):
        ctx = super().advance(ctx, verb)
        name = self.new_name if verb == Verb.RENAME else self._name(ctx)
        return dataclasses.replace(ctx, chain=name)


@dataclasses.dataclass(frozen=True)
class RuleSpec(_Spec):
    """A rule, or a batch of rules when *expr* is a list of expressions.

    ``insert`` needs *index* or *handle*; ``replace`` and ``delete`` need
    *handle*.
    """

    expr: Expr | list | None = None
    table: str | None = None
    chain: str | None = None
    family: Family | str | None = None
    comment: str | None = None
    index: int | None = None
    handle: int | None = None
    kind: ClassVar[ObjectKind] = ObjectKind.RULE

    @property
    def is_batch(self) -> bool:
        return (
            isinstance(self.expr, (list, tuple))
            and len(self.expr) > 0
            and all(isinstance(item, (Expr, list, tuple)) for item in self.expr)
        )

    def expand(self) -> list[RuleSpec]:
        if not self.is_batch:
            return [self]
        return [dataclasses.replace(self, expr=item) for item in self.expr]

    def _chain(self, ctx: Context) -> str:
        chain = self.chain or ctx.chain
        if chain is None:
            msg = 'No chain for rule: pass chain= or set an ambient chain first'
            raise InvalidContext(msg)
        return _check_name(chain, 'Chain name')

    def resolve(self, verb, ctx):
        attrs = self._scope(ctx)
        attrs['chain'] = self._chain(ctx)
        if verb in (Verb.DELETE, Verb.REPLACE):
            attrs['handle'] = _check_count(_require(self.handle, 'handle', verb), 'Handle')
        elif verb == Verb.INSERT:
            if self.index is None and self.handle is None:
                msg = 'insert needs a position: pass index= or handle='
                raise InvalidArgument(msg)
            if self.index is not None:
                attrs['index'] = _check_count(self.index, 'Index')
            if self.handle is not None:
                attrs['handle'] = _check_count(self.handle, 'Handle')
        if verb == Verb.DELETE:
            return attrs
        attrs['expr'] = _rule_body(_require(self.expr, 'expr', verb))
        comment = self.comment
        if comment is None and isinstance(self.expr, Expr):
            comment = self.expr.comment
        if comment is not None:
            attrs['comment'] = comment
        return attrs

    def advance(self, ctx, verb):
        ctx = super().advance(ctx, verb)
        if self.chain is not None:
            ctx = dataclasses.replace(ctx, chain=self.chain)
        return ctx


@dataclasses.dataclass(frozen=True)
class _CollectionSpec(_Spec):
    def _name(self, ctx: Context) -> str:
        name = self.name or ctx.collection
        if name is None:
            msg = f'No {self.kind} name given and no ambient set or map'
            raise InvalidContext(msg)
        return _check_name(name, f'{self.kind.capitalize()} name')

    def _common(self, ctx: Context) -> dict:
        attrs = self._scope(ctx)
        attrs['name'] = self._name(ctx)
        return attrs

    def _options(self, attrs: dict) -> dict:
        if self.flags:
            attrs['flags'] = [str(resolve_enum(SetFlag, f, 'set flag')) for f in self.flags]
        if self.timeout is not None:
            attrs['timeout'] = _check_count(self.timeout, 'Timeout')
        if self.gc_interval is not None:
            attrs['gc-interval'] = _check_count(self.gc_interval, 'GC interval')
        if self.size is not None:
            attrs['size'] = _check_count(self.size, 'Size')
        return attrs

    def advance(self, ctx, verb):
        ctx = super().advance(ctx, verb)
        return dataclasses.replace(ctx, collection=self._name(ctx))


@dataclasses.dataclass(frozen=True)
class SetSpec(_CollectionSpec):
    """A named set. ``add`` needs *type*, e.g. ``'ipv4_addr'`` or a concatenation."""

    name: str | None = None
    table: str | None = None
    family: Family | str | None = None
    type: str | list[str] | None = None
    flags: list[SetFlag | str] | None = None
    timeout: int | None = None
    gc_interval: int | None = None
    size: int | None = None
    kind: ClassVar[ObjectKind] = ObjectKind.SET

    def resolve(self, verb, ctx):
        attrs = self._common(ctx)
        if verb == Verb.ADD:
            attrs['type'] = _type_value(_require(self.type, 'type', verb))
            self._options(attrs)
        return attrs


@dataclasses.dataclass(frozen=True)
class MapSpec(_CollectionSpec):
    """A named map from *key_type* to *value_type* (e.g. ``'verdict'``)."""

    name: str | None = None
    table: str | None = None
    family: Family | str | None = None
    key_type: str | list[str] | None = None
    value_type: str | None = None
    flags: list[SetFlag | str] | None = None
    timeout: int | None = None
    gc_interval: int | None = None
    size: int | None = None
    kind: ClassVar[ObjectKind] = ObjectKind.MAP

    def resolve(self, verb, ctx):
        attrs = self._common(ctx)
        if verb == Verb.ADD:
            attrs['type'] = _type_value(_require(self.key_type, 'key_type', verb))
            attrs['map'] = _check_name(_require(self.value_type, 'value_type', verb), 'Map value type')
            self._options(attrs)
        return attrs


@dataclasses.dataclass(frozen=True)
class ElementSpec(_Spec):
    """Elements of a set, or ``(key, value)`` pairs of a map."""

    elements: list = dataclasses.field(default_factory=list)
    set: str | None = None
    table: str | None = None
    family: Family | str | None = None
    kind: ClassVar[ObjectKind] = ObjectKind.ELEMENT

    def _set(self, ctx: Context) -> str:
        name = self.set or ctx.collection
        if name is None:
            msg = 'No set or map for elements: pass set= or add a set first'
            raise InvalidContext(msg)
        return _check_name(name, 'Set name')

    def resolve(self, verb, ctx):
        if not isinstance(self.elements, (list, tuple)) or not self.elements:
            msg = 'Elements must be a non-empty list'
            raise InvalidArgument(msg)
        attrs = self._scope(ctx)
        attrs['name'] = self._set(ctx)
        attrs['elem'] = [list(e) if isinstance(e, tuple) else e for e in self.elements]
        return attrs

    def advance(self, ctx, verb):
        ctx = super().advance(ctx, verb)
        if self.set is not None:
            ctx = dataclasses.replace(ctx, collection=self.set)
        return ctx


@dataclasses.dataclass(frozen=True)
class CounterSpec(_Spec):
    name: str | None = None
    table: str | None = None
    family: Family | str | None = None
    packets: int = 0
    bytes: int = 0
    kind: ClassVar[ObjectKind] = ObjectKind.COUNTER

    def resolve(self, verb, ctx):
        attrs = self._scope(ctx)
        attrs['name'] = _check_name(self.name, 'Counter name')
        if verb == Verb.ADD:
            attrs['packets'] = _check_count(self.packets, 'Packets')
            attrs['bytes'] = _check_count(self.bytes, 'Bytes')
        return attrs


@dataclasses.dataclass(frozen=True)
class QuotaSpec(_Spec):
    """A quota object; *over* makes it match once *bytes* are exceeded."""

    name: str | None = None
    table: str | None = None
    family: Family | str | None = None
    bytes: int = 0
    used: int = 0
    over: bool = False
    kind: ClassVar[ObjectKind] = ObjectKind.QUOTA

    def resolve(self, verb, ctx):
        attrs = self._scope(ctx)
        attrs['name'] = _check_name(self.name, 'Quota name')
        if verb == Verb.ADD:
            attrs['bytes'] = _check_count(self.bytes, 'Bytes')
            attrs['used'] = _check_count(self.used, 'Used')
            attrs['over'] = bool(self.over)
        return attrs


@dataclasses.dataclass(frozen=True)
class LimitSpec(_Spec):
    name: str | None = None
    table: str | None = None
    family: Family | str | None = None
    rate: int | None = None
    per: RateUnit | str | None = None
    burst: int = 0
    kind: ClassVar[ObjectKind] = ObjectKind.LIMIT

    def resolve(self, verb, ctx):
        attrs = self._scope(ctx)
        attrs['name'] = _check_name(self.name, 'Limit name')
        if verb == Verb.ADD:
            attrs['rate'] = _check_count(_require(self.rate, 'rate', verb), 'Rate')
            attrs['per'] = str(resolve_enum(RateUnit, _require(self.per, 'per', verb), 'rate unit'))
            attrs['burst'] = _check_count(self.burst, 'Burst')
        return attrs


@dataclasses.dataclass(frozen=True)
class FlowtableSpec(_Spec):
    """A flowtable. ``add`` needs the ``ingress`` hook, a priority and devices."""

    name: str | None = None
    table: str | None = None
    family: Family | str | None = None
    hook: Hook | str | None = None
    priority: int | None = None
    devices: list[str] | None = None
    flags: list[str] | None = None
    kind: ClassVar[ObjectKind] = ObjectKind.FLOWTABLE

    def resolve(self, verb, ctx):
        attrs = self._scope(ctx)
        attrs['name'] = _check_name(self.name, 'Flowtable name')
        if verb != Verb.ADD:
            return attrs
        hook = resolve_enum(Hook, _require(self.hook, 'hook', verb), 'hook')
        if hook != Hook.INGRESS:
            msg = f'Flowtables only support the ingress hook, got {hook}'
            raise InvalidArgument(msg)
        priority = _require(self.priority, 'priority', verb)
        if isinstance(priority, bool) or not isinstance(priority, int):
            msg = f'Flowtable priority must be an integer, got {priority!r}'
            raise InvalidArgument(msg)
        devices = _require(self.devices, 'devices', verb)
        if isinstance(devices, str) or not devices:
            msg = 'Flowtable devices must be a non-empty list of interface names'
            raise InvalidArgument(msg)
        attrs['hook'] = str(hook)
        attrs['prio'] = priority
        attrs['dev'] = [_check_name(d, 'Device name') for d in devices]
        if self.flags:
            attrs['flags'] = [str(f) for f in self.flags]
        return attrs
