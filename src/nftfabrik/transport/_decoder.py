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

"""Decode list-query results into plain records."""

from __future__ import annotations

import dataclasses

from ._classifier import Outcome, OutcomeStatus


@dataclasses.dataclass(frozen=True)
class TableInfo:
    name: str
    family: str
    handle: int | None = None


@dataclasses.dataclass(frozen=True)
class ChainInfo:
    name: str
    family: str
    table: str
    handle: int | None = None
    type: str | None = None
    hook: str | None = None
    prio: int | None = None
    policy: str | None = None


@dataclasses.dataclass(frozen=True)
class RuleInfo:
    family: str
    table: str
    chain: str
    handle: int | None = None
    expr: list = dataclasses.field(default_factory=list)
    comment: str | None = None


@dataclasses.dataclass(frozen=True)
class SetInfo:
    name: str
    family: str
    table: str
    handle: int | None = None
    key_type: str | list | None = None
    key_len: int | None = None
    flags: list | None = None
    map: str | None = None


@dataclasses.dataclass(frozen=True)
class SetElementInfo:
    family: str
    table: str
    set: str
    value: object


@dataclasses.dataclass(frozen=True)
class DecodedRuleset:
    tables: list[TableInfo] = dataclasses.field(default_factory=list)
    chains: list[ChainInfo] = dataclasses.field(default_factory=list)
    rules: list[RuleInfo] = dataclasses.field(default_factory=list)
    sets: list[SetInfo] = dataclasses.field(default_factory=list)
    set_elements: list[SetElementInfo] = dataclasses.field(default_factory=list)

    def __bool__(self) -> bool:
        return any((self.tables, self.chains, self.rules, self.sets, self.set_elements))


def convert_ranges(value):
    """Turn integer ``{"range": [lo, hi]}`` values into ``range(lo, hi + 1)``, recursively."""
    if isinstance(value, dict):
        bounds = value.get('range') if len(value) == 1 else None
        if (
            isinstance(bounds, list)
            and len(bounds) == 2
            and all(isinstance(b, int) and not isinstance(b, bool) for b in bounds)
        ):
            return range(bounds[0], bounds[1] + 1)
        return {key: convert_ranges(item) for key, item in value.items()}
    if isinstance(value, list):
        return [convert_ranges(item) for item in value]
    return value


def _element_value(elem):
    if isinstance(elem, dict):
        if 'val' in elem:
            return elem['val']
        inner = elem.get('elem')
        if isinstance(inner, dict) and 'val' in inner:
            return inner['val']
    return elem


def decode_ruleset(source) -> DecodedRuleset:
    """Decode a list-query result.

    *source* is an ``Outcome`` or the decoded JSON document. A failure
    outcome raises its ``SubsystemError``; a plain success decodes to an
    empty result.
    """
    if isinstance(source, Outcome):
        source.raise_for_failure()
        if source.status == OutcomeStatus.SUCCESS:
            return DecodedRuleset()
        source = source.data

    items = source.get('nftables', []) if isinstance(source, dict) else source or []
    result = DecodedRuleset()
    for item in items:
        if not isinstance(item, dict) or 'metainfo' in item:
            continue
        if 'table' in item:
            t = item['table']
            result.tables.append(TableInfo(t['name'], t['family'], t.get('handle')))
        elif 'chain' in item:
            c = item['chain']
            result.chains.append(
                ChainInfo(
                    c['name'],
                    c['family'],
                    c['table'],
                    handle=c.get('handle'),
                    type=c.get('type'),
                    hook=c.get('hook'),
                    prio=c.get('prio'),
                    policy=c.get('policy'),
                )
            )
        elif 'rule' in item:
            r = item['rule']
            result.rules.append(
                RuleInfo(
                    r['family'],
                    r['table'],
                    r['chain'],
                    handle=r.get('handle'),
                    expr=convert_ranges(r.get('expr', [])),
                    comment=r.get('comment'),
                )
            )
        elif 'set' in item or 'map' in item:
            s = item['set'] if 'set' in item else item['map']
            if not s:
                continue
            result.sets.append(
                SetInfo(
                    s['name'],
                    s['family'],
                    s['table'],
                    handle=s.get('handle'),
                    key_type=s.get('type'),
                    key_len=s.get('key_len'),
                    flags=s.get('flags'),
                    map=s.get('map'),
                )
            )
            for elem in s.get('elem') or []:
                result.set_elements.append(
                    SetElementInfo(s['family'], s['table'], s['name'], _element_value(elem))
                )
    return result
