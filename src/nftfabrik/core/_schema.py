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

"""Schema primitives: pure constructors for libnftables JSON fragments.

Two layers live here:

- **Expressions** (``payload``, ``meta``, ``ct``, ``prefix``, ...) return
  plain JSON-shaped values used as the left or right side of a match or
  as the key/value of a statement.
- **Fragments** (``match``, ``verdict``, ``counter``, ``log``, ...) wrap
  one complete rule element in a ``Fragment`` tagged with its kind.

Key names and enumerated strings are the external schema and must not be
changed. Symbolic inputs are validated by the callers in ``_expr``; the
constructors here only assemble.
"""

from __future__ import annotations

import dataclasses
from enum import StrEnum

from ._symbols import TERMINAL_VERDICTS, Op


class FragmentKind(StrEnum):
    MATCH = 'match'
    STATEMENT = 'statement'
    VERDICT = 'verdict'


@dataclasses.dataclass(frozen=True)
class Fragment:
    """One rule element: a match, a statement or a verdict."""

    kind: FragmentKind
    body: dict

    @property
    def terminal(self) -> bool:
        """True if rule evaluation ends at this fragment."""
        return any(key in TERMINAL_VERDICTS for key in self.body)


# -- expressions -----------------------------------------------------------


def payload(protocol: str, field: str) -> dict:
    return {'payload': {'protocol': str(protocol), 'field': field}}


def payload_raw(base: str, offset: int, length: int) -> dict:
    """Raw payload expression. *offset* and *length* are in bits."""
    return {'payload': {'base': str(base), 'offset': offset, 'len': length}}


def meta(key: str) -> dict:
    return {'meta': {'key': key}}


def ct(key: str, direction: str | None = None) -> dict:
    body = {'key': key}
    if direction is not None:
        body['dir'] = str(direction)
    return {'ct': body}


def socket(key: str) -> dict:
    return {'socket': {'key': key}}


def osf(key: str, ttl: str) -> dict:
    return {'osf': {'key': key, 'ttl': str(ttl)}}


def tcp_option(name: str, field: str) -> dict:
    return {'tcp option': {'name': name, 'field': field}}


def prefix(addr: str, length: int) -> dict:
    return {'prefix': {'addr': addr, 'len': length}}


def range_(low, high) -> dict:
    return {'range': [low, high]}


def anon_set(values) -> dict:
    return {'set': list(values)}


def bitwise_and(expr, mask) -> dict:
    return {'&': [expr, mask]}


def plus(expr, value) -> dict:
    return {'+': [expr, value]}


def minus(expr, value) -> dict:
    return {'-': [expr, value]}


def set_ref(name: str) -> str:
    """Return the ``@name`` reference to a named set or map."""
    return name if name.startswith('@') else f'@{name}'


# -- fragments -------------------------------------------------------------


def match(left, right, op: str = Op.EQ) -> Fragment:
    return Fragment(
        FragmentKind.MATCH,
        {'match': {'op': str(op), 'left': left, 'right': right}},
    )


def ct_count(count: int, inverted: bool = False) -> Fragment:
    body = {'val': count}
    if inverted:
        body['inv'] = True
    return Fragment(FragmentKind.MATCH, {'ct count': body})


def verdict(name: str, target: str | None = None) -> Fragment:
    """Verdict fragment. ``jump`` and ``goto`` need a *target* chain."""
    name = str(name)
    value = {'target': target} if name in ('jump', 'goto') else None
    return Fragment(FragmentKind.VERDICT, {name: value})


def reject(reject_type: str | None = None, expr: str | None = None) -> Fragment:
    if reject_type is None:
        return Fragment(FragmentKind.VERDICT, {'reject': None})
    body = {'type': reject_type}
    if expr is not None:
        body['expr'] = expr
    return Fragment(FragmentKind.VERDICT, {'reject': body})


def statement(key: str, value=None) -> Fragment:
    """Generic single-key statement, e.g. ``{"notrack": null}``."""
    return Fragment(FragmentKind.STATEMENT, {key: value})


def counter(name: str | None = None) -> Fragment:
    if name is not None:
        return statement('counter', name)
    return statement('counter', {'packets': 0, 'bytes': 0})


def log(
    prefix: str | None = None,
    level: str | None = None,
    group: int | None = None,
) -> Fragment:
    body = {}
    if prefix is not None:
        body['prefix'] = prefix
    if level is not None:
        body['level'] = str(level)
    if group is not None:
        body['group'] = group
    return statement('log', body or None)


def limit(
    rate: int,
    per: str,
    burst: int | None = None,
    rate_unit: str | None = None,
    inverted: bool = False,
) -> Fragment:
    body = {'rate': rate, 'per': str(per)}
    if rate_unit is not None:
        body['rate_unit'] = str(rate_unit)
    if burst is not None:
        body['burst'] = burst
    if inverted:
        body['inv'] = True
    return statement('limit', body)


def mangle(key, value) -> Fragment:
    return statement('mangle', {'key': key, 'value': value})


def nat(kind: str, addr=None, port=None, family: str | None = None) -> Fragment:
    """``snat``/``dnat``/``masquerade``/``redirect`` statement."""
    body = {}
    if addr is not None:
        body['addr'] = addr
    if port is not None:
        body['port'] = port
    if family is not None:
        body['family'] = str(family)
    return statement(kind, body or None)


def set_statement(op: str, elem, set_name: str, stmts: list | None = None) -> Fragment:
    body = {'op': op, 'elem': elem, 'set': set_ref(set_name)}
    if stmts:
        body['stmt'] = [s.body if isinstance(s, Fragment) else s for s in stmts]
    return statement('set', body)
