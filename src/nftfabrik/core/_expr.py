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

"""Expr: an immutable, context-aware rule expression.

An ``Expr`` is an ordered tuple of fragments plus ambient context: the
address family and the current transport protocol. Every method returns
a new ``Expr``; the original is never modified, so partially built
expressions can be shared and extended freely::

    from nftfabrik.core import Expr

    base = Expr.begin().tcp()
    ssh = base.dport(22).accept()
    web = base.dport([80, 443]).counter().accept()

Protocol context is established by ``set_protocol()`` (or one of the
``tcp()``/``udp()``/... shortcuts) and read by later port matches. It only
affects fragments appended afterwards.
"""

from __future__ import annotations

import dataclasses
import ipaddress

from nftfabrik._errors import InvalidArgument, InvalidContext

from . import _schema as schema
from ._schema import Fragment, FragmentKind
from ._symbols import (
    ARP_OPERATIONS,
    ICMP_TYPES,
    ICMPV6_TYPES,
    PORT_PROTOCOLS,
    REJECT_TYPES,
    CtDirection,
    CtState,
    CtStatus,
    Family,
    OsfTtl,
    PktType,
    Protocol,
    RateUnit,
    TcpFlag,
    Verdict,
    resolve_dscp,
    resolve_enum,
    resolve_log_level,
    resolve_op,
    resolve_payload_base,
    resolve_symbol,
)


def _check_int(value, low: int, high: int, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        msg = f'{what} must be an integer between {low} and {high}, got {value!r}'
        raise InvalidArgument(msg)
    return value


def _check_port(port) -> int:
    return _check_int(port, 0, 65535, 'Port')


def _port_value(port):
    """Right-hand side for a port match: int, range, pair or collection."""
    if isinstance(port, range):
        if port.step != 1 or len(port) == 0:
            msg = f'Invalid port range: {port!r}'
            raise InvalidArgument(msg)
        return schema.range_(_check_port(port.start), _check_port(port.stop - 1))
    if isinstance(port, tuple):
        if len(port) != 2:
            msg = f'Port range must be a (first, last) pair, got {port!r}'
            raise InvalidArgument(msg)
        first, last = _check_port(port[0]), _check_port(port[1])
        if first > last:
            msg = f'Invalid port range: {first}-{last} (first must be <= last)'
            raise InvalidArgument(msg)
        return schema.range_(first, last)
    if isinstance(port, (list, set, frozenset)):
        values = sorted(port) if isinstance(port, (set, frozenset)) else list(port)
        if not values:
            msg = 'Port set must not be empty'
            raise InvalidArgument(msg)
        return schema.anon_set(_check_port(p) for p in values)
    return _check_port(port)


def _as_list(value) -> list:
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


@dataclasses.dataclass(frozen=True)
class Expr:
    """Ordered rule fragments with ambient family/protocol context."""

    family: Family = Family.INET
    protocol: Protocol | None = None
    comment: str | None = None
    fragments: tuple[Fragment, ...] = ()

    @classmethod
    def begin(cls, family=Family.INET) -> Expr:
        """Start an empty expression for *family*."""
        return cls(family=resolve_enum(Family, family, 'family'))

    # -- core ---------------------------------------------------------------

    @property
    def closed(self) -> bool:
        """True once a terminal verdict has been appended."""
        return any(f.terminal for f in self.fragments)

    def append(self, fragment: Fragment) -> Expr:
        if fragment.kind == FragmentKind.MATCH and self.closed:
            msg = 'Cannot add a match after a terminal verdict'
            raise InvalidContext(msg)
        return dataclasses.replace(self, fragments=(*self.fragments, fragment))

    def to_list(self) -> list[dict]:
        return [f.body for f in self.fragments]

    def with_comment(self, text: str) -> Expr:
        return dataclasses.replace(self, comment=text)

    def _match(self, left, right, op='==') -> Expr:
        return self.append(schema.match(left, right, resolve_op(op)))

    # -- protocol context ---------------------------------------------------

    def set_protocol(self, proto) -> Expr:
        """Match the layer 4 protocol and make it the protocol context."""
        proto = resolve_enum(Protocol, proto, 'protocol')
        if self.family == Family.IP6 or proto == Protocol.ICMPV6:
            left = schema.payload('ip6', 'nexthdr')
        else:
            left = schema.payload('ip', 'protocol')
        expr = self._match(left, str(proto))
        return dataclasses.replace(expr, protocol=proto)

    def tcp(self) -> Expr:
        return self.set_protocol(Protocol.TCP)

    def udp(self) -> Expr:
        return self.set_protocol(Protocol.UDP)

    def udplite(self) -> Expr:
        return self.set_protocol(Protocol.UDPLITE)

    def sctp(self) -> Expr:
        return self.set_protocol(Protocol.SCTP)

    def dccp(self) -> Expr:
        return self.set_protocol(Protocol.DCCP)

    def icmp(self) -> Expr:
        return self.set_protocol(Protocol.ICMP)

    def icmpv6(self) -> Expr:
        return self.set_protocol(Protocol.ICMPV6)

    def gre(self) -> Expr:
        return self.set_protocol(Protocol.GRE)

    def esp(self) -> Expr:
        return self.set_protocol(Protocol.ESP)

    def ah(self) -> Expr:
        return self.set_protocol(Protocol.AH)

    def _port_protocol(self, field: str) -> str:
        if self.protocol is None:
            msg = (
                f'{field} requires protocol context; call tcp(), udp(), sctp() '
                f'or dccp() first'
            )
            raise InvalidContext(msg)
        if self.protocol not in PORT_PROTOCOLS:
            msg = f'{field} requires a protocol with port fields, got {self.protocol}'
            raise InvalidContext(msg)
        return str(self.protocol)

    # -- layer 3 addresses --------------------------------------------------

    def _ip_protocol(self, version: int | None = None) -> str:
        if self.family == Family.IP6:
            if version == 4:
                msg = 'IPv4 address used in an ip6 family expression'
                raise InvalidArgument(msg)
            return 'ip6'
        if self.family == Family.IP:
            if version == 6:
                msg = 'IPv6 address used in an ip family expression'
                raise InvalidArgument(msg)
            return 'ip'
        return 'ip6' if version == 6 else 'ip'

    def _address(self, field: str, address, negate: bool) -> Expr:
        text = str(address).strip()
        try:
            iface = ipaddress.ip_interface(text)
        except ValueError as e:
            msg = f'Invalid address: {address!r}'
            raise InvalidArgument(msg) from e
        left = schema.payload(self._ip_protocol(iface.version), field)
        if '/' in text:
            right = schema.prefix(str(iface.network.network_address), iface.network.prefixlen)
        else:
            right = str(iface.ip)
        return self._match(left, right, '!=' if negate else '==')

    def saddr(self, address, negate: bool = False) -> Expr:
        """Match the source address; ``'10.0.0.0/8'`` compiles to a prefix match."""
        return self._address('saddr', address, negate)

    def daddr(self, address, negate: bool = False) -> Expr:
        return self._address('daddr', address, negate)

    # -- layer 4 ports ------------------------------------------------------

    def sport(self, port, negate: bool = False) -> Expr:
        """Match the source port (int, range, (first, last) or collection)."""
        proto = self._port_protocol('sport')
        return self._match(schema.payload(proto, 'sport'), _port_value(port), '!=' if negate else '==')

    def dport(self, port, negate: bool = False) -> Expr:
        proto = self._port_protocol('dport')
        return self._match(schema.payload(proto, 'dport'), _port_value(port), '!=' if negate else '==')

    # -- interfaces and layer 2 ---------------------------------------------

    def iifname(self, name: str, negate: bool = False) -> Expr:
        return self._match(schema.meta('iifname'), name, '!=' if negate else '==')

    def oifname(self, name: str, negate: bool = False) -> Expr:
        return self._match(schema.meta('oifname'), name, '!=' if negate else '==')

    def ether_saddr(self, mac: str) -> Expr:
        return self._match(schema.payload('ether', 'saddr'), mac)

    def ether_daddr(self, mac: str) -> Expr:
        return self._match(schema.payload('ether', 'daddr'), mac)

    def vlan_id(self, vlan_id: int) -> Expr:
        return self._match(schema.payload('vlan', 'id'), _check_int(vlan_id, 0, 4095, 'VLAN id'))

    def vlan_pcp(self, pcp: int) -> Expr:
        return self._match(schema.payload('vlan', 'pcp'), _check_int(pcp, 0, 7, 'VLAN PCP'))

    # -- IP header ----------------------------------------------------------

    def ttl(self, value: int, op='==') -> Expr:
        return self._match(schema.payload('ip', 'ttl'), _check_int(value, 0, 255, 'TTL'), op)

    def hoplimit(self, value: int, op='==') -> Expr:
        return self._match(
            schema.payload('ip6', 'hoplimit'), _check_int(value, 0, 255, 'Hop limit'), op
        )

    def length(self, value: int, op='==') -> Expr:
        proto = self._ip_protocol()
        field = 'payload_length' if proto == 'ip6' else 'length'
        return self._match(schema.payload(proto, field), _check_int(value, 0, 65535, 'Length'), op)

    def dscp(self, dscp) -> Expr:
        """Match the DSCP field by class name (``'af41'``, ``'ef'``) or value."""
        return self._match(schema.payload(self._ip_protocol(), 'dscp'), resolve_dscp(dscp))

    def fragmented(self, is_fragmented: bool = True) -> Expr:
        left = schema.bitwise_and(schema.payload('ip', 'frag-off'), 0x1FFF)
        return self._match(left, 0, '!=' if is_fragmented else '==')

    # -- TCP / ICMP ---------------------------------------------------------

    def tcp_flags(self, flags, mask=None) -> Expr:
        """Match TCP *flags* among *mask* (``tcp_flags('syn', ['syn', 'ack'])``)."""
        flag_list = [str(resolve_enum(TcpFlag, f, 'TCP flag')) for f in _as_list(flags)]
        if mask is None:
            return self._match(schema.payload('tcp', 'flags'), flag_list)
        mask_list = [str(resolve_enum(TcpFlag, f, 'TCP flag')) for f in _as_list(mask)]
        left = schema.bitwise_and(schema.payload('tcp', 'flags'), mask_list)
        return self._match(left, flag_list)

    def icmp_type(self, icmp_type) -> Expr:
        value = resolve_symbol(ICMP_TYPES, icmp_type, 'ICMP type', max_int=255)
        return self._match(schema.payload('icmp', 'type'), value)

    def icmp_code(self, code: int) -> Expr:
        return self._match(schema.payload('icmp', 'code'), _check_int(code, 0, 255, 'ICMP code'))

    def icmpv6_type(self, icmp_type) -> Expr:
        value = resolve_symbol(ICMPV6_TYPES, icmp_type, 'ICMPv6 type', max_int=255)
        return self._match(schema.payload('icmpv6', 'type'), value)

    def icmpv6_code(self, code: int) -> Expr:
        return self._match(
            schema.payload('icmpv6', 'code'), _check_int(code, 0, 255, 'ICMPv6 code')
        )

    # -- conntrack ----------------------------------------------------------

    def ct_state(self, states) -> Expr:
        values = [str(resolve_enum(CtState, s, 'conntrack state')) for s in _as_list(states)]
        return self._match(schema.ct('state'), values, 'in')

    def ct_status(self, statuses) -> Expr:
        values = [str(resolve_enum(CtStatus, s, 'conntrack status')) for s in _as_list(statuses)]
        return self._match(schema.ct('status'), values, 'in')

    def ct_direction(self, direction) -> Expr:
        return self._match(
            schema.ct('direction'), str(resolve_enum(CtDirection, direction, 'conntrack direction'))
        )

    def ct_mark(self, mark: int) -> Expr:
        return self._match(schema.ct('mark'), _check_int(mark, 0, 0xFFFFFFFF, 'Mark'))

    def ct_label(self, label) -> Expr:
        return self._match(schema.ct('label'), label)

    def ct_zone(self, zone: int) -> Expr:
        return self._match(schema.ct('zone'), _check_int(zone, 0, 0xFFFF, 'Zone'))

    def ct_helper(self, helper: str) -> Expr:
        return self._match(schema.ct('helper'), helper)

    def ct_bytes(self, value: int, op='>') -> Expr:
        return self._match(schema.ct('bytes'), _check_int(value, 0, 2**64 - 1, 'Bytes'), op)

    def ct_packets(self, value: int, op='>') -> Expr:
        return self._match(schema.ct('packets'), _check_int(value, 0, 2**64 - 1, 'Packets'), op)

    def ct_original_saddr(self, address: str) -> Expr:
        return self._match(schema.ct('saddr', CtDirection.ORIGINAL), address)

    def ct_original_daddr(self, address: str) -> Expr:
        return self._match(schema.ct('daddr', CtDirection.ORIGINAL), address)

    def ct_count(self, count: int, over: bool = True) -> Expr:
        """Match when the connection count is above (or not above) *count*."""
        _check_int(count, 1, 0xFFFFFFFF, 'Connection count')
        return self.append(schema.ct_count(count, inverted=not over))

    # -- meta ---------------------------------------------------------------

    def mark(self, mark: int) -> Expr:
        return self._match(schema.meta('mark'), _check_int(mark, 0, 0xFFFFFFFF, 'Mark'))

    def priority(self, value: int, op='==') -> Expr:
        return self._match(schema.meta('priority'), _check_int(value, 0, 0xFFFFFFFF, 'Priority'), op)

    def pkttype(self, pkttype) -> Expr:
        return self._match(schema.meta('pkttype'), str(resolve_enum(PktType, pkttype, 'packet type')))

    def cgroup(self, cgroup_id: int) -> Expr:
        return self._match(schema.meta('cgroup'), _check_int(cgroup_id, 0, 0xFFFFFFFF, 'cgroup'))

    def skuid(self, uid: int) -> Expr:
        return self._match(schema.meta('skuid'), _check_int(uid, 0, 0xFFFFFFFF, 'UID'))

    def skgid(self, gid: int) -> Expr:
        return self._match(schema.meta('skgid'), _check_int(gid, 0, 0xFFFFFFFF, 'GID'))

    # -- other protocols ----------------------------------------------------

    def ah_spi(self, spi: int) -> Expr:
        return self._match(schema.payload('ah', 'spi'), _check_int(spi, 0, 0xFFFFFFFF, 'SPI'))

    def esp_spi(self, spi: int) -> Expr:
        return self._match(schema.payload('esp', 'spi'), _check_int(spi, 0, 0xFFFFFFFF, 'SPI'))

    def arp_operation(self, operation) -> Expr:
        value = resolve_symbol(ARP_OPERATIONS, operation, 'ARP operation', max_int=0xFFFF)
        return self._match(schema.payload('arp', 'operation'), value)

    def _ensure_gre(self) -> Expr:
        return self if self.protocol == Protocol.GRE else self.gre()

    def gre_version(self, version: int) -> Expr:
        return self._ensure_gre()._match(
            schema.payload('gre', 'version'), _check_int(version, 0, 7, 'GRE version')
        )

    def gre_key(self, key: int) -> Expr:
        return self._ensure_gre()._match(
            schema.payload('gre', 'key'), _check_int(key, 0, 0xFFFFFFFF, 'GRE key')
        )

    def gre_flags(self, flags: int) -> Expr:
        return self._ensure_gre()._match(
            schema.payload('gre', 'flags'), _check_int(flags, 0, 0x1F, 'GRE flags')
        )

    def socket_transparent(self) -> Expr:
        return self._match(schema.socket('transparent'), 1)

    def osf_name(self, os_name: str, ttl='loose') -> Expr:
        return self._match(schema.osf('name', resolve_enum(OsfTtl, ttl, 'OSF ttl')), os_name)

    def osf_version(self, version: str, ttl='loose') -> Expr:
        return self._match(schema.osf('version', resolve_enum(OsfTtl, ttl, 'OSF ttl')), version)

    # -- raw payload --------------------------------------------------------

    def payload_raw(self, base, offset: int, length: int, value, op='==') -> Expr:
        """Match *length* bits at bit *offset* from *base* (``ll``/``nh``/``th``/``ih``).

        Offsets and lengths are bit counts and reach the wire unchanged.
        """
        left = self._raw(base, offset, length)
        return self._match(left, value, op)

    def payload_raw_masked(self, base, offset: int, length: int, mask: int, value: int) -> Expr:
        left = schema.bitwise_and(self._raw(base, offset, length), mask)
        return self._match(left, value)

    @staticmethod
    def _raw(base, offset: int, length: int) -> dict:
        base = resolve_payload_base(base)
        _check_int(offset, 0, 2**32 - 1, 'Bit offset')
        _check_int(length, 1, 2**32 - 1, 'Bit length')
        return schema.payload_raw(base, offset, length)

    # -- sets ---------------------------------------------------------------

    def in_set(self, set_name: str, field: str, negate: bool = False) -> Expr:
        """Match *field* (saddr/daddr/sport/dport) against a named set."""
        if field in ('saddr', 'daddr'):
            left = schema.payload(self._ip_protocol(), field)
        elif field in ('sport', 'dport'):
            left = schema.payload(self._port_protocol(field), field)
        else:
            msg = f'Invalid set match field: {field!r}'
            raise InvalidArgument(msg)
        return self._match(left, schema.set_ref(set_name), '!=' if negate else '==')

    # -- statements ---------------------------------------------------------

    def counter(self, name: str | None = None) -> Expr:
        return self.append(schema.counter(name))

    def log(self, prefix: str | None = None, level=None, group: int | None = None) -> Expr:
        level = resolve_log_level(level) if level is not None else None
        if group is not None:
            _check_int(group, 0, 65535, 'Log group')
        return self.append(schema.log(prefix, level, group))

    def limit(self, rate: int, per='second', burst: int | None = None, over: bool = False) -> Expr:
        """Rate limit: ``limit(10, 'minute', burst=5)``; *over* inverts the match."""
        _check_int(rate, 0, 2**64 - 1, 'Rate')
        if burst is not None:
            _check_int(burst, 0, 0xFFFFFFFF, 'Burst')
        unit = resolve_enum(RateUnit, per, 'rate unit')
        return self.append(schema.limit(rate, unit, burst, inverted=over))

    def set_mark(self, mark: int) -> Expr:
        return self.append(schema.mangle(schema.meta('mark'), _check_int(mark, 0, 0xFFFFFFFF, 'Mark')))

    def set_ct_mark(self, mark: int) -> Expr:
        return self.append(schema.mangle(schema.ct('mark'), _check_int(mark, 0, 0xFFFFFFFF, 'Mark')))

    def set_ct_label(self, label) -> Expr:
        return self.append(schema.mangle(schema.ct('label'), label))

    def set_ct_helper(self, helper: str) -> Expr:
        return self.append(schema.mangle(schema.ct('helper'), helper))

    def set_ct_zone(self, zone: int) -> Expr:
        return self.append(schema.mangle(schema.ct('zone'), _check_int(zone, 0, 0xFFFF, 'Zone')))

    def save_mark(self) -> Expr:
        """Copy the packet mark to the connection mark."""
        return self.append(schema.mangle(schema.ct('mark'), schema.meta('mark')))

    def restore_mark(self) -> Expr:
        return self.append(schema.mangle(schema.meta('mark'), schema.ct('mark')))

    def set_dscp(self, dscp) -> Expr:
        key = schema.payload(self._ip_protocol(), 'dscp')
        return self.append(schema.mangle(key, resolve_dscp(dscp)))

    def set_ttl(self, ttl: int) -> Expr:
        key = schema.payload('ip', 'ttl')
        return self.append(schema.mangle(key, _check_int(ttl, 0, 255, 'TTL')))

    def set_hoplimit(self, hoplimit: int) -> Expr:
        key = schema.payload('ip6', 'hoplimit')
        return self.append(schema.mangle(key, _check_int(hoplimit, 0, 255, 'Hop limit')))

    def increment_ttl(self) -> Expr:
        key = schema.payload('ip', 'ttl')
        return self.append(schema.mangle(key, schema.plus(key, 1)))

    def decrement_ttl(self) -> Expr:
        key = schema.payload('ip', 'ttl')
        return self.append(schema.mangle(key, schema.minus(key, 1)))

    def increment_hoplimit(self) -> Expr:
        key = schema.payload('ip6', 'hoplimit')
        return self.append(schema.mangle(key, schema.plus(key, 1)))

    def decrement_hoplimit(self) -> Expr:
        key = schema.payload('ip6', 'hoplimit')
        return self.append(schema.mangle(key, schema.minus(key, 1)))

    def set_tcp_mss(self, mss) -> Expr:
        """Clamp the TCP MSS option to *mss*, or to the route MTU for ``'pmtu'``."""
        key = schema.tcp_option('maxseg', 'size')
        if mss == 'pmtu':
            return self.append(schema.mangle(key, {'rt': {'key': 'mtu'}}))
        return self.append(schema.mangle(key, _check_int(mss, 1, 65535, 'MSS')))

    # -- NAT ----------------------------------------------------------------

    def snat(self, address: str, port=None) -> Expr:
        port = _port_value(port) if port is not None else None
        return self.append(schema.nat('snat', address, port))

    def dnat(self, address: str, port=None) -> Expr:
        port = _port_value(port) if port is not None else None
        return self.append(schema.nat('dnat', address, port))

    def masquerade(self, port_range=None) -> Expr:
        port = _port_value(port_range) if port_range is not None else None
        return self.append(schema.nat('masquerade', port=port))

    def redirect(self, port) -> Expr:
        return self.append(schema.nat('redirect', port=_port_value(port)))

    # -- meters -------------------------------------------------------------

    def _meter(self, op: str, key, set_name: str, rate: int, per, burst: int) -> Expr:
        unit = resolve_enum(RateUnit, per, 'rate unit')
        limit = schema.limit(_check_int(rate, 0, 2**64 - 1, 'Rate'), unit, burst)
        return self.append(schema.set_statement(op, key, set_name, [limit]))

    def meter_update(self, key, set_name: str, rate: int, per='second', burst: int = 0) -> Expr:
        """Per-key rate limit stored in the dynamic set *set_name*."""
        return self._meter('update', key, set_name, rate, per, burst)

    def meter_add(self, key, set_name: str, rate: int, per='second', burst: int = 0) -> Expr:
        return self._meter('add', key, set_name, rate, per, burst)

    # -- verdicts -----------------------------------------------------------

    def accept(self) -> Expr:
        return self.append(schema.verdict(Verdict.ACCEPT))

    def drop(self) -> Expr:
        return self.append(schema.verdict(Verdict.DROP))

    def continue_(self) -> Expr:
        return self.append(schema.verdict(Verdict.CONTINUE))

    def return_(self) -> Expr:
        return self.append(schema.verdict(Verdict.RETURN))

    def jump(self, chain: str) -> Expr:
        return self.append(schema.verdict(Verdict.JUMP, chain))

    def goto(self, chain: str) -> Expr:
        return self.append(schema.verdict(Verdict.GOTO, chain))

    def reject(self, reject_type='default') -> Expr:
        rtype, code = resolve_symbol(REJECT_TYPES, reject_type, 'reject type')
        return self.append(schema.reject(rtype, code))

    def notrack(self) -> Expr:
        return self.append(schema.statement('notrack'))

    def queue(self, num: int, bypass: bool = False, fanout: bool = False) -> Expr:
        body = {'num': _check_int(num, 0, 0xFFFF, 'Queue number')}
        flags = [name for name, on in (('bypass', bypass), ('fanout', fanout)) if on]
        if flags:
            body['flags'] = flags
        return self.append(schema.statement('queue', body))

    def dup(self, device: str, address: str | None = None) -> Expr:
        body = {'dev': device}
        if address is not None:
            body = {'addr': address, 'dev': device}
        return self.append(schema.statement('dup', body))

    def flow_offload(self, flowtable: str) -> Expr:
        body = {'op': 'add', 'flowtable': schema.set_ref(flowtable)}
        return self.append(schema.statement('flow', body))

    def synproxy(
        self,
        mss: int | None = None,
        wscale: int | None = None,
        sack_perm: bool = False,
        timestamp: bool = False,
    ) -> Expr:
        body = {}
        if mss is not None:
            body['mss'] = _check_int(mss, 1, 65535, 'MSS')
        if wscale is not None:
            body['wscale'] = _check_int(wscale, 0, 14, 'Window scale')
        flags = [name for name, on in (('timestamp', timestamp), ('sack-perm', sack_perm)) if on]
        if flags:
            body['flags'] = flags
        return self.append(schema.statement('synproxy', body or None))

    def tproxy(self, port: int, address: str | None = None, family=None) -> Expr:
        body = {}
        if family is not None:
            body['family'] = str(resolve_enum(Family, family, 'family'))
        if address is not None:
            body['addr'] = address
        body['port'] = _check_port(port)
        return self.append(schema.statement('tproxy', body))
