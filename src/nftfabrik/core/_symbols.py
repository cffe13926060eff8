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

"""Symbolic vocabularies of the nftables JSON schema.

Every enumerated string the wire schema accepts is defined once here,
either as a ``StrEnum`` (members can be used directly as wire values) or
as a name -> wire value map where the wire value differs from the
Python-friendly name.

Lookups never coerce: an unknown symbolic name raises
``InvalidArgument``. A silently wrong wire value is worse than a
rejected call.

Example::

    from nftfabrik.core import Family, resolve_enum

    resolve_enum(Family, 'ip6', 'family')   # Family.IP6
    resolve_enum(Family, 'ipx', 'family')   # raises InvalidArgument
"""

from enum import StrEnum

from nftfabrik._errors import InvalidArgument


class Family(StrEnum):
    """Address families a table can belong to."""

    IP = 'ip'
    IP6 = 'ip6'
    INET = 'inet'
    ARP = 'arp'
    BRIDGE = 'bridge'
    NETDEV = 'netdev'


class Op(StrEnum):
    """Relational operators of a match statement."""

    EQ = '=='
    NE = '!='
    LT = '<'
    GT = '>'
    LE = '<='
    GE = '>='
    IN = 'in'


class Verdict(StrEnum):
    ACCEPT = 'accept'
    DROP = 'drop'
    CONTINUE = 'continue'
    RETURN = 'return'
    JUMP = 'jump'
    GOTO = 'goto'


# Verdicts after which no further match makes sense. ``reject`` is a
# statement on the wire but ends rule evaluation the same way.
TERMINAL_VERDICTS = frozenset({
    Verdict.ACCEPT,
    Verdict.DROP,
    Verdict.RETURN,
    Verdict.JUMP,
    Verdict.GOTO,
    'reject',
})


class Protocol(StrEnum):
    """Transport (layer 4) protocols usable as protocol context."""

    TCP = 'tcp'
    UDP = 'udp'
    UDPLITE = 'udplite'
    SCTP = 'sctp'
    DCCP = 'dccp'
    ICMP = 'icmp'
    ICMPV6 = 'icmpv6'
    GRE = 'gre'
    ESP = 'esp'
    AH = 'ah'


# Protocols whose header carries sport/dport fields.
PORT_PROTOCOLS = frozenset(
    {Protocol.TCP, Protocol.UDP, Protocol.UDPLITE, Protocol.SCTP, Protocol.DCCP}
)


class PayloadBase(StrEnum):
    """Base references for raw (bit-addressed) payload expressions."""

    LL = 'll'  # link layer
    NH = 'nh'  # network header
    TH = 'th'  # transport header
    IH = 'ih'  # inner header


class RateUnit(StrEnum):
    SECOND = 'second'
    MINUTE = 'minute'
    HOUR = 'hour'
    DAY = 'day'
    WEEK = 'week'


class TcpFlag(StrEnum):
    FIN = 'fin'
    SYN = 'syn'
    RST = 'rst'
    PSH = 'psh'
    ACK = 'ack'
    URG = 'urg'
    ECN = 'ecn'
    CWR = 'cwr'


class LogLevel(StrEnum):
    EMERG = 'emerg'
    ALERT = 'alert'
    CRIT = 'crit'
    ERR = 'err'
    WARN = 'warn'
    NOTICE = 'notice'
    INFO = 'info'
    DEBUG = 'debug'
    AUDIT = 'audit'


class CtState(StrEnum):
    NEW = 'new'
    ESTABLISHED = 'established'
    RELATED = 'related'
    INVALID = 'invalid'
    UNTRACKED = 'untracked'


class CtStatus(StrEnum):
    EXPECTED = 'expected'
    SEEN_REPLY = 'seen-reply'
    ASSURED = 'assured'
    CONFIRMED = 'confirmed'
    SNAT = 'snat'
    DNAT = 'dnat'
    DYING = 'dying'


class CtDirection(StrEnum):
    ORIGINAL = 'original'
    REPLY = 'reply'


class PktType(StrEnum):
    HOST = 'host'
    UNICAST = 'unicast'
    BROADCAST = 'broadcast'
    MULTICAST = 'multicast'
    OTHER = 'other'


class OsfTtl(StrEnum):
    LOOSE = 'loose'
    SKIP = 'skip'
    STRICT = 'strict'


class ChainType(StrEnum):
    FILTER = 'filter'
    NAT = 'nat'
    ROUTE = 'route'


class Hook(StrEnum):
    PREROUTING = 'prerouting'
    INPUT = 'input'
    FORWARD = 'forward'
    OUTPUT = 'output'
    POSTROUTING = 'postrouting'
    INGRESS = 'ingress'
    EGRESS = 'egress'


class ChainPolicy(StrEnum):
    ACCEPT = 'accept'
    DROP = 'drop'


class SetFlag(StrEnum):
    CONSTANT = 'constant'
    INTERVAL = 'interval'
    TIMEOUT = 'timeout'
    DYNAMIC = 'dynamic'


# Python-friendly name -> wire value
ICMP_TYPES = {
    'echo_reply': 'echo-reply',
    'destination_unreachable': 'destination-unreachable',
    'dest_unreachable': 'destination-unreachable',
    'source_quench': 'source-quench',
    'redirect': 'redirect',
    'echo_request': 'echo-request',
    'router_advertisement': 'router-advertisement',
    'router_solicitation': 'router-solicitation',
    'time_exceeded': 'time-exceeded',
    'parameter_problem': 'parameter-problem',
    'timestamp_request': 'timestamp-request',
    'timestamp_reply': 'timestamp-reply',
    'info_request': 'info-request',
    'info_reply': 'info-reply',
    'address_mask_request': 'address-mask-request',
    'address_mask_reply': 'address-mask-reply',
}

ICMPV6_TYPES = {
    'destination_unreachable': 'destination-unreachable',
    'dest_unreachable': 'destination-unreachable',
    'packet_too_big': 'packet-too-big',
    'time_exceeded': 'time-exceeded',
    'parameter_problem': 'parameter-problem',
    'param_problem': 'parameter-problem',
    'echo_request': 'echo-request',
    'echo_reply': 'echo-reply',
    'mld_listener_query': 'mld-listener-query',
    'mld_listener_report': 'mld-listener-report',
    'mld_listener_done': 'mld-listener-done',
    'nd_router_solicit': 'nd-router-solicit',
    'router_solicit': 'nd-router-solicit',
    'nd_router_advert': 'nd-router-advert',
    'router_advert': 'nd-router-advert',
    'nd_neighbor_solicit': 'nd-neighbor-solicit',
    'neighbour_solicit': 'nd-neighbor-solicit',
    'nd_neighbor_advert': 'nd-neighbor-advert',
    'neighbour_advert': 'nd-neighbor-advert',
    'nd_redirect': 'nd-redirect',
    'redirect': 'nd-redirect',
    'router_renumbering': 'router-renumbering',
    'ind_neighbor_solicit': 'ind-neighbor-solicit',
    'ind_neighbor_advert': 'ind-neighbor-advert',
    'mld2_listener_report': 'mld2-listener-report',
}

# DiffServ code point class names -> 6-bit value (RFC 2474, 2597, 3246, 5865, 8622)
DSCP_CLASSES = {
    'cs0': 0,
    'le': 1,
    'cs1': 8,
    'af11': 10,
    'af12': 12,
    'af13': 14,
    'cs2': 16,
    'af21': 18,
    'af22': 20,
    'af23': 22,
    'cs3': 24,
    'af31': 26,
    'af32': 28,
    'af33': 30,
    'cs4': 32,
    'af41': 34,
    'af42': 36,
    'af43': 38,
    'cs5': 40,
    'va': 44,
    'ef': 46,
    'cs6': 48,
    'cs7': 56,
}

# reject flavour -> (type, expr); (None, None) is the kernel default
REJECT_TYPES = {
    'default': (None, None),
    'icmp_port_unreachable': (None, None),
    'tcp_reset': ('tcp reset', None),
    'icmp_net_unreachable': ('icmp', 'net-unreachable'),
    'icmp_host_unreachable': ('icmp', 'host-unreachable'),
    'icmp_admin_prohibited': ('icmp', 'admin-prohibited'),
    'icmpv6_no_route': ('icmpv6', 'no-route'),
    'icmpv6_admin_prohibited': ('icmpv6', 'admin-prohibited'),
    'icmpv6_port_unreachable': ('icmpv6', 'port-unreachable'),
    'icmpx_port_unreachable': ('icmpx', 'port-unreachable'),
    'icmpx_host_unreachable': ('icmpx', 'host-unreachable'),
    'icmpx_no_route': ('icmpx', 'no-route'),
    'icmpx_admin_prohibited': ('icmpx', 'admin-prohibited'),
}

ARP_OPERATIONS = {
    'request': 1,
    'reply': 2,
    'rrequest': 3,
    'rreply': 4,
    'inrequest': 8,
    'inreply': 9,
    'nak': 10,
}

# Accepted aliases for operator names
_OP_ALIASES = {
    'eq': Op.EQ,
    'ne': Op.NE,
    'lt': Op.LT,
    'gt': Op.GT,
    'le': Op.LE,
    'ge': Op.GE,
    'in': Op.IN,
}

_LOG_LEVEL_ALIASES = {
    'warning': LogLevel.WARN,
    'error': LogLevel.ERR,
    'critical': LogLevel.CRIT,
    'emergency': LogLevel.EMERG,
}


def _normalize(name: str) -> str:
    return name.strip().lower().replace('-', '_').replace(' ', '_')


def resolve_enum(enum_cls, value, what: str):
    """Return the *enum_cls* member for *value*.

    Accepts a member, its wire value, or its member name in any case
    with ``-`` and ``_`` treated alike.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            pass
        key = _normalize(value)
        for member in enum_cls:
            if key in (member.name.lower(), _normalize(member.value)):
                return member
    choices = ', '.join(m.value for m in enum_cls)
    msg = f'Unknown {what}: {value!r} (expected one of: {choices})'
    raise InvalidArgument(msg)


def resolve_symbol(mapping: dict, value, what: str, *, max_int: int | None = None):
    """Map a symbolic name to its wire value.

    If *max_int* is given, integers in ``0..max_int`` pass through
    unchanged. Wire values themselves are accepted as input as well.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        if max_int is not None and 0 <= value <= max_int:
            return value
        msg = f'Invalid {what}: {value!r}'
        raise InvalidArgument(msg)
    if isinstance(value, str):
        key = _normalize(value)
        if key in mapping:
            return mapping[key]
        if value in mapping.values():
            return value
    msg = f'Unknown {what}: {value!r}'
    raise InvalidArgument(msg)


def resolve_op(value) -> Op:
    if isinstance(value, str) and value.lower() in _OP_ALIASES:
        return _OP_ALIASES[value.lower()]
    return resolve_enum(Op, value, 'operator')


def resolve_log_level(value) -> LogLevel:
    if isinstance(value, str) and value.lower() in _LOG_LEVEL_ALIASES:
        return _LOG_LEVEL_ALIASES[value.lower()]
    return resolve_enum(LogLevel, value, 'log level')


def resolve_dscp(value) -> int:
    return resolve_symbol(DSCP_CLASSES, value, 'DSCP class', max_int=63)


_PAYLOAD_BASE_ALIASES = {
    'link_layer': PayloadBase.LL,
    'network_header': PayloadBase.NH,
    'transport_header': PayloadBase.TH,
    'inner_header': PayloadBase.IH,
}


def resolve_payload_base(value) -> PayloadBase:
    if isinstance(value, str) and _normalize(value) in _PAYLOAD_BASE_ALIASES:
        return _PAYLOAD_BASE_ALIASES[_normalize(value)]
    return resolve_enum(PayloadBase, value, 'payload base')
