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

from ._expr import Expr
from ._schema import Fragment, FragmentKind
from ._symbols import (
    ARP_OPERATIONS,
    DSCP_CLASSES,
    ICMP_TYPES,
    ICMPV6_TYPES,
    REJECT_TYPES,
    ChainPolicy,
    ChainType,
    CtDirection,
    CtState,
    CtStatus,
    Family,
    Hook,
    LogLevel,
    Op,
    PayloadBase,
    Protocol,
    RateUnit,
    SetFlag,
    TcpFlag,
    Verdict,
    resolve_enum,
)

__all__ = [
    'ARP_OPERATIONS',
    'DSCP_CLASSES',
    'ICMPV6_TYPES',
    'ICMP_TYPES',
    'REJECT_TYPES',
    'ChainPolicy',
    'ChainType',
    'CtDirection',
    'CtState',
    'CtStatus',
    'Expr',
    'Family',
    'Fragment',
    'FragmentKind',
    'Hook',
    'LogLevel',
    'Op',
    'PayloadBase',
    'Protocol',
    'RateUnit',
    'SetFlag',
    'TcpFlag',
    'Verdict',
    'resolve_enum',
]
