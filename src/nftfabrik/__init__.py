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

"""Build libnftables JSON batches and submit them to a worker process."""

__version__ = '0.1.0'

from nftfabrik._errors import (
    InvalidArgument,
    InvalidContext,
    MalformedResponse,
    NftError,
    SubmitTimeout,
    SubsystemError,
    TransportDown,
    TransportError,
    TransportNotConfigured,
)
from nftfabrik.builder import (
    ChainSpec,
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
    Transaction,
    to_json,
    to_wire,
)
from nftfabrik.core import Expr, Family
from nftfabrik.transport import (
    FramedChannel,
    Outcome,
    OutcomeStatus,
    TransportClient,
    classify,
    decode_ruleset,
)

__all__ = [
    'ChainSpec',
    'CounterSpec',
    'ElementSpec',
    'Expr',
    'Family',
    'FlowtableSpec',
    'FramedChannel',
    'InvalidArgument',
    'InvalidContext',
    'LimitSpec',
    'MalformedResponse',
    'MapSpec',
    'NftError',
    'Outcome',
    'OutcomeStatus',
    'QuotaSpec',
    'RuleSpec',
    'RulesetSpec',
    'SetSpec',
    'SubmitTimeout',
    'SubsystemError',
    'TableSpec',
    'Transaction',
    'TransportClient',
    'TransportDown',
    'TransportError',
    'TransportNotConfigured',
    '__version__',
    'classify',
    'decode_ruleset',
    'to_json',
    'to_wire',
]
