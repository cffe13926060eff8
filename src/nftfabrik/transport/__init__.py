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

from ._channel import FramedChannel, encode_frame
from ._classifier import (
    DEFAULT_ERROR_MARKERS,
    Outcome,
    OutcomeStatus,
    classify,
)
from ._client import DEFAULT_TIMEOUT, Requestor, TransportClient
from ._decoder import (
    ChainInfo,
    DecodedRuleset,
    RuleInfo,
    SetElementInfo,
    SetInfo,
    TableInfo,
    decode_ruleset,
)

__all__ = [
    'DEFAULT_ERROR_MARKERS',
    'DEFAULT_TIMEOUT',
    'ChainInfo',
    'DecodedRuleset',
    'FramedChannel',
    'Outcome',
    'OutcomeStatus',
    'Requestor',
    'RuleInfo',
    'SetElementInfo',
    'SetInfo',
    'TableInfo',
    'TransportClient',
    'classify',
    'decode_ruleset',
    'encode_frame',
]
