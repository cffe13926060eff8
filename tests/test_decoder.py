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

"""Unit tests for list-query result decoding."""

import json

import pytest

from nftfabrik import SubsystemError
from nftfabrik.transport import ChainInfo, TableInfo, classify, decode_ruleset

RULESET = {
    'nftables': [
        {'metainfo': {'version': '1.0.9', 'json_schema_version': 1}},
        {'table': {'family': 'inet', 'name': 'filter', 'handle': 1}},
        {
            'chain': {
                'family': 'inet',
                'table': 'filter',
                'name': 'input',
                'handle': 1,
                'type': 'filter',
                'hook': 'input',
                'prio': 0,
                'policy': 'drop',
            },
        },
        {
            'rule': {
                'family': 'inet',
                'table': 'filter',
                'chain': 'input',
                'handle': 4,
                'comment': 'high ports',
                'expr': [
                    {
                        'match': {
                            'op': '==',
                            'left': {'payload': {'protocol': 'tcp', 'field': 'dport'}},
                            'right': {'range': [1024, 65535]},
                        },
                    },
                    {'accept': None},
                ],
            },
        },
        {
            'set': {
                'family': 'inet',
                'table': 'filter',
                'name': 'blocklist',
                'handle': 2,
                'type': 'ipv4_addr',
                'flags': ['interval'],
                'elem': ['10.0.0.1', {'prefix': {'addr': '192.168.0.0', 'len': 16}}],
            },
        },
    ],
}


class TestDecodeRuleset:
    def test_tables_and_chains(self):
        decoded = decode_ruleset(RULESET)
        assert decoded.tables == [TableInfo('filter', 'inet', 1)]
        assert decoded.chains == [
            ChainInfo('input', 'inet', 'filter', handle=1, type='filter', hook='input', prio=0, policy='drop'),
        ]

    def test_rule_ranges_become_python_ranges(self):
        (rule,) = decode_ruleset(RULESET).rules
        assert rule.handle == 4
        assert rule.comment == 'high ports'
        assert rule.expr[0]['match']['right'] == range(1024, 65536)
        assert rule.expr[1] == {'accept': None}

    def test_sets_and_elements(self):
        decoded = decode_ruleset(RULESET)
        (blocklist,) = decoded.sets
        assert blocklist.key_type == 'ipv4_addr'
        assert blocklist.flags == ['interval']
        assert [e.value for e in decoded.set_elements] == [
            '10.0.0.1',
            {'prefix': {'addr': '192.168.0.0', 'len': 16}},
        ]
        assert {e.set for e in decoded.set_elements} == {'blocklist'}

    def test_from_outcome(self):
        decoded = decode_ruleset(classify(json.dumps(RULESET).encode()))
        assert len(decoded.tables) == 1

    def test_success_without_data_is_empty(self):
        assert not decode_ruleset(classify(b''))

    def test_failure_raises(self):
        with pytest.raises(SubsystemError):
            decode_ruleset(classify(b'{"nftables": [{"error": "No such file or directory"}]}'))

    def test_metainfo_only(self):
        assert not decode_ruleset({'nftables': [{'metainfo': {}}]})

    def test_empty_set_body_is_skipped(self):
        decoded = decode_ruleset({'nftables': [{'set': {}}]})
        assert decoded.sets == []

    def test_map(self):
        item = {
            'map': {
                'family': 'inet',
                'name': 'ports',
                'table': 'filter',
                'type': 'inet_service',
                'map': 'verdict',
                'handle': 4,
            },
        }
        (ports,) = decode_ruleset({'nftables': [item]}).sets
        assert ports.name == 'ports'
        assert ports.map == 'verdict'
