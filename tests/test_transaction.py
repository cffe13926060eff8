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

"""Unit tests for Transaction, operation specs and list queries."""

import json

import pytest

from nftfabrik import InvalidArgument, InvalidContext, TransportNotConfigured
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
    list_chain,
    list_ruleset,
    list_set,
    list_tables,
    to_json,
    to_wire,
)
from nftfabrik.core import Expr
from nftfabrik.transport import OutcomeStatus


def _ssh():
    return Expr.begin().tcp().dport(22).accept()


def _commands(txn):
    return to_wire(txn)['nftables']


class TestEndToEnd:
    def test_table_chain_rule(self):
        txn = (
            Transaction()
            .add(TableSpec('t', family='inet'))
            .add(ChainSpec('c', table='t'))
            .add(RuleSpec(_ssh()))
        )
        assert _commands(txn) == [
            {'add': {'table': {'family': 'inet', 'name': 't'}}},
            {'add': {'chain': {'family': 'inet', 'table': 't', 'name': 'c'}}},
            {
                'add': {
                    'rule': {
                        'family': 'inet',
                        'table': 't',
                        'chain': 'c',
                        'expr': [
                            {'match': {'op': '==', 'left': {'payload': {'protocol': 'ip', 'field': 'protocol'}}, 'right': 'tcp'}},
                            {'match': {'op': '==', 'left': {'payload': {'protocol': 'tcp', 'field': 'dport'}}, 'right': 22}},
                            {'accept': None},
                        ],
                    },
                },
            },
        ]

    def test_submit_through_stub_is_success(self, make_requestor):
        requestor = make_requestor(reply=b'')
        txn = Transaction().add(TableSpec('t')).add(ChainSpec('c')).add(RuleSpec(_ssh()))
        outcome = txn.submit(requestor, timeout=2.0)
        assert outcome.status == OutcomeStatus.SUCCESS
        assert json.loads(requestor.documents[0]) == to_wire(txn)
        assert requestor.timeouts == [2.0]

    def test_submit_uses_attached_transport(self, stub_requestor):
        outcome = Transaction().with_transport(stub_requestor).add(TableSpec('t')).submit()
        assert outcome.ok
        assert len(stub_requestor.documents) == 1

    def test_submit_without_transport(self):
        with pytest.raises(TransportNotConfigured):
            Transaction().add(TableSpec('t')).submit()

    def test_submit_failure_reply(self, make_requestor):
        requestor = make_requestor(reply=b'{"nftables": [{"error": "table exists"}]}')
        outcome = Transaction().add(TableSpec('t')).submit(requestor)
        assert outcome.status == OutcomeStatus.FAILURE
        assert outcome.reason == 'table exists'


class TestDeterminism:
    def test_serialization_is_byte_identical(self):
        txn = Transaction().add(TableSpec('t')).add(ChainSpec('c', type='filter', hook='input', priority=0))
        assert to_json(txn) == to_json(txn)

    def test_equal_transactions_serialize_equal(self):
        def build():
            return Transaction().add(TableSpec('t')).add(ChainSpec('c')).add(RuleSpec(_ssh()))

        assert to_json(build()) == to_json(build())

    def test_to_wire_returns_fresh_copies(self):
        txn = Transaction().add(TableSpec('t'))
        first = to_wire(txn)
        first['nftables'][0]['add']['table']['name'] = 'changed'
        assert to_wire(txn)['nftables'][0]['add']['table']['name'] == 't'

    def test_order_is_append_order(self):
        txn = (
            Transaction()
            .add(TableSpec('t'))
            .add(ChainSpec('a'))
            .add(ChainSpec('b'))
            .delete(ChainSpec('a'))
        )
        verbs_names = [(verb, body['chain']['name']) for cmd in _commands(txn)[1:] for verb, body in cmd.items()]
        assert verbs_names == [('add', 'a'), ('add', 'b'), ('delete', 'a')]

    def test_compact_json(self):
        assert to_json(Transaction().add(TableSpec('t'))) == '{"nftables":[{"add":{"table":{"family":"inet","name":"t"}}}]}'


class TestContext:
    def test_table_becomes_ambient(self):
        txn = Transaction().add(TableSpec('filter'))
        assert txn.table == 'filter'

    def test_chain_without_table_fails(self):
        with pytest.raises(InvalidContext):
            Transaction().add(ChainSpec('input'))

    def test_rule_without_chain_fails(self):
        with pytest.raises(InvalidContext):
            Transaction().add(TableSpec('t')).add(RuleSpec(_ssh()))

    def test_context_captured_at_append_time(self):
        txn = Transaction().add(TableSpec('t')).add(ChainSpec('a')).add(RuleSpec(_ssh()))
        txn = txn.with_context(chain='b').add(RuleSpec(_ssh()))
        rules = [cmd['add']['rule'] for cmd in _commands(txn) if 'rule' in cmd.get('add', {})]
        assert [r['chain'] for r in rules] == ['a', 'b']

    def test_explicit_family_on_table_sticks(self):
        txn = Transaction().add(TableSpec('t6', family='ip6')).add(ChainSpec('c'))
        assert _commands(txn)[1]['add']['chain']['family'] == 'ip6'

    def test_new_table_clears_chain(self):
        txn = Transaction().add(TableSpec('a')).add(ChainSpec('c')).add(TableSpec('b'))
        assert txn.chain is None

    def test_set_becomes_ambient_collection(self):
        txn = (
            Transaction()
            .add(TableSpec('t'))
            .add(SetSpec('blocklist', type='ipv4_addr'))
            .add(ElementSpec(['10.0.0.1', '10.0.0.2']))
        )
        assert _commands(txn)[2] == {
            'add': {'element': {'family': 'inet', 'table': 't', 'name': 'blocklist', 'elem': ['10.0.0.1', '10.0.0.2']}},
        }

    def test_element_without_set_fails(self):
        with pytest.raises(InvalidContext):
            Transaction().add(TableSpec('t')).add(ElementSpec(['10.0.0.1']))

    def test_with_context_unknown_family(self):
        with pytest.raises(InvalidArgument):
            Transaction().with_context(family='ipx')

    def test_rename_updates_ambient_chain(self):
        txn = Transaction().add(TableSpec('t')).add(ChainSpec('old')).rename(ChainSpec('old', new_name='new'))
        assert txn.chain == 'new'


class TestBatch:
    def test_batch_expands_in_order(self):
        rules = [_ssh(), Expr.begin().tcp().dport(80).accept(), Expr.begin().drop()]
        txn = Transaction().add(TableSpec('t')).add(ChainSpec('c')).add(RuleSpec(rules))
        commands = _commands(txn)[2:]
        assert len(commands) == 3
        assert [c['add']['rule']['expr'] for c in commands] == [r.to_list() for r in rules]
        assert {(c['add']['rule']['table'], c['add']['rule']['chain']) for c in commands} == {('t', 'c')}

    def test_batch_of_statement_lists(self):
        txn = Transaction(table='t', chain='c').add(RuleSpec([[{'accept': None}], [{'drop': None}]]))
        assert len(txn) == 2

    def test_single_statement_list_is_one_rule(self):
        txn = Transaction(table='t', chain='c').add(RuleSpec([{'accept': None}]))
        assert len(txn) == 1

    def test_batch_replace_rejected(self):
        with pytest.raises(InvalidArgument):
            Transaction(table='t', chain='c').replace(RuleSpec([_ssh(), _ssh()], handle=3))


class TestVerbs:
    def test_insert_requires_position(self):
        with pytest.raises(InvalidArgument):
            Transaction(table='t', chain='c').insert(RuleSpec(_ssh()))

    def test_insert_with_index(self):
        txn = Transaction(table='t', chain='c').insert(RuleSpec(_ssh(), index=0))
        assert _commands(txn)[0]['insert']['rule']['index'] == 0

    def test_replace_requires_handle(self):
        with pytest.raises(InvalidArgument):
            Transaction(table='t', chain='c').replace(RuleSpec(_ssh()))

    def test_replace(self):
        txn = Transaction(table='t', chain='c').replace(RuleSpec(_ssh(), handle=7, comment='ssh'))
        rule = _commands(txn)[0]['replace']['rule']
        assert rule['handle'] == 7
        assert rule['comment'] == 'ssh'

    def test_delete_rule_requires_handle(self):
        with pytest.raises(InvalidArgument):
            Transaction(table='t', chain='c').delete(RuleSpec())

    def test_delete_rule_by_handle(self):
        txn = Transaction(table='t', chain='c').delete(RuleSpec(handle=4))
        assert _commands(txn) == [{'delete': {'rule': {'family': 'inet', 'table': 't', 'chain': 'c', 'handle': 4}}}]

    def test_rename_requires_new_name(self):
        with pytest.raises(InvalidArgument):
            Transaction(table='t').rename(ChainSpec('c'))

    def test_rename_requires_table(self):
        with pytest.raises(InvalidContext):
            Transaction().rename(ChainSpec('c', new_name='d'))

    def test_rename(self):
        txn = Transaction(table='t').rename(ChainSpec('c', new_name='d'))
        assert _commands(txn) == [{'rename': {'chain': {'family': 'inet', 'table': 't', 'name': 'c', 'newname': 'd'}}}]

    @pytest.mark.parametrize(
        ('method', 'spec'),
        [
            ('rename', TableSpec('t')),
            ('insert', ChainSpec('c', table='t')),
            ('replace', SetSpec('s', table='t')),
            ('flush', CounterSpec('n', table='t')),
            ('flush', ElementSpec(['1'], set='s', table='t')),
            ('add', RulesetSpec()),
        ],
    )
    def test_invalid_verb_for_kind(self, method, spec):
        with pytest.raises(InvalidArgument):
            getattr(Transaction(), method)(spec)


class TestFlush:
    def test_flush_all_is_unscoped(self):
        assert _commands(Transaction().flush_all()) == [{'flush': {'ruleset': None}}]

    def test_flush_family_ruleset_is_scoped(self):
        assert _commands(Transaction().flush(RulesetSpec('ip6'))) == [{'flush': {'ruleset': {'family': 'ip6'}}}]

    def test_flush_table(self):
        assert _commands(Transaction().flush(TableSpec('t'))) == [{'flush': {'table': {'family': 'inet', 'name': 't'}}}]

    def test_flush_chain(self):
        txn = Transaction(table='t').flush(ChainSpec('c'))
        assert _commands(txn) == [{'flush': {'chain': {'family': 'inet', 'table': 't', 'name': 'c'}}}]


class TestObjects:
    def test_base_chain(self):
        txn = Transaction(table='t').add(ChainSpec('input', type='filter', hook='input', priority=0, policy='drop'))
        assert _commands(txn)[0]['add']['chain'] == {
            'family': 'inet',
            'table': 't',
            'name': 'input',
            'type': 'filter',
            'hook': 'input',
            'prio': 0,
            'policy': 'drop',
        }

    def test_base_chain_unknown_hook(self):
        with pytest.raises(InvalidArgument):
            Transaction(table='t').add(ChainSpec('c', hook='inbound'))

    def test_set_requires_type(self):
        with pytest.raises(InvalidArgument):
            Transaction(table='t').add(SetSpec('s'))

    def test_set_delete_without_type(self):
        txn = Transaction(table='t').delete(SetSpec('s'))
        assert _commands(txn) == [{'delete': {'set': {'family': 'inet', 'table': 't', 'name': 's'}}}]

    def test_set_options(self):
        txn = Transaction(table='t').add(
            SetSpec('s', type=['ipv4_addr', 'inet_service'], flags=['interval', 'timeout'], timeout=3600)
        )
        assert _commands(txn)[0]['add']['set'] == {
            'family': 'inet',
            'table': 't',
            'name': 's',
            'type': ['ipv4_addr', 'inet_service'],
            'flags': ['interval', 'timeout'],
            'timeout': 3600,
        }

    def test_map_and_elements(self):
        txn = (
            Transaction(table='t')
            .add(MapSpec('ports', key_type='inet_service', value_type='verdict'))
            .add(ElementSpec([(22, {'accept': None}), (23, {'drop': None})]))
        )
        map_attrs, elem_attrs = (cmd['add'] for cmd in _commands(txn))
        assert map_attrs['map']['type'] == 'inet_service'
        assert map_attrs['map']['map'] == 'verdict'
        assert elem_attrs['element']['elem'] == [[22, {'accept': None}], [23, {'drop': None}]]

    def test_map_requires_value_type(self):
        with pytest.raises(InvalidArgument):
            Transaction(table='t').add(MapSpec('m', key_type='ipv4_addr'))

    def test_counter(self):
        txn = Transaction(table='t').add(CounterSpec('hits'))
        assert _commands(txn)[0]['add']['counter'] == {
            'family': 'inet',
            'table': 't',
            'name': 'hits',
            'packets': 0,
            'bytes': 0,
        }

    def test_quota(self):
        txn = Transaction(table='t').add(QuotaSpec('q', bytes=1000, over=True))
        assert _commands(txn)[0]['add']['quota'] == {
            'family': 'inet',
            'table': 't',
            'name': 'q',
            'bytes': 1000,
            'used': 0,
            'over': True,
        }

    def test_limit_requires_rate(self):
        with pytest.raises(InvalidArgument):
            Transaction(table='t').add(LimitSpec('l', per='second'))

    def test_limit(self):
        txn = Transaction(table='t').add(LimitSpec('l', rate=10, per='minute', burst=5))
        assert _commands(txn)[0]['add']['limit']['per'] == 'minute'

    def test_flowtable(self):
        txn = Transaction(table='t').add(FlowtableSpec('ft', hook='ingress', priority=0, devices=['eth0', 'eth1']))
        assert _commands(txn)[0]['add']['flowtable'] == {
            'family': 'inet',
            'table': 't',
            'name': 'ft',
            'hook': 'ingress',
            'prio': 0,
            'dev': ['eth0', 'eth1'],
        }

    def test_flowtable_hook_must_be_ingress(self):
        with pytest.raises(InvalidArgument):
            Transaction(table='t').add(FlowtableSpec('ft', hook='input', priority=0, devices=['eth0']))

    def test_flowtable_needs_devices(self):
        with pytest.raises(InvalidArgument):
            Transaction(table='t').add(FlowtableSpec('ft', hook='ingress', priority=0, devices=[]))


class TestQueries:
    def test_list_tables(self):
        assert _commands(list_tables()) == [{'list': {'tables': {}}}]
        assert _commands(list_tables('ip')) == [{'list': {'tables': {'family': 'ip'}}}]

    def test_list_ruleset(self):
        assert _commands(list_ruleset('inet')) == [{'list': {'ruleset': {'family': 'inet'}}}]

    def test_list_chain(self):
        assert _commands(list_chain('filter', 'input')) == [
            {'list': {'chain': {'family': 'inet', 'table': 'filter', 'name': 'input'}}},
        ]

    def test_list_set(self):
        assert _commands(list_set('filter', 'blocklist')) == [
            {'list': {'set': {'family': 'inet', 'table': 'filter', 'name': 'blocklist'}}},
        ]

    def test_list_appends_to_transaction(self):
        txn = Transaction().add(TableSpec('t')).list(list_tables())
        assert [next(iter(cmd)) for cmd in _commands(txn)] == ['add', 'list']

    def test_list_rejects_mutations(self):
        with pytest.raises(InvalidArgument):
            Transaction().list(Transaction().add(TableSpec('t')))
