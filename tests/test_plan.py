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

"""Tests for the dry-run plan renderer."""

from nftfabrik.builder import ChainSpec, RuleSpec, TableSpec, Transaction, to_wire
from nftfabrik.core import Expr
from nftfabrik.render import render_plan


def _txn():
    return (
        Transaction()
        .add(TableSpec('t'))
        .add(ChainSpec('c', type='filter', hook='input', priority=0))
        .add(RuleSpec(Expr.begin().tcp().dport(22).accept()))
        .flush_all()
    )


class TestRenderPlan:
    def test_numbered_steps(self):
        lines = render_plan(_txn()).splitlines()
        assert lines[0] == '4 operation(s)'
        assert lines[1] == '  1. add table inet t'
        assert '  2. add chain inet t c' in lines
        assert '  3. add rule inet t c' in lines
        assert '  4. flush ruleset' in lines

    def test_details_and_statements(self):
        text = render_plan(_txn())
        assert '       hook: "input"' in text
        assert '       | {"accept":null}' in text

    def test_accepts_wire_document(self):
        assert render_plan(to_wire(_txn())) == render_plan(_txn())

    def test_empty(self):
        assert render_plan(Transaction()).strip() == '0 operation(s)'
