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

"""Render a human-readable plan of a transaction without submitting it.

The template is looked up in ``~/nftfabrik/templates/`` first (user
overrides), then in the package's ``resources/templates/`` directory.
"""

from __future__ import annotations

import importlib.resources
import json
from pathlib import Path

import jinja2

from nftfabrik.builder import to_wire

PLAN_TEMPLATE = 'plan.txt.j2'

_SCOPE_KEYS = ('family', 'table', 'chain', 'name')


def _get_package_templates_dir() -> Path:
    ref = importlib.resources.files('nftfabrik') / 'resources' / 'templates'
    return Path(str(ref))


class PlanTemplate:
    """Load and render the plan template."""

    def __init__(self, template_name: str = PLAN_TEMPLATE) -> None:
        search_paths: list[str] = []

        # User override directory (checked first)
        user_dir = Path.home() / 'nftfabrik' / 'templates'
        if user_dir.is_dir():
            search_paths.append(str(user_dir))

        search_paths.append(str(_get_package_templates_dir()))

        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(search_paths),
            undefined=jinja2.StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters['tojson_compact'] = lambda value: json.dumps(value, separators=(',', ':'))
        self._template = self._env.get_template(template_name)

    def render(self, context: dict) -> str:
        return self._template.render(context)


def _step(index: int, command: dict) -> dict:
    ((verb, body),) = command.items()
    ((kind, attrs),) = body.items()
    attrs = attrs or {}
    return {
        'index': index,
        'verb': verb,
        'kind': kind,
        'scope': ' '.join(str(attrs[key]) for key in _SCOPE_KEYS if key in attrs),
        'details': {key: value for key, value in attrs.items() if key not in _SCOPE_KEYS and key != 'expr'},
        'expr': attrs.get('expr'),
    }


def render_plan(source, template_name: str = PLAN_TEMPLATE) -> str:
    """Render *source* (a transaction or a wire document) as a numbered plan."""
    document = source if isinstance(source, dict) else to_wire(source)
    steps = [_step(i, command) for i, command in enumerate(document.get('nftables', []), start=1)]
    return PlanTemplate(template_name).render({'steps': steps})
