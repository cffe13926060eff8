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

"""Typed client options with their defaults."""

from dataclasses import dataclass, field

from nftfabrik.core import Family
from nftfabrik.transport import DEFAULT_ERROR_MARKERS, DEFAULT_TIMEOUT


@dataclass
class ClientDefaults:
    """Settings for submitting transactions to the worker.

    ``worker_command`` is empty when no worker is configured; submitting
    then fails with ``TransportNotConfigured``. ``family`` scopes ruleset
    listings; ``None`` lists every family.
    """

    timeout: float = DEFAULT_TIMEOUT
    family: Family | None = None
    worker_command: list[str] = field(default_factory=list)
    error_markers: tuple[str, ...] = DEFAULT_ERROR_MARKERS
    log_level: str = 'WARNING'

