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

"""Configuration file keys.

Example:
    from nftfabrik.options import ClientOption

    timeout = data.get(ClientOption.TIMEOUT, 5.0)
"""

from enum import StrEnum


class ClientOption(StrEnum):
    """Top-level keys of the client configuration file."""

    # Seconds to wait for a worker response
    TIMEOUT = 'timeout'
    # Address family that ruleset listings are restricted to
    FAMILY = 'family'
    # argv of the worker process to spawn
    WORKER_COMMAND = 'worker_command'
    # Additional plain-text error markers for the response classifier
    ERROR_MARKERS = 'error_markers'
    LOG_LEVEL = 'log_level'
