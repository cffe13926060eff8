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

"""Load client options from a YAML file.

Example file::

    timeout: 10
    family: inet
    worker_command: [/usr/libexec/nft-worker, --json]
    error_markers:
      - "Could not process rule"
    log_level: INFO

Missing keys keep their defaults. Extra error markers are added to the
built-in ones. Unknown keys are rejected.
"""

import logging
import pathlib
import shlex

import yaml

from nftfabrik._errors import InvalidArgument
from nftfabrik.core import Family, resolve_enum

from ._keys import ClientOption
from ._schemas import ClientDefaults

logger = logging.getLogger(__name__)

_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def _timeout(value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        msg = f'{ClientOption.TIMEOUT} must be a positive number, got {value!r}'
        raise InvalidArgument(msg)
    return float(value)


def _worker_command(value) -> list[str]:
    if isinstance(value, str):
        return shlex.split(value)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    msg = f'{ClientOption.WORKER_COMMAND} must be a string or a list of strings, got {value!r}'
    raise InvalidArgument(msg)


def _error_markers(value) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
        msg = f'{ClientOption.ERROR_MARKERS} must be a list of non-empty strings, got {value!r}'
        raise InvalidArgument(msg)
    markers = list(ClientDefaults.error_markers)
    markers.extend(v for v in value if v not in markers)
    return tuple(markers)


def _log_level(value) -> str:
    level = str(value).upper()
    if level not in _LOG_LEVELS:
        msg = f'{ClientOption.LOG_LEVEL} must be one of {", ".join(_LOG_LEVELS)}, got {value!r}'
        raise InvalidArgument(msg)
    return level


def options_from_dict(data: dict) -> ClientDefaults:
    """Build ``ClientDefaults`` from a mapping of ``ClientOption`` keys."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = f'Configuration must be a mapping, got {type(data).__name__}'
        raise InvalidArgument(msg)

    known = {str(key) for key in ClientOption}
    unknown = sorted(str(key) for key in data if key not in known)
    if unknown:
        msg = f'Unknown configuration key(s): {", ".join(unknown)}'
        raise InvalidArgument(msg)

    options = ClientDefaults()
    if ClientOption.TIMEOUT in data:
        options.timeout = _timeout(data[ClientOption.TIMEOUT])
    if ClientOption.FAMILY in data:
        options.family = resolve_enum(Family, data[ClientOption.FAMILY], 'family')
    if ClientOption.WORKER_COMMAND in data:
        options.worker_command = _worker_command(data[ClientOption.WORKER_COMMAND])
    if ClientOption.ERROR_MARKERS in data:
        options.error_markers = _error_markers(data[ClientOption.ERROR_MARKERS])
    if ClientOption.LOG_LEVEL in data:
        options.log_level = _log_level(data[ClientOption.LOG_LEVEL])
    return options


def load_options(path) -> ClientDefaults:
    """Read a YAML configuration file into ``ClientDefaults``."""
    path = pathlib.Path(path)
    logger.debug('Loading configuration from %s', path)
    with pathlib.Path.open(path, encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            msg = f'Invalid YAML in {path}: {e}'
            raise InvalidArgument(msg) from e
    return options_from_dict(data)
