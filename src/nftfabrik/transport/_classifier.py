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

"""Classify raw worker responses into an ``Outcome``.

The worker answers with an empty body for successful writes, a JSON
document for reads and errors, and occasionally with plain text. The
classifier tries these in order:

1. empty body: success
2. JSON: failure if the document (or any item of its result list)
   carries an ``error`` key, success with data otherwise
3. text: failure if a known error marker occurs in it, otherwise an
   opaque, malformed failure wrapping the text

The marker list is best effort. Silence on an unknown text is never read
as success.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from enum import StrEnum

from nftfabrik._errors import MalformedResponse, SubsystemError

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MARKERS = (
    'does not exist',
    'No such',
    'not found',
    'Error:',
)


class OutcomeStatus(StrEnum):
    SUCCESS = 'success'
    SUCCESS_WITH_DATA = 'success_with_data'
    FAILURE = 'failure'


@dataclasses.dataclass(frozen=True)
class Outcome:
    status: OutcomeStatus
    data: object = None
    reason: object = None
    malformed: bool = False

    @property
    def ok(self) -> bool:
        return self.status != OutcomeStatus.FAILURE

    def raise_for_failure(self) -> Outcome:
        """Raise the matching ``SubsystemError`` for a failure, else return self."""
        if self.status != OutcomeStatus.FAILURE:
            return self
        if self.malformed:
            raise MalformedResponse(self.reason)
        raise SubsystemError(self.reason)


SUCCESS = Outcome(OutcomeStatus.SUCCESS)


def _failure(reason, malformed: bool = False) -> Outcome:
    return Outcome(OutcomeStatus.FAILURE, reason=reason, malformed=malformed)


def _result_items(document):
    if isinstance(document, list):
        return document
    if isinstance(document, dict) and isinstance(document.get('nftables'), list):
        return document['nftables']
    return None


def classify(raw, markers=DEFAULT_ERROR_MARKERS) -> Outcome:
    """Return the ``Outcome`` for the response body *raw* (bytes or str)."""
    if isinstance(raw, (bytes, bytearray)):
        text = bytes(raw).decode('utf-8', errors='replace')
    else:
        text = raw or ''
    if not text.strip():
        return SUCCESS

    try:
        document = json.loads(text)
    except ValueError:
        document = None
    else:
        items = _result_items(document)
        if items is not None:
            for item in items:
                if isinstance(item, dict) and 'error' in item:
                    return _failure(item['error'])
            return Outcome(OutcomeStatus.SUCCESS_WITH_DATA, data=document)
        if isinstance(document, dict) and 'error' in document:
            return _failure(document['error'])
        return Outcome(OutcomeStatus.SUCCESS_WITH_DATA, data=document)

    stripped = text.strip()
    for marker in markers:
        if marker in stripped:
            logger.debug('Text response matched error marker %r', marker)
            return _failure(stripped)

    logger.warning('Malformed response from worker (%d bytes): %.200s', len(text), stripped)
    return _failure(stripped, malformed=True)
