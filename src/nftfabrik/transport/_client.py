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

"""Transport client: one worker channel, one request at a time."""

from __future__ import annotations

import json
import logging
import threading
from typing import Protocol, runtime_checkable

from nftfabrik._errors import TransportNotConfigured

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


@runtime_checkable
class Requestor(Protocol):
    """Anything that can deliver a JSON document and return the raw reply."""

    def submit(self, document: bytes, timeout: float | None = None) -> bytes: ...


class TransportClient:
    """Submit documents over a ``FramedChannel``.

    The channel is passed in explicitly. Requests are serialised with a
    lock, so a client can be shared between threads. Nothing is retried:
    a timeout leaves the outcome unknown and is reported as
    ``SubmitTimeout``.
    """

    def __init__(self, channel=None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.channel = channel
        self.timeout = timeout
        self._lock = threading.Lock()

    def submit(self, document, timeout: float | None = None) -> bytes:
        """Send *document* (bytes, str or a JSON-serialisable dict) and return the raw response."""
        if self.channel is None:
            msg = 'No worker channel configured'
            raise TransportNotConfigured(msg)
        if isinstance(document, str):
            payload = document.encode('utf-8')
        elif isinstance(document, (bytes, bytearray)):
            payload = bytes(document)
        else:
            payload = json.dumps(document, separators=(',', ':')).encode('utf-8')

        with self._lock:
            return self.channel.request(payload, timeout if timeout is not None else self.timeout)

    def close(self) -> None:
        if self.channel is not None:
            self.channel.close()
