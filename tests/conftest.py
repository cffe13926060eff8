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

"""Shared pytest fixtures: stub requestors and pipe-backed channels."""

import os

import pytest

from nftfabrik.transport import FramedChannel, encode_frame


class StubRequestor:
    """Requestor that records submitted documents and returns a canned reply."""

    def __init__(self, reply: bytes = b'') -> None:
        self.reply = reply
        self.documents: list[bytes] = []
        self.timeouts: list[float | None] = []

    def submit(self, document: bytes, timeout: float | None = None) -> bytes:
        self.documents.append(document)
        self.timeouts.append(timeout)
        return self.reply


class PipeWorker:
    """The far end of a ``FramedChannel`` built on two OS pipes.

    Responses are written with ``respond()`` before the request is sent;
    the pipe buffers them until the channel reads.
    """

    def __init__(self) -> None:
        self.request_r, self.request_w = os.pipe()
        self.response_r, self.response_w = os.pipe()
        self.channel = FramedChannel(self.response_r, self.request_w)
        self._open = {self.request_r, self.request_w, self.response_r, self.response_w}

    def respond(self, payload: bytes) -> None:
        os.write(self.response_w, encode_frame(payload))

    def read_request(self) -> bytes:
        header = os.read(self.request_r, 4)
        length = int.from_bytes(header, 'big')
        return os.read(self.request_r, length) if length else b''

    def close_fd(self, fd: int) -> None:
        if fd in self._open:
            self._open.discard(fd)
            os.close(fd)

    def hang_up(self) -> None:
        """Simulate the worker exiting: close its response and request ends."""
        self.close_fd(self.response_w)
        self.close_fd(self.request_r)

    def close(self) -> None:
        for fd in list(self._open):
            self.close_fd(fd)


@pytest.fixture
def stub_requestor():
    return StubRequestor()


@pytest.fixture
def pipe_worker():
    worker = PipeWorker()
    yield worker
    worker.close()


@pytest.fixture
def make_requestor():
    """Factory for ``StubRequestor`` instances with a given reply."""
    return StubRequestor
