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

"""Length-prefixed message channel to the worker process.

Each message is a 4-byte big-endian length followed by that many bytes of
payload. One request is answered by exactly one response frame; an empty
response frame is a valid answer.

Reads and writes run against a monotonic deadline with ``selectors``.
When the deadline passes the response may still arrive later, so the
channel can no longer tell which request a frame answers. It marks itself
desynchronised and refuses further requests with ``TransportDown``.
"""

from __future__ import annotations

import errno
import logging
import os
import selectors
import struct
import subprocess
import time

from nftfabrik._errors import InvalidArgument, SubmitTimeout, TransportDown

logger = logging.getLogger(__name__)

HEADER = struct.Struct('>I')
MAX_FRAME = 2**32 - 1


def encode_frame(payload: bytes) -> bytes:
    if len(payload) > MAX_FRAME:
        msg = f'Frame too large: {len(payload)} bytes'
        raise InvalidArgument(msg)
    return HEADER.pack(len(payload)) + payload


class FramedChannel:
    """Frame transport over a pair of file descriptors."""

    def __init__(self, reader_fd: int, writer_fd: int, process: subprocess.Popen | None = None) -> None:
        self._reader_fd = reader_fd
        self._writer_fd = writer_fd
        self._process = process
        self._closed = False
        self._desynced = False
        os.set_blocking(self._writer_fd, False)

    @classmethod
    def spawn(cls, argv: list[str]) -> FramedChannel:
        """Start the worker *argv* and talk to it over its stdin/stdout."""
        logger.debug('Starting worker: %s', ' '.join(argv))
        try:
            process = subprocess.Popen(argv, stdin=subprocess.PIPE, stdout=subprocess.PIPE)
        except OSError as e:
            msg = f'Cannot start worker {argv[0]!r}: {e}'
            raise TransportDown(msg) from e
        return cls(process.stdout.fileno(), process.stdin.fileno(), process=process)

    @property
    def usable(self) -> bool:
        return not (self._closed or self._desynced)

    def request(self, payload: bytes, timeout: float) -> bytes:
        """Send one frame and wait up to *timeout* seconds for the response frame."""
        if self._closed:
            msg = 'Channel is closed'
            raise TransportDown(msg)
        if self._desynced:
            msg = 'Channel is out of sync after an earlier timeout'
            raise TransportDown(msg)

        deadline = time.monotonic() + timeout
        try:
            self._write_all(encode_frame(payload), deadline)
            (length,) = HEADER.unpack(self._read_exact(HEADER.size, deadline))
            response = self._read_exact(length, deadline)
        except SubmitTimeout:
            self._desynced = True
            logger.warning('No response within %.1fs, channel is out of sync', timeout)
            raise
        except TransportDown:
            self._closed = True
            raise
        except OSError as e:
            self._closed = True
            msg = f'Worker channel failed: {e}'
            raise TransportDown(msg) from e
        logger.debug('Sent %d bytes, received %d bytes', len(payload), len(response))
        return response

    def _wait(self, fd: int, event: int, deadline: float) -> None:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            msg = 'Timed out waiting for the worker'
            raise SubmitTimeout(msg)
        with selectors.DefaultSelector() as selector:
            selector.register(fd, event)
            if not selector.select(remaining):
                msg = 'Timed out waiting for the worker'
                raise SubmitTimeout(msg)

    def _write_all(self, data: bytes, deadline: float) -> None:
        view = memoryview(data)
        while view:
            self._wait(self._writer_fd, selectors.EVENT_WRITE, deadline)
            try:
                written = os.write(self._writer_fd, view)
            except BlockingIOError:
                continue
            except OSError as e:
                if e.errno in (errno.EPIPE, errno.EBADF):
                    msg = 'Worker closed its request channel'
                    raise TransportDown(msg) from e
                raise
            view = view[written:]

    def _read_exact(self, size: int, deadline: float) -> bytes:
        chunks = []
        while size:
            self._wait(self._reader_fd, selectors.EVENT_READ, deadline)
            chunk = os.read(self._reader_fd, size)
            if not chunk:
                msg = 'Worker closed its response channel'
                raise TransportDown(msg)
            chunks.append(chunk)
            size -= len(chunk)
        return b''.join(chunks)

    def close(self) -> None:
        """Close the channel and, if this channel started it, stop the worker."""
        if self._closed and self._process is None:
            return
        self._closed = True
        if self._process is not None:
            process, self._process = self._process, None
            process.stdin.close()
            process.stdout.close()
            try:
                process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()

    def __enter__(self) -> FramedChannel:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
