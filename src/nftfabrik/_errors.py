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

"""Exception taxonomy shared by the builder and the transport layer.

Two families of errors exist:

- **Build-time errors** (``InvalidContext``, ``InvalidArgument``) are
  raised by expression and operation constructors before anything is
  sent. They are programmer errors and never retryable.
- **Submit-time errors** (``SubmitTimeout``, ``TransportDown``,
  ``SubsystemError``) only surface from ``submit()``. A timeout means the
  outcome is unknown: the worker may or may not have applied the batch.
"""


class NftError(Exception):
    """Base class for all nftfabrik errors."""


class InvalidContext(NftError):
    """A context-dependent constructor was used before its context was set.

    Example: a destination port match without a transport protocol, or a
    chain operation without a table.
    """


class InvalidArgument(NftError, ValueError):
    """An out-of-range value or an unrecognized symbolic name."""


class TransportError(NftError):
    """Base class for errors raised while talking to the worker process."""


class TransportNotConfigured(TransportError):
    """No worker channel or requestor was supplied to submit through."""


class TransportDown(TransportError):
    """The worker channel is closed, broken or no longer in sync."""


class SubmitTimeout(TransportError, TimeoutError):
    """No response arrived within the time budget; the outcome is unknown."""


class SubsystemError(NftError):
    """The packet-filtering subsystem reported a failure.

    The batch definitely did not apply. ``reason`` holds the error payload
    as reported (a string or the decoded error item).
    """

    def __init__(self, reason) -> None:
        super().__init__(reason if isinstance(reason, str) else repr(reason))
        self.reason = reason


class MalformedResponse(SubsystemError):
    """The response could not be interpreted at all."""
