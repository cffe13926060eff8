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

"""CLI entry point: submit an nftables JSON document through a worker process."""

import argparse
import json
import logging
import shlex
import sys

import nftfabrik
from nftfabrik._errors import NftError, TransportError
from nftfabrik.builder import list_ruleset, to_wire
from nftfabrik.options import ClientDefaults, load_options
from nftfabrik.render import render_plan
from nftfabrik.transport import FramedChannel, OutcomeStatus, TransportClient, classify

__author__ = 'Linuxfabrik GmbH, Zurich/Switzerland'

DESCRIPTION = """Submits a libnftables JSON command document to a worker process over a
length-prefixed channel and reports the classified outcome."""

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_TRANSPORT = 2


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='nftfabrik-submit',
        description=DESCRIPTION,
    )

    parser.add_argument(
        'document',
        nargs='?',
        default=None,
        help='path to a JSON document ({"nftables": [...]}), "-" for stdin',
    )

    parser.add_argument(
        '--list-ruleset',
        action='store_true',
        dest='LIST_RULESET',
        help='submit a ruleset listing instead of a document',
    )

    parser.add_argument(
        '--family',
        default=None,
        dest='FAMILY',
        help='restrict --list-ruleset to one address family (overrides the configured family)',
    )

    parser.add_argument(
        '-c',
        '--config',
        default=None,
        dest='CONFIG',
        help='path to a YAML configuration file',
    )

    parser.add_argument(
        '-w',
        '--worker',
        default=None,
        dest='WORKER',
        help='worker command line (overrides worker_command from the configuration)',
    )

    parser.add_argument(
        '-t',
        '--timeout',
        type=float,
        default=None,
        dest='TIMEOUT',
        help='seconds to wait for the worker response. Default: from configuration',
    )

    parser.add_argument(
        '-n',
        '--dry-run',
        action='store_true',
        dest='DRY_RUN',
        help='print the plan and the JSON document, submit nothing',
    )

    parser.add_argument(
        '-v',
        '--verbose',
        action='count',
        default=0,
        dest='VERBOSE',
        help='verbose output (repeat for higher verbosity)',
    )

    parser.add_argument(
        '-V',
        '--version',
        action='version',
        version=f'%(prog)s: v{nftfabrik.__version__} by {__author__}',
    )

    return parser.parse_args(argv)


def _read_document(path):
    if path == '-':
        document = json.load(sys.stdin)
    else:
        with open(path, encoding='utf-8') as f:
            document = json.load(f)
    if not isinstance(document, dict) or not isinstance(document.get('nftables'), list):
        msg = 'document must be an object with an "nftables" list'
        raise ValueError(msg)
    return document


def main(argv=None):
    args = parse_args(argv)

    try:
        options = load_options(args.CONFIG) if args.CONFIG else ClientDefaults()
    except (OSError, NftError) as e:
        print(f'Error: failed to load configuration from {args.CONFIG}: {e}', file=sys.stderr)
        return EXIT_FAILURE

    level = options.log_level
    if args.VERBOSE == 1:
        level = 'INFO'
    elif args.VERBOSE > 1:
        level = 'DEBUG'
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    try:
        if args.LIST_RULESET:
            document = to_wire(list_ruleset(args.FAMILY or options.family))
        elif args.document:
            document = _read_document(args.document)
        else:
            print('Error: give a document path or --list-ruleset', file=sys.stderr)
            return EXIT_FAILURE
    except (OSError, ValueError) as e:
        print(f'Error: cannot read document: {e}', file=sys.stderr)
        return EXIT_FAILURE

    if args.DRY_RUN:
        print(render_plan(document), end='')
        print(json.dumps(document, separators=(',', ':')))
        return EXIT_OK

    worker = shlex.split(args.WORKER) if args.WORKER else options.worker_command
    if not worker:
        print('Error: no worker configured (use --worker or worker_command)', file=sys.stderr)
        return EXIT_TRANSPORT
    timeout = args.TIMEOUT if args.TIMEOUT is not None else options.timeout

    try:
        with FramedChannel.spawn(worker) as channel:
            raw = TransportClient(channel, timeout=timeout).submit(document)
    except TransportError as e:
        print(f'Error: {e}', file=sys.stderr)
        return EXIT_TRANSPORT

    outcome = classify(raw, options.error_markers)
    if outcome.status == OutcomeStatus.FAILURE:
        print(f'Error: {outcome.reason}', file=sys.stderr)
        return EXIT_FAILURE
    if outcome.status == OutcomeStatus.SUCCESS_WITH_DATA:
        print(json.dumps(outcome.data, indent=2))
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
