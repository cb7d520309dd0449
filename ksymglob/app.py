##############################################################################
# Copyright by The HDF Group.                                                #
# All rights reserved.                                                       #
#                                                                            #
# This file is part of HSDS (HDF5 Scalable Data Service), Libraries and      #
# Utilities.  The full HSDS copyright notice, including                      #
# terms governing use, modification, and redistribution, is contained in     #
# the file COPYING, which can be found at the root of the source code        #
# distribution tree.  If you do not have access to this file, you may        #
# request a copy from help@hdfgroup.org.                                     #
##############################################################################
import argparse
import asyncio
import os
import sys

import simplejson

from . import config
from . import ksymglob_logger as log
from .util.globparser import checkPattern, MalformedPatternError, MAX_PATTERN_LENGTH
from .util.kallsymsUtil import findKernelSymbol, filterKernelSymbols
from .util.eventsUtil import listAvailableEvents, processAvailableTracepoints

_HELP_USAGE = "Filter kernel symbols and tracepoints with glob patterns."

_HELP_EPILOG = """Examples:

- list all scheduler tracepoints:

  ksymglob --events 'sched:*'

- expand a tracepoint glob into system/event pairs:

  ksymglob --tracepoint 'irq:irq_handler_*'

- list kernel symbols matching a pattern, as json:

  ksymglob --symbols 'tcp_v[46]_*' --json

- print the address of a kernel symbol:

  ksymglob --lookup schedule

Patterns support '*', '?', '[abc]', '[a-z]', '[!abc]' and '\\' escapes
and must match the whole name. --events matches raw listing lines, which
end in a newline, so end event patterns with '*'.
"""


def _validatePattern(pattern):
    try:
        max_len = config.get("max_pattern_length", MAX_PATTERN_LENGTH)
        checkPattern(pattern, max_pattern_length=max_len)
    except MalformedPatternError as mpe:
        sys.exit(f"invalid pattern '{pattern}': {mpe}")


def _printResult(items, use_json):
    if use_json:
        print(simplejson.dumps(items, indent=2))
    else:
        for item in items:
            if isinstance(item, (list, tuple)):
                print(" ".join(str(x) for x in item))
            else:
                print(item)


async def _runEvents(args, ignore_space):
    lines = await listAvailableEvents(
        match=args.events, events_path=args.events_path, ignore_space=ignore_space
    )
    if args.json:
        _printResult([line.rstrip("\n") for line in lines], True)
    else:
        for line in lines:
            print(line, end="")


async def _runTracepoint(args):
    if args.tracepoint.find(":") < 0:
        sys.exit(f"tracepoint: {args.tracepoint} must be in the form SYS:EVENT")
    sys_name, event = args.tracepoint.split(":", 1)
    _validatePattern(sys_name)
    _validatePattern(event)
    tracepoints = []

    def addTracepoint(match_sys, match_event):
        tracepoints.append((match_sys, match_event))

    await processAvailableTracepoints(
        sys_name, event, addTracepoint, events_path=args.events_path
    )
    if args.json:
        items = [{"system": s, "event": e} for s, e in tracepoints]
        _printResult(items, True)
    else:
        _printResult([f"{s}:{e}" for s, e in tracepoints], False)


async def _runSymbols(args, ignore_space):
    symbols = await filterKernelSymbols(
        args.symbols, kallsyms_path=args.kallsyms_path, ignore_space=ignore_space
    )
    if args.json:
        items = []
        for name, sym_type, start in symbols:
            items.append({"name": name, "type": sym_type, "address": f"{start:016x}"})
        _printResult(items, True)
    else:
        items = [(f"{start:016x}", sym_type, name) for name, sym_type, start in symbols]
        _printResult(items, False)


async def _runLookup(args):
    try:
        addr = await findKernelSymbol(args.lookup, kallsyms_path=args.kallsyms_path)
    except KeyError as ke:
        sys.exit(ke.args[0])
    if args.json:
        _printResult({"name": args.lookup, "address": f"{addr:016x}"}, True)
    else:
        print(f"{addr:016x}")


def main():
    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawTextHelpFormatter,
        usage=_HELP_USAGE,
        epilog=_HELP_EPILOG,
    )

    parser.add_argument(
        "--events",
        nargs="?",
        const="*",
        default=None,
        type=str,
        dest="events",
        help="list available tracepoints matching PATTERN (default all)",
    )
    parser.add_argument(
        "--tracepoint",
        type=str,
        dest="tracepoint",
        help="list tracepoints matching SYS:EVENT globs",
    )
    parser.add_argument(
        "--symbols",
        type=str,
        dest="symbols",
        help="list kernel symbols with names matching PATTERN",
    )
    parser.add_argument(
        "--lookup",
        type=str,
        dest="lookup",
        help="print the address of the given kernel symbol",
    )
    parser.add_argument(
        "--lazy",
        action="store_true",
        dest="lazy",
        help="ignore whitespace in names and patterns",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json",
        help="print results as json",
    )
    parser.add_argument(
        "--kallsyms_path",
        default="",
        type=str,
        dest="kallsyms_path",
        help="kernel symbol file (default from config)",
    )
    parser.add_argument(
        "--events_path",
        default="",
        type=str,
        dest="events_path",
        help="available events file (default from config)",
    )
    parser.add_argument(
        "--loglevel",
        default="",
        type=str,
        dest="loglevel",
        help="log verbosity: DEBUG, WARNING, INFO, OR ERROR",
    )
    parser.add_argument(
        "--config_dir",
        default="",
        type=str,
        dest="config_dir",
        help="directory for config data",
    )

    args = parser.parse_args()

    if args.config_dir:
        if not os.path.isdir(args.config_dir):
            sys.exit(f"config_dir: {args.config_dir} not found")
        # config picks this up on first load
        os.environ["CONFIG_DIR"] = args.config_dir

    # setup logging
    if args.loglevel:
        log_level_cfg = args.loglevel
    elif "LOG_LEVEL" in os.environ:
        log_level_cfg = os.environ["LOG_LEVEL"]
    else:
        log_level_cfg = config.get("log_level")
    try:
        log.setLogConfig(
            log_level_cfg,
            prefix=config.get("log_prefix"),
            timestamps=config.get("log_timestamps"),
        )
    except ValueError as ve:
        print(f"{ve}, using WARN instead", file=sys.stderr)
        log.setLogConfig("WARN")

    ignore_space = args.lazy or config.get("glob_ignore_space")

    if args.events is not None:
        _validatePattern(args.events)
        asyncio.run(_runEvents(args, ignore_space))
    elif args.tracepoint:
        asyncio.run(_runTracepoint(args))
    elif args.symbols:
        _validatePattern(args.symbols)
        asyncio.run(_runSymbols(args, ignore_space))
    elif args.lookup:
        asyncio.run(_runLookup(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
