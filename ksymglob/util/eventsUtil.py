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
#
# eventsUtil - tracepoint lookups against the available_events listing
#
# Lines in the listing look like "sched:sched_switch\n".  Lines are matched
# raw, so a pattern that must match through the newline has to include it
# (or end with '*').
#
from inspect import iscoroutinefunction
import aiofiles
from .. import config
from .. import ksymglob_logger as log
from .globparser import globmatch, globfilter
from .globparser import MAX_PATTERN_LENGTH, MAX_ITEM_LENGTH


def _globLimits():
    # configured matcher limits, passed through to globparser
    return {
        "max_pattern_length": config.get("max_pattern_length", MAX_PATTERN_LENGTH),
        "max_item_length": config.get("max_item_length", MAX_ITEM_LENGTH),
    }


async def _readEventLines(events_path):
    if not events_path:
        events_path = config.get("available_events_path")
    log.debug(f"reading events from {events_path}")
    try:
        async with aiofiles.open(events_path, mode="r") as f:
            lines = await f.readlines()
    except OSError as oe:
        log.error(f"reading {events_path} failed: {oe}")
        raise
    log.debug(f"got {len(lines)} event lines")
    return lines


async def listAvailableEvents(match=None, events_path=None, ignore_space=False):
    """ Return the raw lines of the events listing that match the glob
    pattern match, or all lines if match is None
    """
    lines = await _readEventLines(events_path)
    if match is None:
        return lines
    events = globfilter(lines, match, ignore_space=ignore_space, **_globLimits())
    log.info(f"listAvailableEvents - {len(events)} events matched '{match}'")
    return events


async def processAvailableTracepoints(sys_name, event, callback, events_path=None):
    """ Call callback(match_sys, match_event) for each tracepoint matching
    the globs sys_name and event.  callback may be a coroutine function.
    Stops at the first truthy return value.  Returns the number of
    callbacks made.
    """
    # listing lines end with a newline
    pattern = f"{sys_name}:{event}\n"
    lines = await _readEventLines(events_path)
    limits = _globLimits()
    count = 0
    for line in lines:
        if not globmatch(line, pattern, **limits):
            continue
        sep = line.find(':')
        if sep < 0:
            log.warn(f"processAvailableTracepoints - no separator in: {line!r}")
            continue
        match_sys = line[:sep]
        match_event = line[sep + 1:-1]
        count += 1
        if iscoroutinefunction(callback):
            ret = await callback(match_sys, match_event)
        else:
            ret = callback(match_sys, match_event)
        if ret:
            break
    log.info(f"processAvailableTracepoints - {count} tracepoints for {sys_name}:{event}")
    return count
