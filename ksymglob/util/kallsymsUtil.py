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
# kallsymsUtil - read kernel symbols from a kallsyms listing
#
from inspect import iscoroutinefunction
import time
import aiofiles
from .. import config
from .. import ksymglob_logger as log
from .globparser import globmatch, MAX_PATTERN_LENGTH, MAX_ITEM_LENGTH


def _globLimits():
    # configured matcher limits, passed through to globparser
    return {
        "max_pattern_length": config.get("max_pattern_length", MAX_PATTERN_LENGTH),
        "max_item_length": config.get("max_item_length", MAX_ITEM_LENGTH),
    }


def parseSymbolLine(line):
    """ Return (name, sym_type, start) for a kallsyms line like:
        'ffffffffc0a01000 t nf_nat_cleanup    [nf_nat]'
    Returns None if the line does not have address, type, and name fields.
    """
    fields = line.split()
    if len(fields) < 3:
        return None
    try:
        start = int(fields[0], 16)
    except ValueError:
        return None
    sym_type = fields[1][0]
    name = fields[2]
    return name, sym_type, start


async def kallsymsParse(callback, kallsyms_path=None):
    """ Invoke callback(name, sym_type, start) for each symbol in the
    kallsyms file.  callback may be a coroutine function.  Stops at the first
    truthy value returned by callback and returns it.
    """
    if not kallsyms_path:
        kallsyms_path = config.get("kallsyms_path")
    log.debug(f"kallsymsParse - reading {kallsyms_path}")
    start_time = time.time()
    ret = None
    line_count = 0
    try:
        async with aiofiles.open(kallsyms_path, mode="r") as f:
            async for line in f:
                line_count += 1
                fields = parseSymbolLine(line)
                if fields is None:
                    log.warn(f"kallsymsParse - skipping line {line_count}: {line!r}")
                    continue
                name, sym_type, start = fields
                if iscoroutinefunction(callback):
                    ret = await callback(name, sym_type, start)
                else:
                    ret = callback(name, sym_type, start)
                if ret:
                    break
    except OSError as oe:
        log.error(f"reading {kallsyms_path} failed: {oe}")
        raise
    finish_time = time.time()
    msg = f"kallsymsParse - {line_count} lines, "
    msg += f"elapsed={finish_time - start_time:.4f}"
    log.info(msg)
    return ret


async def findKernelSymbol(symbol, kallsyms_path=None):
    """ Return the address of the given kernel symbol.
    Raises KeyError if the symbol is not found or its address is hidden
    (shown as 0 to unprivileged users).
    """
    addr = 0

    def checkName(name, sym_type, start):
        nonlocal addr
        if name == symbol:
            addr = start
            return True
        return False

    await kallsymsParse(checkName, kallsyms_path=kallsyms_path)
    if addr == 0:
        if not kallsyms_path:
            kallsyms_path = config.get("kallsyms_path")
        msg = f"cannot read kernel symbol \"{symbol}\" in {kallsyms_path}"
        log.warn(msg)
        raise KeyError(msg)
    return addr


async def filterKernelSymbols(pattern, kallsyms_path=None, ignore_space=False):
    """ Return list of (name, sym_type, start) for symbols whose name
    matches the glob pattern
    """
    symbols = []
    limits = _globLimits()

    def symbolMatch(name, sym_type, start):
        if globmatch(name, pattern, ignore_space=ignore_space, **limits):
            symbols.append((name, sym_type, start))
        return False  # keep going

    await kallsymsParse(symbolMatch, kallsyms_path=kallsyms_path)
    log.info(f"filterKernelSymbols - {len(symbols)} symbols matched '{pattern}'")
    return symbols
