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
"""
  Glob pattern matching without regular expressions.

  Pattern syntax:
    '*'       match zero or more characters
    '?'       match any one character
    '[...]'   match one character from a set, e.g. '[abc]', '[a-z]', '[!0-9]'
    '\\x'     match 'x' literally, e.g. '\\*' matches '*'

  The first character of a set is always a member, so '[]a]' matches ']' or
  'a'.  A '-' that is first in the set or just before the closing ']' is a
  literal.  A range with low > high anywhere in a set makes the whole
  pattern invalid, even if an earlier member of the set would match.
  Patterns must match the entire item: use '*' explicitly for prefix or
  suffix matching.

  Backtracking over '*' is memoized, so the worst case is
  O(len(item)**2 * len(pattern)) and recursion depth is bounded by the
  number of '*' runs in the pattern, which max_pattern_length bounds.
"""

from .. import ksymglob_logger as log

# ASCII whitespace skipped in lazy matching
WHITESPACE = " \t\n\v\f\r"

# default input limits, callers may pass their own
MAX_PATTERN_LENGTH = 512
MAX_ITEM_LENGTH = 4096


class MalformedPatternError(ValueError):
    """ Raised for a pattern that can't be parsed """

    def __init__(self, reason, position):
        self.reason = reason
        self.position = position
        super(MalformedPatternError, self).__init__(f"{reason} at position {position}")


class GlobResult:
    """ Outcome of a glob match.

    status is one of MATCH, NOMATCH, or MALFORMED.  For MALFORMED, reason and
    position describe the problem in the pattern.  The result is truthy only
    for MATCH, so it can be used directly in a boolean context.
    """

    MATCH, NOMATCH, MALFORMED = range(3)

    def __init__(self, status, reason=None, position=None):
        self.status = status
        self.reason = reason
        self.position = position

    def __bool__(self):
        return self.status == GlobResult.MATCH

    def __eq__(self, other):
        if isinstance(other, GlobResult):
            return (self.status, self.reason, self.position) == \
                (other.status, other.reason, other.position)
        return NotImplemented

    def __hash__(self):
        return hash((self.status, self.reason, self.position))

    def __repr__(self):
        names = ("MATCH", "NOMATCH", "MALFORMED")
        if self.status == GlobResult.MALFORMED:
            return f"GlobResult(MALFORMED, {self.reason!r}, {self.position})"
        return f"GlobResult({names[self.status]})"

    def isMalformed(self):
        return self.status == GlobResult.MALFORMED


def _parseCharClass(pattern, start):
    # parse the bracket expression that begins at start (just past the '[')
    # returns (negate, items, end) where items is a list of (low, high)
    # tuples and end is the index just past the closing ']'
    i = start
    negate = False
    if i < len(pattern) and pattern[i] == '!':
        negate = True
        i += 1
    if i >= len(pattern):
        raise MalformedPatternError("unterminated character class", start - 1)

    # first char is special: always a member, even if it is ']'
    items = [(pattern[i], pattern[i])]
    i += 1

    while i < len(pattern) and pattern[i] != ']':
        if pattern[i] == '-' and i + 1 < len(pattern) and pattern[i + 1] != ']':
            # range, low end is the preceding char
            low = pattern[i - 1]
            high = pattern[i + 1]
            if low > high:
                msg = f"invalid range '{low}-{high}' in character class"
                raise MalformedPatternError(msg, i - 1)
            items.append((low, high))
            i += 2
        else:
            items.append((pattern[i], pattern[i]))
            i += 1

    if i >= len(pattern):
        raise MalformedPatternError("unterminated character class", start - 1)

    return negate, items, i + 1


def _classMatch(negate, items, ch):
    found = False
    for low, high in items:
        if low <= ch <= high:
            found = True
            break
    if negate:
        found = not found
    return found


def matchCharClass(pattern, start, ch):
    """ Test ch against the bracket expression in pattern beginning at start
    (the index just after '[').

    Returns a tuple (matched, end) where end is the index just past the
    closing ']'.  Raises MalformedPatternError if the expression is not
    terminated or contains a range with low > high.
    """
    negate, items, end = _parseCharClass(pattern, start)
    return _classMatch(negate, items, ch), end


def checkPattern(pattern, max_pattern_length=MAX_PATTERN_LENGTH):
    """ Raise MalformedPatternError if pattern is not a valid glob """
    if len(pattern) > max_pattern_length:
        msg = f"pattern longer than {max_pattern_length} chars"
        raise MalformedPatternError(msg, max_pattern_length)
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == '\\':
            if i + 1 >= len(pattern):
                raise MalformedPatternError("escape at end of pattern", i)
            i += 2
        elif ch == '[':
            _, _, i = _parseCharClass(pattern, i + 1)
        else:
            i += 1


def _matchGlob(item, pattern, si, pi, ignore_space, failed, classes):
    # return True if item[si:] matches pattern[pi:]
    # failed holds (si, pi) positions already known not to match
    # classes maps the index of each '[' to its parsed (negate, items, end)
    n = len(item)
    m = len(pattern)
    while si < n and pi < m and pattern[pi] != '*':
        if ignore_space:
            # ignore spaces for lazy matching
            if item[si] in WHITESPACE:
                si += 1
                continue
            if pattern[pi] in WHITESPACE:
                pi += 1
                continue
        p = pattern[pi]
        if p == '?':
            # matches any single character
            si += 1
            pi += 1
            continue
        if p == '[':
            if pi not in classes:
                classes[pi] = _parseCharClass(pattern, pi + 1)
            negate, items, end = classes[pi]
            if not _classMatch(negate, items, item[si]):
                return False
            si += 1
            pi = end
            continue
        if p == '\\':
            # escaped char matches as a normal char
            pi += 1
        if item[si] != pattern[pi]:
            return False
        si += 1
        pi += 1

    if pi < m and pattern[pi] == '*':
        while pi < m and pattern[pi] == '*':
            pi += 1
        if pi == m:
            # tail wild card matches all
            return True
        while si < n:
            if (si, pi) not in failed:
                if _matchGlob(item, pattern, si, pi, ignore_space, failed, classes):
                    return True
                failed.add((si, pi))
            si += 1

    return si == n and pi == m


def globcheck(item, pattern, ignore_space=False,
              max_pattern_length=MAX_PATTERN_LENGTH,
              max_item_length=MAX_ITEM_LENGTH):
    """
    Match item against pattern and return a GlobResult.

    A pattern that can't be parsed gives a MALFORMED result rather than
    NOMATCH, so callers can report a bad filter instead of silently
    matching nothing.  If ignore_space is True, whitespace in both item and
    pattern is skipped.

    Raises ValueError if item is longer than max_item_length.
    """
    if len(item) > max_item_length:
        raise ValueError(f"item longer than {max_item_length} chars")
    try:
        checkPattern(pattern, max_pattern_length=max_pattern_length)
    except MalformedPatternError as mpe:
        log.debug(f"globcheck - malformed pattern '{pattern}': {mpe}")
        return GlobResult(GlobResult.MALFORMED, reason=mpe.reason, position=mpe.position)

    if _matchGlob(item, pattern, 0, 0, ignore_space, set(), {}):
        return GlobResult(GlobResult.MATCH)
    return GlobResult(GlobResult.NOMATCH)


def globmatch(item, pattern, ignore_space=False,
              max_pattern_length=MAX_PATTERN_LENGTH,
              max_item_length=MAX_ITEM_LENGTH):
    """
    Return True if item matches pattern.

    Malformed patterns and over-long items return False; use globcheck to
    tell these apart from a plain mismatch.
    """
    try:
        result = globcheck(item, pattern, ignore_space=ignore_space,
                           max_pattern_length=max_pattern_length,
                           max_item_length=max_item_length)
    except ValueError as ve:
        log.debug(f"globmatch - {ve}")
        return False
    return bool(result)


def globfilter(lines, pattern, ignore_space=False,
               max_pattern_length=MAX_PATTERN_LENGTH,
               max_item_length=MAX_ITEM_LENGTH):
    """ Return the lines that match pattern, in their original order """
    matches = []
    for line in lines:
        if globmatch(line, pattern, ignore_space=ignore_space,
                     max_pattern_length=max_pattern_length,
                     max_item_length=max_item_length):
            matches.append(line)
    if log.isDebug():
        log.debug(f"globfilter - {len(matches)} lines matched '{pattern}'")
    return matches
