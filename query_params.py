# query_params.py - query string handling
# Copyright (C) 2014  Michele Baldessari
#
# This program is free software; you can redistribute it and/or
# modify it under the terms of the GNU General Public License
# as published by the Free Software Foundation; either version 2
# of the License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston,
# MA  02110-1301, USA.

"""
Parsing of the query strings that select graphs and instances.

Query strings are key=value pairs separated by ';' (the form produced by
inst_get_params()) or '&' (the form produced by HTML forms). Values are
percent-encoded.
"""

import re
import time
from urllib.parse import quote, unquote_plus

from dateutil import parser as date_parser

from graph_errors import InvalidArgumentError

# Time span shown when no 'begin' parameter was given
DEFAULT_TIMESPAN = 86400

_SEPARATOR_RE = re.compile(r'[;&]')


def parse_query(query_string):
    """Parses a query string into a dict. The first occurrence of a key
    wins, keys without '=' get an empty value"""
    params = {}
    if not query_string:
        return params
    for pair in _SEPARATOR_RE.split(query_string.lstrip('?')):
        if not pair:
            continue
        if '=' in pair:
            key, value = pair.split('=', 1)
        else:
            key, value = pair, ''
        key = unquote_plus(key)
        if key not in params:
            params[key] = unquote_plus(value)
    return params


def escape_value(value):
    """Percent-encodes a value so it can be used in a query string"""
    return quote(value, safe='')


def format_query(pairs):
    """Inverse of parse_query() for a sequence of (key, value) pairs"""
    return ';'.join('{0}={1}'.format(escape_value(k), escape_value(v))
                    for k, v in pairs)


def param(params, key):
    """Returns the value of key or None"""
    if params is None:
        return None
    return params.get(key)


def get_part_from_param(params, prim_key, sec_key):
    """Returns the value of prim_key, falling back to sec_key"""
    val = param(params, prim_key)
    if val is not None:
        return val
    return param(params, sec_key)


def get_search_term(params):
    term = param(params, 'q')
    if term is None or term.strip() == '':
        return None
    return term.strip()


def _parse_time(value, now):
    """Relative (<= 0, seconds before now), absolute epoch seconds or any
    date dateutil understands"""
    value = value.strip()
    try:
        t = int(value)
    except ValueError:
        try:
            return int(date_parser.parse(value).timestamp())
        except (ValueError, OverflowError) as e:
            raise InvalidArgumentError(
                "cannot parse time {0!r}: {1}".format(value, e))
    if t <= 0:
        return now + t
    return t


def get_time_args(params, now=None):
    """Returns the (begin, end) pair of epoch seconds requested by the
    'begin' and 'end' parameters.

    end defaults to now and begin to DEFAULT_TIMESPAN seconds before end.

    Raises:
        InvalidArgumentError: a time cannot be parsed or begin is not
        before end.
    """
    if now is None:
        now = int(time.time())

    end_str = param(params, 'end')
    if end_str:
        end = _parse_time(end_str, now)
    else:
        end = now

    begin_str = param(params, 'begin')
    if begin_str:
        begin = _parse_time(begin_str, now)
    else:
        begin = end - DEFAULT_TIMESPAN

    if begin >= end:
        raise InvalidArgumentError(
            "begin ({0}) must be before end ({1})".format(begin, end))
    return begin, end

# vim: autoindent tabstop=4 expandtab smarttab shiftwidth=4 softtabstop=4 tw=0
