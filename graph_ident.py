# graph_ident.py - five part identifiers of collected metrics
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
Identifiers of collected metrics.

Every RRD file written by the collection daemon is named after five parts:
host, plugin, plugin instance, type and type instance. A graph selects the
files it shows with the same five parts, where any part may be a wildcard:
ANY stands for exactly one concrete value (every distinct value gets its own
graph instance) and ALL stands for every value at once (the values are
aggregated into one instance).
"""

import enum
import functools
import os
import re
from typing import Optional, Union

from graph_errors import InvalidArgumentError

IDENT_FIELDS = ('host', 'plugin', 'plugin_instance', 'type', 'type_instance')

IDENT_FLAG_REPLACE_ANY = 0x01
IDENT_FLAG_REPLACE_ALL = 0x02

RRD_EXTENSION = '.rrd'

# '/' and NUL are escaped in every part of a file name, '-' only in the
# separator fields (plugin and type). A '%' is escaped only where it would
# otherwise be read back as an escape sequence, so every file name found on
# disk maps back to itself
_ESCAPABLE = r'(?:25)*(?:2F|00|2D)'
_UNSAFE_RE = re.compile(r'%(?=' + _ESCAPABLE + r')|[/\x00]')
_UNSAFE_SEPARATOR_RE = re.compile(r'%(?=' + _ESCAPABLE + r')|[/\x00-]')
_ESCAPED_RE = re.compile(r'%((?:25)*)(2F|00|2D)')


class Wildcard(enum.Enum):
    """Wildcard markers usable in place of a concrete identifier part"""
    ANY = '/any/'
    ALL = '/all/'

    def __str__(self) -> str:
        return self.value


ANY = Wildcard.ANY
ALL = Wildcard.ALL

Part = Union[str, Wildcard]

# Sort rank of a part with the same text: concrete first, then ANY, then ALL
_RANK = {ANY: 1, ALL: 2}


def is_wildcard(part: Part) -> bool:
    return isinstance(part, Wildcard)


def is_any(part: Part) -> bool:
    return part is ANY


def is_all(part: Part) -> bool:
    return part is ALL


def parse_part(value: Optional[Union[str, Wildcard]]) -> Part:
    """Turns a raw value into an identifier part.

    Empty strings become ANY and the textual forms '/any/' and '/all/' (as
    found in configuration files and query strings) become the matching
    wildcard.

    Args:
        value: a string or a Wildcard.

    Returns:
        A concrete string or a Wildcard.

    Raises:
        InvalidArgumentError: value is None or not a string.
    """
    if isinstance(value, Wildcard):
        return value
    if value is None:
        raise InvalidArgumentError("identifier part must not be None")
    if not isinstance(value, str):
        raise InvalidArgumentError(
            "identifier part must be a string, got {0!r}".format(value))
    if value == '' or value == ANY.value:
        return ANY
    if value == ALL.value:
        return ALL
    return value


def _part_key(part: Part):
    if isinstance(part, Wildcard):
        return (part.value, _RANK[part])
    return (part, 0)


def _part_matches(pattern: Part, value: Part) -> bool:
    if isinstance(pattern, Wildcard):
        return True
    return pattern == value


@functools.total_ordering
class GraphIdent(object):
    """A (possibly wildcarded) five part identifier.

    Instances are immutable values: all parts are fixed at construction
    time. Equality and ordering follow ident_compare(), i.e. wildcards are
    compared like any other value and never equal a concrete string.
    """

    __slots__ = ('host', 'plugin', 'plugin_instance', 'type',
                 'type_instance', 'mtime')

    def __init__(self, host, plugin, plugin_instance, type, type_instance,
                 mtime=0):
        for name, value in zip(IDENT_FIELDS, (host, plugin, plugin_instance,
                                              type, type_instance)):
            object.__setattr__(self, name, parse_part(value))
        object.__setattr__(self, 'mtime', int(mtime or 0))

    def __setattr__(self, name, value):
        raise AttributeError("GraphIdent is immutable")

    @classmethod
    def from_parts(cls, parts, mtime=0) -> 'GraphIdent':
        """Builds an identifier from parts as returned by parts(), without
        parsing them: a concrete '/any/' stays a string"""
        ident = cls.__new__(cls)
        for name, value in zip(IDENT_FIELDS, parts):
            if value is None:
                raise InvalidArgumentError(
                    "identifier part must not be None")
            object.__setattr__(ident, name, value)
        object.__setattr__(ident, 'mtime', int(mtime or 0))
        return ident

    @classmethod
    def from_dict(cls, d, mtime=0):
        """Builds an identifier from a mapping, missing parts become ANY"""
        return cls(*[d.get(name, '') for name in IDENT_FIELDS], mtime=mtime)

    def parts(self):
        return tuple(getattr(self, name) for name in IDENT_FIELDS)

    def sort_key(self):
        return tuple(_part_key(p) for p in self.parts())

    def clone(self) -> 'GraphIdent':
        return GraphIdent.from_parts(self.parts(), self.mtime)

    def replace(self, **kwargs) -> 'GraphIdent':
        """Returns a copy with some parts replaced"""
        values = dict(zip(IDENT_FIELDS, self.parts()))
        mtime = kwargs.pop('mtime', self.mtime)
        for name, value in kwargs.items():
            if name not in values:
                raise InvalidArgumentError(
                    "unknown identifier part {0}".format(name))
            values[name] = parse_part(value)
        return GraphIdent.from_parts([values[name] for name in IDENT_FIELDS],
                                     mtime)

    def get_field(self, name: str) -> str:
        """Returns the part called name as text, never None"""
        if name not in IDENT_FIELDS:
            raise InvalidArgumentError(
                "unknown identifier part {0}".format(name))
        return str(getattr(self, name))

    def get_host(self) -> str:
        return str(self.host)

    def get_plugin(self) -> str:
        return str(self.plugin)

    def get_plugin_instance(self) -> str:
        return str(self.plugin_instance)

    def get_type(self) -> str:
        return str(self.type)

    def get_type_instance(self) -> str:
        return str(self.type_instance)

    def get_mtime(self) -> int:
        return self.mtime

    def as_dict(self):
        return dict((name, self.get_field(name)) for name in IDENT_FIELDS)

    def is_concrete(self) -> bool:
        return not any(is_wildcard(p) for p in self.parts())

    def __eq__(self, other):
        if not isinstance(other, GraphIdent):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __lt__(self, other):
        if not isinstance(other, GraphIdent):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self):
        return hash(self.sort_key())

    def __str__(self):
        s = '{0}/{1}'.format(self.get_host(), self.get_plugin())
        if self.plugin_instance is not ANY:
            s += '-' + self.get_plugin_instance()
        s += '/' + self.get_type()
        if self.type_instance is not ANY:
            s += '-' + self.get_type_instance()
        return s

    def __repr__(self):
        return 'GraphIdent({0})'.format(
            ', '.join(repr(self.get_field(n)) for n in IDENT_FIELDS))


def ident_create(host, plugin, plugin_instance, type, type_instance,
                 mtime=0) -> GraphIdent:
    return GraphIdent(host, plugin, plugin_instance, type, type_instance,
                      mtime=mtime)


def ident_clone(ident: GraphIdent) -> GraphIdent:
    if ident is None:
        raise InvalidArgumentError("ident_clone: ident is None")
    return ident.clone()


def ident_copy_with_selector(selector: GraphIdent, ident: GraphIdent,
                             flags: int = 0) -> GraphIdent:
    """Resolves the wildcards of selector against a concrete identifier.

    For every part, an ANY in the selector is replaced by the part of ident
    if IDENT_FLAG_REPLACE_ANY is set in flags, an ALL if
    IDENT_FLAG_REPLACE_ALL is set. All other parts are taken from selector.
    The modification time is taken from ident.

    Raises:
        InvalidArgumentError: selector or ident is None.
    """
    if selector is None or ident is None:
        raise InvalidArgumentError(
            "ident_copy_with_selector: selector and ident are required")

    parts = []
    for sel, val in zip(selector.parts(), ident.parts()):
        if sel is ANY and flags & IDENT_FLAG_REPLACE_ANY:
            parts.append(val)
        elif sel is ALL and flags & IDENT_FLAG_REPLACE_ALL:
            parts.append(val)
        else:
            parts.append(sel)

    return GraphIdent.from_parts(parts, ident.mtime)


def ident_compare(a: GraphIdent, b: GraphIdent) -> int:
    """Total order over identifiers, host first and type instance last.

    Returns -1, 0 or 1. This is not a wildcard match: ANY only equals ANY.
    """
    if a is None or b is None:
        raise InvalidArgumentError("ident_compare: both identifiers needed")
    ka = a.sort_key()
    kb = b.sort_key()
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0


def ident_matches(pattern: GraphIdent, ident: GraphIdent) -> bool:
    """Returns True if every part of pattern is a wildcard or equals the
    corresponding part of ident"""
    if pattern is None or ident is None:
        return False
    return all(_part_matches(p, v)
               for p, v in zip(pattern.parts(), ident.parts()))


def _escape(value: str, separator: bool) -> str:
    regexp = _UNSAFE_SEPARATOR_RE if separator else _UNSAFE_RE
    return regexp.sub(lambda m: '%{0:02X}'.format(ord(m.group(0))), value)


def _unescape_match(m) -> str:
    # %25 in front of an escape sequence only protects its '%'
    if m.group(1):
        return '%' + m.group(1)[2:] + m.group(2)
    return chr(int(m.group(2), 16))


def _unescape(value: str) -> str:
    """Inverse of _escape(). Anything but the sequences _escape() writes is
    kept as it is"""
    return _ESCAPED_RE.sub(_unescape_match, value)


def ident_to_file(ident: GraphIdent, data_dir: str = '') -> str:
    """Returns the path of the RRD file backing a concrete identifier.

    The layout is host/plugin[-plugin_instance]/type[-type_instance].rrd
    relative to data_dir. ident_from_file() is the inverse. An ANY
    instance part stands for a file without that instance.

    Raises:
        InvalidArgumentError: ident is None or contains other wildcards.
    """
    if ident is None:
        raise InvalidArgumentError("ident_to_file: ident is None")
    if any(is_wildcard(p) for p in (ident.host, ident.plugin, ident.type)) \
            or ALL in (ident.plugin_instance, ident.type_instance):
        raise InvalidArgumentError(
            "ident_to_file: {0} contains wildcards".format(ident))

    plugin = _escape(ident.plugin, True)
    if ident.plugin_instance is not ANY:
        plugin += '-' + _escape(ident.plugin_instance, False)
    type_ = _escape(ident.type, True)
    if ident.type_instance is not ANY:
        type_ += '-' + _escape(ident.type_instance, False)

    return os.path.join(data_dir, _escape(ident.host, False), plugin,
                        type_ + RRD_EXTENSION)


def _split_separated(value: str):
    """Splits plugin-instance or type-instance; a missing instance is ANY"""
    if '-' in value:
        first, second = value.split('-', 1)
        return _unescape(first), _unescape(second)
    return _unescape(value), ANY


def ident_from_file(path: str, data_dir: str = '',
                    mtime: int = 0) -> GraphIdent:
    """Parses a file name produced by ident_to_file().

    Parts missing from the file name (no plugin or type instance) become
    ANY. All other parts are taken literally, so a file name never yields
    a wildcard.

    Raises:
        InvalidArgumentError: the path does not follow the layout.
    """
    if path is None:
        raise InvalidArgumentError("ident_from_file: path is None")
    rel = os.path.relpath(path, data_dir) if data_dir else path
    parts = rel.split(os.sep)
    if len(parts) != 3 or not parts[2].endswith(RRD_EXTENSION):
        raise InvalidArgumentError(
            "ident_from_file: unexpected file name {0}".format(path))

    host = _unescape(parts[0])
    plugin, plugin_instance = _split_separated(parts[1])
    type_, type_instance = _split_separated(parts[2][:-len(RRD_EXTENSION)])
    if not host or not plugin or not type_:
        raise InvalidArgumentError(
            "ident_from_file: incomplete file name {0}".format(path))

    return GraphIdent.from_parts((host, plugin, plugin_instance, type_,
                                  type_instance), mtime)

# vim: autoindent tabstop=4 expandtab smarttab shiftwidth=4 softtabstop=4 tw=0
