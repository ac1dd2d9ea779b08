# str_array.py - growable list of argument strings
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

"""Ordered list of strings used to build rrdtool command lines."""

from typing import Iterator, List

from graph_errors import BufferOverflowError, InvalidArgumentError

# Capacity of a single formatted entry, in bytes (including a terminator)
FORMAT_BUFFER_SIZE = 1024


class StrArray(object):
    """Ordered, sortable sequence of strings.

    Duplicates and insertion order are kept until sort() is called.
    """

    def __init__(self, entries=None):
        self._entries: List[str] = []
        if entries is not None:
            for entry in entries:
                self.append(entry)

    def append(self, entry: str) -> None:
        """Appends a string.

        Raises:
            InvalidArgumentError: entry is not a string.
        """
        if not isinstance(entry, str):
            raise InvalidArgumentError(
                "StrArray.append: expected a string, got {0!r}".format(entry))
        self._entries.append(entry)

    def append_format(self, fmt: str, *args) -> None:
        """Appends printf-style formatted text.

        The result must fit in FORMAT_BUFFER_SIZE bytes including the
        terminator; it is never truncated.

        Raises:
            BufferOverflowError: the formatted text is too long.
        """
        if fmt is None:
            raise InvalidArgumentError("StrArray.append_format: fmt is None")
        entry = fmt % args
        size = len(entry.encode('utf-8'))
        if size >= FORMAT_BUFFER_SIZE:
            raise BufferOverflowError(
                "formatted entry needs {0} bytes, capacity is {1}".format(
                    size + 1, FORMAT_BUFFER_SIZE))
        self.append(entry)

    def extend(self, entries) -> None:
        for entry in entries:
            self.append(entry)

    def sort(self) -> None:
        self._entries.sort()

    def count(self) -> int:
        return len(self._entries)

    def items(self) -> List[str]:
        """Returns a copy of the entries, an empty list if there are none"""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __repr__(self):
        return 'StrArray({0!r})'.format(self._entries)

# vim: autoindent tabstop=4 expandtab smarttab shiftwidth=4 softtabstop=4 tw=0
