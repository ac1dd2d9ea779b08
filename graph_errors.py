# graph_errors.py - rrdcatalog exceptions
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

"""Exceptions raised by the graph catalog modules."""


class CatalogError(Exception):
    """
    Base exception class for problems building or querying the graph
    catalog
    """

    def __init__(self, msg=None):
        self._msg = msg
        Exception.__init__(self, msg)

    def __str__(self):
        if self._msg is None:
            return "Catalog error - no further details"
        else:
            return "Catalog error: " + self._msg


class InvalidArgumentError(CatalogError, ValueError):
    """A required argument was missing or malformed"""


class NotFoundError(CatalogError, LookupError):
    """No graph or instance matched a selection"""


class IOFailureError(CatalogError, OSError):
    """A backing file could not be read or introspected"""


class BufferOverflowError(CatalogError, OverflowError):
    """Formatted output exceeded its capacity"""


class ConfigError(CatalogError):
    """The configuration file is invalid"""

# vim: autoindent tabstop=4 expandtab smarttab shiftwidth=4 softtabstop=4 tw=0
