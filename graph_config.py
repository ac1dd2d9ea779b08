# graph_config.py - graph configuration
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

"""A graph: a selector, how to draw it and the instances found for it."""

import re

from graph_errors import InvalidArgumentError
from graph_ident import (IDENT_FIELDS, ident_compare, ident_matches)
from graph_instance import (inst_add_file, inst_create, inst_destroy,
                            inst_find_matching, inst_foreach, inst_search)
from query_params import escape_value

# {host}, {plugin}, ... in titles are replaced by the instance's values
TITLE_FIELD_RE = re.compile(r'\{(' + '|'.join(IDENT_FIELDS) + r')\}')


class GraphConfig(object):
    """Graph class defined by a (wildcarded) selector"""

    def __init__(self, select, title=None, vertical_label=None,
                 show_zero=False, defs=None, dynamic=False):
        if select is None:
            raise InvalidArgumentError("GraphConfig: selector is None")
        self.select = select.clone()
        self.title = title
        self.vertical_label = vertical_label
        self.show_zero = bool(show_zero)
        # None: derive the definitions from the files
        self.defs = list(defs) if defs else None
        # Created for files no configured graph wanted
        self.dynamic = dynamic
        self.instances = []

    def __repr__(self):
        return '<GraphConfig {0} instances={1}>'.format(self.select,
                                                        len(self.instances))

    def copy_empty(self):
        """Same graph without any instances"""
        return GraphConfig(self.select, self.title, self.vertical_label,
                           self.show_zero, self.defs, self.dynamic)

    def get_selector(self):
        return self.select.clone()

    def get_defs(self):
        return self.defs

    def get_instances(self):
        return self.instances

    def get_title(self, inst=None):
        """Title of the graph, with {field} placeholders expanded from the
        instance's selector (or the graph's when inst is None)"""
        if self.title is None:
            template = str(self.select)
        else:
            template = self.title
        ident = inst.select if inst is not None else self.select
        return TITLE_FIELD_RE.sub(lambda m: ident.get_field(m.group(1)),
                                  template)

    def get_params(self):
        return ';'.join('graph_{0}={1}'.format(
            name, escape_value(self.select.get_field(name)))
            for name in IDENT_FIELDS)

    def get_rrdargs(self, inst, args):
        """Arguments common to every instance of the graph"""
        args.append('-t')
        args.append(self.get_title(inst))
        if self.vertical_label:
            args.append('-v')
            args.append(self.vertical_label)
        if self.show_zero:
            args.append('-l')
            args.append('0')
        return 0

    def matches_ident(self, ident):
        return ident_matches(self.select, ident)

    def compare(self, ident):
        return ident_compare(self.select, ident)

    def add_file(self, ident):
        """Adds a file to the first matching instance, creating a new
        instance at the end of the list if there is none"""
        inst = inst_find_matching(self.instances, ident)
        if inst is None:
            inst = inst_create(self, ident)
            self.instances.append(inst)
        return inst_add_file(inst, ident)

    def inst_foreach(self, callback, user_data=None):
        return inst_foreach(self.instances, callback, user_data)

    def inst_search(self, term, callback, user_data=None):
        return inst_search(self, self.instances, term, callback, user_data)

    def clear(self):
        inst_destroy(self.instances)

# vim: autoindent tabstop=4 expandtab smarttab shiftwidth=4 softtabstop=4 tw=0
