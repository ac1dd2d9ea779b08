# graph_def.py - data source definitions of a graph
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
Graph definitions ("DEFs").

A definition ties an identifier pattern to one data source inside the
matching RRD files and knows how to draw it: colour, legend, line or area,
stacked or not. For every file the pattern matches, def_get_rrdargs()
appends one group of rrdtool graph arguments.
"""

import logging

from graph_errors import InvalidArgumentError
from graph_ident import (ANY, IDENT_FIELDS, IDENT_FLAG_REPLACE_ALL,
                         IDENT_FLAG_REPLACE_ANY, ident_copy_with_selector,
                         ident_matches, ident_to_file)
from str_array import StrArray

LOGGER = logging.getLogger(__name__)

# Same colours as matplotlib's "Set1" colour map
DEFAULT_COLORS = (0xe41a1c, 0x377eb8, 0x4daf4a, 0x984ea3, 0xff7f00,
                  0xa65628, 0xf781bf, 0x999999)

DEFAULT_FORMAT = '%6.2lf'


def rrd_escape(s):
    """Escapes the field separator of rrdtool graph arguments"""
    return s.replace('\\', '\\\\').replace(':', '\\:')


def parse_color(value):
    """Accepts 0xRRGGBB integers as well as 'RRGGBB' / '#RRGGBB' strings"""
    if value is None:
        return None
    if isinstance(value, int):
        color = value
    else:
        try:
            color = int(str(value).lstrip('#'), 16)
        except ValueError:
            raise InvalidArgumentError("invalid colour {0!r}".format(value))
    if color < 0 or color > 0xffffff:
        raise InvalidArgumentError("colour out of range: {0!r}".format(value))
    return color


class GraphDef(object):
    """One data source of one (set of) file(s) and how to draw it"""

    def __init__(self, select, ds_name, legend=None, color=None,
                 stack=False, area=False, format=None):
        if select is None or not ds_name:
            raise InvalidArgumentError(
                "GraphDef: a selector and a data source name are required")
        self.select = select.clone()
        self.ds_name = ds_name
        self.legend = legend
        self.color = parse_color(color)
        if self.color is None:
            self.color = DEFAULT_COLORS[0]
        self.stack = bool(stack)
        self.area = bool(area)
        self.format = format or DEFAULT_FORMAT

    def __repr__(self):
        return '<GraphDef {0} ds={1}>'.format(self.select, self.ds_name)


def def_create(cfg, ident, ds_name, color=None):
    """Creates a definition for one data source of exactly one file.

    The selector is the graph's selector with every wildcard filled in from
    ident, so the definition matches only files like ident.
    """
    if cfg is None or ident is None or not ds_name:
        raise InvalidArgumentError(
            "def_create: graph, identifier and data source are required")
    select = ident_copy_with_selector(
        cfg.get_selector(), ident,
        IDENT_FLAG_REPLACE_ANY | IDENT_FLAG_REPLACE_ALL)
    return GraphDef(select, ds_name, color=color)


def def_matches(gdef, ident):
    return ident_matches(gdef.select, ident)


def def_search(defs, ident, ds_name):
    """Returns the first definition for ds_name matching ident, or None"""
    for gdef in defs or []:
        if gdef.ds_name == ds_name and def_matches(gdef, ident):
            return gdef
    return None


def def_foreach(defs, callback, user_data=None):
    """Calls callback(def, user_data) for every definition in order.

    A non-zero return value stops the iteration and is returned.
    """
    if defs is None or callback is None:
        raise InvalidArgumentError("def_foreach: defs and callback needed")
    for gdef in defs:
        status = callback(gdef, user_data)
        if status != 0:
            return status
    return 0


def _default_legend(ident, ds_name):
    parts = []
    for name in ('plugin_instance', 'type_instance'):
        if getattr(ident, name) is not ANY:
            parts.append(ident.get_field(name))
    if not parts:
        parts.append(ident.get_type())
    if ds_name != 'value':
        parts.append(ds_name)
    return ' '.join(parts)


def def_get_rrdargs(gdef, ident, args, data_dir=''):
    """Appends the rrdtool graph arguments drawing gdef for one file.

    The variable names are numbered after the number of arguments already
    in args, which keeps them unique within one command line. Either the
    whole group is appended or, if an exception is raised, nothing.
    """
    if gdef is None or ident is None or args is None:
        raise InvalidArgumentError("def_get_rrdargs: invalid arguments")

    fname = rrd_escape(ident_to_file(ident, data_dir))
    legend = rrd_escape(gdef.legend or _default_legend(ident, gdef.ds_name))
    index = args.count()
    LOGGER.debug("def_get_rrdargs: file = %s; ds = %s; index = %i",
                 fname, gdef.ds_name, index)

    group = StrArray()
    for suffix, cf in (('min', 'MIN'), ('avg', 'AVERAGE'), ('max', 'MAX')):
        group.append_format("DEF:def_%04i_%s=%s:%s:%s", index, suffix, fname,
                            gdef.ds_name, cf)

    group.append_format("VDEF:vdef_%04i_min=def_%04i_min,MINIMUM",
                        index, index)
    group.append_format("VDEF:vdef_%04i_avg=def_%04i_avg,AVERAGE",
                        index, index)
    group.append_format("VDEF:vdef_%04i_max=def_%04i_max,MAXIMUM",
                        index, index)
    group.append_format("VDEF:vdef_%04i_lst=def_%04i_avg,LAST", index, index)

    group.append_format("%s:def_%04i_avg#%06x:%s%s",
                        'AREA' if gdef.area else 'LINE1', index, gdef.color,
                        legend, ':STACK' if gdef.stack else '')

    fmt = rrd_escape(gdef.format)
    group.append_format("GPRINT:vdef_%04i_min:%s min,", index, fmt)
    group.append_format("GPRINT:vdef_%04i_avg:%s avg,", index, fmt)
    group.append_format("GPRINT:vdef_%04i_max:%s max,", index, fmt)
    group.append_format("GPRINT:vdef_%04i_lst:%s last\\l", index, fmt)

    args.extend(group)
    return 0


def def_to_dict(gdef):
    d = dict((name, gdef.select.get_field(name)) for name in IDENT_FIELDS)
    d.update({'ds_name': gdef.ds_name,
              'legend': gdef.legend,
              'color': '{0:06x}'.format(gdef.color),
              'stack': gdef.stack,
              'area': gdef.area,
              'format': gdef.format})
    return d

# vim: autoindent tabstop=4 expandtab smarttab shiftwidth=4 softtabstop=4 tw=0
