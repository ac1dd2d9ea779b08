# graph_instance.py - concrete instances of a graph
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
Graph instances.

A graph's selector may contain wildcards. Every distinct value a file has in
a field the selector marks ANY yields a separate instance of the graph; the
instance's own selector is the graph selector with those ANY fields filled
in. Fields marked ALL stay wildcards, so all the files differing only there
end up in the same instance.

The instances of a graph are kept in a plain list. Lookups scan it in
insertion order and the first match wins, even if a later instance would
match more specifically.
"""

import logging

from graph_def import (DEFAULT_COLORS, def_create, def_foreach,
                       def_get_rrdargs, def_matches, def_search)
from graph_errors import CatalogError, InvalidArgumentError, NotFoundError
from graph_ident import (ANY, IDENT_FIELDS, IDENT_FLAG_REPLACE_ANY,
                         ident_compare, ident_copy_with_selector,
                         ident_create, ident_matches, ident_to_file)
from query_params import escape_value, get_part_from_param
import rrd_files

LOGGER = logging.getLogger(__name__)


class GraphInstance(object):
    """One resolved selector plus the files that feed it"""

    def __init__(self, select):
        if select is None:
            raise InvalidArgumentError("GraphInstance: selector is None")
        self.select = select.clone()
        self.files = []

    def __repr__(self):
        return '<GraphInstance {0} files={1}>'.format(self.select,
                                                      len(self.files))


def inst_create(cfg, ident):
    """Creates the instance of cfg that ident belongs to"""
    if cfg is None or ident is None:
        raise InvalidArgumentError("inst_create: graph and ident required")
    select = ident_copy_with_selector(cfg.get_selector(), ident,
                                      IDENT_FLAG_REPLACE_ANY)
    return GraphInstance(select)


def inst_destroy(instances):
    """Releases every instance of the list and empties it"""
    if instances is None:
        return
    for inst in instances:
        del inst.files[:]
    del instances[:]


def inst_add_file(inst, file_ident):
    if inst is None or file_ident is None:
        raise InvalidArgumentError("inst_add_file: instance and file needed")
    inst.files.append(file_ident.clone())
    return 0


def inst_get_selector(inst):
    if inst is None:
        return None
    return inst.select.clone()


def inst_get_mtime(inst):
    """Newest modification time of all files, 0 if there are none"""
    if inst is None:
        return 0
    return max([f.get_mtime() for f in inst.files] or [0])


def inst_get_selected(cfg, params):
    """Returns the instance of cfg selected by the query parameters.

    Each field is read from inst_<field>, falling back to <field>. The
    selector must be equal to the requested identifier; wildcards are not
    expanded. None if a parameter is missing or no instance is equal.
    """
    if cfg is None:
        LOGGER.debug("inst_get_selected: cfg is None")
        return None

    values = [get_part_from_param(params, 'inst_' + name, name)
              for name in IDENT_FIELDS]
    if any(v is None for v in values):
        LOGGER.debug("inst_get_selected: a parameter is missing")
        return None

    ident = ident_create(*values)
    for inst in cfg.get_instances():
        if ident_compare(ident, inst.select) == 0:
            return inst

    LOGGER.debug("inst_get_selected: no match found for %s", ident)
    return None


def inst_get_params(cfg, inst):
    """Serializes the instance's selection as a query string.

    Fields where graph and instance agree become field=value, the others
    graph_field=...;inst_field=... so inst_get_selected() and
    graph_get_selected() can both find their object again.
    """
    if cfg is None or inst is None:
        raise InvalidArgumentError("inst_get_params: graph and instance")

    cfg_select = cfg.get_selector()
    ret = []
    for name in IDENT_FIELDS:
        cfg_f = cfg_select.get_field(name)
        inst_f = inst.select.get_field(name)
        if cfg_f == inst_f:
            ret.append('{0}={1}'.format(name, escape_value(cfg_f)))
        else:
            ret.append('graph_{0}={1};inst_{0}={2}'.format(
                name, escape_value(cfg_f), escape_value(inst_f)))
    return ';'.join(ret)


def inst_describe(cfg, inst):
    """Short label telling the instances of one graph apart.

    The instance's values of all fields the graph selector marks ANY,
    separated by '/', or 'default' if there are none. A field the files leave
    empty shows as the wildcard's text, e.g. '/any/'.
    """
    if cfg is None or inst is None:
        raise InvalidArgumentError("inst_describe: graph and instance")

    cfg_select = cfg.get_selector()
    parts = [inst.select.get_field(name) for name in IDENT_FIELDS
             if getattr(cfg_select, name) is ANY]
    if not parts:
        return 'default'
    return '/'.join(parts)


def inst_get_title(cfg, inst):
    return cfg.get_title(inst)


def inst_find_matching(instances, ident):
    """First instance whose selector matches ident, or None"""
    if instances is None or ident is None:
        return None
    for inst in instances:
        if ident_matches(inst.select, ident):
            return inst
    return None


def inst_foreach(instances, callback, user_data=None):
    """Calls callback(inst, user_data) for every instance in order. The
    first non-zero return value aborts the loop and is returned"""
    if instances is None or callback is None:
        raise InvalidArgumentError("inst_foreach: instances and callback")
    for inst in instances:
        status = callback(inst, user_data)
        if status != 0:
            return status
    return 0


def inst_search(cfg, instances, term, callback, user_data=None):
    """Like inst_foreach(), restricted to the instances whose description
    contains term (plain, case sensitive substring)"""
    if instances is None or callback is None or term is None:
        raise InvalidArgumentError("inst_search: invalid arguments")
    for inst in instances:
        if term not in inst_describe(cfg, inst):
            continue
        status = callback(inst, user_data)
        if status != 0:
            return status
    return 0


def _ident_get_default_defs(cfg, ident, defs, ds_lister, data_dir):
    """Appends one definition per data source of the file to defs"""
    try:
        fname = ident_to_file(ident, data_dir)
        dses = ds_lister(fname)
    except CatalogError as e:
        LOGGER.warning("Skipping %s: %s", ident, e)
        return

    for ds_name in dses:
        if def_search(defs, ident, ds_name) is not None:
            continue
        color = DEFAULT_COLORS[len(defs) % len(DEFAULT_COLORS)]
        defs.append(def_create(cfg, ident, ds_name, color=color))


def inst_get_default_defs(cfg, inst, ds_lister=None, data_dir=None):
    """Derives definitions from the files themselves, used when the graph
    has none configured. Unreadable files are skipped"""
    if cfg is None or inst is None:
        raise InvalidArgumentError("inst_get_default_defs: invalid arguments")
    if ds_lister is None:
        ds_lister = rrd_files.ds_list_from_rrd_file
    if data_dir is None:
        data_dir = rrd_files.DEFAULT_DATA_DIR

    defs = []
    for ident in inst.files:
        _ident_get_default_defs(cfg, ident, defs, ds_lister, data_dir)
    return defs


def inst_get_rrdargs(cfg, inst, args, ds_lister=None, data_dir=None):
    """Appends the rrdtool graph arguments for the instance to args.

    First the graph's own arguments (title, labels), then for every
    definition one group per matching file: definition order first, file
    order second. Without configured definitions they are derived from the
    files.

    Raises:
        NotFoundError: no definition could be derived from the files.
    """
    if cfg is None or inst is None or args is None:
        raise InvalidArgumentError("inst_get_rrdargs: invalid arguments")
    if data_dir is None:
        data_dir = rrd_files.DEFAULT_DATA_DIR

    cfg.get_rrdargs(inst, args)

    defs = cfg.get_defs()
    if not defs:
        defs = inst_get_default_defs(cfg, inst, ds_lister, data_dir)
        if not defs:
            raise NotFoundError("no data sources found for {0}".format(
                inst.select))

    def _def_cb(gdef, data):
        for ident in inst.files:
            if not def_matches(gdef, ident):
                continue
            try:
                def_get_rrdargs(gdef, ident, args, data_dir)
            except CatalogError as e:
                LOGGER.warning("Skipping %s of %s: %s", gdef.ds_name,
                               ident, e)
        return 0

    return def_foreach(defs, _def_cb)

# vim: autoindent tabstop=4 expandtab smarttab shiftwidth=4 softtabstop=4 tw=0
