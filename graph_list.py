# graph_list.py - registry of all graphs
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
The graph list: every configured graph, plus graphs created on the fly for
files no configured graph wants.

The list is built by refresh() into a CatalogSnapshot which is then swapped
in with a single assignment. Snapshots are never modified afterwards, so
readers may keep using the one they got while a refresh is running. There is
no locking: at most one refresh() may run at a time, which the caller has to
guarantee.
"""

import logging
import time

from graph_config import GraphConfig
from graph_errors import InvalidArgumentError
from graph_ident import (ALL, ANY, IDENT_FIELDS, GraphIdent, ident_compare,
                         ident_create, is_wildcard)
from graph_instance import inst_describe
from query_params import get_part_from_param
import rrd_files

LOGGER = logging.getLogger(__name__)

# Seconds between two scans of the data directory
DEFAULT_UPDATE_INTERVAL = 300


class CatalogSnapshot(object):
    """All graphs (configured ones first) at one point in time"""

    def __init__(self, graphs, timestamp=0):
        self.graphs = tuple(graphs)
        self.timestamp = timestamp

    def __len__(self):
        return len(self.graphs)

    def __iter__(self):
        return iter(self.graphs)


def dynamic_selector(ident):
    """Selector of the graph created for a file no configured graph
    matched: one instance per host and plugin instance, all type instances
    drawn together"""
    return GraphIdent.from_parts((ANY, ident.plugin, ANY, ident.type, ALL))


def gl_register_file(static, dynamic, ident):
    """Adds ident to every matching graph in static, or to the matching
    dynamic graph, creating it if needed. Returns the number of graphs the
    file was added to"""
    num_graphs = 0
    for cfg in static:
        if not cfg.matches_ident(ident):
            continue
        cfg.add_file(ident)
        num_graphs += 1

    if num_graphs > 0:
        return num_graphs

    for cfg in dynamic:
        if cfg.matches_ident(ident):
            cfg.add_file(ident)
            return 1

    cfg = GraphConfig(dynamic_selector(ident), dynamic=True)
    LOGGER.debug("Creating dynamic graph %s", cfg.select)
    dynamic.append(cfg)
    cfg.add_file(ident)
    return 1


def _field_matches(inst, field, value):
    part = getattr(inst.select, field)
    if not is_wildcard(part):
        return part == value
    return any(f.get_field(field) == value for f in inst.files)


class GraphList(object):
    """Explicit catalog object replacing a process wide graph list"""

    def __init__(self, data_dir=rrd_files.DEFAULT_DATA_DIR,
                 update_interval=DEFAULT_UPDATE_INTERVAL, scanner=None):
        self.data_dir = data_dir
        self.update_interval = update_interval
        self._scanner = scanner or rrd_files.scan_data_dir
        self._static = []
        self._snapshot = CatalogSnapshot(())
        self._last_update = None

    def add_graph(self, cfg):
        """Registers a configured graph. A graph with the same selector as
        an already registered one is ignored; returns whether cfg was
        added"""
        if cfg is None:
            raise InvalidArgumentError("add_graph: cfg is None")
        for other in self._static:
            if ident_compare(other.select, cfg.select) == 0:
                LOGGER.warning("Ignoring duplicate graph %s", cfg.select)
                return False
        self._static.append(cfg)
        # Make the next update() pick up the new graph
        self._last_update = None
        return True

    def config_submit(self, configs):
        for cfg in configs:
            self.add_graph(cfg)
        return 0

    def refresh(self, files=None, now=None):
        """Rebuilds the catalog from files (by default a scan of the data
        directory) and makes it the current snapshot"""
        if now is None:
            now = int(time.time())
        if files is None:
            files = self._scanner(self.data_dir)

        static = [cfg.copy_empty() for cfg in self._static]
        dynamic = []
        for ident in files:
            gl_register_file(static, dynamic, ident)

        snapshot = CatalogSnapshot(static + dynamic, now)
        self._snapshot = snapshot
        self._last_update = now
        LOGGER.info("Catalog refreshed: %i graphs (%i dynamic)",
                    len(snapshot), len(dynamic))
        return snapshot

    def update(self, now=None):
        """Refreshes the catalog if it is older than update_interval.
        Returns True if it did"""
        if now is None:
            now = int(time.time())
        if self._last_update is not None and \
                now - self._last_update < self.update_interval:
            return False
        self.refresh(now=now)
        return True

    def snapshot(self):
        return self._snapshot

    def graphs(self):
        return self._snapshot.graphs

    def graph_get_selected(self, params):
        """The graph whose selector equals the graph_<field> (falling back
        to <field>) parameters, or None"""
        values = [get_part_from_param(params, 'graph_' + name, name)
                  for name in IDENT_FIELDS]
        if any(v is None for v in values):
            LOGGER.debug("graph_get_selected: a parameter is missing")
            return None

        ident = ident_create(*values)
        for cfg in self._snapshot:
            if cfg.compare(ident) == 0:
                return cfg
        LOGGER.debug("graph_get_selected: no graph %s", ident)
        return None

    def graph_get_all(self, callback, user_data=None):
        """callback(cfg, user_data) for every graph, non-zero aborts"""
        if callback is None:
            raise InvalidArgumentError("graph_get_all: callback is None")
        for cfg in self._snapshot:
            status = callback(cfg, user_data)
            if status != 0:
                return status
        return 0

    def graph_instance_get_all(self, cfg, callback, user_data=None):
        """callback(cfg, inst, user_data) for every instance of cfg"""
        if cfg is None or callback is None:
            raise InvalidArgumentError("graph_instance_get_all: arguments")
        for inst in cfg.get_instances():
            status = callback(cfg, inst, user_data)
            if status != 0:
                return status
        return 0

    def instance_get_all(self, callback, user_data=None):
        for cfg in self._snapshot:
            status = self.graph_instance_get_all(cfg, callback, user_data)
            if status != 0:
                return status
        return 0

    def search_field(self, field, value, callback, user_data=None):
        """callback(cfg, inst, user_data) for every instance having value in
        field, either in its selector or in one of its files"""
        if field not in IDENT_FIELDS:
            raise InvalidArgumentError("unknown field {0}".format(field))
        for cfg in self._snapshot:
            for inst in cfg.get_instances():
                if not _field_matches(inst, field, value):
                    continue
                status = callback(cfg, inst, user_data)
                if status != 0:
                    return status
        return 0

    def search(self, term, callback, user_data=None):
        """Calls callback(cfg, inst, user_data) for the instances found by
        term. 'field:value' searches one field, anything else is looked for
        in graph titles (all instances of the graph) and instance
        descriptions"""
        if term is None or callback is None:
            raise InvalidArgumentError("search: term and callback needed")

        if ':' in term:
            field, value = term.split(':', 1)
            if field in IDENT_FIELDS:
                return self.search_field(field, value, callback, user_data)

        for cfg in self._snapshot:
            if term in cfg.get_title():
                status = self.graph_instance_get_all(cfg, callback,
                                                     user_data)
                if status != 0:
                    return status
                continue

            for inst in cfg.get_instances():
                if term not in inst_describe(cfg, inst):
                    continue
                status = callback(cfg, inst, user_data)
                if status != 0:
                    return status
        return 0

# vim: autoindent tabstop=4 expandtab smarttab shiftwidth=4 softtabstop=4 tw=0
