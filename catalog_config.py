# catalog_config.py - configuration file and logging setup
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
Reading the YAML configuration file. Example::

    data_dir: /var/lib/collectd/rrd
    rrdtool: /usr/bin/rrdtool
    update_interval: 300
    graphs:
      - plugin: cpu
        type: cpu
        type_instance: /all/
        title: "CPU {plugin_instance} on {host}"
        vertical_label: Jiffies
        show_zero: true
        defs:
          - type_instance: idle
            ds_name: value
            legend: Idle
            color: "e8e8e8"
            area: true
            stack: true

Selector fields left out are /any/.
"""

import logging
import logging.config
import os

import yaml

from graph_config import GraphConfig
from graph_def import GraphDef
from graph_errors import ConfigError, InvalidArgumentError
from graph_ident import GraphIdent, IDENT_FIELDS
from graph_list import DEFAULT_UPDATE_INTERVAL
import rrd_files

LOGGER = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s %(name)s %(levelname)s: %(message)s'

GRAPH_KEYS = set(IDENT_FIELDS) | {'title', 'vertical_label', 'show_zero',
                                  'defs'}
DEF_KEYS = set(IDENT_FIELDS) | {'ds_name', 'legend', 'color', 'stack',
                                'area', 'format'}


class CatalogConfig(object):
    """Parsed configuration file"""

    def __init__(self, data_dir=rrd_files.DEFAULT_DATA_DIR,
                 rrdtool=rrd_files.DEFAULT_RRDTOOL,
                 update_interval=DEFAULT_UPDATE_INTERVAL, graphs=None):
        self.data_dir = data_dir
        self.rrdtool = rrdtool
        self.update_interval = update_interval
        self.graphs = graphs or []


def _selector(d, where):
    try:
        return GraphIdent.from_dict(
            dict((k, '' if d.get(k) is None else str(d[k]))
                 for k in IDENT_FIELDS))
    except InvalidArgumentError as e:
        raise ConfigError("{0}: {1}".format(where, e))


def _check_keys(d, allowed, where):
    if not isinstance(d, dict):
        raise ConfigError("{0}: expected a mapping".format(where))
    unknown = set(d) - allowed
    if unknown:
        raise ConfigError("{0}: unknown keys {1}".format(
            where, ', '.join(sorted(unknown))))


def parse_def(d, where):
    _check_keys(d, DEF_KEYS, where)
    if not d.get('ds_name'):
        raise ConfigError("{0}: ds_name is missing".format(where))
    try:
        return GraphDef(_selector(d, where), str(d['ds_name']),
                        legend=d.get('legend'), color=d.get('color'),
                        stack=d.get('stack', False),
                        area=d.get('area', False), format=d.get('format'))
    except InvalidArgumentError as e:
        raise ConfigError("{0}: {1}".format(where, e))


def parse_graph(d, where):
    _check_keys(d, GRAPH_KEYS, where)
    defs = []
    for i, dd in enumerate(d.get('defs') or []):
        defs.append(parse_def(dd, '{0}, def {1}'.format(where, i + 1)))
    return GraphConfig(_selector(d, where), title=d.get('title'),
                       vertical_label=d.get('vertical_label'),
                       show_zero=d.get('show_zero', False), defs=defs)


def parse_config(data, source='<config>'):
    """Builds a CatalogConfig from the dict loaded from YAML"""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("{0}: top level must be a mapping".format(source))

    try:
        update_interval = int(data.get('update_interval',
                                       DEFAULT_UPDATE_INTERVAL))
    except (TypeError, ValueError):
        raise ConfigError("{0}: update_interval must be an integer".format(
            source))

    graphs = []
    for i, d in enumerate(data.get('graphs') or []):
        graphs.append(parse_graph(d, '{0}: graph {1}'.format(source, i + 1)))

    return CatalogConfig(
        data_dir=data.get('data_dir', rrd_files.DEFAULT_DATA_DIR),
        rrdtool=data.get('rrdtool', rrd_files.DEFAULT_RRDTOOL),
        update_interval=update_interval, graphs=graphs)


def load_config(filename):
    """Reads and parses a YAML configuration file"""
    try:
        with open(filename) as f:
            data = yaml.safe_load(f)
    except (IOError, yaml.YAMLError) as e:
        raise ConfigError("cannot read {0}: {1}".format(filename, e))
    config = parse_config(data, filename)
    LOGGER.debug("Loaded %i graphs from %s", len(config.graphs), filename)
    return config


def configure_logging(filename=None, debug=False):
    """Configures logging from a YAML (or JSON) dict config file, or logs to
    stderr if no file was given"""
    if filename is not None and os.path.isfile(filename):
        # JSON is valid YAML as well
        with open(filename) as f:
            logging.config.dictConfig(yaml.safe_load(f))
        return
    if filename is not None:
        raise ConfigError("logging configuration {0} not found".format(
            filename))
    logging.basicConfig(format=LOG_FORMAT,
                        level=logging.DEBUG if debug else logging.WARNING)

# vim: autoindent tabstop=4 expandtab smarttab shiftwidth=4 softtabstop=4 tw=0
