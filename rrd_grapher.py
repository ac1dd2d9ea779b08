# rrd_grapher.py - draws graph instances with rrdtool(1)
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

import functools
import json
import logging
import subprocess

from graph_def import def_to_dict
from graph_errors import CatalogError
from graph_instance import (inst_describe, inst_get_default_defs,
                            inst_get_rrdargs)
import rrd_files
from str_array import StrArray

LOGGER = logging.getLogger(__name__)

IMAGE_FORMAT = 'PNG'
GRAPH_WIDTH = 400
GRAPH_HEIGHT = 100


def build_graph_command(cfg, inst, begin, end, rrdtool=None, data_dir=None,
                        ds_lister=None, output='-'):
    """Full rrdtool graph command line for an instance"""
    rrdtool = rrdtool or rrd_files.DEFAULT_RRDTOOL
    if ds_lister is None:
        ds_lister = functools.partial(rrd_files.ds_list_from_rrd_file,
                                      rrdtool=rrdtool)
    args = StrArray([rrdtool, 'graph', output,
                     '-a', IMAGE_FORMAT,
                     '-w', str(GRAPH_WIDTH), '-h', str(GRAPH_HEIGHT),
                     '-s', str(begin), '-e', str(end)])
    inst_get_rrdargs(cfg, inst, args, ds_lister=ds_lister, data_dir=data_dir)
    return args.items()


def render_graph(cfg, inst, begin, end, rrdtool=None, data_dir=None,
                 ds_lister=None):
    """Runs rrdtool graph and returns the image"""
    cmd = build_graph_command(cfg, inst, begin, end, rrdtool=rrdtool,
                              data_dir=data_dir, ds_lister=ds_lister)
    LOGGER.debug("Running %s", ' '.join(cmd))
    try:
        proc = subprocess.Popen(cmd, stdout=subprocess.PIPE,
                                stderr=subprocess.PIPE)
        out, err = proc.communicate()
    except OSError as e:
        raise CatalogError("cannot run {0}: {1}".format(cmd[0], e))
    if proc.returncode != 0:
        LOGGER.error("Failed to generate graph: %s", err)
        raise CatalogError("rrdtool graph failed: {0}".format(
            err.decode('utf-8', 'replace').strip()))
    return out


def graph_def_json(cfg, inst, ds_lister=None, data_dir=None):
    """The definitions used to draw an instance, as JSON"""
    defs = cfg.get_defs()
    if not defs:
        defs = inst_get_default_defs(cfg, inst, ds_lister=ds_lister,
                                     data_dir=data_dir)
    return json.dumps({'title': cfg.get_title(inst),
                       'instance': inst_describe(cfg, inst),
                       'defs': [def_to_dict(d) for d in defs]},
                      indent=2, sort_keys=True)

# vim: autoindent tabstop=4 expandtab smarttab shiftwidth=4 softtabstop=4 tw=0
