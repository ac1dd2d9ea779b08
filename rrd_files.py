# rrd_files.py - discovery and introspection of RRD files
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
Finding the RRD files of the collection daemon and asking rrdtool(1) which
data sources they contain. The file format itself is rrdtool's business.
"""

import logging
import os
import re
import subprocess

from graph_errors import InvalidArgumentError, IOFailureError
from graph_ident import RRD_EXTENSION, ident_from_file

LOGGER = logging.getLogger(__name__)

DEFAULT_DATA_DIR = '/var/lib/collectd/rrd'
DEFAULT_RRDTOOL = 'rrdtool'

# "ds[value].index = 0" lines of rrdtool info
DS_INDEX_RE = re.compile(r'^ds\[(.+)\]\.index\s*=\s*(\d+)\s*$')


def scan_data_dir(data_dir):
    """Walks data_dir and returns the identifiers of all RRD files, in a
    stable order. Files not following the naming scheme are skipped"""
    ret = []
    if not os.path.isdir(data_dir):
        LOGGER.warning("Data directory %s does not exist", data_dir)
        return ret

    for root, dirs, files in os.walk(data_dir):
        dirs.sort()
        for fname in sorted(files):
            if not fname.endswith(RRD_EXTENSION):
                continue
            path = os.path.join(root, fname)
            try:
                mtime = int(os.stat(path).st_mtime)
                ret.append(ident_from_file(path, data_dir, mtime=mtime))
            except (InvalidArgumentError, OSError) as e:
                LOGGER.info("Ignoring %s: %s", path, e)
    LOGGER.debug("Found %i files in %s", len(ret), data_dir)
    return ret


def parse_rrd_info(output):
    """Returns the data source names of rrdtool info output, by index"""
    dses = {}
    for line in output.splitlines():
        matches = DS_INDEX_RE.match(line.strip())
        if matches:
            dses[int(matches.group(2))] = matches.group(1)
    return [dses[i] for i in sorted(dses)]


def ds_list_from_rrd_file(fname, rrdtool=DEFAULT_RRDTOOL):
    """Returns the names of the data sources in fname.

    Raises:
        IOFailureError: rrdtool could not be run or could not read the file.
    """
    try:
        proc = subprocess.Popen([rrdtool, 'info', fname],
                                stdout=subprocess.PIPE,
                                stderr=subprocess.PIPE)
        out, err = proc.communicate()
    except OSError as e:
        raise IOFailureError("cannot run {0}: {1}".format(rrdtool, e))

    if proc.returncode != 0:
        raise IOFailureError("rrdtool info {0} failed: {1}".format(
            fname, err.decode('utf-8', 'replace').strip()))

    dses = parse_rrd_info(out.decode('utf-8', 'replace'))
    if not dses:
        raise IOFailureError("{0} contains no data sources".format(fname))
    return dses

# vim: autoindent tabstop=4 expandtab smarttab shiftwidth=4 softtabstop=4 tw=0
