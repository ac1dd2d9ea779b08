#!/usr/bin/env python3

from setuptools import setup

# Test discovery is now handled by pytest in tox.ini


config = {
    "name": "rrdcatalog",
    "version": "0.1",
    "author": "Michele Baldessari",
    "author_email": "michele@acksyn.org",
    "url": "http://acksyn.org",
    "license": "GPLv2",
    "python_requires": ">=3.8",
    "py_modules": [
        "graph_errors",
        "graph_ident",
        "str_array",
        "query_params",
        "graph_def",
        "graph_instance",
        "graph_config",
        "graph_list",
        "rrd_files",
        "rrd_grapher",
        "catalog_config",
    ],
    "scripts": ["rrdcatalog"],
    "install_requires": ["python-dateutil", "PyYAML"],
    "extras_require": {"test": ["pytest"]},
    "classifiers": [
        "Development Status :: 3 - Alpha",
        "Topic :: Utilities",
        "Topic :: System :: Monitoring",
        "License :: OSI Approved :: GNU General Public License v2 (GPLv2)",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Programming Language :: Python :: 3.14",
    ],
}

setup(**config)
