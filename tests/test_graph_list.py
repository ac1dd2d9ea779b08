"""
Test unit for the graph list
"""
import unittest

from graph_config import GraphConfig
from graph_errors import InvalidArgumentError
from graph_ident import ALL, ANY, ident_create
from graph_instance import inst_describe
from graph_list import GraphList, dynamic_selector
from query_params import parse_query

FILES = [ident_create('web1', 'cpu', '0', 'cpu', 'idle', mtime=100),
         ident_create('web1', 'cpu', '0', 'cpu', 'user', mtime=110),
         ident_create('web1', 'cpu', '1', 'cpu', 'idle', mtime=120),
         ident_create('web2', 'cpu', '0', 'cpu', 'idle', mtime=130),
         ident_create('web1', 'memory', '', 'memory', 'used', mtime=140),
         ident_create('web1', 'memory', '', 'memory', 'free', mtime=150),
         ident_create('db1', 'load', '', 'load', '', mtime=160)]


def fixed_scanner(data_dir):
    return list(FILES)


def cpu_graph(**kwargs):
    return GraphConfig(ident_create(ANY, 'cpu', ANY, 'cpu', ALL),
                       title='CPU {host}', **kwargs)


class Collector(object):
    def __init__(self):
        self.found = []

    def __call__(self, cfg, inst, user_data):
        self.found.append((cfg, inst))
        return 0

    def describe(self):
        return [inst_describe(cfg, inst) for cfg, inst in self.found]


class TestRefresh(unittest.TestCase):
    def setUp(self):
        self.gl = GraphList('/data', scanner=fixed_scanner)

    def test_dynamic_graphs_only(self):
        self.gl.refresh(now=1000)
        graphs = self.gl.graphs()
        self.assertEqual([cfg.select for cfg in graphs],
                         [dynamic_selector(FILES[0]),
                          dynamic_selector(FILES[4]),
                          dynamic_selector(FILES[6])])
        self.assertTrue(all(cfg.dynamic for cfg in graphs))
        cpu = graphs[0]
        self.assertEqual([inst_describe(cpu, i) for i in cpu.get_instances()],
                         ['web1/0', 'web1/1', 'web2/0'])
        self.assertEqual(len(cpu.get_instances()[0].files), 2)

    def test_configured_graph_comes_first(self):
        self.assertTrue(self.gl.add_graph(cpu_graph()))
        self.gl.refresh(now=1000)
        graphs = self.gl.graphs()
        self.assertEqual(len(graphs), 3)
        self.assertFalse(graphs[0].dynamic)
        self.assertEqual(graphs[0].title, 'CPU {host}')
        self.assertEqual(len(graphs[0].get_instances()), 3)
        # Claimed by the configured graph, no dynamic cpu graph
        self.assertNotIn('cpu', [cfg.select.plugin for cfg in graphs[1:]])

    def test_file_in_several_graphs(self):
        self.gl.add_graph(cpu_graph())
        self.gl.add_graph(GraphConfig(
            ident_create('web1', ANY, ANY, ANY, ANY)))
        self.gl.refresh(now=1000)
        graphs = self.gl.graphs()
        # web1 graph swallows memory files, db1 load stays dynamic
        self.assertEqual(len(graphs), 3)
        web1 = graphs[1]
        self.assertEqual(sum(len(i.files) for i in web1.get_instances()), 5)
        self.assertEqual(graphs[2].select.plugin, 'load')

    def test_duplicate_graph_is_ignored(self):
        first = cpu_graph()
        self.assertTrue(self.gl.add_graph(first))
        self.assertFalse(self.gl.add_graph(cpu_graph(vertical_label='%')))
        self.gl.refresh(now=1000)
        self.assertIsNone(self.gl.graphs()[0].vertical_label)

    def test_add_graph_rejects_none(self):
        self.assertRaises(InvalidArgumentError, self.gl.add_graph, None)

    def test_snapshot_isolation(self):
        old = self.gl.refresh(now=1000)
        old_cpu = old.graphs[0]
        count = len(old_cpu.get_instances())
        self.gl.add_graph(cpu_graph())
        new = self.gl.refresh(now=2000)
        self.assertIsNot(old, new)
        self.assertEqual(old.timestamp, 1000)
        self.assertEqual(new.timestamp, 2000)
        self.assertEqual(len(old_cpu.get_instances()), count)
        self.assertIs(self.gl.snapshot(), new)

    def test_configured_graph_is_not_filled(self):
        cfg = cpu_graph()
        self.gl.add_graph(cfg)
        self.gl.refresh(now=1000)
        self.gl.refresh(now=2000)
        self.assertEqual(cfg.get_instances(), [])
        self.assertEqual(len(self.gl.graphs()[0].get_instances()), 3)


class TestUpdate(unittest.TestCase):
    def setUp(self):
        self.scans = 0
        self.gl = GraphList('/data', update_interval=300,
                            scanner=self.scanner)

    def scanner(self, data_dir):
        self.scans += 1
        return list(FILES)

    def test_interval(self):
        self.assertTrue(self.gl.update(now=1000))
        self.assertFalse(self.gl.update(now=1100))
        self.assertTrue(self.gl.update(now=1400))
        self.assertEqual(self.scans, 2)

    def test_new_graph_forces_update(self):
        self.gl.update(now=1000)
        self.gl.add_graph(cpu_graph())
        self.assertTrue(self.gl.update(now=1001))
        self.assertFalse(self.gl.graphs()[0].dynamic)


class TestLookup(unittest.TestCase):
    def setUp(self):
        self.gl = GraphList('/data', scanner=fixed_scanner)
        self.gl.add_graph(cpu_graph())
        self.gl.refresh(now=1000)

    def test_graph_get_selected(self):
        cfg = self.gl.graphs()[0]
        self.assertIs(self.gl.graph_get_selected(parse_query(
            cfg.get_params())), cfg)

    def test_graph_get_selected_from_instance_params(self):
        from graph_instance import inst_get_params, inst_get_selected
        for cfg in self.gl.graphs():
            for inst in cfg.get_instances():
                params = parse_query(inst_get_params(cfg, inst))
                self.assertIs(self.gl.graph_get_selected(params), cfg)
                self.assertIs(inst_get_selected(cfg, params), inst)

    def test_graph_get_selected_missing(self):
        self.assertIsNone(self.gl.graph_get_selected(parse_query(
            'host=web1;plugin=cpu')))
        self.assertIsNone(self.gl.graph_get_selected(parse_query(
            'host=web9;plugin=cpu;plugin_instance=0;type=cpu;'
            'type_instance=idle')))

    def test_graph_get_all(self):
        seen = []
        self.assertEqual(self.gl.graph_get_all(
            lambda cfg, data: data.append(cfg) or 0, seen), 0)
        self.assertEqual(len(seen), 3)

    def test_graph_get_all_aborts(self):
        self.assertEqual(self.gl.graph_get_all(lambda cfg, data: 3), 3)

    def test_instance_get_all(self):
        collect = Collector()
        self.assertEqual(self.gl.instance_get_all(collect), 0)
        # cpu: 3, memory: 1, load: 1
        self.assertEqual(len(collect.found), 5)

    def test_instance_get_all_aborts(self):
        calls = []

        def cb(cfg, inst, data):
            calls.append(inst)
            return 1
        self.assertEqual(self.gl.instance_get_all(cb), 1)
        self.assertEqual(len(calls), 1)


class TestSearch(unittest.TestCase):
    def setUp(self):
        self.gl = GraphList('/data', scanner=fixed_scanner)
        self.gl.add_graph(cpu_graph())
        self.gl.refresh(now=1000)
        self.collect = Collector()

    def test_describe_substring(self):
        self.gl.search('web2', self.collect)
        self.assertEqual(self.collect.describe(), ['web2/0'])

    def test_title_substring(self):
        self.gl.search('CPU', self.collect)
        self.assertEqual(len(self.collect.found), 3)

    def test_field_search(self):
        self.gl.search('host:web1', self.collect)
        plugins = [cfg.select.plugin for cfg, inst in self.collect.found]
        self.assertEqual(plugins, ['cpu', 'cpu', 'memory'])

    def test_field_search_in_files(self):
        self.gl.search_field('type_instance', 'user', self.collect)
        self.assertEqual(self.collect.describe(), ['web1/0'])

    def test_unknown_field(self):
        self.assertRaises(InvalidArgumentError, self.gl.search_field,
                          'color', 'red', self.collect)

    def test_no_match(self):
        self.assertEqual(self.gl.search('nothing', self.collect), 0)
        self.assertEqual(self.collect.found, [])


if __name__ == '__main__':
    unittest.main()
