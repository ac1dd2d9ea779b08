"""
Test unit for graph identifiers
"""
import os
import unittest

from graph_errors import InvalidArgumentError
from graph_ident import (ALL, ANY, IDENT_FLAG_REPLACE_ALL,
                         IDENT_FLAG_REPLACE_ANY, GraphIdent, ident_clone,
                         ident_compare, ident_copy_with_selector,
                         ident_create, ident_from_file, ident_matches,
                         ident_to_file, is_wildcard)


class TestIdentCreate(unittest.TestCase):
    def test_empty_becomes_any(self):
        ident = ident_create('web1', 'load', '', 'load', '')
        self.assertIs(ident.plugin_instance, ANY)
        self.assertIs(ident.type_instance, ANY)
        self.assertEqual(ident.host, 'web1')

    def test_none_is_rejected(self):
        self.assertRaises(InvalidArgumentError, ident_create,
                          None, 'cpu', '0', 'cpu', 'idle')

    def test_textual_wildcards(self):
        ident = ident_create('/any/', 'cpu', '0', 'cpu', '/all/')
        self.assertIs(ident.host, ANY)
        self.assertIs(ident.type_instance, ALL)

    def test_accessors_never_return_none(self):
        ident = ident_create(ANY, 'cpu', '0', 'cpu', ALL)
        self.assertEqual(ident.get_host(), '/any/')
        self.assertEqual(ident.get_plugin(), 'cpu')
        self.assertEqual(ident.get_plugin_instance(), '0')
        self.assertEqual(ident.get_type(), 'cpu')
        self.assertEqual(ident.get_type_instance(), '/all/')
        self.assertEqual(ident.get_field('type_instance'), '/all/')

    def test_immutable(self):
        ident = ident_create('web1', 'cpu', '0', 'cpu', 'idle')
        with self.assertRaises(AttributeError):
            ident.host = 'web2'

    def test_clone(self):
        ident = ident_create('web1', 'cpu', '0', 'cpu', 'idle', mtime=42)
        copy = ident_clone(ident)
        self.assertIsNot(copy, ident)
        self.assertEqual(ident_compare(copy, ident), 0)
        self.assertEqual(copy.get_mtime(), 42)


class TestIdentCompare(unittest.TestCase):
    def test_equal(self):
        a = ident_create('web1', 'cpu', '0', 'cpu', 'idle')
        b = ident_create('web1', 'cpu', '0', 'cpu', 'idle')
        self.assertEqual(ident_compare(a, b), 0)
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))

    def test_field_order(self):
        a = ident_create('a', 'z', 'z', 'z', 'z')
        b = ident_create('b', 'a', 'a', 'a', 'a')
        self.assertEqual(ident_compare(a, b), -1)
        self.assertEqual(ident_compare(b, a), 1)
        c = ident_create('a', 'z', 'z', 'z', 'y')
        self.assertEqual(ident_compare(c, a), -1)

    def test_wildcards_are_plain_values(self):
        a = ident_create('web1', 'cpu', '0', 'cpu', ANY)
        b = ident_create('web1', 'cpu', '0', 'cpu', 'idle')
        c = ident_create('web1', 'cpu', '0', 'cpu', ALL)
        self.assertNotEqual(ident_compare(a, b), 0)
        self.assertNotEqual(ident_compare(a, c), 0)
        self.assertEqual(ident_compare(a, ident_clone(a)), 0)

    def test_sorting(self):
        idents = [ident_create('web2', 'cpu', '0', 'cpu', 'idle'),
                  ident_create('web1', 'memory', '', 'memory', 'used'),
                  ident_create('web1', 'cpu', '1', 'cpu', 'idle')]
        hosts = [(i.host, i.plugin) for i in sorted(idents)]
        self.assertEqual(hosts, [('web1', 'cpu'), ('web1', 'memory'),
                                 ('web2', 'cpu')])


class TestIdentMatches(unittest.TestCase):
    def setUp(self):
        self.concrete = ident_create('web1', 'cpu', '0', 'cpu', 'idle')

    def test_reflexive(self):
        self.assertTrue(ident_matches(self.concrete, self.concrete))

    def test_all_wildcards(self):
        for marker in (ANY, ALL):
            pattern = GraphIdent(marker, marker, marker, marker, marker)
            self.assertTrue(ident_matches(pattern, self.concrete))

    def test_mixed(self):
        pattern = ident_create(ANY, 'cpu', ANY, 'cpu', ALL)
        self.assertTrue(ident_matches(pattern, self.concrete))
        other = ident_create('web1', 'memory', '', 'memory', 'used')
        self.assertFalse(ident_matches(pattern, other))

    def test_concrete_mismatch(self):
        pattern = ident_create('web1', 'cpu', '0', 'cpu', 'user')
        self.assertFalse(ident_matches(pattern, self.concrete))


class TestCopyWithSelector(unittest.TestCase):
    def setUp(self):
        self.selector = ident_create(ANY, 'cpu', ANY, 'cpu', ALL)
        self.concrete = ident_create('web1', 'cpu', '0', 'cpu', 'idle',
                                     mtime=5)

    def test_replace_any(self):
        ret = ident_copy_with_selector(self.selector, self.concrete,
                                       IDENT_FLAG_REPLACE_ANY)
        self.assertEqual(ret, ident_create('web1', 'cpu', '0', 'cpu', ALL))
        self.assertEqual(ret.get_mtime(), 5)

    def test_replace_all(self):
        ret = ident_copy_with_selector(self.selector, self.concrete,
                                       IDENT_FLAG_REPLACE_ALL)
        self.assertEqual(ret, ident_create(ANY, 'cpu', ANY, 'cpu', 'idle'))

    def test_replace_both(self):
        ret = ident_copy_with_selector(
            self.selector, self.concrete,
            IDENT_FLAG_REPLACE_ANY | IDENT_FLAG_REPLACE_ALL)
        self.assertEqual(ret, self.concrete)

    def test_no_flags_keeps_selector(self):
        ret = ident_copy_with_selector(self.selector, self.concrete)
        self.assertEqual(ret, self.selector)

    def test_missing_argument(self):
        self.assertRaises(InvalidArgumentError, ident_copy_with_selector,
                          None, self.concrete, IDENT_FLAG_REPLACE_ANY)
        self.assertRaises(InvalidArgumentError, ident_copy_with_selector,
                          self.selector, None, IDENT_FLAG_REPLACE_ANY)


class TestIdentFiles(unittest.TestCase):
    def test_to_file(self):
        ident = ident_create('web1', 'cpu', '0', 'cpu', 'idle')
        self.assertEqual(ident_to_file(ident, '/data'),
                         os.path.join('/data', 'web1', 'cpu-0',
                                      'cpu-idle.rrd'))

    def test_without_instances(self):
        ident = ident_create('web1', 'load', '', 'load', '')
        fname = ident_to_file(ident)
        self.assertEqual(fname, os.path.join('web1', 'load', 'load.rrd'))
        self.assertEqual(ident_from_file(fname), ident)

    def test_round_trip_escaping(self):
        ident = ident_create('web/1', 'my-plugin', 'a-b', 'if_octets',
                             '50%')
        fname = ident_to_file(ident, '/data')
        self.assertEqual(fname, os.path.join(
            '/data', 'web%2F1', 'my%2Dplugin-a-b', 'if_octets-50%.rrd'))
        self.assertEqual(ident_from_file(fname, '/data'), ident)

    def test_percent_before_escape_sequence(self):
        for text in ('%2F', '%252D', 'a%2500', '%/', '100%-'):
            ident = ident_create('web1', 'df', '', 'df', text)
            fname = ident_to_file(ident)
            self.assertEqual(ident_from_file(fname).type_instance, text)

    def test_unknown_sequences_are_literal(self):
        for name in ('df-a%41.rrd', 'df-%2f.rrd', 'df-50%25off.rrd'):
            fname = os.path.join('web1', 'df', name)
            ident = ident_from_file(fname)
            self.assertEqual(ident.type_instance, name[3:-4])
            self.assertEqual(ident_to_file(ident), fname)

    def test_file_names_never_yield_wildcards(self):
        fname = os.path.join('web1', 'df', 'df-%2Fany%2F.rrd')
        ident = ident_from_file(fname)
        self.assertEqual(ident.type_instance, '/any/')
        self.assertFalse(is_wildcard(ident.type_instance))
        self.assertNotEqual(ident, ident_create('web1', 'df', '', 'df', ANY))
        self.assertEqual(ident_to_file(ident), fname)
        self.assertEqual(ident_to_file(ident.clone()), fname)

    def test_wildcards_have_no_file(self):
        ident = ident_create(ANY, 'cpu', '0', 'cpu', 'idle')
        self.assertRaises(InvalidArgumentError, ident_to_file, ident)
        ident = ident_create('web1', 'cpu', '0', 'cpu', ALL)
        self.assertRaises(InvalidArgumentError, ident_to_file, ident)

    def test_bad_layout(self):
        self.assertRaises(InvalidArgumentError, ident_from_file,
                          'web1/cpu-idle.rrd')
        self.assertRaises(InvalidArgumentError, ident_from_file,
                          'web1/cpu-0/cpu-idle.txt')


if __name__ == '__main__':
    unittest.main()
