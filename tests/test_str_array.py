"""
Test unit for the string array
"""
import unittest

from graph_errors import BufferOverflowError, InvalidArgumentError
from str_array import FORMAT_BUFFER_SIZE, StrArray


class TestStrArray(unittest.TestCase):
    def test_empty(self):
        arr = StrArray()
        self.assertEqual(arr.count(), 0)
        self.assertEqual(arr.items(), [])
        self.assertEqual(list(arr), [])

    def test_append_keeps_order_and_duplicates(self):
        arr = StrArray()
        for s in ('b', 'a', 'b'):
            arr.append(s)
        self.assertEqual(arr.items(), ['b', 'a', 'b'])
        self.assertEqual(len(arr), 3)

    def test_sort(self):
        arr = StrArray(['b', 'a', 'c'])
        arr.sort()
        self.assertEqual(arr.items(), ['a', 'b', 'c'])

    def test_items_is_a_copy(self):
        arr = StrArray(['a'])
        arr.items().append('b')
        self.assertEqual(arr.count(), 1)

    def test_append_rejects_non_strings(self):
        arr = StrArray()
        self.assertRaises(InvalidArgumentError, arr.append, None)
        self.assertRaises(InvalidArgumentError, arr.append, 42)

    def test_append_format(self):
        arr = StrArray()
        arr.append_format("DEF:def_%04i_avg=%s:%s:AVERAGE", 7, 'x.rrd',
                          'value')
        arr.append_format("100%%")
        self.assertEqual(arr.items(), ['DEF:def_0007_avg=x.rrd:value:AVERAGE',
                                       '100%'])

    def test_append_format_overflow(self):
        arr = StrArray()
        arr.append_format("%s", 'x' * (FORMAT_BUFFER_SIZE - 1))
        self.assertRaises(BufferOverflowError, arr.append_format, "%s",
                          'x' * FORMAT_BUFFER_SIZE)
        # Nothing truncated was added
        self.assertEqual(arr.count(), 1)


if __name__ == '__main__':
    unittest.main()
