#!/usr/bin/python
# -*- coding: UTF-8 -*-
# pylint: disable=C0111

"""Tests for aparte.cursor and aparte.word"""

import unittest

from aparte.cursor import Cursor, grapheme_count
from aparte.word import split_words

TEXTS = [
    "",
    "hello",
    "żółw",
    "e\u0302tre",
    "a\U0001F1EB\U0001F1F7b",
    "日本語",
]

class TestCursor(unittest.TestCase):
    def test_ascii(self):
        self.assertEqual(Cursor.from_index("hello", 3), Cursor(3))
        self.assertEqual(Cursor(3).index("hello"), 3)
        self.assertEqual(Cursor(3).byte_index("hello"), 3)

    def test_combining(self):
        text = "e\u0302tre"
        self.assertEqual(grapheme_count(text), 4)
        self.assertEqual(Cursor.from_index(text, 2), Cursor(1))
        self.assertEqual(Cursor.from_index(text, 1), Cursor(0))
        self.assertEqual(Cursor(1).index(text), 2)
        self.assertEqual(Cursor(1).byte_index(text), 3)
        self.assertEqual(Cursor(4).index(text), len(text))

    def test_regional_indicators(self):
        text = "a\U0001F1EB\U0001F1F7b"
        self.assertEqual(grapheme_count(text), 3)
        self.assertEqual(Cursor(2).index(text), 3)
        self.assertEqual(Cursor.from_index(text, 3), Cursor(2))

    def test_round_trip(self):
        for text in TEXTS:
            boundaries = [Cursor(i).index(text)
                                    for i in range(grapheme_count(text) + 1)]
            self.assertEqual(boundaries[-1], len(text))
            for value, index in enumerate(boundaries):
                cursor = Cursor.from_index(text, index)
                self.assertEqual(cursor, Cursor(value), repr(text))
                self.assertEqual(cursor.index(text), index, repr(text))
                self.assertEqual(cursor.try_index(text), index, repr(text))
                byte_index = cursor.byte_index(text)
                self.assertEqual(Cursor.from_byte_index(text, byte_index),
                                                                    cursor)

    def test_out_of_range(self):
        with self.assertRaises(ValueError):
            Cursor.from_index("abc", 4)
        with self.assertRaises(ValueError):
            Cursor(4).try_index("abc")
        with self.assertRaises(ValueError):
            Cursor.from_byte_index("abc", 5)
        with self.assertRaises(ValueError):
            Cursor(-1)
        self.assertEqual(Cursor(10).index("abc"), 3)

    def test_byte_index_inside_character(self):
        with self.assertRaises(ValueError):
            Cursor.from_byte_index("żółw", 1)

    def test_arithmetic(self):
        cursor = Cursor(2)
        self.assertEqual(cursor + 1, Cursor(3))
        self.assertEqual(cursor - 2, Cursor(0))
        self.assertTrue(cursor < 3)
        self.assertTrue(cursor >= Cursor(2))
        self.assertEqual(int(cursor), 2)
        self.assertEqual(cursor, 2)
        self.assertNotEqual(cursor, Cursor(1))
        with self.assertRaises(ValueError):
            cursor - 3

class TestWords(unittest.TestCase):
    def test_split(self):
        self.assertEqual(list(split_words("a && b")), ["a ", "&& ", "b"])
        self.assertEqual(list(split_words("hello world")),
                                                    ["hello ", "world"])
        self.assertEqual(list(split_words("ali")), ["ali"])
        self.assertEqual(list(split_words("")), [])
        self.assertEqual(list(split_words("  x")), ["  ", "x"])

    def test_join(self):
        for text in ("a && b", "alice: hello, bob  ", "x@y/z", "  "):
            self.assertEqual("".join(split_words(text)), text)

# pylint: disable=W0611
from aparte.test._support import load_tests, setup_logging

def setUpModule():
    setup_logging()

if __name__ == "__main__":
    unittest.main()
