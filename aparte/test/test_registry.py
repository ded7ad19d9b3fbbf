#!/usr/bin/python
# -*- coding: UTF-8 -*-
# pylint: disable=C0111

"""Tests for aparte.registry"""

import unittest

from aparte.registry import ModRegistry
from aparte.exceptions import BorrowError, RegistryError

class FirstMod(object):
    def __init__(self):
        self.value = 0

class SecondMod(object):
    pass

class UnknownMod(object):
    pass

class TestRegistry(unittest.TestCase):
    def setUp(self):
        self.registry = ModRegistry()
        self.first = FirstMod()
        self.second = SecondMod()
        self.registry.register(self.first)
        self.registry.register(self.second)

    def test_order(self):
        self.assertEqual(list(self.registry), [FirstMod, SecondMod])
        self.assertEqual(len(self.registry), 2)
        self.assertIn(FirstMod, self.registry)
        self.assertNotIn(UnknownMod, self.registry)

    def test_duplicate(self):
        with self.assertRaises(RegistryError):
            self.registry.register(FirstMod())
        with self.registry.get(FirstMod) as mod:
            self.assertIs(mod, self.first)

    def test_unknown(self):
        self.assertIsNone(self.registry.get(UnknownMod))
        self.assertIsNone(self.registry.get_mut(UnknownMod))

    def test_shared_borrows(self):
        with self.registry.get(FirstMod) as mod1:
            with self.registry.get(FirstMod) as mod2:
                self.assertIs(mod1, mod2)
                self.assertTrue(self.registry.is_borrowed(FirstMod))
        self.assertFalse(self.registry.is_borrowed(FirstMod))

    def test_exclusive_borrow(self):
        with self.registry.get_mut(FirstMod) as mod:
            mod.value = 1
            with self.assertRaises(BorrowError) as ctx:
                with self.registry.get_mut(FirstMod):
                    pass
            self.assertIs(ctx.exception.mod_class, FirstMod)
            self.assertTrue(ctx.exception.mutable)
            with self.assertRaises(BorrowError) as ctx:
                with self.registry.get(FirstMod):
                    pass
            self.assertFalse(ctx.exception.mutable)
            with self.registry.get_mut(SecondMod) as other:
                self.assertIs(other, self.second)
        with self.registry.get_mut(FirstMod) as mod:
            self.assertEqual(mod.value, 1)

    def test_mutable_while_shared(self):
        with self.registry.get(FirstMod):
            with self.assertRaises(BorrowError):
                with self.registry.get_mut(FirstMod):
                    pass
        with self.registry.get_mut(FirstMod):
            pass

    def test_released_on_exception(self):
        with self.assertRaises(KeyError):
            with self.registry.get_mut(FirstMod):
                raise KeyError("x")
        self.assertFalse(self.registry.is_borrowed(FirstMod))

# pylint: disable=W0611
from aparte.test._support import load_tests, setup_logging

def setUpModule():
    setup_logging()

if __name__ == "__main__":
    unittest.main()
