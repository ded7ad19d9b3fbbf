#!/usr/bin/python
# -*- coding: UTF-8 -*-
# pylint: disable=C0111

"""Tests for aparte.jid"""

import unittest

import logging

from aparte.jid import JID
from aparte.exceptions import JIDError

logger = logging.getLogger("aparte.test.jid")

LONG_DOMAIN = ("x" * 60 + ".") * 16 + "x" * 47
VALID_JIDS = [
    ("a@b/c",
        ("a", "b", "c")),
    ("example.com",
        (None, "example.com", None)),
    ("example.com/Test",
        (None, "example.com", "Test")),
    ("jajcus@jajcus.net",
        ("jajcus", "jajcus.net", None)),
    ("jajcus@192.168.1.1",
        ("jajcus", "192.168.1.1", None)),
    ("jajcus@jajcus.net/Test",
        ("jajcus", "jajcus.net", "Test")),
    ("Jajcus@jaJCus.net/Test",
        ("jajcus", "jajcus.net", "Test")),
    ("jajcus@jajcus.net/a b/c",
        ("jajcus", "jajcus.net", "a b/c")),
    ("jajcuś@dżabber.example.com/Test",
        ("jajcuś", "dżabber.example.com", "Test")),
    ("JAJCUŚ@DŻABBER.EXAMPLE.COM/TEST",
        ("jajcuś", "dżabber.example.com", "TEST")),
    ("room@muc.example.com/Nick With Spaces",
        ("room", "muc.example.com", "Nick With Spaces")),
    ("{0}@{1}/{2}".format("x" * 1023, LONG_DOMAIN, "x" * 1023),
        ("x" * 1023, LONG_DOMAIN, "x" * 1023)),
]

VALID_TUPLES = [
    (("a", "b", "c"), "a@b/c"),
    ((None, "example.com", None), "example.com"),
    (("", "example.com", ""), "example.com"),
    ((None, "example.com", "Test"), "example.com/Test"),
    (("jajcus", "jajcus.net", None), "jajcus@jajcus.net"),
    (("jajcus", "jajcus.net", "Test"), "jajcus@jajcus.net/Test"),
    (("Jajcus", "jaJCus.net", "Test"), "jajcus@jajcus.net/Test"),
    (("JAJCUŚ", "DŻABBER.EXAMPLE.COM", "TEST"),
                                        "jajcuś@dżabber.example.com/TEST"),
]

INVALID_JIDS = [
    "",
    "@",
    "/Test",
    "#@$%#^$%#^&^$",
    "<>@example.com",
    "a b@example.com",
    "\x01\x02\x05@example.com",
    "test@\x01\x02\x05",
    "test@[::1",
    "{0}@{1}/{2}".format("x" * 1024, "x" * 1023, "x" * 1023),
    "{0}@{1}/{2}".format("x" * 1023, "x" * 1024, "x" * 1023),
    "{0}@{1}/{2}".format("x" * 1023, "x" * 1023, "x" * 1024),
    "{0}ó@{1}/{2}".format("x" * 1022, LONG_DOMAIN, "x" * 1023),
    "{0}@{1}/{2}ó".format("x" * 1023, LONG_DOMAIN, "x" * 1022),
]

COMPARISIONS_TRUE = [
    (lambda: JID("a@b.c") == JID("a@b.c")),
    (lambda: JID("a@b.c") == JID("A@b.c")),
    (lambda: JID("a@b.c") == "a@b.c"),
    (lambda: JID("a@b.c") != JID("b@b.c")),
    (lambda: JID("a@b.c") != JID("a@b.c/d")),
    (lambda: JID("a@b.c") < JID("b@b.c")),
    (lambda: JID("b@b.c") > JID("a@b.c")),
    (lambda: JID("a@b.c") != None),
    (lambda: JID("a@b.c") != "<invalid>"),
]

COMPARISIONS_FALSE = [
    (lambda: JID("a@b.c") != JID("a@b.c")),
    (lambda: JID("a@b.c") != JID("A@b.c")),
    (lambda: JID("a@b.c") == JID("b@b.c")),
    (lambda: JID("a@b.c") > JID("b@b.c")),
    (lambda: JID("b@b.c") < JID("a@b.c")),
    (lambda: JID("a@b.c") == None),
    (lambda: JID("a@b.c") == 1),
]

class TestJID(unittest.TestCase):
    def test_jid_from_string(self):
        for jid, expected_tuple in VALID_JIDS:
            logger.debug(" checking {0!r}...".format(jid))
            jid = JID(jid)
            jtuple = (jid.local, jid.domain, jid.resource)
            self.assertEqual(jtuple, expected_tuple)

    def test_jid_from_tuple(self):
        for (local, domain, resource), jid in VALID_TUPLES:
            logger.debug(" checking {0!r}...".format(jid))
            j = JID(local, domain, resource)
            self.assertEqual(str(j), jid)

    def test_invalid_jids(self):
        for jid in INVALID_JIDS:
            logger.debug(" checking {0!r}...".format(jid))
            with self.assertRaises(JIDError):
                jid = JID(jid)
                logger.debug("   got: {0!r}".format(jid))

    def test_jid_error_is_value_error(self):
        with self.assertRaises(ValueError):
            JID("<>@example.com")

    def test_comparision(self):
        # pylint: disable=C0121
        for i, expr in enumerate(COMPARISIONS_TRUE):
            self.assertTrue(expr(), "Expression #{0} failed".format(i))
        for i, expr in enumerate(COMPARISIONS_FALSE):
            self.assertFalse(expr(), "Expression #{0} failed".format(i))

    def test_bare(self):
        jid = JID("a@b.c/d")
        self.assertEqual(jid.bare(), JID("a@b.c"))
        self.assertIsNone(jid.bare().resource)
        bare = JID("a@b.c")
        self.assertIs(bare.bare(), bare)
        self.assertEqual(bare.with_resource("e"), JID("a@b.c/e"))

    def test_hash(self):
        accounts = {JID("a@b.c/d"): 1}
        self.assertEqual(accounts[JID("A@B.c/d")], 1)
        self.assertNotIn(JID("a@b.c"), accounts)

    def test_copy(self):
        jid = JID("a@b.c/d")
        self.assertIs(JID(jid), jid)

    def test_immutable(self):
        jid = JID("a@b.c/d")
        with self.assertRaises(RuntimeError):
            jid.local = "x"

    def test_repr(self):
        self.assertEqual(repr(JID("a@b.c/d")), "JID('a@b.c/d')")

class TestUncachedJID(TestJID):
    def setUp(self):
        # pylint: disable=W0404,W0212
        import weakref
        self.saved_cache = JID.cache
        JID.cache = weakref.WeakValueDictionary()

    def tearDown(self):
        JID.cache = self.saved_cache

# pylint: disable=W0611
from aparte.test._support import load_tests, setup_logging

def setUpModule():
    setup_logging()

if __name__ == "__main__":
    unittest.main()
