#!/usr/bin/python
# -*- coding: UTF-8 -*-
# pylint: disable=C0111

"""Tests for aparte.message and aparte.i18n"""

import unittest

from datetime import datetime, timezone

from aparte.constants import STANZA_CLIENT_QNP, XML_LANG_QNAME
from aparte.i18n import get_best
from aparte.jid import JID
from aparte.message import XmppMessage, LogMessage, CHAT, CHANNEL
from aparte.message import INCOMING, OUTGOING
from aparte.message import message_from_stanza, message_to_stanza
from aparte.message import parse_timestamp
from aparte.stanza import Stanza

ACCOUNT = JID("user@example.com/res")

MESSAGE1 = """
<message xmlns="jabber:client" from='peer@example.com/res'
                to='user@example.com/res' type='chat' id='1' xml:lang='en'>
<subject>Subject</subject>
<body>The body</body>
<body xml:lang='pl'>Treść</body>
<delay xmlns='urn:xmpp:delay' stamp='2021-03-04T05:06:07.123Z'/>
</message>"""

MESSAGE2 = """
<message xmlns="jabber:client" from='room@muc.example.com/nick'
                            to='user@example.com/res' type='groupchat'>
<body>Hi all</body>
</message>"""

MESSAGE3 = """
<message xmlns="jabber:client" from='user@example.com/other'
                        to='peer@example.com' type='chat' id='3'>
<body>Sent from another client</body>
</message>"""

MESSAGE4 = """
<message xmlns="jabber:client" from='peer@example.com/res'
                        to='user@example.com/res' type='headline' id='4'>
<body>News</body>
</message>"""

MESSAGE5 = """
<message xmlns="jabber:client" to='user@example.com/res' type='chat'>
<body>No sender</body>
</message>"""

class TestMessageFromStanza(unittest.TestCase):
    def test_chat(self):
        message = message_from_stanza(ACCOUNT, Stanza.from_string(MESSAGE1))
        self.assertEqual(message.message_id, "1")
        self.assertEqual(message.from_jid, JID("peer@example.com/res"))
        self.assertEqual(message.from_bare, JID("peer@example.com"))
        self.assertEqual(message.to_bare, JID("user@example.com"))
        self.assertEqual(message.message_type, CHAT)
        self.assertEqual(message.direction, INCOMING)
        self.assertEqual(message.history[0].bodies,
                                        {"en": "The body", "pl": "Treść"})
        self.assertEqual(message.get_body(["pl"]), "Treść")
        self.assertEqual(message.get_body(["de", "en"]), "The body")
        self.assertEqual(message.timestamp, datetime(2021, 3, 4, 5, 6, 7,
                                                    tzinfo = timezone.utc))

    def test_channel(self):
        message = message_from_stanza(ACCOUNT, Stanza.from_string(MESSAGE2))
        self.assertEqual(message.message_type, CHANNEL)
        self.assertEqual(message.direction, INCOMING)
        self.assertTrue(message.message_id)
        self.assertEqual(message.get_body(), "Hi all")

    def test_own_message(self):
        message = message_from_stanza(ACCOUNT, Stanza.from_string(MESSAGE3))
        self.assertEqual(message.direction, OUTGOING)

    def test_not_a_chat(self):
        self.assertIsNone(message_from_stanza(ACCOUNT,
                                            Stanza.from_string(MESSAGE4)))
        self.assertIsNone(message_from_stanza(ACCOUNT,
                                            Stanza.from_string(MESSAGE5)))

class TestMessageToStanza(unittest.TestCase):
    def test_chat(self):
        message = XmppMessage("abc", ACCOUNT, "peer@example.com",
                                {"": "Hello", "pl": "Cześć"}, CHAT, OUTGOING)
        stanza = message_to_stanza(message)
        self.assertEqual(stanza.element_name, "message")
        self.assertEqual(stanza.stanza_type, "chat")
        self.assertEqual(stanza.stanza_id, "abc")
        self.assertEqual(stanza.to_jid, JID("peer@example.com"))
        bodies = stanza.get_all_payload_named(STANZA_CLIENT_QNP + "body")
        self.assertEqual([(body.get(XML_LANG_QNAME), body.text)
                                                        for body in bodies],
                                    [(None, "Hello"), ("pl", "Cześć")])

    def test_channel(self):
        message = XmppMessage("abc", ACCOUNT, "room@muc.example.com",
                                            {"": "Hello"}, CHANNEL, OUTGOING)
        self.assertEqual(message_to_stanza(message).stanza_type, "groupchat")

    def test_last_version_sent(self):
        message = XmppMessage("abc", ACCOUNT, "peer@example.com",
                        {"": "Helo"}, CHAT, OUTGOING,
                        datetime(2020, 1, 1, tzinfo = timezone.utc))
        message.add_version("def", {"": "Hello"},
                        datetime(2020, 1, 2, tzinfo = timezone.utc))
        stanza = message_to_stanza(message)
        body = stanza.get_payload(STANZA_CLIENT_QNP + "body")
        self.assertEqual(body.text, "Hello")

class TestMessageVersions(unittest.TestCase):
    def test_versions(self):
        first = datetime(2020, 1, 1, tzinfo = timezone.utc)
        second = datetime(2020, 1, 2, tzinfo = timezone.utc)
        message = XmppMessage("1", "peer@example.com/res", ACCOUNT,
                                            {"": "Helo"}, timestamp = first)
        self.assertFalse(message.has_multiple_versions())
        message.add_version("2", {"": "Hello"}, second)
        self.assertTrue(message.has_multiple_versions())
        self.assertEqual(message.get_body(), "Hello")
        self.assertEqual(message.get_last_version().message_id, "2")
        self.assertEqual(message.timestamp, first)
        self.assertEqual(message.message_id, "1")

    def test_empty_bodies(self):
        message = XmppMessage("1", "peer@example.com/res", ACCOUNT, {})
        self.assertEqual(message.get_body(), "")

    def test_log_message(self):
        message = LogMessage("Notice")
        self.assertEqual(message.get_body(["en"]), "Notice")
        self.assertTrue(message.message_id)
        self.assertNotEqual(message.message_id, LogMessage("x").message_id)
        self.assertIsNotNone(message.timestamp.tzinfo)

class TestTimestamp(unittest.TestCase):
    def test_parse(self):
        self.assertEqual(parse_timestamp("2002-09-10T23:41:07Z"),
                    datetime(2002, 9, 10, 23, 41, 7, tzinfo = timezone.utc))
        self.assertEqual(parse_timestamp("2002-09-10T23:41:07.123+02:00")
                                                    .astimezone(timezone.utc),
                    datetime(2002, 9, 10, 21, 41, 7, tzinfo = timezone.utc))
        with self.assertRaises(ValueError):
            parse_timestamp("yesterday")

class TestGetBest(unittest.TestCase):
    def test_preferred_order(self):
        items = {"de": "Hallo", "en": "Hello", "pl": "Cześć"}
        self.assertEqual(get_best(items, ["pl", "en"]), ("pl", "Cześć"))
        self.assertEqual(get_best(items, ["fr", "en"]), ("en", "Hello"))

    def test_no_language_preferred(self):
        items = [("de", "Hallo"), ("", "Hi"), ("en", "Hello")]
        self.assertEqual(get_best(items, ["fr"]), ("", "Hi"))
        self.assertEqual(get_best(items), ("", "Hi"))

    def test_first_wins(self):
        items = [("de", "Hallo"), ("en", "Hello")]
        self.assertEqual(get_best(items, ["fr"]), ("de", "Hallo"))

    def test_none_language(self):
        self.assertEqual(get_best([(None, "Hi")], ["en"]), ("", "Hi"))

    def test_empty(self):
        self.assertIsNone(get_best({}, ["en"]))

# pylint: disable=W0611
from aparte.test._support import load_tests, setup_logging

def setUpModule():
    setup_logging()

if __name__ == "__main__":
    unittest.main()
