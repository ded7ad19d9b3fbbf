#!/usr/bin/python
# -*- coding: UTF-8 -*-
# pylint: disable=C0111

"""Tests for aparte.core"""

import unittest

from aparte.constants import MUC_QNP, STANZA_CLIENT_QNP
from aparte.core import Aparte
from aparte.events import StartEvent, StanzaEvent, MessageEvent, ChatEvent
from aparte.events import RawCommandEvent, CommandErrorEvent, IqEvent
from aparte.events import JoinedEvent, WindowEvent, KeyEvent
from aparte.events import ConnectedEvent
from aparte.exceptions import ModInitError, RegistryError
from aparte.jid import JID
from aparte.message import LogMessage, XmppMessage, OUTGOING
from aparte.mods import Mod
from aparte.mods.messages import MessagesMod
from aparte.stanza import Stanza
from aparte.test._support import ImmediateTaskPool, RecordingTransport
from aparte.test._support import RecorderMod

ACCOUNT = JID("user@example.com/res")

MESSAGE1 = """<message xmlns="jabber:client" from="peer@example.com/x"
                        to="user@example.com/res" type="chat" id="m1">
<body>Hello</body>
</message>"""

class OtherRecorderMod(RecorderMod):
    pass

class FailingMod(Mod):
    def init(self, aparte):
        raise RuntimeError("broken configuration")

class BorrowingMod(Mod):
    """Borrows itself and another mod on key events."""
    def __init__(self):
        self.seen = None

    def on_event(self, aparte, event):
        if not isinstance(event, KeyEvent):
            return
        if event.key == "self":
            with aparte.mods.get_mut(BorrowingMod):
                pass
        else:
            with aparte.mods.get(RecorderMod) as recorder:
                self.seen = len(recorder.events)

class RaisingMod(Mod):
    """Fails on every command line."""
    def on_event(self, aparte, event):
        if isinstance(event, RawCommandEvent):
            raise RuntimeError("mod bug")

class _CoreTestCase(unittest.TestCase):
    def setUp(self):
        self.transport = RecordingTransport()
        self.aparte = Aparte(self.transport, task_pool = ImmediateTaskPool())
        self.recorder = RecorderMod()
        self.aparte.add_mod(self.recorder)

    def connect(self):
        self.aparte.connected(str(ACCOUNT))
        self.aparte.bus.flush()
        del self.transport.sent[:]

    def command(self, raw, account = ACCOUNT, context = None):
        self.aparte.schedule(RawCommandEvent(account, context, raw))
        self.aparte.bus.flush()

    def logs(self):
        return [event.message.body for event
                                    in self.recorder.of_type(MessageEvent)
                                    if isinstance(event.message, LogMessage)]

    def errors(self):
        return [event.error for event
                                in self.recorder.of_type(CommandErrorEvent)]

class TestInit(unittest.TestCase):
    def test_order(self):
        log = []
        aparte = Aparte(task_pool = ImmediateTaskPool())
        aparte.add_mod(RecorderMod(log))
        aparte.add_mod(OtherRecorderMod(log))
        aparte.init()
        aparte.init()
        self.assertEqual(log, ["RecorderMod", "OtherRecorderMod"])

    def test_failure(self):
        log = []
        aparte = Aparte(task_pool = ImmediateTaskPool())
        aparte.add_mod(FailingMod())
        aparte.add_mod(RecorderMod(log))
        with self.assertRaises(ModInitError) as ctx:
            aparte.init()
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)
        self.assertIn("FailingMod", str(ctx.exception))
        self.assertEqual(log, [])

    def test_duplicate_mod(self):
        aparte = Aparte(task_pool = ImmediateTaskPool())
        aparte.add_mod(RecorderMod())
        with self.assertRaises(RegistryError):
            aparte.add_mod(RecorderMod())

class TestDispatch(_CoreTestCase):
    def test_mods_in_order(self):
        log = []
        aparte = Aparte(task_pool = ImmediateTaskPool())
        aparte.add_mod(RecorderMod(log))
        aparte.add_mod(OtherRecorderMod(log))
        aparte.schedule(WindowEvent("console"))
        aparte.schedule(KeyEvent("a"))
        aparte.bus.flush()
        self.assertEqual(log, [("RecorderMod", "WindowEvent"),
                                ("OtherRecorderMod", "WindowEvent"),
                                ("RecorderMod", "KeyEvent"),
                                ("OtherRecorderMod", "KeyEvent")])

    def test_raw_stanza_hidden(self):
        self.aparte.add_mod(MessagesMod())
        self.aparte.stanza_received(ACCOUNT, MESSAGE1)
        self.aparte.bus.flush()
        self.assertEqual(self.recorder.of_type(StanzaEvent), [])
        messages = self.recorder.of_type(MessageEvent)
        self.assertEqual(len(messages), 1)
        self.assertEqual(messages[0].message.get_body(), "Hello")

    def test_cross_mod_borrow(self):
        borrowing = BorrowingMod()
        self.aparte.add_mod(borrowing)
        self.aparte.schedule(KeyEvent("other"))
        self.aparte.bus.flush()
        self.assertEqual(borrowing.seen, 1)

    def test_borrow_conflict(self):
        other = OtherRecorderMod()
        self.aparte.add_mod(BorrowingMod())
        self.aparte.add_mod(other)
        self.aparte.schedule(KeyEvent("self"))
        self.aparte.schedule(WindowEvent("console"))
        self.aparte.bus.flush()
        self.assertEqual([type(event) for event in other.events],
                                                                [WindowEvent])
        self.assertEqual(len(self.recorder.events), 2)
        self.assertFalse(self.aparte.mods.is_borrowed(BorrowingMod))

    def test_mod_failure(self):
        other = OtherRecorderMod()
        self.aparte.add_mod(RaisingMod())
        self.aparte.add_mod(other)
        self.command("/help")
        self.assertIsInstance(other.events[0], RawCommandEvent)
        self.assertTrue(self.logs())
        self.aparte.schedule(WindowEvent("console"))
        self.aparte.bus.flush()
        self.assertIsInstance(other.events[-1], WindowEvent)

class TestConnection(_CoreTestCase):
    def test_connected(self):
        self.aparte.connected("user@example.com/res")
        self.aparte.bus.flush()
        self.assertIn(ACCOUNT, self.aparte.connections)
        self.assertEqual(self.aparte.current_account, ACCOUNT)
        self.assertEqual(len(self.transport.sent), 1)
        account, presence = self.transport.sent[0]
        self.assertEqual(account, ACCOUNT)
        self.assertEqual(presence.element_name, "presence")
        self.assertEqual(len(self.recorder.of_type(ConnectedEvent)), 1)
        self.assertIn("Connected as user@example.com/res", self.logs())

    def test_disconnected(self):
        cancelled = []
        def cancel_account(account, reason = None):
            cancelled.append((account, reason))
            return 0
        self.aparte.iq.cancel_account = cancel_account
        self.connect()
        self.aparte.disconnected(ACCOUNT, "connection reset")
        self.aparte.bus.flush()
        self.assertEqual(self.aparte.connections, {})
        self.assertIsNone(self.aparte.current_account)
        self.assertEqual(cancelled, [(ACCOUNT, "connection reset")])

    def test_iq_response(self):
        responses = []
        def handle_response(account, stanza):
            responses.append((account, stanza.stanza_id))
            return True
        self.aparte.iq.handle_response = handle_response
        self.aparte.stanza_received(ACCOUNT, Stanza("iq",
                        stanza_type = "result", stanza_id = "abc"))
        self.aparte.bus.flush()
        self.assertEqual(responses, [(ACCOUNT, "abc")])
        self.assertEqual(len(self.recorder.of_type(IqEvent)), 1)

    def test_no_transport(self):
        aparte = Aparte(task_pool = ImmediateTaskPool())
        aparte.send(ACCOUNT, Stanza("presence"))

class TestCommands(_CoreTestCase):
    def test_help(self):
        self.command("/help")
        self.assertEqual(self.logs(),
                        ["Available commands: help, quit, msg, join, win"])

    def test_help_command(self):
        self.command("/help win")
        self.assertTrue(self.logs()[0].startswith("/win <window>"))

    def test_help_unknown(self):
        self.command("/help nope")
        self.assertEqual(self.errors(), ["Unknown command nope"])

    def test_unknown_command(self):
        self.command("/nope")
        self.assertEqual(self.errors(), ["Unknown command nope"])
        self.assertEqual(self.logs(), ["Unknown command nope"])

    def test_parse_error(self):
        self.command("/msg 'peer")
        self.assertEqual(self.errors(), ["Missing closing quote"])

    def test_msg_not_connected(self):
        self.command("/msg peer@example.com hello")
        self.assertEqual(self.errors(), ["No connection found"])
        self.assertEqual(self.transport.sent, [])

    def test_msg_invalid_jid(self):
        self.connect()
        self.command("/msg @")
        self.assertEqual(len(self.errors()), 1)
        self.assertTrue(self.errors()[0].startswith(
                                    "Invalid format for contact argument"))

    def test_msg(self):
        self.connect()
        self.command("/msg peer@example.com/x 'hello there'")
        chats = self.recorder.of_type(ChatEvent)
        self.assertEqual(len(chats), 1)
        self.assertEqual(chats[0].contact, JID("peer@example.com"))
        messages = [event.message for event
                                in self.recorder.of_type(MessageEvent)
                                if isinstance(event.message, XmppMessage)]
        self.assertEqual(len(messages), 1)
        self.assertEqual(messages[0].direction, OUTGOING)
        self.assertEqual(messages[0].get_body(), "hello there")
        self.assertEqual(len(self.transport.sent), 1)
        account, stanza = self.transport.sent[0]
        self.assertEqual(account, ACCOUNT)
        self.assertEqual(stanza.element_name, "message")
        self.assertEqual(stanza.stanza_type, "chat")
        self.assertEqual(stanza.to_jid, JID("peer@example.com/x"))
        self.assertEqual(stanza.stanza_id, messages[0].message_id)
        body = stanza.get_payload(STANZA_CLIENT_QNP + "body")
        self.assertEqual(body.text, "hello there")

    def test_msg_without_message(self):
        self.connect()
        self.command("/msg peer@example.com")
        self.assertEqual(len(self.recorder.of_type(ChatEvent)), 1)
        self.assertEqual(self.transport.sent, [])

    def test_join(self):
        self.connect()
        self.command("/join room@muc.example.com/nick")
        self.assertEqual(len(self.transport.sent), 1)
        dummy, presence = self.transport.sent[0]
        self.assertEqual(presence.to_jid, JID("room@muc.example.com/nick"))
        self.assertIsNotNone(presence.get_payload(MUC_QNP + "x"))
        joined = self.recorder.of_type(JoinedEvent)
        self.assertEqual(len(joined), 1)
        self.assertEqual(joined[0].channel, JID("room@muc.example.com/nick"))

    def test_join_default_nick(self):
        self.connect()
        self.command("/join room@muc.example.com")
        dummy, presence = self.transport.sent[0]
        self.assertEqual(presence.to_jid, JID("room@muc.example.com/user"))

    def test_win(self):
        self.command("/win console")
        windows = self.recorder.of_type(WindowEvent)
        self.assertEqual([event.window for event in windows], ["console"])

    def test_complete_win(self):
        self.assertEqual(self.aparte.commands.complete(self.aparte,
                                                    "/win ", 5), ["console"])

    def test_quit(self):
        self.aparte.schedule(RawCommandEvent(None, None, "/quit"))
        self.aparte.run()
        self.assertEqual(len(self.recorder.of_type(StartEvent)), 1)

    def test_start(self):
        self.aparte.schedule(StartEvent())
        self.aparte.bus.flush()
        self.assertEqual(self.logs(), ["Welcome to Aparté 0.4.0"])

# pylint: disable=W0611
from aparte.test._support import load_tests, setup_logging

def setUpModule():
    setup_logging()

if __name__ == "__main__":
    unittest.main()
