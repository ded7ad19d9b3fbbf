#
# (C) Copyright 2011 Jacek Konieczny <jajcus@jajcus.net>
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License Version
# 2.1 as published by the Free Software Foundation.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this program; if not, write to the Free Software
# Foundation, Inc., 675 Mass Ave, Cambridge, MA 02139, USA.
#

"""The Aparte application context.

`Aparte` joins the event bus, the extension registry, the command router,
the stanza router and the <iq/> correlator together. Everything goes through
events::

    aparte = Aparte(transport)
    aparte.add_mod(MessagesMod())
    aparte.run()

Every event is processed in three stages, by three handler objects
installed at the event bus:

  1. `CoreHandler`: stanza intake. Received stanzas are routed to the mods
     and the raw event stops there.
  2. `ModDispatcher`: every mod gets the event, in registration order,
     under an exclusive borrow.
  3. `CorePostHandler`: default actions (command execution, sending
     messages, <iq/> response correlation, connection bookkeeping).

The transport (network connection management) lives outside of the core.
It is any object with a ``send(account, stanza)`` method and reports back
through `Aparte.connected`, `Aparte.disconnected` and
`Aparte.stanza_received`, which may be called from any thread.
"""

__docformat__ = "restructuredtext en"

import logging

from xml.etree import ElementTree

from .command import Command, CommandRouter, Arg, OptionalArg
from .command import command_def
from .constants import MUC_QNP
from .events import StartEvent, ConnectedEvent, DisconnectedEvent
from .events import StanzaEvent, RawMessageEvent, IqEvent, MessageEvent
from .events import SendMessageEvent, CommandEvent, RawCommandEvent
from .events import CommandErrorEvent, ChatEvent, JoinEvent, JoinedEvent
from .events import WindowEvent, QUIT
from .exceptions import CommandError, CommandParseError, ModInitError
from .exceptions import TransportError, BorrowError
from .iq import IqCorrelator
from .jid import JID
from .mainloop import EventBus, TornadoTaskPool
from .mainloop.interfaces import EventHandler, event_handler
from .message import LogMessage, XmppMessage, CHAT, OUTGOING
from .message import message_to_stanza, now
from .mods.contact import contact_completion
from .mods.conversation import ConversationMod
from .registry import ModRegistry
from .settings import AparteSettings
from .stanza import Stanza, gen_id
from .stanzaprocessor import StanzaRouter
from .version import version

logger = logging.getLogger("aparte.core")

CONSOLE_WINDOW = "console"

class CoreHandler(EventHandler):
    """Core event handlers run before the mods."""
    def __init__(self, aparte):
        self.aparte = aparte

    @event_handler(StanzaEvent)
    def _stanza(self, event):
        self.aparte.router.route(event.account, event.stanza)
        return True

    @event_handler(RawMessageEvent)
    def _raw_message(self, event):
        self.aparte.router.route_message(event.account, event.stanza)
        return True

class ModDispatcher(EventHandler):
    """Passes every event to the mods."""
    def __init__(self, aparte):
        self.aparte = aparte

    @event_handler()
    def _dispatch(self, event):
        mods = self.aparte.mods
        for mod_class in mods:
            try:
                with mods.get_mut(mod_class) as mod:
                    mod.on_event(self.aparte, event)
            except BorrowError:
                raise
            except Exception: # pylint: disable=W0703
                logger.error("{0} failed on {1!r}".format(mod_class.__name__,
                                                    event), exc_info = True)
        return False

class CorePostHandler(EventHandler):
    """Default actions, run after the mods."""
    def __init__(self, aparte):
        self.aparte = aparte

    @event_handler(StartEvent)
    def _start(self, event):
        # pylint: disable-msg=W0613
        self.aparte.log("Welcome to Aparté {0}".format(version))

    def _execute(self, raw_or_command):
        """Run a command, report the errors to the user."""
        aparte = self.aparte
        try:
            aparte.commands.dispatch(aparte, raw_or_command)
        except (CommandParseError, CommandError) as err:
            logger.debug("Command failed: {0}".format(err))
            aparte.log(str(err))
            aparte.schedule(CommandErrorEvent(str(err)))

    @event_handler(CommandEvent)
    def _command(self, event):
        self._execute(event.command)

    @event_handler(RawCommandEvent)
    def _raw_command(self, event):
        try:
            command = Command.parse(event.raw, event.account, event.context)
        except CommandParseError as err:
            self.aparte.log(str(err))
            self.aparte.schedule(CommandErrorEvent(str(err)))
            return
        self._execute(command)

    @event_handler(SendMessageEvent)
    def _send_message(self, event):
        self.aparte.schedule(MessageEvent(event.account, event.message))
        self.aparte.send(event.account, message_to_stanza(event.message))

    @event_handler(ConnectedEvent)
    def _connected(self, event):
        aparte = self.aparte
        aparte.connections[event.account] = now()
        aparte.current_account = event.account
        aparte.send(event.account, Stanza("presence"))
        aparte.log("Connected as {0}".format(event.account))

    @event_handler(DisconnectedEvent)
    def _disconnected(self, event):
        aparte = self.aparte
        aparte.connections.pop(event.account, None)
        if aparte.current_account == event.account:
            if aparte.connections:
                aparte.current_account = next(iter(aparte.connections))
            else:
                aparte.current_account = None
        count = aparte.iq.cancel_account(event.account, event.reason)
        if count:
            logger.debug("{0} pending queries cancelled".format(count))
        aparte.log(str(event))

    @event_handler(IqEvent)
    def _iq(self, event):
        self.aparte.iq.handle_response(event.account, event.stanza)

    @event_handler(JoinEvent)
    def _join(self, event):
        aparte = self.aparte
        channel = event.channel
        if channel.resource is None:
            channel = channel.with_resource(event.account.local
                                                    or event.account.domain)
        presence = Stanza("presence", to_jid = channel)
        presence.add_payload(ElementTree.Element(MUC_QNP + "x"))
        aparte.send(event.account, presence)
        aparte.log("Joined {0}".format(channel.bare()))
        aparte.schedule(JoinedEvent(event.account, channel,
                                                        event.user_request))

class Aparte(object):
    """The application context.

    :Ivariables:
        - `settings`: the settings
        - `transport`: the transport sending the stanzas
        - `mods`: the extension registry
        - `commands`: the command router
        - `bus`: the event bus
        - `router`: the stanza router
        - `iq`: the <iq/> correlator
        - `task_pool`: runner of the asynchronous tasks
        - `connections`: the connected accounts with their connection time
        - `current_account`: the account the user works on
    :Types:
        - `settings`: `AparteSettings`
        - `mods`: `ModRegistry`
        - `commands`: `CommandRouter`
        - `bus`: `EventBus`
        - `router`: `StanzaRouter`
        - `iq`: `IqCorrelator`
        - `task_pool`: `TornadoTaskPool`
        - `connections`: `dict` of `JID` -> `datetime`
        - `current_account`: `JID`
    """
    # pylint: disable-msg=R0902
    def __init__(self, transport = None, settings = None, task_pool = None):
        """Initialize the context.

        :Parameters:
            - `transport`: object with a ``send(account, stanza)`` method
            - `settings`: the settings
            - `task_pool`: the task pool, a `TornadoTaskPool` using the
              "io_loop" setting by default
        """
        if settings is None:
            settings = AparteSettings()
        self.settings = settings
        self.transport = transport
        self.mods = ModRegistry()
        self.commands = CommandRouter()
        self.router = StanzaRouter(self)
        self.iq = IqCorrelator(self.transmit, settings)
        if task_pool is None:
            task_pool = TornadoTaskPool(settings)
        self.task_pool = task_pool
        self.connections = {}
        self.current_account = None
        self._initialized = False
        self.bus = EventBus(settings, [CoreHandler(self), ModDispatcher(self),
                                                    CorePostHandler(self)])
        for command in BUILTIN_COMMANDS:
            self.commands.register(command)

    def add_mod(self, mod):
        """Register a mod and its commands.

        :raise RegistryError: on duplicate mod or command."""
        self.mods.register(mod)
        for parser in mod.get_commands():
            self.commands.register(parser)

    def add_command(self, command):
        """Register a command parser (or a `command_def` decorated
        function)."""
        self.commands.register(command)

    def schedule(self, event):
        """Schedule an event. Safe to be called from any thread."""
        self.bus.schedule(event)

    def log(self, text):
        """Display a notice to the user."""
        logger.info(text)
        self.schedule(MessageEvent(None, LogMessage(text)))

    def transmit(self, account, stanza):
        """Pass a stanza to the transport, in the calling thread.

        :raise TransportError: when there is no transport or it fails."""
        if self.transport is None:
            raise TransportError("No transport")
        logger.debug("Sending on {0}: {1!r}".format(account, stanza))
        self.transport.send(account, stanza)

    def _transmit_task(self, account, stanza):
        try:
            self.transmit(account, stanza)
        except TransportError as err:
            logger.error("Cannot send {0!r}: {1}".format(stanza, err))

    def send(self, account, stanza):
        """Send a stanza.

        The transport is called from the task pool, so a slow connection
        does not block the event processing."""
        self.task_pool.add_callback(self._transmit_task, account, stanza)

    def send_query(self, account, stanza, timeout = None):
        """Send an <iq/> query and wait for the response.

        A coroutine, see `IqCorrelator.send_query`."""
        return self.iq.send_query(account, stanza, timeout)

    def spawn(self, func, *args, **kwargs):
        """Run a coroutine function in the task pool.

        :returntype: `concurrent.futures.Future`"""
        return self.task_pool.spawn(func, *args, **kwargs)

    def init(self):
        """Initialize the mods, in registration order.

        :raise ModInitError: when a mod fails to initialize."""
        if self._initialized:
            return
        for mod_class in self.mods:
            logger.debug("Initializing {0}".format(mod_class.__name__))
            with self.mods.get_mut(mod_class) as mod:
                try:
                    mod.init(self)
                except Exception as err:
                    raise ModInitError("Cannot initialize {0}: {1}".format(
                                        mod_class.__name__, err)) from err
        self._initialized = True

    def run(self):
        """Initialize the mods, start the task pool and process the events
        until `QUIT`."""
        self.init()
        self.task_pool.start()
        try:
            self.schedule(StartEvent())
            self.bus.run_forever()
        finally:
            self.task_pool.stop()

    def quit(self):
        """Make `run` return."""
        self.schedule(QUIT)

    def connected(self, account):
        """Transport callback: `account` session established."""
        self.schedule(ConnectedEvent(JID(account)))

    def disconnected(self, account, reason = None):
        """Transport callback: `account` connection lost."""
        self.schedule(DisconnectedEvent(JID(account), reason))

    def stanza_received(self, account, stanza):
        """Transport callback: stanza received on `account`.

        :Parameters:
            - `account`: the account JID
            - `stanza`: the stanza or its serialized form
        :Types:
            - `stanza`: `Stanza`, `str` or :etree:`ElementTree.Element`
        """
        if isinstance(stanza, str):
            stanza = Stanza.from_string(stanza)
        elif isinstance(stanza, ElementTree.Element):
            stanza = Stanza(stanza)
        self.schedule(StanzaEvent(JID(account), stanza))

def command_completion(aparte, command):
    """Completion provider for the command names."""
    # pylint: disable-msg=W0613
    return aparte.commands.names()

def window_completion(aparte, command):
    """Completion provider for the window names."""
    windows = [CONSOLE_WINDOW]
    guard = aparte.mods.get(ConversationMod)
    if guard is not None:
        with guard as conversations:
            windows += [str(conversation.jid) for conversation
                                in conversations.conversations.values()
                                if command.account is None
                                    or conversation.account == command.account]
    return windows

@command_def("help",
"""/help [command]

    command       Name of command

Description:
    Print help of a given command.

Examples:
    /help win""",
    OptionalArg("cmd", completion = command_completion))
def help_command(aparte, command, cmd):
    # pylint: disable-msg=W0613
    if cmd is None:
        aparte.log("Available commands: {0}".format(
                                        ", ".join(aparte.commands.names())))
        return
    parser = aparte.commands.get(cmd)
    if parser is None:
        raise CommandError("Unknown command {0}".format(cmd))
    aparte.log(parser.get_help())

@command_def("quit",
"""/quit

Description:
    Quit Aparté.

Example:
    /quit""")
def quit_command(aparte, command):
    # pylint: disable-msg=W0613
    aparte.quit()

@command_def("msg",
"""/msg <contact> [<message>]

    contact       Contact to send a message to
    message       Optional message to be sent

Description:
    Open a window for a private discussion with a given contact and
    optionally send a message.

Example:
    /msg contact@server.tld
    /msg contact@server.tld 'Hi there!'""",
    Arg("contact", JID, completion = contact_completion),
    OptionalArg("message"))
def msg_command(aparte, command, contact, message):
    account = command.account or aparte.current_account
    if account is None or account not in aparte.connections:
        raise CommandError("No connection found")
    aparte.schedule(ChatEvent(account, contact.bare()))
    if message:
        xmpp_message = XmppMessage(gen_id(), account, contact,
                                            {"": message}, CHAT, OUTGOING)
        aparte.schedule(SendMessageEvent(account, xmpp_message))

@command_def("join",
"""/join <channel>

    channel       Channel JID to join, with an optional nick as resource

Description:
    Open a window and join a given channel.

Example:
    /join channel@conference.server.tld
    /join channel@conference.server.tld/nick""",
    Arg("channel", JID))
def join_command(aparte, command, channel):
    account = command.account or aparte.current_account
    if account is None or account not in aparte.connections:
        raise CommandError("No connection found")
    aparte.schedule(JoinEvent(account, channel, True))

@command_def("win",
"""/win <window>

    window        Name of the window to switch to

Description:
    Switch to a given window.

Examples:
    /win console
    /win contact@server.tld""",
    Arg("window", completion = window_completion))
def win_command(aparte, command, window):
    # pylint: disable-msg=W0613
    aparte.schedule(WindowEvent(window))

BUILTIN_COMMANDS = [help_command, quit_command, msg_command, join_command,
                                                                win_command]

# vi: sts=4 et sw=4
