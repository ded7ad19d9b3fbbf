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

"""Aparte application events.

Everything happening in the application is an event scheduled on the event
bus: connection state changes, stanzas received, messages, user input.
Events are immutable.
"""

# pylint: disable-msg=R0903

__docformat__ = "restructuredtext en"

from .mainloop.interfaces import Event, QUIT

class AccountEvent(Event):
    """Base class for events related to a single account.

    :Ivariables:
        - `account`: the account JID
    :Types:
        - `account`: `JID`
    """
    __slots__ = ("account",)

class StartEvent(Event):
    """Emitted once, before any other event, when the application starts.

    Default action: welcome message.
    """
    __slots__ = ()
    def __str__(self):
        return "Start"

class ConnectedEvent(AccountEvent):
    """Emitted when an account session is established.

    Default action: initial presence is sent.
    """
    __slots__ = ()
    def __init__(self, account):
        Event.__init__(self, account = account)
    def __str__(self):
        return "Connected: {0}".format(self.account)

class DisconnectedEvent(AccountEvent):
    """Emitted when the account connection is lost.

    Default action: pending <iq/> queries of the account fail.

    :Ivariables:
        - `reason`: human-readable reason
    """
    __slots__ = ("reason",)
    def __init__(self, account, reason = None):
        Event.__init__(self, account = account, reason = reason)
    def __str__(self):
        if self.reason:
            return "Disconnected: {0}: {1}".format(self.account, self.reason)
        return "Disconnected: {0}".format(self.account)

class StanzaEvent(AccountEvent):
    """Raw stanza received by the transport. Handled by the core only, mods
    get decoded events instead.

    :Ivariables:
        - `stanza`: the stanza
    :Types:
        - `stanza`: `Stanza`
    """
    __slots__ = ("stanza",)
    def __init__(self, account, stanza):
        Event.__init__(self, account = account, stanza = stanza)
    def __str__(self):
        return "Stanza received on {0}: {1!r}".format(self.account,
                                                                self.stanza)

class RawMessageEvent(AccountEvent):
    """A <message/> stanza to be decoded by the mods, e.g. a message
    extracted from a carbon copy or an archive.

    :Ivariables:
        - `delay`: the original delivery time, if known
    """
    __slots__ = ("stanza", "delay")
    def __init__(self, account, stanza, delay = None):
        Event.__init__(self, account = account, stanza = stanza,
                                                                delay = delay)
    def __str__(self):
        return "Raw message on {0}: {1!r}".format(self.account, self.stanza)

class IqEvent(AccountEvent):
    """<iq/> response received.

    Default action: the waiting query is resolved.
    """
    __slots__ = ("stanza",)
    def __init__(self, account, stanza):
        Event.__init__(self, account = account, stanza = stanza)
    def __str__(self):
        return "Iq on {0}: {1!r}".format(self.account, self.stanza)

class PresenceEvent(AccountEvent):
    """<presence/> received."""
    __slots__ = ("stanza",)
    def __init__(self, account, stanza):
        Event.__init__(self, account = account, stanza = stanza)
    def __str__(self):
        return "Presence on {0}: {1!r}".format(self.account, self.stanza)

class MessageEvent(Event):
    """Message to be displayed.

    :Ivariables:
        - `account`: the account, `None` for log messages
        - `message`: the message
    :Types:
        - `account`: `JID`
        - `message`: `XmppMessage` or `LogMessage`
    """
    __slots__ = ("account", "message")
    def __init__(self, account, message):
        Event.__init__(self, account = account, message = message)
    def __str__(self):
        return "Message: {0!r}".format(self.message)

class SendMessageEvent(AccountEvent):
    """Message to be sent.

    Default action: the message is sent and displayed.
    """
    __slots__ = ("message",)
    def __init__(self, account, message):
        Event.__init__(self, account = account, message = message)
    def __str__(self):
        return "Send message: {0!r}".format(self.message)

class CommandEvent(Event):
    """Parsed command to execute.

    :Ivariables:
        - `command`: the command
    :Types:
        - `command`: `Command`
    """
    __slots__ = ("command",)
    def __init__(self, command):
        Event.__init__(self, command = command)
    def __str__(self):
        return "Command: {0!r}".format(self.command)

class RawCommandEvent(Event):
    """Command line entered by the user.

    :Ivariables:
        - `account`: the current account
        - `context`: the current conversation
        - `raw`: the command line
    """
    __slots__ = ("account", "context", "raw")
    def __init__(self, account, context, raw):
        Event.__init__(self, account = account, context = context, raw = raw)
    def __str__(self):
        return "Command line: {0!r}".format(self.raw)

class CommandErrorEvent(Event):
    """Parse or execution error of a user command.

    :Ivariables:
        - `error`: the error message
    """
    __slots__ = ("error",)
    def __init__(self, error):
        Event.__init__(self, error = error)
    def __str__(self):
        return "Command error: {0}".format(self.error)

class ChatEvent(AccountEvent):
    """Chat with a contact requested.

    :Ivariables:
        - `contact`: bare JID of the contact
    """
    __slots__ = ("contact",)
    def __init__(self, account, contact):
        Event.__init__(self, account = account, contact = contact)
    def __str__(self):
        return "Chat with {0}".format(self.contact)

class JoinEvent(AccountEvent):
    """Channel join requested.

    :Ivariables:
        - `channel`: the channel JID, with the nick as resource if given
        - `user_request`: `True` if the user asked for it
    """
    __slots__ = ("channel", "user_request")
    def __init__(self, account, channel, user_request = True):
        Event.__init__(self, account = account, channel = channel,
                                                user_request = user_request)
    def __str__(self):
        return "Join {0}".format(self.channel)

class JoinedEvent(AccountEvent):
    """Channel joined.

    :Ivariables:
        - `channel`: the channel JID with our nick as the resource
        - `user_request`: `True` if the user asked for it
    """
    __slots__ = ("channel", "user_request")
    def __init__(self, account, channel, user_request = True):
        Event.__init__(self, account = account, channel = channel,
                                                user_request = user_request)
    def __str__(self):
        return "Joined {0}".format(self.channel)

class OccupantEvent(AccountEvent):
    """Channel occupant appeared or changed.

    :Ivariables:
        - `channel`: bare JID of the channel
        - `occupant`: the occupant
    """
    __slots__ = ("channel", "occupant")
    def __init__(self, account, channel, occupant):
        Event.__init__(self, account = account, channel = channel,
                                                        occupant = occupant)
    def __str__(self):
        return "Occupant of {0}: {1}".format(self.channel, self.occupant.nick)

class ContactEvent(AccountEvent):
    """Contact appeared or changed.

    :Ivariables:
        - `contact`: the contact
    """
    __slots__ = ("contact",)
    def __init__(self, account, contact):
        Event.__init__(self, account = account, contact = contact)
    def __str__(self):
        return "Contact: {0}".format(self.contact.jid)

class WindowEvent(Event):
    """Switch to a window requested.

    :Ivariables:
        - `window`: window name
    """
    __slots__ = ("window",)
    def __init__(self, window):
        Event.__init__(self, window = window)
    def __str__(self):
        return "Window: {0}".format(self.window)

class KeyEvent(Event):
    """Key pressed.

    :Ivariables:
        - `key`: key name or character
    """
    __slots__ = ("key",)
    def __init__(self, key):
        Event.__init__(self, key = key)
    def __str__(self):
        return "Key: {0!r}".format(self.key)

class AutoCompleteEvent(Event):
    """Completion of the input buffer requested.

    :Ivariables:
        - `account`: the current account
        - `context`: the current conversation
        - `raw_buf`: the input buffer
        - `cursor`: caret position in the buffer
    :Types:
        - `account`: `JID`
        - `context`: `str`
        - `raw_buf`: `str`
        - `cursor`: `Cursor`
    """
    __slots__ = ("account", "context", "raw_buf", "cursor")
    def __init__(self, account, context, raw_buf, cursor):
        Event.__init__(self, account = account, context = context,
                                            raw_buf = raw_buf, cursor = cursor)
    def __str__(self):
        return "Autocomplete {0!r} at {1!r}".format(self.raw_buf, self.cursor)

class ResetCompletionEvent(Event):
    """The input buffer changed, any completion state must be dropped."""
    __slots__ = ()
    def __str__(self):
        return "Reset completion"

class CompletedEvent(Event):
    """Result of a completion.

    :Ivariables:
        - `raw_buf`: the new input buffer
        - `cursor`: the new caret position
    """
    __slots__ = ("raw_buf", "cursor")
    def __init__(self, raw_buf, cursor):
        Event.__init__(self, raw_buf = raw_buf, cursor = cursor)
    def __str__(self):
        return "Completed {0!r} at {1!r}".format(self.raw_buf, self.cursor)

class DiscoEvent(AccountEvent):
    """Server features discovered.

    :Ivariables:
        - `features`: the feature namespaces
    :Types:
        - `features`: `list` of `str`
    """
    __slots__ = ("features",)
    def __init__(self, account, features):
        Event.__init__(self, account = account, features = tuple(features))
    def __str__(self):
        return "Disco on {0}: {1} features".format(self.account,
                                                        len(self.features))

__all__ = [name for name in dir() if name.endswith("Event")
                                                and not name.startswith("_")]
__all__ += ["QUIT"]

# vi: sts=4 et sw=4
