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

"""Open conversations: one-to-one chats and channels with their occupants.

Normative reference:
  - `XEP-0045 <http://xmpp.org/extensions/xep-0045.html>`__
"""

__docformat__ = "restructuredtext en"

import logging

from ..constants import MUC_USER_QNP
from ..events import ChatEvent, MessageEvent, JoinedEvent, PresenceEvent
from ..events import OccupantEvent
from ..jid import JID
from ..mainloop.interfaces import event_handler
from ..message import XmppMessage, CHAT, INCOMING
from . import Mod

logger = logging.getLogger("aparte.mods.conversation")

AFFILIATIONS = ("owner", "admin", "member", "outcast", "none")
ROLES = ("moderator", "participant", "visitor", "none")

class Occupant(object):
    """Channel occupant. Occupants compare by their nicks, case
    insensitively.

    :Ivariables:
        - `nick`: the nickname
        - `jid`: the real bare JID, if known
        - `affiliation`: one of `AFFILIATIONS`
        - `role`: one of `ROLES`
    """
    def __init__(self, nick, jid = None, affiliation = "none", role = "none"):
        self.nick = nick
        self.jid = jid
        self.affiliation = affiliation
        self.role = role

    def __eq__(self, other):
        if not isinstance(other, Occupant):
            return NotImplemented
        return self.nick == other.nick

    def __ne__(self, other):
        if not isinstance(other, Occupant):
            return NotImplemented
        return self.nick != other.nick

    def __lt__(self, other):
        return self.nick.lower() < other.nick.lower()

    def __hash__(self):
        return hash(self.nick)

    def __repr__(self):
        return "<Occupant {0} {1}/{2}>".format(self.nick, self.affiliation,
                                                                    self.role)

class Chat(object):
    """One-to-one conversation."""
    def __init__(self, account, contact):
        self.account = account
        self.contact = JID(contact).bare()

    @property
    def jid(self):
        return self.contact

    def get_name(self):
        return str(self.contact)

class Channel(object):
    """Multi-user chat room.

    :Ivariables:
        - `account`: the account
        - `jid`: bare JID of the channel
        - `nick`: our nick
        - `name`: channel name, if known
        - `occupants`: channel occupants by nick
    :Types:
        - `account`: `JID`
        - `jid`: `JID`
        - `nick`: `str`
        - `name`: `str`
        - `occupants`: `dict` of `str` -> `Occupant`
    """
    def __init__(self, account, jid, nick, name = None):
        self.account = account
        self.jid = JID(jid).bare()
        self.nick = nick
        self.name = name
        self.occupants = {}

    def get_name(self):
        if self.name:
            return self.name
        return str(self.jid)

def parse_occupant(nick, element):
    """Make an `Occupant` from a muc#user <x/> element."""
    item = element.find(MUC_USER_QNP + "item")
    if item is None:
        return Occupant(nick)
    real_jid = item.get("jid")
    if real_jid:
        real_jid = JID(real_jid).bare()
    affiliation = item.get("affiliation", "none")
    if affiliation not in AFFILIATIONS:
        affiliation = "none"
    role = item.get("role", "none")
    if role not in ROLES:
        role = "none"
    return Occupant(nick, real_jid or None, affiliation, role)

class ConversationMod(Mod):
    """Collection of the open conversations.

    :Ivariables:
        - `conversations`: `Chat` and `Channel` objects by (account,
          bare JID)
    """
    description = "Conversations management"
    def __init__(self):
        self.conversations = {}

    def get(self, account, jid):
        """Return the conversation with `jid` on `account` or `None`.

        :returntype: `Chat` or `Channel`"""
        try:
            jid = JID(jid).bare()
        except ValueError:
            return None
        return self.conversations.get((account, jid))

    def _open_chat(self, account, contact):
        key = (account, JID(contact).bare())
        if key not in self.conversations:
            logger.debug("New chat with {0}".format(contact))
            self.conversations[key] = Chat(account, contact)

    @event_handler(ChatEvent)
    def _chat(self, aparte, event):
        # pylint: disable-msg=W0613
        self._open_chat(event.account, event.contact)

    @event_handler(MessageEvent)
    def _message(self, aparte, event):
        # pylint: disable-msg=W0613
        message = event.message
        if not isinstance(message, XmppMessage) or event.account is None:
            return
        if message.message_type == CHAT and message.direction == INCOMING:
            self._open_chat(event.account, message.from_jid)

    @event_handler(JoinedEvent)
    def _joined(self, aparte, event):
        # pylint: disable-msg=W0613
        channel = Channel(event.account, event.channel, event.channel.resource)
        logger.debug("Joined {0} as {1}".format(channel.jid, channel.nick))
        self.conversations[(event.account, channel.jid)] = channel

    @event_handler(PresenceEvent)
    def _presence(self, aparte, event):
        from_jid = event.stanza.from_jid
        if from_jid is None or from_jid.resource is None:
            return
        channel = self.conversations.get((event.account, from_jid.bare()))
        if not isinstance(channel, Channel):
            return
        nick = from_jid.resource
        if event.stanza.stanza_type == "unavailable":
            channel.occupants.pop(nick, None)
            return
        for element in event.stanza.get_all_payload_named(MUC_USER_QNP + "x"):
            occupant = parse_occupant(nick, element)
            channel.occupants[nick] = occupant
            aparte.schedule(OccupantEvent(event.account, channel.jid,
                                                                occupant))

# vi: sts=4 et sw=4
