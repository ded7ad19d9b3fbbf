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

"""Message store.

Decodes plain chat and channel messages and keeps every XMPP message
displayed, so other mods (like the message correction) can find them by id.
"""

__docformat__ = "restructuredtext en"

import logging

from ..constants import STANZA_CLIENT_QNP
from ..events import MessageEvent
from ..mainloop.interfaces import event_handler
from ..message import LogMessage, message_from_stanza
from . import Mod

logger = logging.getLogger("aparte.mods.messages")

# any other mod knowing the message better wins
MESSAGE_SCORE = 0.01

class MessagesMod(Mod):
    """Message store.

    :Ivariables:
        - `messages`: the messages by (account, message id)
    :Types:
        - `messages`: `dict`
    """
    description = "Messages"
    def __init__(self):
        self.messages = {}

    def get_message(self, account, message_id):
        """Return the message `message_id` received or sent on `account`,
        or `None` if it is unknown."""
        return self.messages.get((account, message_id))

    @event_handler(MessageEvent)
    def _store(self, aparte, event):
        # pylint: disable-msg=W0613
        if isinstance(event.message, LogMessage):
            return
        key = (event.account, event.message.message_id)
        self.messages[key] = event.message

    def score_stanza(self, aparte, account, stanza):
        if stanza.element_name != "message":
            return 0.0
        if stanza.stanza_type not in ("chat", "groupchat"):
            return 0.0
        if stanza.get_payload(STANZA_CLIENT_QNP + "body") is None:
            return 0.0
        return MESSAGE_SCORE

    def decode_stanza(self, aparte, account, stanza):
        message = message_from_stanza(account, stanza)
        if message is None:
            logger.debug("Not a chat message: {0!r}".format(stanza))
            return None
        return MessageEvent(account, message)

# vi: sts=4 et sw=4
