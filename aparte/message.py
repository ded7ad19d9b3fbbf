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

"""Messages as displayed to the user.

Two kinds of messages exist: `LogMessage` (a local notice, like a command
error) and `XmppMessage` (a chat or channel message). An `XmppMessage` keeps
every version of its content, so corrections do not lose the history.
"""

__docformat__ = "restructuredtext en"

import re
import uuid
import logging

from datetime import datetime, timezone

from xml.etree import ElementTree

from .constants import STANZA_CLIENT_QNP, DELAY_QNP, XML_LANG_QNAME
from .i18n import get_best
from .jid import JID
from .stanza import Stanza

logger = logging.getLogger("aparte.message")

CHAT = "chat"
CHANNEL = "channel"

INCOMING = "incoming"
OUTGOING = "outgoing"

FRACTION_RE = re.compile(r"\.\d+")

def parse_timestamp(stamp):
    """Parse XEP-0082 date-time.

    :returntype: `datetime`"""
    stamp = FRACTION_RE.sub("", stamp.strip())
    if stamp.endswith("Z"):
        stamp = stamp[:-1] + "+00:00"
    return datetime.strptime(stamp, "%Y-%m-%dT%H:%M:%S%z")

def now():
    """Current time, timezone aware."""
    return datetime.now(timezone.utc)

def get_bodies(stanza):
    """Extract the <body/> elements of a message stanza.

    :return: body texts by language
    :returntype: `dict`"""
    default_lang = stanza.language or ""
    bodies = {}
    for body in stanza.get_all_payload_named(STANZA_CLIENT_QNP + "body"):
        lang = body.get(XML_LANG_QNAME, default_lang)
        bodies[lang] = body.text or ""
    return bodies

def get_timestamp(stanza):
    """Return the delayed delivery time of the message or the current time.
    """
    delay = stanza.get_payload(DELAY_QNP + "delay")
    if delay is not None and delay.get("stamp"):
        try:
            return parse_timestamp(delay.get("stamp"))
        except ValueError:
            logger.warning("Invalid delay stamp: {0!r}".format(
                                                        delay.get("stamp")))
    return now()

class MessageVersion(object):
    """Single version of a message content.

    :Ivariables:
        - `message_id`: id of the stanza carrying this version
        - `timestamp`: time of the version
        - `bodies`: body texts by language
    """
    def __init__(self, message_id, timestamp, bodies):
        self.message_id = message_id
        self.timestamp = timestamp
        self.bodies = dict(bodies)

    def get_best_body(self, preferred_languages = None):
        """Return the body in the best matching language."""
        best = get_best(self.bodies, preferred_languages)
        if best is None:
            return ""
        return best[1]

class LogMessage(object):
    """Local notice for the user."""
    def __init__(self, body, timestamp = None, message_id = None):
        self.message_id = message_id or str(uuid.uuid4())
        self.timestamp = timestamp or now()
        self.body = body

    def get_body(self, preferred_languages = None):
        # pylint: disable=W0613
        return self.body

    def __repr__(self):
        return "<LogMessage {0!r}>".format(self.body)

class XmppMessage(object):
    """Chat or channel message with its versions history.

    :Ivariables:
        - `message_id`: id of the original stanza
        - `from_jid`: full sender address
        - `to_jid`: full recipient address
        - `message_type`: `CHAT` or `CHANNEL`
        - `direction`: `INCOMING` or `OUTGOING`
        - `history`: list of versions, the original first
    :Types:
        - `message_id`: `str`
        - `from_jid`: `JID`
        - `to_jid`: `JID`
        - `message_type`: `str`
        - `direction`: `str`
        - `history`: `list` of `MessageVersion`
    """
    def __init__(self, message_id, from_jid, to_jid, bodies,
                    message_type = CHAT, direction = INCOMING,
                    timestamp = None):
        self.message_id = message_id
        self.from_jid = JID(from_jid)
        self.to_jid = JID(to_jid)
        self.message_type = message_type
        self.direction = direction
        self.history = [MessageVersion(message_id, timestamp or now(),
                                                                    bodies)]

    @property
    def from_bare(self):
        return self.from_jid.bare()

    @property
    def to_bare(self):
        return self.to_jid.bare()

    @property
    def timestamp(self):
        """Time of the original version."""
        return min(version.timestamp for version in self.history)

    def get_last_version(self):
        """Return the most recent version.

        :returntype: `MessageVersion`"""
        return max(self.history, key = lambda version: version.timestamp)

    def get_body(self, preferred_languages = None):
        """Return the most recent body in the best matching language."""
        return self.get_last_version().get_best_body(preferred_languages)

    def add_version(self, message_id, bodies, timestamp = None):
        """Record a new version (a correction) of the message."""
        self.history.append(MessageVersion(message_id, timestamp or now(),
                                                                    bodies))

    def has_multiple_versions(self):
        return len(self.history) > 1

    def __repr__(self):
        return "<XmppMessage {0} {1} {2} from {3} to {4}>".format(
                        self.message_id, self.message_type, self.direction,
                        self.from_jid, self.to_jid)

def message_from_stanza(account, stanza):
    """Build an `XmppMessage` from a <message/> stanza received on
    `account`.

    Messages sent by another client of the same account (e.g. carbons) are
    outgoing.

    :Parameters:
        - `account`: the account JID
        - `stanza`: the message stanza
    :Types:
        - `account`: `JID`
        - `stanza`: `Stanza`

    :return: the message or `None` if the stanza is not a chat or channel
        message.
    :returntype: `XmppMessage`"""
    from_jid = stanza.from_jid
    if from_jid is None:
        return None
    to_jid = stanza.to_jid or account
    message_id = stanza.stanza_id or str(uuid.uuid4())
    bodies = get_bodies(stanza)
    timestamp = get_timestamp(stanza)
    if stanza.stanza_type == "chat":
        if from_jid.bare() == account.bare():
            direction = OUTGOING
        else:
            direction = INCOMING
        return XmppMessage(message_id, from_jid, to_jid, bodies, CHAT,
                                                        direction, timestamp)
    elif stanza.stanza_type == "groupchat":
        return XmppMessage(message_id, from_jid, to_jid, bodies, CHANNEL,
                                                        INCOMING, timestamp)
    return None

def message_to_stanza(message):
    """Build a <message/> stanza sending the last version of `message`.

    :returntype: `Stanza`"""
    if message.message_type == CHANNEL:
        stanza_type = "groupchat"
    else:
        stanza_type = "chat"
    stanza = Stanza("message", to_jid = message.to_jid,
                        stanza_type = stanza_type,
                        stanza_id = message.message_id)
    for lang, text in sorted(message.get_last_version().bodies.items()):
        body = ElementTree.Element(STANZA_CLIENT_QNP + "body")
        if lang:
            body.set(XML_LANG_QNAME, lang)
        body.text = text
        stanza.add_payload(body)
    return stanza

# vi: sts=4 et sw=4
