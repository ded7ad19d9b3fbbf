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

"""Contacts: the roster and the contacts presence.

Normative reference:
  - `RFC 6121 <http://xmpp.org/rfcs/rfc6121.html>`__
"""

__docformat__ = "restructuredtext en"

import logging

from xml.etree import ElementTree

from ..constants import ROSTER_QNP, STANZA_CLIENT_QNP
from ..events import ConnectedEvent, ContactEvent, PresenceEvent
from ..exceptions import IqError, JIDError
from ..jid import JID
from ..mainloop.interfaces import event_handler
from ..stanza import Stanza
from . import Mod

logger = logging.getLogger("aparte.mods.contact")

UNAVAILABLE = "unavailable"
AVAILABLE = "available"
SHOW_VALUES = ("away", "chat", "dnd", "xa")

class Contact(object):
    """Roster item.

    :Ivariables:
        - `jid`: bare JID of the contact
        - `name`: display name
        - `subscription`: subscription state
        - `groups`: roster groups
        - `presence`: one of `UNAVAILABLE`, `AVAILABLE` or a `SHOW_VALUES`
          item
    """
    def __init__(self, jid, name = None, subscription = "none",
                                    groups = None, presence = UNAVAILABLE):
        self.jid = JID(jid).bare()
        self.name = name
        self.subscription = subscription
        self.groups = list(groups or [])
        self.presence = presence

    @classmethod
    def from_roster_item(cls, element):
        """Build a contact from a roster <item/> element.

        :raise JIDError: on invalid item JID.
        :returntype: `Contact`"""
        groups = [group.text for group in element.findall(
                                        ROSTER_QNP + "group") if group.text]
        return cls(element.get("jid"), element.get("name"),
                                element.get("subscription", "none"), groups)

    def __str__(self):
        if self.name:
            return "{0} <{1}>".format(self.name, self.jid)
        return str(self.jid)

    def __repr__(self):
        return "<Contact {0} {1}>".format(self.jid, self.presence)

def presence_value(stanza):
    """Return the contact presence value announced by a <presence/>
    stanza."""
    if stanza.stanza_type == "unavailable":
        return UNAVAILABLE
    show = stanza.get_payload(STANZA_CLIENT_QNP + "show")
    if show is not None and show.text in SHOW_VALUES:
        return show.text
    return AVAILABLE

def contact_completion(aparte, command):
    """Completion provider for contact JIDs."""
    guard = aparte.mods.get(ContactMod)
    if guard is None:
        return []
    with guard as contacts:
        return [str(contact.jid) for contact
                                    in contacts.get_contacts(command.account)]

class ContactMod(Mod):
    """Contact list.

    :Ivariables:
        - `contacts`: the contacts by (account, bare JID)
    :Types:
        - `contacts`: `dict`
    """
    description = "Contact management"
    def __init__(self):
        self.contacts = {}

    def get_contacts(self, account = None):
        """Return contacts of `account` (or of all accounts), sorted by
        JID."""
        contacts = [contact for (contact_account, dummy), contact
                        in self.contacts.items()
                        if account is None or contact_account == account]
        contacts.sort(key = lambda contact: str(contact.jid))
        return contacts

    def get_contact(self, account, jid):
        """Return the contact `jid` of `account` or `None`."""
        return self.contacts.get((account, JID(jid).bare()))

    async def fetch_roster(self, aparte, account):
        """Request the roster and schedule a `ContactEvent` for every item.

        Runs in the task pool."""
        logger.debug("Requesting roster for {0}".format(account))
        query = Stanza("iq", stanza_type = "get")
        query.add_payload(ElementTree.Element(ROSTER_QNP + "query"))
        try:
            response = await aparte.send_query(account, query)
        except IqError as err:
            logger.warning("Roster request on {0} failed: {1}"
                                                    .format(account, err))
            return
        payload = response.get_payload(ROSTER_QNP + "query")
        if payload is None:
            return
        for element in payload.findall(ROSTER_QNP + "item"):
            try:
                contact = Contact.from_roster_item(element)
            except JIDError:
                logger.warning("Invalid roster item: {0!r}".format(
                                                element.get("jid")))
                continue
            aparte.schedule(ContactEvent(account, contact))

    @event_handler(ConnectedEvent)
    def _connected(self, aparte, event):
        aparte.spawn(self.fetch_roster, aparte, event.account)

    @event_handler(ContactEvent)
    def _contact(self, aparte, event):
        # pylint: disable-msg=W0613
        contact = event.contact
        key = (event.account, contact.jid)
        known = self.contacts.get(key)
        if known is not None and known is not contact:
            contact.presence = known.presence
        self.contacts[key] = contact

    @event_handler(PresenceEvent)
    def _presence(self, aparte, event):
        from_jid = event.stanza.from_jid
        if from_jid is None:
            return
        contact = self.contacts.get((event.account, from_jid.bare()))
        if contact is None:
            return
        contact.presence = presence_value(event.stanza)
        aparte.schedule(ContactEvent(event.account, contact))

# vi: sts=4 et sw=4
