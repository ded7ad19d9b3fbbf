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

"""Service discovery (XEP-0030).

Answers disco#info queries with the features the mods registered through
`DiscoMod.add_feature` and discovers the features of the account server
after connection.

Normative reference:
  - `XEP-0030 <http://xmpp.org/extensions/xep-0030.html>`__
"""

__docformat__ = "restructuredtext en"

import logging

from xml.etree import ElementTree

from ..constants import DISCO_INFO_NS, DISCO_INFO_QNP
from ..events import ConnectedEvent, DisconnectedEvent, DiscoEvent
from ..exceptions import IqError
from ..jid import JID
from ..mainloop.interfaces import event_handler
from ..stanza import Stanza
from . import Mod

logger = logging.getLogger("aparte.mods.disco")

CLIENT_IDENTITY = ("client", "console", "Aparte")

def make_info_query(to_jid):
    """Build a disco#info 'get' query to `to_jid`.

    :returntype: `Stanza`"""
    stanza = Stanza("iq", to_jid = to_jid, stanza_type = "get")
    stanza.add_payload(ElementTree.Element(DISCO_INFO_QNP + "query"))
    return stanza

def parse_features(stanza):
    """Extract the feature namespaces from a disco#info result.

    :returntype: `list` of `str`"""
    query = stanza.get_payload(DISCO_INFO_QNP + "query")
    if query is None:
        return []
    return [feature.get("var") for feature in query.findall(
                    DISCO_INFO_QNP + "feature") if feature.get("var")]

class DiscoMod(Mod):
    """Client and server features.

    :Ivariables:
        - `client_features`: features announced to the peers
        - `server_features`: discovered server features by account
    :Types:
        - `client_features`: `list` of `str`
        - `server_features`: `dict` of `JID` -> `list` of `str`
    """
    description = "XEP-0030: Service Discovery"
    def __init__(self):
        self.client_features = [DISCO_INFO_NS]
        self.server_features = {}

    def add_feature(self, feature):
        """Announce a client feature.

        Must be called by the mods from their `Mod.init`."""
        logger.debug("Adding {0!r} feature".format(feature))
        if feature not in self.client_features:
            self.client_features.append(feature)

    def has_feature(self, account, feature):
        """Check if the server of `account` supports `feature`."""
        return feature in self.server_features.get(account, ())

    async def discover(self, aparte, account):
        """Query the account server for its features and schedule
        a `DiscoEvent` with the result.

        Runs in the task pool."""
        query = make_info_query(JID(account.domain))
        try:
            response = await aparte.send_query(account, query)
        except IqError as err:
            logger.warning("Service discovery on {0} failed: {1}"
                                                    .format(account, err))
            return
        aparte.schedule(DiscoEvent(account, parse_features(response)))

    @event_handler(ConnectedEvent)
    def _connected(self, aparte, event):
        self.server_features[event.account] = []
        aparte.spawn(self.discover, aparte, event.account)

    @event_handler(DisconnectedEvent)
    def _disconnected(self, aparte, event):
        # pylint: disable-msg=W0613
        self.server_features.pop(event.account, None)

    @event_handler(DiscoEvent)
    def _discovered(self, aparte, event):
        # pylint: disable-msg=W0613
        logger.debug("{0} server features: {1!r}".format(event.account,
                                                            event.features))
        self.server_features[event.account] = list(event.features)

    def score_stanza(self, aparte, account, stanza):
        if stanza.element_name != "iq" or stanza.stanza_type != "get":
            return 0.0
        if stanza.get_payload(DISCO_INFO_QNP + "query") is None:
            return 0.0
        return 1.0

    def decode_stanza(self, aparte, account, stanza):
        query = stanza.get_payload(DISCO_INFO_QNP + "query")
        if query.get("node"):
            return stanza.make_error_response("item-not-found")
        response = stanza.make_result_response()
        payload = ElementTree.Element(DISCO_INFO_QNP + "query")
        category, typ, name = CLIENT_IDENTITY
        ElementTree.SubElement(payload, DISCO_INFO_QNP + "identity",
                        {"category": category, "type": typ, "name": name})
        for feature in self.client_features:
            ElementTree.SubElement(payload, DISCO_INFO_QNP + "feature",
                                                        {"var": feature})
        response.add_payload(payload)
        return response

# vi: sts=4 et sw=4
