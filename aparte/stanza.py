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

"""General XMPP Stanza handling.

The client core does not (de)serialize the XML stream; transports hand
complete stanza elements to the core and receive `Stanza` objects to send.

Normative reference:
  - `RFC 6120 <http://xmpp.org/rfcs/rfc6120.html>`__
"""

__docformat__ = "restructuredtext en"

import uuid
from copy import deepcopy

from xml.etree import ElementTree

from .constants import STANZA_CLIENT_NS, XML_LANG_QNAME
from .error import StanzaErrorElement
from .jid import JID

def gen_id():
    """Generate a stanza id unique across sessions.

    :return: the new id."""
    return str(uuid.uuid4())

class Stanza(object):
    """Base class for all XMPP stanzas.

    :Properties:
        - `from_jid`: source JID of the stanza
        - `to_jid`: destination JID of the stanza
        - `stanza_type`: stanza type
        - `stanza_id`: stanza id
        - `error`: error element of an 'error' stanza
    :Ivariables:
        - `element_name`: "iq", "message" or "presence"
        - `language`: default language of the stanza content (xml:lang)
        - `_payload`: the stanza payload elements
        - `_namespace`: namespace of this stanza element
    :Types:
        - `from_jid`: `JID`
        - `to_jid`: `JID`
        - `stanza_type`: `str`
        - `stanza_id`: `str`
        - `error`: `StanzaErrorElement`
        - `element_name`: `str`
        - `_payload`: `list` of :etree:`ElementTree.Element`
        - `_namespace`: `str`"""
    element_name = "Unknown"
    def __init__(self, element, from_jid = None, to_jid = None,
                            stanza_type = None, stanza_id = None,
                            error = None, error_cond = None):
        """Initialize a Stanza object.

        :Parameters:
            - `element`: XML element of this stanza, or element name for a new
              stanza.
            - `from_jid`: sender JID.
            - `to_jid`: recipient JID.
            - `stanza_type`: stanza type
            - `stanza_id`: stanza id -- value of stanza's "id" attribute.
            - `error`: error object. Ignored if `stanza_type` is not "error".
            - `error_cond`: error condition name. Ignored if `stanza_type` is
              not "error" or `error` is not None.
        :Types:
            - `element`: `str` or :etree:`ElementTree.Element`
            - `from_jid`: `JID`
            - `to_jid`: `JID`
            - `stanza_type`: `str`
            - `stanza_id`: `str`
            - `error`: `StanzaErrorElement`
            - `error_cond`: `str`"""
        self._error = None
        self._from_jid = None
        self._to_jid = None
        self._stanza_type = None
        self._stanza_id = None
        self.language = None
        if isinstance(element, ElementTree.Element):
            if element.tag.startswith("{"):
                self._namespace, self.element_name = element.tag[1:].split("}")
            else:
                self._namespace = STANZA_CLIENT_NS
                self.element_name = element.tag
            self._ns_prefix = "{{{0}}}".format(self._namespace)
            self._decode_attributes(element)
            self._payload = []
            for child in element:
                if child.tag == self._ns_prefix + "error":
                    self._error = StanzaErrorElement(child)
                else:
                    self._payload.append(deepcopy(child))
        else:
            self.element_name = str(element)
            self._namespace = STANZA_CLIENT_NS
            self._ns_prefix = "{{{0}}}".format(self._namespace)
            self._payload = []

        if from_jid is not None:
            self.from_jid = from_jid

        if to_jid is not None:
            self.to_jid = to_jid

        if stanza_type:
            self.stanza_type = stanza_type

        if stanza_id:
            self.stanza_id = stanza_id

        if self.stanza_type == "error":
            if error:
                self._error = error
            elif error_cond:
                self._error = StanzaErrorElement(error_cond)

    def _decode_attributes(self, element):
        """Decode the common stanza attributes."""
        from_jid = element.get('from')
        if from_jid:
            self._from_jid = JID(from_jid)
        to_jid = element.get('to')
        if to_jid:
            self._to_jid = JID(to_jid)
        self._stanza_type = element.get('type')
        self._stanza_id = element.get('id')
        self.language = element.get(XML_LANG_QNAME)

    @classmethod
    def from_string(cls, data):
        """Create a stanza from its serialized XML form.

        :Parameters:
            - `data`: the XML
        :Types:
            - `data`: `str`

        :returntype: `Stanza`"""
        return cls(ElementTree.XML(data))

    def __repr__(self):
        return "<Stanza {0} type={1!r} id={2!r} from={3!r} to={4!r}>".format(
                        self.element_name, self._stanza_type, self._stanza_id,
                        self._from_jid, self._to_jid)

    def as_xml(self):
        """Return the XML stanza representation.

        Always return an independent copy of the stanza XML representation,
        which can be freely modified without affecting the stanza.

        :returntype: :etree:`ElementTree.Element`"""
        attrs = {}
        if self._from_jid:
            attrs['from'] = str(self._from_jid)
        if self._to_jid:
            attrs['to'] = str(self._to_jid)
        if self._stanza_type:
            attrs['type'] = self._stanza_type
        if self._stanza_id:
            attrs['id'] = self._stanza_id
        if self.language:
            attrs[XML_LANG_QNAME] = self.language
        element = ElementTree.Element(self._ns_prefix + self.element_name,
                                                                        attrs)
        for payload in self._payload:
            element.append(deepcopy(payload))
        if self._error:
            element.append(self._error.as_xml(self._namespace))
        return element

    def serialize(self):
        """Serialize the stanza into a XML string.

        :returntype: `str`"""
        return ElementTree.tostring(self.as_xml(), encoding = "unicode")

    @property
    def from_jid(self):
        return self._from_jid

    @from_jid.setter
    def from_jid(self, from_jid):
        self._from_jid = JID(from_jid)

    @property
    def to_jid(self):
        return self._to_jid

    @to_jid.setter
    def to_jid(self, to_jid):
        self._to_jid = JID(to_jid)

    @property
    def stanza_type(self):
        return self._stanza_type

    @stanza_type.setter
    def stanza_type(self, stanza_type):
        self._stanza_type = str(stanza_type)

    @property
    def stanza_id(self):
        return self._stanza_id

    @stanza_id.setter
    def stanza_id(self, stanza_id):
        self._stanza_id = str(stanza_id)

    @property
    def error(self):
        return self._error

    @error.setter
    def error(self, error):
        self._error = error

    def add_payload(self, payload):
        """Add new the stanza payload.

        :Parameters:
            - `payload`: XML element to add
        :Types:
            - `payload`: :etree:`ElementTree.Element`
        """
        if not isinstance(payload, ElementTree.Element):
            raise TypeError("Bad payload type")
        self._payload.append(payload)

    def get_all_payload(self):
        """Return list of stanza payload elements.

        :returntype: `list` of :etree:`ElementTree.Element`
        """
        return list(self._payload)

    def get_payload(self, qname):
        """Return the first payload element with the given qualified name.

        Stanza namespace children (like <body/>) count as payload too, so
        `get_payload(STANZA_CLIENT_QNP + "body")` works.

        :Parameters:
            - `qname`: element name in the ``{namespace}name`` form
        :Types:
            - `qname`: `str`

        :returntype: :etree:`ElementTree.Element`"""
        for payload in self._payload:
            if payload.tag == qname:
                return payload
        return None

    def get_all_payload_named(self, qname):
        """Return all the payload elements with the given qualified name.

        :returntype: `list` of :etree:`ElementTree.Element`"""
        return [payload for payload in self._payload if payload.tag == qname]

    def make_result_response(self):
        """Create 'result' response for a 'get' or 'set' <iq/> stanza.

        :return: new `Stanza` object with the same "id" as self, "from" and
            "to" attributes replaced and type="result".
        :returntype: `Stanza`"""
        if self.element_name != "iq" or self.stanza_type not in ("get",
                                                                    "set"):
            raise ValueError("Results may only be generated for"
                                                    " 'get' or 'set' iq")
        return Stanza("iq", from_jid = self._to_jid, to_jid = self._from_jid,
                        stanza_type = "result", stanza_id = self._stanza_id)

    def make_error_response(self, cond):
        """Create error response for any non-error stanza.

        :Parameters:
            - `cond`: error condition name, as defined in XMPP specification.
        :Types:
            - `cond`: `str`

        :return: new `Stanza` object with the same "id" as self, "from" and
            "to" attributes swapped, type="error" and containing <error />
            element plus payload of `self`.
        :returntype: `Stanza`"""
        if self.stanza_type == "error":
            raise ValueError("Errors may not be generated in response"
                                                                " to errors")
        stanza = Stanza(self.element_name, from_jid = self._to_jid,
                        to_jid = self._from_jid, stanza_type = "error",
                        stanza_id = self._stanza_id, error_cond = cond)
        for payload in self._payload:
            stanza.add_payload(deepcopy(payload))
        return stanza

# vi: sts=4 et sw=4
