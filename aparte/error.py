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

"""XMPP stanza error handling.

Normative reference:
  - `RFC 6120 <http://xmpp.org/rfcs/rfc6120.html>`__
"""

__docformat__ = "restructuredtext en"

import logging

from xml.etree import ElementTree
from copy import deepcopy

from .constants import STANZA_ERROR_NS, STANZA_ERROR_QNP, STANZA_CLIENT_QNP
from .constants import STANZA_NAMESPACES, XML_LANG_QNAME
from .i18n import get_best

logger = logging.getLogger("aparte.error")

UNDEFINED_STANZA_CONDITION = STANZA_ERROR_QNP + "undefined-condition"

STANZA_ERRORS = {
            "bad-request":
                ("Bad request",
                "modify"),
            "conflict":
                ("Named session or resource already exists",
                "cancel"),
            "feature-not-implemented":
                ("Feature requested is not implemented",
                "cancel"),
            "forbidden":
                ("You are forbidden to perform requested action",
                "auth"),
            "gone":
                ("Recipient or server can no longer be contacted"
                                                        " at this address",
                "modify"),
            "internal-server-error":
                ("Internal server error",
                "wait"),
            "item-not-found":
                ("Item not found"
                ,"cancel"),
            "jid-malformed":
                ("JID malformed",
                "modify"),
            "not-acceptable":
                ("Requested action is not acceptable",
                "modify"),
            "not-allowed":
                ("Requested action is not allowed",
                "cancel"),
            "not-authorized":
                ("Not authorized",
                "auth"),
            "policy-violation":
                ("Policy violation",
                "cancel"),
            "recipient-unavailable":
                ("Recipient is not available",
                "wait"),
            "redirect":
                ("Redirection",
                "modify"),
            "registration-required":
                ("Registration required",
                "auth"),
            "remote-server-not-found":
                ("Remote server not found",
                "cancel"),
            "remote-server-timeout":
                ("Remote server timeout",
                "wait"),
            "resource-constraint":
                ("Resource constraint",
                "wait"),
            "service-unavailable":
                ("Service is not available",
                "cancel"),
            "subscription-required":
                ("Subscription is required",
                "auth"),
            "undefined-condition":
                ("Unknown error",
                "cancel"),
            "unexpected-request":
                ("Unexpected request",
                "wait"),
    }

STANZA_ERRORS_Q = dict([( "{{{0}}}{1}".format(STANZA_ERROR_NS, x[0]), x[1])
                                            for x in STANZA_ERRORS.items()])

class StanzaErrorElement(object):
    """Stanza error element.

    The peer may provide the human-readable description in several
    languages, all of them are kept in `texts`.

    :Ivariables:
        - `condition`: the condition element
        - `texts`: human-readable error descriptions by language (`""` for
          a text with no language)
        - `error_type`: 'type' of the error, one of: 'auth', 'cancel',
          'continue', 'modify', 'wait'
        - `custom_condition`: list of custom condition elements
    :Types:
        - `condition`: :etree:`ElementTree.Element`
        - `texts`: `dict`
        - `error_type`: `str`
        - `custom_condition`: `list` of :etree:`ElementTree.Element`
    """
    error_qname = STANZA_CLIENT_QNP + "error"
    text_qname = STANZA_CLIENT_QNP + "text"
    cond_qname_prefix = STANZA_ERROR_QNP
    def __init__(self, element_or_cond, text = None, language = None,
                                                            error_type = None):
        """Initialize an StanzaErrorElement object.

        :Parameters:
            - `element_or_cond`: XML <error/> element to decode or an error
              condition name.
            - `text`: optional description
            - `language`: RFC 3066 language tag for the description
            - `error_type`: 'type' of the error, one of: 'auth', 'cancel',
              'continue', 'modify', 'wait'
        :Types:
            - `element_or_cond`: :etree:`ElementTree.Element` or `str`
            - `text`: `str`
            - `language`: `str`
            - `error_type`: `str`
        """
        self.texts = {}
        self.custom_condition = []
        self.error_type = None
        if isinstance(element_or_cond, str):
            if element_or_cond not in STANZA_ERRORS:
                raise ValueError("Bad error condition")
            self.condition = ElementTree.Element(self.cond_qname_prefix
                                                        + element_or_cond)
        elif not isinstance(element_or_cond, ElementTree.Element):
            raise TypeError("Element or string expected")
        elif element_or_cond.tag.startswith("{"):
            namespace = element_or_cond.tag[1:].split("}", 1)[0]
            if namespace not in STANZA_NAMESPACES:
                raise ValueError("Bad error namespace {0!r}".format(namespace))
            self.error_qname = "{{{0}}}error".format(namespace)
            self.text_qname = "{{{0}}}text".format(namespace)
            self._from_xml(element_or_cond)
        else:
            raise ValueError("Bad error namespace - no namespace")

        if text:
            self.texts[language or ""] = text
        if error_type is not None:
            self.error_type = error_type
        if not self.error_type:
            if self.condition.tag in STANZA_ERRORS_Q:
                cond = self.condition.tag
            else:
                cond = UNDEFINED_STANZA_CONDITION
            self.error_type = STANZA_ERRORS_Q[cond][1]

    def _from_xml(self, element):
        """Initialize the object from an XML element.

        :Parameters:
            - `element`: XML element to be decoded.
        :Types:
            - `element`: :etree:`ElementTree.Element`
        """
        if element.tag != self.error_qname:
            raise ValueError("{0!r} is not a {1!r} element".format(
                                                    element, self.error_qname))
        default_lang = element.get(XML_LANG_QNAME, "")
        self.condition = None
        for child in element:
            if child.tag.startswith(self.cond_qname_prefix):
                if child.tag == self.cond_qname_prefix + "text":
                    lang = child.get(XML_LANG_QNAME, default_lang)
                    self.texts[lang] = (child.text or "").strip()
                elif self.condition is not None:
                    logger.warning("Multiple conditions in XMPP error"
                                                            " element.")
                else:
                    self.condition = deepcopy(child)
            elif child.tag == self.text_qname:
                lang = child.get(XML_LANG_QNAME, default_lang)
                self.texts[lang] = (child.text or "").strip()
            else:
                self.custom_condition.append(deepcopy(child))
        if self.condition is None:
            self.condition = ElementTree.Element(UNDEFINED_STANZA_CONDITION)
        self.error_type = element.get("type")

    @property
    def condition_name(self):
        """Return the condition name (condition element name without the
        namespace)."""
        return self.condition.tag.split("}", 1)[1]

    def get_text(self, preferred_languages = None):
        """Get the best human-readable description provided by the peer.

        :Parameters:
            - `preferred_languages`: language tags, most preferred first

        :return: the description or `None` if the peer provided none.
        :returntype: `str`"""
        best = get_best(self.texts, preferred_languages)
        if best is None or not best[1]:
            return None
        return best[1]

    def get_message(self, preferred_languages = None):
        """Get a message suitable to be displayed to the user: the best
        localized description or, when there is none, the machine-readable
        condition name.

        :returntype: `str`"""
        text = self.get_text(preferred_languages)
        if text:
            return text
        return self.condition_name

    def as_xml(self, stanza_namespace = None):
        """Return the XML error representation.

        :Parameters:
            - `stanza_namespace`: namespace URI of the containing stanza
        :Types:
            - `stanza_namespace`: `str`

        :returntype: :etree:`ElementTree.Element`"""
        if stanza_namespace:
            self.error_qname = "{{{0}}}error".format(stanza_namespace)
            self.text_qname = "{{{0}}}text".format(stanza_namespace)
        result = ElementTree.Element(self.error_qname)
        result.set("type", self.error_type)
        result.append(deepcopy(self.condition))
        for lang, text in self.texts.items():
            text_element = ElementTree.SubElement(result,
                                    self.cond_qname_prefix + "text")
            if lang:
                text_element.set(XML_LANG_QNAME, lang)
            text_element.text = text
        return result

# vi: sts=4 et sw=4
