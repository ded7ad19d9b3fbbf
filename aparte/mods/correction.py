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

"""Last message correction (XEP-0308).

A correction carries the id of the message it replaces. The new content is
added to the original message history, the corrected message is displayed
again.

Normative reference:
  - `XEP-0308 <http://xmpp.org/extensions/xep-0308.html>`__
"""

__docformat__ = "restructuredtext en"

import logging

from ..constants import MESSAGE_CORRECT_NS, MESSAGE_CORRECT_QNP
from ..events import MessageEvent, RawMessageEvent
from ..message import get_bodies, get_timestamp
from ..stanza import Stanza
from .disco import DiscoMod
from .messages import MessagesMod
from . import Mod

logger = logging.getLogger("aparte.mods.correction")

REPLACE_TAG = MESSAGE_CORRECT_QNP + "replace"

class CorrectionMod(Mod):
    """Applies message corrections."""
    description = "XEP-0308: Last Message Correction"
    def init(self, aparte):
        guard = aparte.mods.get_mut(DiscoMod)
        if guard is not None:
            with guard as disco:
                disco.add_feature(MESSAGE_CORRECT_NS)

    def score_stanza(self, aparte, account, stanza):
        if stanza.element_name != "message":
            return 0.0
        replace = stanza.get_payload(REPLACE_TAG)
        if replace is None or not replace.get("id"):
            return 0.0
        return 1.0

    def decode_stanza(self, aparte, account, stanza):
        replaced_id = stanza.get_payload(REPLACE_TAG).get("id")
        original = None
        guard = aparte.mods.get_mut(MessagesMod)
        if guard is not None:
            with guard as messages:
                original = messages.get_message(account, replaced_id)
                if original is not None:
                    original.add_version(stanza.stanza_id,
                                        get_bodies(stanza),
                                        get_timestamp(stanza))
        if original is not None:
            return MessageEvent(account, original)
        logger.debug("Correction of unknown message {0!r}, handling as"
                                    " a new message".format(replaced_id))
        return RawMessageEvent(account, strip_replace(stanza))

def strip_replace(stanza):
    """Return a copy of `stanza` without the <replace/> element.

    :returntype: `Stanza`"""
    element = stanza.as_xml()
    for child in list(element):
        if child.tag == REPLACE_TAG:
            element.remove(child)
    return Stanza(element)

# vi: sts=4 et sw=4
