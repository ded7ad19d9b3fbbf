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

"""Routing of received stanzas to the mods.

Mods do not see raw stanzas. Each received <message/> (and <iq/> request) is
offered to every mod's `score_stanza` method; the mod reporting the highest
score decodes it into events. <iq/> responses go to the query correlator,
<presence/> stanzas become `PresenceEvent`.

Normative reference:
  - `RFC 6120 <http://xmpp.org/rfcs/rfc6120.html>`__
"""

__docformat__ = "restructuredtext en"

import math
import logging

from .mainloop.interfaces import Event
from .events import IqEvent, PresenceEvent
from .stanza import Stanza

logger = logging.getLogger("aparte.stanzaprocessor")

MIN_SCORE = 0.0
MAX_SCORE = 1.0

def check_score(mod_class, score):
    """Make sure a mod score is a number in the [0.0, 1.0] range.

    Invalid scores are logged and clamped.

    :returntype: `float`"""
    try:
        score = float(score)
    except (TypeError, ValueError):
        logger.warning("{0} returned non-numeric score {1!r}".format(
                                                mod_class.__name__, score))
        return MIN_SCORE
    if math.isnan(score):
        logger.warning("{0} returned NaN score".format(mod_class.__name__))
        return MIN_SCORE
    if score < MIN_SCORE or score > MAX_SCORE:
        logger.warning("{0} returned out of range score {1!r}".format(
                                                mod_class.__name__, score))
        return min(max(score, MIN_SCORE), MAX_SCORE)
    return score

class StanzaRouter(object):
    """Capability scored stanza router.

    :Ivariables:
        - `aparte`: the application context
    :Types:
        - `aparte`: `aparte.core.Aparte`
    """
    def __init__(self, aparte):
        self.aparte = aparte

    def select(self, account, stanza):
        """Ask all the mods for their score for `stanza`.

        :return: (mod class, score) of the best mod. The first registered
            wins on a tie. The mod class is `None` when no mod scored above
            0.
        """
        best = None
        best_score = MIN_SCORE
        mods = self.aparte.mods
        for mod_class in mods:
            with mods.get(mod_class) as mod:
                score = mod.score_stanza(self.aparte, account, stanza)
            score = check_score(mod_class, score)
            if score > best_score:
                best = mod_class
                best_score = score
        logger.debug("Best mod for {0!r}: {1} ({2})".format(stanza,
                                best and best.__name__, best_score))
        return best, best_score

    def _process_decode_result(self, account, result):
        """Schedule the events (and send the stanzas) returned by a mod
        `decode_stanza` method.

        :Parameters:
            - `result`: `None`, an event, a stanza or an iterable of those
        """
        if result is None:
            return
        if isinstance(result, (Event, Stanza)):
            result = [result]
        for item in result:
            if isinstance(item, Event):
                self.aparte.schedule(item)
            elif isinstance(item, Stanza):
                self.aparte.send(account, item)
            else:
                logger.warning("Unexpected object in decode result:"
                                                        " {0!r}".format(item))

    def decode(self, account, stanza):
        """Pass `stanza` to the best scoring mod.

        :return: `True` if a mod decoded the stanza.
        :returntype: `bool`"""
        mod_class, dummy = self.select(account, stanza)
        if mod_class is None:
            return False
        with self.aparte.mods.get_mut(mod_class) as mod:
            result = mod.decode_stanza(self.aparte, account, stanza)
        self._process_decode_result(account, result)
        return True

    def route(self, account, stanza):
        """Process a stanza received for `account`.

        :Parameters:
            - `account`: the account JID
            - `stanza`: the stanza received
        :Types:
            - `account`: `JID`
            - `stanza`: `Stanza`
        """
        element_name = stanza.element_name
        if element_name == "iq":
            self.route_iq(account, stanza)
        elif element_name == "message":
            self.route_message(account, stanza)
        elif element_name == "presence":
            self.aparte.schedule(PresenceEvent(account, stanza))
        else:
            logger.warning("Unknown stanza received: {0!r}".format(stanza))

    def route_iq(self, account, stanza):
        """Process an <iq/> stanza.

        Responses become `IqEvent`. A request no mod is able to handle gets
        the "feature-not-implemented" error reply."""
        typ = stanza.stanza_type
        if typ in ("result", "error"):
            self.aparte.schedule(IqEvent(account, stanza))
            return
        if typ not in ("get", "set"):
            logger.warning("Bad <iq/> type {0!r}".format(typ))
            self.aparte.send(account,
                                stanza.make_error_response("bad-request"))
            return
        if not self.decode(account, stanza):
            logger.debug("No handler for {0!r}".format(stanza))
            self.aparte.send(account, stanza.make_error_response(
                                                "feature-not-implemented"))

    def route_message(self, account, stanza):
        """Process a <message/> stanza."""
        if not self.decode(account, stanza):
            logger.debug("Message ignored: {0!r}".format(stanza))

# vi: sts=4 et sw=4
