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

"""Asynchronous <iq/> queries.

A coroutine sends a query and waits for the response::

    response = await aparte.send_query(account, query)

The response is received by the transport, scheduled on the event bus and
handed over to the waiting coroutine from the bus thread, by
`IqCorrelator.handle_response`.
"""

__docformat__ = "restructuredtext en"

import logging
import threading

from datetime import timedelta

from tornado import gen
from tornado.concurrent import Future
from tornado.ioloop import IOLoop

from .exceptions import StanzaError, ConnectionLostError, IqTimeoutError
from .jid import JID
from .settings import AparteSettings
from .stanza import gen_id

logger = logging.getLogger("aparte.iq")

class PendingIq(object):
    """Query waiting for a response.

    :Ivariables:
        - `stanza_id`: the query id
        - `account`: the account the query was sent from
        - `to_jid`: the query recipient
        - `future`: resolved with the response
        - `io_loop`: the loop of the waiting coroutine
    """
    # pylint: disable=R0903
    __slots__ = ("stanza_id", "account", "to_jid", "future", "io_loop")
    def __init__(self, stanza_id, account, to_jid, future, io_loop):
        self.stanza_id = stanza_id
        self.account = account
        self.to_jid = to_jid
        self.future = future
        self.io_loop = io_loop

    def __repr__(self):
        return "<PendingIq {0} on {1} to {2}>".format(self.stanza_id,
                                                    self.account, self.to_jid)

class IqCorrelator(object):
    """Matches <iq/> responses with the waiting queries.

    :Ivariables:
        - `settings`: the settings
        - `send`: function sending a stanza: ``send(account, stanza)``,
          called in the task pool thread
        - `lock`: protects `_pending`
        - `_pending`: pending queries by (account, id)
    :Types:
        - `settings`: `AparteSettings`
        - `lock`: `threading.RLock`
        - `_pending`: `dict`
    """
    def __init__(self, send, settings = None):
        if settings is None:
            settings = AparteSettings()
        self.settings = settings
        self.send = send
        self.lock = threading.RLock()
        self._pending = {}

    def pending_count(self, account = None):
        """Number of queries waiting for a response (for `account` or for all
        accounts)."""
        with self.lock:
            if account is None:
                return len(self._pending)
            return len([key for key in self._pending if key[0] == account])

    async def send_query(self, account, stanza, timeout = None):
        """Send an <iq/> query and wait for the response.

        Must be called from a coroutine running on the task pool loop.

        :Parameters:
            - `account`: the account to send the query from
            - `stanza`: the query, a 'get' or 'set' <iq/> stanza. Its id is
              replaced with a new, unique one.
            - `timeout`: time in seconds to wait for the response, the
              "default_query_timeout" setting when `None`
        :Types:
            - `account`: `JID`
            - `stanza`: `Stanza`
            - `timeout`: `float`

        :raise StanzaError: on an error response
        :raise ConnectionLostError: when the account disconnects
        :raise IqTimeoutError: when no response arrives in time
        :raise TransportError: when the query cannot be sent
        :return: the 'result' response
        :returntype: `Stanza`"""
        if stanza.element_name != "iq" or stanza.stanza_type not in ("get",
                                                                    "set"):
            raise ValueError("Not an <iq/> query")
        stanza.stanza_id = gen_id()
        key = (account, stanza.stanza_id)
        future = Future()
        entry = PendingIq(stanza.stanza_id, account, stanza.to_jid, future,
                                                            IOLoop.current())
        with self.lock:
            self._pending[key] = entry
        try:
            logger.debug("Sending query {0!r}".format(entry))
            self.send(account, stanza)
            if timeout is None:
                timeout = self.settings["default_query_timeout"]
            if timeout is None:
                return await future
            try:
                return await gen.with_timeout(timedelta(seconds = timeout),
                                                                        future)
            except gen.TimeoutError:
                raise IqTimeoutError("No response to {0} in {1}s"
                                        .format(stanza.stanza_id, timeout))
        finally:
            with self.lock:
                if self._pending.get(key) is entry:
                    del self._pending[key]

    @staticmethod
    def _check_sender(entry, stanza):
        """Check if the response comes from the query recipient.

        A query with no recipient (or the account bare JID or domain as the
        recipient) is answered by the server on behalf of the account."""
        from_jid = stanza.from_jid
        if from_jid == entry.to_jid:
            return True
        account = entry.account
        server_jids = (account, account.bare(), JID(account.domain))
        if entry.to_jid is None or entry.to_jid in server_jids[1:]:
            return from_jid is None or from_jid in server_jids
        return False

    def handle_response(self, account, stanza):
        """Wake the coroutine waiting for `stanza`.

        Called from the event bus thread.

        :Parameters:
            - `account`: the account the response was received on
            - `stanza`: 'result' or 'error' <iq/> stanza
        :Types:
            - `account`: `JID`
            - `stanza`: `Stanza`

        :return: `True` if the response matched a pending query.
        :returntype: `bool`"""
        key = (account, stanza.stanza_id)
        with self.lock:
            entry = self._pending.get(key)
            if entry is None:
                logger.warning("Unexpected <iq/> response (unknown or"
                                " already answered query): {0!r}"
                                                            .format(stanza))
                return False
            if not self._check_sender(entry, stanza):
                logger.warning("<iq/> response {0!r} from unexpected sender,"
                                            " ignoring".format(stanza))
                return False
            del self._pending[key]
        logger.debug("Response for {0!r}".format(entry))
        entry.io_loop.add_callback(self._resolve, entry, stanza)
        return True

    def _resolve(self, entry, stanza):
        """Set the query result, in the coroutine loop thread."""
        if entry.future.done():
            return
        if stanza.stanza_type == "error":
            error = stanza.error
            if error is None:
                condition = "undefined-condition"
                text = condition
            else:
                condition = error.condition_name
                text = error.get_message(self.settings["preferred_languages"])
            entry.future.set_exception(StanzaError(stanza, text, condition))
        else:
            entry.future.set_result(stanza)

    @staticmethod
    def _fail(entry, exc):
        """Fail the query, in the coroutine loop thread."""
        if not entry.future.done():
            entry.future.set_exception(exc)

    def cancel_account(self, account, reason = None):
        """Fail all the queries pending for `account`.

        Called from the event bus thread when the account disconnects.

        :return: number of queries cancelled"""
        with self.lock:
            keys = [key for key in self._pending if key[0] == account]
            entries = [self._pending.pop(key) for key in keys]
        for entry in entries:
            logger.debug("Cancelling {0!r}".format(entry))
            if reason:
                msg = "Connection lost: {0}".format(reason)
            else:
                msg = "Connection lost"
            entry.io_loop.add_callback(self._fail, entry,
                                                    ConnectionLostError(msg))
        return len(entries)

# vi: sts=4 et sw=4
