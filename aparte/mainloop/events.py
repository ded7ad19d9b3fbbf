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

"""The event bus: a FIFO of events and the loop dispatching them."""

__docformat__ = "restructuredtext en"

import queue
import threading
import logging
import inspect

from collections import defaultdict

from .interfaces import EventHandler, QUIT
from ..exceptions import AparteError, BorrowError
from ..settings import AparteSettings

logger = logging.getLogger("aparte.mainloop.events")

class EventBus(object):
    """Dispatches events from an event queue to event handlers.

    Events are `.interfaces.Event` instances stored in the event queue
    (defined by the "event_queue" setting). Event handlers are `EventHandler`
    subclass instance methods decorated with the `event_handler` decorator.
    Handler objects get the events in the order they were added; a handler
    returning `True` stops the propagation of the event.

    `schedule` may be called from any thread, the other methods only from
    the thread owning the bus. Events scheduled by a handler are processed
    on a later iteration, never from within the handler.

    :Ivariables:
        - `queue`: the event queue
        - `handlers`: list of handler objects
        - `lock`: the thread synchronisation lock
        - `_handler_map`: mapping of event type to list of handler methods
        - `_dispatching`: `True` while an event is being dispatched
    :Types:
        - `queue`: `queue.Queue`
        - `handlers`: `list` of `EventHandler`
        - `lock`: `threading.RLock`
        - `_handler_map`: `type` -> `list` of callable mapping
        - `_dispatching`: `bool`
    """
    def __init__(self, settings = None, handlers = None):
        """Initialize the event bus.

        :Parameters:
            - `settings`: the settings. "event_queue" settings provides
              the event queue object.
            - `handlers`: the initial list of event handler objects.
        :Types:
            - `settings`: `AparteSettings`
            - `handlers`: iterable of objects
        """
        if settings is None:
            settings = AparteSettings()
        self.queue = settings["event_queue"]
        self._handler_map = defaultdict(list)
        if handlers:
            self.handlers = list(handlers)
        else:
            self.handlers = []
        self._update_handlers()
        self.lock = threading.RLock()
        self._dispatching = False

    def add_handler(self, handler):
        """Add a handler object.

        :Parameters:
            `handler`: the object providing event handler methods
        :Types:
            `handler`: `EventHandler`
        """
        if not isinstance(handler, EventHandler):
            raise TypeError("Not an EventHandler")
        with self.lock:
            if handler in self.handlers:
                return
            self.handlers.append(handler)
            self._update_handlers()

    def remove_handler(self, handler):
        """Remove a handler object.

        :Parameters:
            `handler`: the object to remove
        """
        with self.lock:
            if handler in self.handlers:
                self.handlers.remove(handler)
                self._update_handlers()

    def _update_handlers(self):
        """Update `self._handler_map` after `self.handlers` have been
        modified."""
        handler_map = defaultdict(list)
        for i, obj in enumerate(self.handlers):
            for dummy, handler in inspect.getmembers(obj, callable):
                if not hasattr(handler, "_aparte_event_handled"):
                    continue
                # pylint: disable-msg=W0212
                event_class = handler._aparte_event_handled
                handler_map[event_class].append( (i, handler) )
        self._handler_map = handler_map

    def _get_handlers(self, event):
        """Return the handler methods for `event` in the handler objects
        order."""
        handlers = list(self._handler_map[None])
        for klass in type(event).__mro__:
            if klass in self._handler_map:
                handlers += self._handler_map[klass]
        handlers.sort(key = lambda item: item[0])
        return [handler for dummy, handler in handlers]

    def schedule(self, event):
        """Add an event to the queue. Thread-safe, never dispatches the event
        immediately.

        :Parameters:
            - `event`: the event to add
        :Types:
            - `event`: `Event`
        """
        logger.debug("scheduling: {0!r}".format(event))
        self.queue.put(event)

    def run_once(self, block = False, timeout = None):
        """Get the next event from the queue and pass it to
        the appropriate handlers.

        :Parameters:
            `block`: wait for event if the queue is empty
            `timeout`: maximum time, in seconds, to wait if `block` is `True`
        :Types:
            `block`: `bool`
            `timeout`: `float`

        :Return: the event handled (may be `QUIT`) or `None`
        """
        if self._dispatching:
            raise AparteError("Event dispatch is not re-entrant")
        try:
            event = self.queue.get(block, timeout)
        except queue.Empty:
            return None
        self._dispatching = True
        try:
            logger.debug("dispatching: {0!r}".format(event))
            if event is QUIT:
                return QUIT
            for handler in self._get_handlers(event):
                if handler(event):
                    logger.debug("  {0!r} handled by {1!r}".format(event,
                                                                    handler))
                    break
            return event
        except BorrowError:
            logger.error("Dispatch of {0!r} aborted".format(event),
                                                            exc_info = True)
            return event
        finally:
            self._dispatching = False
            self.queue.task_done()

    def flush(self, dispatch = True):
        """Read all events currently in the queue and dispatch them to the
        handlers unless `dispatch` is `False`.

        Note: If the queue contains `QUIT` the events after it won't be
        removed.

        :Parameters:
            `dispatch`: if the events should be handled (`True`) or ignored
            (`False`)

        :Return: `QUIT` if the `QUIT` event was reached.
        """
        if dispatch:
            while True:
                event = self.run_once(False)
                if event in (None, QUIT):
                    return event
        else:
            while True:
                try:
                    event = self.queue.get(False)
                except queue.Empty:
                    return None
                self.queue.task_done()
                if event is QUIT:
                    return QUIT

    def run_forever(self):
        """Wait for and dispatch events until `QUIT` is reached.
        """
        while self.run_once(True) is not QUIT:
            pass

AparteSettings.add_setting("event_queue_max_size", type = int, default = 0,
    validator = AparteSettings.validate_positive_int,
    doc = """Maximum number of events waiting in the queue, 0 for
    unlimited."""
    )

def event_queue_factory(settings):
    """Create the default event queue object.

    Use the "event_queue_max_size" setting for the maximum queue size.
    """
    return queue.Queue(settings["event_queue_max_size"])

AparteSettings.add_default_factory("event_queue", event_queue_factory, True)

# vi: sts=4 et sw=4
