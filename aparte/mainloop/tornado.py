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

"""Tornado based asynchronous task execution.

Long running exchanges (like waiting for an <iq/> response) run as
coroutines on a Tornado I/O loop, in a thread of its own, so the event bus
thread never blocks. Coroutines report back by scheduling events on the bus.
"""

__docformat__ = "restructuredtext en"

import logging
import threading

from concurrent import futures

from tornado import gen
from tornado import ioloop

from ..settings import AparteSettings

logger = logging.getLogger("aparte.mainloop.tornado")

class TornadoTaskPool(object):
    """Executor for coroutines, based on Tornado's ioloop.

    :Ivariables:
        - `io_loop`: the I/O loop running the tasks
        - `_thread`: the thread running the loop, when started with `start`
    :Types:
        - `io_loop`: `tornado.ioloop.IOLoop`
        - `_thread`: `threading.Thread`
    """
    def __init__(self, settings = None, io_loop = None):
        """Initialize the task pool.

        :Parameters:
            - `settings`: the settings. "io_loop" provides the loop if
              `io_loop` is not given.
            - `io_loop`: the loop to use, e.g. the loop of a test case.
        """
        if io_loop is None:
            if settings is None:
                settings = AparteSettings()
            io_loop = settings["io_loop"]
        self.io_loop = io_loop
        self._thread = None

    def start(self):
        """Run the loop in a new daemon thread."""
        if self._thread is not None:
            raise RuntimeError("Task pool already started")
        self._thread = threading.Thread(target = self._run,
                                            name = "aparte-tasks")
        self._thread.daemon = True
        self._thread.start()

    def _run(self):
        logger.debug("task pool started")
        self.io_loop.start()
        logger.debug("task pool stopped")

    def stop(self, timeout = None):
        """Stop the loop and wait for the thread."""
        thread = self._thread
        if thread is None:
            return
        self.io_loop.add_callback(self.io_loop.stop)
        thread.join(timeout)
        self._thread = None

    def add_callback(self, callback, *args, **kwargs):
        """Call `callback` in the loop thread on the next loop iteration.

        Safe to be called from any thread."""
        self.io_loop.add_callback(callback, *args, **kwargs)

    def spawn(self, func, *args, **kwargs):
        """Run a coroutine function in the loop.

        Safe to be called from any thread.

        :Parameters:
            - `func`: coroutine function (``async def``) or any function
              returning an awaitable
            - `args`: positional arguments for `func`
            - `kwargs`: keyword arguments for `func`

        :return: a future resolved with the coroutine result
        :returntype: `concurrent.futures.Future`
        """
        result = futures.Future()
        self.io_loop.add_callback(self._start_task, result, func, args, kwargs)
        return result

    def _start_task(self, result, func, args, kwargs):
        """Start the coroutine, in the loop thread."""
        if not result.set_running_or_notify_cancel():
            return
        try:
            future = gen.convert_yielded(func(*args, **kwargs))
        except Exception as err: # pylint: disable=W0703
            logger.error("Task {0!r} failed to start".format(func),
                                                            exc_info = True)
            result.set_exception(err)
            return
        self.io_loop.add_future(future,
                        lambda future: self._task_done(func, result, future))

    @staticmethod
    def _task_done(func, result, future):
        """Pass the coroutine result to the `spawn` future."""
        if future.cancelled():
            logger.debug("Task {0!r} cancelled".format(func))
            result.set_exception(futures.CancelledError())
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Task {0!r} failed".format(func), exc_info = exc)
            result.set_exception(exc)
        else:
            result.set_result(future.result())

def io_loop_factory(settings):
    """Create the default I/O loop for the task pool."""
    # pylint: disable=W0613
    return ioloop.IOLoop(make_current = False)

AparteSettings.add_default_factory("io_loop", io_loop_factory, True)

# vi: sts=4 et sw=4
