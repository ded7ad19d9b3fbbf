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

"""Aparte mods (extensions).

A mod is registered once, at startup, at the application context. It:

  - gets every event through `Mod.on_event` (which calls the methods
    decorated with `event_handler`),
  - may provide user commands (methods decorated with `command_def`),
  - may decode received stanzas, competing with other mods through
    `Mod.score_stanza`.

Mods never talk to each other directly, they borrow each other from the
registry: ``with aparte.mods.get(OtherMod) as other: ...``.
"""

__docformat__ = "restructuredtext en"

import inspect
import logging

from ..command import CommandParser
from ..mainloop.interfaces import EventHandler

logger = logging.getLogger("aparte.mods")

class Mod(EventHandler):
    """Base class for Aparte mods.

    :Cvariables:
        - `description`: short human-readable description
    """
    description = None

    def init(self, aparte):
        """Initialize the mod. Called once, before any event is dispatched.

        An exception raised here aborts the application startup.

        :Parameters:
            - `aparte`: the application context
        """
        pass

    def _get_handlers(self, event):
        """Return the bound `event_handler` methods for `event`."""
        handlers = []
        klass = type(event)
        for dummy, handler in inspect.getmembers(self, callable):
            if not hasattr(handler, "_aparte_event_handled"):
                continue
            # pylint: disable-msg=W0212
            event_class = handler._aparte_event_handled
            if event_class is None or issubclass(klass, event_class):
                handlers.append(handler)
        return handlers

    def on_event(self, aparte, event):
        """Handle an event.

        The default implementation passes the event to the methods decorated
        with `event_handler` for the event class, called as
        ``handler(aparte, event)``.

        :Parameters:
            - `aparte`: the application context
            - `event`: the event
        """
        for handler in self._get_handlers(event):
            handler(aparte, event)

    def score_stanza(self, aparte, account, stanza):
        """Tell how well the mod can decode `stanza`.

        :return: 0.0 when the mod cannot decode the stanza, up to 1.0 when it
            is sure it is the right one.
        :returntype: `float`"""
        # pylint: disable-msg=W0613,R0201
        return 0.0

    def decode_stanza(self, aparte, account, stanza):
        """Decode a stanza (called only if this mod had the best score).

        :return: `None`, an event, a stanza to send or an iterable of
            events and stanzas."""
        # pylint: disable-msg=W0613,R0201
        return None

    def get_commands(self):
        """Return parsers for the `command_def` decorated methods.

        :returntype: `list` of `CommandParser`"""
        parsers = []
        for dummy, method in inspect.getmembers(self, callable):
            if hasattr(method, "_aparte_command"):
                parsers.append(CommandParser.from_function(method))
        return parsers

    def __str__(self):
        return self.description or self.__class__.__name__

# vi: sts=4 et sw=4
