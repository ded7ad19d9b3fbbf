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

"""Abstract base classes for the event processing framework.
"""

__docformat__ = "restructuredtext en"

from abc import ABCMeta

class Event(metaclass = ABCMeta):
    """Base class for Aparte events.

    Events are immutable: attributes are set once, by the constructor,
    through `Event.__init__`.
    """
    # pylint: disable-msg=R0903
    __slots__ = ()
    def __init__(self, **kwargs):
        for name, value in kwargs.items():
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError("{0} is immutable".format(
                                                    self.__class__.__name__))

    def __delattr__(self, name):
        raise AttributeError("{0} is immutable".format(
                                                    self.__class__.__name__))

    def __str__(self):
        raise NotImplementedError

    def __repr__(self):
        return "<{0}: {1}>".format(self.__class__.__name__, str(self))

QUIT = None
class QuitEvent(Event):
    """The `QUIT` event class."""
    # pylint: disable-msg=R0903
    __slots__ = ()
    def __str__(self):
        return "Quit"
QUIT = QuitEvent()
del QuitEvent

class EventHandler(metaclass = ABCMeta):
    """Base class for objects providing `event_handler` decorated
    methods."""
    # pylint: disable-msg=R0903
    pass

def event_handler(event_class = None):
    """Method decorator generator for decorating event handlers.

    To be used on `EventHandler` subclass methods only. A handler returning
    `True` stops the event propagation to the following handlers.

    :Parameters:
        - `event_class`: event class expected, `None` for all events
    :Types:
        - `event_class`: subclass of `Event`
    """
    def decorator(func):
        """The decorator"""
        func._aparte_event_handled = event_class
        return func
    return decorator

# vi: sts=4 et sw=4
