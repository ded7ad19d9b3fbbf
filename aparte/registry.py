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

"""Extension registry.

Extensions ("mods") are stored by their class and lent out through borrow
guards which enforce, at run time, that a mod is either borrowed by many
readers or by a single writer::

    with aparte.mods.get_mut(MessagesMod) as messages:
        messages.add_message(message)

A conflicting borrow raises `BorrowError` instead of giving access to a mod
in the middle of an update.
"""

__docformat__ = "restructuredtext en"

import logging

from .exceptions import RegistryError, BorrowError

logger = logging.getLogger("aparte.registry")

class _ModEntry(object):
    """Registry slot: the mod and its borrow state.

    :Ivariables:
        - `mod`: the mod instance
        - `readers`: number of active shared borrows
        - `writer`: `True` when exclusively borrowed
    """
    __slots__ = ("mod", "readers", "writer")
    def __init__(self, mod):
        self.mod = mod
        self.readers = 0
        self.writer = False

class BorrowGuard(object):
    """Context manager holding a borrow of a registered mod.

    The borrow is taken on enter and released on exit, the mod instance is
    returned by the ``with`` statement.
    """
    def __init__(self, entry, mutable):
        self._entry = entry
        self.mutable = mutable
        self._active = False

    def __enter__(self):
        entry = self._entry
        if self._active:
            raise RegistryError("Borrow guard already entered")
        if self.mutable:
            if entry.writer or entry.readers:
                raise BorrowError(type(entry.mod), True)
            entry.writer = True
        else:
            if entry.writer:
                raise BorrowError(type(entry.mod), False)
            entry.readers += 1
        self._active = True
        return entry.mod

    def __exit__(self, exc_type, exc_value, traceback):
        if not self._active:
            return
        if self.mutable:
            self._entry.writer = False
        else:
            self._entry.readers -= 1
        self._active = False

class ModRegistry(object):
    """Type-indexed collection of mods.

    Mods are accessed only from the event processing thread, so the borrow
    state needs no locking.

    :Ivariables:
        - `_entries`: registry slots by mod class, in registration order
    :Types:
        - `_entries`: `dict` of `type` -> `_ModEntry`
    """
    def __init__(self):
        self._entries = {}

    def register(self, mod):
        """Add a mod to the registry.

        :Parameters:
            - `mod`: the mod instance
        :raise RegistryError: if a mod of the same class is already
            registered."""
        mod_class = type(mod)
        if mod_class in self._entries:
            raise RegistryError("{0} already registered"
                                                .format(mod_class.__name__))
        logger.debug("Registering mod {0!r}".format(mod))
        self._entries[mod_class] = _ModEntry(mod)

    def __contains__(self, mod_class):
        return mod_class in self._entries

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        """Iterate over mod classes in registration order."""
        return iter(list(self._entries))

    def get(self, mod_class):
        """Get a shared borrow of a mod.

        :Parameters:
            - `mod_class`: class of the mod
        :Types:
            - `mod_class`: `type`

        :return: a guard to be used in a ``with`` statement or `None` if no
            such mod is registered.
        :returntype: `BorrowGuard`"""
        entry = self._entries.get(mod_class)
        if entry is None:
            return None
        return BorrowGuard(entry, False)

    def get_mut(self, mod_class):
        """Get an exclusive borrow of a mod.

        :Parameters:
            - `mod_class`: class of the mod
        :Types:
            - `mod_class`: `type`

        :return: a guard to be used in a ``with`` statement or `None` if no
            such mod is registered.
        :returntype: `BorrowGuard`"""
        entry = self._entries.get(mod_class)
        if entry is None:
            return None
        return BorrowGuard(entry, True)

    def is_borrowed(self, mod_class):
        """Check if a mod is currently lent out (in any way)."""
        entry = self._entries[mod_class]
        return entry.writer or entry.readers > 0

# vi: sts=4 et sw=4
