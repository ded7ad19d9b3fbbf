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

"""
Aparte - extensible XMPP client core
====================================

Project Information
-------------------

Aparte is a console XMPP client built around a small, synchronous core and a
set of independent extensions ("mods"). This package contains the runtime
that turns a raw bidirectional stanza stream into an application:

  - `command`: the command line tokenizer, command parsers and the
    `command.CommandRouter`
  - `completion`: fuzzy ranking of completion candidates
  - `registry`: the type-indexed extension registry with run-time borrow
    checking
  - `mainloop.events`: the FIFO `mainloop.events.EventBus`
  - `stanzaprocessor`: routing of inbound stanzas to the extension claiming
    the best capability score
  - `iq`: correlation of <iq/> queries with their responses for
    asynchronous tasks
  - `core`: the `core.Aparte` context object gluing all of the above

Data
----

Everything that happens in the application is an `events.Event`. Events
are created by the core, by the extensions or by asynchronous tasks, put on
the event bus and dispatched, one at a time, to every extension.

Stanzas received from the transport are represented by `stanza.Stanza`
objects and decoded into `message.XmppMessage` objects by the extensions.

Extensions
----------

Extensions are `mods.Mod` subclasses registered in the `Aparte` object
before it is initialized. They may handle events, provide commands and
decode stanzas. Extensions reach each other through the registry::

    with aparte.mods.get_mut(DiscoMod) as disco:
        disco.add_feature(MY_FEATURE_NS)

Configuration
-------------

Optional parameters are passed in an `settings.AparteSettings` object.
"""

__docformat__ = "restructuredtext en"

# vi: sts=4 et sw=4
