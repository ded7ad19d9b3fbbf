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

"""Aparte exceptions.

Parse, dispatch and <iq/> errors are recoverable and are reported where they
happen. Registry and extension initialization errors denote a broken
application and are left to propagate.
"""

__docformat__ = "restructuredtext en"

class AparteError(Exception):
    """Base class for all Aparte exceptions."""
    pass

class JIDError(AparteError, ValueError):
    """Exception raised when invalid JID is used."""
    pass

class CommandParseError(AparteError, ValueError):
    """Raised when a command line cannot be tokenized.

    :Ivariables:
        - `raw`: the input being parsed
    :Types:
        - `raw`: `str`
    """
    message = "Invalid command"
    def __init__(self, raw = None):
        AparteError.__init__(self, self.message)
        self.raw = raw

class MissingLeadingSlash(CommandParseError):
    """The command line does not start with the command delimiter."""
    message = "Missing starting /"

class MissingClosingQuote(CommandParseError):
    """A quoted argument is not terminated."""
    message = "Missing closing quote"

class MissingEscapedChar(CommandParseError):
    """The command line ends with an escape character."""
    message = "Missing escaped char"

class CommandError(AparteError):
    """Error reported by a command handler or by the command router.

    The message is meant to be displayed to the user."""
    pass

class UnknownCommandError(CommandError):
    """No command parser is registered for the requested name.

    :Ivariables:
        - `name`: the command name
    """
    def __init__(self, name):
        CommandError.__init__(self, "Unknown command {0}".format(name))
        self.name = name

class RegistryError(AparteError):
    """Invalid extension registry operation (e.g. a duplicate
    registration)."""
    pass

class BorrowError(RegistryError):
    """An extension is already borrowed in a way conflicting with the
    requested borrow.

    :Ivariables:
        - `mod_class`: class of the extension
        - `mutable`: `True` if the failed borrow was an exclusive one
    """
    def __init__(self, mod_class, mutable):
        if mutable:
            msg = "{0} is already borrowed".format(mod_class.__name__)
        else:
            msg = "{0} is already mutably borrowed".format(mod_class.__name__)
        RegistryError.__init__(self, msg)
        self.mod_class = mod_class
        self.mutable = mutable

class ModInitError(AparteError):
    """Initialization of an extension failed. The application cannot
    start."""
    pass

class TransportError(AparteError):
    """Raised by a transport when a stanza cannot be sent."""
    pass

class IqError(AparteError):
    """Base class for <iq/> exchange failures."""
    pass

class StanzaError(IqError):
    """The peer replied with an <iq type='error'/>.

    :Ivariables:
        - `stanza`: the error response
        - `condition`: the error condition name
        - `text`: human-readable reason
    """
    def __init__(self, stanza, text, condition):
        IqError.__init__(self, text)
        self.stanza = stanza
        self.text = text
        self.condition = condition

class ConnectionLostError(IqError):
    """The connection was lost before the response arrived."""
    pass

class IqTimeoutError(IqError):
    """No response arrived within the query timeout."""
    pass

# vi: sts=4 et sw=4
