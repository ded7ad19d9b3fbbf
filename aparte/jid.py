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

"""jid -- XMPP address handling

The client core uses JIDs mostly as opaque identities: the account a
connection belongs to, the sender of a stanza, the room of a channel.

Normative reference:
  - `RFC 6122 <http://xmpp.org/rfcs/rfc6122.html>`__
"""

__docformat__ = "restructuredtext en"

import re
import weakref
import logging

from encodings import idna

from .exceptions import JIDError

logger = logging.getLogger("aparte.jid")

# to enforce the UseSTD3ASCIIRules flag of IDNA
GOOD_OUTER = "[^\x00-\x2C\x2E-\x2F\x3A-\x40\x5B-\x60\x7B-\x7F-]"
GOOD_INNER = "[^\x00-\x2C\x2E-\x2F\x3A-\x40\x5B-\x60\x7B-\x7F]"
STD3_LABEL_RE = re.compile("^{0}({1}*{0})?$".format(GOOD_OUTER, GOOD_INNER))

# '.' equivalents, according to IDNA
UNICODE_DOT_RE = re.compile("[。．｡]")

# characters excluded from the localpart by Nodeprep
LOCAL_PROHIBITED_RE = re.compile("[\\s\"&'/:<>@\x00-\x1f\x7f]")

class JID(object):
    """JID.

    :Ivariables:
        - `local`: localpart of the JID
        - `domain`: domainpart of the JID
        - `resource`: resourcepart of the JID

    JID objects are immutable and hashable. They are also cached for better
    performance.
    """
    cache = weakref.WeakValueDictionary()
    __slots__ = ("local", "domain", "resource", "__weakref__",)
    def __new__(cls, local_or_jid = None, domain = None, resource = None,
                                                                check = True):
        """Create a new JID object or take one from the cache.

        :Parameters:
            - `local_or_jid`: localpart of the JID, JID object to copy, or
              string representation of the JID.
            - `domain`: domain part of the JID
            - `resource`: resource part of the JID
            - `check`: if `False` then JID is not checked for specifiaction
              compliance.
        """
        if isinstance(local_or_jid, JID):
            return local_or_jid

        if domain is None and resource is None:
            obj = cls.cache.get(str(local_or_jid))
            if obj:
                return obj

        obj = object.__new__(cls)

        if local_or_jid:
            local_or_jid = str(local_or_jid)
        if (local_or_jid and not domain and not resource):
            local, domain, resource = cls.__from_string(local_or_jid)
            cls.cache[local_or_jid] = obj
        else:
            if domain is None and resource is None:
                raise JIDError("At least domain must be given")
            if check:
                local = cls.__prepare_local(local_or_jid)
                domain = cls.__prepare_domain(domain)
                resource = cls.__prepare_resource(resource)
            else:
                local = local_or_jid or None
                resource = resource or None
        object.__setattr__(obj, "local", local)
        object.__setattr__(obj, "domain", domain)
        object.__setattr__(obj, "resource", resource)
        return obj

    def __setattr__(self, name, value):
        raise RuntimeError("JID objects are immutable!")

    @classmethod
    def __from_string(cls, data):
        """Return jid tuple from a string.

        :Parameters:
            - `data`: the JID string

        :Return: (localpart, domainpart, resourcepart) tuple"""
        parts1 = data.split("/", 1)
        parts2 = parts1[0].split("@", 1)
        if len(parts2) == 2:
            local = cls.__prepare_local(parts2[0])
            domain = cls.__prepare_domain(parts2[1])
        else:
            local = None
            domain = cls.__prepare_domain(parts2[0])
        if len(parts1) == 2:
            resource = cls.__prepare_resource(parts1[1])
        else:
            resource = None
        return (local, domain, resource)

    @staticmethod
    def __prepare_local(data):
        """Prepare localpart of the JID

        :raise JIDError: if the local name is invalid or too long."""
        if not data:
            return None
        local = str(data).lower()
        if LOCAL_PROHIBITED_RE.search(local):
            raise JIDError("Local part invalid: {0!r}".format(data))
        if len(local.encode("utf-8")) > 1023:
            raise JIDError("Local part too long")
        return local

    @staticmethod
    def __prepare_domain(data):
        """Prepare domainpart of the JID.

        :raise JIDError: if the domain name is invalid or too long.
        """
        if not data:
            raise JIDError("Domain must be given")
        data = str(data)
        if "[" in data:
            if data[0] == "[" and data[-1] == "]":
                return data.lower()
            raise JIDError("Invalid use of '[' or ']' in JID domainpart")
        data = UNICODE_DOT_RE.sub(".", data)
        data = data.rstrip(".")
        labels = data.split(".")
        try:
            labels = [idna.nameprep(label) for label in labels]
        except UnicodeError:
            raise JIDError("Domain name invalid")
        for label in labels:
            if not STD3_LABEL_RE.match(label):
                raise JIDError("Domain name invalid")
            try:
                idna.ToASCII(label)
            except UnicodeError:
                raise JIDError("Domain name invalid")
        domain = ".".join(labels)
        if len(domain.encode("utf-8")) > 1023:
            raise JIDError("Domain name too long")
        return domain

    @staticmethod
    def __prepare_resource(data):
        """Prepare the resourcepart of the JID.

        :raise JIDError: if the resource name is too long."""
        if not data:
            return None
        resource = str(data)
        if len(resource.encode("utf-8")) > 1023:
            raise JIDError("Resource name too long")
        return resource

    def __str__(self):
        result = self.domain
        if self.local:
            result = self.local + "@" + result
        if self.resource:
            result = result + "/" + self.resource
        return result

    def __repr__(self):
        return "JID({0!r})".format(str(self))

    def bare(self):
        """Make bare JID made by removing resource from current `self`.

        :return: new JID object without resource part."""
        if self.resource is None:
            return self
        return JID(self.local, self.domain, check = False)

    def with_resource(self, resource):
        """Make a full JID with the same localpart and domainpart as `self`
        and the given resource."""
        return JID(self.local, self.domain, resource)

    def __eq__(self, other):
        if other is None:
            return False
        elif isinstance(other, str):
            try:
                other = JID(other)
            except JIDError:
                return False
        elif not isinstance(other, JID):
            return False

        return (self.local == other.local
            and self.domain == other.domain
            and self.resource == other.resource)

    def __ne__(self, other):
        return not self == other

    def __lt__(self, other):
        if other is None:
            return False
        return str(self) < str(other)

    def __hash__(self):
        return hash(self.local) ^ hash(self.domain) ^ hash(self.resource)

# vi: sts=4 et sw=4
