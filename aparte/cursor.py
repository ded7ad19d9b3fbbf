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

"""Cursor positions in rendered strings.

A `Cursor` counts user-perceived characters (extended grapheme clusters),
so ``Cursor(1)`` on ``"être"`` points at ``"t"`` whatever the normalization
form of the leading ``"ê"`` is. Python string offsets (code point indices)
and UTF-8 byte offsets are converted to and from cursors exactly at every
cluster boundary.
"""

__docformat__ = "restructuredtext en"

import regex

GRAPHEME_RE = regex.compile(r"\X")

def grapheme_offsets(text):
    """Iterate over (start, end) code point offsets of the grapheme
    clusters of `text`."""
    for match in GRAPHEME_RE.finditer(text):
        yield match.span()

def grapheme_count(text):
    """Number of user-perceived characters in `text`."""
    return len(GRAPHEME_RE.findall(text))

class Cursor(object):
    """Position in a string, expressed in grapheme clusters.

    :Ivariables:
        - `value`: number of clusters before the position
    :Types:
        - `value`: `int`
    """
    __slots__ = ("value",)
    def __init__(self, value = 0):
        if isinstance(value, Cursor):
            value = value.value
        if value < 0:
            raise ValueError("Negative cursor")
        self.value = value

    @classmethod
    def from_index(cls, text, index):
        """Make a cursor from a code point offset.

        An offset inside a multi-codepoint cluster maps to that cluster.

        :Parameters:
            - `text`: the string
            - `index`: code point offset, `0` to ``len(text)``
        :Types:
            - `text`: `str`
            - `index`: `int`

        :raise ValueError: if `index` is out of the string.
        :returntype: `Cursor`"""
        value = 0
        for start, end in grapheme_offsets(text):
            if start <= index < end:
                return cls(value)
            value += 1
        if index == len(text):
            return cls(value)
        raise ValueError("Index {0} out of the string".format(index))

    @classmethod
    def from_byte_index(cls, text, byte_index):
        """Make a cursor from an UTF-8 byte offset.

        :raise ValueError: if `byte_index` is out of the string or not on
            a code point boundary.
        :returntype: `Cursor`"""
        encoded = text.encode("utf-8")
        if byte_index < 0 or byte_index > len(encoded):
            raise ValueError("Byte index {0} out of the string"
                                                        .format(byte_index))
        try:
            prefix = encoded[:byte_index].decode("utf-8")
        except UnicodeDecodeError:
            raise ValueError("Byte index {0} is not on a character boundary"
                                                        .format(byte_index))
        return cls.from_index(text, len(prefix))

    def index(self, text):
        """Return the code point offset of the cursor in `text`.

        A cursor past the end of the string maps to ``len(text)``.

        :returntype: `int`"""
        for value, (start, dummy) in enumerate(grapheme_offsets(text)):
            if value == self.value:
                return start
        return len(text)

    def try_index(self, text):
        """Return the code point offset of the cursor in `text`.

        :raise ValueError: if the cursor is past the end of the string.
        :returntype: `int`"""
        count = 0
        for value, (start, dummy) in enumerate(grapheme_offsets(text)):
            if value == self.value:
                return start
            count += 1
        if count == self.value:
            return len(text)
        raise ValueError("Cursor {0} out of the string".format(self.value))

    def byte_index(self, text):
        """Return the UTF-8 byte offset of the cursor in `text`.

        :returntype: `int`"""
        return len(text[:self.index(text)].encode("utf-8"))

    def __int__(self):
        return self.value

    def __index__(self):
        return self.value

    def __repr__(self):
        return "Cursor({0})".format(self.value)

    def __add__(self, other):
        return Cursor(self.value + int(other))

    def __sub__(self, other):
        return Cursor(self.value - int(other))

    def __eq__(self, other):
        if isinstance(other, Cursor):
            return self.value == other.value
        if isinstance(other, int):
            return self.value == other
        return NotImplemented

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        return self.value < int(other)

    def __le__(self, other):
        return self.value <= int(other)

    def __gt__(self, other):
        return self.value > int(other)

    def __ge__(self, other):
        return self.value >= int(other)

    def __hash__(self):
        return hash(self.value)

# vi: sts=4 et sw=4
