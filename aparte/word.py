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

"""Splitting of free text into words for in-line completion.

Every word keeps the spaces following it, so joining the words gives back
the original text. A run of separator characters (punctuation) is a word on
its own.
"""

__docformat__ = "restructuredtext en"

SEPARATORS = frozenset("/\\'\"&()*,;<=>?@[]^{|}")

INIT = 0
SPACE = 1
SEPARATOR = 2
WORD = 3

def _char_class(char):
    if char == " ":
        return SPACE
    elif char in SEPARATORS:
        return SEPARATOR
    else:
        return WORD

def split_words(text):
    """Iterate over the words of `text`.

    >>> list(split_words("a && b"))
    ['a ', '&& ', 'b']

    :Parameters:
        - `text`: the text to split
    :Types:
        - `text`: `str`

    :returntype: iterator of `str`"""
    state = INIT
    word_start = 0
    for index, char in enumerate(text):
        char_class = _char_class(char)
        if state == SPACE and char_class != SPACE:
            boundary = True
        elif state == SEPARATOR and char_class == WORD:
            boundary = True
        elif state == WORD and char_class == SEPARATOR:
            boundary = True
        else:
            boundary = False
        if boundary:
            yield text[word_start:index]
            word_start = index
        state = char_class
    if word_start != len(text):
        yield text[word_start:]

# vi: sts=4 et sw=4
