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

"""Selection of localized texts."""

__docformat__ = "restructuredtext en"

def get_best(items, preferred_languages = None):
    """Select the best localized item.

    Items in a language listed in `preferred_languages` win, the earlier
    the language on the list the better. Items with no language (`""` or
    `None`) are preferred over items in other, non-listed, languages.
    Among items of equal rank the first one wins.

    :Parameters:
        - `items`: (language, value) pairs or a language to value mapping
        - `preferred_languages`: language tags, most preferred first
    :Types:
        - `items`: iterable of (`str`, object) or `dict`
        - `preferred_languages`: `list` of `str`

    :Return: (language, value) tuple or `None` if `items` is empty.
    """
    if hasattr(items, "items"):
        items = items.items()
    preferred = list(preferred_languages or []) + [""]
    max_rank = len(preferred)
    best = None
    best_rank = None
    for lang, value in items:
        lang = lang or ""
        if lang in preferred:
            rank = preferred.index(lang)
        else:
            rank = max_rank
        if best is None or rank < best_rank:
            best = (lang, value)
            best_rank = rank
    return best

# vi: sts=4 et sw=4
