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

"""Fuzzy matching of completion candidates.

A candidate matches a pattern if the pattern characters appear in the
candidate in the same order (a subsequence). Matches are scored so that
consecutive characters, characters starting a word and characters close to
the candidate start give higher scores. Matching is case-insensitive unless
the pattern contains an upper case character.
"""

__docformat__ = "restructuredtext en"

import logging

logger = logging.getLogger("aparte.completion")

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1

BONUS_BOUNDARY = SCORE_MATCH // 2
BONUS_NON_WORD = SCORE_MATCH // 2
BONUS_CAMEL = BONUS_BOUNDARY + SCORE_GAP_EXTENSION
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)
BONUS_FIRST_CHAR_MULTIPLIER = 2

CHAR_NON_WORD = 0
CHAR_LOWER = 1
CHAR_UPPER = 2
CHAR_NUMBER = 3

def _char_class(char):
    if char.islower():
        return CHAR_LOWER
    elif char.isupper():
        return CHAR_UPPER
    elif char.isdigit():
        return CHAR_NUMBER
    elif char.isalpha():
        return CHAR_LOWER
    return CHAR_NON_WORD

def _bonus(prev_class, char_class):
    """Bonus for matching a character of `char_class` following
    a character of `prev_class`."""
    if prev_class == CHAR_NON_WORD and char_class != CHAR_NON_WORD:
        return BONUS_BOUNDARY
    elif prev_class == CHAR_LOWER and char_class == CHAR_UPPER:
        return BONUS_CAMEL
    elif prev_class != CHAR_NUMBER and char_class == CHAR_NUMBER:
        return BONUS_CAMEL
    elif char_class == CHAR_NON_WORD:
        return BONUS_NON_WORD
    return 0

def _fold(char):
    """Lower case a character, keeping the text length unchanged."""
    lowered = char.lower()
    if len(lowered) == 1:
        return lowered
    return char

def _find_window(text, pattern):
    """Find the shortest window of `text` ending at the first complete
    subsequence match of `pattern`.

    :return: (start, end) indices (end exclusive) or `None`."""
    pattern_index = 0
    end = None
    for index, char in enumerate(text):
        if char == pattern[pattern_index]:
            pattern_index += 1
            if pattern_index == len(pattern):
                end = index + 1
                break
    if end is None:
        return None
    pattern_index = len(pattern) - 1
    start = end - 1
    for index in range(end - 1, -1, -1):
        if text[index] == pattern[pattern_index]:
            pattern_index -= 1
            if pattern_index < 0:
                start = index
                break
    return start, end

def _score_window(original, text, pattern, start, end):
    """Compute the score of the match of `pattern` in `text[start:end]`."""
    pattern_index = 0
    score = 0
    in_gap = False
    consecutive = 0
    first_bonus = 0
    if start > 0:
        prev_class = _char_class(original[start - 1])
    else:
        prev_class = CHAR_NON_WORD
    for index in range(start, end):
        char_class = _char_class(original[index])
        if text[index] == pattern[pattern_index]:
            score += SCORE_MATCH
            bonus = _bonus(prev_class, char_class)
            if consecutive == 0:
                first_bonus = bonus
            else:
                if bonus == BONUS_BOUNDARY:
                    first_bonus = bonus
                bonus = max(bonus, first_bonus, BONUS_CONSECUTIVE)
            if pattern_index == 0:
                score += bonus * BONUS_FIRST_CHAR_MULTIPLIER
            else:
                score += bonus
            in_gap = False
            consecutive += 1
            pattern_index += 1
        else:
            if in_gap:
                score += SCORE_GAP_EXTENSION
            else:
                score += SCORE_GAP_START
            in_gap = True
            consecutive = 0
            first_bonus = 0
        prev_class = char_class
    return score

def fuzzy_match(candidate, pattern):
    """Score `candidate` against `pattern`.

    :Parameters:
        - `candidate`: the text to match
        - `pattern`: the partial text typed by the user
    :Types:
        - `candidate`: `str`
        - `pattern`: `str`

    :return: the score (higher is better) or `None` if `candidate` does not
        match. An empty pattern matches everything with score 0.
    :returntype: `int`"""
    if not pattern:
        return 0
    if pattern.lower() == pattern:
        text = [_fold(char) for char in candidate]
    else:
        text = list(candidate)
    window = _find_window(text, pattern)
    if window is None:
        return None
    start, end = window
    return _score_window(candidate, text, pattern, start, end)

def rank(partial, candidates):
    """Rank completion candidates against the partial text.

    Non-matching candidates are dropped, the others are sorted by
    descending score. Candidates with equal scores keep their relative
    order.

    :Parameters:
        - `partial`: the current text of the token being completed
        - `candidates`: the candidates in provider order
    :Types:
        - `partial`: `str`
        - `candidates`: iterable of `str`

    :returntype: `list` of `str`"""
    scored = []
    for candidate in candidates:
        score = fuzzy_match(candidate, partial)
        if score is not None:
            scored.append((score, candidate))
    scored.sort(key = lambda item: -item[0])
    logger.debug("Ranked {0!r}: {1!r}".format(partial, scored))
    return [candidate for dummy, candidate in scored]

# vi: sts=4 et sw=4
