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

"""Input completion.

Each `AutoCompleteEvent` replaces the token at the caret with the next
candidate; the list of candidates is computed on the first request and kept
until a `ResetCompletionEvent` (sent when the user edits the input).

Command lines are completed by the command router. For other input the
nicknames of the current channel occupants are offered.
"""

__docformat__ = "restructuredtext en"

import logging

from ..command import Command, escape
from ..constants import COMMAND_DELIMITER
from ..cursor import Cursor
from ..events import AutoCompleteEvent, ResetCompletionEvent, CompletedEvent
from ..exceptions import CommandParseError
from ..mainloop.interfaces import event_handler
from ..word import split_words
from .conversation import ConversationMod, Channel
from . import Mod

logger = logging.getLogger("aparte.mods.completion")

class CompletionMod(Mod):
    """Completion state.

    :Ivariables:
        - `completions`: candidates for the current input, `None` when not
          computed yet
        - `current_completion`: index of the next candidate
        - `token_index`: index of the command line token being completed
        - `word_span`: start and end offsets of the word being completed,
          the end is `None` once a candidate was inserted (the caret
          marks the end of the inserted candidate then)
    :Types:
        - `completions`: `list` of `str`
        - `current_completion`: `int`
        - `token_index`: `int`
        - `word_span`: `tuple`
    """
    description = "Autocompletion"
    def __init__(self):
        self.completions = None
        self.current_completion = 0
        self.token_index = None
        self.word_span = None

    def reset_completion(self):
        """Forget the candidates."""
        self.completions = None
        self.current_completion = 0
        self.token_index = None
        self.word_span = None

    def build_completions(self, aparte, event):
        """Compute the candidates for the input of `event`."""
        raw_buf = event.raw_buf
        caret = event.cursor.index(raw_buf)
        if raw_buf.startswith(COMMAND_DELIMITER):
            try:
                command = Command.parse_with_cursor(raw_buf, caret,
                                                event.account, event.context)
                self.completions = aparte.commands.complete(aparte, raw_buf,
                                        caret, event.account, event.context)
            except CommandParseError as err:
                logger.debug("Cannot complete {0!r}: {1}".format(raw_buf,
                                                                        err))
                return
            self.token_index = command.cursor
            self.current_completion = 0
            return
        if event.account is None or not event.context:
            return
        guard = aparte.mods.get(ConversationMod)
        if guard is None:
            return
        with guard as conversations:
            channel = conversations.get(event.account, event.context)
            if not isinstance(channel, Channel):
                return
            occupants = sorted(channel.occupants.values())
        words = list(split_words(raw_buf[:caret]))
        if words:
            current_word = words[-1]
        else:
            current_word = ""
        if len(words) <= 1:
            append = ": "
        else:
            append = " "
        self.completions = [occupant.nick + append for occupant in occupants
                                if occupant.nick.startswith(current_word)]
        self.word_span = self._find_word(raw_buf, caret)
        self.current_completion = 0

    @staticmethod
    def _find_word(raw_buf, caret):
        """Find the word at the caret.

        :return: start and end offset of the word"""
        iter_index = 0
        for word in split_words(raw_buf):
            if iter_index < caret <= iter_index + len(word):
                return iter_index, iter_index + len(word)
            iter_index += len(word)
        return caret, caret

    def _complete_command(self, event, completion):
        """Replace the command token being completed with `completion`.

        :return: the new buffer and the caret offset at the end of the
            inserted token"""
        raw_buf = event.raw_buf
        try:
            command = Command.parse(raw_buf, event.account, event.context)
        except CommandParseError:
            return None, None
        command = command.replace_token(self.token_index, completion)
        tokens = command.tokens[:self.token_index + 1]
        new_index = len(COMMAND_DELIMITER
                            + " ".join(escape(token) for token in tokens))
        return command.assemble(), new_index

    def _complete_word(self, event, completion):
        """Replace the word being completed with `completion`.

        :return: the new buffer and the caret offset after the inserted
            word"""
        raw_buf = event.raw_buf
        start, end = self.word_span
        if end is None:
            end = event.cursor.index(raw_buf)
        self.word_span = (start, None)
        return (raw_buf[:start] + completion + raw_buf[end:],
                                                    start + len(completion))

    @event_handler(AutoCompleteEvent)
    def autocomplete(self, aparte, event):
        """Complete the input buffer and schedule a `CompletedEvent`.

        Repeated requests cycle through the candidates, replacing the
        previously inserted one."""
        if self.completions is None:
            self.build_completions(aparte, event)
        if not self.completions:
            return
        completion = self.completions[self.current_completion]
        if event.raw_buf.startswith(COMMAND_DELIMITER):
            completed_buf, new_index = self._complete_command(event,
                                                                completion)
        else:
            completed_buf, new_index = self._complete_word(event, completion)
        if completed_buf is None:
            return
        self.current_completion += 1
        self.current_completion %= len(self.completions)
        aparte.schedule(CompletedEvent(completed_buf,
                                Cursor.from_index(completed_buf, new_index)))

    @event_handler(ResetCompletionEvent)
    def _reset(self, aparte, event):
        # pylint: disable-msg=W0613
        self.reset_completion()

# vi: sts=4 et sw=4
