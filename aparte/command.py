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

"""User commands: tokenizer, declarative parsers and the command router.

A command line starts with the command delimiter (``/``) and consists of
space separated tokens. The first token is the command name, the others are
the arguments. Tokens may be quoted with single or double quotes and any
character may be escaped with a backslash::

    /msg "Alice Liddell" 'it\\'s me'

Commands are declared with the `command_def` decorator::

    @command_def("msg", "Usage: /msg <contact> [<message>]",
                    Arg("contact", JID, completion = contact_completion),
                    OptionalArg("message"))
    def msg(aparte, command, contact, message):
        ...

and registered at the `CommandRouter` which dispatches command lines and
computes completion candidates.
"""

__docformat__ = "restructuredtext en"

import logging
import textwrap

from .constants import COMMAND_DELIMITER
from .exceptions import MissingLeadingSlash, MissingClosingQuote
from .exceptions import MissingEscapedChar, CommandError
from .exceptions import UnknownCommandError, RegistryError
from .completion import rank

logger = logging.getLogger("aparte.command")

# tokenizer states
INITIAL = "initial"
DELIMITER = "delimiter"
SIMPLY_QUOTED = "simply-quoted"
DOUBLY_QUOTED = "doubly-quoted"
UNQUOTED = "unquoted"
UNQUOTED_ESCAPED = "unquoted-escaped"
SIMPLY_QUOTED_ESCAPED = "simply-quoted-escaped"
DOUBLY_QUOTED_ESCAPED = "doubly-quoted-escaped"

def _tokenize(raw, caret):
    """Split a command line into tokens.

    :Parameters:
        - `raw`: the command line
        - `caret`: caret position (code point offset)

    :return: (tokens, index of the token at the caret)
    """
    # pylint: disable=R0912
    tokens = []
    token = []
    state = INITIAL
    remaining = caret
    token_cursor = None
    for char in list(raw) + [None]:
        if state == INITIAL:
            if char != COMMAND_DELIMITER:
                raise MissingLeadingSlash(raw)
            state = DELIMITER
        elif state == DELIMITER:
            if char is None:
                break
            elif char == " ":
                pass
            elif char == "'":
                state = SIMPLY_QUOTED
            elif char == '"':
                state = DOUBLY_QUOTED
            elif char == "\\":
                state = UNQUOTED_ESCAPED
            else:
                token.append(char)
                state = UNQUOTED
        elif state == SIMPLY_QUOTED:
            if char is None:
                raise MissingClosingQuote(raw)
            elif char == "'":
                state = UNQUOTED
            elif char == "\\":
                state = SIMPLY_QUOTED_ESCAPED
            else:
                token.append(char)
        elif state == DOUBLY_QUOTED:
            if char is None:
                raise MissingClosingQuote(raw)
            elif char == '"':
                state = UNQUOTED
            elif char == "\\":
                state = DOUBLY_QUOTED_ESCAPED
            else:
                token.append(char)
        elif state == UNQUOTED:
            if char is None:
                tokens.append("".join(token))
                break
            elif char == "'":
                state = SIMPLY_QUOTED
            elif char == '"':
                state = DOUBLY_QUOTED
            elif char == "\\":
                state = UNQUOTED_ESCAPED
            elif char == " ":
                tokens.append("".join(token))
                token = []
                state = DELIMITER
            else:
                token.append(char)
        else:
            if char is None:
                raise MissingEscapedChar(raw)
            token.append(char)
            if state == UNQUOTED_ESCAPED:
                state = UNQUOTED
            elif state == SIMPLY_QUOTED_ESCAPED:
                state = SIMPLY_QUOTED
            else:
                state = DOUBLY_QUOTED

        if remaining == 0:
            if token_cursor is None and char is not None:
                token_cursor = len(tokens)
        else:
            remaining -= 1

    if token_cursor is None:
        if state == DELIMITER:
            token_cursor = len(tokens)
        else:
            token_cursor = len(tokens) - 1
    return tokens, token_cursor

def escape(arg):
    """Quote and escape a single token for a command line.

    Tokens with no special characters are left unmodified. Tokens with
    spaces or single quotes are wrapped in double quotes, tokens with double
    quotes are wrapped in single quotes. Backslashes and quote characters
    matching the wrapping quotes are escaped.

    :returntype: `str`"""
    quote = None
    escaped = []
    for char in arg:
        if char == "\\":
            escaped.append("\\\\")
        elif char == " ":
            if quote is None:
                quote = " "
            escaped.append(char)
        elif char == "'":
            if quote == "'":
                escaped.append("\\'")
            else:
                if quote != '"':
                    quote = '"'
                escaped.append(char)
        elif char == '"':
            if quote == '"':
                escaped.append('\\"')
            else:
                if quote != "'":
                    quote = "'"
                escaped.append(char)
        else:
            escaped.append(char)
    if quote == " " or not arg:
        quote = '"'
    if quote is None:
        return "".join(escaped)
    return quote + "".join(escaped) + quote

class Command(object):
    """Parsed command line.

    :Ivariables:
        - `name`: the command name
        - `args`: positional arguments
        - `cursor`: index of the token at the caret: 0 for the command name,
          ``k`` for ``args[k - 1]``. ``len(args) + 1`` means a new argument
          is being started.
        - `account`: the account the command was typed for
        - `context`: the conversation the command was typed in
    :Types:
        - `name`: `str`
        - `args`: `list` of `str`
        - `cursor`: `int`
        - `account`: `JID`
        - `context`: `str`
    """
    def __init__(self, name, args = None, cursor = 0, account = None,
                                                            context = None):
        self.name = name
        if args is None:
            self.args = []
        else:
            self.args = list(args)
        self.cursor = cursor
        self.account = account
        self.context = context

    @classmethod
    def parse_with_cursor(cls, raw, caret, account = None, context = None):
        """Parse a command line.

        :Parameters:
            - `raw`: the command line
            - `caret`: caret position as a code point offset in `raw`
            - `account`: the current account
            - `context`: the current conversation
        :Types:
            - `raw`: `str`
            - `caret`: `int`
            - `account`: `JID`
            - `context`: `str`

        :raise MissingLeadingSlash: if the line does not start with ``/``
        :raise MissingClosingQuote: on an unterminated quoted token
        :raise MissingEscapedChar: if the line ends with a backslash
        :returntype: `Command`"""
        tokens, token_cursor = _tokenize(raw, caret)
        if not tokens:
            tokens = [""]
        return cls(tokens[0], tokens[1:], token_cursor, account, context)

    @classmethod
    def parse(cls, raw, account = None, context = None):
        """Parse a command line, with the caret at end of input."""
        return cls.parse_with_cursor(raw, len(raw), account, context)

    @property
    def tokens(self):
        """The command name followed by the arguments."""
        return [self.name] + self.args

    def is_appending(self):
        """Check if the caret is past the last token, starting a new one."""
        return self.cursor >= len(self.args) + 1

    def current_token(self):
        """Return the text of the token at the caret (empty string when
        a new token is being started)."""
        tokens = self.tokens
        if self.cursor < len(tokens):
            return tokens[self.cursor]
        return ""

    def replace_token(self, index, value):
        """Return a copy of the command with the token at `index` replaced
        by `value` (or appended when `index` is past the last token).

        :returntype: `Command`"""
        tokens = self.tokens
        if index < len(tokens):
            tokens[index] = value
        else:
            tokens.append(value)
        return Command(tokens[0], tokens[1:], index, self.account,
                                                                self.context)

    def assemble(self):
        """Build the command line back.

        :returntype: `str`"""
        if not self.name and not self.args:
            return COMMAND_DELIMITER
        tokens = [escape(token) for token in self.tokens]
        return COMMAND_DELIMITER + " ".join(tokens)

    def __eq__(self, other):
        if not isinstance(other, Command):
            return NotImplemented
        return (self.name == other.name and self.args == other.args
                    and self.cursor == other.cursor)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return "Command({0!r}, {1!r}, cursor={2!r})".format(self.name,
                                                    self.args, self.cursor)

class Arg(object):
    """Required positional command argument.

    :Ivariables:
        - `name`: argument name, the keyword the parsed value is passed to
          the handler with
        - `type`: callable converting the string to the argument value,
          raising `ValueError` on invalid input
        - `completion`: completion provider, called as
          ``completion(aparte, command)``, returning a list of candidates
    """
    # pylint: disable=W0622
    def __init__(self, name, type = str, completion = None):
        self.name = name
        self.type = type
        self.completion = completion

    def convert(self, value):
        """Convert the argument from its string form.

        :raise CommandError: on invalid value."""
        try:
            return self.type(value)
        except (ValueError, TypeError) as err:
            raise CommandError("Invalid format for {0} argument: {1}"
                                                    .format(self.name, err))

    def missing(self):
        """Return the value for a missing argument.

        :raise CommandError: always, the argument is required"""
        raise CommandError("Missing {0} argument".format(self.name))

    def get_completions(self, aparte, command):
        """Call the completion provider.

        :returntype: `list` of `str`"""
        if self.completion is None:
            return []
        return list(self.completion(aparte, command))

class OptionalArg(Arg):
    """Optional positional command argument."""
    # pylint: disable=W0622
    def __init__(self, name, type = str, completion = None, default = None):
        Arg.__init__(self, name, type, completion)
        self.default = default

    def missing(self):
        return self.default

class NamedArg(Arg):
    """Optional ``name=value`` argument, allowed at any position."""
    def extract(self, args):
        """Remove the argument from `args`.

        :return: the converted value or `None`
        :raise CommandError: on repeated or invalid value."""
        prefix = self.name + "="
        matching = [arg for arg in args if arg.startswith(prefix)]
        if not matching:
            return None
        if len(matching) > 1:
            raise CommandError("Multiple occurrences of {0} argument"
                                                        .format(self.name))
        args.remove(matching[0])
        return self.convert(matching[0][len(prefix):])

class SubCommand(Arg):
    """Argument selecting a sub-command.

    The rest of the command line is handled by the selected child parser.

    :Ivariables:
        - `children`: child parsers by name
    :Types:
        - `children`: `dict` of `str` -> `CommandParser`
    """
    def __init__(self, name, children):
        Arg.__init__(self, name)
        self.children = {}
        for child in children:
            if not isinstance(child, CommandParser):
                child = CommandParser.from_function(child)
            self.children[child.name] = child

    def get_child(self, name):
        """Return the child parser for `name`.

        :raise CommandError: on unknown sub-command."""
        try:
            return self.children[name]
        except KeyError:
            raise CommandError("Invalid subcommand {0}".format(name))

    def get_completions(self, aparte, command):
        return list(self.children)

def command_def(name, help, *args):
    """Method decorator generator for decorating command handlers.

    The decorated function is called as ``handler(aparte, command,
    **values)`` where `values` are the parsed arguments. It reports
    a failure by raising `CommandError`.

    :Parameters:
        - `name`: command name
        - `help`: usage text
        - `args`: argument declarations
    :Types:
        - `name`: `str`
        - `help`: `str`
        - `args`: `Arg` instances
    """
    # pylint: disable=W0622
    def decorator(func):
        """The decorator"""
        func._aparte_command = (name, help, args)
        return func
    return decorator

class CommandParser(object):
    """Command declaration: name, usage, arguments and the handler.

    :Ivariables:
        - `name`: command name
        - `help`: usage text
        - `args`: argument declarations
        - `handler`: the handler function
    """
    # pylint: disable=W0622
    def __init__(self, name, help, args, handler):
        self.name = name
        self.help = help
        self.args = list(args)
        self.handler = handler
        self.positional = [arg for arg in self.args
                                            if not isinstance(arg, NamedArg)]
        sub_commands = [index for index, arg in enumerate(self.positional)
                                            if isinstance(arg, SubCommand)]
        if sub_commands and sub_commands[0] != len(self.positional) - 1:
            raise ValueError("Sub-command must be the last positional"
                                                                " argument")

    @classmethod
    def from_function(cls, func):
        """Build a parser for a function (or a bound method) decorated with
        `command_def`."""
        # pylint: disable=W0212
        name, help, args = func._aparte_command
        return cls(name, help, args, func)

    @property
    def completions(self):
        """Completion providers, one slot per positional argument.

        :returntype: `list` of callables or `None`"""
        result = []
        for arg in self.positional:
            if isinstance(arg, SubCommand):
                result.append(arg.get_completions)
            elif arg.completion is not None:
                result.append(arg.get_completions)
            else:
                result.append(None)
        return result

    def get_help(self):
        """Return the usage text, including the sub-commands usage."""
        lines = [self.help]
        for arg in self.positional:
            if isinstance(arg, SubCommand):
                for child in arg.children.values():
                    lines.append("")
                    lines.append(textwrap.indent(child.get_help(), "\t"))
        return "\n".join(lines)

    def dispatch(self, aparte, command):
        """Parse the command arguments and call the handler (or dispatch to
        a sub-command).

        :raise CommandError: on invalid arguments or handler failure.
        :return: the handler result"""
        args = list(command.args)
        values = {}
        for arg in self.args:
            if isinstance(arg, NamedArg):
                values[arg.name] = arg.extract(args)
        for index, arg in enumerate(self.positional):
            if isinstance(arg, SubCommand):
                if index >= len(args):
                    arg.missing()
                child = arg.get_child(args[index])
                logger.debug("Dispatching {0!r} to sub-command {1!r}".format(
                                                        self.name, child.name))
                sub_command = Command(args[index], args[index + 1:], 0,
                                            command.account, command.context)
                return child.dispatch(aparte, sub_command)
            if index < len(args):
                values[arg.name] = arg.convert(args[index])
            else:
                values[arg.name] = arg.missing()
        return self.handler(aparte, command, **values)

    def get_completions(self, aparte, command, position):
        """Compute completion candidates for the token at `position`.

        :Parameters:
            - `aparte`: the application context
            - `command`: the parsed command line
            - `position`: token index (1 for the first argument)

        :returntype: `list` of `str`"""
        index = position - 1
        for sub_index, arg in enumerate(self.positional[:index]):
            if not isinstance(arg, SubCommand):
                continue
            if sub_index >= len(command.args):
                return []
            child = arg.children.get(command.args[sub_index])
            if child is None:
                return []
            child_position = position - sub_index - 1
            sub_command = Command(command.args[sub_index],
                                    command.args[sub_index + 1:],
                                    child_position,
                                    command.account, command.context)
            return child.get_completions(aparte, sub_command, child_position)
        if index < 0 or index >= len(self.positional):
            return []
        return self.positional[index].get_completions(aparte, command)

class CommandRouter(object):
    """Registry of command parsers, dispatching command lines and computing
    completions.

    :Ivariables:
        - `parsers`: registered parsers by command name
    """
    def __init__(self):
        self.parsers = {}

    def register(self, parser):
        """Register a command parser.

        :Parameters:
            - `parser`: the parser or a `command_def` decorated function
        :Types:
            - `parser`: `CommandParser`

        :raise RegistryError: if a command with the same name is already
            registered."""
        if not isinstance(parser, CommandParser):
            parser = CommandParser.from_function(parser)
        if parser.name in self.parsers:
            raise RegistryError("Command {0} already registered"
                                                        .format(parser.name))
        logger.debug("Registering command {0!r}".format(parser.name))
        self.parsers[parser.name] = parser

    def get(self, name):
        """Return the parser registered for `name` or `None`."""
        return self.parsers.get(name)

    def names(self):
        """Return names of the registered commands in registration order."""
        return list(self.parsers)

    def dispatch(self, aparte, raw, caret = None, account = None,
                                                            context = None):
        """Parse and execute a command line.

        :Parameters:
            - `aparte`: the application context
            - `raw`: the command line or an already parsed `Command`
            - `caret`: caret position, the end of line by default
        :Types:
            - `raw`: `str` or `Command`
            - `caret`: `int`

        :raise CommandParseError: if `raw` cannot be tokenized
        :raise CommandError: on unknown command or handler failure
        :return: the handler result"""
        if isinstance(raw, Command):
            command = raw
        else:
            if caret is None:
                caret = len(raw)
            command = Command.parse_with_cursor(raw, caret, account, context)
        parser = self.parsers.get(command.name)
        if parser is None:
            raise UnknownCommandError(command.name)
        logger.debug("Dispatching {0!r}".format(command))
        return parser.dispatch(aparte, command)

    def get_candidates(self, aparte, command):
        """Return the unranked completion candidates for the token at the
        caret, in provider order.

        :returntype: `list` of `str`"""
        if command.cursor == 0:
            return self.names()
        parser = self.parsers.get(command.name)
        if parser is None:
            return []
        return parser.get_completions(aparte, command, command.cursor)

    def complete(self, aparte, raw, caret, account = None, context = None):
        """Compute completion candidates for a command line.

        When the caret is on an existing token the candidates are ranked
        against its text and non-matching ones are dropped. When a new token
        is being started all candidates are returned in provider order.

        :Parameters:
            - `aparte`: the application context
            - `raw`: the command line
            - `caret`: caret position (code point offset)

        :raise CommandParseError: if `raw` cannot be tokenized
        :returntype: `list` of `str`"""
        command = Command.parse_with_cursor(raw, caret, account, context)
        candidates = self.get_candidates(aparte, command)
        if command.is_appending():
            return candidates
        return rank(command.current_token(), candidates)

# vi: sts=4 et sw=4
