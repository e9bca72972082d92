"""
Clinch commands (subcommand dispatch).

Overview
- Command: a named route with a description and a handler. the handler takes
  the remaining argv slice (whose first item is the command name) and returns
  an integer status; None is read as 0.
- Dispatcher: maps the first argument to a Command. at most one default command
  handles an empty input. unknown keys fail with a close-match suggestion.

Nesting is plain call nesting: a handler may build another Dispatcher or a
Parser and parse the slice it received.

    >>> dispatcher = Dispatcher("git")
    >>> dispatcher.command("commit").description("record changes").handle(commit)
    >>> dispatcher.default_command("status").handle(status)
    >>> sys.exit(dispatcher.parse(sys.argv))
"""
import sys

from .faults import CommandError, ConfigurationError, ErrorPolicy, ParsingError
from .parser import OFFSET, align, console, paint, suggest, tokenize
from .utils import InspectableType, Unset


class Command(metaclass=InspectableType):
    """
    Named command route.

    Properties
    - name, descr, is_default
    """
    __introspectable__ = ("name", "descr", "is_default")

    def __init__(self, name, /, *, default=False):
        if not isinstance(name, str):
            raise ConfigurationError(f"{type(self).__typename__} name must be a string")
        if not name:
            raise ConfigurationError(f"{type(self).__typename__} name cannot be empty")
        self._name = name
        self._descr = ""
        self._is_default = bool(default)
        self._handler = None

    def description(self, text, /):
        self._descr = str(text)
        return self

    def handle(self, callback, /):
        """
        bind the handler; it receives the argv slice starting at the command name.
        """
        if not callable(callback):
            raise ConfigurationError(f"{type(self).__typename__} {self._name!r} handler must be callable")
        self._handler = callback
        return self

    def _invoke(self, argv, /):
        if self._handler is None:
            raise ConfigurationError(f"cannot run command {self._name}: the handler was not set")
        status = self._handler(argv)
        return 0 if status is None else status

    def help(self):
        text = f"{OFFSET}{self._name}\t{self._descr}"
        if self._is_default:
            text += " (default)"
        return text


class Dispatcher(metaclass=InspectableType):
    """
    Command dispatcher: the first argument selects the command.

    Routing
    - argv[1] (or "" when absent) is looked up among the declared commands.
    - "" falls back to the default command when one was declared.
    - any other miss raises CommandError, handled according to the policy.

    Properties
    - program, colorful, commands (copy, in declaration order), default
    """
    __introspectable__ = ("program", "colorful", "commands", "default")
    __displayable__ = ("program", "colorful")

    def __init__(self, program, /, *, colorful=False):
        if not isinstance(program, str):
            raise TypeError(f"{type(self).__typename__} program must be a string")
        self._program = program
        self._colorful = bool(colorful)
        self._title = ""
        self._commands = []
        self._routes = {}
        self._default = None

    def title(self, text, /):
        self._title = str(text)
        return self

    def _register(self, command, /):
        if command.name in self._routes:
            raise ConfigurationError(f"cannot add command {command.name}: the name is already used")
        self._routes[command.name] = command
        self._commands.append(command)
        return command

    def command(self, name, /):
        return self._register(Command(name))

    def default_command(self, name, /):
        """
        declare the command used when no command name is given (only one).
        """
        if self._default is not None:
            raise ConfigurationError(f"cannot add default command {name}: {self._default.name} is already the default")
        self._default = self._register(Command(name, default=True))
        return self._default

    def parse(self, argv=Unset, /, policy=ErrorPolicy.EXIT):
        """
        route argv to a command and return the handler's status.
        """
        if not isinstance(policy, ErrorPolicy):
            raise TypeError("parse() policy must be an error-policy")
        tokens = tokenize(argv)
        key = tokens[0] if tokens else ""
        try:
            command = self._route(key)
        except ParsingError as error:
            if policy is ErrorPolicy.RETHROW:
                raise
            self.exit_with_help(str(error))
        return command._invoke(tokens)

    def _route(self, key, /):
        try:
            return self._routes[key]
        except KeyError:
            pass
        if not key:
            if self._default is not None:
                return self._default
            raise CommandError("command required", command=key)
        hint = suggest(key, self._routes)
        raise CommandError(
            f"unknown command {key}" + (f", {hint}" if hint else ""),
            command=key,
            hint=hint,
        )

    def help_message(self, error="", /):
        usage = f"{OFFSET}{self._program} {"[<command>]" if self._default is not None else "<command>"} [<args>...]"
        message = f"{error or self._title}\n\nUsage:\n{usage}\n"
        if self._commands:
            message += "\nCommands:\n" + "".join(
                line + "\n" for line in align(command.help() for command in self._commands)
            )
        return message

    def print_help(self, error="", /):
        console.print(
            paint(self.help_message(error), colorful=self._colorful, headline=bool(error), program=self._program),
            soft_wrap=True,
            highlight=False,
        )

    def exit_with_help(self, error="", /):
        self.print_help(error)
        sys.exit(1)


__all__ = (
    "Command",
    "Dispatcher",
)
