"""
Clinch parser (tokenizer, matcher and help rendering).

Overview
- Parser(program, mode="", /, *, colorful=False) owns an ordered list of
  options, the short/long name indices, an optional help option and one
  free-arguments collector.
- parse(argv) walks the tokens once, delivers values to the matched options,
  settles the options that never appeared (defaults, flags, required checks)
  and finally hands trailing tokens to the free-arguments collector.
- help_message()/print_help()/exit_with_help() render a plain help text:

    <error-or-title>

    Usage:
      <program> [<mode>] <usage tokens...>

    Options:
      -s, --long <TYPE>    description [default = X]

Token classes (first match wins)
- "--": every following token is a free argument.
- "--name" or "--name=value": long option.
- "-x...": short option (only the first character after the dash counts).
- anything else: the next undelivered positional, else a free argument.

Output
- help goes to stderr through a rich Console. with colorful=True the text is
  styled (headline, section labels, program name, metavars); override the
  palette with a __styles__ mapping in __main__.
"""
import difflib
import re
import shlex
import sys
import warnings
from collections import deque, defaultdict
from collections.abc import Iterable

from rich.console import Console
from rich.text import Text

from .faults import ConfigurationError, ConfigurationWarning, ErrorPolicy, ParsingError, ProcessorError
from .options import FreeArguments, Option
from .utils import InspectableType, Unset

console = Console(stderr=True)

OFFSET = "  "
TAB_WIDTH = 4


def align(lines, /):
    """
    Replace the first tab of every line so that the text after it starts on a
    common column: the rightmost tab position plus TAB_WIDTH.
    """
    lines = list(lines)
    right = max((line.index("\t") for line in lines if "\t" in line), default=0)
    return [
        line.replace("\t", " " * (right - line.index("\t") + TAB_WIDTH), 1) if "\t" in line else line
        for line in lines
    ]


def tokenize(argv, /):
    """
    Normalize parse() input into a list of argument tokens.

    - Unset: sys.argv without the program path.
    - str: a shell-like prompt (arguments only), split with shlex.
    - Iterable[str]: an argv-shaped sequence; its first item is the program path.
    """
    if argv is Unset:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        argv = list(argv)
        for token in argv:
            if not isinstance(token, str):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        return argv[1:]
    raise TypeError("parse() argument must be a string or an iterable of strings")


def suggest(name, candidates, /):
    """
    Return a short “did you mean” hint for an unknown name, or an empty string.
    """
    try:
        return "did you mean %r?" % difflib.get_close_matches(name, list(candidates), 1)[0]
    except IndexError:
        return ""


def paint(message, /, *, colorful=False, headline=False, program=""):
    """
    Turn a help message into a rich Text, styled when colorful is set.

    Palette keys
    - headline, error-headline, section-label, program-name, metavar, default
    """
    text = Text(message)
    if not colorful:
        return text

    styles = defaultdict(str, {
        "headline": "bold #FFFFFF",  # title line
        "error-headline": "bold #FF4DA6",  # friendly pinky error line
        "section-label": "bold #00E6FF",  # Usage: / Options: / Commands:
        "program-name": "bold #FF4D94",  # magenta-pink brand pop
        "metavar": "bold #FFD600",  # amber parameters
        "default": "italic #9CA3AF",  # muted gray defaults
    } | getattr(__import__("__main__"), "__styles__", {}))

    text.stylize(styles["error-headline" if headline else "headline"], 0, message.find("\n"))
    text.highlight_regex(r"(?m)^(?:Usage|Options|Commands):$", styles["section-label"])
    text.highlight_regex(r"<[^<>\s]+>", styles["metavar"])
    text.highlight_regex(r"\[default = [^\]]*\]", styles["default"])
    if program:
        text.highlight_regex(r"(?m)(?<=^" + OFFSET + r")" + re.escape(program) + r"(?=\s|$)", styles["program-name"])
    return text


class Parser(metaclass=InspectableType):
    """
    Declarative command-line parser.

    Declaration
    - add(*names) / flag(*names) / positional(name) return the new Option for
      fluent configuration; free_arguments(name) returns the collector.
    - add_help(*names) installs the help option (once) and returns the parser.

    Parsing
    - parse(argv=sys.argv, /, policy=ErrorPolicy.EXIT) returns 0 on success.
      ParsingError subclasses follow the policy, ConfigurationError always
      propagates. the first parse seals the parser and its options.

    Properties
    - program, mode, colorful, options (copy, in declaration order), help_option
    """
    __introspectable__ = ("program", "mode", "colorful", "options", "help_option")
    __displayable__ = ("program", "mode", "colorful")

    def __init__(self, program, mode="", /, *, colorful=False):
        if not isinstance(program, str):
            raise TypeError(f"{type(self).__typename__} program must be a string")
        if not isinstance(mode, str):
            raise TypeError(f"{type(self).__typename__} mode must be a string")
        self._program = program
        self._mode = mode
        self._colorful = bool(colorful)
        self._title = ""
        self._options = []
        self._positionals = []
        self._short = {}
        self._long = {}
        self._help_option = None
        self._free = FreeArguments()
        self._sealed = False

    def _guard(self):
        if self._sealed:
            raise ConfigurationError(f"{type(self).__typename__} {self._program!r} cannot be configured after parsing")

    def title(self, text, /):
        self._guard()
        self._title = str(text)
        return self

    def _register(self, option, /):
        self._guard()
        for index, key, prefix in (
            (self._long, option.long_name, "--"),
            (self._short, option.short_name, "-"),
        ):
            if key is not None and key in index:
                raise ConfigurationError(f"cannot add option {prefix}{key}: the name is already used")
        if option.long_name is not None:
            self._long[option.long_name] = option
        if option.short_name is not None:
            self._short[option.short_name] = option
        self._options.append(option)
        return option

    def add(self, *names):
        """
        declare a value-bearing named option, e.g. add("-o", "--output").
        """
        return self._register(Option(*names))

    def flag(self, *names):
        """
        declare a presence-only option. store() sinks receive True when the flag
        appears and False when it does not. Like any named option a flag
        consumes a following token that does not start with "-", and ignores it.
        """
        return self._register(Option(*names, flag=True))

    def positional(self, name, /):
        """
        declare the next positional argument (0-based, in declaration order).
        """
        self._guard()
        if any(option.name == name for option in self._positionals):
            raise ConfigurationError(f"cannot add positional {name}: the name is already used")
        option = Option(name, position=len(self._positionals))
        self._positionals.append(option)
        self._options.append(option)
        return option

    def free_arguments(self, name, /):
        self._guard()
        self._free._name = str(name)
        return self._free

    def add_help(self, *names):
        """
        install the help option: it prints the help text and exits with status 0.
        """
        self._guard()
        if self._help_option is not None:
            raise ConfigurationError("cannot add two help options")

        def helper(_):
            self.print_help()
            sys.exit(0)

        self._help_option = self.flag(*names).description("print this help and exit").handle(helper)
        return self

    def _seal(self):
        if self._sealed:
            return
        for option in self._options:
            if option.is_required and option.has_default:
                warnings.warn(ConfigurationWarning(
                    f"option {option.name} is required, its default value {option.default!r} is never used"
                ), stacklevel=3)
            option._seal()
        self._free._seal()
        self._sealed = True

    def parse(self, argv=Unset, /, policy=ErrorPolicy.EXIT):
        """
        parse an argv-shaped sequence (or a prompt string) and return 0.
        """
        if not isinstance(policy, ErrorPolicy):
            raise TypeError("parse() policy must be an error-policy")
        tokens = tokenize(argv)
        self._seal()
        try:
            self._parseargs(tokens)
        except ParsingError as error:
            if policy is ErrorPolicy.RETHROW:
                raise
            self.exit_with_help(str(error))
        return 0

    def _lookup(self, index, name, prefix, /):
        try:
            return index[name]
        except KeyError:
            hint = suggest(prefix + name, (prefix + key for key in index))
            raise ProcessorError(
                f"unknown option {prefix}{name}" + (f", {hint}" if hint else ""),
                option=prefix + name,
                hint=hint,
            ) from None

    def _parseargs(self, tokens, /):
        tokens = deque(tokens)
        unused = dict.fromkeys(self._options)
        positionals = deque(self._positionals)
        free = []

        def deliver(option, text):
            if option not in unused and not option.is_repeatable:
                raise ProcessorError(f"cannot parse option {option.name}: option is not repeatable", option=option.name)
            unused.pop(option, None)
            option._parse(text)

        while tokens:
            token = tokens.popleft()
            if token == "--":
                free.extend(tokens)
                break

            if token.startswith("--"):
                name, assigned, inline = token[2:].partition("=")
                option = self._lookup(self._long, name, "--")
            elif token.startswith("-"):
                option = self._lookup(self._short, token[1:2], "-")
                assigned = inline = ""
            elif positionals:
                deliver(positionals.popleft(), token)
                continue
            else:
                free.append(token)
                continue

            if option.is_flag and assigned:
                raise ProcessorError(f"cannot parse option {option.name}: flag does not take a value", option=option.name)
            elif assigned:
                value = inline
            elif tokens and not tokens[0].startswith("-"):
                value = tokens.popleft()
            else:
                value = ""
            # a flag swallows the looked-ahead token but only records presence
            deliver(option, "" if option.is_flag else value)

        for option in unused:
            option._resolve()

        self._free.parse(free)

    def _display_order(self):
        # positionals first, then required, then optional; sort is stable
        options = [option for option in self._options if option is not self._help_option]
        return sorted(options, key=lambda option: (not option.is_positional, not option.is_required))

    def help_message(self, error="", /):
        """
        return the help text, headed by the error message when one is given.
        """
        options = self._display_order()

        usage = OFFSET + self._program
        if self._mode:
            usage += " " + self._mode
        for option in options:
            usage += " " + option.usage()
        if free := self._free.usage():
            usage += " " + free

        message = f"{error or self._title}\n\nUsage:\n{usage}\n"

        if self._help_option is not None:
            options.insert(0, self._help_option)
        if options:
            message += "\nOptions:\n" + "".join(line + "\n" for line in align(option.help() for option in options))
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
    "Parser",
    "align",
)
