"""
Clinch faults (errors, warnings and error policies).

Scope
- ConfigurationError: programming mistakes in the declaration of a parser or a
  dispatcher. these are never recoverable and always propagate to the caller.
- ParsingError and its subclasses: recoverable failures caused by the user's
  input. they carry a message plus read-only context options (hint, option...).
- ConversionError: raised by the value converter when text does not fit a type.
- ConfigurationWarning: non-fatal declaration issues surfaced with warnings.warn.
- ErrorPolicy: how Parser.parse / Dispatcher.parse react to a ParsingError.

Tone
- messages are short, lowercased and technical (“unknown option '--foo'”).
"""
from enum import Enum
from types import MappingProxyType

from .utils import Unset, coalesce


class ConfigurationError(Exception):
    """
    raised when a parser, option or dispatcher is declared incorrectly.

    examples: duplicated names, an option without any name, an append binding on
    a non-repeatable option, or configuration after the first parse.
    """


class ConfigurationWarning(UserWarning):
    """
    non-fatal declaration issue (e.g., a required option that also declares a
    default value, which can never be applied).
    """


class ConversionError(ValueError):
    """
    raised when a text token cannot be converted into the requested type.
    """


class ParsingError(Exception):
    """
    base class for recoverable failures caused by the parsed input.

    attributes
    - message: the human readable headline (also used by str()).
    - options: read-only mapping with extra context (option name, token, hint...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message


class ProcessorError(ParsingError):
    """
    a token could not be applied to an option (unknown name, missing value,
    repeated non-repeatable option, conversion failure, missing required option).
    """


class CommandError(ParsingError):
    """
    the command key is missing or does not name a declared command.
    """


class InvalidFreeArgumentsCount(ParsingError):
    """
    more trailing (free) arguments were given than the parser allows.
    """

    def __init__(self, count, maximum, /, **options):
        super().__init__(
            f"invalid free arguments count, got {count} while maximum is {maximum}",
            count=count,
            maximum=maximum,
            **options,
        )
        self.count = count
        self.maximum = maximum


class ErrorPolicy(Enum):
    """
    reaction to a ParsingError raised while parsing.

    - EXIT: print the help text with the error message as headline and exit
      with status 1.
    - RETHROW: propagate the exception to the caller.
    """
    EXIT = "exit"
    RETHROW = "rethrow"


__all__ = (
    "ConfigurationError",
    "ConfigurationWarning",
    "ConversionError",
    "ParsingError",
    "ProcessorError",
    "CommandError",
    "InvalidFreeArgumentsCount",
    "ErrorPolicy",
)
