"""
Clinch option declarations.

Overview
- Slot[_T]: a caller-owned box used as a store() sink.
- Option[_T]: a named or positional argument processor. it is configured with
  fluent calls (store/handle/append, required/optional/repeatable,
  default_value, value_type, description) until its parser seals it on the
  first parse; afterwards it only exposes read-only properties.
- FreeArguments: the collector for trailing tokens (after "--", or after every
  positional slot was delivered).

Option names
- short: "-x" (one letter or digit)
- long: "--name", "--long-name" (unicode letters allowed, no underscores)
- positional: a bare identifier ("input", "file_name"), declared via
  Parser.positional(name).

Bindings
- store(slot) / store(obj, "attr") / store(mapping, "key"): overwrite a sink with
  the converted value on every occurrence. flags write True when present and
  False when absent.
- handle(callback, type=...): call back with the raw text, or with the
  converted value when a type is given.
- append(sequence, type=...): append on every occurrence (repeatable only).

Examples
    >>> count = Slot(0)
    >>> parser.add("-c", "--count").store(count).default_value(1).value_type("INTEGER")
    >>> parser.flag("-v", "--verbose").handle(lambda text: print("verbose"))
"""
import builtins
import functools
import math
import re
from collections.abc import MutableMapping, MutableSequence

from .conversions import convert, convertible, render
from .faults import ConfigurationError, ConversionError, InvalidFreeArgumentsCount, ProcessorError
from .utils import InspectableType, Unset, coalesce

_SHORT = re.compile(r"-[^\W_]")
_LONG = re.compile(r"--[^\W\d_](-?[^\W_]+)*")
_POSITIONAL = re.compile(r"[^\W\d][\w-]*")


class Slot[_T]:
    """
    Mutable box receiving the value of a store() binding.

    The conversion type is the explicit type, else the type of the initial value,
    else str.

        >>> port = Slot(8080)
        >>> port.type
        <class 'int'>
    """
    __slots__ = ("value", "type")

    def __init__(self, value=None, /, type=Unset):
        self.value = value
        self.type = coalesce(type, builtins.type(value) if value is not None else str)

    def __repr__(self):
        return f"Slot({self.value!r}, type={self.type.__name__})"


def _configurable(method, /):
    """
    Wrap a fluent configuration method: reject calls once the owner is sealed,
    and return the owner so calls can be chained.
    """

    @functools.wraps(method)
    def wrapper(self, /, *args, **kwargs):
        if self._sealed:
            raise ConfigurationError(
                f"{type(self).__typename__} {self._name!r} cannot be configured after parsing"
            )
        method(self, *args, **kwargs)
        return self

    return wrapper


def _sink(owner, target, attribute, type, /):
    """
    Build the (setter, type) pair of a store() binding.
    """
    if attribute is Unset:
        if not isinstance(target, Slot):
            raise ConfigurationError(
                f"{builtins.type(owner).__typename__} {owner._name!r} store() target must be a slot "
                "when no attribute is given"
            )

        def setter(value):
            target.value = value

        return setter, coalesce(type, target.type)

    if isinstance(target, MutableMapping):
        current = target.get(attribute)

        def setter(value):
            target[attribute] = value

    else:
        if not isinstance(attribute, str):
            raise ConfigurationError(
                f"{builtins.type(owner).__typename__} {owner._name!r} store() attribute must be a string"
            )
        current = getattr(target, attribute, None)

        def setter(value):
            setattr(target, attribute, value)

    return setter, coalesce(type, builtins.type(current) if current is not None else str)


class Option[_T](metaclass=InspectableType):
    """
    Named or positional argument processor.

    Identity (fixed at construction)
    - short_name: the letter of "-x" (or None)
    - long_name: the word of "--word" (or None)
    - position: 0-based index among positional declarations (or None)
    - name: display name ("--word", "-x", or the bare positional name)

    Attributes (configured fluently, read-only once sealed)
    - is_required, is_flag, is_repeatable, default (text or None), metavar, descr

    Notes
    - Options are created by Parser.add/flag/positional; direct construction is
      possible but the option is then not registered anywhere.
    - A flag receives empty text when parsed; the parser discards any value
      token it looked ahead to.
    """
    __introspectable__ = (
        "name",
        "short_name",
        "long_name",
        "position",
        "metavar",
        "descr",
        "default",
        "is_required",
        "is_flag",
        "is_repeatable",
    )

    def __init__(self, *names, position=Unset, flag=False):
        self._short_name = None
        self._long_name = None
        self._position = coalesce(position)
        self._is_flag = bool(flag)
        self._is_required = False
        self._is_repeatable = False
        self._default = None
        self._metavar = ""
        self._descr = ""
        self._binding = None
        self._sealed = False

        if not names:
            raise ConfigurationError(f"{type(self).__typename__} must specify at least one name")
        for name in names:
            if not isinstance(name, str):
                raise ConfigurationError(f"{type(self).__typename__} names must be strings")

        if position is not Unset:
            if not isinstance(position, int) or position < 0:
                raise ConfigurationError(f"{type(self).__typename__} position must be a non-negative integer")
            if len(names) != 1 or not _POSITIONAL.fullmatch(names[0]):
                raise ConfigurationError(
                    f"positional {type(self).__typename__} requires exactly one bare name, got {names!r}"
                )
            if self._is_flag:
                raise ConfigurationError(f"positional {type(self).__typename__} {names[0]!r} cannot be a flag")
            self._name = names[0]
            return

        for name in names:
            if _SHORT.fullmatch(name):
                if self._short_name is not None:
                    raise ConfigurationError(f"{type(self).__typename__} cannot have two short names")
                self._short_name = name[1:]
            elif _LONG.fullmatch(name):
                if self._long_name is not None:
                    raise ConfigurationError(f"{type(self).__typename__} cannot have two long names")
                self._long_name = name[2:]
            else:
                raise ConfigurationError(
                    f"{type(self).__typename__} name {name!r} must be a valid shell-style option name"
                )
        self._name = f"--{self._long_name}" if self._long_name is not None else f"-{self._short_name}"

    @property
    def is_positional(self):
        return self._position is not None

    @property
    def has_default(self):
        return self._default is not None

    def _bind(self, kind, consumer, type, /):
        if type is not Unset and not convertible(type):
            raise ConfigurationError(
                f"{builtins.type(self).__typename__} {self._name!r} cannot convert text to "
                f"{getattr(type, "__name__", type)!r}"
            )
        self._binding = (kind, consumer, type)

    @_configurable
    def store(self, target, attribute=Unset, /, *, type=Unset):
        """
        overwrite a sink (slot, mapping item or object attribute) on every parse.
        """
        setter, type = _sink(self, target, attribute, type)
        self._bind("store", setter, type)

    @_configurable
    def handle(self, callback, /, *, type=Unset):
        """
        call back with the raw text, or with the value converted to type.
        """
        if not callable(callback):
            raise ConfigurationError(f"{builtins.type(self).__typename__} {self._name!r} handler must be callable")
        self._bind("handle", callback, type)

    @_configurable
    def append(self, sequence, /, *, type=str):
        """
        append the converted value to a sequence on every occurrence.
        """
        if not self._is_repeatable:
            raise ConfigurationError(
                f"{builtins.type(self).__typename__} {self._name!r} must be repeatable to append values"
            )
        if not isinstance(sequence, MutableSequence):
            raise ConfigurationError(
                f"{builtins.type(self).__typename__} {self._name!r} append() target must be a mutable sequence"
            )
        self._bind("append", sequence.append, type)

    @_configurable
    def required(self):
        self._is_required = True

    @_configurable
    def optional(self):
        self._is_required = False

    @_configurable
    def repeatable(self):
        self._is_repeatable = True

    @_configurable
    def default_value(self, value, /):
        """
        declare the value used when the option is absent (or given without value).
        the value is stored in its text form.
        """
        if not (text := render(value)):
            raise ConfigurationError(f"{type(self).__typename__} {self._name!r} default value cannot be empty")
        self._default = text

    @_configurable
    def value_type(self, label, /):
        self._metavar = str(label)

    @_configurable
    def description(self, text, /):
        self._descr = str(text)

    def _seal(self):
        self._sealed = True

    def _parse(self, text="", /):
        """
        apply the binding to a token (empty text means "no value given").
        """
        if self._binding is None:
            raise ConfigurationError(f"cannot parse option {self._name}: the handler was not set")

        kind, consumer, type = self._binding

        if self._is_flag:
            if kind == "handle" and type is Unset:
                consumer(text)
            else:
                consumer(True)
            return

        if not text:
            if self._default is None:
                raise ProcessorError(f"cannot parse option {self._name}: argument required", option=self._name)
            text = self._default

        if type is Unset:
            consumer(text)
            return

        try:
            value = convert(text, type)
        except ConversionError as error:
            raise ProcessorError(
                f"cannot parse option {self._name}: {error}",
                option=self._name,
                token=text,
            ) from error
        consumer(value)

    def _resolve(self):
        """
        settle an option that never appeared in the input.
        """
        if self._is_required:
            raise ProcessorError(f"cannot parse option {self._name}: option is required", option=self._name)
        if self._is_flag:
            if self._binding is not None and self._binding[0] == "store":
                self._binding[1](False)
            return
        if self._default is not None:
            self._parse()

    def usage(self):
        """
        usage-line fragment, e.g. "[--count <INTEGER>]" or "input <FILE>".
        """
        if self.is_positional or self._long_name is not None:
            text = self._name
        else:
            text = f"-{self._short_name}"
        if not self._is_flag and self._metavar:
            text += f" <{self._metavar}>"
        return text if self._is_required else f"[{text}]"

    def help(self):
        """
        help line with a single tab separating the names from the description.
        """
        if self.is_positional:
            names = self._name
        else:
            names = ", ".join(
                name for name in (
                    f"-{self._short_name}" if self._short_name is not None else None,
                    f"--{self._long_name}" if self._long_name is not None else None,
                ) if name
            )
        metavar = "flag" if self._is_flag else self._metavar
        text = f"  {names}"
        if metavar:
            text += f" <{metavar}>"
        text += f"\t{self._descr}"
        if self._default is not None and not self._is_flag:
            text += f" [default = {self._default}]"
        if self._is_repeatable:
            text += " (repeatable)"
        return text


class FreeArguments(metaclass=InspectableType):
    """
    Collector for trailing tokens.

    - maximum: 0 (no free arguments allowed, the default), a positive count, or
      math.inf once unlimited() was called.
    - a single consumer (store or handle); the last bound one wins.
    """
    __introspectable__ = ("name", "maximum")

    def __init__(self, name="", /):
        self._name = name
        self._maximum = 0
        self._consumer = None
        self._sealed = False

    @_configurable
    def max(self, count, /):
        if not isinstance(count, int) or count < 0:
            raise ConfigurationError(f"{type(self).__typename__} maximum must be a non-negative integer")
        self._maximum = count

    @_configurable
    def unlimited(self):
        self._maximum = math.inf

    @_configurable
    def store(self, sequence, /, *, type=str):
        """
        extend a sequence with every free argument converted to type.
        """
        if not isinstance(sequence, MutableSequence):
            raise ConfigurationError(f"{builtins.type(self).__typename__} store() target must be a mutable sequence")
        if not convertible(type):
            raise ConfigurationError(
                f"{builtins.type(self).__typename__} cannot convert text to {getattr(type, "__name__", type)!r}"
            )
        self._consumer = (sequence.extend, type)

    @_configurable
    def handle(self, callback, /, *, type=Unset):
        """
        call back once with the list of free arguments (converted when a type is given).
        """
        if not callable(callback):
            raise ConfigurationError(f"{builtins.type(self).__typename__} handler must be callable")
        if type is not Unset and not convertible(type):
            raise ConfigurationError(
                f"{builtins.type(self).__typename__} cannot convert text to {getattr(type, "__name__", type)!r}"
            )
        self._consumer = (callback, type)

    def _seal(self):
        self._sealed = True

    def parse(self, tokens, /):
        tokens = list(tokens)
        if len(tokens) > self._maximum:
            raise InvalidFreeArgumentsCount(len(tokens), self._maximum)
        if self._consumer is None:
            return
        consumer, type = self._consumer
        if type is not Unset:
            try:
                tokens = [convert(token, type) for token in tokens]
            except ConversionError as error:
                raise ProcessorError(f"cannot parse free arguments: {error}", option=self._name) from error
        consumer(tokens)

    def usage(self):
        return f"{self._name}..." if self._maximum > 0 else ""


__all__ = (
    "Slot",
    "Option",
    "FreeArguments",
)
