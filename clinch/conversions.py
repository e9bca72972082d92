"""
Clinch value conversions (text <-> typed values).

Scope
- convert(text, type): parse a raw token into a typed value. the whole text must
  be consumed; anything else raises ConversionError (a ValueError).
- render(value): write a value back to text (used for default values in help).
- convertible(type): configuration-time capability check used by the option
  bindings, so unsupported types are rejected when they are bound.
- register(type, parse, format=str): extend the registry with a new type.

Supported out of the box
- str (verbatim), int (strict, no surrounding whitespace), float (no whitespace, no "_"), bool
  (true/false, 1/0, yes/no, on/off; case-insensitive), Decimal, Fraction, Path,
  Enum subclasses (by member name), and any class implementing the hooks:

    class Point:
        @classmethod
        def __from_text__(cls, text): ...
        def __to_text__(self): ...

Lookup order
- capability hooks first, then Enum subclasses, then the registry following the
  type's MRO (so subclasses of registered types are accepted).
"""
import builtins
import decimal
import enum
import fractions
import pathlib
import re

from .faults import ConversionError

_registry = {}

_TRUTHS = {
    "true": True, "1": True, "yes": True, "on": True,
    "false": False, "0": False, "no": False, "off": False,
}


def register(type, parse, format=str, /):
    """
    register a converter pair for the given type.

    - parse(text) must return an instance of type or raise ValueError.
    - format(value) must return the text form of a value.

    a later registration for the same type replaces the former one.
    """
    if not isinstance(type, builtins.type):
        raise TypeError("register() first argument must be a type")
    if not callable(parse) or not callable(format):
        raise TypeError("register() parse and format arguments must be callable")
    _registry[type] = (parse, format)
    return type


def _lookup(type, /):
    for base in type.__mro__:
        if base in _registry:
            return _registry[base]
    return None


def convertible(type, /):
    """
    return True when values of the given type can be converted from text.
    """
    if not isinstance(type, builtins.type):
        return False
    if hasattr(type, "__from_text__"):
        return True
    if issubclass(type, enum.Enum):
        return True
    return _lookup(type) is not None


def convert(text, type=str, /):
    """
    convert a raw token into the requested type.

    raises
    - TypeError: the type is not convertible (see convertible()).
    - ConversionError: the text does not satisfy the type's syntax.
    """
    if not isinstance(text, str):
        raise TypeError("convert() first argument must be a string")
    if not convertible(type):
        raise TypeError(f"cannot convert text to {getattr(type, "__name__", type)!r}")

    if hasattr(type, "__from_text__"):
        parse = type.__from_text__
    elif issubclass(type, enum.Enum):
        parse = _enumeration(type)
    else:
        parse, _ = _lookup(type)

    try:
        return parse(text)
    except ConversionError:
        raise
    except (ValueError, ArithmeticError, KeyError) as error:
        raise ConversionError(f"cannot convert {text!r} to {type.__name__}") from error


def render(value, /):
    """
    write a value back to its text form (inverse of convert()).

    values whose type is not convertible are rendered with str().
    """
    kind = builtins.type(value)
    if hasattr(kind, "__to_text__"):
        return value.__to_text__()
    if isinstance(value, enum.Enum):
        return value.name
    if (converter := _lookup(kind)) is not None:
        return converter[1](value)
    return str(value)


def _enumeration(type, /):
    def parse(text):
        try:
            return type[text]
        except KeyError:
            raise ConversionError(
                f"cannot convert {text!r} to {type.__name__} (expected one of {", ".join(type.__members__)})"
            ) from None
    return parse


def _integer(text, /):
    # int() would accept surrounding whitespace and underscores
    if not re.fullmatch(r"[+-]?\d+", text):
        raise ConversionError(f"cannot convert {text!r} to int")
    return int(text)


def _real(text, /):
    if text != text.strip() or not text or "_" in text:
        raise ConversionError(f"cannot convert {text!r} to float")
    return float(text)


def _boolean(text, /):
    try:
        return _TRUTHS[text.lower()]
    except KeyError:
        raise ConversionError(f"cannot convert {text!r} to bool") from None


def _decimal(text, /):
    if text != text.strip() or not text or "_" in text:
        raise ConversionError(f"cannot convert {text!r} to Decimal")
    try:
        return decimal.Decimal(text)
    except decimal.InvalidOperation:
        raise ConversionError(f"cannot convert {text!r} to Decimal") from None


def _fraction(text, /):
    if text != text.strip() or not text or "_" in text:
        raise ConversionError(f"cannot convert {text!r} to Fraction")
    return fractions.Fraction(text)


def _path(text, /):
    if not text:
        raise ConversionError("cannot convert an empty string to Path")
    return pathlib.Path(text)


register(str, str)
register(bool, _boolean, lambda value: "true" if value else "false")
register(int, _integer)
register(float, _real, repr)
register(decimal.Decimal, _decimal)
register(fractions.Fraction, _fraction)
register(pathlib.PurePath, _path)


__all__ = (
    "convert",
    "render",
    "convertible",
    "register",
)
