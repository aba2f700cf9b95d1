"""
Pennant typed values.

Overview
- A closed set of eight value kinds an option can hold:
  • String, Bool
  • Int32, Int64 (signed decimal integers)
  • UInt32, UInt64 (unsigned decimal integers)
  • Float32, Float64 (decimal or exponent notation)
- Each kind knows how to parse itself from a token, render its current value
  (falling back to the default when never assigned) and render its default.

Contract (every kind)
- parse(text): convert and assign; raises ConversionError on bad input.
- render() -> str: current value when set, otherwise the default.
- renderdefault() -> str: always the default.
- get(): current-or-default as a Python value.
- reset(): forget the assigned value.
- isboolean: True only for Bool; the parser uses it for look-ahead.

Formatting
- integers: decimal ("%d").
- floats: six decimals ("%f"); infinities as "+Inf"/"-Inf", NaN as "NaN".
- booleans: "true"/"false".
- strings: verbatim.

Notes
- The set is sealed: Value refuses subclasses declared outside this module, so
  code matching over value kinds can rely on the eight classes below.
- Bool.parse never fails: empty text or "true" (any case) is true, anything
  else is false. Callers are expected to decide before handing it a token.
- String has no "set" state: an empty current value falls back to the default.

Quick example:
    >>> value = Int32(8)
    >>> value.render()
    '8'
    >>> value.parse("-12")
    >>> value.render(), value.renderdefault()
    ('-12', '8')
"""
import functools
import math
import operator
import re
import struct

from .faults import ConversionError, FaultCode, getdoc
from .utils import *

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)", re.IGNORECASE)


class ValueType(type):
    """
    Metaclass giving every value kind a typename, a stable repr and a rich repr.

    Conventions
    - __typename__ comes from the class namespace when declared, otherwise it is
      derived from the class name (lowercased).
    - __introspectable__ names are exposed as read-only properties via mirror().
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": namespace.get("__typename__", name.lower()),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Value(metaclass=ValueType):
    """
    Base of the eight value kinds (not instantiable on its own).

    Subclasses provide:
    - __zero__: the kind's zero value, used when no default is given.
    - _sanitize(default): validate and normalize a Python default.
    - _convert(text): token to Python value (ValueError/OverflowError on failure).
    - _format(value): Python value to its textual form.
    """
    __typename__ = "value"
    __introspectable__ = ("default", "current", "isset")
    __zero__ = None

    isboolean = False

    def __init_subclass__(cls, **options):
        if cls.__module__ != __name__:
            raise TypeError(f"type {Value.__name__!r} is not an acceptable base type")
        super().__init_subclass__(**options)

    def __init__(self, default=Unset, /):
        if type(self) is Value:
            raise TypeError("Value cannot be instantiated directly; use one of its kinds")
        self._default = self._sanitize(coalesce(default, type(self).__zero__))
        self._current = type(self).__zero__
        self._isset = False

    def parse(self, text, /):
        """
        Convert a token and assign it as the current value.

        Raises
        - TypeError: text is not a string.
        - ConversionError: text cannot be converted to this kind; the
          underlying ValueError/OverflowError is chained as __cause__.
        """
        if not isinstance(text, str):
            raise TypeError(f"{type(self).__typename__} value must be parsed from a string")
        try:
            value = self._convert(text)
        except (ValueError, OverflowError) as exception:
            raise ConversionError(
                "cannot convert %r to %s" % (text, type(self).__typename__),
                title="conversion error",
                code=FaultCode.CONVERSION_ERROR,
                hint="pass a valid %s value" % type(self).__typename__,
                docs=getdoc(FaultCode.CONVERSION_ERROR),
                token=text,
                kind=type(self).__typename__,
            ) from exception
        self._current = value
        self._isset = True

    def get(self):
        return self._current if self._isset else self._default

    def render(self):
        return self._format(self.get())

    def renderdefault(self):
        return self._format(self._default)

    def reset(self):
        self._current = type(self).__zero__
        self._isset = False

    def __str__(self):
        return self.render()


def _integral(kind, minimum, maximum, pattern):
    """
    Build the sanitize/convert pair shared by the integer kinds.
    """

    def _check(value):
        if not minimum <= value <= maximum:
            raise OverflowError(f"{value} is out of range for {kind}")
        return value

    def _sanitize(self, default):
        if not isinstance(default, int) or isinstance(default, bool):
            raise TypeError(f"{kind} default must be an integer")
        try:
            return _check(default)
        except OverflowError as exception:
            raise ValueError(str(exception)) from None

    def _convert(self, text):
        if not pattern.fullmatch(text):
            raise ValueError(f"invalid syntax for {kind}: {text!r}")
        return _check(int(text))

    return _sanitize, _convert


def _formatfloat(value):
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return "%f" % value


def _tosingle(value):
    # OverflowError when the value does not fit in an IEEE single
    return struct.unpack("f", struct.pack("f", value))[0]


def _tofloat(text):
    if not _FLOAT.fullmatch(text):
        raise ValueError(f"invalid syntax for float: {text!r}")
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise OverflowError(f"{text!r} is out of range")
    return value


def _sanitizefloat(kind):
    def _sanitize(self, default):
        if not isinstance(default, int | float) or isinstance(default, bool):
            raise TypeError(f"{kind} default must be a number")
        return float(default)
    return _sanitize


class String(Value):
    __typename__ = "string"
    __zero__ = ""

    def _sanitize(self, default):
        if not isinstance(default, str):
            raise TypeError("string default must be a string")
        return default

    def _convert(self, text):
        return text

    def _format(self, value):
        return value

    def get(self):
        return self._current or self._default


class Bool(Value):
    __typename__ = "bool"
    __zero__ = False

    isboolean = True

    def _sanitize(self, default):
        if not isinstance(default, bool):
            raise TypeError("bool default must be a boolean")
        return default

    def _convert(self, text):
        return text == "" or text.lower() == "true"

    def _format(self, value):
        return "true" if value else "false"


class Int32(Value):
    __typename__ = "int32"
    __zero__ = 0

    _sanitize, _convert = _integral("int32", -2 ** 31, 2 ** 31 - 1, _SIGNED)

    def _format(self, value):
        return "%d" % value


class Int64(Value):
    __typename__ = "int64"
    __zero__ = 0

    _sanitize, _convert = _integral("int64", -2 ** 63, 2 ** 63 - 1, _SIGNED)

    def _format(self, value):
        return "%d" % value


class UInt32(Value):
    __typename__ = "uint32"
    __zero__ = 0

    _sanitize, _convert = _integral("uint32", 0, 2 ** 32 - 1, _UNSIGNED)

    def _format(self, value):
        return "%d" % value


class UInt64(Value):
    __typename__ = "uint64"
    __zero__ = 0

    _sanitize, _convert = _integral("uint64", 0, 2 ** 64 - 1, _UNSIGNED)

    def _format(self, value):
        return "%d" % value


class Float32(Value):
    """
    Single precision float: parsed and stored rounded to IEEE binary32.
    """
    __typename__ = "float32"
    __zero__ = 0.0

    def _sanitize(self, default):
        try:
            return _tosingle(_sanitizefloat("float32")(self, default))
        except OverflowError:
            raise ValueError(f"{default} is out of range for float32") from None

    def _convert(self, text):
        return _tosingle(_tofloat(text))

    def _format(self, value):
        return _formatfloat(value)


class Float64(Value):
    """
    Double precision float.
    """
    __typename__ = "float64"
    __zero__ = 0.0

    _sanitize = _sanitizefloat("float64")

    def _convert(self, text):
        return _tofloat(text)

    def _format(self, value):
        return _formatfloat(value)


KINDS = (String, Bool, Int32, Int64, UInt32, UInt64, Float32, Float64)
"""
Every value kind, in declaration order.
"""


__all__ = (
    # Base
    "Value",

    # Kinds
    "String",
    "Bool",
    "Int32",
    "Int64",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",

    # Constants
    "KINDS",
)

# The metaclass is an implementation detail; keep it out of star-imports.
del ValueType
