r"""
Pennant option specifications.

Overview
- Option: a named, described container binding a long name and/or a short
  name to a typed value (see pennant.values).
- Factories: string, boolean, int32, int64, uint32, uint64, float32, float64
  build an Option holding the matching value kind with a default.
- helpoption(): the conventional -h/--help option; when set, the parser prints
  the contextual help once every token has been consumed.
- valueof(option, kind): typed accessor, the single place where reading an
  option as the wrong kind is reported (KindMismatchError).

Metadata (sanitized on construction)
- long: Unset | str, must match r"[a-zA-Z0-9]+(-[a-zA-Z0-9]+)*" (given without dashes).
- short: Unset | str, exactly one ASCII letter or digit.
- descr: str (may be empty), trimmed.
- value: one of the value kinds.
- helper: bool, marks a help option.

Identity
- Options are compared by identity, never by name: two sibling scopes may both
  declare "-d" with different meanings, and the same Option object may be
  shared by several scopes (e.g., one help option everywhere).

Quick example:
    >>> from pennant.options import boolean, valueof
    >>> from pennant.values import Bool
    >>> debug = boolean("debug", "d", "Enable debug session")
    >>> valueof(debug, Bool)
    False
"""
import functools
import operator
import re

from .faults import FaultCode, KindMismatchError
from .utils import *
from .values import *


class OptionType(type):
    """
    Metaclass for option specs: typename, read-only introspectable fields,
    stable __repr__ and __rich_repr__ for diagnostics.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
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


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize option metadata in place.

    Raises
    - TypeError: wrong types (names, descr, value).
    - ValueError: names that are not valid option spellings.
    """
    if not isinstance(long := metadata["long"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'long' must be a string")
    elif isinstance(long, str):
        if long.startswith("-"):
            raise ValueError(f"{cls.__typename__} 'long' must be given without leading dashes")
        if not re.fullmatch(r"[a-zA-Z0-9]+(-[a-zA-Z0-9]+)*", long):
            raise ValueError(f"{cls.__typename__} 'long' must be made of letters, digits and inner dashes")

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str) and not re.fullmatch(r"[a-zA-Z0-9]", short):
        raise ValueError(f"{cls.__typename__} 'short' must be a single letter or digit")

    if not isinstance(descr := metadata["descr"], str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = descr.strip()

    if not isinstance(metadata["value"], Value):
        raise TypeError(f"{cls.__typename__} 'value' must be one of %s" % ", ".join(
            kind.__typename__ for kind in KINDS
        ))

    metadata["long"] = coalesce(long)
    metadata["short"] = coalesce(short)


class Option(metaclass=OptionType):
    """
    Named option bound to a typed value.

    Properties
    - long, short: the spellings without dashes (None when absent).
    - descr: short description shown in help.
    - value: the Value instance receiving parsed tokens.
    - helper: True for help options (see helpoption()).
    - isboolean: shortcut for value.isboolean, drives look-ahead parsing.
    """

    __introspectable__ = (
        "long",
        "short",
        "descr",
        "value",
        "helper",
    )

    def __init__(self, long=Unset, short=Unset, descr="", value=Unset, *, helper=False):
        metadata = {
            "long": long,
            "short": short,
            "descr": descr,
            "value": value,
            "helper": bool(helper),
        }
        _sanitize_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        if self.helper and not self.value.isboolean:
            raise TypeError(f"helper {type(self).__typename__} must hold a bool value")

    @property
    def isboolean(self):
        return self.value.isboolean

    @property
    def label(self):
        """
        Spelling used in messages: "--long" when available, else "-s".
        """
        if self.long is not None:
            return "--" + self.long
        if self.short is not None:
            return "-" + self.short
        return "<unnamed>"

    def get(self):
        """
        Current-or-default Python value, whatever the kind.
        """
        return self.value.get()

    def __option__(self):
        return self


def _factory(kind):
    """
    Build a kind-specific option factory (string(), boolean(), int32(), ...).
    """

    @rename(kind.__typename__ if kind is not Bool else "boolean")
    def factory(long=Unset, short=Unset, descr="", default=Unset):
        return Option(long, short, descr, kind(default))

    factory.__doc__ = f"""
        Create an option holding a {kind.__typename__} value.

        Parameters
        - long: option name without dashes (or Unset).
        - short: single letter or digit (or Unset).
        - descr: description shown in help.
        - default: Python default; the kind's zero value when omitted.
    """
    return factory


string = _factory(String)
boolean = _factory(Bool)
int32 = _factory(Int32)
int64 = _factory(Int64)
uint32 = _factory(UInt32)
uint64 = _factory(UInt64)
float32 = _factory(Float32)
float64 = _factory(Float64)


def helpoption():
    """
    Create the conventional help option (-h/--help).

    Attach it to the application (and to any command that should accept it):
    once it is set, the parser renders the help for the resolved command chain
    after consuming all tokens.
    """
    return Option("help", "h", "Show the application's help", Bool(), helper=True)


def valueof(option, kind, /):
    """
    Read an option as a given value kind.

    Returns
    - the current value when set, otherwise the default (Python typed).

    Raises
    - TypeError: option is not an Option or kind is not a value kind.
    - KindMismatchError: the option holds a different kind.
    """
    if not isinstance(option, Option):
        raise TypeError("valueof() first argument must be an option")
    if kind not in KINDS:
        raise TypeError("valueof() second argument must be a value kind")
    if type(option.value) is not kind:
        raise KindMismatchError(
            "option %s holds a %s value, not a %s value" % (
                option.label, type(option.value).__typename__, kind.__typename__
            ),
            option=option,
            expected=kind,
            actual=type(option.value),
            code=FaultCode.KIND_MISMATCH,
        )
    return option.value.get()


__all__ = (
    # Classes
    "Option",

    # Factories
    "string",
    "boolean",
    "int32",
    "int64",
    "uint32",
    "uint64",
    "float32",
    "float64",
    "helpoption",

    # Accessors
    "valueof",
)

del OptionType
