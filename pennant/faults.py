"""
Pennant faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  raised while resolving arguments or reading typed values.
- ParseError / ParseWarning: base types that carry a message plus read-only
  options (title, code, hint, token, ...) and know how to render themselves
  through rich.
- trigger(): central entry point to surface a fault, either raised/warned
  (library mode) or printed to standard error (shell mode).
- getdoc(): optional description lookup for a code from the host application.

Taxonomy
- UnregisteredTokenError: command or option not declared in the active scope.
- OptionExpectsValueError: a non-boolean option has no following token.
- MalformedOptionNameError: dash-led token whose name cannot be read.
- ConversionError: a typed value could not convert its text (the numeric
  failure is chained as __cause__).
- KindMismatchError: an option was read as a value kind it does not hold.
- IgnoredShortFlagWarning: a packed short flag was skipped inside a cluster
  where some other flag matched.

Integration
- The parser builds faults with the context it has (token, index, scope) and
  hands them to trigger(); in auto-help mode the application prints its help
  first, then the fault is rendered on standard error and the process exits 1.
- Hosts may tune rendering from __main__: __prog__ (program label),
  __styles__ (palette overrides), __codes__ (code labels), __docs__ (code docs).
"""
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - resolution (2110x): UNREGISTERED_TOKEN, OPTION_EXPECTS_VALUE, MALFORMED_OPTION_NAME
    - values (2111x): CONVERSION_ERROR, KIND_MISMATCH
    - warnings (2210x): IGNORED_SHORT_FLAG
    """
    # --- resolution errors ---
    UNREGISTERED_TOKEN          = 21101
    OPTION_EXPECTS_VALUE        = 21102
    MALFORMED_OPTION_NAME       = 21103

    # --- value errors ---
    CONVERSION_ERROR            = 21111
    KIND_MISMATCH               = 21112

    # --- warnings ---
    IGNORED_SHORT_FLAG          = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _renderer(fault, palette, /):
    """
    Build the rich renderable shared by errors and warnings.

    Layout: a "[ prog — code | title ]" header, the message, and a hint line;
    wrapped in a panel when the fault was triggered with fancy=True.
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = options.get("colorful", True)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style] if colorful else "")

    prog = getattr(main, "__prog__", None) or options.get("prog") or "pennant"
    code = options.get("code")
    title = options.get("title") or type(fault).__name__

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(code.normalize() if code is not None else "-", "code"),
        " | ",
        text(title.title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(options.get("hint"), "hint"))

    if options.get("fancy", False):
        return Panel(Group(message, hint), title=header, title_align="left")

    return Group(header, message, hint)


class ParseError(Exception):
    """
    Base of every error surfaced while resolving arguments.

    Carries a human-readable message and read-only options describing the
    context (title, code, hint, token, index, ...). Library callers catch it
    like any exception; shell callers get it rendered on standard error.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _renderer(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # pinky title
            "message": "#C8C8D0",  # soft gray message
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from self.__cause__
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class UnregisteredTokenError(ParseError): ...
class OptionExpectsValueError(ParseError): ...
class MalformedOptionNameError(ParseError): ...
class ConversionError(ParseError): ...


class KindMismatchError(TypeError):
    """
    Raised by valueof() when an option holds a different value kind.
    """

    def __init__(self, message, /, *, option=None, expected=None, actual=None, code=FaultCode.KIND_MISMATCH):
        super().__init__(message)
        self.option = option
        self.expected = expected
        self.actual = actual
        self.code = code


class ParseWarning(Warning):
    """
    Base of non-fatal notices emitted while resolving arguments.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _renderer(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class IgnoredShortFlagWarning(ParseWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise errors are
      raised and warnings go through the warnings machinery.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode members and values are short documentation strings. returns
    None when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseError",
    "UnregisteredTokenError",
    "OptionExpectsValueError",
    "MalformedOptionNameError",
    "ConversionError",
    "KindMismatchError",
    "ParseWarning",
    "IgnoredShortFlagWarning",
    "trigger",
    "getdoc",
)
