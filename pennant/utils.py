"""
Pennant utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the values, options, commands and help layers.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the higher-level layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/"".

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr); containers
    are returned as fresh copies so the public API cannot mutate declared state.

- textsplit(source, columns)
  • Word-preserving wrapper used by the help renderer.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> textsplit("one two three", 4)
    ['one', 'two', 'three']
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used where None (or an empty string) is a legitimate user value, but the API
    needs to distinguish “not provided” from “provided”. A single instance,
    Unset, is exposed for use as the default of internal parameters.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when UnsetType appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns the given object unless it is Unset, in which case the provided
    default is returned. Falsey values like None, 0 or "" are preserved as-is.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce("", "fallback")     -> ""
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (updated in place)
    - rename(name)           -> decorator

    Raises
    - TypeError on wrong arity, non-callable targets or non-string names.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                # Some callables (e.g., built-ins) disallow attribute updates.
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values.

    - Sequence (non-string): new list with each element processed.
    - Mapping: new dict, keys preserved, values processed.
    - Set: new set.
    - Anything else: returned as-is.

    Declared objects (options, commands) are not containers and keep their
    identity, which the parser relies on.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and hands out fresh
    container copies, so callers cannot mutate the declaration through it.

    Example
    - Given self._options, declare options = mirror("options").
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


def textsplit(source, columns, /):
    """
    Split text into lines of roughly `columns` characters, keeping words whole.

    Words are separated by single spaces. Each word is appended to a running
    buffer; the buffer is flushed before a word is appended once it has already
    reached the column budget, so a line may overflow by its last word. The
    trailing buffer is always flushed, which means an empty source yields a
    single empty line.

    Raises
    - TypeError: source is not a string or columns is not an integer.
    - ValueError: columns is lower than 1.

    Examples
    - textsplit("Application description.", 76) -> ["Application description."]
    - textsplit("", 76)                         -> [""]
    """
    if not isinstance(source, str):
        raise TypeError("textsplit() first argument must be a string")
    if not isinstance(columns, int) or isinstance(columns, bool):
        raise TypeError("textsplit() second argument must be an integer")
    if columns < 1:
        raise ValueError("textsplit() columns must be >= 1")

    lines = []
    buffer = ""
    for word in source.split(" "):
        if len(buffer) >= columns:
            lines.append(buffer.strip(" "))
            buffer = ""
        buffer = buffer + " " + word

    if buffer:
        lines.append(buffer.strip(" "))

    return lines


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None or "" is a valid value but you still need to
distinguish “no input” from an explicit one; materialize it with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "textsplit",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
