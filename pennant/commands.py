"""
Pennant command layer: declare, compose, and parse command trees.

What this module provides
- Command: a named, described tree node owning options and sub-commands, with
  an "invoked" flag the parser raises when the node is matched.
- Application: the root scope (name, version, description, top-level options
  and commands) and the entry points:
  • parseargs(tokens, autohelp=False): resolve an explicit token list.
  • parse(autohelp=True): resolve sys.argv[1:].
  • printhelp(tokens, output): render contextual help.
  • called / reset(): read back and clear parse results.

Core ideas
- Declarations are built once, before parsing; the parser only mutates option
  values and command "invoked" flags.
- The active command while parsing lives in a per-call Session (see
  pennant.parser), never on the declaration, so a tree can be parsed again.
- Strict tree: a command is attached to one parent only, names are unique per
  parent, and an ancestor can never become its own descendant.

Quick start
    from pennant import Application, Command, boolean, helpoption

    app = Application("AppName", "Application description.", version="1.0.0")
    build = Command("build", "Compile the project")
    build.addoptions(boolean("verbose", "v", "Enable verbose output"))
    app.addoptions(boolean("debug", "d", "Enable debug session"), helpoption())
    app.addcommands(build)

    if __name__ == "__main__":
        app.parse()
"""
import functools
import operator
import re
import sys

from .helper import render
from .options import Option
from .parser import Session
from .utils import *


class CommandType(type):
    """
    Metaclass for command-tree nodes.

    Responsibilities
    - Derive __typename__ from the class name for messages.
    - Expose __introspectable__ fields as read-only properties (mirror()).
    - Provide stable __repr__/__rich_repr__ limited to __displayable__ names
      when declared.
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_text(cls, name, object, /, *, required=False):
    """
    Internal: validate a string field, trimming it.

    Raises
    - TypeError: object is not a string.
    - ValueError: object is empty after trimming while required.
    """
    if not isinstance(object, str):
        raise TypeError(f"{cls.__typename__} {name!r} must be a string")
    if required and not (object := object.strip()):
        raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
    return object.strip()


def _resolve_option(object):
    """
    Internal: the Option behind an option-resoluble object (see __option__).
    """
    if not hasattr(object, "__option__") or not callable(object.__option__):
        raise TypeError("scope options must be option-resoluble")
    option = object.__option__()
    if not isinstance(option, Option):
        raise TypeError("__option__() non-option returned")
    return option


def _resolve_command(object):
    """
    Internal: the Command behind a command-resoluble object (see __command__).
    """
    if not hasattr(object, "__command__") or not callable(object.__command__):
        raise TypeError("scope children must be command-resoluble")
    command = object.__command__()
    if not isinstance(command, Command):
        raise TypeError("__command__() non-command returned")
    return command


class Scope(metaclass=CommandType):
    """
    Shared behavior of the application root and command nodes: an ordered
    list of options and an ordered list of child commands.
    """

    def addoptions(self, *options):
        """
        Append options to this scope (order is kept for help output).

        Accepts Option objects or any object whose __option__() returns one.

        The same Option object may be attached to several scopes; attaching it
        twice to the same scope is rejected.
        """
        for option in map(_resolve_option, options):
            if any(option is other for other in self._options):
                raise ValueError(f"option {option.label} is already attached to this {type(self).__typename__}")
            self._options.append(option)
        return self

    def addcommands(self, *commands):
        """
        Attach child commands, keeping the tree strict.

        Raises
        - TypeError: a child is neither a Command nor an object whose
          __command__() returns one.
        - ValueError: the child already has a parent, its name is taken, or
          attaching it would create a cycle.
        """
        for command in map(_resolve_command, commands):
            if command._parent is not Unset:
                raise ValueError(f"command {command.name!r} is already attached to a parent")
            if any(command is ancestor for ancestor in _lineage(self)):
                raise ValueError(f"command {command.name!r} cannot be attached to its own descendant")
            if any(command.name == child.name for child in self._children):
                typeof = "subcommand" if isinstance(self, Command) else "command"
                raise ValueError(f"{typeof} name {command.name!r} is already in use")
            command._parent = self
            self._children.append(command)
        return self

    @property
    def called(self):
        """
        The first invoked child command, or None.
        """
        for child in self._children:
            if child.invoked:
                return child
        return None

    def find(self, name, /):
        """
        Child command named `name`, or None.
        """
        for child in self._children:
            if child.name == name:
                return child
        return None

    def walk(self):
        """
        Yield every command below this scope, depth first, in declaration order.
        """
        for child in self._children:
            yield child
            yield from child.walk()


def _lineage(scope):
    """
    Yield scope and its ancestors, nearest first.
    """
    while scope is not Unset:
        yield scope
        scope = getattr(scope, "_parent", Unset)


class Command(Scope):
    """
    Named tree node that switches the active scope once matched.

    Properties
    - name, descr: identity and help text.
    - options, children: copies of the declared lists (mutate via addoptions /
      addcommands).
    - invoked: True once the parser matched this node at its depth.
    - parent: the owning Command or Application (None when detached).
    - path: the commands from the top-level one down to this node.
    """

    __introspectable__ = (
        "name",
        "descr",
        "options",
        "children",
        "invoked",
    )

    __displayable__ = (
        "name",
        "descr",
        "invoked",
    )

    def __init__(self, name, descr="", /, *, options=(), children=()):
        self._name = _sanitize_text(type(self), "name", name, required=True)
        self._descr = _sanitize_text(type(self), "descr", descr)
        self._options = []
        self._children = []
        self._invoked = False
        self._parent = Unset

        self.addoptions(*options)
        self.addcommands(*children)

    @property
    def parent(self):
        return coalesce(self._parent)

    @property
    def path(self):
        """
        Commands from the top-level command down to this one.
        """
        return tuple(reversed([scope for scope in _lineage(self) if isinstance(scope, Command)]))

    def __command__(self):
        return self


class Application(Scope):
    """
    Root scope of a command line: application metadata, top-level options and
    commands, and the parse/help entry points.

    Parameters
    - name: application name (first help line; may be empty to omit it).
    - descr: application description (wrapped at 76 columns in help).
    - version: optional version appended to the help header.
    - colorful: style faults rendered on standard error.
    - fancy: render faults inside a panel.
    """

    __introspectable__ = (
        "name",
        "version",
        "descr",
        "options",
        "children",
        "colorful",
        "fancy",
    )

    __displayable__ = (
        "name",
        "version",
        "descr",
    )

    def __init__(self, name="", descr="", /, *, version="", options=(), children=(), colorful=True, fancy=False):
        self._name = _sanitize_text(type(self), "name", name)
        self._descr = _sanitize_text(type(self), "descr", descr)
        self._version = _sanitize_text(type(self), "version", version)
        self._options = []
        self._children = []
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

        self.addoptions(*options)
        self.addcommands(*children)

    def parseargs(self, tokens, /, *, autohelp=False):
        """
        Resolve a token list against this declaration.

        Parameters
        - tokens: iterable of strings (the program name excluded).
        - autohelp: on unknown tokens, malformed names and missing values,
          print the application help to standard output and exit with
          status 1 instead of raising.

        Returns
        - Session: the finished parse session (path, scope, helped).

        Raises
        - ParseError subclasses (see pennant.faults); ConversionError is raised
          even when autohelp is enabled.
        """
        return Session(self, tokens, autohelp=autohelp).run()

    def parse(self, *, autohelp=True):
        """
        Resolve the process arguments (sys.argv without the program name).
        """
        return self.parseargs(sys.argv[1:], autohelp=autohelp)

    def printhelp(self, tokens=Unset, output=Unset, /):
        """
        Render the help for the command chain found in `tokens`.

        Defaults are resolved at call time: sys.argv for the tokens and
        sys.stdout for the output.
        """
        render(self, coalesce(tokens, sys.argv), coalesce(output, sys.stdout))

    def reset(self):
        """
        Clear every parsed value and "invoked" flag in the tree.
        """
        for option in self._options:
            option.value.reset()
        for command in self.walk():
            command._invoked = False
            for option in command._options:
                option.value.reset()
        return self


__all__ = (
    "Command",
    "Application",
)

del CommandType
