r"""
Pennant argument resolution.

purpose
- walk a flat token list against an application's declaration, assigning
  option values and marking the commands that were invoked.

token grammar
- option-shaped:  r"^--?[a-zA-Z0-9]"  (see isoption)
- short cluster:  r"^-[a-zA-Z0-9]"    packed short flags, e.g. "-abc" (see isshort)
- long name:      r"--?([a-zA-Z0-9]+(-[a-zA-Z0-9]+)*)"  (see optname)
- switch token:   "true" or "false", any case, consumed by boolean options
- anything else without a leading dash is a command name.

resolution (one step per loop iteration)
- command token: match a child of the active scope by name, raise its
  "invoked" flag and make it the active scope.
- short cluster: each packed character is looked up by short name in the
  active scope. booleans are set true, except that the last character may
  consume a following switch token. a non-boolean must be the last character
  and consumes the following token. characters with no match are skipped when
  at least one character matched (an IgnoredShortFlagWarning is emitted for
  each); when none matched, the token is read as a long option instead.
- long option: looked up by long name with the same boolean look-ahead; a
  non-boolean consumes the following token, which must be non-empty.
- once every token is consumed, a set help option (helper=True) reachable
  from the visited scopes renders the contextual help.

faults
- UnregisteredTokenError, OptionExpectsValueError, MalformedOptionNameError:
  raised, or with autohelp the application help is printed on standard output,
  the fault is rendered on standard error and the process exits with status 1.
- ConversionError: always raised to the caller.
"""
import functools
import re
import shlex
import sys
from collections.abc import Iterable

from .faults import *
from .utils import *


def isoption(token, /):
    """
    True when the token starts with one or two dashes followed by a letter or digit.
    """
    return re.match(r"--?[a-zA-Z0-9]", token) is not None


def isshort(token, /):
    """
    True when the token is a short cluster (single dash then a letter or digit).
    """
    return re.match(r"-[a-zA-Z0-9]", token) is not None


def optname(token, /):
    """
    Name of an option token without its dashes, or None when unreadable.

    examples
    - optname("--very-long") -> "very-long"
    - optname("-v")          -> "v"
    - optname("--opt=value") -> None
    """
    match = re.fullmatch(r"--?([a-zA-Z0-9]+(?:-[a-zA-Z0-9]+)*)", token)
    return match[1] if match else None


def isswitch(token, /):
    """
    True when the token is an explicit boolean ("true"/"false", any case).
    """
    return isinstance(token, str) and token.lower() in ("true", "false")


@functools.cache
def _ordinal(number):
    """
    Human-friendly ordinal label for a 1-based position.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _tokenize(tokens):
    """
    Normalize the accepted token inputs into a list of strings.

    - str: shell-like string, split with shlex.split.
    - Iterable[str]: used as-is (empty strings are kept, they are meaningful
      as missing option values).
    """
    if isinstance(tokens, str):
        return shlex.split(tokens)
    if not isinstance(tokens, Iterable):
        raise TypeError("tokens must be a string or an iterable of strings")
    tokens = list(tokens)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("tokens must be a string or an iterable of strings")
    return tokens


class Session:
    """
    One resolution of a token list against an application.

    The session owns every piece of transient state (position, active scope),
    so the same declaration can be parsed any number of times. Results are
    written to the declaration itself: option values and command flags.

    Properties
    - application: the root scope being resolved against.
    - tokens: the tokens, as a tuple.
    - path: commands descended into, outermost first.
    - scope: the active scope once parsing stopped.
    - helped: True when the help was rendered because a help option was set.
    """

    def __init__(self, application, tokens, /, *, autohelp=False):
        self._application = application
        self._tokens = _tokenize(tokens)
        self._autohelp = bool(autohelp)
        self._index = 0
        self._scopes = [application]
        self._helped = False

    @property
    def application(self):
        return self._application

    @property
    def tokens(self):
        return tuple(self._tokens)

    @property
    def path(self):
        return tuple(self._scopes[1:])

    @property
    def scope(self):
        return self._scopes[-1]

    @property
    def helped(self):
        return self._helped

    def __repr__(self):
        return "session(tokens=%r, path=%r, helped=%r)" % (
            self.tokens, tuple(command.name for command in self.path), self.helped
        )

    def run(self):
        """
        Consume every token, then render help if a help option was set.

        Returns the session itself.
        """
        while self._index < len(self._tokens):
            token = self._tokens[self._index]
            if isoption(token):
                if isshort(token) and self._resolve_cluster(token):
                    continue
                self._resolve_long(token)
            elif token.startswith("-"):
                self._fail(MalformedOptionNameError(
                    "bad form of option %r at %s position" % (token, _ordinal(self._index + 1)),
                    title="malformed option name",
                    code=FaultCode.MALFORMED_OPTION_NAME,
                    hint="options are spelled -x, -xyz or --name; try '%s --help'" % self._route(),
                    docs=getdoc(FaultCode.MALFORMED_OPTION_NAME),
                    token=token,
                    index=self._index + 1,
                ))
            else:
                self._resolve_command(token)

        if self._wantshelp():
            self._application.printhelp([*sys.argv[:1], *self._tokens])
            self._helped = True

        return self

    def _peek(self):
        """
        Token following the current one, or Unset.
        """
        try:
            return self._tokens[self._index + 1]
        except IndexError:
            return Unset

    def _route(self):
        return " ".join(filter(None, [self._application.name, *(command.name for command in self.path)]))

    def _wantshelp(self):
        seen = set()
        for scope in self._scopes:
            for option in scope._options:
                if id(option) in seen:
                    continue
                seen.add(id(option))
                if option.helper and option.value.isset and option.value.get():
                    return True
        return False

    def _fail(self, fault):
        """
        Surface a resolution fault: raise it, or (autohelp) print the
        application help, render the fault on standard error and exit 1.
        """
        if self._autohelp:
            self._application.printhelp([], sys.stdout)
        trigger(
            fault,
            shell=self._autohelp,
            prog=self._application.name,
            colorful=self._application.colorful,
            fancy=self._application.fancy,
        )

    def _warn(self, fault):
        trigger(
            fault,
            shell=self._autohelp,
            prog=self._application.name,
            colorful=self._application.colorful,
            fancy=self._application.fancy,
        )

    def _assign(self, option, text, input):
        """
        Hand a token to the option's value, re-raising conversion failures
        with the option and position attached.
        """
        try:
            option.value.parse(text)
        except ConversionError as error:
            fault = ConversionError(
                "option %r at %s position %s" % (input, _ordinal(self._index + 1), error.message),
                **error.options | {
                    "hint": "pass a valid %s value to %s" % (type(option.value).__typename__, input),
                    "index": self._index + 1,
                    "option": option,
                }
            )
            fault.__cause__ = error.__cause__
            trigger(
                fault,
                shell=False,
                prog=self._application.name,
                colorful=self._application.colorful,
                fancy=self._application.fancy,
            )

    def _missing(self, input):
        self._fail(OptionExpectsValueError(
            "option %r at %s position expects a value" % (input, _ordinal(self._index + 1)),
            title="option expects a value",
            code=FaultCode.OPTION_EXPECTS_VALUE,
            hint="pass a value right after it (for example: %s <value>)" % input,
            docs=getdoc(FaultCode.OPTION_EXPECTS_VALUE),
            token=input,
            index=self._index + 1,
        ))

    def _unregistered(self, token):
        typeof = "option" if isoption(token) else "command"
        self._fail(UnregisteredTokenError(
            "%r at %s position is not a registered command nor an option" % (token, _ordinal(self._index + 1)),
            title="unregistered %s" % typeof,
            code=FaultCode.UNREGISTERED_TOKEN,
            hint="run '%s --help' to see the available commands and options" % self._route(),
            docs=getdoc(FaultCode.UNREGISTERED_TOKEN),
            token=token,
            index=self._index + 1,
        ))

    def _resolve_command(self, token):
        if (command := self.scope.find(token)) is None:
            return self._unregistered(token)
        command._invoked = True
        self._scopes.append(command)
        self._index += 1

    def _resolve_cluster(self, token):
        """
        Resolve a packed short cluster; False when no character matched.
        """
        following = self._peek()
        options = self.scope._options
        matched = False
        consumed = 1
        ignored = []

        for offset, char in enumerate(token[1:], start=1):
            last = offset == len(token) - 1
            option = next((option for option in options if option.short == char), None)

            if option is None:
                ignored.append(char)
                continue
            matched = True

            if option.isboolean:
                if last and isswitch(following):
                    self._assign(option, following.lower(), "-" + char)
                    consumed = 2
                else:
                    self._assign(option, "true", "-" + char)
                continue

            if not last or not following:
                return self._missing("-" + char)
            self._assign(option, following, "-" + char)
            consumed = 2

        if not matched:
            return False

        for char in ignored:
            self._warn(IgnoredShortFlagWarning(
                "flag %r in %r at %s position is not registered and was ignored" % (
                    char, token, _ordinal(self._index + 1)
                ),
                title="ignored short flag",
                code=FaultCode.IGNORED_SHORT_FLAG,
                hint="remove it or run '%s --help' to see the available options" % self._route(),
                docs=getdoc(FaultCode.IGNORED_SHORT_FLAG),
                token=token,
                flag=char,
                index=self._index + 1,
            ))

        self._index += consumed
        return True

    def _resolve_long(self, token):
        if (name := optname(token)) is None:
            return self._fail(MalformedOptionNameError(
                "bad form of option %r at %s position" % (token, _ordinal(self._index + 1)),
                title="malformed option name",
                code=FaultCode.MALFORMED_OPTION_NAME,
                hint="spell it --name and pass its value after a space; try '%s --help'" % self._route(),
                docs=getdoc(FaultCode.MALFORMED_OPTION_NAME),
                token=token,
                index=self._index + 1,
            ))

        option = next((option for option in self.scope._options if option.long == name), None)
        if option is None:
            return self._unregistered(token)

        following = self._peek()
        if option.isboolean:
            if isswitch(following):
                self._assign(option, following.lower(), token)
                self._index += 2
            else:
                self._assign(option, "true", token)
                self._index += 1
            return

        if not following:
            return self._missing(token)
        self._assign(option, following, token)
        self._index += 2


__all__ = (
    "Session",
    "isoption",
    "isshort",
    "optname",
    "isswitch",
)
