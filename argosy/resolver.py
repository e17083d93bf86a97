"""
Option name resolution.

Long names resolve in this order:
1. exact match on a primary long name,
2. exact match on an alias,
3. the single spec owning every long name/alias that starts with the input,
4. more than one such spec: AmbiguousOptionError listing every candidate name,
5. none: UnknownOptionError carrying a typo suggestion over every long name
   and alias.

Short names resolve by exact single-character match only. Negated names
(--no-<name>) run steps 1-3 over negatable flags only.

`arguments` is always the recognized set of a command in registration order
(its own named arguments followed by the persistent ones it inherits).
"""
from .arguments import Flag
from .distance import suggest
from .faults import *


def _longs(argument, /):
    return ((argument.long,) if argument.long else ()) + argument.aliases


def _candidates(arguments, key, /):
    """
    map each spec with a long name or alias starting with `key` to those names.
    """
    candidates = {}
    for argument in arguments:
        for name in _longs(argument):
            if name.startswith(key):
                candidates.setdefault(argument, []).append(name)
    return candidates


def _exact(arguments, key, /):
    for argument in arguments:
        if argument.long == key:
            return argument
    for argument in arguments:
        if key in argument.aliases:
            return argument
    return None


def _ambiguous(key, candidates, route, /, prefix="--"):
    names = [name for names in candidates.values() for name in names]
    trigger(AmbiguousOptionError(
        "option %r is ambiguous: could be %s" % (
            prefix + key, ", ".join(repr(prefix + name) for name in names)
        ),
        title="ambiguous option",
        code=FaultCode.AMBIGUOUS_OPTION,
        input=prefix + key,
        candidates=tuple(names),
        hint="type more of the name; run '%s --help' to see all options" % route,
        docs=getdoc(FaultCode.AMBIGUOUS_OPTION),
    ))


def resolve_long(arguments, key, /, *, route=""):
    """
    resolve `key` (a long name without its leading dashes) to a spec.
    """
    if (argument := _exact(arguments, key)) is not None:
        return argument

    candidates = _candidates(arguments, key) if key else {}
    if len(candidates) == 1:
        return next(iter(candidates))
    if candidates:
        _ambiguous(key, candidates, route)

    suggestion = suggest(key, [name for argument in arguments for name in _longs(argument)])
    if suggestion:
        hint = "did you mean '--%s'? you can also run '%s --help' to see all options" % (suggestion, route)
    else:
        hint = "try '%s --help' to see all available options" % route
    trigger(UnknownOptionError(
        "unknown option '--%s'" % key,
        title="unknown option",
        code=FaultCode.UNKNOWN_OPTION,
        input="--" + key,
        suggestion=suggestion,
        hint=hint,
        docs=getdoc(FaultCode.UNKNOWN_OPTION),
    ))


def resolve_short(arguments, char, /, *, route=""):
    """
    resolve a single short character to a spec (exact match only).
    """
    for argument in arguments:
        if argument.short == char:
            return argument

    trigger(UnknownOptionError(
        "unknown option '-%s'" % char,
        title="unknown option",
        code=FaultCode.UNKNOWN_OPTION,
        input="-" + char,
        suggestion=None,
        hint="try '%s --help' to see all available options" % route,
        docs=getdoc(FaultCode.UNKNOWN_OPTION),
    ))


def resolve_negated(arguments, key, /, *, route=""):
    """
    resolve the `<name>` part of '--no-<name>' among negatable flags.

    returns None when no negatable flag matches, so callers can fall back to
    a regular long option literally named 'no-<name>'.
    """
    negatables = [argument for argument in arguments if isinstance(argument, Flag) and argument.negatable]
    if (argument := _exact(negatables, key)) is not None:
        return argument

    candidates = _candidates(negatables, key) if key else {}
    if len(candidates) == 1:
        return next(iter(candidates))
    if candidates:
        _ambiguous(key, candidates, route, prefix="--no-")
    return None


def resolve_option(arguments, key, /, *, route=""):
    """
    resolve the body of a '--' token, negation included.

    returns (argument, negated). an exact long name or alias always wins, so a
    regular option literally called '--no-cache' is never read as a negation.
    """
    if (argument := _exact(arguments, key)) is not None:
        return argument, False
    if key.startswith("no-") and (argument := resolve_negated(arguments, key[3:], route=route)) is not None:
        return argument, True
    return resolve_long(arguments, key, route=route), False


__all__ = (
    "resolve_option",
    "resolve_long",
    "resolve_short",
    "resolve_negated",
)
