"""
Post-parse defaults and constraint validation.

apply_defaults() runs first and fills every absent argument that declares a
default. validate() then checks, in this fixed order and stopping at the first
violation:

1. required arguments are present,
2. no more positional values than declared cardinals,
3. mutually-exclusive groups have at most one member present,
4. required-together groups have none or all members present,
5. one-required groups have at least one member present,
6. conditional pairs (target, condition): condition present ⇒ target present,
7. ranged arguments hold integers within their inclusive bounds.

Presence is ParseResult.has(), so a defaulted argument counts as given for
every group rule.
"""
from .arguments import Cardinal, Option
from .faults import *
from .results import parse_integer
from .utils import ordinal


def apply_defaults(arguments, result, /):
    """
    store the declared default of every absent argument in `arguments`.
    """
    for argument in arguments:
        if (default := getattr(argument, "default", None)) is None or result.has(argument.name):
            continue
        if isinstance(argument, Option) and argument.map:
            result._maps[argument.name] = dict(default)
        elif isinstance(argument, Option) and argument.append:
            result._lists[argument.name] = list(default)
        else:
            result._values[argument.name] = default


def _names(command, names, /):
    return ", ".join(command.arguments[name].display for name in names)


def _check_required(command, result, route):
    for argument in command.arguments.values():
        if argument.required and not result.has(argument.name):
            kind = "positional argument" if isinstance(argument, Cardinal) else "argument"
            trigger(MissingRequiredArgumentError(
                "the following %s is required: %s" % (kind, argument.display),
                title="missing required argument",
                code=FaultCode.MISSING_REQUIRED_ARGUMENT,
                input=argument.display,
                hint="add %s; run '%s --help' to see the expected usage" % (argument.display, route),
                docs=getdoc(FaultCode.MISSING_REQUIRED_ARGUMENT),
            ))


def _check_positionals(command, result, route):
    if len(result._positionals) > (expected := len(command.cardinals)):
        surplus = result._positionals[expected]
        trigger(TooManyPositionalsError(
            "unexpected positional argument %r at %s position (expected at most %d)" % (
                surplus, ordinal(expected + 1), expected
            ),
            title="too many positionals",
            code=FaultCode.TOO_MANY_POSITIONALS,
            input=surplus,
            index=expected + 1,
            hint="remove the extra values or run '%s --help' to see the expected usage" % route,
            docs=getdoc(FaultCode.TOO_MANY_POSITIONALS),
        ))


def _check_exclusive(command, result, route):
    for group in command.exclusive:
        if len(present := [name for name in group if result.has(name)]) > 1:
            trigger(MutuallyExclusiveError(
                "arguments %s are mutually exclusive" % _names(command, present),
                title="mutually exclusive arguments",
                code=FaultCode.MUTUALLY_EXCLUSIVE,
                names=tuple(command.arguments[name].display for name in present),
                hint="keep only one of %s" % _names(command, group),
                docs=getdoc(FaultCode.MUTUALLY_EXCLUSIVE),
            ))


def _check_together(command, result, route):
    for group in command.together:
        present = [name for name in group if result.has(name)]
        missing = [name for name in group if not result.has(name)]
        if present and missing:
            trigger(RequiredTogetherError(
                "arguments %s must be given together: missing %s (given %s)" % (
                    _names(command, group), _names(command, missing), _names(command, present)
                ),
                title="arguments required together",
                code=FaultCode.REQUIRED_TOGETHER,
                missing=tuple(command.arguments[name].display for name in missing),
                present=tuple(command.arguments[name].display for name in present),
                hint="add %s or drop %s" % (_names(command, missing), _names(command, present)),
                docs=getdoc(FaultCode.REQUIRED_TOGETHER),
            ))


def _check_anyof(command, result, route):
    for group in command.anyof:
        if not any(result.has(name) for name in group):
            trigger(OneRequiredError(
                "one of the arguments %s is required" % _names(command, group),
                title="one argument required",
                code=FaultCode.ONE_REQUIRED,
                names=tuple(command.arguments[name].display for name in group),
                hint="add one of %s" % _names(command, group),
                docs=getdoc(FaultCode.ONE_REQUIRED),
            ))


def _check_conditions(command, result, route):
    for target, condition in command.conditions:
        if result.has(condition) and not result.has(target):
            target, condition = command.arguments[target].display, command.arguments[condition].display
            trigger(ConditionalRequirementError(
                "argument %s is required when %s is given" % (target, condition),
                title="conditional requirement",
                code=FaultCode.CONDITIONAL_REQUIREMENT,
                target=target,
                condition=condition,
                hint="add %s or drop %s" % (target, condition),
                docs=getdoc(FaultCode.CONDITIONAL_REQUIREMENT),
            ))


def _check_ranges(command, result, route):
    for argument in command.arguments.values():
        if getattr(argument, "range", None) is None:
            continue
        low, high = argument.range
        if argument.name in result._values:
            values = [result._values[argument.name]]
        else:
            values = result._lists.get(argument.name, [])
        for raw in values:
            if (value := parse_integer(raw)) is None:
                trigger(NotAnIntegerError(
                    "value %r for %s is not an integer" % (raw, argument.display),
                    title="not an integer",
                    code=FaultCode.NOT_AN_INTEGER,
                    input=argument.display,
                    value=raw,
                    hint="pass a whole number between %d and %d" % (low, high),
                    docs=getdoc(FaultCode.NOT_AN_INTEGER),
                ))
            if not low <= value <= high:
                trigger(OutOfRangeError(
                    "value %d for %s is out of range [%d, %d]" % (value, argument.display, low, high),
                    title="value out of range",
                    code=FaultCode.OUT_OF_RANGE,
                    input=argument.display,
                    value=raw,
                    bounds=(low, high),
                    hint="pass a whole number between %d and %d" % (low, high),
                    docs=getdoc(FaultCode.OUT_OF_RANGE),
                ))


def validate(command, result, /):
    """
    run every constraint of `command` over `result`, failing on the first one.
    """
    route = " ".join(step.name for step in command.path)
    for check in (
            _check_required,
            _check_positionals,
            _check_exclusive,
            _check_together,
            _check_anyof,
            _check_conditions,
            _check_ranges,
    ):
        check(command, result, route)


__all__ = (
    "apply_defaults",
    "validate",
)
