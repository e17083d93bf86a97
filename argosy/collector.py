"""
Value collection: turn a resolved spec plus raw token(s) into stored values.

collect() is called by the parse loop once per option occurrence. `value` is
the attached value (from '--name=value' or '-nvalue') or None, in which case
value-bearing options pull what they need from the front of `tokens`.
"""
from .arguments import Flag, Option
from .faults import *


def check_choice(argument, value, input, /):
    """
    reject `value` when the spec declares choices and it is not one of them.
    """
    if argument.choices and value not in argument.choices:
        trigger(InvalidChoiceError(
            "invalid choice %r for %s (choose from %s)" % (
                value, input, ", ".join(map(repr, argument.choices))
            ),
            title="invalid choice",
            code=FaultCode.INVALID_CHOICE,
            input=input,
            value=value,
            choices=argument.choices,
            hint="use one of: %s" % ", ".join(argument.choices),
            docs=getdoc(FaultCode.INVALID_CHOICE),
        ))
    return value


def _missing(input, message, /):
    trigger(MissingValueError(
        message,
        title="missing value",
        code=FaultCode.MISSING_VALUE,
        input=input,
        hint="pass the value after a space (for example: %s <value>)" % input,
        docs=getdoc(FaultCode.MISSING_VALUE),
    ))


def _inline(input, message, hint, /):
    trigger(InlineValueError(
        message,
        title="unexpected inline value",
        code=FaultCode.INLINE_VALUE,
        input=input,
        hint=hint,
        docs=getdoc(FaultCode.INLINE_VALUE),
    ))


def _collect_pair(result, argument, input, fragment, /):
    key, separator, value = fragment.partition("=")
    if not separator:
        trigger(InvalidKeyValueFormatError(
            "option %s expects KEY=VALUE, got %r" % (input, fragment),
            title="invalid key=value format",
            code=FaultCode.INVALID_KEY_VALUE_FORMAT,
            input=input,
            value=fragment,
            hint="write the entry as KEY=VALUE (for example: %s NAME=value)" % input,
            docs=getdoc(FaultCode.INVALID_KEY_VALUE_FORMAT),
        ))
    check_choice(argument, key, input)
    result._maps.setdefault(argument.name, {})[key] = value
    result._lists.setdefault(argument.name, []).append(fragment)


def _collect_flag(result, argument, input, value, negated, /):
    if value is not None:
        _inline(
            input,
            "flag %s does not take a value" % input,
            "remove everything from '=' (for example: %s)" % input,
        )
    if argument.count:
        result._counts[argument.name] = result._counts.get(argument.name, 0) + 1
    else:
        result._flags[argument.name] = not negated


def _collect_nargs(result, argument, input, value, tokens, /):
    if value is not None:
        _inline(
            input,
            "option %s takes %d separate values and cannot be given an inline value" % (input, argument.nargs),
            "pass the values after a space (for example: %s %s)" % (
                input, " ".join(["<value>"] * argument.nargs)
            ),
        )
    if len(tokens) < argument.nargs:
        _missing(input, "option %s requires %d values" % (input, argument.nargs))
    values = result._lists.setdefault(argument.name, [])
    for _ in range(argument.nargs):
        values.append(check_choice(argument, tokens.popleft(), input))


def collect(result, argument, input, value, tokens, /, *, negated=False):
    """
    store one occurrence of `argument` into `result`.

    parameters
    - result: the ParseResult being filled.
    - argument: resolved Option or Flag.
    - input: the spelling used on the command line (for messages).
    - value: attached value or None.
    - tokens: deque of the remaining tokens (consumed from the left).
    - negated: True when the flag was given as --no-<name>.
    """
    if isinstance(argument, Flag):
        return _collect_flag(result, argument, input, value, negated)
    if not isinstance(argument, Option):
        raise TypeError("collect() argument must be an option or a flag")

    if argument.nargs is not None:
        return _collect_nargs(result, argument, input, value, tokens)

    if value is None:
        if not tokens:
            _missing(input, "option %s requires a value" % input)
        value = tokens.popleft()

    if argument.delimiter is not None:
        fragments = [fragment for fragment in value.split(argument.delimiter) if fragment]
    else:
        fragments = [value]

    if argument.map:
        result._maps.setdefault(argument.name, {})
        for fragment in fragments:
            _collect_pair(result, argument, input, fragment)
    elif argument.append:
        values = result._lists.setdefault(argument.name, [])
        for fragment in fragments:
            values.append(check_choice(argument, fragment, input))
    else:
        result._values[argument.name] = check_choice(argument, value, input)


def store_positional(result, argument, value, /):
    """
    record a bare token as the next positional value.

    `argument` is the declared Cardinal it fills, or None for a surplus value
    (reported later by the validator as too many positionals).
    """
    if argument is not None:
        check_choice(argument, value, argument.display)
        result._values[argument.name] = value
    result._positionals.append(value)


__all__ = (
    "collect",
    "check_choice",
    "store_positional",
)
