r"""
Argosy argument specifications.

Overview
- Specs
  • Cardinal: positional, value-bearing argument (one token per declared cardinal).
  • Option: named, value-bearing option (-o/--output) with plain, append, nargs,
    delimiter and key=value map collection modes.
  • Flag: named, presence-only switch (-v/--verbose), optionally counted or negatable.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes selected
    fields via read-only properties declared in __introspectable__/__displayable__.

Metadata (sanitized on construction)
- Shared (all specs)
  • required, hidden: bool.
  • deprecated: bool | str (a string doubles as the deprecation reason).
  • descr: Unset | str | Text (short help), non-empty when provided.
- Named (Option/Flag)
  • names: one or more of "--long" (first is primary, later ones are aliases) and
    at most one "-x" short name; duplicates rejected.
  • persistent: bool (visible to every descendant command).
- Value-bearing (Cardinal/Option)
  • metavar: Unset | str, default, choices, range (inclusive integer bounds).
- Option only
  • nargs (int >= 2), append, delimiter (single character), map.
    nargs, delimiter and map all imply append.
- Flag only
  • count (implies flag semantics), negatable (adds --no-<long>).

The internal name of an argument is the callback parameter it is bound to; it is
assigned once, when a Command discovers it (see Command in argosy.commands).

Quick example:
    >>> from argosy.arguments import Cardinal, Option, Flag
    >>> pattern = Cardinal("PATTERN", required=True)
    >>> jobs = Option("--jobs", "-j", range=(1, 64), default=4)
    >>> define = Option("--define", "-D", map=True, delimiter=",")
    >>> verbose = Flag("--verbose", "-v", count=True, persistent=True)
"""
import functools
import operator
import re
from collections.abc import Iterable, Mapping, Set

from rich.text import Text

from .utils import *

_LONG = re.compile(r"--[^\W\d_](-?[^\W_]+)*")
_SHORT = re.compile(r"-[^\s=-]")


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable, read-only descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
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


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by every spec.

    - descr: Unset | str | Text; strings are trimmed and must stay non-empty.
    - deprecated: bool | str; a string becomes the deprecation reason.
    - required/hidden: coerced to bool.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if isinstance(deprecated := metadata["deprecated"], str):
        if not (deprecated := deprecated.strip()):
            raise ValueError(f"{cls.__typename__} 'deprecated' reason cannot be empty")
        metadata["deprecated"], metadata["reason"] = True, deprecated
    elif isinstance(deprecated, bool):
        metadata["reason"] = None
    else:
        raise TypeError(f"{cls.__typename__} 'deprecated' must be a boolean or a string")

    metadata["required"] = bool(metadata["required"])
    metadata["hidden"] = bool(metadata["hidden"])


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate and split the names of option-like specs.

    Accepted forms
    - long:  "--name", "--long-name" (unicode letters allowed, no underscores)
    - short: "-x" (exactly one character, digits allowed)

    Result
    - long: the first long name (without the leading "--"), or None.
    - aliases: every further long name, in declaration order.
    - short: the short character, or None.
    - names: every accepted spelling, in declaration order.

    Raises
    - TypeError: no names at all, or a non-string entry.
    - ValueError: malformed names, duplicates, or more than one short name.
    """
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    names = []
    longs = []
    shorts = []
    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        elif _LONG.fullmatch(name):
            longs.append(name[2:])
        elif _SHORT.fullmatch(name):
            shorts.append(name[1:])
        else:
            raise ValueError(f"{cls.__typename__} name {name!r} must be '--long-name' or a single-character '-x'")
        names.append(name)

    if len(shorts) > 1:
        raise ValueError(f"{cls.__typename__} can have at most one short name")

    metadata["names"] = tuple(names)
    metadata["long"] = longs[0] if longs else None
    metadata["aliases"] = tuple(longs[1:])
    metadata["short"] = shorts[0] if shorts else None
    metadata["persistent"] = bool(metadata["persistent"])


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate metadata for value-bearing specs (Cardinal, Option).

    - metavar: Unset or a non-empty string.
    - choices: iterable of allowed raw values; stored as strings. Duplicates are
      rejected unless given as a Set (sets are sorted for stable messages).
    - range: None or an inclusive (min, max) integer pair with min <= max.
    """
    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar)

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of strings")
    if isinstance(choices, Set):
        choices = sorted(map(str, choices))
    else:
        sanitized = []
        for choice in map(str, choices):
            if choice in sanitized:
                raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
            sanitized.append(choice)
        choices = sanitized
    metadata["choices"] = tuple(choices)

    if (bounds := metadata["range"]) is not None:
        try:
            low, high = bounds
        except (TypeError, ValueError):
            raise TypeError(f"{cls.__typename__} 'range' must be a (min, max) pair") from None
        if any(isinstance(x, bool) or not isinstance(x, int) for x in (low, high)):
            raise TypeError(f"{cls.__typename__} 'range' bounds must be integers")
        if low > high:
            raise ValueError(f"{cls.__typename__} 'range' minimum cannot exceed its maximum")
        metadata["range"] = (low, high)


def _sanitize_collection_metadata(cls, metadata, /):
    """
    Internal: normalize the collection modes of an Option.

    - nargs: None or an integer >= 2 (a single value is the plain mode).
    - delimiter: None or exactly one character.
    - nargs, delimiter and map imply append.
    - map cannot be combined with nargs or range.
    - default is shaped after the mode: str for plain options, a list of strings
      for appended ones, a dict of strings for maps.
    """
    if (nargs := metadata["nargs"]) is not None:
        if isinstance(nargs, bool) or not isinstance(nargs, int):
            raise TypeError(f"{cls.__typename__} 'nargs' must be an integer")
        if nargs < 2:
            raise ValueError(f"{cls.__typename__} 'nargs' must be at least 2")

    if (delimiter := metadata["delimiter"]) is not None:
        if not isinstance(delimiter, str):
            raise TypeError(f"{cls.__typename__} 'delimiter' must be a string")
        if len(delimiter) != 1:
            raise ValueError(f"{cls.__typename__} 'delimiter' must be a single character")

    metadata["map"] = bool(metadata["map"])
    if metadata["map"] and nargs is not None:
        raise TypeError(f"{cls.__typename__} 'map' cannot be combined with 'nargs'")
    if metadata["map"] and metadata["range"] is not None:
        raise TypeError(f"{cls.__typename__} 'map' cannot be combined with 'range'")

    metadata["append"] = bool(metadata["append"]) or nargs is not None or delimiter is not None or metadata["map"]

    if (default := metadata["default"]) is None:
        return
    if metadata["map"]:
        if not isinstance(default, Mapping):
            raise TypeError(f"{cls.__typename__} map 'default' must be a mapping")
        metadata["default"] = {str(key): str(value) for key, value in default.items()}
    elif metadata["append"]:
        if isinstance(default, str) or not isinstance(default, Iterable):
            default = [default]
        metadata["default"] = [str(value) for value in default]
    else:
        metadata["default"] = str(default)


class Argument(metaclass=ArgumentType):
    """
    Common base of Cardinal, Option and Flag.

    Holds the internal name binding; a spec is bound once to the callback
    parameter that declares it and keeps that name for its whole life.
    """

    _name = None

    @property
    def name(self):
        """
        Internal name (the callback parameter), None until bound.
        """
        return self._name

    def _bind(self, name, /):
        if self._name is not None and self._name != name:
            raise TypeError(f"{type(self).__typename__} is already bound to parameter {self._name!r}")
        self._name = name
        return self

    @property
    def display(self):
        """
        Name used in user-facing messages.
        """
        raise NotImplementedError

    def __setattr__(self, name, value, /):
        if not name.startswith("_"):
            raise AttributeError(f"{type(self).__typename__} is read-only")
        object.__setattr__(self, name, value)


class Cardinal(Argument):
    """
    Positional, value-bearing argument specification.

    Positionals take one token each and are filled in declaration order. They
    support choices, an inclusive integer range, a default and the required
    marker, but can never be persistent.
    """

    __introspectable__ = (
        "metavar",
        "default",
        "choices",
        "range",
        "required",
        "descr",
        "hidden",
        "deprecated",
        "reason",
    )

    def __new__(
            cls,
            metavar=Unset,
            /,
            default=None,
            choices=(),
            range=None,
            descr=Unset,
            *,
            required=False,
            hidden=False,
            deprecated=False
    ):
        metadata = {
            "metavar": metavar,
            "default": None if default is None else str(default),
            "choices": choices,
            "range": range,
            "descr": descr,
            "required": required,
            "hidden": hidden,
            "deprecated": deprecated,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def display(self):
        return self.metavar or (self.name or "value").upper()

    def __cardinal__(self):
        return self


class Option(Argument):
    """
    Named, value-bearing option specification.

    Collection modes
    - plain (default): the last occurrence wins.
    - append: every occurrence is pushed onto an ordered list.
    - nargs=N: every occurrence consumes exactly N following tokens.
    - delimiter=",": each value is split, empty fragments are dropped.
    - map: each value (or fragment) is a KEY=VALUE pair.

    Choices are checked on every collected value, range bounds after parsing.
    """

    __introspectable__ = (
        "names",
        "long",
        "aliases",
        "short",
        "metavar",
        "default",
        "choices",
        "nargs",
        "append",
        "delimiter",
        "map",
        "range",
        "required",
        "persistent",
        "descr",
        "hidden",
        "deprecated",
        "reason",
    )
    __displayable__ = (
        "names",
        "metavar",
        "default",
        "choices",
        "nargs",
        "append",
        "delimiter",
        "map",
        "range",
        "required",
        "persistent",
    )

    def __new__(
            cls,
            *names,
            metavar=Unset,
            default=None,
            choices=(),
            nargs=None,
            append=False,
            delimiter=None,
            map=False,
            range=None,
            descr=Unset,
            required=False,
            persistent=False,
            hidden=False,
            deprecated=False
    ):
        metadata = {
            "names": names,
            "metavar": metavar,
            "default": default,
            "choices": choices,
            "nargs": nargs,
            "append": append,
            "delimiter": delimiter,
            "map": map,
            "range": range,
            "descr": descr,
            "required": required,
            "persistent": persistent,
            "hidden": hidden,
            "deprecated": deprecated,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)
        _sanitize_collection_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def display(self):
        return self.names[0]

    def __option__(self):
        return self


class Flag(Argument):
    """
    Named, presence-only option specification.

    - plain flags record True (repeating them is harmless).
    - count=True flags record how many times they were given.
    - negatable=True flags also answer to --no-<long>, recording False.
    """

    __introspectable__ = (
        "names",
        "long",
        "aliases",
        "short",
        "count",
        "negatable",
        "required",
        "persistent",
        "descr",
        "hidden",
        "deprecated",
        "reason",
    )

    def __new__(
            cls,
            *names,
            count=False,
            negatable=False,
            descr=Unset,
            required=False,
            persistent=False,
            hidden=False,
            deprecated=False
    ):
        metadata = {
            "names": names,
            "count": bool(count),
            "negatable": bool(negatable),
            "descr": descr,
            "required": required,
            "persistent": persistent,
            "hidden": hidden,
            "deprecated": deprecated,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

        if metadata["negatable"]:
            if metadata["count"]:
                raise TypeError(f"{cls.__typename__} cannot be both counted and negatable")
            if metadata["long"] is None:
                raise TypeError(f"negatable {cls.__typename__} needs a long name")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def display(self):
        return self.names[0]

    def __flag__(self):
        return self


__all__ = (
    # Classes (specifications)
    "Argument",
    "Cardinal",
    "Option",
    "Flag",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
