"""
Parse results and outcomes.

ParseResult is the per-invocation store a Command fills while it consumes
tokens. It keeps one mapping per value shape (flags, scalar values, lists,
key=value maps and counts), the ordered positional values, and for
subcommand dispatch the child name plus the nested child result.

Outcomes are what Command.parse() hands back instead of exiting:
- Success(result)
- HelpRequested(text)
- VersionRequested(text)
- Failure(error)
"""
import re
from collections import namedtuple
from types import MappingProxyType

from .faults import FaultCode, NotAnIntegerError

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_integer(value, /):
    """
    locale-free base-10 integer parse.

    an optional leading sign is accepted; whitespace, underscores, other
    bases and non-ascii digits are not. returns None when unparsable.
    """
    if not _INTEGER.fullmatch(value):
        return None
    return int(value)


class ParseResult:
    """
    Typed, queryable values of one parsed command.

    Every accessor is keyed by the internal argument name (the callback
    parameter). The store is only written by the parser; callers read it.
    """

    __slots__ = (
        "_flags",
        "_values",
        "_lists",
        "_maps",
        "_counts",
        "_positionals",
        "_subcommand",
        "_child",
    )

    def __init__(self):
        self._flags = {}
        self._values = {}
        self._lists = {}
        self._maps = {}
        self._counts = {}
        self._positionals = []
        self._subcommand = ""
        self._child = None

    def get_flag(self, name, /):
        return self._flags.get(name, False)

    def get_string(self, name, /):
        try:
            return self._values[name]
        except KeyError:
            raise KeyError(f"no value for argument {name!r}") from None

    def get_int(self, name, /):
        if (value := parse_integer(raw := self.get_string(name))) is None:
            raise NotAnIntegerError(
                "value %r of argument %r is not an integer" % (raw, name),
                title="not an integer",
                code=FaultCode.NOT_AN_INTEGER,
                input=name,
                value=raw,
            )
        return value

    def get_count(self, name, /):
        return self._counts.get(name, 0)

    def get_list(self, name, /):
        return list(self._lists.get(name, ()))

    def get_map(self, name, /):
        return dict(self._maps.get(name, {}))

    def has(self, name, /):
        return any(name in store for store in (
            self._flags,
            self._values,
            self._lists,
            self._maps,
            self._counts,
        ))

    @property
    def positionals(self):
        return tuple(self._positionals)

    @property
    def subcommand(self):
        return self._subcommand

    @property
    def subcommand_result(self):
        return self._child

    def _snapshot(self, name, /):
        """
        internal: every stored shape of one name, for persistent synchronization.
        """
        return {
            store: getattr(self, store)[name]
            for store in ("_flags", "_values", "_lists", "_maps", "_counts")
            if name in getattr(self, store)
        }

    def _merge(self, name, snapshot, /):
        """
        internal: fold a snapshot taken from another result into this one.

        later (merged-in) flags and scalar values win, counts add up, lists are
        concatenated after the existing ones, maps are updated entry by entry.
        """
        for store, value in snapshot.items():
            target = getattr(self, store)
            match store:
                case "_counts":
                    target[name] = target.get(name, 0) + value
                case "_lists":
                    target[name] = target.get(name, []) + list(value)
                case "_maps":
                    target[name] = target.get(name, {}) | dict(value)
                case _:
                    target[name] = value

    def _assign(self, name, snapshot, /):
        """
        internal: replace every stored shape of one name with a snapshot.
        """
        for store in ("_flags", "_values", "_lists", "_maps", "_counts"):
            getattr(self, store).pop(name, None)
        self._merge(name, snapshot)

    def __repr__(self):
        shapes = {
            "flags": self._flags,
            "values": self._values,
            "lists": self._lists,
            "maps": self._maps,
            "counts": self._counts,
            "positionals": self._positionals,
        }
        fields = ", ".join(f"{key}={value!r}" for key, value in shapes.items() if value)
        if self._subcommand:
            fields += (", " if fields else "") + f"subcommand={self._subcommand!r}"
        return f"parse-result({fields})"

    def __rich_repr__(self):
        yield "flags", MappingProxyType(self._flags)
        yield "values", MappingProxyType(self._values)
        yield "lists", MappingProxyType(self._lists)
        yield "maps", MappingProxyType(self._maps)
        yield "counts", MappingProxyType(self._counts)
        yield "positionals", tuple(self._positionals)
        yield "subcommand", self._subcommand
        yield "subcommand_result", self._child


Success = namedtuple("Success", ("result",))
HelpRequested = namedtuple("HelpRequested", ("text",))
VersionRequested = namedtuple("VersionRequested", ("text",))
Failure = namedtuple("Failure", ("error",))


__all__ = (
    "ParseResult",
    "Success",
    "HelpRequested",
    "VersionRequested",
    "Failure",
    "parse_integer",
)
