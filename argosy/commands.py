"""
Argosy command layer: build command trees, parse token lists, dispatch.

What this module provides
- Command: wraps a Python callable into a parseable CLI node with:
  • Argument discovery from the callable's defaults (Cardinal, Option, Flag).
  • Hierarchies (parent/child) to model subcommands, with persistent options
    shared along the whole route.
  • A fail-fast parse loop returning a tagged outcome instead of exiting.
  • Group constraints (exclusive, together, anyof, conditions) checked once
    after parsing.

- Factories and helpers:
  • command(...): create a Command or a decorator that produces one.
  • invoke(obj, prompt): print-and-exit runner for Commands or plain callables.
  • is_negative_number(token): the heuristic that keeps '-5' a positional.

Parse loop
- tokens[0] is the program placeholder and is skipped.
- '--' switches to positional-only mode for every remaining token.
- '--help'/'-h'/'-?' and '--version'/'-V' stop parsing with a help or version
  outcome wherever they appear before '--'.
- '--name[=value]' and '--no-name' are resolved by argosy.resolver, values are
  stored by argosy.collector.
- '-x', '-xvalue' and '-abc' (merged flags, the first value option takes the
  rest of the token) are resolved one character at a time.
- '-5'-like tokens are positionals unless a digit is a registered short name.
- a bare word matching a child name dispatches the rest of the tokens to it.
- after the loop: defaults, persistent synchronization, then validation.

Quick start
    from argosy import command, Cardinal, Option, Flag

    @command(version="1.0.0")
    def app(*, verbose=Flag("--verbose", "-v", count=True, persistent=True)):
        ...

    @app.command()
    def search(pattern=Cardinal("PATTERN", required=True), /, limit=Option("--limit", range=(1, 100))):
        ...

    outcome = app.parse(["app", "search", "-vv", "needle", "--limit", "5"])
"""
import copy
import inspect
import re
import shlex
import sys
from collections import deque
from collections.abc import Iterable
from inspect import Parameter

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .arguments import Cardinal, Option, Flag
from .collector import collect, store_positional
from .distance import suggest
from .faults import *
from .resolver import resolve_option, resolve_short
from .results import *
from .utils import *
from .validator import apply_defaults, validate

_NEGATIVE = re.compile(r"-(\d+|\.\d+)(\.\d+)?([eE][+-]?\d+)?")

_HELP = ("--help", "-h", "-?")
_VERSION = ("--version", "-V")
_RESERVED = frozenset(_HELP + _VERSION)


def is_negative_number(token, /):
    """
    return True when `token` reads as a negative number ('-5', '-.5', '-1.5e3').
    """
    return _NEGATIVE.fullmatch(token) is not None


class _Interrupt(Exception):
    """
    internal: unwinds the (possibly nested) parse loop with a help or version outcome.
    """

    def __init__(self, outcome):
        super().__init__(outcome)
        self.outcome = outcome


class CommandType(type):
    """
    Metaclass that turns commands into introspectable, read-only nodes.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ for diagnostics.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in build-time error messages.
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
                ", ".join("%s=%r" % pair for pair in self.__rich_repr__())
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _conflict(message, input, /):
    return RegistrationConflictError(
        message,
        title="registration conflict",
        code=FaultCode.REGISTRATION_CONFLICT,
        input=input,
    )


def _resolve_argument(cls, name, x, /):
    """
    Return the concrete spec (Cardinal|Option|Flag) from a parameter default.
    """
    if sum((
        callable(getattr(x, "__cardinal__", None)),
        callable(getattr(x, "__option__", None)),
        callable(getattr(x, "__flag__", None)),
    )) != 1:
        raise TypeError(f"{cls.__typename__} parameter {name!r} default must be a cardinal, an option or a flag")

    if hasattr(x, "__cardinal__"):
        if not isinstance(argument := x.__cardinal__(), Cardinal):
            raise TypeError("__cardinal__() non-cardinal returned")
    elif hasattr(x, "__option__"):
        if not isinstance(argument := x.__option__(), Option):
            raise TypeError("__option__() non-option returned")
    elif not isinstance(argument := x.__flag__(), Flag):
        raise TypeError("__flag__() non-flag returned")
    return argument


def _process_source(cls, metadata):
    """
    Introspect the command callback and materialize argument specs.

    - Every parameter must default to a Cardinal, an Option or a Flag.
    - Cardinals must be positional-only (declaration order is positional order);
      options and flags must not be.
    - Each spec is bound to its parameter name (the internal name).

    Mutates metadata["arguments"] (name -> spec) and metadata["cardinals"].
    """
    arguments = metadata["arguments"] = {}
    cardinals = metadata["cardinals"] = []

    try:
        signature = inspect.signature(metadata["callback"])
    except TypeError:
        raise TypeError(f"{cls.__typename__} 'callback' must be callable") from None
    except ValueError:
        raise ValueError(f"{cls.__typename__} 'callback' must be an inspectable callable") from None

    for name, parameter in signature.parameters.items():
        if parameter.default is Parameter.empty:
            raise TypeError(f"{cls.__typename__} 'callback' parameter {name!r} must have a default")

        argument = _resolve_argument(cls, name, parameter.default)
        if isinstance(argument, Cardinal) and parameter.kind is not Parameter.POSITIONAL_ONLY:
            raise TypeError(f"{cls.__typename__} 'callback' cardinal at parameter {name!r}, parameter must be positional-only")
        if not isinstance(argument, Cardinal) and parameter.kind is Parameter.POSITIONAL_ONLY:
            raise TypeError(f"{cls.__typename__} 'callback' option or flag at parameter {name!r}, parameter cannot be positional-only")

        arguments[name] = argument._bind(name)
        if isinstance(argument, Cardinal):
            cardinals.append(argument)

    metadata["parameters"] = list(signature.parameters.values())


def _process_strings(cls, metadata):
    """
    Normalize scalar string metadata (name, descr, version, epilog).

    Strings are trimmed and must stay non-empty; Unset resolves to None.
    name and version must be plain strings, descr/epilog may be rich Text.
    """
    for name in ("name", "descr", "version", "epilog"):
        allowed = str | Unset if name in ("name", "version") else str | Text | Unset
        if not isinstance(object := metadata[name], allowed):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(object)

    if metadata["name"] is None:
        raise TypeError(f"{cls.__typename__} 'name' is required when the callback has no __name__")
    if metadata["name"].startswith("-") or any(char.isspace() for char in metadata["name"]):
        raise ValueError(f"{cls.__typename__} 'name' cannot start with '-' or contain whitespace")


def _process_groups(cls, metadata):
    """
    Compile and validate group constraints.

    Input
    - exclusive, together, anyof: Iterable[Iterable[str]] of internal names.
    - conditions: Iterable[tuple[str, str]] of (target, condition) pairs.

    Validation rules
    - Outer and inner values must be iterables (strings are rejected as containers).
    - Every name must be a declared argument of the command.
    - Groups need at least two distinct members; pairs two distinct names.

    Result
    - Each entry becomes a tuple of tuples, in declaration order.
    """
    for key in ("exclusive", "together", "anyof", "conditions"):
        if not isinstance(groups := metadata[key], Iterable) or isinstance(groups, str | Text):
            raise TypeError(f"{cls.__typename__} {key!r} must be an iterable of iterables of strings")

        sanitized = []
        for group in groups:
            if not isinstance(group, Iterable) or isinstance(group, str | Text):
                raise TypeError(f"{cls.__typename__} {key!r} must be an iterable of iterables of strings")
            names = []
            for name in group:
                if not isinstance(name, str):
                    raise TypeError(f"{cls.__typename__} {key!r} must be an iterable of iterables of strings")
                elif name not in metadata["arguments"]:
                    raise ValueError(f"{cls.__typename__} {key!r} argument {name!r} is not declared")
                elif name in names:
                    raise ValueError(f"{cls.__typename__} {key!r} groups cannot contain duplicates")
                names.append(name)
            if key == "conditions" and len(names) != 2:
                raise ValueError(f"{cls.__typename__} 'conditions' entries must be (target, condition) pairs")
            if len(names) < 2:
                raise ValueError(f"{cls.__typename__} {key!r} groups must have at least two elements")
            sanitized.append(tuple(names))
        metadata[key] = tuple(sanitized)


def _check_spellings(cls, arguments, /):
    """
    Reject reserved spellings and spellings shared by two specs of one command.
    """
    seen = {}
    for argument in arguments:
        for name in getattr(argument, "names", ()):
            if name in _RESERVED:
                raise _conflict(f"{cls.__typename__} name {name!r} is reserved", name)
            if seen.setdefault(name, argument) is not argument:
                raise _conflict(f"{cls.__typename__} name {name!r} is already in use", name)


def _check_persistent(cls, persistents, arguments, /):
    """
    Reject local arguments that would shadow an inherited persistent one,
    including the inherited spec itself declared again.

    Both the spellings and the internal names must stay apart, as they share
    one result store along the route.
    """
    for persistent in persistents:
        for argument in arguments:
            if argument is persistent:
                raise _conflict(
                    f"{cls.__typename__} argument {argument.name!r} is already inherited as a persistent argument",
                    argument.name,
                )
            if argument.name == persistent.name:
                raise _conflict(
                    f"{cls.__typename__} argument {argument.name!r} collides with a persistent argument",
                    argument.name,
                )
            if shared := set(getattr(argument, "names", ())) & set(persistent.names):
                name = min(shared)
                raise _conflict(
                    f"{cls.__typename__} name {name!r} collides with a persistent argument",
                    name,
                )


def _attach_to_parent(self, parent):
    """
    Register this command under its parent.

    Raises
    - ValueError: the child name is already taken under this parent.
    - RegistrationConflictError: the name 'help' (reserved for the pseudo
      subcommand), a parent with positionals that is not mixed, or a local
      argument shadowing a persistent argument of any ancestor.
    """
    if parent is None:
        return

    if self.name == "help":
        raise _conflict(f"{type(self).__typename__} name 'help' is reserved", "help")
    if self.name in parent._children:
        typeof = "subcommand" if parent.parent else "command"
        raise ValueError(f"{type(self).__typename__} {typeof} name {self.name!r} is already in use")
    if parent._cardinals and not parent._mixed:
        raise _conflict(
            f"{type(self).__typename__} parent {parent.name!r} declares positionals and is not mixed",
            self.name,
        )
    _check_persistent(type(self), parent._persistents(), self._arguments.values())

    parent._children[self.name] = self


class Command(metaclass=CommandType):
    """
    High-level command object that wraps a Python callable and parses CLI tokens.

    Responsibilities
    - Introspection: exposes metadata (name, descr, version, groups...) as read-only properties.
    - Composition: supports parent/child hierarchies to model subcommands.
    - Parsing: parse(tokens) returns Success/HelpRequested/VersionRequested/Failure.
    - Invocation: acts as a callable (forwards to the callback) and can be executed via __invoke__.

    Lifecycle
    - Constructed from a callback; the signature is inspected and defaults are
      resolved to argument specs (Cardinal/Option/Flag).
    - Metadata is sanitized/normalized; group constraints are compiled.
    - Attaches to its parent (if given) under registration-time rules.
    """

    __introspectable__ = (
        "name",
        "descr",
        "version",
        "epilog",
        "hidden",
        "arguments",
        "cardinals",
        "exclusive",
        "together",
        "anyof",
        "conditions",
        "parent",
        "children",
        "mixed",
        "negatives",
        "fancy",
        "colorful",
    )

    __displayable__ = (
        "name",
        "descr",
        "version",
        "arguments",
        "children",
        "mixed",
        "negatives",
        "fancy",
        "colorful",
    )

    @property
    def root(self):
        """
        Return the topmost command in the current command hierarchy.
        """
        child, parent = self, self.parent
        while parent:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Return the full ancestry from root to this command as a tuple.
        """
        path = [command := self]
        while command.parent:
            path.append(command := command.parent)
        return tuple(reversed(path))

    @property
    def route(self):
        """
        The qualified, space-separated name of this command ('app remote add').
        """
        return " ".join(step.name for step in self.path)

    def __new__(
            cls,
            source,
            /,
            parent=Unset,
            name=Unset,
            descr=Unset,
            version=Unset,
            epilog=Unset,
            exclusive=(),
            together=(),
            anyof=(),
            conditions=(),
            *,
            mixed=False,
            negatives=Unset,
            hidden=False,
            fancy=Unset,
            colorful=Unset
    ):
        """
        Construct a Command from a callback.

        Parameters
        - parent: Command | Unset
          Parent under which to attach this command. If Unset, remains top-level.
        - name, descr, version, epilog: str | Unset
          Identity and help scalars. name defaults to the callback __name__,
          descr to its docstring.
        - exclusive, together, anyof: Iterable[Iterable[str]]
          Group constraints over internal argument names.
        - conditions: Iterable[tuple[str, str]]
          (target, condition) pairs: condition present requires target present.
        - mixed: bool
          Allow declared positionals together with subcommands.
        - negatives: bool | Unset
          Always read '-<number>' tokens as positionals. Inherited when Unset.
        - hidden: bool
          Keep the command out of help listings and suggestions.
        - fancy, colorful: bool | Unset
          Presentation flags used by the adapter. Inherited when Unset.
        """
        if not isinstance(parent, Command | Unset):
            raise TypeError(f"{cls.__typename__} 'parent' must be a command")
        if not callable(source):
            raise TypeError(f"{cls.__typename__} 'callback' must be callable")

        metadata = {
            "callback": source,
            "name": coalesce(name, getattr(source, "__name__", Unset)),
            "descr": coalesce(descr, inspect.getdoc(source) or Unset),
            "version": version,
            "epilog": epilog,
            "exclusive": exclusive,
            "together": together,
            "anyof": anyof,
            "conditions": conditions,
            "mixed": bool(mixed),
            "negatives": bool(coalesce(negatives, getattr(parent, "negatives", False))),
            "hidden": bool(hidden),
            "fancy": bool(coalesce(fancy, getattr(parent, "fancy", False))),
            "colorful": bool(coalesce(colorful, getattr(parent, "colorful", False))),
            "parent": coalesce(parent),
            "children": {},
        }
        _process_source(cls, metadata)
        _process_strings(cls, metadata)
        _process_groups(cls, metadata)
        _check_spellings(cls, metadata["arguments"].values())

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        _attach_to_parent(self, self.parent)
        return self

    def __call__(self, *args, **kwargs):
        return self._callback(*args, **kwargs)

    def command(self, source=Unset, /, *args, **kwargs):
        """
        Create a subcommand under this command.

        Thin wrapper around the top-level command(...) factory that injects
        the current command as the parent; supports both the direct and the
        decorator (@app.command(...)) forms.
        """
        return command(source, self, *args, **kwargs)

    def argument(self, name, argument, /):
        """
        Register one more argument after construction.

        The same checks as signature discovery apply, plus the registration
        rules of the tree: no positional under a non-mixed command that already
        has children, and no persistent argument shadowing a descendant's one.

        Returns the registered spec.
        """
        cls = type(self)
        if not isinstance(name, str) or not name.isidentifier():
            raise TypeError(f"{cls.__typename__} argument name must be an identifier")
        if name in self._arguments:
            raise _conflict(f"{cls.__typename__} argument {name!r} is already declared", name)

        argument = _resolve_argument(cls, name, argument)
        if isinstance(argument, Cardinal) and self._children and not self._mixed:
            raise _conflict(f"{cls.__typename__} {self.name!r} has subcommands and is not mixed", name)
        _check_spellings(cls, [*self._arguments.values(), argument])

        argument._bind(name)
        if self.parent is not None:
            _check_persistent(cls, self.parent._persistents(), [argument])
        if getattr(argument, "persistent", False):
            for descendant in self._descendants():
                _check_persistent(cls, [argument], descendant._arguments.values())

        self._arguments[name] = argument
        if isinstance(argument, Cardinal):
            self._cardinals.append(argument)
        return argument

    def _descendants(self):
        stack = list(self._children.values())
        while stack:
            yield (child := stack.pop())
            stack.extend(child._children.values())

    def _persistents(self):
        """
        persistent named arguments visible here: local ones, then inherited ones.
        """
        persistents = [
            argument for argument in self._arguments.values() if getattr(argument, "persistent", False)
        ]
        if self.parent is not None:
            persistents += self.parent._persistents()
        return persistents

    def _recognized(self):
        """
        every named argument a token of this command may resolve to.
        """
        named = [argument for argument in self._arguments.values() if not isinstance(argument, Cardinal)]
        if self.parent is not None:
            named += self.parent._persistents()
        return named

    def parse(self, tokens=Unset, /):
        """
        Parse a full token list (program placeholder first) into an outcome.

        Returns
        - Success(result): every token consumed and every constraint satisfied.
        - HelpRequested(text) / VersionRequested(text): a reserved token was seen.
        - Failure(error): the first CommandException raised while parsing.

        Nothing here prints or exits; see __invoke__ for that policy.
        """
        if tokens is Unset:
            tokens = sys.argv
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be an iterable of strings")

        try:
            return Success(self._parseargs(tokens))
        except _Interrupt as interrupt:
            return interrupt.outcome
        except CommandException as error:
            return Failure(error)

    def _parseargs(self, tokens):
        """
        parse one command level; recursion happens through _dispatch().

        states
        - normal: options, reserved tokens, subcommands and positionals.
        - positional-only: entered by a literal '--', every token is a positional.
        dispatching a subcommand hands over every remaining token and ends the loop.
        """
        result = ParseResult()
        arguments = self._recognized()
        route = self.route
        # '-5' is a value unless a digit is itself a registered short name
        numeric = self.negatives or not any(
            argument.short is not None and argument.short.isdigit() for argument in arguments
        )

        tokens = deque(tokens[1:])
        positional = False
        while tokens:
            token = tokens.popleft()

            if positional:
                self._store(result, token)
            elif token == "--":
                positional = True
            elif token in _HELP:
                raise _Interrupt(HelpRequested(self._helper()))
            elif token in _VERSION:
                raise _Interrupt(VersionRequested(self._versioner()))
            elif token.startswith("--"):
                self._parse_long(result, arguments, token, tokens, route)
            elif token.startswith("-") and len(token) > 1:
                if numeric and is_negative_number(token):
                    self._store(result, token)
                else:
                    self._parse_short(result, arguments, token, tokens, route)
            elif token == "help" and self._children:
                self._pseudohelp(tokens)
            elif token in self._children:
                self._dispatch(result, token, tokens)
                break
            elif self._children and not self._cardinals:
                self._unknown(token)
            else:
                self._store(result, token)

        apply_defaults(self._arguments.values(), result)
        if result._child is not None:
            self._propagate(result)
        validate(self, result)
        return result

    def _parse_long(self, result, arguments, token, tokens, route):
        key, separator, value = token[2:].partition("=")
        argument, negated = resolve_option(arguments, key, route=route)
        input = "--" + key
        self._deprecated(argument, input)
        collect(result, argument, input, value if separator else None, tokens, negated=negated)

    def _parse_short(self, result, arguments, token, tokens, route):
        body = token[1:]
        argument = resolve_short(arguments, body[0], route=route)
        if len(body) == 1 or isinstance(argument, Option):
            self._deprecated(argument, "-" + body[0])
            collect(result, argument, "-" + body[0], body[1:] or None, tokens)
            return

        # merged flags: the first value option takes the rest of the token
        for index, char in enumerate(body):
            argument = resolve_short(arguments, char, route=route)
            self._deprecated(argument, "-" + char)
            if isinstance(argument, Option):
                collect(result, argument, "-" + char, body[index + 1:] or None, tokens)
                return
            collect(result, argument, "-" + char, None, tokens)

    def _store(self, result, token):
        index = len(result._positionals)
        argument = self._cardinals[index] if index < len(self._cardinals) else None
        if argument is not None:
            self._deprecated(argument, argument.display)
        store_positional(result, argument, token)

    def _visible(self):
        return [name for name, child in self._children.items() if not child.hidden]

    def _unknown(self, token):
        typeof = "subcommand" if self.parent else "command"
        suggestion = suggest(token, self._visible())
        if suggestion:
            hint = "did you mean %r? you can also run '%s --help' to see available %ss" % (
                suggestion, self.route, typeof
            )
        else:
            hint = "run '%s --help' to see available %ss" % (self.route, typeof)
        trigger(UnknownSubcommandError(
            "unknown %s %r" % (typeof, token),
            title="unknown %s" % typeof,
            code=FaultCode.UNKNOWN_SUBCOMMAND,
            input=token,
            suggestion=suggestion,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_SUBCOMMAND),
        ))

    def _pseudohelp(self, tokens):
        """
        'app help remote add' is 'app remote add --help'; 'app help' is 'app --help'.
        """
        target = self
        while tokens and target._children:
            if (name := tokens.popleft()) not in target._children:
                target._unknown(name)
            target = target._children[name]
        raise _Interrupt(HelpRequested(target._helper()))

    def _dispatch(self, result, name, tokens):
        """
        parse the remaining tokens with a child, then bubble persistent values up.
        """
        child = self._children[name]
        result._child = child._parseargs([child.route, *tokens])
        result._subcommand = name
        tokens.clear()

        for argument in self._persistents():
            if snapshot := result._child._snapshot(argument.name):
                result._merge(argument.name, snapshot)

    def _propagate(self, result):
        """
        copy the final persistent values of this level down the dispatched chain.
        """
        names = [argument.name for argument in self._persistents()]
        child = result._child
        while child is not None:
            for name in names:
                child._assign(name, result._snapshot(name))
            child = child._child

    def _deprecated(self, argument, input):
        if not argument.deprecated:
            return
        kind = "positional argument" if isinstance(argument, Cardinal) else \
            "option" if isinstance(argument, Option) else "flag"
        trigger(DeprecatedArgumentWarning(
            "%s %s is deprecated%s" % (kind, input, ": %s" % argument.reason if argument.reason else ""),
            title="deprecated %s" % kind,
            code=FaultCode.DEPRECATED_ARGUMENT,
            input=input,
            hint="run '%s --help' to see current usage and alternatives" % self.route,
            docs=getdoc(FaultCode.DEPRECATED_ARGUMENT),
        ))

    def _helper(self):
        """
        Build the plain-text help of this command.

        Sections: usage, description, positionals, options (own and inherited
        persistent ones), commands and epilog. Hidden arguments, hidden children
        and the pseudo 'help' subcommand are left out.
        """
        cardinals = [argument for argument in self._cardinals if not argument.hidden]
        arguments = [argument for argument in self._recognized() if not argument.hidden]
        children = {name: child for name, child in self._children.items() if not child.hidden}

        usage = ["usage:", self.route, "[options]"]
        usage += [argument.display if argument.required else "[%s]" % argument.display for argument in cardinals]
        if children:
            usage.append("<%s> ..." % ("subcommand" if self.parent else "command"))
        lines = [" ".join(usage)]

        if self.descr:
            lines += ["", str(self.descr)]

        def metavar(argument):
            if argument.choices:
                return "{%s}" % ",".join(argument.choices)
            return argument.metavar or argument.name.upper()

        def describe(argument):
            descr = str(argument.descr or "")
            if getattr(argument, "persistent", False) and argument not in self._arguments.values():
                descr = (descr + " " if descr else "") + "(inherited)"
            if argument.deprecated:
                descr = (descr + " " if descr else "") + "(deprecated%s)" % (
                    ": %s" % argument.reason if argument.reason else ""
                )
            return descr

        sections = []
        if cardinals:
            sections.append(("positionals", [(metavar(argument), describe(argument)) for argument in cardinals]))

        options = [
            ("-h, -?, --help", "show this help message and exit"),
            ("-V, --version", "show the version and exit"),
        ]
        for argument in arguments:
            names = list(argument.names)
            if isinstance(argument, Flag) and argument.negatable:
                names.append("--no-" + argument.long)
            label = ", ".join(names)
            if isinstance(argument, Option):
                label += " " + " ".join([metavar(argument)] * (argument.nargs or 1))
            options.append((label, describe(argument)))
        sections.append(("options", options))

        if children:
            sections.append((
                "subcommands" if self.parent else "commands",
                [(name, str(child.descr or "").split("\n")[0]) for name, child in children.items()],
            ))

        width = min(max(len(label) for title, rows in sections for label, descr in rows) + 2, 32)
        for title, rows in sections:
            lines += ["", title + ":"]
            for label, descr in rows:
                if not descr:
                    lines.append("  " + label)
                elif len(label) + 2 > width:
                    lines += ["  " + label, "  " + " " * width + descr]
                else:
                    lines.append("  " + label.ljust(width) + descr)

        if self.epilog:
            lines += ["", str(self.epilog)]
        return "\n".join(lines)

    def _versioner(self):
        """
        '<route> <version>', the version coming from the nearest ancestor declaring one.
        """
        version = next((step.version for step in reversed(self.path) if step.version), None)
        return "%s %s" % (self.route, version or "unknown")

    def _values(self, result):
        """
        map a result onto the callback parameters as (args, kwargs).
        """
        args = []
        kwargs = {}
        for parameter in self._parameters:
            argument = self._arguments[name := parameter.name]
            if isinstance(argument, Flag):
                value = result.get_count(name) if argument.count else result.get_flag(name)
            elif isinstance(argument, Option) and argument.map:
                value = result.get_map(name)
            elif isinstance(argument, Option) and argument.append:
                value = result.get_list(name)
            else:
                value = result._values.get(name)

            if parameter.kind is Parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[name] = value
        return args, kwargs

    def _execute(self, result):
        """
        run the callbacks of the dispatched chain, root first.
        """
        command = self
        while True:
            args, kwargs = command._values(result)
            command._callback(*args, **kwargs)
            if result._child is None:
                return
            command, result = command._children[result._subcommand], result._child

    def __invoke__(self, prompt=Unset):
        """
        Parse, print and exit like a regular CLI program.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv.
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence; each element is trimmed.

        Behavior
        - Success: the callbacks of the dispatched chain run, root first.
        - Help/version: the text is printed on stdout, then exit code 0.
        - Failure: the fault is rendered on stderr, then exit code 2.
        """
        if prompt is Unset:
            tokens = list(sys.argv)
        elif isinstance(prompt, str):
            tokens = [self.name, *shlex.split(prompt)]
        elif isinstance(prompt, Iterable):
            def _sanitized(iterable):
                for item in iterable:
                    if not isinstance(item, str):
                        raise TypeError("__invoke__() argument must be a string or an iterable of strings")
                    if item := item.strip():
                        yield item
            tokens = [self.name, *_sanitized(prompt)]
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        match self.parse(tokens):
            case Success(result):
                self._execute(result)
            case HelpRequested(text) | VersionRequested(text):
                renderable = Text(text)
                if self.fancy:
                    renderable = Panel(renderable, title="[ %s ]" % self.name.upper(), title_align="left")
                Console().print(renderable, highlight=False)
                sys.exit(0)
            case Failure(error):
                Console(stderr=True).print(copy.replace(
                    error, prog=self.name, fancy=self.fancy, colorful=self.colorful
                ))
                sys.exit(2)


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct callback:
        cmd = command(func, ..., name="x", ...)
    - Decorator:
        @command(name="x", ...)
        def func(...): ...

    Parameters
    - source: Unset | Callable
      When Unset, a decorator is returned. Otherwise a Command is created.
    - *args, **kwargs: forwarded to Command.__new__.
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source) or isinstance(source, Command):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for commands or callables.

    - If 'object' implements __invoke__, call it with prompt.
    - If 'object' is a plain callable, wrap it as a Command and then invoke.
    - Otherwise, raise TypeError.
    """
    if callable(getattr(object, "__invoke__", None)):
        object.__invoke__(prompt)
        return

    if callable(object):
        return invoke(command(object), prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method")


__all__ = (
    "Command",
    "command",
    "invoke",
    "is_negative_number",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
