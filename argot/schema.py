"""
Argot schemas.

A Schema is the immutable, validated collection of Argument entries that a
parse runs against. Building one does all cross-argument checking up front,
so every structural mistake surfaces as a SchemaError before any token is
read, and the same schema can then be shared by any number of concurrent
parses.

Construction
- Schema(*arguments, target=Unset, validators=(), options=Unset, registry=Unset, name=Unset)
- @schema(*arguments, **kwargs) on a class or callable: the decorated object
  becomes the result target and the Schema is returned.

Build steps
1. Entries get their names bound: a long name derived from dest (via
   options.transform) when unset, short=True resolved to the first character
   of the long name.
2. Names are checked: no prefix at the start, no name/value separator inside,
   unique per lookup table under the case policy.
3. Positional entries are ordered by (position, declaration order) and their
   positions renumbered 0..n-1; a required positional may not follow an
   optional one, and only the last positional may be multi-value.
4. The automatic help switch is added (names "help", "?", "h" that are free)
   unless options.auto_help is False or "help" is taken.
   A "version" switch is added the same way when options.version is given.
5. Validator references (Requires, Prohibits, RequiresAny) must name known arguments.

Parsing
- parse(prompt=Unset) → ParseResult (never raises for user input).
- run(prompt=Unset) → the assembled value, None on cancellation; faults are
  surfaced through faults.trigger() (raised, or rendered and exited in shell mode).
"""
import copy
import logging
import shlex
import sys
from collections.abc import Iterable
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from . import engine, results
from .arguments import Argument, CancelMode
from .converters import Registry, registry as default_registry
from .faults import trigger
from .options import ParseOptions
from .utils import *
from .validators import Validator

logger = logging.getLogger(__name__)


class SchemaError(TypeError):
    """
    Raised when a schema's declarations are inconsistent.
    """


class Schema:
    """
    Immutable, validated set of arguments plus the options to parse them with.

    Properties
    - arguments: declared entries (names bound), in declaration order.
    - positionals: positional entries, ordered by their normalized position.
    - ordered: positionals first, then named entries in declaration order
      (the order required/post-parse checks run in).
    - target, validators, options, registry, name.
    """

    def __init__(self, *arguments, target=Unset, validators=(), options=Unset, registry=Unset, name=Unset):
        if not isinstance(options := coalesce(options, ParseOptions()), ParseOptions):
            raise TypeError("schema 'options' must be parse-options")
        if not isinstance(registry := coalesce(registry, default_registry), Registry):
            raise TypeError("schema 'registry' must be a registry")
        if target is not Unset and not callable(target):
            raise TypeError("schema 'target' must be callable")
        if not isinstance(name, str | Unset):
            raise TypeError("schema 'name' must be a string")
        if isinstance(validators, Validator) or not isinstance(validators, Iterable):
            raise TypeError("schema 'validators' must be an iterable of validators")
        validators = tuple(validators)
        if not all(isinstance(validator, Validator) for validator in validators):
            raise TypeError("schema 'validators' must be an iterable of validators")
        for validator in validators:
            if not validator.schema_level:
                raise SchemaError(f"validator {validator!r} checks single arguments and cannot apply to a whole schema")

        self._options = options
        self._registry = registry
        self._target = coalesce(target)
        self._validators = validators
        self._name = coalesce(name, getattr(target, "__name__", None))

        dests = set()
        bound = []
        for argument in arguments:
            if not isinstance(argument, Argument):
                raise TypeError(f"schema arguments must be arguments, not {type(argument).__name__!r}")
            if argument.dest in dests:
                raise SchemaError(f"argument dest {argument.dest!r} is declared more than once")
            dests.add(argument.dest)
            bound.append(self._bind(argument))

        self._help = None
        if options.auto_help and "help" not in dests:
            self._help = self._helper(bound)
            if self._help is not None:
                bound.append(self._help)

        self._version = None
        if options.version is not None and "version" not in dests:
            self._version = self._versioner(bound)
            if self._version is not None:
                bound.append(self._version)

        self._arguments, self._positionals = self._order(bound)

        self._longs = {}
        self._shorts = {} if options.long_short else self._longs
        for argument in self._arguments:
            self._register(argument)

        self._dests = {argument.dest: argument for argument in self._arguments}

        for validator in self._validators + tuple(
            validator for argument in self._arguments for validator in argument.validators
        ):
            for reference in validator.references:
                if self.get(reference) is None:
                    raise SchemaError(f"validator {validator!r} references unknown argument {reference!r}")

        logger.debug(
            "built schema %r with %d arguments (%d positional)",
            self._name, len(self._arguments), len(self._positionals)
        )

    def _bind(self, argument, /):
        """
        Resolve derived names of an entry and check them against the options.
        """
        overrides = {}
        if argument.name is Unset:
            overrides["name"] = name = transform(argument.dest, self._options.transform)
        else:
            name = argument.name
        if argument.short is True:
            if name is None:
                raise SchemaError(f"argument {argument.dest!r} cannot derive a short name without a long name")
            overrides["short"] = name[0]
        if overrides:
            argument = copy.replace(argument, **overrides)

        for alias in argument.names:
            if alias.startswith(self._options.all_prefixes):
                raise SchemaError(f"argument name {alias!r} cannot start with a prefix")
            if any(separator in alias for separator in self._options.separators):
                raise SchemaError(f"argument name {alias!r} cannot contain a name/value separator")
        return argument

    def _taken(self, arguments, name, /, short=False):
        table = [
            alias
            for argument in arguments
            for alias in (
                (argument.short, *argument.short_aliases)
                if short and self._options.long_short
                else argument.names
            )
            if isinstance(alias, str)
        ]
        return self._options.fold(name) in map(self._options.fold, table)

    def _helper(self, arguments, /):
        """
        Build the automatic help switch from the names still free, or None when "help" is taken.
        """
        if self._taken(arguments, "help"):
            return None
        shorts = [name for name in ("?", "h") if not self._taken(arguments, name, True)]
        return Argument(
            "help",
            bool,
            name="help",
            short=shorts[0] if shorts else Unset,
            short_aliases=shorts[1:],
            cancels=CancelMode.ABORT,
            descr="Displays this help message.",
        )

    def _versioner(self, arguments, /):
        """
        Build the automatic version switch, or None when "version" is taken.
        """
        if self._taken(arguments, "version"):
            return None
        return Argument(
            "version",
            bool,
            name="version",
            cancels=CancelMode.ABORT,
            help=False,
            descr="Displays version information.",
        )

    def _register(self, argument, /):
        long_short = self._options.long_short
        entries = [(self._longs, alias) for alias in (argument.name, *argument.aliases) if isinstance(alias, str)]
        entries.extend(
            (self._shorts, alias) for alias in (argument.short, *argument.short_aliases) if isinstance(alias, str)
        )
        for table, alias in entries:
            key = self._options.fold(alias)
            if (other := table.setdefault(key, argument)) is not argument:
                kind = "short name" if long_short and table is self._shorts else "name"
                raise SchemaError(
                    f"argument {kind} {alias!r} of {argument.dest!r} is already used by {other.dest!r}"
                )

    def _order(self, arguments, /):
        """
        Renumber positions and enforce positional ordering rules.
        """
        positionals = sorted(
            (argument for argument in arguments if argument.positional),
            key=lambda argument: argument.position
        )

        renumbered = {}
        optional = None
        for index, argument in enumerate(positionals):
            if argument.required and optional is not None:
                raise SchemaError(
                    f"required positional argument {argument.dest!r} cannot follow optional {optional.dest!r}"
                )
            if argument.multiple and index != len(positionals) - 1:
                raise SchemaError(f"multi-value positional argument {argument.dest!r} must be the last positional")
            if not argument.required:
                optional = argument
            renumbered[argument.dest] = argument if argument.position == index else copy.replace(argument, position=index)

        arguments = tuple(renumbered.get(argument.dest, argument) for argument in arguments)
        return arguments, tuple(renumbered.values())

    arguments = mirror("arguments")
    positionals = mirror("positionals")
    validators = mirror("validators")
    options = mirror("options")
    registry = mirror("registry")
    target = mirror("target")
    name = mirror("name")

    @property
    def helper(self):
        """
        The automatic help switch, when one was added.
        """
        return self._help

    @property
    def versioner(self):
        """
        The automatic version switch, when one was added.
        """
        return self._version

    @property
    def ordered(self):
        return self._positionals + tuple(argument for argument in self._arguments if not argument.positional)

    def lookup(self, name, /, *, short=False):
        """
        Exact lookup of a command-line name (without prefix); short selects the
        short-name table in long/short mode.
        """
        table = self._shorts if short else self._longs
        return table.get(self._options.fold(name))

    def table(self, *, short=False):
        return MappingProxyType(self._shorts if short else self._longs)

    def get(self, name, /):
        """
        Find an argument by dest or by any of its names; None when unknown.
        """
        if (argument := self._dests.get(name)) is not None:
            return argument
        return self.lookup(name) or self.lookup(name, short=True)

    def __iter__(self):
        return iter(self._arguments)

    def __len__(self):
        return len(self._arguments)

    def __contains__(self, name):
        return isinstance(name, str) and self.get(name) is not None

    def __repr__(self):
        return f"schema(name={self._name!r}, arguments={len(self._arguments)})"

    def __rich_repr__(self):
        yield "name", self._name
        yield "arguments", self._arguments
        yield "options", self._options

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        arguments = overrides.pop("arguments", tuple(
            argument for argument in self._arguments if argument not in (self._help, self._version)
        ))
        return type(self)(*arguments, **{
            "target": coalesce(self._target, Unset),
            "validators": self._validators,
            "options": self._options,
            "registry": self._registry,
            "name": coalesce(self._name, Unset),
        } | overrides)

    def parse(self, prompt=Unset, /):
        """
        Parse a token stream into a ParseResult.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, used verbatim (empty strings included).

        Raises
        - TypeError: when prompt is not Unset/str/Iterable[str], or when an
          iterable contains a non-string element. User-input problems never
          raise; they are reported on the result.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        return results.assemble(self, engine.bind(self, tokens))

    def run(self, prompt=Unset, /):
        """
        Parse and surface the outcome.

        Returns the assembled value on success, None when parsing was
        cancelled without a result. Faults go through trigger(): raised in
        library mode, rendered on stderr followed by exit status 1 in shell mode.
        Cancelling through the version switch prints the program name and version.
        """
        result = self.parse(prompt)
        if result.error is not None:
            trigger(
                result.error,
                shell=self._options.shell,
                fancy=self._options.fancy,
                colorful=self._options.colorful,
                prog=coalesce(self._options.prog, self._name),
            )
        elif self._version is not None and result.argument == self._version.label:
            Console(no_color=not self._options.colorful).print(Text.assemble(
                (coalesce(self._options.prog, self._name) or "", "bold"), " ", self._options.version
            ))
        return result.value


def schema(source=Unset, /, *arguments, **kwargs):
    """
    Create a Schema around a target, or return a decorator to build it later.

    Invocation modes
    - Decorator with arguments:
        @schema(Argument("path", position=0, required=True))
        class Options: ...
    - Direct:
        schema(Options, Argument(...), ...)

    The target receives every argument value as a keyword named after its dest.
    """
    if isinstance(source, Argument) or source is Unset:
        arguments = (() if source is Unset else (source,)) + arguments

        def wrapper(target):
            if not callable(target):
                raise TypeError("@schema() must be applied to a callable")
            return Schema(*arguments, target=target, **kwargs)

        return rename(wrapper, "schema")
    if not callable(source):
        raise TypeError("schema() first argument must be a callable or an argument")
    return Schema(*arguments, target=source, **kwargs)


__all__ = (
    "SchemaError",
    "Schema",
    "schema",
)
