r"""
Argot argument entries.

Overview
- Argument: one declared command-line argument (an entry of a Schema). It is
  immutable once built; copy.replace(argument, ...) derives a new entry.
- Kind: SINGLE (one value), SWITCH (presence means True), MULTI (values are
  collected into a list), DICTIONARY (key=value pairs collected into a dict).
- CancelMode: whether supplying the argument stops parsing (ABORT: the parse
  is reported as cancelled; SUCCESS: the result is produced from what was
  bound so far).

Introspection & representation
- ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
  the fields listed in __introspectable__ as read-only properties.

Metadata (sanitized on construction)
- dest: identifier receiving the value in the result (required).
- name: long name; Unset derives it from dest when the schema is built, None
  means "no long name".
- short: one character, True to take the first character of the long name.
- aliases / short_aliases: extra long / one-character names.
- position: non-negative int for positional arguments (sparse values allowed).
- type: element type (dictionary: value type). `X | None` allows null values.
- kind, required, default, converter, key_type, key_converter, validators,
  allows_null, cancels, help, separator, key_value_separator, duplicate_keys,
  greedy, value_description, descr, callback.

Validation highlights
- Names cannot be empty or contain white-space; short names are one character.
- Switches cannot be positional and always convert to bool.
- separator/greedy only apply to multi-value and dictionary arguments.

Quick example:
    >>> Argument("MaxLines", int | None, aliases=("Lines",), validators=(Range(1),))
    argument(dest='MaxLines', name=Unset, ...)
"""
import functools
import operator
import re
import types
import typing
from collections.abc import Iterable
from enum import Enum

from rich.text import Text

from .utils import *
from .validators import Validator


class Kind(Enum):
    SINGLE = "single"
    SWITCH = "switch"
    MULTI = "multi"
    DICTIONARY = "dictionary"


class CancelMode(Enum):
    NONE = "none"
    ABORT = "abort"
    SUCCESS = "success"


class ArgumentType(type):
    """
    Metaclass that turns entries into introspectable, read-only descriptors.

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
            """
            Return a concise, stable representation with key metadata.
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _nullable(type, /):
    """
    Split `X | None` (or Optional[X]) into (X, True); any other type into (type, False).
    """
    if typing.get_origin(type) in (types.UnionType, typing.Union):
        members = [member for member in typing.get_args(type) if member is not types.NoneType]
        if len(members) != 1:
            raise TypeError("argument 'type' unions must be of the form 'X | None'")
        return members[0], True
    return type, False


def _sanitize_name(cls, field, name, /, *, single=False):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} '{field}' must be a string")
    elif not name or re.search(r"\s", name):
        raise ValueError(f"{cls.__typename__} '{field}' cannot be empty or contain white-space")
    elif single and len(name) != 1:
        raise ValueError(f"{cls.__typename__} '{field}' must be a single character")
    return name


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate dest, name, short and aliases.

    - dest must be a valid identifier.
    - name: Unset (derive later) | None (no long name) | non-empty string.
    - short: Unset/None (none) | True (derive later) | single character.
    - aliases/short_aliases: iterables of names without duplicates.
    """
    if not isinstance(dest := metadata["dest"], str):
        raise TypeError(f"{cls.__typename__} 'dest' must be a string")
    elif not dest.isidentifier():
        raise ValueError(f"{cls.__typename__} 'dest' must be a valid identifier")

    if (name := metadata["name"]) is not Unset and name is not None:
        _sanitize_name(cls, "name", name)

    if (short := metadata["short"]) is Unset:
        metadata["short"] = None
    elif short is not None and short is not True:
        _sanitize_name(cls, "short", short, single=True)

    for field, single in (("aliases", False), ("short_aliases", True)):
        if isinstance(metadata[field], str) or not isinstance(metadata[field], Iterable):
            raise TypeError(f"{cls.__typename__} '{field}' must be an iterable of strings")
        sanitized = []
        for alias in metadata[field]:
            if _sanitize_name(cls, field, alias, single=single) in sanitized:
                raise ValueError(f"{cls.__typename__} '{field}' cannot contain duplicates")
            sanitized.append(alias)
        metadata[field] = tuple(sanitized)

    if name is None and metadata["short"] is None:
        raise TypeError(f"{cls.__typename__} must have a long or a short name")


def _sanitize_value_metadata(cls, metadata, /):
    """
    Internal: validate kind, type, converters, position and collection settings.
    """
    type, nullable = _nullable(metadata["type"])
    if not callable(type):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if (kind := metadata["kind"]) is Unset:
        kind = Kind.SWITCH if type is bool else Kind.SINGLE
    elif not isinstance(kind, Kind):
        raise TypeError(f"{cls.__typename__} 'kind' must be a kind")

    if kind is Kind.SWITCH:
        if type is str:
            type = bool
        elif type is not bool:
            raise TypeError(f"{cls.__typename__} switches must be of type 'bool'")
        if metadata["position"] is not Unset and metadata["position"] is not None:
            raise TypeError(f"{cls.__typename__} switches cannot be positional")
        if metadata["default"] is Unset:
            metadata["default"] = False

    metadata["type"] = type
    metadata["kind"] = kind

    if not callable(metadata["key_type"]):
        raise TypeError(f"{cls.__typename__} 'key_type' must be callable")
    for field in ("converter", "key_converter", "callback"):
        if metadata[field] is not Unset and not callable(metadata[field]):
            raise TypeError(f"{cls.__typename__} '{field}' must be callable")
        metadata[field] = coalesce(metadata[field])

    if (allows_null := metadata["allows_null"]) is Unset:
        allows_null = nullable
    metadata["allows_null"] = bool(allows_null)

    if (position := metadata["position"]) is Unset or position is None:
        metadata["position"] = None
    elif not isinstance(position, int) or isinstance(position, bool):
        raise TypeError(f"{cls.__typename__} 'position' must be an integer")
    elif position < 0:
        raise ValueError(f"{cls.__typename__} 'position' cannot be negative")

    collection = kind in (Kind.MULTI, Kind.DICTIONARY)

    if (separator := metadata["separator"]) is Unset or separator is None:
        metadata["separator"] = None
    elif not isinstance(separator, str):
        raise TypeError(f"{cls.__typename__} 'separator' must be a string")
    elif not separator:
        raise ValueError(f"{cls.__typename__} 'separator' cannot be empty")
    elif not collection:
        raise TypeError(f"{cls.__typename__} 'separator' requires a multi-value or dictionary kind")

    if not isinstance(key_value_separator := metadata["key_value_separator"], str):
        raise TypeError(f"{cls.__typename__} 'key_value_separator' must be a string")
    elif not key_value_separator:
        raise ValueError(f"{cls.__typename__} 'key_value_separator' cannot be empty")

    if metadata["greedy"] and not collection:
        raise TypeError(f"{cls.__typename__} 'greedy' requires a multi-value or dictionary kind")

    if not isinstance(cancels := metadata["cancels"], CancelMode):
        raise TypeError(f"{cls.__typename__} 'cancels' must be a cancel-mode")
    metadata["help"] = bool(coalesce(metadata["help"], cancels is CancelMode.ABORT))


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validators, value_description and descr.
    """
    if isinstance(validators := metadata["validators"], Validator) or not isinstance(validators, Iterable):
        raise TypeError(f"{cls.__typename__} 'validators' must be an iterable of validators")
    validators = tuple(validators)
    for validator in validators:
        if not isinstance(validator, Validator):
            raise TypeError(f"{cls.__typename__} 'validators' must be an iterable of validators")
    metadata["validators"] = validators

    if (description := metadata["value_description"]) is Unset:
        def label(type):
            return getattr(type, "__name__", "value")

        description = label(metadata["type"])
        if metadata["kind"] is Kind.DICTIONARY:
            description = f"{label(metadata["key_type"])}{metadata["key_value_separator"]}{description}"
    elif not isinstance(description, str):
        raise TypeError(f"{cls.__typename__} 'value_description' must be a string")
    elif not (description := description.strip()):
        raise ValueError(f"{cls.__typename__} 'value_description' cannot be empty")
    metadata["value_description"] = description

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class Argument(metaclass=ArgumentType):
    """
    One declared command-line argument.

    Argument entries describe how a value is found (names, position), how it
    is converted (type/converter, key_type/key_converter for dictionaries)
    and checked (validators), and what happens once it is applied (callback,
    cancels). Values reach the result under `dest`.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata values.
    - label, names, positional and multiple are derived conveniences.
    """

    __introspectable__ = (
        "dest",
        "name",
        "short",
        "aliases",
        "short_aliases",
        "position",
        "type",
        "kind",
        "required",
        "default",
        "converter",
        "key_type",
        "key_converter",
        "validators",
        "allows_null",
        "cancels",
        "help",
        "separator",
        "key_value_separator",
        "duplicate_keys",
        "greedy",
        "value_description",
        "descr",
        "callback",
    )
    __displayable__ = (
        "dest",
        "name",
        "short",
        "position",
        "type",
        "kind",
        "required",
        "default",
    )

    def __new__(
            cls,
            dest,
            /,
            type=str,
            *,
            name=Unset,
            short=Unset,
            aliases=(),
            short_aliases=(),
            position=Unset,
            kind=Unset,
            required=False,
            default=Unset,
            converter=Unset,
            key_type=str,
            key_converter=Unset,
            validators=(),
            allows_null=Unset,
            cancels=CancelMode.NONE,
            help=Unset,
            separator=Unset,
            key_value_separator="=",
            duplicate_keys=False,
            greedy=False,
            value_description=Unset,
            descr=Unset,
            callback=Unset
    ):
        """
        Construct an Argument entry with the provided metadata.

        Notes
        - Metadata is sanitized in three passes:
          • _sanitize_names handles dest/name/short/aliases.
          • _sanitize_value_metadata handles kind/type/converters/position and
            collection settings.
          • _sanitize_metadata handles validators and descriptions.
        - name=Unset and short=True are resolved by the Schema, which derives
          bound copies of its entries through copy.replace().
        """
        metadata = {
            "dest": dest,
            "name": name,
            "short": short,
            "aliases": aliases,
            "short_aliases": short_aliases,
            "position": position,
            "type": type,
            "kind": kind,
            "required": bool(required),
            "default": default,
            "converter": converter,
            "key_type": key_type,
            "key_converter": key_converter,
            "validators": validators,
            "allows_null": allows_null,
            "cancels": cancels,
            "help": help,
            "separator": separator,
            "key_value_separator": key_value_separator,
            "duplicate_keys": bool(duplicate_keys),
            "greedy": bool(greedy),
            "value_description": value_description,
            "descr": descr,
            "callback": callback,
        }
        _sanitize_names(cls, metadata)
        _sanitize_value_metadata(cls, metadata)
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        metadata = {name: getattr(self, "_" + name) for name in type(self).__introspectable__}
        metadata |= overrides
        for name in ("converter", "key_converter", "callback", "descr"):
            if metadata[name] is None:
                metadata[name] = Unset
        return type(self)(metadata.pop("dest"), **metadata)

    @property
    def label(self):
        """
        Display name used in messages: the long name, else the short name, else dest.
        """
        if isinstance(self._name, str):
            return self._name
        if isinstance(self._short, str):
            return self._short
        return self._dest

    @property
    def names(self):
        """
        Every bound long and short name (long names first).
        """
        names = [self._name] if isinstance(self._name, str) else []
        names.extend(self._aliases)
        if isinstance(self._short, str):
            names.append(self._short)
        names.extend(self._short_aliases)
        return tuple(names)

    @property
    def positional(self):
        return self._position is not None

    @property
    def multiple(self):
        return self._kind in (Kind.MULTI, Kind.DICTIONARY)

    @property
    def switch(self):
        return self._kind is Kind.SWITCH


__all__ = (
    "Kind",
    "CancelMode",
    "Argument",
)
