"""
Argot utilities (internal helpers, carefully exposed)

Scope
- Core building blocks used across the package for consistent semantics and UX.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the schema, engine and fault layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with copies
    for containers to discourage accidental mutation of public API state.

- NameTransform / transform(name, mode)
  • Derive command-line names from identifiers ("MaxLines" → "max-lines").

- ordinal(number)
  • Position words for messages ("first", "second", ..., "11th").

Stability and contract
- These utilities are re-exported via __all__.
- Names not in __all__ are internal and may change without notice.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> transform("MaxLines", NameTransform.DASH_CASE)
    'max-lines'
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from enum import Enum
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in internal parameters.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns the given object unless it is Unset, in which case the provided
    default is returned. Falsey values like None, 0, "" or [] are preserved.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator

    Raises
    - TypeError: wrong arity, non-callable target, non-string name, or a
      callable whose metadata cannot be updated (built-ins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                """Apply the new name to the target callable."""
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values.

    - Sequence (non-string): a new tuple with each element processed.
    - Mapping: a new dict with processed values (keys preserved).
    - Set: a new frozenset.
    - Anything else: returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, str | bytes):
        return tuple(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return frozenset(object)
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and returns a copy
    for container types, so callers cannot mutate public state in place.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


class NameTransform(Enum):
    """
    How command-line names are derived from identifiers.

    - NONE:        identifier used verbatim ("max_lines" -> "max_lines")
    - PASCAL_CASE: "max_lines" -> "MaxLines"
    - CAMEL_CASE:  "max_lines" -> "maxLines"
    - DASH_CASE:   "MaxLines" -> "max-lines"
    - SNAKE_CASE:  "MaxLines" -> "max_lines"
    """
    NONE = "none"
    PASCAL_CASE = "pascal-case"
    CAMEL_CASE = "camel-case"
    DASH_CASE = "dash-case"
    SNAKE_CASE = "snake-case"


@functools.cache
def _words(name, /):
    """
    Split an identifier into its words, honoring underscores, dashes and
    camel-case boundaries ("HTTPServer_port" -> ["HTTP", "Server", "port"]).
    """
    words = []
    for part in re.split(r"[_\-\s]+", name):
        if not part:
            continue
        words.extend(re.findall(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+|[^\W\d_A-Za-z]+", part) or [part])
    return tuple(words)


def transform(name, mode, /):
    """
    Derive a command-line name from an identifier under the given NameTransform.

    Identifiers without recognizable words are returned unchanged.
    """
    if not isinstance(name, str):
        raise TypeError("transform() first argument must be a string")
    if not isinstance(mode, NameTransform):
        raise TypeError("transform() second argument must be a name-transform")

    if mode is NameTransform.NONE or not (words := _words(name)):
        return name

    match mode:
        case NameTransform.DASH_CASE:
            return "-".join(word.lower() for word in words)
        case NameTransform.SNAKE_CASE:
            return "_".join(word.lower() for word in words)
        case NameTransform.PASCAL_CASE:
            return "".join(word[:1].upper() + word[1:].lower() for word in words)
        case NameTransform.CAMEL_CASE:
            head, *tail = words
            return head.lower() + "".join(word[:1].upper() + word[1:].lower() for word in tail)


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
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

    # 11th, 12th, 13th (and 111th, 112th, 113th, ...)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f"{number}{ {1: 'st', 2: 'nd', 3: 'rd'}.get(number % 10, 'th') }"


Unset = UnsetType()
"""
Sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "transform",
    "ordinal",

    # Types
    "UnsetType",
    "NameTransform",

    # Constants
    "Unset",
)
