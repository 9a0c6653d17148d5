"""
Tokenizer and name resolver.

split(token, options)
- Classifies one raw token. Name tokens start with a prefix (longest prefix
  wins) and carry a name plus an optional inline value separated by the first
  name/value separator. Everything else is a value:
  • a bare prefix ("-", "--");
  • "-" followed by a digit ("-5", "-1.5"), so negative numbers are values.

resolve(token, schema, index=0)
- Pure lookup of a split Token against a schema:
  1. exact name match (long names and aliases; short names share the table in
     DEFAULT mode, have their own in LONG_SHORT mode);
  2. unique prefix alias ("--max" for "max-lines"), when options.prefix_aliases;
     several names of one argument count as one match;
  3. combined switches ("-abc" → a, b, c) for short tokens in LONG_SHORT mode;
  4. otherwise UnknownArgumentError (with close-match suggestions) or
     AmbiguousPrefixAliasError (listing every candidate name).
"""
import difflib
from typing import NamedTuple

from .faults import (
    FaultCode,
    UnknownArgumentError,
    CombinedShortNameError,
    AmbiguousPrefixAliasError,
    getdoc,
)
from .utils import ordinal


class Token(NamedTuple):
    raw: str
    prefix: str
    name: str
    value: str | None
    long: bool


class Resolution(NamedTuple):
    arguments: tuple
    value: str | None
    names: tuple


def split(token, options, /):
    """
    Split a raw token into a Token, or return None when it is not a name token.
    """
    prefixes = options.all_prefixes
    if token in prefixes:
        return None
    for prefix in prefixes:
        if token.startswith(prefix):
            break
    else:
        return None

    rest = token[len(prefix):]
    if prefix == "-" and rest[0].isdigit():
        return None

    value = None
    if positions := [position for separator in options.separators if (position := rest.find(separator)) >= 0]:
        position = min(positions)
        rest, value = rest[:position], rest[position + 1:]

    return Token(token, prefix, rest, value, not options.long_short or prefix == options.long_prefix)


def _unknown(token, schema, index, /, name=None):
    options = schema.options
    name = token.name if name is None else name
    candidates = [alias for argument in schema for alias in argument.names]
    suggestions = difflib.get_close_matches(name, candidates, 5)
    prefix = options.long_prefix if options.long_short else token.prefix
    try:
        suggestion = suggestions[0]
        hint = "did you mean %r?" % ((prefix if len(suggestion) > 1 else token.prefix) + suggestion)
    except IndexError:
        if schema.helper is not None:
            hint = "run with '%shelp' to see all available arguments" % prefix
        else:
            hint = "check the spelling of the argument name"
    return UnknownArgumentError(
        "unknown argument %r at %s position" % (token.raw, ordinal(index + 1)),
        title="unknown argument",
        code=FaultCode.UNKNOWN_ARGUMENT,
        token=token.raw,
        name=name,
        value=token.value,
        index=index,
        suggestions=suggestions,
        hint=hint,
        docs=getdoc(FaultCode.UNKNOWN_ARGUMENT),
    )


def _combined(token, schema, index, /):
    """
    Expand "-abc" into switches a, b and c (LONG_SHORT mode, no inline value).
    """
    arguments = []
    for char in token.name:
        if (argument := schema.lookup(char, short=True)) is None:
            raise _unknown(token, schema, index, name=char)
        if not argument.switch or argument in arguments:
            reason = "is not a switch" if not argument.switch else "is repeated"
            raise CombinedShortNameError(
                "combined short name %r at %s position %s %r" % (
                    token.raw, ordinal(index + 1), reason, char
                ),
                title="invalid combined switches",
                code=FaultCode.COMBINED_SHORT_NAME,
                token=token.raw,
                name=char,
                argument=argument.label,
                index=index,
                hint="only distinct switches can be combined; give %s%s its own token" % (token.prefix, char),
                docs=getdoc(FaultCode.COMBINED_SHORT_NAME),
            )
        arguments.append(argument)
    return Resolution(tuple(arguments), None, tuple(token.name))


def resolve(token, schema, index=0, /):
    """
    Resolve a Token against the schema's name tables.

    Raises
    - UnknownArgumentError / CombinedShortNameError: no (valid) match.
    - AmbiguousPrefixAliasError: the name is a prefix of several arguments' names.
    """
    options = schema.options
    short = options.long_short and not token.long

    if token.name and (argument := schema.lookup(token.name, short=short)) is not None:
        return Resolution((argument,), token.value, (token.name,))

    if short:
        if len(token.name) > 1 and token.value is None:
            return _combined(token, schema, index)
        raise _unknown(token, schema, index)

    if not options.prefix_aliases or not token.name:
        raise _unknown(token, schema, index)

    folded = options.fold(token.name)
    matches = {}
    for key, argument in schema.table().items():
        if key.startswith(folded):
            matches.setdefault(argument, []).append(key)

    if not matches:
        raise _unknown(token, schema, index)

    if len(matches) > 1:
        candidates = sorted(
            alias
            for argument in matches
            for alias in argument.names
            if options.fold(alias) in matches[argument]
        )
        raise AmbiguousPrefixAliasError(
            "argument %r at %s position is ambiguous between %s" % (
                token.raw, ordinal(index + 1), ", ".join(map(repr, candidates))
            ),
            title="ambiguous argument",
            code=FaultCode.AMBIGUOUS_PREFIX_ALIAS,
            token=token.raw,
            name=token.name,
            index=index,
            candidates=tuple(candidates),
            hint="type more of the name, for example %s%s" % (token.prefix, candidates[0]),
            docs=getdoc(FaultCode.AMBIGUOUS_PREFIX_ALIAS),
        )

    (argument, keys), = matches.items()
    return Resolution((argument,), token.value, (token.name,))


def named(token, options, /):
    """
    Whether a raw token would be read as a name token.
    """
    return split(token, options) is not None


__all__ = (
    "Token",
    "Resolution",
    "split",
    "resolve",
    "named",
)
