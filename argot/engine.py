"""
Binding engine.

bind(schema, tokens) walks the token list once, left to right, and ends in
exactly one of three outcomes:

- Continuing(state, remaining, argument): every token was bound, or a SUCCESS
  cancellation (argument or prefix terminator) stopped early leaving
  `remaining`; the post-parse checks passed and a result can be assembled.
- Cancelled(argument, help, remaining, state): an ABORT cancellation (argument,
  callback or unknown-argument hook) stopped parsing; `remaining` holds the
  tokens after the one that cancelled.
- Failed(error, state): the first fault met; nothing after it is looked at.

Per value, the pipeline is: duplicate policy → pre-conversion validators (on
each raw element) → conversion (registry or explicit converter, with the
options' culture) → null check → post-conversion validators → store →
argument callback → cancellation check.

After the pass, arguments are checked in usage order (positionals by
position, then named arguments in declaration order): post-parse validators
for those that got a value, MissingRequiredArgumentError for required ones
that did not; then the schema-level validators run.
"""
import logging
from typing import NamedTuple

from . import tokens as tokenizer
from .arguments import CancelMode, Kind
from .faults import (
    FaultCode,
    ParseError,
    UnknownArgumentError,
    MissingValueError,
    InvalidValueError,
    NullArgumentValueError,
    InvalidDictionaryValueError,
    DuplicateArgumentError,
    DependencyFailedError,
    DuplicateArgumentWarning,
    TooManyPositionalsError,
    MissingRequiredArgumentError,
    ApplyValueError,
    getdoc,
    trigger,
)
from .options import DuplicatePolicy, PrefixTermination
from .utils import Unset, coalesce, ordinal
from .validators import Stage

logger = logging.getLogger(__name__)


class ParseState:
    """
    Mutable state of one parse; never shared between invocations.

    - tokens: the full token tuple; index: the next token to read.
    - position: cursor into the schema's positionals.
    - values: dest → bound value (list for multi-value, dict for dictionaries).
    - counts: dest → how many tokens supplied the argument.
    - names: dest → the name (or position label) it was last supplied with.
    - terminated: the prefix terminator was seen (POSITIONAL_ONLY).
    """

    def __init__(self, schema, tokens, /):
        self.schema = schema
        self.tokens = tuple(tokens)
        self.index = 0
        self.position = 0
        self.values = {}
        self.counts = {}
        self.names = {}
        self.terminated = False

    def supplied(self, name, /):
        """
        Whether the argument known by dest or by any name received a value.
        """
        argument = self.schema.get(name)
        return argument is not None and argument.dest in self.values

    def __repr__(self):
        return f"parse-state(index={self.index}, position={self.position}, values={self.values!r})"


class Continuing(NamedTuple):
    state: ParseState
    remaining: tuple = ()
    argument: str | None = None


class Cancelled(NamedTuple):
    argument: str | None
    help: bool
    remaining: tuple
    state: ParseState


class Failed(NamedTuple):
    error: ParseError
    state: ParseState


_TITLES = {
    DependencyFailedError: "argument dependency failed",
    MissingRequiredArgumentError: "missing required argument",
}


def _fail(validator, argument, value, name, index, /, **options):
    """
    Build the fault raised by a failing validator.
    """
    return validator.fault(
        validator.message(argument, value),
        title=_TITLES.get(validator.fault, "validation failed"),
        code=validator.fault.__faultcode__,
        argument=getattr(argument, "label", None),
        name=name,
        value=coalesce(value),
        index=index,
        docs=getdoc(validator.fault.__faultcode__),
        **options,
    )


def _validate(state, argument, stage, value, name, index, /):
    for validator in argument.validators:
        if validator.stage is stage and not validator.is_valid(argument, value, state):
            raise _fail(validator, argument, value, name, index, hint="check the value given to %r" % argument.label)


def _convert(state, argument, element, converter, type, name, index, /, nullable=True):
    """
    Convert one raw element, turning converter failures into InvalidValueError.
    """
    options = state.schema.options
    if element == "" and nullable and argument.allows_null:
        return None
    converter = converter or state.schema.registry.lookup(type)
    try:
        return converter(element, options.culture)
    except (ValueError, TypeError) as error:
        raise InvalidValueError(
            "value %r of argument %r at %s position is not a valid %s" % (
                element, argument.label, ordinal(index + 1), argument.value_description
            ),
            title="invalid argument value",
            code=FaultCode.INVALID_VALUE,
            argument=argument.label,
            name=name,
            value=element,
            index=index,
            description=argument.value_description,
            reason=str(error),
            hint=str(error) or "expected a %s" % argument.value_description,
            docs=getdoc(FaultCode.INVALID_VALUE),
        ) from error


def _element(state, argument, element, name, index, /):
    """
    Run one raw element through validation and conversion; dictionaries yield (key, value).
    """
    if element is None:
        value = True
    else:
        _validate(state, argument, Stage.PRE_CONVERSION, element, name, index)
        if argument.kind is Kind.DICTIONARY:
            key, separator, element = element.partition(argument.key_value_separator)
            if not separator:
                raise InvalidValueError(
                    "value %r of argument %r at %s position is not a %r pair" % (
                        key, argument.label, ordinal(index + 1), argument.value_description
                    ),
                    title="invalid argument value",
                    code=FaultCode.INVALID_VALUE,
                    argument=argument.label,
                    name=name,
                    value=key,
                    index=index,
                    description=argument.value_description,
                    hint="separate the key and the value with %r" % argument.key_value_separator,
                    docs=getdoc(FaultCode.INVALID_VALUE),
                )
            key = _convert(state, argument, key, argument.key_converter, argument.key_type, name, index, nullable=False)
        value = _convert(state, argument, element, argument.converter, argument.type, name, index)

    if value is None and not argument.allows_null:
        raise NullArgumentValueError(
            "argument %r at %s position cannot be null" % (argument.label, ordinal(index + 1)),
            title="null argument value",
            code=FaultCode.NULL_VALUE,
            argument=argument.label,
            name=name,
            value=element,
            index=index,
            hint="give %r a non-empty value" % argument.label,
            docs=getdoc(FaultCode.NULL_VALUE),
        )
    _validate(state, argument, Stage.POST_CONVERSION, value, name, index)

    if argument.kind is Kind.DICTIONARY:
        return key, value
    return value


def _store(state, argument, value, name, index, /):
    match argument.kind:
        case Kind.MULTI:
            state.values.setdefault(argument.dest, []).append(value)
        case Kind.DICTIONARY:
            key, value = value
            entries = state.values.setdefault(argument.dest, {})
            if key in entries and not argument.duplicate_keys:
                raise InvalidDictionaryValueError(
                    "key %r of argument %r at %s position was already given" % (
                        key, argument.label, ordinal(index + 1)
                    ),
                    title="duplicate dictionary key",
                    code=FaultCode.INVALID_DICTIONARY_VALUE,
                    argument=argument.label,
                    name=name,
                    value=key,
                    index=index,
                    hint="give every key of %r once" % argument.label,
                    docs=getdoc(FaultCode.INVALID_DICTIONARY_VALUE),
                )
            entries[key] = value
            value = key, value
        case _:
            state.values[argument.dest] = value

    if argument.callback is None:
        return None
    try:
        verdict = argument.callback(value)
    except ParseError:
        raise
    except Exception as error:
        raise ApplyValueError(
            "argument %r at %s position could not be applied: %s" % (argument.label, ordinal(index + 1), error),
            title="argument not applied",
            code=FaultCode.APPLY_VALUE,
            argument=argument.label,
            name=name,
            value=value,
            index=index,
            hint="check the value given to %r" % argument.label,
            docs=getdoc(FaultCode.APPLY_VALUE),
        ) from error
    if verdict is False:
        return CancelMode.ABORT
    if isinstance(verdict, CancelMode):
        return verdict
    return None


def _duplicate(state, argument, name, index, /):
    options = state.schema.options
    match options.duplicates:
        case DuplicatePolicy.ERROR:
            raise DuplicateArgumentError(
                "argument %r at %s position was already given" % (argument.label, ordinal(index + 1)),
                title="duplicate argument",
                code=FaultCode.DUPLICATE_ARGUMENT,
                argument=argument.label,
                name=name,
                index=index,
                hint="give %r only once" % argument.label,
                docs=getdoc(FaultCode.DUPLICATE_ARGUMENT),
            )
        case DuplicatePolicy.WARN:
            logger.warning("argument %r given again at %s position, replacing", argument.label, ordinal(index + 1))
            trigger(
                DuplicateArgumentWarning(
                    "argument %r at %s position was already given, the new value replaces the old one" % (
                        argument.label, ordinal(index + 1)
                    ),
                    title="duplicate argument",
                    argument=argument.label,
                    name=name,
                    index=index,
                    hint="give %r only once" % argument.label,
                ),
                shell=options.shell,
                fancy=options.fancy,
                colorful=options.colorful,
                prog=options.prog,
            )
        case DuplicatePolicy.ALLOW:
            logger.debug("argument %r given again, replacing", argument.label)


def _apply(state, argument, raw, name, index, /):
    """
    Bind one supplied value (None for a bare switch) and return the CancelMode it requests.
    """
    if not argument.multiple and argument.dest in state.values:
        _duplicate(state, argument, name, index)

    if raw is not None and argument.multiple and argument.separator:
        elements = raw.split(argument.separator)
    else:
        elements = [raw]

    verdict = None
    for element in elements:
        value = _element(state, argument, element, name, index)
        if (verdict := _store(state, argument, value, name, index)) not in (None, CancelMode.NONE):
            break

    state.counts[argument.dest] = state.counts.get(argument.dest, 0) + 1
    state.names[argument.dest] = name
    logger.debug("bound %r from %s position as %r", argument.dest, ordinal(index + 1), name)

    if verdict is not None:
        return verdict, False
    return argument.cancels, argument.help


def _cancel(state, argument, mode, help, /):
    remaining = state.tokens[state.index:]
    label = getattr(argument, "label", None)
    logger.debug("parsing cancelled (%s) by %r with %d remaining tokens", mode.value, label, len(remaining))
    if mode is CancelMode.SUCCESS:
        _finish(state)
        return Continuing(state, remaining, label)
    return Cancelled(label, help, remaining, state)


def _terminator(state, raw, /):
    options = state.schema.options
    return (
        not state.terminated and
        options.termination is not PrefixTermination.NONE and
        raw == options.terminator
    )


def _value(state, raw, /):
    """
    Whether a raw token may be taken as a whitespace-separated value.
    """
    return not _terminator(state, raw) and (state.terminated or not tokenizer.named(raw, state.schema.options))


def _positional(state, raw, index, /):
    positionals = state.schema.positionals
    while state.position < len(positionals):
        argument = positionals[state.position]
        if argument.multiple or argument.dest not in state.values:
            break
        state.position += 1
    else:
        raise TooManyPositionalsError(
            "unexpected positional argument %r at %s position" % (raw, ordinal(index + 1)),
            title="too many positional arguments",
            code=FaultCode.TOO_MANY_POSITIONALS,
            value=raw,
            index=index,
            hint="remove it, or pass it by name if it belongs to an argument",
            docs=getdoc(FaultCode.TOO_MANY_POSITIONALS),
        )

    state.index += 1
    mode, help = _apply(state, argument, raw, argument.label, index)
    if not argument.multiple:
        state.position += 1
    return mode, help, argument


def _named(state, token, index, /):
    schema = state.schema
    options = schema.options
    try:
        resolution = tokenizer.resolve(token, schema, index)
    except UnknownArgumentError as error:
        if options.unknown is None:
            raise
        verdict = options.unknown(error)
        if verdict is True:
            logger.debug("ignored unknown argument %r at %s position", token.raw, ordinal(index + 1))
            state.index += 1
            return CancelMode.NONE, False, None
        if isinstance(verdict, CancelMode) and verdict is not CancelMode.NONE:
            state.index += 1
            return verdict, verdict is CancelMode.ABORT, None
        raise

    state.index += 1
    if len(resolution.arguments) > 1:
        for argument, name in zip(resolution.arguments, resolution.names):
            mode, help = _apply(state, argument, None, name, index)
            if mode is not CancelMode.NONE:
                return mode, help, argument
        return CancelMode.NONE, False, None

    argument, = resolution.arguments
    name, = resolution.names
    value = resolution.value

    if value is None and not argument.switch:
        if options.whitespace and state.index < len(state.tokens) and _value(state, state.tokens[state.index]):
            value = state.tokens[state.index]
            state.index += 1
        else:
            raise MissingValueError(
                "argument %r at %s position requires a value" % (token.raw, ordinal(index + 1)),
                title="missing argument value",
                code=FaultCode.MISSING_VALUE,
                argument=argument.label,
                name=name,
                index=index,
                hint="write it as %s%s%s<%s>" % (
                    token.prefix, name, options.separators[0], argument.value_description
                ),
                docs=getdoc(FaultCode.MISSING_VALUE),
            )

    mode, help = _apply(state, argument, value, name, index)
    if argument.greedy and options.whitespace:
        while mode is CancelMode.NONE and state.index < len(state.tokens) and _value(state, state.tokens[state.index]):
            state.index += 1
            mode, help = _apply(state, argument, state.tokens[state.index - 1], name, state.index - 1)
    return mode, help, argument


def _pass(state, /):
    options = state.schema.options
    while state.index < len(state.tokens):
        index = state.index
        raw = state.tokens[index]

        if _terminator(state, raw):
            state.index += 1
            if options.termination is PrefixTermination.CANCEL_WITH_SUCCESS:
                return _cancel(state, None, CancelMode.SUCCESS, False)
            logger.debug("prefix terminator at %s position, the rest are values", ordinal(index + 1))
            state.terminated = True
            continue

        token = None if state.terminated else tokenizer.split(raw, options)
        if token is None:
            mode, help, argument = _positional(state, raw, index)
        else:
            mode, help, argument = _named(state, token, index)

        if mode is not CancelMode.NONE:
            return _cancel(state, argument, mode, help)

    _finish(state)
    return Continuing(state)


def _finish(state, /):
    schema = state.schema
    for argument in schema.ordered:
        if argument is schema.helper or argument is schema.versioner:
            continue
        if argument.dest in state.values:
            _validate(
                state, argument, Stage.POST_PARSE, state.values[argument.dest],
                state.names.get(argument.dest), None
            )
        elif argument.required:
            raise MissingRequiredArgumentError(
                "missing required argument %r" % argument.label,
                title="missing required argument",
                code=FaultCode.MISSING_REQUIRED,
                argument=argument.label,
                hint="give a value for %r" % argument.label,
                docs=getdoc(FaultCode.MISSING_REQUIRED),
            )

    for validator in schema.validators:
        if not validator.is_valid(None, Unset, state):
            raise _fail(validator, None, Unset, None, None, hint="see which arguments belong together")


def bind(schema, tokens, /):
    """
    Bind tokens against a schema and return the terminal outcome.
    """
    state = ParseState(schema, tokens)
    logger.debug("binding %d tokens against %r", len(state.tokens), schema)
    try:
        return _pass(state)
    except ParseError as error:
        logger.debug("parsing failed: %s", error)
        return Failed(error, state)


__all__ = (
    "ParseState",
    "Continuing",
    "Cancelled",
    "Failed",
    "bind",
)
