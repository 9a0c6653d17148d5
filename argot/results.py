"""
Result assembly.

assemble(schema, outcome) turns the engine's terminal outcome into a
ParseResult:

- Failed → status ERROR, carrying the fault and the argument it concerns.
- Cancelled → status CANCELED, with the cancelling argument, whether help was
  requested and the tokens that were not looked at.
- Continuing → status SUCCESS: every argument's final value (bound, else its
  default; unsupplied multi-value/dictionary arguments become an empty
  list/dict) is handed to the schema target as keyword arguments named after
  the dests, or collected in a types.SimpleNamespace when there is no target.
  A target that raises turns the result into an ERROR with CreateResultError.
"""
import copy
import logging
import types
from enum import Enum

from .arguments import Kind
from .engine import Continuing, Cancelled, Failed
from .faults import FaultCode, CreateResultError, getdoc
from .utils import *

logger = logging.getLogger(__name__)


class ParseStatus(Enum):
    SUCCESS = "success"
    ERROR = "error"
    CANCELED = "canceled"


class ParseResult:
    """
    Outcome of one parse.

    - status: ParseStatus.
    - value: the assembled object (SUCCESS only, else None).
    - error: the ParseError that ended parsing (ERROR only, else None).
    - argument: display name of the argument that failed or cancelled parsing.
    - help: whether the cancellation asked for usage help.
    - remaining: tokens not consumed because of a cancellation.
    - state: the ParseState parsing ended in (diagnostics).

    Truthiness follows success.
    """

    __slots__ = ("_status", "_value", "_error", "_argument", "_help", "_remaining", "_state")

    status = mirror("status")
    value = mirror("value")
    error = mirror("error")
    argument = mirror("argument")
    help = mirror("help")
    remaining = mirror("remaining")
    state = mirror("state")

    def __init__(self, status, /, *, value=None, error=None, argument=None, help=False, remaining=(), state=None):
        if not isinstance(status, ParseStatus):
            raise TypeError("parse-result 'status' must be a parse-status")
        self._status = status
        self._value = value
        self._error = error
        self._argument = argument
        self._help = bool(help)
        self._remaining = tuple(remaining)
        self._state = state

    @property
    def values(self):
        """
        dest → bound value, for the arguments that received one.
        """
        return {} if self._state is None else dict(self._state.values)

    def __bool__(self):
        return self._status is ParseStatus.SUCCESS

    def __repr__(self):
        return f"parse-result({", ".join(f"{name}={object!r}" for name, object in self.__rich_repr__())})"

    def __rich_repr__(self):
        yield "status", self._status
        if self._status is ParseStatus.SUCCESS:
            yield "value", self._value
        if self._error is not None:
            yield "error", self._error
        if self._argument is not None:
            yield "argument", self._argument
        if self._help:
            yield "help", self._help
        if self._remaining:
            yield "remaining", self._remaining


def _default(argument, /):
    default = argument.default
    match argument.kind:
        case Kind.MULTI:
            return [] if default is Unset or default is None else list(default)
        case Kind.DICTIONARY:
            return {} if default is Unset or default is None else dict(default)
        case _:
            return copy.copy(coalesce(default))


def _values(schema, state, /):
    values = {}
    for argument in schema.arguments:
        if argument is schema.helper or argument is schema.versioner:
            continue
        values[argument.dest] = state.values[argument.dest] if argument.dest in state.values else _default(argument)
    return values


def assemble(schema, outcome, /):
    """
    Build the ParseResult for an engine outcome.
    """
    match outcome:
        case Failed(error, state):
            return ParseResult(ParseStatus.ERROR, error=error, argument=error.argument, state=state)
        case Cancelled(argument, help, remaining, state):
            return ParseResult(ParseStatus.CANCELED, argument=argument, help=help, remaining=remaining, state=state)
        case Continuing(state, remaining, argument):
            values = _values(schema, state)
            if schema.target is None:
                value = types.SimpleNamespace(**values)
            else:
                try:
                    value = schema.target(**values)
                except Exception as error:
                    logger.debug("result target %r raised %r", schema.target, error)
                    fault = CreateResultError(
                        "could not create the result: %s" % error,
                        title="result not created",
                        code=FaultCode.CREATE_RESULT,
                        target=getattr(schema.target, "__name__", repr(schema.target)),
                        hint="check the values given to the arguments",
                        docs=getdoc(FaultCode.CREATE_RESULT),
                    )
                    fault.__cause__ = error
                    return ParseResult(ParseStatus.ERROR, error=fault, state=state)
            return ParseResult(ParseStatus.SUCCESS, value=value, argument=argument, remaining=remaining, state=state)
        case _:
            raise TypeError("assemble() second argument must be an engine outcome")


__all__ = (
    "ParseStatus",
    "ParseResult",
    "assemble",
)
