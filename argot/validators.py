"""
Argument validators.

Every validator declares the Stage it runs at:

- PRE_CONVERSION: receives each raw string element before conversion.
- POST_CONVERSION: receives each converted element (dictionary entries: the
  converted value) before it is stored.
- POST_PARSE: runs once after all tokens were consumed, only for arguments
  that received a value, with the final value (list/dict for collections).

Schema-level validators (RequiresAny) run after every argument passed its own
checks. A failing validator ends the parse with the fault class named by its
`fault` attribute; its message comes from describe(), or from the
`message=` template given at construction (formatted with {name} and {value}).
"""
import re
from abc import ABC, abstractmethod
from enum import Enum

from .faults import ValidationFailedError, DependencyFailedError, MissingRequiredArgumentError
from .utils import Unset, coalesce


class Stage(Enum):
    PRE_CONVERSION = "pre-conversion"
    POST_CONVERSION = "post-conversion"
    POST_PARSE = "post-parse"


class Validator(ABC):
    """
    Base validator.

    Subclasses implement is_valid(argument, value, state) and describe(argument, value).
    `state` is the live ParseState; schema-level validators get argument=None
    and value=Unset, and only kinds with schema_level set may be given to a Schema.
    """
    stage = Stage.POST_CONVERSION
    schema_level = False
    fault = ValidationFailedError

    def __init__(self, *, message=Unset):
        if not isinstance(message, str | Unset):
            raise TypeError(f"{type(self).__name__} 'message' must be a string")
        self._message = message

    @property
    def references(self):
        """
        Names of other arguments this validator depends on (checked when the schema is built).
        """
        return ()

    @abstractmethod
    def is_valid(self, argument, value, state, /):
        raise NotImplementedError

    @abstractmethod
    def describe(self, argument, value, /):
        raise NotImplementedError

    def message(self, argument, value, /):
        if self._message is Unset:
            return self.describe(argument, value)
        return self._message.format(name=getattr(argument, "label", None), value=value)

    def __repr__(self):
        return f"{type(self).__name__}()"


class NotEmpty(Validator):
    stage = Stage.PRE_CONVERSION

    def is_valid(self, argument, value, state, /):
        return value != ""

    def describe(self, argument, value, /):
        return f"argument {argument.label!r} cannot be empty"


class NotWhiteSpace(Validator):
    stage = Stage.PRE_CONVERSION

    def is_valid(self, argument, value, state, /):
        return bool(value.strip())

    def describe(self, argument, value, /):
        return f"argument {argument.label!r} cannot be empty or only white-space"


class Pattern(Validator):
    """
    The raw value must contain a match of `pattern` (use anchors for whole-value matches).
    """
    stage = Stage.PRE_CONVERSION

    def __init__(self, pattern, flags=0, /, *, message=Unset):
        super().__init__(message=message)
        if not isinstance(pattern, str | re.Pattern):
            raise TypeError("Pattern 'pattern' must be a string or a compiled regex")
        self._pattern = re.compile(pattern, flags) if isinstance(pattern, str) else pattern

    @property
    def pattern(self):
        return self._pattern

    def is_valid(self, argument, value, state, /):
        return self._pattern.search(value) is not None

    def describe(self, argument, value, /):
        return f"value {value!r} of argument {argument.label!r} must match {self._pattern.pattern!r}"

    def __repr__(self):
        return f"Pattern({self._pattern.pattern!r})"


class _Bounded(Validator):
    def __init__(self, minimum=Unset, maximum=Unset, /, *, message=Unset):
        super().__init__(message=message)
        if minimum is Unset and maximum is Unset:
            raise TypeError(f"{type(self).__name__} requires a 'minimum' or a 'maximum'")
        if minimum is not Unset and maximum is not Unset and maximum < minimum:
            raise ValueError(f"{type(self).__name__} 'maximum' cannot be lower than 'minimum'")
        self._minimum = minimum
        self._maximum = maximum

    @property
    def minimum(self):
        return coalesce(self._minimum)

    @property
    def maximum(self):
        return coalesce(self._maximum)

    def _within(self, measure, /):
        if self._minimum is not Unset and measure < self._minimum:
            return False
        if self._maximum is not Unset and measure > self._maximum:
            return False
        return True

    def _bounds(self):
        if self._maximum is Unset:
            return f"at least {self._minimum!r}"
        if self._minimum is Unset:
            return f"at most {self._maximum!r}"
        return f"between {self._minimum!r} and {self._maximum!r}"

    def __repr__(self):
        return f"{type(self).__name__}({self._minimum!r}, {self._maximum!r})"


class StringLength(_Bounded):
    stage = Stage.PRE_CONVERSION

    def is_valid(self, argument, value, state, /):
        return self._within(len(value))

    def describe(self, argument, value, /):
        return f"value {value!r} of argument {argument.label!r} must be {self._bounds()} characters long"


class Range(_Bounded):
    """
    Inclusive bounds on a converted value; None values pass (use NotNull to reject them).
    """

    def is_valid(self, argument, value, state, /):
        return value is None or self._within(value)

    def describe(self, argument, value, /):
        return f"value {value!r} of argument {argument.label!r} must be {self._bounds()}"


class NotNull(Validator):
    def is_valid(self, argument, value, state, /):
        return value is not None

    def describe(self, argument, value, /):
        return f"argument {argument.label!r} cannot be null"


class OneOf(Validator):
    def __init__(self, *choices, message=Unset):
        super().__init__(message=message)
        if not choices:
            raise TypeError("OneOf requires at least one choice")
        self._choices = choices

    @property
    def choices(self):
        return self._choices

    def is_valid(self, argument, value, state, /):
        return value in self._choices

    def describe(self, argument, value, /):
        return f"value {value!r} of argument {argument.label!r} must be one of {", ".join(map(repr, self._choices))}"

    def __repr__(self):
        return f"OneOf({", ".join(map(repr, self._choices))})"


class Predicate(Validator):
    """
    Wrap a plain `function(value) -> bool`. The stage defaults to post-conversion.
    """

    def __init__(self, function, /, *, stage=Stage.POST_CONVERSION, message=Unset):
        super().__init__(message=message)
        if not callable(function):
            raise TypeError("Predicate 'function' must be callable")
        if not isinstance(stage, Stage):
            raise TypeError("Predicate 'stage' must be a stage")
        self._function = function
        self.stage = stage

    def is_valid(self, argument, value, state, /):
        return bool(self._function(value))

    def describe(self, argument, value, /):
        return f"value {value!r} of argument {argument.label!r} is not valid"


class Count(_Bounded):
    """
    Bounds on how many values a multi-value or dictionary argument collected.
    """
    stage = Stage.POST_PARSE

    def is_valid(self, argument, value, state, /):
        return self._within(len(value) if isinstance(value, list | dict) else 1)

    def describe(self, argument, value, /):
        return f"argument {argument.label!r} must be given {self._bounds()} values"


class _Dependency(Validator):
    stage = Stage.POST_PARSE
    fault = DependencyFailedError

    def __init__(self, *names, message=Unset):
        super().__init__(message=message)
        if not names:
            raise TypeError(f"{type(self).__name__} requires at least one argument name")
        for name in names:
            if not isinstance(name, str) or not name:
                raise TypeError(f"{type(self).__name__} argument names must be non-empty strings")
        self._names = names

    @property
    def references(self):
        return self._names

    def __repr__(self):
        return f"{type(self).__name__}({", ".join(map(repr, self._names))})"


class Requires(_Dependency):
    """
    When this argument is supplied, every named argument must be supplied too.
    """

    def is_valid(self, argument, value, state, /):
        return all(map(state.supplied, self._names))

    def describe(self, argument, value, /):
        return f"argument {argument.label!r} requires {", ".join(map(repr, self._names))} to be supplied as well"


class Prohibits(_Dependency):
    """
    When this argument is supplied, none of the named arguments may be supplied.
    """

    def is_valid(self, argument, value, state, /):
        return not any(map(state.supplied, self._names))

    def describe(self, argument, value, /):
        return f"argument {argument.label!r} cannot be combined with {", ".join(map(repr, self._names))}"


class RequiresAny(_Dependency):
    """
    Schema-level: at least one of the named arguments must be supplied.
    """
    fault = MissingRequiredArgumentError
    schema_level = True

    def is_valid(self, argument, value, state, /):
        return any(map(state.supplied, self._names))

    def describe(self, argument, value, /):
        return f"at least one of {", ".join(map(repr, self._names))} must be supplied"


__all__ = (
    "Stage",
    "Validator",
    "NotEmpty",
    "NotWhiteSpace",
    "Pattern",
    "StringLength",
    "Range",
    "NotNull",
    "OneOf",
    "Predicate",
    "Count",
    "Requires",
    "Prohibits",
    "RequiresAny",
)
