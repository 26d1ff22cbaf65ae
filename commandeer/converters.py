"""
Converters: turn raw string tokens into typed values.

A converter answers two questions about a token:
- accept(token): can this token be read as my kind of value?
- convert(token): the typed value (only called when accept() returned True).

Every converter also names the kind of value it produces. Built-in kinds are
enumerated by Kind; converters defined outside the library may use any hashable
object as their kind (a class, a string, an enum member of their own) as long
as a buffer factory is registered for it (see commandeer.data.BufferRegistry).

Built-in converters
- StringConverter(*literals): any token, or only the given literals.
- IntegerConverter: signed 32-bit decimal integers.
- LongConverter: signed 64-bit decimal integers.
- DoubleConverter: floating point numbers (decimal, scientific, nan, inf).
- BooleanConverter: "true" / "false", case-insensitive.
- CommandConverter(registry): the name or alias of a registered command.

Extension base
- NullConverter: accept() is derived from convert() not returning None.
"""
import re
from abc import ABC, abstractmethod
from enum import Enum


class Kind(Enum):
    """
    built-in value kinds (the closed part of the kind space).
    """
    STRING  = "string"
    INT     = "int"
    LONG    = "long"
    DOUBLE  = "double"
    BOOLEAN = "boolean"
    COMMAND = "command"


_INTEGER = re.compile(r"[+-]?[0-9]+")
_DOUBLE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|nan|inf|infinity)",
    re.IGNORECASE,
)
_MAX_DIGITS = len(str(2 ** 63))

INT_RANGE = range(-2 ** 31, 2 ** 31)
LONG_RANGE = range(-2 ** 63, 2 ** 63)


class DataConverter(ABC):
    """
    Base class of every converter.

    Subclasses set the `kind` class attribute (or instance attribute) and
    implement accept() and convert(). put() is the bridge used while binding a
    matched signature: it converts an accepted token and writes it into the
    data collection buffer for this converter's kind.
    """
    kind = None

    @abstractmethod
    def accept(self, token, /):
        raise NotImplementedError

    @abstractmethod
    def convert(self, token, /):
        raise NotImplementedError

    def put(self, collection, token, /):
        """
        convert the token into the collection when accepted.

        returns True when the value was written, False when the token was rejected.
        """
        if not self.accept(token):
            return False
        collection.write(self.kind, self.convert(token))
        return True

    def __repr__(self):
        return f"{type(self).__name__}(kind={self.kind!r})"


class NullConverter(DataConverter, ABC):
    """
    Convenience base for converters whose convert() returns None on bad input.
    """

    def accept(self, token, /):
        return self.convert(token) is not None


class StringConverter(DataConverter):
    """
    Pass tokens through unchanged.

    When literals are given, only those exact tokens are accepted; this is how
    sub-command words ("set", "clear", ...) are expressed in a signature.
    """
    kind = Kind.STRING

    def __init__(self, *literals):
        for literal in literals:
            if not isinstance(literal, str):
                raise TypeError("string converter literals must be strings")
        self.literals = frozenset(literals)

    def accept(self, token, /):
        return not self.literals or token in self.literals

    def convert(self, token, /):
        return token

    def __repr__(self):
        if not self.literals:
            return "StringConverter()"
        return f"StringConverter({', '.join(map(repr, sorted(self.literals)))})"


class IntegerConverter(DataConverter):
    kind = Kind.INT
    bounds = INT_RANGE

    def accept(self, token, /):
        if _INTEGER.fullmatch(token) is None:
            return False
        # longer than any 64-bit value; int() refuses very long strings anyway
        if len(token.lstrip("+-").lstrip("0")) > _MAX_DIGITS:
            return False
        return int(token) in self.bounds

    def convert(self, token, /):
        return int(token)


class LongConverter(IntegerConverter):
    kind = Kind.LONG
    bounds = LONG_RANGE


class DoubleConverter(DataConverter):
    """
    Floating point tokens: "1", "-2.5", ".5", "3e8", "nan", "inf", "-Infinity".

    Only ASCII digits are accepted; Python-only spellings (digit separators
    like "1_000", surrounding whitespace, other scripts' digits) are rejected.
    """
    kind = Kind.DOUBLE

    def accept(self, token, /):
        return _DOUBLE.fullmatch(token) is not None

    def convert(self, token, /):
        return float(token)


class BooleanConverter(DataConverter):
    kind = Kind.BOOLEAN

    def accept(self, token, /):
        return token.lower() in ("true", "false")

    def convert(self, token, /):
        return token.lower() == "true"


class CommandConverter(DataConverter):
    """
    Resolve a token to a command registered in the given registry.

    Names and aliases are matched case-insensitively. put() resolves the token
    once, so a command unregistered mid-bind is a rejection rather than a
    missing value.
    """
    kind = Kind.COMMAND

    def __init__(self, registry, /):
        self.registry = registry

    def accept(self, token, /):
        return self.registry.get(token) is not None

    def convert(self, token, /):
        return self.registry.get(token)

    def put(self, collection, token, /):
        if (command := self.registry.get(token)) is None:
            return False
        collection.write(self.kind, command)
        return True


__all__ = (
    "Kind",
    "INT_RANGE",
    "LONG_RANGE",
    "DataConverter",
    "NullConverter",
    "StringConverter",
    "IntegerConverter",
    "LongConverter",
    "DoubleConverter",
    "BooleanConverter",
    "CommandConverter",
)
