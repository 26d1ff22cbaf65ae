"""
Argument slots: one declared position of an executor signature.

Overview
- Argument pairs a DataConverter with a nullable flag.
  • nullable slots may be skipped by the matcher when fewer tokens than slots
    are supplied; a skipped slot contributes nothing to the data collection.
  • non-nullable slots always consume exactly one token.
- Alternate constructors build the common slots without naming converter classes:
    >>> Argument.string()                # any token
    >>> Argument.string("set", "clear")  # only these literal words
    >>> Argument.integer(nullable=True)  # optional 32-bit integer
    >>> Argument.command(registry)       # the name of a registered command

Introspection
- converter and nullable are read-only properties; repr/rich repr list both.
"""
from .converters import (
    DataConverter,
    StringConverter,
    IntegerConverter,
    LongConverter,
    DoubleConverter,
    BooleanConverter,
    CommandConverter,
)
from .utils import IntrospectableType


class Argument(metaclass=IntrospectableType):
    """
    One typed, optionally skippable position in an executor signature.

    Parameters
    - converter: DataConverter
      Decides which tokens fit this slot and how they are converted.
    - nullable: bool (default False)
      Whether the matcher may skip this slot.

    Raises
    - TypeError: when converter is not a DataConverter.
    """
    __introspectable__ = (
        "converter",
        "nullable",
    )

    def __init__(self, converter, /, nullable=False):
        if not isinstance(converter, DataConverter):
            raise TypeError(f"{type(self).__typename__} 'converter' must be a data converter")
        self._converter = converter
        self._nullable = bool(nullable)

    @property
    def kind(self):
        """
        kind of value this slot writes into a data collection.
        """
        return self._converter.kind

    def accept(self, token, /):
        return self._converter.accept(token)

    def put(self, collection, token, /):
        """
        convert token into collection; False when the converter rejects it.
        """
        return self._converter.put(collection, token)

    @classmethod
    def string(cls, *literals, nullable=False):
        return cls(StringConverter(*literals), nullable=nullable)

    @classmethod
    def integer(cls, *, nullable=False):
        return cls(IntegerConverter(), nullable=nullable)

    @classmethod
    def long(cls, *, nullable=False):
        return cls(LongConverter(), nullable=nullable)

    @classmethod
    def double(cls, *, nullable=False):
        return cls(DoubleConverter(), nullable=nullable)

    @classmethod
    def boolean(cls, *, nullable=False):
        return cls(BooleanConverter(), nullable=nullable)

    @classmethod
    def command(cls, registry, /, *, nullable=False):
        return cls(CommandConverter(registry), nullable=nullable)


__all__ = (
    "Argument",
)
