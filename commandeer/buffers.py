"""
Typed, fixed-capacity, write-then-read buffers.

A buffer goes through exactly two phases:
- write phase: values are appended with put() until the capacity is reached;
- read phase: after the one-way flip(), values are read either sequentially
  with get() (advancing an internal cursor) or randomly with get(index)
  (0-based, does not move the cursor).

Misuse is a programmer error and raises the dedicated faults:
- put() past capacity → BufferOverflowError
- put() or flip() after flip → FrozenBufferError
- get() before flip → UnfrozenBufferError
- get() past the written values → BufferUnderflowError

Typed subclasses validate the Python type of every written value so that a
converter producing the wrong type fails loudly at write time.
"""
from .faults import (
    BufferOverflowError,
    BufferUnderflowError,
    FrozenBufferError,
    UnfrozenBufferError,
    UnknownCommandError,
)
from .utils import Unset, ordinal


class DataBuffer:
    """
    Object buffer (accepts any value); base of every typed buffer.
    """
    __accepts__ = (object,)
    __typename__ = "object"

    def __init__(self, size, /):
        if not isinstance(size, int) or isinstance(size, bool):
            raise TypeError(f"{type(self).__name__} 'size' must be an integer")
        if size < 0:
            raise ValueError(f"{type(self).__name__} 'size' cannot be negative")
        self._values = [None] * size
        self._position = 0
        self._limit = size
        self._frozen = False

    @classmethod
    def allocate(cls, size, /):
        """
        allocate a buffer with a fixed capacity.
        """
        return cls(size)

    @property
    def capacity(self):
        return len(self._values)

    @property
    def frozen(self):
        return self._frozen

    @property
    def remaining(self):
        """
        values left to write (write phase) or to read sequentially (read phase).
        """
        return self._limit - self._position

    def _check(self, value):
        # bool is an int subclass; only buffers declaring bool take it
        if isinstance(value, bool) and bool not in self.__accepts__ and object not in self.__accepts__:
            return False
        return isinstance(value, self.__accepts__)

    def put(self, value, /):
        if self._frozen:
            raise FrozenBufferError(f"cannot write to a flipped {self.__typename__} buffer")
        if self._position == self._limit:
            raise BufferOverflowError(
                f"{self.__typename__} buffer is full ({self.capacity} values)",
                capacity=self.capacity,
            )
        if not self._check(value):
            raise TypeError(f"{self.__typename__} buffer cannot store {type(value).__name__!r} values")
        self._values[self._position] = value
        self._position += 1

    def flip(self):
        """
        switch from write mode to read mode (one-way).
        """
        if self._frozen:
            raise FrozenBufferError(f"{self.__typename__} buffer was already flipped")
        self._limit = self._position
        self._position = 0
        self._frozen = True

    def get(self, index=Unset, /):
        if not self._frozen:
            raise UnfrozenBufferError(f"cannot read from a {self.__typename__} buffer before flipping it")
        if index is Unset:
            if self._position == self._limit:
                raise BufferUnderflowError(
                    f"no {ordinal(self._position + 1)} {self.__typename__} value was written",
                    index=self._position,
                )
            value = self._values[self._position]
            self._position += 1
            return value
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(f"{self.__typename__} buffer index must be an integer")
        if not 0 <= index < self._limit:
            raise BufferUnderflowError(
                f"no {self.__typename__} value at index {index} ({self._limit} written)",
                index=index,
            )
        return self._values[index]

    def __len__(self):
        return self._limit if self._frozen else self._position

    def __repr__(self):
        state = "frozen" if self._frozen else "writable"
        return f"{type(self).__name__}(capacity={self.capacity}, size={len(self)}, {state})"


class ObjectBuffer(DataBuffer):
    pass


class StringBuffer(DataBuffer):
    __accepts__ = (str,)
    __typename__ = "string"


class IntBuffer(DataBuffer):
    __accepts__ = (int,)
    __typename__ = "int"


class LongBuffer(DataBuffer):
    __accepts__ = (int,)
    __typename__ = "long"


class DoubleBuffer(DataBuffer):
    __accepts__ = (float,)
    __typename__ = "double"


class BooleanBuffer(DataBuffer):
    __accepts__ = (bool,)
    __typename__ = "boolean"


class CommandBuffer(DataBuffer):
    """
    Store commands by name and resolve them against a registry at read time.

    A command unregistered between binding and reading raises UnknownCommandError.
    """
    __accepts__ = (str,)
    __typename__ = "command"

    def __init__(self, registry, size, /):
        super().__init__(size)
        self._registry = registry

    def put(self, command, /):
        if not isinstance(getattr(command, "name", None), str):
            raise TypeError("command buffer can only store commands")
        super().put(command.name)

    def get(self, index=Unset, /):
        name = super().get(index)
        if (command := self._registry.get(name)) is None:
            raise UnknownCommandError(f"command {name!r} is not registered", name=name)
        return command


__all__ = (
    "DataBuffer",
    "ObjectBuffer",
    "StringBuffer",
    "IntBuffer",
    "LongBuffer",
    "DoubleBuffer",
    "BooleanBuffer",
    "CommandBuffer",
)
