"""
Per-invocation argument storage.

DataCollection
- Built fresh for every successful signature match, from the kinds of the
  arguments that were actually consumed (skipped nullable slots do not count).
- Owns one buffer per distinct kind, sized to the number of values of that kind.
- Values are written in left-to-right match order, then the whole collection
  is flipped before the executor body reads anything.
- Reads are sequential (get(kind)) or indexed (get(kind, index)), per kind.

BufferRegistry
- Maps a kind to a buffer factory: factory(size) -> DataBuffer.
- The built-in kinds are registered on construction; new kinds can be added
  without touching DataCollection, which keeps the collection closed over an
  open set of converters.
"""
import threading
from collections import Counter
from types import MappingProxyType

from .buffers import StringBuffer, IntBuffer, LongBuffer, DoubleBuffer, BooleanBuffer
from .converters import Kind
from .faults import UnsupportedKindError, BufferUnderflowError
from .utils import Unset, coalesce


class BufferRegistry:
    """
    Kind → buffer factory table.

    Parameters
    - builtins: bool (default True)
      Register the built-in scalar kinds (STRING, INT, LONG, DOUBLE, BOOLEAN).
      Kind.COMMAND needs a command registry and is registered by CommandRegistry.

    Thread-safety
    - Writes are serialized; lookups read an immutable snapshot.
    """

    def __init__(self, *, builtins=True):
        self._lock = threading.Lock()
        self._factories = MappingProxyType({})
        if builtins:
            self.register(Kind.STRING, StringBuffer.allocate)
            self.register(Kind.INT, IntBuffer.allocate)
            self.register(Kind.LONG, LongBuffer.allocate)
            self.register(Kind.DOUBLE, DoubleBuffer.allocate)
            self.register(Kind.BOOLEAN, BooleanBuffer.allocate)

    def register(self, kind, factory, /):
        """
        register (or replace) the buffer factory for a kind.
        """
        if not callable(factory):
            raise TypeError("buffer registry 'factory' must be callable")
        try:
            hash(kind)
        except TypeError:
            raise TypeError("buffer registry 'kind' must be hashable") from None
        with self._lock:
            self._factories = MappingProxyType(dict(self._factories) | {kind: factory})

    def unregister(self, kind, /):
        """
        forget the buffer factory for a kind (no-op when absent).
        """
        with self._lock:
            factories = dict(self._factories)
            factories.pop(kind, None)
            self._factories = MappingProxyType(factories)

    def unregister_all(self):
        with self._lock:
            self._factories = MappingProxyType({})

    def factory(self, kind, /):
        try:
            return self._factories[kind]
        except KeyError:
            raise UnsupportedKindError(f"no buffer is registered for kind {kind!r}", kind=kind) from None

    @property
    def kinds(self):
        return frozenset(self._factories)

    def __contains__(self, kind):
        return kind in self._factories

    def __repr__(self):
        return f"BufferRegistry(kinds={sorted(map(repr, self._factories))})"


class DataCollection:
    """
    Typed argument store handed to executor bodies.

    Parameters
    - kinds: Iterable[Hashable]
      The kind of every value that will be written, with repetition; one
      buffer per distinct kind is allocated with capacity = occurrences.
    - buffers: BufferRegistry | Unset
      Where buffer factories are looked up. Defaults to a shared registry holding
      only the built-in scalar kinds.

    Raises
    - UnsupportedKindError: when a kind has no registered buffer factory.

    Reading
    - get(kind) returns the next value of that kind (sequential cursor).
    - get(kind, index) returns the index-th value of that kind (0-based) and
      leaves the cursor alone.
    - Asking for a kind this collection has no buffer for raises
      UnsupportedKindError, which is distinct from a value that was never
      written (BufferUnderflowError).
    """

    def __init__(self, kinds=(), /, buffers=Unset):
        buffers = coalesce(buffers, _builtins)
        self._buffers = {
            kind: buffers.factory(kind)(count) for kind, count in Counter(kinds).items()
        }

    def write(self, kind, value, /):
        """
        append a value to the buffer of its kind (write phase only).
        """
        self._buffer(kind).put(value)

    def flip(self):
        """
        freeze every buffer: no more writes, reads become possible.
        """
        for buffer in self._buffers.values():
            buffer.flip()

    def _buffer(self, kind):
        try:
            return self._buffers[kind]
        except KeyError:
            raise UnsupportedKindError(f"this data collection holds no {kind!r} values", kind=kind) from None

    def get(self, kind=Kind.STRING, /, index=Unset):
        return self._buffer(kind).get(index)

    def get_or_default(self, kind, default=None, /, index=Unset):
        """
        like get(), but return default when the kind is absent or exhausted.
        """
        try:
            return self.get(kind, index=index)
        except (UnsupportedKindError, BufferUnderflowError):
            return default

    def get_string(self, index=Unset, /):
        return self.get(Kind.STRING, index=index)

    def get_int(self, index=Unset, /):
        return self.get(Kind.INT, index=index)

    def get_long(self, index=Unset, /):
        return self.get(Kind.LONG, index=index)

    def get_double(self, index=Unset, /):
        return self.get(Kind.DOUBLE, index=index)

    def get_boolean(self, index=Unset, /):
        return self.get(Kind.BOOLEAN, index=index)

    def get_command(self, index=Unset, /):
        return self.get(Kind.COMMAND, index=index)

    def count(self, kind, /):
        """
        number of values of a kind (0 when the kind is absent).
        """
        buffer = self._buffers.get(kind)
        return 0 if buffer is None else len(buffer)

    @property
    def kinds(self):
        return frozenset(self._buffers)

    def __contains__(self, kind):
        return kind in self._buffers

    def __repr__(self):
        return f"DataCollection({', '.join(f'{kind!r}: {buffer!r}' for kind, buffer in self._buffers.items())})"


_builtins = BufferRegistry()


__all__ = (
    "BufferRegistry",
    "DataCollection",
)
