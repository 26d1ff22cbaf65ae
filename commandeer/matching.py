"""
Signature matching: align a token array with a sequence of argument slots.

Given n tokens and m slots (k of them nullable), a match
- skips exactly m - n nullable slots (the slack), never more and never fewer;
- consumes every other slot, left to right, with a token its converter accepts;
- preserves slot order.

The search is a depth-first walk over (token cursor, slot cursor) with a skip
budget. At a nullable slot the walk first tries to skip it and only then tries
to consume it, so for a fixed input the chosen alignment is deterministic:

    >>> slots = (Argument.string(nullable=True), Argument.string(nullable=True))
    >>> Signature(slots).search(["a"])  # the first slot is skipped
    (argument(converter=StringConverter(), nullable=True),)

Arrays shorter than m - k or longer than m are rejected before searching. A
failed match is a plain None, never an exception.
"""
from .data import DataCollection
from .utils import Unset


class Signature:
    """
    Ordered argument slots of one executor.
    """

    def __init__(self, arguments=(), /):
        self._arguments = tuple(arguments)
        self._nullable = sum(1 for argument in self._arguments if argument.nullable)

    @property
    def arguments(self):
        return self._arguments

    @property
    def nullable(self):
        """
        number of skippable slots.
        """
        return self._nullable

    def search(self, tokens, /):
        """
        return the consumed slots (in token order) of the first alignment, or None.
        """
        tokens = tuple(tokens)
        size, slots = len(tokens), self._arguments
        if size > len(slots) or size < len(slots) - self._nullable:
            return None

        path = []

        def walk(position, cursor, budget):
            if position == size:
                # the unconsumed tail is exactly the remaining budget
                return all(slot.nullable for slot in slots[cursor:])
            if cursor == len(slots):
                return False
            slot = slots[cursor]
            if slot.nullable and budget > 0 and walk(position, cursor + 1, budget - 1):
                return True
            if not slot.accept(tokens[position]):
                return False
            path.append(slot)
            if walk(position + 1, cursor + 1, budget):
                return True
            path.pop()
            return False

        if not walk(0, 0, len(slots) - size):
            return None
        return tuple(path)

    def bind(self, tokens, /, buffers=Unset):
        """
        match tokens and convert them into a flipped DataCollection, or None.

        the collection holds buffers only for the kinds on the chosen path.
        """
        tokens = tuple(tokens)
        if (path := self.search(tokens)) is None:
            return None
        collection = DataCollection((slot.kind for slot in path), buffers=buffers)
        for slot, token in zip(path, tokens):
            # converters backed by mutable state (commands) may change their mind
            if not slot.put(collection, token):
                return None
        collection.flip()
        return collection

    def __len__(self):
        return len(self._arguments)

    def __iter__(self):
        return iter(self._arguments)

    def __repr__(self):
        return f"Signature({', '.join(map(repr, self._arguments))})"


__all__ = (
    "Signature",
)
